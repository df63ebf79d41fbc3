"""Session tokens: how a caller is resolved to (user_id, org_id).

Login is by email (see src.gateway.api.auth); the issued token is an
HS256 JWT with ``sub`` = user id and ``org`` = the user's home org at
login time. Org membership changes take effect on the next login.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from uuid import UUID

import jwt

from src.shared.errors import AuthenticationError

_ALGORITHM = "HS256"
_ISSUER = "northstar"
_REQUIRED_CLAIMS = ["sub", "org", "exp", "iss"]
_BEARER = "Bearer "


@dataclass(frozen=True)
class TokenPayload:
    user_id: UUID
    org_id: UUID


def encode_token(
    *,
    user_id: UUID,
    org_id: UUID,
    secret: str,
    ttl_seconds: int = 3600,
) -> str:
    issued = int(time.time())
    claims = {
        "iss": _ISSUER,
        "sub": str(user_id),
        "org": str(org_id),
        "iat": issued,
        "exp": issued + ttl_seconds,
    }
    return jwt.encode(claims, secret, algorithm=_ALGORITHM)


def decode_token(token: str, *, secret: str) -> TokenPayload:
    """Verify signature, expiry and issuer. Raises AuthenticationError."""
    try:
        claims = jwt.decode(
            token,
            secret,
            algorithms=[_ALGORITHM],
            issuer=_ISSUER,
            options={"require": _REQUIRED_CLAIMS},
        )
        return TokenPayload(user_id=UUID(claims["sub"]), org_id=UUID(claims["org"]))
    except jwt.ExpiredSignatureError as exc:
        raise AuthenticationError("Token expired") from exc
    except (jwt.InvalidTokenError, ValueError) as exc:
        raise AuthenticationError(f"Invalid token: {exc}") from exc


def authenticate_header(header: str | None, *, secret: str) -> TokenPayload:
    """Resolve an ``Authorization`` header value to the caller identity."""
    if not header or not header.startswith(_BEARER):
        raise AuthenticationError("Missing or malformed Authorization header")
    return decode_token(header[len(_BEARER) :].strip(), secret=secret)
