"""Structured error logging for unexpected failures at the HTTP boundary.

- Log record carries error_code, message, stack trace and request context
- Domain attributes of NorthstarError subclasses (org_id, reason, action,
  relationship, ...) are lifted into ``details``
- Sensitive context keys (tokens, secrets, cookies) are redacted
- Expected outcomes (denials, not-found) are NOT logged through here
"""

from __future__ import annotations

import logging
import traceback
from dataclasses import asdict, dataclass, field
from typing import Any

_SENSITIVE_KEYS = frozenset(
    {
        "authorization",
        "cookie",
        "email",
        "jwt",
        "password",
        "secret",
        "token",
    }
)

_DETAIL_ATTRS = (
    "org_id",
    "reason",
    "action",
    "relationship",
    "resource_type",
    "resource_id",
    "service",
    "field",
)

_REDACTED = "[REDACTED]"


@dataclass(frozen=True)
class StructuredError:
    error_code: str
    message: str
    stack_trace: str
    details: dict[str, Any] = field(default_factory=dict)
    context: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        record = asdict(self)
        record["context"] = redact(record["context"])
        return record


def redact(data: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of data with sensitive values replaced, recursively."""
    cleaned: dict[str, Any] = {}
    for key, value in data.items():
        if key.lower() in _SENSITIVE_KEYS:
            cleaned[key] = _REDACTED
        elif isinstance(value, dict):
            cleaned[key] = redact(value)
        else:
            cleaned[key] = value
    return cleaned


def error_details(exc: Exception) -> dict[str, Any]:
    """Collect the non-empty domain attributes an exception carries."""
    details: dict[str, Any] = {}
    for attr in _DETAIL_ATTRS:
        value = getattr(exc, attr, None)
        if value is not None and value != "":
            details[attr] = str(value)
    return details


def log_structured_error(
    logger: logging.Logger,
    exc: Exception,
    *,
    context: dict[str, Any] | None = None,
    level: int = logging.ERROR,
) -> StructuredError:
    """Log an exception as a structured error and return the record.

    The error code is the exception's ``code`` (NorthstarError subclasses)
    or its class name.
    """
    structured = StructuredError(
        error_code=getattr(exc, "code", type(exc).__name__),
        message=str(exc),
        stack_trace="".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
        details=error_details(exc),
        context=context or {},
    )
    logger.log(
        level,
        "structured_error code=%s",
        structured.error_code,
        extra={"structured_error": structured.to_dict()},
    )
    return structured
