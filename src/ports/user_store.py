"""UserStore - User lookup interface.

Resolves a caller (token subject or login email) to a User with a home
organization.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID

    from src.shared.types import User


class UserStore(ABC):
    """Port: User lookups."""

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> User | None:
        """Return the user or None."""

    @abstractmethod
    async def get_by_email(self, email: str) -> User | None:
        """Return the user with this (lower-cased) email, or None."""
