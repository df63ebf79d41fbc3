"""GoalStore - Goal persistence interface.

Consumed by the gateway goal routes and the agent tools. Queries are
scoped by organization id; visibility filtering is the caller's job
(see src.rbac.gate.AuthorizationGate.authorize_goal).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID

    from src.shared.types import Goal


class GoalStore(ABC):
    """Port: Goal read/write."""

    @abstractmethod
    async def get_by_id(self, goal_id: UUID) -> Goal | None:
        """Return the goal or None."""

    @abstractmethod
    async def list_by_org_ids(self, org_ids: Iterable[UUID]) -> list[Goal]:
        """Return goals owned by any of org_ids, newest first."""

    @abstractmethod
    async def search(self, keyword: str, org_ids: Iterable[UUID]) -> list[Goal]:
        """Case-insensitive substring match on title or description.

        Args:
            keyword: Search term.
            org_ids: Restrict to goals owned by these orgs. An empty
                collection yields no results.
        """

    @abstractmethod
    async def create(self, goal: Goal) -> Goal:
        """Persist a new goal and return it."""

    @abstractmethod
    async def update(self, goal_id: UUID, changes: dict[str, Any]) -> Goal | None:
        """Apply field changes; return the updated goal or None if missing."""

    @abstractmethod
    async def delete(self, goal_id: UUID) -> bool:
        """Delete a goal. Returns True if a row was removed."""
