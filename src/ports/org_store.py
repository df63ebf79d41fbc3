"""OrgStore - Organization tree read interface.

Hard dependency of the RBAC core. Implementations must observe the
forest invariant (each node has at most one parent, no cycles) and must
bound every path walk, raising MalformedTreeError instead of looping.

Real implementation: src.infra.stores.PgOrgStore (SQLAlchemy).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from uuid import UUID

    from src.shared.types import Organization


class OrgStore(ABC):
    """Port: Organization tree point lookups."""

    @abstractmethod
    async def get_by_id(self, org_id: UUID) -> Organization | None:
        """Return the organization or None if it does not exist."""

    @abstractmethod
    async def get_children(self, parent_id: UUID) -> list[Organization]:
        """Return direct children of parent_id, ordered by name."""

    @abstractmethod
    async def get_path(self, org_id: UUID) -> list[Organization]:
        """Return the chain from the root down to org_id (inclusive).

        Args:
            org_id: Organization to resolve.

        Returns:
            Root-first list ending with org_id, or [] if org_id is unknown.

        Raises:
            MalformedTreeError: On a cycle, a dangling parent reference,
                or a chain deeper than the configured cap.
        """

    @abstractmethod
    async def update(self, org_id: UUID, changes: dict[str, Any]) -> Organization | None:
        """Update name / description / ai_guidelines; None if org_id is unknown.

        Write path for the gateway only. The RBAC core never calls it.
        """
