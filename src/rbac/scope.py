"""Access scope: the organizations a user may browse and search.

Scope = own org + every ancestor up to the root + every sibling.
Descendants and unrelated orgs are deliberately excluded; finer-grained
per-action checks go through AuthorizationGate instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID

    from src.ports.org_store import OrgStore


class AccessScopeCalculator:
    """Compute the set of org ids a user's home org may query across."""

    def __init__(self, *, org_store: OrgStore) -> None:
        self._orgs = org_store

    async def get_accessible_org_ids(self, user_org_id: UUID) -> frozenset[UUID]:
        """Return own org, its ancestors and its siblings.

        Returns an empty set when user_org_id does not resolve. A root
        org has no siblings, so its scope is just itself.
        """
        user_org = await self._orgs.get_by_id(user_org_id)
        if user_org is None:
            return frozenset()

        org_ids: set[UUID] = {user_org_id}
        org_ids.update(org.id for org in await self._orgs.get_path(user_org_id))

        if user_org.parent_id is not None:
            org_ids.update(await self.get_sibling_org_ids(user_org_id))

        return frozenset(org_ids)

    async def get_sibling_org_ids(self, org_id: UUID) -> list[UUID]:
        """Children of org_id's parent, excluding org_id itself."""
        org = await self._orgs.get_by_id(org_id)
        if org is None or org.parent_id is None:
            return []

        siblings = await self._orgs.get_children(org.parent_id)
        return [s.id for s in siblings if s.id != org_id]
