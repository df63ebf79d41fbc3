"""Relationship between two organizations in the tree.

Relationships (from the acting org's point of view):
  SELF       - same organization
  PARENT     - target is my direct parent
  CHILD      - target is my direct child
  SIBLING    - target shares my (non-null) parent
  ANCESTOR   - target is above my parent on my root path
  DESCENDANT - I am above target's parent on its root path
  NONE       - unrelated, or either id unknown

Computed fresh on every call from current store contents; never cached.
"""

from __future__ import annotations

import logging
from enum import Enum, unique
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID

    from src.ports.org_store import OrgStore

logger = logging.getLogger(__name__)


@unique
class OrgRelationship(Enum):
    SELF = "SELF"
    PARENT = "PARENT"
    CHILD = "CHILD"
    SIBLING = "SIBLING"
    ANCESTOR = "ANCESTOR"
    DESCENDANT = "DESCENDANT"
    NONE = "NONE"

    @property
    def inverse(self) -> OrgRelationship:
        """The relationship seen from the other side of the pair."""
        return _INVERSES[self]


_INVERSES: dict[OrgRelationship, OrgRelationship] = {
    OrgRelationship.SELF: OrgRelationship.SELF,
    OrgRelationship.PARENT: OrgRelationship.CHILD,
    OrgRelationship.CHILD: OrgRelationship.PARENT,
    OrgRelationship.SIBLING: OrgRelationship.SIBLING,
    OrgRelationship.ANCESTOR: OrgRelationship.DESCENDANT,
    OrgRelationship.DESCENDANT: OrgRelationship.ANCESTOR,
    OrgRelationship.NONE: OrgRelationship.NONE,
}


class RelationshipResolver:
    """Classify the tree position of a target org relative to a user's org."""

    def __init__(self, *, org_store: OrgStore) -> None:
        self._orgs = org_store

    async def compute_relationship(
        self,
        user_org_id: UUID,
        target_org_id: UUID,
    ) -> OrgRelationship:
        """Compute the relationship of target_org_id as seen from user_org_id.

        Checks run in a fixed order and the first match wins. Direct
        parent/child are resolved before the path walks, so ANCESTOR and
        DESCENDANT only ever mean "two or more levels apart".

        Raises:
            MalformedTreeError: Propagated from OrgStore.get_path when a
                path walk hits a corrupted parent chain.
        """
        if user_org_id == target_org_id:
            return OrgRelationship.SELF

        user_org = await self._orgs.get_by_id(user_org_id)
        target_org = await self._orgs.get_by_id(target_org_id)
        if user_org is None or target_org is None:
            logger.debug(
                "Relationship NONE (unknown org): user_org=%s target_org=%s",
                user_org_id,
                target_org_id,
            )
            return OrgRelationship.NONE

        if user_org.parent_id == target_org_id:
            return OrgRelationship.PARENT

        if target_org.parent_id == user_org_id:
            return OrgRelationship.CHILD

        if (
            user_org.parent_id is not None
            and target_org.parent_id is not None
            and user_org.parent_id == target_org.parent_id
        ):
            return OrgRelationship.SIBLING

        user_path = await self._orgs.get_path(user_org_id)
        if any(org.id == target_org_id for org in user_path):
            return OrgRelationship.ANCESTOR

        target_path = await self._orgs.get_path(target_org_id)
        if any(org.id == user_org_id for org in target_path):
            return OrgRelationship.DESCENDANT

        return OrgRelationship.NONE

    async def is_ancestor_of(self, org_id: UUID, other_org_id: UUID) -> bool:
        """True if org_id lies on other_org_id's root path (self included)."""
        path = await self._orgs.get_path(other_org_id)
        return any(org.id == org_id for org in path)

    async def is_descendant_of(self, org_id: UUID, other_org_id: UUID) -> bool:
        """True if other_org_id lies on org_id's root path (self included)."""
        path = await self._orgs.get_path(org_id)
        return any(org.id == other_org_id for org in path)
