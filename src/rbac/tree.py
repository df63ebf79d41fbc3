"""Bounded organization-tree traversal.

Every root-ward walk in the system goes through walk_org_path so a
corrupted parent graph surfaces as MalformedTreeError instead of an
unbounded loop. Store adapters call it to implement OrgStore.get_path.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from src.shared.errors import MalformedTreeError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from uuid import UUID

    from src.shared.types import Organization

    OrgLookup = Callable[[UUID], Awaitable[Organization | None]]

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 64


async def walk_org_path(
    org_id: UUID,
    lookup: OrgLookup,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> list[Organization]:
    """Return the root-first chain of organizations ending at org_id.

    Args:
        org_id: Starting organization.
        lookup: Point lookup by id (usually OrgStore.get_by_id).
        max_depth: Maximum number of nodes allowed on the chain.

    Returns:
        [root, ..., org] or [] if org_id does not resolve.

    Raises:
        MalformedTreeError: If a node repeats (cycle), a parent id does
            not resolve (dangling reference), or the chain is longer
            than max_depth.
    """
    chain: list[Organization] = []
    seen: set[UUID] = set()

    current = await lookup(org_id)
    while current is not None:
        if current.id in seen:
            logger.warning("Cycle in org tree: start=%s repeat=%s", org_id, current.id)
            raise MalformedTreeError(str(org_id), f"cycle through {current.id}")
        if len(chain) >= max_depth:
            logger.warning("Org chain exceeds depth cap: start=%s cap=%d", org_id, max_depth)
            raise MalformedTreeError(str(org_id), f"depth exceeds {max_depth}")

        seen.add(current.id)
        chain.append(current)

        if current.parent_id is None:
            break

        parent = await lookup(current.parent_id)
        if parent is None:
            logger.warning(
                "Dangling parent reference: org=%s parent=%s", current.id, current.parent_id
            )
            raise MalformedTreeError(str(current.id), f"parent {current.parent_id} not found")
        current = parent

    chain.reverse()
    return chain
