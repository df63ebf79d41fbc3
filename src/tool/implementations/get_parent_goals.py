"""GetParentGoals Tool - strategic goals of every ancestor organization.

Walks the root-to-org path and returns goals grouped per ancestor in
hierarchy order (root first). The organization itself is excluded.
Private goals are returned only to callers whose home org owns them.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import TYPE_CHECKING, Any, ClassVar

from src.shared.types import SHARED_VISIBILITIES
from src.tool.core.protocol import AgentTool, ToolResult, require_str
from src.tool.implementations._serialize import goal_summary, parse_uuid

if TYPE_CHECKING:
    from uuid import UUID

    from src.ports.goal_store import GoalStore
    from src.ports.org_store import OrgStore
    from src.shared.types import Goal, User

logger = logging.getLogger(__name__)


class GetParentGoalsTool(AgentTool):
    name: ClassVar[str] = "get_parent_goals"
    description: ClassVar[str] = (
        "Get the goals of every parent organization of an organization, root first"
    )

    INPUT_SCHEMA: ClassVar[dict[str, Any]] = {
        "type": "object",
        "properties": {
            "org_id": {"type": "string", "description": "Organization ID to get parent goals for"},
        },
        "required": ["org_id"],
    }

    def __init__(self, *, org_store: OrgStore, goal_store: GoalStore) -> None:
        self._orgs = org_store
        self._goals = goal_store

    async def execute(self, params: dict[str, Any], *, caller: User) -> ToolResult:
        raw_id = require_str(params, "org_id")
        if raw_id is None:
            return ToolResult.fail("org_id is required")

        org_id = parse_uuid(raw_id)
        org = await self._orgs.get_by_id(org_id) if org_id is not None else None
        if org is None:
            return ToolResult.fail(f'Organization with ID "{raw_id}" not found.')

        path = await self._orgs.get_path(org.id)
        parents = [o for o in path if o.id != org.id]
        if not parents:
            return ToolResult.ok([])

        goals = [
            g
            for g in await self._goals.list_by_org_ids([o.id for o in parents])
            if g.org_id == caller.org_id or g.visibility in SHARED_VISIBILITIES
        ]
        by_org: dict[UUID, list[Goal]] = defaultdict(list)
        for goal in goals:
            by_org[goal.org_id].append(goal)

        logger.debug(
            "get_parent_goals: caller=%s org=%s ancestors=%d goals=%d",
            caller.id,
            org.id,
            len(parents),
            len(goals),
        )
        return ToolResult.ok(
            [
                {
                    "organization": {"id": str(parent.id), "name": parent.name},
                    "goals": [goal_summary(g) for g in by_org.get(parent.id, [])],
                }
                for parent in parents
            ]
        )
