"""SearchCollaboratorGoals Tool - keyword search across the caller's access scope.

Scope comes from AccessScopeCalculator (own org, ancestors, siblings).
Goals of the caller's own org are always visible; goals of other orgs
only when public or team_only.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, ClassVar

from src.shared.types import SHARED_VISIBILITIES
from src.tool.core.protocol import AgentTool, ToolResult, require_str
from src.tool.implementations._serialize import goal_summary

if TYPE_CHECKING:
    from src.ports.goal_store import GoalStore
    from src.ports.org_store import OrgStore
    from src.rbac.scope import AccessScopeCalculator
    from src.shared.types import User

logger = logging.getLogger(__name__)


class SearchCollaboratorGoalsTool(AgentTool):
    name: ClassVar[str] = "search_collaborator_goals"
    description: ClassVar[str] = (
        "Search goals of your own, parent and sibling organizations by keyword"
    )

    INPUT_SCHEMA: ClassVar[dict[str, Any]] = {
        "type": "object",
        "properties": {
            "keyword": {
                "type": "string",
                "minLength": 1,
                "description": "Keyword to search for in goal titles and descriptions",
            },
        },
        "required": ["keyword"],
    }

    def __init__(
        self,
        *,
        scope: AccessScopeCalculator,
        org_store: OrgStore,
        goal_store: GoalStore,
    ) -> None:
        self._scope = scope
        self._orgs = org_store
        self._goals = goal_store

    async def execute(self, params: dict[str, Any], *, caller: User) -> ToolResult:
        keyword = require_str(params, "keyword")
        if keyword is None:
            return ToolResult.fail("keyword is required")

        org_ids = await self._scope.get_accessible_org_ids(caller.org_id)
        if not org_ids:
            return ToolResult.ok([])

        matches = await self._goals.search(keyword, org_ids)
        visible = [
            g for g in matches if g.org_id == caller.org_id or g.visibility in SHARED_VISIBILITIES
        ]

        org_names: dict[Any, str] = {}
        results: list[dict[str, Any]] = []
        for goal in visible:
            if goal.org_id not in org_names:
                org = await self._orgs.get_by_id(goal.org_id)
                org_names[goal.org_id] = org.name if org is not None else "Unknown"
            item = goal_summary(goal)
            item["organization"] = {"id": str(goal.org_id), "name": org_names[goal.org_id]}
            results.append(item)

        logger.debug(
            "search_collaborator_goals: caller=%s scope=%d matched=%d visible=%d",
            caller.id,
            len(org_ids),
            len(matches),
            len(visible),
        )
        return ToolResult.ok(results)
