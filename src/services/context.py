"""User context assembly for the agent-facing context resource.

Aggregates, for the acting user:
- profile and home organization
- root-to-home organization path
- current team goals and goals of every ancestor
- AI guidelines collected root to leaf

Reads only. Ancestor goals are strategic context; private ones stay
with their owning org, matching get_parent_goals.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import TYPE_CHECKING

from src.shared.types import SHARED_VISIBILITIES, GoalStatus, UserContext

if TYPE_CHECKING:
    from uuid import UUID

    from src.ports.goal_store import GoalStore
    from src.ports.org_store import OrgStore
    from src.ports.user_store import UserStore
    from src.shared.types import Goal

logger = logging.getLogger(__name__)

_STATUS_MARKERS: dict[GoalStatus, str] = {
    GoalStatus.COMPLETED: "[done]",
    GoalStatus.IN_PROGRESS: "[in progress]",
    GoalStatus.CANCELLED: "[cancelled]",
    GoalStatus.NOT_STARTED: "[not started]",
}


class UserContextBuilder:
    """Build a UserContext from the store Ports."""

    def __init__(
        self,
        *,
        user_store: UserStore,
        org_store: OrgStore,
        goal_store: GoalStore,
    ) -> None:
        self._users = user_store
        self._orgs = org_store
        self._goals = goal_store

    async def build(self, user_id: UUID) -> UserContext | None:
        """Return the context for user_id, or None if user or org is missing."""
        user = await self._users.get_by_id(user_id)
        if user is None:
            return None

        organization = await self._orgs.get_by_id(user.org_id)
        if organization is None:
            logger.warning("User %s references missing org %s", user.id, user.org_id)
            return None

        org_path = await self._orgs.get_path(user.org_id)
        current_goals = await self._goals.list_by_org_ids([user.org_id])
        parent_ids = [org.id for org in org_path if org.id != user.org_id]
        parent_goals = [
            g
            for g in await self._goals.list_by_org_ids(parent_ids)
            if g.visibility in SHARED_VISIBILITIES
        ]

        guidelines = [
            (org.name, org.ai_guidelines.strip())
            for org in org_path
            if org.ai_guidelines and org.ai_guidelines.strip()
        ]

        return UserContext(
            user=user,
            organization=organization,
            org_path=org_path,
            current_goals=current_goals,
            parent_goals=parent_goals,
            guidelines=guidelines,
        )


def _format_goal(goal: Goal) -> list[str]:
    lines = [f"- {_STATUS_MARKERS[goal.status]} **{goal.title}** ({goal.progress}%)"]
    if goal.description:
        lines.append(f"  - {goal.description}")
    if goal.key_results:
        lines.append("  - Key Results:")
        lines.extend(f"    - {kr}" for kr in goal.key_results)
    return lines


def format_user_context(context: UserContext) -> str:
    """Render a UserContext as markdown for an assistant."""
    parts: list[str] = ["## User Profile"]
    parts.append(f"- **Name:** {context.user.name}")
    parts.append(f"- **Email:** {context.user.email}")
    if context.user.job_function:
        parts.append(f"- **Role:** {context.user.job_function}")
    parts.append("")

    parts.append("## Organization")
    parts.append(f"- **Current Team:** {context.organization.name}")
    if context.organization.description:
        parts.append(f"- **Description:** {context.organization.description}")
    parts.append(f"- **Hierarchy:** {' > '.join(org.name for org in context.org_path)}")
    parts.append("")

    if context.current_goals:
        parts.append("## Current Team Goals")
        for goal in context.current_goals:
            parts.extend(_format_goal(goal))
        parts.append("")

    if context.parent_goals:
        parts.append("## Strategic Context (Parent Goals)")
        by_org: dict[UUID, list[Goal]] = defaultdict(list)
        for goal in context.parent_goals:
            by_org[goal.org_id].append(goal)

        # Hierarchy order, root first, own org excluded
        for org in context.org_path:
            if org.id == context.organization.id or org.id not in by_org:
                continue
            parts.append("")
            parts.append(f"### {org.name}")
            for goal in by_org[org.id]:
                parts.extend(_format_goal(goal))
        parts.append("")

    if context.guidelines:
        parts.append("## AI Guidelines")
        parts.append("The following guidelines should inform all recommendations:")
        parts.append("")
        for org_name, text in context.guidelines:
            parts.append(f"### {org_name}")
            parts.append(text)
            parts.append("")

    return "\n".join(parts)
