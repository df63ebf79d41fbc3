"""SubmitQuestion Tool - raise a question on another team's goal.

Permission: the relationship between the caller's org and the goal's org
must grant comment:submit_question. On denial the error names the
computed relationship unless disclosure is turned off.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, ClassVar
from uuid import uuid4

from src.rbac.permissions import Action, has_permission
from src.shared.types import Comment, CommentStatus, CommentType
from src.tool.core.protocol import AgentTool, ToolResult, require_str
from src.tool.implementations._serialize import parse_uuid

if TYPE_CHECKING:
    from src.ports.comment_store import CommentStore
    from src.ports.goal_store import GoalStore
    from src.rbac.relationships import RelationshipResolver
    from src.shared.types import User

logger = logging.getLogger(__name__)


class SubmitQuestionTool(AgentTool):
    name: ClassVar[str] = "submit_question"
    description: ClassVar[str] = "Submit a question about a goal owned by a related organization"

    INPUT_SCHEMA: ClassVar[dict[str, Any]] = {
        "type": "object",
        "properties": {
            "goal_id": {"type": "string", "description": "ID of the goal to ask about"},
            "question": {"type": "string", "minLength": 1, "maxLength": 5000},
        },
        "required": ["goal_id", "question"],
    }

    def __init__(
        self,
        *,
        resolver: RelationshipResolver,
        goal_store: GoalStore,
        comment_store: CommentStore,
        disclose_relationship: bool = True,
    ) -> None:
        self._resolver = resolver
        self._goals = goal_store
        self._comments = comment_store
        self._disclose = disclose_relationship

    async def execute(self, params: dict[str, Any], *, caller: User) -> ToolResult:
        raw_id = require_str(params, "goal_id")
        question = require_str(params, "question")
        if raw_id is None or question is None:
            return ToolResult.fail("goal_id and question are required")

        goal_id = parse_uuid(raw_id)
        goal = await self._goals.get_by_id(goal_id) if goal_id is not None else None
        if goal is None:
            return ToolResult.fail(f'Goal with ID "{raw_id}" not found.')

        relationship = await self._resolver.compute_relationship(caller.org_id, goal.org_id)
        if not has_permission(relationship, Action.COMMENT_SUBMIT_QUESTION):
            logger.info(
                "submit_question denied: caller=%s goal=%s relationship=%s",
                caller.id,
                goal.id,
                relationship.value,
            )
            if self._disclose:
                return ToolResult.fail(
                    "You don't have permission to submit questions on goals from this "
                    "organization. Your relationship to the goal's organization: "
                    f"{relationship.value}",
                    relationship=relationship.value,
                )
            return ToolResult.fail(
                "You don't have permission to submit questions on goals from this organization."
            )

        comment = await self._comments.create(
            Comment(
                id=uuid4(),
                goal_id=goal.id,
                author_id=caller.id,
                content=question,
                type=CommentType.QUESTION,
                status=CommentStatus.PENDING,
            )
        )
        logger.info("Question submitted: comment=%s goal=%s", comment.id, goal.id)
        return ToolResult.ok(
            {
                "comment_id": str(comment.id),
                "goal_id": str(comment.goal_id),
                "question": comment.content,
                "status": comment.status.value,
            }
        )
