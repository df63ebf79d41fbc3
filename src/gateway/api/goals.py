"""Goal and comment endpoints.

- GET    /api/v1/goals/{id}                   -> goal:read (+ visibility)
- PATCH  /api/v1/goals/{id}                   -> goal:update
- DELETE /api/v1/goals/{id}                   -> goal:delete
- GET    /api/v1/goals/{id}/comments          -> goal:read (+ visibility), comment:read
- POST   /api/v1/goals/{id}/comments          -> comment:create
- POST   /api/v1/goals/{id}/questions         -> comment:submit_question
- POST   /api/v1/comments/{id}/responses      -> comment:respond
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from fastapi import APIRouter, Request, Response

from src.gateway.api.schemas import (
    CommentRequest,
    CommentResponse,
    GoalResponse,
    UpdateGoalRequest,
)
from src.gateway.middleware.authz import require, require_goal
from src.rbac.permissions import Action
from src.rbac.relationships import OrgRelationship
from src.shared.errors import AuthorizationError, NotFoundError, ValidationError
from src.shared.types import Comment, CommentStatus, CommentType

if TYPE_CHECKING:
    from src.ports.comment_store import CommentStore
    from src.ports.goal_store import GoalStore
    from src.rbac.gate import AuthorizationGate
    from src.shared.types import Goal

logger = logging.getLogger(__name__)


def create_goal_router(
    *,
    goal_store: GoalStore,
    comment_store: CommentStore,
    gate: AuthorizationGate,
) -> APIRouter:
    """Create goal/comment API router."""
    router = APIRouter(prefix="/api/v1", tags=["goals"])

    async def _load_goal(goal_id: UUID, action: Action) -> Goal:
        # An unknown id is denied exactly like an unreadable goal.
        goal = await goal_store.get_by_id(goal_id)
        if goal is None:
            logger.info("Access denied: action=%s unknown goal=%s", action.value, goal_id)
            raise AuthorizationError(action.value, relationship=OrgRelationship.NONE.value)
        return goal

    async def _add_comment(
        goal: Goal,
        request: Request,
        content: str,
        comment_type: CommentType,
    ) -> Comment:
        return await comment_store.create(
            Comment(
                id=uuid4(),
                goal_id=goal.id,
                author_id=request.state.user_id,
                content=content,
                type=comment_type,
                status=CommentStatus.PENDING,
            )
        )

    @router.get("/goals/{goal_id}", response_model=GoalResponse)
    async def get_goal(goal_id: UUID, request: Request) -> GoalResponse:
        goal = await _load_goal(goal_id, Action.GOAL_READ)
        await require_goal(
            gate,
            acting_org_id=request.state.org_id,
            goal=goal,
            action=Action.GOAL_READ,
        )
        return GoalResponse.from_domain(goal)

    @router.patch("/goals/{goal_id}", response_model=GoalResponse)
    async def update_goal(goal_id: UUID, body: UpdateGoalRequest, request: Request) -> GoalResponse:
        goal = await _load_goal(goal_id, Action.GOAL_UPDATE)
        await require_goal(
            gate,
            acting_org_id=request.state.org_id,
            goal=goal,
            action=Action.GOAL_UPDATE,
        )
        changes = body.model_dump(exclude_unset=True)
        if "title" in changes and not (changes["title"] or "").strip():
            raise ValidationError("Title cannot be empty", field="title")
        # description is the only field that may be cleared
        changes = {k: v for k, v in changes.items() if v is not None or k == "description"}
        updated = await goal_store.update(goal_id, changes)
        if updated is None:
            raise NotFoundError("Goal", str(goal_id))
        logger.info("Goal updated: goal_id=%s by user=%s", goal_id, request.state.user_id)
        return GoalResponse.from_domain(updated)

    @router.delete("/goals/{goal_id}", status_code=204)
    async def delete_goal(goal_id: UUID, request: Request) -> Response:
        goal = await _load_goal(goal_id, Action.GOAL_DELETE)
        await require_goal(
            gate,
            acting_org_id=request.state.org_id,
            goal=goal,
            action=Action.GOAL_DELETE,
        )
        if not await goal_store.delete(goal_id):
            raise NotFoundError("Goal", str(goal_id))
        logger.info("Goal deleted: goal_id=%s by user=%s", goal_id, request.state.user_id)
        return Response(status_code=204)

    @router.get("/goals/{goal_id}/comments", response_model=list[CommentResponse])
    async def list_comments(goal_id: UUID, request: Request) -> list[CommentResponse]:
        goal = await _load_goal(goal_id, Action.GOAL_READ)
        # Comments are only as visible as the goal they hang off.
        await require_goal(
            gate,
            acting_org_id=request.state.org_id,
            goal=goal,
            action=Action.GOAL_READ,
        )
        await require(
            gate,
            acting_org_id=request.state.org_id,
            resource_org_id=goal.org_id,
            action=Action.COMMENT_READ,
        )
        comments = await comment_store.list_by_goal(goal_id)
        return [CommentResponse.from_domain(c) for c in comments]

    @router.post("/goals/{goal_id}/comments", response_model=CommentResponse, status_code=201)
    async def create_note(goal_id: UUID, body: CommentRequest, request: Request) -> CommentResponse:
        goal = await _load_goal(goal_id, Action.COMMENT_CREATE)
        await require(
            gate,
            acting_org_id=request.state.org_id,
            resource_org_id=goal.org_id,
            action=Action.COMMENT_CREATE,
        )
        comment = await _add_comment(goal, request, body.content, CommentType.NOTE)
        return CommentResponse.from_domain(comment)

    @router.post("/goals/{goal_id}/questions", response_model=CommentResponse, status_code=201)
    async def submit_question(
        goal_id: UUID,
        body: CommentRequest,
        request: Request,
    ) -> CommentResponse:
        goal = await _load_goal(goal_id, Action.COMMENT_SUBMIT_QUESTION)
        await require(
            gate,
            acting_org_id=request.state.org_id,
            resource_org_id=goal.org_id,
            action=Action.COMMENT_SUBMIT_QUESTION,
        )
        comment = await _add_comment(goal, request, body.content, CommentType.QUESTION)
        logger.info("Question submitted: comment=%s goal=%s", comment.id, goal.id)
        return CommentResponse.from_domain(comment)

    @router.post(
        "/comments/{comment_id}/responses",
        response_model=CommentResponse,
        status_code=201,
    )
    async def respond(comment_id: UUID, body: CommentRequest, request: Request) -> CommentResponse:
        """Answer a question; the question is marked answered."""
        question = await comment_store.get_by_id(comment_id)
        if question is None:
            raise AuthorizationError(
                Action.COMMENT_RESPOND.value, relationship=OrgRelationship.NONE.value
            )
        goal = await _load_goal(question.goal_id, Action.COMMENT_RESPOND)
        await require(
            gate,
            acting_org_id=request.state.org_id,
            resource_org_id=goal.org_id,
            action=Action.COMMENT_RESPOND,
        )
        if question.type is not CommentType.QUESTION:
            raise ValidationError("Only questions can be responded to", field="comment_id")

        response = await _add_comment(goal, request, body.content, CommentType.RESPONSE)
        await comment_store.set_status(question.id, CommentStatus.ANSWERED)
        logger.info("Question answered: question=%s response=%s", question.id, response.id)
        return CommentResponse.from_domain(response)

    return router
