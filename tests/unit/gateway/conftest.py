"""Gateway fixtures: the full router set wired to in-memory fakes."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from httpx import ASGITransport, AsyncClient

from src.gateway.api.auth import create_auth_router
from src.gateway.api.goals import create_goal_router
from src.gateway.api.organizations import create_organization_router
from src.gateway.api.tools import create_tool_router
from src.gateway.app import create_app
from src.gateway.middleware.auth import encode_token
from src.services.context import UserContextBuilder
from src.tool.implementations.get_parent_goals import GetParentGoalsTool
from src.tool.implementations.search_collaborator_goals import SearchCollaboratorGoalsTool
from src.tool.implementations.submit_question import SubmitQuestionTool

if TYPE_CHECKING:
    from collections.abc import Callable

    from fastapi import FastAPI

    from src.shared.types import User

JWT_SECRET = "test-secret-key-for-unit-tests-only"  # noqa: S105


@pytest.fixture
def app(org_tree, org_store, user_store, goal_store, comment_store, resolver, scope, gate) -> FastAPI:
    application = create_app(jwt_secret=JWT_SECRET)
    application.include_router(create_auth_router(user_store=user_store))
    application.include_router(
        create_organization_router(
            org_store=org_store,
            goal_store=goal_store,
            scope=scope,
            gate=gate,
        )
    )
    application.include_router(
        create_goal_router(goal_store=goal_store, comment_store=comment_store, gate=gate)
    )
    application.include_router(
        create_tool_router(
            tools=[
                GetParentGoalsTool(org_store=org_store, goal_store=goal_store),
                SearchCollaboratorGoalsTool(
                    scope=scope, org_store=org_store, goal_store=goal_store
                ),
                SubmitQuestionTool(
                    resolver=resolver, goal_store=goal_store, comment_store=comment_store
                ),
            ],
            user_store=user_store,
            context_builder=UserContextBuilder(
                user_store=user_store, org_store=org_store, goal_store=goal_store
            ),
        )
    )
    return application


@pytest.fixture
async def client(app: FastAPI):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def headers_for() -> Callable[[User], dict[str, str]]:
    def _headers(user: User) -> dict[str, str]:
        token = encode_token(user_id=user.id, org_id=user.org_id, secret=JWT_SECRET)
        return {"Authorization": f"Bearer {token}"}

    return _headers
