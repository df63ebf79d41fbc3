"""Application composition root -- wires all layers into a runnable FastAPI app.

- Reads configuration via Settings.from_env()
- Creates async DB engine + session factory
- Instantiates store adapters, the RBAC engine and the agent tools
- Mounts auth, organization, goal and tool routers

Entry point: uvicorn src.main:app --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from functools import partial
from typing import TYPE_CHECKING

from src.gateway.api.auth import create_auth_router
from src.gateway.api.goals import create_goal_router
from src.gateway.api.organizations import create_organization_router
from src.gateway.api.tools import create_tool_router
from src.gateway.app import create_app
from src.infra.db import create_db_engine, create_session_factory, ping_database
from src.infra.stores import PgCommentStore, PgGoalStore, PgOrgStore, PgUserStore
from src.rbac import AccessScopeCalculator, AuthorizationGate, RelationshipResolver
from src.services.context import UserContextBuilder
from src.shared.config import Settings
from src.tool.implementations.get_parent_goals import GetParentGoalsTool
from src.tool.implementations.search_collaborator_goals import SearchCollaboratorGoalsTool
from src.tool.implementations.submit_question import SubmitQuestionTool

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI

logger = logging.getLogger(__name__)


def build_app(settings: Settings | None = None) -> FastAPI:
    """Build the application: instantiate adapters, wire dependencies, mount routers.

    This function is the single composition root. All DI wiring happens here.
    No other module should instantiate adapters or create cross-layer references.
    """
    settings = settings or Settings.from_env()

    # -- Infrastructure layer --
    db_engine = create_db_engine(settings.database_url)
    session_factory = create_session_factory(db_engine)

    org_store = PgOrgStore(session_factory=session_factory, max_depth=settings.max_org_depth)
    user_store = PgUserStore(session_factory=session_factory)
    goal_store = PgGoalStore(session_factory=session_factory)
    comment_store = PgCommentStore(session_factory=session_factory)

    # -- RBAC engine --
    resolver = RelationshipResolver(org_store=org_store)
    scope = AccessScopeCalculator(org_store=org_store)
    gate = AuthorizationGate(resolver=resolver)

    # -- Agent tool layer --
    tools = [
        GetParentGoalsTool(org_store=org_store, goal_store=goal_store),
        SearchCollaboratorGoalsTool(scope=scope, org_store=org_store, goal_store=goal_store),
        SubmitQuestionTool(
            resolver=resolver,
            goal_store=goal_store,
            comment_store=comment_store,
            disclose_relationship=settings.disclose_relationship,
        ),
    ]
    context_builder = UserContextBuilder(
        user_store=user_store,
        org_store=org_store,
        goal_store=goal_store,
    )

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        await db_engine.dispose()
        logger.info("Database engine disposed")

    application = create_app(
        jwt_secret=settings.jwt_secret,
        cors_origins=settings.cors_origins,
        lifespan=lifespan,
        readiness_check=partial(ping_database, db_engine),
    )
    application.state.db_engine = db_engine
    application.state.session_factory = session_factory

    application.include_router(
        create_auth_router(user_store=user_store, ttl_seconds=settings.session_ttl_seconds),
    )
    application.include_router(
        create_organization_router(
            org_store=org_store,
            goal_store=goal_store,
            scope=scope,
            gate=gate,
        ),
    )
    application.include_router(
        create_goal_router(goal_store=goal_store, comment_store=comment_store, gate=gate),
    )
    application.include_router(
        create_tool_router(
            tools=tools,
            user_store=user_store,
            context_builder=context_builder,
            agent_user_id=settings.agent_user_id,
        ),
    )

    logger.info("Northstar app assembled: %d routes mounted", len(application.routes))
    return application


app = build_app()
