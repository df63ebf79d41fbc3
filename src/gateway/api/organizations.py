"""Organization endpoints.

- GET   /api/v1/organizations/accessible          -> caller's access scope
- GET   /api/v1/organizations/{id}                -> organization:read
- PATCH /api/v1/organizations/{id}                -> organization:update
- GET   /api/v1/organizations/{id}/relationship   -> organization:read; caller's relationship + actions
- GET   /api/v1/organizations/{id}/goals          -> goal:read (+ visibility)
- POST  /api/v1/organizations/{id}/goals          -> goal:create
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from fastapi import APIRouter, Request

from src.gateway.api.schemas import (
    AccessScopeResponse,
    CreateGoalRequest,
    GoalResponse,
    OrganizationResponse,
    RelationshipResponse,
    UpdateOrganizationRequest,
)
from src.gateway.middleware.authz import require
from src.rbac.permissions import Action, get_allowed_actions
from src.shared.errors import NotFoundError
from src.shared.types import Goal

if TYPE_CHECKING:
    from src.ports.goal_store import GoalStore
    from src.ports.org_store import OrgStore
    from src.rbac.gate import AuthorizationGate
    from src.rbac.scope import AccessScopeCalculator

logger = logging.getLogger(__name__)


def create_organization_router(
    *,
    org_store: OrgStore,
    goal_store: GoalStore,
    scope: AccessScopeCalculator,
    gate: AuthorizationGate,
) -> APIRouter:
    """Create organization API router with injected stores and RBAC engine."""
    router = APIRouter(prefix="/api/v1/organizations", tags=["organizations"])

    @router.get("/accessible", response_model=AccessScopeResponse)
    async def list_accessible(request: Request) -> AccessScopeResponse:
        """Organizations the caller may browse and search across."""
        org_ids = await scope.get_accessible_org_ids(request.state.org_id)
        orgs = [org for org_id in org_ids if (org := await org_store.get_by_id(org_id))]
        orgs.sort(key=lambda o: o.name)
        return AccessScopeResponse(
            organizations=[OrganizationResponse.from_domain(o) for o in orgs]
        )

    @router.get("/{org_id}", response_model=OrganizationResponse)
    async def get_organization(org_id: UUID, request: Request) -> OrganizationResponse:
        await require(
            gate,
            acting_org_id=request.state.org_id,
            resource_org_id=org_id,
            action=Action.ORGANIZATION_READ,
        )
        org = await org_store.get_by_id(org_id)
        if org is None:
            raise NotFoundError("Organization", str(org_id))
        return OrganizationResponse.from_domain(org)

    @router.patch("/{org_id}", response_model=OrganizationResponse)
    async def update_organization(
        org_id: UUID,
        body: UpdateOrganizationRequest,
        request: Request,
    ) -> OrganizationResponse:
        await require(
            gate,
            acting_org_id=request.state.org_id,
            resource_org_id=org_id,
            action=Action.ORGANIZATION_UPDATE,
        )
        org = await org_store.update(org_id, body.model_dump(exclude_unset=True))
        if org is None:
            raise NotFoundError("Organization", str(org_id))
        logger.info("Organization updated: org_id=%s by user=%s", org_id, request.state.user_id)
        return OrganizationResponse.from_domain(org)

    @router.get("/{org_id}/relationship", response_model=RelationshipResponse)
    async def get_relationship(org_id: UUID, request: Request) -> RelationshipResponse:
        """The caller's relationship to org_id and the actions it grants.

        An unrelated org (NONE) gets the same 403 as any other denial.
        """
        decision = await require(
            gate,
            acting_org_id=request.state.org_id,
            resource_org_id=org_id,
            action=Action.ORGANIZATION_READ,
        )
        relationship = decision.relationship
        return RelationshipResponse(
            org_id=str(org_id),
            relationship=relationship.value,
            allowed_actions=sorted(a.value for a in get_allowed_actions(relationship)),
        )

    @router.get("/{org_id}/goals", response_model=list[GoalResponse])
    async def list_goals(org_id: UUID, request: Request) -> list[GoalResponse]:
        acting_org_id: UUID = request.state.org_id
        await require(
            gate,
            acting_org_id=acting_org_id,
            resource_org_id=org_id,
            action=Action.GOAL_READ,
        )
        goals = await goal_store.list_by_org_ids([org_id])
        visible = [g for g in goals if await gate.authorize_goal(acting_org_id, g, Action.GOAL_READ)]
        return [GoalResponse.from_domain(g) for g in visible]

    @router.post("/{org_id}/goals", response_model=GoalResponse, status_code=201)
    async def create_goal(org_id: UUID, body: CreateGoalRequest, request: Request) -> GoalResponse:
        await require(
            gate,
            acting_org_id=request.state.org_id,
            resource_org_id=org_id,
            action=Action.GOAL_CREATE,
        )
        goal = await goal_store.create(
            Goal(
                id=uuid4(),
                org_id=org_id,
                owner_id=request.state.user_id,
                title=body.title,
                description=body.description,
                key_results=body.key_results,
                status=body.status,
                progress=body.progress,
                visibility=body.visibility,
            )
        )
        return GoalResponse.from_domain(goal)

    return router
