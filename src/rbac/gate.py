"""AuthorizationGate - single entry point for permission decisions.

Composes RelationshipResolver with the permission matrix:

    relationship = compute_relationship(acting_org, resource_org)
    allowed      = has_permission(relationship, action)
    goal actions additionally require public/team_only visibility
    unless the relationship is SELF

Unknown org ids resolve to NONE, so every action is denied (fail closed).
Denial is returned, never raised; request handlers decide how to report
it. The gate itself performs no writes and no audit logging.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from src.rbac.permissions import Action, has_permission, parse_action
from src.rbac.relationships import OrgRelationship
from src.shared.types import SHARED_VISIBILITIES

if TYPE_CHECKING:
    from uuid import UUID

    from src.rbac.relationships import RelationshipResolver
    from src.shared.types import Goal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthorizationDecision:
    """Outcome of a gate check, including the computed relationship."""

    allowed: bool
    relationship: OrgRelationship
    action: Action


class AuthorizationGate:
    """Answer "may org U perform action A on a resource owned by org O?"."""

    def __init__(self, *, resolver: RelationshipResolver) -> None:
        self._resolver = resolver

    async def check(
        self,
        acting_org_id: UUID,
        resource_org_id: UUID,
        action: Action | str,
    ) -> AuthorizationDecision:
        """Relationship-based decision for an action on an org-owned resource.

        Raises:
            InvalidActionError: If action is a string outside the Action enum.
        """
        parsed = parse_action(action)
        relationship = await self._resolver.compute_relationship(acting_org_id, resource_org_id)
        allowed = has_permission(relationship, parsed)
        if not allowed:
            logger.debug(
                "Denied %s: acting_org=%s resource_org=%s relationship=%s",
                parsed.value,
                acting_org_id,
                resource_org_id,
                relationship.value,
            )
        return AuthorizationDecision(allowed=allowed, relationship=relationship, action=parsed)

    async def authorize(
        self,
        acting_org_id: UUID,
        resource_org_id: UUID,
        action: Action | str,
    ) -> bool:
        decision = await self.check(acting_org_id, resource_org_id, action)
        return decision.allowed

    async def check_goal(
        self,
        acting_org_id: UUID,
        goal: Goal,
        action: Action | str,
    ) -> AuthorizationDecision:
        """Like check(), with the goal's visibility layered on top.

        For goal:* actions outside SELF, a private goal is denied even when
        the relationship grants the action.
        """
        decision = await self.check(acting_org_id, goal.org_id, action)
        if not decision.allowed:
            return decision

        if (
            decision.action.resource == "goal"
            and decision.relationship is not OrgRelationship.SELF
            and goal.visibility not in SHARED_VISIBILITIES
        ):
            logger.debug(
                "Denied %s on goal=%s: visibility=%s relationship=%s",
                decision.action.value,
                goal.id,
                goal.visibility.value,
                decision.relationship.value,
            )
            return AuthorizationDecision(
                allowed=False,
                relationship=decision.relationship,
                action=decision.action,
            )
        return decision

    async def authorize_goal(
        self,
        acting_org_id: UUID,
        goal: Goal,
        action: Action | str,
    ) -> bool:
        decision = await self.check_goal(acting_org_id, goal, action)
        return decision.allowed
