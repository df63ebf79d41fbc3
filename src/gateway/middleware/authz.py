"""Request-boundary enforcement on top of AuthorizationGate.

Handlers call require() / require_goal() before performing a protected
operation. A denial raises AuthorizationError, which the app maps to a
403 with a generic message; the computed relationship is attached to
the exception for logging only and never sent to the client.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from src.gateway.metrics.authz import record_decision
from src.shared.errors import AuthorizationError

if TYPE_CHECKING:
    from uuid import UUID

    from src.rbac.gate import AuthorizationDecision, AuthorizationGate
    from src.rbac.permissions import Action
    from src.shared.types import Goal

logger = logging.getLogger(__name__)


def _enforce(decision: AuthorizationDecision, *, acting_org_id: UUID, resource: str) -> None:
    record_decision(
        action=decision.action.value,
        relationship=decision.relationship.value,
        allowed=decision.allowed,
    )
    if decision.allowed:
        return
    logger.info(
        "Access denied: action=%s acting_org=%s resource=%s relationship=%s",
        decision.action.value,
        acting_org_id,
        resource,
        decision.relationship.value,
    )
    raise AuthorizationError(decision.action.value, relationship=decision.relationship.value)


async def require(
    gate: AuthorizationGate,
    *,
    acting_org_id: UUID,
    resource_org_id: UUID,
    action: Action | str,
) -> AuthorizationDecision:
    """Raise AuthorizationError unless the gate allows the action."""
    decision = await gate.check(acting_org_id, resource_org_id, action)
    _enforce(decision, acting_org_id=acting_org_id, resource=f"org:{resource_org_id}")
    return decision


async def require_goal(
    gate: AuthorizationGate,
    *,
    acting_org_id: UUID,
    goal: Goal,
    action: Action | str,
) -> AuthorizationDecision:
    """Like require(), with the goal's visibility rule applied."""
    decision = await gate.check_goal(acting_org_id, goal, action)
    _enforce(decision, acting_org_id=acting_org_id, resource=f"goal:{goal.id}")
    return decision
