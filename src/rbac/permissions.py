"""Relationship permission matrix: 7 relationships x 10 actions.

Policy:
- Full control only within one's own organization (SELF).
- Read visibility flows both up and down the hierarchy.
- Cross-org collaboration is limited to raising questions, except that an
  org may respond to questions raised on its direct children's goals.

LAW: the matrix is frozen and total over OrgRelationship.
"""

from __future__ import annotations

from enum import Enum, unique
from typing import TYPE_CHECKING

from src.rbac.relationships import OrgRelationship
from src.shared.errors import InvalidActionError

if TYPE_CHECKING:
    from collections.abc import Iterable


@unique
class Action(Enum):
    """Operation kind crossed with resource kind."""

    GOAL_READ = "goal:read"
    GOAL_CREATE = "goal:create"
    GOAL_UPDATE = "goal:update"
    GOAL_DELETE = "goal:delete"

    COMMENT_READ = "comment:read"
    COMMENT_CREATE = "comment:create"
    COMMENT_SUBMIT_QUESTION = "comment:submit_question"
    COMMENT_RESPOND = "comment:respond"

    ORGANIZATION_READ = "organization:read"
    ORGANIZATION_UPDATE = "organization:update"

    @property
    def resource(self) -> str:
        """Resource kind prefix, e.g. "goal"."""
        return self.value.split(":", 1)[0]


_READ_ONLY = frozenset(
    {
        Action.GOAL_READ,
        Action.COMMENT_READ,
        Action.ORGANIZATION_READ,
    }
)

PERMISSION_MATRIX: dict[OrgRelationship, frozenset[Action]] = {
    OrgRelationship.SELF: frozenset(Action),  # all 10 actions
    OrgRelationship.PARENT: frozenset(
        {
            Action.GOAL_READ,
            Action.COMMENT_SUBMIT_QUESTION,
            Action.ORGANIZATION_READ,
        }
    ),
    OrgRelationship.CHILD: frozenset(
        {
            Action.GOAL_READ,
            Action.COMMENT_READ,
            Action.COMMENT_RESPOND,
            Action.ORGANIZATION_READ,
        }
    ),
    OrgRelationship.ANCESTOR: _READ_ONLY,
    OrgRelationship.DESCENDANT: _READ_ONLY,
    OrgRelationship.SIBLING: frozenset(
        {
            Action.GOAL_READ,
            Action.COMMENT_SUBMIT_QUESTION,
            Action.ORGANIZATION_READ,
        }
    ),
    OrgRelationship.NONE: frozenset(),
}

_missing = set(OrgRelationship) - set(PERMISSION_MATRIX)
if _missing:
    msg = f"PERMISSION_MATRIX missing relationships: {sorted(r.value for r in _missing)}"
    raise RuntimeError(msg)


def parse_action(value: str | Action) -> Action:
    """Parse an action tag such as "goal:read". Raises InvalidActionError."""
    if isinstance(value, Action):
        return value
    try:
        return Action(value)
    except ValueError:
        raise InvalidActionError(str(value)) from None


def has_permission(relationship: OrgRelationship, action: Action) -> bool:
    """Check whether a relationship allows an action."""
    return action in PERMISSION_MATRIX[relationship]


def get_allowed_actions(relationship: OrgRelationship) -> frozenset[Action]:
    """Return the (possibly empty) action set for a relationship."""
    return PERMISSION_MATRIX[relationship]


def has_all_permissions(relationship: OrgRelationship, actions: Iterable[Action]) -> bool:
    allowed = PERMISSION_MATRIX[relationship]
    return all(action in allowed for action in actions)


def has_any_permission(relationship: OrgRelationship, actions: Iterable[Action]) -> bool:
    allowed = PERMISSION_MATRIX[relationship]
    return any(action in allowed for action in actions)
