"""Organization-relationship and access-control engine.

    RelationshipResolver  - classify two orgs' tree positions
    AccessScopeCalculator - orgs a user may browse/search
    PERMISSION_MATRIX     - relationship -> allowed actions
    AuthorizationGate     - relationship + matrix (+ goal visibility)
"""

from src.rbac.gate import AuthorizationDecision, AuthorizationGate
from src.rbac.permissions import (
    PERMISSION_MATRIX,
    Action,
    get_allowed_actions,
    has_all_permissions,
    has_any_permission,
    has_permission,
    parse_action,
)
from src.rbac.relationships import OrgRelationship, RelationshipResolver
from src.rbac.scope import AccessScopeCalculator
from src.rbac.tree import DEFAULT_MAX_DEPTH, walk_org_path

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "PERMISSION_MATRIX",
    "AccessScopeCalculator",
    "Action",
    "AuthorizationDecision",
    "AuthorizationGate",
    "OrgRelationship",
    "RelationshipResolver",
    "get_allowed_actions",
    "has_all_permissions",
    "has_any_permission",
    "has_permission",
    "parse_action",
    "walk_org_path",
]
