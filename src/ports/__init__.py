"""Port interfaces - Layer boundary contracts.

    OrgStore     - Organization tree lookups (RBAC core hard dep)
    GoalStore    - Goal persistence
    CommentStore - Comment persistence
    UserStore    - Caller resolution

Adapters live in src.infra.stores; test fakes in tests.fakes.
"""

from src.ports.comment_store import CommentStore
from src.ports.goal_store import GoalStore
from src.ports.org_store import OrgStore
from src.ports.user_store import UserStore

__all__ = [
    "CommentStore",
    "GoalStore",
    "OrgStore",
    "UserStore",
]
