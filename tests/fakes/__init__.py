"""Hand-written fakes for the store ports and the SQLAlchemy session.

- stores:  in-memory OrgStore / UserStore / GoalStore / CommentStore
- session: FakeAsyncSession for exercising the Pg* adapters

No unittest.mock anywhere; fakes are injected through constructors
exactly like the production adapters.
"""

from tests.fakes.session import (
    FakeAsyncSession,
    FakeOrmRow,
    FakeResult,
    FakeScalarsResult,
    FakeSessionFactory,
)
from tests.fakes.stores import (
    FakeCommentStore,
    FakeGoalStore,
    FakeOrgStore,
    FakeUserStore,
)

__all__ = [
    "FakeAsyncSession",
    "FakeCommentStore",
    "FakeGoalStore",
    "FakeOrgStore",
    "FakeOrmRow",
    "FakeResult",
    "FakeScalarsResult",
    "FakeSessionFactory",
    "FakeUserStore",
]
