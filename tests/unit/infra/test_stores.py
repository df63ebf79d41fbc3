"""PostgreSQL store adapters against the fake async session."""

from __future__ import annotations

from datetime import UTC, datetime
from uuid import uuid4

import pytest
from sqlalchemy.dialects import postgresql

from src.infra.models import Comment as CommentModel
from src.infra.models import Goal as GoalModel
from src.infra.stores import (
    PgCommentStore,
    PgGoalStore,
    PgOrgStore,
    PgUserStore,
    _like_pattern,
)
from src.shared.errors import MalformedTreeError
from src.shared.types import (
    Comment,
    CommentStatus,
    CommentType,
    Goal,
    GoalStatus,
    GoalVisibility,
)
from tests.fakes import FakeAsyncSession, FakeOrmRow, FakeResult, FakeSessionFactory

_NOW = datetime(2026, 1, 5, tzinfo=UTC)


def _org_row(name: str, parent_id=None, **kwargs) -> FakeOrmRow:
    return FakeOrmRow(
        id=kwargs.get("id", uuid4()),
        parent_id=parent_id,
        name=name,
        description=kwargs.get("description"),
        ai_guidelines=kwargs.get("ai_guidelines"),
        created_at=_NOW,
        updated_at=_NOW,
    )


def _goal_row(org_id, **kwargs) -> FakeOrmRow:
    return FakeOrmRow(
        id=uuid4(),
        org_id=org_id,
        owner_id=None,
        title=kwargs.get("title", "Ship it"),
        description=None,
        key_results=kwargs.get("key_results", ["KR1"]),
        status=kwargs.get("status", "in_progress"),
        progress=kwargs.get("progress", 10),
        visibility=kwargs.get("visibility", "public"),
        created_at=_NOW,
        updated_at=_NOW,
    )


@pytest.fixture
def session() -> FakeAsyncSession:
    return FakeAsyncSession()


@pytest.fixture
def factory(session: FakeAsyncSession) -> FakeSessionFactory:
    return FakeSessionFactory(session)


@pytest.mark.unit
class TestPgOrgStore:
    async def test_get_by_id_converts_row(self, session, factory) -> None:
        row = _org_row("Acme", ai_guidelines="Be kind")
        session.set_execute_result(scalar_one_or_none_value=row)

        org = await PgOrgStore(session_factory=factory).get_by_id(row.id)

        assert org is not None
        assert org.id == row.id
        assert org.ai_guidelines == "Be kind"
        assert org.is_root

    async def test_get_by_id_missing(self, session, factory) -> None:
        session.set_execute_result(scalar_one_or_none_value=None)
        assert await PgOrgStore(session_factory=factory).get_by_id(uuid4()) is None

    async def test_get_children(self, session, factory) -> None:
        parent = uuid4()
        session.set_scalars_result([_org_row("A", parent), _org_row("B", parent)])
        children = await PgOrgStore(session_factory=factory).get_children(parent)
        assert [c.name for c in children] == ["A", "B"]

    async def test_get_path_walks_to_root(self, session, factory) -> None:
        root = _org_row("Acme")
        mid = _org_row("Engineering", root.id)
        leaf = _org_row("Platform", mid.id)
        session.set_execute_results(
            [
                FakeResult(scalar_one_or_none_value=leaf),
                FakeResult(scalar_one_or_none_value=mid),
                FakeResult(scalar_one_or_none_value=root),
            ]
        )

        path = await PgOrgStore(session_factory=factory).get_path(leaf.id)

        assert [o.name for o in path] == ["Acme", "Engineering", "Platform"]
        assert len(session.execute_calls) == 3

    async def test_get_path_cycle(self, session, factory) -> None:
        a_id, b_id = uuid4(), uuid4()
        a = _org_row("A", b_id, id=a_id)
        b = _org_row("B", a_id, id=b_id)
        session.set_execute_results(
            [
                FakeResult(scalar_one_or_none_value=a),
                FakeResult(scalar_one_or_none_value=b),
                FakeResult(scalar_one_or_none_value=a),
            ]
        )
        with pytest.raises(MalformedTreeError):
            await PgOrgStore(session_factory=factory).get_path(a_id)

    async def test_update_ignores_parent_id(self, session, factory) -> None:
        row = _org_row("Platform", uuid4())
        original_parent = row.parent_id
        session.set_execute_result(scalar_one_or_none_value=row)

        org = await PgOrgStore(session_factory=factory).update(
            row.id, {"name": "Platform Eng", "parent_id": uuid4()}
        )

        assert org is not None
        assert org.name == "Platform Eng"
        assert org.parent_id == original_parent
        assert session.commit_count == 1

    async def test_update_missing(self, session, factory) -> None:
        session.set_execute_result(scalar_one_or_none_value=None)
        assert await PgOrgStore(session_factory=factory).update(uuid4(), {"name": "x"}) is None
        assert session.commit_count == 0


@pytest.mark.unit
class TestPgUserStore:
    async def test_get_by_email(self, session, factory) -> None:
        row = FakeOrmRow(
            id=uuid4(),
            org_id=uuid4(),
            name="Ada",
            email="ada@example.com",
            job_function=None,
            is_admin=False,
            is_leader=True,
            created_at=_NOW,
            updated_at=_NOW,
        )
        session.set_execute_result(scalar_one_or_none_value=row)

        user = await PgUserStore(session_factory=factory).get_by_email("ADA@example.com ")

        assert user is not None
        assert user.is_leader
        assert "ada@example.com" in str(
            session.execute_calls[0][0].compile(compile_kwargs={"literal_binds": True})
        )


@pytest.mark.unit
class TestPgGoalStore:
    async def test_list_empty_scope_skips_query(self, session, factory) -> None:
        assert await PgGoalStore(session_factory=factory).list_by_org_ids([]) == []
        assert await PgGoalStore(session_factory=factory).search("x", []) == []

    async def test_list_converts_rows(self, session, factory) -> None:
        org_id = uuid4()
        session.set_scalars_result([_goal_row(org_id, visibility="team_only", key_results=[1])])

        goals = await PgGoalStore(session_factory=factory).list_by_org_ids([org_id])

        assert goals[0].visibility is GoalVisibility.TEAM_ONLY
        assert goals[0].status is GoalStatus.IN_PROGRESS
        assert goals[0].key_results == ["1"]

    async def test_non_list_key_results_become_empty(self, session, factory) -> None:
        org_id = uuid4()
        session.set_scalars_result([_goal_row(org_id, key_results=None)])
        goals = await PgGoalStore(session_factory=factory).list_by_org_ids([org_id])
        assert goals[0].key_results == []

    async def test_create_adds_and_commits(self, session, factory) -> None:
        goal = Goal(id=uuid4(), org_id=uuid4(), title="Grow", key_results=["10 deals"])

        created = await PgGoalStore(session_factory=factory).create(goal)

        assert isinstance(session.added[0], GoalModel)
        assert session.added[0].status == "not_started"
        assert session.commit_count == 1
        assert created.id == goal.id
        assert created.created_at is not None

    async def test_update_unwraps_enums(self, session, factory) -> None:
        row = _goal_row(uuid4())
        session.set_execute_result(scalar_one_or_none_value=row)

        goal = await PgGoalStore(session_factory=factory).update(
            row.id, {"status": GoalStatus.COMPLETED, "progress": 100, "org_id": uuid4()}
        )

        assert row.status == "completed"
        assert goal is not None
        assert goal.status is GoalStatus.COMPLETED
        assert goal.org_id == row.org_id

    async def test_delete_reports_rowcount(self, session, factory) -> None:
        session.set_execute_result(rowcount=1)
        assert await PgGoalStore(session_factory=factory).delete(uuid4()) is True
        session.set_execute_result(rowcount=0)
        assert await PgGoalStore(session_factory=factory).delete(uuid4()) is False


@pytest.mark.unit
class TestPgCommentStore:
    async def test_create(self, session, factory) -> None:
        comment = Comment(
            id=uuid4(),
            goal_id=uuid4(),
            author_id=uuid4(),
            content="Why?",
            type=CommentType.QUESTION,
        )
        created = await PgCommentStore(session_factory=factory).create(comment)
        assert isinstance(session.added[0], CommentModel)
        assert created.type is CommentType.QUESTION
        assert created.status is CommentStatus.PENDING

    async def test_set_status(self, session, factory) -> None:
        row = FakeOrmRow(
            id=uuid4(),
            goal_id=uuid4(),
            author_id=uuid4(),
            content="Why?",
            type="question",
            status="pending",
            created_at=_NOW,
            updated_at=_NOW,
        )
        session.set_execute_result(scalar_one_or_none_value=row)

        comment = await PgCommentStore(session_factory=factory).set_status(
            row.id, CommentStatus.ANSWERED
        )

        assert comment is not None
        assert comment.status is CommentStatus.ANSWERED
        assert row.status == "answered"


@pytest.mark.unit
class TestGoalSearchPattern:
    @pytest.mark.parametrize(
        ("keyword", "pattern"),
        [
            ("latency", "%latency%"),
            ("100%", "%100\\%%"),
            ("_", "%\\_%"),
            ("a\\b", "%a\\\\b%"),
        ],
    )
    def test_wildcards_are_literal(self, keyword: str, pattern: str) -> None:
        assert _like_pattern(keyword) == pattern

    async def test_search_binds_escaped_pattern(self, session, factory) -> None:
        await PgGoalStore(session_factory=factory).search("_", [uuid4()])

        compiled = session.scalars_calls[0].compile(dialect=postgresql.dialect())
        assert "ESCAPE" in str(compiled).upper()
        patterns = {v for v in compiled.params.values() if isinstance(v, str)}
        assert patterns == {"%\\_%"}
