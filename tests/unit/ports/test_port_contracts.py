"""Port schema assertion tests.

Verifies Port interfaces keep their expected method signatures and that
every adapter (Pg* and in-memory fake) implements the full contract.
"""

from __future__ import annotations

import inspect

import pytest

from src.infra.stores import PgCommentStore, PgGoalStore, PgOrgStore, PgUserStore
from src.ports import CommentStore, GoalStore, OrgStore, UserStore
from tests.fakes import FakeCommentStore, FakeGoalStore, FakeOrgStore, FakeUserStore


def _params(method: object) -> list[str]:
    return list(inspect.signature(method).parameters.keys())  # type: ignore[arg-type]


@pytest.mark.unit
class TestOrgStoreContract:
    def test_point_lookups(self) -> None:
        assert _params(OrgStore.get_by_id) == ["self", "org_id"]
        assert _params(OrgStore.get_children) == ["self", "parent_id"]
        assert _params(OrgStore.get_path) == ["self", "org_id"]

    def test_update_takes_change_dict(self) -> None:
        assert _params(OrgStore.update) == ["self", "org_id", "changes"]

    def test_all_methods_are_coroutines(self) -> None:
        for name in OrgStore.__abstractmethods__:
            assert inspect.iscoroutinefunction(getattr(OrgStore, name)), name


@pytest.mark.unit
class TestGoalStoreContract:
    def test_scope_queries_take_org_ids(self) -> None:
        assert "org_ids" in _params(GoalStore.list_by_org_ids)
        assert _params(GoalStore.search) == ["self", "keyword", "org_ids"]

    def test_crud(self) -> None:
        assert GoalStore.__abstractmethods__ >= {"get_by_id", "create", "update", "delete"}


@pytest.mark.unit
class TestCommentStoreContract:
    def test_methods(self) -> None:
        assert CommentStore.__abstractmethods__ == {
            "get_by_id",
            "list_by_goal",
            "create",
            "set_status",
        }


@pytest.mark.unit
class TestUserStoreContract:
    def test_methods(self) -> None:
        assert UserStore.__abstractmethods__ == {"get_by_id", "get_by_email"}


@pytest.mark.unit
@pytest.mark.parametrize(
    ("port", "adapters"),
    [
        (OrgStore, [PgOrgStore, FakeOrgStore]),
        (GoalStore, [PgGoalStore, FakeGoalStore]),
        (CommentStore, [PgCommentStore, FakeCommentStore]),
        (UserStore, [PgUserStore, FakeUserStore]),
    ],
)
def test_adapters_are_concrete(port: type, adapters: list[type]) -> None:
    for adapter in adapters:
        assert issubclass(adapter, port)
        assert not getattr(adapter, "__abstractmethods__", frozenset())
