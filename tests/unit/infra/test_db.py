"""Engine, session factory and readiness ping."""

from __future__ import annotations

import pytest

from src.infra.db import create_db_engine, create_session_factory, ping_database
from src.shared.errors import ServiceUnavailableError

_URL = "postgresql+asyncpg://u:p@localhost/test"


@pytest.mark.unit
class TestCreateDbEngine:
    def test_uses_asyncpg(self) -> None:
        engine = create_db_engine(_URL)
        assert hasattr(engine, "dispose")
        assert "asyncpg" in str(engine.url)

    def test_pool_size_configurable(self) -> None:
        engine = create_db_engine(_URL, pool_size=5, max_overflow=10)
        assert engine.pool.size() == 5

    def test_echo_defaults_to_false(self) -> None:
        assert create_db_engine(_URL).echo is False


@pytest.mark.unit
class TestCreateSessionFactory:
    def test_expire_on_commit_false(self) -> None:
        factory = create_session_factory(create_db_engine(_URL))
        assert callable(factory)
        assert factory.kw.get("expire_on_commit") is False


class _Conn:
    def __init__(self, fail: bool) -> None:
        self._fail = fail
        self.statements: list[str] = []

    async def __aenter__(self) -> _Conn:
        if self._fail:
            raise OSError("connection refused")
        return self

    async def __aexit__(self, *exc: object) -> None:
        return None

    async def execute(self, stmt: object) -> None:
        self.statements.append(str(stmt))


class _Engine:
    def __init__(self, *, fail: bool = False) -> None:
        self.conn = _Conn(fail)

    def connect(self) -> _Conn:
        return self.conn


@pytest.mark.unit
class TestPingDatabase:
    async def test_healthy_database(self) -> None:
        engine = _Engine()
        await ping_database(engine)  # type: ignore[arg-type]
        assert engine.conn.statements == ["SELECT 1"]

    async def test_unreachable_database(self) -> None:
        with pytest.raises(ServiceUnavailableError):
            await ping_database(_Engine(fail=True))  # type: ignore[arg-type]
