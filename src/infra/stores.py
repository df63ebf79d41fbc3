"""PostgreSQL adapters implementing the store Ports via SQLAlchemy.

- PgOrgStore     -> OrgStore (bounded get_path via src.rbac.tree)
- PgUserStore    -> UserStore
- PgGoalStore    -> GoalStore
- PgCommentStore -> CommentStore

Each call opens its own session from the injected async_sessionmaker.
ORM rows are converted to src.shared.types values before leaving this
module.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import sqlalchemy as sa

from src.infra.models import Comment as CommentModel
from src.infra.models import Goal as GoalModel
from src.infra.models import Organization as OrganizationModel
from src.infra.models import User as UserModel
from src.ports.comment_store import CommentStore
from src.ports.goal_store import GoalStore
from src.ports.org_store import OrgStore
from src.ports.user_store import UserStore
from src.rbac.tree import DEFAULT_MAX_DEPTH, walk_org_path
from src.shared.types import (
    Comment,
    CommentStatus,
    CommentType,
    Goal,
    GoalStatus,
    GoalVisibility,
    Organization,
    User,
)

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = logging.getLogger(__name__)

_GOAL_UPDATABLE = frozenset(
    {"title", "description", "key_results", "status", "progress", "visibility"}
)


# -- Row conversion --


def _row_to_org(row: Any) -> Organization:
    return Organization(
        id=row.id,
        parent_id=row.parent_id,
        name=row.name,
        description=row.description,
        ai_guidelines=row.ai_guidelines,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _row_to_user(row: Any) -> User:
    return User(
        id=row.id,
        org_id=row.org_id,
        name=row.name,
        email=row.email,
        job_function=row.job_function,
        is_admin=bool(row.is_admin),
        is_leader=bool(row.is_leader),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _row_to_goal(row: Any) -> Goal:
    key_results = row.key_results if isinstance(row.key_results, list) else []
    return Goal(
        id=row.id,
        org_id=row.org_id,
        owner_id=row.owner_id,
        title=row.title,
        description=row.description,
        key_results=[str(kr) for kr in key_results],
        status=GoalStatus(row.status),
        progress=row.progress,
        visibility=GoalVisibility(row.visibility),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _row_to_comment(row: Any) -> Comment:
    return Comment(
        id=row.id,
        goal_id=row.goal_id,
        author_id=row.author_id,
        content=row.content,
        type=CommentType(row.type),
        status=CommentStatus(row.status),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _column_value(value: Any) -> Any:
    """Unwrap enum values for persistence."""
    return getattr(value, "value", value)


_LIKE_ESCAPE = "\\"


def _like_pattern(keyword: str) -> str:
    """Literal substring pattern: LIKE wildcards in the keyword match themselves."""
    escaped = (
        keyword.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", _LIKE_ESCAPE + "%")
        .replace("_", _LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


# -- Adapters --


class PgOrgStore(OrgStore):
    """PostgreSQL-backed OrgStore.

    get_path walks parent references one point lookup at a time, bounded
    by max_depth and a visited set.
    """

    def __init__(
        self,
        *,
        session_factory: async_sessionmaker[AsyncSession],
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        self._session_factory = session_factory
        self._max_depth = max_depth

    async def get_by_id(self, org_id: UUID) -> Organization | None:
        stmt = sa.select(OrganizationModel).where(OrganizationModel.id == org_id)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            row = result.scalar_one_or_none()
        return _row_to_org(row) if row is not None else None

    async def get_children(self, parent_id: UUID) -> list[Organization]:
        stmt = (
            sa.select(OrganizationModel)
            .where(OrganizationModel.parent_id == parent_id)
            .order_by(OrganizationModel.name)
        )
        async with self._session_factory() as session:
            result = await session.scalars(stmt)
            rows = result.all()
        return [_row_to_org(row) for row in rows]

    async def get_path(self, org_id: UUID) -> list[Organization]:
        return await walk_org_path(org_id, self.get_by_id, max_depth=self._max_depth)

    async def update(self, org_id: UUID, changes: dict[str, Any]) -> Organization | None:
        """Update descriptive fields (name, description, ai_guidelines).

        parent_id is not updatable here; re-parenting would need a cycle
        check against the whole subtree.
        """
        allowed = {k: v for k, v in changes.items() if k in {"name", "description", "ai_guidelines"}}
        stmt = sa.select(OrganizationModel).where(OrganizationModel.id == org_id)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            row = result.scalar_one_or_none()
            if row is None:
                return None
            for key, value in allowed.items():
                setattr(row, key, value)
            row.updated_at = datetime.now(UTC)
            await session.commit()
        return _row_to_org(row)


class PgUserStore(UserStore):
    """PostgreSQL-backed UserStore."""

    def __init__(self, *, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_by_id(self, user_id: UUID) -> User | None:
        stmt = sa.select(UserModel).where(UserModel.id == user_id)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            row = result.scalar_one_or_none()
        return _row_to_user(row) if row is not None else None

    async def get_by_email(self, email: str) -> User | None:
        stmt = sa.select(UserModel).where(UserModel.email == email.strip().lower())
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            row = result.scalar_one_or_none()
        return _row_to_user(row) if row is not None else None


class PgGoalStore(GoalStore):
    """PostgreSQL-backed GoalStore."""

    def __init__(self, *, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_by_id(self, goal_id: UUID) -> Goal | None:
        stmt = sa.select(GoalModel).where(GoalModel.id == goal_id)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            row = result.scalar_one_or_none()
        return _row_to_goal(row) if row is not None else None

    async def list_by_org_ids(self, org_ids: Iterable[UUID]) -> list[Goal]:
        ids = list(org_ids)
        if not ids:
            return []
        stmt = (
            sa.select(GoalModel)
            .where(GoalModel.org_id.in_(ids))
            .order_by(GoalModel.created_at.desc())
        )
        async with self._session_factory() as session:
            result = await session.scalars(stmt)
            rows = result.all()
        return [_row_to_goal(row) for row in rows]

    async def search(self, keyword: str, org_ids: Iterable[UUID]) -> list[Goal]:
        ids = list(org_ids)
        if not ids:
            return []
        pattern = _like_pattern(keyword)
        stmt = (
            sa.select(GoalModel)
            .where(
                GoalModel.org_id.in_(ids),
                sa.or_(
                    GoalModel.title.ilike(pattern, escape=_LIKE_ESCAPE),
                    GoalModel.description.ilike(pattern, escape=_LIKE_ESCAPE),
                ),
            )
            .order_by(GoalModel.created_at.desc())
        )
        async with self._session_factory() as session:
            result = await session.scalars(stmt)
            rows = result.all()
        return [_row_to_goal(row) for row in rows]

    async def create(self, goal: Goal) -> Goal:
        now = datetime.now(UTC)
        model = GoalModel(
            id=goal.id,
            org_id=goal.org_id,
            owner_id=goal.owner_id,
            title=goal.title,
            description=goal.description,
            key_results=list(goal.key_results),
            status=goal.status.value,
            progress=goal.progress,
            visibility=goal.visibility.value,
            created_at=now,
            updated_at=now,
        )
        async with self._session_factory() as session:
            session.add(model)
            await session.commit()
        logger.info("Goal created: goal_id=%s org_id=%s", goal.id, goal.org_id)
        return _row_to_goal(model)

    async def update(self, goal_id: UUID, changes: dict[str, Any]) -> Goal | None:
        stmt = sa.select(GoalModel).where(GoalModel.id == goal_id)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            row = result.scalar_one_or_none()
            if row is None:
                return None
            for key, value in changes.items():
                if key in _GOAL_UPDATABLE:
                    setattr(row, key, _column_value(value))
            row.updated_at = datetime.now(UTC)
            await session.commit()
        return _row_to_goal(row)

    async def delete(self, goal_id: UUID) -> bool:
        stmt = sa.delete(GoalModel).where(GoalModel.id == goal_id)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            await session.commit()
        return result.rowcount > 0


class PgCommentStore(CommentStore):
    """PostgreSQL-backed CommentStore."""

    def __init__(self, *, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_by_id(self, comment_id: UUID) -> Comment | None:
        stmt = sa.select(CommentModel).where(CommentModel.id == comment_id)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            row = result.scalar_one_or_none()
        return _row_to_comment(row) if row is not None else None

    async def list_by_goal(self, goal_id: UUID) -> list[Comment]:
        stmt = (
            sa.select(CommentModel)
            .where(CommentModel.goal_id == goal_id)
            .order_by(CommentModel.created_at.asc())
        )
        async with self._session_factory() as session:
            result = await session.scalars(stmt)
            rows = result.all()
        return [_row_to_comment(row) for row in rows]

    async def create(self, comment: Comment) -> Comment:
        now = datetime.now(UTC)
        model = CommentModel(
            id=comment.id,
            goal_id=comment.goal_id,
            author_id=comment.author_id,
            content=comment.content,
            type=comment.type.value,
            status=comment.status.value,
            created_at=now,
            updated_at=now,
        )
        async with self._session_factory() as session:
            session.add(model)
            await session.commit()
        return _row_to_comment(model)

    async def set_status(self, comment_id: UUID, status: CommentStatus) -> Comment | None:
        stmt = sa.select(CommentModel).where(CommentModel.id == comment_id)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            row = result.scalar_one_or_none()
            if row is None:
                return None
            row.status = status.value
            row.updated_at = datetime.now(UTC)
            await session.commit()
        return _row_to_comment(row)
