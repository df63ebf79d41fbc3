"""SQLAlchemy ORM models for Northstar.

Maps to migration DDL in migrations/versions/:
  001_create_northstar_tables.py -> Organization, User, Goal, Comment

These models live in the Infrastructure layer and back the Port
adapters in src.infra.stores. The RBAC core and gateway MUST NOT import
this module directly; they see src.shared.types values only.
"""

from __future__ import annotations

import uuid as _uuid  # noqa: TC003 -- SQLAlchemy resolves Mapped[] annotations at runtime
from datetime import datetime  # noqa: TC003
from typing import Any

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

_UUID = postgresql.UUID(as_uuid=True)
_NOW = sa.text("now()")
_GEN_UUID = sa.text("gen_random_uuid()")


class Base(DeclarativeBase):
    """Declarative base for all Northstar ORM models."""


class Organization(Base):
    """Node of the organization forest (parent_id NULL marks a root)."""

    __tablename__ = "organizations"

    id: Mapped[_uuid.UUID] = mapped_column(
        _UUID,
        primary_key=True,
        server_default=_GEN_UUID,
    )
    parent_id: Mapped[_uuid.UUID | None] = mapped_column(
        _UUID,
        sa.ForeignKey("organizations.id"),
        nullable=True,
    )
    name: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(sa.Text(), nullable=True)
    ai_guidelines: Mapped[str | None] = mapped_column(sa.Text(), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=_NOW,
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=_NOW,
    )

    parent: Mapped[Organization | None] = relationship(
        "Organization",
        remote_side="Organization.id",
        lazy="select",
    )

    __table_args__ = (
        sa.Index("ix_organizations_parent_id", "parent_id"),
        sa.CheckConstraint("parent_id IS NULL OR parent_id <> id", name="ck_organizations_no_self_parent"),
    )


class User(Base):
    """Platform user with a single home organization."""

    __tablename__ = "users"

    id: Mapped[_uuid.UUID] = mapped_column(
        _UUID,
        primary_key=True,
        server_default=_GEN_UUID,
    )
    org_id: Mapped[_uuid.UUID] = mapped_column(
        _UUID,
        sa.ForeignKey("organizations.id"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    email: Mapped[str] = mapped_column(sa.String(320), nullable=False, unique=True)
    job_function: Mapped[str | None] = mapped_column(sa.String(255), nullable=True)
    is_admin: Mapped[bool] = mapped_column(
        sa.Boolean(),
        nullable=False,
        server_default=sa.text("false"),
    )
    is_leader: Mapped[bool] = mapped_column(
        sa.Boolean(),
        nullable=False,
        server_default=sa.text("false"),
    )
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=_NOW,
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=_NOW,
    )

    __table_args__ = (
        sa.Index("ix_users_email", "email", unique=True),
        sa.Index("ix_users_org_id", "org_id"),
    )


class Goal(Base):
    """Goal owned by an organization."""

    __tablename__ = "goals"

    id: Mapped[_uuid.UUID] = mapped_column(
        _UUID,
        primary_key=True,
        server_default=_GEN_UUID,
    )
    org_id: Mapped[_uuid.UUID] = mapped_column(
        _UUID,
        sa.ForeignKey("organizations.id"),
        nullable=False,
    )
    owner_id: Mapped[_uuid.UUID | None] = mapped_column(
        _UUID,
        sa.ForeignKey("users.id"),
        nullable=True,
    )
    title: Mapped[str] = mapped_column(sa.String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(sa.Text(), nullable=True)
    key_results: Mapped[list[Any]] = mapped_column(
        postgresql.JSONB,
        nullable=False,
        server_default=sa.text("'[]'::jsonb"),
    )
    status: Mapped[str] = mapped_column(
        sa.String(32),
        nullable=False,
        server_default="not_started",
    )
    progress: Mapped[int] = mapped_column(
        sa.Integer(),
        nullable=False,
        server_default=sa.text("0"),
    )
    visibility: Mapped[str] = mapped_column(
        sa.String(32),
        nullable=False,
        server_default="public",
    )
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=_NOW,
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=_NOW,
    )

    __table_args__ = (
        sa.Index("ix_goals_org_id", "org_id"),
        sa.CheckConstraint(
            "status IN ('not_started', 'in_progress', 'completed', 'cancelled')",
            name="ck_goals_status",
        ),
        sa.CheckConstraint("progress >= 0 AND progress <= 100", name="ck_goals_progress"),
        sa.CheckConstraint(
            "visibility IN ('public', 'private', 'team_only')",
            name="ck_goals_visibility",
        ),
    )


class Comment(Base):
    """Question, response or note attached to a goal."""

    __tablename__ = "comments"

    id: Mapped[_uuid.UUID] = mapped_column(
        _UUID,
        primary_key=True,
        server_default=_GEN_UUID,
    )
    goal_id: Mapped[_uuid.UUID] = mapped_column(
        _UUID,
        sa.ForeignKey("goals.id", ondelete="CASCADE"),
        nullable=False,
    )
    author_id: Mapped[_uuid.UUID] = mapped_column(
        _UUID,
        sa.ForeignKey("users.id"),
        nullable=False,
    )
    content: Mapped[str] = mapped_column(sa.Text(), nullable=False)
    type: Mapped[str] = mapped_column(
        sa.String(32),
        nullable=False,
        server_default="note",
    )
    status: Mapped[str] = mapped_column(
        sa.String(32),
        nullable=False,
        server_default="pending",
    )
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=_NOW,
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=_NOW,
    )

    __table_args__ = (
        sa.Index("ix_comments_goal_id", "goal_id"),
        sa.CheckConstraint(
            "type IN ('question', 'response', 'note')",
            name="ck_comments_type",
        ),
        sa.CheckConstraint(
            "status IN ('pending', 'answered', 'closed')",
            name="ck_comments_status",
        ),
    )
