"""Create organizations, users, goals and comments tables.

Revision ID: 001_northstar
Revises: None
Create Date: 2026-10-19

Rollback: reverse-drop comments, goals, users, organizations
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision = "001_northstar"
down_revision = None
branch_labels = None
depends_on = None

_UUID = postgresql.UUID(as_uuid=True)
_NOW = sa.text("now()")
_GEN_UUID = sa.text("gen_random_uuid()")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=_NOW),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=_NOW),
    ]


def upgrade() -> None:
    # --- organizations ---
    op.create_table(
        "organizations",
        sa.Column("id", _UUID, primary_key=True, server_default=_GEN_UUID),
        sa.Column("parent_id", _UUID, sa.ForeignKey("organizations.id"), nullable=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("ai_guidelines", sa.Text(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "parent_id IS NULL OR parent_id <> id",
            name="ck_organizations_no_self_parent",
        ),
    )
    op.create_index("ix_organizations_parent_id", "organizations", ["parent_id"])

    # --- users ---
    op.create_table(
        "users",
        sa.Column("id", _UUID, primary_key=True, server_default=_GEN_UUID),
        sa.Column("org_id", _UUID, sa.ForeignKey("organizations.id"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(320), nullable=False, unique=True),
        sa.Column("job_function", sa.String(255), nullable=True),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("is_leader", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_org_id", "users", ["org_id"])

    # --- goals ---
    op.create_table(
        "goals",
        sa.Column("id", _UUID, primary_key=True, server_default=_GEN_UUID),
        sa.Column("org_id", _UUID, sa.ForeignKey("organizations.id"), nullable=False),
        sa.Column("owner_id", _UUID, sa.ForeignKey("users.id"), nullable=True),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "key_results",
            postgresql.JSONB,
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column("status", sa.String(32), nullable=False, server_default="not_started"),
        sa.Column("progress", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("visibility", sa.String(32), nullable=False, server_default="public"),
        *_timestamps(),
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
    op.create_index("ix_goals_org_id", "goals", ["org_id"])

    # --- comments ---
    op.create_table(
        "comments",
        sa.Column("id", _UUID, primary_key=True, server_default=_GEN_UUID),
        sa.Column(
            "goal_id",
            _UUID,
            sa.ForeignKey("goals.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("author_id", _UUID, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("type", sa.String(32), nullable=False, server_default="note"),
        sa.Column("status", sa.String(32), nullable=False, server_default="pending"),
        *_timestamps(),
        sa.CheckConstraint("type IN ('question', 'response', 'note')", name="ck_comments_type"),
        sa.CheckConstraint(
            "status IN ('pending', 'answered', 'closed')",
            name="ck_comments_status",
        ),
    )
    op.create_index("ix_comments_goal_id", "comments", ["goal_id"])


def downgrade() -> None:
    op.drop_index("ix_comments_goal_id", table_name="comments")
    op.drop_table("comments")
    op.drop_index("ix_goals_org_id", table_name="goals")
    op.drop_table("goals")
    op.drop_index("ix_users_org_id", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
    op.drop_index("ix_organizations_parent_id", table_name="organizations")
    op.drop_table("organizations")
