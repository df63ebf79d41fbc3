"""Shared domain types used across layers.

These types flow through Port interfaces and must remain stable.
They are plain frozen dataclasses; ORM rows live in src.infra.models
and are converted at the adapter boundary.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime  # noqa: TC003 -- used at runtime in dataclass fields
from enum import Enum, unique
from uuid import UUID  # noqa: TC003 -- used at runtime in dataclass fields


@unique
class GoalStatus(Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@unique
class GoalVisibility(Enum):
    """Per-goal visibility. PRIVATE goals are readable only by the owning org."""

    PUBLIC = "public"
    PRIVATE = "private"
    TEAM_ONLY = "team_only"


# Visibilities that non-owning orgs may read (subject to relationship permission).
SHARED_VISIBILITIES: frozenset[GoalVisibility] = frozenset(
    {GoalVisibility.PUBLIC, GoalVisibility.TEAM_ONLY}
)


@unique
class CommentType(Enum):
    QUESTION = "question"
    RESPONSE = "response"
    NOTE = "note"


@unique
class CommentStatus(Enum):
    PENDING = "pending"
    ANSWERED = "answered"
    CLOSED = "closed"


# -- Core entities --


@dataclass(frozen=True)
class Organization:
    """A node in the organization forest. parent_id None marks a root."""

    id: UUID
    name: str
    parent_id: UUID | None = None
    description: str | None = None
    ai_guidelines: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_root(self) -> bool:
        return self.parent_id is None


@dataclass(frozen=True)
class User:
    """Platform user with a single home organization."""

    id: UUID
    org_id: UUID
    name: str
    email: str
    job_function: str | None = None
    is_admin: bool = False
    is_leader: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class Goal:
    id: UUID
    org_id: UUID
    title: str
    owner_id: UUID | None = None
    description: str | None = None
    key_results: list[str] = field(default_factory=list)
    status: GoalStatus = GoalStatus.NOT_STARTED
    progress: int = 0
    visibility: GoalVisibility = GoalVisibility.PUBLIC
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class Comment:
    id: UUID
    goal_id: UUID
    author_id: UUID
    content: str
    type: CommentType = CommentType.NOTE
    status: CommentStatus = CommentStatus.PENDING
    created_at: datetime | None = None
    updated_at: datetime | None = None


# -- Aggregated context (agent resource) --


@dataclass(frozen=True)
class UserContext:
    """Everything an assistant needs to know about the acting user.

    org_path runs from the root to the user's own organization.
    """

    user: User
    organization: Organization
    org_path: list[Organization] = field(default_factory=list)
    current_goals: list[Goal] = field(default_factory=list)
    parent_goals: list[Goal] = field(default_factory=list)
    guidelines: list[tuple[str, str]] = field(default_factory=list)
