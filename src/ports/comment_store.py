"""CommentStore - Comment persistence interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID

    from src.shared.types import Comment, CommentStatus


class CommentStore(ABC):
    """Port: Comment read/write."""

    @abstractmethod
    async def get_by_id(self, comment_id: UUID) -> Comment | None:
        """Return the comment or None."""

    @abstractmethod
    async def list_by_goal(self, goal_id: UUID) -> list[Comment]:
        """Return comments on a goal, oldest first."""

    @abstractmethod
    async def create(self, comment: Comment) -> Comment:
        """Persist a new comment and return it."""

    @abstractmethod
    async def set_status(self, comment_id: UUID, status: CommentStatus) -> Comment | None:
        """Update a comment's status; return None if missing."""
