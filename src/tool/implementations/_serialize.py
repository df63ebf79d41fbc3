"""JSON shapes shared by the goal tools."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from uuid import UUID

if TYPE_CHECKING:
    from src.shared.types import Goal


def goal_summary(goal: Goal) -> dict[str, Any]:
    return {
        "id": str(goal.id),
        "title": goal.title,
        "description": goal.description,
        "key_results": list(goal.key_results),
        "status": goal.status.value,
        "progress": goal.progress,
    }


def parse_uuid(value: str) -> UUID | None:
    try:
        return UUID(value)
    except ValueError:
        return None
