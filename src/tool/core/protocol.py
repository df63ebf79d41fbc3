"""AgentTool protocol - contract for agent-facing tools.

Tools are atomic and act on behalf of an already-resolved caller. They
never raise for expected failures (unknown ids, permission denial);
those come back as ToolResult(status="error").
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from src.shared.types import User


@dataclass(frozen=True)
class ToolResult:
    """Generic tool execution result."""

    status: str  # success | error
    data: Any = None
    error: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return self.status == "success"

    @classmethod
    def ok(cls, data: Any) -> ToolResult:
        return cls(status="success", data=data)

    @classmethod
    def fail(cls, error: str, **metadata: Any) -> ToolResult:
        return cls(status="error", error=error, metadata=metadata)


class AgentTool(ABC):
    """Base class for agent tools."""

    name: ClassVar[str]
    description: ClassVar[str]
    INPUT_SCHEMA: ClassVar[dict[str, Any]]

    @abstractmethod
    async def execute(self, params: dict[str, Any], *, caller: User) -> ToolResult:
        """Run the tool for caller with already-parsed JSON params."""

    def describe(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.INPUT_SCHEMA,
        }


def require_str(params: dict[str, Any], key: str) -> str | None:
    """Return a stripped non-empty string param, or None."""
    value = params.get(key)
    if not isinstance(value, str) or not value.strip():
        return None
    return value.strip()
