"""Agent-facing tool, context and prompt endpoints.

- GET  /api/v1/tools                        -> tool catalogue (name, description, input_schema)
- POST /api/v1/tools/{name}                 -> run a tool as the authenticated user
- GET  /api/v1/context/current-user         -> markdown context for the authenticated user
- GET  /api/v1/prompts/ask-with-context     -> prompt messages embedding that context

Every endpoint acts as the token's user. When an agent user id is
configured, the agent layer is reserved for that user: tokens of anyone
else are refused with 403.

Tool failures (unknown ids, permission denial) are returned as
{"status": "error", ...} with HTTP 200 so an assistant can read them.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field

from src.services.context import format_user_context
from src.shared.errors import AuthenticationError, AuthorizationError, NotFoundError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from src.ports.user_store import UserStore
    from src.services.context import UserContextBuilder
    from src.shared.types import User
    from src.tool.core.protocol import AgentTool

logger = logging.getLogger(__name__)

ASK_WITH_CONTEXT_PROMPT = "ask_with_context"
_NO_CONTEXT = "Context not available."
_DEFAULT_QUESTION = "How can I help you today regarding your goals?"


class ToolCallRequest(BaseModel):
    arguments: dict[str, Any] = Field(default_factory=dict)


class ToolCallResponse(BaseModel):
    status: str
    data: Any = None
    error: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class PromptContent(BaseModel):
    type: str = "text"
    text: str


class PromptMessage(BaseModel):
    role: str = "user"
    content: PromptContent


class PromptResponse(BaseModel):
    name: str
    messages: list[PromptMessage]


def build_ask_with_context_text(context_markdown: str | None, question: str | None) -> str:
    """Prompt text: the user's context followed by the question (or a default opener)."""
    tail = f"Question: {question}" if question else _DEFAULT_QUESTION
    return (
        "Use the following organizational context to answer my question.\n\n"
        f"{context_markdown or _NO_CONTEXT}\n\n{tail}"
    )


def create_tool_router(
    *,
    tools: Sequence[AgentTool],
    user_store: UserStore,
    context_builder: UserContextBuilder,
    agent_user_id: UUID | None = None,
) -> APIRouter:
    """Create tool API router over a fixed set of tools."""
    router = APIRouter(prefix="/api/v1", tags=["tools"])
    registry: dict[str, AgentTool] = {tool.name: tool for tool in tools}

    def _acting_user_id(request: Request) -> UUID:
        user_id: UUID = request.state.user_id
        if agent_user_id is not None and user_id != agent_user_id:
            logger.warning("Agent endpoint refused for user=%s", user_id)
            raise AuthorizationError("agent:invoke")
        return user_id

    async def _caller(request: Request) -> User:
        user = await user_store.get_by_id(_acting_user_id(request))
        if user is None:
            raise AuthenticationError("Acting user no longer exists")
        return user

    @router.get("/tools")
    async def list_tools(request: Request) -> list[dict[str, Any]]:
        _acting_user_id(request)
        return [tool.describe() for tool in registry.values()]

    @router.post("/tools/{name}", response_model=ToolCallResponse)
    async def call_tool(name: str, body: ToolCallRequest, request: Request) -> ToolCallResponse:
        caller = await _caller(request)
        tool = registry.get(name)
        if tool is None:
            raise NotFoundError("Tool", name)

        result = await tool.execute(body.arguments, caller=caller)
        if not result.success:
            logger.info("Tool %s failed for user=%s: %s", name, caller.id, result.error)
        return ToolCallResponse(
            status=result.status,
            data=result.data,
            error=result.error,
            metadata=result.metadata,
        )

    @router.get("/context/current-user", response_class=PlainTextResponse)
    async def current_user_context(request: Request) -> PlainTextResponse:
        user_id = _acting_user_id(request)
        context = await context_builder.build(user_id)
        if context is None:
            raise NotFoundError("User", str(user_id))
        return PlainTextResponse(format_user_context(context), media_type="text/markdown")

    @router.get("/prompts/ask-with-context", response_model=PromptResponse)
    async def ask_with_context(request: Request, question: str | None = None) -> PromptResponse:
        context = await context_builder.build(_acting_user_id(request))
        markdown = format_user_context(context) if context is not None else None
        text = build_ask_with_context_text(markdown, (question or "").strip() or None)
        return PromptResponse(
            name=ASK_WITH_CONTEXT_PROMPT,
            messages=[PromptMessage(content=PromptContent(text=text))],
        )

    return router
