"""Agent tool endpoints and the current-user context resource."""

from __future__ import annotations

from uuid import uuid4

import pytest

from src.gateway.api.tools import build_ask_with_context_text
from src.shared.types import GoalVisibility


@pytest.mark.unit
class TestToolCatalogue:
    async def test_lists_three_tools(self, client, org_tree, user_store, headers_for) -> None:
        user = user_store.add("Sam Ortiz", org_tree.platform)
        resp = await client.get("/api/v1/tools", headers=headers_for(user))
        assert resp.status_code == 200
        names = {t["name"] for t in resp.json()}
        assert names == {"get_parent_goals", "search_collaborator_goals", "submit_question"}
        assert all("input_schema" in t for t in resp.json())

    async def test_unknown_tool_404(self, client, org_tree, user_store, headers_for) -> None:
        user = user_store.add("Sam Ortiz", org_tree.platform)
        resp = await client.post(
            "/api/v1/tools/delete_everything", headers=headers_for(user), json={}
        )
        assert resp.status_code == 404


@pytest.mark.unit
class TestToolCalls:
    async def test_search_respects_visibility(
        self, client, org_tree, user_store, goal_store, headers_for
    ) -> None:
        user = user_store.add("Sam Ortiz", org_tree.platform)
        goal_store.add("Offline sync", org_tree.mobile, visibility=GoalVisibility.PRIVATE)
        goal_store.add("Sync latency under 1s", org_tree.mobile)

        resp = await client.post(
            "/api/v1/tools/search_collaborator_goals",
            headers=headers_for(user),
            json={"arguments": {"keyword": "sync"}},
        )

        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "success"
        assert [g["title"] for g in body["data"]] == ["Sync latency under 1s"]

    async def test_denied_question_is_tool_error(
        self, client, org_tree, user_store, goal_store, headers_for
    ) -> None:
        user = user_store.add("Dee Park", org_tree.acme)
        goal = goal_store.add("Harden replication", org_tree.storage)

        resp = await client.post(
            "/api/v1/tools/submit_question",
            headers=headers_for(user),
            json={"arguments": {"goal_id": str(goal.id), "question": "ETA?"}},
        )

        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "error"
        assert "DESCENDANT" in body["error"]
        assert body["metadata"] == {"relationship": "DESCENDANT"}

    async def test_deleted_user_token_rejected(self, client, org_tree, headers_for) -> None:
        from src.shared.types import User

        ghost = User(id=uuid4(), org_id=org_tree.platform.id, name="Ghost", email="g@example.com")
        resp = await client.post(
            "/api/v1/tools/get_parent_goals",
            headers=headers_for(ghost),
            json={"arguments": {"org_id": str(org_tree.platform.id)}},
        )
        assert resp.status_code == 401


@pytest.mark.unit
class TestCurrentUserContext:
    async def test_markdown_context(
        self, client, org_tree, user_store, goal_store, headers_for
    ) -> None:
        user = user_store.add("Sam Ortiz", org_tree.platform, job_function="Staff Engineer")
        goal_store.add("Cut p99 latency", org_tree.platform, progress=40)
        goal_store.add("Grow revenue 20%", org_tree.acme)

        resp = await client.get("/api/v1/context/current-user", headers=headers_for(user))

        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/markdown")
        text = resp.text
        assert "- **Role:** Staff Engineer" in text
        assert "- **Hierarchy:** Acme > Engineering > Platform" in text
        assert "**Cut p99 latency** (40%)" in text
        assert "### Acme" in text
        assert "Prefer boring technology." in text


@pytest.mark.unit
class TestAskWithContextPrompt:
    async def test_prompt_embeds_context_and_question(
        self, client, org_tree, user_store, goal_store, headers_for
    ) -> None:
        user = user_store.add("Sam Ortiz", org_tree.platform)
        goal_store.add("Cut p99 latency", org_tree.platform)

        resp = await client.get(
            "/api/v1/prompts/ask-with-context",
            headers=headers_for(user),
            params={"question": "What should I focus on?"},
        )

        assert resp.status_code == 200
        body = resp.json()
        assert body["name"] == "ask_with_context"
        [message] = body["messages"]
        assert message["role"] == "user"
        text = message["content"]["text"]
        assert text.startswith("Use the following organizational context to answer my question.")
        assert "**Cut p99 latency**" in text
        assert text.endswith("Question: What should I focus on?")

    async def test_prompt_without_question_uses_opener(
        self, client, org_tree, user_store, headers_for
    ) -> None:
        user = user_store.add("Sam Ortiz", org_tree.platform)
        resp = await client.get("/api/v1/prompts/ask-with-context", headers=headers_for(user))
        text = resp.json()["messages"][0]["content"]["text"]
        assert text.endswith("How can I help you today regarding your goals?")


@pytest.mark.unit
def test_prompt_text_without_context() -> None:
    text = build_ask_with_context_text(None, "Why?")
    assert "Context not available." in text
    assert text.endswith("Question: Why?")


@pytest.fixture
async def agent_client(org_tree, org_store, user_store, goal_store, comment_store, resolver):
    from httpx import ASGITransport, AsyncClient

    from src.gateway.api.tools import create_tool_router
    from src.gateway.app import create_app
    from src.services.context import UserContextBuilder
    from src.tool.implementations.submit_question import SubmitQuestionTool

    agent = user_store.add("Agent Smith", org_tree.platform)
    application = create_app(jwt_secret="test-secret-key-for-unit-tests-only")  # noqa: S106
    application.include_router(
        create_tool_router(
            tools=[
                SubmitQuestionTool(
                    resolver=resolver, goal_store=goal_store, comment_store=comment_store
                )
            ],
            user_store=user_store,
            context_builder=UserContextBuilder(
                user_store=user_store, org_store=org_store, goal_store=goal_store
            ),
            agent_user_id=agent.id,
        )
    )
    async with AsyncClient(transport=ASGITransport(app=application), base_url="http://test") as c:
        yield c, agent


@pytest.mark.unit
class TestAgentUserRestriction:
    async def test_other_token_cannot_act_as_agent(
        self, agent_client, org_tree, user_store, goal_store, comment_store, headers_for
    ) -> None:
        client, _ = agent_client
        outsider = user_store.add("Ola Berg", org_tree.globex)
        goal = goal_store.add("Offline sync", org_tree.mobile)

        resp = await client.post(
            "/api/v1/tools/submit_question",
            headers=headers_for(outsider),
            json={"arguments": {"goal_id": str(goal.id), "question": "ETA?"}},
        )

        assert resp.status_code == 403
        assert comment_store.comments == {}

    async def test_other_token_cannot_read_agent_context(
        self, agent_client, org_tree, user_store, headers_for
    ) -> None:
        client, _ = agent_client
        someone = user_store.add("Sam Ortiz", org_tree.sales)
        for path in ("/api/v1/context/current-user", "/api/v1/prompts/ask-with-context"):
            resp = await client.get(path, headers=headers_for(someone))
            assert resp.status_code == 403

    async def test_agent_token_acts_as_itself(
        self, agent_client, org_tree, goal_store, comment_store, headers_for
    ) -> None:
        client, agent = agent_client
        goal = goal_store.add("Offline sync", org_tree.mobile)

        resp = await client.post(
            "/api/v1/tools/submit_question",
            headers=headers_for(agent),
            json={"arguments": {"goal_id": str(goal.id), "question": "ETA?"}},
        )

        assert resp.json()["status"] == "success"
        [comment] = comment_store.comments.values()
        assert comment.author_id == agent.id
