"""Tests for the HTTP API: chat turns, documents, health and startup."""

from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient
from langchain_core.messages import AIMessage, HumanMessage, ToolMessage

from sales_copilot.agent import SKIPPED_TOOL_RESULT
from sales_copilot.api.routes import turn_activity
from sales_copilot.services.document_store import DocumentStore, Suggestion
from sales_copilot.server import app


def _turn(*messages, reply: str = "Done."):
    """Agent result for a turn: the question, what happened, then the reply."""
    return {"messages": [HumanMessage(content="question"), *messages, AIMessage(content=reply)]}


def _tool_result(name: str, content, call_id: str = "c1") -> ToolMessage:
    if not isinstance(content, str):
        content = json.dumps(content)
    return ToolMessage(content=content, name=name, tool_call_id=call_id)


@pytest.fixture
def mock_agent():
    """A stand-in agent attached to app state the way the lifespan does."""
    agent = MagicMock()
    agent.invoke.return_value = _turn(reply="Who are we researching today?")
    app.state.agent = agent
    yield agent
    app.state.agent = None


@pytest.fixture
def client(mock_agent):
    return TestClient(app)


@pytest.fixture
def store():
    fresh = DocumentStore()
    with patch("sales_copilot.api.routes.document_store", fresh):
        yield fresh


def _chat(client, message="Research Apollo.io", session_id="s-1", **kwargs):
    return client.post("/api/chat", json={"message": message, "session_id": session_id}, **kwargs)


# ── /api/chat ────────────────────────────────────────────────────────


class TestChatEndpoint:
    def test_plain_reply_has_no_activity(self, client):
        data = _chat(client, session_id="s-42").json()
        assert data == {
            "reply": "Who are we researching today?",
            "session_id": "s-42",
            "tools_used": [],
            "documents": [],
        }

    def test_session_id_is_the_memory_thread(self, client, mock_agent):
        _chat(client, session_id="acme-q3")
        config = mock_agent.invoke.call_args.kwargs["config"]
        assert config["configurable"]["thread_id"] == "acme-q3"

    def test_reports_tools_used_this_turn(self, client, mock_agent):
        mock_agent.invoke.return_value = _turn(
            _tool_result("organization_enrichment", "### Apollo\n"),
            _tool_result("get_linkedin_company", {"name": "Apollo"}, "c2"),
            reply="Apollo is a sales intelligence platform.",
        )
        data = _chat(client).json()
        assert data["tools_used"] == ["organization_enrichment", "get_linkedin_company"]
        assert data["documents"] == []

    def test_reports_documents_written_this_turn(self, client, mock_agent):
        receipt = {"id": "doc-1", "title": "Intro email to Tim", "content": "created"}
        mock_agent.invoke.return_value = _turn(
            _tool_result("create_document", receipt),
            _tool_result("update_document", receipt, "c2"),
        )
        data = _chat(client, message="Draft an intro email to Tim").json()
        assert data["documents"] == [{"id": "doc-1", "title": "Intro email to Tim"}]
        assert data["tools_used"] == ["create_document", "update_document"]

    def test_content_blocks_are_flattened_to_text(self, client, mock_agent):
        mock_agent.invoke.return_value = {
            "messages": [AIMessage(content=[
                {"type": "text", "text": "Tim Zheng is "},
                {"type": "tool_use", "id": "t1", "name": "people_search", "input": {}},
                {"type": "text", "text": "Apollo's CEO."},
            ])]
        }
        assert _chat(client).json()["reply"] == "Tim Zheng is Apollo's CEO."

    @pytest.mark.parametrize(
        "body",
        [
            {"message": "", "session_id": "s"},
            {"message": "x" * 4001, "session_id": "s"},
            {"message": "Hello!"},
        ],
    )
    def test_invalid_request_is_rejected(self, client, body):
        assert client.post("/api/chat", json=body).status_code == 422

    def test_agent_error_is_not_leaked(self, client, mock_agent):
        mock_agent.invoke.side_effect = RuntimeError("Anthropic overloaded")
        response = _chat(client)
        assert response.status_code == 500
        detail = response.json()["detail"]
        assert "overloaded" not in detail
        assert "internal error" in detail.lower()

    def test_empty_agent_result_is_an_error(self, client, mock_agent):
        mock_agent.invoke.return_value = {"messages": []}
        assert _chat(client).status_code == 500

    def test_request_id_is_generated_or_echoed(self, client):
        assert _chat(client).headers["X-Request-ID"]
        echoed = _chat(client, headers={"X-Request-ID": "trace-123"})
        assert echoed.headers["X-Request-ID"] == "trace-123"


class TestTurnActivity:
    def test_earlier_turns_are_ignored(self):
        messages = [
            HumanMessage(content="first"),
            _tool_result("people_search", "### Tim\n"),
            AIMessage(content="Found Tim."),
            HumanMessage(content="second"),
            _tool_result("get_linkedin_profile", {"fullName": "Tim Zheng"}, "c2"),
            AIMessage(content="Here is his profile."),
        ]
        assert turn_activity(messages) == (["get_linkedin_profile"], [])

    def test_calls_cut_by_the_step_limit_are_left_out(self):
        messages = [
            HumanMessage(content="go"),
            _tool_result("people_search", "### Tim\n"),
            _tool_result("people_search", SKIPPED_TOOL_RESULT, "c2"),
        ]
        assert turn_activity(messages)[0] == ["people_search"]

    def test_document_error_results_are_not_documents(self):
        messages = [
            HumanMessage(content="update it"),
            _tool_result("update_document", {"error": "Document not found"}),
        ]
        assert turn_activity(messages) == (["update_document"], [])


# ── /api/documents ───────────────────────────────────────────────────


class TestDocumentsEndpoint:
    def test_returns_content_and_suggestions(self, client, store):
        store.save_document("doc-1", "Account brief: Apollo", "# Apollo\nSales data.")
        store.save_suggestions([
            Suggestion(
                document_id="doc-1",
                original_text="Sales data.",
                suggested_text="A sales intelligence platform.",
                description="Be specific",
            ),
        ])

        response = client.get("/api/documents/doc-1")

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Account brief: Apollo"
        assert data["content"] == "# Apollo\nSales data."
        (suggestion,) = data["suggestions"]
        assert suggestion["suggested_text"] == "A sales intelligence platform."
        assert suggestion["is_resolved"] is False

    def test_unknown_document_is_404(self, client, store):
        response = client.get("/api/documents/missing")
        assert response.status_code == 404
        assert response.json()["detail"] == "Document not found"


# ── /api/health and / ────────────────────────────────────────────────


class TestHealthEndpoint:
    def test_reports_model_and_readiness(self, client):
        data = client.get("/api/health").json()
        assert data["status"] == "ok"
        assert data["service"] == "sales-copilot"
        assert data["agent_ready"] is True
        assert data["model"]

    def test_not_ready_without_agent(self):
        app.state.agent = None
        data = TestClient(app).get("/api/health").json()
        assert data["agent_ready"] is False


def test_root_lists_endpoints(client):
    data = client.get("/").json()
    assert data["service"] == "Sales Copilot"
    assert "/api/documents/{document_id}" in data["endpoints"]


# ── Startup ──────────────────────────────────────────────────────────


class TestLifespan:
    @patch("sales_copilot.server.create_sales_copilot_agent")
    def test_agent_is_built_on_startup_and_dropped_on_shutdown(self, mock_create):
        with TestClient(app) as tc:
            assert app.state.agent is mock_create.return_value
            assert tc.get("/api/health").json()["agent_ready"] is True
        assert app.state.agent is None

    @patch("sales_copilot.server.create_sales_copilot_agent")
    @patch("sales_copilot.server.get_settings")
    def test_missing_config_stops_startup(self, mock_settings, mock_create):
        mock_settings.side_effect = OSError("Missing required configuration: UNIPILE_DSN.")
        with pytest.raises(OSError, match="UNIPILE_DSN"):
            with TestClient(app):
                pass
        mock_create.assert_not_called()

    @patch("sales_copilot.server.create_sales_copilot_agent")
    def test_chat_is_503_until_agent_exists(self, mock_create):
        with TestClient(app) as tc:
            app.state.agent = None
            response = _chat(tc)
        assert response.status_code == 503
        assert "starting up" in response.json()["detail"].lower()

    @patch("sales_copilot.server.metrics")
    @patch("sales_copilot.server.create_sales_copilot_agent")
    def test_metrics_flushed_on_shutdown(self, mock_create, mock_metrics):
        mock_metrics.flush.return_value = 0
        with TestClient(app):
            mock_metrics.flush.assert_not_called()
        mock_metrics.flush.assert_called_once()
