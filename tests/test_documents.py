"""Tests for the document store and the document-authoring tools."""

from __future__ import annotations

import threading
from unittest.mock import MagicMock, patch

import pytest
from langchain_core.messages import AIMessageChunk

from sales_copilot.services.document_store import DocumentStore, Suggestion
from sales_copilot.tools.documents import (
    MAX_SUGGESTIONS,
    SuggestionDraft,
    SuggestionList,
    create_document,
    request_suggestions,
    update_document,
)


@pytest.fixture
def store():
    fresh = DocumentStore()
    with patch("sales_copilot.tools.documents.document_store", fresh):
        yield fresh


@pytest.fixture
def writer():
    llm = MagicMock()
    with patch("sales_copilot.tools.documents._get_writer", return_value=llm):
        yield llm


def _stream(*parts):
    return [AIMessageChunk(content=part) for part in parts]


# ── DocumentStore ────────────────────────────────────────────────────


class TestDocumentStore:
    def test_save_then_get(self):
        store = DocumentStore()
        store.save_document("d1", "Brief", "Hello")
        doc = store.get_document("d1")
        assert (doc.title, doc.content) == ("Brief", "Hello")

    def test_update_keeps_creation_time(self):
        store = DocumentStore()
        first = store.save_document("d1", "Brief", "v1")
        second = store.save_document("d1", "Brief", "v2")
        assert second.content == "v2"
        assert second.created_at == first.created_at

    def test_unknown_document_is_none(self):
        assert DocumentStore().get_document("missing") is None

    def test_suggestions_are_grouped_by_document(self):
        store = DocumentStore()
        store.save_suggestions([
            Suggestion(document_id="d1", original_text="a", suggested_text="b", description="c"),
            Suggestion(document_id="d2", original_text="x", suggested_text="y", description="z"),
        ])
        (only,) = store.get_suggestions("d1")
        assert only.original_text == "a"
        assert only.is_resolved is False

    def test_concurrent_saves_are_all_kept(self):
        store = DocumentStore()
        threads = [
            threading.Thread(target=store.save_document, args=(f"d{i}", "t", "c"))
            for i in range(20)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert all(store.get_document(f"d{i}") for i in range(20))


# ── create_document ──────────────────────────────────────────────────


class TestCreateDocument:
    def test_streams_and_stores_draft(self, store, writer):
        writer.stream.return_value = _stream("# Acme brief\n", "Acme sells ", "anvils.")

        result = create_document.invoke({"title": "Acme brief"})

        assert result["title"] == "Acme brief"
        assert result["content"] == "A document was created and is now visible to the user."
        stored = store.get_document(result["id"])
        assert stored.content == "# Acme brief\nAcme sells anvils."

    def test_block_content_chunks_are_joined(self, store, writer):
        writer.stream.return_value = [
            AIMessageChunk(content=[{"type": "text", "text": "Hello ", "index": 0}]),
            AIMessageChunk(content=[{"type": "text", "text": "world", "index": 0}]),
        ]
        result = create_document.invoke({"title": "Greeting"})
        assert store.get_document(result["id"]).content == "Hello world"


# ── update_document ──────────────────────────────────────────────────


class TestUpdateDocument:
    def test_unknown_document(self, store, writer):
        assert update_document.invoke({"id": "missing", "description": "shorter"}) == {
            "error": "Document not found",
        }
        writer.stream.assert_not_called()

    def test_document_without_content(self, store, writer):
        store.save_document("d1", "Empty", "")
        assert update_document.invoke({"id": "d1", "description": "expand"}) == {
            "error": "Document has no content",
        }

    def test_rewrites_content(self, store, writer):
        store.save_document("d1", "Email", "Hi Tim, long intro...")
        writer.stream.return_value = _stream("Hi Tim, short intro.")

        result = update_document.invoke({"id": "d1", "description": "make it shorter"})

        assert result == {
            "id": "d1", "title": "Email", "content": "The document has been updated successfully.",
        }
        assert store.get_document("d1").content == "Hi Tim, short intro."
        messages = writer.stream.call_args.args[0]
        assert [m.content for m in messages[1:]] == ["make it shorter", "Hi Tim, long intro..."]


# ── request_suggestions ──────────────────────────────────────────────


class TestRequestSuggestions:
    def test_unknown_document(self, store, writer):
        assert request_suggestions.invoke({"document_id": "missing"}) == {"error": "Document not found"}

    def test_stores_at_most_five_suggestions(self, store, writer):
        store.save_document("d1", "Email", "Some text.")
        drafts = [
            SuggestionDraft(
                original_sentence=f"s{i}", suggested_sentence=f"S{i}", description="tighten",
            )
            for i in range(7)
        ]
        writer.with_structured_output.return_value.invoke.return_value = SuggestionList(
            suggestions=drafts,
        )

        result = request_suggestions.invoke({"document_id": "d1"})

        assert result == {
            "id": "d1", "title": "Email", "message": "Suggestions have been added to the document",
        }
        stored = store.get_suggestions("d1")
        assert len(stored) == MAX_SUGGESTIONS
        assert stored[0].original_text == "s0"
        assert stored[0].suggested_text == "S0"
        assert len({s.id for s in stored}) == MAX_SUGGESTIONS
        assert not any(s.is_resolved for s in stored)
