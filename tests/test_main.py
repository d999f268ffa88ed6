"""Tests for the terminal session helpers."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from sales_copilot.main import render_document
from sales_copilot.services.document_store import DocumentStore, Suggestion


@pytest.fixture
def store():
    fresh = DocumentStore()
    with patch("sales_copilot.main.document_store", fresh):
        yield fresh


def test_unknown_document(store):
    assert render_document("nope") == "No document with id nope"


def test_document_with_open_suggestions(store):
    store.save_document("d1", "Intro email", "Hi Tim, quick note.")
    store.save_suggestions([
        Suggestion(document_id="d1", original_text="quick note.", suggested_text="a short question.",
                   description="Lead with the ask"),
        Suggestion(document_id="d1", original_text="x", suggested_text="y",
                   description="already handled", is_resolved=True),
    ])

    text = render_document("d1")

    assert text.startswith("== Intro email ==\nHi Tim, quick note.\n")
    assert "-- 1 suggestion(s) --" in text
    assert "  + a short question." in text
    assert "already handled" not in text
