"""LangChain tools that let the agent draft and review documents.

Drafts are produced by a separate writer model (``DOCUMENT_MODEL_NAME``)
streamed token by token and stored in the in-memory ``document_store``.  The
tools hand the agent a short receipt instead of the full text, which the UI
fetches on its own.
"""

from __future__ import annotations

import logging
import uuid
from functools import lru_cache
from typing import Any

from langchain_anthropic import ChatAnthropic
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_core.tools import tool
from pydantic import BaseModel, Field

from sales_copilot.config import DOCUMENT_MODEL_NAME, get_settings
from sales_copilot.services.document_store import Suggestion, document_store
from sales_copilot.services.metrics import metrics

logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 5

CREATE_PROMPT = "Write about the given topic. Markdown is supported. Use headings wherever appropriate."
UPDATE_PROMPT = (
    "You are a helpful writing assistant. "
    "Based on the description, please update the piece of writing."
)
SUGGEST_PROMPT = (
    "You are a helpful writing assistant. Given a piece of writing, please offer "
    "suggestions to improve the piece of writing and describe the change. It is "
    "very important for the edits to contain full sentences instead of just words. "
    f"Max {MAX_SUGGESTIONS} suggestions."
)


class SuggestionDraft(BaseModel):
    original_sentence: str = Field(description="The original sentence")
    suggested_sentence: str = Field(description="The suggested sentence")
    description: str = Field(description="The description of the suggestion")


class SuggestionList(BaseModel):
    suggestions: list[SuggestionDraft] = Field(description="Up to 5 suggested edits")


@lru_cache(maxsize=1)
def _get_writer() -> ChatAnthropic:
    return ChatAnthropic(
        model=DOCUMENT_MODEL_NAME,
        api_key=get_settings().anthropic_api_key,
        temperature=0.7,
        max_tokens=4096,
    )


def _chunk_text(chunk: Any) -> str:
    content = chunk.content
    if isinstance(content, str):
        return content
    return "".join(
        block.get("text", "")
        for block in content
        if isinstance(block, dict) and block.get("type") == "text"
    )


def _stream_draft(messages: list, operation: str) -> str:
    """Stream a draft from the writer model and return the full text."""
    parts: list[str] = []
    with metrics.timed("anthropic", operation):
        for chunk in _get_writer().stream(messages):
            parts.append(_chunk_text(chunk))
    draft = "".join(parts)
    logger.debug("%s produced %d chars", operation, len(draft))
    return draft


@tool
def create_document(title: str) -> dict:
    """Create a document for a writing activity (e.g. an outreach email or account brief).

    Args:
        title: The title or topic of the document.
    """
    document_id = str(uuid.uuid4())
    draft = _stream_draft(
        [SystemMessage(content=CREATE_PROMPT), HumanMessage(content=title)],
        "document_create",
    )
    document_store.save_document(document_id, title, draft)
    return {
        "id": document_id,
        "title": title,
        "content": "A document was created and is now visible to the user.",
    }


@tool
def update_document(id: str, description: str) -> dict:
    """Update a document with the given description.

    Args:
        id: The ID of the document to update.
        description: The description of changes that need to be made.
    """
    document = document_store.get_document(id)
    if document is None:
        return {"error": "Document not found"}
    if not document.content:
        return {"error": "Document has no content"}

    draft = _stream_draft(
        [
            SystemMessage(content=UPDATE_PROMPT),
            HumanMessage(content=description),
            HumanMessage(content=document.content),
        ],
        "document_update",
    )
    document_store.save_document(id, document.title, draft)
    return {
        "id": id,
        "title": document.title,
        "content": "The document has been updated successfully.",
    }


@tool
def request_suggestions(document_id: str) -> dict:
    """Request suggestions for a document.

    Args:
        document_id: The ID of the document to request edits for.
    """
    document = document_store.get_document(document_id)
    if document is None or not document.content:
        return {"error": "Document not found"}

    reviewer = _get_writer().with_structured_output(SuggestionList)
    with metrics.timed("anthropic", "document_suggest"):
        result = reviewer.invoke(
            [SystemMessage(content=SUGGEST_PROMPT), HumanMessage(content=document.content)]
        )

    suggestions = [
        Suggestion(
            document_id=document_id,
            original_text=draft.original_sentence,
            suggested_text=draft.suggested_sentence,
            description=draft.description,
        )
        for draft in result.suggestions[:MAX_SUGGESTIONS]
    ]
    document_store.save_suggestions(suggestions)
    logger.info("Stored %d suggestions for document %s", len(suggestions), document_id)

    return {
        "id": document_id,
        "title": document.title,
        "message": "Suggestions have been added to the document",
    }


DOCUMENT_TOOLS = [create_document, update_document, request_suggestions]
