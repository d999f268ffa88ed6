"""FastAPI routes: chat with the copilot and read the documents it writes."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Request
from langchain_core.messages import AnyMessage, HumanMessage, ToolMessage

from sales_copilot.agent import SKIPPED_TOOL_RESULT
from sales_copilot.api.schemas import (
    ChatRequest,
    ChatResponse,
    DocumentRef,
    DocumentResponse,
    HealthResponse,
    SuggestionOut,
)
from sales_copilot.config import MODEL_NAME
from sales_copilot.services.document_store import document_store
from sales_copilot.tools.documents import DOCUMENT_TOOLS

logger = logging.getLogger(__name__)

router = APIRouter()

_DOCUMENT_TOOL_NAMES = frozenset(t.name for t in DOCUMENT_TOOLS)


def _get_agent(request: Request):
    """Return the agent compiled by the lifespan hook, or 503 while starting."""
    agent = getattr(request.app.state, "agent", None)
    if agent is None:
        raise HTTPException(
            status_code=503,
            detail="The agent is still starting up. Please try again in a moment.",
        )
    return agent


# ── Reading a finished turn ──────────────────────────────────────────


def message_text(message) -> str:
    """Flatten an AI message to plain text.

    Claude replies that accompany tool use arrive as a list of content
    blocks; only the text blocks are shown to the user.
    """
    content = getattr(message, "content", message)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(
            block if isinstance(block, str) else block.get("text", "")
            for block in content
            if isinstance(block, str) or block.get("type") == "text"
        )
    return str(content)


def _tool_payload(message: ToolMessage) -> dict[str, Any] | None:
    # Dict results are stored JSON-encoded in the tool message
    if not isinstance(message.content, str):
        return None
    try:
        payload = json.loads(message.content)
    except ValueError:
        return None
    return payload if isinstance(payload, dict) else None


def turn_activity(messages: list[AnyMessage]) -> tuple[list[str], list[DocumentRef]]:
    """Tools run and documents touched since the latest human message.

    Calls answered by the step limit never ran and are left out.  A document
    written several times in one turn is listed once.
    """
    start = 0
    for index in range(len(messages) - 1, -1, -1):
        if isinstance(messages[index], HumanMessage):
            start = index + 1
            break

    tools: list[str] = []
    documents: dict[str, DocumentRef] = {}
    for message in messages[start:]:
        if not isinstance(message, ToolMessage) or not message.name:
            continue
        if message.content == SKIPPED_TOOL_RESULT:
            continue
        tools.append(message.name)
        if message.name in _DOCUMENT_TOOL_NAMES:
            payload = _tool_payload(message)
            if payload and "id" in payload and "title" in payload:
                documents[payload["id"]] = DocumentRef(id=payload["id"], title=payload["title"])
    return tools, list(documents.values())


# ── Endpoints ────────────────────────────────────────────────────────


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request):
    """Liveness plus whether the lifespan finished compiling the agent."""
    agent_ready = getattr(request.app.state, "agent", None) is not None
    return HealthResponse(model=MODEL_NAME, agent_ready=agent_ready)


@router.post("/chat", response_model=ChatResponse)
async def chat(request: ChatRequest, http_request: Request):
    """Run one copilot turn for ``session_id``.

    ``agent.invoke()`` blocks on Anthropic and on the Apollo/Unipile calls
    its tools make, so it runs in the default thread pool.
    """
    agent = _get_agent(http_request)
    request_id = getattr(http_request.state, "request_id", "?")

    try:
        result = await asyncio.to_thread(
            agent.invoke,
            {"messages": [HumanMessage(content=request.message)]},
            config={"configurable": {"thread_id": request.session_id}},
        )
    except Exception as e:
        # Full traceback stays in the server log only
        logger.exception("[%s] Copilot turn failed", request_id)
        raise HTTPException(
            status_code=500,
            detail="An internal error occurred. Please try again.",
        ) from e

    messages = result.get("messages", [])
    if not messages:
        logger.error("[%s] Agent returned no messages", request_id)
        raise HTTPException(status_code=500, detail="Agent produced no response.")

    tools_used, documents = turn_activity(messages)
    if tools_used:
        logger.info("[%s] Tools used: %s", request_id, ", ".join(tools_used))

    return ChatResponse(
        reply=message_text(messages[-1]),
        session_id=request.session_id,
        tools_used=tools_used,
        documents=documents,
    )


@router.get("/documents/{document_id}", response_model=DocumentResponse)
async def get_document(document_id: str):
    """Latest version of a drafted document, with its review suggestions."""
    document = document_store.get_document(document_id)
    if document is None:
        raise HTTPException(status_code=404, detail="Document not found")
    return DocumentResponse(
        id=document.id,
        title=document.title,
        content=document.content,
        created_at=document.created_at,
        suggestions=[
            SuggestionOut(
                id=s.id,
                original_text=s.original_text,
                suggested_text=s.suggested_text,
                description=s.description,
                is_resolved=s.is_resolved,
            )
            for s in document_store.get_suggestions(document_id)
        ],
    )
