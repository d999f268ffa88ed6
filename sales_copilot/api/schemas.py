"""Pydantic schemas for the Sales Copilot HTTP API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

MAX_MESSAGE_LENGTH = 4000


class ChatRequest(BaseModel):
    """One user turn: a research question or a drafting request."""

    message: str = Field(..., min_length=1, max_length=MAX_MESSAGE_LENGTH)
    session_id: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Conversation key; the agent's memory is kept per session",
    )


class DocumentRef(BaseModel):
    """A document the document tools created or changed during the turn."""

    id: str
    title: str


class ChatResponse(BaseModel):
    reply: str = Field(..., description="The copilot's answer as plain text")
    session_id: str
    tools_used: list[str] = Field(
        default_factory=list,
        description="Tools called while answering, in call order (repeats kept)",
    )
    documents: list[DocumentRef] = Field(
        default_factory=list,
        description="Documents to (re)load in the document panel",
    )


class SuggestionOut(BaseModel):
    id: str
    original_text: str
    suggested_text: str
    description: str
    is_resolved: bool


class DocumentResponse(BaseModel):
    """A stored document with the review suggestions made so far."""

    id: str
    title: str
    content: str
    created_at: datetime
    suggestions: list[SuggestionOut] = Field(default_factory=list)


class HealthResponse(BaseModel):
    status: str = "ok"
    service: str = "sales-copilot"
    model: str
    agent_ready: bool
