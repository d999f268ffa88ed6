"""In-memory storage for documents written by the document tools.

Documents and their review suggestions live for the lifetime of the process;
the store is shared by the tool threads of the server, so every access goes
through one lock.
"""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class Document:
    id: str
    title: str
    content: str
    created_at: datetime = field(default_factory=_now)


@dataclass(frozen=True)
class Suggestion:
    """A proposed sentence-level edit to a document."""

    document_id: str
    original_text: str
    suggested_text: str
    description: str
    id: str = field(default_factory=_new_id)
    is_resolved: bool = False
    created_at: datetime = field(default_factory=_now)


class DocumentStore:
    """Thread-safe map of document id -> latest version plus its suggestions."""

    def __init__(self) -> None:
        self._documents: dict[str, Document] = {}
        self._suggestions: dict[str, list[Suggestion]] = {}
        self._lock = threading.Lock()

    def save_document(self, document_id: str, title: str, content: str) -> Document:
        """Create the document, or replace the content of an existing one."""
        with self._lock:
            existing = self._documents.get(document_id)
            if existing is None:
                document = Document(id=document_id, title=title, content=content)
            else:
                document = replace(existing, title=title, content=content)
            self._documents[document_id] = document
        logger.debug("Saved document %s (%d chars)", document_id, len(content))
        return document

    def get_document(self, document_id: str) -> Document | None:
        with self._lock:
            return self._documents.get(document_id)

    def save_suggestions(self, suggestions: list[Suggestion]) -> None:
        with self._lock:
            for suggestion in suggestions:
                self._suggestions.setdefault(suggestion.document_id, []).append(suggestion)

    def get_suggestions(self, document_id: str) -> list[Suggestion]:
        with self._lock:
            return list(self._suggestions.get(document_id, []))

    def clear(self) -> None:
        with self._lock:
            self._documents.clear()
            self._suggestions.clear()


# Process-wide store used by the document tools
document_store = DocumentStore()
