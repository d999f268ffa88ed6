"""HTTP client for the Unipile API (LinkedIn profiles, posts, messaging).

Unipile docs: https://developer.unipile.com/reference
Authentication is the ``X-API-KEY`` header.  Every call is scoped to one
connected LinkedIn account: ``account_id`` goes in the query string for GET
requests and in the JSON body for POST requests.  The id is taken from the
call's ``account_id`` argument, else from ``UnipileConfig.account_id``.

Identifiers and contents are validated before any request is issued.
Mutating calls (messages, invitations, posts, follows) are sent exactly once;
a failure surfaces as ``UnipileAPIError`` and is never retried.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any, Literal
from urllib.parse import quote

import httpx

from sales_copilot.config import UnipileConfig, get_settings
from sales_copilot.services import unipile_cleaners as cleaners
from sales_copilot.services.metrics import metrics

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_SECONDS = 30.0
DEFAULT_SEARCH_LIMIT = 10

SearchApi = Literal["classic", "recruiter", "sales_navigator"]
SearchCategory = Literal["people", "companies", "jobs", "groups", "schools", "content"]


class UnipileAPIError(Exception):
    """Raised when Unipile answers with a non-2xx status."""

    def __init__(self, status_code: int, body: str, message: str | None = None):
        self.status_code = status_code
        self.body = body
        super().__init__(message or f"Unipile API error: {status_code}")


def _require(value: str | None, what: str) -> str:
    if not value:
        raise ValueError(f"{what} is required")
    return value


def _segment(value: str) -> str:
    """Escape an identifier for use as a single URL path segment."""
    return quote(value, safe="")


def _paging(cursor: str | None, limit: int | None) -> dict[str, Any]:
    page: dict[str, Any] = {}
    if cursor:
        page["cursor"] = cursor
    if limit:
        page["limit"] = limit
    return page


class UnipileClient:
    """Thin wrapper around the Unipile LinkedIn endpoints."""

    def __init__(self, config: UnipileConfig, *, http_client: httpx.Client | None = None):
        self._config = config
        self._client = http_client or httpx.Client(
            base_url=config.base_url,
            headers=config.headers,
            timeout=REQUEST_TIMEOUT_SECONDS,
        )

    # ── Internal helpers ─────────────────────────────────────────────

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> Any:
        with metrics.timed("unipile", f"{method} {path}"):
            response = self._client.request(method, path, params=params, json=json_body)
            logger.debug("Unipile %s %s -> %d", method, path, response.status_code)
            if response.status_code >= 400:
                logger.warning("Unipile %s %s failed with %d", method, path, response.status_code)
                raise UnipileAPIError(response.status_code, response.text)
            return response.json()

    def _get(
        self,
        path: str,
        account_id: str | None,
        cleaner: Callable[[Any], Any],
        raw: bool,
        **query: Any,
    ) -> Any:
        params = {"account_id": self._config.resolve_account_id(account_id), **query}
        data = self._request("GET", path, params=params)
        return data if raw else cleaner(data)

    def _post(
        self,
        path: str,
        account_id: str | None,
        cleaner: Callable[[Any], Any],
        raw: bool,
        params: dict[str, Any] | None = None,
        **body: Any,
    ) -> Any:
        payload = {"account_id": self._config.resolve_account_id(account_id), **body}
        data = self._request("POST", path, params=params, json_body=payload)
        return data if raw else cleaner(data)

    # ── Users ────────────────────────────────────────────────────────

    def get_account_owner_profile(self, account_id: str | None = None, *, raw: bool = False) -> Any:
        """Profile of the LinkedIn account the requests are made on behalf of."""
        return self._get("/api/v1/users/me", account_id, cleaners.clean_account_owner_profile, raw)

    def get_user_profile(
        self, identifier: str, account_id: str | None = None, *, raw: bool = False,
    ) -> Any:
        """Look up a member by public identifier (``johndoe``) or provider id."""
        _require(identifier, "User identifier")
        return self._get(
            f"/api/v1/users/{_segment(identifier)}", account_id, cleaners.clean_user_profile, raw,
        )

    def search_linkedin(
        self,
        keywords: str,
        account_id: str | None = None,
        *,
        api: SearchApi = "classic",
        category: SearchCategory = "people",
        limit: int | None = DEFAULT_SEARCH_LIMIT,
        raw: bool = False,
    ) -> Any:
        """Keyword search.  Company hits use the company cleaner."""
        _require(keywords, "Search keywords")
        account = self._config.resolve_account_id(account_id)
        cleaner = (
            cleaners.clean_company_search_results
            if category == "companies"
            else cleaners.clean_search_results
        )
        return self._post(
            "/api/v1/linkedin/search",
            account,
            cleaner,
            raw,
            params={"account_id": account},
            api=api,
            category=category,
            keywords=keywords,
            limit=limit or DEFAULT_SEARCH_LIMIT,
        )

    def get_relations(
        self,
        account_id: str | None = None,
        cursor: str | None = None,
        limit: int | None = None,
        *,
        raw: bool = False,
    ) -> Any:
        """First-degree connections of the account owner."""
        return self._get(
            "/api/v1/users/relations", account_id, cleaners.clean_user_relations, raw,
            **_paging(cursor, limit),
        )

    def get_invitations_sent(
        self,
        account_id: str | None = None,
        cursor: str | None = None,
        limit: int | None = None,
        *,
        raw: bool = False,
    ) -> Any:
        return self._get(
            "/api/v1/users/invite/sent", account_id, cleaners.clean_invitations_sent, raw,
            **_paging(cursor, limit),
        )

    def get_invitations_received(
        self,
        account_id: str | None = None,
        cursor: str | None = None,
        limit: int | None = None,
        *,
        raw: bool = False,
    ) -> Any:
        return self._get(
            "/api/v1/users/invite/received", account_id, cleaners.clean_invitations_received, raw,
            **_paging(cursor, limit),
        )

    def send_invitation(
        self,
        recipient: str,
        message: str | None = None,
        account_id: str | None = None,
        *,
        raw: bool = False,
    ) -> Any:
        """Send a connection request, optionally with a note."""
        _require(recipient, "Recipient")
        extra = {"message": message} if message else {}
        return self._post(
            "/api/v1/users/invite", account_id, cleaners.clean_send_invitation_response, raw,
            recipient=recipient, **extra,
        )

    # ── Posts ────────────────────────────────────────────────────────

    def get_user_posts(
        self,
        user_id: str,
        account_id: str | None = None,
        cursor: str | None = None,
        limit: int | None = None,
        *,
        raw: bool = False,
    ) -> Any:
        """Posts by a member.  ``user_id`` is the provider id, not the public slug."""
        _require(user_id, "User ID")
        return self._get(
            f"/api/v1/users/{_segment(user_id)}/posts", account_id, cleaners.clean_user_posts, raw,
            **_paging(cursor, limit),
        )

    def get_user_comments(
        self,
        user_id: str,
        account_id: str | None = None,
        cursor: str | None = None,
        limit: int | None = None,
        *,
        raw: bool = False,
    ) -> Any:
        _require(user_id, "User ID")
        return self._get(
            f"/api/v1/users/{_segment(user_id)}/comments", account_id,
            cleaners.clean_post_comments, raw,
            **_paging(cursor, limit),
        )

    def create_post(
        self,
        content: str,
        visibility: Literal["connections", "public"] = "connections",
        account_id: str | None = None,
        *,
        raw: bool = False,
    ) -> Any:
        _require(content, "Post content")
        return self._post(
            "/api/v1/posts", account_id, cleaners.clean_create_post_response, raw,
            content=content, visibility=visibility,
        )

    def get_post(self, post_id: str, account_id: str | None = None, *, raw: bool = False) -> Any:
        _require(post_id, "Post ID")
        return self._get(f"/api/v1/posts/{_segment(post_id)}", account_id, cleaners.clean_post, raw)

    def get_post_comments(
        self,
        post_id: str,
        account_id: str | None = None,
        cursor: str | None = None,
        limit: int | None = None,
        *,
        raw: bool = False,
    ) -> Any:
        _require(post_id, "Post ID")
        return self._get(
            f"/api/v1/posts/{_segment(post_id)}/comments", account_id,
            cleaners.clean_post_comments, raw,
            **_paging(cursor, limit),
        )

    def comment_on_post(
        self, post_id: str, content: str, account_id: str | None = None, *, raw: bool = False,
    ) -> Any:
        _require(post_id, "Post ID")
        _require(content, "Comment content")
        return self._post(
            f"/api/v1/posts/{_segment(post_id)}/comments", account_id,
            cleaners.clean_comment_on_post_response, raw,
            content=content,
        )

    # ── Messaging ────────────────────────────────────────────────────

    def get_chats(
        self,
        account_id: str | None = None,
        cursor: str | None = None,
        limit: int | None = None,
        *,
        raw: bool = False,
    ) -> Any:
        return self._get(
            "/api/v1/chats", account_id, cleaners.clean_chats, raw, **_paging(cursor, limit),
        )

    def get_chat_messages(
        self,
        chat_id: str,
        account_id: str | None = None,
        cursor: str | None = None,
        limit: int | None = None,
        *,
        raw: bool = False,
    ) -> Any:
        _require(chat_id, "Chat ID")
        return self._get(
            f"/api/v1/chats/{_segment(chat_id)}/messages", account_id,
            cleaners.clean_chat_messages, raw,
            **_paging(cursor, limit),
        )

    def send_message(
        self,
        chat_id: str,
        content: str,
        account_id: str | None = None,
        *,
        message_type: Literal["text", "html"] = "text",
        attachments: list[dict[str, Any]] | None = None,
        raw: bool = False,
    ) -> Any:
        """Post a message into an existing chat."""
        _require(chat_id, "Chat ID")
        _require(content, "Message content")
        extra = {"attachments": attachments} if attachments else {}
        return self._post(
            f"/api/v1/chats/{_segment(chat_id)}/messages", account_id,
            cleaners.clean_send_message_response, raw,
            content=content, type=message_type, **extra,
        )

    def create_chat(
        self, recipient_id: str, account_id: str | None = None, *, raw: bool = False,
    ) -> Any:
        """Open a new conversation with ``recipient_id``."""
        _require(recipient_id, "Recipient ID")
        return self._post(
            "/api/v1/chats", account_id, cleaners.clean_create_chat_response, raw,
            attendee_id=recipient_id,
        )

    def send_inmail(
        self,
        recipient_id: str,
        subject: str,
        content: str,
        account_id: str | None = None,
        *,
        raw: bool = False,
    ) -> Any:
        """Message someone outside the account's network (needs InMail credits)."""
        _require(recipient_id, "Recipient ID")
        _require(subject, "InMail subject")
        _require(content, "InMail content")
        return self._post(
            "/api/v1/linkedin/inmail", account_id, cleaners.clean_send_message_response, raw,
            recipient_id=recipient_id, subject=subject, content=content,
        )

    # ── Companies ────────────────────────────────────────────────────

    def get_company_profile(
        self, identifier: str, account_id: str | None = None, *, raw: bool = False,
    ) -> Any:
        _require(identifier, "Company identifier")
        return self._get(
            f"/api/v1/linkedin/company/{_segment(identifier)}", account_id,
            cleaners.clean_company_profile, raw,
        )

    def search_companies(
        self,
        keywords: str,
        account_id: str | None = None,
        limit: int | None = DEFAULT_SEARCH_LIMIT,
        *,
        raw: bool = False,
    ) -> Any:
        return self.search_linkedin(
            keywords, account_id, category="companies", limit=limit, raw=raw,
        )

    def follow_company(
        self, company_id: str, account_id: str | None = None, *, raw: bool = False,
    ) -> Any:
        _require(company_id, "Company ID")
        return self._post(
            f"/api/v1/linkedin/company/{_segment(company_id)}/follow", account_id,
            cleaners.clean_follow_response, raw,
        )

    def unfollow_company(
        self, company_id: str, account_id: str | None = None, *, raw: bool = False,
    ) -> Any:
        _require(company_id, "Company ID")
        return self._post(
            f"/api/v1/linkedin/company/{_segment(company_id)}/unfollow", account_id,
            cleaners.clean_follow_response, raw,
        )


# ── Module-level singleton (thread-safe) ────────────────────────────
_client: UnipileClient | None = None
_client_lock = threading.Lock()


def get_unipile_client() -> UnipileClient:
    """Return the process-wide UnipileClient, built from ``get_settings()``."""
    global _client
    if _client is None:
        with _client_lock:
            if _client is None:
                _client = UnipileClient(get_settings().unipile)
    return _client
