"""LangChain tools for LinkedIn research via the Unipile API.

The tools return the cleaned documents serialized as JSON; the LLM reads
the camelCase fields directly.  Failures are reported as
``"Failed to …: <reason>"`` text.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx
from langchain_core.tools import tool

from sales_copilot.services.unipile_client import UnipileAPIError, get_unipile_client

logger = logging.getLogger(__name__)

# Anything a single lookup can fail with; reported to the LLM, never raised
_TOOL_ERRORS = (UnipileAPIError, httpx.HTTPError, ValueError)

DEFAULT_USER_SEARCH_LIMIT = 5


def _to_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def _failure(action: str, error: Exception) -> str:
    logger.error("Unipile: failed to %s: %s", action, error)
    return f"Failed to {action}: {error}"


@tool
def get_linkedin_profile(identifier: str) -> str:
    """Get a LinkedIn user profile by their public identifier.

    Args:
        identifier: The LinkedIn user's public identifier (e.g. "johndoe"
                    from linkedin.com/in/johndoe).
    """
    try:
        return _to_json(get_unipile_client().get_user_profile(identifier))
    except _TOOL_ERRORS as e:
        return _failure("get LinkedIn profile", e)


@tool
def search_linkedin_users(keywords: str, limit: int | None = None) -> str:
    """Search for LinkedIn users by keywords.

    Args:
        keywords: The search keywords (name, title, company...).
        limit: Maximum number of results to return. Defaults to 5.
    """
    try:
        results = get_unipile_client().search_linkedin(
            keywords, category="people", limit=limit or DEFAULT_USER_SEARCH_LIMIT,
        )
        return _to_json(results)
    except _TOOL_ERRORS as e:
        return _failure("search LinkedIn users", e)


@tool
def get_linkedin_posts(identifier: str, limit: int | None = None) -> str:
    """Get recent LinkedIn posts from a specific user.

    Args:
        identifier: The LinkedIn user's public identifier (e.g. "johndoe").
        limit: Maximum number of posts to return.
    """
    try:
        client = get_unipile_client()
        # Posts are keyed by provider id, not by the public slug
        profile = client.get_user_profile(identifier) or {}
        provider_id = profile.get("providerId")
        if not provider_id:
            return f"Failed to get LinkedIn posts: no LinkedIn profile found for {identifier!r}"
        return _to_json(client.get_user_posts(provider_id, limit=limit))
    except _TOOL_ERRORS as e:
        return _failure("get LinkedIn posts", e)


@tool
def get_linkedin_company(identifier: str) -> str:
    """Get details about a LinkedIn company page.

    Args:
        identifier: The LinkedIn company identifier (e.g. "linkedin"
                    from linkedin.com/company/linkedin).
    """
    try:
        return _to_json(get_unipile_client().get_company_profile(identifier))
    except _TOOL_ERRORS as e:
        return _failure("get LinkedIn company", e)


@tool
def search_linkedin_companies(keywords: str, limit: int | None = None) -> str:
    """Search for LinkedIn companies by keywords.

    Args:
        keywords: The search keywords.
        limit: Maximum number of results to return. Defaults to 10.
    """
    try:
        return _to_json(get_unipile_client().search_companies(keywords, limit=limit))
    except _TOOL_ERRORS as e:
        return _failure("search LinkedIn companies", e)


UNIPILE_TOOLS = [
    get_linkedin_profile,
    search_linkedin_users,
    get_linkedin_posts,
    get_linkedin_company,
    search_linkedin_companies,
]
