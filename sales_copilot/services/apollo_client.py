"""HTTP client for the Apollo.io REST API (people & company database).

Apollo docs: https://docs.apollo.io/reference
The API key travels as the ``api_key`` request parameter: inside the JSON
body for POST endpoints and in the query string for GET endpoints.

Each public method builds one request from a typed parameter model, performs
a single round-trip (no retries) and passes the decoded JSON through the
matching cleaner unless ``raw=True``.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel

from sales_copilot.config import ApolloConfig, get_settings
from sales_copilot.services import apollo_cleaners as cleaners
from sales_copilot.services.apollo_params import (
    BulkOrganizationEnrichmentParams,
    BulkPeopleEnrichmentParams,
    OrganizationEnrichmentParams,
    OrganizationJobPostingsParams,
    OrganizationSearchParams,
    PeopleEnrichmentParams,
    PeopleSearchParams,
)
from sales_copilot.services.metrics import metrics

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_SECONDS = 30.0

P = TypeVar("P", bound=BaseModel)


class ApolloAPIError(Exception):
    """Raised when Apollo answers with a non-2xx status."""

    def __init__(self, status_code: int, body: str, message: str | None = None):
        self.status_code = status_code
        self.body = body
        super().__init__(message or f"Apollo API error: {status_code}")


def _coerce(model: type[P], params: P | Mapping[str, Any]) -> P:
    """Accept either the params model or a plain dict of its fields."""
    if isinstance(params, model):
        return params
    return model.model_validate(params)


class ApolloClient:
    """Thin wrapper around the Apollo search and enrichment endpoints."""

    def __init__(self, config: ApolloConfig, *, http_client: httpx.Client | None = None):
        self._config = config
        self._client = http_client or httpx.Client(
            base_url=config.endpoint,
            headers={
                "Content-Type": "application/json",
                "Cache-Control": "no-cache",
            },
            timeout=REQUEST_TIMEOUT_SECONDS,
        )

    # ── Internal helpers ─────────────────────────────────────────────

    def _request(
        self,
        method: str,
        path: str,
        *,
        failure: str,
        params: dict[str, Any] | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> Any:
        """Execute one authenticated request and decode the JSON reply."""
        if json_body is not None:
            json_body = {"api_key": self._config.api_key, **json_body}
        else:
            params = {"api_key": self._config.api_key, **(params or {})}

        with metrics.timed("apollo", f"{method} {path}"):
            response = self._client.request(method, path, params=params, json=json_body)
            logger.debug("Apollo %s %s -> %d", method, path, response.status_code)
            if response.status_code >= 400:
                logger.warning("Apollo %s %s failed with %d", method, path, response.status_code)
                raise ApolloAPIError(response.status_code, response.text, failure)
            return response.json()

    @staticmethod
    def _finish(data: Any, cleaner: Callable[[Any], Any], raw: bool) -> Any:
        return data if raw else cleaner(data)

    # ── Search ───────────────────────────────────────────────────────

    def people_search(
        self, params: PeopleSearchParams | Mapping[str, Any], *, raw: bool = False,
    ) -> Any:
        """Search for people.  See https://docs.apollo.io/reference/people-search"""
        query = _coerce(PeopleSearchParams, params)
        data = self._request(
            "POST",
            "/v1/mixed_people/search",
            json_body=query.model_dump(exclude_none=True),
            failure="Failed to fetch people search results",
        )
        return self._finish(data, cleaners.clean_people_search, raw)

    def organization_search(
        self, params: OrganizationSearchParams | Mapping[str, Any], *, raw: bool = False,
    ) -> Any:
        """Search for companies.  See https://docs.apollo.io/reference/organization-search"""
        query = _coerce(OrganizationSearchParams, params)
        data = self._request(
            "POST",
            "/v1/mixed_companies/search",
            json_body=query.model_dump(exclude_none=True),
            failure="Failed to fetch organization search results",
        )
        return self._finish(data, cleaners.clean_organization_search, raw)

    def organization_job_postings(
        self, params: OrganizationJobPostingsParams | Mapping[str, Any], *, raw: bool = False,
    ) -> Any:
        """List a company's open roles.

        Raises ``ValueError`` (before any request) if ``organization_id`` is empty.
        """
        query = _coerce(OrganizationJobPostingsParams, params)
        data = self._request(
            "GET",
            f"/v1/organizations/{query.organization_id}/job_postings",
            params={"page": query.page, "per_page": query.per_page},
            failure="Failed to fetch organization job postings",
        )
        return self._finish(data, cleaners.clean_organization_job_postings, raw)

    # ── Enrichment ───────────────────────────────────────────────────

    def people_enrichment(
        self, params: PeopleEnrichmentParams | Mapping[str, Any], *, raw: bool = False,
    ) -> Any:
        """Full record for one identified person."""
        query = _coerce(PeopleEnrichmentParams, params)
        data = self._request(
            "POST",
            "/v1/people/match",
            json_body=query.model_dump(exclude_none=True),
            failure="Failed to fetch person enrichment data",
        )
        return self._finish(data, cleaners.clean_people_enrichment, raw)

    def bulk_people_enrichment(
        self, params: BulkPeopleEnrichmentParams | Mapping[str, Any], *, raw: bool = False,
    ) -> Any:
        """Full records for up to ten people in one call."""
        query = _coerce(BulkPeopleEnrichmentParams, params)
        data = self._request(
            "POST",
            "/v1/people/bulk_match",
            json_body=query.model_dump(exclude_none=True),
            failure="Failed to fetch bulk person enrichment data",
        )
        return self._finish(data, cleaners.clean_bulk_people_enrichment, raw)

    def organization_enrichment(
        self, params: OrganizationEnrichmentParams | Mapping[str, Any], *, raw: bool = False,
    ) -> Any:
        """Full record for one company, looked up by domain."""
        query = _coerce(OrganizationEnrichmentParams, params)
        data = self._request(
            "GET",
            "/v1/organizations/enrich",
            params={"domain": query.domain},
            failure="Failed to fetch organization enrichment data",
        )
        return self._finish(data, cleaners.clean_organization_enrichment, raw)

    def bulk_organization_enrichment(
        self, params: BulkOrganizationEnrichmentParams | Mapping[str, Any], *, raw: bool = False,
    ) -> Any:
        """Full records for up to ten company domains in one call."""
        query = _coerce(BulkOrganizationEnrichmentParams, params)
        data = self._request(
            "POST",
            "/v1/organizations/bulk_enrich",
            json_body={"domains": query.domains},
            failure="Failed to fetch bulk organization enrichment data",
        )
        return self._finish(data, cleaners.clean_bulk_organization_enrichment, raw)


# ── Module-level singleton (thread-safe) ────────────────────────────
_client: ApolloClient | None = None
_client_lock = threading.Lock()


def get_apollo_client() -> ApolloClient:
    """Return the process-wide ApolloClient, built from ``get_settings()``."""
    global _client
    if _client is None:
        with _client_lock:
            if _client is None:
                _client = ApolloClient(get_settings().apollo)
    return _client
