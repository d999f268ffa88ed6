"""LangChain tools over the Apollo people & company database.

Each tool validates its arguments against the matching params model, calls
the ApolloClient, and renders the cleaned result as markdown so the LLM can
quote it directly.  API failures come back as a short apology string rather
than an exception.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import httpx
from langchain_core.tools import tool
from pydantic import BaseModel

from sales_copilot.services import apollo_formatters as fmt
from sales_copilot.services.apollo_client import ApolloAPIError, get_apollo_client
from sales_copilot.services.apollo_params import (
    BulkPeopleEnrichmentParams,
    OrganizationEnrichmentParams,
    OrganizationJobPostingsParams,
    OrganizationSearchParams,
    PeopleEnrichmentParams,
    PeopleSearchParams,
)

logger = logging.getLogger(__name__)


def _run(
    action: str,
    call: Callable[[Any], Any],
    params: BaseModel,
    to_markdown: Callable[[Any], str],
) -> str:
    try:
        return to_markdown(call(params))
    except (ApolloAPIError, httpx.HTTPError, ValueError) as e:
        logger.error("Apollo %s failed: %s", action, e)
        return f"Sorry, I couldn't {action} in Apollo right now. Error: {e}."


@tool(args_schema=PeopleSearchParams)
def people_search(**params: Any) -> str:
    """Search for people in the Apollo database by name, title, location, seniority or employer."""
    return _run(
        "search for people",
        get_apollo_client().people_search,
        PeopleSearchParams(**params),
        fmt.people_search_to_markdown,
    )


@tool(args_schema=OrganizationSearchParams)
def organization_search(**params: Any) -> str:
    """Search for organizations in the Apollo database."""
    return _run(
        "search for organizations",
        get_apollo_client().organization_search,
        OrganizationSearchParams(**params),
        fmt.organization_search_to_markdown,
    )


@tool(args_schema=OrganizationJobPostingsParams)
def organization_job_postings(**params: Any) -> str:
    """Get an organization's open job postings from the Apollo database.

    Needs the Apollo organization id, which organization_search returns.
    """
    return _run(
        "fetch job postings",
        get_apollo_client().organization_job_postings,
        OrganizationJobPostingsParams(**params),
        fmt.organization_job_postings_to_markdown,
    )


@tool(args_schema=PeopleEnrichmentParams)
def people_enrichment(**params: Any) -> str:
    """Enrich data for a single person from Apollo (employment history, current company)."""
    return _run(
        "enrich that person",
        get_apollo_client().people_enrichment,
        PeopleEnrichmentParams(**params),
        fmt.people_enrichment_to_markdown,
    )


@tool(args_schema=BulkPeopleEnrichmentParams)
def bulk_people_enrichment(**params: Any) -> str:
    """Enrich data for up to 10 people in a single API call from Apollo."""
    return _run(
        "enrich those people",
        get_apollo_client().bulk_people_enrichment,
        BulkPeopleEnrichmentParams(**params),
        fmt.bulk_people_enrichment_to_markdown,
    )


@tool(args_schema=OrganizationEnrichmentParams)
def organization_enrichment(**params: Any) -> str:
    """Enrich data for a single organization from Apollo, looked up by its website domain."""
    return _run(
        "enrich that organization",
        get_apollo_client().organization_enrichment,
        OrganizationEnrichmentParams(**params),
        fmt.organization_enrichment_to_markdown,
    )


APOLLO_TOOLS = [
    people_search,
    organization_search,
    organization_job_postings,
    people_enrichment,
    bulk_people_enrichment,
    organization_enrichment,
]
