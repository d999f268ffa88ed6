"""Typed parameter contracts for the Apollo API.

Each model mirrors one Apollo endpoint's request.  ``model_dump(exclude_none=True)``
is the exact body (or query string) sent on the wire, so unset optional
filters are never transmitted while the documented defaults always are.

The models double as the argument schemas of the LangChain tools, which is
why every field carries a ``description`` aimed at the LLM.

See https://docs.apollo.io/reference for the upstream field semantics.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, Field

MAX_BULK_RECORDS = 10

_PAGE = "Page number of results (1-based). Defaults to 1."
_PER_PAGE = "Results per page. Defaults to 10."
_EMPLOYEE_RANGES = 'Employee count ranges, lower and upper bound split by a comma, e.g. ["1,10", "250,500"].'


class PeopleSearchParams(BaseModel):
    """POST /v1/mixed_people/search"""

    q_person_name: str | None = Field(
        None, description='The person\'s name, e.g. "john smith" or just "elon".',
    )
    person_titles: list[str] | None = Field(
        None, description="Job titles. A person only needs to match one of them.",
    )
    include_similar_titles: bool = Field(
        True, description="Whether to include people with similar job titles. Defaults to true.",
    )
    person_locations: list[str] | None = Field(
        None, description="Cities, US states, and countries where people live.",
    )
    person_seniorities: list[str] | None = Field(
        None, description="Job seniority, e.g. 'senior', 'manager', 'executive'.",
    )
    organization_locations: list[str] | None = Field(
        None, description="Headquarters location of the person's employer.",
    )
    q_organization_domains_list: list[str] | None = Field(
        None, description="Employer domain names (current or previous), without www. or @.",
    )
    contact_email_status: list[str] | None = Field(
        None,
        description='Email statuses: "verified", "unverified", "likely to engage", "unavailable".',
    )
    organization_ids: list[str] | None = Field(None, description="Apollo IDs of employers.")
    organization_num_employees_ranges: list[str] | None = Field(None, description=_EMPLOYEE_RANGES)
    q_keywords: str | None = Field(None, description="Keywords to filter results.")
    page: int = Field(1, ge=1, description=_PAGE)
    per_page: int = Field(10, ge=1, description=_PER_PAGE)


class OrganizationSearchParams(BaseModel):
    """POST /v1/mixed_companies/search (not every upstream filter is exposed)"""

    q_organization_name: str | None = Field(None, description="The name of the organization.")
    organization_locations: list[str] | None = Field(None, description="Headquarters location.")
    q_organization_domains: list[str] | None = Field(
        None, description="Domain names of the organization.",
    )
    organization_num_employees_ranges: list[str] | None = Field(None, description=_EMPLOYEE_RANGES)
    organization_industries: list[str] | None = Field(
        None, description="Industries of the organization.",
    )
    page: int = Field(1, ge=1, description=_PAGE)
    per_page: int = Field(10, ge=1, description=_PER_PAGE)


class OrganizationJobPostingsParams(BaseModel):
    """GET /v1/organizations/{organization_id}/job_postings"""

    organization_id: str = Field(..., min_length=1, description="The Apollo ID of the company.")
    page: int = Field(1, ge=1, description=_PAGE)
    per_page: int = Field(10, ge=1, description=_PER_PAGE)


class PeopleEnrichmentParams(BaseModel):
    """POST /v1/people/match"""

    first_name: str | None = Field(None, description="The person's first name.")
    last_name: str | None = Field(None, description="The person's last name.")
    name: str | None = Field(None, description="The person's full name.")
    domain: str | None = Field(
        None, description="The domain name of the person's current employer.",
    )
    email: str | None = Field(None, description="The person's email address.")
    linkedin_url: str | None = Field(None, description="The person's LinkedIn URL.")
    reveal_personal_emails: bool = Field(
        False, description="Whether to reveal personal emails. Defaults to false.",
    )
    reveal_phone_number: bool = Field(
        False, description="Whether to reveal phone numbers. Defaults to false.",
    )


class BulkPeopleEnrichmentParams(BaseModel):
    """POST /v1/people/bulk_match: at most ten people per call."""

    details: list[PeopleEnrichmentParams] = Field(
        ...,
        min_length=1,
        max_length=MAX_BULK_RECORDS,
        description="The people to enrich (up to 10).",
    )
    reveal_personal_emails: bool = Field(
        False, description="Whether to reveal personal emails for everyone. Defaults to false.",
    )
    reveal_phone_number: bool = Field(
        False, description="Whether to reveal phone numbers for everyone. Defaults to false.",
    )


class OrganizationEnrichmentParams(BaseModel):
    """GET /v1/organizations/enrich"""

    domain: str = Field(
        ..., min_length=1, description="The domain name of the organization to enrich.",
    )


class BulkOrganizationEnrichmentParams(BaseModel):
    """POST /v1/organizations/bulk_enrich: at most ten domains per call."""

    domains: list[Annotated[str, Field(min_length=1)]] = Field(
        ...,
        min_length=1,
        max_length=MAX_BULK_RECORDS,
        description="Domain names to enrich (up to 10).",
    )
