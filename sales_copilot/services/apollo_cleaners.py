"""Reshape raw Apollo responses into compact, LLM-friendly documents.

Apollo returns very wide records (hundreds of keys per person, most of them
``null``).  The cleaners project each record onto a handful of readable
fields and **omit** any field whose source value is missing: a cleaned
record never contains a key that maps to ``None``.

All cleaners are pure and tolerate junk input: a missing, empty or
non-mapping response yields the documented empty shape, e.g.
``clean_people_search({}) == {"people": []}``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypedDict

MAX_KEYWORDS = 10


class Job(TypedDict, total=False):
    title: str
    organization_name: str
    start_date: str
    end_date: str


class Organization(TypedDict, total=False):
    name: str
    website_url: str
    linkedin_url: str
    domain: str
    founded_year: int
    revenue: str
    employees: int
    industry: str
    latest_funding: str
    total_funding: str
    description: str
    keywords: list[str]


class Person(TypedDict, total=False):
    name: str
    title: str
    headline: str
    linkedin_url: str
    location: str
    current_organization: Organization
    employment_history: list[Job]


class JobPosting(TypedDict, total=False):
    title: str
    url: str
    location: str
    content: str
    posted_date: str


def _present(**fields: Any) -> dict[str, Any]:
    """Keep only the fields that have a value (``None`` means absent)."""
    return {key: value for key, value in fields.items() if value is not None}


def _records(response: Any, key: str) -> list[Mapping[str, Any]]:
    """Return the mapping entries of ``response[key]``, or ``[]``."""
    if not isinstance(response, Mapping):
        return []
    items = response.get(key)
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, Mapping)]


# ── Record cleaners ──────────────────────────────────────────────────


def clean_job(job: Mapping[str, Any]) -> Job:
    """One employment-history entry; open-ended jobs end at ``"Present"``."""
    return _present(
        title=job.get("title"),
        organization_name=job.get("organization_name"),
        start_date=job.get("start_date"),
        end_date=job.get("end_date") or "Present",
    )


def clean_organization(org: Mapping[str, Any]) -> Organization:
    """Project an Apollo organization (search or enrichment flavour).

    Search results carry ``organization_revenue_printed`` while enrichment
    carries ``annual_revenue_printed``; the enrichment value wins.
    """
    keywords = org.get("keywords")
    return _present(
        name=org.get("name"),
        website_url=org.get("website_url"),
        linkedin_url=org.get("linkedin_url"),
        domain=org.get("primary_domain"),
        founded_year=org.get("founded_year"),
        revenue=org.get("annual_revenue_printed") or org.get("organization_revenue_printed"),
        employees=org.get("estimated_num_employees"),
        industry=org.get("industry"),
        latest_funding=org.get("latest_funding_stage"),
        total_funding=org.get("total_funding_printed"),
        description=org.get("short_description"),
        keywords=list(keywords[:MAX_KEYWORDS]) if isinstance(keywords, list) else None,
    )


def clean_person(person: Mapping[str, Any]) -> Person:
    """Project an Apollo person, nesting the current employer."""
    city, state, country = person.get("city"), person.get("state"), person.get("country")
    organization = person.get("organization")
    history = person.get("employment_history")

    return _present(
        name=person.get("name"),
        title=person.get("title"),
        headline=person.get("headline"),
        linkedin_url=person.get("linkedin_url"),
        location=f"{city}, {state}, {country}" if city and state and country else None,
        current_organization=(
            clean_organization(organization) if isinstance(organization, Mapping) else None
        ),
        employment_history=(
            [clean_job(job) for job in history if isinstance(job, Mapping)]
            if isinstance(history, list)
            else None
        ),
    )


def clean_job_posting(job: Mapping[str, Any]) -> JobPosting:
    return _present(
        title=job.get("title"),
        url=job.get("url"),
        location=job.get("location"),
        content=job.get("content"),
        posted_date=job.get("posted_date"),
    )


# ── Search responses ─────────────────────────────────────────────────


def clean_people_search(response: Any) -> dict[str, list[Person]]:
    return {"people": [clean_person(p) for p in _records(response, "people")]}


def clean_organization_search(response: Any) -> dict[str, list[Organization]]:
    return {
        "organizations": [
            clean_organization(o) for o in _records(response, "organizations")
        ],
    }


def clean_organization_job_postings(response: Any) -> dict[str, list[JobPosting]]:
    postings = _records(response, "organization_job_postings")
    return {"job_postings": [clean_job_posting(j) for j in postings]}


# ── Enrichment responses ─────────────────────────────────────────────


def clean_people_enrichment(response: Any) -> dict[str, Person | None]:
    person = response.get("person") if isinstance(response, Mapping) else None
    if not isinstance(person, Mapping):
        return {"person": None}
    return {"person": clean_person(person)}


def clean_bulk_people_enrichment(response: Any) -> dict[str, list[Person]]:
    return {"matches": [clean_person(p) for p in _records(response, "matches")]}


def clean_organization_enrichment(response: Any) -> dict[str, Organization | None]:
    org = response.get("organization") if isinstance(response, Mapping) else None
    if not isinstance(org, Mapping):
        return {"organization": None}
    return {"organization": clean_organization(org)}


def clean_bulk_organization_enrichment(response: Any) -> dict[str, list[Organization]]:
    return {
        "organizations": [
            clean_organization(o) for o in _records(response, "organizations")
        ],
    }
