"""Render cleaned Apollo documents as markdown for direct display.

Input is the output of ``apollo_cleaners``.  Every formatter returns a fixed
``"No … found."`` sentence when there is nothing to show; downstream prompt
text matches on these sentences, so they must not change.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

RECORD_SEPARATOR = "\n---\n"


def _field(label: str, value: Any) -> str:
    return f"**{label}:** {value}\n" if value else ""


def _bullet(label: str, value: Any) -> str:
    return f"- **{label}:** {value}\n" if value else ""


def _section(heading: str, records: list[str]) -> str:
    return f"## {heading}\n\n{RECORD_SEPARATOR.join(records)}"


# ── Records ──────────────────────────────────────────────────────────


def organization_to_markdown(org: Mapping[str, Any], sub: bool = False) -> str:
    """Full heading form, or the short bullet form used inside a person."""
    name = org.get("name") or "Unknown"
    if sub:
        return (
            f"- **Name:** {name}\n"
            + _bullet("Website", org.get("website_url"))
            + _bullet("Industry", org.get("industry"))
            + _bullet("Employees", org.get("employees"))
        )

    text = (
        f"### {name}\n"
        + _field("Website", org.get("website_url"))
        + _field("LinkedIn", org.get("linkedin_url"))
        + _field("Domain", org.get("domain"))
        + _field("Founded", org.get("founded_year"))
        + _field("Revenue", org.get("revenue"))
        + _field("Employees", org.get("employees"))
        + _field("Industry", org.get("industry"))
        + _field("Latest Funding", org.get("latest_funding"))
        + _field("Total Funding", org.get("total_funding"))
    )
    if org.get("description"):
        text += f"\n**Description:**\n{org['description']}\n"
    if org.get("keywords"):
        keywords = ", ".join(str(k) for k in org["keywords"] if k is not None)
        text += f"\n**Keywords:**\n{keywords}\n"
    return text


def _job_line(job: Mapping[str, Any]) -> str:
    line = f"- **{job.get('title', '')}** at {job.get('organization_name', '')}"
    if job.get("start_date"):
        return f"{line} ({job['start_date']} - {job.get('end_date') or 'Present'})\n"
    return f"{line}\n"


def person_to_markdown(person: Mapping[str, Any]) -> str:
    text = (
        f"### {person.get('name') or 'Unknown'}\n"
        + _field("Title", person.get("title"))
        + _field("Headline", person.get("headline"))
        + _field("LinkedIn", person.get("linkedin_url"))
        + _field("Location", person.get("location"))
    )

    if person.get("current_organization"):
        text += "\n**Current Organization:**\n"
        text += organization_to_markdown(person["current_organization"], sub=True)

    if person.get("employment_history"):
        text += "\n**Employment History:**\n"
        text += "".join(_job_line(job) for job in person["employment_history"])

    return text


def job_posting_to_markdown(job: Mapping[str, Any]) -> str:
    text = (
        f"### {job.get('title') or 'Untitled'}\n"
        + _field("Location", job.get("location"))
        + _field("Posted", job.get("posted_date"))
        + _field("URL", job.get("url"))
    )
    if job.get("content"):
        text += f"\n{job['content']}\n"
    return text


# ── Documents ────────────────────────────────────────────────────────


def _list_formatter(
    key: str,
    heading: str,
    empty: str,
    render: Callable[[Mapping[str, Any]], str],
) -> Callable[[Mapping[str, Any]], str]:
    def _format(data: Mapping[str, Any]) -> str:
        records = data.get(key) if isinstance(data, Mapping) else None
        if not records:
            return empty
        return _section(heading, [render(record) for record in records])

    _format.__doc__ = f"Render ``data[{key!r}]`` under '## {heading}'."
    return _format


people_search_to_markdown = _list_formatter(
    "people", "People Search Results", "No people found.", person_to_markdown,
)
organization_search_to_markdown = _list_formatter(
    "organizations", "Organization Search Results", "No organizations found.",
    organization_to_markdown,
)
organization_job_postings_to_markdown = _list_formatter(
    "job_postings", "Job Postings", "No job postings found.", job_posting_to_markdown,
)
bulk_people_enrichment_to_markdown = _list_formatter(
    "matches", "Bulk People Enrichment Results", "No people found for bulk enrichment.",
    person_to_markdown,
)
bulk_organization_enrichment_to_markdown = _list_formatter(
    "organizations", "Bulk Organization Enrichment Results",
    "No organizations found for bulk enrichment.", organization_to_markdown,
)


def people_enrichment_to_markdown(data: Mapping[str, Any]) -> str:
    person = data.get("person") if isinstance(data, Mapping) else None
    if not person:
        return "No person data found for enrichment."
    return f"## Person Enrichment Result\n\n{person_to_markdown(person)}"


def organization_enrichment_to_markdown(data: Mapping[str, Any]) -> str:
    org = data.get("organization") if isinstance(data, Mapping) else None
    if not org:
        return "No organization data found for enrichment."
    return f"## Organization Enrichment Result\n\n{organization_to_markdown(org)}"
