"""Pure value formatters shared by the page and feed builders."""

from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import UTC, date, datetime, time
from email.utils import format_datetime

from config import SiteConfig
from models import Paper

# Locale-independent month names; strftime("%B") follows the process locale.
_MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

_HTML_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#039;",
}
_XML_ESCAPES = {**_HTML_ESCAPES, "'": "&apos;"}
_ESCAPE_RE = re.compile(r"[&<>\"']")

_TRAILING_PARTIAL_WORD_RE = re.compile(r"\s+\S*$")

# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------


def human_date(value: date) -> str:
    """14 March 2025"""
    return f"{value.day} {_MONTHS[value.month - 1]} {value.year}"


def iso_date(value: date) -> str:
    return value.isoformat()


def slash_date(value: date) -> str:
    """YYYY/MM/DD, the form Highwire Press citation tags expect."""
    return iso_date(value).replace("-", "/")


def rfc822_date(value: date) -> str:
    """RFC-822 date for RSS, pinned to noon UTC so no timezone shifts the day."""
    return rfc822_datetime(datetime.combine(value, time(12, 0), tzinfo=UTC))


def rfc822_datetime(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return format_datetime(value.astimezone(UTC), usegmt=True)


# ---------------------------------------------------------------------------
# Escaping and text
# ---------------------------------------------------------------------------


def escape_html(value: object) -> str:
    if value is None:
        return ""
    return _ESCAPE_RE.sub(lambda m: _HTML_ESCAPES[m.group(0)], str(value))


def escape_xml(value: object) -> str:
    if value is None:
        return ""
    return _ESCAPE_RE.sub(lambda m: _XML_ESCAPES[m.group(0)], str(value))


def truncate_abstract(text: str | None, max_len: int) -> str:
    """Shorten `text` longer than `max_len` on a word boundary.

    Text that already fits is returned as-is; otherwise it is cut at `max_len`,
    the partial word at the cut is dropped and "..." appended.
    """
    if not text:
        return ""
    if len(text) <= max_len:
        return text
    return _TRAILING_PARTIAL_WORD_RE.sub("", text[:max_len]) + "..."


def label_for(mapping: Mapping[str, str], key: str) -> str:
    """Display label for `key`, or the key itself when the mapping lacks it."""
    return mapping.get(key) or key


def count_label(count: int, noun: str) -> str:
    return f"{count} {noun}{'' if count == 1 else 's'}"


# ---------------------------------------------------------------------------
# URLs
# ---------------------------------------------------------------------------


def pdf_url(paper: Paper, config: SiteConfig) -> str | None:
    if not paper.pdf:
        return None
    return f"{config.pdf_base}/{paper.pdf}"


def doi_url(paper: Paper, config: SiteConfig) -> str | None:
    if not paper.doi:
        return None
    return f"{config.doi_base}{paper.doi}"


def paper_path(paper: Paper) -> str:
    return f"/papers/{paper.paper_id}"


def programme_path(key: str) -> str:
    return f"/programmes/{key}"


def paper_url(paper: Paper, config: SiteConfig) -> str:
    return f"{config.site_url}{paper_path(paper)}"


def programme_url(key: str, config: SiteConfig) -> str:
    return f"{config.site_url}{programme_path(key)}"


# ---------------------------------------------------------------------------
# Citations
# ---------------------------------------------------------------------------


def bibtex_key(paper: Paper) -> str:
    """smith2025_dp_001: first author's surname, year, then the paper id."""
    first_author = paper.authors[0] if paper.authors else "Unknown"
    last_name = first_author.split(" ")[-1]
    slug = paper.paper_id.replace("-", "_")
    return f"{last_name.lower()}{paper.year}_{slug}"


def bibtex_entry(paper: Paper, statuses: Mapping[str, str], config: SiteConfig) -> str:
    fields = [
        ("title", paper.title),
        ("author", " and ".join(paper.authors)),
        ("year", paper.year),
        ("publisher", config.publisher),
    ]
    if paper.doi:
        fields.append(("doi", paper.doi))
    url = pdf_url(paper, config)
    if url:
        fields.append(("url", url))
    fields.append(("note", label_for(statuses, paper.status)))

    body = ",\n".join(f"  {name:<9} = {{{value}}}" for name, value in fields)
    return f"@article{{{bibtex_key(paper)},\n{body}\n}}"


def suggested_citation(paper: Paper, config: SiteConfig) -> str:
    cite = f'{", ".join(paper.authors)} ({paper.year}). "{paper.title}."'
    if paper.subtitle:
        cite += f" {paper.subtitle}."
    cite += f" {config.publisher}."
    if paper.doi:
        cite += f" doi:{paper.doi}"
    return cite
