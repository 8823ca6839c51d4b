"""Data file ingestion: papers.json -> SiteData."""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any

from models import Paper, Programme, SiteData

LOGGER = logging.getLogger(__name__)

_REQUIRED_PAPER_FIELDS = ("id", "title", "authors", "date", "status", "program")
_RESERVED_SEGMENTS = {".", ".."}


class SiteDataError(RuntimeError):
    """The data file is missing, unreadable or not shaped like a site document."""


def load_site_data(path: str | Path, strict_programmes: bool = False) -> SiteData:
    """Read and parse the JSON data file at `path`.

    Args:
        path: Location of the data file.
        strict_programmes: When True, a paper that names an unconfigured
            programme is an error instead of a warning.
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SiteDataError(f"Cannot read data file {path}: {exc}") from exc

    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SiteDataError(f"Malformed JSON in {path}: {exc}") from exc

    data = parse_site_data(payload, strict_programmes=strict_programmes)
    LOGGER.info(
        "Loaded %s: papers=%s programmes=%s tags=%s statuses=%s",
        path,
        len(data.papers),
        len(data.programmes),
        len(data.tags),
        len(data.statuses),
    )
    return data


def parse_site_data(payload: Any, strict_programmes: bool = False) -> SiteData:
    """Convert a decoded data document into SiteData."""
    if not isinstance(payload, dict):
        raise SiteDataError("Unexpected data file shape: expected a JSON object")

    raw_papers = payload.get("papers") or []
    if not isinstance(raw_papers, list):
        raise SiteDataError("Unexpected data file shape: 'papers' must be a list")

    programmes = _parse_programmes(_as_mapping(payload, "programs"))
    papers = tuple(_parse_paper(item, position) for position, item in enumerate(raw_papers))

    seen: set[str] = set()
    for paper in papers:
        if paper.paper_id in seen:
            raise SiteDataError(f"Duplicate paper id: {paper.paper_id}")
        seen.add(paper.paper_id)

        if paper.program not in programmes:
            if strict_programmes:
                raise SiteDataError(
                    f"Paper {paper.paper_id} references unknown programme {paper.program!r}"
                )
            LOGGER.warning(
                "Paper %s references unknown programme %r; it will not be listed "
                "under any configured programme",
                paper.paper_id,
                paper.program,
            )

    return SiteData(
        papers=papers,
        tags={str(k): str(v) for k, v in _as_mapping(payload, "tags").items()},
        statuses={str(k): str(v) for k, v in _as_mapping(payload, "statuses").items()},
        programmes=programmes,
        categories=dict(_as_mapping(payload, "categories")),
    )


def _parse_programmes(raw: dict[str, Any]) -> dict[str, Programme]:
    # Insertion order of the source mapping is the display order.
    programmes: dict[str, Programme] = {}
    for key, block in raw.items():
        _check_segment(key, "Programme key")
        if not isinstance(block, dict):
            raise SiteDataError(f"Programme {key!r} must be an object")
        programmes[key] = Programme(
            key=key,
            index=str(block.get("index", "")),
            title=_as_str(block.get("title")) or key,
            description=_as_str(block.get("description")) or "",
        )
    return programmes


def _parse_paper(item: Any, position: int) -> Paper:
    if not isinstance(item, dict):
        raise SiteDataError(f"Paper #{position} must be an object")

    missing = [name for name in _REQUIRED_PAPER_FIELDS if not item.get(name)]
    if missing:
        label = item.get("id") or f"#{position}"
        raise SiteDataError(f"Paper {label} is missing required field(s): {', '.join(missing)}")

    paper_id = str(item["id"])
    _check_segment(paper_id, "Paper id")
    authors = item["authors"]
    if not isinstance(authors, list) or not all(isinstance(a, str) for a in authors):
        raise SiteDataError(f"Paper {paper_id}: 'authors' must be a list of names")

    tags = item.get("tags") or []
    if not isinstance(tags, list):
        raise SiteDataError(f"Paper {paper_id}: 'tags' must be a list")

    return Paper(
        paper_id=paper_id,
        title=str(item["title"]),
        authors=tuple(authors),
        published_on=_parse_date(item["date"], paper_id),
        status=str(item["status"]),
        program=str(item["program"]),
        subtitle=_as_str(item.get("subtitle")),
        doi=_as_str(item.get("doi")),
        pdf=_as_str(item.get("pdf")),
        github=_as_str(item.get("github")),
        dashboard=_as_str(item.get("dashboard")),
        abstract=_as_str(item.get("abstract")),
        journal=_as_str(item.get("journal")),
        tags=tuple(str(tag) for tag in tags),
    )


def _check_segment(value: str, what: str) -> None:
    # Ids and programme keys become file names directly under the output dirs.
    if not value or "/" in value or "\\" in value or value in _RESERVED_SEGMENTS:
        raise SiteDataError(f"{what} {value!r} is not a single path segment")


def _parse_date(raw: Any, paper_id: str) -> date:
    try:
        return date.fromisoformat(str(raw)[:10])
    except ValueError as exc:
        raise SiteDataError(f"Paper {paper_id}: invalid date {raw!r}") from exc


def _as_mapping(payload: dict[str, Any], key: str) -> dict[str, Any]:
    value = payload.get(key) or {}
    if not isinstance(value, dict):
        raise SiteDataError(f"Unexpected data file shape: '{key}' must be an object")
    return value


def _as_str(value: Any) -> str | None:
    return value.strip() if isinstance(value, str) and value.strip() else None
