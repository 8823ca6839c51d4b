"""Shared typed models for the site build."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any


@dataclass(frozen=True, slots=True)
class Paper:
    """One paper record as loaded from the data file."""

    paper_id: str
    title: str
    authors: tuple[str, ...]
    published_on: date
    status: str
    program: str
    subtitle: str | None = None
    doi: str | None = None
    pdf: str | None = None
    github: str | None = None
    dashboard: str | None = None
    abstract: str | None = None
    journal: str | None = None
    tags: tuple[str, ...] = ()

    @property
    def year(self) -> str:
        return f"{self.published_on.year:04d}"

    @property
    def date_iso(self) -> str:
        return self.published_on.isoformat()


@dataclass(frozen=True, slots=True)
class Programme:
    """A research programme; `index` is its display ordinal (e.g. "I")."""

    key: str
    index: str
    title: str
    description: str


@dataclass(frozen=True, slots=True)
class SiteData:
    """Everything read from the data file, in source order."""

    papers: tuple[Paper, ...]
    tags: dict[str, str] = field(default_factory=dict)
    statuses: dict[str, str] = field(default_factory=dict)
    programmes: dict[str, Programme] = field(default_factory=dict)
    categories: dict[str, Any] = field(default_factory=dict)
