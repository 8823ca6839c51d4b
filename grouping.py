"""Ordering and grouping of papers for index pages and feeds."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from models import Paper, Programme


def sort_by_date_desc(papers: Iterable[Paper]) -> list[Paper]:
    """Return a new list, most recent first; equal dates keep input order."""
    return sorted(papers, key=lambda p: p.published_on, reverse=True)


def group_by_programme(
    papers: Iterable[Paper],
    programmes: Mapping[str, Programme],
) -> dict[str, list[Paper]]:
    """Bucket papers by programme key.

    Every configured programme gets a bucket, in configured order, even when
    empty. A paper naming an unconfigured programme opens a new bucket after
    the configured ones. Each bucket is sorted newest first.
    """
    grouped: dict[str, list[Paper]] = {key: [] for key in programmes}
    for paper in papers:
        grouped.setdefault(paper.program, []).append(paper)
    return {key: sort_by_date_desc(bucket) for key, bucket in grouped.items()}


def paper_count_by_programme(
    papers: Iterable[Paper],
    programmes: Mapping[str, Programme],
) -> dict[str, int]:
    """Papers per configured programme; unconfigured keys are not counted."""
    counts = {key: 0 for key in programmes}
    for paper in papers:
        if paper.program in counts:
            counts[paper.program] += 1
    return counts


def papers_in_programme(papers: Iterable[Paper], key: str) -> list[Paper]:
    return sort_by_date_desc(p for p in papers if p.program == key)
