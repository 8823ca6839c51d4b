from datetime import UTC, date, datetime, timedelta, timezone

import pytest

from config import SiteConfig
from formatting import (
    bibtex_entry,
    bibtex_key,
    count_label,
    doi_url,
    escape_html,
    escape_xml,
    human_date,
    label_for,
    paper_path,
    pdf_url,
    programme_path,
    rfc822_date,
    rfc822_datetime,
    slash_date,
    suggested_citation,
    truncate_abstract,
)
from models import Paper

CONFIG = SiteConfig()
STATUSES = {"draft": "Draft", "review": "Under Review"}


def _paper(**overrides) -> Paper:
    fields = {
        "paper_id": "dp-001",
        "title": "On Friction",
        "authors": ("A. Smith", "B. Jones"),
        "published_on": date(2025, 3, 14),
        "status": "draft",
        "program": "p1",
    }
    fields.update(overrides)
    return Paper(**fields)


@pytest.mark.parametrize("value, expected", [
    (date(2025, 3, 14), "14 March 2025"),
    (date(2024, 1, 1), "1 January 2024"),
    (date(2023, 12, 31), "31 December 2023"),
])
def test_human_date(value: date, expected: str) -> None:
    assert human_date(value) == expected


def test_slash_date() -> None:
    assert slash_date(date(2025, 3, 14)) == "2025/03/14"


def test_rfc822_date_is_noon_utc() -> None:
    assert rfc822_date(date(2025, 3, 14)) == "Fri, 14 Mar 2025 12:00:00 GMT"


def test_rfc822_datetime_converts_to_utc() -> None:
    plus_two = timezone(timedelta(hours=2))
    built = datetime(2026, 10, 18, 11, 30, tzinfo=plus_two)
    assert rfc822_datetime(built) == "Sun, 18 Oct 2026 09:30:00 GMT"


def test_rfc822_datetime_treats_naive_as_utc() -> None:
    assert rfc822_datetime(datetime(2026, 10, 18, 9, 30)) == rfc822_datetime(
        datetime(2026, 10, 18, 9, 30, tzinfo=UTC)
    )


def test_escape_html_replaces_all_unsafe_characters() -> None:
    escaped = escape_html("Tom & Jerry's <\"show\">")
    assert escaped == "Tom &amp; Jerry&#039;s &lt;&quot;show&quot;&gt;"
    for char in "<>\"'":
        assert char not in escaped


def test_escape_xml_differs_only_in_apostrophe() -> None:
    raw = "Tom & Jerry's <\"show\">"
    assert escape_xml(raw) == "Tom &amp; Jerry&apos;s &lt;&quot;show&quot;&gt;"
    assert escape_xml(raw).replace("&apos;", "&#039;") == escape_html(raw)


def test_escape_none_is_empty() -> None:
    assert escape_html(None) == ""
    assert escape_xml(None) == ""


def test_truncate_abstract_cuts_on_word_boundary() -> None:
    assert truncate_abstract("The quick brown fox jumps", 12) == "The quick..."


def test_truncate_abstract_exact_length_unchanged() -> None:
    text = "x" * 20
    assert truncate_abstract(text, 20) == text


def test_truncate_abstract_is_stable_on_truncated_text() -> None:
    once = truncate_abstract("The quick brown fox jumps over the lazy dog", 20)
    assert once == "The quick brown fox..."
    assert truncate_abstract(once, 25) == once


def test_truncate_abstract_empty() -> None:
    assert truncate_abstract(None, 10) == ""
    assert truncate_abstract("", 10) == ""


def test_label_for_falls_back_to_key() -> None:
    assert label_for(STATUSES, "draft") == "Draft"
    assert label_for(STATUSES, "retracted") == "retracted"


@pytest.mark.parametrize("count, expected", [(0, "0 papers"), (1, "1 paper"), (2, "2 papers")])
def test_count_label(count: int, expected: str) -> None:
    assert count_label(count, "paper") == expected


def test_urls() -> None:
    paper = _paper(pdf="friction.pdf", doi="10.5281/zenodo.1")
    assert pdf_url(paper, CONFIG) == "https://farzulla.org/papers/friction.pdf"
    assert doi_url(paper, CONFIG) == "https://doi.org/10.5281/zenodo.1"
    assert paper_path(paper) == "/papers/dp-001"
    assert programme_path("p1") == "/programmes/p1"


def test_urls_absent_when_fields_missing() -> None:
    paper = _paper()
    assert pdf_url(paper, CONFIG) is None
    assert doi_url(paper, CONFIG) is None


def test_bibtex_key() -> None:
    assert bibtex_key(_paper()) == "smith2025_dp_001"


def test_bibtex_key_distinct_for_same_author_and_year() -> None:
    first = bibtex_key(_paper(paper_id="dp-001"))
    second = bibtex_key(_paper(paper_id="dp-002"))
    assert first != second
    assert first == bibtex_key(_paper(paper_id="dp-001"))


def test_bibtex_entry_minimal() -> None:
    assert bibtex_entry(_paper(), STATUSES, CONFIG) == (
        "@article{smith2025_dp_001,\n"
        "  title     = {On Friction},\n"
        "  author    = {A. Smith and B. Jones},\n"
        "  year      = {2025},\n"
        "  publisher = {ASCRI},\n"
        "  note      = {Draft}\n"
        "}"
    )


def test_bibtex_entry_with_doi_and_pdf() -> None:
    entry = bibtex_entry(_paper(doi="10.1/x", pdf="f.pdf", status="new"), STATUSES, CONFIG)
    lines = entry.splitlines()
    assert lines[5] == "  doi       = {10.1/x},"
    assert lines[6] == "  url       = {https://farzulla.org/papers/f.pdf},"
    assert lines[7] == "  note      = {new}"


def test_suggested_citation_minimal() -> None:
    assert suggested_citation(_paper(), CONFIG) == 'A. Smith, B. Jones (2025). "On Friction." ASCRI.'


def test_suggested_citation_with_subtitle_and_doi() -> None:
    paper = _paper(subtitle="A Study of Drag", doi="10.1/x")
    assert suggested_citation(paper, CONFIG) == (
        'A. Smith, B. Jones (2025). "On Friction." A Study of Drag. ASCRI. doi:10.1/x'
    )
