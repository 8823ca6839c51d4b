from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path

import pytest

from loader import SiteDataError, load_site_data, parse_site_data

SAMPLE_DOCUMENT = {
    "papers": [
        {
            "id": "dp-001",
            "title": "On Friction",
            "subtitle": "",
            "authors": ["A. Smith"],
            "date": "2025-03-14",
            "status": "draft",
            "program": "p2",
            "doi": "10.5281/zenodo.1",
            "tags": ["friction", "markets"],
        },
        {
            "id": "dp-002",
            "title": "On Consent",
            "authors": ["B. Jones", "C. Wu"],
            "date": "2024-01-01",
            "status": "published",
            "program": "p1",
        },
    ],
    "tags": {"friction": "Friction"},
    "statuses": {"draft": "Draft"},
    "programs": {
        "p2": {"index": "II", "title": "Consent", "description": "Consent work."},
        "p1": {"index": "I", "title": "Friction", "description": "Friction work."},
    },
    "categories": {"theory": "Theory"},
}


def _write(tmp_path: Path, payload: object) -> Path:
    path = tmp_path / "papers.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_load_site_data_smoke(tmp_path: Path) -> None:
    data = load_site_data(_write(tmp_path, SAMPLE_DOCUMENT))

    assert len(data.papers) == 2
    first = data.papers[0]
    assert first.paper_id == "dp-001"
    assert first.authors == ("A. Smith",)
    assert first.published_on == date(2025, 3, 14)
    assert first.doi == "10.5281/zenodo.1"
    assert first.tags == ("friction", "markets")
    assert data.tags == {"friction": "Friction"}
    assert data.categories == {"theory": "Theory"}


def test_optional_fields_absent_or_empty_become_none(tmp_path: Path) -> None:
    data = load_site_data(_write(tmp_path, SAMPLE_DOCUMENT))
    first, second = data.papers

    assert first.subtitle is None
    assert second.abstract is None
    assert second.pdf is None
    assert second.tags == ()


def test_programme_order_is_source_order(tmp_path: Path) -> None:
    data = load_site_data(_write(tmp_path, SAMPLE_DOCUMENT))
    assert list(data.programmes) == ["p2", "p1"]
    assert data.programmes["p1"].index == "I"
    assert data.programmes["p2"].title == "Consent"


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(SiteDataError, match="Cannot read"):
        load_site_data(tmp_path / "nope.json")


def test_malformed_json_raises(tmp_path: Path) -> None:
    path = tmp_path / "papers.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(SiteDataError, match="Malformed JSON"):
        load_site_data(path)


def test_non_object_document_raises() -> None:
    with pytest.raises(SiteDataError):
        parse_site_data([1, 2, 3])


@pytest.mark.parametrize("field", ["id", "title", "authors", "date", "status", "program"])
def test_missing_required_field_raises(field: str) -> None:
    paper = dict(SAMPLE_DOCUMENT["papers"][1])
    del paper[field]
    with pytest.raises(SiteDataError, match=field):
        parse_site_data({**SAMPLE_DOCUMENT, "papers": [paper]})


def test_invalid_date_raises() -> None:
    paper = {**SAMPLE_DOCUMENT["papers"][1], "date": "last tuesday"}
    with pytest.raises(SiteDataError, match="invalid date"):
        parse_site_data({**SAMPLE_DOCUMENT, "papers": [paper]})


def test_duplicate_ids_raise() -> None:
    paper = SAMPLE_DOCUMENT["papers"][1]
    with pytest.raises(SiteDataError, match="Duplicate paper id"):
        parse_site_data({**SAMPLE_DOCUMENT, "papers": [paper, paper]})


def test_unknown_programme_is_a_warning(caplog: pytest.LogCaptureFixture) -> None:
    paper = {**SAMPLE_DOCUMENT["papers"][1], "program": "p9"}
    with caplog.at_level(logging.WARNING, logger="loader"):
        data = parse_site_data({**SAMPLE_DOCUMENT, "papers": [paper]})

    assert data.papers[0].program == "p9"
    assert "unknown programme 'p9'" in caplog.text


def test_unknown_programme_is_an_error_when_strict() -> None:
    paper = {**SAMPLE_DOCUMENT["papers"][1], "program": "p9"}
    with pytest.raises(SiteDataError, match="unknown programme"):
        parse_site_data({**SAMPLE_DOCUMENT, "papers": [paper]}, strict_programmes=True)


def test_missing_mappings_default_to_empty() -> None:
    data = parse_site_data({"papers": []})
    assert data.papers == ()
    assert data.programmes == {}
    assert data.tags == {}
    assert data.statuses == {}


@pytest.mark.parametrize("paper_id", ["../../escaped", "a/b", "a\\b", ".", ".."])
def test_paper_id_must_be_single_path_segment(paper_id: str) -> None:
    paper = {**SAMPLE_DOCUMENT["papers"][1], "id": paper_id}
    with pytest.raises(SiteDataError, match="not a single path segment"):
        parse_site_data({**SAMPLE_DOCUMENT, "papers": [paper]})


def test_empty_paper_id_raises() -> None:
    paper = {**SAMPLE_DOCUMENT["papers"][1], "id": ""}
    with pytest.raises(SiteDataError, match="missing required field\\(s\\): id"):
        parse_site_data({**SAMPLE_DOCUMENT, "papers": [paper]})


@pytest.mark.parametrize("key", ["", "../p1", "p/1", "p\\1", ".", ".."])
def test_programme_key_must_be_single_path_segment(key: str) -> None:
    programs = {key: {"index": "I", "title": "Friction", "description": ""}}
    with pytest.raises(SiteDataError, match="not a single path segment"):
        parse_site_data({"papers": [], "programs": programs})
