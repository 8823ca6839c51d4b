"""CLI entrypoint: build the static papers site from papers.json."""

from __future__ import annotations

import argparse
import logging
import os
import sys
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from dotenv import load_dotenv

from config import ConfigError, SiteConfig, load_config
from feeds import rss_feed, sitemap_xml
from loader import SiteDataError, load_site_data
from models import SiteData
from pages import paper_page, papers_index_page, programme_page, programmes_index_page

DEFAULT_DATA_PATH = "papers.json"
DEFAULT_OUT_DIR = "public"


@dataclass
class BuildReport:
    """What one build wrote."""

    paper_pages: int = 0
    programme_pages: int = 0
    written: list[Path] = field(default_factory=list)
    elapsed_seconds: float = 0.0


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line flags."""
    parser = argparse.ArgumentParser(description="Build the static papers site")
    parser.add_argument(
        "--data",
        default=os.getenv("PAPERS_JSON", DEFAULT_DATA_PATH),
        help="Path to the papers JSON data file (default: $PAPERS_JSON or papers.json)",
    )
    parser.add_argument(
        "--out",
        default=os.getenv("PUBLIC_DIR", DEFAULT_OUT_DIR),
        help="Output root for generated files (default: $PUBLIC_DIR or public)",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def write_text(path: Path, content: str) -> Path:
    """Write UTF-8 text with LF newlines, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="\n") as fh:
        fh.write(content)
    return path


def build_site(
    data: SiteData,
    config: SiteConfig,
    out_dir: str | Path,
    now: datetime | None = None,
) -> BuildReport:
    """Render every page and feed for `data` under `out_dir`.

    Args:
        data: Loaded site data.
        config: Site settings.
        out_dir: Output root; papers/ and programmes/ are created beneath it.
        now: Build timestamp used for sitemap lastmod and feed lastBuildDate.
            Defaults to the current UTC time.
    """
    started = time.perf_counter()
    now = now or datetime.now(UTC)
    out = Path(out_dir)
    papers_dir = out / "papers"
    programmes_dir = out / "programmes"
    papers_dir.mkdir(parents=True, exist_ok=True)
    programmes_dir.mkdir(parents=True, exist_ok=True)

    report = BuildReport()

    for paper in data.papers:
        report.written.append(
            write_text(papers_dir / f"{paper.paper_id}.html", paper_page(paper, data, config))
        )
        report.paper_pages += 1
    logging.info("Generated %s paper pages -> %s", report.paper_pages, papers_dir)

    report.written.append(write_text(papers_dir / "index.html", papers_index_page(data, config)))
    logging.info("Generated papers index -> %s", papers_dir / "index.html")

    for key in data.programmes:
        page = programme_page(key, data, config)
        if page is None:
            continue
        report.written.append(write_text(programmes_dir / f"{key}.html", page))
        report.programme_pages += 1
    logging.info("Generated %s programme pages -> %s", report.programme_pages, programmes_dir)

    report.written.append(
        write_text(programmes_dir / "index.html", programmes_index_page(data, config))
    )
    logging.info("Generated programmes index -> %s", programmes_dir / "index.html")

    report.written.append(write_text(out / "sitemap.xml", sitemap_xml(data, config, now.date())))
    logging.info("Generated sitemap -> %s", out / "sitemap.xml")

    report.written.append(write_text(out / "feed.xml", rss_feed(data, config, now)))
    logging.info("Generated RSS feed -> %s", out / "feed.xml")

    report.elapsed_seconds = time.perf_counter() - started
    logging.info(
        "Build complete. files=%s elapsed_ms=%.0f",
        len(report.written),
        report.elapsed_seconds * 1000,
    )
    return report


def run(data_path: str | Path, out_dir: str | Path) -> BuildReport:
    """Load settings and data, then build the site."""
    config = load_config()
    logging.info("Building %s static site...", config.site_title)
    data = load_site_data(data_path, strict_programmes=config.strict_programmes)
    logging.info("Papers: %s Programmes: %s", len(data.papers), len(data.programmes))
    return build_site(data, config, out_dir)


def main(argv: list[str] | None = None) -> int:
    """Initialize config and execute the build."""
    load_dotenv()
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
    )

    try:
        run(args.data, args.out)
    except (ConfigError, SiteDataError) as exc:
        logging.error("Build aborted: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
