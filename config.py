"""Site-wide settings, read once from the environment.

Every composer takes a `SiteConfig` argument instead of reading globals, so a
test can build pages for any site by constructing one directly.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import UTC, datetime

_DEFAULT_SITE_URL = "https://systems.ac"
_DEFAULT_SITE_TITLE = "ASCRI"
_DEFAULT_SITE_DESCRIPTION = "Adversarial Systems & Complexity Research Initiative"
_DEFAULT_PUBLISHER = "ASCRI"
_DEFAULT_OPERATOR = "Dissensus AI"
_DEFAULT_PDF_BASE = "https://farzulla.org/papers"
_DEFAULT_DOI_BASE = "https://doi.org/"
_DEFAULT_EDITOR_EMAIL = "research@systems.ac"


class ConfigError(ValueError):
    """An environment setting cannot be interpreted."""


@dataclass(frozen=True, slots=True)
class SiteConfig:
    """Immutable site settings passed into every page and feed builder."""

    site_url: str = _DEFAULT_SITE_URL
    site_title: str = _DEFAULT_SITE_TITLE
    site_description: str = _DEFAULT_SITE_DESCRIPTION
    publisher: str = _DEFAULT_PUBLISHER
    operator: str = _DEFAULT_OPERATOR
    pdf_base: str = _DEFAULT_PDF_BASE
    doi_base: str = _DEFAULT_DOI_BASE
    editor_email: str = _DEFAULT_EDITOR_EMAIL
    og_image: str = ""
    stylesheet: str = "/css/ascri.css"
    copyright_year: int = 2026
    strict_programmes: bool = False

    @property
    def og_image_url(self) -> str:
        return self.og_image or f"{self.site_url}/assets/og-default.png"

    @property
    def feed_url(self) -> str:
        return f"{self.site_url}/feed.xml"


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_year(name: str) -> int:
    raw = os.getenv(name)
    if not raw:
        return datetime.now(UTC).year
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a year, got {raw!r}") from exc


def load_config() -> SiteConfig:
    """Build a SiteConfig from environment variables, falling back to defaults.

    Call after `load_dotenv()` so values from a local .env file are visible.
    """
    return SiteConfig(
        site_url=os.getenv("SITE_URL", _DEFAULT_SITE_URL).rstrip("/"),
        site_title=os.getenv("SITE_TITLE", _DEFAULT_SITE_TITLE),
        site_description=os.getenv("SITE_DESCRIPTION", _DEFAULT_SITE_DESCRIPTION),
        publisher=os.getenv("SITE_PUBLISHER", _DEFAULT_PUBLISHER),
        operator=os.getenv("SITE_OPERATOR", _DEFAULT_OPERATOR),
        pdf_base=os.getenv("PDF_BASE", _DEFAULT_PDF_BASE).rstrip("/"),
        doi_base=os.getenv("DOI_BASE", _DEFAULT_DOI_BASE),
        editor_email=os.getenv("EDITOR_EMAIL", _DEFAULT_EDITOR_EMAIL),
        og_image=os.getenv("OG_IMAGE", ""),
        stylesheet=os.getenv("STYLESHEET", "/css/ascri.css"),
        copyright_year=_env_year("COPYRIGHT_YEAR"),
        strict_programmes=_env_flag("STRICT_PROGRAMMES"),
    )
