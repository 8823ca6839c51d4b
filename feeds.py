"""Machine-readable outputs: sitemap.xml and the RSS 2.0 papers feed.

Both documents are built from `Xml` fragments so every field is XML-escaped
(apostrophes as &apos;).
"""

from __future__ import annotations

from datetime import date, datetime

from config import SiteConfig
from formatting import iso_date, label_for, paper_url, programme_url, rfc822_date, rfc822_datetime
from grouping import sort_by_date_desc
from markup import Xml
from models import Paper, SiteData

# (path, priority, changefreq)
STATIC_ROUTES: tuple[tuple[str, str, str], ...] = (
    ("/", "1.0", "weekly"),
    ("/framework", "0.9", "monthly"),
    ("/papers/", "0.9", "weekly"),
    ("/programmes/", "0.8", "monthly"),
    ("/people", "0.7", "monthly"),
    ("/about", "0.7", "monthly"),
    ("/contact", "0.5", "yearly"),
)

PAPER_PRIORITY = "0.8"
PAPER_CHANGEFREQ = "monthly"
PROGRAMME_PRIORITY = "0.6"
PROGRAMME_CHANGEFREQ = "monthly"

DESCRIPTION_SEPARATOR = " — "

_URL_ENTRY = Xml(
    """  <url>
    <loc>{loc}</loc>
    <lastmod>{lastmod}</lastmod>
    <changefreq>{changefreq}</changefreq>
    <priority>{priority}</priority>
  </url>
"""
)

# ---------------------------------------------------------------------------
# Sitemap
# ---------------------------------------------------------------------------


def sitemap_xml(data: SiteData, config: SiteConfig, build_date: date) -> Xml:
    """urlset with static routes, then one entry per paper and per programme."""
    today = iso_date(build_date)
    entries: list[Xml] = [
        _URL_ENTRY.format(
            loc=f"{config.site_url}{path}",
            lastmod=today,
            changefreq=changefreq,
            priority=priority,
        )
        for path, priority, changefreq in STATIC_ROUTES
    ]
    entries.extend(
        _URL_ENTRY.format(
            loc=paper_url(paper, config),
            lastmod=paper.date_iso,
            changefreq=PAPER_CHANGEFREQ,
            priority=PAPER_PRIORITY,
        )
        for paper in data.papers
    )
    entries.extend(
        _URL_ENTRY.format(
            loc=programme_url(key, config),
            lastmod=today,
            changefreq=PROGRAMME_CHANGEFREQ,
            priority=PROGRAMME_PRIORITY,
        )
        for key in data.programmes
    )

    return Xml(
        """<?xml version="1.0" encoding="UTF-8"?>
<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">
{urls}</urlset>"""
    ).format(urls=Xml("").join(entries))


# ---------------------------------------------------------------------------
# RSS
# ---------------------------------------------------------------------------


def item_description(paper: Paper) -> str:
    """Subtitle, byline and abstract, whichever are present, as one line."""
    parts: list[str] = []
    if paper.subtitle:
        parts.append(paper.subtitle)
    if paper.authors:
        parts.append(f"By {', '.join(paper.authors)}")
    if paper.abstract:
        parts.append(paper.abstract)
    return DESCRIPTION_SEPARATOR.join(parts)


def _rss_item(paper: Paper, data: SiteData, config: SiteConfig) -> Xml:
    link = paper_url(paper, config)
    extra: list[Xml] = []
    if paper.doi:
        extra.append(Xml("\n      <dc:identifier>doi:{}</dc:identifier>").format(paper.doi))
    extra.extend(
        Xml("\n      <category>{}</category>").format(label_for(data.tags, tag))
        for tag in paper.tags
    )

    return Xml(
        """    <item>
      <title>{title}</title>
      <link>{link}</link>
      <guid isPermaLink="true">{link}</guid>
      <pubDate>{pub_date}</pubDate>
      <description>{description}</description>{extra}
    </item>
"""
    ).format(
        title=paper.title,
        link=link,
        pub_date=rfc822_date(paper.published_on),
        description=item_description(paper),
        extra=Xml("").join(extra),
    )


def rss_feed(data: SiteData, config: SiteConfig, built_at: datetime) -> Xml:
    """RSS 2.0 channel listing every paper, newest first."""
    items = Xml("").join(
        _rss_item(paper, data, config) for paper in sort_by_date_desc(data.papers)
    )
    return Xml(
        """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"
  xmlns:atom="http://www.w3.org/2005/Atom"
  xmlns:dc="http://purl.org/dc/elements/1.1/">
  <channel>
    <title>{title}</title>
    <link>{link}</link>
    <description>{description}</description>
    <language>en</language>
    <managingEditor>{editor}</managingEditor>
    <lastBuildDate>{built}</lastBuildDate>
    <atom:link href="{feed_url}" rel="self" type="application/rss+xml" />
{items}  </channel>
</rss>"""
    ).format(
        title=f"{config.site_title}{DESCRIPTION_SEPARATOR}Papers",
        link=config.site_url,
        description=config.site_description,
        editor=f"{config.editor_email} ({config.publisher})",
        built=rfc822_datetime(built_at),
        feed_url=config.feed_url,
        items=items,
    )
