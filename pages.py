"""HTML page builders: paper detail, papers index, programme and programmes index.

Every page shares one shell (head metadata, navigation, main, footer). All
fragments are `Html` values, so any raw field interpolated into a template is
escaped on the way in.
"""

from __future__ import annotations

import logging
from typing import Any

from config import SiteConfig
from formatting import (
    bibtex_entry,
    count_label,
    doi_url,
    human_date,
    iso_date,
    label_for,
    paper_path,
    paper_url,
    pdf_url,
    programme_path,
    programme_url,
    slash_date,
    suggested_citation,
    truncate_abstract,
)
from grouping import group_by_programme, paper_count_by_programme, papers_in_programme
from markup import Html, json_ld
from models import Paper, SiteData

LOGGER = logging.getLogger(__name__)

META_DESCRIPTION_LENGTH = 200
DC_DESCRIPTION_LENGTH = 300

FONTS_URL = (
    "https://fonts.googleapis.com/css2?family=Crimson+Text:ital,wght@0,400;0,600;0,700;1,400;1,600"
    "&family=Inter:wght@300;400;500;600;700&family=JetBrains+Mono:wght@400;500;600&display=swap"
)

# (href, label, section key)
NAV_LINKS: tuple[tuple[str, str, str], ...] = (
    ("/framework", "Framework", "framework"),
    ("/programmes/", "Programmes", "programmes"),
    ("/papers/", "Papers", "papers"),
    ("/people", "People", "people"),
    ("/about", "About", "about"),
)

FOOTER_LINKS: tuple[tuple[str, str], ...] = (
    ("/framework", "Framework"),
    ("/programmes/", "Programmes"),
    ("/papers/", "Papers"),
    ("/people", "People"),
    ("/about", "About"),
    ("/contact", "Contact"),
    ("/feed.xml", "RSS"),
)

_NL = Html("\n")

# ---------------------------------------------------------------------------
# Shared fragments
# ---------------------------------------------------------------------------


def _meta_name(name: str, content: str) -> Html:
    return Html('  <meta name="{}" content="{}">').format(name, content)


def _meta_property(prop: str, content: str) -> Html:
    return Html('  <meta property="{}" content="{}">').format(prop, content)


def head_html(
    config: SiteConfig,
    *,
    title: str | None = None,
    description: str | None = None,
    canonical_url: str | None = None,
    og_type: str = "website",
    paper: Paper | None = None,
) -> Html:
    """Document prologue through </head>.

    Paper pages additionally get Highwire Press, Dublin Core and JSON-LD
    ScholarlyArticle metadata.
    """
    page_title = f"{title} | {config.site_title}" if title else config.site_title
    description = description or config.site_description
    canonical_url = canonical_url or config.site_url
    display_title = title or config.site_title

    lines = [
        Html("<!DOCTYPE html>"),
        Html('<html lang="en">'),
        Html("<head>"),
        Html('  <meta charset="UTF-8">'),
        Html('  <meta name="viewport" content="width=device-width, initial-scale=1.0">'),
        Html("  <title>{}</title>").format(page_title),
        _meta_name("description", description),
        Html(""),
        Html("  <!-- Fonts -->"),
        Html('  <link rel="preconnect" href="https://fonts.googleapis.com">'),
        Html('  <link rel="preconnect" href="https://fonts.gstatic.com" crossorigin>'),
        Html('  <link href="{}" rel="stylesheet">').format(FONTS_URL),
        Html(""),
        Html("  <!-- CSS -->"),
        Html('  <link rel="stylesheet" href="{}">').format(config.stylesheet),
        Html(""),
        Html("  <!-- Canonical -->"),
        Html('  <link rel="canonical" href="{}">').format(canonical_url),
        Html(""),
        Html("  <!-- RSS -->"),
        Html('  <link rel="alternate" type="application/rss+xml" title="{} Papers" href="{}">').format(
            config.site_title, config.feed_url
        ),
        Html(""),
        Html("  <!-- Open Graph -->"),
        _meta_property("og:type", og_type),
        _meta_property("og:title", display_title),
        _meta_property("og:description", description),
        _meta_property("og:url", canonical_url),
        _meta_property("og:site_name", config.site_title),
        _meta_property("og:image", config.og_image_url),
        Html(""),
        Html("  <!-- Twitter -->"),
        _meta_name("twitter:card", "summary_large_image"),
        _meta_name("twitter:title", display_title),
        _meta_name("twitter:description", description),
        _meta_name("twitter:image", config.og_image_url),
    ]

    if paper is not None:
        lines.extend(_scholarly_meta(paper, config))

    lines.append(Html("</head>"))
    return _NL.join(lines)


def _scholarly_meta(paper: Paper, config: SiteConfig) -> list[Html]:
    pdf = pdf_url(paper, config)
    canonical = paper_url(paper, config)

    lines = [
        Html(""),
        Html("  <!-- Highwire Press / Google Scholar -->"),
        _meta_name("citation_title", paper.title),
    ]
    lines.extend(_meta_name("citation_author", author) for author in paper.authors)
    lines.append(_meta_name("citation_publication_date", slash_date(paper.published_on)))
    lines.append(_meta_name("citation_publisher", config.publisher))
    lines.append(_meta_name("citation_abstract_html_url", canonical))
    if pdf:
        lines.append(_meta_name("citation_pdf_url", pdf))
    if paper.doi:
        lines.append(_meta_name("citation_doi", paper.doi))
    if paper.journal:
        lines.append(_meta_name("citation_journal_title", paper.journal))

    lines.extend(
        [
            Html(""),
            Html("  <!-- Dublin Core -->"),
            _meta_name("DC.title", paper.title),
            _meta_name("DC.creator", "; ".join(paper.authors)),
            _meta_name("DC.date", iso_date(paper.published_on)),
            _meta_name("DC.publisher", config.publisher),
            _meta_name("DC.type", "Text"),
            _meta_name("DC.format", "text/html"),
            _meta_name("DC.language", "en"),
        ]
    )
    if paper.doi:
        lines.append(_meta_name("DC.identifier", f"doi:{paper.doi}"))
    if paper.abstract:
        lines.append(
            _meta_name("DC.description", truncate_abstract(paper.abstract, DC_DESCRIPTION_LENGTH))
        )

    lines.extend(
        [
            Html(""),
            Html("  <!-- JSON-LD -->"),
            Html('  <script type="application/ld+json">'),
            json_ld(scholarly_article(paper, config)),
            Html("  </script>"),
        ]
    )
    return lines


def scholarly_article(paper: Paper, config: SiteConfig) -> dict[str, Any]:
    """schema.org ScholarlyArticle description of `paper`."""
    article: dict[str, Any] = {
        "@context": "https://schema.org",
        "@type": "ScholarlyArticle",
        "name": paper.title,
        "headline": paper.title,
        "author": [{"@type": "Person", "name": author} for author in paper.authors],
        "datePublished": iso_date(paper.published_on),
        "publisher": {"@type": "Organization", "name": config.publisher},
        "url": paper_url(paper, config),
        "abstract": paper.abstract or "",
    }
    if paper.doi:
        article["identifier"] = {
            "@type": "PropertyValue",
            "propertyID": "doi",
            "value": paper.doi,
        }
        article["sameAs"] = doi_url(paper, config)
    pdf = pdf_url(paper, config)
    if pdf:
        article["encoding"] = {
            "@type": "MediaObject",
            "contentUrl": pdf,
            "encodingFormat": "application/pdf",
        }
    return article


def nav_html(config: SiteConfig, active: str | None) -> Html:
    links = Html("\n        ").join(
        Html('<a href="{}" class="site-nav__link{}">{}</a>').format(
            href,
            Html(" site-nav__link--active") if key == active else Html(""),
            label,
        )
        for href, label, key in NAV_LINKS
    )
    return Html(
        """<nav class="site-nav" role="navigation" aria-label="Main navigation">
    <div class="site-nav__inner">
      <a href="/" class="site-nav__brand">{brand}</a>
      <button class="site-nav__toggle" aria-label="Toggle menu" onclick="document.querySelector('.site-nav__links').classList.toggle('is-open')">
        <span></span><span></span><span></span>
      </button>
      <div class="site-nav__links">
        {links}
      </div>
    </div>
  </nav>"""
    ).format(brand=config.site_title, links=links)


def footer_html(config: SiteConfig) -> Html:
    links = Html("\n          ").join(
        Html('<a href="{}">{}</a>').format(href, label) for href, label in FOOTER_LINKS
    )
    return Html(
        """<footer class="site-footer">
    <div class="container container--wide">
      <div class="site-footer__inner">
        <div>
          <div class="site-footer__brand">{brand}</div>
          <div class="site-footer__copy">&copy; {year} {publisher} &middot; Operated by {operator}</div>
        </div>
        <div class="site-footer__links">
          {links}
        </div>
      </div>
    </div>
  </footer>"""
    ).format(
        brand=config.site_title,
        year=str(config.copyright_year),
        publisher=config.publisher,
        operator=config.operator,
        links=links,
    )


def _page(head: Html, nav: Html, body: Html, footer: Html) -> Html:
    return Html(
        """{head}
<body class="has-nav">
  {nav}
  {body}
  {footer}
</body>
</html>"""
    ).format(head=head, nav=nav, body=body, footer=footer)


def _status_pill(paper: Paper, data: SiteData) -> Html:
    return Html('<span class="status status--{}">{}</span>').format(
        paper.status, label_for(data.statuses, paper.status)
    )


def _paper_card(paper: Paper, data: SiteData) -> Html:
    subtitle = (
        Html('\n          <p class="paper-card__subtitle">{}</p>').format(paper.subtitle)
        if paper.subtitle
        else Html("")
    )
    return Html(
        """
        <a href="{href}" class="paper-card">
          <div class="paper-card__meta">
            <span class="paper-card__date">{date}</span>
            {status}
          </div>
          <h3 class="paper-card__title">{title}</h3>{subtitle}
          <p class="paper-card__authors">{authors}</p>
        </a>"""
    ).format(
        href=paper_path(paper),
        date=human_date(paper.published_on),
        status=_status_pill(paper, data),
        title=paper.title,
        subtitle=subtitle,
        authors=", ".join(paper.authors),
    )


def _programme_label(key: str, data: SiteData) -> str:
    programme = data.programmes.get(key)
    if programme is None:
        return key
    return f"Programme {programme.index}: {programme.title}"


# ---------------------------------------------------------------------------
# Paper detail
# ---------------------------------------------------------------------------


def _paper_actions(paper: Paper, config: SiteConfig) -> list[Html]:
    external = Html('<a href="{}" class="btn{}" target="_blank" rel="noopener">{}</a>')
    actions: list[Html] = []
    pdf = pdf_url(paper, config)
    if pdf:
        actions.append(external.format(pdf, Html(" btn--primary"), "Download PDF"))
    if paper.doi:
        actions.append(external.format(doi_url(paper, config), Html(""), f"DOI: {paper.doi}"))
    if paper.github:
        actions.append(external.format(paper.github, Html(""), "GitHub"))
    if paper.dashboard:
        actions.append(external.format(paper.dashboard, Html(""), "Dashboard"))
    return actions


def _section(title: str, content: Html) -> Html:
    return Html(
        """
      <div class="paper-detail__section">
        <h2 class="paper-detail__section-title">{title}</h2>
        {content}
      </div>"""
    ).format(title=title, content=content)


def paper_page(paper: Paper, data: SiteData, config: SiteConfig) -> Html:
    """Detail page for one paper, written to papers/<id>.html."""
    head = head_html(
        config,
        title=paper.title,
        description=truncate_abstract(paper.abstract, META_DESCRIPTION_LENGTH),
        canonical_url=paper_url(paper, config),
        og_type="article",
        paper=paper,
    )

    meta = Html(
        """
      <div class="paper-detail__meta">
        <span class="paper-detail__date">{date}</span>
        {status}
        <a href="{href}" class="paper-detail__programme">{programme}</a>
      </div>"""
    ).format(
        date=human_date(paper.published_on),
        status=_status_pill(paper, data),
        href=programme_path(paper.program),
        programme=_programme_label(paper.program, data),
    )

    title_block = [Html('      <h1 class="paper-detail__title">{}</h1>').format(paper.title)]
    if paper.subtitle:
        title_block.append(
            Html('      <p class="paper-detail__subtitle">{}</p>').format(paper.subtitle)
        )
    title_block.append(
        Html('      <p class="paper-detail__authors">{}</p>').format(", ".join(paper.authors))
    )
    if paper.journal:
        title_block.append(
            Html('      <p class="paper-detail__journal">Submitted to: {}</p>').format(paper.journal)
        )

    actions = _paper_actions(paper, config)
    actions_html = (
        Html('\n      <div class="paper-detail__actions">\n        {}\n      </div>').format(
            Html("\n        ").join(actions)
        )
        if actions
        else Html("")
    )

    abstract_html = (
        _section(
            "Abstract",
            Html('<p class="paper-detail__abstract">{}</p>').format(paper.abstract),
        )
        if paper.abstract
        else Html("")
    )

    citation_html = _section(
        "Suggested Citation",
        Html('<div class="citation-block">\n          {}\n        </div>').format(
            suggested_citation(paper, config)
        ),
    )

    bibtex_html = _section(
        "BibTeX",
        Html(
            """<div class="bibtex">
          <pre class="citation-block" id="bibtex-{id}">{bibtex}</pre>
          <button class="btn btn--small bibtex__copy" onclick="navigator.clipboard.writeText(this.previousElementSibling.textContent).then(() => {{ this.textContent = 'Copied'; setTimeout(() => {{ this.textContent = 'Copy'; }}, 2000); }})">Copy</button>
        </div>"""
        ).format(id=paper.paper_id, bibtex=bibtex_entry(paper, data.statuses, config)),
    )

    tags_html = Html("")
    if paper.tags:
        pills = Html("\n          ").join(
            Html('<span class="tag">{}</span>').format(label_for(data.tags, tag))
            for tag in paper.tags
        )
        tags_html = _section(
            "Tags",
            Html('<div class="tag-list">\n          {}\n        </div>').format(pills),
        )

    body = Html(
        """
  <main class="paper-detail">
    <div class="container">
      <a href="/papers/" class="paper-detail__back">&larr; All Papers</a>

      <div class="paper-detail__header">
{meta}
{title_block}
      </div>
{actions}
{abstract}
{citation}
{bibtex}
{tags}
    </div>
  </main>"""
    ).format(
        meta=meta,
        title_block=_NL.join(title_block),
        actions=actions_html,
        abstract=abstract_html,
        citation=citation_html,
        bibtex=bibtex_html,
        tags=tags_html,
    )

    return _page(head, nav_html(config, "papers"), body, footer_html(config))


# ---------------------------------------------------------------------------
# Index pages
# ---------------------------------------------------------------------------


def papers_index_page(data: SiteData, config: SiteConfig) -> Html:
    """All papers, one section per programme in configured order."""
    head = head_html(
        config,
        title="Papers",
        description=f"Research papers from the {config.site_description}.",
        canonical_url=f"{config.site_url}/papers/",
    )

    sections: list[Html] = []
    for key, bucket in group_by_programme(data.papers, data.programmes).items():
        programme = data.programmes.get(key)
        if not bucket or programme is None:
            continue
        sections.append(
            Html(
                """
      <section>
        <span class="section-label">Programme {index}</span>
        <h2 class="section-title">{title}</h2>
        <div class="featured-papers">
{cards}
        </div>
      </section>"""
            ).format(
                index=programme.index,
                title=programme.title,
                cards=Html("").join(_paper_card(p, data) for p in bucket),
            )
        )

    summary = (
        f"{count_label(len(data.papers), 'paper')} across "
        f"{count_label(len(data.programmes), 'research programme')}."
    )
    body = Html(
        """
  <main>
    <div class="container">
      <section class="hero">
        <span class="hero__label">Research Output</span>
        <h1 class="hero__title">Papers</h1>
        <p class="hero__subtitle">{summary}</p>
      </section>
{sections}
    </div>
  </main>"""
    ).format(summary=summary, sections=Html("").join(sections))

    return _page(head, nav_html(config, "papers"), body, footer_html(config))


def programme_page(key: str, data: SiteData, config: SiteConfig) -> Html | None:
    """Detail page for one configured programme; None for an unknown key."""
    programme = data.programmes.get(key)
    if programme is None:
        LOGGER.debug("No programme configured for key=%s", key)
        return None

    papers = papers_in_programme(data.papers, key)
    head = head_html(
        config,
        title=f"Programme {programme.index}: {programme.title}",
        description=programme.description,
        canonical_url=programme_url(key, config),
    )

    body = Html(
        """
  <main class="programme-detail">
    <div class="container">
      <a href="/programmes/" class="paper-detail__back">&larr; All Programmes</a>

      <div class="programme-detail__header">
        <span class="programme-detail__index">Programme {index}</span>
        <h1 class="programme-detail__title">{title}</h1>
        <p class="programme-detail__desc">{description}</p>
      </div>

      <section>
        <span class="section-label">{count}</span>
        <div class="featured-papers">
{cards}
        </div>
      </section>
    </div>
  </main>"""
    ).format(
        index=programme.index,
        title=programme.title,
        description=programme.description,
        count=count_label(len(papers), "paper"),
        cards=Html("").join(_paper_card(p, data) for p in papers),
    )

    return _page(head, nav_html(config, "programmes"), body, footer_html(config))


def programmes_index_page(data: SiteData, config: SiteConfig) -> Html:
    head = head_html(
        config,
        title="Research Programmes",
        description=f"Research programmes of the {config.site_description}.",
        canonical_url=f"{config.site_url}/programmes/",
    )

    counts = paper_count_by_programme(data.papers, data.programmes)
    cards = Html("").join(
        Html(
            """
        <a href="{href}" class="programme-card">
          <span class="programme-card__index">Programme {index}</span>
          <h3 class="programme-card__title">{title}</h3>
          <p class="programme-card__desc">{description}</p>
          <span class="programme-card__count">{count}</span>
        </a>"""
        ).format(
            href=programme_path(key),
            index=programme.index,
            title=programme.title,
            description=programme.description,
            count=count_label(counts.get(key, 0), "paper"),
        )
        for key, programme in data.programmes.items()
    )

    body = Html(
        """
  <main>
    <div class="container container--wide">
      <section class="hero">
        <span class="hero__label">Research Structure</span>
        <h1 class="hero__title">Programmes</h1>
        <p class="hero__subtitle">{summary}</p>
      </section>

      <div class="programme-grid">
{cards}
      </div>
    </div>
  </main>"""
    ).format(
        summary=f"{count_label(len(data.programmes), 'research programme')} and the papers filed under each.",
        cards=cards,
    )

    return _page(head, nav_html(config, "programmes"), body, footer_html(config))
