"""Escape-by-default markup strings for the HTML and XML builders.

`Html` and `Xml` are markupsafe `Markup` types. A plain `str` that is
interpolated with `.format()`, added with `+` or passed through `.join()`
gets escaped; an `Html`/`Xml` value is already markup and is kept verbatim.
Builders therefore never call the escape functions by hand.
"""

from __future__ import annotations

import json
from typing import Any

from markupsafe import Markup

from formatting import escape_html, escape_xml


class Html(Markup):
    """HTML fragment; foreign strings are escaped with `escape_html`."""

    __slots__ = ()

    @classmethod
    def escape(cls, s: Any) -> Html:
        if hasattr(s, "__html__"):
            return cls(s.__html__())
        return cls(escape_html(s))


class Xml(Markup):
    """XML fragment; foreign strings are escaped with `escape_xml`."""

    __slots__ = ()

    @classmethod
    def escape(cls, s: Any) -> Xml:
        if hasattr(s, "__html__"):
            return cls(s.__html__())
        return cls(escape_xml(s))


def json_ld(data: dict[str, Any]) -> Html:
    """Serialise structured data for a <script type="application/ld+json"> block."""
    text = json.dumps(data, indent=2, ensure_ascii=False)
    text = text.replace("&", "\\u0026").replace("<", "\\u003c").replace(">", "\\u003e")
    return Html(text)
