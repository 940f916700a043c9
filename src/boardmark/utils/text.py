"""Escaping and URL checks for rendered posts."""

from __future__ import annotations

import html
from typing import Final

# Schemes a rendered <a href> may point to
_LINK_SCHEMES: Final = ("http://", "https://")


def escape_html(text: str) -> str:
    """Escape post text for HTML element content and attribute values.

    Quotes are escaped too (``'`` as ``&#x27;``), so the result is safe
    inside double- or single-quoted attributes.

    Example:
        >>> escape_html("<b>'hi'</b>")
        '&lt;b&gt;&#x27;hi&#x27;&lt;/b&gt;'
    """
    return html.escape(text, quote=True)


def is_safe_url(url: str) -> bool:
    """Check that a URL uses a scheme the renderer may emit in ``href``.

    The tokenizer only produces http(s) links, but trees can also come
    from deserialized storage.
    """
    return url.lower().startswith(_LINK_SCHEMES)
