# contentful_pages/helpers.py
"""Template helpers registered on the Jinja environment."""
from __future__ import annotations
from typing import Any, Dict, Optional
from urllib.parse import urlencode

from markdown import markdown


def asset(obj: Any, params: Optional[Dict[str, Any]] = None, **kw: Any) -> str:
    """URL of a Contentful asset, with image API params as a query string.

    ``{{ asset(entry.image, w=100, h=100) }}`` -> ``//images.ctfassets.net/...?w=100&h=100``
    """
    fields = (obj.get("fields") or {}) if isinstance(obj, dict) else {}
    url = ((fields.get("file") or {}).get("url")) or ""
    query = dict(params or {}, **kw)
    if not url or not query:
        return url
    return f"{url}?{urlencode(query)}"


def md_to_html(md: str) -> str:
    if not md: return ""
    return markdown(md, extensions=["extra", "sane_lists", "tables", "toc"])
