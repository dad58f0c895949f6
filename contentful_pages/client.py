# contentful_pages/client.py
"""
Thin Contentful Content Delivery API client.

Only what the build needs: one content type descriptor and the (paged) list of
entries for it, with ``Link`` values resolved from ``includes`` the way the
official SDKs do. Errors are wrapped in ``FetchError`` and never retried.
"""
from __future__ import annotations
from typing import Any, Dict, List, Optional

import requests

from .errors import FetchError, MissingCredentialError

CDN_HOST = "https://cdn.contentful.com"
PREVIEW_HOST = "https://preview.contentful.com"
PAGE_SIZE = 1000
USER_AGENT = "contentful-pages/1.0 (+https://www.contentful.com/developers/docs/references/content-delivery-api/)"


class ContentfulClient:
    def __init__(
        self,
        access_token: str,
        space_id: str,
        preview: bool = False,
        environment: Optional[str] = None,
        timeout: float = 30,
        session: Optional[requests.Session] = None,
    ):
        if not access_token:
            raise MissingCredentialError("Missing required option 'access_token'")
        if not space_id:
            raise MissingCredentialError("Missing required option 'space_id'")
        self.space_id = space_id
        self.environment = environment
        self.host = PREVIEW_HOST if preview else CDN_HOST
        self.timeout = timeout
        self.session = session or requests.Session()
        # sent with every request; a caller-supplied session is left as it is
        self.headers = {
            "Authorization": f"Bearer {access_token}",
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }

    def _url(self, path: str) -> str:
        base = f"{self.host}/spaces/{self.space_id}"
        if self.environment:
            base += f"/environments/{self.environment}"
        return base + path

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = self._url(path)
        try:
            r = self.session.get(url, params=params, headers=self.headers, timeout=self.timeout)
            r.raise_for_status()
        except requests.RequestException as e:
            raise FetchError(f"GET {url} failed: {e}") from e
        try:
            return r.json()
        except ValueError as e:
            raise FetchError(f"GET {url} returned invalid JSON: {e}") from e

    def content_type(self, content_type_id: str) -> Dict[str, Any]:
        return self._get(f"/content_types/{content_type_id}")

    def entries(self, query: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        params = dict(query or {})
        params.setdefault("limit", PAGE_SIZE)
        skip = int(params.pop("skip", 0) or 0)
        items: List[Dict[str, Any]] = []
        includes: Dict[str, Dict[str, Any]] = {}
        while True:
            page = self._get("/entries", dict(params, skip=skip))
            batch = page.get("items") or []
            items.extend(batch)
            for link_type, objs in (page.get("includes") or {}).items():
                for obj in objs or []:
                    includes[_key(link_type, obj)] = obj
            for obj in batch:
                includes[_key("Entry", obj)] = obj
            skip += len(batch)
            total = int(page.get("total") or 0)
            if not batch or skip >= total:
                break
        return [resolve_links(e, includes, frozenset({_key("Entry", e)})) for e in items]


def _key(link_type: str, obj: Dict[str, Any]) -> str:
    return f"{link_type}:{(obj.get('sys') or {}).get('id', '')}"


def _is_link(value: Any) -> bool:
    return isinstance(value, dict) and (value.get("sys") or {}).get("type") == "Link" and set(value) == {"sys"}


def resolve_links(value: Any, includes: Dict[str, Dict[str, Any]], _seen: Optional[frozenset] = None) -> Any:
    """Replaces ``{"sys": {"type": "Link", ...}}`` with the included object.

    Unresolvable links stay as they are. An entry that links back to one of its
    ancestors keeps the raw link instead of recursing forever.
    """
    seen = _seen or frozenset()
    if _is_link(value):
        sys_ = value["sys"]
        key = f"{sys_.get('linkType')}:{sys_.get('id')}"
        target = includes.get(key)
        if target is None or key in seen:
            return value
        return resolve_links(target, includes, seen | {key})
    if isinstance(value, dict):
        out = {}
        for k, v in value.items():
            out[k] = v if k == "sys" else resolve_links(v, includes, seen)
        return out
    if isinstance(value, list):
        return [resolve_links(v, includes, seen) for v in value]
    return value
