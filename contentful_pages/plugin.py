# contentful_pages/plugin.py
"""
Contentful plugin for the static build.

Order of work for one build (sequential, one fetch per content type):

  validate options -> fetch descriptor + entries -> reject reserved field names
  -> transform/sort -> compute single entry paths and annotate entries
  -> expose locals -> render single entry views -> JSON artifacts

Nothing is written to disk here; the host collects every output and writes
them only once the whole build succeeded.
"""
from __future__ import annotations
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from .client import ContentfulClient
from .config import validate
from .entries import apply_pipeline, format_entry
from .errors import ConfigError, PathFunctionError
from .paths import annotate, clean_path, entry_urls, locals_name_for
from .writer import dump_json

Render = Callable[[str, Dict[str, Any]], str]


class ContentfulPlugin:
    def __init__(self, options: Optional[Dict[str, Any]], root: Optional[Path] = None, client: Any = None):
        # raises MissingCredentialError / MissingContentTypeError before any request
        self.options = validate(options, root)
        self._client = client
        self.types: List[Dict[str, Any]] = []

    @property
    def client(self):
        if self._client is None:
            o = self.options
            self._client = ContentfulClient(
                o["access_token"], o["space_id"], preview=o["preview"], environment=o["environment"]
            )
        return self._client

    def fetch(self) -> Dict[str, Any]:
        """Fetches and prepares every content type; returns the template locals."""
        types = [self._prepare(t) for t in self.options["content_types"]]
        names = [t["locals_name"] for t in types]
        dupes = sorted({n for n in names if names.count(n) > 1})
        if dupes:
            raise ConfigError(f"two content types share the locals name {dupes[0]!r}; set locals_name")
        self.types = types
        return self.locals()

    def _prepare(self, t: Dict[str, Any]) -> Dict[str, Any]:
        descriptor = self.client.content_type(t["id"]) or {}
        name = t["locals_name"] or locals_name_for(descriptor.get("name") or t["id"])
        display_field = t["display_field"] or descriptor.get("displayField")

        raw = self.client.entries(dict(t["filters"], content_type=t["id"]))
        entries = [format_entry(e, name) for e in raw]
        entries = apply_pipeline(entries, t["transform"], t["sort"], t["order"])

        urls: List[List[str]] = []
        single = t["single_entry"]
        if single:
            owner: Dict[str, int] = {}
            for i, e in enumerate(entries):
                entry_paths, multi = entry_urls(e, single["path"], name, display_field, i)
                for u in entry_paths:
                    if u in owner:
                        raise PathFunctionError(f"{name}: entries #{owner[u]} and #{i} both render to {u}")
                    owner[u] = i
                annotate(e, entry_paths, multi)
                urls.append(entry_paths)

        steps = [s for s, on in (("transformed", t["transform"]), ("sorted", t["sort"])) if on]
        print(
            f"[contentful] {name}: {len(entries)} entries"
            + (f" ({', '.join(steps)})" if steps else "")
            + (f", {sum(len(u) for u in urls)} single entry pages" if single else ""),
            file=sys.stderr,
        )
        return dict(t, locals_name=name, display_field=display_field,
                    content_type=descriptor, entries=entries, urls=urls)

    def locals(self) -> Dict[str, Any]:
        return {"contentful": {t["locals_name"]: t["entries"] for t in self.types}}

    def compile_entries(self, render: Render, project_locals: Optional[Dict[str, Any]] = None) -> Dict[str, str]:
        """Renders every single entry view; returns ``{output path: html}``.

        Each render gets its own context dict, so nothing set for one entry is
        visible while rendering the next.
        """
        shared = dict(project_locals or {}, **self.locals())
        out: Dict[str, str] = {}
        for t in self.types:
            single = t["single_entry"]
            if not single:
                continue
            for entry, entry_paths in zip(t["entries"], t["urls"]):
                for url in entry_paths:
                    ctx = dict(shared, entry=entry, _path=url)
                    out[url.lstrip("/")] = render(single["view"], ctx)
        return out

    def json_outputs(self) -> Dict[str, str]:
        return {clean_path(t["write"]): dump_json(t["entries"]) for t in self.types if t["write"]}
