# contentful_pages/site.py
"""
Minimal build host: Jinja views in ``views/``, output in ``public/``.

Views whose name (or any parent folder) starts with ``_`` are partials or
single entry templates and are not rendered as pages on their own.
"""
from __future__ import annotations
import sys
from pathlib import Path
from typing import Any, Dict, List

from jinja2 import Environment, FileSystemLoader, TemplateNotFound, select_autoescape
from markupsafe import Markup

from .config import CONFIG_FILE, load_project
from .errors import ConfigError
from .helpers import asset, md_to_html
from .plugin import ContentfulPlugin
from .writer import write_text

PAGE_SUFFIXES = (".html", ".xml", ".txt")


class Site:
    def __init__(self, root: "str|Path" = ".", client: Any = None, config_file: str = CONFIG_FILE):
        self.project = load_project(root, config_file)
        self.plugin = ContentfulPlugin(self.project["contentful"], root=self.project["root"], client=client)
        self.views_dir: Path = self.project["views"]
        self.public: Path = self.project["public"]
        self.env = Environment(
            loader=FileSystemLoader(str(self.views_dir)),
            autoescape=select_autoescape(["html", "xml"]),
        )
        self.env.globals["asset"] = asset
        self.env.filters["markdown"] = lambda md: Markup(md_to_html(md))

    def render_template(self, name: str, ctx: Dict[str, Any]) -> str:
        try:
            tpl = self.env.get_template(name)
        except TemplateNotFound as e:
            raise ConfigError(f"view {name!r} not found in {self.views_dir}") from e
        return tpl.render(**ctx)

    def pages(self) -> List[str]:
        def is_page(name: str) -> bool:
            return name.endswith(PAGE_SUFFIXES) and not any(part.startswith("_") for part in name.split("/"))
        return sorted(self.env.list_templates(filter_func=is_page))

    def compile(self) -> Dict[str, str]:
        """Builds everything in memory, then writes it. Returns ``{path: text}``."""
        if not self.views_dir.is_dir():
            raise ConfigError(f"views directory {self.views_dir} does not exist")

        self.plugin.fetch()
        outputs: Dict[str, str] = {}

        def add(rel: str, text: str, what: str):
            if rel in outputs:
                raise ConfigError(f"{rel} would be written twice ({what})")
            outputs[rel] = text

        # single entry paths are annotated before listing views see the entries
        for rel, html in self.plugin.compile_entries(self.render_template, self.project["locals"]).items():
            add(rel, html, "single entry view")

        base = dict(self.project["locals"], **self.plugin.locals())
        for name in self.pages():
            add(name, self.render_template(name, dict(base)), "view")

        for rel, text in self.plugin.json_outputs().items():
            add(rel, text, "json")

        for rel, text in outputs.items():
            write_text(self.public / rel, text)
        print(f"[build] {len(outputs)} files -> {self.public}", file=sys.stderr)
        return outputs
