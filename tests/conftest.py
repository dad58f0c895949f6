import copy
import sys
from pathlib import Path

import pytest

# Ensure project root is on the Python path for imports
sys.path.append(str(Path(__file__).resolve().parents[1]))

FIXTURES = Path(__file__).resolve().parent / "fixtures"

DEFAULT_ENTRIES = [
    {"sys": {"sys": "data"}, "fields": {"title": "Default Title", "body": "Default Body"}}
]
DEFAULT_CONTENT_TYPE = {"name": "Blog Post", "displayField": "title"}


class FakeClient:
    """Stands in for ContentfulClient and records every call."""

    def __init__(self, entries=None, content_type=None, error=None):
        self._entries = DEFAULT_ENTRIES if entries is None else entries
        self._content_type = content_type or DEFAULT_CONTENT_TYPE
        self._error = error
        self.calls = []

    def content_type(self, content_type_id):
        self.calls.append(("content_type", content_type_id))
        if self._error:
            raise self._error
        return dict(self._content_type)

    def entries(self, query):
        self.calls.append(("entries", dict(query)))
        return copy.deepcopy(self._entries)


def posts(*rows):
    """``posts(("Title", "Body"), ...)`` -> raw entries; a ``None`` body leaves the field out."""
    out = []
    for title, body in rows:
        fields = {"title": title}
        if body is not None:
            fields["body"] = body
        out.append({"fields": fields})
    return out


@pytest.fixture(autouse=True)
def _isolated(monkeypatch):
    for name in ("CONTENTFUL_ACCESS_TOKEN", "CONTENTFUL_SPACE_ID", "CONTENTFUL_PREVIEW"):
        monkeypatch.delenv(name, raising=False)
    # hook modules are imported from each project root
    monkeypatch.setattr(sys, "path", list(sys.path))


@pytest.fixture
def make_project(tmp_path):
    """Writes ``app.yml``, views and hook modules into a fresh project dir.

    ``name`` puts the project in its own subdirectory so one test can build several.
    """

    def _make(config, views, modules=None, name=None):
        root = tmp_path / name if name else tmp_path
        root.mkdir(parents=True, exist_ok=True)
        (root / "app.yml").write_text(config, encoding="utf-8")
        for rel, body in views.items():
            p = root / "views" / rel
            p.parent.mkdir(parents=True, exist_ok=True)
            p.write_text(body, encoding="utf-8")
        for mod, body in (modules or {}).items():
            (root / f"{mod}.py").write_text(body, encoding="utf-8")
        return root

    return _make
