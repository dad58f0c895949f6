# contentful_pages/writer.py
from __future__ import annotations
import json
from pathlib import Path
from typing import Any, Dict, List


def dump_json(entries: List[Dict[str, Any]]) -> str:
    """Serializes entries exactly as bound to templates; key order is kept."""
    return json.dumps(entries, ensure_ascii=False, indent=2) + "\n"


def write_text(p: Path, s: str):
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(s, "utf-8")