# contentful_pages/entries.py
from __future__ import annotations
import functools
import inspect
from typing import Any, Callable, Dict, List, Optional

from .errors import ConfigError, ReservedFieldNameError, TransformError

RESERVED = "sys"

Entry = Dict[str, Any]


def format_entry(raw: Dict[str, Any], content_type: str = "?") -> Entry:
    """Flattens ``{"sys": ..., "fields": {...}}`` into ``{"sys": ..., **fields}``."""
    fields = raw.get("fields") or {}
    if RESERVED in fields:
        raise ReservedFieldNameError(
            f"content type {content_type!r} has a field named '{RESERVED}'; "
            f"'{RESERVED}' is reserved for entry metadata, rename the field in Contentful"
        )
    out: Entry = {}
    if RESERVED in raw:
        out[RESERVED] = raw[RESERVED]
    out.update(fields)
    return out


def transform_entries(entries: List[Entry], fn: Optional[Callable[[Entry], Entry]]) -> List[Entry]:
    if fn is None:
        return list(entries)
    out = []
    for i, e in enumerate(entries):
        res = fn(e)
        if res is None:
            raise TransformError(f"transform returned nothing for entry #{i}")
        out.append(res)
    return out


def _is_comparator(fn: Callable) -> bool:
    try:
        params = inspect.signature(fn).parameters.values()
    except (TypeError, ValueError):
        return False
    required = [
        p for p in params
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD) and p.default is p.empty
    ]
    return len(required) >= 2


def sort_entries(entries: List[Entry], fn: Optional[Callable]) -> List[Entry]:
    """Stable sort by a key function or a ``(a, b) -> int`` comparator."""
    if fn is None:
        return list(entries)
    key = functools.cmp_to_key(fn) if _is_comparator(fn) else fn
    return sorted(entries, key=key)


def apply_pipeline(
    entries: List[Entry],
    transform: Optional[Callable] = None,
    sort: Optional[Callable] = None,
    order: str = "transform_then_sort",
) -> List[Entry]:
    if order == "transform_then_sort":
        return sort_entries(transform_entries(entries, transform), sort)
    if order == "sort_then_transform":
        return transform_entries(sort_entries(entries, sort), transform)
    raise ConfigError(f"unknown pipeline order {order!r}")
