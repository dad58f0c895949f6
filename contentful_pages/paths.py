# contentful_pages/paths.py
from __future__ import annotations
import posixpath
import re
from typing import Any, Callable, Dict, List, Optional, Tuple

from slugify import slugify as _slugify

from .errors import PathFunctionError


def slugify(text: Any) -> str:
    """``"Real Talk"`` -> ``"real-talk"``."""
    return _slugify(str(text or ""))


def pluralize(word: str) -> str:
    if not word:
        return word
    if re.search(r"[^aeiou]y$", word):
        return word[:-1] + "ies"
    if re.search(r"(s|x|z|ch|sh)$", word):
        return word + "es"
    return word + "s"


def locals_name_for(type_name: str) -> str:
    """Content type name -> template locals key: ``"Blog Post"`` -> ``"blog_posts"``."""
    base = _slugify(type_name or "", separator="_")
    if not base:
        return "entries"
    head, _, last = base.rpartition("_")
    return (head + "_" if head else "") + pluralize(last)


def clean_path(path: str) -> str:
    """Output path relative to the public root: no leading ``/``, ``..`` collapsed."""
    p = posixpath.normpath("/" + str(path).strip()).lstrip("/")
    if not p or p == ".":
        raise PathFunctionError(f"empty output path {path!r}")
    return p


def normalize_path(path: str) -> str:
    """Like ``clean_path``; ``.html`` added when there is no extension."""
    p = clean_path(path)
    if "." not in p.rsplit("/", 1)[-1]:
        p += ".html"
    return p



def to_url(path: str) -> str:
    return "/" + normalize_path(path)


def default_path(entry: Dict[str, Any], locals_name: str, display_field: Optional[str]) -> str:
    value = entry.get(display_field) if display_field else None
    slug = slugify(value)
    if not slug:
        raise PathFunctionError(
            f"{locals_name}: entry has no usable value in display field {display_field!r} "
            f"to build a default path; configure single_entry.path"
        )
    return f"{locals_name}/{slug}.html"


def entry_urls(
    entry: Dict[str, Any],
    path_fn: Optional[Callable],
    locals_name: str,
    display_field: Optional[str],
    position: int = 0,
) -> Tuple[List[str], bool]:
    """Returns ``(urls, multi)``; ``multi`` is True when the path function gave a sequence."""
    if path_fn is None:
        result = default_path(entry, locals_name, display_field)
    else:
        try:
            result = path_fn(entry)
        except Exception as e:
            raise PathFunctionError(f"{locals_name}: path function failed for entry #{position}: {e}") from e

    if isinstance(result, str):
        return [to_url(result)], False
    if isinstance(result, (list, tuple)) and result and all(isinstance(p, str) for p in result):
        return [to_url(p) for p in result], True
    raise PathFunctionError(
        f"{locals_name}: path function must return a string or a non-empty list of strings, "
        f"got {result!r} for entry #{position}"
    )


def annotate(entry: Dict[str, Any], urls: List[str], multi: bool) -> Dict[str, Any]:
    entry.pop("_url", None)
    entry.pop("_urls", None)
    if multi:
        entry["_urls"] = list(urls)
    else:
        entry["_url"] = urls[0]
    return entry
