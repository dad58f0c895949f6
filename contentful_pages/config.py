# contentful_pages/config.py
from __future__ import annotations
import importlib
import importlib.util
import os
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import yaml

from .errors import ConfigError, MissingContentTypeError, MissingCredentialError

CONFIG_FILE = "app.yml"
ORDERS = ("transform_then_sort", "sort_then_transform")


def read_yaml(path: "str|Path") -> Dict[str, Any]:
    p = Path(path)
    raw = p.read_text("utf-8")
    # BOM/CRLF/TAB would otherwise break the YAML parser
    if raw.startswith("\ufeff"):
        raw = raw.lstrip("\ufeff")
    raw = raw.replace("\r\n", "\n").replace("\r", "\n")
    raw = raw.replace("\t", "  ")
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        print("[config] YAML parse error:", e, file=sys.stderr)
        mark = getattr(e, "problem_mark", None)
        if mark:
            err_line = mark.line + 1
            start = max(1, err_line - 3)
            end = err_line + 3
            lines = raw.split("\n")
            for i in range(start, min(end, len(lines)) + 1):
                prefix = ">>" if i == err_line else "  "
                print(f"{prefix} {i:4d}: {lines[i-1]}", file=sys.stderr)
        raise ConfigError(f"cannot parse {p}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{p} must contain a mapping at the top level")
    return data


def _env(name: str, default: Any) -> Any:
    v = os.getenv(name)
    return default if v is None or str(v).strip() == "" else v


def truthy(val) -> bool:
    if isinstance(val, bool):
        return val
    if val is None:
        return False
    if isinstance(val, (int, float)):
        return val != 0
    return str(val).strip().lower() in {"1", "true", "yes", "y", "t", "on"}


def _project_module_file(mod_name: str, root: Optional[Path]) -> Optional[Path]:
    if root is None:
        return None
    rel = Path(*mod_name.split("."))
    for candidate in (Path(root) / rel.with_suffix(".py"), Path(root) / rel / "__init__.py"):
        if candidate.is_file():
            return candidate
    return None


def _load_project_module(mod_name: str, path: Path):
    # compiled from source on every call and kept out of sys.modules, so two
    # projects with a hooks.py never share functions and edits are picked up
    package = path.name == "__init__.py"
    spec = importlib.util.spec_from_file_location(
        mod_name, path,
        submodule_search_locations=[str(path.parent)] if package else None,
    )
    if spec is None:
        raise ImportError(f"cannot load {path}")
    module = importlib.util.module_from_spec(spec)
    root = path.parents[len(mod_name.split(".")) - (0 if package else 1)]
    saved = list(sys.path)
    sys.path.insert(0, str(root))
    try:
        exec(compile(path.read_bytes(), str(path), "exec"), module.__dict__)
    finally:
        sys.path[:] = saved
    return module


def resolve_callable(ref: Any, root: Optional[Path] = None) -> Optional[Callable]:
    """Turn ``"module:function"`` into the function it names.

    Callables pass through untouched so Python callers can hand in lambdas.
    A module that exists as a file under the project root is loaded from that
    file; anything else is a regular import.
    """
    if ref is None or ref == "":
        return None
    if callable(ref):
        return ref
    if not isinstance(ref, str) or ":" not in ref:
        raise ConfigError(f"expected 'module:function' or a callable, got {ref!r}")
    mod_name, _, attr = ref.partition(":")
    mod_name = mod_name.strip()
    if not mod_name:
        raise ConfigError(f"expected 'module:function', got {ref!r}")
    try:
        path = _project_module_file(mod_name, root)
        obj = _load_project_module(mod_name, path) if path else importlib.import_module(mod_name)
    except ImportError as e:
        raise ConfigError(f"cannot import {mod_name!r} for {ref!r}: {e}") from e
    for part in attr.strip().split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise ConfigError(f"{mod_name!r} has no attribute {attr!r}") from e
    if not callable(obj):
        raise ConfigError(f"{ref!r} is not callable")
    return obj


def normalize_content_type(raw: Any, key: Optional[str] = None, root: Optional[Path] = None) -> Dict[str, Any]:
    """Accepts a bare id or a mapping; ``key`` is the name from the k/v form."""
    if isinstance(raw, str):
        raw = {"id": raw}
    if not isinstance(raw, dict):
        raise MissingContentTypeError(f"content type {key or raw!r} has no id")
    ct_id = str(raw.get("id") or "").strip()
    if not ct_id:
        raise MissingContentTypeError(f"content type {key or raw.get('name') or '?'!r} has no id")

    single = raw.get("single_entry")
    if not single and raw.get("template"):
        single = {"view": raw["template"], "path": raw.get("path")}
    if single:
        if not isinstance(single, dict) or not single.get("view"):
            raise ConfigError(f"content type {ct_id!r}: single_entry needs a 'view'")
        single = {"view": str(single["view"]), "path": resolve_callable(single.get("path"), root)}

    order = raw.get("order") or ORDERS[0]
    if order not in ORDERS:
        raise ConfigError(f"content type {ct_id!r}: order must be one of {', '.join(ORDERS)}, got {order!r}")

    filters = raw.get("filters") or {}
    if not isinstance(filters, dict):
        raise ConfigError(f"content type {ct_id!r}: filters must be a mapping")

    return {
        "id": ct_id,
        "locals_name": raw.get("locals_name") or raw.get("name") or key,
        "display_field": raw.get("display_field") or raw.get("displayField"),
        "filters": dict(filters),
        "transform": resolve_callable(raw.get("transform"), root),
        "sort": resolve_callable(raw.get("sort"), root),
        "order": order,
        "write": raw.get("write") or None,
        "single_entry": single or None,
    }


def _content_type_list(options: Dict[str, Any], root: Optional[Path]) -> List[Dict[str, Any]]:
    raw = options.get("content_types")
    if raw is None and options.get("content_type") is not None:
        raw = [options["content_type"]]
    if not raw:
        return []
    if isinstance(raw, dict):
        return [normalize_content_type(v, key=str(k), root=root) for k, v in raw.items()]
    if isinstance(raw, (list, tuple)):
        return [normalize_content_type(v, root=root) for v in raw]
    return [normalize_content_type(raw, root=root)]


def validate(options: Optional[Dict[str, Any]], root: Optional[Path] = None) -> Dict[str, Any]:
    """Checks plugin options before anything touches the network.

    Returns the normalized options: every content type as a dict with the keys
    ``id, locals_name, display_field, filters, transform, sort, order, write,
    single_entry`` and every ``module:function`` reference resolved.
    """
    options = options or {}
    token = str(options.get("access_token") or "").strip()
    if not token:
        raise MissingCredentialError("Missing required option 'access_token'")

    types = _content_type_list(options, root)
    if not types:
        raise MissingContentTypeError("No content type configured: set 'content_types' with at least one id")

    seen = set()
    for t in types:
        name = t["locals_name"]
        if name and name in seen:
            raise ConfigError(f"two content types share the locals name {name!r}")
        seen.add(name)

    return {
        "access_token": token,
        "space_id": str(options.get("space_id") or "").strip(),
        "preview": truthy(options.get("preview")),
        "environment": options.get("environment") or None,
        "content_types": types,
    }


def load_project(root: "str|Path", config_file: str = CONFIG_FILE) -> Dict[str, Any]:
    root = Path(root).resolve()
    path = root / config_file
    if not path.exists():
        raise ConfigError(f"missing project config {path}")
    cfg = read_yaml(path)

    contentful = cfg.get("contentful") or {}
    if not isinstance(contentful, dict):
        raise ConfigError(f"{path}: 'contentful' must be a mapping")
    contentful = dict(contentful)
    contentful["access_token"] = _env("CONTENTFUL_ACCESS_TOKEN", contentful.get("access_token"))
    contentful["space_id"] = _env("CONTENTFUL_SPACE_ID", contentful.get("space_id"))
    contentful["preview"] = _env("CONTENTFUL_PREVIEW", contentful.get("preview", False))

    project_locals = cfg.get("locals") or {}
    if not isinstance(project_locals, dict):
        raise ConfigError(f"{path}: 'locals' must be a mapping")

    return {
        "root": root,
        "views": root / str(cfg.get("views") or "views"),
        "public": root / str(cfg.get("public") or "public"),
        "locals": dict(project_locals),
        "contentful": contentful,
    }
