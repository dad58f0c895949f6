#!/usr/bin/env python3
# contentful_pages/build.py
"""
Compile a project whose views read Contentful entries.

USAGE:
  contentful-pages [PROJECT_DIR]
  python -m contentful_pages.build [PROJECT_DIR]

ENV:
  CONTENTFUL_ACCESS_TOKEN, CONTENTFUL_SPACE_ID, CONTENTFUL_PREVIEW override app.yml
"""
import sys
from typing import Any, List, Optional

from .errors import ContentfulError
from .site import Site


def main(argv: Optional[List[str]] = None, client: Any = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) > 1 or (args and args[0] in ("-h", "--help")):
        print("Usage: contentful-pages [PROJECT_DIR]")
        return 0 if args and args[0] in ("-h", "--help") else 1
    root = args[0] if args else "."
    try:
        outputs = Site(root, client=client).compile()
    except ContentfulError as e:
        print(f"[contentful] ❌ {e}", file=sys.stderr)
        return 1
    print(f"[build] Built {len(outputs)} files from {root}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
