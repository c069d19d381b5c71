"""Command line entry point for webitor."""
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

from webitor import __version__
from webitor.component import WebitorComponent
from webitor.config import Settings, settings
from webitor.diff import diff
from webitor.document import parse_html


def print_help():
    """Print help message."""
    print(f"""
webitor v{__version__}

Usage:
  webitor [options] <command> ...

Commands:
  render PAGE CONTENT   Render CONTENT (JSON) into PAGE (HTML), print the result
  diff ORIGINAL WORKING Print the changelist between two content files as JSON

Options:
  --no-cache-bust       Leave src values untouched when rendering
  -h, --help            Show this help
  -v, --version         Show version

Environment:
  WEBITOR_LOG_LEVEL     Log level for messages on stderr (default: INFO)
  WEBITOR_CACHE_BUST    Append ?_=<timestamp> to image sources (default: true)
""")


def _read_content(path: str) -> dict:
    document = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(document, dict) or "data" not in document:
        raise ValueError(f"{path}: content file must be a JSON object with a 'data' member")
    return document


def cmd_render(page: str, content: str, cache_bust: bool) -> int:
    document = parse_html(Path(page).read_text(encoding="utf-8"))
    component = WebitorComponent(document, settings=Settings(CACHE_BUST=cache_bust))
    warnings = component.load(content, _read_content(content))
    print(document.to_html())
    return 1 if warnings else 0


def cmd_diff(original: str, working: str) -> int:
    changes = diff(_read_content(original)["data"], _read_content(working)["data"])
    print(json.dumps([c.to_dict() for c in changes], indent=2, ensure_ascii=False))
    return 0


def main(argv: list[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)

    if not args or "-h" in args or "--help" in args:
        print_help()
        return 0
    if "-v" in args or "--version" in args:
        print(f"webitor {__version__}")
        return 0

    cache_bust = settings.CACHE_BUST
    if "--no-cache-bust" in args:
        args.remove("--no-cache-bust")
        cache_bust = False

    logging.basicConfig(level=settings.LOG_LEVEL, stream=sys.stderr, format="%(levelname)s %(name)s: %(message)s")

    command, rest = args[0], args[1:]
    try:
        if command == "render" and len(rest) == 2:
            return cmd_render(rest[0], rest[1], cache_bust)
        if command == "diff" and len(rest) == 2:
            return cmd_diff(rest[0], rest[1])
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    print(f"Unknown command: {' '.join(args)}", file=sys.stderr)
    print_help()
    return 2


if __name__ == "__main__":
    sys.exit(main())
