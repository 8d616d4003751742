# knowledge_base/cli.py
"""
Command line entry point for the knowledge catalog.

Commands:
- search: rank topics for a query and print them with their scores
- merge: write the merged catalog document as JSON
- export: write one CSV row per topic
- topics: list topic titles, optionally for a single category
"""

from __future__ import annotations
import argparse
import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger

from .accessors import all_topics, topics_by_category, topics_frame
from .config import LOG_LEVEL, SEARCH_DEFAULT_MAX_RESULTS
from .loader import load_catalog
from .models import Catalog
from .ranking import rank_topics


def _configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level)


def _parse_files(raw: Optional[str]) -> Optional[List[str]]:
    if not raw:
        return None
    return [f.strip() for f in raw.split(",") if f.strip()]


def _load(args) -> Optional[Catalog]:
    result = load_catalog(_parse_files(args.files), base=args.base)
    if not result.ok:
        print(f"[ERROR] {result.error}", file=sys.stderr)
        return None
    return result.value


def cmd_search(catalog: Catalog, args) -> int:
    ranked = rank_topics(catalog, args.query)[: args.top]
    if not ranked:
        print("No matching topics.")
        return 0
    for i, s in enumerate(ranked, 1):
        tags = ", ".join(s.topic.tags)
        print(f"{i}. [{s.score:>2}] {s.topic.title} ({s.category}) tags: {tags}")
    return 0


def cmd_merge(catalog: Catalog, args) -> int:
    out = Path(args.out)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(catalog.to_json() + "\n", encoding="utf-8")
    print(f"Wrote {len(catalog.categories)} categories to {out}")
    return 0


def cmd_export(catalog: Catalog, args) -> int:
    df = topics_frame(catalog)
    out = Path(args.out)
    out.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(out, index=False)
    print(f"Wrote {len(df)} rows to {out}")
    return 0


def cmd_topics(catalog: Catalog, args) -> int:
    topics = topics_by_category(catalog, args.category) if args.category else all_topics(catalog)
    for t in topics:
        print(t.title)
    return 0


COMMANDS = {
    "search": cmd_search,
    "merge": cmd_merge,
    "export": cmd_export,
    "topics": cmd_topics,
}


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="knowledge-base")
    ap.add_argument("--files", default=None, help="comma-separated source files (default: configured list)")
    ap.add_argument("--base", default=None, help="directory or URL prefix for relative file names")
    ap.add_argument("--log-level", default=LOG_LEVEL)
    sub = ap.add_subparsers(dest="command", required=True)

    sp = sub.add_parser("search", help="rank topics for a query")
    sp.add_argument("query")
    sp.add_argument("--top", type=int, default=SEARCH_DEFAULT_MAX_RESULTS,
                    help=f"max results (default {SEARCH_DEFAULT_MAX_RESULTS})")

    mp = sub.add_parser("merge", help="write the merged catalog as JSON")
    mp.add_argument("--out", required=True)

    ep = sub.add_parser("export", help="write topics as CSV")
    ep.add_argument("--out", required=True)

    tp = sub.add_parser("topics", help="list topic titles")
    tp.add_argument("--category", default=None)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.log_level.upper())
    if getattr(args, "top", 0) < 0:
        print("[ERROR] --top must be >= 0", file=sys.stderr)
        return 2
    catalog = _load(args)
    if catalog is None:
        return 1
    return COMMANDS[args.command](catalog, args)


if __name__ == "__main__":
    sys.exit(main())
