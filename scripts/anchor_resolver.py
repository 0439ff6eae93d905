#!/usr/bin/env python3
"""Locate text or resolve an insertion point in a document.

Usage:
    python3 scripts/anchor_resolver.py --doc prompt.txt --query "Greet the user"

    python3 scripts/anchor_resolver.py --doc prompt.txt \
      --location 'at the end of "Tone"' --hint Tone --sections sections.json

``--sections`` is a JSON array of {id, title, tag_name, char_start,
char_end, content} records produced by an external section parser.
Structured JSON output goes to stdout; human messages go to stderr.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from textanchor.anchor_types import MatchPolicy, Section
from textanchor.insertion import resolve_insertion_point
from textanchor.io_utils import dump_json, load_records
from textanchor.locator import locate


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Locate text or resolve an insertion point in a document."
    )
    parser.add_argument(
        "--doc", required=True, type=Path, help="Path to the document text"
    )
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--query", help="Text to locate")
    target.add_argument(
        "--location", help="Location description, e.g. 'after \"X\"'"
    )
    parser.add_argument(
        "--hint", default=None, help="Section name hint for --location"
    )
    parser.add_argument(
        "--sections", type=Path, default=None, help="JSON array of sections"
    )
    parser.add_argument(
        "--no-fuzzy", action="store_true", help="Disable fuzzy matching for --query"
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=None,
        help="Fuzzy threshold for --query (default: policy fuzzy_threshold)",
    )
    parser.add_argument(
        "--policy", type=Path, default=None, help="Optional match_policy.json"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Verbose logging"
    )
    return parser


def main() -> None:
    args = build_parser().parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )

    for path in (args.doc, args.sections, args.policy):
        if path is not None and not path.exists():
            print(f"Error: file not found: {path}", file=sys.stderr)
            sys.exit(1)

    policy = MatchPolicy.from_json(args.policy) if args.policy else MatchPolicy()
    document = args.doc.read_text()

    if args.query is not None:
        result = locate(
            document,
            args.query,
            enable_fuzzy=not args.no_fuzzy,
            fuzzy_threshold=args.threshold,
            policy=policy,
        )
        label = "match"
    else:
        sections = (
            [Section.from_dict(r) for r in load_records(args.sections)]
            if args.sections
            else []
        )
        result = resolve_insertion_point(
            document, args.location, args.hint, sections=sections, policy=policy,
        )
        label = "insertion point"

    if result.found:
        print(
            f"Found {label} via {result.strategy} "
            f"(confidence {result.confidence:.2f})",
            file=sys.stderr,
        )
    else:
        print(f"No {label} found", file=sys.stderr)
    dump_json(result.as_dict())


if __name__ == "__main__":
    main()
