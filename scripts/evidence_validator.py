#!/usr/bin/env python3
"""Validate generator-claimed quotations against a document.

Each evidence record needs an ``id`` and an ``original_text`` (or
``originalText``). Records are accepted only when the text can be located
in the document at or above the confidence threshold.

Usage:
    python3 scripts/evidence_validator.py --doc prompt.txt \
      --evidence analysis_sections.json --threshold 0.9 \
      --output report.json

Structured JSON output goes to stdout; human messages go to stderr.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from textanchor.anchor_types import EvidenceSpan, MatchPolicy
from textanchor.evidence import validate_all
from textanchor.io_utils import dump_json, load_records, save_json


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate claimed quotations against a document."
    )
    parser.add_argument(
        "--doc", required=True, type=Path, help="Path to the document text"
    )
    parser.add_argument(
        "--evidence",
        required=True,
        type=Path,
        help="JSON array or .jsonl file of {id, original_text} records",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=None,
        help="Minimum confidence to accept (default: policy validation_threshold)",
    )
    parser.add_argument(
        "--policy", type=Path, default=None, help="Optional match_policy.json"
    )
    parser.add_argument(
        "--output", type=Path, default=None,
        help="Also write the report to this JSON file",
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

    for path in (args.doc, args.evidence, args.policy):
        if path is not None and not path.exists():
            print(f"Error: file not found: {path}", file=sys.stderr)
            sys.exit(1)

    policy = MatchPolicy.from_json(args.policy) if args.policy else MatchPolicy()
    threshold = policy.validation_threshold if args.threshold is None else args.threshold

    document = args.doc.read_text()
    try:
        spans = [EvidenceSpan.from_dict(r) for r in load_records(args.evidence)]
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    report = validate_all(document, spans, threshold=threshold, policy=policy)

    print(
        f"{len(report.accepted)} accepted, {len(report.rejected)} rejected "
        f"of {len(spans)} evidence records (threshold {threshold:.2f})",
        file=sys.stderr,
    )
    payload = {"threshold": threshold, **report.as_dict()}
    if args.output is not None:
        save_json(payload, args.output)
        print(f"Report written to {args.output}", file=sys.stderr)
    dump_json(payload)


if __name__ == "__main__":
    main()
