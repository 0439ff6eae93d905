"""Reusable text-matching primitives for anchoring and validation.

Pure text operations with zero domain dependencies.
"""
from __future__ import annotations

import re
from collections.abc import Sequence

_WS_RUN_RE = re.compile(r"\s+")


def edit_distance(a: Sequence[str], b: Sequence[str]) -> int:
    """Levenshtein distance between two character sequences.

    Counts single-character inserts, deletes and substitutions. Accepts
    strings or any index-addressable sequence of characters, so callers
    scanning windows can pass views without building substrings.

    Args:
        a: First sequence.
        b: Second sequence.

    Returns:
        Minimum number of edits turning ``a`` into ``b``.
    """
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)
    prev = list(range(len(b) + 1))
    for i, ca in enumerate(a, 1):
        cur = [i]
        for j, cb in enumerate(b, 1):
            if ca == cb:
                cur.append(prev[j - 1])
            else:
                cur.append(1 + min(prev[j - 1], prev[j], cur[j - 1]))
        prev = cur
    return prev[-1]


def similarity(a: Sequence[str], b: Sequence[str]) -> float:
    """Similarity ratio in [0, 1]: ``1 - distance / max(len(a), len(b))``.

    Two empty inputs are identical (1.0); an empty input against a
    non-empty one scores 0.0.
    """
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1.0 - edit_distance(a, b) / longest


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace runs to one space and strip the ends."""
    return _WS_RUN_RE.sub(" ", text).strip()


def strip_parenthetical(name: str) -> str:
    """Lower-case a section name and drop parenthetical groups.

    ``"Tone (voice & style)"`` -> ``"tone"``.
    """
    return re.sub(r"\s*\(.*\)\s*", "", name.lower()).strip()


def names_match(candidate: str, wanted: str, *, min_length: int = 3) -> bool:
    """Equality or containment test between two pre-normalized names.

    Containment counts only when the contained side is longer than
    ``min_length`` so short titles like "a" do not match everything.
    """
    if not candidate or not wanted:
        return False
    if candidate == wanted:
        return True
    if wanted in candidate and len(wanted) > min_length:
        return True
    if candidate in wanted and len(candidate) > min_length:
        return True
    return False
