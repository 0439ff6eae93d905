"""Multi-strategy locator: find claimed text in a document.

Strategies run cheapest first and the first success wins:
    1. exact      : substring search on the raw, then the trimmed query.
    2. normalized : whitespace runs treated as equivalent; offsets are
                   re-derived in the original document with a two-pointer
                   scan.
    3. fuzzy      : brute-force sliding window scored by edit-distance
                   similarity, windows 80%-120% of the query length.

A miss is returned as ``MatchResult.not_found()``, never raised.
"""
from __future__ import annotations

import logging
import math

from textanchor.anchor_types import DEFAULT_POLICY, MatchPolicy, MatchResult, check_threshold
from textanchor.textmatch import normalize_whitespace

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Strategy 1: exact
# ---------------------------------------------------------------------------

def exact_match(document: str, query: str) -> MatchResult | None:
    """Plain substring search. Confidence 1.0."""
    if not query:
        return None
    index = document.find(query)
    if index < 0:
        return None
    return MatchResult(
        found=True,
        char_start=index,
        char_end=index + len(query),
        matched_text=query,
        strategy="exact",
        confidence=1.0,
    )


# ---------------------------------------------------------------------------
# Strategy 2: whitespace-normalized
# ---------------------------------------------------------------------------

def _scan_from(document: str, start: int, normalized_query: str) -> int:
    """Walk document and normalized query in parallel from ``start``.

    A single space in the normalized query consumes a whole whitespace run
    (at least one char) in the document. Returns the exclusive end offset
    on success, -1 on mismatch.
    """
    i = start
    n = len(document)
    for ch in normalized_query:
        if i >= n:
            return -1
        if ch == " ":
            if not document[i].isspace():
                return -1
            while i < n and document[i].isspace():
                i += 1
        elif document[i] == ch:
            i += 1
        else:
            return -1
    return i


def normalized_match(
    document: str, query: str, *, confidence: float = 0.95,
) -> MatchResult | None:
    """Match ignoring whitespace run-length differences.

    The normalized query must occur in the normalized document; the true
    span in the original document is then recovered by scanning candidate
    start offsets.
    """
    normalized_query = normalize_whitespace(query)
    if not normalized_query:
        return None
    if normalized_query not in normalize_whitespace(document):
        return None

    first = normalized_query[0]
    start = document.find(first)
    while start >= 0:
        end = _scan_from(document, start, normalized_query)
        if end >= 0:
            return MatchResult(
                found=True,
                char_start=start,
                char_end=end,
                matched_text=document[start:end],
                strategy="normalized",
                confidence=confidence,
            )
        start = document.find(first, start + 1)
    return None


# ---------------------------------------------------------------------------
# Strategy 3: fuzzy sliding window
# ---------------------------------------------------------------------------

def _window_distances(query: str, document: str, start: int, max_len: int) -> list[int]:
    """Edit distance of ``query`` against every window ``document[start:start+k]``.

    One DP pass over the document chars from ``start`` yields the distance
    for every window length ``k`` in ``0..max_len`` at once; the returned
    list is indexed by ``k``. No substrings are built.
    """
    m = len(query)
    prev = list(range(m + 1))
    out = [prev[m]]
    for k in range(max_len):
        ch = document[start + k]
        cur = [k + 1]
        for j in range(1, m + 1):
            if query[j - 1] == ch:
                cur.append(prev[j - 1])
            else:
                cur.append(1 + min(prev[j - 1], prev[j], cur[j - 1]))
        out.append(cur[m])
        prev = cur
    return out


def fuzzy_match(
    document: str,
    query: str,
    threshold: float = 0.85,
    *,
    window_low: float = 0.8,
    window_high: float = 1.2,
) -> MatchResult | None:
    """Best-scoring window whose similarity strictly exceeds ``threshold``.

    Every start offset and every window length between
    ``floor(window_low * len(query))`` and ``floor(window_high * len(query))``
    is scored. Ties keep the earliest start, then the shortest window.
    """
    q_len = len(query)
    if q_len == 0:
        return None
    min_w = max(1, math.floor(q_len * window_low))
    max_w = math.floor(q_len * window_high)
    n = len(document)

    best_score = threshold
    best: tuple[int, int] | None = None
    for start in range(0, n - min_w + 1):
        reach = min(max_w, n - start)
        distances = _window_distances(query, document, start, reach)
        for w in range(min_w, reach + 1):
            score = 1.0 - distances[w] / max(q_len, w)
            if score > best_score:
                best_score = score
                best = (start, start + w)

    if best is None:
        return None
    char_start, char_end = best
    return MatchResult(
        found=True,
        char_start=char_start,
        char_end=char_end,
        matched_text=document[char_start:char_end],
        strategy="fuzzy",
        confidence=best_score,
    )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def locate(
    document: str,
    query: str,
    *,
    enable_fuzzy: bool = True,
    fuzzy_threshold: float | None = None,
    policy: MatchPolicy | None = None,
) -> MatchResult:
    """Find ``query`` in ``document`` using exact, normalized, then fuzzy search.

    Args:
        document: Authoritative text.
        query: Claimed text, possibly re-wrapped or slightly edited.
        enable_fuzzy: Allow the (expensive) sliding-window strategy.
        fuzzy_threshold: Minimum similarity for a fuzzy hit (exclusive).
            Defaults to ``policy.fuzzy_threshold``.
        policy: Confidence tiers and window bounds.

    Returns:
        The first successful strategy's MatchResult, or a not-found result
        with confidence 0.
    """
    policy = policy or DEFAULT_POLICY
    threshold = check_threshold(
        policy.fuzzy_threshold if fuzzy_threshold is None else fuzzy_threshold
    )

    result = exact_match(document, query)
    if result is None:
        trimmed = query.strip()
        if trimmed != query:
            result = exact_match(document, trimmed)
    if result is None:
        result = normalized_match(
            document, query, confidence=policy.normalized_confidence,
        )
    if result is None and enable_fuzzy:
        result = fuzzy_match(
            document,
            query,
            threshold,
            window_low=policy.window_low,
            window_high=policy.window_high,
        )

    if result is None:
        log.debug("locate: no match for %d-char query", len(query))
        return MatchResult.not_found()
    log.debug(
        "locate: %s match at [%d, %d) confidence=%.3f",
        result.strategy, result.char_start, result.char_end, result.confidence,
    )
    return result
