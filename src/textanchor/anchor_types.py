"""Core types shared by every anchoring layer.

All span coordinates are global char offsets into the document string,
half-open ``[char_start, char_end)``. Every dataclass uses slots=True.

Type hierarchy:
  Span             Half-open char range (the single coordinate currency)
  MatchResult      Outcome of locating a query in a document
  InsertionPoint   MatchResult plus a concrete insertion offset
  Section          Named region discovered by an external section parser
  EvidenceSpan     Unverified claim that some text appears in the document
  Suggestion       Independently-scored suggestion over a document range
  MatchPolicy      Thresholds and confidence tiers (loaded from JSON)
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Literal, Protocol, TypeAlias

import orjson

MatchStrategy: TypeAlias = Literal["exact", "normalized", "fuzzy"]
Direction: TypeAlias = Literal["after", "before", "end-of-section", "start-of-section"]
Severity: TypeAlias = Literal["critical", "high", "medium", "low"]

# Explicit total order over severities; higher rank is more severe.
SEVERITY_RANK: dict[Severity, int] = {
    "critical": 3,
    "high": 2,
    "medium": 1,
    "low": 0,
}


def inserts_at_start(direction: Direction) -> bool:
    """True when content goes before the anchor rather than after it."""
    return direction in ("before", "start-of-section")


# ---------------------------------------------------------------------------
# Span
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Span:
    """Half-open char range into a document.

    Invariants (enforced in __post_init__):
        - char_start >= 0
        - char_end >= char_start
    """
    char_start: int
    char_end: int

    def __post_init__(self) -> None:
        if self.char_start < 0:
            raise ValueError(f"Span.char_start must be >= 0, got {self.char_start}")
        if self.char_end < self.char_start:
            raise ValueError(
                f"Span.char_end ({self.char_end}) must be >= "
                f"char_start ({self.char_start})"
            )

    def __len__(self) -> int:
        return self.char_end - self.char_start

    def slice(self, text: str) -> str:
        return text[self.char_start:self.char_end]

    def overlaps(self, other: Span) -> bool:
        return self.char_start < other.char_end and self.char_end > other.char_start


# ---------------------------------------------------------------------------
# Match results
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class MatchResult:
    """Where (and how confidently) a query was found in a document.

    A miss is data, not an exception: ``found=False``, offsets -1,
    ``confidence=0.0``. Use :meth:`not_found` to build one.
    """
    found: bool
    char_start: int
    char_end: int
    matched_text: str
    strategy: MatchStrategy
    confidence: float

    @classmethod
    def not_found(cls) -> MatchResult:
        return cls(
            found=False, char_start=-1, char_end=-1,
            matched_text="", strategy="exact", confidence=0.0,
        )

    @property
    def span(self) -> Span | None:
        if not self.found:
            return None
        return Span(self.char_start, self.char_end)

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class InsertionPoint:
    """A resolved location for new content.

    ``insertion_index`` is -1 when nothing could be resolved; callers must
    not auto-apply in that case.
    """
    found: bool
    char_start: int
    char_end: int
    matched_text: str
    strategy: MatchStrategy
    confidence: float
    insertion_index: int
    direction: Direction

    @classmethod
    def from_match(
        cls, match: MatchResult, insertion_index: int, direction: Direction,
    ) -> InsertionPoint:
        return cls(
            found=match.found,
            char_start=match.char_start,
            char_end=match.char_end,
            matched_text=match.matched_text,
            strategy=match.strategy,
            confidence=match.confidence,
            insertion_index=insertion_index,
            direction=direction,
        )

    @classmethod
    def unresolved(cls, direction: Direction) -> InsertionPoint:
        return cls.from_match(MatchResult.not_found(), -1, direction)

    @property
    def match(self) -> MatchResult:
        return MatchResult(
            found=self.found,
            char_start=self.char_start,
            char_end=self.char_end,
            matched_text=self.matched_text,
            strategy=self.strategy,
            confidence=self.confidence,
        )

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# External inputs
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Section:
    """A named, tag-delimited region found by an external section parser."""
    id: str
    title: str
    tag_name: str | None
    char_start: int
    char_end: int
    content: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Section:
        """Build from snake_case or camelCase payloads."""
        return cls(
            id=str(data["id"]),
            title=str(data.get("title", "")),
            tag_name=data.get("tag_name", data.get("tagName")),
            char_start=int(data.get("char_start", data.get("startIndex", 0))),
            char_end=int(data.get("char_end", data.get("endIndex", 0))),
            content=str(data.get("content", "")),
        )


class SectionParser(Protocol):
    """Anything that splits a document into non-overlapping sections."""

    def __call__(self, document: str) -> Sequence[Section]: ...


@dataclass(frozen=True, slots=True)
class EvidenceSpan:
    """A generator's claim that ``original_text`` appears verbatim."""
    id: str
    original_text: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EvidenceSpan:
        """Build from a record; ``id`` is required."""
        if "id" not in data:
            raise ValueError(f"Evidence record has no id: {data!r}")
        text = data.get("original_text", data.get("originalText", ""))
        return cls(id=str(data["id"]), original_text=str(text or ""))


@dataclass(frozen=True, slots=True)
class Suggestion:
    """An independently-scored suggestion over a document range."""
    id: str
    char_start: int
    char_end: int
    severity: Severity
    original_text: str = ""
    category: str = ""

    def __post_init__(self) -> None:
        if self.severity not in SEVERITY_RANK:
            raise ValueError(f"Unknown severity: {self.severity!r}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Suggestion:
        return cls(
            id=str(data["id"]),
            char_start=int(data.get("char_start", data.get("startIndex", 0))),
            char_end=int(data.get("char_end", data.get("endIndex", 0))),
            severity=data.get("severity", "low"),
            original_text=str(data.get("original_text", data.get("originalText", ""))),
            category=str(data.get("category", "")),
        )


# ---------------------------------------------------------------------------
# MatchPolicy: thresholds and confidence tiers
# ---------------------------------------------------------------------------

_UNIT_FIELDS = (
    "fuzzy_threshold",
    "validation_threshold",
    "apply_threshold",
    "normalized_confidence",
    "section_anchor_confidence",
    "section_hint_confidence",
)


@dataclass(frozen=True, slots=True)
class MatchPolicy:
    """Thresholds used across locating, validating and applying.

    Tuning a deployment means writing a match_policy.json, not editing code.
    """
    fuzzy_threshold: float = 0.85
    validation_threshold: float = 0.90
    apply_threshold: float = 0.85
    normalized_confidence: float = 0.95
    section_anchor_confidence: float = 0.8
    section_hint_confidence: float = 0.6
    min_name_length: int = 3          # contained side must be longer than this
    window_low: float = 0.8           # fuzzy window, fraction of query length
    window_high: float = 1.2

    def __post_init__(self) -> None:
        for name in _UNIT_FIELDS:
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"MatchPolicy.{name} must be in [0, 1], got {value}")
        if self.min_name_length < 0:
            raise ValueError(
                f"MatchPolicy.min_name_length must be >= 0, got {self.min_name_length}"
            )
        if not 0.0 < self.window_low <= 1.0 <= self.window_high:
            raise ValueError(
                "MatchPolicy window bounds must satisfy 0 < window_low <= 1 <= "
                f"window_high, got ({self.window_low}, {self.window_high})"
            )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MatchPolicy:
        """Build from a dict, ignoring unknown and private keys."""
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            if key not in known:
                continue
            kwargs[key] = int(value) if key == "min_name_length" else float(value)
        return cls(**kwargs)

    @classmethod
    def from_json(cls, path: Path) -> MatchPolicy:
        """Load from a match_policy.json file."""
        data = orjson.loads(path.read_bytes())
        if not isinstance(data, dict):
            raise ValueError(f"Match policy payload must be a JSON object: {path}")
        return cls.from_dict(data)

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


DEFAULT_POLICY = MatchPolicy()


def check_threshold(threshold: float) -> float:
    """Reject thresholds outside [0, 1]."""
    if not 0.0 <= threshold <= 1.0:
        raise ValueError(f"threshold must be in [0, 1], got {threshold}")
    return threshold
