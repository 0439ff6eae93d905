"""Location-description parser.

Turns free-form placement instructions such as ``after "Greet the user"``
or ``al final de <tone>`` into an anchor phrase plus a Direction.

Prefix recognition is an ordered lookup table (pattern -> Direction);
adding a phrasing or a language means extending the table, not touching
the resolver.
"""
from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from textanchor.anchor_types import Direction


@dataclass(frozen=True, slots=True)
class DirectionRule:
    pattern: re.Pattern[str]
    direction: Direction


@dataclass(frozen=True, slots=True)
class ParsedLocation:
    anchor: str
    direction: Direction


def _rule(pattern: str, direction: Direction) -> DirectionRule:
    return DirectionRule(re.compile(pattern, re.IGNORECASE), direction)


@dataclass(frozen=True, slots=True)
class DirectionTable:
    """Ordered prefix rules; the first matching rule wins."""

    rules: tuple[DirectionRule, ...]
    default: Direction = "after"

    def extended(self, rules: Iterable[DirectionRule]) -> DirectionTable:
        """New table with ``rules`` tried before the existing ones."""
        return DirectionTable(tuple(rules) + self.rules, self.default)

    def match(self, text: str) -> tuple[Direction, str]:
        """Return (direction, remainder) for ``text``."""
        for rule in self.rules:
            m = rule.pattern.match(text)
            if m:
                return rule.direction, text[m.end():]
        return self.default, text


# Ordered: "at the end of" is tried before "at the start of"; first match wins.
ENGLISH_RULES: tuple[DirectionRule, ...] = (
    _rule(r"^at\s+the\s+end\s+of\s+", "end-of-section"),
    _rule(r"^(?:at|from)\s+the\s+(?:start|beginning)\s+of\s+", "start-of-section"),
    _rule(r"^after\s+", "after"),
    _rule(r"^below\s+", "after"),
    _rule(r"^before\s+", "before"),
    _rule(r"^inside\s+", "end-of-section"),
)

SPANISH_RULES: tuple[DirectionRule, ...] = (
    _rule(r"^al\s+final\s+de\s+", "end-of-section"),
    _rule(r"^al\s+(?:inicio|comienzo)\s+de\s+", "start-of-section"),
    _rule(r"^despu[eé]s\s+de\s+", "after"),
    _rule(r"^debajo\s+de\s+", "after"),
    _rule(r"^abajo\s+de\s+", "after"),
    _rule(r"^antes\s+de\s+", "before"),
    _rule(r"^dentro\s+de\s+", "end-of-section"),
)

DEFAULT_DIRECTION_TABLE = DirectionTable(ENGLISH_RULES + SPANISH_RULES)

# Opening quote -> closing quote.
_QUOTE_PAIRS: dict[str, str] = {
    '"': '"',
    "'": "'",
    "`": "`",
    "“": "”",
    "‘": "’",
    "«": "»",
}


def strip_quotes(text: str) -> str:
    """Remove one layer of matching surrounding quotes."""
    if len(text) >= 2:
        closing = _QUOTE_PAIRS.get(text[0])
        if closing is not None and text[-1] == closing:
            return text[1:-1]
    return text


def parse_location(
    description: str,
    *,
    table: DirectionTable = DEFAULT_DIRECTION_TABLE,
) -> ParsedLocation:
    """Split a location description into anchor text and direction.

    Unrecognized prefixes leave the whole description as the anchor with
    the table's default direction (``after``).
    """
    text = description.strip()
    direction, remainder = table.match(text)
    anchor = strip_quotes(remainder.strip()).strip()
    return ParsedLocation(anchor=anchor, direction=direction)
