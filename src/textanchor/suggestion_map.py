"""Map independently-scored suggestions onto document sections.

A suggestion belongs to every section its char range overlaps (half-open
intervals), so it may land in zero, one or several sections. Suggestions
overlapping no section are reported separately as unmapped.
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from textanchor.anchor_types import SEVERITY_RANK, Section, Severity, Suggestion


@dataclass(frozen=True, slots=True)
class SectionSuggestions:
    section: Section
    suggestions: tuple[Suggestion, ...]
    highest_severity: Severity | None

    @property
    def suggestion_count(self) -> int:
        return len(self.suggestions)


def ranges_overlap(start1: int, end1: int, start2: int, end2: int) -> bool:
    """Half-open interval overlap; touching ranges do not overlap."""
    return start1 < end2 and end1 > start2


def _overlaps(suggestion: Suggestion, section: Section) -> bool:
    return ranges_overlap(
        suggestion.char_start, suggestion.char_end,
        section.char_start, section.char_end,
    )


def map_suggestions_to_sections(
    suggestions: Sequence[Suggestion],
    sections: Sequence[Section],
) -> dict[str, list[Suggestion]]:
    """Section id -> overlapping suggestions, in input order.

    Every section id is present, with an empty list when nothing overlaps.
    """
    mapping: dict[str, list[Suggestion]] = {section.id: [] for section in sections}
    for suggestion in suggestions:
        for section in sections:
            if _overlaps(suggestion, section):
                mapping[section.id].append(suggestion)
    return mapping


def get_unmapped_suggestions(
    suggestions: Sequence[Suggestion],
    sections: Sequence[Section],
) -> list[Suggestion]:
    """Suggestions that overlap no section."""
    return [
        s for s in suggestions
        if not any(_overlaps(s, section) for section in sections)
    ]


def highest_severity(suggestions: Sequence[Suggestion]) -> Severity | None:
    """Most severe value present, or None for no suggestions."""
    if not suggestions:
        return None
    return max((s.severity for s in suggestions), key=SEVERITY_RANK.__getitem__)


def sort_by_severity(suggestions: Sequence[Suggestion]) -> list[Suggestion]:
    """Most severe first; stable within a severity."""
    return sorted(suggestions, key=lambda s: -SEVERITY_RANK[s.severity])


def enrich_sections_with_suggestions(
    sections: Sequence[Section],
    suggestions: Sequence[Suggestion],
) -> list[SectionSuggestions]:
    mapping = map_suggestions_to_sections(suggestions, sections)
    out: list[SectionSuggestions] = []
    for section in sections:
        mapped = mapping[section.id]
        out.append(SectionSuggestions(
            section=section,
            suggestions=tuple(mapped),
            highest_severity=highest_severity(mapped),
        ))
    return out


def find_section_at_position(
    sections: Sequence[Section], char_index: int,
) -> Section | None:
    """First section containing ``char_index`` (both ends inclusive)."""
    for section in sections:
        if section.char_start <= char_index <= section.char_end:
            return section
    return None
