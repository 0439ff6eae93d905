"""Anchor generator-claimed text and placement instructions to document offsets."""

from textanchor.anchor_types import (
    DEFAULT_POLICY,
    Direction,
    EvidenceSpan,
    InsertionPoint,
    MatchPolicy,
    MatchResult,
    MatchStrategy,
    Section,
    SectionParser,
    Severity,
    Span,
    Suggestion,
)
from textanchor.change_applier import (
    ApplyResult,
    ParsedChange,
    apply_all_changes,
    apply_change,
)
from textanchor.evidence import (
    RejectedEvidence,
    ValidationReport,
    validate_all,
    validate_original_text,
)
from textanchor.insertion import find_section_by_name, resolve_insertion_point
from textanchor.location import DirectionTable, ParsedLocation, parse_location
from textanchor.locator import locate
from textanchor.suggestion_map import (
    enrich_sections_with_suggestions,
    get_unmapped_suggestions,
    highest_severity,
    map_suggestions_to_sections,
)
from textanchor.textmatch import similarity

__all__ = [
    "DEFAULT_POLICY",
    "ApplyResult",
    "Direction",
    "DirectionTable",
    "EvidenceSpan",
    "InsertionPoint",
    "MatchPolicy",
    "MatchResult",
    "MatchStrategy",
    "ParsedChange",
    "ParsedLocation",
    "RejectedEvidence",
    "Section",
    "SectionParser",
    "Severity",
    "Span",
    "Suggestion",
    "ValidationReport",
    "apply_all_changes",
    "apply_change",
    "enrich_sections_with_suggestions",
    "find_section_by_name",
    "get_unmapped_suggestions",
    "highest_severity",
    "locate",
    "map_suggestions_to_sections",
    "parse_location",
    "resolve_insertion_point",
    "similarity",
    "validate_all",
    "validate_original_text",
]
