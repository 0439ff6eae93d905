"""Insertion-point resolver.

Resolves a location description to a concrete char offset, degrading
gracefully:

    1. anchor text located directly          (locator confidence)
    2. section whose name matches the anchor (policy.section_anchor_confidence)
    3. section whose name matches the hint   (policy.section_hint_confidence,
                                              always appends at section end)
    4. unresolved                            (insertion_index = -1)

Sections are supplied by the caller, either as a list or through a
SectionParser; without either, steps 2 and 3 are skipped.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence

from textanchor.anchor_types import (
    DEFAULT_POLICY,
    Direction,
    InsertionPoint,
    MatchPolicy,
    Section,
    SectionParser,
    inserts_at_start,
)
from textanchor.location import DEFAULT_DIRECTION_TABLE, DirectionTable, parse_location
from textanchor.locator import locate
from textanchor.textmatch import names_match, strip_parenthetical

log = logging.getLogger(__name__)


def find_section_by_name(
    sections: Sequence[Section],
    name: str,
    *,
    min_length: int = 3,
) -> Section | None:
    """First section whose title or tag matches ``name``.

    ``name`` is lower-cased with parenthetical groups removed; titles and
    tags are compared lower-cased. Equality always matches, containment in
    either direction only when the contained side is longer than
    ``min_length``.
    """
    wanted = strip_parenthetical(name)
    if not wanted:
        return None
    for section in sections:
        title = section.title.lower()
        tag = (section.tag_name or "").lower()
        if names_match(title, wanted, min_length=min_length):
            return section
        if names_match(tag, wanted, min_length=min_length):
            return section
    return None


def _section_point(
    section: Section,
    *,
    confidence: float,
    insertion_index: int,
    direction: Direction,
) -> InsertionPoint:
    return InsertionPoint(
        found=True,
        char_start=section.char_start,
        char_end=section.char_end,
        matched_text=section.content,
        strategy="normalized",
        confidence=confidence,
        insertion_index=insertion_index,
        direction=direction,
    )


def resolve_insertion_point(
    document: str,
    location_description: str,
    section_name_hint: str | None = None,
    *,
    sections: Sequence[Section] | None = None,
    section_parser: SectionParser | None = None,
    policy: MatchPolicy | None = None,
    table: DirectionTable = DEFAULT_DIRECTION_TABLE,
) -> InsertionPoint:
    """Resolve ``location_description`` to an insertion offset in ``document``.

    Args:
        document: Authoritative text.
        location_description: e.g. ``'after "Ask for their name."'``.
        section_name_hint: Section the generator said the edit belongs to.
        sections: Pre-parsed sections of ``document``.
        section_parser: Used to parse sections when ``sections`` is None.
        policy: Confidence tiers and matching thresholds.
        table: Directional-prefix rules.

    Returns:
        InsertionPoint; ``found=False`` and ``insertion_index=-1`` when
        nothing could be resolved (callers should ask for manual placement).
    """
    policy = policy or DEFAULT_POLICY
    parsed = parse_location(location_description, table=table)
    anchor, direction = parsed.anchor, parsed.direction

    if anchor:
        match = locate(document, anchor, policy=policy)
        if match.found:
            index = match.char_start if inserts_at_start(direction) else match.char_end
            log.debug("resolve: anchor %s match, index=%d", match.strategy, index)
            return InsertionPoint.from_match(match, index, direction)

    if sections is None:
        sections = section_parser(document) if section_parser is not None else ()

    section = find_section_by_name(sections, anchor, min_length=policy.min_name_length)
    if section is not None:
        index = section.char_start if inserts_at_start(direction) else section.char_end
        log.debug("resolve: anchor names section %r, index=%d", section.id, index)
        return _section_point(
            section,
            confidence=policy.section_anchor_confidence,
            insertion_index=index,
            direction=direction,
        )

    if section_name_hint:
        section = find_section_by_name(
            sections, section_name_hint, min_length=policy.min_name_length,
        )
        if section is not None:
            log.debug("resolve: hint names section %r, appending", section.id)
            return _section_point(
                section,
                confidence=policy.section_hint_confidence,
                insertion_index=section.char_end,
                direction="end-of-section",
            )

    log.debug("resolve: unresolved location %r", location_description)
    return InsertionPoint.unresolved(direction)
