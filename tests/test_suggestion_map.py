"""Tests for textanchor.suggestion_map module."""
import pytest

from textanchor.anchor_types import Section, Suggestion
from textanchor.suggestion_map import (
    enrich_sections_with_suggestions,
    find_section_at_position,
    get_unmapped_suggestions,
    highest_severity,
    map_suggestions_to_sections,
    ranges_overlap,
    sort_by_severity,
)


def _section(sid: str, start: int, end: int) -> Section:
    return Section(id=sid, title=sid.upper(), tag_name=sid, char_start=start, char_end=end, content="")


S1 = _section("s1", 0, 10)
S2 = _section("s2", 10, 20)
S3 = _section("s3", 30, 40)
SECTIONS = [S1, S2, S3]

A = Suggestion("a", 2, 5, "high")
B = Suggestion("b", 8, 12, "low")
C = Suggestion("c", 20, 30, "critical")
D = Suggestion("d", 35, 50, "medium")
SUGGESTIONS = [A, B, C, D]


class TestRangesOverlap:
    def test_overlap(self) -> None:
        assert ranges_overlap(0, 5, 4, 10)

    def test_touching_is_not_overlap(self) -> None:
        assert not ranges_overlap(0, 5, 5, 10)
        assert not ranges_overlap(5, 10, 0, 5)

    def test_containment(self) -> None:
        assert ranges_overlap(2, 3, 0, 10)


class TestMapping:
    def test_map(self) -> None:
        mapping = map_suggestions_to_sections(SUGGESTIONS, SECTIONS)
        assert mapping == {"s1": [A, B], "s2": [B], "s3": [D]}

    def test_every_section_present(self) -> None:
        mapping = map_suggestions_to_sections([], SECTIONS)
        assert mapping == {"s1": [], "s2": [], "s3": []}

    def test_unmapped(self) -> None:
        assert get_unmapped_suggestions(SUGGESTIONS, SECTIONS) == [C]

    def test_no_sections(self) -> None:
        assert get_unmapped_suggestions(SUGGESTIONS, []) == SUGGESTIONS


class TestSeverity:
    def test_highest(self) -> None:
        assert highest_severity([B, A]) == "high"
        assert highest_severity([B, D, C]) == "critical"

    def test_none_for_empty(self) -> None:
        assert highest_severity([]) is None

    def test_sort(self) -> None:
        assert sort_by_severity(SUGGESTIONS) == [C, A, D, B]

    def test_sort_is_stable(self) -> None:
        other_low = Suggestion("b2", 0, 1, "low")
        assert sort_by_severity([B, other_low]) == [B, other_low]


class TestEnrich:
    def test_enrich(self) -> None:
        enriched = enrich_sections_with_suggestions(SECTIONS, SUGGESTIONS)
        assert [e.section.id for e in enriched] == ["s1", "s2", "s3"]
        assert [e.highest_severity for e in enriched] == ["high", "low", "medium"]
        assert enriched[0].suggestion_count == 2

    def test_empty_section_has_no_severity(self) -> None:
        enriched = enrich_sections_with_suggestions(SECTIONS, [A])
        assert enriched[1].highest_severity is None
        assert enriched[1].suggestions == ()


class TestFindSectionAtPosition:
    def test_inclusive_boundary_prefers_first(self) -> None:
        assert find_section_at_position(SECTIONS, 10) == S1

    def test_inside(self) -> None:
        assert find_section_at_position(SECTIONS, 35) == S3

    def test_gap(self) -> None:
        assert find_section_at_position(SECTIONS, 25) is None


@pytest.mark.parametrize(
    "sections",
    [
        [],
        [S1],
        SECTIONS,
        [_section("wide", 0, 100)],
        [_section("x", 3, 4), _section("y", 45, 46)],
    ],
)
def test_mapped_and_unmapped_cover_all_ids(sections: list[Section]) -> None:
    mapping = map_suggestions_to_sections(SUGGESTIONS, sections)
    mapped_ids = {s.id for group in mapping.values() for s in group}
    unmapped_ids = [s.id for s in get_unmapped_suggestions(SUGGESTIONS, sections)]
    assert mapped_ids.isdisjoint(unmapped_ids)
    assert mapped_ids | set(unmapped_ids) == {s.id for s in SUGGESTIONS}
    assert len(unmapped_ids) == len(set(unmapped_ids))
