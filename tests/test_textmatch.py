"""Tests for textanchor.textmatch module."""
import pytest

from textanchor.textmatch import (
    edit_distance,
    names_match,
    normalize_whitespace,
    similarity,
    strip_parenthetical,
)


SAMPLES = ["", "a", "Greet the user warmly.", "  spaced\n\ttext  ", "después"]


class TestEditDistance:
    def test_classic_pair(self) -> None:
        assert edit_distance("kitten", "sitting") == 3

    def test_symmetric(self) -> None:
        assert edit_distance("flaw", "lawn") == edit_distance("lawn", "flaw") == 2

    def test_empty_side(self) -> None:
        assert edit_distance("", "abc") == 3
        assert edit_distance("abc", "") == 3

    def test_accepts_sequences(self) -> None:
        assert edit_distance(list("abc"), ("a", "x", "c")) == 1


class TestSimilarity:
    @pytest.mark.parametrize("text", SAMPLES)
    def test_identity(self, text: str) -> None:
        assert similarity(text, text) == 1.0

    def test_both_empty(self) -> None:
        assert similarity("", "") == 1.0

    @pytest.mark.parametrize("text", [s for s in SAMPLES if s])
    def test_empty_against_text(self, text: str) -> None:
        assert similarity("", text) == 0.0
        assert similarity(text, "") == 0.0

    def test_one_substitution(self) -> None:
        assert similarity("abcd", "abce") == 0.75

    def test_uses_longer_length(self) -> None:
        # one insertion over a 22-char string
        assert abs(similarity("Greet the user warmly", "Greet the users warmly") - (1 - 1 / 22)) < 1e-9

    def test_bounded(self) -> None:
        assert 0.0 <= similarity("abc", "xyz12345") <= 1.0


class TestNormalizeWhitespace:
    def test_collapses_and_strips(self) -> None:
        assert normalize_whitespace("  a \n\t b  ") == "a b"

    def test_no_whitespace(self) -> None:
        assert normalize_whitespace("abc") == "abc"


class TestSectionNames:
    def test_strip_parenthetical(self) -> None:
        assert strip_parenthetical("Tone (voice & style)") == "tone"

    def test_strip_parenthetical_plain(self) -> None:
        assert strip_parenthetical("  Rules ") == "rules"

    def test_equality(self) -> None:
        assert names_match("tone", "tone")

    def test_containment_both_ways(self) -> None:
        assert names_match("voice guidelines", "voice")
        assert names_match("rules", "the rules section")

    def test_short_containment_rejected(self) -> None:
        assert not names_match("a", "about")
        assert not names_match("rules", "ru")

    def test_empty_never_matches(self) -> None:
        assert not names_match("", "")
        assert not names_match("tone", "")
