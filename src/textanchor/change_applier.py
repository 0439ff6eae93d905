"""Apply parsed edit instructions to a document.

Each action has its own function returning an ApplyResult; failures are
reported in the result (``success=False``, document unchanged), never
raised. Text is found with the locator and insertion points with the
resolver; a named section is the fallback target for replace and delete.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal, TypeAlias

from textanchor.anchor_types import DEFAULT_POLICY, MatchPolicy, Section, SectionParser
from textanchor.insertion import find_section_by_name, resolve_insertion_point
from textanchor.locator import locate

log = logging.getLogger(__name__)

ChangeAction: TypeAlias = Literal["replace", "insert", "delete", "move", "keep"]


@dataclass(frozen=True, slots=True)
class ParsedChange:
    action: ChangeAction
    before_text: str | None = None
    after_text: str | None = None
    location: str | None = None
    section: str | None = None


@dataclass(frozen=True, slots=True)
class ApplyResult:
    success: bool
    new_document: str
    message: str


@dataclass(frozen=True, slots=True)
class BatchApplyResult:
    new_document: str
    applied_count: int
    failed_count: int


@dataclass(frozen=True, slots=True)
class _Context:
    sections: Sequence[Section] | None
    section_parser: SectionParser | None
    policy: MatchPolicy

    def sections_for(self, document: str) -> Sequence[Section]:
        if self.section_parser is not None:
            return self.section_parser(document)
        return self.sections or ()


def _splice(document: str, start: int, end: int, text: str = "") -> str:
    return document[:start] + text + document[end:]


def _fail(document: str, message: str) -> ApplyResult:
    log.debug("apply: %s", message)
    return ApplyResult(success=False, new_document=document, message=message)


def _named_section(document: str, change: ParsedChange, ctx: _Context) -> Section | None:
    if not change.section:
        return None
    return find_section_by_name(
        ctx.sections_for(document), change.section,
        min_length=ctx.policy.min_name_length,
    )


def apply_replace(document: str, change: ParsedChange, ctx: _Context) -> ApplyResult:
    if not change.before_text or not change.after_text:
        return _fail(document, "missing text to replace")

    match = locate(document, change.before_text, policy=ctx.policy)
    if match.found and match.confidence >= ctx.policy.apply_threshold:
        new = _splice(document, match.char_start, match.char_end, change.after_text)
        return ApplyResult(True, new, "change applied")

    section = _named_section(document, change, ctx)
    if section is not None:
        new = _splice(document, section.char_start, section.char_end, change.after_text)
        return ApplyResult(True, new, "whole section replaced")

    return _fail(document, "original text not found")


def apply_insert(document: str, change: ParsedChange, ctx: _Context) -> ApplyResult:
    if not change.after_text:
        return _fail(document, "missing text to insert")
    if not change.location:
        return ApplyResult(True, document + "\n" + change.after_text, "text appended at end")

    point = resolve_insertion_point(
        document,
        change.location,
        change.section,
        sections=ctx.sections_for(document),
        policy=ctx.policy,
    )
    if not point.found:
        return _fail(document, "insertion location not found")
    index = point.insertion_index
    return ApplyResult(True, _splice(document, index, index, "\n" + change.after_text), "text inserted")


def apply_delete(document: str, change: ParsedChange, ctx: _Context) -> ApplyResult:
    if not change.before_text:
        return _fail(document, "missing text to delete")

    match = locate(document, change.before_text, policy=ctx.policy)
    if match.found and match.confidence >= ctx.policy.apply_threshold:
        return ApplyResult(True, _splice(document, match.char_start, match.char_end), "text deleted")

    section = _named_section(document, change, ctx)
    if section is not None:
        return ApplyResult(
            True, _splice(document, section.char_start, section.char_end), "whole section deleted",
        )

    return _fail(document, "text to delete not found")


def apply_move(document: str, change: ParsedChange, ctx: _Context) -> ApplyResult:
    """Cut the block and re-insert it at the resolved destination.

    The destination is resolved against the document with the block
    removed, so static ``sections`` (whose offsets describe the unedited
    document) are not used here: section and hint fallbacks only apply
    when a ``section_parser`` is supplied.
    """
    if not change.before_text or not change.location:
        return _fail(document, "missing block or destination to move")

    block = locate(document, change.before_text, policy=ctx.policy)
    if not block.found:
        return _fail(document, "block to move not found")

    remaining = _splice(document, block.char_start, block.char_end)
    # Destination is resolved against the document with the block removed.
    point = resolve_insertion_point(
        remaining,
        change.location,
        change.section,
        sections=ctx.sections_for(remaining) if ctx.section_parser is not None else None,
        policy=ctx.policy,
    )
    if not point.found:
        return _fail(document, "new location not found")
    index = point.insertion_index
    return ApplyResult(True, _splice(remaining, index, index, "\n" + change.before_text), "block moved")


_HANDLERS = {
    "replace": apply_replace,
    "insert": apply_insert,
    "delete": apply_delete,
    "move": apply_move,
}


def apply_change(
    document: str,
    change: ParsedChange,
    *,
    sections: Sequence[Section] | None = None,
    section_parser: SectionParser | None = None,
    policy: MatchPolicy | None = None,
) -> ApplyResult:
    """Dispatch ``change`` to its action handler.

    ``sections`` are only trusted for the document they were parsed from;
    pass ``section_parser`` when section fallbacks must follow edits.
    """
    if change.action == "keep":
        return ApplyResult(True, document, "section kept")
    handler = _HANDLERS.get(change.action)
    if handler is None:
        return _fail(document, f"unknown action: {change.action}")
    ctx = _Context(sections=sections, section_parser=section_parser, policy=policy or DEFAULT_POLICY)
    return handler(document, change, ctx)


def apply_all_changes(
    document: str,
    changes: Sequence[ParsedChange],
    *,
    section_parser: SectionParser | None = None,
    policy: MatchPolicy | None = None,
) -> BatchApplyResult:
    """Apply ``changes`` in order, each against the previous result."""
    current = document
    applied = 0
    failed = 0
    for change in changes:
        result = apply_change(current, change, section_parser=section_parser, policy=policy)
        if result.success:
            current = result.new_document
            applied += 1
        else:
            failed += 1
    log.info("apply_all_changes: %d applied, %d failed", applied, failed)
    return BatchApplyResult(new_document=current, applied_count=applied, failed_count=failed)
