"""Batch validation of generator-claimed quotations.

Every evidence span must be reconcilable with the literal document at or
above the threshold; anything else is rejected with a reason so a caller
can warn or discard it.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from textanchor.anchor_types import (
    DEFAULT_POLICY,
    EvidenceSpan,
    MatchPolicy,
    MatchResult,
    check_threshold,
)
from textanchor.locator import locate

log = logging.getLogger(__name__)

REASON_NOT_FOUND = "not found"


@dataclass(frozen=True, slots=True)
class TextValidation:
    valid: bool
    match: MatchResult


@dataclass(frozen=True, slots=True)
class RejectedEvidence:
    id: str
    reason: str
    match: MatchResult

    def as_dict(self) -> dict[str, Any]:
        return {"id": self.id, "reason": self.reason, "match": self.match.as_dict()}


@dataclass(slots=True)
class ValidationReport:
    """Partition of evidence ids into accepted and rejected."""
    accepted: list[str] = field(default_factory=list[str])
    rejected: list[RejectedEvidence] = field(default_factory=list[RejectedEvidence])

    @property
    def rejected_ids(self) -> list[str]:
        return [r.id for r in self.rejected]

    def as_dict(self) -> dict[str, Any]:
        return {
            "accepted": list(self.accepted),
            "rejected": [r.as_dict() for r in self.rejected],
        }


def low_confidence_reason(confidence: float) -> str:
    return f"low confidence match ({round(confidence * 100)}%)"


def validate_original_text(
    document: str,
    original_text: str,
    *,
    threshold: float | None = None,
    policy: MatchPolicy | None = None,
) -> TextValidation:
    """Check one claimed quotation against ``document``.

    ``threshold`` defaults to ``policy.validation_threshold`` and also
    bounds the fuzzy search.
    """
    policy = policy or DEFAULT_POLICY
    threshold = check_threshold(
        policy.validation_threshold if threshold is None else threshold
    )
    match = locate(
        document, original_text,
        enable_fuzzy=True, fuzzy_threshold=threshold, policy=policy,
    )
    return TextValidation(valid=match.found and match.confidence >= threshold, match=match)


def _coerce(span: EvidenceSpan | Mapping[str, Any]) -> EvidenceSpan:
    if isinstance(span, EvidenceSpan):
        return span
    return EvidenceSpan.from_dict(dict(span))


def validate_all(
    document: str,
    evidence_spans: Iterable[EvidenceSpan | Mapping[str, Any]],
    threshold: float | None = None,
    *,
    policy: MatchPolicy | None = None,
) -> ValidationReport:
    """Validate every evidence span and partition ids by outcome.

    Args:
        document: Authoritative text.
        evidence_spans: EvidenceSpan objects or mappings with ``id`` and
            ``original_text`` (or ``originalText``).
        threshold: Minimum confidence to accept, in [0, 1]. Defaults to
            ``policy.validation_threshold``.
        policy: Confidence tiers and window bounds used by the locator.

    Returns:
        ValidationReport where every distinct id appears exactly once,
        either in ``accepted`` or in ``rejected``. A repeated id is judged
        by its first occurrence.

    Raises:
        ValueError: On a threshold outside [0, 1] or a mapping with no ``id``.
    """
    policy = policy or DEFAULT_POLICY
    threshold = check_threshold(
        policy.validation_threshold if threshold is None else threshold
    )
    report = ValidationReport()
    seen: set[str] = set()
    for raw in evidence_spans:
        span = _coerce(raw)
        if span.id in seen:
            log.debug("validate_all: skipping duplicate evidence id %r", span.id)
            continue
        seen.add(span.id)

        outcome = validate_original_text(
            document, span.original_text, threshold=threshold, policy=policy,
        )
        if outcome.valid:
            report.accepted.append(span.id)
            continue
        match = outcome.match
        reason = low_confidence_reason(match.confidence) if match.found else REASON_NOT_FOUND
        report.rejected.append(RejectedEvidence(id=span.id, reason=reason, match=match))

    log.info(
        "validate_all: %d accepted, %d rejected (threshold=%.2f)",
        len(report.accepted), len(report.rejected), threshold,
    )
    return report
