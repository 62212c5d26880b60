"""
Classification Engine Service

This module decides whether an imported estimate is won or lost. The status
strings come verbatim from the estimating tool's exports, so classification is
a vocabulary match rather than a state machine:

1. A pipeline status of "sold" (or containing "sold") always means won and
   takes priority over the status field.
2. Otherwise the trimmed, lowercased status is matched (exactly or as a
   substring) against the won vocabulary.
3. Everything else is lost. That includes the explicit lost vocabulary and any
   status the engine does not recognize; there is no pending state.

Unrecognized statuses never raise. They are surfaced through
find_unrecognized_statuses and a warning logged by classify_batch so they can
be added to the vocabulary.
"""

import logging
from typing import Iterable, List, Optional, Tuple

from revenue_reports.models.schemas import ClassificationResult, Estimate


logger = logging.getLogger(__name__)


# =============================================================================
# Status Vocabularies
# These are the status values that appear in the estimating tool's exports.
# Matching is on the trimmed, lowercased status, exact or substring.
# =============================================================================

WON_STATUSES: Tuple[str, ...] = (
    "email contract award",
    "verbal contract award",
    "work complete",
    "work in progress",
    "billing complete",
    "contract signed",
    "sold",
    "won",
)

LOST_STATUSES: Tuple[str, ...] = (
    "estimate in progress - lost",
    "review + approve - lost",
    "client proposal phase - lost",
    "estimate lost",
    "estimate on hold",
    "estimate lost - no reply",
    "estimate lost - price too high",
)

SOLD_PIPELINE_STATUS = "sold"


def normalize_status(value: Optional[str]) -> str:
    """Trim and lowercase a status string; None becomes an empty string."""
    if value is None:
        return ""
    return str(value).strip().lower()


def _matches_any(normalized: str, vocabulary: Iterable[str]) -> bool:
    if not normalized:
        return False
    return any(normalized == phrase or phrase in normalized for phrase in vocabulary)


def is_sold_pipeline_status(pipeline_status: Optional[str]) -> bool:
    """
    Check whether a pipeline status marks the estimate as sold.

    Args:
        pipeline_status: The secondary pipeline status field, may be None

    Returns:
        True if the normalized pipeline status equals or contains "sold"
    """
    return SOLD_PIPELINE_STATUS in normalize_status(pipeline_status)


def is_won_status(status: Optional[str]) -> bool:
    """True if the status matches the won vocabulary."""
    return _matches_any(normalize_status(status), WON_STATUSES)


def is_lost_status(status: Optional[str]) -> bool:
    """True if the status matches the explicit lost vocabulary."""
    return _matches_any(normalize_status(status), LOST_STATUSES)


def classify(estimate: Estimate) -> ClassificationResult:
    """
    Classify a single estimate as won or lost.

    Args:
        estimate: The estimate to classify

    Returns:
        ClassificationResult with ``won`` set, and ``recognized`` False when the
        status matched neither vocabulary (the estimate is then lost)

    Example:
        >>> classify(Estimate(id="1", status="Contract Signed")).won
        True
        >>> classify(Estimate(id="2", status="Pending Review")).recognized
        False
    """
    if is_sold_pipeline_status(estimate.pipeline_status):
        return ClassificationResult(won=True, recognized=True)

    if is_won_status(estimate.status):
        return ClassificationResult(won=True, recognized=True)

    return ClassificationResult(won=False, recognized=is_lost_status(estimate.status))


def is_won(estimate: Estimate) -> bool:
    """Shorthand for ``classify(estimate).won``."""
    return classify(estimate).won


def find_unrecognized_statuses(estimates: Iterable[Estimate]) -> List[str]:
    """
    Collect the distinct raw statuses that defaulted to lost.

    Args:
        estimates: Estimates to inspect

    Returns:
        Distinct raw status strings (first-seen order) that matched neither
        vocabulary. Estimates without a status are not reported.
    """
    seen = set()
    unrecognized: List[str] = []
    for estimate in estimates:
        if not estimate.status or estimate.status in seen:
            continue
        if not classify(estimate).recognized:
            seen.add(estimate.status)
            unrecognized.append(estimate.status)
    return unrecognized


def classify_batch(estimates: Iterable[Estimate]) -> List[ClassificationResult]:
    """
    Classify multiple estimates, preserving input order.

    Logs one warning per distinct unrecognized status so the vocabulary can be
    extended if the status should have counted as won.

    Args:
        estimates: Estimates to classify

    Returns:
        List of ClassificationResult objects in the same order as inputs
    """
    results: List[ClassificationResult] = []
    warned = set()

    for estimate in estimates:
        result = classify(estimate)
        results.append(result)

        if not result.recognized and estimate.status and estimate.status not in warned:
            warned.add(estimate.status)
            logger.warning(
                f"Unrecognized status '{estimate.status}' on estimate {estimate.id} - defaulting to lost"
            )

    return results


# =============================================================================
# Module Exports
# =============================================================================

__all__ = [
    "classify",
    "classify_batch",
    "is_won",
    "is_won_status",
    "is_lost_status",
    "is_sold_pipeline_status",
    "normalize_status",
    "find_unrecognized_statuses",
    "WON_STATUSES",
    "LOST_STATUSES",
]
