"""
Revenue Segment Derivation Service

Assigns each account a revenue segment from its share of the portfolio's
won revenue attributed to a target year:

- A: share >= segment_a_threshold (default 15%)
- B: share >= segment_b_threshold (default 5%)
- C: anything lower, or no attributed revenue at all
- D: project-only accounts, i.e. the qualifying estimates include a
     "standard" estimate and no "service" estimate. D is decided before any
     revenue arithmetic.

A qualifying estimate is won and attributed a non-zero value in the target
year. Multi-year contracts contribute their annualized amount.

The target year is always passed in explicitly. resolve_segment_year gives the
conventional default: the current year, except in January and February when
the previous year's numbers are still the relevant ones.
"""

import logging
from datetime import date
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from revenue_reports.core.config import get_settings
from revenue_reports.models.enums import EstimateType, RevenueSegment
from revenue_reports.models.schemas import Account, AccountSegment, Estimate
from revenue_reports.services.classification import classify
from revenue_reports.services.year_attribution import attribute_years


logger = logging.getLogger(__name__)


# =============================================================================
# Qualifying Estimates
# =============================================================================


def _qualifying_values(
    account_estimates: Iterable[Estimate],
    target_year: int
) -> List[Tuple[Estimate, float]]:
    """Won estimates attributed a non-zero value in target_year, with that value."""
    qualifying: List[Tuple[Estimate, float]] = []
    for estimate in account_estimates:
        if not classify(estimate).won:
            continue
        attribution = attribute_years(estimate, target_year)
        if attribution is None or not attribution.appliesToYear or attribution.value == 0:
            continue
        qualifying.append((estimate, attribution.value))
    return qualifying


def _is_project_only(qualifying: Sequence[Tuple[Estimate, float]]) -> bool:
    types = {(estimate.estimate_type or "").strip().lower() for estimate, _ in qualifying}
    return EstimateType.STANDARD.value in types and EstimateType.SERVICE.value not in types


def calculate_account_revenue(account_estimates: Iterable[Estimate], target_year: int) -> float:
    """
    Sum the won revenue attributed to target_year for one account.

    Args:
        account_estimates: The account's estimates
        target_year: Calendar year to attribute revenue to

    Returns:
        Attributed won revenue (0 when nothing qualifies)
    """
    return sum((value for _, value in _qualifying_values(account_estimates, target_year)), 0.0)


def calculate_total_revenue(
    accounts: Iterable[Account],
    estimates_by_account: Mapping[str, Sequence[Estimate]],
    target_year: int
) -> float:
    """
    Sum attributed won revenue across all accounts.

    Args:
        accounts: Accounts making up the portfolio
        estimates_by_account: account id -> that account's estimates
        target_year: Calendar year to attribute revenue to

    Returns:
        Portfolio revenue for target_year
    """
    return sum(
        calculate_account_revenue(estimates_by_account.get(account.id, []), target_year)
        for account in accounts
    )


# =============================================================================
# Segment Derivation
# =============================================================================


def segment_for_share(percentage: float) -> RevenueSegment:
    """Map a revenue share (percent of portfolio) to segment A, B or C."""
    settings = get_settings()
    if percentage >= settings.segment_a_threshold:
        return RevenueSegment.A
    if percentage >= settings.segment_b_threshold:
        return RevenueSegment.B
    return RevenueSegment.C


def derive_segment(
    account: Account,
    total_portfolio_revenue: float,
    account_estimates: Iterable[Estimate],
    target_year: int
) -> RevenueSegment:
    """
    Derive the revenue segment of one account.

    Args:
        account: The account being segmented
        total_portfolio_revenue: Attributed won revenue of the whole portfolio
        account_estimates: The account's estimates
        target_year: Calendar year the segment is computed for

    Returns:
        RevenueSegment A, B, C or D

    Example:
        >>> derive_segment(account, 100000.0, estimates, 2025)
        <RevenueSegment.B: 'B'>
    """
    qualifying = _qualifying_values(account_estimates, target_year)

    if _is_project_only(qualifying):
        return RevenueSegment.D

    account_revenue = sum((value for _, value in qualifying), 0.0)
    if account_revenue <= 0 or total_portfolio_revenue <= 0:
        return RevenueSegment.C

    percentage = account_revenue / total_portfolio_revenue * 100
    segment = segment_for_share(percentage)
    logger.debug(f"Account {account.id}: {percentage:.1f}% of portfolio -> segment {segment.value}")
    return segment


def resolve_segment_year(as_of_date: Optional[date] = None) -> int:
    """
    Resolve the default segment year for a given date.

    Args:
        as_of_date: Reference date (defaults to today)

    Returns:
        The previous year in January and February, otherwise the current year
    """
    reference = as_of_date or date.today()
    if reference.month <= 2:
        return reference.year - 1
    return reference.year


# =============================================================================
# Portfolio Operations
# =============================================================================


def group_estimates_by_account(estimates: Iterable[Estimate]) -> Dict[str, List[Estimate]]:
    """Group estimates by account_id (input order kept); unlinked estimates are skipped."""
    grouped: Dict[str, List[Estimate]] = {}
    for estimate in estimates:
        if estimate.account_id:
            grouped.setdefault(estimate.account_id, []).append(estimate)
    return grouped


def build_account_segments(
    accounts: Sequence[Account],
    estimates_by_account: Mapping[str, Sequence[Estimate]],
    target_year: int
) -> Tuple[float, List[AccountSegment]]:
    """
    Compute revenue, share and segment for every account.

    Args:
        accounts: Accounts making up the portfolio
        estimates_by_account: account id -> that account's estimates
        target_year: Calendar year the segments are computed for

    Returns:
        Tuple of (portfolio revenue, AccountSegment list in account order)
    """
    total_revenue = calculate_total_revenue(accounts, estimates_by_account, target_year)

    results: List[AccountSegment] = []
    for account in accounts:
        account_estimates = estimates_by_account.get(account.id, [])
        revenue = calculate_account_revenue(account_estimates, target_year)
        percentage = revenue / total_revenue * 100 if total_revenue > 0 else 0.0
        results.append(AccountSegment(
            accountId=account.id,
            accountName=account.name,
            revenue=revenue,
            percentage=round(percentage, 1),
            segment=derive_segment(account, total_revenue, account_estimates, target_year),
        ))

    return total_revenue, results


def auto_assign_revenue_segments(
    accounts: Sequence[Account],
    estimates_by_account: Mapping[str, Sequence[Estimate]],
    target_year: int
) -> List[Account]:
    """
    Assign revenue and segment to every account.

    The input accounts are not modified; updated copies are returned. A stored
    annual_revenue on the input is ignored, revenue always comes from the
    estimates.

    Args:
        accounts: Accounts making up the portfolio
        estimates_by_account: account id -> that account's estimates
        target_year: Calendar year the segments are computed for

    Returns:
        Account copies with annual_revenue and revenue_segment set
    """
    total_revenue, segments = build_account_segments(accounts, estimates_by_account, target_year)

    logger.info(
        f"Assigned segments for {len(accounts)} accounts in {target_year} "
        f"(portfolio revenue {total_revenue:.2f})"
    )

    return [
        account.model_copy(update={
            "annual_revenue": segment.revenue,
            "revenue_segment": segment.segment,
        })
        for account, segment in zip(accounts, segments)
    ]


__all__ = [
    "calculate_account_revenue",
    "calculate_total_revenue",
    "segment_for_share",
    "derive_segment",
    "resolve_segment_year",
    "group_estimates_by_account",
    "build_account_segments",
    "auto_assign_revenue_segments",
]
