"""
Win/Loss Aggregation Service

Folds classified estimates into win/loss statistics at three levels:

- Portfolio-wide (aggregate)
- Per account (aggregate_by_account), optionally restricted to one division
  (aggregate_department_accounts)
- Per department / division (aggregate_by_department)

Per-group rules:
- total counts every estimate in the group, including ones without a usable price
- won / lost come from the classification engine; pending is always 0
- values use the full selected price (not the year-attributed amount); an
  unusable price contributes 0
- winRate = won / (won + lost) * 100
- estimatesVsWonRatio = won / total * 100
- revenueVsWonRatio = wonValue / totalValue * 100

Ratios are rounded to one decimal place only when the record is built and are
0 whenever their denominator is 0. Grouped results are sorted by totalValue
descending; ties keep first-seen order.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from revenue_reports.core.config import get_settings
from revenue_reports.models.schemas import (
    Account,
    AccountStats,
    DepartmentStats,
    Estimate,
    OverallStats,
)
from revenue_reports.services.classification import classify
from revenue_reports.services.year_attribution import estimate_value


logger = logging.getLogger(__name__)


# =============================================================================
# Accumulator
# =============================================================================


@dataclass
class GroupTotals:
    """
    Running win/loss totals for one group of estimates.

    Attributes:
        total: Number of estimates folded in.
        won: Number of won estimates.
        lost: Number of lost estimates.
        total_value: Sum of estimate values.
        won_value: Sum of won estimate values.
        lost_value: Sum of lost estimate values.
        estimate_ids: Estimate ids in the order they were added.
    """
    total: int = 0
    won: int = 0
    lost: int = 0
    total_value: float = 0.0
    won_value: float = 0.0
    lost_value: float = 0.0
    estimate_ids: List[str] = field(default_factory=list)

    def add(self, estimate: Estimate) -> None:
        value = estimate_value(estimate)
        self.total += 1
        self.total_value += value
        self.estimate_ids.append(estimate.id)

        if classify(estimate).won:
            self.won += 1
            self.won_value += value
        else:
            self.lost += 1
            self.lost_value += value

    def to_fields(self) -> Dict[str, Any]:
        """Convert the totals into StatsRecord field values."""
        decided = self.won + self.lost
        return {
            "total": self.total,
            "won": self.won,
            "lost": self.lost,
            "pending": 0,
            "decidedCount": decided,
            "totalValue": self.total_value,
            "wonValue": self.won_value,
            "lostValue": self.lost_value,
            "pendingValue": 0.0,
            "winRate": _percentage(self.won, decided),
            "estimatesVsWonRatio": _percentage(self.won, self.total),
            "revenueVsWonRatio": _percentage(self.won_value, self.total_value),
        }


def _percentage(numerator: float, denominator: float) -> float:
    if denominator <= 0:
        return 0.0
    return round(numerator / denominator * 100, 1)


def _division_key(estimate: Estimate) -> str:
    return estimate.division or get_settings().uncategorized_division


def _fold(estimates: Iterable[Estimate], key_func) -> Dict[str, GroupTotals]:
    """Fold estimates into GroupTotals keyed by key_func, keeping first-seen key order."""
    groups: Dict[str, GroupTotals] = {}
    for estimate in estimates:
        key = key_func(estimate)
        if key is None:
            continue
        groups.setdefault(key, GroupTotals()).add(estimate)
    return groups


# =============================================================================
# Aggregation Functions
# =============================================================================


def aggregate(estimates: Iterable[Estimate]) -> OverallStats:
    """
    Compute portfolio-wide win/loss statistics.

    Args:
        estimates: Estimates to aggregate (typically already year-filtered)

    Returns:
        OverallStats for the whole collection; all zeros when empty

    Example:
        >>> stats = aggregate(estimates)
        >>> stats.winRate
        33.3
    """
    totals = GroupTotals()
    for estimate in estimates:
        totals.add(estimate)
    return OverallStats(**totals.to_fields())


def aggregate_by_account(
    estimates: Iterable[Estimate],
    accounts: Iterable[Account]
) -> List[AccountStats]:
    """
    Compute win/loss statistics per account.

    Estimates without an account_id are left out. An account_id with no
    matching account is still reported, under the configured unknown-account
    name.

    Args:
        estimates: Estimates to aggregate
        accounts: Accounts used to resolve display names

    Returns:
        List of AccountStats sorted by totalValue descending
    """
    names = {account.id: account.name for account in accounts}
    unknown_name = get_settings().unknown_account_name

    groups = _fold(estimates, lambda estimate: estimate.account_id)

    results = [
        AccountStats(
            accountId=account_id,
            accountName=names.get(account_id) or unknown_name,
            estimateIds=totals.estimate_ids,
            **totals.to_fields()
        )
        for account_id, totals in groups.items()
    ]
    # sorted() is stable with reverse=True, so ties keep first-seen order
    return sorted(results, key=lambda stats: stats.totalValue, reverse=True)


def aggregate_by_department(estimates: Iterable[Estimate]) -> List[DepartmentStats]:
    """
    Compute win/loss statistics per division.

    Estimates without a division are grouped under the configured
    uncategorized label.

    Args:
        estimates: Estimates to aggregate

    Returns:
        List of DepartmentStats sorted by totalValue descending
    """
    groups = _fold(estimates, _division_key)

    results = [
        DepartmentStats(
            division=division,
            estimateIds=totals.estimate_ids,
            **totals.to_fields()
        )
        for division, totals in groups.items()
    ]
    return sorted(results, key=lambda stats: stats.totalValue, reverse=True)


def aggregate_department_accounts(
    estimates: Iterable[Estimate],
    accounts: Iterable[Account],
    division: Optional[str]
) -> List[AccountStats]:
    """
    Compute per-account statistics restricted to a single division.

    Args:
        estimates: Estimates to aggregate
        accounts: Accounts used to resolve display names
        division: Division label; None or the uncategorized label selects
            estimates without a division

    Returns:
        List of AccountStats for the division, sorted by totalValue descending
    """
    target = division or get_settings().uncategorized_division
    in_division = [estimate for estimate in estimates if _division_key(estimate) == target]

    logger.debug(f"Division '{target}': {len(in_division)} estimates")
    return aggregate_by_account(in_division, accounts)


__all__ = [
    "GroupTotals",
    "aggregate",
    "aggregate_by_account",
    "aggregate_by_department",
    "aggregate_department_accounts",
]
