"""
Year filter used to select the estimates a win/loss report covers.

Steps, in order:
1. Deduplicate by external_id (first occurrence wins; records without an
   external_id are always kept)
2. Drop archived estimates
3. When sold_only is set, drop estimates whose status contains "lost"
4. Pick the determination date: contract_end -> contract_start ->
   estimate_date -> created_date
5. Keep the estimate when the date's year (and month, if requested) matches
   and the year lies within the configured report-year bounds
"""

import logging
from typing import Iterable, List, Optional

from revenue_reports.core.config import get_settings
from revenue_reports.core.parsing import month_from_date_string, year_from_date_string
from revenue_reports.models.schemas import Estimate
from revenue_reports.services.classification import normalize_status
from revenue_reports.services.year_attribution import select_determination_date


logger = logging.getLogger(__name__)


def deduplicate_estimates(estimates: Iterable[Estimate]) -> List[Estimate]:
    """Drop repeated external_ids, keeping the first occurrence."""
    seen = set()
    unique: List[Estimate] = []
    for estimate in estimates:
        if estimate.external_id:
            if estimate.external_id in seen:
                continue
            seen.add(estimate.external_id)
        unique.append(estimate)
    return unique


def filter_estimates_by_year(
    estimates: Iterable[Estimate],
    year: int,
    sales_performance_mode: bool = False,
    sold_only: bool = False,
    month: Optional[int] = None
) -> List[Estimate]:
    """
    Select the estimates a report for ``year`` should include.

    Args:
        estimates: Candidate estimates (not modified)
        year: Calendar year to keep
        sales_performance_mode: Salesperson-performance report flag. Both
            report modes use the same date priority, so it only affects logging.
        sold_only: Drop estimates whose status contains "lost"
        month: Optional month (1-12) to further restrict the selection

    Returns:
        New list of the matching estimates, in input order
    """
    settings = get_settings()
    unique = deduplicate_estimates(estimates)

    selected: List[Estimate] = []
    for estimate in unique:
        if estimate.archived:
            continue

        if sold_only and "lost" in normalize_status(estimate.status):
            continue

        determination = select_determination_date(estimate)
        if determination is None:
            continue
        date_string = determination[1]

        estimate_year = year_from_date_string(date_string)
        if estimate_year is None:
            continue
        if estimate_year < settings.min_report_year or estimate_year > settings.max_report_year:
            logger.debug(f"Estimate {estimate.id}: year {estimate_year} outside report bounds")
            continue
        if estimate_year != year:
            continue

        if month is not None and month_from_date_string(date_string) != month:
            continue

        selected.append(estimate)

    mode = "sales performance" if sales_performance_mode else "standard"
    period = f"{year}-{month:02d}" if month is not None else str(year)
    logger.debug(
        f"Year filter ({mode}) for {period}: "
        f"{len(selected)} of {len(unique)} unique estimates selected"
    )
    return selected


__all__ = [
    "deduplicate_estimates",
    "filter_estimates_by_year",
]
