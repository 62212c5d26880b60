"""
Year Attribution Service

Determines which calendar year(s) an estimate's value counts toward and how
much of it each year receives.

Price Selection:
- Tax-inclusive total (total_price_with_tax) when present and positive
- Otherwise the tax-exclusive total (total_price) when positive
- Otherwise the estimate has no usable value and attribution returns None

Single-Year Estimates (not both contract dates present):
- The attribution year comes from the first non-null date in the order
  contract_end -> contract_start -> estimate_date -> created_date
- The whole price is attributed to that year

Multi-Year Contracts (contract_start and contract_end both present):
- duration_months = 12 * year_diff + month_diff, plus one month only when the
  end day-of-month is after the start day-of-month, so Apr 15 -> Apr 15 of the
  next year is exactly 12 months
- years_count: <=12 -> 1, <=24 -> 2, <=36 -> 3, longer spans use
  months / 12 for exact multiples and ceil(months / 12) otherwise
- The price is split evenly into annual amounts attributed to years_count
  consecutive calendar years starting at the contract start year

Years are always read from the ``YYYY-MM-DD`` string prefix, never through a
timezone-aware conversion. All arithmetic is floating point with no rounding.
"""

import logging
import math
from typing import Dict, List, Optional, Tuple

from revenue_reports.core.parsing import (
    parse_date_string,
    year_from_date_string,
)
from revenue_reports.models.enums import YEAR_DETERMINATION_PRIORITY, DateField
from revenue_reports.models.schemas import Estimate, YearAttribution


logger = logging.getLogger(__name__)


# =============================================================================
# Price Selection
# =============================================================================


def select_price(estimate: Estimate) -> Optional[float]:
    """
    Select the monetary value of an estimate.

    Args:
        estimate: The estimate to price

    Returns:
        The tax-inclusive total if positive, else the tax-exclusive total if
        positive, else None
    """
    with_tax = estimate.total_price_with_tax
    if with_tax is not None and with_tax > 0:
        return with_tax

    without_tax = estimate.total_price
    if without_tax is not None and without_tax > 0:
        logger.debug(f"Estimate {estimate.id}: using total_price as tax-inclusive total is missing")
        return without_tax

    return None


def estimate_value(estimate: Estimate) -> float:
    """Value used in statistics sums: the selected price, or 0 when unusable."""
    price = select_price(estimate)
    return price if price is not None else 0.0


# =============================================================================
# Date Selection
# =============================================================================


def select_determination_date(estimate: Estimate) -> Optional[Tuple[DateField, str]]:
    """
    Pick the date that determines a single-year estimate's attribution year.

    Args:
        estimate: The estimate to inspect

    Returns:
        (field, YYYY-MM-DD string) for the first non-null date in priority
        order, or None if the estimate has no usable date
    """
    for date_field in YEAR_DETERMINATION_PRIORITY:
        value = getattr(estimate, date_field.value)
        if value:
            return date_field, value
    return None


# =============================================================================
# Contract Span Calculations
# =============================================================================


def calculate_duration_months(contract_start: str, contract_end: str) -> Optional[int]:
    """
    Calculate the number of months a contract spans.

    The end month is counted only when the end day-of-month is strictly after
    the start day-of-month, so an exact N x 12 month span never rounds up.

    Args:
        contract_start: Contract start date (YYYY-MM-DD)
        contract_end: Contract end date (YYYY-MM-DD)

    Returns:
        Duration in months, or None if either date is unparseable

    Example:
        >>> calculate_duration_months("2024-01-15", "2025-02-15")
        13
        >>> calculate_duration_months("2024-01-01", "2025-12-31")
        24
    """
    start = parse_date_string(contract_start)
    end = parse_date_string(contract_end)
    if start is None or end is None:
        return None

    total_months = (end.year - start.year) * 12 + (end.month - start.month)
    if end.day > start.day:
        total_months += 1
    return total_months


def get_contract_years(duration_months: int) -> int:
    """
    Map a contract duration to the number of attribution years.

    Args:
        duration_months: Contract duration in months (positive)

    Returns:
        Number of consecutive calendar years the contract is spread over
    """
    if duration_months <= 12:
        return 1
    if duration_months <= 24:
        return 2
    if duration_months <= 36:
        return 3
    if duration_months % 12 == 0:
        return duration_months // 12
    return math.ceil(duration_months / 12)


# =============================================================================
# Attribution
# =============================================================================


def _build_attribution(
    estimate: Estimate,
    price: float
) -> Optional[Tuple[List[int], float, Optional[int]]]:
    """Return (attribution years, annual amount, duration months) or None."""
    if estimate.contract_start and estimate.contract_end:
        duration_months = calculate_duration_months(estimate.contract_start, estimate.contract_end)
        if duration_months is None or duration_months <= 0:
            logger.debug(
                f"Estimate {estimate.id}: contract span {estimate.contract_start} -> "
                f"{estimate.contract_end} is not positive"
            )
            return None

        years_count = get_contract_years(duration_months)
        start_year = year_from_date_string(estimate.contract_start)
        years = [start_year + offset for offset in range(years_count)]
        return years, price / years_count, duration_months

    selected = select_determination_date(estimate)
    if selected is None:
        return None

    year = year_from_date_string(selected[1])
    if year is None:
        return None
    return [year], price, None


def attribute_years(estimate: Estimate, target_year: int) -> Optional[YearAttribution]:
    """
    Attribute an estimate's value to a target calendar year.

    Args:
        estimate: The estimate to attribute
        target_year: The calendar year being reported on

    Returns:
        YearAttribution with ``appliesToYear`` and the ``value`` attributed to
        target_year (0 when it does not apply), or None when the estimate has
        no usable price or no usable date. Callers must skip None results
        rather than treat them as zero-value matches.
    """
    price = select_price(estimate)
    if price is None:
        return None

    built = _build_attribution(estimate, price)
    if built is None:
        return None

    years, annual_amount, duration_months = built
    applies = target_year in years

    return YearAttribution(
        appliesToYear=applies,
        value=annual_amount if applies else 0.0,
        attributionYears=years,
        yearsCount=len(years),
        durationMonths=duration_months,
        annualAmount=annual_amount,
    )


def allocate_by_year(estimate: Estimate) -> Dict[int, float]:
    """
    Full year -> value allocation for an estimate.

    Args:
        estimate: The estimate to allocate

    Returns:
        Mapping of every attribution year to its annual amount; the values sum
        to the selected price. Empty when the estimate has no usable price or
        date.
    """
    price = select_price(estimate)
    if price is None:
        return {}

    built = _build_attribution(estimate, price)
    if built is None:
        return {}

    years, annual_amount, _ = built
    return {year: annual_amount for year in years}


__all__ = [
    "select_price",
    "estimate_value",
    "select_determination_date",
    "calculate_duration_months",
    "get_contract_years",
    "attribute_years",
    "allocate_by_year",
]
