"""
Report export service.

Builds the end-of-year win/loss report as pandas DataFrames (one per sheet)
and writes them to an XLSX workbook through openpyxl. Estimates are expected
to be year-filtered by the caller; the year is only used for the report title
and the default file name.

Sheets:
- Overall Stats: label/value rows for the portfolio statistics
- Account Performance: one row per account, sorted by total value
- Department Breakdown: one row per division, sorted by total value
- Detailed Estimates: one row per estimate with its classified outcome
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Union
from pathlib import Path

import pandas as pd
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from revenue_reports.core.parsing import parse_amount
from revenue_reports.models.schemas import Account, Estimate
from revenue_reports.services.aggregation import (
    aggregate,
    aggregate_by_account,
    aggregate_by_department,
)
from revenue_reports.services.classification import classify
from revenue_reports.services.year_attribution import estimate_value


logger = logging.getLogger(__name__)


OVERALL_SHEET = "Overall Stats"
ACCOUNT_SHEET = "Account Performance"
DEPARTMENT_SHEET = "Department Breakdown"
ESTIMATES_SHEET = "Detailed Estimates"

HEADER_FONT = Font(bold=True)


def format_currency(value: Any) -> str:
    """
    Format a dollar amount compactly for report display.

    Args:
        value: Number or currency string

    Returns:
        '$1.2M' for millions, '$52.3K' for thousands, '$950' below that,
        '$0' for zero or unparseable input; negatives are prefixed with '-'
    """
    amount = parse_amount(value)
    if amount is None or amount == 0:
        return "$0"
    if amount < 0:
        return "-" + format_currency(-amount)

    # Thresholds apply to the rounded display value, so 999.7 is $1.0K
    dollars = round(amount)
    if dollars < 1_000:
        return f"${dollars}"
    thousands = round(amount / 1_000, 1)
    if thousands < 1_000:
        return f"${thousands:.1f}K"
    return f"${amount / 1_000_000:.1f}M"


def _overall_frame(estimates: List[Estimate], year: int) -> pd.DataFrame:
    stats = aggregate(estimates)
    rows = [
        ("Report Year", year),
        ("Total Estimates", stats.total),
        ("Won", stats.won),
        ("Lost", stats.lost),
        ("Pending", stats.pending),
        ("Win Rate (%)", stats.winRate),
        ("Total Value", stats.totalValue),
        ("Won Value", stats.wonValue),
        ("Lost Value", stats.lostValue),
        ("Pending Value", stats.pendingValue),
        ("Estimates vs Won Ratio (%)", stats.estimatesVsWonRatio),
        ("Revenue vs Won Ratio (%)", stats.revenueVsWonRatio),
    ]
    return pd.DataFrame(rows, columns=["Metric", "Value"])


def _account_frame(estimates: List[Estimate], accounts: List[Account]) -> pd.DataFrame:
    columns = [
        "Account", "Total", "Won", "Lost", "Pending", "Win Rate (%)",
        "Total Value", "Won Value", "Lost Value", "Pending Value",
        "Est. vs Won (%)", "Rev. vs Won (%)",
    ]
    rows = [
        [
            stats.accountName, stats.total, stats.won, stats.lost, stats.pending,
            stats.winRate, stats.totalValue, stats.wonValue, stats.lostValue,
            stats.pendingValue, stats.estimatesVsWonRatio, stats.revenueVsWonRatio,
        ]
        for stats in aggregate_by_account(estimates, accounts)
    ]
    return pd.DataFrame(rows, columns=columns)


def _department_frame(estimates: List[Estimate]) -> pd.DataFrame:
    columns = [
        "Department", "Total", "Won", "Lost", "Win Rate (%)",
        "Total Value", "Won Value", "Lost Value",
        "Est. vs Won (%)", "Rev. vs Won (%)",
    ]
    rows = [
        [
            stats.division, stats.total, stats.won, stats.lost, stats.winRate,
            stats.totalValue, stats.wonValue, stats.lostValue,
            stats.estimatesVsWonRatio, stats.revenueVsWonRatio,
        ]
        for stats in aggregate_by_department(estimates)
    ]
    return pd.DataFrame(rows, columns=columns)


def _estimates_frame(estimates: List[Estimate], accounts: List[Account]) -> pd.DataFrame:
    names = {account.id: account.name for account in accounts}
    columns = [
        "Estimate ID", "External ID", "Account", "Estimate Date", "Close Date",
        "Status", "Outcome", "Division", "Total Value",
    ]
    rows = [
        [
            estimate.id,
            estimate.external_id or "N/A",
            names.get(estimate.account_id) or "Unknown",
            estimate.estimate_date or "N/A",
            estimate.estimate_close_date or "N/A",
            estimate.status or "N/A",
            classify(estimate).outcome.value,
            estimate.division or "N/A",
            estimate_value(estimate),
        ]
        for estimate in estimates
    ]
    return pd.DataFrame(rows, columns=columns)


def build_report_frames(
    estimates: Iterable[Estimate],
    accounts: Iterable[Account],
    year: int
) -> Dict[str, pd.DataFrame]:
    """
    Build the report tables.

    Args:
        estimates: Year-filtered estimates
        accounts: Accounts used to resolve display names
        year: Report year (shown on the overall sheet)

    Returns:
        Ordered mapping of sheet name -> DataFrame
    """
    estimates = list(estimates)
    accounts = list(accounts)

    return {
        OVERALL_SHEET: _overall_frame(estimates, year),
        ACCOUNT_SHEET: _account_frame(estimates, accounts),
        DEPARTMENT_SHEET: _department_frame(estimates),
        ESTIMATES_SHEET: _estimates_frame(estimates, accounts),
    }


def default_report_filename(year: int) -> str:
    return f"End_of_Year_Report_{year}.xlsx"


def export_report_xlsx(
    estimates: Iterable[Estimate],
    accounts: Iterable[Account],
    year: int,
    path_or_buffer: Optional[Union[str, Path, Any]] = None
) -> Union[str, Path, Any]:
    """
    Write the report workbook.

    Args:
        estimates: Year-filtered estimates
        accounts: Accounts used to resolve display names
        year: Report year
        path_or_buffer: Target path or binary buffer; defaults to
            End_of_Year_Report_<year>.xlsx in the working directory

    Returns:
        The path or buffer the workbook was written to
    """
    target = path_or_buffer if path_or_buffer is not None else default_report_filename(year)
    frames = build_report_frames(estimates, accounts, year)

    with pd.ExcelWriter(target, engine="openpyxl") as writer:
        for sheet_name, frame in frames.items():
            frame.to_excel(writer, sheet_name=sheet_name, index=False)

            worksheet = writer.sheets[sheet_name]
            for cell in worksheet[1]:
                cell.font = HEADER_FONT
            for index, column in enumerate(frame.columns, start=1):
                values = [str(column)] + [str(value) for value in frame[column].tolist()]
                worksheet.column_dimensions[get_column_letter(index)].width = min(
                    max(len(value) for value in values) + 2, 50
                )

    logger.info(f"Exported {year} report with {len(frames)} sheets")
    return target


__all__ = [
    "format_currency",
    "build_report_frames",
    "default_report_filename",
    "export_report_xlsx",
]
