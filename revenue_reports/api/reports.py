"""
FastAPI router module for win/loss and revenue reports.

Implements:
- POST /reports/win-loss: year-filtered overall, account and department stats
- POST /reports/win-loss/export: the same report as an XLSX workbook
- POST /reports/segments: per-account revenue and A/B/C/D segments
- POST /reports/attribution: year attribution of a single estimate
- POST /reports/estimates/import: validate exported estimate rows

Every endpoint is a thin async wrapper around the synchronous engine in
revenue_reports.services. Data problems in estimates never fail a request;
unexpected errors are logged and returned as HTTP 500.
"""

import io
import logging
from typing import Any, Dict, List

import pandas as pd
from fastapi import APIRouter, Body, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel, Field

from revenue_reports.core.dependencies import SettingsDep
from revenue_reports.models.schemas import (
    AttributionRequest,
    AttributionResponse,
    IngestionResult,
    SegmentReportRequest,
    SegmentReportResponse,
    WinLossReportRequest,
    WinLossReportResponse,
)
from revenue_reports.services.aggregation import (
    aggregate,
    aggregate_by_account,
    aggregate_by_department,
)
from revenue_reports.services.classification import classify_batch, find_unrecognized_statuses
from revenue_reports.services.exports import default_report_filename, export_report_xlsx
from revenue_reports.services.ingestion import load_estimates_frame
from revenue_reports.services.segments import (
    build_account_segments,
    group_estimates_by_account,
    resolve_segment_year,
)
from revenue_reports.services.year_attribution import allocate_by_year, attribute_years
from revenue_reports.services.year_filter import filter_estimates_by_year


# Configure logging
logger = logging.getLogger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


# =============================================================================
# Local Pydantic Models for API Requests
# =============================================================================

class EstimateImportRequest(BaseModel):
    """Request model for validating exported estimate rows."""
    rows: List[Dict[str, Any]] = Field(
        default_factory=list,
        description="Estimate rows keyed by export column name"
    )


router = APIRouter()


def _check_report_year(year: int, settings) -> None:
    if year < settings.min_report_year or year > settings.max_report_year:
        raise HTTPException(
            status_code=422,
            detail=(
                f"Report year {year} is outside "
                f"{settings.min_report_year}-{settings.max_report_year}"
            )
        )


def _build_win_loss_report(request: WinLossReportRequest) -> WinLossReportResponse:
    estimates = filter_estimates_by_year(
        request.estimates,
        request.year,
        sales_performance_mode=request.salesPerformanceMode,
        sold_only=request.soldOnly,
        month=request.month,
    )
    # Logs one warning per unrecognized status
    classify_batch(estimates)

    return WinLossReportResponse(
        year=request.year,
        month=request.month,
        overall=aggregate(estimates),
        accounts=aggregate_by_account(estimates, request.accounts),
        departments=aggregate_by_department(estimates),
        unrecognizedStatuses=find_unrecognized_statuses(estimates),
    )


# =============================================================================
# Endpoint Implementations
# =============================================================================


@router.post("/win-loss", response_model=WinLossReportResponse)
async def win_loss_report(
    settings: SettingsDep,
    request: WinLossReportRequest = Body(...),
) -> WinLossReportResponse:
    """
    Build the win/loss report for a year (optionally one month of it).

    Args:
        request: Estimates, accounts and report options

    Returns:
        WinLossReportResponse with overall, account and department statistics
    """
    _check_report_year(request.year, settings)

    try:
        report = _build_win_loss_report(request)
        logger.info(
            f"Win/loss report for {request.year}: {report.overall.total} of "
            f"{len(request.estimates)} estimates included"
        )
        return report

    except Exception as e:
        logger.exception(f"Error building win/loss report for {request.year}")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to build win/loss report: {str(e)}"
        )


@router.post("/win-loss/export")
async def export_win_loss_report(
    settings: SettingsDep,
    request: WinLossReportRequest = Body(...),
) -> Response:
    """
    Export the win/loss report as an XLSX workbook.

    Returns:
        XLSX file download
    """
    _check_report_year(request.year, settings)

    try:
        estimates = filter_estimates_by_year(
            request.estimates,
            request.year,
            sales_performance_mode=request.salesPerformanceMode,
            sold_only=request.soldOnly,
            month=request.month,
        )
        buffer = io.BytesIO()
        export_report_xlsx(estimates, request.accounts, request.year, buffer)

    except Exception as e:
        logger.exception(f"Error exporting win/loss report for {request.year}")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to export win/loss report: {str(e)}"
        )

    filename = default_report_filename(request.year)
    return Response(
        content=buffer.getvalue(),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/segments", response_model=SegmentReportResponse)
async def segment_report(
    request: SegmentReportRequest = Body(...),
) -> SegmentReportResponse:
    """
    Compute revenue and segment for every account.

    The target year is ``year`` when given, otherwise the segment year for
    ``asOfDate`` (or today): the previous year in January and February.

    Returns:
        SegmentReportResponse with portfolio revenue and per-account segments
    """
    year = request.year if request.year is not None else resolve_segment_year(request.asOfDate)

    try:
        estimates_by_account = group_estimates_by_account(request.estimates)
        total_revenue, accounts = build_account_segments(
            request.accounts,
            estimates_by_account,
            year,
        )
        logger.info(f"Segmented {len(accounts)} accounts for {year}")
        return SegmentReportResponse(
            year=year,
            totalRevenue=total_revenue,
            accounts=accounts,
        )

    except Exception as e:
        logger.exception(f"Error computing segments for {year}")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to compute segments: {str(e)}"
        )


@router.post("/attribution", response_model=AttributionResponse)
async def estimate_attribution(
    request: AttributionRequest = Body(...),
) -> AttributionResponse:
    """
    Attribute one estimate's value to a year.

    Returns:
        AttributionResponse; ``attribution`` is null when the estimate has no
        usable price or date
    """
    try:
        return AttributionResponse(
            year=request.year,
            attribution=attribute_years(request.estimate, request.year),
            allocation=allocate_by_year(request.estimate),
        )

    except Exception as e:
        logger.exception(f"Error attributing estimate {request.estimate.id}")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to attribute estimate: {str(e)}"
        )


@router.post("/estimates/import", response_model=IngestionResult)
async def import_estimates(
    request: EstimateImportRequest = Body(...),
) -> IngestionResult:
    """
    Validate exported estimate rows.

    Bad rows are reported in ``errors`` with their 1-based row number; the
    request itself only fails on unexpected errors.

    Returns:
        IngestionResult with the parsed estimates and validation errors
    """
    try:
        return load_estimates_frame(pd.DataFrame(request.rows))

    except Exception as e:
        logger.exception("Error importing estimate rows")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to import estimates: {str(e)}"
        )


__all__ = ["router"]
