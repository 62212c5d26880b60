"""
Pydantic models for the revenue reporting engine.

This module provides type-safe data validation and serialization for the engine's
inputs (estimates, accounts), its intermediate results (classification, year
attribution), its outputs (statistics records, segment assignments) and the
report API request/response bodies.

Estimate and Account use the snake_case field names of the CRM tables they are
read from; result and statistics models use the camelCase names the report
layer consumes.

All models use Pydantic v2 syntax. Input models are frozen so the engine can
never mutate a caller's records.
"""

from datetime import date as DateType
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from revenue_reports.core.parsing import normalize_date_string, parse_amount
from revenue_reports.models.enums import Outcome, RevenueSegment


# =============================================================================
# Input Models
# =============================================================================


class Estimate(BaseModel):
    """
    A sales estimate imported from the estimating tool.

    Records arrive already linked to accounts by the import pipeline. Date
    fields are normalized to ``YYYY-MM-DD`` strings and price fields to floats;
    values that cannot be parsed become None instead of failing validation so
    a single bad row never blocks a report.
    """
    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        coerce_numbers_to_str=True,
        json_schema_extra={
            "example": {
                "id": "est_001",
                "external_id": "LMN-10442",
                "status": "Contract Signed",
                "pipeline_status": "Sold",
                "account_id": "acc_001",
                "division": "Maintenance",
                "estimate_type": "Service",
                "total_price_with_tax": 120000.0,
                "total_price": 113000.0,
                "estimate_date": "2024-11-20",
                "contract_start": "2025-01-01",
                "contract_end": "2026-12-31",
                "archived": False
            }
        }
    )

    id: str = Field(
        ...,
        min_length=1,
        description="Stable identifier, unique per estimate"
    )
    external_id: Optional[str] = Field(
        default=None,
        description="Identifier in the external estimating system (dedup key)"
    )
    status: Optional[str] = Field(
        default=None,
        description="Free-text status from the estimating tool"
    )
    pipeline_status: Optional[str] = Field(
        default=None,
        description="Secondary pipeline status; 'sold' takes priority over status"
    )
    account_id: Optional[str] = Field(
        default=None,
        description="Owning account, if linked"
    )
    division: Optional[str] = Field(
        default=None,
        description="Department / division label"
    )
    estimate_type: Optional[str] = Field(
        default=None,
        description="Estimate type (Standard = project, Service = recurring)"
    )

    # Prices
    total_price_with_tax: Optional[float] = Field(
        default=None,
        description="Tax-inclusive total (preferred)"
    )
    total_price: Optional[float] = Field(
        default=None,
        description="Tax-exclusive total (fallback)"
    )

    # Dates (YYYY-MM-DD)
    estimate_date: Optional[str] = Field(
        default=None,
        description="Date the estimate was issued"
    )
    estimate_close_date: Optional[str] = Field(
        default=None,
        description="Date the estimate was closed (not used for attribution)"
    )
    contract_start: Optional[str] = Field(
        default=None,
        description="Contract start date"
    )
    contract_end: Optional[str] = Field(
        default=None,
        description="Contract end date"
    )
    created_date: Optional[str] = Field(
        default=None,
        description="Record creation date (last-resort fallback)"
    )

    archived: bool = Field(
        default=False,
        description="Archived estimates are excluded from year-filtered reports"
    )

    @field_validator(
        'estimate_date',
        'estimate_close_date',
        'contract_start',
        'contract_end',
        'created_date',
        mode='before',
    )
    @classmethod
    def _normalize_dates(cls, value: Any) -> Optional[str]:
        return normalize_date_string(value)

    @field_validator('total_price_with_tax', 'total_price', mode='before')
    @classmethod
    def _parse_prices(cls, value: Any) -> Optional[float]:
        return parse_amount(value)

    @field_validator(
        'external_id',
        'status',
        'pipeline_status',
        'account_id',
        'division',
        'estimate_type',
        mode='before',
    )
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, float) and value != value:  # NaN
            return None
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator('archived', mode='before')
    @classmethod
    def _missing_archived_is_false(cls, value: Any) -> Any:
        if value is None or (isinstance(value, float) and value != value):
            return False
        return value


class Account(BaseModel):
    """
    A CRM account that estimates are aggregated into.

    ``annual_revenue`` and ``revenue_segment`` are derived outputs of the
    engine; callers persist them if they want to.
    """
    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        coerce_numbers_to_str=True,
        json_schema_extra={
            "example": {
                "id": "acc_001",
                "name": "Triovest Realty",
                "annual_revenue": 60000.0,
                "revenue_segment": "B"
            }
        }
    )

    id: str = Field(..., min_length=1, description="Account identifier")
    name: str = Field(default="", description="Account display name")
    annual_revenue: Optional[float] = Field(
        default=None,
        description="Current-year attributed won revenue (derived)"
    )
    revenue_segment: Optional[RevenueSegment] = Field(
        default=None,
        description="Revenue segment A/B/C/D (derived)"
    )


# =============================================================================
# Engine Result Models
# =============================================================================


class ClassificationResult(BaseModel):
    """
    Won/lost classification of a single estimate.

    ``recognized`` is False when neither the pipeline status nor the status
    matched a known phrase; such estimates are still classified as lost.
    """
    model_config = ConfigDict(frozen=True)

    won: bool = Field(..., description="True if the estimate is won")
    recognized: bool = Field(
        ...,
        description="Whether the status matched the won or lost vocabulary"
    )

    @property
    def outcome(self) -> Outcome:
        return Outcome.WON if self.won else Outcome.LOST


class YearAttribution(BaseModel):
    """
    Attribution of an estimate's value to a target calendar year.

    For single-year estimates ``attributionYears`` has one entry and
    ``annualAmount`` equals the full price.
    """
    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "appliesToYear": True,
                "value": 60000.0,
                "attributionYears": [2024, 2025],
                "yearsCount": 2,
                "durationMonths": 24,
                "annualAmount": 60000.0
            }
        }
    )

    appliesToYear: bool = Field(
        ...,
        description="Whether the target year is one of the attribution years"
    )
    value: float = Field(
        ...,
        description="Value attributed to the target year (0 when not applicable)"
    )
    attributionYears: List[int] = Field(
        default_factory=list,
        description="Consecutive calendar years the estimate is attributed to"
    )
    yearsCount: int = Field(default=1, ge=1, description="Number of attribution years")
    durationMonths: Optional[int] = Field(
        default=None,
        description="Contract span in months (multi-year contracts only)"
    )
    annualAmount: float = Field(..., description="Value attributed to each year")


# =============================================================================
# Statistics Models
# =============================================================================


class StatsRecord(BaseModel):
    """
    Win/loss statistics for a collection of estimates.

    Ratios are percentages rounded to one decimal place; they are 0 whenever
    their denominator is 0. ``pending`` is always 0 under binary
    classification and is kept for report-shape compatibility.
    """
    total: int = Field(default=0, ge=0, description="Number of estimates")
    won: int = Field(default=0, ge=0, description="Number of won estimates")
    lost: int = Field(default=0, ge=0, description="Number of lost estimates")
    pending: int = Field(default=0, ge=0, description="Always 0")
    decidedCount: int = Field(default=0, ge=0, description="won + lost")
    totalValue: float = Field(default=0.0, description="Sum of estimate values")
    wonValue: float = Field(default=0.0, description="Sum of won estimate values")
    lostValue: float = Field(default=0.0, description="Sum of lost estimate values")
    pendingValue: float = Field(default=0.0, description="Always 0")
    winRate: float = Field(
        default=0.0,
        ge=0.0,
        le=100.0,
        description="won / decidedCount * 100"
    )
    estimatesVsWonRatio: float = Field(default=0.0, description="won / total * 100")
    revenueVsWonRatio: float = Field(default=0.0, description="wonValue / totalValue * 100")


class OverallStats(StatsRecord):
    """Portfolio-wide statistics."""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "total": 3,
                "won": 1,
                "lost": 2,
                "pending": 0,
                "decidedCount": 3,
                "totalValue": 17000.0,
                "wonValue": 10000.0,
                "lostValue": 7000.0,
                "pendingValue": 0.0,
                "winRate": 33.3,
                "estimatesVsWonRatio": 33.3,
                "revenueVsWonRatio": 58.8
            }
        }
    )


class AccountStats(StatsRecord):
    """Statistics for the estimates linked to one account."""
    accountId: str = Field(..., description="Account identifier")
    accountName: str = Field(..., description="Account display name")
    estimateIds: List[str] = Field(
        default_factory=list,
        description="Estimates in this group, in input order"
    )


class DepartmentStats(StatsRecord):
    """Statistics for the estimates of one division."""
    division: str = Field(..., description="Division label")
    estimateIds: List[str] = Field(
        default_factory=list,
        description="Estimates in this group, in input order"
    )


# =============================================================================
# Ingestion Models
# =============================================================================


class ValidationError(BaseModel):
    """
    Validation error detail.

    Used for reporting data validation issues while loading estimate exports.
    """
    field: str = Field(..., description="Field with validation error")
    message: str = Field(..., description="Error message")
    row_number: Optional[int] = Field(
        default=None,
        ge=1,
        description="Row number where error occurred"
    )


class IngestionResult(BaseModel):
    """Result of loading an estimate export."""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": True,
                "rows_processed": 1000,
                "estimates": [],
                "errors": []
            }
        }
    )

    success: bool = Field(..., description="Whether every row loaded cleanly")
    rows_processed: int = Field(..., ge=0, description="Number of data rows read")
    estimates: List[Estimate] = Field(
        default_factory=list,
        description="Estimates that passed validation"
    )
    errors: List[ValidationError] = Field(
        default_factory=list,
        description="Validation errors encountered"
    )


# =============================================================================
# Report API Models
# =============================================================================


class WinLossReportRequest(BaseModel):
    """Request body for the win/loss report endpoint."""
    estimates: List[Estimate] = Field(default_factory=list)
    accounts: List[Account] = Field(default_factory=list)
    year: int = Field(..., description="Calendar year to report on")
    month: Optional[int] = Field(
        default=None,
        ge=1,
        le=12,
        description="Restrict the report to one month of the year"
    )
    soldOnly: bool = Field(
        default=False,
        description="Drop estimates whose status contains 'lost'"
    )
    salesPerformanceMode: bool = Field(
        default=False,
        description="Salesperson-performance report mode"
    )


class WinLossReportResponse(BaseModel):
    """Response body for the win/loss report endpoint."""
    year: int
    month: Optional[int] = None
    overall: OverallStats
    accounts: List[AccountStats] = Field(default_factory=list)
    departments: List[DepartmentStats] = Field(default_factory=list)
    unrecognizedStatuses: List[str] = Field(
        default_factory=list,
        description="Raw statuses that defaulted to lost"
    )


class SegmentReportRequest(BaseModel):
    """Request body for the revenue segment endpoint."""
    estimates: List[Estimate] = Field(default_factory=list)
    accounts: List[Account] = Field(default_factory=list)
    year: Optional[int] = Field(
        default=None,
        description="Target year; resolved from asOfDate when omitted"
    )
    asOfDate: Optional[DateType] = Field(
        default=None,
        description="Date used to resolve the segment year (defaults to today)"
    )


class AccountSegment(BaseModel):
    """Revenue and segment assigned to one account."""
    accountId: str
    accountName: str
    revenue: float = Field(..., description="Current-year attributed won revenue")
    percentage: float = Field(..., description="Share of portfolio revenue, rounded to 1 decimal")
    segment: RevenueSegment


class SegmentReportResponse(BaseModel):
    """Response body for the revenue segment endpoint."""
    year: int
    totalRevenue: float
    accounts: List[AccountSegment] = Field(default_factory=list)


class AttributionRequest(BaseModel):
    """Request body for the single-estimate attribution endpoint."""
    estimate: Estimate
    year: int


class AttributionResponse(BaseModel):
    """Response body for the single-estimate attribution endpoint."""
    year: int
    attribution: Optional[YearAttribution] = None
    allocation: Dict[int, float] = Field(
        default_factory=dict,
        description="Full year -> value allocation for the estimate"
    )
