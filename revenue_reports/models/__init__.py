"""
Package initialization file for the engine's models.

Re-exports all Pydantic schemas and enumerations so other modules can import
them from ``revenue_reports.models`` directly:

    from revenue_reports.models import Estimate, OverallStats, RevenueSegment
"""

# =============================================================================
# Enums
# =============================================================================

from revenue_reports.models.enums import (
    Outcome,
    RevenueSegment,
    EstimateType,
    DateField,
    YEAR_DETERMINATION_PRIORITY,
)

# =============================================================================
# Schemas
# =============================================================================

from revenue_reports.models.schemas import (
    # Inputs
    Estimate,
    Account,
    # Engine results
    ClassificationResult,
    YearAttribution,
    # Statistics
    StatsRecord,
    OverallStats,
    AccountStats,
    DepartmentStats,
    # Ingestion
    ValidationError,
    IngestionResult,
    # Report API
    WinLossReportRequest,
    WinLossReportResponse,
    SegmentReportRequest,
    AccountSegment,
    SegmentReportResponse,
    AttributionRequest,
    AttributionResponse,
)

__all__ = [
    # Enums
    'Outcome',
    'RevenueSegment',
    'EstimateType',
    'DateField',
    'YEAR_DETERMINATION_PRIORITY',
    # Schemas
    'Estimate',
    'Account',
    'ClassificationResult',
    'YearAttribution',
    'StatsRecord',
    'OverallStats',
    'AccountStats',
    'DepartmentStats',
    'ValidationError',
    'IngestionResult',
    'WinLossReportRequest',
    'WinLossReportResponse',
    'SegmentReportRequest',
    'AccountSegment',
    'SegmentReportResponse',
    'AttributionRequest',
    'AttributionResponse',
]
