"""
Revenue Reports Services Module

This module contains the calculation services of the reporting engine. Every
service is a set of stateless, synchronous functions over in-memory estimate
and account models; none of them mutates its inputs.

Services:
- classification: won/lost classification from status strings
- year_attribution: calendar-year attribution and multi-year annualization
- aggregation: portfolio, account and department win/loss statistics
- year_filter: report-year selection with dedup and archive handling
- segments: A/B/C/D revenue segments and portfolio revenue
- ingestion: pandas loading of estimate exports
- exports: report tables and XLSX export

All services are consumed by the API layer (revenue_reports/api/).
"""

# =============================================================================
# Classification Service Exports
# Won/lost decision from the pipeline status and the status vocabulary
# =============================================================================

from revenue_reports.services.classification import (
    classify,
    classify_batch,
    is_won,
    find_unrecognized_statuses,
    WON_STATUSES,
    LOST_STATUSES,
)

# =============================================================================
# Year Attribution Service Exports
# Price selection, contract span and per-year allocation
# =============================================================================

from revenue_reports.services.year_attribution import (
    select_price,
    calculate_duration_months,
    get_contract_years,
    attribute_years,
    allocate_by_year,
)

# =============================================================================
# Aggregation Service Exports
# =============================================================================

from revenue_reports.services.aggregation import (
    aggregate,
    aggregate_by_account,
    aggregate_by_department,
    aggregate_department_accounts,
)

# =============================================================================
# Year Filter Exports
# =============================================================================

from revenue_reports.services.year_filter import filter_estimates_by_year

# =============================================================================
# Segment Service Exports
# Revenue segments, portfolio revenue and bulk assignment
# =============================================================================

from revenue_reports.services.segments import (
    derive_segment,
    calculate_account_revenue,
    calculate_total_revenue,
    auto_assign_revenue_segments,
    build_account_segments,
    resolve_segment_year,
    group_estimates_by_account,
)

# =============================================================================
# Ingestion and Export Exports
# =============================================================================

from revenue_reports.services.ingestion import (
    load_estimates_csv,
    load_estimates_frame,
    validate_columns,
)
from revenue_reports.services.exports import (
    format_currency,
    build_report_frames,
    export_report_xlsx,
)

__all__ = [
    # Classification
    "classify",
    "classify_batch",
    "is_won",
    "find_unrecognized_statuses",
    "WON_STATUSES",
    "LOST_STATUSES",
    # Year attribution
    "select_price",
    "calculate_duration_months",
    "get_contract_years",
    "attribute_years",
    "allocate_by_year",
    # Aggregation
    "aggregate",
    "aggregate_by_account",
    "aggregate_by_department",
    "aggregate_department_accounts",
    # Year filter
    "filter_estimates_by_year",
    # Segments
    "derive_segment",
    "calculate_account_revenue",
    "calculate_total_revenue",
    "auto_assign_revenue_segments",
    "build_account_segments",
    "resolve_segment_year",
    "group_estimates_by_account",
    # Ingestion / export
    "load_estimates_csv",
    "load_estimates_frame",
    "validate_columns",
    "format_currency",
    "build_report_frames",
    "export_report_xlsx",
]
