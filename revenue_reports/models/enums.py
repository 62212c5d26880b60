"""
Enumeration definitions for the revenue reporting engine.

All enums inherit from both `str` and `Enum` to ensure JSON serialization compatibility
with Pydantic models, enabling automatic serialization/deserialization in API responses.
"""

from enum import Enum


class Outcome(str, Enum):
    """
    Binary sales outcome of an estimate.

    There is no pending state: statuses that match neither the won nor the
    lost vocabulary are classified as lost.
    """
    WON = "won"
    LOST = "lost"


class RevenueSegment(str, Enum):
    """
    Account revenue segment.

    - A: >= 15% of current-year portfolio revenue
    - B: 5-15% of current-year portfolio revenue
    - C: < 5%, or no current-year revenue
    - D: Project only (won "standard" estimates, no "service" estimates)
    """
    A = "A"
    B = "B"
    C = "C"
    D = "D"


class EstimateType(str, Enum):
    """
    Estimate type labels from the estimating tool.

    - standard: one-time project work
    - service: ongoing/recurring service work
    """
    STANDARD = "standard"
    SERVICE = "service"


class DateField(str, Enum):
    """
    Estimate date fields that can determine an attribution year.

    Listed in the canonical priority order used for single-year attribution
    and year filtering.
    """
    CONTRACT_END = "contract_end"
    CONTRACT_START = "contract_start"
    ESTIMATE_DATE = "estimate_date"
    CREATED_DATE = "created_date"


# Canonical year-determination priority
YEAR_DETERMINATION_PRIORITY = (
    DateField.CONTRACT_END,
    DateField.CONTRACT_START,
    DateField.ESTIMATE_DATE,
    DateField.CREATED_DATE,
)
