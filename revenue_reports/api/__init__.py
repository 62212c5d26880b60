"""
Revenue reports API package initialization.

This package contains FastAPI router modules for the reporting engine:
- reports: win/loss reports, XLSX export, revenue segments, single-estimate
  attribution and estimate import validation
"""

from fastapi import APIRouter

# Import router modules
from revenue_reports.api.reports import router as reports_router

# Create main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(reports_router, prefix="/reports", tags=["reports"])

# Export all routers for selective imports
__all__ = [
    "api_router",
    "reports_router",
]
