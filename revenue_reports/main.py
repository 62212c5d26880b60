"""
FastAPI application entry point for the Revenue Reports API.

This module configures logging and CORS, registers the report router, and
starts the ASGI server when executed directly. The engine holds no state, so
there is nothing to open or close on startup and shutdown.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from revenue_reports import __version__
from revenue_reports.api import api_router
from revenue_reports.core.config import get_settings

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# Create FastAPI application
app = FastAPI(
    title="Revenue Reports API",
    version=__version__,
    description=(
        "Win/loss reporting and revenue attribution for CRM estimates. "
        "Provides year-filtered win/loss statistics, XLSX export, "
        "account revenue segments and single-estimate attribution."
    ),
)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register API routers
app.include_router(api_router)

logger.info(f"Revenue Reports API {__version__} configured")


@app.get("/health")
async def health_check():
    """
    Health check endpoint for monitoring and load balancer probes.

    Returns:
        Dict with status 'healthy'
    """
    return {"status": "healthy"}


@app.get("/")
async def root():
    """
    Root endpoint providing API information.

    Returns:
        Dict with API name and version
    """
    return {
        "name": "Revenue Reports API",
        "version": __version__,
        "docs": "/docs",
        "openapi": "/openapi.json",
    }


# Run with uvicorn when executed directly
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "revenue_reports.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
