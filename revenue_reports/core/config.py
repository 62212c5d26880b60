"""
Settings and environment management module for the revenue reporting engine.

This module provides centralized configuration management using pydantic-settings,
which automatically loads settings from environment variables and .env files.

Key Features:
- Environment variable validation and type coercion
- Sensible defaults matching the reporting business rules
- Singleton pattern via @lru_cache for efficient access

Reporting Defaults:
- segment_a_threshold: 15.0 (Share of portfolio revenue, in percent, for Segment A)
- segment_b_threshold: 5.0 (Share of portfolio revenue, in percent, for Segment B)
- min_report_year / max_report_year: 2000 / 2100 (Valid attribution years)
- uncategorized_division: 'Uncategorized' (Bucket for estimates without a division)
- unknown_account_name: 'Unknown Account' (Name for estimates linked to unknown accounts)

Usage:
    from revenue_reports.core.config import get_settings

    settings = get_settings()
    threshold = settings.segment_a_threshold
"""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    The class inherits from pydantic-settings BaseSettings which provides:
    - Automatic loading from environment variables (case-insensitive)
    - Support for .env file loading
    - Type validation and coercion
    - Default values for every setting (nothing is required)

    Attributes:
        segment_a_threshold: Minimum revenue share (percent) for Segment A.
        segment_b_threshold: Minimum revenue share (percent) for Segment B.
        min_report_year: Earliest calendar year accepted by the year filter.
        max_report_year: Latest calendar year accepted by the year filter.
        uncategorized_division: Department label for estimates without a division.
        unknown_account_name: Account name used when an account id has no match.
        cors_origins: Origins allowed to call the report API.
        log_level: Root logging level for the API process.
    """

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore',  # Ignore extra environment variables not defined in this class
        case_sensitive=False,
    )

    # =========================================================================
    # Segment Thresholds
    # =========================================================================

    # Accounts whose current-year won revenue is at least this share of the
    # portfolio total are Segment A
    segment_a_threshold: float = 15.0

    # At least this share (and below segment_a_threshold) is Segment B;
    # anything lower is Segment C
    segment_b_threshold: float = 5.0

    # =========================================================================
    # Year Filtering
    # =========================================================================

    # Years outside [min_report_year, max_report_year] are treated as bad data
    # and excluded from year-filtered views
    min_report_year: int = 2000
    max_report_year: int = 2100

    # =========================================================================
    # Grouping Labels
    # =========================================================================

    uncategorized_division: str = 'Uncategorized'
    unknown_account_name: str = 'Unknown Account'

    # =========================================================================
    # API Process
    # =========================================================================

    cors_origins: List[str] = [
        'http://localhost:3000',
        'http://127.0.0.1:3000',
    ]
    log_level: str = 'INFO'


@lru_cache()
def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Returns a cached Settings instance, ensuring that environment variables
    are only loaded once during the application lifecycle.

    Returns:
        Settings: The application settings instance with all configuration values.

    Note:
        To refresh settings in tests, clear the cache:
        >>> get_settings.cache_clear()
    """
    return Settings()
