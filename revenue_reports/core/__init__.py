"""
Core infrastructure package for the revenue reporting engine.

Provides:
- Configuration management via pydantic-settings
- FastAPI dependency injection utilities

This module re-exports key components from submodules for convenient importing:

    from revenue_reports.core import get_settings, SettingsDep
"""

from revenue_reports.core.config import Settings, get_settings
from revenue_reports.core.dependencies import (
    get_settings_dependency,
    SettingsDep,
)

__all__ = [
    'Settings',
    'get_settings',
    'get_settings_dependency',
    'SettingsDep',
]
