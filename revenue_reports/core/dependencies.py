"""
FastAPI dependency injection module for the revenue reporting API.

Provides reusable dependencies so endpoint handlers never reach for the
settings singleton directly, which keeps them easy to override in tests via
``app.dependency_overrides``.

Dependencies Provided:
- get_settings_dependency: Returns the cached Settings singleton
- SettingsDep: Type alias for injecting Settings into endpoints

Usage:
    @router.post("/win-loss")
    async def win_loss_report(body: WinLossReportRequest, settings: SettingsDep):
        ...
"""

from typing import Annotated

from fastapi import Depends

from revenue_reports.core.config import Settings, get_settings


def get_settings_dependency() -> Settings:
    """
    Return the application settings for injection into endpoints.

    Returns:
        Settings: The cached application settings instance.
    """
    return get_settings()


SettingsDep = Annotated[Settings, Depends(get_settings_dependency)]


__all__ = [
    'get_settings_dependency',
    'SettingsDep',
]
