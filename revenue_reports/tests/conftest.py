"""
Pytest Configuration and Shared Fixtures for Revenue Reports Tests.

This module provides fixtures and configuration for all engine tests:
- An estimate factory with sensible defaults
- The three-estimate portfolio used by the end-to-end win/loss scenario
- Sample accounts and a multi-year contract
- Settings cache reset between tests so environment overrides never leak
- A FastAPI TestClient for router tests

Dependencies:
- pytest
- pytest-asyncio (async endpoint tests)
- pandas (ingestion tests)
- httpx (FastAPI TestClient)
"""

from typing import Any, Callable, Generator, List

import pandas as pd
import pytest
from fastapi.testclient import TestClient

from revenue_reports.core.config import get_settings
from revenue_reports.models import Account, Estimate


# ============================================================
# PYTEST HOOKS
# ============================================================

def pytest_configure(config) -> None:
    """
    Configure custom pytest markers for test organization.

    Custom markers defined:
    - scenario: end-to-end report scenarios across several services
    - api: tests going through the FastAPI router

    Usage:
        # Run only the router tests:
        pytest -m api

    Args:
        config: Pytest configuration object
    """
    config.addinivalue_line(
        'markers',
        'scenario: marks end-to-end report scenarios'
    )
    config.addinivalue_line(
        'markers',
        'api: marks tests that exercise the HTTP router'
    )


# ============================================================
# SETTINGS FIXTURES
# ============================================================

@pytest.fixture(autouse=True)
def reset_settings() -> Generator[None, None, None]:
    """
    Clear the cached Settings before and after every test.

    Tests that set environment variables with monkeypatch get a fresh
    Settings instance, and the override is gone for the next test.
    """
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ============================================================
# MODEL FIXTURES
# ============================================================

@pytest.fixture
def make_estimate() -> Callable[..., Estimate]:
    """
    Factory for Estimate models.

    Usage:
        def test_something(make_estimate):
            estimate = make_estimate(status="Won", total_price_with_tax=500)

    Defaults to a won estimate dated 2025-03-01 worth 1000 with a unique id.
    """
    counter = {'n': 0}

    def _make(**overrides: Any) -> Estimate:
        counter['n'] += 1
        data = {
            'id': f"est_{counter['n']:03d}",
            'status': 'Contract Signed',
            'total_price_with_tax': 1000.0,
            'estimate_date': '2025-03-01',
        }
        data.update(overrides)
        return Estimate(**data)

    return _make


@pytest.fixture
def scenario_estimates() -> List[Estimate]:
    """
    Three estimates from the 2025 win/loss scenario.

    - est_a: won ("Contract Signed"), 10000
    - est_b: lost ("Estimate Lost"), 5000
    - est_c: unrecognized ("Pending Review") so lost, 2000
    """
    return [
        Estimate(
            id='est_a',
            status='Contract Signed',
            total_price_with_tax=10000,
            estimate_date='2025-03-01',
            account_id='acc_1',
            division='Maintenance',
        ),
        Estimate(
            id='est_b',
            status='Estimate Lost',
            total_price_with_tax=5000,
            estimate_date='2025-04-01',
            account_id='acc_2',
            division='Construction',
        ),
        Estimate(
            id='est_c',
            status='Pending Review',
            total_price_with_tax=2000,
            estimate_date='2025-05-01',
            account_id='acc_1',
        ),
    ]


@pytest.fixture
def sample_accounts() -> List[Account]:
    """Accounts referenced by scenario_estimates."""
    return [
        Account(id='acc_1', name='Triovest Realty'),
        Account(id='acc_2', name='Harbourfront Condos'),
    ]


@pytest.fixture
def two_year_contract() -> Estimate:
    """Won 24-month contract worth 120000, spread over 2024 and 2025."""
    return Estimate(
        id='est_contract',
        status='Contract Signed',
        estimate_type='Service',
        account_id='acc_1',
        total_price_with_tax=120000,
        contract_start='2024-01-01',
        contract_end='2025-12-31',
    )


# ============================================================
# API FIXTURES
# ============================================================

@pytest.fixture
def client() -> TestClient:
    """TestClient bound to the Revenue Reports FastAPI app."""
    from revenue_reports.main import app

    return TestClient(app)


# ============================================================
# HELPERS
# ============================================================

def create_csv_bytes(df: pd.DataFrame) -> bytes:
    """
    Convert DataFrame to CSV bytes for upload testing.

    Args:
        df: pandas DataFrame to convert

    Returns:
        bytes: UTF-8 encoded CSV content without the index
    """
    return df.to_csv(index=False).encode('utf-8')
