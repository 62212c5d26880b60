"""
Test Module for the Estimate Export Ingestion Service.

Validates:
- Required column validation (id, status)
- Column name normalization and export header aliases
- Per-row validation errors with 1-based row numbers
- Missing cells and unparseable values degrading to None
- CSV parsing, including files that cannot be parsed
"""

from io import BytesIO

import numpy as np
import pandas as pd
import pytest

from revenue_reports.models import Account, IngestionResult
from revenue_reports.services.aggregation import aggregate_by_account
from revenue_reports.services.ingestion import (
    REQUIRED_COLUMNS,
    load_estimates_csv,
    load_estimates_frame,
    validate_columns,
)
from revenue_reports.tests.conftest import create_csv_bytes


# =============================================================================
# TEST FIXTURES (Local to this module)
# =============================================================================

@pytest.fixture
def export_df() -> pd.DataFrame:
    """Estimate export with the estimating tool's header style."""
    return pd.DataFrame({
        'ID': ['007', '008', '009'],
        'LMN Estimate ID': ['LMN-1', 'LMN-2', 'LMN-3'],
        'Status': ['Contract Signed', 'Estimate Lost', 'Pending Review'],
        'Division': ['Maintenance', np.nan, 'Construction'],
        'Total Price With Tax': ['$10,000.00', '5000', np.nan],
        'Estimate Date': ['2025-03-01', '04/01/2025', 'not a date'],
        'Archived': ['false', 'true', np.nan],
    })


# =============================================================================
# TEST CLASS: Column Validation
# =============================================================================

class TestValidateColumns:
    """Required column validation."""

    def test_required_columns(self):
        assert REQUIRED_COLUMNS == ['id', 'status']

    def test_valid_export_has_no_errors(self, export_df: pd.DataFrame):
        assert validate_columns(export_df) == []

    def test_missing_column_is_reported(self, export_df: pd.DataFrame):
        errors = validate_columns(export_df.drop(columns=['Status']))

        assert len(errors) == 1
        assert errors[0].field == 'status'
        assert errors[0].row_number is None

    def test_header_aliases_satisfy_required_columns(self):
        df = pd.DataFrame({'id': ['1'], 'Estimate-Status': ['Won']})
        assert validate_columns(df) == []


# =============================================================================
# TEST CLASS: DataFrame Loading
# =============================================================================

class TestLoadEstimatesFrame:
    """Row conversion into Estimate models."""

    def test_loads_all_rows(self, export_df: pd.DataFrame):
        result = load_estimates_frame(export_df)

        assert isinstance(result, IngestionResult)
        assert result.success is True
        assert result.rows_processed == 3
        assert [e.id for e in result.estimates] == ['007', '008', '009']

    def test_values_are_normalized(self, export_df: pd.DataFrame):
        first, second, third = load_estimates_frame(export_df).estimates

        assert first.external_id == 'LMN-1'
        assert first.total_price_with_tax == 10000.0
        assert first.estimate_date == '2025-03-01'
        assert first.archived is False

        assert second.division is None
        assert second.estimate_date == '2025-04-01'
        assert second.archived is True

        assert third.total_price_with_tax is None
        assert third.estimate_date is None
        assert third.archived is False

    def test_missing_required_column_fails_without_rows(self, export_df: pd.DataFrame):
        result = load_estimates_frame(export_df.drop(columns=['ID']))

        assert result.success is False
        assert result.estimates == []
        assert [e.field for e in result.errors] == ['id']

    def test_bad_row_is_skipped_with_row_number(self, export_df: pd.DataFrame):
        export_df.loc[1, 'ID'] = np.nan

        result = load_estimates_frame(export_df)

        assert result.success is False
        assert [e.id for e in result.estimates] == ['007', '009']
        assert len(result.errors) == 1
        assert result.errors[0].field == 'id'
        assert result.errors[0].row_number == 2

    def test_unknown_columns_are_ignored(self, export_df: pd.DataFrame):
        export_df['Salesperson'] = 'Jordan'
        assert load_estimates_frame(export_df).success is True

    def test_numeric_ids_with_missing_cells_stay_whole(self):
        df = pd.DataFrame([
            {'id': 101, 'status': 'Won', 'account_id': 5, 'total_price': 100},
            {'id': 102, 'status': 'Won', 'account_id': None, 'total_price': 100},
        ])

        estimates = load_estimates_frame(df).estimates

        assert [(e.id, e.account_id) for e in estimates] == [('101', '5'), ('102', None)]

    def test_numeric_account_ids_link_to_accounts(self):
        df = pd.DataFrame({
            'ID': [101, 102],
            'Status': ['Won', 'Won'],
            'Account ID': [5, np.nan],
            'Total Price': [100, 100],
            'Estimate Date': ['2025-03-01', '2025-03-01'],
        })

        estimates = load_estimates_frame(df).estimates
        stats = aggregate_by_account(estimates, [Account(id='5', name='Acme')])

        assert [(s.accountId, s.accountName) for s in stats] == [('5', 'Acme')]


# =============================================================================
# TEST CLASS: CSV Loading
# =============================================================================

class TestLoadEstimatesCsv:
    """CSV parsing."""

    def test_csv_round_trip_keeps_leading_zeros(self, export_df: pd.DataFrame):
        result = load_estimates_csv(BytesIO(create_csv_bytes(export_df)))

        assert result.success is True
        assert result.estimates[0].id == '007'
        assert result.estimates[1].estimate_date == '2025-04-01'

    def test_text_file_object(self, export_df: pd.DataFrame):
        from io import StringIO

        result = load_estimates_csv(StringIO(export_df.to_csv(index=False)))
        assert result.rows_processed == 3

    def test_empty_file_reports_file_error(self):
        result = load_estimates_csv(BytesIO(b''))

        assert result.success is False
        assert result.rows_processed == 0
        assert result.estimates == []
        assert result.errors[0].field == 'file'
