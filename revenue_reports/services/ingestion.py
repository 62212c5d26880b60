"""
Estimate Export Ingestion Service

Loads already-linked estimate exports (CSV files or pandas DataFrames) into
Estimate models for the reporting engine.

Key Features:
- Required column validation (id, status)
- Column name normalization: case-insensitive, spaces and dashes become
  underscores, and a few common export headers are mapped onto model fields
- Per-row model validation; rows that fail are reported with their 1-based
  row number and skipped
- Missing cells (NaN) become None, so unparseable dates or prices degrade to
  None on the model instead of rejecting the row
- Numeric identifiers stay whole numbers ("5", not "5.0") when a column
  also has missing cells

Bad rows never raise. A file that cannot be parsed at all yields an empty
result with a single 'file' error.
"""

from typing import Any, BinaryIO, Dict, List, Union
import io
import logging

import pandas as pd
from pydantic import ValidationError as PydanticValidationError

from revenue_reports.models import Estimate, IngestionResult, ValidationError

# Configure module logger
logger = logging.getLogger(__name__)

# =============================================================================
# CONSTANTS - Columns
# =============================================================================

REQUIRED_COLUMNS: List[str] = [
    'id',
    'status',
]

ESTIMATE_COLUMNS: List[str] = list(Estimate.model_fields.keys())

# Export headers that differ from the model field names
COLUMN_ALIASES: Dict[str, str] = {
    'estimate_id': 'external_id',
    'lmn_estimate_id': 'external_id',
    'estimate_status': 'status',
    'department': 'division',
    'type': 'estimate_type',
    'total_price_with_tax_amount': 'total_price_with_tax',
    'close_date': 'estimate_close_date',
    'contract_start_date': 'contract_start',
    'contract_end_date': 'contract_end',
    'created_at': 'created_date',
    'is_archived': 'archived',
}

# Identifier columns; pandas stores numeric ids with a missing cell as float64
IDENTIFIER_COLUMNS: List[str] = [
    'id',
    'external_id',
    'account_id',
]


def _normalize_column_name(name: Any) -> str:
    normalized = str(name).strip().lower().replace(' ', '_').replace('-', '_')
    return COLUMN_ALIASES.get(normalized, normalized)


def _whole_number_to_int(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _normalize_dataframe(df: pd.DataFrame) -> pd.DataFrame:
    """
    Normalize column names and missing values for row conversion.

    Args:
        df: Input DataFrame

    Returns:
        Copy with normalized column names (first occurrence kept when two
        headers collapse onto the same name), NaN replaced by None and
        whole-number float identifiers (5.0) turned back into integers
    """
    df_normalized = df.copy()
    df_normalized.columns = [_normalize_column_name(col) for col in df_normalized.columns]
    df_normalized = df_normalized.loc[:, ~df_normalized.columns.duplicated()]

    df_normalized = df_normalized.astype(object)
    df_normalized = df_normalized.where(pd.notna(df_normalized), None)

    for col in IDENTIFIER_COLUMNS:
        if col in df_normalized.columns:
            df_normalized[col] = pd.Series(
                [_whole_number_to_int(value) for value in df_normalized[col]],
                index=df_normalized.index,
                dtype=object
            )

    return df_normalized


# =============================================================================
# VALIDATION FUNCTIONS
# =============================================================================

def validate_columns(df: pd.DataFrame) -> List[ValidationError]:
    """
    Validate that all required columns are present in the DataFrame.

    Args:
        df: The pandas DataFrame to validate (raw or normalized headers)

    Returns:
        List of ValidationError objects for any missing columns
    """
    errors: List[ValidationError] = []

    df_columns = {_normalize_column_name(col) for col in df.columns}
    for col in REQUIRED_COLUMNS:
        if col not in df_columns:
            errors.append(ValidationError(
                field=col,
                message=f"Required column '{col}' is missing",
                row_number=None
            ))

    return errors


def _row_error(exc: PydanticValidationError, row_number: int) -> ValidationError:
    first = exc.errors()[0]
    field = '.'.join(str(part) for part in first.get('loc', ())) or 'row'
    return ValidationError(
        field=field,
        message=first.get('msg', str(exc)),
        row_number=row_number
    )


# =============================================================================
# INGESTION FUNCTIONS
# =============================================================================

def load_estimates_frame(df: pd.DataFrame) -> IngestionResult:
    """
    Convert a DataFrame of estimate rows into Estimate models.

    Performs the following steps:
    1. Validate required columns
    2. Normalize column names and missing values
    3. Validate each row as an Estimate, collecting errors for bad rows

    Args:
        df: DataFrame with one estimate per row

    Returns:
        IngestionResult with the valid estimates and any validation errors
    """
    column_errors = validate_columns(df)
    if column_errors:
        return IngestionResult(
            success=False,
            rows_processed=len(df),
            estimates=[],
            errors=column_errors
        )

    df = _normalize_dataframe(df)
    known_columns = [col for col in df.columns if col in ESTIMATE_COLUMNS]

    estimates: List[Estimate] = []
    errors: List[ValidationError] = []

    for row_number, record in enumerate(df[known_columns].to_dict(orient='records'), start=1):
        try:
            estimates.append(Estimate(**record))
        except PydanticValidationError as e:
            error = _row_error(e, row_number)
            logger.warning(f"Skipping row {row_number}: {error.field} - {error.message}")
            errors.append(error)

    logger.info(f"Loaded {len(estimates)} of {len(df)} estimate rows ({len(errors)} rejected)")

    return IngestionResult(
        success=not errors,
        rows_processed=len(df),
        estimates=estimates,
        errors=errors
    )


def load_estimates_csv(file: Union[BinaryIO, str]) -> IngestionResult:
    """
    Parse and validate an estimate export CSV.

    All columns are read as text so identifiers keep leading zeros; dates and
    prices are parsed by the Estimate model.

    Args:
        file: Binary/text file object or a path to the CSV file

    Returns:
        IngestionResult with the valid estimates and any validation errors
    """
    try:
        # Read CSV file
        if hasattr(file, 'read'):
            content = file.read()
            if isinstance(content, bytes):
                file_like = io.BytesIO(content)
            else:
                file_like = io.StringIO(content)
        else:
            file_like = file

        df = pd.read_csv(file_like, dtype=str)

        logger.info(f"Parsed CSV with {len(df)} rows and {len(df.columns)} columns")

    except Exception as e:
        logger.warning(f"Failed to parse estimate CSV: {e}")
        return IngestionResult(
            success=False,
            rows_processed=0,
            estimates=[],
            errors=[ValidationError(
                field='file',
                message=f'Failed to parse CSV file: {str(e)}',
                row_number=None
            )]
        )

    return load_estimates_frame(df)


# =============================================================================
# Module Exports
# =============================================================================

__all__ = [
    'REQUIRED_COLUMNS',
    'COLUMN_ALIASES',
    'IDENTIFIER_COLUMNS',
    'validate_columns',
    'load_estimates_frame',
    'load_estimates_csv',
]
