"""
Stage 2: Cleaner

Applies the fixed sequence of row filters, renames and the residency flag
derivation. Every step returns a new DataFrame; nothing is imputed.
"""

from .cleaner import (
    SurveyCleaner,
    clean_survey,
    drop_missing_sex,
    drop_unknown_age,
    rename_columns,
    drop_unused_columns,
    drop_invalid_country,
    drop_missing_structure,
    validate_quarters,
    derive_residency_flag,
    COLUMN_RENAMES,
    QUARTER_ORDER,
)

__all__ = [
    'SurveyCleaner',
    'clean_survey',
    'drop_missing_sex',
    'drop_unknown_age',
    'rename_columns',
    'drop_unused_columns',
    'drop_invalid_country',
    'drop_missing_structure',
    'validate_quarters',
    'derive_residency_flag',
    'COLUMN_RENAMES',
    'QUARTER_ORDER',
]
