"""
Cleaner - Stage 2

Turns the loaded survey records into the analysis table:

1. drop rows with a missing or "don't know" sex
2. drop rows whose age band is the "don't know" sentinel
3. rename the source columns to analysis names
4. drop the year and sample-size columns
5. drop rows whose country is the sentinel "0"
   (then drop rows missing country/quarter/residency and reject unknown
   quarter labels)
6. derive the UK residency flag

Invalid records are excluded, never corrected.
"""

import pandas as pd
from typing import Dict, Any, Iterable, List, Optional

from ..errors import DataValidationError, SchemaMismatchError
from ..utils.logging_utils import get_logger

logger = get_logger(__name__)

COLUMN_RENAMES: Dict[str, str] = {
    'Year': 'year',
    'Age': 'age',
    'Sex': 'sex',
    'country': 'country',
    'ukos': 'residency',
    'quarter': 'quarter',
    'visits': 'visits',
    'nights': 'nights',
    'expend': 'spend',
    'sample': 'sample',
}

UNUSED_COLUMNS = ('year', 'sample')

REQUIRED_COLUMNS = ('country', 'quarter', 'residency')

QUARTER_ORDER: Dict[str, int] = {
    'January-March': 1,
    'April-June': 2,
    'July-September': 3,
    'October-December': 4,
}


def _require(df: pd.DataFrame, columns: Iterable[str]) -> None:
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise SchemaMismatchError(f"Missing columns for cleaning step: {missing}")


def drop_missing_sex(
    df: pd.DataFrame,
    column: str = 'Sex',
    sentinel: str = 'D/K'
) -> pd.DataFrame:
    """Drop rows where sex is missing or the "don't know" sentinel."""
    _require(df, [column])
    return df[df[column].notna() & (df[column] != sentinel)].copy()


def drop_unknown_age(
    df: pd.DataFrame,
    column: str = 'Age',
    sentinel: str = 'D/K'
) -> pd.DataFrame:
    """Drop rows whose age band is the "don't know" sentinel."""
    _require(df, [column])
    return df[df[column] != sentinel].copy()


def rename_columns(
    df: pd.DataFrame,
    mapping: Optional[Dict[str, str]] = None
) -> pd.DataFrame:
    """Rename source columns to the analysis names."""
    mapping = mapping or COLUMN_RENAMES
    _require(df, mapping.keys())
    return df.rename(columns=mapping)


def drop_unused_columns(
    df: pd.DataFrame,
    columns: Iterable[str] = UNUSED_COLUMNS
) -> pd.DataFrame:
    """Drop the constant year column and the sample-size metadata."""
    return df.drop(columns=[c for c in columns if c in df.columns])


def drop_invalid_country(
    df: pd.DataFrame,
    column: str = 'country',
    sentinel: str = '0'
) -> pd.DataFrame:
    """
    Drop rows whose country is the sentinel.

    Values are compared as trimmed strings, so a numeric 0 read from the
    workbook is treated as the sentinel too.
    """
    _require(df, [column])
    as_text = df[column].map(lambda v: str(v).strip() if pd.notna(v) else v)
    return df[as_text != sentinel].copy()


def drop_missing_structure(
    df: pd.DataFrame,
    columns: Iterable[str] = REQUIRED_COLUMNS
) -> pd.DataFrame:
    """Drop rows missing any of the grouping columns."""
    columns = list(columns)
    _require(df, columns)
    return df.dropna(subset=columns).copy()


def validate_quarters(
    df: pd.DataFrame,
    column: str = 'quarter',
    labels: Optional[Iterable[str]] = None
) -> pd.DataFrame:
    """
    Reject quarter labels outside the four known periods.

    Raises:
        DataValidationError: If any non-missing label is unrecognised
    """
    _require(df, [column])
    labels = set(labels or QUARTER_ORDER)

    present = df[column].dropna()
    unknown = sorted({str(v) for v in present if v not in labels})

    if unknown:
        raise DataValidationError(
            f"Unrecognised quarter labels: {unknown} (expected one of {sorted(labels)})"
        )

    return df


def derive_residency_flag(
    df: pd.DataFrame,
    source: str = 'residency',
    label: str = 'UK residents',
    flag: str = 'uk_resident'
) -> pd.DataFrame:
    """Add flag = 1 where the residency origin equals label exactly, else 0."""
    _require(df, [source])
    return df.assign(**{flag: (df[source] == label).astype(int)})


class SurveyCleaner:
    """
    Stage 2: Cleaner

    Runs the cleaning steps in order and records how many rows each step
    removed.

    Example:
        >>> cleaner = SurveyCleaner()
        >>> cleaned = cleaner.clean(raw_df)
        >>> cleaner.step_counts[0]['step']
        'drop_missing_sex'
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the Cleaner.

        Args:
            config: Configuration dict (the 'cleaner' section)
        """
        self.config = {
            'unknown_sex': 'D/K',
            'unknown_age': 'D/K',
            'invalid_country': '0',
            'uk_resident_label': 'UK residents'
        }

        if config:
            self.config.update(config)

        self.step_counts: List[Dict[str, Any]] = []

        logger.info("Initialized Cleaner")

    def _steps(self):
        return [
            ('drop_missing_sex',
             lambda df: drop_missing_sex(df, sentinel=self.config['unknown_sex'])),
            ('drop_unknown_age',
             lambda df: drop_unknown_age(df, sentinel=self.config['unknown_age'])),
            ('rename_columns', rename_columns),
            ('drop_unused_columns', drop_unused_columns),
            ('drop_invalid_country',
             lambda df: drop_invalid_country(df, sentinel=str(self.config['invalid_country']))),
            ('drop_missing_structure', drop_missing_structure),
            ('validate_quarters', validate_quarters),
            ('derive_residency_flag',
             lambda df: derive_residency_flag(df, label=self.config['uk_resident_label'])),
        ]

    def clean(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Apply every cleaning step to a copy of df.

        Args:
            df: Survey records with the source column names

        Returns:
            Cleaned analysis table (new DataFrame, index reset)
        """
        logger.info(f"Cleaning {len(df)} records")

        self.step_counts = []
        current = df

        for name, step in self._steps():
            rows_in = len(current)
            current = step(current)
            dropped = rows_in - len(current)

            self.step_counts.append({
                'step': name,
                'rows_in': rows_in,
                'rows_out': len(current),
                'dropped': dropped
            })

            if dropped:
                logger.info(f"  {name}: dropped {dropped} rows")
            else:
                logger.debug(f"  {name}: no rows dropped")

        cleaned = current.reset_index(drop=True)

        logger.info(f"Cleaning complete: {len(cleaned)} of {len(df)} records kept")

        return cleaned


def clean_survey(df: pd.DataFrame, config: Optional[Dict[str, Any]] = None) -> pd.DataFrame:
    """Clean survey records with a fresh SurveyCleaner."""
    return SurveyCleaner(config=config).clean(df)
