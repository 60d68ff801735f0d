"""
Loader - Stage 1

Reads one sheet of the Travelpac workbook and returns the survey records with
the source column names. Text fields are trimmed (blank cells become missing)
and the measure columns are coerced to numbers; nothing else is changed.
"""

import numpy as np
import pandas as pd
from pathlib import Path
from typing import Dict, Any, List, Optional, Union

from ..errors import SchemaMismatchError
from ..utils.file_utils import load_excel
from ..utils.logging_utils import get_logger

logger = get_logger(__name__)

EXPECTED_COLUMNS: List[str] = [
    'Year', 'Age', 'Sex', 'country', 'ukos',
    'quarter', 'visits', 'nights', 'expend', 'sample'
]

TEXT_COLUMNS = ['Age', 'Sex', 'country', 'ukos', 'quarter']
NUMERIC_COLUMNS = ['visits', 'nights', 'expend']


def _strip_text(value):
    if isinstance(value, str):
        value = value.strip()
        return value if value else np.nan
    return value


def check_header(df: pd.DataFrame, expected: Optional[List[str]] = None) -> None:
    """
    Check that every expected column is present.

    Raises:
        SchemaMismatchError: If any expected column is absent
    """
    expected = expected or EXPECTED_COLUMNS
    missing = [c for c in expected if c not in df.columns]

    if missing:
        raise SchemaMismatchError(
            f"Missing expected columns: {missing} (found: {list(df.columns)})"
        )


def normalize_survey_frame(df: pd.DataFrame) -> pd.DataFrame:
    """
    Restrict a raw sheet to the survey columns and normalise their values.

    Args:
        df: Raw sheet with (at least) the expected columns

    Returns:
        New DataFrame with trimmed text fields and numeric measures
    """
    df = df.rename(columns=lambda c: c.strip() if isinstance(c, str) else c)
    check_header(df)

    extra = [c for c in df.columns if c not in EXPECTED_COLUMNS]
    if extra:
        logger.debug(f"Ignoring extra columns: {extra}")

    records = df[EXPECTED_COLUMNS].copy()

    for col in TEXT_COLUMNS:
        records[col] = records[col].map(_strip_text)

    for col in NUMERIC_COLUMNS:
        coerced = pd.to_numeric(records[col], errors='coerce')
        unparsed = int((coerced.isna() & records[col].notna()).sum())
        if unparsed:
            logger.warning(f"Column '{col}': {unparsed} non-numeric values treated as missing")
        records[col] = coerced

    return records.reset_index(drop=True)


class SurveyLoader:
    """
    Stage 1: Loader

    Example:
        >>> loader = SurveyLoader("data/raw/travelpac.xlsx", sheet=0)
        >>> df = loader.load()
    """

    def __init__(
        self,
        input_path: Union[str, Path],
        sheet: Union[int, str] = 0,
        config: Optional[Dict[str, Any]] = None
    ):
        self.input_path = Path(input_path)
        self.sheet = sheet
        self.config = config or {}

        logger.info(f"Initialized Loader")
        logger.info(f"  Input: {self.input_path}")
        logger.info(f"  Sheet: {self.sheet!r}")

    def load(self) -> pd.DataFrame:
        """
        Read the sheet and return the survey records.

        Raises:
            ResourceNotFoundError: If the workbook does not exist
            SchemaMismatchError: If the sheet is invalid or the header
                does not match the survey schema
        """
        raw = load_excel(self.input_path, sheet=self.sheet)

        if not isinstance(raw, pd.DataFrame):
            raise SchemaMismatchError(
                f"Sheet selector {self.sheet!r} must select exactly one sheet"
            )

        records = normalize_survey_frame(raw)

        logger.info(f"Loaded {len(records)} survey records")

        return records


def load_survey(
    input_path: Union[str, Path],
    sheet: Union[int, str] = 0
) -> pd.DataFrame:
    """Read the survey sheet at input_path (see SurveyLoader.load)."""
    return SurveyLoader(input_path, sheet=sheet).load()
