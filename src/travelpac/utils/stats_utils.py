"""
Statistical utilities for the Travelpac pipeline.
Provides column type inference, basic statistics, guarded division and the
compact number format used on chart axes.
"""

import math
import numpy as np
import pandas as pd
from typing import Dict, Any, Optional

from ..errors import ComputationUndefinedError
from .logging_utils import get_logger

logger = get_logger(__name__)

COMPACT_SUFFIXES = (
    (1_000_000_000, 'bn'),
    (1_000_000, 'm'),
    (1_000, 'k'),
)


def infer_column_type(
    series: pd.Series,
    max_categorical_cardinality: int = 100
) -> str:
    """
    Infer the type of a pandas Series.

    Args:
        series: Pandas Series to analyze
        max_categorical_cardinality: Max unique values for categorical

    Returns:
        One of: 'numeric', 'categorical', 'string'

    Example:
        >>> infer_column_type(pd.Series(['Male', 'Female', 'Male']))
        'categorical'
    """
    non_null = series.dropna()
    if len(non_null) == 0:
        return 'string'

    if pd.api.types.is_numeric_dtype(series):
        return 'numeric'

    if non_null.nunique() <= max_categorical_cardinality:
        return 'categorical'

    return 'string'


def calculate_basic_stats(series: pd.Series, col_type: str) -> Dict[str, Any]:
    """
    Calculate basic statistics for a Series based on its type.

    Args:
        series: Pandas Series to analyze
        col_type: Column type ('numeric', 'categorical', 'string')

    Returns:
        Dictionary of statistics

    Example:
        >>> stats = calculate_basic_stats(pd.Series([10, 20, 30, 40, 50]), 'numeric')
        >>> print(stats['mean'])
        30.0
    """
    stats = {
        'null_count': int(series.isna().sum()),
        'null_rate': float(series.isna().mean()) if len(series) else 0.0,
        'total_count': len(series)
    }

    non_null = series.dropna()

    if col_type == 'numeric' and len(non_null) > 0:
        stats.update({
            'mean': float(non_null.mean()),
            'std': float(non_null.std()) if len(non_null) > 1 else 0.0,
            'min': float(non_null.min()),
            'max': float(non_null.max()),
            'median': float(non_null.median()),
            'q25': float(non_null.quantile(0.25)),
            'q75': float(non_null.quantile(0.75))
        })

    elif col_type == 'categorical':
        value_counts = non_null.value_counts()
        stats.update({
            'cardinality': len(value_counts),
            'top_values': {str(k): int(v) for k, v in value_counts.head(10).items()},
            'mode': str(value_counts.index[0]) if len(value_counts) > 0 else None
        })

    elif col_type == 'string':
        stats.update({
            'unique_count': int(non_null.nunique()),
            'sample_values': [str(v) for v in non_null.head(5)]
        })

    return stats


def summarize_table(df: pd.DataFrame) -> Dict[str, Any]:
    """
    Summarize every column of a table.

    Args:
        df: DataFrame to summarize

    Returns:
        Dict with row/column counts and per-column type and statistics
    """
    columns = {}
    for col_name in df.columns:
        col_type = infer_column_type(df[col_name])
        columns[str(col_name)] = {
            'type': col_type,
            **calculate_basic_stats(df[col_name], col_type)
        }

    return {
        'row_count': len(df),
        'column_count': len(df.columns),
        'columns': columns
    }


def safe_divide(numerator: pd.Series, denominator: pd.Series) -> pd.Series:
    """
    Element-wise division that refuses zero or missing denominators.

    Args:
        numerator: Dividend values
        denominator: Divisor values, aligned with numerator

    Returns:
        Series of quotients

    Raises:
        ComputationUndefinedError: If any denominator is zero or missing
    """
    denominator = pd.to_numeric(denominator)
    undefined = denominator.isna() | (denominator == 0)

    if undefined.any():
        raise ComputationUndefinedError(
            f"Division undefined for {int(undefined.sum())} rows "
            f"with a zero or missing denominator"
        )

    return numerator / denominator


def format_compact_number(value: Optional[float], decimals: int = 1) -> str:
    """
    Format a number with a k/m/bn suffix for axis labels.

    Example:
        >>> format_compact_number(5_000_000)
        '5m'
        >>> format_compact_number(250_000)
        '250k'
    """
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return ''

    magnitude = abs(round(float(value), decimals))
    for index, (threshold, suffix) in enumerate(COMPACT_SUFFIXES):
        if magnitude >= threshold:
            scaled = round(value / threshold, decimals)
            # 999_990 rounds to 1000k; move up to the next suffix
            if abs(scaled) >= 1000 and index > 0:
                threshold, suffix = COMPACT_SUFFIXES[index - 1]
                scaled = round(value / threshold, decimals)
            return f"{scaled:g}{suffix}"

    return f"{round(float(value), decimals):g}"


def is_finite_number(value: Any) -> bool:
    """True for real numbers that are neither NaN nor infinite."""
    try:
        return bool(np.isfinite(float(value)))
    except (TypeError, ValueError):
        return False
