"""Unit tests for statistics helpers."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from travelpac.errors import ComputationUndefinedError
from travelpac.utils.stats_utils import (
    calculate_basic_stats,
    format_compact_number,
    infer_column_type,
    is_finite_number,
    safe_divide,
    summarize_table,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (5_000_000, "5m"),
        (2_500_000, "2.5m"),
        (250_000, "250k"),
        (1_200_000_000, "1.2bn"),
        (999, "999"),
        (999_990, "1m"),
        (999.96, "1k"),
        (999_990_000, "1bn"),
        (0, "0"),
        (-3_000_000, "-3m"),
    ],
)
def test_format_compact_number(value, expected) -> None:
    assert format_compact_number(value) == expected


def test_format_compact_number_blank_for_missing() -> None:
    assert format_compact_number(float("nan")) == ""
    assert format_compact_number(None) == ""


def test_safe_divide_returns_quotients() -> None:
    result = safe_divide(pd.Series([10.0, 9.0]), pd.Series([2.0, 3.0]))

    assert result.tolist() == [5.0, 3.0]


@pytest.mark.parametrize("denominator", [[2.0, 0.0], [2.0, np.nan]])
def test_safe_divide_refuses_zero_or_missing(denominator) -> None:
    """A zero or missing night count must fail fast."""
    with pytest.raises(ComputationUndefinedError):
        safe_divide(pd.Series([1.0, 1.0]), pd.Series(denominator))

    with pytest.raises(ZeroDivisionError):
        safe_divide(pd.Series([1.0, 1.0]), pd.Series(denominator))


def test_infer_column_type() -> None:
    assert infer_column_type(pd.Series([1.0, 2.0])) == "numeric"
    assert infer_column_type(pd.Series(["Male", "Female"])) == "categorical"
    assert infer_column_type(pd.Series([f"id-{i}" for i in range(5)]), max_categorical_cardinality=3) == "string"
    assert infer_column_type(pd.Series([np.nan, np.nan])) == "string"


def test_calculate_basic_stats_numeric() -> None:
    stats = calculate_basic_stats(pd.Series([10, 20, 30, 40, 50, None]), "numeric")

    assert stats["mean"] == 30.0
    assert stats["median"] == 30.0
    assert stats["null_count"] == 1


def test_summarize_table_covers_every_column(cleaned_survey) -> None:
    summary = summarize_table(cleaned_survey)

    assert summary["row_count"] == len(cleaned_survey)
    assert set(summary["columns"]) == set(cleaned_survey.columns)
    assert summary["columns"]["sex"]["type"] == "categorical"
    assert summary["columns"]["sex"]["null_count"] == 0


def test_is_finite_number() -> None:
    assert is_finite_number(1.5)
    assert not is_finite_number(float("inf"))
    assert not is_finite_number(None)
    assert not is_finite_number("abc")
