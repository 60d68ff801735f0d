"""Unit tests for the spend-per-night OLS model."""

from __future__ import annotations

import pandas as pd
import pytest

from travelpac.errors import DataValidationError, SchemaMismatchError
from travelpac.stage3.aggregator import spend_per_night_frame
from travelpac.stage4.models import SpendModel, format_model_report


@pytest.fixture
def per_night(cleaned_survey) -> pd.DataFrame:
    return spend_per_night_frame(cleaned_survey)


def test_formula_lists_every_term() -> None:
    assert SpendModel().formula == (
        "spend_per_night ~ C(sex) + C(quarter) + C(age) + uk_resident"
    )


def test_fit_reports_coefficients_f_and_r2(per_night) -> None:
    report = SpendModel().fit(per_night)

    assert report["nobs"] == len(per_night)
    assert 0.0 <= report["rsquared"] <= 1.0
    assert report["fvalue"] > 0
    assert 0.0 <= report["f_pvalue"] <= 1.0
    assert report["coefficients"]["term"].iloc[0] == "Intercept"
    assert "uk_resident" in report["coefficients"]["term"].tolist()
    assert len(report["coefficients"]) == report["n_params"]


def test_fit_metrics_agree_with_statsmodels(per_night) -> None:
    report = SpendModel().fit(per_night)

    assert report["fit_metrics"]["r2"] == pytest.approx(report["rsquared"])
    assert report["fit_metrics"]["rmse"] >= 0
    assert len(report["residuals"]) == report["nobs"]


def test_fit_requires_model_columns(per_night) -> None:
    with pytest.raises(SchemaMismatchError, match="uk_resident"):
        SpendModel().fit(per_night.drop(columns=["uk_resident"]))


def test_fit_requires_enough_rows(per_night) -> None:
    with pytest.raises(DataValidationError):
        SpendModel().fit(per_night.head(1))


def test_format_model_report_includes_headline_figures(per_night) -> None:
    report = SpendModel().fit(per_night)

    text = format_model_report(report)

    assert "R-squared:" in text
    assert "F-statistic:" in text
    assert "Intercept" in text
    assert report["formula"] in text
