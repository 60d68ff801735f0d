"""
Model Fitting Module

Fits the ordinary-least-squares model of spend per night on sex, quarter,
UK residency and age band, and reports the coefficient table, F-statistic
and R².
"""

import numpy as np
import pandas as pd
import statsmodels.formula.api as smf
from sklearn.metrics import mean_absolute_error, mean_squared_error, r2_score
from typing import Dict, Any, List, Optional

from ..errors import DataValidationError, SchemaMismatchError
from ..utils.logging_utils import get_logger

logger = get_logger(__name__)


class SpendModel:
    """
    OLS model of nightly spend.

    Example:
        >>> model = SpendModel()
        >>> report = model.fit(per_night_df)
        >>> print(report['rsquared'], report['fvalue'])
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the model.

        Args:
            config: Configuration dict (the 'model' section)
        """
        self.config = {
            'target': 'spend_per_night',
            'categorical': ['sex', 'quarter', 'age'],
            'numeric': ['uk_resident']
        }

        if config:
            self.config.update(config)

        self.result = None

    @property
    def columns(self) -> List[str]:
        return [self.config['target']] + list(self.config['categorical']) + list(self.config['numeric'])

    @property
    def formula(self) -> str:
        terms = [f"C({c})" for c in self.config['categorical']] + list(self.config['numeric'])
        return f"{self.config['target']} ~ " + " + ".join(terms)

    def fit(self, df: pd.DataFrame) -> Dict[str, Any]:
        """
        Fit the model once and build the report.

        Rows with a missing value in any model column are excluded.

        Args:
            df: Per-night records (must include the target column)

        Returns:
            Report dict with the coefficient table, F-statistic, R² and
            fit metrics

        Raises:
            SchemaMismatchError: If a model column is absent
            DataValidationError: If too few complete rows remain
        """
        missing = [c for c in self.columns if c not in df.columns]
        if missing:
            raise SchemaMismatchError(f"Missing model columns: {missing}")

        data = df[self.columns].dropna()
        if len(data) < 2:
            raise DataValidationError(
                f"Need at least 2 complete rows to fit the model, got {len(data)}"
            )

        logger.info(f"Fitting OLS: {self.formula} on {len(data)} records")

        self.result = smf.ols(self.formula, data=data).fit()

        fitted = self.result.fittedvalues
        actual = data.loc[fitted.index, self.config['target']]

        report = {
            'formula': self.formula,
            'nobs': int(self.result.nobs),
            'n_params': int(len(self.result.params)),
            'rsquared': float(self.result.rsquared),
            'rsquared_adj': float(self.result.rsquared_adj),
            'fvalue': float(self.result.fvalue),
            'f_pvalue': float(self.result.f_pvalue),
            'coefficients': self._coefficient_table(),
            'fit_metrics': self._calculate_metrics(actual, fitted),
            'residuals': self.result.resid,
            'summary_text': self.result.summary().as_text()
        }

        logger.info(f"  R²: {report['rsquared']:.4f}, F: {report['fvalue']:.2f}")

        return report

    def _coefficient_table(self) -> pd.DataFrame:
        """Coefficient, standard error, t, p and 95% interval per term."""
        conf_int = self.result.conf_int()

        return pd.DataFrame({
            'term': self.result.params.index,
            'coef': self.result.params.values,
            'std_err': self.result.bse.values,
            't': self.result.tvalues.values,
            'p_value': self.result.pvalues.values,
            'ci_low': conf_int[0].values,
            'ci_high': conf_int[1].values
        })

    def _calculate_metrics(self, y_true, y_pred) -> Dict[str, float]:
        """Calculate in-sample regression metrics."""
        mae = mean_absolute_error(y_true, y_pred)
        mse = mean_squared_error(y_true, y_pred)

        return {
            'mae': float(mae),
            'mse': float(mse),
            'rmse': float(np.sqrt(mse)),
            'r2': float(r2_score(y_true, y_pred))
        }


def format_model_report(report: Dict[str, Any]) -> str:
    """Render the model report as plain text."""
    lines = [
        "Spend per night - OLS regression",
        "=" * 60,
        f"Formula:        {report['formula']}",
        f"Observations:   {report['nobs']}",
        f"R-squared:      {report['rsquared']:.4f}",
        f"Adj. R-squared: {report['rsquared_adj']:.4f}",
        f"F-statistic:    {report['fvalue']:.4f} (p = {report['f_pvalue']:.4g})",
        "",
        "Coefficients",
        "-" * 60,
        report['coefficients'].to_string(index=False, float_format=lambda v: f"{v:.4f}"),
        "",
        report['summary_text'],
    ]
    return "\n".join(lines) + "\n"
