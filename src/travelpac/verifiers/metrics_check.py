"""
Verification: Metrics Check

Validates the spend model report from Stage 4:
- R² within [0, 1] and above the configured minimum
- finite F-statistic
- residual mean close to zero
- more observations than parameters
"""

from datetime import datetime
from typing import Dict, Any, Optional

from ..utils.logging_utils import get_logger
from ..utils.stats_utils import is_finite_number

logger = get_logger(__name__)


class MetricsChecker:
    """
    Verification checkpoint for the model report.

    Example:
        >>> checker = MetricsChecker()
        >>> report = checker.verify_model(reporter_output['model'])
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the Metrics Checker.

        Args:
            config: Configuration dictionary
        """
        self.config = {
            'min_r2': 0.0,  # Minimum acceptable R²
            'residual_mean_threshold': 0.1  # |mean| / std of residuals
        }

        if config:
            self.config.update(config)

        logger.info("Initialized Metrics Checker")

    def verify_model(self, model_report: Dict[str, Any]) -> Dict[str, Any]:
        """
        Verify a SpendModel report.

        Returns:
            Verification report with status 'pass', 'pass_with_warnings'
            or 'fail'
        """
        report = {
            'formula': model_report.get('formula'),
            'timestamp': datetime.now().isoformat(),
            'status': 'pass',
            'errors': [],
            'warnings': [],
            'checks': {}
        }

        self._check_fit(model_report, report)
        self._check_residuals(model_report, report)

        if report['errors']:
            report['status'] = 'fail'
        elif report['warnings']:
            report['status'] = 'pass_with_warnings'

        logger.info(f"  Metrics status: {report['status']}")
        logger.info(f"  Errors: {len(report['errors'])}, Warnings: {len(report['warnings'])}")

        return report

    def _check_fit(self, model_report: Dict[str, Any], report: Dict[str, Any]) -> None:
        r2 = model_report.get('rsquared')
        fvalue = model_report.get('fvalue')
        nobs = model_report.get('nobs', 0)
        n_params = model_report.get('n_params', 0)

        report['checks']['fit'] = {
            'rsquared': r2,
            'fvalue': fvalue,
            'nobs': nobs,
            'n_params': n_params
        }

        if not is_finite_number(r2) or not 0.0 <= r2 <= 1.0:
            report['errors'].append({
                'check': 'fit',
                'type': 'invalid_r2',
                'message': f'R² ({r2}) is not within [0, 1]'
            })
        elif r2 < self.config['min_r2']:
            report['warnings'].append({
                'check': 'fit',
                'type': 'low_r2',
                'message': f'R² ({r2:.3f}) below threshold ({self.config["min_r2"]})'
            })

        if not is_finite_number(fvalue):
            report['warnings'].append({
                'check': 'fit',
                'type': 'undefined_f',
                'message': f'F-statistic is not finite ({fvalue})'
            })

        if nobs <= n_params:
            report['errors'].append({
                'check': 'fit',
                'type': 'too_few_observations',
                'message': f'{nobs} observations for {n_params} parameters'
            })

    def _check_residuals(self, model_report: Dict[str, Any], report: Dict[str, Any]) -> None:
        residuals = model_report.get('residuals')

        if residuals is None or len(residuals) == 0:
            report['warnings'].append({
                'check': 'residuals',
                'message': 'No residuals available'
            })
            report['checks']['residuals'] = {'status': 'skipped'}
            return

        residual_mean = float(residuals.mean())
        residual_std = float(residuals.std())

        report['checks']['residuals'] = {
            'mean': residual_mean,
            'std': residual_std
        }

        # A perfect fit has zero spread
        if residual_std > 0 and abs(residual_mean / residual_std) > self.config['residual_mean_threshold']:
            report['warnings'].append({
                'check': 'residuals',
                'type': 'non_zero_mean',
                'message': f'Residual mean ({residual_mean:.4f}) not close to zero - possible bias'
            })
