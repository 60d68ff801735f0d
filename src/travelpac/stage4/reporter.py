"""
Reporter - Stage 4

Renders the aggregation charts, fits the spend model once and writes the
report artifacts:
- plots/*.png
- model_summary.txt and model_coefficients.csv
- one CSV per aggregation table (when save_tables is on)
"""

import pandas as pd
from pathlib import Path
from typing import Dict, Any, List, Optional

from ..errors import DataValidationError
from ..utils.file_utils import save_table, save_text
from ..utils.logging_utils import get_logger
from .models import SpendModel, format_model_report
from .visualizer import Visualizer

logger = get_logger(__name__)

TABLES = ('top_countries', 'spend_by_sex', 'visits_by_quarter')


class Reporter:
    """
    Stage 4: Reporter

    Example:
        >>> reporter = Reporter(output_dir="data/outputs")
        >>> report = reporter.run(aggregations)
        >>> print(report['model']['rsquared'])
    """

    def __init__(
        self,
        output_dir: str = "data/outputs",
        config: Optional[Dict[str, Any]] = None,
        model_config: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize the Reporter.

        Args:
            output_dir: Directory for report artifacts
            config: Configuration dict (the 'reporter' section)
            model_config: Configuration dict (the 'model' section)
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

        self.config = {
            'save_tables': True,
            'visualization': {}
        }

        if config:
            self.config.update(config)

        self.visualizer = Visualizer(
            output_dir=self.output_dir / "plots",
            config=self.config['visualization']
        )
        self.model = SpendModel(config=model_config)

        logger.info(f"Initialized Reporter (output: {self.output_dir})")

    def render_charts(self, aggregations: Dict[str, pd.DataFrame]) -> List[Path]:
        """
        Render one chart per aggregation.

        Raises:
            DataValidationError: If an aggregation has no rows
        """
        charts = [
            ('top_countries', self.visualizer.plot_top_countries),
            ('spend_per_night', self.visualizer.plot_spend_per_night_by_sex),
            ('visits_by_quarter', self.visualizer.plot_visits_by_quarter),
        ]

        plot_files = []
        for key, plot in charts:
            table = aggregations[key]
            if table.empty:
                raise DataValidationError(f"No rows for '{key}' - cannot render chart")
            plot_files.append(plot(table))

        return plot_files

    def run(self, aggregations: Dict[str, pd.DataFrame]) -> Dict[str, Any]:
        """
        Produce the charts and the model report.

        Args:
            aggregations: Output of Aggregator.run

        Returns:
            Dict with the model report and the written file paths
        """
        logger.info("Rendering report...")

        plot_files = self.render_charts(aggregations)

        model_report = self.model.fit(aggregations['per_night'])
        plot_files.append(self.visualizer.plot_error_distribution(
            model_report['residuals'], 'spend_per_night_ols'
        ))

        summary_file = save_text(
            format_model_report(model_report),
            self.output_dir / "model_summary.txt"
        )
        coefficients_file = save_table(
            model_report['coefficients'],
            self.output_dir / "model_coefficients.csv"
        )

        table_files = {}
        if self.config['save_tables']:
            for key in TABLES:
                table_files[key] = str(save_table(aggregations[key], self.output_dir / f"{key}.csv"))

        logger.info("Saved outputs:")
        logger.info(f"  Model summary: {summary_file}")
        logger.info(f"  Plots: {len([p for p in plot_files if p])} files")

        return {
            'model': model_report,
            'files': {
                'model_summary': str(summary_file),
                'coefficients': str(coefficients_file),
                'tables': table_files,
                'plots': [str(p) for p in plot_files if p]
            }
        }
