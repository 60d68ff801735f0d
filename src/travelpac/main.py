"""
Main Pipeline Orchestrator

Runs the four stages once, in order, with a verification checkpoint after
the Cleaner and after the Reporter. Any stage error aborts the run.

Usage:
    travelpac-report --input data/raw/travelpac.xlsx --sheet 0
    travelpac-report --config config/pipeline_config.yaml --verbose
"""

import argparse
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, Optional, Union

import pandas as pd

from .config import Config, get_config, parse_sheet
from .errors import TravelpacError, VerificationError
from .utils.file_utils import save_json
from .utils.logging_utils import setup_logger, get_logger, PACKAGE_LOGGER
from .utils.stats_utils import summarize_table

# Stage imports
from .stage1.loader import SurveyLoader
from .stage2.cleaner import SurveyCleaner
from .stage3.aggregator import Aggregator
from .stage4.reporter import Reporter

# Verification imports
from .verifiers.schema_check import SchemaChecker
from .verifiers.metrics_check import MetricsChecker

logger = get_logger(__name__)


class Pipeline:
    """
    Main pipeline orchestrator.

    Example:
        >>> pipeline = Pipeline()
        >>> results = pipeline.run()
    """

    def __init__(
        self,
        config_file: Optional[str] = None,
        config: Optional[Config] = None,
        strict: bool = False
    ):
        """
        Initialize the pipeline.

        Args:
            config_file: Path to config file (optional)
            config: Ready-made Config (takes precedence over config_file)
            strict: Raise VerificationError when a checkpoint fails
        """
        self.config = config or get_config(config_file)
        self.strict = strict

        log_config = self.config.get_stage_config('logging')
        file_config = log_config.get('file', {})
        setup_logger(
            PACKAGE_LOGGER,
            log_file=file_config.get('path') if file_config.get('enabled') else None,
            level=log_config.get('level', 'INFO')
        )

        logger.info("=" * 80)
        logger.info("Travelpac Report Pipeline Initialized")
        logger.info("=" * 80)

    def _banner(self, title: str):
        logger.info("=" * 80)
        logger.info(title)
        logger.info("=" * 80)

    def _checkpoint(self, name: str, report: Dict[str, Any], strict: bool):
        if report['status'] == 'fail':
            logger.error(f"Verification {name} failed: {report['errors']}")
            if strict:
                raise VerificationError(f"Verification {name} failed: {report['errors']}")

    def run_stage1(self, input_path: Optional[Union[str, Path]] = None, sheet=None) -> pd.DataFrame:
        """Run Stage 1: Loader."""
        data_config = self.config.get_stage_config('data')

        loader = SurveyLoader(
            input_path=input_path or data_config.get('input_path'),
            sheet=data_config.get('sheet', 0) if sheet is None else sheet
        )
        records = loader.load()

        logger.info(f"✓ Stage 1 complete: {len(records)} records")

        return records

    def run_stage2(self, records: pd.DataFrame):
        """Run Stage 2: Cleaner. Returns (cleaned table, per-step counts)."""
        cleaner = SurveyCleaner(config=self.config.get_stage_config('cleaner'))
        cleaned = cleaner.clean(records)

        logger.info(f"✓ Stage 2 complete: {len(cleaned)} records")

        return cleaned, cleaner.step_counts

    def run_schema_check(self, cleaned: pd.DataFrame) -> Dict[str, Any]:
        """Run the schema checkpoint on the cleaned table."""
        schema_config = self.config.get_verification_config('schema')
        checker = SchemaChecker(config={**self.config.get_stage_config('cleaner'), **schema_config})

        report = checker.verify_cleaned(cleaned)
        self._checkpoint('schema', report, self.strict or schema_config.get('strict', False))

        return report

    def run_stage3(self, cleaned: pd.DataFrame) -> Dict[str, pd.DataFrame]:
        """Run Stage 3: Aggregator."""
        aggregator = Aggregator(config=self.config.get_stage_config('aggregator'))
        aggregations = aggregator.run(cleaned)

        logger.info("✓ Stage 3 complete")

        return aggregations

    def run_stage4(self, aggregations: Dict[str, pd.DataFrame], output_dir: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
        """Run Stage 4: Reporter."""
        reporter = Reporter(
            output_dir=output_dir or self.config.get('data.outputs_dir', 'data/outputs'),
            config=self.config.get_stage_config('reporter'),
            model_config=self.config.get_stage_config('model')
        )
        report = reporter.run(aggregations)

        logger.info("✓ Stage 4 complete")

        return report

    def run_metrics_check(self, model_report: Dict[str, Any]) -> Dict[str, Any]:
        """Run the metrics checkpoint on the model report."""
        metrics_config = self.config.get_verification_config('metrics')
        checker = MetricsChecker(config=metrics_config)

        report = checker.verify_model(model_report)
        self._checkpoint('metrics', report, self.strict or metrics_config.get('strict', False))

        return report

    def run(
        self,
        input_path: Optional[Union[str, Path]] = None,
        sheet=None,
        output_dir: Optional[Union[str, Path]] = None
    ) -> Dict[str, Any]:
        """
        Run Loader -> Cleaner -> Aggregator -> Reporter once.

        Args:
            input_path: Workbook path (defaults to data.input_path)
            sheet: Sheet index or name (defaults to data.sheet)
            output_dir: Artifact directory (defaults to data.outputs_dir)

        Returns:
            Results dict with the cleaned table, aggregations, model report,
            checkpoint reports and written files
        """
        output_dir = Path(output_dir or self.config.get('data.outputs_dir', 'data/outputs'))

        self._banner("STAGE 1: Loader")
        records = self.run_stage1(input_path, sheet)

        self._banner("STAGE 2: Cleaner")
        cleaned, step_counts = self.run_stage2(records)
        schema_report = self.run_schema_check(cleaned)

        self._banner("STAGE 3: Aggregator")
        aggregations = self.run_stage3(cleaned)

        self._banner("STAGE 4: Reporter")
        report = self.run_stage4(aggregations, output_dir)
        metrics_report = self.run_metrics_check(report['model'])

        model = report['model']
        run_summary = {
            'timestamp': datetime.now().isoformat(),
            'records_loaded': len(records),
            'records_cleaned': len(cleaned),
            'cleaning_steps': step_counts,
            'dataset_summary': summarize_table(cleaned),
            'model': {
                'formula': model['formula'],
                'nobs': model['nobs'],
                'rsquared': model['rsquared'],
                'rsquared_adj': model['rsquared_adj'],
                'fvalue': model['fvalue'],
                'f_pvalue': model['f_pvalue'],
                'fit_metrics': model['fit_metrics']
            },
            'verification': {
                'schema': schema_report['status'],
                'metrics': metrics_report['status']
            },
            'files': report['files']
        }
        summary_file = save_json(run_summary, output_dir / "run_summary.json")

        self._banner("PIPELINE COMPLETE")

        return {
            'records': records,
            'cleaned': cleaned,
            'cleaning_steps': step_counts,
            'aggregations': aggregations,
            'model': model,
            'verification': {
                'schema': schema_report,
                'metrics': metrics_report
            },
            'files': {**report['files'], 'run_summary': str(summary_file)}
        }


def main(argv=None):
    """
    CLI entry point for the pipeline.

    Usage:
        travelpac-report --input data/raw/travelpac.xlsx
        travelpac-report --sheet Data --output-dir reports/2019
    """
    parser = argparse.ArgumentParser(
        description="Travelpac survey cleaning, aggregation and report pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        '--input',
        help='Path to the Travelpac workbook (default: data.input_path)'
    )

    parser.add_argument(
        '--sheet',
        type=parse_sheet,
        help='Sheet index or name (default: data.sheet)'
    )

    parser.add_argument(
        '--output-dir',
        help='Directory for charts and reports (default: data.outputs_dir)'
    )

    parser.add_argument(
        '--config',
        help='Path to config file (default: config/pipeline_config.yaml)'
    )

    parser.add_argument(
        '--strict',
        action='store_true',
        help='Fail when a verification checkpoint fails'
    )

    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose logging'
    )

    args = parser.parse_args(argv)

    try:
        pipeline = Pipeline(config_file=args.config, strict=args.strict)

        if args.verbose:
            get_logger(PACKAGE_LOGGER).setLevel('DEBUG')

        results = pipeline.run(
            input_path=args.input,
            sheet=args.sheet,
            output_dir=args.output_dir
        )
    except TravelpacError as e:
        logger.error(f"Pipeline aborted: {e}")
        return 1

    model = results['model']
    print(f"\n✓ Report complete: {len(results['cleaned'])} cleaned records")
    print(f"✓ R²: {model['rsquared']:.4f}, F-statistic: {model['fvalue']:.2f}")
    print(f"✓ Summary: {results['files']['model_summary']}")

    return 0


if __name__ == '__main__':
    sys.exit(main())
