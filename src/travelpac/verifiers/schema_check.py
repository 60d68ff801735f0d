"""
Verification: Schema Check

Re-asserts the cleaned-table invariants after Stage 2:
- analysis columns present, year/sample dropped
- sex never missing, never the "don't know" sentinel and (when
  known_sexes is configured) one of the known categories
- age never the "don't know" sentinel
- country never the "0" sentinel
- residency flag is 1 exactly where residency is "UK residents"
- quarter labels are the four known periods
"""

import pandas as pd
from datetime import datetime
from typing import Dict, Any, Optional

from ..stage2.cleaner import QUARTER_ORDER
from ..utils.logging_utils import get_logger

logger = get_logger(__name__)

CLEANED_COLUMNS = [
    'age', 'sex', 'country', 'residency', 'quarter',
    'visits', 'nights', 'spend', 'uk_resident'
]


class SchemaChecker:
    """
    Verification checkpoint for the cleaned table.

    Example:
        >>> checker = SchemaChecker()
        >>> report = checker.verify_cleaned(cleaned_df)
        >>> report['status']
        'pass'
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the Schema Checker.

        Args:
            config: Configuration dictionary
        """
        self.config = {
            'unknown_sex': 'D/K',
            'known_sexes': None,
            'unknown_age': 'D/K',
            'invalid_country': '0',
            'uk_resident_label': 'UK residents'
        }

        if config:
            self.config.update(config)

        logger.info("Initialized Schema Checker")

    def verify_cleaned(self, df: pd.DataFrame) -> Dict[str, Any]:
        """
        Check every invariant of the cleaned table.

        Args:
            df: Output of the Cleaner

        Returns:
            Verification report with status 'pass' or 'fail'
        """
        report = {
            'timestamp': datetime.now().isoformat(),
            'row_count': len(df),
            'status': 'pass',
            'errors': [],
            'checks': {}
        }

        missing = [c for c in CLEANED_COLUMNS if c not in df.columns]
        leftover = [c for c in ('year', 'sample') if c in df.columns]
        report['checks']['columns'] = {'missing': missing, 'leftover': leftover}

        if missing or leftover:
            report['errors'].append({
                'check': 'columns',
                'message': f'Missing columns {missing}, unexpected columns {leftover}'
            })
            report['status'] = 'fail'
            return report

        country_text = df['country'].map(lambda v: str(v).strip())
        expected_flag = (df['residency'] == self.config['uk_resident_label']).astype(int)

        sex_unknown = df['sex'] == self.config['unknown_sex']
        if self.config['known_sexes']:
            sex_unknown |= df['sex'].notna() & ~df['sex'].isin(list(self.config['known_sexes']))

        violations = {
            'sex_missing': int(df['sex'].isna().sum()),
            'sex_unknown': int(sex_unknown.sum()),
            'age_unknown': int((df['age'] == self.config['unknown_age']).sum()),
            'country_sentinel': int((country_text == str(self.config['invalid_country'])).sum()),
            'residency_flag_mismatch': int((df['uk_resident'] != expected_flag).sum()),
            'quarter_unrecognised': int((~df['quarter'].isin(list(QUARTER_ORDER))).sum()),
        }

        for check, count in violations.items():
            report['checks'][check] = {'violations': count}
            if count:
                report['errors'].append({
                    'check': check,
                    'violations': count,
                    'message': f'{count} rows violate {check}'
                })

        if report['errors']:
            report['status'] = 'fail'

        logger.info(f"  Schema status: {report['status']} ({len(report['errors'])} errors)")

        return report
