"""
Aggregator - Stage 3

Three independent summaries of the cleaned table. Each one filters the rows
with the measures it needs, groups by one categorical key and reduces with a
sum or mean; the input table is never modified.
"""

import pandas as pd
from typing import Dict, Any, Iterable, Optional

from ..errors import DataValidationError
from ..stage2.cleaner import QUARTER_ORDER
from ..utils.logging_utils import get_logger
from ..utils.stats_utils import safe_divide

logger = get_logger(__name__)


def quarter_ordinal(quarters: pd.Series) -> pd.Series:
    """
    Map quarter labels to their calendar position (January-March = 1).

    Raises:
        DataValidationError: If a label is not one of the four quarters
    """
    ordinals = quarters.map(QUARTER_ORDER)
    unknown = sorted({str(q) for q in quarters[ordinals.isna()]})

    if unknown:
        raise DataValidationError(f"Unrecognised quarter labels: {unknown}")

    return ordinals.astype(int)


def top_countries_by_visits(df: pd.DataFrame, top_n: int = 10) -> pd.DataFrame:
    """
    Rank destination countries of UK residents by total visits.

    Args:
        df: Cleaned survey table
        top_n: Number of countries to keep

    Returns:
        DataFrame with columns [country, visits], highest total first;
        equal totals are ordered by country name
    """
    residents = df[(df['uk_resident'] == 1) & df['visits'].notna()]

    totals = residents.groupby('country', as_index=False)['visits'].sum()
    totals = totals.sort_values(['visits', 'country'], ascending=[False, True])

    return totals.head(top_n).reset_index(drop=True)


def spend_per_night_frame(df: pd.DataFrame) -> pd.DataFrame:
    """
    Rows with a positive night count and a known spend, plus spend_per_night.

    Rows with zero or missing nights never reach the division.
    """
    valid = df[df['spend'].notna() & df['nights'].notna() & (df['nights'] > 0)]

    per_night = valid.assign(spend_per_night=safe_divide(valid['spend'], valid['nights']))

    logger.debug(f"Spend per night computed for {len(per_night)} of {len(df)} rows")

    return per_night.reset_index(drop=True)


def mean_spend_per_night_by_sex(df: pd.DataFrame) -> pd.DataFrame:
    """
    Mean spend per night for each sex category.

    Returns:
        DataFrame with columns [sex, mean_spend_per_night, records]
    """
    per_night = spend_per_night_frame(df)

    summary = per_night.groupby('sex')['spend_per_night'].agg(['mean', 'count']).reset_index()
    summary.columns = ['sex', 'mean_spend_per_night', 'records']

    return summary.sort_values('sex').reset_index(drop=True)


def spend_per_night_for_plot(
    df: pd.DataFrame,
    sexes: Iterable[str] = ('Male', 'Female'),
    cap: float = 500
) -> pd.DataFrame:
    """
    Per-record spend per night for the box plot.

    Keeps the listed sex categories and values strictly below cap.
    """
    per_night = spend_per_night_frame(df)

    keep = per_night['sex'].isin(list(sexes)) & (per_night['spend_per_night'] < cap)
    plot_df = per_night[keep]

    logger.debug(f"Plot data: {len(plot_df)} records below {cap} per night")

    return plot_df.reset_index(drop=True)


def mean_visits_by_quarter(df: pd.DataFrame) -> pd.DataFrame:
    """
    Mean visit count per quarter in calendar order.

    Returns:
        DataFrame with columns [quarter, quarter_order, mean_visits]
    """
    with_visits = df[df['visits'].notna()]

    means = with_visits.groupby('quarter', as_index=False)['visits'].mean()
    means = means.rename(columns={'visits': 'mean_visits'})
    means.insert(1, 'quarter_order', quarter_ordinal(means['quarter']))

    return means.sort_values('quarter_order').reset_index(drop=True)


class Aggregator:
    """
    Stage 3: Aggregator

    Example:
        >>> aggregator = Aggregator(config={'top_n': 10})
        >>> results = aggregator.run(cleaned_df)
        >>> results['top_countries'].head()
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the Aggregator.

        Args:
            config: Configuration dict (the 'aggregator' section)
        """
        self.config = {
            'top_n': 10,
            'plot_sexes': ['Male', 'Female'],
            'spend_per_night_cap': 500
        }

        if config:
            self.config.update(config)

        logger.info("Initialized Aggregator")

    def run(self, df: pd.DataFrame) -> Dict[str, pd.DataFrame]:
        """
        Compute every summary for the cleaned table.

        Returns:
            Dict of DataFrames: top_countries, spend_by_sex,
            spend_per_night (plot data), per_night (all per-night records)
            and visits_by_quarter
        """
        logger.info(f"Aggregating {len(df)} cleaned records")

        results = {
            'top_countries': top_countries_by_visits(df, top_n=self.config['top_n']),
            'spend_by_sex': mean_spend_per_night_by_sex(df),
            'spend_per_night': spend_per_night_for_plot(
                df,
                sexes=self.config['plot_sexes'],
                cap=self.config['spend_per_night_cap']
            ),
            'per_night': spend_per_night_frame(df),
            'visits_by_quarter': mean_visits_by_quarter(df),
        }

        for name, table in results.items():
            logger.info(f"  {name}: {len(table)} rows")

        return results
