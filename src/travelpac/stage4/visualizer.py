"""
Visualization Module

Creates the report charts:
- Top destination countries by visits (bar)
- Spend per night by sex (box plot)
- Mean visits by quarter (column)
- Residual distribution of the spend model
"""

import pandas as pd
import numpy as np
import matplotlib.pyplot as plt
import seaborn as sns
from matplotlib.ticker import FuncFormatter
from pathlib import Path
from scipy import stats
from typing import Dict, Any, Optional

from ..utils.logging_utils import get_logger
from ..utils.stats_utils import format_compact_number

logger = get_logger(__name__)

# Set style
sns.set_theme(style="whitegrid", palette="muted")
plt.rcParams['font.size'] = 10

BAR_COLOR = sns.color_palette("muted")[0]
QUARTER_PALETTE = ['#8FB9A8', '#FDCD7C', '#F6A27B', '#8FA6CB']

compact_formatter = FuncFormatter(lambda x, p: format_compact_number(x))


def category_palette(categories) -> Dict[str, Any]:
    """Muted colour per category, in first-seen order."""
    categories = list(dict.fromkeys(categories))
    return dict(zip(categories, sns.color_palette("muted", len(categories))))


class Visualizer:
    """
    Creates the report charts.

    Example:
        >>> viz = Visualizer(output_dir="data/outputs/plots")
        >>> viz.plot_top_countries(results['top_countries'])
    """

    def __init__(
        self,
        output_dir: str = "data/outputs/plots",
        config: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize the Visualizer.

        Args:
            output_dir: Directory to save plots
            config: Configuration dictionary
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

        self.config = {
            'dpi': 150,
            'figsize': (10, 6)
        }

        if config:
            self.config.update(config)

        self.config['figsize'] = tuple(self.config['figsize'])

        logger.info(f"Initialized Visualizer (output: {self.output_dir})")

    def _finish(self, fig, name: str, save: bool) -> Optional[Path]:
        plt.tight_layout()

        if save:
            file_path = self.output_dir / f"{name}.png"
            fig.savefig(file_path, dpi=self.config['dpi'], bbox_inches='tight')
            logger.info(f"Saved plot: {file_path.name}")
            plt.close(fig)
            return file_path

        return None

    def plot_top_countries(
        self,
        top_countries: pd.DataFrame,
        save: bool = True
    ) -> Optional[Path]:
        """
        Horizontal bar chart of total visits by destination country.

        Args:
            top_countries: Output of top_countries_by_visits
            save: Whether to save the plot

        Returns:
            Path to saved plot (if save=True)
        """
        fig, ax = plt.subplots(figsize=self.config['figsize'])

        sns.barplot(
            data=top_countries, x='visits', y='country',
            color=BAR_COLOR, errorbar=None, ax=ax
        )

        ax.xaxis.set_major_formatter(compact_formatter)
        ax.set_xlabel('Total visits', fontsize=12)
        ax.set_ylabel('')
        ax.set_title(f'Top {len(top_countries)} destinations of UK residents',
                     fontsize=14, fontweight='bold')
        ax.grid(True, alpha=0.3, axis='x')
        ax.grid(False, axis='y')

        return self._finish(fig, 'top_countries_by_visits', save)

    def plot_spend_per_night_by_sex(
        self,
        spend_per_night: pd.DataFrame,
        save: bool = True
    ) -> Optional[Path]:
        """
        Box plot of per-record spend per night for each sex.

        Args:
            spend_per_night: Output of spend_per_night_for_plot
            save: Whether to save the plot

        Returns:
            Path to saved plot (if save=True)
        """
        fig, ax = plt.subplots(figsize=self.config['figsize'])

        sns.boxplot(
            data=spend_per_night, x='sex', y='spend_per_night',
            hue='sex', palette=category_palette(spend_per_night['sex']),
            dodge=False, ax=ax
        )

        if ax.get_legend() is not None:
            ax.get_legend().remove()

        ax.yaxis.set_major_formatter(FuncFormatter(lambda y, p: f"£{y:,.0f}"))
        ax.set_xlabel('')
        ax.set_ylabel('Spend per night', fontsize=12)
        ax.set_title('Spend per night by sex', fontsize=14, fontweight='bold')
        ax.grid(True, alpha=0.3, axis='y')

        return self._finish(fig, 'spend_per_night_by_sex', save)

    def plot_visits_by_quarter(
        self,
        visits_by_quarter: pd.DataFrame,
        save: bool = True
    ) -> Optional[Path]:
        """
        Column chart of mean visits per quarter in calendar order.

        Args:
            visits_by_quarter: Output of mean_visits_by_quarter
            save: Whether to save the plot

        Returns:
            Path to saved plot (if save=True)
        """
        ordered = visits_by_quarter.sort_values('quarter_order')

        fig, ax = plt.subplots(figsize=self.config['figsize'])

        ax.bar(
            ordered['quarter'], ordered['mean_visits'],
            color=QUARTER_PALETTE[:len(ordered)], edgecolor='white'
        )

        ax.yaxis.set_major_formatter(compact_formatter)
        ax.set_xlabel('Quarter', fontsize=12)
        ax.set_ylabel('Mean visits', fontsize=12)
        ax.set_title('Mean visits by quarter', fontsize=14, fontweight='bold')
        ax.grid(True, alpha=0.3, axis='y')
        ax.grid(False, axis='x')

        return self._finish(fig, 'visits_by_quarter', save)

    def plot_error_distribution(
        self,
        residuals: np.ndarray,
        model_name: str,
        save: bool = True
    ) -> Optional[Path]:
        """
        Plot distribution of residuals.

        Args:
            residuals: Residual values
            model_name: Name of the model
            save: Whether to save the plot

        Returns:
            Path to saved plot (if save=True)
        """
        residuals = np.asarray(residuals, dtype=float)

        fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(14, 6))

        ax1.hist(residuals, bins=min(50, max(len(residuals), 1)), edgecolor='black', alpha=0.7)
        ax1.axvline(0, color='red', linestyle='--', linewidth=2, label='Zero Error')
        ax1.set_xlabel('Residual', fontsize=12)
        ax1.set_ylabel('Frequency', fontsize=12)
        ax1.set_title('Residual Distribution', fontsize=12, fontweight='bold')
        ax1.legend()
        ax1.grid(True, alpha=0.3)

        stats.probplot(residuals, dist="norm", plot=ax2)
        ax2.set_title('Q-Q Plot', fontsize=12, fontweight='bold')
        ax2.grid(True, alpha=0.3)

        fig.suptitle(f'Error Analysis - {model_name}', fontsize=14, fontweight='bold')

        return self._finish(fig, f'error_distribution_{model_name}', save)
