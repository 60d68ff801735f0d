"""
Stage 3: Aggregator

Grouped summaries over the cleaned survey table:
- top destination countries of UK residents by total visits
- spend per night by sex (summary and per-record plot data)
- mean visits by quarter in calendar order
"""

from .aggregator import (
    Aggregator,
    top_countries_by_visits,
    spend_per_night_frame,
    mean_spend_per_night_by_sex,
    spend_per_night_for_plot,
    mean_visits_by_quarter,
    quarter_ordinal,
)

__all__ = [
    'Aggregator',
    'top_countries_by_visits',
    'spend_per_night_frame',
    'mean_spend_per_night_by_sex',
    'spend_per_night_for_plot',
    'mean_visits_by_quarter',
    'quarter_ordinal',
]
