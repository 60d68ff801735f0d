"""
Verification checkpoints for the Travelpac pipeline.

Schema Check: cleaned-table invariants (after Stage 2)
Metrics Check: model report sanity (after Stage 4)
"""

from .schema_check import SchemaChecker
from .metrics_check import MetricsChecker

__all__ = ['SchemaChecker', 'MetricsChecker']
