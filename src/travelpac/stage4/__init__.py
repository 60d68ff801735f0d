"""
Stage 4: Reporter

Renders the charts and fits and reports the spend-per-night regression.
"""

from .models import SpendModel, format_model_report
from .reporter import Reporter
from .visualizer import Visualizer

__all__ = ['Reporter', 'SpendModel', 'Visualizer', 'format_model_report']
