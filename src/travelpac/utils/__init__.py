"""
Utility modules for the Travelpac pipeline.
Provides common functionality for logging, file I/O, and statistics.
"""

from .logging_utils import setup_logger, get_logger
from .file_utils import load_config, load_excel, save_json, save_text, save_table
from .stats_utils import (
    calculate_basic_stats,
    format_compact_number,
    infer_column_type,
    safe_divide,
    summarize_table,
)

__all__ = [
    'setup_logger',
    'get_logger',
    'load_config',
    'load_excel',
    'save_json',
    'save_text',
    'save_table',
    'calculate_basic_stats',
    'format_compact_number',
    'infer_column_type',
    'safe_divide',
    'summarize_table',
]
