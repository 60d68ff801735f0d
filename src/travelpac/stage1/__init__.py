"""
Stage 1: Loader

Reads the Travelpac survey sheet into a DataFrame and checks that the header
matches the expected survey schema.
"""

from .loader import SurveyLoader, load_survey, EXPECTED_COLUMNS

__all__ = ['SurveyLoader', 'load_survey', 'EXPECTED_COLUMNS']
