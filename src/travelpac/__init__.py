"""
Travelpac report pipeline.

Loads the Travelpac (International Passenger Survey) spreadsheet, cleans it,
computes grouped summaries and renders the charts and regression report.

Stages:
    1. Loader     - read the survey sheet and check its header
    2. Cleaner    - drop sentinel/missing rows, rename, derive residency flag
    3. Aggregator - top countries, spend per night by sex, visits by quarter
    4. Reporter   - charts and the OLS model of nightly spend
"""

__version__ = "0.1.0"
