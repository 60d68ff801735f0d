"""Pytest configuration and shared survey fixtures."""

from __future__ import annotations

import os
import sys
from pathlib import Path

os.environ.setdefault("MPLBACKEND", "Agg")

import numpy as np
import pandas as pd
import pytest

QUARTERS = ["January-March", "April-June", "July-September", "October-December"]


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


def build_row(**overrides) -> dict:
    """One raw survey record with source column names."""
    row = {
        "Year": 2019,
        "Age": "25-34",
        "Sex": "Male",
        "country": "France",
        "ukos": "UK residents",
        "quarter": "January-March",
        "visits": 10.0,
        "nights": 5.0,
        "expend": 400.0,
        "sample": 3,
    }
    row.update(overrides)
    return row


def make_raw_survey(n_valid: int = 80, seed: int = 7) -> pd.DataFrame:
    """Valid records with variation in every model term, plus sentinel rows."""
    rng = np.random.RandomState(seed)
    sexes = ["Male", "Female"]
    ages = ["16-24", "25-34", "35-44", "45-54"]
    countries = ["France", "Spain", "Italy", "Germany"]
    residency = ["UK residents", "Overseas residents"]

    rows = []
    for i in range(n_valid):
        nights = float(1 + i % 9)
        per_night = 60 + 15 * (i % 4) + 25 * (i % 2) + rng.uniform(0, 20)
        rows.append(build_row(
            Age=ages[i % 4],
            Sex=sexes[(i // 3) % 2],
            country=countries[i % 4],
            ukos=residency[(i // 4) % 2],
            quarter=QUARTERS[(i // 5) % 4],
            visits=float(100 + 10 * i),
            nights=nights,
            expend=round(per_night * nights, 2),
        ))

    rows.extend([
        build_row(Sex=np.nan, visits=1e6),
        build_row(Sex="   ", visits=1e6),
        build_row(Age="D/K", visits=1e6),
        build_row(country="0", visits=1e6),
        build_row(country=0, visits=1e6),
        build_row(nights=0.0, expend=100.0),
        build_row(expend=np.nan),
    ])
    return pd.DataFrame(rows)


def write_workbook(df: pd.DataFrame, path: Path, sheet_name: str = "Data") -> Path:
    """Write df as the only sheet of an .xlsx workbook."""
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=sheet_name, index=False)
    return path


@pytest.fixture
def raw_survey() -> pd.DataFrame:
    return make_raw_survey()


@pytest.fixture
def survey_workbook(tmp_path, raw_survey) -> Path:
    return write_workbook(raw_survey, tmp_path / "travelpac.xlsx")


@pytest.fixture
def cleaned_survey(raw_survey) -> pd.DataFrame:
    from travelpac.stage1.loader import normalize_survey_frame
    from travelpac.stage2.cleaner import clean_survey

    return clean_survey(normalize_survey_frame(raw_survey))


@pytest.fixture
def make_records():
    """Build a normalised records frame from row overrides."""
    from travelpac.stage1.loader import normalize_survey_frame

    def _make(*overrides: dict) -> pd.DataFrame:
        return normalize_survey_frame(pd.DataFrame([build_row(**o) for o in overrides]))

    return _make


@pytest.fixture
def make_cleaned(make_records):
    """Build a cleaned analysis table from row overrides."""
    from travelpac.stage2.cleaner import clean_survey

    def _make(*overrides: dict) -> pd.DataFrame:
        return clean_survey(make_records(*overrides))

    return _make
