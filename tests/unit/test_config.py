"""Unit tests for pipeline configuration."""

from __future__ import annotations

import pytest

from travelpac.config import Config, get_config, parse_sheet
from travelpac.errors import ResourceNotFoundError


@pytest.fixture(autouse=True)
def clear_env(monkeypatch) -> None:
    for name in ("TRAVELPAC_INPUT", "TRAVELPAC_SHEET", "TRAVELPAC_OUTPUT_DIR", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def test_defaults_include_fixed_thresholds() -> None:
    config = Config()

    assert config.get("aggregator.top_n") == 10
    assert config.get("aggregator.spend_per_night_cap") == 500
    assert config.get("cleaner.unknown_age") == "D/K"
    assert config.get("missing.key", "fallback") == "fallback"


def test_yaml_file_overrides_defaults(tmp_path) -> None:
    path = tmp_path / "pipeline.yaml"
    path.write_text("aggregator:\n  top_n: 3\n")

    config = Config(path)

    assert config.get("aggregator.top_n") == 3
    assert config.get("aggregator.spend_per_night_cap") == 500


def test_explicit_missing_config_file_raises(tmp_path) -> None:
    with pytest.raises(ResourceNotFoundError):
        Config(tmp_path / "missing.yaml")


def test_environment_overrides(monkeypatch) -> None:
    monkeypatch.setenv("TRAVELPAC_INPUT", "/data/survey.xlsx")
    monkeypatch.setenv("TRAVELPAC_SHEET", "2")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    config = Config()

    assert config.get("data.input_path") == "/data/survey.xlsx"
    assert config.get("data.sheet") == 2
    assert config.get("logging.level") == "DEBUG"


def test_set_and_stage_config_copy() -> None:
    config = Config()
    config.set("reporter.visualization.dpi", 72)

    stage = config.get_stage_config("reporter")
    stage["visualization"]["dpi"] = 1

    assert config.get("reporter.visualization.dpi") == 72


def test_parse_sheet() -> None:
    assert parse_sheet("0") == 0
    assert parse_sheet(" Data ") == "Data"


def test_get_config_reloads_when_file_given(tmp_path, monkeypatch) -> None:
    """A config file passed after the first call is not ignored."""
    monkeypatch.setattr("travelpac.config._global_config", None)
    first = tmp_path / "first.yaml"
    first.write_text("aggregator:\n  top_n: 3\n")
    second = tmp_path / "second.yaml"
    second.write_text("aggregator:\n  top_n: 7\n")

    assert get_config(first).get("aggregator.top_n") == 3
    assert get_config(second).get("aggregator.top_n") == 7
    assert get_config().get("aggregator.top_n") == 7
