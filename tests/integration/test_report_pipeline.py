"""Integration tests for the full report pipeline."""

from __future__ import annotations

import json

import matplotlib

matplotlib.use("Agg")

import pytest

from travelpac.config import Config
from travelpac.errors import ResourceNotFoundError, VerificationError
from travelpac.main import Pipeline, main


@pytest.fixture
def config(tmp_path, monkeypatch) -> Config:
    for name in ("TRAVELPAC_INPUT", "TRAVELPAC_SHEET", "TRAVELPAC_OUTPUT_DIR", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    config = Config()
    config.set("data.outputs_dir", str(tmp_path / "outputs"))
    config.set("reporter.visualization.dpi", 50)
    return config


def test_pipeline_runs_every_stage(survey_workbook, config, tmp_path) -> None:
    """Workbook in, cleaned table, summaries, model and artifacts out."""
    results = Pipeline(config=config).run(input_path=survey_workbook, sheet=0)
    outputs = tmp_path / "outputs"

    assert len(results["records"]) == 87
    assert len(results["cleaned"]) == 82
    assert results["verification"]["schema"]["status"] == "pass"
    assert results["verification"]["metrics"]["status"] in {"pass", "pass_with_warnings"}
    assert (outputs / "model_summary.txt").exists()
    assert len(list((outputs / "plots").glob("*.png"))) == 4

    summary = json.loads((outputs / "run_summary.json").read_text())
    assert summary["records_cleaned"] == 82
    assert summary["cleaning_steps"][0]["step"] == "drop_missing_sex"


def test_pipeline_missing_input_aborts(config, tmp_path) -> None:
    with pytest.raises(ResourceNotFoundError):
        Pipeline(config=config).run(input_path=tmp_path / "missing.xlsx")


def test_strict_pipeline_raises_on_failed_checkpoint(survey_workbook, config, monkeypatch) -> None:
    from travelpac.verifiers.schema_check import SchemaChecker

    monkeypatch.setattr(
        SchemaChecker, "verify_cleaned",
        lambda self, df: {"status": "fail", "errors": ["forced"]},
    )

    with pytest.raises(VerificationError):
        Pipeline(config=config, strict=True).run(input_path=survey_workbook)


def test_cli_returns_one_on_missing_input(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr("travelpac.config._global_config", None)

    code = main(["--input", str(tmp_path / "missing.xlsx"), "--output-dir", str(tmp_path)])

    assert code == 1


def test_cli_runs_report(survey_workbook, tmp_path, monkeypatch) -> None:
    monkeypatch.setattr("travelpac.config._global_config", None)

    code = main(["--input", str(survey_workbook), "--output-dir", str(tmp_path / "cli")])

    assert code == 0
    assert (tmp_path / "cli" / "run_summary.json").exists()
