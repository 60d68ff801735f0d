"""Unit tests for file helpers."""

from __future__ import annotations

import json

import pandas as pd
import pytest

from travelpac.errors import ResourceNotFoundError
from travelpac.utils.file_utils import load_config, save_json, save_table, save_text


def test_load_config_reads_yaml(tmp_path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("aggregator:\n  top_n: 5\n")

    assert load_config(path) == {"aggregator": {"top_n": 5}}


def test_load_config_empty_file_is_empty_mapping(tmp_path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("")

    assert load_config(path) == {}


def test_load_config_missing_file_raises(tmp_path) -> None:
    with pytest.raises(ResourceNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_save_helpers_create_parent_directories(tmp_path) -> None:
    json_path = save_json({"rows": 3}, tmp_path / "a" / "run.json")
    text_path = save_text("hello\n", tmp_path / "b" / "summary.txt")
    csv_path = save_table(pd.DataFrame({"x": [1, 2]}), tmp_path / "c" / "table.csv")

    assert json.loads(json_path.read_text()) == {"rows": 3}
    assert text_path.read_text() == "hello\n"
    assert pd.read_csv(csv_path)["x"].tolist() == [1, 2]
