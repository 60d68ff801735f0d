"""
File I/O utilities for the Travelpac pipeline.
Handles loading YAML config and Excel workbooks, and saving JSON, text and
CSV artifacts.
"""

import json
import zipfile
import yaml
import pandas as pd
from pathlib import Path
from typing import Any, Dict, List, Union

from ..errors import ResourceNotFoundError, SchemaMismatchError
from .logging_utils import get_logger

logger = get_logger(__name__)


def load_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load YAML configuration file.

    Args:
        config_path: Path to YAML config file

    Returns:
        Configuration dictionary (empty if the file holds no mapping)

    Raises:
        ResourceNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is malformed
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ResourceNotFoundError(f"Config file not found: {config_path}")

    logger.info(f"Loading config from: {config_path}")

    with open(config_path, 'r') as f:
        config = yaml.safe_load(f)

    return config or {}


def load_excel(
    file_path: Union[str, Path],
    sheet: Union[int, str] = 0,
    **kwargs
) -> pd.DataFrame:
    """
    Load one sheet of an Excel workbook into a pandas DataFrame.

    The workbook handle is opened and released inside pd.read_excel.

    Args:
        file_path: Path to the .xlsx workbook
        sheet: Sheet index or sheet name
        **kwargs: Additional arguments passed to pd.read_excel

    Returns:
        DataFrame containing the sheet

    Raises:
        ResourceNotFoundError: If the workbook doesn't exist
        SchemaMismatchError: If the sheet selector is invalid or the file
            is not a readable workbook

    Example:
        >>> df = load_excel("data/raw/travelpac.xlsx", sheet=0)
        >>> print(f"Loaded {len(df)} rows")
    """
    file_path = Path(file_path)

    if not file_path.exists():
        raise ResourceNotFoundError(f"Spreadsheet not found: {file_path}")

    logger.info(f"Loading Excel: {file_path} (sheet={sheet!r})")

    try:
        df = pd.read_excel(file_path, sheet_name=sheet, **kwargs)
    except (ValueError, IndexError, KeyError, zipfile.BadZipFile) as e:
        raise SchemaMismatchError(
            f"Cannot read sheet {sheet!r} from {file_path}: {e}"
        ) from e

    logger.info(f"Loaded {len(df)} rows")

    return df


def save_json(
    data: Union[Dict, List],
    file_path: Union[str, Path],
    indent: int = 2
) -> Path:
    """
    Save data to JSON file.

    Args:
        data: Data to save (dict or list)
        file_path: Output file path
        indent: JSON indentation (default: 2)

    Returns:
        Path of the written file
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    with open(file_path, 'w') as f:
        json.dump(data, f, indent=indent, default=str)

    logger.info(f"Saved JSON to: {file_path}")

    return file_path


def save_text(text: str, file_path: Union[str, Path]) -> Path:
    """Write a plain-text report, creating parent directories."""
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    file_path.write_text(text)
    logger.info(f"Saved text to: {file_path}")

    return file_path


def save_table(
    df: pd.DataFrame,
    file_path: Union[str, Path],
    **kwargs
) -> Path:
    """
    Save DataFrame to CSV file.

    Args:
        df: DataFrame to save
        file_path: Output file path
        **kwargs: Additional arguments passed to df.to_csv

    Returns:
        Path of the written file
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    kwargs.setdefault('index', False)
    df.to_csv(file_path, **kwargs)
    logger.info(f"Saved {len(df)} rows to: {file_path}")

    return file_path
