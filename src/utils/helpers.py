#!/usr/bin/env python3
"""
Common utility functions for the command-line pipeline.

This module provides shared helpers for file I/O, YAML loading and logging
setup.
"""
from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Any, Union

import pandas as pd
import yaml


# Tabular formats understood by load_data/save_data
DATA_FORMATS = ('.csv', '.parquet')


def ensure_dir(path: Path) -> Path:
    """Ensure a directory exists, creating it if necessary."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def _data_suffix(path: Path) -> str:
    suffix = path.suffix.lower()
    if suffix not in DATA_FORMATS:
        raise ValueError(
            f"Unsupported file format '{suffix}'. Supported: {', '.join(DATA_FORMATS)}"
        )
    return suffix


def load_data(path: Union[str, Path]) -> pd.DataFrame:
    """
    Load a CSV or parquet file into a DataFrame.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ValueError
        If the file extension is not supported.
    """
    path = Path(path)
    suffix = _data_suffix(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    if suffix == '.parquet':
        return pd.read_parquet(path)
    return pd.read_csv(path)


def save_data(df: pd.DataFrame, path: Union[str, Path], index: bool = False) -> Path:
    """Save a DataFrame as CSV or parquet, creating the parent directory."""
    path = Path(path)
    suffix = _data_suffix(path)
    ensure_dir(path.parent)
    if suffix == '.parquet':
        df.to_parquet(path, index=index)
    else:
        df.to_csv(path, index=index)
    return path


def load_yaml(path: Union[str, Path]) -> dict[str, Any]:
    """
    Load a YAML file whose root is a mapping.

    Returns
    -------
    dict
        Parsed configuration (empty for an empty file)
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


def configure_logging(level: str = 'INFO', fmt: str = None) -> None:
    """Configure the root logger for command-line runs."""
    from config import LOG_FORMAT

    logging.basicConfig(level=level.upper(), format=fmt or LOG_FORMAT, force=True)


def format_meters(value: float, decimals: int = 1) -> str:
    """Format a distance in meters, switching to km above 10 km."""
    if math.isnan(value):
        return "nan"
    if abs(value) >= 10_000:
        return f"{value / 1000:,.{decimals}f} km"
    return f"{value:,.{decimals}f} m"
