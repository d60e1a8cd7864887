#!/usr/bin/env python3
"""
Shared pytest fixtures for the test suite.

This module provides common fixtures used across test modules including:
- Sample coordinate sets (well-known cities)
- Sample query/reference DataFrames for interpolation
- Temporary data files for CLI tests
"""
from __future__ import annotations

import sys
from pathlib import Path

# Add src directory to Python path for test imports
_project_root = Path(__file__).parent.parent
_src_path = _project_root / 'src'
if str(_src_path) not in sys.path:
    sys.path.insert(0, str(_src_path))

import pytest
import pandas as pd
import numpy as np


# ============================================================
# COORDINATE FIXTURES
# ============================================================

@pytest.fixture
def cities() -> pd.DataFrame:
    """Four US cities as (lon, lat) in decimal degrees."""
    return pd.DataFrame({
        'id': ['NYC', 'LA', 'Chicago', 'SF'],
        'lon': [-74.0060, -118.2437, -87.6298, -122.4194],
        'lat': [40.7128, 34.0522, 41.8781, 37.7749],
    })


@pytest.fixture
def random_points() -> dict:
    """Reproducible random query (n=60) and reference (k=25) coordinate sets."""
    rng = np.random.default_rng(42)
    return {
        'xlon': rng.uniform(-100, -80, 60),
        'xlat': rng.uniform(30, 45, 60),
        'ylon': rng.uniform(-100, -80, 25),
        'ylat': rng.uniform(30, 45, 25),
        'measure': rng.uniform(0, 50, 25),
        'pop': rng.integers(0, 10_000, 25).astype(float),
    }


# ============================================================
# DATA FIXTURES
# ============================================================

@pytest.fixture
def tracts() -> pd.DataFrame:
    """Query points needing interpolated measures."""
    return pd.DataFrame({
        'id': ['t1', 't2', 't3'],
        'lon': [0.0, 0.5, 2.0],
        'lat': [0.0, 0.5, 0.0],
    })


@pytest.fixture
def monitors() -> pd.DataFrame:
    """Reference points with a measure and a population."""
    return pd.DataFrame({
        'lon': [0.0, 0.0, 1.0],
        'lat': [1.0, 2.0, 1.0],
        'pm25': [10.0, 20.0, 30.0],
        'pop': [100.0, 400.0, 0.0],
    })


@pytest.fixture
def data_files(tmp_path, tracts, monitors) -> dict:
    """Write tracts/monitors as CSV files for CLI tests."""
    x_path = tmp_path / 'tracts.csv'
    y_path = tmp_path / 'monitors.csv'
    tracts.to_csv(x_path, index=False)
    monitors.to_csv(y_path, index=False)
    return {'x': x_path, 'y': y_path, 'dir': tmp_path}
