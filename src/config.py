#!/usr/bin/env python3
"""
Configuration constants for geodesic distance and interpolation.

This module centralizes distance-model parameters, interpolation defaults,
parallel execution settings, and tabular column conventions.
Project-specific values can be overridden for CLI runs with a YAML file
(see ``load_overrides``).

Usage
-----
    from config import DEFAULT_DIST_FUNCTION, DEFAULT_DECAY, CANCEL_CHECK_EVERY

    # Or import specific sections
    from config import (
        # Distance models
        EARTH_RADIUS_M,
        VINCENTY_TOLERANCE,
        VINCENTY_MAX_ITER,

        # Interpolation
        DEFAULT_DIST_TRANSFORM,
        MIN_WEIGHT_DISTANCE_M,

        # Parallel execution
        PARALLEL_ENABLED,
        PARALLEL_MAX_WORKERS,
    )
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Union


# =============================================================================
# PATHS
# =============================================================================

def _find_project_root() -> Path:
    """Find project root by looking for characteristic files."""
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'src').exists() and (parent / 'pyproject.toml').exists():
            return parent
    # Fallback: use parent of src/
    return Path(__file__).resolve().parent.parent


PROJECT_ROOT = _find_project_root()


# =============================================================================
# DISTANCE MODELS
# =============================================================================

# Mean Earth radius in meters (IUGG), used by every Haversine call
EARTH_RADIUS_M = 6_371_008.8

# WGS84 reference ellipsoid
WGS84_A = 6_378_137.0
WGS84_F = 1 / 298.257223563
WGS84_B = (1 - WGS84_F) * WGS84_A

# Vincenty inverse iteration
VINCENTY_TOLERANCE = 1e-12    # radians, change in lambda between iterations
VINCENTY_MAX_ITER = 200
VINCENTY_STRICT = False       # True raises ConvergenceError instead of warning

# Default distance function ('Haversine' or 'Vincenty')
DEFAULT_DIST_FUNCTION = 'Haversine'


# =============================================================================
# INTERPOLATION SETTINGS
# =============================================================================

# Default weight transform ('level' or 'log')
DEFAULT_DIST_TRANSFORM = 'level'

# Default inverse-distance decay exponent
DEFAULT_DECAY = 2.0

# Distances below this are clamped before weighting (meters)
MIN_WEIGHT_DISTANCE_M = 1e-3


# =============================================================================
# PARALLEL EXECUTION SETTINGS
# =============================================================================

# Enable parallel row execution in aggregation
PARALLEL_ENABLED = True

# Maximum number of parallel workers (None = use CPU count)
PARALLEL_MAX_WORKERS = None

# Minimum query rows per worker before splitting is worthwhile
PARALLEL_MIN_ROWS_PER_WORKER = 256

# Rows between cancellation checks within a worker
CANCEL_CHECK_EVERY = 100


# =============================================================================
# TABULAR COLUMN DEFAULTS
# =============================================================================

DEFAULT_ID_COL = 'id'
DEFAULT_LON_COL = 'lon'
DEFAULT_LAT_COL = 'lat'
DEFAULT_POP_COL = 'pop'

# Output column names of aggregation tables
WEIGHTED_MEAN_COL = 'wmeasure'
MIN_DISTANCE_COL = 'mindist'


# =============================================================================
# LOGGING
# =============================================================================

LOG_LEVEL = 'INFO'
LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'


# =============================================================================
# VALIDATION
# =============================================================================

def validate_config() -> bool:
    """
    Validate configuration settings.

    Returns
    -------
    bool
        True if all validations pass

    Raises
    ------
    ValueError
        If any configuration is invalid
    """
    errors = []

    if EARTH_RADIUS_M <= 0:
        errors.append(f"EARTH_RADIUS_M must be positive: {EARTH_RADIUS_M}")

    if not 0 < WGS84_F < 1:
        errors.append(f"WGS84_F must be between 0 and 1: {WGS84_F}")

    if VINCENTY_TOLERANCE <= 0:
        errors.append(f"VINCENTY_TOLERANCE must be positive: {VINCENTY_TOLERANCE}")

    if VINCENTY_MAX_ITER < 1:
        errors.append(f"VINCENTY_MAX_ITER must be positive: {VINCENTY_MAX_ITER}")

    if DEFAULT_DIST_FUNCTION not in ('Haversine', 'Vincenty'):
        errors.append(f"DEFAULT_DIST_FUNCTION is not a known function: {DEFAULT_DIST_FUNCTION}")

    if DEFAULT_DIST_TRANSFORM not in ('level', 'log'):
        errors.append(f"DEFAULT_DIST_TRANSFORM is not a known transform: {DEFAULT_DIST_TRANSFORM}")

    if DEFAULT_DECAY < 0:
        errors.append(f"DEFAULT_DECAY must be non-negative: {DEFAULT_DECAY}")

    if MIN_WEIGHT_DISTANCE_M <= 0:
        errors.append(f"MIN_WEIGHT_DISTANCE_M must be positive: {MIN_WEIGHT_DISTANCE_M}")

    if CANCEL_CHECK_EVERY < 1:
        errors.append(f"CANCEL_CHECK_EVERY must be positive: {CANCEL_CHECK_EVERY}")

    if PARALLEL_MAX_WORKERS is not None and PARALLEL_MAX_WORKERS < 1:
        errors.append(f"PARALLEL_MAX_WORKERS must be positive or None: {PARALLEL_MAX_WORKERS}")

    if errors:
        raise ValueError("Configuration errors:\n" + "\n".join(f"  - {e}" for e in errors))

    return True


# =============================================================================
# RUN OVERRIDES
# =============================================================================

# Keys a YAML override file may set, mapped to their defaults
OVERRIDABLE = {
    'dist_function': DEFAULT_DIST_FUNCTION,
    'dist_transform': DEFAULT_DIST_TRANSFORM,
    'decay': DEFAULT_DECAY,
    'id_col': DEFAULT_ID_COL,
    'lon_col': DEFAULT_LON_COL,
    'lat_col': DEFAULT_LAT_COL,
    'pop_col': DEFAULT_POP_COL,
    'n_workers': PARALLEL_MAX_WORKERS,
    'check_every': CANCEL_CHECK_EVERY,
}


def load_overrides(path: Union[str, Path, None] = None) -> dict[str, Any]:
    """
    Build run settings from defaults plus an optional YAML override file.

    Parameters
    ----------
    path : str or Path, optional
        YAML file with a mapping of keys from ``OVERRIDABLE``.

    Returns
    -------
    dict
        Settings for one run

    Raises
    ------
    ValueError
        If the file contains unknown keys or is not a mapping
    """
    settings = dict(OVERRIDABLE)
    if path is None:
        return settings

    from utils.helpers import load_yaml

    data = load_yaml(path)
    unknown = sorted(set(data) - set(OVERRIDABLE))
    if unknown:
        available = ', '.join(OVERRIDABLE)
        raise ValueError(f"Unknown config keys {unknown}. Available: {available}")

    settings.update(data)
    return settings
