"""
DataFrame entry points.

Thin adapters that pull coordinate, measure, population and id columns out of
pandas DataFrames by name and hand the arrays to the distance and
aggregation engine.

Usage
-----
    from spatial.frames import dist_weighted_mean, popdist_weighted_mean, dist_min

    wm = dist_weighted_mean(tracts, monitors, measure_col='pm25')
    pwm = popdist_weighted_mean(tracts, blocks, measure_col='income', pop_col='pop')
    md = dist_min(tracts, hospitals, x_id='geoid')
"""

from __future__ import annotations

from typing import Optional

import numpy as np
import pandas as pd

from config import (
    DEFAULT_DECAY,
    DEFAULT_DIST_FUNCTION,
    DEFAULT_DIST_TRANSFORM,
    DEFAULT_ID_COL,
    DEFAULT_LAT_COL,
    DEFAULT_LON_COL,
    DEFAULT_POP_COL,
)
from spatial.core.distance import distance_matrix, distance_pairwise
from spatial.core.errors import InvalidArgumentError
from spatial.interpolation.aggregate import minimum_distance, weighted_mean
from spatial.interpolation.cancel import CancellationToken


def _columns(df: pd.DataFrame, cols: list[str], frame: str) -> list[np.ndarray]:
    """Extract columns as arrays, raising InvalidArgumentError if any is missing."""
    missing = [c for c in cols if c not in df.columns]
    if missing:
        available = ', '.join(map(str, df.columns))
        raise InvalidArgumentError(
            f"{frame} is missing column(s) {missing}. Available: {available}"
        )
    return [df[c].to_numpy() for c in cols]


def dist_df(
    df: pd.DataFrame,
    x_lon_col: str,
    x_lat_col: str,
    y_lon_col: str,
    y_lat_col: str,
    dist_function: str = DEFAULT_DIST_FUNCTION,
) -> pd.Series:
    """
    Distance between corresponding coordinate pairs stored in one frame.

    Returns
    -------
    pd.Series
        Distances in meters, indexed like ``df``. Suitable for assigning as a
        new column.

    Examples
    --------
    >>> trips['dist_m'] = dist_df(trips, 'o_lon', 'o_lat', 'd_lon', 'd_lat')
    """
    xlon, xlat, ylon, ylat = _columns(df, [x_lon_col, x_lat_col, y_lon_col, y_lat_col], "df")
    dist = distance_pairwise(xlon, xlat, ylon, ylat, dist_function)
    return pd.Series(dist, index=df.index, name="distance")


def dist_mtom_df(
    x_df: pd.DataFrame,
    y_df: pd.DataFrame,
    x_lon_col: str = DEFAULT_LON_COL,
    x_lat_col: str = DEFAULT_LAT_COL,
    y_lon_col: str = DEFAULT_LON_COL,
    y_lat_col: str = DEFAULT_LAT_COL,
    dist_function: str = DEFAULT_DIST_FUNCTION,
) -> pd.DataFrame:
    """
    Distance matrix between the rows of two frames.

    Returns
    -------
    pd.DataFrame
        Shape (len(x_df), len(y_df)); index from ``x_df``, columns from the
        index of ``y_df``.
    """
    xlon, xlat = _columns(x_df, [x_lon_col, x_lat_col], "x_df")
    ylon, ylat = _columns(y_df, [y_lon_col, y_lat_col], "y_df")
    dist = distance_matrix(xlon, xlat, ylon, ylat, dist_function)
    return pd.DataFrame(dist, index=x_df.index, columns=y_df.index)


def dist_weighted_mean(
    x_df: pd.DataFrame,
    y_df: pd.DataFrame,
    measure_col: str,
    x_id: str = DEFAULT_ID_COL,
    x_lon_col: str = DEFAULT_LON_COL,
    x_lat_col: str = DEFAULT_LAT_COL,
    y_lon_col: str = DEFAULT_LON_COL,
    y_lat_col: str = DEFAULT_LAT_COL,
    dist_function: str = DEFAULT_DIST_FUNCTION,
    dist_transform: str = DEFAULT_DIST_TRANSFORM,
    decay: float = DEFAULT_DECAY,
    token: Optional[CancellationToken] = None,
    n_workers: Optional[int] = None,
) -> pd.DataFrame:
    """
    Interpolate inverse-distance-weighted measures.

    Each ``x_df`` coordinate gets the mean of ``y_df[measure_col]`` weighted by
    inverse distance, so measures taken nearby count more.

    Parameters
    ----------
    x_df : pd.DataFrame
        Coordinates that need weighted measures.
    y_df : pd.DataFrame
        Coordinates at which measures were taken.
    measure_col : str
        Measure column in ``y_df``.
    x_id : str, optional
        Unique identifier column in ``x_df``. Default "id".
    x_lon_col, x_lat_col, y_lon_col, y_lat_col : str, optional
        Coordinate columns. Default "lon" / "lat".
    dist_function : str, optional
        "Haversine" (default) or "Vincenty".
    dist_transform : str, optional
        "level" (default) or "log".
    decay : float, optional
        Distance weight decay. Default 2.

    Returns
    -------
    pd.DataFrame
        Columns ``id`` and ``wmeasure``.
    """
    ids, xlon, xlat = _columns(x_df, [x_id, x_lon_col, x_lat_col], "x_df")
    ylon, ylat, meas = _columns(y_df, [y_lon_col, y_lat_col, measure_col], "y_df")
    return weighted_mean(
        xlon, xlat, ylon, ylat, meas,
        ids=ids,
        dist_function=dist_function,
        dist_transform=dist_transform,
        decay=decay,
        token=token,
        n_workers=n_workers,
    )


def popdist_weighted_mean(
    x_df: pd.DataFrame,
    y_df: pd.DataFrame,
    measure_col: str,
    x_id: str = DEFAULT_ID_COL,
    x_lon_col: str = DEFAULT_LON_COL,
    x_lat_col: str = DEFAULT_LAT_COL,
    y_lon_col: str = DEFAULT_LON_COL,
    y_lat_col: str = DEFAULT_LAT_COL,
    pop_col: str = DEFAULT_POP_COL,
    dist_function: str = DEFAULT_DIST_FUNCTION,
    dist_transform: str = DEFAULT_DIST_TRANSFORM,
    decay: float = DEFAULT_DECAY,
    token: Optional[CancellationToken] = None,
    n_workers: Optional[int] = None,
) -> pd.DataFrame:
    """
    Interpolate population- and inverse-distance-weighted measures.

    Like ``dist_weighted_mean``, with each weight also multiplied by
    ``y_df[pop_col]`` so that measures from more populous places count more.

    Returns
    -------
    pd.DataFrame
        Columns ``id`` and ``wmeasure``.
    """
    ids, xlon, xlat = _columns(x_df, [x_id, x_lon_col, x_lat_col], "x_df")
    ylon, ylat, meas, pop = _columns(
        y_df, [y_lon_col, y_lat_col, measure_col, pop_col], "y_df"
    )
    return weighted_mean(
        xlon, xlat, ylon, ylat, meas,
        ids=ids,
        population=pop,
        dist_function=dist_function,
        dist_transform=dist_transform,
        decay=decay,
        token=token,
        n_workers=n_workers,
    )


def dist_min(
    x_df: pd.DataFrame,
    y_df: pd.DataFrame,
    x_id: str = DEFAULT_ID_COL,
    x_lon_col: str = DEFAULT_LON_COL,
    x_lat_col: str = DEFAULT_LAT_COL,
    y_lon_col: str = DEFAULT_LON_COL,
    y_lat_col: str = DEFAULT_LAT_COL,
    dist_function: str = DEFAULT_DIST_FUNCTION,
    token: Optional[CancellationToken] = None,
    n_workers: Optional[int] = None,
) -> pd.DataFrame:
    """
    Find the minimum distance from each ``x_df`` row to the ``y_df`` points.

    Returns
    -------
    pd.DataFrame
        Columns ``id`` and ``mindist`` (meters).
    """
    ids, xlon, xlat = _columns(x_df, [x_id, x_lon_col, x_lat_col], "x_df")
    ylon, ylat = _columns(y_df, [y_lon_col, y_lat_col], "y_df")
    return minimum_distance(
        xlon, xlat, ylon, ylat,
        ids=ids,
        dist_function=dist_function,
        token=token,
        n_workers=n_workers,
    )
