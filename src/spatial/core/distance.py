"""
Distance function registry and pairwise evaluators.

Provides lookup of a distance primitive by name and the four query shapes
built on it: one-to-one, one-to-many, elementwise pairs and the full
many-to-many matrix.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Union

import numpy as np

from config import DEFAULT_DIST_FUNCTION
from spatial.core.errors import InvalidArgumentError
from spatial.core.geodesic import haversine_distance, vincenty_distance, vincenty_inverse


class DistanceFunction(Enum):
    """Supported distance formulas, keyed by their case-sensitive name."""

    HAVERSINE = "Haversine"
    VINCENTY = "Vincenty"


_FUNCTIONS: dict[DistanceFunction, Callable] = {
    DistanceFunction.HAVERSINE: haversine_distance,
    DistanceFunction.VINCENTY: vincenty_distance,
}

FunctionName = Union[str, DistanceFunction]


def _haversine_kernel(lon1, lat1, lon2, lat2):
    return haversine_distance(lon1, lat1, lon2, lat2), 0


_KERNELS: dict[DistanceFunction, Callable] = {
    DistanceFunction.HAVERSINE: _haversine_kernel,
    DistanceFunction.VINCENTY: vincenty_inverse,
}


def resolve_distance_function(funname: FunctionName) -> Callable:
    """
    Look up a distance primitive by name.

    Parameters
    ----------
    funname : str or DistanceFunction
        "Haversine" or "Vincenty" (case-sensitive).

    Returns
    -------
    Callable
        Function ``(lon1, lat1, lon2, lat2) -> meters``.

    Raises
    ------
    InvalidArgumentError
        If the name is not a known distance function.
    """
    return _FUNCTIONS[_lookup(funname)]


def resolve_distance_kernel(funname: FunctionName) -> Callable:
    """
    Look up a distance primitive that also reports non-convergence.

    The returned function maps ``(lon1, lat1, lon2, lat2)`` to
    ``(meters, n_failed)`` and never warns or raises on its own; the caller
    applies the convergence policy. Haversine always reports 0 failures.
    """
    return _KERNELS[_lookup(funname)]


def _lookup(funname: FunctionName) -> DistanceFunction:
    if isinstance(funname, DistanceFunction):
        return funname
    try:
        return DistanceFunction(funname)
    except ValueError:
        available = ', '.join(f.value for f in DistanceFunction)
        raise InvalidArgumentError(
            f"Unknown distance function '{funname}'. Available: {available}"
        ) from None


def coordinate_set(lon, lat, name: str = "coordinates") -> tuple[np.ndarray, np.ndarray]:
    """
    Convert parallel longitude/latitude sequences to 1-D float arrays.

    Raises
    ------
    InvalidArgumentError
        If the sequences are not one-dimensional or differ in length.
    """
    lon = np.asarray(lon, dtype=float)
    lat = np.asarray(lat, dtype=float)
    if lon.ndim != 1 or lat.ndim != 1:
        raise InvalidArgumentError(f"{name}: longitude and latitude must be 1-D sequences")
    if len(lon) != len(lat):
        raise InvalidArgumentError(
            f"{name}: longitude and latitude lengths differ ({len(lon)} != {len(lat)})"
        )
    return lon, lat


def evaluate_one_to_many(fun: Callable, xlon: float, xlat: float, ylon: np.ndarray, ylat: np.ndarray) -> np.ndarray:
    """Apply an already-resolved primitive from one point to a validated set."""
    return np.atleast_1d(fun(float(xlon), float(xlat), ylon, ylat))


def distance_one_to_one(
    xlon: float,
    xlat: float,
    ylon: float,
    ylat: float,
    funname: FunctionName = DEFAULT_DIST_FUNCTION,
) -> float:
    """Distance in meters between two points."""
    fun = resolve_distance_function(funname)
    return float(fun(float(xlon), float(xlat), float(ylon), float(ylat)))


def distance_one_to_many(
    xlon: float,
    xlat: float,
    ylon,
    ylat,
    funname: FunctionName = DEFAULT_DIST_FUNCTION,
) -> np.ndarray:
    """
    Distances from a single point to each point of a coordinate set.

    Returns
    -------
    np.ndarray
        Array of length k in the order of ``ylon``/``ylat``.
    """
    fun = resolve_distance_function(funname)
    ylon, ylat = coordinate_set(ylon, ylat, "y")
    return evaluate_one_to_many(fun, xlon, xlat, ylon, ylat)


def distance_pairwise(
    xlon,
    xlat,
    ylon,
    ylat,
    funname: FunctionName = DEFAULT_DIST_FUNCTION,
) -> np.ndarray:
    """
    Distances between corresponding points of two coordinate sets.

    ``result[i] = distance(x[i], y[i])``.

    Raises
    ------
    InvalidArgumentError
        If the two sets differ in size.
    """
    fun = resolve_distance_function(funname)
    xlon, xlat = coordinate_set(xlon, xlat, "x")
    ylon, ylat = coordinate_set(ylon, ylat, "y")
    if len(xlon) != len(ylon):
        raise InvalidArgumentError(
            f"Coordinate sets differ in size ({len(xlon)} != {len(ylon)})"
        )
    return np.atleast_1d(fun(xlon, xlat, ylon, ylat))


def distance_matrix(
    xlon,
    xlat,
    ylon,
    ylat,
    funname: FunctionName = DEFAULT_DIST_FUNCTION,
) -> np.ndarray:
    """
    Compute the distance between every pair of points in two sets.

    Parameters
    ----------
    xlon, xlat : array-like
        First coordinate set (n points).
    ylon, ylat : array-like
        Second coordinate set (k points).
    funname : str or DistanceFunction, optional
        "Haversine" (default) or "Vincenty".

    Returns
    -------
    np.ndarray
        Matrix of shape (n, k) with ``result[i, j] = distance(x[i], y[j])``.

    Notes
    -----
    Memory complexity is O(n * k). 10,000 x 10,000 points is ~800 MB;
    use the aggregation functions when only a per-row reduction is needed.
    """
    fun = resolve_distance_function(funname)
    xlon, xlat = coordinate_set(xlon, xlat, "x")
    ylon, ylat = coordinate_set(ylon, ylat, "y")

    dist = fun(
        xlon[:, np.newaxis],  # (n, 1)
        xlat[:, np.newaxis],
        ylon[np.newaxis, :],  # (1, k)
        ylat[np.newaxis, :],
    )
    return np.asarray(dist, dtype=float).reshape(len(xlon), len(ylon))
