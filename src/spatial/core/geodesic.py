"""
Geodesic distance primitives.

Provides great-circle (Haversine) distance on a sphere and Vincenty inverse
distance on the WGS84 ellipsoid. Both functions take coordinates in decimal
degrees as (lon, lat) pairs, broadcast like numpy ufuncs, and return meters.
"""

from __future__ import annotations

import logging
import warnings
from typing import Union

import numpy as np

from config import (
    EARTH_RADIUS_M,
    VINCENTY_MAX_ITER,
    VINCENTY_STRICT,
    VINCENTY_TOLERANCE,
    WGS84_A,
    WGS84_B,
    WGS84_F,
)
from spatial.core.errors import ConvergenceError, VincentyConvergenceWarning

logger = logging.getLogger(__name__)

ArrayLike = Union[float, np.ndarray]


def deg_to_rad(degrees: ArrayLike) -> ArrayLike:
    """Convert decimal degrees to radians."""
    return degrees * np.pi / 180.0


def rad_to_deg(radians: ArrayLike) -> ArrayLike:
    """Convert radians to decimal degrees."""
    return radians * 180.0 / np.pi


def _broadcast(*values) -> tuple[np.ndarray, ...]:
    """Convert inputs to float arrays of a common shape."""
    return tuple(np.broadcast_arrays(*(np.asarray(v, dtype=float) for v in values)))


def _finish(dist: np.ndarray) -> ArrayLike:
    """Return a plain float for 0-d results."""
    if dist.ndim == 0:
        return float(dist)
    return dist


def haversine_distance(
    lon1: ArrayLike,
    lat1: ArrayLike,
    lon2: ArrayLike,
    lat2: ArrayLike,
    radius: float = EARTH_RADIUS_M,
) -> ArrayLike:
    """
    Calculate great-circle distance using the Haversine formula.

    Parameters
    ----------
    lon1, lat1 : float or array-like
        Longitude and latitude of the first point(s) in degrees.
    lon2, lat2 : float or array-like
        Longitude and latitude of the second point(s) in degrees.
    radius : float, optional
        Radius of the sphere in meters. Default is Earth's mean radius.

    Returns
    -------
    float or np.ndarray
        Distance in meters, with the broadcast shape of the inputs.

    Examples
    --------
    >>> dist = haversine_distance(0, 0, 0, 1)
    >>> print(f"{dist:.0f} m")
    111195 m
    """
    lon1, lat1, lon2, lat2 = _broadcast(lon1, lat1, lon2, lat2)

    lat1_rad = deg_to_rad(lat1)
    lat2_rad = deg_to_rad(lat2)
    dlat = deg_to_rad(lat2 - lat1)
    dlon = deg_to_rad(lon2 - lon1)

    a = np.sin(dlat / 2) ** 2 + np.cos(lat1_rad) * np.cos(lat2_rad) * np.sin(dlon / 2) ** 2
    # Rounding can push a slightly outside [0, 1]
    a = np.clip(a, 0.0, 1.0)
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))

    return _finish(radius * c)


def _sphere_terms(lam, sin_u1, cos_u1, sin_u2, cos_u2):
    """Auxiliary-sphere quantities for the current lambda."""
    sin_lam = np.sin(lam)
    cos_lam = np.cos(lam)

    sin_sigma = np.sqrt(
        (cos_u2 * sin_lam) ** 2 + (cos_u1 * sin_u2 - sin_u1 * cos_u2 * cos_lam) ** 2
    )
    cos_sigma = sin_u1 * sin_u2 + cos_u1 * cos_u2 * cos_lam
    sigma = np.arctan2(sin_sigma, cos_sigma)

    coincident = sin_sigma == 0
    sin_alpha = cos_u1 * cos_u2 * sin_lam / np.where(coincident, 1.0, sin_sigma)
    cos_sq_alpha = 1 - sin_alpha ** 2

    # Equatorial lines have cos^2(alpha) == 0
    equatorial = cos_sq_alpha == 0
    cos_2sigma_m = np.where(
        equatorial,
        0.0,
        cos_sigma - 2 * sin_u1 * sin_u2 / np.where(equatorial, 1.0, cos_sq_alpha),
    )

    return sin_sigma, cos_sigma, sigma, sin_alpha, cos_sq_alpha, cos_2sigma_m


def vincenty_inverse(
    lon1: ArrayLike,
    lat1: ArrayLike,
    lon2: ArrayLike,
    lat2: ArrayLike,
    tolerance: float = VINCENTY_TOLERANCE,
    max_iter: int = VINCENTY_MAX_ITER,
) -> tuple[ArrayLike, int]:
    """
    Run the Vincenty inverse iteration without a non-convergence policy.

    Returns
    -------
    tuple
        ``(distance, n_failed)``: distances in meters as in
        ``vincenty_distance`` and the number of pairs still moving by more
        than ``tolerance`` after ``max_iter`` iterations. Those pairs carry
        the value from the last iteration.
    """
    lon1, lat1, lon2, lat2 = _broadcast(lon1, lat1, lon2, lat2)

    big_l = deg_to_rad(lon2 - lon1)
    u1 = np.arctan((1 - WGS84_F) * np.tan(deg_to_rad(lat1)))
    u2 = np.arctan((1 - WGS84_F) * np.tan(deg_to_rad(lat2)))
    sin_u1, cos_u1 = np.sin(u1), np.cos(u1)
    sin_u2, cos_u2 = np.sin(u2), np.cos(u2)

    lam = np.array(big_l, copy=True)
    active = np.ones(lam.shape, dtype=bool)

    for _ in range(max_iter):
        sin_sigma, cos_sigma, sigma, sin_alpha, cos_sq_alpha, cos_2sigma_m = _sphere_terms(
            lam, sin_u1, cos_u1, sin_u2, cos_u2
        )
        c = WGS84_F / 16 * cos_sq_alpha * (4 + WGS84_F * (4 - 3 * cos_sq_alpha))
        lam_next = big_l + (1 - c) * WGS84_F * sin_alpha * (
            sigma + c * sin_sigma * (cos_2sigma_m + c * cos_sigma * (-1 + 2 * cos_2sigma_m ** 2))
        )

        moved = np.abs(lam_next - lam)
        lam = np.where(active, lam_next, lam)
        # NaN inputs stop iterating and propagate as NaN
        active &= ~((moved < tolerance) | np.isnan(moved))
        if not active.any():
            break

    sin_sigma, cos_sigma, sigma, _, cos_sq_alpha, cos_2sigma_m = _sphere_terms(
        lam, sin_u1, cos_u1, sin_u2, cos_u2
    )

    u_sq = cos_sq_alpha * (WGS84_A ** 2 - WGS84_B ** 2) / WGS84_B ** 2
    big_a = 1 + u_sq / 16384 * (4096 + u_sq * (-768 + u_sq * (320 - 175 * u_sq)))
    big_b = u_sq / 1024 * (256 + u_sq * (-128 + u_sq * (74 - 47 * u_sq)))
    delta_sigma = big_b * sin_sigma * (
        cos_2sigma_m
        + big_b / 4 * (
            cos_sigma * (-1 + 2 * cos_2sigma_m ** 2)
            - big_b / 6 * cos_2sigma_m * (-3 + 4 * sin_sigma ** 2) * (-3 + 4 * cos_2sigma_m ** 2)
        )
    )
    dist = WGS84_B * big_a * (sigma - delta_sigma)

    same = (lon1 == lon2) & (lat1 == lat2)
    dist = np.where(same | (sin_sigma == 0), 0.0, dist)

    return _finish(dist), int(np.count_nonzero(active))


def vincenty_distance(
    lon1: ArrayLike,
    lat1: ArrayLike,
    lon2: ArrayLike,
    lat2: ArrayLike,
    tolerance: float = VINCENTY_TOLERANCE,
    max_iter: int = VINCENTY_MAX_ITER,
    strict: bool = VINCENTY_STRICT,
) -> ArrayLike:
    """
    Calculate geodesic distance on the WGS84 ellipsoid (Vincenty inverse).

    The longitude difference on the auxiliary sphere is iterated until it
    changes by less than ``tolerance`` radians. Entries that converge are
    frozen while the rest keep iterating, so array inputs behave exactly like
    repeated scalar calls.

    Parameters
    ----------
    lon1, lat1 : float or array-like
        Longitude and latitude of the first point(s) in degrees.
    lon2, lat2 : float or array-like
        Longitude and latitude of the second point(s) in degrees.
    tolerance : float, optional
        Convergence threshold on lambda, in radians.
    max_iter : int, optional
        Iteration cap.
    strict : bool, optional
        If True, raise ``ConvergenceError`` when any pair fails to converge.
        Otherwise return the value from the last iteration and issue a
        ``VincentyConvergenceWarning``.

    Returns
    -------
    float or np.ndarray
        Distance in meters, with the broadcast shape of the inputs.

    Raises
    ------
    ConvergenceError
        If ``strict`` is True and the iteration cap is reached (near-antipodal
        points).

    Notes
    -----
    Identical coordinates return exactly 0 without entering the iteration's
    division by sin(sigma). Near-antipodal pairs that hit the cap can be off
    by tens of kilometers.
    """
    dist, n_failed = vincenty_inverse(lon1, lat1, lon2, lat2, tolerance, max_iter)
    if n_failed:
        message = (
            f"Vincenty did not converge for {n_failed} coordinate pair(s) "
            f"within {max_iter} iterations (near-antipodal points)"
        )
        if strict:
            raise ConvergenceError(message, n_failed=n_failed)
        logger.warning(message)
        warnings.warn(message, VincentyConvergenceWarning, stacklevel=2)
    return dist
