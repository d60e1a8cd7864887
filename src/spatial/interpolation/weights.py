"""
Inverse-distance weight transforms.
"""

from __future__ import annotations

from enum import Enum
from typing import Union

import numpy as np

from config import DEFAULT_DECAY, DEFAULT_DIST_TRANSFORM, MIN_WEIGHT_DISTANCE_M
from spatial.core.errors import InvalidArgumentError


class WeightTransform(Enum):
    """How a distance is turned into a weight before the decay is applied."""

    LEVEL = "level"
    LOG = "log"


TransformName = Union[str, WeightTransform]


def resolve_transform(transform: TransformName) -> WeightTransform:
    """Look up a weight transform by name ("level" or "log")."""
    if isinstance(transform, WeightTransform):
        return transform
    try:
        return WeightTransform(transform)
    except ValueError:
        available = ', '.join(t.value for t in WeightTransform)
        raise InvalidArgumentError(
            f"Unknown distance transform '{transform}'. Available: {available}"
        ) from None


def check_decay(decay: float) -> float:
    """Validate a decay exponent, returning it as a float."""
    decay = float(decay)
    if not np.isfinite(decay) or decay < 0:
        raise InvalidArgumentError(f"decay must be a finite non-negative number: {decay}")
    return decay


def inverse_distance_weights(
    dist,
    decay: float = DEFAULT_DECAY,
    transform: TransformName = DEFAULT_DIST_TRANSFORM,
    min_distance: float = MIN_WEIGHT_DISTANCE_M,
):
    """
    Convert distances to inverse-distance weights.

    Parameters
    ----------
    dist : float or array-like
        Distances in meters.
    decay : float, optional
        Decay exponent. Default is 2.
    transform : str or WeightTransform, optional
        ``"level"``: ``w = d ** -decay``.
        ``"log"``: ``w = log1p(d) ** -decay``.
    min_distance : float, optional
        Distances below this value are raised to it, so coincident points get
        a large but finite weight.

    Returns
    -------
    float or np.ndarray
        Weights with the same shape as ``dist``.

    Examples
    --------
    >>> inverse_distance_weights([1.0, 2.0, 4.0])
    array([1.    , 0.25  , 0.0625])
    """
    transform = resolve_transform(transform)
    decay = check_decay(decay)
    if min_distance <= 0:
        raise InvalidArgumentError(f"min_distance must be positive: {min_distance}")

    d = np.maximum(np.asarray(dist, dtype=float), min_distance)
    if transform is WeightTransform.LOG:
        d = np.log1p(d)

    weights = d ** -decay
    if weights.ndim == 0:
        return float(weights)
    return weights


def relative_weights(
    dist,
    decay: float = DEFAULT_DECAY,
    transform: TransformName = DEFAULT_DIST_TRANSFORM,
    population=None,
    min_distance: float = MIN_WEIGHT_DISTANCE_M,
) -> np.ndarray:
    """
    Inverse-distance weights of one row, scaled so the largest is 1.

    The weights are proportional to ``inverse_distance_weights(dist, ...)``
    (times ``population`` when given), so any weighted mean built from them is
    unchanged. They are formed in log space as ``-decay * log(d)`` and shifted
    by the row maximum before exponentiating, which keeps large decays and
    very small or very large distances from overflowing to ``inf`` or
    underflowing every weight to 0.

    Parameters
    ----------
    dist : array-like
        Distances in meters from one query point.
    decay, transform, min_distance
        As in ``inverse_distance_weights``.
    population : array-like, optional
        Non-negative multiplier per distance. Zero population gives weight 0.

    Returns
    -------
    np.ndarray
        Weights in [0, 1]. All zeros when no entry has positive weight.

    Examples
    --------
    >>> relative_weights([1.0, 2.0, 4.0])
    array([1.    , 0.25  , 0.0625])
    """
    transform = resolve_transform(transform)
    decay = check_decay(decay)
    if min_distance <= 0:
        raise InvalidArgumentError(f"min_distance must be positive: {min_distance}")

    d = np.maximum(np.asarray(dist, dtype=float), min_distance)
    if transform is WeightTransform.LOG:
        d = np.log1p(d)

    log_w = -decay * np.log(d)
    if population is not None:
        with np.errstate(divide='ignore'):
            log_w = log_w + np.log(np.asarray(population, dtype=float))

    finite = np.isfinite(log_w)
    if not finite.any():
        return np.where(np.isnan(log_w), np.nan, 0.0)
    return np.exp(log_w - log_w[finite].max())
