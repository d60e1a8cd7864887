"""
Inverse-distance weighting and row-wise aggregation.
"""

from spatial.interpolation.cancel import CancellationToken
from spatial.interpolation.weights import (
    WeightTransform,
    inverse_distance_weights,
    relative_weights,
)
from spatial.interpolation.aggregate import (
    weighted_mean,
    popweighted_mean,
    minimum_distance,
)

__all__ = [
    "CancellationToken",
    "WeightTransform",
    "inverse_distance_weights",
    "relative_weights",
    "weighted_mean",
    "popweighted_mean",
    "minimum_distance",
]
