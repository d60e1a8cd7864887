"""
Core distance utilities: primitives, function registry and evaluators.
"""

from spatial.core.geodesic import haversine_distance, vincenty_distance, vincenty_inverse
from spatial.core.distance import (
    DistanceFunction,
    resolve_distance_function,
    resolve_distance_kernel,
    distance_one_to_one,
    distance_one_to_many,
    distance_pairwise,
    distance_matrix,
)

__all__ = [
    "haversine_distance",
    "vincenty_distance",
    "vincenty_inverse",
    "DistanceFunction",
    "resolve_distance_function",
    "resolve_distance_kernel",
    "distance_one_to_one",
    "distance_one_to_many",
    "distance_pairwise",
    "distance_matrix",
]
