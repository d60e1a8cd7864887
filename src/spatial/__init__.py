"""
Geodesic distance and inverse-distance interpolation.

This package provides Haversine and Vincenty distances between (lon, lat)
coordinates, the one-to-one / one-to-many / pairwise / matrix query shapes
built on them, and inverse-distance (optionally population) weighted
interpolation and nearest-distance lookup.

Example usage:
    from spatial import distance_matrix, weighted_mean, dist_min

    # Distance from every tract to every monitor (meters)
    dist = distance_matrix(tracts.lon, tracts.lat, monitors.lon, monitors.lat, 'Vincenty')

    # Interpolate a monitored measure at tract centroids
    wm = weighted_mean(tracts.lon, tracts.lat, monitors.lon, monitors.lat,
                       monitors.pm25, ids=tracts.id)

    # Distance to nearest hospital
    md = dist_min(tracts, hospitals)
"""

from spatial.core.errors import (
    SpatialError,
    InvalidArgumentError,
    NumericDegenerateError,
    ConvergenceError,
    OperationCancelled,
    VincentyConvergenceWarning,
)
from spatial.core.geodesic import (
    deg_to_rad,
    rad_to_deg,
    haversine_distance,
    vincenty_distance,
)
from spatial.core.distance import (
    DistanceFunction,
    resolve_distance_function,
    distance_one_to_one,
    distance_one_to_many,
    distance_pairwise,
    distance_matrix,
)
from spatial.interpolation import (
    CancellationToken,
    WeightTransform,
    inverse_distance_weights,
    weighted_mean,
    popweighted_mean,
    minimum_distance,
)
from spatial.frames import (
    dist_df,
    dist_mtom_df,
    dist_weighted_mean,
    popdist_weighted_mean,
    dist_min,
)

__all__ = [
    # Errors
    "SpatialError",
    "InvalidArgumentError",
    "NumericDegenerateError",
    "ConvergenceError",
    "OperationCancelled",
    "VincentyConvergenceWarning",
    # Primitives
    "deg_to_rad",
    "rad_to_deg",
    "haversine_distance",
    "vincenty_distance",
    # Distance
    "DistanceFunction",
    "resolve_distance_function",
    "distance_one_to_one",
    "distance_one_to_many",
    "distance_pairwise",
    "distance_matrix",
    # Interpolation
    "CancellationToken",
    "WeightTransform",
    "inverse_distance_weights",
    "weighted_mean",
    "popweighted_mean",
    "minimum_distance",
    # DataFrames
    "dist_df",
    "dist_mtom_df",
    "dist_weighted_mean",
    "popdist_weighted_mean",
    "dist_min",
]
