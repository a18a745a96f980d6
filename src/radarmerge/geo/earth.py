from __future__ import annotations
import math
from typing import Union

import numpy as np

EARTH_RADIUS_M = 6_371_000.0  # mean spherical radius (m)

# Fraction of the geometric curvature drop applied to the line of sight.
# Values below 1 approximate atmospheric refraction (coefficient = 1 / k).
CURVATURE_COEFFICIENT = 0.5

ArrayOrFloat = Union[float, np.ndarray]


def curvature_drop(distance_m: ArrayOrFloat, earth_radius_m: float = EARTH_RADIUS_M,
                   coefficient: float = CURVATURE_COEFFICIENT) -> ArrayOrFloat:
    """Height lost by a straight sight line over `distance_m`: coefficient * d^2 / (2R)."""
    return coefficient * (distance_m * distance_m) / (2.0 * earth_radius_m)


def single_horizon_distance(observer_height_m: float, earth_radius_m: float = EARTH_RADIUS_M,
                            coefficient: float = CURVATURE_COEFFICIENT) -> float:
    """Distance at which a level sight line from `observer_height_m` meets the ground."""
    if observer_height_m <= 0 or coefficient <= 0:
        return 0.0 if observer_height_m <= 0 else math.inf
    return math.sqrt(2.0 * earth_radius_m * observer_height_m / coefficient)


__all__ = [
    "EARTH_RADIUS_M",
    "CURVATURE_COEFFICIENT",
    "curvature_drop",
    "single_horizon_distance",
]
