"""Great-circle distance helpers for lat/lon coordinates."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np
from numpy.typing import NDArray

from ..models import LatLon

MetricArray = NDArray[np.float64]

EARTH_RADIUS_M = 6_371_000.0


def haversine_m(first: LatLon, second: LatLon) -> float:
    """Return the haversine distance in metres between two lat/lon points."""

    lat1, lon1 = first
    lat2, lon2 = second
    sin = math.sin
    cos = math.cos
    radians = math.radians
    lat1_rad = radians(lat1)
    lat2_rad = radians(lat2)
    delta_lat = lat2_rad - lat1_rad
    delta_lon = radians(lon2 - lon1)
    sin_half_lat = sin(delta_lat / 2.0)
    sin_half_lon = sin(delta_lon / 2.0)
    a = sin_half_lat**2 + cos(lat1_rad) * cos(lat2_rad) * sin_half_lon**2
    # Rounding can push ``a`` a hair outside [0, 1] near antipodes.
    a = min(max(a, 0.0), 1.0)
    c = 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))
    return EARTH_RADIUS_M * c


def haversine_many_m(point: LatLon, points: MetricArray) -> MetricArray:
    """Vectorised :func:`haversine_m` from ``point`` to each row of ``points``.

    ``points`` is an ``(N, 2)`` array of lat/lon degrees.
    """

    if points.size == 0:
        return np.empty(0, dtype=float)
    lat1 = math.radians(point[0])
    lon1 = math.radians(point[1])
    lat2 = np.radians(points[:, 0])
    lon2 = np.radians(points[:, 1])
    sin_half_lat = np.sin((lat2 - lat1) / 2.0)
    sin_half_lon = np.sin((lon2 - lon1) / 2.0)
    a = sin_half_lat**2 + math.cos(lat1) * np.cos(lat2) * sin_half_lon**2
    a = np.clip(a, 0.0, 1.0)
    c = 2.0 * np.arctan2(np.sqrt(a), np.sqrt(1.0 - a))
    return EARTH_RADIUS_M * c


def track_distance_m(track: Sequence[LatLon], start_index: int, end_index: int) -> float:
    """Sum consecutive haversine distances over ``track[start_index:end_index + 1]``.

    This is the travelled length of a matched span and may differ from the
    section's own cached length because of GPS noise and sampling rate.
    """

    total = 0.0
    if end_index <= start_index:
        return total
    previous = track[start_index]
    for idx in range(start_index + 1, end_index + 1):
        current = track[idx]
        total += haversine_m(previous, current)
        previous = current
    return total


def as_latlon_array(points: Sequence[LatLon]) -> MetricArray:
    """Return ``points`` as an ``(N, 2)`` float array."""

    array = np.asarray(points, dtype=float)
    if array.size == 0:
        return array.reshape(0, 2)
    if array.ndim != 2 or array.shape[1] != 2:
        raise ValueError("Expected a sequence of lat/lon pairs")
    return array


__all__ = [
    "EARTH_RADIUS_M",
    "as_latlon_array",
    "haversine_m",
    "haversine_many_m",
    "track_distance_m",
]
