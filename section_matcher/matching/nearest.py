"""Nearest-point search along a single track."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from ..models import LatLon
from .distance import MetricArray, as_latlon_array, haversine_many_m


@dataclass(frozen=True, slots=True)
class NearestPoint:
    """Index of the closest track point and its distance."""

    index: int
    distance_m: float


def find_nearest_point(
    point: LatLon,
    track: Sequence[LatLon] | MetricArray,
    start_index: int = 0,
) -> NearestPoint:
    """Return the track point closest to ``point``, scanning from ``start_index``.

    The scan is linear in the track length. Single-activity tracks hold
    thousands of points, so a spatial index does not pay for itself here;
    swap one in for multi-day recordings without changing this contract.
    Ties resolve to the earliest index.

    Raises:
        ValueError: If the track is empty or ``start_index`` is outside
            ``[0, len(track))``.
    """

    points = track if isinstance(track, np.ndarray) else as_latlon_array(track)
    count = points.shape[0]
    if count == 0:
        raise ValueError("Cannot search an empty track")
    if not 0 <= start_index < count:
        raise ValueError(f"start_index {start_index} outside track of {count} points")

    distances = haversine_many_m(point, points[start_index:])
    offset = int(np.argmin(distances))
    return NearestPoint(
        index=start_index + offset,
        distance_m=float(distances[offset]),
    )


__all__ = ["NearestPoint", "find_nearest_point"]
