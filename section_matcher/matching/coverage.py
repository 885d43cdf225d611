"""Coverage validation for a candidate track span."""

from __future__ import annotations

from typing import List, Sequence

import numpy as np

from ..config import SECTION_MATCH_MAX_SAMPLES
from ..models import DIRECTION_REVERSE, Direction, LatLon
from .distance import MetricArray, as_latlon_array, haversine_many_m


def sample_section_points(
    polyline: Sequence[LatLon],
    direction: Direction,
    max_samples: int = SECTION_MATCH_MAX_SAMPLES,
) -> List[LatLon]:
    """Return the evenly strided section points used for coverage checks.

    The polyline is reversed first for ``reverse`` so samples follow the
    order in which the track travels the section. The stride is
    ``len // min(max_samples, len)``, so long sections are thinned to roughly
    ``max_samples`` points whatever the track size.
    """

    total = len(polyline)
    if total == 0:
        return []
    ordered = list(polyline)
    if direction == DIRECTION_REVERSE:
        ordered.reverse()
    sample_count = min(max(1, max_samples), total)
    step = max(1, total // sample_count)
    return ordered[::step]


def compute_coverage(
    track: Sequence[LatLon] | MetricArray,
    polyline: Sequence[LatLon],
    start_index: int,
    end_index: int,
    direction: Direction,
    proximity_threshold_m: float,
    max_samples: int = SECTION_MATCH_MAX_SAMPLES,
) -> float:
    """Return the fraction of sampled section points near the track span.

    A sample counts as covered when at least one track point in
    ``track[start_index:end_index + 1]`` lies within ``proximity_threshold_m``.
    Returns 0.0 when there is nothing to sample or the span is empty.
    """

    samples = sample_section_points(polyline, direction, max_samples)
    if not samples:
        return 0.0
    points = track if isinstance(track, np.ndarray) else as_latlon_array(track)
    span = points[start_index : end_index + 1]
    if span.shape[0] == 0:
        return 0.0

    covered = 0
    for sample in samples:
        distances = haversine_many_m(sample, span)
        if bool(np.any(distances <= proximity_threshold_m)):
            covered += 1
    return covered / len(samples)


def extract_trace(
    track: Sequence[LatLon] | MetricArray,
    polyline: Sequence[LatLon],
    start_index: int,
    end_index: int,
    proximity_threshold_m: float,
) -> List[LatLon]:
    """Return the span points lying within the threshold of any section point.

    Drawing these instead of the raw index slice avoids straight-line
    artefacts where the track wandered away from the section.
    """

    points = track if isinstance(track, np.ndarray) else as_latlon_array(track)
    span = points[start_index : end_index + 1]
    if span.shape[0] == 0 or not polyline:
        return []
    near = np.zeros(span.shape[0], dtype=bool)
    for section_point in polyline:
        near |= haversine_many_m(section_point, span) <= proximity_threshold_m
    return [(float(lat), float(lon)) for lat, lon in span[near]]


__all__ = ["compute_coverage", "extract_trace", "sample_section_points"]
