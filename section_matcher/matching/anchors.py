"""Anchor a section's endpoints onto a track in one orientation."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np

from ..models import (
    DIRECTION_REVERSE,
    DIRECTION_SAME,
    Direction,
    LatLon,
    MatchConfig,
    MatchResult,
    Section,
)
from .coverage import compute_coverage, extract_trace
from .distance import MetricArray, as_latlon_array, track_distance_m
from .nearest import find_nearest_point

_LOG = logging.getLogger(__name__)


def anchor_points(section: Section, direction: Direction) -> tuple[LatLon, LatLon]:
    """Return the (start, end) section points anchored for ``direction``."""

    first = section.polyline[0]
    last = section.polyline[-1]
    if direction == DIRECTION_SAME:
        return first, last
    if direction == DIRECTION_REVERSE:
        return last, first
    raise ValueError(f"Unknown direction {direction!r}")


def try_match_direction(
    activity_id: str,
    track: Sequence[LatLon] | MetricArray,
    section: Section,
    direction: Direction,
    config: MatchConfig,
    *,
    include_trace: bool = False,
) -> Optional[MatchResult]:
    """Try to match ``section`` onto ``track`` in a single orientation.

    The start anchor is the nearest track point to the orientation's first
    point. The end anchor is searched only from that index onwards, so the
    track has to reach the end after the start. Both anchors must sit within
    the proximity threshold, the span must be non-degenerate and enough of
    the section must be covered inside it.

    Returns:
        A :class:`MatchResult` tagged with ``direction``, or ``None`` when any
        check rejects the orientation.
    """

    points = track if isinstance(track, np.ndarray) else as_latlon_array(track)
    threshold = config.proximity_threshold_m
    start_point, end_point = anchor_points(section, direction)

    start = find_nearest_point(start_point, points)
    if start.distance_m > threshold:
        _log_rejection(
            activity_id, section, direction, "start_too_far", start.distance_m
        )
        return None

    end = find_nearest_point(end_point, points, start.index)
    if end.distance_m > threshold:
        _log_rejection(activity_id, section, direction, "end_too_far", end.distance_m)
        return None

    if end.index <= start.index:
        _log_rejection(activity_id, section, direction, "end_not_after_start", None)
        return None

    coverage = compute_coverage(
        points,
        section.polyline,
        start.index,
        end.index,
        direction,
        threshold,
        config.max_coverage_samples,
    )
    if coverage < config.min_coverage:
        _log_rejection(
            activity_id, section, direction, "insufficient_coverage", coverage
        )
        return None

    trace = None
    if include_trace:
        trace = extract_trace(
            points, section.polyline, start.index, end.index, threshold
        )
    return MatchResult(
        activity_id=activity_id,
        start_index=start.index,
        end_index=end.index,
        direction=direction,
        distance_m=track_distance_m(points, start.index, end.index),
        coverage_ratio=coverage,
        trace=trace,
    )


def _log_rejection(
    activity_id: str,
    section: Section,
    direction: Direction,
    reason: str,
    value: Optional[float],
) -> None:
    if not _LOG.isEnabledFor(logging.DEBUG):
        return
    _LOG.debug(
        "Section %s rejected activity=%s direction=%s reason=%s value=%s",
        section.id,
        activity_id,
        direction,
        reason,
        "n/a" if value is None else f"{value:.3f}",
    )


__all__ = ["anchor_points", "try_match_direction"]
