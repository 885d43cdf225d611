"""Public entry points for matching a section against a single track."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..models import (
    DEFAULT_MATCH_CONFIG,
    DIRECTION_REVERSE,
    DIRECTION_SAME,
    LatLon,
    MatchConfig,
    MatchResult,
    Section,
)
from .anchors import anchor_points, try_match_direction
from .coverage import compute_coverage, extract_trace, sample_section_points
from .distance import (
    EARTH_RADIUS_M,
    as_latlon_array,
    haversine_m,
    haversine_many_m,
    track_distance_m,
)
from .nearest import NearestPoint, find_nearest_point

_LOG = logging.getLogger(__name__)

# ``same`` is tried first; the first orientation accepted wins because a
# single traversal only has one direction.
_ORIENTATIONS = (DIRECTION_SAME, DIRECTION_REVERSE)


def source_match(section: Section) -> MatchResult:
    """Return the match of a section against the track it was cut from."""

    return MatchResult(
        activity_id=section.source_activity_id,
        start_index=section.start_index,
        end_index=section.end_index,
        direction=DIRECTION_SAME,
        distance_m=section.distance_m,
    )


def match_track_to_section(
    activity_id: str,
    track: Sequence[LatLon],
    section: Section,
    config: Optional[MatchConfig] = None,
    *,
    include_trace: bool = False,
) -> Optional[MatchResult]:
    """Locate ``section`` inside ``track`` and report where and which way.

    Args:
        activity_id: Identifier of the activity that recorded ``track``.
        track: Ordered lat/lon points of the activity.
        section: Section to look for.
        config: Matching tolerances; :data:`DEFAULT_MATCH_CONFIG` when omitted.
        include_trace: Attach the near-section points of the matched span.

    Returns:
        The accepted :class:`MatchResult`, or ``None`` when the track or the
        section has fewer than two points or neither orientation matches.
        The section's own source activity always matches in the ``same``
        direction using the stored indices and length.
    """

    if len(track) < 2 or not section.is_matchable:
        return None
    if activity_id == section.source_activity_id:
        return source_match(section)

    config = config or DEFAULT_MATCH_CONFIG
    points = as_latlon_array(track)
    for direction in _ORIENTATIONS:
        result = try_match_direction(
            activity_id,
            points,
            section,
            direction,
            config,
            include_trace=include_trace,
        )
        if result is not None:
            _LOG.debug(
                "Section %s matched activity=%s direction=%s span=%d..%d",
                section.id,
                activity_id,
                direction,
                result.start_index,
                result.end_index,
            )
            return result
    return None


__all__ = [
    "EARTH_RADIUS_M",
    "NearestPoint",
    "anchor_points",
    "as_latlon_array",
    "compute_coverage",
    "extract_trace",
    "find_nearest_point",
    "haversine_m",
    "haversine_many_m",
    "match_track_to_section",
    "sample_section_points",
    "source_match",
    "track_distance_m",
    "try_match_direction",
]
