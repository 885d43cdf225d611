"""Dataclasses describing sections, match settings and match results."""

from __future__ import annotations

from dataclasses import dataclass, field
import math
from typing import Any, Dict, List, Literal, Optional, Sequence, Tuple

import numpy as np
from polyline import decode as polyline_decode

from .config import (
    SECTION_MATCH_MAX_SAMPLES,
    SECTION_MATCH_MIN_COVERAGE,
    SECTION_MATCH_PROXIMITY_M,
)
from .errors import InvalidTrackError


LatLon = Tuple[float, float]
Track = Sequence[LatLon]
Direction = Literal["same", "reverse"]

DIRECTION_SAME: Direction = "same"
DIRECTION_REVERSE: Direction = "reverse"


@dataclass(slots=True)
class Section:
    """Reference polyline the user wants to find repeated traversals of.

    ``start_index``/``end_index`` locate the polyline inside the track of
    ``source_activity_id`` it was cut from, and ``distance_m`` is the cached
    length of that cut.
    """

    id: str
    name: str
    polyline: List[LatLon]
    source_activity_id: str
    start_index: int
    end_index: int
    distance_m: float
    sport_type: Optional[str] = None
    created_at: Optional[str] = None

    @property
    def is_matchable(self) -> bool:
        """Return True when the polyline has enough points to anchor."""

        return len(self.polyline) >= 2

    @classmethod
    def from_track_slice(
        cls,
        *,
        section_id: str,
        name: str,
        source_activity_id: str,
        track: Track,
        start_index: int,
        end_index: int,
        sport_type: Optional[str] = None,
        created_at: Optional[str] = None,
    ) -> "Section":
        """Cut a section out of a recorded track (inclusive index span)."""

        from .matching.distance import track_distance_m

        if start_index < 0 or end_index >= len(track):
            raise ValueError(
                f"Section span {start_index}..{end_index} outside track of "
                f"{len(track)} points"
            )
        if end_index <= start_index:
            raise ValueError("Section end_index must be greater than start_index")
        points = coerce_track(track[start_index : end_index + 1])
        return cls(
            id=section_id,
            name=name,
            polyline=points,
            source_activity_id=source_activity_id,
            start_index=start_index,
            end_index=end_index,
            distance_m=track_distance_m(points, 0, len(points) - 1),
            sport_type=sport_type,
            created_at=created_at,
        )

    @classmethod
    def from_encoded_polyline(
        cls,
        *,
        section_id: str,
        name: str,
        encoded: str,
        source_activity_id: str,
        start_index: int,
        end_index: int,
        distance_m: Optional[float] = None,
        sport_type: Optional[str] = None,
        created_at: Optional[str] = None,
    ) -> "Section":
        """Build a section from a Google encoded polyline string.

        When ``distance_m`` is omitted the decoded polyline length is used.
        """

        from .matching.distance import track_distance_m

        points = [(float(lat), float(lon)) for lat, lon in polyline_decode(encoded)]
        if distance_m is None:
            distance_m = (
                track_distance_m(points, 0, len(points) - 1) if points else 0.0
            )
        return cls(
            id=section_id,
            name=name,
            polyline=points,
            source_activity_id=source_activity_id,
            start_index=start_index,
            end_index=end_index,
            distance_m=float(distance_m),
            sport_type=sport_type,
            created_at=created_at,
        )


@dataclass(frozen=True, slots=True)
class MatchConfig:
    """Tolerances applied when matching a section against a track."""

    proximity_threshold_m: float = SECTION_MATCH_PROXIMITY_M
    min_coverage: float = SECTION_MATCH_MIN_COVERAGE
    max_coverage_samples: int = SECTION_MATCH_MAX_SAMPLES

    def __post_init__(self) -> None:
        if not math.isfinite(self.proximity_threshold_m) or (
            self.proximity_threshold_m < 0
        ):
            raise ValueError("proximity_threshold_m must be a non-negative number")
        if not 0.0 <= self.min_coverage <= 1.0:
            raise ValueError("min_coverage must be between 0 and 1")
        if self.max_coverage_samples < 1:
            raise ValueError("max_coverage_samples must be at least 1")


DEFAULT_MATCH_CONFIG = MatchConfig()


@dataclass(slots=True)
class MatchResult:
    """Where and in which direction a track traverses a section."""

    activity_id: str
    start_index: int
    end_index: int
    direction: Direction
    distance_m: float
    coverage_ratio: Optional[float] = None
    trace: Optional[List[LatLon]] = field(default=None, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        """Return the camelCase record consumed by section catalogs."""

        record: Dict[str, Any] = {
            "activityId": self.activity_id,
            "startIndex": self.start_index,
            "endIndex": self.end_index,
            "direction": self.direction,
            "distanceMeters": self.distance_m,
        }
        if self.coverage_ratio is not None:
            record["coverageRatio"] = self.coverage_ratio
        if self.trace is not None:
            record["trace"] = [[lat, lon] for lat, lon in self.trace]
        return record


def coerce_track(raw_points: Sequence[Sequence[Any]]) -> List[LatLon]:
    """Convert raw ``[[lat, lon], ...]`` payloads into typed tuples."""

    if isinstance(raw_points, (str, bytes)) or not isinstance(
        raw_points, (Sequence, np.ndarray)
    ):
        raise InvalidTrackError(
            f"Expected a list of lat/lon pairs, got {type(raw_points).__name__}"
        )
    points: List[LatLon] = []
    for position, point in enumerate(raw_points):
        try:
            lat, lon = point
            pair = (float(lat), float(lon))
        except (TypeError, ValueError) as exc:
            raise InvalidTrackError(
                f"Expected lat/lon pair at position {position}, got {point!r}"
            ) from exc
        if not (math.isfinite(pair[0]) and math.isfinite(pair[1])):
            raise InvalidTrackError(f"Non-finite coordinate at position {position}")
        points.append(pair)
    return points


__all__ = [
    "DEFAULT_MATCH_CONFIG",
    "DIRECTION_REVERSE",
    "DIRECTION_SAME",
    "Direction",
    "LatLon",
    "MatchConfig",
    "MatchResult",
    "Section",
    "Track",
    "coerce_track",
]
