"""Unit tests for the haversine helpers."""

from __future__ import annotations

import math

import numpy as np
import pytest

from section_matcher.matching.distance import (
    EARTH_RADIUS_M,
    as_latlon_array,
    haversine_m,
    haversine_many_m,
    track_distance_m,
)

_ONE_DEGREE_M = EARTH_RADIUS_M * math.pi / 180.0


@pytest.mark.parametrize(
    "first, second",
    [
        ((45.0, 7.0), (45.1, 7.1)),
        ((-33.9, 151.2), (51.5, -0.12)),
        ((0.0, 179.9), (0.0, -179.9)),
    ],
)
def test_haversine_is_symmetric(first, second) -> None:
    assert haversine_m(first, second) == pytest.approx(haversine_m(second, first))


@pytest.mark.parametrize("point", [(0.0, 0.0), (45.0, 7.0), (89.9, -120.0), (-90.0, 0.0)])
def test_haversine_of_coincident_points_is_zero(point) -> None:
    assert haversine_m(point, point) == 0.0


def test_haversine_one_degree_along_equator() -> None:
    assert haversine_m((0.0, 0.0), (0.0, 1.0)) == pytest.approx(_ONE_DEGREE_M, rel=1e-9)
    assert haversine_m((0.0, 0.0), (1.0, 0.0)) == pytest.approx(_ONE_DEGREE_M, rel=1e-9)


def test_haversine_antipodal_points_are_finite() -> None:
    distance = haversine_m((0.0, 0.0), (0.0, 180.0))
    assert math.isfinite(distance)
    assert distance == pytest.approx(math.pi * EARTH_RADIUS_M, rel=1e-9)


def test_haversine_many_matches_scalar() -> None:
    origin = (45.0, 7.0)
    points = [(45.0, 7.0), (45.05, 7.05), (46.0, 8.0), (-10.0, 100.0)]
    vector = haversine_many_m(origin, as_latlon_array(points))
    expected = [haversine_m(origin, point) for point in points]
    assert vector.tolist() == pytest.approx(expected)
    assert vector[0] == 0.0


def test_haversine_many_empty_input() -> None:
    result = haversine_many_m((0.0, 0.0), np.empty((0, 2)))
    assert result.shape == (0,)


def test_track_distance_sums_consecutive_segments() -> None:
    track = [(0.0, 0.0), (0.0, 1.0), (0.0, 2.0), (0.0, 3.0)]
    assert track_distance_m(track, 0, 2) == pytest.approx(2 * _ONE_DEGREE_M, rel=1e-9)
    assert track_distance_m(track, 1, 3) == pytest.approx(2 * _ONE_DEGREE_M, rel=1e-9)


def test_track_distance_of_empty_span_is_zero() -> None:
    track = [(0.0, 0.0), (0.0, 1.0)]
    assert track_distance_m(track, 1, 1) == 0.0
    assert track_distance_m(track, 1, 0) == 0.0


def test_track_distance_tolerates_duplicate_points() -> None:
    track = [(45.0, 7.0), (45.0, 7.0), (45.0, 7.0), (45.001, 7.0)]
    assert track_distance_m(track, 0, 3) == pytest.approx(
        haversine_m((45.0, 7.0), (45.001, 7.0))
    )


def test_as_latlon_array_rejects_wrong_shape() -> None:
    with pytest.raises(ValueError):
        as_latlon_array([(1.0, 2.0, 3.0)])
    assert as_latlon_array([]).shape == (0, 2)
