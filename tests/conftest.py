"""Global pytest fixtures & helpers.

Adds project root to path and provides reusable section/track fixtures so the
matching tests do not have to rebuild geometry in every file.
"""
from __future__ import annotations

import os
import sys
from typing import List, Tuple

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from section_matcher.models import Section


# --- Factory helpers -------------------------------------------------
def make_section(points, *, source_activity_id="S", start_index=0, end_index=None, distance_m=0.0):
    return Section(
        id="section-1",
        name="Test Hill",
        polyline=list(points),
        source_activity_id=source_activity_id,
        start_index=start_index,
        end_index=len(points) - 1 if end_index is None else end_index,
        distance_m=distance_m,
    )


def make_line(count: int, *, lat0: float = 45.0, lon0: float = 7.0, step_deg: float = 0.001) -> List[Tuple[float, float]]:
    """North-bound line; 0.001 deg of latitude is ~111 m."""
    return [(lat0 + idx * step_deg, lon0) for idx in range(count)]


# --- Fixtures --------------------------------------------------------
@pytest.fixture
def diagonal_section() -> Section:
    return make_section([(45.0, 7.0), (45.05, 7.05), (45.1, 7.1)], start_index=0, end_index=2, distance_m=13600.0)


@pytest.fixture
def line_points() -> List[Tuple[float, float]]:
    return make_line(10)


@pytest.fixture
def line_section(line_points) -> Section:
    return make_section(line_points, start_index=100, end_index=109, distance_m=1000.0)


@pytest.fixture
def detour_track(line_points) -> List[Tuple[float, float]]:
    """Follows the line for points 0-4 and 9, detours ~790 m east for 5-8."""
    detour = [(lat, 7.01) for lat, _ in line_points[5:9]]
    return list(line_points[:5]) + detour + [line_points[9]]
