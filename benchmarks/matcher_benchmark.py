"""Benchmark section matching across a synthetic corpus of tracks."""

from __future__ import annotations

import argparse
import statistics
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Late imports rely on the adjusted sys.path above.
from section_matcher.models import LatLon, Section  # noqa: E402
from section_matcher.services import (  # noqa: E402
    SectionMatchService,
    SectionMatchServiceConfig,
)
from section_matcher.store import InMemoryTrackStore  # noqa: E402


@dataclass(slots=True)
class BenchmarkSummary:
    """Aggregated statistics for multiple benchmark iterations."""

    track_count: int
    point_count: int
    iterations: int
    matches: int
    mean_serial_ms: float
    mean_pooled_ms: float
    worst_pooled_ms: float


def _build_track(point_count: int, lateral_offset_deg: float) -> List[LatLon]:
    """Generate a straight north-bound track with ~1.3 m spacing."""

    base_lat = 37.0
    base_lon = -122.0 + lateral_offset_deg
    step_deg = 1.2e-5
    return [(base_lat + idx * step_deg, base_lon) for idx in range(point_count)]


def _build_corpus(track_count: int, point_count: int) -> Dict[str, List[LatLon]]:
    """Half the tracks follow the section, the rest run ~1 km to the east."""

    corpus: Dict[str, List[LatLon]] = {}
    for idx in range(track_count):
        offset = 0.0 if idx % 2 == 0 else 0.012
        track = _build_track(point_count, offset)
        if idx % 4 == 0:
            track.reverse()
        corpus[f"activity-{idx}"] = track
    return corpus


def _time_run(service: SectionMatchService, section: Section, ids: List[str]) -> tuple[float, int]:
    start = time.perf_counter()
    matches = service.match_section(section, ids)
    return time.perf_counter() - start, len(matches)


def run_benchmark(track_count: int, point_count: int, iterations: int) -> BenchmarkSummary:
    """Benchmark serial versus pooled corpus matching."""

    if point_count < 100:
        raise ValueError("point_count must be at least 100")
    if iterations <= 0:
        raise ValueError("iterations must be positive")

    corpus = _build_corpus(track_count, point_count)
    store = InMemoryTrackStore(corpus)
    source_track = _build_track(point_count, 0.0)
    section = Section.from_track_slice(
        section_id="bench",
        name="Benchmark section",
        source_activity_id="source",
        track=source_track,
        start_index=point_count // 4,
        end_index=point_count * 3 // 4,
    )
    ids = list(corpus)
    serial = SectionMatchService(store, SectionMatchServiceConfig(max_workers=1))
    pooled = SectionMatchService(store, SectionMatchServiceConfig(parallel_threshold=1))

    serial_times: List[float] = []
    pooled_times: List[float] = []
    matches = 0
    for _ in range(iterations):
        elapsed, matches = _time_run(serial, section, ids)
        serial_times.append(elapsed)
        elapsed, _ = _time_run(pooled, section, ids)
        pooled_times.append(elapsed)

    return BenchmarkSummary(
        track_count=track_count,
        point_count=point_count,
        iterations=iterations,
        matches=matches,
        mean_serial_ms=statistics.fmean(serial_times) * 1000.0,
        mean_pooled_ms=statistics.fmean(pooled_times) * 1000.0,
        worst_pooled_ms=max(pooled_times) * 1000.0,
    )


def _parse_args() -> argparse.Namespace:
    """Parse command-line arguments for the benchmark utility."""

    parser = argparse.ArgumentParser(
        description="Benchmark section matching over a synthetic corpus",
    )
    parser.add_argument("--tracks", type=int, default=200)
    parser.add_argument(
        "--points",
        type=int,
        default=5000,
        help="Number of points per synthetic track",
    )
    parser.add_argument(
        "--iterations",
        type=int,
        default=3,
        help="Number of repetitions for averaging",
    )
    return parser.parse_args()


def main() -> None:
    """Entry point when running the module as a script."""

    args = _parse_args()
    summary = run_benchmark(args.tracks, args.points, args.iterations)
    print(f"tracks: {summary.track_count}")
    print(f"points: {summary.point_count}")
    print(f"matches: {summary.matches}")
    print(f"mean_serial_ms: {summary.mean_serial_ms:.3f}")
    print(f"mean_pooled_ms: {summary.mean_pooled_ms:.3f}")
    print(f"worst_pooled_ms: {summary.worst_pooled_ms:.3f}")


if __name__ == "__main__":
    main()
