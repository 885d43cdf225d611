"""Match one section against a set of tracks loaded from a JSON file.

Input layout::

    {
      "section": {
        "id": "s1", "name": "Hill", "sourceActivityId": "a1",
        "startIndex": 10, "endIndex": 50, "distanceMeters": 812.4,
        "polyline": [[lat, lon], ...]          # or "encodedPolyline": "..."
      },
      "tracks": {"a1": [[lat, lon], ...], "a2": [[lat, lon], ...]}
    }
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

from ..config import (
    SECTION_MATCH_MAX_SAMPLES,
    SECTION_MATCH_MAX_WORKERS,
    SECTION_MATCH_MIN_COVERAGE,
    SECTION_MATCH_PROXIMITY_M,
)
from ..errors import InvalidTrackError
from ..matching.distance import track_distance_m
from ..models import MatchConfig, Section, coerce_track
from ..services import SectionMatchService, SectionMatchServiceConfig
from ..store import InMemoryTrackStore

LOGGER = logging.getLogger("match_section")


def _setup_logging(verbose: bool) -> None:
    if not logging.getLogger().hasHandlers():
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.INFO,
            format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        )


def section_from_payload(payload: Mapping[str, Any]) -> Section:
    """Build a :class:`Section` from its camelCase JSON record.

    Raises:
        ValueError: If required keys are missing or the polyline is malformed.
    """

    if not isinstance(payload, Mapping):
        raise ValueError("'section' must be a JSON object")
    try:
        section_id = str(payload["id"])
        source_activity_id = str(payload["sourceActivityId"])
        start_index = int(payload["startIndex"])
        end_index = int(payload["endIndex"])
    except KeyError as exc:
        raise ValueError(f"Section payload missing key {exc.args[0]!r}") from exc
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Section indices must be integers: {exc}") from exc
    name = str(payload.get("name") or section_id)
    distance = payload.get("distanceMeters")
    if distance is not None:
        try:
            distance = float(distance)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid distanceMeters {distance!r}") from exc
    common = {
        "section_id": section_id,
        "name": name,
        "source_activity_id": source_activity_id,
        "start_index": start_index,
        "end_index": end_index,
        "sport_type": payload.get("sportType"),
        "created_at": payload.get("createdAt"),
    }
    encoded = payload.get("encodedPolyline")
    if encoded:
        return Section.from_encoded_polyline(
            encoded=str(encoded),
            distance_m=distance,
            **common,
        )
    points = coerce_track(payload.get("polyline") or [])
    if distance is None:
        distance = track_distance_m(points, 0, len(points) - 1) if points else 0.0
    return Section(
        id=section_id,
        name=name,
        polyline=points,
        source_activity_id=source_activity_id,
        start_index=start_index,
        end_index=end_index,
        distance_m=float(distance),
        sport_type=common["sport_type"],
        created_at=common["created_at"],
    )


def run(
    input_path: Path,
    *,
    config: MatchConfig,
    max_workers: int = SECTION_MATCH_MAX_WORKERS,
    include_trace: bool = False,
) -> list[dict[str, Any]]:
    """Load ``input_path`` and return the match records for its tracks."""

    with input_path.open("r", encoding="utf-8") as handle:
        document = json.load(handle)
    if not isinstance(document, Mapping):
        raise ValueError("Input must be a JSON object")
    section = section_from_payload(document.get("section") or {})
    raw_tracks = document.get("tracks") or {}
    if not isinstance(raw_tracks, Mapping):
        raise ValueError("'tracks' must map activity ids to point lists")
    store = InMemoryTrackStore(raw_tracks)
    service = SectionMatchService(
        store,
        SectionMatchServiceConfig(
            match_config=config,
            max_workers=max_workers,
            include_trace=include_trace,
        ),
    )
    matches = service.match_section(section, [str(key) for key in raw_tracks])
    return [match.to_dict() for match in matches]


def _build_parser() -> argparse.ArgumentParser:
    """Return the CLI argument parser for the section matcher."""

    parser = argparse.ArgumentParser(
        description="Report which tracks in a JSON file traverse a section."
    )
    parser.add_argument("input", type=Path, help="JSON file with section and tracks")
    parser.add_argument(
        "--proximity-m",
        type=float,
        default=SECTION_MATCH_PROXIMITY_M,
        help="Maximum distance (metres) between section and track points",
    )
    parser.add_argument(
        "--min-coverage",
        type=float,
        default=SECTION_MATCH_MIN_COVERAGE,
        help="Minimum covered fraction of sampled section points (0-1)",
    )
    parser.add_argument(
        "--max-samples",
        type=int,
        default=SECTION_MATCH_MAX_SAMPLES,
        help="Cap on section points sampled for coverage",
    )
    parser.add_argument("--workers", type=int, default=SECTION_MATCH_MAX_WORKERS)
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Include near-section points of each matched span",
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="Write JSON results here instead of stdout",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point used via ``python -m section_matcher.tools.match_section``."""

    parser = _build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)
    try:
        config = MatchConfig(
            proximity_threshold_m=args.proximity_m,
            min_coverage=args.min_coverage,
            max_coverage_samples=args.max_samples,
        )
        records = run(
            args.input,
            config=config,
            max_workers=args.workers,
            include_trace=args.trace,
        )
    except (
        OSError,
        json.JSONDecodeError,
        InvalidTrackError,
        ValueError,
        TypeError,
    ) as exc:
        LOGGER.error("Unable to match section: %s", exc)
        return 2

    text = json.dumps(records, indent=2, sort_keys=True)
    if args.output:
        args.output.write_text(text + "\n", encoding="utf-8")
        LOGGER.info("Wrote %d matches to %s", len(records), args.output)
    else:
        print(text)
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry
    raise SystemExit(main())
