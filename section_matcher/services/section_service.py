"""Section matching service.

Retrieves tracks for a batch of activities with a single store call and runs
the pure single-track matcher over them. Per-track matching shares no
mutable state, so large corpora are spread over a bounded thread pool.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from ..config import SECTION_MATCH_MAX_WORKERS, SECTION_MATCH_PARALLEL_THRESHOLD
from ..matching import match_track_to_section, source_match
from ..models import DEFAULT_MATCH_CONFIG, LatLon, MatchConfig, MatchResult, Section
from ..store import TrackStore

_Job = Tuple[str, List[LatLon]]


@dataclass(slots=True)
class SectionMatchServiceConfig:
    match_config: MatchConfig = field(default_factory=lambda: DEFAULT_MATCH_CONFIG)
    max_workers: int = SECTION_MATCH_MAX_WORKERS
    parallel_threshold: int = SECTION_MATCH_PARALLEL_THRESHOLD
    include_trace: bool = False
    logger: logging.Logger | None = None


class SectionMatchService:
    def __init__(
        self,
        store: TrackStore,
        config: SectionMatchServiceConfig | None = None,
    ):
        self.store = store
        self.config = config or SectionMatchServiceConfig()
        self._log = self.config.logger or logging.getLogger(self.__class__.__name__)

    def match_section(
        self,
        section: Section,
        activity_ids: Sequence[str],
        match_config: MatchConfig | None = None,
    ) -> List[MatchResult]:
        """Return every activity in ``activity_ids`` that traverses ``section``.

        Results follow the order in which the store returned tracks, which is
        not necessarily the order of ``activity_ids``. Activities without a
        stored track are skipped.
        """

        if not activity_ids or not section.is_matchable:
            return []

        tracks = self.store.get_tracks(activity_ids)
        jobs: List[_Job] = list(tracks.items())
        self._log.info(
            "Matching section=%s against %d tracks (%d requested)",
            section.id,
            len(jobs),
            len(activity_ids),
        )
        config = match_config or self.config.match_config
        max_workers = max(1, self.config.max_workers)
        if len(jobs) >= max(1, self.config.parallel_threshold) and max_workers > 1:
            with ThreadPoolExecutor(max_workers=min(max_workers, len(jobs))) as executor:
                outcomes: Iterable[Optional[MatchResult]] = list(
                    executor.map(
                        lambda job: self._match_job(section, job, config), jobs
                    )
                )
        else:
            outcomes = [self._match_job(section, job, config) for job in jobs]

        matches = [result for result in outcomes if result is not None]
        self._log.info(
            "Section=%s matched %d of %d tracks", section.id, len(matches), len(jobs)
        )
        return matches

    def match_activity(
        self,
        section: Section,
        activity_id: str,
        match_config: MatchConfig | None = None,
    ) -> Optional[MatchResult]:
        """Match one newly available activity against ``section``."""

        if not section.is_matchable:
            return None
        if activity_id == section.source_activity_id:
            return source_match(section)
        track = self.store.get_track(activity_id)
        if track is None:
            self._log.debug(
                "No track available for activity=%s section=%s",
                activity_id,
                section.id,
            )
            return None
        return match_track_to_section(
            activity_id,
            track,
            section,
            match_config or self.config.match_config,
            include_trace=self.config.include_trace,
        )

    def _match_job(
        self,
        section: Section,
        job: _Job,
        config: MatchConfig,
    ) -> Optional[MatchResult]:
        activity_id, track = job
        # The source activity matches by definition, even if its stored
        # track is shorter than the section cut.
        if activity_id == section.source_activity_id:
            return source_match(section)
        return match_track_to_section(
            activity_id,
            track,
            section,
            config,
            include_trace=self.config.include_trace,
        )


def match_custom_section(
    section: Section,
    activity_ids: Sequence[str],
    store: TrackStore,
    config: MatchConfig | None = None,
) -> List[MatchResult]:
    """Convenience wrapper running :class:`SectionMatchService` with defaults."""

    service = SectionMatchService(store)
    return service.match_section(section, activity_ids, config)


__all__ = [
    "SectionMatchService",
    "SectionMatchServiceConfig",
    "match_custom_section",
]
