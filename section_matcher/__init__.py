"""Find which recorded GPS tracks traverse a reference section, where and which way."""

from .errors import InvalidTrackError, SectionMatcherError, TrackStoreError
from .matching import match_track_to_section
from .models import DEFAULT_MATCH_CONFIG, MatchConfig, MatchResult, Section
from .services import SectionMatchService, SectionMatchServiceConfig, match_custom_section
from .store import CachingTrackStore, InMemoryTrackStore, TrackStore

__all__ = [
    "DEFAULT_MATCH_CONFIG",
    "CachingTrackStore",
    "InMemoryTrackStore",
    "InvalidTrackError",
    "MatchConfig",
    "MatchResult",
    "Section",
    "SectionMatchService",
    "SectionMatchServiceConfig",
    "SectionMatcherError",
    "TrackStore",
    "TrackStoreError",
    "match_custom_section",
    "match_track_to_section",
]
