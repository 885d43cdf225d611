"""Track stores that hand GPS tracks to the matcher.

The matcher never persists tracks; it only asks a store for them. Stores
report missing tracks by omission (batched lookups) or ``None`` (single
lookups), never by raising.
"""

from __future__ import annotations

import logging
from threading import RLock
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Protocol,
    Sequence,
)

from cachetools import Cache, LRUCache, TTLCache

from .config import TRACK_CACHE_SIZE, TRACK_CACHE_TTL_SECONDS
from .errors import InvalidTrackError, TrackStoreError
from .models import LatLon, coerce_track

TrackLoader = Callable[[str], Optional[Sequence[Sequence[Any]]]]


class TrackStore(Protocol):
    """Read-only source of activity tracks."""

    def get_track(self, activity_id: str) -> Optional[List[LatLon]]:
        """Return the track for one activity, or ``None`` when unavailable."""
        ...

    def get_tracks(self, activity_ids: Iterable[str]) -> Dict[str, List[LatLon]]:
        """Return available tracks keyed by activity id; missing ids are omitted."""
        ...


class InMemoryTrackStore:
    """Dictionary-backed store, mostly for tests and one-off CLI runs."""

    def __init__(self, tracks: Mapping[str, Sequence[Sequence[Any]]] | None = None):
        self._tracks: Dict[str, List[LatLon]] = {}
        for activity_id, points in (tracks or {}).items():
            self.add(activity_id, points)

    def add(self, activity_id: str, points: Sequence[Sequence[Any]]) -> None:
        self._tracks[str(activity_id)] = coerce_track(points)

    def get_track(self, activity_id: str) -> Optional[List[LatLon]]:
        return self._tracks.get(str(activity_id))

    def get_tracks(self, activity_ids: Iterable[str]) -> Dict[str, List[LatLon]]:
        found: Dict[str, List[LatLon]] = {}
        for activity_id in activity_ids:
            key = str(activity_id)
            track = self._tracks.get(key)
            if track is not None:
                found[key] = track
        return found

    def __len__(self) -> int:
        return len(self._tracks)


class CachingTrackStore:
    """Wrap a slow track loader with a bounded in-memory cache.

    ``loader`` receives an activity id and returns raw ``[[lat, lon], ...]``
    points, or ``None`` when the activity has no local track yet. Malformed
    payloads are logged and treated as absent. :class:`TrackStoreError`
    raised by the loader propagates to the caller.
    """

    def __init__(
        self,
        loader: TrackLoader,
        *,
        cache_size: int = TRACK_CACHE_SIZE,
        ttl_seconds: int = TRACK_CACHE_TTL_SECONDS,
    ) -> None:
        self._log = logging.getLogger(self.__class__.__name__)
        self._loader = loader
        maxsize = max(1, cache_size)
        self._cache: Cache[str, List[LatLon]]
        if ttl_seconds > 0:
            self._cache = TTLCache(maxsize=maxsize, ttl=ttl_seconds)
        else:
            self._cache = LRUCache(maxsize=maxsize)
        self._lock = RLock()

    def get_track(self, activity_id: str) -> Optional[List[LatLon]]:
        key = str(activity_id)
        with self._lock:
            cached: Optional[List[LatLon]] = self._cache.get(key)
        if cached is not None:
            return cached
        try:
            raw = self._loader(key)
        except TrackStoreError:
            self._log.warning("Track loader failed for activity=%s", key)
            raise
        if raw is None:
            return None
        try:
            track = coerce_track(raw)
        except InvalidTrackError as exc:
            self._log.warning("Ignoring malformed track for activity=%s: %s", key, exc)
            return None
        with self._lock:
            self._cache[key] = track
        return track

    def get_tracks(self, activity_ids: Iterable[str]) -> Dict[str, List[LatLon]]:
        found: Dict[str, List[LatLon]] = {}
        for activity_id in activity_ids:
            key = str(activity_id)
            if key in found:
                continue
            track = self.get_track(key)
            if track is not None:
                found[key] = track
        return found

    def clear(self) -> None:
        """Empty the cache (primarily for testing)."""
        with self._lock:
            self._cache.clear()


__all__ = [
    "CachingTrackStore",
    "InMemoryTrackStore",
    "TrackLoader",
    "TrackStore",
]
