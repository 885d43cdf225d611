"""Central error types used across the section matcher."""

from __future__ import annotations


class SectionMatcherError(RuntimeError):
    """Base error for section matcher failures."""


class TrackStoreError(SectionMatcherError):
    """Raised when the track store cannot retrieve tracks at all."""


class InvalidTrackError(SectionMatcherError, ValueError):
    """Raised when a coordinate payload is not a sequence of lat/lon pairs."""


__all__ = [
    "SectionMatcherError",
    "TrackStoreError",
    "InvalidTrackError",
]
