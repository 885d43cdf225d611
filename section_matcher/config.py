"""Central configuration for the section matcher.

All values are constants imported by the rest of the package. Each one can be
overridden through an environment variable of the same name (optionally via a
local `.env`).
"""

from __future__ import annotations

import importlib
import logging
import math
import os

_LOG = logging.getLogger(__name__)


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_float_between(
    key: str, default: float, lower: float, upper: float = math.inf
) -> float:
    """Return a finite float in ``[lower, upper]`` or ``default`` with a warning."""

    value = _env_float(key, default)
    if math.isfinite(value) and lower <= value <= upper:
        return value
    _LOG.warning(
        "Ignoring %s=%r outside [%s, %s]; using default %s",
        key,
        value,
        lower,
        upper,
        default,
    )
    return default


def _env_int_at_least(key: str, default: int, lower: int) -> int:
    """Return an int of at least ``lower`` or ``default`` with a warning."""

    value = _env_int(key, default)
    if value >= lower:
        return value
    _LOG.warning(
        "Ignoring %s=%r below %s; using default %s", key, value, lower, default
    )
    return default


# Load .env variables when python-dotenv is available.
_load_dotenv = None
try:
    _dotenv_mod = importlib.import_module("dotenv")
    _load_dotenv = getattr(_dotenv_mod, "load_dotenv", None)
except Exception:
    _load_dotenv = None

if callable(_load_dotenv):
    # Load .env from the current directory or any parent folder.
    _load_dotenv()


# ---------------------------------------------------------------------------
# Matching tolerances
# ---------------------------------------------------------------------------
# Maximum distance (metres) between a section point and its nearest track
# point for that point to count as "on" the section. 50 m suits typical
# phone/watch GPS; tighten for dense urban tracks, loosen for noisy trails.
SECTION_MATCH_PROXIMITY_M = _env_float_between(
    "SECTION_MATCH_PROXIMITY_M", 50.0, 0.0
)

# Minimum fraction (0-1) of sampled section points that must be covered by
# the candidate span of a track.
SECTION_MATCH_MIN_COVERAGE = _env_float_between(
    "SECTION_MATCH_MIN_COVERAGE", 0.8, 0.0, 1.0
)

# Upper bound on the number of section points sampled during coverage
# validation. Fixed cost per track; not derived from the track length.
SECTION_MATCH_MAX_SAMPLES = _env_int_at_least("SECTION_MATCH_MAX_SAMPLES", 20, 1)


# ---------------------------------------------------------------------------
# Performance tuning
# ---------------------------------------------------------------------------
# Threads used when matching one section against a corpus of tracks. The
# default is 4, lowered to the number of available cores on smaller hosts.
SECTION_MATCH_MAX_WORKERS = _env_int_at_least(
    "SECTION_MATCH_MAX_WORKERS", min(4, os.cpu_count() or 1), 1
)

# Corpora smaller than this are matched serially; the pool overhead is not
# worth it for a handful of tracks.
SECTION_MATCH_PARALLEL_THRESHOLD = _env_int("SECTION_MATCH_PARALLEL_THRESHOLD", 32)

# Maximum number of tracks kept by CachingTrackStore.
TRACK_CACHE_SIZE = _env_int("TRACK_CACHE_SIZE", 256)

# Seconds before a cached track is dropped and reloaded. Set to 0 to keep
# entries until evicted by size.
TRACK_CACHE_TTL_SECONDS = _env_int("TRACK_CACHE_TTL_SECONDS", 3600)
