"""Tests for environment-driven configuration helpers."""

from __future__ import annotations

import importlib
import logging
import os

import pytest

from section_matcher import config
from section_matcher.models import MatchConfig


def test_env_float_parses_and_falls_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SECTION_MATCH_TEST_FLOAT", "12.5")
    assert config._env_float("SECTION_MATCH_TEST_FLOAT", 1.0) == 12.5
    monkeypatch.setenv("SECTION_MATCH_TEST_FLOAT", "not-a-number")
    assert config._env_float("SECTION_MATCH_TEST_FLOAT", 1.0) == 1.0
    monkeypatch.delenv("SECTION_MATCH_TEST_FLOAT")
    assert config._env_float("SECTION_MATCH_TEST_FLOAT", 3.0) == 3.0


def test_env_int_parses_and_falls_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SECTION_MATCH_TEST_INT", "7")
    assert config._env_int("SECTION_MATCH_TEST_INT", 1) == 7
    monkeypatch.setenv("SECTION_MATCH_TEST_INT", "7.5")
    assert config._env_int("SECTION_MATCH_TEST_INT", 1) == 1


def test_environment_overrides_matching_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SECTION_MATCH_PROXIMITY_M", "25")
    monkeypatch.setenv("SECTION_MATCH_MAX_SAMPLES", "40")
    try:
        reloaded = importlib.reload(config)
        assert reloaded.SECTION_MATCH_PROXIMITY_M == 25.0
        assert reloaded.SECTION_MATCH_MAX_SAMPLES == 40
    finally:
        monkeypatch.delenv("SECTION_MATCH_PROXIMITY_M")
        monkeypatch.delenv("SECTION_MATCH_MAX_SAMPLES")
        importlib.reload(config)


@pytest.mark.parametrize(
    "key, raw, attribute, default",
    [
        ("SECTION_MATCH_MIN_COVERAGE", "80", "SECTION_MATCH_MIN_COVERAGE", 0.8),
        ("SECTION_MATCH_MIN_COVERAGE", "-0.5", "SECTION_MATCH_MIN_COVERAGE", 0.8),
        ("SECTION_MATCH_PROXIMITY_M", "-10", "SECTION_MATCH_PROXIMITY_M", 50.0),
        ("SECTION_MATCH_PROXIMITY_M", "nan", "SECTION_MATCH_PROXIMITY_M", 50.0),
        ("SECTION_MATCH_PROXIMITY_M", "inf", "SECTION_MATCH_PROXIMITY_M", 50.0),
        ("SECTION_MATCH_MAX_SAMPLES", "0", "SECTION_MATCH_MAX_SAMPLES", 20),
    ],
)
def test_out_of_range_environment_falls_back_to_defaults(
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
    key: str,
    raw: str,
    attribute: str,
    default: float,
) -> None:
    monkeypatch.setenv(key, raw)
    try:
        with caplog.at_level(logging.WARNING, logger="section_matcher.config"):
            reloaded = importlib.reload(config)
        assert getattr(reloaded, attribute) == default
        assert key in caplog.text
        # The reloaded values must be accepted by the default match config.
        MatchConfig(
            proximity_threshold_m=reloaded.SECTION_MATCH_PROXIMITY_M,
            min_coverage=reloaded.SECTION_MATCH_MIN_COVERAGE,
            max_coverage_samples=reloaded.SECTION_MATCH_MAX_SAMPLES,
        )
    finally:
        monkeypatch.delenv(key)
        importlib.reload(config)


def test_worker_default_is_bounded_by_available_cores(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.delenv("SECTION_MATCH_MAX_WORKERS", raising=False)
    monkeypatch.setattr(os, "cpu_count", lambda: 2)
    try:
        assert importlib.reload(config).SECTION_MATCH_MAX_WORKERS == 2
        monkeypatch.setattr(os, "cpu_count", lambda: None)
        assert importlib.reload(config).SECTION_MATCH_MAX_WORKERS == 1
        monkeypatch.setattr(os, "cpu_count", lambda: 64)
        assert importlib.reload(config).SECTION_MATCH_MAX_WORKERS == 4
    finally:
        monkeypatch.undo()
        importlib.reload(config)


def test_non_positive_worker_override_is_ignored(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("SECTION_MATCH_MAX_WORKERS", "0")
    try:
        assert importlib.reload(config).SECTION_MATCH_MAX_WORKERS >= 1
    finally:
        monkeypatch.delenv("SECTION_MATCH_MAX_WORKERS")
        importlib.reload(config)
