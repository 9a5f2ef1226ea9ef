"""Tests for ReplayConfig."""

from __future__ import annotations

import pytest

from course_replay.playback.config import MIN_SPEED_MULTIPLIER, ReplayConfig


def test_defaults():
    cfg = ReplayConfig()
    assert cfg.samples_per_segment == 30
    assert cfg.primary_capacity == 30
    assert cfg.ghost_capacity == 20
    assert cfg.primary_decay_ms == 800.0
    assert cfg.ghost_decay_ms == 600.0
    assert cfg.default_speed == 10.0
    assert cfg.ghost_label == "PRO"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"samples_per_segment": 0},
        {"primary_capacity": -1},
        {"ghost_decay_ms": 0},
        {"popup_fade_ms": -10},
    ],
)
def test_invalid_values_raise(kwargs):
    with pytest.raises(ValueError):
        ReplayConfig(**kwargs)


def test_default_speed_is_clamped():
    assert ReplayConfig(default_speed=-3).default_speed == MIN_SPEED_MULTIPLIER


def test_from_env(monkeypatch):
    monkeypatch.setenv("COURSE_REPLAY_SAMPLES", "12")
    monkeypatch.setenv("COURSE_REPLAY_SPEED", "25")
    monkeypatch.setenv("COURSE_REPLAY_SEED", "7")
    monkeypatch.setenv("COURSE_REPLAY_GHOST_LABEL", "ELITE")
    cfg = ReplayConfig.from_env()
    assert cfg.samples_per_segment == 12
    assert cfg.default_speed == 25.0
    assert cfg.seed == 7
    assert cfg.ghost_label == "ELITE"


def test_from_env_overrides_win(monkeypatch):
    monkeypatch.setenv("COURSE_REPLAY_SPEED", "25")
    cfg = ReplayConfig.from_env(default_speed=2.0, seed=None, unknown="ignored")
    assert cfg.default_speed == 2.0
    assert cfg.seed is None


def test_from_env_without_variables(monkeypatch):
    for name in ("COURSE_REPLAY_SAMPLES", "COURSE_REPLAY_SPEED", "COURSE_REPLAY_SEED", "COURSE_REPLAY_GHOST_LABEL"):
        monkeypatch.delenv(name, raising=False)
    assert ReplayConfig.from_env() == ReplayConfig()
