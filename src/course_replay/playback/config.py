"""Replay configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields

from course_replay.timing.ghost import DEFAULT_GHOST_LABEL

MIN_SPEED_MULTIPLIER = 0.01


@dataclass
class ReplayConfig:
    """Geometry, playback and trail settings for one replay session."""

    samples_per_segment: int = 30
    include_special_markers: bool = False
    default_speed: float = 10.0     # × real time
    primary_capacity: int = 30      # particles
    ghost_capacity: int = 20        # particles
    primary_decay_ms: float = 800.0
    ghost_decay_ms: float = 600.0
    popup_fade_ms: float = 1500.0
    ghost_label: str = DEFAULT_GHOST_LABEL
    seed: int | None = None         # particle jitter; None = nondeterministic

    def __post_init__(self) -> None:
        if self.samples_per_segment < 1:
            raise ValueError("samples_per_segment must be >= 1")
        if self.primary_capacity < 0 or self.ghost_capacity < 0:
            raise ValueError("particle capacities must be >= 0")
        if self.primary_decay_ms <= 0 or self.ghost_decay_ms <= 0 or self.popup_fade_ms <= 0:
            raise ValueError("decay windows must be > 0")
        self.default_speed = max(MIN_SPEED_MULTIPLIER, self.default_speed)

    @classmethod
    def from_env(cls, **overrides) -> ReplayConfig:
        """Build a config from ``COURSE_REPLAY_*`` environment variables.

        Recognised: ``COURSE_REPLAY_SAMPLES``, ``COURSE_REPLAY_SPEED``,
        ``COURSE_REPLAY_SEED``, ``COURSE_REPLAY_GHOST_LABEL``.  Keyword
        *overrides* win over the environment.
        """
        values: dict[str, object] = {}
        if samples := os.environ.get("COURSE_REPLAY_SAMPLES"):
            values["samples_per_segment"] = int(samples)
        if speed := os.environ.get("COURSE_REPLAY_SPEED"):
            values["default_speed"] = float(speed)
        if seed := os.environ.get("COURSE_REPLAY_SEED"):
            values["seed"] = int(seed)
        if label := os.environ.get("COURSE_REPLAY_GHOST_LABEL"):
            values["ghost_label"] = label

        known = {f.name for f in fields(cls)}
        values.update({k: v for k, v in overrides.items() if k in known and v is not None})
        return cls(**values)
