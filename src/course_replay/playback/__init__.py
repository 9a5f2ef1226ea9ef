"""Real-time race playback — engine, crossings and particle trails."""

from course_replay.playback.config import MIN_SPEED_MULTIPLIER, ReplayConfig
from course_replay.playback.crossings import CrossingDetector, CrossingEvent
from course_replay.playback.engine import (
    FrameSnapshot,
    PlaybackEngine,
    PlaybackState,
    PlaybackStatus,
    SplitPopup,
)
from course_replay.playback.particles import Particle, ParticlePool, ParticleView, TrailSystem

__all__ = [
    "MIN_SPEED_MULTIPLIER",
    "CrossingDetector",
    "CrossingEvent",
    "FrameSnapshot",
    "Particle",
    "ParticlePool",
    "ParticleView",
    "PlaybackEngine",
    "PlaybackState",
    "PlaybackStatus",
    "ReplayConfig",
    "SplitPopup",
    "TrailSystem",
]
