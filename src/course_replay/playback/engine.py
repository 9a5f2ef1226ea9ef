"""PlaybackEngine — drives race time, path progress, crossings, ghost and trails.

The engine owns no scheduler.  The host calls :meth:`PlaybackEngine.tick`
once per rendered frame with the real time that passed, and reads the
returned :class:`FrameSnapshot`.  Within a tick the order is fixed:

1. advance elapsed time by ``delta * speed``
2. recompute progress
3. fire station crossings in ascending order
4. recompute the ghost
5. age and spawn trail particles
6. signal completion (once per play cycle)
"""

from __future__ import annotations

import enum
import logging
import math
import random
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, replace
from typing import Any

from course_replay.course.models import Point
from course_replay.course.spline import CoursePath
from course_replay.course.stations import build_stations
from course_replay.playback.config import MIN_SPEED_MULTIPLIER, ReplayConfig
from course_replay.playback.crossings import CrossingDetector, CrossingEvent
from course_replay.playback.particles import ParticleView, TrailSystem
from course_replay.timing.ghost import GhostFrame, GhostSynchronizer
from course_replay.timing.models import Split, Timeline
from course_replay.timing.timeline import (
    build_timeline,
    elapsed_at_progress,
    format_race_time,
    progress_at_elapsed,
)

_logger = logging.getLogger(__name__)


class PlaybackStatus(enum.Enum):
    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"
    COMPLETED = "completed"


@dataclass(frozen=True)
class PlaybackState:
    """Copy of the engine's playback variables."""

    progress: float
    elapsed_ms: float
    speed_multiplier: float
    is_playing: bool
    last_station_index: int


@dataclass(frozen=True)
class SplitPopup:
    """Fading label shown at a station when its split is reached."""

    text: str
    opacity: float
    x: float
    y: float


@dataclass(frozen=True)
class FrameSnapshot:
    """Read-only view of the engine after a tick."""

    progress: float
    elapsed_ms: float
    total_ms: float
    speed_multiplier: float
    is_playing: bool
    status: PlaybackStatus
    position: Point
    ghost: GhostFrame | None
    events: tuple[CrossingEvent, ...]
    """Crossings fired during this tick only."""

    completed: bool
    """True on the single tick (or seek) that finished the race."""

    primary_particles: tuple[ParticleView, ...]
    ghost_particles: tuple[ParticleView, ...]
    split_popup: SplitPopup | None
    last_station_index: int


SplitInput = Iterable[Split | Mapping[str, Any]]


class PlaybackEngine:
    """Race replay state machine for one primary/ghost pairing.

    Parameters
    ----------
    course:
        Course geometry (:class:`~course_replay.course.spline.CoursePath`).
    timeline:
        Primary timeline.  With zero total time progress stays at 0 and the
        race only completes through ``seek_to(1)``.
    ghost_timeline:
        Optional comparison timeline, timed independently on the same clock.
    config:
        :class:`~course_replay.playback.config.ReplayConfig`.
    rng:
        Random source for particle jitter; defaults to ``Random(config.seed)``.
    ghost_label:
        Display name for the ghost; defaults to ``config.ghost_label``.

    Attributes
    ----------
    on_station_reached:
        ``(CrossingEvent) -> None``, called for every crossing.
    on_complete:
        ``() -> None``, called once when the race completes.
    """

    def __init__(
        self,
        course: CoursePath,
        timeline: Timeline,
        ghost_timeline: Timeline | None = None,
        config: ReplayConfig | None = None,
        rng: random.Random | None = None,
        ghost_label: str | None = None,
    ) -> None:
        self._cfg = config or ReplayConfig()
        self.course = course
        self.timeline = timeline
        self.ghost = GhostSynchronizer(ghost_timeline, ghost_label or self._cfg.ghost_label)
        self.show_ghost = self.ghost.is_active

        self._detector = CrossingDetector(course.stations, course.station_progresses, timeline)
        self._trails = TrailSystem(self._cfg, rng)

        self._progress = 0.0
        self._elapsed_ms = 0.0
        self._speed = self._cfg.default_speed
        self._playing = False
        self._has_played = False
        self._completion_fired = False
        self._destroyed = False
        self._popup: SplitPopup | None = None

        # Per-tick outputs
        self._tick_events: tuple[CrossingEvent, ...] = ()
        self._tick_completed = False

        self.on_station_reached: Callable[[CrossingEvent], None] | None = None
        self.on_complete: Callable[[], None] | None = None

    @classmethod
    def from_inputs(
        cls,
        waypoints: Any,
        splits: SplitInput | None,
        ghost_splits: SplitInput | None = None,
        ghost_label: str | None = None,
        config: ReplayConfig | None = None,
        rng: random.Random | None = None,
    ) -> PlaybackEngine:
        """Build stations, course and timelines from raw inputs, then the engine."""
        cfg = config or ReplayConfig()
        stations = build_stations(waypoints, cfg.include_special_markers)
        course = CoursePath.from_stations(stations, cfg.samples_per_segment)
        return cls(
            course,
            build_timeline(splits),
            build_timeline(ghost_splits),
            config=cfg,
            rng=rng,
            ghost_label=ghost_label,
        )

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def progress(self) -> float:
        return self._progress

    @property
    def elapsed_ms(self) -> float:
        return self._elapsed_ms

    @property
    def speed_multiplier(self) -> float:
        return self._speed

    @property
    def is_playing(self) -> bool:
        return self._playing

    @property
    def total_ms(self) -> float:
        return self.timeline.total_ms

    @property
    def last_station_index(self) -> int:
        return self._detector.last_station_index

    @property
    def status(self) -> PlaybackStatus:
        if self._playing:
            return PlaybackStatus.PLAYING
        if self._progress >= 1.0:
            return PlaybackStatus.COMPLETED
        if self._has_played:
            return PlaybackStatus.PAUSED
        return PlaybackStatus.IDLE

    @property
    def state(self) -> PlaybackState:
        return PlaybackState(
            progress=self._progress,
            elapsed_ms=self._elapsed_ms,
            speed_multiplier=self._speed,
            is_playing=self._playing,
            last_station_index=self._detector.last_station_index,
        )

    @property
    def ghost_visible(self) -> bool:
        return self.show_ghost and self.ghost.is_active

    @property
    def position(self) -> Point:
        return self.course.position_at(self._progress)

    # ------------------------------------------------------------------
    # Playback commands
    # ------------------------------------------------------------------

    def play(self) -> None:
        """Start or resume; a finished race restarts from the beginning."""
        if self._destroyed or self._playing:
            return
        if self._progress >= 1.0:
            self.restart()
        self._playing = True
        self._has_played = True
        _logger.debug("play at progress=%.4f elapsed=%.0fms", self._progress, self._elapsed_ms)

    def pause(self) -> None:
        """Freeze elapsed time and progress."""
        if self._playing:
            _logger.debug("pause at progress=%.4f", self._progress)
        self._playing = False

    def restart(self) -> None:
        """Pause and rewind to the start, re-arming every crossing and completion."""
        if self._destroyed:
            return
        self.pause()
        self._progress = 0.0
        self._elapsed_ms = 0.0
        self._detector.reset()
        self._trails.clear()
        self._popup = None
        self._tick_events = ()
        self._tick_completed = False
        self._completion_fired = False
        _logger.debug("restart")

    def seek_to(self, progress: float) -> None:
        """Jump to *progress* (clamped to [0, 1]).

        Elapsed time follows as ``progress * total``.  Both trails are cleared.
        Crossing state is recomputed from the new position: stations at or
        behind it count as crossed without firing, stations ahead of it fire
        when reached, including ones that had fired before a backward seek.
        Seeking to 1 completes the race.
        """
        if self._destroyed or math.isnan(progress):
            return
        target = max(0.0, min(1.0, progress))
        self._progress = target
        self._elapsed_ms = elapsed_at_progress(self.timeline, target)
        self._trails.clear()
        self._detector.sync_to(target)
        self._tick_events = ()
        self._tick_completed = False
        _logger.debug("seek to progress=%.4f elapsed=%.0fms", target, self._elapsed_ms)

        if target >= 1.0:
            self.pause()
            self._complete()
        else:
            self._completion_fired = False

    def set_speed(self, multiplier: float) -> None:
        """Set the playback rate; applies from the next tick."""
        if self._destroyed:
            return
        if math.isnan(multiplier) or multiplier < MIN_SPEED_MULTIPLIER:
            _logger.warning(
                "Speed multiplier %r out of range; clamped to %s", multiplier, MIN_SPEED_MULTIPLIER
            )
            multiplier = MIN_SPEED_MULTIPLIER
        self._speed = float(multiplier)

    def set_ghost(self, splits: SplitInput | None, label: str | None = None) -> None:
        """Replace the ghost performance; empty *splits* removes the ghost."""
        if self._destroyed:
            return
        timeline = build_timeline(splits)
        self.ghost = GhostSynchronizer(timeline, label or self._cfg.ghost_label)
        self.show_ghost = self.ghost.is_active
        self._trails.ghost.clear()
        if not self.ghost.is_active:
            _logger.info("No ghost data available")

    def toggle_ghost(self) -> None:
        if self._destroyed:
            return
        self.show_ghost = not self.show_ghost
        if not self.show_ghost:
            self._trails.ghost.clear()

    def destroy(self) -> None:
        """Stop for good; later commands and ticks have no effect.

        Read-only properties and :meth:`snapshot` keep working.
        """
        self.pause()
        self._destroyed = True
        self.on_station_reached = None
        self.on_complete = None

    # ------------------------------------------------------------------
    # Frame loop
    # ------------------------------------------------------------------

    def tick(self, real_delta_ms: float) -> FrameSnapshot:
        """Advance by *real_delta_ms* of wall time and return the new frame.

        Does nothing (beyond returning a snapshot) while paused, completed or
        destroyed.  Negative deltas count as zero.
        """
        self._tick_events = ()
        self._tick_completed = False
        if not self._playing or self._destroyed:
            return self.snapshot()

        dt = max(0.0, real_delta_ms)
        self._elapsed_ms += dt * self._speed
        previous = self._progress
        self._progress = progress_at_elapsed(self.timeline, self._elapsed_ms)
        if self.timeline.is_empty and self._progress < previous:
            # Progress is pinned at 0; crossing state follows it like a seek.
            self._detector.sync_to(self._progress)

        self._fade_popup(dt)
        events = self._detector.check(self._progress)
        for event in events:
            if event.split is not None:
                self._show_popup(event)
        self._tick_events = tuple(events)

        ghost = self._ghost_frame()
        self._trails.step(dt, self.position, ghost.position if ghost else None)

        # Capture before delivery so a callback that pauses or destroys the
        # engine still lets this tick's events through.
        callback = self.on_station_reached
        if callback is not None:
            for event in events:
                callback(event)

        completed = False
        if self._progress >= 1.0:
            self._playing = False
            completed = self._complete()

        # Callbacks may restart the engine; this tick still reports what it fired.
        return replace(self.snapshot(), events=tuple(events), completed=completed)

    def snapshot(self) -> FrameSnapshot:
        """Build the read-only frame for the current state."""
        return FrameSnapshot(
            progress=self._progress,
            elapsed_ms=self._elapsed_ms,
            total_ms=self.timeline.total_ms,
            speed_multiplier=self._speed,
            is_playing=self._playing,
            status=self.status,
            position=self.position,
            ghost=self._ghost_frame(),
            events=self._tick_events,
            completed=self._tick_completed,
            primary_particles=self._trails.primary.snapshot(),
            ghost_particles=self._trails.ghost.snapshot(),
            split_popup=self._popup,
            last_station_index=self._detector.last_station_index,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _ghost_frame(self) -> GhostFrame | None:
        if not self.show_ghost:
            return None
        return self.ghost.frame(self._elapsed_ms, self._progress, self.course)

    def _show_popup(self, event: CrossingEvent) -> None:
        self._popup = SplitPopup(
            text=f"{event.station.name}: {format_race_time(event.split.time_ms)}",
            opacity=1.0,
            x=event.station.x,
            y=event.station.y,
        )

    def _fade_popup(self, dt: float) -> None:
        if self._popup is None:
            return
        opacity = self._popup.opacity - dt / self._cfg.popup_fade_ms
        self._popup = replace(self._popup, opacity=opacity) if opacity > 0 else None

    def _complete(self) -> bool:
        """Signal completion unless already signalled this cycle; True if it fired."""
        if self._completion_fired:
            return False
        self._completion_fired = True
        self._tick_completed = True
        _logger.info("Race complete at elapsed=%.0fms", self._elapsed_ms)
        callback = self.on_complete
        if callback is not None:
            callback()
        return True
