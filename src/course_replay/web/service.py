"""ReplayService — runs a headless replay for the Web API."""

from __future__ import annotations

import logging
from dataclasses import replace

from course_replay.course.spline import CoursePath
from course_replay.course.stations import build_stations
from course_replay.playback.config import ReplayConfig
from course_replay.playback.engine import FrameSnapshot, PlaybackEngine
from course_replay.timing.timeline import build_timeline
from course_replay.web.schemas import (
    CourseRequest,
    CourseResponse,
    CrossingOut,
    FrameOut,
    PointOut,
    ReplayRequest,
    ReplayResponse,
    StationOut,
)

_logger = logging.getLogger(__name__)

MAX_FRAMES = 10_000


class ReplayService:
    """Builds courses and simulates full replays from request payloads.

    Parameters
    ----------
    config:
        Base configuration; request fields override geometry, seed and label.
    max_frames:
        Upper bound on simulated frames per replay.
    """

    def __init__(self, config: ReplayConfig | None = None, max_frames: int = MAX_FRAMES) -> None:
        self._config = config or ReplayConfig()
        self._max_frames = max_frames

    def describe_course(self, req: CourseRequest) -> CourseResponse:
        """Return stations, dense path and station progress for *req*."""
        course = self._course(req)
        return CourseResponse(
            stations=[
                StationOut(key=s.key, name=s.name, index=s.index, x=s.x, y=s.y, progress=pct)
                for s, pct in zip(course.stations, course.station_progresses)
            ],
            path=[PointOut(x=p.x, y=p.y) for p in course.samples],
            degenerate=course.is_degenerate,
        )

    def run_replay(self, req: ReplayRequest) -> ReplayResponse:
        """Play *req* from start to finish at a fixed frame interval.

        Raises
        ------
        ValueError
            If the primary splits add up to zero time (nothing to play).
        """
        timeline = build_timeline([s.model_dump() for s in req.splits])
        if timeline.is_empty:
            raise ValueError("No split times supplied; nothing to replay")

        cfg = self._request_config(req)
        engine = PlaybackEngine(
            self._course(req),
            timeline,
            build_timeline([s.model_dump() for s in req.ghost_splits]),
            config=cfg,
            ghost_label=req.ghost_label,
        )

        frames: list[FrameOut] = []
        crossings: list[CrossingOut] = []
        snapshot = engine.snapshot()
        engine.play()
        while engine.is_playing and len(frames) < self._max_frames:
            snapshot = engine.tick(req.frame_ms)
            frames.append(_frame(snapshot))
            crossings.extend(
                CrossingOut(
                    position=e.position,
                    station_key=e.station.key,
                    station_name=e.station.name,
                    station_index=e.station.index,
                    progress=e.progress,
                    elapsed_ms=snapshot.elapsed_ms,
                    split_time_ms=e.split.time_ms if e.split is not None else None,
                )
                for e in snapshot.events
            )

        truncated = engine.is_playing
        engine.destroy()
        _logger.info(
            "Replayed %d frames (%d crossings, total=%.0fms, truncated=%s)",
            len(frames), len(crossings), timeline.total_ms, truncated,
        )
        return ReplayResponse(
            total_ms=timeline.total_ms,
            ghost_total_ms=engine.ghost.total_ms,
            ghost_label=engine.ghost.label if engine.ghost.is_active else None,
            frames=frames,
            crossings=crossings,
            completed=engine.progress >= 1.0,
            truncated=truncated,
            final_gap_ms=snapshot.ghost.gap_ms if snapshot.ghost is not None else None,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _request_config(self, req: ReplayRequest) -> ReplayConfig:
        base = self._config
        return replace(
            base,
            samples_per_segment=req.samples_per_segment,
            include_special_markers=req.include_special_markers,
            default_speed=req.speed,
            ghost_label=req.ghost_label or base.ghost_label,
            seed=req.seed if req.seed is not None else base.seed,
        )

    def _course(self, req: CourseRequest) -> CoursePath:
        stations = build_stations(req.waypoints, req.include_special_markers)
        if not stations:
            _logger.info("No location data available; using a degenerate course")
        return CoursePath.from_stations(stations, req.samples_per_segment)


def _frame(snapshot: FrameSnapshot) -> FrameOut:
    ghost = snapshot.ghost
    return FrameOut(
        elapsed_ms=snapshot.elapsed_ms,
        progress=snapshot.progress,
        x=snapshot.position.x,
        y=snapshot.position.y,
        ghost_progress=ghost.progress if ghost else None,
        ghost_x=ghost.position.x if ghost else None,
        ghost_y=ghost.position.y if ghost else None,
        gap_ms=ghost.gap_ms if ghost else None,
        primary_particles=len(snapshot.primary_particles),
        ghost_particles=len(snapshot.ghost_particles),
    )
