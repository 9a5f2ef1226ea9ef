"""Tests for the ghost synchroniser."""

from __future__ import annotations

import pytest

from course_replay.course.models import Station
from course_replay.course.spline import CoursePath
from course_replay.timing.ghost import DEFAULT_GHOST_LABEL, GhostSynchronizer
from course_replay.timing.models import Split, Timeline
from course_replay.timing.timeline import build_timeline


def _course() -> CoursePath:
    stations = [
        Station("station_1", "A", 1, 0, 0),
        Station("station_2", "B", 2, 100, 0),
    ]
    return CoursePath.from_stations(stations, 10)


class TestGhostSynchronizer:
    def test_inactive_without_splits(self):
        ghost = GhostSynchronizer(Timeline.empty())
        assert not ghost.is_active
        assert ghost.progress_at(5000) == 0.0
        assert ghost.gap_ms(5000, 0.5) == 0.0
        assert ghost.frame(5000, 0.5, _course()) is None

    def test_default_label(self):
        assert GhostSynchronizer().label == DEFAULT_GHOST_LABEL == "PRO"

    def test_progress_independent_of_primary(self):
        ghost = GhostSynchronizer(build_timeline([Split(0, 4000)]))
        assert ghost.progress_at(2000) == 0.5
        assert ghost.progress_at(8000) == 1.0

    def test_gap_ahead_of_ghost(self):
        """Primary total 3000, ghost 4000, both 2000 ms in: primary is ahead."""
        ghost = GhostSynchronizer(build_timeline([Split(0, 1500), Split(1, 2500)]), "ELITE")
        primary_progress = min(1.0, 2000 / 3000)
        gap = ghost.gap_ms(2000, primary_progress)
        assert gap == pytest.approx(-2000 / 3)
        assert gap < 0

    def test_gap_behind_ghost(self):
        ghost = GhostSynchronizer(build_timeline([Split(0, 2000)]))
        # 3000 ms in but only 50 % along: the ghost reached this point at 1000 ms
        assert ghost.gap_ms(3000, 0.5) == pytest.approx(2000)

    def test_gap_even(self):
        ghost = GhostSynchronizer(build_timeline([Split(0, 3000)]))
        assert ghost.gap_ms(1500, 0.5) == 0.0

    def test_frame_position_follows_ghost_progress(self):
        ghost = GhostSynchronizer(build_timeline([Split(0, 4000)]), "PRO")
        frame = ghost.frame(1000, 0.9, _course())
        assert frame is not None
        assert frame.progress == 0.25
        assert frame.position.x == pytest.approx(25.0)
        assert frame.label == "PRO"
