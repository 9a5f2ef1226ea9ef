"""Tests for spline path geometry and arc-length progress."""

from __future__ import annotations

import pytest

from course_replay.course.models import Point, Station
from course_replay.course.spline import (
    CENTER,
    CoursePath,
    arc_lengths,
    catmull_rom_point,
    generate_path,
    position_at_progress,
    station_progress,
)

# ---------------------------------------------------------------------------
# Test-data helpers
# ---------------------------------------------------------------------------


def make_stations(*coords: tuple[float, float]) -> list[Station]:
    return [
        Station(key=f"station_{i + 1}", name=f"S{i + 1}", index=i + 1, x=x, y=y)
        for i, (x, y) in enumerate(coords)
    ]


L_SHAPE = make_stations((0, 0), (100, 0), (100, 100))


# ---------------------------------------------------------------------------
# generate_path
# ---------------------------------------------------------------------------


class TestGeneratePath:
    def test_empty_and_single_station_are_verbatim(self):
        assert generate_path([], 10) == []
        assert generate_path(make_stations((12, 34)), 10) == [Point(12, 34)]

    def test_two_stations_are_linear(self):
        path = generate_path(make_stations((0, 0), (100, 50)), 10)
        assert len(path) == 11
        for i, p in enumerate(path):
            assert p.x == pytest.approx(i * 10.0)
            assert p.y == pytest.approx(i * 5.0)

    @pytest.mark.parametrize("n, samples", [(3, 20), (5, 7), (10, 1)])
    def test_sample_count(self, n, samples):
        stations = make_stations(*[(i * 10, (i % 2) * 20) for i in range(n)])
        assert len(generate_path(stations, samples)) == (n - 1) * samples + 1

    def test_endpoints_are_exact(self):
        path = generate_path(L_SHAPE, 20)
        assert path[0] == Point(0, 0)
        assert path[-1] == Point(100, 100)

    def test_passes_through_every_station(self):
        stations = make_stations((10, 10), (40, 80), (70, 20), (90, 60))
        path = generate_path(stations, 8)
        for i, s in enumerate(stations):
            p = path[i * 8]
            assert p.x == pytest.approx(s.x)
            assert p.y == pytest.approx(s.y)

    def test_colinear_stations_stay_on_the_line(self):
        path = generate_path(make_stations((0, 50), (50, 50), (100, 50)), 12)
        assert all(p.y == pytest.approx(50.0) for p in path)

    def test_rejects_zero_samples(self):
        with pytest.raises(ValueError):
            generate_path(L_SHAPE, 0)


def test_catmull_rom_segment_endpoints():
    p0, p1, p2, p3 = Point(0, 0), Point(10, 0), Point(20, 10), Point(30, 10)
    assert catmull_rom_point(0.0, p0, p1, p2, p3) == p1
    end = catmull_rom_point(1.0, p0, p1, p2, p3)
    assert end.x == pytest.approx(20.0)
    assert end.y == pytest.approx(10.0)


# ---------------------------------------------------------------------------
# position_at_progress
# ---------------------------------------------------------------------------


class TestPositionAtProgress:
    def test_start_and_end_match_first_and_last_station(self):
        path = generate_path(L_SHAPE, 20)
        assert position_at_progress(path, 0.0) == Point(0, 0)
        assert position_at_progress(path, 1.0) == Point(100, 100)

    def test_two_station_midpoint(self):
        path = generate_path(make_stations((10, 20), (50, 80)), 7)
        mid = position_at_progress(path, 0.5)
        assert mid.x == pytest.approx(30.0)
        assert mid.y == pytest.approx(50.0)

    def test_single_station_path(self):
        path = generate_path(make_stations((12, 34)), 20)
        for p in (0.0, 0.5, 1.0):
            assert position_at_progress(path, p) == Point(12, 34)

    def test_empty_path_falls_back_to_centre(self):
        assert position_at_progress([], 0.3) == CENTER == Point(50, 50)

    @pytest.mark.parametrize("progress, expected", [(-0.5, Point(0, 0)), (7.0, Point(100, 100))])
    def test_progress_is_clamped(self, progress, expected):
        path = generate_path(L_SHAPE, 20)
        assert position_at_progress(path, progress) == expected

    def test_blends_between_samples(self):
        path = [Point(0, 0), Point(10, 0), Point(10, 10)]
        p = position_at_progress(path, 0.25)
        assert (p.x, p.y) == pytest.approx((5.0, 0.0))


# ---------------------------------------------------------------------------
# arc_lengths / station_progress
# ---------------------------------------------------------------------------


class TestArcLengths:
    def test_normalised_and_non_decreasing(self):
        table = arc_lengths(generate_path(L_SHAPE, 20))
        assert table[0] == 0.0
        assert table[-1] == 1.0
        assert all(a <= b for a, b in zip(table, table[1:]))

    def test_short_paths(self):
        assert arc_lengths([]) == [0.0]
        assert arc_lengths([Point(3, 3)]) == [0.0]

    def test_zero_length_path_is_all_zeros(self):
        assert arc_lengths([Point(5, 5), Point(5, 5), Point(5, 5)]) == [0.0, 0.0, 0.0]

    def test_uneven_polyline(self):
        table = arc_lengths([Point(0, 0), Point(30, 0), Point(30, 10)])
        assert table == pytest.approx([0.0, 0.75, 1.0])


class TestStationProgress:
    def test_looks_up_sample_offset(self):
        table = [0.0, 0.1, 0.4, 0.6, 1.0]
        assert station_progress(1, table, 2) == 0.4

    def test_clamps_to_table_bounds(self):
        assert station_progress(5, [0.0, 0.5, 1.0], 20) == 1.0
        assert station_progress(-1, [0.0, 0.5, 1.0], 20) == 0.0
        assert station_progress(0, [], 20) == 0.0

    def test_symmetric_course_puts_middle_station_halfway(self):
        course = CoursePath.from_stations(L_SHAPE, 20)
        assert course.station_progresses[0] == 0.0
        assert course.station_progresses[1] == pytest.approx(0.5, abs=1e-9)
        assert course.station_progresses[2] == 1.0

    def test_station_progress_is_non_decreasing(self):
        stations = make_stations((10, 90), (15, 20), (60, 25), (90, 80), (50, 60))
        course = CoursePath.from_stations(stations, 30)
        pcts = course.station_progresses
        assert pcts[0] == 0.0
        assert pcts[-1] == 1.0
        assert all(a <= b for a, b in zip(pcts, pcts[1:]))


# ---------------------------------------------------------------------------
# CoursePath
# ---------------------------------------------------------------------------


class TestCoursePath:
    def test_two_station_course(self):
        course = CoursePath.from_stations(make_stations((0, 0), (100, 0)), 20)
        assert course.station_progresses == (0.0, 1.0)
        assert course.position_at(0.25) == Point(25, 0)

    def test_degenerate_course(self):
        course = CoursePath.from_stations([], 20)
        assert course.is_degenerate
        assert course.position_at(0.7) == CENTER
        assert course.station_progresses == ()
        assert course.traversed_count(0.5) == 0

    def test_traversed_count(self):
        course = CoursePath.from_stations(L_SHAPE, 20)  # 41 samples
        assert course.traversed_count(0.0) == 0
        assert course.traversed_count(0.5) == 21
        assert course.traversed_count(1.0) == 41

    def test_samples_are_immutable_values(self):
        course = CoursePath.from_stations(L_SHAPE, 20)
        with pytest.raises(AttributeError):
            course.samples[0].x = 99  # type: ignore[misc]
        assert course.position_at(0.0) == Point(0, 0)
