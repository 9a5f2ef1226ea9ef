"""Course path geometry — Catmull-Rom interpolation and arc-length progress.

Turns an ordered list of stations into a dense path and answers two queries
the playback engine needs every frame: *where is the marker at progress p*
and *at which progress does station i sit*.

Progress is normalised arc length rather than the spline parameter, so a
marker moving at constant progress rate covers equal distance per frame no
matter how unevenly the stations are spaced.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field

from course_replay.course.models import Point, Station

CENTER = Point(50.0, 50.0)


def catmull_rom_point(t: float, p0: Point, p1: Point, p2: Point, p3: Point) -> Point:
    """Return the point at *t* ∈ [0, 1] on the uniform Catmull-Rom segment p1 → p2."""
    t2 = t * t
    t3 = t2 * t

    def axis(a: float, b: float, c: float, d: float) -> float:
        return 0.5 * (
            (2 * b)
            + (-a + c) * t
            + (2 * a - 5 * b + 4 * c - d) * t2
            + (-a + 3 * b - 3 * c + d) * t3
        )

    return Point(axis(p0.x, p1.x, p2.x, p3.x), axis(p0.y, p1.y, p2.y, p3.y))


def generate_path(stations: Sequence[Station | Point], samples_per_segment: int = 20) -> list[Point]:
    """Build a dense path through *stations*.

    * fewer than 2 stations — the stations themselves, verbatim
    * exactly 2 — a straight line of ``samples_per_segment + 1`` samples
    * 3 or more — a Catmull-Rom spline whose end control points are duplicated
      so the curve starts and ends exactly on the first and last station

    Raises:
        ValueError: If *samples_per_segment* is less than 1.
    """
    if samples_per_segment < 1:
        raise ValueError("samples_per_segment must be >= 1")

    points = [Point(s.x, s.y) for s in stations]
    n = len(points)
    if n < 2:
        return points

    if n == 2:
        a, b = points
        path: list[Point] = []
        for i in range(samples_per_segment + 1):
            t = i / samples_per_segment
            path.append(Point(a.x + (b.x - a.x) * t, a.y + (b.y - a.y) * t))
        # Pin the far end; float blending can land a hair off.
        path[-1] = b
        return path

    path = []
    for i in range(n - 1):
        p0 = points[max(0, i - 1)]
        p1 = points[i]
        p2 = points[i + 1]
        p3 = points[min(n - 1, i + 2)]
        for s in range(samples_per_segment):
            path.append(catmull_rom_point(s / samples_per_segment, p0, p1, p2, p3))

    path.append(points[-1])
    return path


def position_at_progress(path: Sequence[Point], progress: float) -> Point:
    """Return the point at *progress* along *path* by blending the two nearest samples.

    *progress* is clamped to [0, 1].  An empty path yields the viewport centre.
    """
    if not path:
        return CENTER
    clamped = max(0.0, min(1.0, progress))
    idx = clamped * (len(path) - 1)
    lower = int(math.floor(idx))
    upper = min(lower + 1, len(path) - 1)
    frac = idx - lower
    a, b = path[lower], path[upper]
    return Point(a.x + (b.x - a.x) * frac, a.y + (b.y - a.y) * frac)


def arc_lengths(path: Sequence[Point]) -> list[float]:
    """Return cumulative distance along *path* normalised to [0, 1].

    A path with fewer than two samples returns ``[0.0]``.  A path whose samples
    all coincide has zero length and returns all zeros.
    """
    if len(path) < 2:
        return [0.0]

    lengths = [0.0]
    total = 0.0
    for prev, cur in zip(path, path[1:]):
        total += math.hypot(cur.x - prev.x, cur.y - prev.y)
        lengths.append(total)

    if total <= 0.0:
        return [0.0] * len(path)
    normalised = [length / total for length in lengths]
    normalised[-1] = 1.0
    return normalised


def station_progress(station_index: int, arc_length_table: Sequence[float], samples_per_segment: int) -> float:
    """Return the progress value of station *station_index*.

    Looks up ``station_index * samples_per_segment`` in the arc-length table,
    clamped to the table bounds.  Stations are spline control points, so they
    sit exactly on those sample offsets.
    """
    if not arc_length_table:
        return 0.0
    idx = max(0, min(station_index * samples_per_segment, len(arc_length_table) - 1))
    return arc_length_table[idx]


@dataclass(frozen=True)
class CoursePath:
    """Geometry for one course, computed once per session.

    Build with :meth:`from_stations`; all queries return fresh :class:`Point`
    values and never expose the internal sample storage for mutation.
    """

    stations: tuple[Station, ...]
    samples: tuple[Point, ...]
    arc_lengths: tuple[float, ...]
    station_progresses: tuple[float, ...]
    samples_per_segment: int = field(default=20)

    @classmethod
    def from_stations(cls, stations: Sequence[Station], samples_per_segment: int = 20) -> CoursePath:
        samples = generate_path(stations, samples_per_segment)
        table = arc_lengths(samples)
        # With two stations the line is sampled as a single segment.
        progresses = tuple(
            station_progress(i, table, samples_per_segment) for i in range(len(stations))
        )
        return cls(
            stations=tuple(stations),
            samples=tuple(samples),
            arc_lengths=tuple(table),
            station_progresses=progresses,
            samples_per_segment=samples_per_segment,
        )

    @property
    def is_degenerate(self) -> bool:
        """True when there is no drawable geometry (fewer than two samples)."""
        return len(self.samples) < 2

    def position_at(self, progress: float) -> Point:
        return position_at_progress(self.samples, progress)

    def traversed_count(self, progress: float) -> int:
        """Number of path samples at or behind *progress* (for highlighting the travelled part)."""
        if not self.samples:
            return 0
        clamped = max(0.0, min(1.0, progress))
        if clamped <= 0.0:
            return 0
        return int(math.floor(clamped * (len(self.samples) - 1))) + 1
