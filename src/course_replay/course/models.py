"""Course modeling data structures."""

from __future__ import annotations

from dataclasses import dataclass

START_FINISH_INDEX = 0
TRANSITION_INDEX = -1


@dataclass(frozen=True)
class Point:
    """A 2-D position in percentage-of-viewport coordinates (0-100 on each axis)."""

    x: float
    y: float


@dataclass(frozen=True)
class Station:
    """A named waypoint on the course.

    Stations are immutable once built; geometry code reads them as spline
    control points in race order.
    """

    key: str
    """Symbolic key from the waypoint mapping (``'station_3'``, ``'roxzone'`` …)."""

    name: str
    """Display name."""

    index: int
    """``0`` = start/finish, ``1..8`` = numbered station, ``-1`` = transition zone."""

    x: float
    """X coordinate, percent of viewport width."""

    y: float
    """Y coordinate, percent of viewport height."""

    @property
    def point(self) -> Point:
        return Point(self.x, self.y)

    @property
    def is_numbered(self) -> bool:
        return self.index > 0
