"""Course modeling — stations and spline path geometry."""

from course_replay.course.models import Point, Station
from course_replay.course.spline import (
    CoursePath,
    arc_lengths,
    generate_path,
    position_at_progress,
    station_progress,
)
from course_replay.course.stations import STANDARD_LAYOUT, build_stations, oval_stations

__all__ = [
    "STANDARD_LAYOUT",
    "CoursePath",
    "Point",
    "Station",
    "arc_lengths",
    "build_stations",
    "generate_path",
    "oval_stations",
    "position_at_progress",
    "station_progress",
]
