"""Station model — normalise a sparse waypoint mapping into ordered stations."""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from course_replay.course.models import START_FINISH_INDEX, TRANSITION_INDEX, Station

_logger = logging.getLogger(__name__)

MAX_NUMBERED_STATIONS = 8

START_FINISH_KEY = "start_finish"
TRANSITION_KEY = "roxzone"

# Standard venue layout: eight stations on an oval around a central roxzone.
STANDARD_LAYOUT: dict[str, dict[str, Any]] = {
    "start_finish": {"x": 50, "y": 92, "name": "Start / Finish"},
    "station_1": {"x": 20, "y": 78, "name": "SkiErg"},
    "station_2": {"x": 15, "y": 58, "name": "Sled Push"},
    "station_3": {"x": 20, "y": 38, "name": "Sled Pull"},
    "station_4": {"x": 35, "y": 18, "name": "Burpee Broad Jump"},
    "station_5": {"x": 65, "y": 18, "name": "Rowing"},
    "station_6": {"x": 80, "y": 38, "name": "Farmers Carry"},
    "station_7": {"x": 85, "y": 58, "name": "Sandbag Lunges"},
    "station_8": {"x": 80, "y": 78, "name": "Wall Balls"},
    "roxzone": {"x": 50, "y": 50, "name": "Roxzone"},
}


# ---------------------------------------------------------------------------
# Module-level helpers
# ---------------------------------------------------------------------------


def _coerce_mapping(waypoints: Any) -> Mapping[str, Any] | None:
    """Accept a mapping or its JSON text; return None for anything else."""
    if isinstance(waypoints, (str, bytes)):
        try:
            waypoints = json.loads(waypoints)
        except (json.JSONDecodeError, UnicodeDecodeError):
            _logger.warning("Waypoint JSON could not be parsed; no stations built")
            return None
    if not isinstance(waypoints, Mapping):
        if waypoints is not None:
            _logger.warning("Waypoints must be a mapping, got %s", type(waypoints).__name__)
        return None
    return waypoints


def _station(key: str, entry: Any, index: int, default_name: str) -> Station | None:
    """Build one :class:`Station` or return None when coordinates are unusable."""
    try:
        x = float(entry["x"])
        y = float(entry["y"])
    except (KeyError, TypeError, ValueError):
        _logger.debug("Skipping waypoint %r: missing or invalid coordinates", key)
        return None
    if math.isnan(x) or math.isnan(y):
        _logger.debug("Skipping waypoint %r: NaN coordinates", key)
        return None
    name = entry.get("name") if isinstance(entry, Mapping) else None
    return Station(key=key, name=str(name) if name else default_name, index=index, x=x, y=y)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def build_stations(waypoints: Any, include_special_markers: bool = False) -> list[Station]:
    """Return stations in race order from a ``key -> {x, y, name}`` mapping.

    Numbered entries ``station_1`` … ``station_8`` are ordered by their numeric
    suffix.  With *include_special_markers*, the start/finish marker is put
    first and the transition marker is inserted at ``len(stations) // 2``, which
    approximates where a looped course passes through it.

    Missing entries are simply left out.  Empty or malformed input returns an
    empty list rather than raising.
    """
    parsed = _coerce_mapping(waypoints)
    if not parsed:
        return []

    stations: list[Station] = []

    if include_special_markers and parsed.get(START_FINISH_KEY):
        start = _station(START_FINISH_KEY, parsed[START_FINISH_KEY], START_FINISH_INDEX, "")
        if start is not None:
            # Special markers always carry their generic labels.
            stations.append(replace(start, name="Start/Finish"))

    for num in range(1, MAX_NUMBERED_STATIONS + 1):
        key = f"station_{num}"
        entry = parsed.get(key)
        if not entry:
            continue
        station = _station(key, entry, num, f"Station {num}")
        if station is not None:
            stations.append(station)

    if include_special_markers and parsed.get(TRANSITION_KEY):
        zone = _station(TRANSITION_KEY, parsed[TRANSITION_KEY], TRANSITION_INDEX, "")
        if zone is not None:
            mid = len(stations) // 2
            stations.insert(mid, replace(zone, name="ROXZONE"))

    return stations


def oval_stations(count: int = MAX_NUMBERED_STATIONS) -> list[Station]:
    """Place *count* numbered stations on an ellipse around the viewport centre.

    Used as a stand-in layout for venues that have no recorded coordinates.
    """
    stations: list[Station] = []
    for i in range(count):
        angle = (i / count) * math.pi * 2
        stations.append(Station(
            key=f"station_{i + 1}",
            name=f"Station {i + 1}",
            index=i + 1,
            x=50 + 35 * math.cos(angle),
            y=50 + 25 * math.sin(angle),
        ))
    return stations
