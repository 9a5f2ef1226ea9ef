"""Station crossing detection."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from course_replay.course.models import Station
from course_replay.timing.models import Split, Timeline

NO_STATION = -1


@dataclass(frozen=True)
class CrossingEvent:
    """Progress reached (or passed) a station for the first time this play cycle."""

    station: Station

    position: int
    """0-based position of the station in race order."""

    progress: float
    """Progress value at which the station sits on the path."""

    split: Split | None
    """Split recorded at the same position, if any."""


class CrossingDetector:
    """Fires one :class:`CrossingEvent` per station as progress passes it.

    Deduplicates through ``last_station_index``: station *i* fires on the
    first check where ``progress >= station_progresses[i]`` and
    ``i > last_station_index``.  When a single check jumps past several
    stations they all fire, in ascending order.

    Parameters
    ----------
    stations:
        Stations in race order.
    station_progresses:
        Path progress of each station, non-decreasing.
    timeline:
        Primary timeline; ``timeline.split_at(i)`` is attached to station *i*.
    """

    def __init__(
        self,
        stations: Sequence[Station],
        station_progresses: Sequence[float],
        timeline: Timeline | None = None,
    ) -> None:
        self._stations = tuple(stations)
        self._progresses = tuple(station_progresses)
        self._timeline = timeline or Timeline.empty()
        self.last_station_index = NO_STATION

    def check(self, progress: float) -> list[CrossingEvent]:
        """Return the stations newly reached at *progress*, in ascending order."""
        fired: list[CrossingEvent] = []
        for i in range(self.last_station_index + 1, len(self._progresses)):
            station_pct = self._progresses[i]
            if progress < station_pct:
                break
            self.last_station_index = i
            fired.append(CrossingEvent(
                station=self._stations[i],
                position=i,
                progress=station_pct,
                split=self._timeline.split_at(i),
            ))
        return fired

    def reset(self) -> None:
        """Re-arm every station (start of a new play cycle)."""
        self.last_station_index = NO_STATION

    def sync_to(self, progress: float) -> None:
        """Mark exactly the stations at or behind *progress* as crossed, without firing.

        Used after a seek: stations behind the new position will not fire, and
        stations ahead of it (including ones already fired before a backward
        seek) will fire again when reached.
        """
        last = NO_STATION
        for i, station_pct in enumerate(self._progresses):
            if station_pct <= progress:
                last = i
            else:
                break
        self.last_station_index = last
