"""Timing data models — splits and the cumulative timeline built from them."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Split:
    """Recorded duration of one station transition."""

    station_index: int
    """Station number this split ends at."""

    time_ms: float
    """Duration in milliseconds (>= 0)."""

    name: str = ""
    """Display name, usually the station's activity."""

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> Split:
        """Create a :class:`Split` from a stored split dict.

        Accepts ``stationIndex`` / ``stationNum`` / ``station_index`` and
        ``timeMs`` / ``time_ms``.  Negative times are clamped to 0.

        Raises:
            KeyError: If no time field is present.
            ValueError: If a field is not numeric.
        """
        station = d.get("stationIndex", d.get("stationNum", d.get("station_index", 0)))
        time_ms = d["timeMs"] if "timeMs" in d else d["time_ms"]
        return cls(
            station_index=int(station),
            time_ms=max(0.0, float(time_ms)),
            name=str(d.get("name") or ""),
        )


@dataclass(frozen=True)
class Timeline:
    """Cumulative time model for one performance.

    ``cumulative_ms[i]`` is the race time at the end of split *i*;
    ``total_ms`` equals the sum of all split times.
    """

    splits: tuple[Split, ...]
    cumulative_ms: tuple[float, ...]
    total_ms: float

    @classmethod
    def empty(cls) -> Timeline:
        return cls(splits=(), cumulative_ms=(), total_ms=0.0)

    @property
    def is_empty(self) -> bool:
        """True when the timeline cannot drive progress (zero total duration)."""
        return self.total_ms <= 0.0

    def split_at(self, position: int) -> Split | None:
        """Return the split at list *position*, or None when there is none."""
        if 0 <= position < len(self.splits):
            return self.splits[position]
        return None
