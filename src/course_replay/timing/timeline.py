"""Timeline construction from split sequences."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from course_replay.timing.models import Split, Timeline


def _as_split(item: Split | Mapping[str, Any]) -> Split:
    return item if isinstance(item, Split) else Split.from_dict(item)


def build_timeline(splits: Iterable[Split | Mapping[str, Any]] | None) -> Timeline:
    """Return the cumulative :class:`Timeline` for *splits*.

    Accepts :class:`Split` objects or raw split dicts.  ``None`` or an empty
    sequence gives an empty timeline with ``total_ms == 0``.
    """
    if not splits:
        return Timeline.empty()

    parsed = tuple(_as_split(s) for s in splits)
    cumulative: list[float] = []
    running = 0.0
    for split in parsed:
        running += split.time_ms
        cumulative.append(running)
    return Timeline(splits=parsed, cumulative_ms=tuple(cumulative), total_ms=running)


def elapsed_at_progress(timeline: Timeline, progress: float) -> float:
    """Race time (ms) corresponding to *progress* ∈ [0, 1] on *timeline*."""
    clamped = max(0.0, min(1.0, progress))
    return clamped * timeline.total_ms


def format_race_time(ms: float) -> str:
    """Format a race time as ``MM:SS`` (whole seconds, truncated)."""
    total_sec = int(max(0.0, ms) // 1000)
    return f"{total_sec // 60:02d}:{total_sec % 60:02d}"


def progress_at_elapsed(timeline: Timeline, elapsed_ms: float) -> float:
    """Progress reached after *elapsed_ms* on *timeline*; 0 for an empty timeline."""
    if timeline.is_empty:
        return 0.0
    return min(1.0, max(0.0, elapsed_ms) / timeline.total_ms)
