"""Overlay rendering — data formatting for whatever draws the course."""

from __future__ import annotations

import math

from course_replay.course.models import Point
from course_replay.course.spline import CoursePath
from course_replay.playback.engine import FrameSnapshot
from course_replay.timing.timeline import format_race_time


def to_pixel(point: Point, width: float, height: float) -> tuple[float, float]:
    """Map a percentage-of-viewport point to pixel coordinates."""
    return (point.x / 100.0 * width, point.y / 100.0 * height)


def format_gap(gap_ms: float, label: str) -> tuple[str, str]:
    """Format a ghost gap as ``(text, tone)``.

    The gap is rounded to whole seconds, halves rounding up.  *tone* is one of
    ``'behind'``, ``'ahead'`` or ``'even'``.

    Examples
    --------
    >>> format_gap(3400, "PRO")
    ('+3s behind PRO', 'behind')
    >>> format_gap(-667, "PRO")
    ('-1s ahead!', 'ahead')
    >>> format_gap(200, "PRO")
    ('Even with PRO', 'even')
    """
    gap_sec = math.floor(gap_ms / 1000.0 + 0.5)
    if gap_sec > 0:
        return f"+{gap_sec}s behind {label}", "behind"
    if gap_sec < 0:
        return f"{gap_sec}s ahead!", "ahead"
    return f"Even with {label}", "even"


def format_speed(multiplier: float) -> str:
    """``10.0`` → ``'10×'``, ``2.5`` → ``'2.5×'``."""
    return f"{multiplier:g}×"


class OverlayRenderer:
    """Formats :class:`~course_replay.playback.engine.FrameSnapshot` for display.

    Pure data transformations with no side effects; the drawing surface
    itself belongs to the caller.

    Parameters
    ----------
    course:
        Course geometry of the replay being shown.
    """

    def __init__(self, course: CoursePath) -> None:
        self.course = course

    def render(self, snapshot: FrameSnapshot) -> dict:
        """Return a display-ready dict for one frame.

        Returns
        -------
        dict with keys:
            ``elapsed``          – ``'MM:SS'``
            ``total``            – ``'MM:SS'`` or ``None`` without a timeline
            ``speed``            – e.g. ``'10×'``
            ``progress``         – float [0.0, 1.0]
            ``position``         – ``(x, y)`` in percent
            ``traversed_count``  – path samples to highlight as travelled
            ``stations``         – per station: name, number, reached, active
            ``ghost``            – ghost label/position or ``None``
            ``gap``              – ``{'text', 'tone'}`` or ``None``
            ``popup``            – split popup dict or ``None``
        """
        ghost = snapshot.ghost
        gap = None
        # Gap is only meaningful while racing against a timed ghost.
        if ghost is not None and snapshot.is_playing and snapshot.total_ms > 0:
            text, tone = format_gap(ghost.gap_ms, ghost.label)
            gap = {"text": text, "tone": tone}

        popup = snapshot.split_popup
        return {
            "elapsed": format_race_time(snapshot.elapsed_ms),
            "total": format_race_time(snapshot.total_ms) if snapshot.total_ms > 0 else None,
            "speed": format_speed(snapshot.speed_multiplier),
            "progress": snapshot.progress,
            "position": (snapshot.position.x, snapshot.position.y),
            "traversed_count": self.course.traversed_count(snapshot.progress),
            "stations": self._stations(snapshot),
            "ghost": (
                {"label": ghost.label, "position": (ghost.position.x, ghost.position.y)}
                if ghost is not None
                else None
            ),
            "gap": gap,
            "popup": (
                {"text": popup.text, "opacity": popup.opacity, "position": (popup.x, popup.y)}
                if popup is not None
                else None
            ),
        }

    def _stations(self, snapshot: FrameSnapshot) -> list[dict]:
        last = snapshot.last_station_index
        return [
            {
                "name": station.name.upper(),
                "number": station.index,
                "progress": pct,
                "reached": i <= last,
                "active": i == last and snapshot.is_playing,
            }
            for i, (station, pct) in enumerate(
                zip(self.course.stations, self.course.station_progresses)
            )
        ]
