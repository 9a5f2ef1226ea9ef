"""Ghost synchronisation — a second, independently timed performance on the same clock.

The ghost is not tied to the primary's progress: both timelines are driven by
the one shared elapsed clock and finish independently, which is what makes the
ahead/behind gap meaningful.
"""

from __future__ import annotations

from dataclasses import dataclass

from course_replay.course.models import Point
from course_replay.course.spline import CoursePath
from course_replay.timing.models import Timeline
from course_replay.timing.timeline import progress_at_elapsed

DEFAULT_GHOST_LABEL = "PRO"


@dataclass(frozen=True)
class GhostFrame:
    """Ghost state for one frame."""

    progress: float
    position: Point
    gap_ms: float
    """``> 0`` = primary is behind the ghost, ``< 0`` = ahead, ``0`` = even."""

    label: str


class GhostSynchronizer:
    """Computes ghost progress, position and time gap from the shared clock.

    Args:
        timeline: Ghost timeline.  A zero-duration timeline means "no ghost".
        label: Display name for the ghost performance.
    """

    def __init__(self, timeline: Timeline | None = None, label: str | None = None) -> None:
        self.timeline = timeline or Timeline.empty()
        self.label = label or DEFAULT_GHOST_LABEL

    @property
    def is_active(self) -> bool:
        return not self.timeline.is_empty

    @property
    def total_ms(self) -> float:
        return self.timeline.total_ms

    def progress_at(self, elapsed_ms: float) -> float:
        """Ghost progress after *elapsed_ms* of shared race time."""
        return progress_at_elapsed(self.timeline, elapsed_ms)

    def gap_ms(self, elapsed_ms: float, primary_progress: float) -> float:
        """Time gap to the ghost at the primary's current position.

        ``elapsed - primary_progress * ghost_total``: the ghost's time at the
        point the primary has reached, subtracted from the primary's time.
        Returns 0.0 when there is no ghost.
        """
        if not self.is_active:
            return 0.0
        return elapsed_ms - primary_progress * self.timeline.total_ms

    def frame(self, elapsed_ms: float, primary_progress: float, course: CoursePath) -> GhostFrame | None:
        """Return the :class:`GhostFrame` for this instant, or None with no ghost."""
        if not self.is_active:
            return None
        progress = self.progress_at(elapsed_ms)
        return GhostFrame(
            progress=progress,
            position=course.position_at(progress),
            gap_ms=self.gap_ms(elapsed_ms, primary_progress),
            label=self.label,
        )
