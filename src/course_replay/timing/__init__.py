"""Split timelines and ghost comparison."""

from course_replay.timing.ghost import GhostFrame, GhostSynchronizer
from course_replay.timing.models import Split, Timeline
from course_replay.timing.timeline import (
    build_timeline,
    elapsed_at_progress,
    format_race_time,
    progress_at_elapsed,
)

__all__ = [
    "GhostFrame",
    "GhostSynchronizer",
    "Split",
    "Timeline",
    "build_timeline",
    "elapsed_at_progress",
    "format_race_time",
    "progress_at_elapsed",
]
