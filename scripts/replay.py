"""Headless course replay — prints station crossings and the ghost gap.

Usage:
    uv run python scripts/replay.py                          # standard layout, demo splits
    uv run python scripts/replay.py --session race.json --speed 60
    uv run python scripts/replay.py --realtime --fps 30      # pace ticks with the wall clock

A session file is JSON with ``waypoints`` (key -> {x, y, name}; omit it for an
oval layout), ``splits`` and optionally ``ghost_splits`` / ``ghost_label``.
Split entries use ``stationIndex``/``timeMs``/``name``.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

from course_replay.course.spline import CoursePath  # noqa: E402
from course_replay.course.stations import STANDARD_LAYOUT, oval_stations  # noqa: E402
from course_replay.overlay.renderer import OverlayRenderer, format_gap  # noqa: E402
from course_replay.playback.config import ReplayConfig  # noqa: E402
from course_replay.playback.engine import PlaybackEngine  # noqa: E402
from course_replay.timing.timeline import build_timeline, format_race_time  # noqa: E402

_DEMO_SPLITS = [
    {"stationIndex": 1, "timeMs": 290_000, "name": "SkiErg"},
    {"stationIndex": 2, "timeMs": 215_000, "name": "Sled Push"},
    {"stationIndex": 3, "timeMs": 260_000, "name": "Sled Pull"},
    {"stationIndex": 4, "timeMs": 330_000, "name": "Burpee Broad Jump"},
    {"stationIndex": 5, "timeMs": 300_000, "name": "Rowing"},
    {"stationIndex": 6, "timeMs": 170_000, "name": "Farmers Carry"},
    {"stationIndex": 7, "timeMs": 280_000, "name": "Sandbag Lunges"},
    {"stationIndex": 8, "timeMs": 390_000, "name": "Wall Balls"},
]
_DEMO_GHOST = [
    {**s, "timeMs": int(s["timeMs"] * 0.9)} for s in _DEMO_SPLITS
]


def _load_session(path: str | None) -> dict:
    if not path:
        return {
            "waypoints": STANDARD_LAYOUT,
            "splits": _DEMO_SPLITS,
            "ghost_splits": _DEMO_GHOST,
            "ghost_label": "PRO",
        }
    return json.loads(Path(path).read_text(encoding="utf-8"))


def main() -> None:
    ap = argparse.ArgumentParser(description="Course Replay — headless race playback")
    ap.add_argument("--session", default=None, help="JSON session file (default: demo race)")
    ap.add_argument("--speed", type=float, default=None, help="Playback speed multiplier")
    ap.add_argument("--fps", type=float, default=60.0, help="Simulated frames per second")
    ap.add_argument("--special", action="store_true", help="Include start/finish and roxzone markers")
    ap.add_argument("--realtime", action="store_true", help="Sleep between frames")
    ap.add_argument("--no-ghost", action="store_true", help="Ignore ghost splits")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = ap.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        session = _load_session(args.session)
    except (OSError, json.JSONDecodeError) as exc:
        print(f"ERROR: could not read session file: {exc}", file=sys.stderr)
        sys.exit(1)

    cfg = ReplayConfig.from_env(default_speed=args.speed, include_special_markers=args.special)
    ghost_splits = None if args.no_ghost else session.get("ghost_splits")
    if session.get("waypoints"):
        engine = PlaybackEngine.from_inputs(
            session["waypoints"],
            session.get("splits"),
            ghost_splits,
            ghost_label=session.get("ghost_label"),
            config=cfg,
        )
    else:
        # No recorded venue coordinates: lay the stations out on an oval.
        engine = PlaybackEngine(
            CoursePath.from_stations(oval_stations(), cfg.samples_per_segment),
            build_timeline(session.get("splits")),
            build_timeline(ghost_splits),
            config=cfg,
            ghost_label=session.get("ghost_label"),
        )
    if engine.course.is_degenerate:
        print("WARNING: No location data available; positions fall back to the centre.", file=sys.stderr)
    if engine.total_ms <= 0:
        print("ERROR: No split times in session; nothing to replay.", file=sys.stderr)
        sys.exit(1)

    overlay = OverlayRenderer(engine.course)
    frame_ms = 1000.0 / args.fps

    def on_station(event) -> None:
        split = f"  split {format_race_time(event.split.time_ms)}" if event.split else ""
        gap = ""
        if engine.ghost_visible:
            text, _ = format_gap(engine.ghost.gap_ms(engine.elapsed_ms, engine.progress), engine.ghost.label)
            gap = f"  [{text}]"
        print(
            f"  {format_race_time(engine.elapsed_ms)}  #{event.station.index} "
            f"{event.station.name}{split}{gap}",
            flush=True,
        )

    engine.on_station_reached = on_station
    engine.on_complete = lambda: print("  Finish!", flush=True)

    print(f"Replaying {len(engine.course.stations)} station(s), "
          f"total {format_race_time(engine.total_ms)} at {engine.speed_multiplier:g}×")
    engine.play()
    try:
        while engine.is_playing:
            engine.tick(frame_ms)
            if args.realtime:
                time.sleep(frame_ms / 1000.0)
    except KeyboardInterrupt:
        pass
    finally:
        engine.destroy()

    final = overlay.render(engine.snapshot())
    print(f"Elapsed {final['elapsed']} / {final['total']}")


if __name__ == "__main__":
    main()
