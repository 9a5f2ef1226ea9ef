"""FastAPI application — headless course replay for remote renderers."""

from __future__ import annotations

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException

from course_replay.playback.config import ReplayConfig
from course_replay.web.schemas import (
    CourseRequest,
    CourseResponse,
    HealthResponse,
    ReplayRequest,
    ReplayResponse,
)
from course_replay.web.service import ReplayService

load_dotenv()  # loads .env from project root; must run before env vars are consumed

# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------

VERSION = "0.1.0"

app = FastAPI(title="Course Replay", version=VERSION)


def _service() -> ReplayService:
    return ReplayService(ReplayConfig.from_env())


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="ok", version=VERSION)


@app.post("/api/course", response_model=CourseResponse)
def course(req: CourseRequest) -> CourseResponse:
    """Return the ordered stations and dense spline path for a waypoint set."""
    return _service().describe_course(req)


@app.post("/api/replay", response_model=ReplayResponse)
def replay(req: ReplayRequest) -> ReplayResponse:
    """Simulate a full replay and return per-frame positions and crossings."""
    svc = _service()
    try:
        return svc.run_replay(req)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
