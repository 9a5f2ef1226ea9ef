"""Pydantic request/response schemas for the replay API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class SplitIn(BaseModel):
    station_index: int = 0
    time_ms: float
    name: str = ""


class CourseRequest(BaseModel):
    waypoints: dict[str, Any] | str = Field(default_factory=dict)
    include_special_markers: bool = False
    samples_per_segment: int = Field(default=30, ge=1, le=500)


class ReplayRequest(CourseRequest):
    splits: list[SplitIn] = Field(default_factory=list)
    ghost_splits: list[SplitIn] = Field(default_factory=list)
    ghost_label: str | None = None
    speed: float = Field(default=10.0, gt=0)
    frame_ms: float = Field(default=1000.0 / 60.0, gt=0)
    seed: int | None = None


class HealthResponse(BaseModel):
    status: str
    version: str


class PointOut(BaseModel):
    x: float
    y: float


class StationOut(BaseModel):
    key: str
    name: str
    index: int
    x: float
    y: float
    progress: float


class CourseResponse(BaseModel):
    stations: list[StationOut]
    path: list[PointOut]
    degenerate: bool


class CrossingOut(BaseModel):
    position: int
    station_key: str
    station_name: str
    station_index: int
    progress: float
    elapsed_ms: float
    split_time_ms: float | None = None


class FrameOut(BaseModel):
    elapsed_ms: float
    progress: float
    x: float
    y: float
    ghost_progress: float | None = None
    ghost_x: float | None = None
    ghost_y: float | None = None
    gap_ms: float | None = None
    primary_particles: int
    ghost_particles: int


class ReplayResponse(BaseModel):
    total_ms: float
    ghost_total_ms: float
    ghost_label: str | None
    frames: list[FrameOut]
    crossings: list[CrossingOut]
    completed: bool
    truncated: bool
    final_gap_ms: float | None = None
