"""Shared fixtures for web tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from course_replay.web.app import app


@pytest.fixture
def client():
    """FastAPI test client."""
    with TestClient(app) as c:
        yield c


def _replay_body(**overrides) -> dict:
    """Three stations on an L, two splits (3 s total), 1 s of race time per frame."""
    body = {
        "waypoints": {
            "station_1": {"x": 0, "y": 0, "name": "SkiErg"},
            "station_2": {"x": 100, "y": 0, "name": "Sled Push"},
            "station_3": {"x": 100, "y": 100, "name": "Sled Pull"},
        },
        "splits": [
            {"station_index": 0, "time_ms": 1000},
            {"station_index": 1, "time_ms": 2000},
        ],
        "speed": 10,
        "frame_ms": 100,
        "seed": 1,
    }
    body.update(overrides)
    return body


@pytest.fixture
def replay_body():
    """Factory for replay request bodies; keyword arguments override fields."""
    return _replay_body
