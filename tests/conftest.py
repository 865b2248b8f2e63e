"""Global pytest fixtures & helpers.

Adds project root to path and provides reusable fixtures for session,
tracking and history tests to avoid duplication across files.
"""
from __future__ import annotations

import os
import sys
from datetime import datetime, timedelta, timezone

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from ski_tracker.models import PositionFix
from ski_tracker.storage import RideStore


T0 = datetime(2025, 1, 15, 9, 30, tzinfo=timezone.utc)


# --- Factory helpers -------------------------------------------------
def make_fix(lat, lon, seconds=0, altitude=None, speed=None):
    return PositionFix(
        latitude=lat,
        longitude=lon,
        timestamp=T0 + timedelta(seconds=seconds),
        altitude_m=altitude,
        speed_mps=speed,
    )


def make_ride_payload(ride_id, distance, elevation, date="2025-01-15T10:00:00.000Z"):
    return {
        "id": ride_id,
        "date": date,
        "duration": 600,
        "distance": distance,
        "maxSpeed": 25.4,
        "elevation": elevation,
        "coordinates": [
            {"latitude": 37.6308, "longitude": -119.0326},
            {"latitude": 37.6328, "longitude": -119.0346},
        ],
    }


# --- Fixtures --------------------------------------------------------
@pytest.fixture
def t0():
    return T0


@pytest.fixture
def mammoth_fixes():
    """Short descent near Mammoth Mountain, one fix every 5 seconds."""
    return [
        make_fix(37.6308, -119.0326, 0, altitude=3000.0, speed=2.0),
        make_fix(37.6318, -119.0336, 5, altitude=2990.0, speed=5.0),
        make_fix(37.6328, -119.0346, 10, altitude=2950.0, speed=3.0),
    ]


@pytest.fixture
def ride_store(tmp_path):
    return RideStore(tmp_path / "rides.json")


@pytest.fixture
def fix_factory():
    return make_fix


@pytest.fixture
def ride_payload_factory():
    return make_ride_payload
