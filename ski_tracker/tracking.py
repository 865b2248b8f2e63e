"""Incremental route/metric accumulation from position fixes.

``ingest`` is a pure transition: it takes the current :class:`SessionState`
and one fix and returns the next state. Fixes must arrive in non-decreasing
timestamp order; the accumulator neither re-sorts nor de-duplicates, so a
replayed or out-of-order fix still adds its leg to the distance.
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from datetime import datetime

from . import session as session_fsm
from .errors import InvalidFixError
from .geo import haversine_distance_miles
from .models import PositionFix, SessionState
from .utils import round_half_up

_LOG = logging.getLogger(__name__)

MPS_TO_MPH = 2.237
METERS_TO_FEET = 3.281


def validate_fix(fix: PositionFix) -> None:
    """Raise :class:`InvalidFixError` when the coordinate is out of range."""

    try:
        lat = float(fix.latitude)
        lon = float(fix.longitude)
    except (TypeError, ValueError) as exc:
        raise InvalidFixError(
            f"Non-numeric coordinate ({fix.latitude!r}, {fix.longitude!r})"
        ) from exc
    if not -90.0 <= lat <= 90.0:
        raise InvalidFixError(f"Latitude {lat} outside [-90, 90]")
    if not -180.0 <= lon <= 180.0:
        raise InvalidFixError(f"Longitude {lon} outside [-180, 180]")


def _finite_or_none(value: float | None) -> float | None:
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def usable_speed_mps(fix: PositionFix) -> float | None:
    """Speed reading, or ``None`` when absent, negative or not finite."""

    speed = _finite_or_none(fix.speed_mps)
    if speed is None or speed < 0:
        return None
    return speed


def usable_altitude_m(fix: PositionFix) -> float | None:
    return _finite_or_none(fix.altitude_m)


def ingest(state: SessionState, fix: PositionFix) -> SessionState:
    """Fold one fix into ``state``.

    Outside Recording the fix is ignored. Out-of-range fixes are logged and
    skipped without touching the state.
    """

    if not state.is_recording:
        _LOG.debug("Ignoring fix while session is %s", state.status.value)
        return state
    try:
        validate_fix(fix)
    except InvalidFixError as exc:
        _LOG.warning("Skipping invalid fix at %s: %s", fix.timestamp, exc)
        return state
    if state.last_fix_at is not None and fix.timestamp < state.last_fix_at:
        _LOG.debug(
            "Fix at %s precedes previous fix at %s; distance may be inflated",
            fix.timestamp,
            state.last_fix_at,
        )

    lat, lon = fix.coordinate
    coordinate = (float(lat), float(lon))

    # Reference altitude comes from the first fix that carries one.
    altitude = usable_altitude_m(fix)
    reference = state.reference_altitude_m
    if reference is None and altitude is not None:
        reference = altitude
    vertical_drop = state.vertical_drop_ft
    if altitude is not None and reference is not None:
        vertical_drop = round_half_up((reference - altitude) * METERS_TO_FEET)

    if not state.route:
        return replace(
            state,
            route=(coordinate,),
            reference_altitude_m=reference,
            vertical_drop_ft=vertical_drop,
            last_fix_at=fix.timestamp,
        )

    last_lat, last_lon = state.route[-1]
    leg = haversine_distance_miles(last_lat, last_lon, coordinate[0], coordinate[1])

    current_speed = state.current_speed_mph
    speed = usable_speed_mps(fix)
    if speed is not None:
        current_speed = speed * MPS_TO_MPH

    return replace(
        state,
        route=state.route + (coordinate,),
        distance_miles=state.distance_miles + leg,
        current_speed_mph=current_speed,
        max_speed_mph=max(state.max_speed_mph, current_speed),
        reference_altitude_m=reference,
        vertical_drop_ft=vertical_drop,
        last_fix_at=fix.timestamp,
    )


class TrackAccumulator:
    """Holds the live session for a host and applies transitions in order.

    Not thread-safe: the host serialises ``start``/``ingest``/``stop`` and any
    read of :attr:`state` that needs a consistent snapshot.
    """

    def __init__(self, state: SessionState | None = None) -> None:
        self._state = state or session_fsm.new_session()

    @property
    def state(self) -> SessionState:
        return self._state

    def start(self, now: datetime) -> SessionState:
        self._state = session_fsm.start(self._state, now)
        return self._state

    def ingest(self, fix: PositionFix) -> bool:
        """Apply ``fix``; return True when it changed the session."""

        before = self._state
        self._state = ingest(before, fix)
        return self._state is not before

    def stop(self, now: datetime) -> SessionState:
        self._state = session_fsm.stop(self._state, now)
        return self._state

    def elapsed_seconds(self, now: datetime) -> int:
        return session_fsm.elapsed_seconds(self._state, now)


__all__ = [
    "MPS_TO_MPH",
    "METERS_TO_FEET",
    "TrackAccumulator",
    "ingest",
    "usable_altitude_m",
    "usable_speed_mps",
    "validate_fix",
]
