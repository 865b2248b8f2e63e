from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .errors import MalformedHistoryRecordError

LatLon = Tuple[float, float]


class SessionStatus(str, Enum):
    IDLE = "idle"
    RECORDING = "recording"
    STOPPED = "stopped"


@dataclass(frozen=True, slots=True)
class PositionFix:
    """A single reading from the location source.

    Attributes:
        latitude: Latitude in decimal degrees.
        longitude: Longitude in decimal degrees.
        timestamp: Instant the reading was taken.
        altitude_m: Altitude in metres, when the platform exposes it.
        speed_mps: Instantaneous speed in metres/second. Sensors may report
            negative values as a "no reading" sentinel.
    """

    latitude: float
    longitude: float
    timestamp: datetime
    altitude_m: float | None = None
    speed_mps: float | None = None

    @property
    def coordinate(self) -> LatLon:
        return (self.latitude, self.longitude)


@dataclass(frozen=True, slots=True)
class RideRecord:
    """Immutable snapshot of a finished ride.

    ``to_dict``/``from_dict`` use the persisted schema shared with the ride
    store (camelCase keys, coordinates as ``{latitude, longitude}`` objects).
    """

    id: str
    date: str
    duration_s: int
    distance_miles: float
    max_speed_mph: float
    vertical_drop_ft: int
    route: Tuple[LatLon, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "date": self.date,
            "duration": self.duration_s,
            "distance": self.distance_miles,
            "maxSpeed": self.max_speed_mph,
            "elevation": self.vertical_drop_ft,
            "coordinates": [
                {"latitude": lat, "longitude": lon} for lat, lon in self.route
            ],
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "RideRecord":
        """Parse a persisted payload.

        Raises:
            MalformedHistoryRecordError: If a required field is missing or a
                numeric field does not parse.
        """

        ride_id = payload.get("id")
        date = payload.get("date")
        if ride_id is None or not isinstance(date, str) or not date:
            raise MalformedHistoryRecordError(
                f"Ride payload missing id/date: id={ride_id!r} date={date!r}"
            )
        try:
            return cls(
                id=str(ride_id),
                date=date,
                duration_s=int(float(payload.get("duration", 0))),
                distance_miles=float(payload["distance"]),
                max_speed_mph=float(payload.get("maxSpeed", 0)),
                vertical_drop_ft=int(float(payload["elevation"])),
                route=_parse_route(payload.get("coordinates") or []),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise MalformedHistoryRecordError(
                f"Ride {ride_id} has malformed fields: {exc}"
            ) from exc


def _parse_route(raw: List[Any]) -> Tuple[LatLon, ...]:
    points: List[LatLon] = []
    for item in raw:
        if isinstance(item, Mapping):
            points.append((float(item["latitude"]), float(item["longitude"])))
        else:
            lat, lon = item
            points.append((float(lat), float(lon)))
    return tuple(points)


@dataclass(frozen=True, slots=True)
class HistoryTotals:
    total_rides: int = 0
    total_distance_miles: float = 0.0
    total_vertical_ft: float = 0.0


@dataclass(frozen=True, slots=True)
class SessionState:
    """State of one recording session.

    Instances are never mutated; the transition functions in
    :mod:`ski_tracker.session` and :mod:`ski_tracker.tracking` return new
    values.
    """

    status: SessionStatus = SessionStatus.IDLE
    route: Tuple[LatLon, ...] = ()
    distance_miles: float = 0.0
    current_speed_mph: float = 0.0
    max_speed_mph: float = 0.0
    reference_altitude_m: Optional[float] = None
    vertical_drop_ft: int = 0
    started_at: Optional[datetime] = None
    stopped_at: Optional[datetime] = None
    frozen_elapsed_s: int = 0
    last_fix_at: Optional[datetime] = None

    @property
    def is_recording(self) -> bool:
        return self.status is SessionStatus.RECORDING
