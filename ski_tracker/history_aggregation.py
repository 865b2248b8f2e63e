"""Lifetime ride totals.

Pure transformation: given ride records (parsed :class:`RideRecord` objects or
raw payloads from the ride store) it produces :class:`HistoryTotals`.

Aggregation is lenient. Payloads written by an older schema may carry
distances or verticals that do not parse as numbers; such a field adds zero
to its total while the ride itself is still counted.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Iterable, Mapping

from .models import HistoryTotals, RideRecord

_LOG = logging.getLogger(__name__)

RideLike = RideRecord | Mapping[str, Any]


def _coerce_float(value: Any) -> float | None:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _ride_fields(ride: RideLike) -> tuple[Any, Any]:
    if isinstance(ride, RideRecord):
        return ride.distance_miles, ride.vertical_drop_ft
    if isinstance(ride, Mapping):
        return ride.get("distance"), ride.get("elevation")
    return None, None


def aggregate(records: Iterable[RideLike]) -> HistoryTotals:
    total_rides = 0
    total_distance = 0.0
    total_vertical = 0.0
    malformed = 0
    for ride in records:
        total_rides += 1
        raw_distance, raw_vertical = _ride_fields(ride)
        distance = _coerce_float(raw_distance)
        vertical = _coerce_float(raw_vertical)
        if distance is None or vertical is None:
            malformed += 1
        if distance is not None:
            total_distance += distance
        if vertical is not None:
            total_vertical += vertical
    if malformed:
        _LOG.warning(
            "Treated malformed distance/vertical as zero in %d of %d rides",
            malformed,
            total_rides,
        )
    return HistoryTotals(
        total_rides=total_rides,
        total_distance_miles=total_distance,
        total_vertical_ft=total_vertical,
    )


__all__ = ["aggregate"]
