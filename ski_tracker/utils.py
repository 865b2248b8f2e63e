"""General utility helpers shared across modules."""

from __future__ import annotations

import math
from datetime import datetime, timezone

from .models import RideRecord


def format_time(seconds: int) -> str:
    """Format seconds into a ``Xm Ys`` string."""

    mins, sec = divmod(int(seconds), 60)
    return f"{mins}m {sec}s"


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (``2.5 -> 3``, ``-2.5 -> -2``)."""

    return int(math.floor(value + 0.5))


def format_clock(seconds: int) -> str:
    """Format seconds as a ``m:ss`` stopwatch reading."""

    mins, sec = divmod(int(seconds), 60)
    return f"{mins}:{sec:02d}"


def to_utc_aware(dt: datetime) -> datetime:
    """Return ``dt`` in UTC; naive values are assumed to already be UTC."""

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def epoch_ms(dt: datetime) -> int:
    return int(to_utc_aware(dt).timestamp() * 1000)


def to_iso_instant(dt: datetime) -> str:
    """ISO-8601 UTC instant with millisecond precision, e.g. ``...T10:00:00.000Z``."""

    text = to_utc_aware(dt).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def parse_iso_datetime(raw: str) -> datetime | None:
    """Parse an ISO timestamp (``Z`` suffix allowed) or return ``None``."""

    if not raw:
        return None
    text = raw.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def ride_summary(record: RideRecord) -> str:
    """One-line summary shown when a ride is saved."""

    return (
        f"Distance: {record.distance_miles:.1f} mi | "
        f"Max Speed: {record.max_speed_mph:.1f} mph | "
        f"Vertical: {record.vertical_drop_ft} ft | "
        f"Time: {format_clock(record.duration_s)}"
    )
