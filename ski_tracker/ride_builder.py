"""Materialise an immutable :class:`RideRecord` from a stopped session."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable

from .errors import InvalidStateError
from .models import RideRecord, SessionState, SessionStatus
from .utils import epoch_ms, round_half_up, to_iso_instant

_LOG = logging.getLogger(__name__)


class RideRecordBuilder:
    """Build ride records with ids unique across this builder and a store.

    Ids are the stop instant in epoch milliseconds. Two rides stopping in the
    same millisecond get ``-1``, ``-2``, ... suffixes in build order.
    """

    def __init__(self, existing_ids: Iterable[str] = ()) -> None:
        self._issued: set[str] = {str(ride_id) for ride_id in existing_ids}

    def reserve(self, ride_ids: Iterable[str]) -> None:
        """Mark ids (e.g. those already in the store) as taken."""

        self._issued.update(str(ride_id) for ride_id in ride_ids)

    def _unique_id(self, base: str) -> str:
        candidate = base
        counter = 1
        while candidate in self._issued:
            candidate = f"{base}-{counter}"
            counter += 1
        if candidate != base:
            _LOG.info("Ride id %s already taken; using %s", base, candidate)
        self._issued.add(candidate)
        return candidate

    def build(self, session: SessionState, now: datetime | None = None) -> RideRecord:
        """Snapshot ``session`` into a record.

        Args:
            session: A session in the Stopped state.
            now: Instant used for the id and date. Defaults to the stop time.

        Raises:
            InvalidStateError: If the session has not been stopped.
        """

        if session.status is not SessionStatus.STOPPED:
            raise InvalidStateError(
                f"Cannot build a ride from a session in state {session.status.value}"
            )
        instant = now or session.stopped_at
        if instant is None:
            raise InvalidStateError("Stopped session has no stop instant")
        record = RideRecord(
            id=self._unique_id(str(epoch_ms(instant))),
            date=to_iso_instant(instant),
            duration_s=session.frozen_elapsed_s,
            distance_miles=round(session.distance_miles, 1),
            max_speed_mph=round(session.max_speed_mph, 1),
            vertical_drop_ft=round_half_up(session.vertical_drop_ft),
            route=tuple(session.route),
        )
        _LOG.debug("Built ride %s (%d route points)", record.id, len(record.route))
        return record


def build_ride_record(
    session: SessionState, now: datetime | None = None
) -> RideRecord:
    """One-off build without id bookkeeping."""

    return RideRecordBuilder().build(session, now)


__all__ = ["RideRecordBuilder", "build_ride_record"]
