"""Ride tracking service.

Drives one recording session for a host: starts it, feeds it fixes from the
location source, and on stop builds a :class:`RideRecord` and saves it to the
ride store. Uses the pure transitions in ``session``/``tracking`` so the
metric logic stays testable and decoupled from I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
import logging
from typing import Callable, Iterable

from ..errors import RideStoreError
from ..models import PositionFix, RideRecord, SessionState
from ..ride_builder import RideRecordBuilder
from ..storage import RideStore
from ..tracking import TrackAccumulator
from ..utils import ride_summary


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class RideTrackingServiceConfig:
    store: RideStore = field(default_factory=RideStore)
    clock: Callable[[], datetime] = _utc_now
    logger: logging.Logger | None = None


class RideTrackingService:
    def __init__(self, config: RideTrackingServiceConfig | None = None):
        self.config = config or RideTrackingServiceConfig()
        self._log = self.config.logger or logging.getLogger(self.__class__.__name__)
        self._accumulator: TrackAccumulator | None = None
        self._builder = RideRecordBuilder()
        self._pending: RideRecord | None = None

    @property
    def state(self) -> SessionState | None:
        return self._accumulator.state if self._accumulator else None

    @property
    def pending_ride(self) -> RideRecord | None:
        """Stopped ride whose save failed and is awaiting a retry."""

        return self._pending

    @property
    def is_recording(self) -> bool:
        return self._accumulator is not None and self._accumulator.state.is_recording

    def start(self, now: datetime | None = None) -> SessionState:
        """Begin a fresh session. Any previous, unsaved session is discarded."""

        if self.is_recording:
            self._log.warning("Discarding in-progress session to start a new one")
        if self._pending is not None:
            self._log.warning("Discarding unsaved ride %s to start a new one", self._pending.id)
            self._pending = None
        self._accumulator = TrackAccumulator()
        return self._accumulator.start(now or self.config.clock())

    def on_fix(self, fix: PositionFix) -> bool:
        if self._accumulator is None:
            self._log.debug("Fix received with no session; ignoring")
            return False
        return self._accumulator.ingest(fix)

    def record(self, fixes: Iterable[PositionFix]) -> int:
        """Feed a batch of fixes; return how many were accepted."""

        accepted = 0
        for fix in fixes:
            if self.on_fix(fix):
                accepted += 1
        return accepted

    def elapsed_seconds(self, now: datetime | None = None) -> int:
        if self._accumulator is None:
            return 0
        return self._accumulator.elapsed_seconds(now or self.config.clock())

    def stop_and_save(self, now: datetime | None = None) -> RideRecord | None:
        """Stop recording, persist the ride and return it.

        Returns ``None`` when no session was recording and no earlier ride is
        waiting to be saved; nothing is written. If the store fails, the built
        ride is kept and the next call retries saving it.
        """

        if self._pending is not None:
            return self._commit(self._pending)
        if not self.is_recording or self._accumulator is None:
            self._log.info("Stop requested with no ride recording; nothing saved")
            return None
        # Read before stopping so an unreadable store leaves the session recording.
        existing_ids = self.config.store.ride_ids()
        instant = now or self.config.clock()
        stopped = self._accumulator.stop(instant)
        self._builder.reserve(existing_ids)
        self._pending = self._builder.build(stopped, instant)
        return self._commit(self._pending)

    def _commit(self, record: RideRecord) -> RideRecord:
        try:
            self.config.store.save(record)
        except RideStoreError:
            self._log.error("Ride %s not saved; it will be retried on the next stop", record.id)
            raise
        self._pending = None
        self._log.info("Ride saved! %s", ride_summary(record))
        return record


__all__ = ["RideTrackingService", "RideTrackingServiceConfig"]
