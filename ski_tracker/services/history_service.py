"""Ride history service: listing, totals, deletion and export."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
import logging
from pathlib import Path
from typing import List

from ..config import HISTORY_EXPORT_FILE, HISTORY_EXPORT_TIMESTAMP_ENABLED
from ..excel_writer import write_history
from ..history_aggregation import aggregate
from ..models import HistoryTotals
from ..storage import RidePayload, RideStore


def resolve_export_path() -> str:
    if HISTORY_EXPORT_TIMESTAMP_ENABLED:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        return f"{HISTORY_EXPORT_FILE}_{timestamp}.xlsx"
    return f"{HISTORY_EXPORT_FILE}.xlsx"


@dataclass(slots=True)
class HistoryServiceConfig:
    store: RideStore = field(default_factory=RideStore)
    logger: logging.Logger | None = None


class HistoryService:
    def __init__(self, config: HistoryServiceConfig | None = None):
        self.config = config or HistoryServiceConfig()
        self._log = self.config.logger or logging.getLogger(self.__class__.__name__)

    def rides(self) -> List[RidePayload]:
        return self.config.store.load_all()

    def totals(self) -> HistoryTotals:
        rides = self.rides()
        totals = aggregate(rides)
        self._log.debug(
            "Totals over %d rides: %.2f mi, %.0f ft",
            totals.total_rides,
            totals.total_distance_miles,
            totals.total_vertical_ft,
        )
        return totals

    def delete_ride(self, ride_id: str) -> bool:
        return self.config.store.delete(ride_id)

    def export(self, output_path: str | Path | None = None) -> str:
        path = str(output_path) if output_path is not None else resolve_export_path()
        rides = self.rides()
        write_history(path, rides)
        self._log.info("Exported %d rides to %s", len(rides), path)
        return path


__all__ = ["HistoryService", "HistoryServiceConfig", "resolve_export_path"]
