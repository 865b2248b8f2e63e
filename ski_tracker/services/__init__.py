"""Service layer package.

Exports high-level services consumed by the command-line entry points.
"""

from .tracking_service import RideTrackingService, RideTrackingServiceConfig
from .history_service import HistoryService, HistoryServiceConfig

__all__ = [
    "RideTrackingService",
    "RideTrackingServiceConfig",
    "HistoryService",
    "HistoryServiceConfig",
]
