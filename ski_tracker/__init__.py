"""Ski/snowboard ride tracking package."""

from .main import main
from .models import HistoryTotals, PositionFix, RideRecord, SessionState, SessionStatus
from .errors import InvalidStateError, InvalidTransitionError, SkiTrackerError

__all__ = [
    "main",
    "HistoryTotals",
    "PositionFix",
    "RideRecord",
    "SessionState",
    "SessionStatus",
    "InvalidStateError",
    "InvalidTransitionError",
    "SkiTrackerError",
]
