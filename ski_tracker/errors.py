"""Central error types used across the application."""

from __future__ import annotations


class SkiTrackerError(RuntimeError):
    """Base error for ride tracking failures."""


class InvalidFixError(SkiTrackerError, ValueError):
    """Raised when a position fix lies outside valid latitude/longitude bounds."""


class InvalidTransitionError(SkiTrackerError):
    """Raised when a session is asked to enter a state it cannot reach."""


class InvalidStateError(SkiTrackerError):
    """Raised when a ride record is built from a session that has not stopped."""


class MalformedHistoryRecordError(SkiTrackerError, ValueError):
    """Raised when a stored ride payload cannot be parsed into a record."""


class RideStoreError(SkiTrackerError):
    """Raised when the ride store file cannot be read or written."""


__all__ = [
    "SkiTrackerError",
    "InvalidFixError",
    "InvalidTransitionError",
    "InvalidStateError",
    "MalformedHistoryRecordError",
    "RideStoreError",
]
