"""Recording session state machine.

Idle -> Recording (``start``) -> Stopped (``stop``). Stopped is terminal; a new
ride needs a fresh state from :func:`new_session`. ``stop`` outside Recording
is a silent no-op so late host callbacks cannot fail a finished session.
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from datetime import datetime

from .errors import InvalidTransitionError
from .models import SessionState, SessionStatus

_LOG = logging.getLogger(__name__)


def new_session() -> SessionState:
    return SessionState()


def start(state: SessionState, now: datetime) -> SessionState:
    """Begin recording. Every metric is reset and ``now`` becomes the start."""

    if state.status is not SessionStatus.IDLE:
        raise InvalidTransitionError(
            f"Cannot start a session in state {state.status.value}; "
            "create a new session instead"
        )
    _LOG.info("Recording started at %s", now.isoformat())
    return SessionState(status=SessionStatus.RECORDING, started_at=now)


def stop(state: SessionState, now: datetime) -> SessionState:
    """Finish recording and freeze the elapsed time."""

    if state.status is not SessionStatus.RECORDING:
        _LOG.debug("Ignoring stop for session in state %s", state.status.value)
        return state
    elapsed = elapsed_seconds(state, now)
    _LOG.info(
        "Recording stopped after %ss (points=%d distance=%.2fmi)",
        elapsed,
        len(state.route),
        state.distance_miles,
    )
    return replace(
        state,
        status=SessionStatus.STOPPED,
        stopped_at=now,
        frozen_elapsed_s=elapsed,
    )


def elapsed_seconds(state: SessionState, now: datetime) -> int:
    """Whole seconds recorded so far; the host decides how often to sample."""

    if state.status is SessionStatus.STOPPED:
        return state.frozen_elapsed_s
    if state.status is not SessionStatus.RECORDING or state.started_at is None:
        return 0
    seconds = (now - state.started_at).total_seconds()
    return max(0, int(math.floor(seconds)))


__all__ = ["new_session", "start", "stop", "elapsed_seconds"]
