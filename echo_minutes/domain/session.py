"""MeetingSession — explicit state machine for one recording session.

Replaces ad hoc "is recording" / "is processing" flags. Only one pipeline run
may be in flight per session; asking to start another raises SessionBusyError.
"""

import logging
import threading
from enum import Enum

from echo_minutes.domain.errors import InvalidTransitionError, SessionBusyError

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    IDLE = "idle"
    RECORDING = "recording"
    CONVERTING = "converting"
    TRANSCRIBING = "transcribing"
    COMPOSING = "composing"
    DONE = "done"
    FAILED = "failed"


# Allowed forward transitions. IDLE -> CONVERTING covers uploads of an
# existing recording; RECORDING -> IDLE is cancellation.
_TRANSITIONS = {
    SessionState.IDLE: {SessionState.RECORDING, SessionState.CONVERTING},
    SessionState.RECORDING: {SessionState.CONVERTING, SessionState.IDLE, SessionState.FAILED},
    SessionState.CONVERTING: {SessionState.TRANSCRIBING, SessionState.FAILED},
    SessionState.TRANSCRIBING: {SessionState.COMPOSING, SessionState.FAILED},
    SessionState.COMPOSING: {SessionState.DONE, SessionState.FAILED},
    SessionState.DONE: {SessionState.IDLE},
    SessionState.FAILED: {SessionState.IDLE},
}

_BUSY_STATES = {
    SessionState.RECORDING,
    SessionState.CONVERTING,
    SessionState.TRANSCRIBING,
    SessionState.COMPOSING,
}


class MeetingSession:
    def __init__(self):
        self._state = SessionState.IDLE
        # Runs served over HTTP move the session from worker threads
        self._lock = threading.RLock()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def busy(self) -> bool:
        return self._state in _BUSY_STATES

    def transition(self, target: SessionState) -> None:
        with self._lock:
            if target not in _TRANSITIONS[self._state]:
                raise InvalidTransitionError(f"Cannot move from {self._state.value} to {target.value}")
            logger.debug(f"Session {self._state.value} -> {target.value}")
            self._state = target

    def begin(self, target: SessionState) -> None:
        """Start a new run (recording or conversion), rejecting concurrent runs.

        A finished session (DONE or FAILED) is recycled to IDLE first.
        """
        with self._lock:
            if self.busy:
                raise SessionBusyError(f"A meeting is already {self._state.value}")
            if self._state in (SessionState.DONE, SessionState.FAILED):
                self._state = SessionState.IDLE
            self.transition(target)

    def fail(self) -> None:
        """Mark the current run failed and return to the ready state."""
        with self._lock:
            if self.busy:
                self.transition(SessionState.FAILED)
            self.reset()

    def reset(self) -> None:
        if self._state in (SessionState.DONE, SessionState.FAILED):
            self.transition(SessionState.IDLE)
