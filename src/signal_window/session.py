"""Input session lifecycle.

A session waits for the user to start it, then for the input source to be
granted, then for the first non-zero reading. Only then does it stream. The
caller's scheduler drives it by calling poll() with each reading.
"""

from enum import Enum

import structlog

from signal_window import logging as console

log = structlog.get_logger()


class SessionState(Enum):
    AWAITING_START = "awaiting_start"
    AWAITING_PERMISSION = "awaiting_permission"
    AWAITING_FIRST_SAMPLE = "awaiting_first_sample"
    STREAMING = "streaming"


STATUS_MESSAGES = {
    SessionState.AWAITING_START: "Press 's' to start",
    SessionState.AWAITING_PERMISSION: "Waiting for input permission...",
    SessionState.AWAITING_FIRST_SAMPLE: "Input opened. Checking for signal...",
    SessionState.STREAMING: "Streaming",
}


class SessionError(RuntimeError):
    """Raised for a transition the current state does not allow."""


class InputSession:
    """Explicit state machine replacing retry timers around an input source."""

    def __init__(self, echo: bool = False) -> None:
        self._state = SessionState.AWAITING_START
        self._echo = echo
        self.denied_reason: str | None = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def streaming(self) -> bool:
        return self._state is SessionState.STREAMING

    @property
    def status_message(self) -> str:
        message = STATUS_MESSAGES[self._state]
        if self._state is SessionState.AWAITING_PERMISSION and self.denied_reason:
            return f"{message} ({self.denied_reason})"
        return message

    def start(self) -> None:
        self._transition(SessionState.AWAITING_START, SessionState.AWAITING_PERMISSION)

    def grant(self) -> None:
        self._transition(SessionState.AWAITING_PERMISSION, SessionState.AWAITING_FIRST_SAMPLE)
        self.denied_reason = None

    def deny(self, reason: str) -> None:
        """Record a refusal; the session keeps waiting for permission."""
        self._require(SessionState.AWAITING_PERMISSION, "deny")
        self.denied_reason = reason
        log.warning("session_permission_denied", reason=reason)
        if self._echo:
            console.permission_denied(reason)

    def poll(self, level: float) -> bool:
        """Feed one reading; the first positive level starts streaming.

        Returns:
            True if the session is streaming after this reading.
        """
        if self._state is SessionState.AWAITING_FIRST_SAMPLE and level > 0:
            self._transition(SessionState.AWAITING_FIRST_SAMPLE, SessionState.STREAMING)
        return self.streaming

    def _require(self, expected: SessionState, action: str) -> None:
        if self._state is not expected:
            raise SessionError(
                f"Cannot {action} from {self._state.value!r} (expected {expected.value!r})"
            )

    def _transition(self, expected: SessionState, new: SessionState) -> None:
        self._require(expected, f"move to {new.value!r}")
        self._state = new
        log.info("session_state_changed", old=expected.value, new=new.value)
        if self._echo:
            console.session_changed(expected.value, new.value)
