"""One-shot gate used to turn streaming callbacks into a bounded blocking wait."""

import threading
from enum import Enum


class StreamOutcome(str, Enum):
    success = "success"
    error = "error"
    failure = "failure"
    timed_out = "timed_out"


class OneShotGate:
    """Countdown gate with an initial count of one.

    Any number of threads may call :meth:`signal`; only the first one opens the
    gate and records its outcome. A single waiter blocks in :meth:`wait`.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._event = threading.Event()
        self._outcome: StreamOutcome | None = None

    @property
    def outcome(self) -> StreamOutcome | None:
        return self._outcome

    def is_set(self) -> bool:
        return self._event.is_set()

    def signal(self, outcome: StreamOutcome) -> bool:
        """Open the gate. Returns True only for the call that actually opened it."""
        with self._lock:
            if self._event.is_set():
                return False
            self._outcome = outcome
            self._event.set()
            return True

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the gate opens or ``timeout`` seconds pass.

        On timeout the outcome is recorded as ``timed_out`` unless a signal
        raced in, so a late signal can never flip a timed out session.
        """
        if self._event.wait(timeout):
            return True
        return not self.signal(StreamOutcome.timed_out)
