"""Hand-off of one asynchronous action event from the dispatch thread.

The ``EventCapture`` is a small monitor: one ``threading.Condition``
guards a triggered flag and the captured payload.  The dispatch thread
calls :meth:`EventCapture.record` from the widget's listener; the
driver thread calls :meth:`EventCapture.wait_for_signal` after issuing
the gesture.

The ordering that makes the hand-off race-free:

1. ``arm()`` clears the slot under the lock *before* the gesture.
2. ``record()`` takes the lock, stores the payload, sets the flag and
   notifies, all before releasing the lock.
3. ``wait_for_signal()`` checks the flag under the lock before it
   blocks, and re-checks it after every wake.

So a recording that lands between ``arm()`` and ``wait_for_signal()``
is still observed, and a spurious wake never ends the wait early.

Typical usage::

    capture = EventCapture()
    indicator.add_action_listener(lambda event: capture.record(event.command))

    capture.arm()
    driver.activate()
    snapshot = capture.wait_for_signal(3000)
    if not snapshot.triggered:
        ...
"""

from __future__ import annotations

import logging
import threading

from tray_harness.models.events import CapturedEvent

logger = logging.getLogger(__name__)


class EventCapture:
    """Race-free single-slot capture of an action event with a bounded wait.

    This class never raises from its public methods; a timeout is
    reported as ``triggered=False`` in the returned snapshot and the
    caller decides what that means.
    """

    def __init__(self) -> None:
        """Initialize in the armed (untriggered) state."""
        self._cond = threading.Condition(threading.Lock())
        self._triggered: bool = False
        self._command: str | None = None
        self._count: int = 0

    # ------------------------------------------------------------------
    # Producer / consumer protocol
    # ------------------------------------------------------------------

    def arm(self) -> None:
        """Reset to the untriggered state, dropping any earlier payload."""
        with self._cond:
            self._triggered = False
            self._command = None
            self._count = 0

    def record(self, command: str | None) -> None:
        """Store *command* as the captured payload and wake waiters.

        Intended to be called from the widget's listener on the
        dispatch thread.  Never blocks beyond acquiring the lock.  A
        second call in the same armed period overwrites the payload.

        Args:
            command: The command reported by the action event.
        """
        with self._cond:
            self._triggered = True
            self._command = command
            self._count += 1
            self._cond.notify_all()
        logger.debug("Action recorded: %r", command)

    def wait_for_signal(self, timeout_ms: int) -> CapturedEvent:
        """Block until an action is recorded or *timeout_ms* elapses.

        Returns immediately when the capture was already triggered.  A
        timeout of zero (or less) performs a non-blocking check.

        Args:
            timeout_ms: Upper bound on the wait, in milliseconds.

        Returns:
            A ``CapturedEvent`` snapshot read under the lock.
        """
        timeout = max(timeout_ms, 0) / 1000.0
        with self._cond:
            # wait_for re-evaluates the predicate on every wake and
            # tracks the remaining time itself.
            self._cond.wait_for(lambda: self._triggered, timeout=timeout)
            return self._snapshot_locked()

    def snapshot(self) -> CapturedEvent:
        """Return the current state without waiting."""
        with self._cond:
            return self._snapshot_locked()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _snapshot_locked(self) -> CapturedEvent:
        return CapturedEvent(
            triggered=self._triggered,
            command=self._command,
            count=self._count,
        )
