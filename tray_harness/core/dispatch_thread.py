"""A dedicated UI dispatch thread with synchronous and asynchronous entry.

The tray widget's state is confined to one thread.  ``DispatchThread``
owns that thread and a FIFO work queue; other threads hand it closures
either fire-and-forget (:meth:`DispatchThread.invoke_later`) or with a
blocking wait for the result (:meth:`DispatchThread.invoke_and_wait`).

Typical usage::

    dispatcher = DispatchThread()
    dispatcher.start()
    try:
        dispatcher.invoke_and_wait(indicator.set_action_command, "go")
        dispatcher.wait_for_idle(5000)
    finally:
        dispatcher.stop()
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any

logger = logging.getLogger(__name__)

_WorkItem = tuple[Callable[..., Any], tuple[Any, ...], Future]


class DispatchThread:
    """Single-threaded executor that emulates a UI event dispatch queue.

    Work items run strictly in submission order.  Exceptions raised by
    a work item are stored on its future and re-raised in whoever waits
    on it; they never kill the dispatch thread.

    Args:
        name: Thread name, useful in log records.
    """

    def __init__(self, name: str = "tray-dispatch") -> None:
        self._name = name
        self._queue: queue.Queue[_WorkItem | None] = queue.Queue()
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the dispatch thread.

        Raises:
            RuntimeError: If the thread is already running.
        """
        with self._lock:
            if self._thread is not None:
                raise RuntimeError("dispatch thread already started")
            self._thread = threading.Thread(
                target=self._loop, name=self._name, daemon=True,
            )
            self._thread.start()
        logger.debug("Dispatch thread %s started", self._name)

    def stop(self, timeout: float | None = 5.0) -> None:
        """Drain already-queued work, then stop the thread.

        Safe to call more than once; later calls are no-ops.

        Args:
            timeout: Seconds to wait for the thread to exit.
        """
        with self._lock:
            thread = self._thread
            self._thread = None
        if thread is None:
            return
        self._queue.put(None)
        thread.join(timeout)
        if thread.is_alive():
            logger.warning(
                "Dispatch thread %s did not stop within %.1f s",
                self._name, timeout,
            )
        else:
            logger.debug("Dispatch thread %s stopped", self._name)

    @property
    def is_running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive()

    def is_dispatch_thread(self) -> bool:
        """Return True when called from the dispatch thread itself."""
        thread = self._thread
        return thread is not None and threading.current_thread() is thread

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def invoke_later(self, fn: Callable[..., Any], *args: Any) -> Future:
        """Queue ``fn(*args)`` for the dispatch thread and return at once.

        Returns:
            A ``Future`` completed with the call's result or exception.

        Raises:
            RuntimeError: If the dispatch thread is not running.
        """
        if not self.is_running:
            raise RuntimeError("dispatch thread is not running")
        future: Future = Future()
        self._queue.put((fn, args, future))
        return future

    def invoke_and_wait(
        self,
        fn: Callable[..., Any],
        *args: Any,
        timeout: float | None = None,
    ) -> Any:
        """Run ``fn(*args)`` on the dispatch thread and wait for it.

        Everything ``fn`` does happens-before this method returns.

        Args:
            fn: Callable to run.
            *args: Positional arguments for *fn*.
            timeout: Seconds to wait, or ``None`` to wait indefinitely.

        Returns:
            Whatever *fn* returned.

        Raises:
            RuntimeError: If called from the dispatch thread (it would
                wait on itself forever).
            concurrent.futures.TimeoutError: If *timeout* elapses.
            Exception: Any exception raised by *fn*.
        """
        if self.is_dispatch_thread():
            raise RuntimeError(
                "invoke_and_wait cannot be called from the dispatch thread"
            )
        return self.invoke_later(fn, *args).result(timeout)

    def wait_for_idle(self, timeout_ms: int) -> bool:
        """Block until every item queued so far has run.

        Posts a no-op marker and waits for it; the queue is FIFO, so
        the marker completing means all earlier work completed.

        Args:
            timeout_ms: Upper bound on the wait, in milliseconds.

        Returns:
            True if the queue drained in time, False on timeout.
        """
        marker = self.invoke_later(_noop)
        try:
            marker.result(max(timeout_ms, 0) / 1000.0)
        except FutureTimeoutError:
            logger.warning(
                "Dispatch queue not idle after %d ms", timeout_ms,
            )
            return False
        return True

    # ------------------------------------------------------------------
    # Thread body
    # ------------------------------------------------------------------

    def _loop(self) -> None:
        while True:
            item = self._queue.get()
            if item is None:
                break
            fn, args, future = item
            if not future.set_running_or_notify_cancel():
                continue
            try:
                result = fn(*args)
            except BaseException as exc:
                future.set_exception(exc)
            else:
                future.set_result(result)


def _noop() -> None:
    return None
