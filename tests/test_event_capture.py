"""Tests for tray_harness.core.event_capture.

Covers the arm/record/wait protocol, timeouts, re-arming, recordings
that land before the wait starts, concurrent recordings, and spurious
wakeups.
"""

from __future__ import annotations

import threading
import time

import pytest

from tray_harness.core.event_capture import EventCapture
from tray_harness.models.events import CapturedEvent


@pytest.fixture()
def capture() -> EventCapture:
    return EventCapture()


def _record_after(capture: EventCapture, delay: float, command: str | None) -> threading.Thread:
    def _run() -> None:
        time.sleep(delay)
        capture.record(command)

    thread = threading.Thread(target=_run)
    thread.start()
    return thread


class TestInitialState:
    """A new capture is armed and empty."""

    def test_snapshot_is_untriggered(self, capture: EventCapture) -> None:
        assert capture.snapshot() == CapturedEvent(triggered=False, command=None, count=0)

    def test_zero_timeout_wait_returns_untriggered(self, capture: EventCapture) -> None:
        assert capture.wait_for_signal(0).triggered is False

    def test_negative_timeout_is_non_blocking(self, capture: EventCapture) -> None:
        start = time.monotonic()
        assert capture.wait_for_signal(-50).triggered is False
        assert time.monotonic() - start < 0.5


class TestRecord:
    """record() stores the payload and sets the flag."""

    def test_record_then_wait_returns_payload(self, capture: EventCapture) -> None:
        capture.record("Sample Command")
        snap = capture.wait_for_signal(1000)
        assert snap.triggered is True
        assert snap.command == "Sample Command"
        assert snap.count == 1

    def test_record_none_is_triggered_with_absent_command(self, capture: EventCapture) -> None:
        capture.record(None)
        snap = capture.wait_for_signal(1000)
        assert snap.triggered is True
        assert snap.command is None

    def test_record_empty_string_is_not_none(self, capture: EventCapture) -> None:
        capture.record("")
        assert capture.snapshot().command == ""

    def test_second_record_overwrites_and_counts(self, capture: EventCapture) -> None:
        capture.record("first")
        capture.record("second")
        snap = capture.snapshot()
        assert snap.command == "second"
        assert snap.count == 2

    def test_wait_returns_immediately_when_already_triggered(
        self, capture: EventCapture,
    ) -> None:
        capture.record("x")
        start = time.monotonic()
        capture.wait_for_signal(3000)
        assert time.monotonic() - start < 0.5


class TestTimeout:
    """A wait with no recording ends after the bound, untriggered."""

    def test_short_timeout_elapses(self, capture: EventCapture) -> None:
        start = time.monotonic()
        snap = capture.wait_for_signal(150)
        elapsed = time.monotonic() - start
        assert snap.triggered is False
        assert snap.command is None
        assert 0.13 <= elapsed < 1.5

    def test_reference_timeout_of_three_seconds(self, capture: EventCapture) -> None:
        capture.arm()
        start = time.monotonic()
        snap = capture.wait_for_signal(3000)
        elapsed = time.monotonic() - start
        assert snap.triggered is False
        assert 2.9 <= elapsed < 4.5


class TestArm:
    """arm() discards the previous pass completely."""

    def test_arm_clears_stale_payload(self, capture: EventCapture) -> None:
        capture.record("stale")
        capture.arm()
        snap = capture.wait_for_signal(50)
        assert snap.triggered is False
        assert snap.command is None
        assert snap.count == 0

    def test_rearmed_wait_sees_only_new_payload(self, capture: EventCapture) -> None:
        capture.record("first pass")
        capture.arm()
        thread = _record_after(capture, 0.05, None)
        snap = capture.wait_for_signal(2000)
        thread.join()
        assert snap.triggered is True
        assert snap.command is None
        assert snap.count == 1


class TestCrossThread:
    """Recordings from another thread wake the waiter."""

    def test_record_from_other_thread_wakes_waiter(self, capture: EventCapture) -> None:
        capture.arm()
        thread = _record_after(capture, 0.1, "Sample Command")
        start = time.monotonic()
        snap = capture.wait_for_signal(3000)
        elapsed = time.monotonic() - start
        thread.join()
        assert snap.triggered is True
        assert snap.command == "Sample Command"
        assert elapsed < 2.0

    def test_record_between_arm_and_wait_is_not_lost(self, capture: EventCapture) -> None:
        capture.arm()
        thread = threading.Thread(target=capture.record, args=("early",))
        thread.start()
        thread.join()
        snap = capture.wait_for_signal(1000)
        assert snap.triggered is True
        assert snap.command == "early"

    def test_racing_record_and_wait_never_drops_signal(
        self, capture: EventCapture,
    ) -> None:
        """Record and wait start together; every round must observe it."""
        rounds = 200
        barrier = threading.Barrier(2)
        misses: list[int] = []

        def _producer() -> None:
            for i in range(rounds):
                barrier.wait()
                capture.record(str(i))
                barrier.wait()

        thread = threading.Thread(target=_producer)
        thread.start()
        for i in range(rounds):
            capture.arm()
            barrier.wait()
            snap = capture.wait_for_signal(2000)
            if not snap.triggered or snap.command != str(i):
                misses.append(i)
            barrier.wait()
        thread.join()

        assert misses == []

    def test_spurious_notify_does_not_end_wait(self, capture: EventCapture) -> None:
        capture.arm()

        def _poke() -> None:
            time.sleep(0.05)
            with capture._cond:
                capture._cond.notify_all()

        thread = threading.Thread(target=_poke)
        thread.start()
        start = time.monotonic()
        snap = capture.wait_for_signal(300)
        elapsed = time.monotonic() - start
        thread.join()

        assert snap.triggered is False
        assert elapsed >= 0.28

    def test_many_waiters_all_wake(self, capture: EventCapture) -> None:
        capture.arm()
        results: list[CapturedEvent] = []
        lock = threading.Lock()

        def _wait() -> None:
            snap = capture.wait_for_signal(3000)
            with lock:
                results.append(snap)

        waiters = [threading.Thread(target=_wait) for _ in range(4)]
        for t in waiters:
            t.start()
        time.sleep(0.05)
        capture.record("all")
        for t in waiters:
            t.join()

        assert len(results) == 4
        assert all(r.triggered and r.command == "all" for r in results)
