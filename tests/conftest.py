"""Shared fakes and fixtures for the tray harness tests.

``MockPlatform`` records every input call and routes clicks to any
``FakeIndicator`` registered with it, so a whole scenario can run
without a desktop.  ``FakeIndicator`` behaves like a real tray widget:
a qualifying click posts the delivery onto the dispatch thread, and the
delivered command is read when the dispatch thread processes it.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator

import numpy as np
import pytest
from numpy.typing import NDArray

from tray_harness.config.settings import Settings
from tray_harness.core.dispatch_thread import DispatchThread
from tray_harness.models.actions import ActivationArity
from tray_harness.models.events import ActionEvent
from tray_harness.models.geometry import Rectangle
from tray_harness.platform.interface import PlatformInterface
from tray_harness.widget.interface import TrayIndicator

# ------------------------------------------------------------------
# FakeIndicator
# ------------------------------------------------------------------


class FakeIndicator(TrayIndicator):
    """Controllable tray indicator living entirely in memory.

    Args:
        dispatcher: Dispatch thread deliveries are posted to.
        bounds: Where the icon is on the fake screen.
        responds_to: Click count that counts as activation.
        report_bounds: When False, ``get_bounds`` returns ``None``.
        responsive: When False, clicks are ignored entirely.
    """

    def __init__(
        self,
        dispatcher: DispatchThread,
        tooltip: str = "Sample Icon",
        bounds: Rectangle | None = None,
        responds_to: ActivationArity = ActivationArity.DOUBLE,
        report_bounds: bool = True,
        responsive: bool = True,
    ) -> None:
        super().__init__(tooltip)
        self._dispatcher = dispatcher
        self.bounds = bounds if bounds is not None else Rectangle(600, 740, 20, 20)
        self.responds_to = responds_to
        self.report_bounds = report_bounds
        self.responsive = responsive
        self.shown = False
        self.removed = False
        self.raise_on_add: Exception | None = None
        self.fired_on: list[str] = []

    def add_to_tray(self) -> None:
        if self.raise_on_add is not None:
            raise self.raise_on_add
        self.shown = True

    def remove(self) -> None:
        self.shown = False
        self.removed = True

    def get_bounds(self) -> Rectangle | None:
        return self.bounds if self.report_bounds else None

    def fire_action(self) -> ActionEvent:
        self.fired_on.append(threading.current_thread().name)
        return super().fire_action()

    def handle_click(self, x: int, y: int, clicks: int) -> None:
        """Called by ``MockPlatform`` on the thread that clicked."""
        if not (self.shown and self.responsive):
            return
        if not self.bounds.contains_point(x, y):
            return
        if clicks != self.responds_to.clicks:
            return
        self._dispatcher.invoke_later(self.fire_action)


# ------------------------------------------------------------------
# MockPlatform
# ------------------------------------------------------------------


class MockPlatform(PlatformInterface):
    """Controllable fake platform.

    Records every method call and returns canned values.  Set
    ``raise_on_*`` attributes to force specific methods to raise.
    """

    def __init__(
        self,
        cursor_pos: tuple[int, int] = (0, 0),
        frame: NDArray[np.uint8] | None = None,
        origin: tuple[int, int] = (0, 0),
    ) -> None:
        self._cursor_pos = cursor_pos
        self._frame = frame if frame is not None else np.zeros((800, 1280, 3), dtype=np.uint8)
        self._origin = origin
        self.indicators: list[FakeIndicator] = []

        # Call recorders
        self.move_cursor_calls: list[tuple[int, int]] = []
        self.click_calls: list[tuple[int, int, str]] = []
        self.double_click_calls: list[tuple[int, int, str]] = []
        self.capture_calls = 0
        self.closed = False

        # Exception triggers
        self.raise_on_click: Exception | None = None
        self.raise_on_capture: Exception | None = None

    def capture_frame(self) -> NDArray[np.uint8]:
        if self.raise_on_capture is not None:
            raise self.raise_on_capture
        self.capture_calls += 1
        return self._frame

    def capture_origin(self) -> tuple[int, int]:
        return self._origin

    def get_cursor_pos(self) -> tuple[int, int]:
        return self._cursor_pos

    def move_cursor(self, x: int, y: int) -> None:
        self.move_cursor_calls.append((x, y))
        self._cursor_pos = (x, y)

    def click(self, x: int, y: int, button: str = "left") -> None:
        if self.raise_on_click is not None:
            raise self.raise_on_click
        self.click_calls.append((x, y, button))
        self._route(x, y, 1)

    def double_click(self, x: int, y: int, button: str = "left") -> None:
        if self.raise_on_click is not None:
            raise self.raise_on_click
        self.double_click_calls.append((x, y, button))
        self._route(x, y, 2)

    def get_screen_size(self) -> tuple[int, int]:
        return (1280, 800)

    def get_platform_name(self) -> str:
        return "mock"

    def close(self) -> None:
        self.closed = True

    def _route(self, x: int, y: int, clicks: int) -> None:
        self._cursor_pos = (x, y)
        for indicator in self.indicators:
            indicator.handle_click(x, y, clicks)


# ------------------------------------------------------------------
# Fixtures
# ------------------------------------------------------------------


@pytest.fixture()
def fast_settings() -> Settings:
    """Settings with all pacing delays removed and a short event wait."""
    return Settings(
        wait_timeout_ms=400,
        idle_timeout_ms=2000,
        settle_delay_ms=0,
        input_delay_ms=0,
    )


@pytest.fixture()
def dispatcher() -> Iterator[DispatchThread]:
    """A running dispatch thread, stopped after the test."""
    thread = DispatchThread("test-dispatch")
    thread.start()
    yield thread
    thread.stop()


@pytest.fixture()
def platform() -> MockPlatform:
    return MockPlatform()


@pytest.fixture()
def indicator(dispatcher: DispatchThread, platform: MockPlatform) -> FakeIndicator:
    """A fake indicator wired to the mock platform's click routing."""
    fake = FakeIndicator(dispatcher)
    platform.indicators.append(fake)
    return fake
