"""Synthetic pointer gestures aimed at the tray icon.

The ``GestureDriver`` is the only component that issues input.  It
runs on the driver thread, never holds a lock while doing so, and
paces every step: each synthetic event is followed by the configured
input delay, and :meth:`GestureDriver.wait_for_idle` drains the
dispatch queue before the next step starts.

Typical usage::

    driver = GestureDriver(platform, dispatcher, locator, settings, arity)
    position = driver.locate(indicator)
    driver.move_to(*position)
    driver.wait_for_idle(settings.settle_delay_ms)
    driver.activate()
"""

from __future__ import annotations

import logging
import time

from tray_harness.config.settings import Settings
from tray_harness.core.dispatch_thread import DispatchThread
from tray_harness.core.icon_locator import IconLocator
from tray_harness.models.actions import ActivationArity
from tray_harness.platform.interface import PlatformInterface
from tray_harness.widget.interface import TrayIndicator

logger = logging.getLogger(__name__)


class GestureDriver:
    """Positions the pointer and issues the activation gesture.

    Args:
        platform: OS input driver.
        dispatcher: Dispatch thread used for idle barriers.
        locator: Resolves the icon's screen position.
        settings: Input pacing and idle bounds.
        arity: Activation gesture chosen once for the run.
    """

    def __init__(
        self,
        platform: PlatformInterface,
        dispatcher: DispatchThread,
        locator: IconLocator,
        settings: Settings,
        arity: ActivationArity,
    ) -> None:
        self._platform = platform
        self._dispatcher = dispatcher
        self._locator = locator
        self._settings = settings
        self._arity = arity

    @property
    def arity(self) -> ActivationArity:
        return self._arity

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def locate(self, indicator: TrayIndicator) -> tuple[int, int] | None:
        """Return the icon's screen position, or ``None``."""
        return self._locator.locate(indicator)

    def move_to(self, x: int, y: int) -> None:
        """Move the pointer to ``(x, y)``."""
        self._platform.move_cursor(x, y)
        self._pause()

    def wait_for_idle(self, settle_ms: int = 0) -> bool:
        """Drain the dispatch queue, then wait a further *settle_ms*.

        Returns:
            False if the queue did not drain within ``idle_timeout_ms``.
        """
        idle = self._dispatcher.wait_for_idle(self._settings.idle_timeout_ms)
        if settle_ms > 0:
            time.sleep(settle_ms / 1000.0)
        return idle

    def activate(self) -> None:
        """Issue the activation gesture at the current pointer position."""
        x, y = self._platform.get_cursor_pos()
        logger.debug("Activating (%s) at (%d, %d)", self._arity.name.lower(), x, y)
        if self._arity is ActivationArity.SINGLE:
            self._platform.click(x, y)
        else:
            self._platform.double_click(x, y)
        self._pause()

    def refresh_hover(self, position: tuple[int, int]) -> None:
        """Park the pointer away from the icon, then bring it back.

        Leaves the tray host with no lingering hover or click state
        from a previous gesture.

        Args:
            position: The icon position to return to.
        """
        away_x, away_y = self._settings.away_position
        self.move_to(away_x, away_y)
        self.wait_for_idle()
        self.move_to(*position)
        self.wait_for_idle()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _pause(self) -> None:
        if self._settings.input_delay_ms > 0:
            time.sleep(self._settings.input_delay_ms / 1000.0)
