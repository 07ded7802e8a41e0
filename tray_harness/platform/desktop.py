"""Cross-platform ``PlatformInterface`` built on ``mss`` and ``pynput``.

Uses:
- ``mss`` for screen capture of the whole virtual desktop.
- ``pynput`` for pointer queries and input injection (X11 on Linux,
  Quartz on macOS).

Importing this module fails with ``ImportError`` when ``pynput`` has
no usable backend, e.g. on a headless or Wayland-only session.
"""

from __future__ import annotations

import logging

import mss
import numpy as np
from numpy.typing import NDArray
from pynput.mouse import Button
from pynput.mouse import Controller as MouseController

from tray_harness.platform.interface import PlatformInterface

logger = logging.getLogger(__name__)

_BUTTON_MAP: dict[str, Button] = {
    "left": Button.left,
    "right": Button.right,
    "middle": Button.middle,
}


def _resolve_button(button: str) -> Button:
    """Map a button name to a ``pynput`` button.

    Raises:
        ValueError: If *button* is not a recognised name.
    """
    btn = _BUTTON_MAP.get(button.lower())
    if btn is None:
        raise ValueError(
            f"Unknown mouse button: {button!r}. "
            f"Expected one of {list(_BUTTON_MAP)}"
        )
    return btn


class DesktopPlatform(PlatformInterface):
    """Generic desktop implementation of :class:`PlatformInterface`.

    Args:
        name: Platform identifier reported by ``get_platform_name``.
    """

    def __init__(self, name: str = "linux") -> None:
        self._name = name
        self._sct = mss.mss()
        self._mouse = MouseController()
        logger.info("%s platform initialised.", type(self).__name__)

    # -- cleanup ---------------------------------------------------

    def close(self) -> None:
        """Release the mss screen-capture context."""
        self._sct.close()
        logger.info("%s platform closed.", type(self).__name__)

    # -- Screen capture --------------------------------------------

    def capture_frame(self) -> NDArray[np.uint8]:
        """Capture every monitor as one BGR numpy array.

        ``mss`` monitor ``0`` is the bounding box of all monitors, so
        a tray on a secondary display is still in frame.

        Returns:
            A numpy array of shape ``(H, W, 3)`` in BGR colour order
            with dtype ``uint8``.
        """
        shot = self._sct.grab(self._sct.monitors[0])
        # mss returns BGRA; drop alpha channel for BGR
        frame: NDArray[np.uint8] = np.array(shot, dtype=np.uint8)[
            :, :, :3
        ]
        return frame

    def capture_origin(self) -> tuple[int, int]:
        monitor = self._sct.monitors[0]
        return (int(monitor["left"]), int(monitor["top"]))

    # -- Cursor ----------------------------------------------------

    def get_cursor_pos(self) -> tuple[int, int]:
        x, y = self._mouse.position
        return (int(x), int(y))

    def move_cursor(self, x: int, y: int) -> None:
        self._mouse.position = (x, y)

    # -- Mouse actions ---------------------------------------------

    def click(
        self, x: int, y: int, button: str = "left"
    ) -> None:
        """Single-click at the given coordinates.

        Raises:
            ValueError: If *button* is not a recognised name.
        """
        btn = _resolve_button(button)
        self._mouse.position = (x, y)
        self._mouse.click(btn, 1)

    def double_click(
        self, x: int, y: int, button: str = "left"
    ) -> None:
        """Double-click at the given coordinates.

        Raises:
            ValueError: If *button* is not a recognised name.
        """
        btn = _resolve_button(button)
        self._mouse.position = (x, y)
        self._mouse.click(btn, 2)

    # -- Screen queries --------------------------------------------

    def get_screen_size(self) -> tuple[int, int]:
        monitor = self._sct.monitors[1]  # primary monitor
        return (int(monitor["width"]), int(monitor["height"]))

    # -- Metadata --------------------------------------------------

    def get_platform_name(self) -> str:
        return self._name
