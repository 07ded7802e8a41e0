"""Windows implementation of ``PlatformInterface``.

Uses:
- ``mss`` for fast screen capture (shared-memory, no GDI overhead).
- ``ctypes`` + Windows API for cursor position and screen metrics.
- ``pynput`` for input injection (mouse clicks).

Coordinates are physical pixels: the process is made DPI aware on
construction so that capture and pointer coordinates agree.
"""

from __future__ import annotations

import ctypes
import logging

from tray_harness.platform.desktop import DesktopPlatform

logger = logging.getLogger(__name__)

# -- Windows API constants -----------------------------------------
SM_CXSCREEN = 0
SM_CYSCREEN = 1

# DPI awareness constants (Windows 8.1+)
PROCESS_PER_MONITOR_DPI_AWARE = 2


class _POINT(ctypes.Structure):
    """Win32 POINT structure."""

    _fields_ = [("x", ctypes.c_long), ("y", ctypes.c_long)]


def _enable_dpi_awareness() -> None:
    """Set process-level DPI awareness so coordinates are physical pixels.

    Falls back on older Windows versions that lack the API.
    """
    try:
        ctypes.windll.shcore.SetProcessDpiAwareness(  # type: ignore[attr-defined]
            PROCESS_PER_MONITOR_DPI_AWARE,
        )
        logger.debug("DPI awareness set to per-monitor.")
    except (AttributeError, OSError):
        try:
            ctypes.windll.user32.SetProcessDPIAware()  # type: ignore[attr-defined]
            logger.debug(
                "Fell back to SetProcessDPIAware (system-level)."
            )
        except (AttributeError, OSError):
            logger.warning("Could not set DPI awareness.")


class WindowsPlatform(DesktopPlatform):
    """Windows-specific implementation of :class:`PlatformInterface`.

    Sets DPI awareness before ``mss`` and ``pynput`` are initialised,
    then reads the cursor and screen metrics straight from ``user32``.
    """

    def __init__(self) -> None:
        _enable_dpi_awareness()
        super().__init__("windows")

    # -- Cursor ----------------------------------------------------

    def get_cursor_pos(self) -> tuple[int, int]:
        """Get the current cursor position via the Windows API.

        Returns:
            A ``(x, y)`` tuple of the cursor position in physical
            screen coordinates.
        """
        pt = _POINT()
        ctypes.windll.user32.GetCursorPos(ctypes.byref(pt))  # type: ignore[attr-defined]
        return (pt.x, pt.y)

    def move_cursor(self, x: int, y: int) -> None:
        ctypes.windll.user32.SetCursorPos(x, y)  # type: ignore[attr-defined]

    # -- Screen queries --------------------------------------------

    def get_screen_size(self) -> tuple[int, int]:
        """Get the primary screen dimensions.

        Returns:
            A ``(width, height)`` tuple in physical pixels.
        """
        w = ctypes.windll.user32.GetSystemMetrics(SM_CXSCREEN)  # type: ignore[attr-defined]
        h = ctypes.windll.user32.GetSystemMetrics(SM_CYSCREEN)  # type: ignore[attr-defined]
        return (w, h)
