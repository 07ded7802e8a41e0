"""Abstract base class defining the contract for synthetic input and capture.

Every target OS provides a concrete subclass of ``PlatformInterface``.
The factory function ``create_platform()`` auto-detects the running OS
and returns the appropriate implementation.
"""

from __future__ import annotations

import platform as _platform_mod
from abc import ABC, abstractmethod

import numpy as np
from numpy.typing import NDArray


class PlatformInterface(ABC):
    """Abstract interface for platform-specific pointer and screen access.

    All coordinates are in screen space as reported by the OS pointer
    API.
    """

    # ------------------------------------------------------------------
    # Screen capture
    # ------------------------------------------------------------------

    @abstractmethod
    def capture_frame(self) -> NDArray[np.uint8]:
        """Capture the whole desktop as a numpy array.

        Returns:
            A numpy array of shape ``(H, W, 3)`` in BGR colour order
            with dtype ``uint8``.
        """

    def capture_origin(self) -> tuple[int, int]:
        """Screen coordinates of pixel ``(0, 0)`` of ``capture_frame``.

        Multi-monitor desktops can start at negative coordinates.

        Returns:
            An ``(x, y)`` tuple.
        """
        return (0, 0)

    # ------------------------------------------------------------------
    # Cursor
    # ------------------------------------------------------------------

    @abstractmethod
    def get_cursor_pos(self) -> tuple[int, int]:
        """Get the current cursor position.

        Returns:
            A ``(x, y)`` tuple in screen coordinates.
        """

    @abstractmethod
    def move_cursor(self, x: int, y: int) -> None:
        """Move the cursor to the given coordinates.

        Args:
            x: Target horizontal position.
            y: Target vertical position.
        """

    # ------------------------------------------------------------------
    # Mouse actions
    # ------------------------------------------------------------------

    @abstractmethod
    def click(
        self, x: int, y: int, button: str = "left"
    ) -> None:
        """Click at the given coordinates.

        Args:
            x: Horizontal position.
            y: Vertical position.
            button: One of ``'left'``, ``'right'``, or ``'middle'``.
        """

    @abstractmethod
    def double_click(
        self, x: int, y: int, button: str = "left"
    ) -> None:
        """Double-click at the given coordinates.

        Args:
            x: Horizontal position.
            y: Vertical position.
            button: One of ``'left'``, ``'right'``, or ``'middle'``.
        """

    # ------------------------------------------------------------------
    # Screen queries
    # ------------------------------------------------------------------

    @abstractmethod
    def get_screen_size(self) -> tuple[int, int]:
        """Get primary screen dimensions.

        Returns:
            A ``(width, height)`` tuple.
        """

    # ------------------------------------------------------------------
    # Metadata & cleanup
    # ------------------------------------------------------------------

    def get_platform_name(self) -> str:
        """Return the platform name.

        Override in subclasses to return ``'windows'``, ``'linux'``,
        or ``'macos'``.

        Returns:
            A lowercase platform identifier string.
        """
        return "unknown"

    def close(self) -> None:
        """Release any OS resources held by the platform."""


# ----------------------------------------------------------------------
# Factory
# ----------------------------------------------------------------------

_SYSTEM_NAMES: dict[str, str] = {
    "Windows": "windows",
    "Linux": "linux",
    "Darwin": "macos",
}


def detect_platform_name() -> str:
    """Map ``platform.system()`` to ``windows`` / ``linux`` / ``macos``.

    Returns:
        The lowercase identifier, or ``'unknown'``.
    """
    return _SYSTEM_NAMES.get(_platform_mod.system(), "unknown")


def create_platform(name: str = "") -> PlatformInterface:
    """Return the platform implementation for *name* or the running OS.

    The concrete platform modules are imported lazily so that
    OS-specific dependencies are only required on the matching OS.

    Args:
        name: Explicit platform identifier.  Empty means auto-detect.

    Returns:
        A ``PlatformInterface`` instance.

    Raises:
        NotImplementedError: If the platform is not supported.
        ImportError: If the input-simulation backend cannot be loaded
            (for example, no X display).
    """
    resolved = name or detect_platform_name()

    if resolved == "windows":
        from tray_harness.platform.windows import WindowsPlatform

        return WindowsPlatform()

    if resolved in ("linux", "macos"):
        from tray_harness.platform.desktop import DesktopPlatform

        return DesktopPlatform(resolved)

    raise NotImplementedError(
        f"Unsupported operating system: {resolved!r}"
    )
