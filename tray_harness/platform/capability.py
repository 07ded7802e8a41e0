"""Environment checks that decide whether the harness can run at all.

Each check is a pure function over injected inputs (environment
mapping, os-release fields, platform name) so the decision
tables can be tested without the environment they describe.  Only
:func:`tray_backend_available` and :func:`read_os_release` touch the
real system.
"""

from __future__ import annotations

import logging
import os
import platform as _platform_mod
from collections.abc import Mapping
from dataclasses import dataclass, field

from tray_harness.models.actions import ActivationArity

logger = logging.getLogger(__name__)

WINDOWS_ICON_POOL_ADVISORY = (
    "The tray icon can hide in the notification-area overflow pool, "
    "which makes it unreachable for the pointer. Enable 'Always show "
    "all icons and notifications on the taskbar' (or pin this icon) "
    "if the run fails to locate it."
)


@dataclass
class EnvironmentReport:
    """Verdict on whether the current environment can exercise the harness.

    Attributes:
        supported: False when the run must be skipped.
        reason: Why the run is skipped.  Empty when supported.
        warnings: Advisory messages worth logging before the run.
    """

    supported: bool
    reason: str = ""
    warnings: list[str] = field(default_factory=list)


def is_wayland_session(environ: Mapping[str, str]) -> bool:
    """Return True when the session runs on Wayland.

    Synthetic pointer input cannot reach the tray area there.
    """
    if environ.get("XDG_SESSION_TYPE", "").strip().lower() == "wayland":
        return True
    return bool(environ.get("WAYLAND_DISPLAY"))


def is_oel7_or_later(os_release: Mapping[str, str]) -> bool:
    """Return True for Oracle Linux 7 and newer.

    Its tray host does not deliver double clicks to tray icons.

    Args:
        os_release: Fields of ``/etc/os-release``, as returned by
            :func:`read_os_release`.
    """
    if os_release.get("ID") != "ol":
        return False
    major = os_release.get("VERSION_ID", "").split(".", 1)[0]
    return major.isdigit() and int(major) >= 7


def read_os_release() -> dict[str, str]:
    """Return the os-release fields, or an empty dict if unreadable."""
    try:
        return dict(_platform_mod.freedesktop_os_release())
    except OSError as exc:
        logger.debug("os-release unreadable: %s", exc)
        return {}


def tray_backend_available() -> bool:
    """Return True if ``pystray`` loads and supports a default action.

    Loading ``pystray`` selects and initialises a backend, which can
    fail with backend-specific errors (for example ``Xlib`` raising
    ``DisplayNameError`` without a display); any such failure means
    there is no usable tray.
    """
    try:
        import pystray
    except Exception as exc:
        logger.debug("pystray unavailable: %s: %s", type(exc).__name__, exc)
        return False
    return bool(getattr(pystray.Icon, "HAS_DEFAULT_ACTION", False))


def resolve_activation_arity(
    platform_name: str,
    override: str = "",
    native: ActivationArity | None = None,
) -> ActivationArity:
    """Pick the activation gesture, once, for the whole run.

    Precedence: explicit *override*, then the widget backend's *native*
    arity, then the platform default (single on macOS, double
    elsewhere).

    Raises:
        ValueError: If *override* is non-empty and not a known arity.
    """
    if override:
        return ActivationArity.parse(override)
    if native is not None:
        return native
    if platform_name == "macos":
        return ActivationArity.SINGLE
    return ActivationArity.DOUBLE


def check_environment(
    platform_name: str,
    environ: Mapping[str, str] | None = None,
    os_release: Mapping[str, str] | None = None,
    tray_available: bool | None = None,
) -> EnvironmentReport:
    """Decide whether the run can proceed on this machine.

    Args:
        platform_name: ``windows`` / ``linux`` / ``macos``.
        environ: Environment mapping; defaults to ``os.environ``.
        os_release: Fields of ``/etc/os-release``; read from
            disk on Linux when omitted.
        tray_available: Result of the tray backend probe; probed when
            omitted.

    Returns:
        An ``EnvironmentReport``.
    """
    if environ is None:
        environ = os.environ

    if platform_name == "linux":
        if is_wayland_session(environ):
            return EnvironmentReport(
                supported=False,
                reason="Pointer input cannot reach the tray on Wayland",
            )
        if os_release is None:
            os_release = read_os_release()
        if is_oel7_or_later(os_release):
            return EnvironmentReport(
                supported=False,
                reason="Oracle Linux 7+ does not support double click in the tray",
            )

    if tray_available is None:
        tray_available = tray_backend_available()
    if not tray_available:
        return EnvironmentReport(
            supported=False,
            reason="System tray is not supported on this platform",
        )

    warnings: list[str] = []
    if platform_name == "windows":
        warnings.append(WINDOWS_ICON_POOL_ADVISORY)
    return EnvironmentReport(supported=True, warnings=warnings)
