"""Configuration defaults for the tray action-command harness.

Provides the ``Settings`` dataclass that holds every tunable parameter
for event waiting, idle barriers, synthetic input pacing, icon
location, and platform selection.

Typical usage::

    from tray_harness.config.settings import get_default_settings

    settings = get_default_settings()
    print(settings.wait_timeout_ms)
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any


@dataclass(frozen=True)
class Settings:
    """Immutable configuration for the whole harness.

    All timing values are in milliseconds.

    Attributes:
        wait_timeout_ms: Upper bound on how long the driver thread
            waits for the action event after issuing a gesture.
        idle_timeout_ms: Upper bound on draining the dispatch queue
            during an idle barrier.
        settle_delay_ms: Extra delay after the first pointer
            positioning so the tray host can register the hover.
        input_delay_ms: Delay after every synthetic input event.
        away_position: Screen point the pointer is parked at between
            scenario passes.
        sample_command: Action command configured for the first pass.
        icon_tooltip: Tooltip shown by the tray icon.
        icon_size: Edge length of the square icon image in pixels.
        locate_threshold: Minimum normalised correlation (0-1) for a
            screen template match to count as the icon.
        locate_scales: Template scale factors tried during screen
            matching, in order.
        activation_arity: Explicit arity override (``single`` or
            ``double``).  Left empty for detection.
        platform_name: Explicit platform override (``linux``,
            ``windows``, ``macos``).  Left empty for auto-detection.
        dispatch_thread_name: Name given to the UI dispatch thread.
    """

    # -- Event waiting --------------------------------------------------------
    wait_timeout_ms: int = 3000

    # -- Idle barriers & input pacing -----------------------------------------
    idle_timeout_ms: int = 5000
    settle_delay_ms: int = 2000
    input_delay_ms: int = 50
    away_position: tuple[int, int] = (100, 0)

    # -- Widget ---------------------------------------------------------------
    sample_command: str = "Sample Command"
    icon_tooltip: str = "Sample Icon"
    icon_size: int = 20

    # -- Icon location --------------------------------------------------------
    locate_threshold: float = 0.8
    locate_scales: tuple[float, ...] = (1.0, 1.1, 1.2, 0.8)

    # -- Platform -------------------------------------------------------------
    activation_arity: str = ""
    platform_name: str = ""
    dispatch_thread_name: str = "tray-dispatch"

    # -- Factory & serialisation ----------------------------------------------

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Settings:
        """Create a ``Settings`` instance from a plain dictionary.

        Unknown keys are silently ignored.  List values for tuple
        fields (as produced by JSON) are converted back to tuples.

        Args:
            data: Dictionary whose keys correspond to ``Settings``
                field names.

        Returns:
            A new ``Settings`` instance populated from *data*, with
            defaults filling any missing keys.
        """
        known_names = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in data.items() if k in known_names}
        for name in ("away_position", "locate_scales"):
            if isinstance(filtered.get(name), list):
                filtered[name] = tuple(filtered[name])
        return cls(**filtered)

    def to_dict(self) -> dict[str, Any]:
        """Serialise the settings to a plain dictionary.

        Returns:
            A shallow dictionary mapping every field name to its
            current value.
        """
        return asdict(self)


def get_default_settings() -> Settings:
    """Return a ``Settings`` instance with all default values.

    Returns:
        A freshly constructed ``Settings`` with default values.
    """
    return Settings()
