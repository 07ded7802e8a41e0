"""Events raised by the tray indicator and snapshots taken by the harness.

An ``ActionEvent`` is what the widget delivers to its listeners on the
dispatch thread.  A ``CapturedEvent`` is the immutable view of that
delivery handed back to the waiting driver thread.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ActionEvent:
    """An activation of the tray indicator.

    Attributes:
        command: The action command configured on the indicator at the
            moment the activation was processed.  ``None`` when unset.
        source: Tooltip or name of the indicator that fired.
        timestamp: Monotonic timestamp of delivery.
    """

    command: str | None
    source: str
    timestamp: float


@dataclass(frozen=True)
class CapturedEvent:
    """Snapshot of an ``EventCapture`` read under its lock.

    Attributes:
        triggered: Whether an action was recorded since the last arm.
        command: Payload of the most recent recording, or ``None``.
        count: How many recordings happened since the last arm.
    """

    triggered: bool
    command: str | None = None
    count: int = 0
