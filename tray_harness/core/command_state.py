"""Single-slot store for the indicator's configured action command.

The value is written and read on the dispatch thread during a run, but
every access still goes through a lock so a read from another thread
can never observe a torn update.
"""

from __future__ import annotations

import threading


class CommandState:
    """Holds the configured action command (a string or ``None``).

    Values are stored verbatim: no trimming, no normalisation, and the
    empty string is distinct from ``None``.

    Example::

        state = CommandState()
        state.set("Sample Command")
        assert state.get() == "Sample Command"
    """

    def __init__(self) -> None:
        """Initialize with no command configured."""
        self._value: str | None = None
        self._lock = threading.Lock()

    def get(self) -> str | None:
        """Return the current command, or ``None`` when unset."""
        with self._lock:
            return self._value

    def set(self, value: str | None) -> None:
        """Replace the current command.

        Args:
            value: New command, or ``None`` to clear it.
        """
        with self._lock:
            self._value = value
