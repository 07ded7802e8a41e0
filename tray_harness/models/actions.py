"""Activation gestures the harness can issue against the tray icon."""

from __future__ import annotations

from enum import Enum


class ActivationArity(Enum):
    """How many pointer presses make up the platform's activation gesture.

    Attributes:
        SINGLE: One click (macOS status items, pystray default items).
        DOUBLE: Two rapid clicks (Windows notification area, X11 trays).
    """

    SINGLE = 1
    DOUBLE = 2

    @property
    def clicks(self) -> int:
        """Number of button presses in the gesture."""
        return self.value

    @property
    def verb(self) -> str:
        """Past-tense description used in diagnostics."""
        return "clicked" if self is ActivationArity.SINGLE else "double clicked"

    @classmethod
    def parse(cls, text: str) -> ActivationArity:
        """Parse ``"single"`` / ``"double"`` (case-insensitive).

        Raises:
            ValueError: If *text* names neither arity.
        """
        normalised = text.strip().lower()
        for member in cls:
            if member.name.lower() == normalised:
                return member
        raise ValueError(
            f"Unknown activation arity: {text!r}. Expected 'single' or 'double'"
        )
