"""Abstract tray indicator with a settable action command.

A ``TrayIndicator`` owns the configured command (a ``CommandState``)
and its action listeners.  Concrete backends only have to put the icon
on screen and, when the user activates it, call :meth:`fire_action` on
the dispatch thread.  ``fire_action`` reads the command at delivery
time, so an event always reports the command that was configured when
the activation was processed.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Callable

import numpy as np
from numpy.typing import NDArray

from tray_harness.core.command_state import CommandState
from tray_harness.models.actions import ActivationArity
from tray_harness.models.events import ActionEvent
from tray_harness.models.geometry import Rectangle
from tray_harness.widget.icon import make_icon_image

logger = logging.getLogger(__name__)

ActionListener = Callable[[ActionEvent], None]


class TrayIndicator(ABC):
    """Base class for tray icons that raise action events.

    Args:
        tooltip: Text shown when hovering the icon; also used as the
            event source.
        image: BGR icon image.  Defaults to the quadrant icon.

    Attributes:
        native_arity: Activation gesture this backend responds to, or
            ``None`` to follow the platform default.
    """

    native_arity: ActivationArity | None = None

    def __init__(
        self,
        tooltip: str,
        image: NDArray[np.uint8] | None = None,
    ) -> None:
        self._tooltip = tooltip
        self._image = image if image is not None else make_icon_image()
        self._state = CommandState()
        self._listeners: list[ActionListener] = []

    # ------------------------------------------------------------------
    # Action command
    # ------------------------------------------------------------------

    def get_action_command(self) -> str | None:
        return self._state.get()

    def set_action_command(self, command: str | None) -> None:
        self._state.set(command)

    # ------------------------------------------------------------------
    # Listeners & delivery
    # ------------------------------------------------------------------

    def add_action_listener(self, listener: ActionListener) -> None:
        """Register *listener* for every subsequent activation."""
        self._listeners.append(listener)

    def fire_action(self) -> ActionEvent:
        """Deliver an action event to all listeners.

        Must run on the dispatch thread.  Listeners must not block.

        Returns:
            The delivered event.
        """
        event = ActionEvent(
            command=self._state.get(),
            source=self._tooltip,
            timestamp=time.monotonic(),
        )
        logger.debug("Delivering action event: %r", event.command)
        for listener in list(self._listeners):
            listener(event)
        return event

    # ------------------------------------------------------------------
    # Presentation
    # ------------------------------------------------------------------

    @property
    def tooltip(self) -> str:
        return self._tooltip

    @property
    def icon_image(self) -> NDArray[np.uint8]:
        """The BGR image drawn in the tray."""
        return self._image

    def get_bounds(self) -> Rectangle | None:
        """On-screen bounds of the icon, if the backend knows them.

        Returns:
            The icon rectangle, or ``None`` when the position has to be
            found some other way.
        """
        return None

    @abstractmethod
    def add_to_tray(self) -> None:
        """Show the icon in the system tray.

        Raises:
            RuntimeError: If the tray rejects the icon.
        """

    @abstractmethod
    def remove(self) -> None:
        """Remove the icon from the tray.  Safe to call more than once."""
