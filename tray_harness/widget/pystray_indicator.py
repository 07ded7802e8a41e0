"""``TrayIndicator`` backed by ``pystray``.

pystray runs its own event loop and calls menu callbacks on it.  The
indicator registers one hidden *default* menu item; pystray activates
the default item when the icon is clicked, and the callback re-posts
the delivery onto the harness dispatch thread so listeners always run
there.

The loop is started with ``Icon.run`` on a dedicated thread rather than
``run_detached``: the GTK and AppIndicator backends only initialise in
``run_detached`` and expect the caller to drive the GLib main loop.
The icon is made visible by the ``setup`` callback, which pystray calls
once its loop is ready.
"""

from __future__ import annotations

import logging
import threading
from typing import Any

import cv2
import numpy as np
import pystray
from numpy.typing import NDArray
from PIL import Image

from tray_harness.core.dispatch_thread import DispatchThread
from tray_harness.models.actions import ActivationArity
from tray_harness.widget.interface import TrayIndicator

logger = logging.getLogger(__name__)


class PystrayIndicator(TrayIndicator):
    """System tray icon implemented with ``pystray``.

    Args:
        dispatcher: Dispatch thread that action events are delivered on.
        tooltip: Icon title / tooltip.
        image: BGR icon image.
        name: Internal pystray icon name.
        setup_timeout: Seconds ``add_to_tray`` waits for the icon to
            become visible.
    """

    native_arity = ActivationArity.SINGLE

    def __init__(
        self,
        dispatcher: DispatchThread,
        tooltip: str,
        image: NDArray[np.uint8] | None = None,
        name: str = "tray-harness",
        setup_timeout: float = 5.0,
    ) -> None:
        super().__init__(tooltip, image)
        self._dispatcher = dispatcher
        self._name = name
        self._setup_timeout = setup_timeout
        rgb = cv2.cvtColor(self.icon_image, cv2.COLOR_BGR2RGB)
        self._icon = pystray.Icon(
            name,
            icon=Image.fromarray(rgb),
            title=tooltip,
            menu=pystray.Menu(
                pystray.MenuItem(
                    tooltip,
                    self._on_activate,
                    default=True,
                    visible=False,
                ),
            ),
        )
        self._ready = threading.Event()
        self._loop_error: Exception | None = None
        self._loop_thread: threading.Thread | None = None

    def add_to_tray(self) -> None:
        """Start the pystray loop and wait until the icon is visible.

        Raises:
            RuntimeError: If the backend has no default action, the loop
                fails to start, or the icon does not appear within
                ``setup_timeout`` seconds.
        """
        if not getattr(self._icon, "HAS_DEFAULT_ACTION", False):
            raise RuntimeError(
                f"pystray backend {type(self._icon).__module__} "
                "does not support default actions"
            )
        self._ready.clear()
        self._loop_error = None
        self._loop_thread = threading.Thread(
            target=self._run_loop, name=f"{self._name}-loop", daemon=True,
        )
        self._loop_thread.start()

        if not self._ready.wait(self._setup_timeout):
            self.remove()
            raise RuntimeError(
                f"Tray icon did not become visible within {self._setup_timeout:.1f} s"
            )
        if self._loop_error is not None:
            self._loop_thread = None
            raise RuntimeError(
                f"pystray loop failed: {self._loop_error}"
            ) from self._loop_error
        if not self._loop_thread.is_alive():
            self._loop_thread = None
            raise RuntimeError("pystray loop exited before the icon was shown")
        logger.info("Tray icon %r added", self.tooltip)

    def remove(self) -> None:
        thread = self._loop_thread
        if thread is None:
            return
        self._loop_thread = None
        self._icon.stop()
        thread.join(self._setup_timeout)
        if thread.is_alive():
            logger.warning("pystray loop did not exit after stop()")
        logger.info("Tray icon %r removed", self.tooltip)

    # ------------------------------------------------------------------
    # pystray callbacks
    # ------------------------------------------------------------------

    def _run_loop(self) -> None:
        try:
            self._icon.run(setup=self._on_setup)
        except Exception as exc:
            logger.exception("pystray loop failed")
            self._loop_error = exc
        finally:
            self._ready.set()

    def _on_setup(self, icon: Any) -> None:
        # Runs on a pystray helper thread once the loop is ready.
        icon.visible = True
        self._ready.set()

    def _on_activate(self, icon: Any, item: Any) -> None:
        # Runs on the pystray thread.
        self._dispatcher.invoke_later(self.fire_action)
