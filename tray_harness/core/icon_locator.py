"""Find the tray icon's on-screen position.

Tray hosts rarely expose icon geometry to the application that owns
the icon.  The ``IconLocator`` therefore asks the indicator first and,
failing that, grabs a screenshot through the ``PlatformInterface`` and
template-matches the icon image with OpenCV.

Typical usage::

    locator = IconLocator(platform, settings)
    position = locator.locate(indicator)
    if position is None:
        ...  # hard setup failure
"""

from __future__ import annotations

import logging

import cv2
import numpy as np
from numpy.typing import NDArray

from tray_harness.config.settings import Settings
from tray_harness.platform.interface import PlatformInterface
from tray_harness.widget.interface import TrayIndicator

logger = logging.getLogger(__name__)


class IconLocator:
    """Resolves the screen point to aim the activation gesture at.

    Args:
        platform: Backend used for screen capture.
        settings: Match threshold and template scales.
    """

    def __init__(
        self,
        platform: PlatformInterface,
        settings: Settings,
    ) -> None:
        self._platform = platform
        self._settings = settings

    def locate(self, indicator: TrayIndicator) -> tuple[int, int] | None:
        """Return the centre of the icon in screen coordinates.

        Args:
            indicator: The indicator whose icon is searched for.

        Returns:
            An ``(x, y)`` tuple, or ``None`` when the icon cannot be
            found.
        """
        bounds = indicator.get_bounds()
        if bounds is not None:
            logger.debug("Icon bounds reported by indicator: %s", bounds)
            return bounds.center()

        frame = self._platform.capture_frame()
        match = self.match_template(frame, indicator.icon_image)
        if match is None:
            logger.warning("Icon not found on screen")
            return None

        origin_x, origin_y = self._platform.capture_origin()
        x, y = match
        return (x + origin_x, y + origin_y)

    def match_template(
        self,
        frame: NDArray[np.uint8],
        template: NDArray[np.uint8],
    ) -> tuple[int, int] | None:
        """Find *template* in *frame* across the configured scales.

        Processing steps:

        1. Resize the template by each factor in ``locate_scales``,
           skipping sizes that do not fit the frame.
        2. Run ``cv2.matchTemplate`` with ``TM_CCOEFF_NORMED``.
        3. Keep the best peak over all scales.

        Args:
            frame: BGR screenshot.
            template: BGR icon image.

        Returns:
            Centre of the best match in frame coordinates, or ``None``
            if no peak reaches ``locate_threshold``.
        """
        frame_h, frame_w = frame.shape[:2]
        best_score = -1.0
        best_center: tuple[int, int] | None = None

        for scale in self._settings.locate_scales:
            scaled = _scale_template(template, scale)
            t_h, t_w = scaled.shape[:2]
            if t_h < 2 or t_w < 2 or t_h > frame_h or t_w > frame_w:
                continue

            result = cv2.matchTemplate(frame, scaled, cv2.TM_CCOEFF_NORMED)
            _, max_val, _, max_loc = cv2.minMaxLoc(result)
            if np.isfinite(max_val) and max_val > best_score:
                best_score = float(max_val)
                best_center = (max_loc[0] + t_w // 2, max_loc[1] + t_h // 2)

        logger.debug("Best template score: %.3f", best_score)
        if best_center is None or best_score < self._settings.locate_threshold:
            return None
        return best_center


def _scale_template(
    template: NDArray[np.uint8],
    scale: float,
) -> NDArray[np.uint8]:
    if scale == 1.0:
        return template
    h, w = template.shape[:2]
    size = (max(int(round(w * scale)), 1), max(int(round(h * scale)), 1))
    return cv2.resize(template, size, interpolation=cv2.INTER_NEAREST)
