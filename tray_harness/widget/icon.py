"""Icon image used for the tray indicator.

The image must be easy to find on a screenshot, so it is split into
four quadrants of saturated colours.  A flat single-colour icon has
no unique template-match peak.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

# BGR
_QUADRANT_COLOURS: tuple[tuple[int, int, int], ...] = (
    (0, 0, 255),    # red, top-left
    (0, 255, 0),    # green, top-right
    (255, 0, 0),    # blue, bottom-left
    (0, 255, 255),  # yellow, bottom-right
)


def make_icon_image(size: int = 20) -> NDArray[np.uint8]:
    """Build the square quadrant icon.

    Args:
        size: Edge length in pixels (must be >= 2).

    Returns:
        A ``(size, size, 3)`` BGR ``uint8`` array.

    Raises:
        ValueError: If *size* is smaller than 2.
    """
    if size < 2:
        raise ValueError(f"icon size must be >= 2, got {size}")
    half = size // 2
    image = np.zeros((size, size, 3), dtype=np.uint8)
    image[:half, :half] = _QUADRANT_COLOURS[0]
    image[:half, half:] = _QUADRANT_COLOURS[1]
    image[half:, :half] = _QUADRANT_COLOURS[2]
    image[half:, half:] = _QUADRANT_COLOURS[3]
    return image
