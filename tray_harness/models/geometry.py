"""Screen geometry primitives used to describe where the tray icon lives."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Rectangle:
    """Axis-aligned bounding rectangle in screen coordinates.

    All values are in pixels. The origin (0, 0) is the top-left corner
    of the primary display.

    Attributes:
        x: Left edge x-coordinate.
        y: Top edge y-coordinate.
        width: Horizontal extent in pixels (must be >= 0).
        height: Vertical extent in pixels (must be >= 0).
    """

    x: int
    y: int
    width: int
    height: int

    def __post_init__(self) -> None:
        """Validate that width and height are non-negative."""
        if self.width < 0:
            raise ValueError(f"Rectangle width must be >= 0, got {self.width}")
        if self.height < 0:
            raise ValueError(f"Rectangle height must be >= 0, got {self.height}")

    def contains_point(self, px: int, py: int) -> bool:
        """Check whether a point lies inside (or on the edge of) this rect.

        Args:
            px: X-coordinate of the point.
            py: Y-coordinate of the point.

        Returns:
            True if the point is within the rectangle bounds.
        """
        return self.x <= px <= self.x + self.width and self.y <= py <= self.y + self.height

    def center(self) -> tuple[int, int]:
        """Return the center point of the rectangle.

        Returns:
            A (cx, cy) tuple of integer pixel coordinates.
        """
        cx = self.x + self.width // 2
        cy = self.y + self.height // 2
        return (cx, cy)
