"""Rectangular placement modules."""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass
class Module:
    """A rectangular block with a lower-left position and a rotation flag.

    ``original_width`` and ``original_height`` are the unrotated dimensions;
    ``width`` and ``height`` give the effective ones.
    """

    name: str
    original_width: int
    original_height: int
    x: int = 0
    y: int = 0
    rotated: bool = False

    @property
    def width(self) -> int:
        """Effective width, taking rotation into account."""
        return self.original_height if self.rotated else self.original_width

    @property
    def height(self) -> int:
        """Effective height, taking rotation into account."""
        return self.original_width if self.rotated else self.original_height

    @property
    def area(self) -> int:
        """Area of the module; rotation does not change it."""
        return self.original_width * self.original_height

    @property
    def right(self) -> int:
        """x-coordinate of the right edge."""
        return self.x + self.width

    @property
    def top(self) -> int:
        """y-coordinate of the top edge."""
        return self.y + self.height

    def set_position(self, x: int, y: int) -> None:
        """Move the lower-left corner to ``(x, y)``."""
        self.x = x
        self.y = y

    def rotate(self) -> None:
        """Toggle the rotation state."""
        self.rotated = not self.rotated

    def overlaps(self, other: Module) -> bool:
        """Return True if the interiors of the two modules intersect."""
        if self.right <= other.x or other.right <= self.x:
            return False
        if self.top <= other.y or other.top <= self.y:
            return False
        return True

    def copy(self) -> Module:
        """Return an independent copy of this module."""
        return replace(self)

    def describe(self) -> str:
        """Return a human-readable multi-line summary."""
        return (
            f"Module: {self.name}\n"
            f"  Position: ({self.x}, {self.y})\n"
            f"  Dimensions: {self.width} x {self.height}\n"
            f"  Rotated: {'Yes' if self.rotated else 'No'}"
        )