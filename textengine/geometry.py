"""Geometry and colour value types shared by the layout engine and painters."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Rectangle:
    """Axis-aligned rectangle in layout units.

    A negative height marks an unconstrained extent (the root viewport is
    only bounded horizontally).
    """
    x: int = 0
    y: int = 0
    w: int = 0
    h: int = 0

    @classmethod
    def empty(cls) -> "Rectangle":
        return cls(0, 0, 0, 0)

    @property
    def right(self) -> int:
        return self.x + self.w

    @property
    def bottom(self) -> int:
        return self.y + self.h


@dataclass(frozen=True)
class Extents:
    """Four-sided spacing used for margins and padding."""
    top: int = 0
    left: int = 0
    bottom: int = 0
    right: int = 0

    @classmethod
    def uniform(cls, amount: int) -> "Extents":
        return cls(amount, amount, amount, amount)

    @property
    def horizontal(self) -> int:
        return self.left + self.right

    @property
    def vertical(self) -> int:
        return self.top + self.bottom

    def __add__(self, other: "Extents") -> "Extents":
        return Extents(
            self.top + other.top,
            self.left + other.left,
            self.bottom + other.bottom,
            self.right + other.right,
        )


@dataclass(frozen=True)
class Colour:
    """RGB colour with integer channels in 0-255."""
    red: int
    green: int
    blue: int

    def __post_init__(self):
        for channel in (self.red, self.green, self.blue):
            if not 0 <= channel <= 255:
                raise ValueError(f"Colour channel out of range: {channel}")

    def to_floats(self) -> tuple[float, float, float]:
        """Return channels scaled to 0.0-1.0 as expected by PDF canvases."""
        return (self.red / 255, self.green / 255, self.blue / 255)

    def to_hex(self) -> str:
        return f"#{self.red:02x}{self.green:02x}{self.blue:02x}"
