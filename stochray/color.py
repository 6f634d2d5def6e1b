"""
RGB color accumulator used while shading and averaging samples.
"""

from __future__ import annotations
from dataclasses import dataclass
import math
from typing import Iterable, Tuple, Union


@dataclass(frozen=True)
class ColorTuple:
    """Immutable RGB triple of floats.

    Channels are unbounded while accumulating light; they are only
    clamped when converted to a display color.
    """
    r: float = 0.0
    g: float = 0.0
    b: float = 0.0

    def __add__(self, other: ColorTuple) -> ColorTuple:
        if not isinstance(other, ColorTuple):
            return NotImplemented
        return ColorTuple(self.r + other.r, self.g + other.g, self.b + other.b)

    def __mul__(self, other: Union[ColorTuple, float]) -> ColorTuple:
        if isinstance(other, ColorTuple):
            return ColorTuple(self.r * other.r, self.g * other.g, self.b * other.b)
        return ColorTuple(self.r * other, self.g * other, self.b * other)

    def __rmul__(self, other: float) -> ColorTuple:
        return self * other

    def __iter__(self):
        return iter((self.r, self.g, self.b))

    @staticmethod
    def average(colors: Iterable[ColorTuple]) -> ColorTuple:
        """Component-wise mean of a non-empty sequence of colors.

        Offsets from the first color are summed exactly, so averaging k
        copies of a color returns that color unchanged.

        Raises:
            ValueError: If the sequence is empty
        """
        colors = list(colors)
        if not colors:
            raise ValueError("Cannot average an empty sequence of colors")
        first = colors[0]
        count = len(colors)
        return ColorTuple(
            first.r + math.fsum(c.r - first.r for c in colors) / count,
            first.g + math.fsum(c.g - first.g for c in colors) / count,
            first.b + math.fsum(c.b - first.b for c in colors) / count,
        )

    def to_display(self) -> Tuple[int, int, int]:
        """Convert to an 8-bit-per-channel color.

        Each channel is clamped to [0, 1] and scaled to [0, 255] with
        rounding to nearest.
        """
        return tuple(int(min(max(c, 0.0), 1.0) * 255 + 0.5) for c in self)

    @classmethod
    def from_hex(cls, value: str) -> ColorTuple:
        """Parse a '#rrggbb' string."""
        hex_str = value.lstrip('#')
        if len(hex_str) != 6:
            raise ValueError(f"Expected a #rrggbb color, got: {value}")
        return cls(
            int(hex_str[0:2], 16) / 255.0,
            int(hex_str[2:4], 16) / 255.0,
            int(hex_str[4:6], 16) / 255.0,
        )


BLACK = ColorTuple(0.0, 0.0, 0.0)
