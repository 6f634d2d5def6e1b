"""
Stratified jittered sub-pixel sampling.
"""

from __future__ import annotations
import random
from typing import List, Optional, Tuple


class StochasticSampler:
    """Produces one jittered sample offset per cell of an N x N pixel grid.

    The offsets are drawn once and reused for every pixel of a frame, so
    the stratification pattern is shared across the image.
    """

    def __init__(
        self,
        num_sections: int = 3,
        pixel_width: float = 1.0,
        pixel_height: float = 1.0,
        jitter: bool = True,
        rng: Optional[random.Random] = None
    ):
        """Create a sampler.

        Args:
            num_sections: Grid divisions per axis
            pixel_width: Horizontal extent to sample within
            pixel_height: Vertical extent to sample within
            jitter: If False, samples sit exactly on cell centers
            rng: Random source (a fresh unseeded one if None)
        """
        if num_sections < 1:
            raise ValueError(f"num_sections must be >= 1, got {num_sections}")
        if pixel_width <= 0 or pixel_height <= 0:
            raise ValueError(
                f"Pixel extent must be positive, got {pixel_width} x {pixel_height}"
            )
        self.num_sections = num_sections
        self.pixel_width = pixel_width
        self.pixel_height = pixel_height
        self.jitter_enabled = jitter
        self.rng = rng if rng is not None else random.Random()

    @property
    def section_width(self) -> float:
        return self.pixel_width / self.num_sections

    @property
    def section_height(self) -> float:
        return self.pixel_height / self.num_sections

    def jitter(self, section_size: float) -> float:
        """Random offset in [-section_size/4, +section_size/4]."""
        magnitude = self.rng.random() * section_size / 4
        return magnitude if self.rng.random() < 0.5 else -magnitude

    def cell_centers(self) -> List[Tuple[float, float]]:
        """Unjittered cell centers, row-major (x varies fastest)."""
        sw = self.section_width
        sh = self.section_height
        return [
            ((i + 0.5) * sw, (j + 0.5) * sh)
            for j in range(self.num_sections)
            for i in range(self.num_sections)
        ]

    def sample_offsets(self) -> List[Tuple[float, float]]:
        """Draw num_sections² sample offsets in pixel-local space."""
        if not self.jitter_enabled:
            return self.cell_centers()
        return [
            (x + self.jitter(self.section_width), y + self.jitter(self.section_height))
            for x, y in self.cell_centers()
        ]

    def __len__(self) -> int:
        return self.num_sections * self.num_sections
