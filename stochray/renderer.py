"""
Renderer module - the heart of the ray tracer.

Implements:
- Primary-ray tracing with closest-hit shading
- Stratified jittered supersampling
- Multi-threaded scanline rendering into an off-screen frame buffer
"""

from __future__ import annotations
import random
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple
import numpy as np

from .color import ColorTuple
from .intersection import find_closest
from .ray import Ray
from .sampler import StochasticSampler
from .scene import Scene
from .shading import illuminate


@dataclass
class RenderSettings:
    """Configuration for the renderer."""
    num_sections: int = 3
    pixel_width: float = 1.0
    pixel_height: float = 1.0
    jitter: bool = True
    num_threads: int = 4
    seed: Optional[int] = None

    def __post_init__(self):
        if self.num_threads < 1:
            raise ValueError(f"num_threads must be >= 1, got {self.num_threads}")

    def make_sampler(self) -> StochasticSampler:
        return StochasticSampler(
            num_sections=self.num_sections,
            pixel_width=self.pixel_width,
            pixel_height=self.pixel_height,
            jitter=self.jitter,
            rng=random.Random(self.seed)
        )


class FrameBuffer:
    """Off-screen 8-bit RGB image.

    Each scanline is written by exactly one task, so concurrent row tasks
    never touch the same memory and need no lock.
    """

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self._data = np.zeros((height, width, 3), dtype=np.uint8)

    def set_pixel(self, x: int, y: int, rgb: Tuple[int, int, int]) -> None:
        self._data[y, x] = rgb

    def get_pixel(self, x: int, y: int) -> Tuple[int, int, int]:
        r, g, b = self._data[y, x]
        return int(r), int(g), int(b)

    @property
    def pixels(self) -> np.ndarray:
        """Copy of the image as a (height, width, 3) uint8 array."""
        return self._data.copy()

    def to_image(self):
        """Convert to a Pillow image for display or encoding."""
        from PIL import Image as PILImage

        return PILImage.fromarray(self._data, 'RGB')

    def save(self, filename: str) -> None:
        """Save image to file (extension determines format)."""
        self.to_image().save(filename)


@dataclass
class RenderResult:
    """A finished frame and how long it took."""
    framebuffer: FrameBuffer
    elapsed: float
    rows: int
    samples_per_pixel: int

    @property
    def elapsed_ms(self) -> int:
        return int(round(self.elapsed * 1000))

    @property
    def message(self) -> str:
        return f"rendering finished in {self.elapsed_ms} ms."


def trace_ray(scene: Scene, ray: Ray) -> ColorTuple:
    """Color seen along a primary ray: background on a miss, shaded hit otherwise."""
    closest = find_closest(scene, ray)
    if closest is None:
        return scene.background_color
    obj, intersection = closest
    return illuminate(scene, obj, ray, intersection)


def render_line(
    y: int,
    scene: Scene,
    target: FrameBuffer,
    sample_offsets: Sequence[Tuple[float, float]]
) -> None:
    """Render scanline y into the target buffer.

    Every pixel averages one traced ray per sample offset.
    """
    camera = scene.camera
    for x in range(scene.viewport.width):
        colors = [
            trace_ray(scene, camera.make_ray(x + dx, y + dy))
            for dx, dy in sample_offsets
        ]
        target.set_pixel(x, y, ColorTuple.average(colors).to_display())


class Renderer:
    """Supersampling ray tracer with a scanline worker pool."""

    def __init__(self, settings: RenderSettings = None):
        """Create a renderer with the given settings.

        Args:
            settings: Render configuration (uses defaults if None)
        """
        self.settings = settings if settings else RenderSettings()
        self._progress_callback: Optional[Callable[[float], None]] = None

    def set_progress_callback(self, callback: Callable[[float], None]) -> None:
        """Set a callback function for progress updates.

        Args:
            callback: Function that takes progress as float (0.0 to 1.0)
        """
        self._progress_callback = callback

    def render(self, scene: Scene, sample_offsets: Optional[List[Tuple[float, float]]] = None) -> RenderResult:
        """Render the scene into a new frame buffer.

        Args:
            scene: The scene to render
            sample_offsets: Fixed sub-pixel offsets; drawn from the
                configured sampler if None

        Returns:
            RenderResult holding the completed frame and elapsed time

        Raises:
            SceneError: If the scene is not renderable
        """
        scene.validate()
        if sample_offsets is None:
            sample_offsets = self.settings.make_sampler().sample_offsets()
        if not sample_offsets:
            raise ValueError("At least one sample offset is required")

        width = scene.viewport.width
        height = scene.viewport.height
        target = FrameBuffer(width, height)

        lock = threading.Lock()
        completed_rows = [0]

        def render_row(y: int) -> None:
            render_line(y, scene, target, sample_offsets)
            if self._progress_callback:
                with lock:
                    completed_rows[0] += 1
                    progress = completed_rows[0] / height
                self._progress_callback(progress)

        start_time = time.perf_counter()
        if self.settings.num_threads > 1:
            with ThreadPoolExecutor(max_workers=self.settings.num_threads) as executor:
                # Consuming the iterator re-raises the first row failure
                list(executor.map(render_row, range(height)))
        else:
            for y in range(height):
                render_row(y)
        elapsed = time.perf_counter() - start_time

        return RenderResult(
            framebuffer=target,
            elapsed=elapsed,
            rows=height,
            samples_per_pixel=len(sample_offsets)
        )
