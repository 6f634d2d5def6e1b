"""
In-memory scene graph consumed by the renderer.

A Scene is built once (usually by the scene parser) and is read-only for
the duration of a render, so worker threads share it without locking.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional

from .camera import Camera
from .color import ColorTuple, BLACK
from .lights import PointLight, AmbientLight
from .shapes import GeometryObject


class SceneError(Exception):
    """Invalid scene configuration."""
    pass


@dataclass(frozen=True)
class Viewport:
    """Output image dimensions in pixels."""
    width: int
    height: int

    def __post_init__(self):
        for name, value in (('width', self.width), ('height', self.height)):
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise SceneError(f"Viewport {name} must be a positive integer, got {value!r}")


@dataclass
class Scene:
    """Everything needed to render one frame.

    Attributes:
        viewport: Output image size
        camera: Produces primary rays for pixel coordinates
        objects: Geometry, scanned in order during intersection search
        lights: Point lights; shading only consults the first one
        ambient: Ambient light term
        background_color: Color of rays that hit nothing
    """
    viewport: Viewport
    camera: Optional[Camera]
    objects: List[GeometryObject] = field(default_factory=list)
    lights: List[PointLight] = field(default_factory=list)
    ambient: AmbientLight = field(default_factory=AmbientLight)
    background_color: ColorTuple = BLACK

    @property
    def primary_light(self) -> PointLight:
        """The light used for shading."""
        if not self.lights:
            raise SceneError("Scene has no lights; at least one light is required")
        return self.lights[0]

    def validate(self) -> Scene:
        """Check the scene is renderable.

        Returns:
            The scene itself, to allow chaining

        Raises:
            SceneError: If the camera or lights are missing
        """
        if self.camera is None:
            raise SceneError("Scene has no camera")
        if not self.lights:
            raise SceneError("Scene has no lights; at least one light is required")
        return self

    def __len__(self) -> int:
        return len(self.objects)
