"""
Camera module for generating primary rays.

Rays are addressed in pixel space: x grows to the right and y grows
downward, with (0, 0) at the top-left corner of the image. Fractional
coordinates address sub-pixel sample positions.
"""

from __future__ import annotations
import math
from .vec3 import Vec3, Point3
from .ray import Ray


class Camera:
    """A pinhole camera with perspective projection."""

    def __init__(
        self,
        position: Point3,
        look_at: Point3,
        width: int,
        height: int,
        up: Vec3 = Vec3(0, 1, 0),
        fov: float = 60.0
    ):
        """Create a camera.

        Args:
            position: Camera position in world space
            look_at: Point the camera is looking at
            width: Image width in pixels
            height: Image height in pixels
            up: World up vector (usually (0, 1, 0))
            fov: Vertical field of view in degrees
        """
        self.position = position
        self.look_at = look_at
        self.width = width
        self.height = height
        self.fov = fov

        plane_height = 2.0 * math.tan(math.radians(fov) / 2)
        plane_width = plane_height * width / height

        # Orthonormal basis; forward points from the camera to the target
        self.forward = (look_at - position).normalize()
        self.right = self.forward.cross(up).normalize()
        self.up = self.right.cross(self.forward)

        self.pixel_size_x = plane_width / width
        self.pixel_size_y = plane_height / height
        self.top_left = (
            position
            + self.forward
            - self.right * (plane_width / 2)
            + self.up * (plane_height / 2)
        )

    def make_ray(self, x: float, y: float) -> Ray:
        """Generate a primary ray through a pixel-space coordinate.

        Args:
            x: Horizontal pixel coordinate (may be fractional)
            y: Vertical pixel coordinate, top row is 0 (may be fractional)

        Returns:
            A ray from the camera position through the image plane
        """
        target = (
            self.top_left
            + self.right * (x * self.pixel_size_x)
            - self.up * (y * self.pixel_size_y)
        )
        return Ray(self.position, target - self.position)

    def __repr__(self) -> str:
        return f"Camera(position={self.position}, look_at={self.look_at}, fov={self.fov})"
