"""
Geometric objects for the ray tracer.

Each object implements `intersect`, returning every hit of a ray with
the surface that lies at least EPSILON in front of the ray origin.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List
import math

from .vec3 import Vec3, Point3
from .ray import Ray
from .materials import Material

# Minimum ray parameter for a hit to count; rejects self-intersection noise
EPSILON = 1e-4


@dataclass(frozen=True)
class Intersection:
    """A single ray-surface hit.

    Attributes:
        t: Distance along the ray to the hit point
        normal: Unit surface normal at the hit point
    """
    t: float
    normal: Vec3


class GeometryObject(ABC):
    """Abstract base class for all objects that can be hit by rays."""

    material: Material

    @abstractmethod
    def intersect(self, ray: Ray) -> List[Intersection]:
        """Find the intersections of a ray with this object.

        Args:
            ray: The ray to test

        Returns:
            Zero or more intersections with t >= EPSILON, in no particular order
        """
        pass


class Sphere(GeometryObject):
    """A sphere defined by center and radius."""

    def __init__(self, center: Point3, radius: float, material: Material = Material()):
        self.center = center
        self.radius = radius
        self.material = material

    def intersect(self, ray: Ray) -> List[Intersection]:
        """Test ray-sphere intersection using the quadratic formula.

        The equation (P-C)·(P-C) = r² where P = ray.at(t)
        expands to: t²(d·d) + 2t(d·(O-C)) + (O-C)·(O-C) - r² = 0
        which is the quadratic at² + bt + c = 0. Both roots are reported
        when they lie in front of the ray origin.
        """
        a = ray.direction.length_squared()
        if a == 0 or self.radius <= 0:
            return []

        oc = ray.origin - self.center
        half_b = oc.dot(ray.direction)
        c = oc.length_squared() - self.radius * self.radius

        discriminant = half_b * half_b - a * c
        if discriminant < 0:
            return []

        sqrtd = math.sqrt(discriminant)
        roots = [(-half_b - sqrtd) / a]
        if sqrtd > 0:
            roots.append((-half_b + sqrtd) / a)

        hits = []
        for t in roots:
            if t >= EPSILON:
                normal = (ray.at(t) - self.center) / self.radius
                hits.append(Intersection(t=t, normal=normal))
        return hits

    def __repr__(self) -> str:
        return f"Sphere(center={self.center}, radius={self.radius})"


class Plane(GeometryObject):
    """An infinite one-sided plane defined by a point and a normal.

    Only rays approaching the side the normal points to register a hit.
    """

    def __init__(self, point: Point3, normal: Vec3, material: Material = Material()):
        self.point = point
        self.normal = normal.normalize()
        self.material = material

    def intersect(self, ray: Ray) -> List[Intersection]:
        denom = self.normal.dot(ray.direction)
        # Parallel, back-facing, or degenerate normal/direction
        if denom > -1e-8:
            return []

        t = (self.point - ray.origin).dot(self.normal) / denom
        if t < EPSILON:
            return []
        return [Intersection(t=t, normal=self.normal)]

    def __repr__(self) -> str:
        return f"Plane(point={self.point}, normal={self.normal})"
