"""
Closest-hit search over the scene's geometry.
"""

from __future__ import annotations
from typing import Optional, Tuple

from .ray import Ray
from .scene import Scene
from .shapes import GeometryObject, Intersection


def find_closest(scene: Scene, ray: Ray) -> Optional[Tuple[GeometryObject, Intersection]]:
    """Find the nearest intersection of a ray with any object in the scene.

    Every object is tested (linear scan). On equal distances the first
    object encountered in scene order wins.

    Returns:
        (object, intersection) for the nearest hit, or None if nothing is hit
    """
    closest: Optional[Tuple[GeometryObject, Intersection]] = None
    for obj in scene.objects:
        for hit in obj.intersect(ray):
            if closest is None or hit.t < closest[1].t:
                closest = (obj, hit)
    return closest
