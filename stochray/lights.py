"""
Light sources for the shading model.
"""

from __future__ import annotations
from dataclasses import dataclass

from .color import ColorTuple
from .vec3 import Point3


@dataclass(frozen=True)
class PointLight:
    """A point light emitting equally in all directions, with no falloff."""
    position: Point3
    color: ColorTuple = ColorTuple(1.0, 1.0, 1.0)


@dataclass(frozen=True)
class AmbientLight:
    """Constant light reaching every surface regardless of geometry."""
    color: ColorTuple = ColorTuple(1.0, 1.0, 1.0)
    coeff: float = 0.1
