"""
Surface material for the diffuse + Phong shading model.
"""

from __future__ import annotations
from dataclasses import dataclass

from .color import ColorTuple


@dataclass(frozen=True)
class Material:
    """Surface reflectance parameters.

    Attributes:
        diffuse_color: Base color of the surface (RGB, each component 0-1)
        diffuse_coeff: Weight of the diffuse and ambient terms
        specular_coeff: Weight of the specular highlight
        hardness: Phong exponent; higher values give tighter highlights
    """
    diffuse_color: ColorTuple = ColorTuple(0.5, 0.5, 0.5)
    diffuse_coeff: float = 0.8
    specular_coeff: float = 0.0
    hardness: float = 1.0
