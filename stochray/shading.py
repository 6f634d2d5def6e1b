"""
Local illumination: diffuse + Phong specular + ambient.

No shadow rays are cast; the light reaches every visible surface.
"""

from __future__ import annotations

from .color import ColorTuple
from .lights import PointLight, AmbientLight
from .ray import Ray
from .scene import Scene
from .shapes import GeometryObject, Intersection


def diffuse_component(
    obj: GeometryObject,
    ray: Ray,
    intersection: Intersection,
    light: PointLight
) -> ColorTuple:
    """Lambertian term, zero when the light is behind the surface."""
    point = ray.at(intersection.t)
    to_light = (light.position - point).normalize()
    l_dot_n = max(0.0, intersection.normal.dot(to_light))

    material = obj.material
    return material.diffuse_color * light.color * (material.diffuse_coeff * l_dot_n)


def specular_component(
    obj: GeometryObject,
    ray: Ray,
    intersection: Intersection,
    light: PointLight
) -> ColorTuple:
    """Phong highlight.

    The reflection vector is r = (N - L) * 2(L·N). The highlight strength
    is the same on every channel before being tinted by the light color.
    """
    point = ray.at(intersection.t)
    normal = intersection.normal
    to_light = (light.position - point).normalize()
    to_viewer = (ray.origin - point).normalize()
    reflected = (normal - to_light) * (2 * to_light.dot(normal))

    material = obj.material
    r_dot_v = max(0.0, reflected.dot(to_viewer))
    highlight = material.specular_coeff * r_dot_v ** material.hardness
    return light.color * highlight


def ambient_component(obj: GeometryObject, ambient: AmbientLight) -> ColorTuple:
    material = obj.material
    return material.diffuse_color * ambient.color * (ambient.coeff * material.diffuse_coeff)


def illuminate(scene: Scene, obj: GeometryObject, ray: Ray, intersection: Intersection) -> ColorTuple:
    """Total light leaving the hit point toward the viewer.

    Only the scene's first light contributes.
    """
    light = scene.primary_light
    return (
        diffuse_component(obj, ray, intersection, light)
        + ambient_component(obj, scene.ambient)
        + specular_component(obj, ray, intersection, light)
    )
