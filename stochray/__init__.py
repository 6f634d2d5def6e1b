"""
StochRay - A Python Ray Tracing Renderer

A supersampling primary-ray renderer with support for:
- Stratified jittered sub-pixel sampling
- Closest-hit intersection against spheres and planes
- Diffuse + Phong specular + ambient shading
- Multi-threaded scanline rendering into an off-screen frame buffer
- YAML/JSON scene files and PNG output
"""

__version__ = "0.1.0"
__author__ = "StochRay Team"

from .vec3 import Vec3, Point3
from .color import ColorTuple
from .ray import Ray
from .camera import Camera
from .materials import Material
from .shapes import GeometryObject, Intersection, Sphere, Plane, EPSILON
from .lights import PointLight, AmbientLight
from .scene import Scene, SceneError, Viewport
from .sampler import StochasticSampler
from .intersection import find_closest
from .shading import diffuse_component, specular_component, ambient_component, illuminate
from .renderer import (
    Renderer, RenderSettings, RenderResult, FrameBuffer, trace_ray, render_line
)
from .scene_parser import SceneParser, SceneParseError, load_scene, parse_scene
