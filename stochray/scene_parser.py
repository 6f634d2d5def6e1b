"""
Scene description file parser.

Supports YAML and JSON scene files with:
- Viewport size
- Camera configuration
- Background and ambient light
- Materials library
- Objects (shapes with materials)
- Lights
- Optional render settings

Example scene file:
```yaml
viewport: {width: 320, height: 240}

camera:
  position: [0, 0, 0]
  look_at: [0, 0, -1]
  fov: 60

background: [0.0, 0.0, 0.0]
ambient: {color: [1, 1, 1], coeff: 0.1}

materials:
  red:
    color: [1, 0, 0]
    diffuse: 0.8
    specular: 0.5
    hardness: 32

objects:
  - type: sphere
    center: [0, 0, -5]
    radius: 1
    material: red

lights:
  - position: [0, 5, -5]
    color: [1, 1, 1]

render:
  sections: 3
  threads: 4
```
"""

from __future__ import annotations
from pathlib import Path
from typing import Dict, Any, Optional
import json

import yaml

from .vec3 import Vec3
from .color import ColorTuple
from .camera import Camera
from .shapes import GeometryObject, Sphere, Plane
from .materials import Material
from .lights import PointLight, AmbientLight
from .renderer import RenderSettings
from .scene import Scene, SceneError, Viewport


class SceneParseError(SceneError):
    """Error during scene parsing."""
    pass


class SceneParser:
    """Parser for scene description files."""

    def __init__(self):
        self.materials: Dict[str, Material] = {}
        self.settings: Optional[RenderSettings] = None

    def parse_file(self, filepath: str) -> Scene:
        """Parse a scene file.

        Args:
            filepath: Path to the scene file (YAML or JSON)

        Returns:
            The validated Scene
        """
        path = Path(filepath)
        if not path.exists():
            raise SceneParseError(f"Scene file not found: {filepath}")

        content = path.read_text()

        try:
            if path.suffix in ('.yaml', '.yml'):
                data = yaml.safe_load(content)
            elif path.suffix == '.json':
                data = json.loads(content)
            else:
                raise SceneParseError(f"Unsupported scene file type: {path.suffix or filepath}")
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise SceneParseError(f"Malformed scene file {filepath}: {e}") from e

        if not isinstance(data, dict):
            raise SceneParseError(f"Scene file must contain a mapping: {filepath}")
        return self.parse_dict(data)

    def parse_dict(self, data: Dict[str, Any]) -> Scene:
        """Parse a scene from a dictionary.

        Args:
            data: Scene description dictionary

        Returns:
            The validated Scene
        """
        viewport = self._parse_viewport(data.get('viewport', {}))

        # Parse materials first (objects reference them)
        if 'materials' in data:
            self._parse_materials(data['materials'])

        camera = self._parse_camera(data.get('camera', {}), viewport)
        objects = [self._parse_object(obj) for obj in data.get('objects', [])]
        lights = [self._parse_light(light) for light in data.get('lights', [])]
        ambient = self._parse_ambient(data.get('ambient', {}))
        background = self._parse_color(data.get('background', [0, 0, 0]))

        if 'render' in data:
            self._parse_settings(data['render'])

        scene = Scene(
            viewport=viewport,
            camera=camera,
            objects=objects,
            lights=lights,
            ambient=ambient,
            background_color=background
        )
        return scene.validate()

    def _parse_vec3(self, data: Any) -> Vec3:
        """Parse a Vec3 from various formats."""
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"Vec3 must have 3 components, got {len(data)}")
            return Vec3.from_iterable(data)
        elif isinstance(data, dict):
            return Vec3(
                float(data.get('x', 0)),
                float(data.get('y', 0)),
                float(data.get('z', 0))
            )
        else:
            raise SceneParseError(f"Cannot parse Vec3 from: {data}")

    def _parse_color(self, data: Any) -> ColorTuple:
        """Parse a color from a list, an {r, g, b} mapping or a hex string."""
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"Color must have 3 components, got {len(data)}")
            return ColorTuple(float(data[0]), float(data[1]), float(data[2]))
        elif isinstance(data, dict):
            return ColorTuple(
                float(data.get('r', 0)),
                float(data.get('g', 0)),
                float(data.get('b', 0))
            )
        elif isinstance(data, str):
            try:
                return ColorTuple.from_hex(data)
            except ValueError as e:
                raise SceneParseError(f"Cannot parse color from string: {data}") from e
        else:
            raise SceneParseError(f"Cannot parse color from: {data}")

    def _parse_dimension(self, value: Any, name: str) -> int:
        """Parse a pixel dimension; integral floats such as 320.0 are accepted."""
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        if isinstance(value, bool) or not isinstance(value, int):
            raise SceneParseError(f"Viewport {name} must be an integer, got {value!r}")
        return value

    def _parse_viewport(self, viewport_data: Dict[str, Any]) -> Viewport:
        width = self._parse_dimension(viewport_data.get('width', 320), 'width')
        height = self._parse_dimension(viewport_data.get('height', 240), 'height')
        try:
            return Viewport(width=width, height=height)
        except SceneError as e:
            raise SceneParseError(f"Invalid viewport: {e}") from e

    def _parse_material(self, mat_data: Dict[str, Any]) -> Material:
        return Material(
            diffuse_color=self._parse_color(mat_data.get('color', [0.5, 0.5, 0.5])),
            diffuse_coeff=float(mat_data.get('diffuse', 0.8)),
            specular_coeff=float(mat_data.get('specular', 0.0)),
            hardness=float(mat_data.get('hardness', 1.0))
        )

    def _parse_materials(self, materials_data: Dict[str, Any]) -> None:
        """Parse materials section."""
        for name, mat_data in materials_data.items():
            self.materials[name] = self._parse_material(mat_data)

    def _get_material(self, mat_ref: Any) -> Material:
        """Get a material by name or inline definition."""
        if mat_ref is None:
            return Material()
        if isinstance(mat_ref, str):
            if mat_ref not in self.materials:
                raise SceneParseError(f"Unknown material: {mat_ref}")
            return self.materials[mat_ref]
        elif isinstance(mat_ref, dict):
            return self._parse_material(mat_ref)
        else:
            raise SceneParseError(f"Invalid material reference: {mat_ref}")

    def _parse_object(self, obj_data: Dict[str, Any]) -> GeometryObject:
        obj_type = obj_data.get('type', 'sphere').lower()
        material = self._get_material(obj_data.get('material'))

        if obj_type == 'sphere':
            center = self._parse_vec3(obj_data.get('center', [0, 0, 0]))
            radius = float(obj_data.get('radius', 1.0))
            return Sphere(center, radius, material)

        elif obj_type == 'plane':
            point = self._parse_vec3(obj_data.get('point', [0, 0, 0]))
            normal = self._parse_vec3(obj_data.get('normal', [0, 1, 0]))
            return Plane(point, normal, material)

        raise SceneParseError(f"Unknown object type: {obj_type}")

    def _parse_light(self, light_data: Dict[str, Any]) -> PointLight:
        light_type = light_data.get('type', 'point').lower()
        if light_type != 'point':
            raise SceneParseError(f"Unknown light type: {light_type}")
        return PointLight(
            position=self._parse_vec3(light_data.get('position', [0, 5, 0])),
            color=self._parse_color(light_data.get('color', [1, 1, 1]))
        )

    def _parse_ambient(self, ambient_data: Dict[str, Any]) -> AmbientLight:
        return AmbientLight(
            color=self._parse_color(ambient_data.get('color', [1, 1, 1])),
            coeff=float(ambient_data.get('coeff', 0.1))
        )

    def _parse_camera(self, camera_data: Dict[str, Any], viewport: Viewport) -> Camera:
        """Parse camera section."""
        return Camera(
            position=self._parse_vec3(camera_data.get('position', [0, 0, 0])),
            look_at=self._parse_vec3(camera_data.get('look_at', [0, 0, -1])),
            width=viewport.width,
            height=viewport.height,
            up=self._parse_vec3(camera_data.get('up', [0, 1, 0])),
            fov=float(camera_data.get('fov', 60))
        )

    def _parse_settings(self, settings_data: Dict[str, Any]) -> None:
        """Parse render settings section."""
        seed = settings_data.get('seed')
        try:
            self.settings = RenderSettings(
                num_sections=int(settings_data.get('sections', 3)),
                pixel_width=float(settings_data.get('pixel_width', 1.0)),
                pixel_height=float(settings_data.get('pixel_height', 1.0)),
                jitter=bool(settings_data.get('jitter', True)),
                num_threads=int(settings_data.get('threads', 4)),
                seed=int(seed) if seed is not None else None
            )
        except ValueError as e:
            raise SceneParseError(f"Invalid render settings: {e}") from e


def load_scene(filepath: str) -> Scene:
    """Convenience function to load a scene file.

    Args:
        filepath: Path to the scene file

    Returns:
        The validated Scene
    """
    parser = SceneParser()
    return parser.parse_file(filepath)


def parse_scene(data: Dict[str, Any]) -> Scene:
    """Convenience function to parse a scene from a dictionary.

    Args:
        data: Scene description dictionary

    Returns:
        The validated Scene
    """
    parser = SceneParser()
    return parser.parse_dict(data)
