"""
Scene description language parser.

Supports a JSON (or YAML) scene description format with:
- Light position
- Camera placement
- Render settings
- Materials library
- Objects, traversed in the order they are listed

Example scene file:
```json
{
  "light": [-5, 5, -3],
  "camera": {"position": [1, 1, 0], "rotation": [0, -30, 0]},
  "render": {"width": 1600, "height": 1200,
             "output_width": 800, "output_height": 600},
  "materials": {
    "brushed": {"albedo": [0.8, 0.8, 0.8], "fuzziness": 0.3}
  },
  "objects": [
    {"type": "cylinder", "center": [-1.5, 0, -5.1], "radius": 0.5, "height": 1.5},
    {"type": "sphere", "center": [0, 0, -7], "radius": 0.5, "color": [255, 0, 0]},
    {"type": "cube", "min": [1.5, -0.5, -5], "max": [2.5, 0.5, -4], "material": "mirror"},
    {"type": "flat", "origin": [0, -1, 0], "normal": [0, 1, 0]}
  ]
}
```

Camera rotation is given in degrees. The `mirror` material is always
defined; cubes use it unless told otherwise (`"material": null`).
"""

from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .vec3 import Vec3, Point3, RGB
from .camera import Camera
from .shapes import Scene, Sphere, Cube, Flat, Cylinder
from .materials import Material, MIRROR_MATERIAL
from .renderer import RenderSettings
from .scenes import DEFAULT_LIGHT, DEFAULT_CAMERA

logger = logging.getLogger(__name__)

_UNSET = object()


class SceneParseError(Exception):
    """Error during scene parsing."""
    pass


class SceneParser:
    """Parser for scene description files."""

    def __init__(self):
        self.materials: Dict[str, Material] = {'mirror': MIRROR_MATERIAL}
        self.objects: Scene = Scene()
        self.camera: Optional[Camera] = None
        self.settings: Optional[RenderSettings] = None
        self.light: Point3 = DEFAULT_LIGHT

    def parse_file(self, filepath: str) -> Tuple[Scene, Camera, RenderSettings, Point3]:
        """Parse a scene file.

        Args:
            filepath: Path to the scene file (JSON, or YAML with PyYAML installed)

        Returns:
            Tuple of (scene, camera, settings, light position)
        """
        path = Path(filepath)
        if not path.exists():
            raise SceneParseError(f"Scene file not found: {filepath}")

        content = path.read_text()

        if path.suffix in ('.yaml', '.yml'):
            try:
                import yaml
            except ImportError:
                raise SceneParseError("PyYAML not installed. Install with: pip install pyyaml")
            try:
                data = yaml.safe_load(content)
            except yaml.YAMLError as e:
                raise SceneParseError(f"Invalid YAML in {filepath}: {e}") from e
        else:
            try:
                data = json.loads(content)
            except json.JSONDecodeError as e:
                raise SceneParseError(f"Invalid JSON in {filepath}: {e}") from e

        if not isinstance(data, dict):
            raise SceneParseError(f"Scene file must contain a mapping, got {type(data).__name__}")

        logger.debug("Parsing scene file %s", path)
        return self.parse_dict(data)

    def parse_dict(self, data: Dict[str, Any]) -> Tuple[Scene, Camera, RenderSettings, Point3]:
        """Parse a scene from a dictionary.

        Args:
            data: Scene description dictionary

        Returns:
            Tuple of (scene, camera, settings, light position)
        """
        _require_mapping(data, "Scene")

        # Parse materials first (objects reference them)
        if 'materials' in data:
            self._parse_materials(data['materials'])

        if 'objects' in data:
            self._parse_objects(data['objects'])

        if 'light' in data:
            self.light = self._parse_vec3(data['light'])

        # Settings before camera: the camera takes its size from them
        self.settings = self._parse_settings(data.get('render', {}))
        self._parse_camera(data.get('camera', {}))

        logger.info("Parsed scene with %d objects", len(self.objects))
        return self.objects, self.camera, self.settings, self.light

    def _parse_vec3(self, data: Any) -> Vec3:
        """Parse a Vec3 from various formats."""
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"Vec3 must have 3 components, got {len(data)}")
            components = data
        elif isinstance(data, dict):
            components = (data.get('x', 0), data.get('y', 0), data.get('z', 0))
        else:
            raise SceneParseError(f"Cannot parse Vec3 from: {data}")

        try:
            return Vec3(float(components[0]), float(components[1]), float(components[2]))
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"Cannot parse Vec3 from {data}: {e}") from e

    def _parse_rgb(self, data: Any) -> RGB:
        """Parse an 8-bit RGB color from a list or a hex string."""
        try:
            if isinstance(data, (list, tuple)):
                if len(data) != 3:
                    raise SceneParseError(f"Color must have 3 components, got {len(data)}")
                channels = tuple(int(c) for c in data)
            elif isinstance(data, str) and data.startswith('#') and len(data) == 7:
                hex_color = data[1:]
                channels = tuple(int(hex_color[k:k + 2], 16) for k in (0, 2, 4))
            else:
                raise SceneParseError(f"Cannot parse color from: {data}")
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"Cannot parse color from {data}: {e}") from e

        if any(c < 0 or c > 255 for c in channels):
            raise SceneParseError(f"Color channels must be in 0-255, got {data}")
        return channels

    def _build_material(self, name: str, mat_data: Any) -> Material:
        """Create a Material from its description."""
        _require_mapping(mat_data, f"Material '{name}'")
        albedo = self._parse_vec3(mat_data.get('albedo', [0.9, 0.9, 0.9]))
        try:
            return Material(
                albedo=albedo,
                fuzziness=float(mat_data.get('fuzziness', 0.0)),
                reflectivity=float(mat_data.get('reflectivity', 1.0))
            )
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"Invalid material '{name}': {e}") from e

    def _parse_materials(self, materials_data: Dict[str, Any]) -> None:
        """Parse materials section."""
        _require_mapping(materials_data, "Materials section")
        for name, mat_data in materials_data.items():
            self.materials[name] = self._build_material(name, mat_data)

    def _get_material(self, mat_ref: Any) -> Optional[Material]:
        """Get a material by name or inline definition."""
        if mat_ref is None:
            return None
        if isinstance(mat_ref, str):
            if mat_ref not in self.materials:
                raise SceneParseError(f"Unknown material: {mat_ref}")
            return self.materials[mat_ref]
        elif isinstance(mat_ref, dict):
            return self._build_material('inline', mat_ref)
        else:
            raise SceneParseError(f"Invalid material reference: {mat_ref}")

    def _parse_objects(self, objects_data: list) -> None:
        """Parse objects section, keeping the listed order."""
        if not isinstance(objects_data, (list, tuple)):
            raise SceneParseError(f"Objects section must be a list, got {type(objects_data).__name__}")
        for obj_data in objects_data:
            _require_mapping(obj_data, "Object entry")
            obj_type = obj_data.get('type', 'sphere')
            if not isinstance(obj_type, str):
                raise SceneParseError(f"Object type must be a string, got: {obj_type}")
            obj_type = obj_type.lower()
            mat_ref = obj_data.get('material', _UNSET)

            kwargs = {}
            if 'color' in obj_data:
                kwargs['color'] = self._parse_rgb(obj_data['color'])

            if obj_type == 'cube':
                material = MIRROR_MATERIAL if mat_ref is _UNSET else self._get_material(mat_ref)
            else:
                material = None if mat_ref is _UNSET else self._get_material(mat_ref)
            kwargs['material'] = material

            if obj_type == 'sphere':
                center = self._parse_vec3(obj_data.get('center', [0, 0, 0]))
                radius = _to_float(obj_data.get('radius', 1.0), 'radius')
                self.objects.add(Sphere(center, radius, **kwargs))

            elif obj_type == 'cube':
                minimum = self._parse_vec3(obj_data.get('min', [-0.5, -0.5, -0.5]))
                maximum = self._parse_vec3(obj_data.get('max', [0.5, 0.5, 0.5]))
                self.objects.add(Cube(minimum, maximum, **kwargs))

            elif obj_type == 'flat':
                origin = self._parse_vec3(obj_data.get('origin', [0, 0, 0]))
                normal = self._parse_vec3(obj_data.get('normal', [0, 1, 0]))
                self.objects.add(Flat(origin, normal, **kwargs))

            elif obj_type == 'cylinder':
                center = self._parse_vec3(obj_data.get('center', [0, 0, 0]))
                radius = _to_float(obj_data.get('radius', 0.5), 'radius')
                height = _to_float(obj_data.get('height', 1.0), 'height')
                self.objects.add(Cylinder(center, radius, height, **kwargs))

            else:
                raise SceneParseError(f"Unknown object type: {obj_type}")

    def _parse_camera(self, camera_data: Dict[str, Any]) -> None:
        """Parse camera section."""
        _require_mapping(camera_data, "Camera section")
        position = DEFAULT_CAMERA
        if 'position' in camera_data:
            position = self._parse_vec3(camera_data['position'])
        rotation = self._parse_vec3(camera_data.get('rotation', [0, 0, 0]))

        self.camera = Camera.from_degrees(
            position,
            (rotation.x, rotation.y, rotation.z),
            self.settings.width,
            self.settings.height
        )

    def _parse_settings(self, settings_data: Dict[str, Any]) -> RenderSettings:
        """Parse render settings section."""
        _require_mapping(settings_data, "Render section")
        try:
            return RenderSettings(
                width=int(settings_data.get('width', 1600)),
                height=int(settings_data.get('height', 1200)),
                output_width=int(settings_data.get('output_width', 800)),
                output_height=int(settings_data.get('output_height', 600)),
                max_depth=int(settings_data.get('max_depth', 8)),
                max_value=int(settings_data.get('max_value', 255))
            )
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"Invalid render settings: {e}") from e


def _require_mapping(data: Any, what: str) -> None:
    if not isinstance(data, dict):
        raise SceneParseError(f"{what} must be a mapping, got: {data}")


def _to_float(value: Any, name: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise SceneParseError(f"Invalid {name} {value!r}: {e}") from e


def load_scene(filepath: str) -> Tuple[Scene, Camera, RenderSettings, Point3]:
    """Convenience function to load a scene file.

    Args:
        filepath: Path to the scene file

    Returns:
        Tuple of (scene, camera, settings, light position)
    """
    parser = SceneParser()
    return parser.parse_file(filepath)


def parse_scene(data: Dict[str, Any]) -> Tuple[Scene, Camera, RenderSettings, Point3]:
    """Convenience function to parse a scene from a dictionary.

    Args:
        data: Scene description dictionary

    Returns:
        Tuple of (scene, camera, settings, light position)
    """
    parser = SceneParser()
    return parser.parse_dict(data)
