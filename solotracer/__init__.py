"""
SoloTracer - A Python Ray Caster

Renders still images by casting one ray per pixel with:
- Analytic primitives (sphere, box, plane, open cylinder)
- Lambertian lighting from a point light
- Hard shadows
- Mirror materials with optional fuzz
- Plain-text PPM output
"""

__version__ = "0.1.0"
__author__ = "SoloTracer Team"

from .vec3 import Vec3, Point3, Color, RGB
from .ray import Ray
from .materials import Material, ScatterResult, MIRROR_MATERIAL
from .shapes import HitRecord, Hittable, Sphere, Cube, Flat, Cylinder, Scene
from .camera import Camera, camera_rot
from .renderer import (
    Renderer, RenderSettings, render, resolve_color, shade_lambertian,
    is_in_shadow, lambertian_lighting
)
from .image_io import downscale, write_ppm, pixels_to_array, save_image
from .scene_parser import SceneParser, SceneParseError, load_scene, parse_scene
from .scenes import BuiltinScene, BUILTIN_SCENES, all_objects_scene, sphere_scene, flat_and_cube_scene
