"""
Renderer module - the heart of the ray tracer.

Implements:
- First-hit scene traversal with hard shadows from one point light
- Lambertian shading with an ambient floor
- Mirror reflection through materials, bounded by a bounce depth
- Row-by-row rendering into an 8-bit RGB buffer
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple
import numpy as np

from .vec3 import Vec3, Point3, RGB
from .ray import Ray
from .camera import Camera
from .shapes import Scene

logger = logging.getLogger(__name__)

# Self-intersection offset for primary, reflected and shadow rays
T_MIN = 0.001
SHADOW_BIAS = 0.001
# Lowest Lambertian intensity, so back-facing surfaces are never pure black
AMBIENT_FLOOR = 0.025
BLACK: RGB = (0, 0, 0)


@dataclass
class RenderSettings:
    """Configuration for the renderer."""
    width: int = 1600
    height: int = 1200
    output_width: int = 800
    output_height: int = 600
    max_depth: int = 8
    max_value: int = 255

    def __post_init__(self):
        for name in ('width', 'height', 'output_width', 'output_height', 'max_value'):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {self.max_depth}")


def lambertian_lighting(normal: Vec3, light_dir: Vec3) -> float:
    """Diffuse intensity, never below AMBIENT_FLOOR."""
    return max(normal.dot(light_dir), AMBIENT_FLOOR)


def is_in_shadow(point: Point3, light_pos: Point3, scene: Scene) -> bool:
    """Test whether anything in the scene blocks the light.

    Any hit along the shadow ray counts, including objects beyond the
    light itself.
    """
    light_dir = (light_pos - point).normalize()
    shadow_ray = Ray(point + light_dir * SHADOW_BIAS, light_dir)

    for obj in scene:
        if obj.hit(shadow_ray, SHADOW_BIAS, float('inf')) is not None:
            return True
    return False


def _lit_color(base: RGB, normal: Vec3, point: Point3, light_pos: Point3, scene: Scene) -> RGB:
    if is_in_shadow(point, light_pos, scene):
        return BLACK

    light_dir = (light_pos - point).normalize()
    intensity = lambertian_lighting(normal, light_dir)
    r, g, b = base
    return (
        int(min(r * intensity, 255.0)),
        int(min(g * intensity, 255.0)),
        int(min(b * intensity, 255.0))
    )


def shade_lambertian(ray: Ray, scene: Scene, light_pos: Point3) -> RGB:
    """Shade the first object hit with direct light only, ignoring materials."""
    found = scene.first_hit(ray, T_MIN, float('inf'))
    if found is None:
        return BLACK

    obj, hit_record = found
    point = ray.at(hit_record.t)
    return _lit_color(obj.surface_color(), hit_record.normal, point, light_pos, scene)


def resolve_color(ray: Ray, scene: Scene, light_pos: Point3, depth: int = 8) -> RGB:
    """Compute the color seen along a ray.

    A reflective hit returns whatever the reflected ray sees; the
    material's attenuation is not applied. When the reflection points
    into the surface, or `depth` is exhausted, the surface is shaded as
    diffuse instead.

    Args:
        ray: The ray to trace
        scene: The scene to trace against
        light_pos: Position of the point light
        depth: Remaining reflective bounces

    Returns:
        RGB byte triple
    """
    found = scene.first_hit(ray, T_MIN, float('inf'))
    if found is None:
        return BLACK

    obj, hit_record = found
    point = ray.at(hit_record.t)

    if obj.material is not None and depth > 0:
        scatter_result = obj.material.scatter(ray, point, hit_record.normal)
        if scatter_result is not None:
            return resolve_color(scatter_result.scattered_ray, scene, light_pos, depth - 1)

    return _lit_color(obj.surface_color(), hit_record.normal, point, light_pos, scene)


class Renderer:
    """Single-threaded, one ray per pixel renderer."""

    def __init__(self, settings: RenderSettings = None):
        """Create a renderer with the given settings.

        Args:
            settings: Render configuration (uses defaults if None)
        """
        self.settings = settings if settings else RenderSettings()
        self._progress_callback: Optional[Callable[[float], None]] = None

    def set_progress_callback(self, callback: Callable[[float], None]) -> None:
        """Set a callback function for progress updates.

        Args:
            callback: Function that takes progress as float (0.0 to 1.0)
        """
        self._progress_callback = callback

    def render(self, scene: Scene, camera: Camera, light_pos: Point3) -> np.ndarray:
        """Render the scene and return the image as a numpy array.

        Row 0 of the result is the top of the image.

        Args:
            scene: The objects to render, in traversal order
            camera: The camera to render from; its size sets the image size
            light_pos: Position of the point light

        Returns:
            Image as uint8 numpy array of shape (height, width, 3)
        """
        width = camera.width
        height = camera.height
        max_depth = self.settings.max_depth

        logger.debug("Rendering %dx%d, %d objects, max depth %d", width, height, len(scene), max_depth)
        image = np.zeros((height, width, 3), dtype=np.uint8)

        for row, j in enumerate(range(height - 1, -1, -1)):
            for i in range(width):
                ray = camera.get_ray(i, j)
                image[row, i] = resolve_color(ray, scene, light_pos, max_depth)

            if self._progress_callback:
                self._progress_callback((row + 1) / height)

        logger.info("Rendered %dx%d image", width, height)
        return image


def render(
    scene: Sequence,
    light_position: Point3,
    camera_position: Point3,
    rotation_angles: Tuple[float, float, float],
    width: int,
    height: int,
    max_depth: int = 8
) -> List[RGB]:
    """Render a scene to a row-major list of RGB triples, top row first.

    Args:
        scene: Ordered primitives (a Scene or any sequence of Hittables)
        light_position: Position of the point light
        camera_position: Origin of every primary ray
        rotation_angles: Camera rotation (x, y, z) in radians
        width: Image width in pixels
        height: Image height in pixels
        max_depth: Reflective bounce limit

    Returns:
        width * height RGB triples
    """
    if not isinstance(scene, Scene):
        scene = Scene(list(scene))

    camera = Camera(camera_position, rotation_angles, width, height)
    renderer = Renderer(RenderSettings(width=width, height=height, max_depth=max_depth))
    image = renderer.render(scene, camera, light_position)
    return [(int(r), int(g), int(b)) for r, g, b in image.reshape(-1, 3)]
