"""
Built-in reference scenes.

Each entry bundles the objects with the light, camera placement and PPM
brightness they are meant to be rendered with.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict, Tuple

from .vec3 import Vec3, Point3
from .shapes import Scene, Sphere, Cube, Flat, Cylinder
from .materials import MIRROR_MATERIAL

# Light above and to the left of the objects
DEFAULT_LIGHT = Point3(-5.0, 5.0, -3.0)
DEFAULT_CAMERA = Point3(1.0, 1.0, 0.0)


def all_objects_scene() -> Scene:
    """Cylinder, sphere, mirror cube and ground plane."""
    return Scene([
        Cylinder(Point3(-1.5, 0.0, -5.1), 0.5, 1.5),
        Sphere(Point3(0.0, 0.0, -7.0), 0.5),
        Cube(Point3(1.5, -0.5, -5.0), Point3(2.5, 0.5, -4.0), MIRROR_MATERIAL),
        Flat(Point3(0.0, -1.0, 0.0), Vec3(0.0, 1.0, 0.0)),
    ])


def sphere_scene() -> Scene:
    """A lone sphere."""
    return Scene([Sphere(Point3(0.0, 0.0, -7.0), 0.5)])


def flat_and_cube_scene() -> Scene:
    """Mirror cube standing on the ground plane."""
    return Scene([
        Cube(Point3(1.5, -0.5, -5.0), Point3(2.5, 0.5, -4.0), MIRROR_MATERIAL),
        Flat(Point3(0.0, -1.0, 0.0), Vec3(0.0, 1.0, 0.0)),
    ])


@dataclass(frozen=True)
class BuiltinScene:
    """A named scene plus the viewing setup it is rendered with."""
    name: str
    build: Callable[[], Scene]
    camera_position: Point3 = DEFAULT_CAMERA
    rotation_degrees: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    light: Point3 = DEFAULT_LIGHT
    max_value: int = 255


BUILTIN_SCENES: Dict[str, BuiltinScene] = {
    scene.name: scene for scene in (
        BuiltinScene('allobject', all_objects_scene),
        BuiltinScene('sphere', sphere_scene),
        # Written with a max value of 500, so it displays at about half brightness
        BuiltinScene('flat-cube', flat_and_cube_scene, max_value=500),
        BuiltinScene('othercam', all_objects_scene,
                     camera_position=Point3(-2.0, 1.0, 0.0),
                     rotation_degrees=(0.0, -30.0, 0.0)),
    )
}
