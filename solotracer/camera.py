"""
Camera module for generating primary rays.

The camera sits at a fixed position and looks down its local -Z axis.
Pixel offsets span [-1, 1) horizontally and vertically on the image
plane at z = -1; the resulting direction is then rotated by a fixed
Euler-angle triple applied in X, Y, Z order.
"""

from __future__ import annotations
import math
from typing import Tuple

from .vec3 import Vec3, Point3
from .ray import Ray


def camera_rot(v: Vec3, angle_x: float, angle_y: float, angle_z: float) -> Vec3:
    """Rotate a vector about X, then Y, then Z.

    Each rotation is applied to the result of the previous one.

    Args:
        v: The vector to rotate
        angle_x, angle_y, angle_z: Rotation angles in radians

    Returns:
        The rotated vector
    """
    cos_x, sin_x = math.cos(angle_x), math.sin(angle_x)
    cos_y, sin_y = math.cos(angle_y), math.sin(angle_y)
    cos_z, sin_z = math.cos(angle_z), math.sin(angle_z)

    rotated_x = Vec3(
        v.x,
        v.y * cos_x - v.z * sin_x,
        v.y * sin_x + v.z * cos_x
    )

    rotated_y = Vec3(
        rotated_x.x * cos_y + rotated_x.z * sin_y,
        rotated_x.y,
        -rotated_x.x * sin_y + rotated_x.z * cos_y
    )

    return Vec3(
        rotated_y.x * cos_z - rotated_y.y * sin_z,
        rotated_y.x * sin_z + rotated_y.y * cos_z,
        rotated_y.z
    )


class Camera:
    """A pinhole camera with a fixed Euler rotation."""

    def __init__(
        self,
        position: Point3,
        angles: Tuple[float, float, float] = (0.0, 0.0, 0.0),
        width: int = 1600,
        height: int = 1200
    ):
        """Create a camera.

        Args:
            position: Camera position in world space (origin of every ray)
            angles: Rotation (x, y, z) in radians
            width: Image width in pixels
            height: Image height in pixels
        """
        self.position = position
        self.angles = tuple(angles)
        self.width = width
        self.height = height

    @classmethod
    def from_degrees(
        cls,
        position: Point3,
        angles: Tuple[float, float, float] = (0.0, 0.0, 0.0),
        width: int = 1600,
        height: int = 1200
    ) -> Camera:
        """Create a camera with rotation angles given in degrees."""
        return cls(position, tuple(math.radians(a) for a in angles), width, height)

    def direction(self, i: int, j: int) -> Vec3:
        """World-space direction through pixel (i, j), not normalized.

        Args:
            i: Column, 0 = left edge
            j: Row, 0 = bottom edge
        """
        half_w = self.width / 2.0
        half_h = self.height / 2.0
        local = Vec3((i - half_w) / half_w, (j - half_h) / half_h, -1.0)
        return camera_rot(local, *self.angles)

    def get_ray(self, i: int, j: int) -> Ray:
        """Generate the primary ray for pixel (i, j)."""
        return Ray(self.position, self.direction(i, j))

    def __repr__(self) -> str:
        return f"Camera(position={self.position}, angles={self.angles}, size={self.width}x{self.height})"
