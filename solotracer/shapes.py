"""
Geometric shapes for the ray tracer.

Each shape implements the Hittable protocol: a `hit` method, a base
color and an optional material.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple
import math

import numpy as np

from .vec3 import Vec3, Point3, RGB
from .ray import Ray
from .materials import Material, MIRROR_MATERIAL


@dataclass
class HitRecord:
    """Stores information about a ray-object intersection.

    Attributes:
        t: The ray parameter at intersection
        normal: The surface normal at the intersection, as the shape
            defines it (not flipped to face the ray)
    """
    t: float
    normal: Vec3


class Hittable(ABC):
    """Abstract base class for all objects that can be hit by rays."""

    color: RGB = (255, 255, 255)
    material: Optional[Material] = None

    @abstractmethod
    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Test if ray intersects this object.

        Args:
            ray: The ray to test
            t_min: Minimum t value to consider (avoid self-intersection)
            t_max: Maximum t value to consider

        Returns:
            HitRecord if intersection found, None otherwise
        """
        pass

    def surface_color(self) -> RGB:
        """Base RGB color used for Lambertian shading."""
        return self.color


class Sphere(Hittable):
    """A sphere defined by center and radius."""

    def __init__(
        self,
        center: Point3,
        radius: float,
        color: RGB = (255, 0, 0),
        material: Optional[Material] = None
    ):
        self.center = center
        self.radius = radius
        self.color = color
        self.material = material

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Test ray-sphere intersection using the quadratic formula.

        The equation (P-C)·(P-C) = r² where P = ray.at(t)
        expands to: t²(d·d) + 2t(d·(O-C)) + (O-C)·(O-C) - r² = 0.
        Only the near root is considered; a ray starting inside the
        sphere does not see its far wall.
        """
        oc = ray.origin - self.center
        a = ray.direction.length_squared()
        if a == 0:
            return None
        b = 2.0 * oc.dot(ray.direction)
        c = oc.length_squared() - self.radius * self.radius

        discriminant = b * b - 4.0 * a * c
        if discriminant <= 0:
            return None

        t = (-b - math.sqrt(discriminant)) / (2.0 * a)
        if not t_min < t < t_max:
            return None

        point = ray.at(t)
        return HitRecord(t=t, normal=(point - self.center).normalize())

    def __repr__(self) -> str:
        return f"Sphere(center={self.center}, radius={self.radius})"


class Cube(Hittable):
    """An axis-aligned box defined by its minimum and maximum corners."""

    # Face normals in the order the slab distances t1..t6 are tested
    _FACE_NORMALS = (
        Vec3(-1, 0, 0), Vec3(1, 0, 0),
        Vec3(0, -1, 0), Vec3(0, 1, 0),
        Vec3(0, 0, -1), Vec3(0, 0, 1),
    )

    def __init__(
        self,
        minimum: Point3,
        maximum: Point3,
        material: Optional[Material] = MIRROR_MATERIAL,
        color: RGB = (0, 0, 255)
    ):
        self.minimum = minimum
        self.maximum = maximum
        self.material = material
        self.color = color

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Test ray-box intersection using the slab method.

        Axis-parallel rays divide by zero on purpose: the resulting
        infinities (and NaNs for origins lying on a slab plane) flow
        through fmin/fmax, which drop NaN operands.
        """
        origin = ray.origin.to_array()
        with np.errstate(divide='ignore', invalid='ignore'):
            inv_dir = np.divide(1.0, ray.direction.to_array())
            t_lo = (self.minimum.to_array() - origin) * inv_dir
            t_hi = (self.maximum.to_array() - origin) * inv_dir

        near = np.fmin(t_lo, t_hi)
        far = np.fmax(t_lo, t_hi)
        tmin = float(np.fmax(np.fmax(near[0], near[1]), near[2]))
        tmax = float(np.fmin(np.fmin(far[0], far[1]), far[2]))

        if not (tmax >= tmin and tmin >= t_min and tmax <= t_max):
            return None

        # First exact match wins; edge and corner hits are not disambiguated
        candidates = (t_lo[0], t_hi[0], t_lo[1], t_hi[1], t_lo[2], t_hi[2])
        normal = Vec3(0, 0, 0)
        for candidate, face_normal in zip(candidates, self._FACE_NORMALS):
            if tmin == candidate:
                normal = face_normal
                break

        return HitRecord(t=tmin, normal=normal)

    def __repr__(self) -> str:
        return f"Cube(min={self.minimum}, max={self.maximum})"


class Flat(Hittable):
    """An infinite plane defined by a point and normal."""

    def __init__(
        self,
        origin: Point3,
        normal: Vec3,
        color: RGB = (0, 255, 0),
        material: Optional[Material] = None
    ):
        """Create a plane.

        Args:
            origin: Any point on the plane
            normal: The plane's normal vector, used as given
            color: Base color
            material: Optional reflective material
        """
        self.origin = origin
        self.normal = normal
        self.color = color
        self.material = material

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Test ray-plane intersection."""
        denom = self.normal.dot(ray.direction)

        # Ray is (nearly) parallel to plane
        if abs(denom) <= 1e-6:
            return None

        t = (self.origin - ray.origin).dot(self.normal) / denom
        if t < t_min or t > t_max:
            return None

        return HitRecord(t=t, normal=self.normal)

    def __repr__(self) -> str:
        return f"Flat(origin={self.origin}, normal={self.normal})"


class Cylinder(Hittable):
    """An open cylinder aligned along the Z axis, centered on `center`."""

    def __init__(
        self,
        center: Point3,
        radius: float,
        height: float,
        color: RGB = (255, 0, 255),
        material: Optional[Material] = None
    ):
        self.center = center
        self.radius = radius
        self.height = height
        self.color = color
        self.material = material
        self.z_min = center.z - height / 2.0
        self.z_max = center.z + height / 2.0

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Test ray-cylinder intersection against the lateral surface only."""
        # Ray-infinite cylinder intersection (ignoring Z)
        oc = ray.origin - self.center
        dx, dy = ray.direction.x, ray.direction.y
        a = dx * dx + dy * dy
        if a == 0:
            return None
        b = 2.0 * (oc.x * dx + oc.y * dy)
        c = oc.x * oc.x + oc.y * oc.y - self.radius * self.radius

        discriminant = b * b - 4.0 * a * c
        if discriminant < 0:
            return None

        sqrt_d = math.sqrt(discriminant)
        for t in ((-b - sqrt_d) / (2.0 * a), (-b + sqrt_d) / (2.0 * a)):
            if t_min < t < t_max:
                point = ray.at(t)
                if self.z_min <= point.z <= self.z_max:
                    normal = Vec3(point.x - self.center.x, point.y - self.center.y, 0).normalize()
                    return HitRecord(t=t, normal=normal)

        return None

    def __repr__(self) -> str:
        return f"Cylinder(center={self.center}, radius={self.radius}, height={self.height})"


class Scene(Hittable):
    """An ordered collection of hittable objects.

    Traversal is first-hit-in-list-order: the first object reporting any
    intersection wins, even if a later object is closer along the ray.
    """

    def __init__(self, objects: Optional[List[Hittable]] = None):
        self.objects: List[Hittable] = list(objects) if objects is not None else []

    def add(self, obj: Hittable) -> None:
        """Append an object; later objects lose ties to earlier ones."""
        self.objects.append(obj)

    def clear(self) -> None:
        """Remove all objects."""
        self.objects.clear()

    def first_hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[Tuple[Hittable, HitRecord]]:
        """Return the first object in list order that the ray hits, with its record.

        Nested scenes are searched in place, so the returned object is
        always a primitive carrying its own color and material.
        """
        for obj in self.objects:
            if isinstance(obj, Scene):
                found = obj.first_hit(ray, t_min, t_max)
                if found is not None:
                    return found
                continue
            hit_record = obj.hit(ray, t_min, t_max)
            if hit_record is not None:
                return obj, hit_record
        return None

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        found = self.first_hit(ray, t_min, t_max)
        return found[1] if found is not None else None

    def __len__(self) -> int:
        return len(self.objects)

    def __iter__(self) -> Iterator[Hittable]:
        return iter(self.objects)
