"""
Reflective material model.

A material turns an incoming ray at a hit point into a mirror-reflected
ray, optionally blurred by a fuzz term. Surfaces without a material are
shaded with plain Lambertian lighting by the renderer.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from .vec3 import Vec3, Color
from .ray import Ray


@dataclass
class ScatterResult:
    """Result of a material scatter operation."""
    scattered_ray: Ray
    attenuation: Color


@dataclass(frozen=True)
class Material:
    """Mirror-like material.

    Attributes:
        albedo: Base reflected color fraction (each component 0-1)
        fuzziness: Perturbation radius of the reflection (0 = perfect mirror)
        reflectivity: Fraction of light reflected (1 = perfect chrome)
    """
    albedo: Color
    fuzziness: float = 0.0
    reflectivity: float = 1.0

    def __post_init__(self):
        if self.fuzziness < 0:
            raise ValueError(f"fuzziness must be >= 0, got {self.fuzziness}")
        if not 0.0 <= self.reflectivity <= 1.0:
            raise ValueError(f"reflectivity must be in [0, 1], got {self.reflectivity}")

    def scatter(self, ray_in: Ray, hit_point: Vec3, normal: Vec3) -> Optional[ScatterResult]:
        """Compute the reflected ray and attenuation.

        Args:
            ray_in: The incoming ray
            hit_point: Point of intersection
            normal: Surface normal at hit point

        Returns:
            ScatterResult if the perturbed reflection leaves the surface,
            None if it points into it
        """
        reflected = ray_in.direction.normalize().reflect(normal)
        scattered_direction = reflected + Vec3.random_in_unit_sphere() * self.fuzziness

        if scattered_direction.dot(normal) <= 0:
            return None

        return ScatterResult(
            scattered_ray=Ray(hit_point, scattered_direction.normalize()),
            attenuation=self.albedo * self.reflectivity
        )


# Silver-grey perfect mirror, shared by every primitive that references it
MIRROR_MATERIAL = Material(albedo=Color(0.9, 0.9, 0.9), fuzziness=0.0, reflectivity=1.0)
