"""Tests for the reflective material."""

import pytest
import math
import dataclasses

from solotracer.vec3 import Vec3, Point3, Color
from solotracer.ray import Ray
from solotracer.materials import Material, ScatterResult, MIRROR_MATERIAL


class TestMaterialCreation:
    """Test Material construction."""

    def test_defaults(self):
        mat = Material(Color(0.5, 0.5, 0.5))
        assert mat.fuzziness == 0.0
        assert mat.reflectivity == 1.0

    def test_mirror_preset(self):
        assert MIRROR_MATERIAL.albedo == Color(0.9, 0.9, 0.9)
        assert MIRROR_MATERIAL.fuzziness == 0.0
        assert MIRROR_MATERIAL.reflectivity == 1.0

    def test_immutable(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            MIRROR_MATERIAL.fuzziness = 0.5

    def test_negative_fuzziness_rejected(self):
        with pytest.raises(ValueError):
            Material(Color(1, 1, 1), fuzziness=-0.1)

    @pytest.mark.parametrize("reflectivity", [-0.1, 1.5])
    def test_reflectivity_out_of_range_rejected(self, reflectivity):
        with pytest.raises(ValueError):
            Material(Color(1, 1, 1), reflectivity=reflectivity)


class TestMirrorScatter:
    """Test scatter with no fuzz."""

    def test_perfect_reflection(self):
        mat = Material(Color(1, 1, 1), fuzziness=0.0)
        ray_in = Ray(Point3(0, 0, 0), Vec3(1, -1, 0))
        result = mat.scatter(ray_in, Point3(1, -1, 0), Vec3(0, 1, 0))

        assert isinstance(result, ScatterResult)
        assert result.scattered_ray.direction == Vec3(1, 1, 0).normalize()
        assert result.scattered_ray.origin == Point3(1, -1, 0)

    @pytest.mark.parametrize("direction,normal", [
        (Vec3(1, -1, 0), Vec3(0, 1, 0)),
        (Vec3(0.3, -2, 0.7), Vec3(0, 1, 0)),
        (Vec3(-1, -1, -3), Vec3(1, 1, 1).normalize()),
    ])
    def test_angle_of_incidence_equals_reflection(self, direction, normal):
        ray_in = Ray(Point3(0, 0, 0), direction)
        result = MIRROR_MATERIAL.scatter(ray_in, Point3(0, 0, 0), normal)

        incoming = direction.normalize()
        outgoing = result.scattered_ray.direction
        assert abs(-incoming.dot(normal) - outgoing.dot(normal)) < 1e-9

    def test_scattered_direction_is_normalized(self):
        ray_in = Ray(Point3(0, 0, 0), Vec3(3, -4, 0))
        result = MIRROR_MATERIAL.scatter(ray_in, Point3(0, 0, 0), Vec3(0, 1, 0))
        assert abs(result.scattered_ray.direction.length() - 1.0) < 1e-9

    def test_attenuation_is_albedo_times_reflectivity(self):
        mat = Material(Color(0.8, 0.4, 0.2), fuzziness=0.0, reflectivity=0.5)
        ray_in = Ray(Point3(0, 0, 0), Vec3(0, -1, 0))
        result = mat.scatter(ray_in, Point3(0, 0, 0), Vec3(0, 1, 0))
        assert result.attenuation == Color(0.4, 0.2, 0.1)

    def test_ray_leaving_surface_is_absorbed(self):
        # Incoming along the normal reflects into the surface
        ray_in = Ray(Point3(0, 0, 0), Vec3(0, 1, 0))
        assert MIRROR_MATERIAL.scatter(ray_in, Point3(0, 1, 0), Vec3(0, 1, 0)) is None


class TestFuzzyScatter:
    """Test scatter with fuzz."""

    def test_fuzz_varies_direction(self):
        mat = Material(Color(1, 1, 1), fuzziness=0.5)
        ray_in = Ray(Point3(0, 0, 0), Vec3(0, -1, 0))
        directions = []
        for _ in range(50):
            result = mat.scatter(ray_in, Point3(0, 0, 0), Vec3(0, 1, 0))
            if result:
                directions.append(result.scattered_ray.direction)

        assert len(directions) > 1
        first = directions[0]
        assert any(abs(d.dot(first) - 1.0) > 1e-6 for d in directions[1:])

    def test_accepted_rays_leave_surface(self):
        mat = Material(Color(1, 1, 1), fuzziness=1.0)
        ray_in = Ray(Point3(0, 0, 0), Vec3(1, -0.1, 0))
        normal = Vec3(0, 1, 0)
        for _ in range(100):
            result = mat.scatter(ray_in, Point3(0, 0, 0), normal)
            if result:
                assert result.scattered_ray.direction.dot(normal) > 0

    def test_fuzz_into_surface_returns_none(self, monkeypatch):
        monkeypatch.setattr(Vec3, 'random_in_unit_sphere', staticmethod(lambda: Vec3(0, -0.9, 0)))
        mat = Material(Color(1, 1, 1), fuzziness=1.0)
        # Grazing reflection (1, 0.1, 0)/|.| pushed down by 0.9
        ray_in = Ray(Point3(0, 0, 0), Vec3(1, -0.1, 0))
        assert mat.scatter(ray_in, Point3(0, 0, 0), Vec3(0, 1, 0)) is None

    def test_fuzz_offset_added_before_normalizing(self, monkeypatch):
        monkeypatch.setattr(Vec3, 'random_in_unit_sphere', staticmethod(lambda: Vec3(1, 0, 0)))
        mat = Material(Color(1, 1, 1), fuzziness=1.0)
        ray_in = Ray(Point3(0, 0, 0), Vec3(0, -1, 0))
        result = mat.scatter(ray_in, Point3(0, 0, 0), Vec3(0, 1, 0))
        assert result.scattered_ray.direction == Vec3(1, 1, 0).normalize()
