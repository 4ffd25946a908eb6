"""Tests for material system."""

import pytest
import math
import numpy as np

from spherecast.vec3 import Vec3, Point3, Color
from spherecast.ray import Ray
from spherecast.shapes import HitRecord
from spherecast.materials import Lambertian, Metal, Dielectric, schlick


class FixedRandom:
    """Random source that always returns the same value."""

    def __init__(self, value: float):
        self.value = value

    def random(self) -> float:
        return self.value


def make_hit(point=Point3(0, 0, 0), normal=Vec3(0, 1, 0)) -> HitRecord:
    return HitRecord(t=1.0, point=point, normal=normal, material_id=0)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


class TestLambertian:
    """Test Lambertian diffuse material."""

    def test_scatter_always_succeeds(self, rng):
        mat = Lambertian(Color(0.5, 0.5, 0.5))
        ray_in = Ray(Point3(0, 1, 0), Vec3(0, -1, 0))
        hit = make_hit()

        for _ in range(100):
            assert mat.scatter(ray_in, hit, rng) is not None

    def test_direction_is_normal_plus_unit_sphere_point(self, rng):
        mat = Lambertian(Color(0.5, 0.5, 0.5))
        ray_in = Ray(Point3(0, 1, 0), Vec3(0, -1, 0))
        hit = make_hit()

        for _ in range(100):
            result = mat.scatter(ray_in, hit, rng)
            offset = result.scattered_ray.direction - hit.normal
            assert offset.length() < 1.0
            # Never points below the surface
            assert result.scattered_ray.direction.dot(hit.normal) >= 0.0

    def test_scattered_ray_starts_at_hit_point(self, rng):
        mat = Lambertian(Color(0.5, 0.5, 0.5))
        hit = make_hit(point=Point3(1, 2, 3))
        result = mat.scatter(Ray(Point3(0, 0, 0), Vec3(1, 2, 3)), hit, rng)
        assert result.scattered_ray.origin == Point3(1, 2, 3)

    def test_attenuation_matches_albedo(self, rng):
        albedo = Color(0.8, 0.2, 0.3)
        mat = Lambertian(albedo)
        result = mat.scatter(Ray(Point3(0, 1, 0), Vec3(0, -1, 0)), make_hit(), rng)
        assert result.attenuation == albedo


class TestMetal:
    """Test Metal material."""

    def test_perfect_reflection(self, rng):
        mat = Metal(Color(1, 1, 1), fuzz=0.0)
        ray_in = Ray(Point3(0, 0, 0), Vec3(1, -1, 0))
        result = mat.scatter(ray_in, make_hit(point=Point3(1, -1, 0)), rng)

        assert result is not None
        assert result.scattered_ray.direction == Vec3(1, 1, 0).unit_vector()

    @pytest.mark.parametrize("direction", [
        Vec3(1, -1, 0),
        Vec3(0.2, -3, 0.7),
        Vec3(-5, -0.1, 2),
    ])
    def test_mirror_identity(self, rng, direction):
        mat = Metal(Color(1, 1, 1), fuzz=0.0)
        hit = make_hit()
        result = mat.scatter(Ray(Point3(0, 5, 0), direction), hit, rng)

        out = result.scattered_ray.direction
        assert math.isclose(out.dot(hit.normal), -direction.unit_vector().dot(hit.normal))

    def test_rough_metal_adds_fuzz(self, rng):
        mat = Metal(Color(1, 1, 1), fuzz=0.5)
        ray_in = Ray(Point3(0, 1, 0), Vec3(0, -1, 0))
        directions = [mat.scatter(ray_in, make_hit(), rng).scattered_ray.direction for _ in range(50)]

        first = directions[0]
        assert any(d != first for d in directions[1:])

    def test_always_scatters_at_grazing_angle(self, rng):
        """Fuzzed reflections below the surface are not rejected."""
        mat = Metal(Color(1, 1, 1), fuzz=1.0)
        ray_in = Ray(Point3(0, 0, 0), Vec3(1, -0.05, 0))
        hit = make_hit()

        below = 0
        for _ in range(200):
            result = mat.scatter(ray_in, hit, rng)
            assert result is not None
            if result.scattered_ray.direction.dot(hit.normal) < 0:
                below += 1
        assert below > 0

    def test_attenuation_matches_albedo(self, rng):
        albedo = Color(0.8, 0.6, 0.2)
        result = Metal(albedo, 0.3).scatter(Ray(Point3(0, 1, 0), Vec3(0, -1, 0)), make_hit(), rng)
        assert result.attenuation == albedo

    def test_fuzz_clamping(self):
        assert Metal(Color(1, 1, 1), fuzz=2.0).fuzz == 1.0
        assert Metal(Color(1, 1, 1), fuzz=-0.5).fuzz == 0.0
        assert Metal(Color(1, 1, 1), fuzz=0.3).fuzz == 0.3


class TestDielectric:
    """Test Dielectric (glass) material."""

    def test_always_scatters_with_clear_attenuation(self, rng):
        mat = Dielectric(1.5)
        hit = make_hit()

        for direction in (Vec3(0, -1, 0), Vec3(1, -1, 0), Vec3(1, 0.1, 0), Vec3(0.3, 2, -1)):
            ray_in = Ray(Point3(0, 1, 0), direction)
            for _ in range(50):
                result = mat.scatter(ray_in, hit, rng)
                assert result is not None
                assert result.attenuation.to_array().tolist() == [1.0, 1.0, 1.0]

    def test_normal_incidence_refracts_straight(self):
        mat = Dielectric(1.5)
        ray_in = Ray(Point3(0, 1, 0), Vec3(0, -1, 0))
        # Reflectance at normal incidence is only 4%
        result = mat.scatter(ray_in, make_hit(), FixedRandom(0.5))
        assert result.scattered_ray.direction == Vec3(0, -1, 0)

    def test_low_draw_reflects(self):
        mat = Dielectric(1.5)
        ray_in = Ray(Point3(0, 1, 0), Vec3(0, -1, 0))
        result = mat.scatter(ray_in, make_hit(), FixedRandom(0.01))
        assert result.scattered_ray.direction == Vec3(0, 1, 0)

    def test_refraction_bends_toward_normal(self):
        mat = Dielectric(1.5)
        ray_in = Ray(Point3(-1, 1, 0), Vec3(1, -1, 0))
        result = mat.scatter(ray_in, make_hit(), FixedRandom(0.99))

        out = result.scattered_ray.direction
        assert out.y < 0
        assert abs(out.x) / abs(out.y) < 1.0

    def test_total_internal_reflection(self):
        """A grazing ray leaving the glass can only reflect."""
        mat = Dielectric(1.5)
        ray_in = Ray(Point3(-1, -0.1, 0), Vec3(1, 0.1, 0))
        for value in (0.0, 0.5, 0.999):
            result = mat.scatter(ray_in, make_hit(), FixedRandom(value))
            assert result.scattered_ray.direction == Vec3(1, -0.1, 0)

    def test_exiting_ray_refracts_away_from_normal(self):
        mat = Dielectric(1.5)
        # Inside the glass, travelling along the outward normal
        ray_in = Ray(Point3(0, -1, 0), Vec3(0.2, 1, 0))
        result = mat.scatter(ray_in, make_hit(), FixedRandom(0.99))

        out = result.scattered_ray.direction
        assert out.y > 0
        assert abs(out.x) / abs(out.y) > 0.2


class TestSchlick:
    """Test Schlick's reflectance approximation."""

    def test_normal_incidence(self):
        assert math.isclose(schlick(1.0, 1.5), 0.04)

    def test_grazing_incidence(self):
        assert math.isclose(schlick(0.0, 1.5), 1.0)

    def test_monotonic(self):
        values = [schlick(c, 1.5) for c in (0.0, 0.25, 0.5, 0.75, 1.0)]
        assert values == sorted(values, reverse=True)
