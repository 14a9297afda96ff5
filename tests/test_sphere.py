"""Unit tests for sphere intersection.

Tests cover:
- SphereShape construction and validation
- Ray hitting sphere from outside
- Ray missing sphere
- Ray starting inside sphere (far root)
- Hit distance bounds
"""

import pytest
import taichi as ti


class TestSphereShape:
    """Tests for the host-side sphere description."""

    def test_create_stores_squared_radius(self):
        from pathtracer.geometry.sphere import SphereShape

        shape = SphereShape.create((1.0, 2.0, 3.0), 0.5)
        assert shape.center == (1.0, 2.0, 3.0)
        assert abs(shape.radius_squared - 0.25) < 1e-12
        assert abs(shape.radius - 0.5) < 1e-12

    def test_unit_at_and_scaled(self):
        from pathtracer.geometry.sphere import SphereShape

        shape = SphereShape.unit_at(0.0, 1.0, 0.0).scaled(3.0)
        assert shape.center == (0.0, 1.0, 0.0)
        assert abs(shape.radius_squared - 9.0) < 1e-12

    @pytest.mark.parametrize("radius_squared", [0.0, -1.0])
    def test_non_positive_radius_raises(self, radius_squared):
        from pathtracer.geometry.sphere import SphereShape

        with pytest.raises(ValueError):
            SphereShape(center=(0.0, 0.0, 0.0), radius_squared=radius_squared)


class TestSphereIntersection:
    """Tests for ray-sphere intersection."""

    def _run(self, origin, direction, center, radius_squared, t_min=0.001, t_max=1000.0):
        from pathtracer.geometry.sphere import Sphere, hit_sphere

        hit = ti.field(dtype=ti.i32, shape=())
        t_val = ti.field(dtype=ti.f32, shape=())
        point = ti.field(dtype=ti.math.vec3, shape=())
        normal = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel(
            o: ti.math.vec3, d: ti.math.vec3, c: ti.math.vec3, r2: ti.f32, lo: ti.f32, hi: ti.f32
        ):
            sphere = Sphere(center=c, radius_squared=r2)
            record = hit_sphere(o, d, sphere, lo, hi)
            hit[None] = record.hit
            t_val[None] = record.distance
            point[None] = record.position
            normal[None] = record.normal

        vec3 = ti.math.vec3
        test_kernel(vec3(*origin), vec3(*direction), vec3(*center), radius_squared, t_min, t_max)
        return hit[None], t_val[None], point[None], normal[None]

    def test_direct_hit(self):
        """Sphere of radius 1 at distance 5 is hit at t = 4."""
        hit, t, p, n = self._run((0.0, 0.0, 5.0), (0.0, 0.0, -1.0), (0.0, 0.0, 0.0), 1.0)
        assert hit == 1
        assert abs(t - 4.0) < 1e-5
        assert abs(p[2] - 1.0) < 1e-5
        assert abs(n[0]) < 1e-5
        assert abs(n[1]) < 1e-5
        assert abs(n[2] - 1.0) < 1e-5

    def test_hit_distance_is_distance_minus_radius(self):
        hit, t, _, _ = self._run((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, -3.0), 0.25)
        assert hit == 1
        assert abs(t - 2.5) < 1e-5

    def test_miss(self):
        hit, _, _, _ = self._run((0.0, 5.0, 5.0), (0.0, 0.0, -1.0), (0.0, 0.0, 0.0), 1.0)
        assert hit == 0

    def test_sphere_behind_ray(self):
        hit, _, _, _ = self._run((0.0, 0.0, 5.0), (0.0, 0.0, 1.0), (0.0, 0.0, 0.0), 1.0)
        assert hit == 0

    def test_inside_uses_far_root(self):
        """From the center the exit point is at t = radius, normal still outward."""
        hit, t, p, n = self._run((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 0.0, 0.0), 4.0)
        assert hit == 1
        assert abs(t - 2.0) < 1e-5
        assert abs(p[0] - 2.0) < 1e-5
        assert abs(n[0] - 1.0) < 1e-5

    def test_t_max_is_exclusive_bound(self):
        hit, _, _, _ = self._run(
            (0.0, 0.0, 5.0), (0.0, 0.0, -1.0), (0.0, 0.0, 0.0), 1.0, t_max=3.0
        )
        assert hit == 0

    def test_near_root_below_t_min_falls_back_to_far_root(self):
        hit, t, _, _ = self._run(
            (0.0, 0.0, 5.0), (0.0, 0.0, -1.0), (0.0, 0.0, 0.0), 1.0, t_min=4.5
        )
        assert hit == 1
        assert abs(t - 6.0) < 1e-5
