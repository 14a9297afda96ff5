"""Unit tests for plane intersection."""

import pytest
import taichi as ti


class TestPlaneShape:
    def test_create_normalizes(self):
        from pathtracer.geometry.plane import PlaneShape

        plane = PlaneShape.create((0.0, -2.0, 0.0), (0.0, 5.0, 0.0))
        assert plane.normal == (0.0, 1.0, 0.0)
        assert plane.center == (0.0, -2.0, 0.0)

    def test_zero_normal_raises(self):
        from pathtracer.geometry.plane import PlaneShape

        with pytest.raises(ValueError):
            PlaneShape.create((0.0, 0.0, 0.0), (0.0, 0.0, 0.0))


class TestPlaneIntersection:
    """Tests for ray-plane intersection."""

    def _run(self, origin, direction, center, normal):
        from pathtracer.geometry.plane import Plane, hit_plane

        hit = ti.field(dtype=ti.i32, shape=())
        t_val = ti.field(dtype=ti.f32, shape=())
        point = ti.field(dtype=ti.math.vec3, shape=())
        out_normal = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel(o: ti.math.vec3, d: ti.math.vec3, c: ti.math.vec3, n: ti.math.vec3):
            plane = Plane(center=c, normal=n)
            record = hit_plane(o, d, plane, 0.001, 1000.0)
            hit[None] = record.hit
            t_val[None] = record.distance
            point[None] = record.position
            out_normal[None] = record.normal

        vec3 = ti.math.vec3
        test_kernel(vec3(*origin), vec3(*direction), vec3(*center), vec3(*normal))
        return hit[None], t_val[None], point[None], out_normal[None]

    def test_hit_floor(self):
        hit, t, p, n = self._run((0.0, 0.0, 0.0), (0.0, -1.0, 0.0), (0.0, -2.0, 0.0), (0.0, 1.0, 0.0))
        assert hit == 1
        assert abs(t - 2.0) < 1e-5
        assert abs(p[1] + 2.0) < 1e-5
        assert abs(n[1] - 1.0) < 1e-5

    def test_hit_from_back_keeps_stored_normal(self):
        hit, t, _, n = self._run((0.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 4.0, 0.0), (0.0, 1.0, 0.0))
        assert hit == 1
        assert abs(t - 4.0) < 1e-5
        assert abs(n[1] - 1.0) < 1e-5

    def test_oblique_hit(self):
        hit, t, p, _ = self._run(
            (0.0, 0.0, 0.0), (0.6, -0.8, 0.0), (0.0, -2.0, 0.0), (0.0, 1.0, 0.0)
        )
        assert hit == 1
        assert abs(t - 2.5) < 1e-5
        assert abs(p[0] - 1.5) < 1e-5

    def test_parallel_ray_misses(self):
        hit, _, _, _ = self._run((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, -2.0, 0.0), (0.0, 1.0, 0.0))
        assert hit == 0

    def test_plane_behind_ray_misses(self):
        hit, _, _, _ = self._run((0.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, -2.0, 0.0), (0.0, 1.0, 0.0))
        assert hit == 0
