"""Unit tests for rectangle intersection."""

import pytest
import taichi as ti


class TestRectangleShape:
    def test_create_normalizes_and_centers(self):
        from pathtracer.geometry.rectangle import RectangleShape

        rect = RectangleShape.create((-1.0, 0.0, -4.0), (3.0, 0.0, -2.0), (0.0, 2.0, 0.0))
        assert rect.normal == (0.0, 1.0, 0.0)
        assert rect.center == (1.0, 0.0, -3.0)

    def test_zero_normal_raises(self):
        from pathtracer.geometry.rectangle import RectangleShape

        with pytest.raises(ValueError):
            RectangleShape.create((0.0, 0.0, 0.0), (1.0, 1.0, 0.0), (0.0, 0.0, 0.0))

    def test_inverted_corners_raise(self):
        from pathtracer.geometry.rectangle import RectangleShape

        with pytest.raises(ValueError):
            RectangleShape.create((1.0, 0.0, 0.0), (-1.0, 1.0, 0.0), (0.0, 0.0, 1.0))


class TestRectangleIntersection:
    """Tests for ray-rectangle intersection.

    The rectangle spans [-1, 1] x [-1, 1] in the z = -3 plane.
    """

    def _run(self, origin, direction):
        from pathtracer.geometry.rectangle import Rectangle, hit_rectangle

        hit = ti.field(dtype=ti.i32, shape=())
        t_val = ti.field(dtype=ti.f32, shape=())
        point = ti.field(dtype=ti.math.vec3, shape=())
        out_normal = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel(o: ti.math.vec3, d: ti.math.vec3):
            rect = Rectangle(
                min_corner=ti.math.vec3(-1.0, -1.0, -3.0),
                max_corner=ti.math.vec3(1.0, 1.0, -3.0),
                normal=ti.math.vec3(0.0, 0.0, 1.0),
            )
            record = hit_rectangle(o, d, rect, 0.001, 1000.0)
            hit[None] = record.hit
            t_val[None] = record.distance
            point[None] = record.position
            out_normal[None] = record.normal

        test_kernel(ti.math.vec3(*origin), ti.math.vec3(*direction))
        return hit[None], t_val[None], point[None], out_normal[None]

    def test_hit_inside(self):
        hit, t, p, n = self._run((0.5, -0.25, 0.0), (0.0, 0.0, -1.0))
        assert hit == 1
        assert abs(t - 3.0) < 1e-5
        assert abs(p[0] - 0.5) < 1e-6
        assert abs(p[1] + 0.25) < 1e-6
        assert abs(n[2] - 1.0) < 1e-6

    def test_miss_outside(self):
        hit, t, _, _ = self._run((1.5, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert hit == 0
        assert t == 0.0

    def test_edge_is_inclusive(self):
        hit, t, _, _ = self._run((1.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert hit == 1
        assert abs(t - 3.0) < 1e-5

        hit, _, _, _ = self._run((-1.0, -1.0, 0.0), (0.0, 0.0, -1.0))
        assert hit == 1

    def test_oblique_hit_on_flat_axis(self):
        """The hit position is rounded in z; the flat axis still accepts it."""
        hit, _, p, _ = self._run((0.0, 0.0, 0.0), (0.1, 0.2, -0.97))
        assert hit == 1
        assert abs(p[2] + 3.0) < 1e-4

    def test_parallel_ray_misses(self):
        hit, _, _, _ = self._run((0.0, 0.0, -3.0), (1.0, 0.0, 0.0))
        assert hit == 0
