"""Unit tests for the eight-triangle prism.

Tests cover:
- Extrusion winding and outward-facing normals
- Construction validation
- Rotation about the prism's center
- Nearest-face intersection with face index reporting
"""

import math

import numpy as np
import pytest
import taichi as ti


class TestPrismShape:
    """Tests for prism construction."""

    def test_unit_prism_has_eight_faces(self):
        from pathtracer.geometry.prism import PRISM_FACES, PrismShape

        prism = PrismShape.unit_facing_pos_z()
        assert len(prism.triangles) == PRISM_FACES == 8

    def test_caps_face_opposite_ways(self):
        from pathtracer.geometry.prism import PrismShape

        prism = PrismShape.unit_facing_pos_z()
        assert np.allclose(prism.triangles[0].normal(), (0.0, 0.0, 1.0))
        assert np.allclose(prism.triangles[1].normal(), (0.0, 0.0, -1.0))

    def test_all_normals_point_outward(self):
        from pathtracer.geometry.prism import PrismShape

        prism = PrismShape.unit_facing_pos_z()
        center = prism.center()
        for tri in prism.triangles:
            assert float(np.dot(tri.normal(), tri.centroid() - center)) > 0.0

    def test_bottom_side_faces_down(self):
        from pathtracer.geometry.prism import PrismShape

        prism = PrismShape.unit_facing_pos_z()
        assert np.allclose(prism.triangles[2].normal(), (0.0, -1.0, 0.0), atol=1e-12)
        assert np.allclose(prism.triangles[3].normal(), (0.0, -1.0, 0.0), atol=1e-12)

    def test_vertices_and_center(self):
        from pathtracer.geometry.prism import PrismShape

        prism = PrismShape.unit_facing_pos_z()
        v0, v1, v2, v3, v4, v5 = prism.vertices()
        assert np.allclose(v3, v0 + (0.0, 0.0, -1.0))
        assert np.allclose(v4, v1 + (0.0, 0.0, -1.0))
        assert np.allclose(v5, v2 + (0.0, 0.0, -1.0))
        h = math.sqrt(3.0) / 2.0
        assert np.allclose(prism.center(), (0.0, h / 3.0, -0.5))

    def test_extrude_non_positive_length_raises(self):
        from pathtracer.geometry.prism import PrismShape

        with pytest.raises(ValueError):
            PrismShape.extrude((0, 0, 0), (1, 0, 0), (0, 1, 0), 0.0)

    def test_wrong_triangle_count_raises(self):
        from pathtracer.geometry.prism import PrismShape

        prism = PrismShape.unit_facing_pos_z()
        with pytest.raises(ValueError):
            PrismShape(triangles=prism.triangles[:7])

    def test_same_facing_caps_raise(self):
        from pathtracer.geometry.prism import PrismShape

        tris = list(PrismShape.unit_facing_pos_z().triangles)
        tris[1] = tris[0]
        with pytest.raises(ValueError):
            PrismShape(triangles=tuple(tris))

    def test_mismatched_side_halves_raise(self):
        from pathtracer.geometry.prism import PrismShape
        from pathtracer.geometry.triangle import TriangleShape

        tris = list(PrismShape.unit_facing_pos_z().triangles)
        a, b, c = tris[3].vertices()
        tris[3] = TriangleShape.from_points(a, c, b)
        with pytest.raises(ValueError):
            PrismShape(triangles=tuple(tris))

    def test_rotated_keeps_center(self):
        from pathtracer.geometry.prism import PrismShape

        prism = PrismShape.unit_facing_pos_z()
        rotated = prism.rotated((0.0, 1.0, 0.0), 90.0)
        assert np.allclose(rotated.center(), prism.center(), atol=1e-12)
        assert np.allclose(rotated.triangles[0].normal(), (1.0, 0.0, 0.0), atol=1e-12)

    def test_shifted(self):
        from pathtracer.geometry.prism import PrismShape

        prism = PrismShape.unit_facing_pos_z()
        moved = prism.shifted((1.0, 2.0, 3.0))
        assert np.allclose(moved.center(), prism.center() + (1.0, 2.0, 3.0))


class TestPrismIntersection:
    """Tests for hit_prism over stored face fields."""

    def _run(self, prism, origin, direction):
        from pathtracer.geometry.prism import PRISM_FACES, hit_prism

        v0s = ti.Vector.field(3, dtype=ti.f32, shape=(1, PRISM_FACES))
        edge1s = ti.Vector.field(3, dtype=ti.f32, shape=(1, PRISM_FACES))
        edge2s = ti.Vector.field(3, dtype=ti.f32, shape=(1, PRISM_FACES))
        for face, tri in enumerate(prism.triangles):
            v0s[0, face] = tri.v0
            edge1s[0, face] = tri.edge1
            edge2s[0, face] = tri.edge2

        hit = ti.field(dtype=ti.i32, shape=())
        t_val = ti.field(dtype=ti.f32, shape=())
        normal = ti.field(dtype=ti.math.vec3, shape=())
        face_index = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel(o: ti.math.vec3, d: ti.math.vec3):
            record = hit_prism(o, d, v0s, edge1s, edge2s, 0, 0.001, 1000.0)
            hit[None] = record.hit
            t_val[None] = record.distance
            normal[None] = record.normal
            face_index[None] = record.sub_index

        test_kernel(ti.math.vec3(*origin), ti.math.vec3(*direction))
        return hit[None], t_val[None], normal[None], face_index[None]

    def test_front_cap_hit(self):
        from pathtracer.geometry.prism import PrismShape

        hit, t, n, face = self._run(PrismShape.unit_facing_pos_z(), (0.0, 0.3, 5.0), (0.0, 0.0, -1.0))
        assert hit == 1
        assert abs(t - 5.0) < 1e-5
        assert abs(n[2] - 1.0) < 1e-5
        assert face == 0

    def test_back_cap_hit(self):
        from pathtracer.geometry.prism import PrismShape

        hit, t, n, face = self._run(PrismShape.unit_facing_pos_z(), (0.0, 0.3, -5.0), (0.0, 0.0, 1.0))
        assert hit == 1
        assert abs(t - 4.0) < 1e-5
        assert abs(n[2] + 1.0) < 1e-5
        assert face == 1

    def test_bottom_side_hit(self):
        from pathtracer.geometry.prism import PrismShape

        hit, t, n, face = self._run(PrismShape.unit_facing_pos_z(), (0.1, -5.0, -0.3), (0.0, 1.0, 0.0))
        assert hit == 1
        assert abs(t - 5.0) < 1e-5
        assert abs(n[1] + 1.0) < 1e-5
        assert face in (2, 3)

    def test_from_inside_hits_exit_face(self):
        from pathtracer.geometry.prism import PrismShape

        hit, t, n, face = self._run(PrismShape.unit_facing_pos_z(), (0.0, 0.3, -0.5), (0.0, 0.0, 1.0))
        assert hit == 1
        assert abs(t - 0.5) < 1e-5
        assert abs(n[2] - 1.0) < 1e-5
        assert face == 0

    def test_miss(self):
        from pathtracer.geometry.prism import PrismShape

        hit, _, _, _ = self._run(PrismShape.unit_facing_pos_z(), (3.0, 0.3, 5.0), (0.0, 0.0, -1.0))
        assert hit == 0
