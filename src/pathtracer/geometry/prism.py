"""Triangular prism primitive built from eight triangles.

A prism is a base triangle (v0, v1, v2) extruded along its negative normal by
a length, giving the back cap (v3, v4, v5). Each cap is one triangle and each
of the three rectangular sides is split into two, for eight triangles total:

    tri1 = (v0, v1, v2)   front cap
    tri2 = (v3, v5, v4)   back cap, reversed winding
    tri3 = (v0, v3, v1)   tri4 = (v4, v1, v3)   side v0-v1
    tri5 = (v3, v0, v5)   tri6 = (v2, v5, v0)   side v2-v0
    tri7 = (v2, v1, v4)   tri8 = (v2, v4, v5)   side v1-v2

With this winding every triangle normal points out of the solid, which the
dielectric material relies on to tell entering rays from exiting ones.

On the kernel side the triangles live in fields indexed by (prism, face) and
are passed to ``hit_prism`` as templates. The index of the face that was hit
is reported in ``HitRecord.sub_index``.
"""

from dataclasses import dataclass

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from pathtracer.core.linalg import as_vec3, normalized
from pathtracer.geometry.hit import HitRecord, make_miss_record
from pathtracer.geometry.triangle import Triangle, TriangleShape, hit_triangle

vec3 = tm.vec3

PRISM_FACES = 8

# Tolerances for the orientation checks done at construction
CAP_TOLERANCE = 1e-3
PERPENDICULAR_TOLERANCE = 1e-3


@dataclass(frozen=True)
class PrismShape:
    """Host-side prism: eight outward-facing triangles.

    Construction validates the winding of the triangles and raises
    ValueError when the caps do not face opposite ways, when the two halves
    of a side disagree, or when a side is not perpendicular to the caps.
    """

    triangles: tuple[TriangleShape, ...]

    def __post_init__(self) -> None:
        if len(self.triangles) != PRISM_FACES:
            raise ValueError(
                f"A prism needs {PRISM_FACES} triangles, got {len(self.triangles)}"
            )
        normals = [tri.normal() for tri in self.triangles]
        n1, n2, n3, n4, n5, n6, n7, n8 = normals

        cap_sum = n1 + n2
        if float(np.dot(cap_sum, cap_sum)) > CAP_TOLERANCE:
            raise ValueError("Prism caps must face opposite directions")
        for name, a, b in (("first", n3, n4), ("second", n5, n6), ("third", n7, n8)):
            if float(np.dot(a, b)) <= 0.0:
                raise ValueError(f"Prism {name} side triangles face different ways")
            if abs(float(np.dot(a, n1))) > PERPENDICULAR_TOLERANCE:
                raise ValueError(f"Prism {name} side is not perpendicular to the caps")

    @classmethod
    def extrude(cls, v0, v1, v2, length: float) -> "PrismShape":
        """Build a prism by pushing the triangle (v0, v1, v2) back along its normal.

        Args:
            v0, v1, v2: The front cap vertices; their winding sets the front
                normal.
            length: Extrusion distance along the negative front normal.

        Raises:
            ValueError: If length is not positive or the base is degenerate.
        """
        if not length > 0.0:
            raise ValueError(f"Prism length must be positive, got {length}")
        p0, p1, p2 = as_vec3(v0), as_vec3(v1), as_vec3(v2)
        n = normalized(np.cross(p1 - p0, p2 - p0))
        p3, p4, p5 = (p - n * length for p in (p0, p1, p2))

        tri = TriangleShape.from_points
        return cls(
            triangles=(
                tri(p0, p1, p2),
                tri(p3, p5, p4),
                tri(p0, p3, p1),
                tri(p4, p1, p3),
                tri(p3, p0, p5),
                tri(p2, p5, p0),
                tri(p2, p1, p4),
                tri(p2, p4, p5),
            )
        )

    @classmethod
    def from_triangle(cls, triangle: TriangleShape, length: float) -> "PrismShape":
        return cls.extrude(*triangle.vertices(), length)

    @classmethod
    def unit_facing_pos_z(cls) -> "PrismShape":
        """Unit-length prism whose front cap is ``TriangleShape.facing_pos_z()``."""
        return cls.from_triangle(TriangleShape.facing_pos_z(), 1.0)

    def vertices(self) -> tuple[npt.NDArray[np.float64], ...]:
        """The six distinct vertices (v0, v1, v2, v3, v4, v5)."""
        v0, v1, v2 = self.triangles[0].vertices()
        v3, v5, v4 = self.triangles[1].vertices()
        return v0, v1, v2, v3, v4, v5

    def center(self) -> npt.NDArray[np.float64]:
        return np.mean(np.stack(self.vertices()), axis=0)

    def rotated(self, axis, angle_degrees: float) -> "PrismShape":
        """Rotate every triangle about an axis through the prism's center."""
        origin = self.center()
        return PrismShape(
            triangles=tuple(
                tri.rotated_around(origin, axis, angle_degrees) for tri in self.triangles
            )
        )

    def shifted(self, offset) -> "PrismShape":
        return PrismShape(triangles=tuple(tri.shifted(offset) for tri in self.triangles))


@ti.func
def hit_prism(
    ray_origin: vec3,
    ray_direction: vec3,
    v0s: ti.template(),
    edge1s: ti.template(),
    edge2s: ti.template(),
    prism_index: ti.i32,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Test a ray against the eight faces of one stored prism.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        v0s, edge1s, edge2s: Vector fields of shape (num_prisms, PRISM_FACES)
            holding the triangles.
        prism_index: Which prism to test.
        t_min: Minimum t value of a valid hit (inclusive).
        t_max: Maximum t value of a valid hit (exclusive).

    Returns:
        The nearest face's HitRecord with sub_index set to the face index,
        or a miss record.
    """
    result = make_miss_record()
    closest_t = t_max
    for face in range(PRISM_FACES):
        tri = Triangle(
            v0=v0s[prism_index, face],
            edge1=edge1s[prism_index, face],
            edge2=edge2s[prism_index, face],
        )
        rec = hit_triangle(ray_origin, ray_direction, tri, t_min, closest_t)
        if rec.hit == 1:
            closest_t = rec.distance
            result = rec
            result.sub_index = face
    return result
