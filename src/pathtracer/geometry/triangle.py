"""Triangle primitive with Moller-Trumbore ray-triangle intersection.

A triangle is stored as a base vertex v0 and the two edge vectors
edge1 = v1 - v0 and edge2 = v2 - v0. Its normal is normalize(edge1 x edge2),
so the winding order of the vertices decides which way it faces.

The Moller-Trumbore test solves

    origin + t * direction = v0 + u * edge1 + v * edge2

directly for (t, u, v) with Cramer's rule. The ray misses when it is parallel
to the triangle's plane (determinant near zero) or when the barycentric
coordinates fall outside the triangle (u < 0, u > 1, v < 0 or u + v > 1).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.geometry.triangle import TriangleShape
    >>> tri = TriangleShape.from_points((0, 0, 0), (1, 0, 0), (0, 1, 0))
    >>> tri.normal()
    array([0., 0., 1.])
"""

import math
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from pathtracer.core.linalg import as_tuple, as_vec3, rotate_around
from pathtracer.geometry.hit import HitRecord, in_range

vec3 = tm.vec3

# Determinants below this magnitude are treated as a ray parallel to the plane
DETERMINANT_EPSILON = 1e-7


@ti.dataclass
class Triangle:
    """Kernel-side triangle.

    Attributes:
        v0: The base vertex (vec3).
        edge1: v1 - v0 (vec3).
        edge2: v2 - v0 (vec3).
    """

    v0: vec3
    edge1: vec3
    edge2: vec3


@dataclass(frozen=True)
class TriangleShape:
    """Host-side triangle description used to build scenes and prisms."""

    v0: tuple[float, float, float]
    edge1: tuple[float, float, float]
    edge2: tuple[float, float, float]

    def __post_init__(self) -> None:
        area2 = np.linalg.norm(np.cross(as_vec3(self.edge1), as_vec3(self.edge2)))
        if area2 == 0.0:
            raise ValueError("Degenerate triangle: edges are parallel or zero length")

    @classmethod
    def from_points(cls, v0, v1, v2) -> "TriangleShape":
        """Create a triangle from its three vertices."""
        p0 = as_vec3(v0)
        return cls(
            v0=as_tuple(p0),
            edge1=as_tuple(as_vec3(v1) - p0),
            edge2=as_tuple(as_vec3(v2) - p0),
        )

    @classmethod
    def facing_pos_z(cls) -> "TriangleShape":
        """Equilateral triangle with unit sides in the z=0 plane, facing +z."""
        h = math.sqrt(3.0) / 2.0
        return cls.from_points((-0.5, 0.0, 0.0), (0.5, 0.0, 0.0), (0.0, h, 0.0))

    def vertices(self) -> tuple[npt.NDArray[np.float64], ...]:
        """Return the three vertices (v0, v1, v2) as NumPy vectors."""
        p0 = as_vec3(self.v0)
        return p0, p0 + as_vec3(self.edge1), p0 + as_vec3(self.edge2)

    def normal(self) -> npt.NDArray[np.float64]:
        n = np.cross(as_vec3(self.edge1), as_vec3(self.edge2))
        return n / np.linalg.norm(n)

    def centroid(self) -> npt.NDArray[np.float64]:
        v0, v1, v2 = self.vertices()
        return (v0 + v1 + v2) / 3.0

    def rotated_around(self, origin, axis, angle_degrees: float) -> "TriangleShape":
        """Rotate all three vertices about an axis passing through ``origin``."""
        return TriangleShape.from_points(
            *(rotate_around(v, origin, axis, angle_degrees) for v in self.vertices())
        )

    def shifted(self, offset) -> "TriangleShape":
        """Translate the triangle by ``offset``; edges are unchanged."""
        return TriangleShape(
            v0=as_tuple(as_vec3(self.v0) + as_vec3(offset)),
            edge1=self.edge1,
            edge2=self.edge2,
        )


@ti.func
def triangle_normal(triangle: Triangle) -> vec3:
    return tm.normalize(tm.cross(triangle.edge1, triangle.edge2))


@ti.func
def triangle_barycentric(ray_origin: vec3, ray_direction: vec3, triangle: Triangle):
    """Solve the Moller-Trumbore system without range checks.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        triangle: The triangle to test.

    Returns:
        A tuple (ok, u, v, t). ok is 0 when the ray is parallel to the
        triangle's plane, in which case u, v and t are meaningless. The
        barycentric weights of the hit point are (1 - u - v, u, v).
    """
    pvec = tm.cross(ray_direction, triangle.edge2)
    determinant = tm.dot(triangle.edge1, pvec)

    ok = 0
    u = 0.0
    v = 0.0
    t = 0.0
    if ti.abs(determinant) > DETERMINANT_EPSILON:
        ok = 1
        inv_det = 1.0 / determinant
        tvec = ray_origin - triangle.v0
        u = tm.dot(tvec, pvec) * inv_det
        qvec = tm.cross(tvec, triangle.edge1)
        v = tm.dot(ray_direction, qvec) * inv_det
        t = tm.dot(triangle.edge2, qvec) * inv_det
    return ok, u, v, t


@ti.func
def hit_triangle(
    ray_origin: vec3,
    ray_direction: vec3,
    triangle: Triangle,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Test for ray-triangle intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        triangle: The triangle to test intersection against.
        t_min: Minimum t value of a valid hit (inclusive).
        t_max: Maximum t value of a valid hit (exclusive).

    Returns:
        A HitRecord carrying the triangle's winding normal.
    """
    ok, u, v, t = triangle_barycentric(ray_origin, ray_direction, triangle)

    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)
    hit_normal = vec3(0.0, 0.0, 0.0)

    if ok and u >= 0.0 and u <= 1.0 and v >= 0.0 and u + v <= 1.0:
        if in_range(t, t_min, t_max):
            did_hit = 1
            hit_t = t
            hit_point = ray_origin + t * ray_direction
            hit_normal = triangle_normal(triangle)

    return HitRecord(
        hit=did_hit,
        distance=hit_t,
        position=hit_point,
        normal=hit_normal,
        sub_index=0,
    )
