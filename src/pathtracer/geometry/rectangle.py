"""Axis-aligned rectangle primitive.

A rectangle is a plane clipped to the box spanned by two corners. It is
stored as the corners plus a unit normal; the plane passes through the
midpoint of the corners. A plane hit counts only if its position lies inside
[min, max] on every axis, edges included.

The box test is widened by BOUNDS_EPSILON so that hits on a flat axis
(min == max) survive f32 rounding of the hit position.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.geometry.rectangle import RectangleShape
    >>> panel = RectangleShape.create((-1.0, 3.9, -4.0), (1.0, 3.9, -2.0), (0.0, -1.0, 0.0))
"""

from dataclasses import dataclass

import numpy as np
import taichi as ti
import taichi.math as tm

from pathtracer.core.linalg import as_tuple, as_vec3, normalized
from pathtracer.geometry.hit import HitRecord, make_miss_record
from pathtracer.geometry.plane import Plane, hit_plane

vec3 = tm.vec3

BOUNDS_EPSILON = 1e-4


@ti.dataclass
class Rectangle:
    """Kernel-side rectangle.

    Attributes:
        min_corner: Componentwise minimum of the rectangle's box (vec3).
        max_corner: Componentwise maximum of the rectangle's box (vec3).
        normal: The unit plane normal (vec3).
    """

    min_corner: vec3
    max_corner: vec3
    normal: vec3


@dataclass(frozen=True)
class RectangleShape:
    """Host-side rectangle description used to build scenes."""

    min_corner: tuple[float, float, float]
    max_corner: tuple[float, float, float]
    normal: tuple[float, float, float]

    @classmethod
    def create(cls, min_corner, max_corner, normal) -> "RectangleShape":
        """Create a rectangle between two corners; ``normal`` is normalized.

        Raises:
            ValueError: If the normal has zero length or min_corner exceeds
                max_corner on any axis.
        """
        lo = as_vec3(min_corner)
        hi = as_vec3(max_corner)
        if np.any(lo > hi):
            raise ValueError(f"min_corner {tuple(lo)} exceeds max_corner {tuple(hi)}")
        return cls(
            min_corner=as_tuple(lo),
            max_corner=as_tuple(hi),
            normal=as_tuple(normalized(normal)),
        )

    @property
    def center(self) -> tuple[float, float, float]:
        return as_tuple((as_vec3(self.min_corner) + as_vec3(self.max_corner)) * 0.5)


@ti.func
def inside_bounds(p: vec3, min_corner: vec3, max_corner: vec3) -> ti.i32:
    """1 if p lies in the (slightly widened) box [min_corner, max_corner]."""
    inside = 1
    for i in ti.static(range(3)):
        if p[i] < min_corner[i] - BOUNDS_EPSILON or p[i] > max_corner[i] + BOUNDS_EPSILON:
            inside = 0
    return inside


@ti.func
def hit_rectangle(
    ray_origin: vec3,
    ray_direction: vec3,
    rect: Rectangle,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Test for ray-rectangle intersection.

    Returns:
        The plane hit if it falls inside the rectangle, otherwise a miss
        record with every field zeroed.
    """
    plane = Plane(center=(rect.min_corner + rect.max_corner) * 0.5, normal=rect.normal)
    rec = hit_plane(ray_origin, ray_direction, plane, t_min, t_max)

    result = make_miss_record()
    if rec.hit == 1 and inside_bounds(rec.position, rect.min_corner, rect.max_corner) == 1:
        result = rec
    return result
