"""Infinite plane primitive with ray-plane intersection.

A plane is defined by any point on it (the center) and a unit normal. The ray
parameter of the intersection is

    t = ((center - origin) . normal) / (direction . normal)

A ray parallel to the plane (denominator close to zero) or a non-finite t is
a miss, never an error. Planes are one-sided only in the sense that the
reported normal is always the stored one; rays hit them from either side.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.geometry.plane import PlaneShape
    >>> floor = PlaneShape.create(center=(0.0, -2.0, 0.0), normal=(0.0, 1.0, 0.0))
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from pathtracer.core.linalg import as_tuple, normalized
from pathtracer.geometry.hit import HitRecord, in_range

vec3 = tm.vec3

# Rays with |direction . normal| below this are treated as parallel
PARALLEL_EPSILON = 1e-8


@ti.dataclass
class Plane:
    """Kernel-side plane.

    Attributes:
        center: A point on the plane (vec3).
        normal: The unit plane normal (vec3).
    """

    center: vec3
    normal: vec3


@dataclass(frozen=True)
class PlaneShape:
    """Host-side plane description used to build scenes.

    Use ``PlaneShape.create`` to get a normalized normal.
    """

    center: tuple[float, float, float]
    normal: tuple[float, float, float]

    @classmethod
    def create(cls, center, normal) -> "PlaneShape":
        """Create a plane through ``center``; ``normal`` is normalized.

        Raises:
            ValueError: If the normal has zero length.
        """
        return cls(center=as_tuple(center), normal=as_tuple(normalized(normal)))


@ti.func
def hit_plane(
    ray_origin: vec3,
    ray_direction: vec3,
    plane: Plane,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Test for ray-plane intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        plane: The plane to test intersection against.
        t_min: Minimum t value of a valid hit (inclusive).
        t_max: Maximum t value of a valid hit (exclusive).

    Returns:
        A HitRecord carrying the plane's stored normal.
    """
    denom = tm.dot(plane.normal, ray_direction)

    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)
    hit_normal = vec3(0.0, 0.0, 0.0)

    if ti.abs(denom) > PARALLEL_EPSILON:
        t = tm.dot(plane.center - ray_origin, plane.normal) / denom
        if in_range(t, t_min, t_max):
            did_hit = 1
            hit_t = t
            hit_point = ray_origin + t * ray_direction
            hit_normal = plane.normal

    return HitRecord(
        hit=did_hit,
        distance=hit_t,
        position=hit_point,
        normal=hit_normal,
        sub_index=0,
    )
