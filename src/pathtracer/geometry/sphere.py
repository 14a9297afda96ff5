"""Sphere primitive with ray-sphere intersection.

A sphere is stored as its center and squared radius. The intersection test
assumes a unit-length ray direction, which reduces the quadratic to

    t^2 + 2*b*t + c = 0,   b = (origin - center) . direction,
                           c = |origin - center|^2 - radius^2

The nearer root is used when it lies in [t_min, t_max); otherwise the farther
root is tried, which is the case for rays starting inside the sphere.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.geometry.sphere import Sphere, SphereShape, hit_sphere
    >>> shape = SphereShape.create(center=(0.0, 0.0, -1.0), radius=0.5)
    >>> # Use hit_sphere within a Taichi kernel
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from pathtracer.core.linalg import as_tuple
from pathtracer.geometry.hit import HitRecord, in_range

vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """Kernel-side sphere defined by center point and squared radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius_squared: The squared radius (positive float).
    """

    center: vec3
    radius_squared: ti.f32


@dataclass(frozen=True)
class SphereShape:
    """Host-side sphere description used to build scenes.

    Attributes:
        center: The center point as (x, y, z).
        radius_squared: The squared radius.
    """

    center: tuple[float, float, float]
    radius_squared: float

    def __post_init__(self) -> None:
        if not self.radius_squared > 0.0:
            raise ValueError(
                f"Sphere radius_squared must be positive, got {self.radius_squared}"
            )

    @classmethod
    def create(cls, center, radius: float) -> "SphereShape":
        """Create a sphere from a center and radius.

        The sign of the radius is irrelevant since only its square is stored.
        """
        return cls(center=as_tuple(center), radius_squared=float(radius) ** 2)

    @classmethod
    def unit_at(cls, x: float, y: float, z: float) -> "SphereShape":
        """Create a unit-radius sphere centered at (x, y, z)."""
        return cls(center=(float(x), float(y), float(z)), radius_squared=1.0)

    @property
    def radius(self) -> float:
        return self.radius_squared**0.5

    def scaled(self, scalar: float) -> "SphereShape":
        """Return a copy with the radius multiplied by ``scalar``."""
        return SphereShape(center=self.center, radius_squared=self.radius_squared * scalar**2)


@ti.func
def hit_sphere(
    ray_origin: vec3,
    ray_direction: vec3,
    sphere: Sphere,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Test for ray-sphere intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction of the ray. Must be unit length.
        sphere: The sphere to test intersection against.
        t_min: Minimum t value of a valid hit (inclusive).
        t_max: Maximum t value of a valid hit (exclusive).

    Returns:
        A HitRecord with the outward normal at the hit point. Check the hit
        field to determine if an intersection occurred.
    """
    center_to_origin = ray_origin - sphere.center
    half_b = tm.dot(center_to_origin, ray_direction)
    c = tm.dot(center_to_origin, center_to_origin) - sphere.radius_squared
    discriminant = half_b * half_b - c

    # Initialize result fields (Taichi requires outer-scope declaration)
    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)
    hit_normal = vec3(0.0, 0.0, 0.0)

    if discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)

        t = -half_b - sqrt_d
        valid = in_range(t, t_min, t_max)
        if not valid:
            t = -half_b + sqrt_d
            valid = in_range(t, t_min, t_max)

        if valid:
            did_hit = 1
            hit_t = t
            hit_point = ray_origin + t * ray_direction
            hit_normal = tm.normalize(hit_point - sphere.center)

    return HitRecord(
        hit=did_hit,
        distance=hit_t,
        position=hit_point,
        normal=hit_normal,
        sub_index=0,
    )
