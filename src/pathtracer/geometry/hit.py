"""Hit record shared by all shape intersection routines."""

import taichi as ti
import taichi.math as tm

vec3 = tm.vec3


@ti.dataclass
class HitRecord:
    """Record of a ray-shape intersection.

    Attributes:
        hit: Whether the ray intersected the shape (1 if hit, 0 if miss).
        distance: The ray parameter t of the intersection. Always within the
            query's [t_min, t_max) when hit == 1.
        position: The 3D point where the ray intersected the surface.
        normal: The unit geometric normal of the surface at the hit point.
            Spheres report the outward normal, planes and triangles the
            normal fixed at construction; it is not flipped toward the ray.
        sub_index: For compound shapes (prisms), which constituent triangle
            was struck. 0 for simple shapes.
    """

    hit: ti.i32
    distance: ti.f32
    position: vec3
    normal: vec3
    sub_index: ti.i32


@ti.func
def make_miss_record() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(
        hit=0,
        distance=0.0,
        position=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        sub_index=0,
    )


@ti.func
def in_range(t: ti.f32, t_min: ti.f32, t_max: ti.f32) -> ti.i32:
    """Check that t is finite and lies in the half-open interval [t_min, t_max)."""
    finite = not (tm.isnan(t) or tm.isinf(t))
    return finite and t >= t_min and t < t_max
