"""Ray data structure and vector utilities for the path tracer.

This module provides the Ray dataclass and the Vector3 operations used inside
Taichi kernels. Vectors are ``taichi.math.vec3`` values; arithmetic, dot and
cross products, length and normalization come from ``taichi.math`` and are
wrapped here so the rest of the package has a single import point.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, -1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Not required to be
            unit length in general, but the sphere test assumes it is, and
            every ray produced by the camera and the integrator is normalized.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def length(v: vec3) -> ti.f32:
    """Compute the Euclidean length of a vector."""
    return tm.length(v)


@ti.func
def length_squared(v: vec3) -> ti.f32:
    """Compute the squared length of a vector.

    Cheaper than length() when only comparing magnitudes.
    """
    return tm.dot(v, v)


@ti.func
def normalize(v: vec3) -> vec3:
    """Normalize a vector to unit length.

    The input must have nonzero length; a zero vector produces NaNs.
    """
    return v / tm.length(v)


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    return tm.cross(a, b)


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal.

    Computes d' = d - 2(d . n)n. The result does not depend on which side
    of the surface the normal points to.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (unit length).

    Returns:
        The reflected direction vector.
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def refract(incident: vec3, normal: vec3, ratio: ti.f32) -> vec3:
    """Refract an incident vector through a surface using Snell's law.

    Args:
        incident: The incoming direction vector (unit length).
        normal: The surface normal facing against the incident direction.
        ratio: The ratio of refractive indices (n_incident / n_transmitted).

    Returns:
        The unit refracted direction, or a zero vector if total internal
        reflection occurs.
    """
    cos_i = ti.min(-tm.dot(incident, normal), 1.0)
    sin2_t = ratio * ratio * (1.0 - cos_i * cos_i)
    result = vec3(0.0, 0.0, 0.0)
    if sin2_t <= 1.0:
        perpendicular = ratio * (incident + cos_i * normal)
        parallel = -ti.sqrt(ti.abs(1.0 - tm.dot(perpendicular, perpendicular))) * normal
        result = tm.normalize(perpendicular + parallel)
    return result


@ti.func
def schlick_reflectance(cosine: ti.f32, ratio: ti.f32) -> ti.f32:
    """Compute Fresnel reflectance using Schlick's approximation.

    R = r0 + (1 - r0)(1 - cos)^5 with r0 = ((1 - ratio) / (1 + ratio))^2.

    Args:
        cosine: Cosine of the angle between incident direction and normal.
        ratio: Ratio of refractive indices.

    Returns:
        The approximate Fresnel reflectance in [0, 1].
    """
    r0 = (1.0 - ratio) / (1.0 + ratio)
    r0 = r0 * r0
    return r0 + (1.0 - r0) * ((1.0 - cosine) ** 5)


@ti.func
def near_zero(v: vec3) -> ti.i32:
    """Check if a vector is near zero in all components.

    Returns:
        1 if all components are near zero, 0 otherwise.
    """
    s = 1e-8
    return ti.abs(v.x) < s and ti.abs(v.y) < s and ti.abs(v.z) < s


@ti.func
def rotate(v: vec3, axis: vec3, angle_degrees: ti.f32) -> vec3:
    """Rotate a vector about an axis through the origin (Rodrigues' formula).

        v' = v cos(a) + (k x v) sin(a) + k (k . v)(1 - cos(a))

    where k is the normalized axis. Positive angles rotate counter-clockwise
    when looking down the axis toward the origin.

    Args:
        v: The vector to rotate.
        axis: The rotation axis (normalized internally).
        angle_degrees: Rotation angle in degrees.

    Returns:
        The rotated vector.
    """
    theta = angle_degrees * tm.pi / 180.0
    k = tm.normalize(axis)
    cos_theta = ti.cos(theta)
    sin_theta = ti.sin(theta)
    return v * cos_theta + tm.cross(k, v) * sin_theta + k * tm.dot(k, v) * (1.0 - cos_theta)


# =============================================================================
# Local Frames
# =============================================================================


@ti.func
def build_onb_from_normal(normal: vec3):
    """Build an orthonormal basis from a normal vector.

    Creates a local coordinate frame where the normal is the z-axis.

    Args:
        normal: The surface normal (unit length).

    Returns:
        A tuple (tangent, bitangent, normal) forming an orthonormal basis.
    """
    # Choose a helper axis that is not parallel to the normal
    a = vec3(1.0, 0.0, 0.0)
    if ti.abs(normal.x) > 0.9:
        a = vec3(0.0, 1.0, 0.0)
    tangent = tm.normalize(tm.cross(normal, a))
    bitangent = tm.normalize(tm.cross(normal, tangent))
    return tangent, bitangent, normal


@ti.func
def local_to_world(local_dir: vec3, tangent: vec3, bitangent: vec3, normal: vec3) -> vec3:
    """Transform a direction from a local z-up frame to world coordinates."""
    return local_dir.x * tangent + local_dir.y * bitangent + local_dir.z * normal
