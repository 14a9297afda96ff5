"""Dielectric (glass/water) material implementation.

This module implements the dielectric BSDF, which models transparent materials
like glass and water with refraction and Fresnel reflectance.

Key physics:
    - Snell's law for refraction: n1 * sin(theta1) = n2 * sin(theta2)
    - Schlick's approximation for Fresnel reflectance
    - Total internal reflection when sin(theta_t) > 1

Whether the ray is entering or leaving the material is decided from the
geometric normal alone: a ray travelling along the normal (incoming . normal
> 0) is exiting. Surfaces must therefore have outward-facing normals.

The material chooses between reflection and refraction at random, reflecting
with probability equal to the Fresnel reflectance. Only that choice consumes
randomness; total internal reflection is deterministic.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.materials.dielectric import Dielectric, IndexOfRefraction
    >>> glass = Dielectric(ior=IndexOfRefraction.CROWN_GLASS)
"""

from dataclasses import dataclass
from enum import Enum

import taichi as ti
import taichi.math as tm

from pathtracer.core.ray import reflect, refract, schlick_reflectance
from pathtracer.core.sampler import next_uniform
from pathtracer.materials.interaction import InteractionKind, validate_unit_color

vec3 = tm.vec3


class IndexOfRefraction(float, Enum):
    """Refractive indices of common media."""

    VACUUM = 1.0
    AIR = 1.00029
    ICE = 1.31
    WATER = 1.33
    CROWN_GLASS = 1.52
    DIAMOND = 2.417


@dataclass(frozen=True)
class Dielectric:
    """Dielectric material description.

    Attributes:
        ior: Index of refraction, at least 1.0. An IndexOfRefraction member
            may be passed directly.
        tint: Color applied to both reflected and refracted light
            (RGB, each component in [0, 1]). White is clear glass.
    """

    ior: float
    tint: tuple[float, float, float] = (1.0, 1.0, 1.0)

    def __post_init__(self) -> None:
        if float(self.ior) < 1.0:
            raise ValueError(
                f"Index of refraction = {float(self.ior)} is less than 1.0. "
                "IOR must be >= 1.0 for physically meaningful materials."
            )
        validate_unit_color("Tint", self.tint)


@ti.func
def _orient(ior: ti.f32, incoming: vec3, normal: vec3):
    """Return (facing_normal, ratio, cos_theta) for a ray meeting the surface."""
    cos_theta = tm.dot(incoming, normal)
    facing = normal
    ratio = 1.0 / ior
    if cos_theta > 0.0:
        facing = -normal
        ratio = ior
    return facing, ratio, ti.min(ti.abs(cos_theta), 1.0)


@ti.func
def must_reflect(ior: ti.f32, incoming: vec3, normal: vec3) -> ti.i32:
    """Determine if total internal reflection will occur.

    Args:
        ior: Index of refraction of the material.
        incoming: The incoming ray direction (unit length).
        normal: The outward geometric normal (unit length).

    Returns:
        1 if the ray cannot refract, 0 otherwise.
    """
    _facing, ratio, cos_theta = _orient(ior, incoming, normal)
    sin_theta = ti.sqrt(ti.max(0.0, 1.0 - cos_theta * cos_theta))
    return 1 if ratio * sin_theta > 1.0 else 0


@ti.func
def dielectric_reflectance(ior: ti.f32, incoming: vec3, normal: vec3) -> ti.f32:
    """Schlick reflectance for a ray meeting the surface.

    At normal incidence this is ((1 - ratio) / (1 + ratio))^2 and it rises
    toward 1 at grazing angles.
    """
    _facing, ratio, cos_theta = _orient(ior, incoming, normal)
    return schlick_reflectance(cos_theta, ratio)


@ti.func
def interact_dielectric(ior: ti.f32, tint: vec3, incoming: vec3, normal: vec3, state: ti.u32):
    """Reflect or refract a ray at a dielectric boundary.

    Args:
        ior: Index of refraction of the material.
        tint: Attenuation applied to the scattered ray.
        incoming: The incoming ray direction (unit length).
        normal: The outward geometric normal (unit length).
        state: The current random state.

    Returns:
        A tuple (kind, direction, attenuation, state) with kind SCATTER.
    """
    facing, ratio, cos_theta = _orient(ior, incoming, normal)
    sin_theta = ti.sqrt(ti.max(0.0, 1.0 - cos_theta * cos_theta))

    s = state
    direction = vec3(0.0, 0.0, 0.0)
    if ratio * sin_theta > 1.0:
        direction = reflect(incoming, facing)
    else:
        reflectance = schlick_reflectance(cos_theta, ratio)
        u = 0.0
        s, u = next_uniform(s)
        if reflectance > u:
            direction = reflect(incoming, facing)
        else:
            direction = refract(incoming, facing, ratio)

    return int(InteractionKind.SCATTER), tm.normalize(direction), tint, s


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

MAX_DIELECTRIC_MATERIALS = 256

dielectric_iors = ti.field(dtype=ti.f32, shape=MAX_DIELECTRIC_MATERIALS)
dielectric_tints = ti.Vector.field(3, dtype=ti.f32, shape=MAX_DIELECTRIC_MATERIALS)
num_dielectric_materials = ti.field(dtype=ti.i32, shape=())


def clear_dielectric_materials() -> None:
    """Clear all dielectric materials.

    Resets the material count to zero. Existing data in the field will be
    overwritten when new materials are added.
    """
    num_dielectric_materials[None] = 0


def add_dielectric_material(material: Dielectric) -> int:
    """Add a dielectric material to the material registry.

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
    """
    idx = num_dielectric_materials[None]
    if idx >= MAX_DIELECTRIC_MATERIALS:
        raise RuntimeError(
            f"Maximum number of dielectric materials ({MAX_DIELECTRIC_MATERIALS}) exceeded"
        )

    tint = material.tint
    dielectric_iors[idx] = float(material.ior)
    dielectric_tints[idx] = vec3(tint[0], tint[1], tint[2])
    num_dielectric_materials[None] = idx + 1
    return idx


def get_dielectric_material_count() -> int:
    """Get the number of dielectric materials in the registry."""
    return int(num_dielectric_materials[None])


@ti.func
def get_dielectric_ior(material_idx: ti.i32) -> ti.f32:
    return dielectric_iors[material_idx]


@ti.func
def get_dielectric_tint(material_idx: ti.i32) -> vec3:
    return dielectric_tints[material_idx]


@ti.func
def interact_dielectric_by_id(
    material_idx: ti.i32,
    incoming: vec3,
    normal: vec3,
    state: ti.u32,
):
    """Look up a registered dielectric material and scatter off it."""
    return interact_dielectric(
        get_dielectric_ior(material_idx),
        get_dielectric_tint(material_idx),
        incoming,
        normal,
        state,
    )
