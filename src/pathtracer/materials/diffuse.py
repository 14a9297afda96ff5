"""Diffuse (Lambertian) material implementation.

This module implements ideal diffuse reflection, where light is scattered in
all directions weighted by the cosine of the angle from the surface normal.

The BRDF is:
    f_r(wi, wo) = albedo / pi

and directions are drawn from the cosine-weighted hemisphere with:
    pdf(wi) = cos(theta) / pi

so the per-bounce weight BRDF * cos(theta) / pdf reduces to the albedo. The
attenuation returned by ``interact_diffuse`` is therefore the albedo itself and
must not be multiplied by cos(theta) again.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.materials.diffuse import interact_diffuse
    >>> # Use within a Taichi kernel:
    >>> # kind, direction, attenuation, state = interact_diffuse(
    >>> #     albedo, incoming, normal, state
    >>> # )
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from pathtracer.core.ray import near_zero
from pathtracer.core.sampler import sample_cosine_hemisphere
from pathtracer.materials.interaction import InteractionKind, validate_unit_color

vec3 = tm.vec3


@dataclass(frozen=True)
class Diffuse:
    """Diffuse material description.

    Attributes:
        albedo: The diffuse reflectance color (RGB, each component in [0, 1]).
    """

    albedo: tuple[float, float, float]

    def __post_init__(self) -> None:
        validate_unit_color("Albedo", self.albedo)


@ti.func
def eval_diffuse(albedo: vec3) -> vec3:
    """Evaluate the diffuse BRDF, albedo / pi.

    The cosine term is not included.
    """
    return albedo / tm.pi


@ti.func
def pdf_diffuse(normal: vec3, scattered_direction: vec3) -> ti.f32:
    """Compute the PDF of cosine-weighted sampling, cos(theta) / pi.

    Returns 0 for directions below the surface.
    """
    cos_theta = tm.dot(normal, scattered_direction)
    pdf = 0.0
    if cos_theta > 0.0:
        pdf = cos_theta / tm.pi
    return pdf


@ti.func
def interact_diffuse(albedo: vec3, incoming: vec3, normal: vec3, state: ti.u32):
    """Scatter a ray off a diffuse surface.

    The normal is first turned to face the incoming ray, so surfaces are lit
    from whichever side the ray arrives on.

    Args:
        albedo: The diffuse reflectance color (RGB).
        incoming: The incoming ray direction.
        normal: The geometric surface normal (unit length).
        state: The current random state.

    Returns:
        A tuple (kind, direction, attenuation, state) with kind SCATTER and
        attenuation equal to the albedo.
    """
    facing = normal
    if tm.dot(incoming, normal) > 0.0:
        facing = -normal

    s, direction, _pdf = sample_cosine_hemisphere(facing, state)
    if near_zero(direction):
        direction = facing

    return int(InteractionKind.SCATTER), direction, albedo, s


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

MAX_DIFFUSE_MATERIALS = 256

diffuse_albedos = ti.Vector.field(3, dtype=ti.f32, shape=MAX_DIFFUSE_MATERIALS)
num_diffuse_materials = ti.field(dtype=ti.i32, shape=())


def clear_diffuse_materials() -> None:
    """Clear all diffuse materials.

    Resets the material count to zero. Existing data in the field will be
    overwritten when new materials are added.
    """
    num_diffuse_materials[None] = 0


def add_diffuse_material(material: Diffuse) -> int:
    """Add a diffuse material to the material registry.

    Args:
        material: The material description.

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
    """
    idx = num_diffuse_materials[None]
    if idx >= MAX_DIFFUSE_MATERIALS:
        raise RuntimeError(
            f"Maximum number of diffuse materials ({MAX_DIFFUSE_MATERIALS}) exceeded"
        )

    albedo = material.albedo
    diffuse_albedos[idx] = vec3(albedo[0], albedo[1], albedo[2])
    num_diffuse_materials[None] = idx + 1
    return idx


def get_diffuse_material_count() -> int:
    """Get the number of diffuse materials in the registry."""
    return int(num_diffuse_materials[None])


@ti.func
def get_diffuse_albedo(material_idx: ti.i32) -> vec3:
    return diffuse_albedos[material_idx]


@ti.func
def interact_diffuse_by_id(material_idx: ti.i32, incoming: vec3, normal: vec3, state: ti.u32):
    """Look up a registered diffuse material and scatter off it."""
    return interact_diffuse(get_diffuse_albedo(material_idx), incoming, normal, state)
