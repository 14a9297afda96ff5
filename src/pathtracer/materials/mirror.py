"""Mirror (perfect specular) material implementation.

A mirror reflects the incoming direction about the surface normal:
    R = I - 2(I . N)N

and tints the reflected light by its albedo. The interaction consumes no
randomness, so the random state passes through unchanged.
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from pathtracer.core.ray import reflect
from pathtracer.materials.interaction import InteractionKind, validate_unit_color

vec3 = tm.vec3


@dataclass(frozen=True)
class Mirror:
    """Mirror material description.

    Attributes:
        albedo: The reflective color (RGB, each component in [0, 1]).
    """

    albedo: tuple[float, float, float] = (1.0, 1.0, 1.0)

    def __post_init__(self) -> None:
        validate_unit_color("Albedo", self.albedo)


@ti.func
def interact_mirror(albedo: vec3, incoming: vec3, normal: vec3, state: ti.u32):
    """Reflect a ray off a mirror.

    The reflection formula is symmetric in the sign of the normal, so the
    normal does not need to face the ray.

    Returns:
        A tuple (kind, direction, attenuation, state) with kind SCATTER.
    """
    direction = tm.normalize(reflect(incoming, normal))
    return int(InteractionKind.SCATTER), direction, albedo, state


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

MAX_MIRROR_MATERIALS = 256

mirror_albedos = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MIRROR_MATERIALS)
num_mirror_materials = ti.field(dtype=ti.i32, shape=())


def clear_mirror_materials() -> None:
    """Clear all mirror materials."""
    num_mirror_materials[None] = 0


def add_mirror_material(material: Mirror) -> int:
    """Add a mirror material to the material registry.

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
    """
    idx = num_mirror_materials[None]
    if idx >= MAX_MIRROR_MATERIALS:
        raise RuntimeError(
            f"Maximum number of mirror materials ({MAX_MIRROR_MATERIALS}) exceeded"
        )

    albedo = material.albedo
    mirror_albedos[idx] = vec3(albedo[0], albedo[1], albedo[2])
    num_mirror_materials[None] = idx + 1
    return idx


def get_mirror_material_count() -> int:
    """Get the number of mirror materials in the registry."""
    return int(num_mirror_materials[None])


@ti.func
def get_mirror_albedo(material_idx: ti.i32) -> vec3:
    return mirror_albedos[material_idx]


@ti.func
def interact_mirror_by_id(material_idx: ti.i32, incoming: vec3, normal: vec3, state: ti.u32):
    return interact_mirror(get_mirror_albedo(material_idx), incoming, normal, state)
