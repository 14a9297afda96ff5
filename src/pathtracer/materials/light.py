"""Light (emissive) material implementation.

A light terminates the path that reaches it and contributes

    emission = color * power

weighted by the path throughput accumulated so far. Lights do not scatter
and consume no randomness. Emission is the same from both sides of a
surface.
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from pathtracer.materials.interaction import InteractionKind

vec3 = tm.vec3


@dataclass(frozen=True)
class Light:
    """Light material description.

    Attributes:
        color: The emission color as (R, G, B). Components must be
            non-negative and may exceed 1.0.
        power: Scalar emission strength. Must be non-negative.
    """

    color: tuple[float, float, float] = (1.0, 1.0, 1.0)
    power: float = 1.0

    def __post_init__(self) -> None:
        if len(self.color) != 3:
            raise ValueError(f"Light color must have 3 components, got {len(self.color)}")
        for i, component in enumerate(self.color):
            if component < 0.0:
                raise ValueError(
                    f"Light color component {i} = {component} is negative. "
                    "Emission values must be non-negative."
                )
        if self.power < 0.0:
            raise ValueError(f"Light power = {self.power} is negative")

    @property
    def emission(self) -> tuple[float, float, float]:
        c = self.color
        return (c[0] * self.power, c[1] * self.power, c[2] * self.power)


@ti.func
def interact_light(emission: vec3, state: ti.u32):
    """Terminate a path on a light.

    Returns:
        A tuple (kind, direction, attenuation, state) with kind EMIT and the
        emitted radiance in the attenuation slot. The state is unchanged.
    """
    return int(InteractionKind.EMIT), vec3(0.0, 0.0, 0.0), emission, state


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

MAX_LIGHT_MATERIALS = 256

# Premultiplied color * power
light_emissions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHT_MATERIALS)
num_light_materials = ti.field(dtype=ti.i32, shape=())


def clear_light_materials() -> None:
    """Clear all light materials."""
    num_light_materials[None] = 0


def add_light_material(material: Light) -> int:
    """Add a light material to the material registry.

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
    """
    idx = num_light_materials[None]
    if idx >= MAX_LIGHT_MATERIALS:
        raise RuntimeError(
            f"Maximum number of light materials ({MAX_LIGHT_MATERIALS}) exceeded"
        )

    emission = material.emission
    light_emissions[idx] = vec3(emission[0], emission[1], emission[2])
    num_light_materials[None] = idx + 1
    return idx


def get_light_material_count() -> int:
    """Get the number of light materials in the registry."""
    return int(num_light_materials[None])


@ti.func
def get_light_emission(material_idx: ti.i32) -> vec3:
    """Get the emitted radiance (color * power) of a light by index."""
    return light_emissions[material_idx]


@ti.func
def interact_light_by_id(material_idx: ti.i32, state: ti.u32):
    return interact_light(get_light_emission(material_idx), state)
