"""Deterministic per-unit random number generation for Taichi kernels.

Every render work unit owns an independent random stream seeded from its flat
unit index, so the same index always reproduces the same draws and no random
state is shared between parallel threads. The global ``ti.random`` generator
is never used on the render path.

A stream is a single ``ti.u32`` state that is threaded through every function
that consumes randomness: each draw takes the current state and returns the
advanced state alongside the value.

    state = seed_state(unit_index)
    state, u = next_uniform(state)
    state, direction, pdf = sample_cosine_hemisphere(normal, state)

Seeding uses the Wang integer hash to spread consecutive indices across the
state space; draws advance with Marsaglia's xorshift32 and map the low 24
bits of the state to a float in [0, 1).
"""

import taichi as ti
import taichi.math as tm

from pathtracer.core.ray import build_onb_from_normal, local_to_world

vec3 = tm.vec3

# 2^-24: scales a 24-bit integer into [0, 1)
_INV_2_24 = 1.0 / 16777216.0


@ti.func
def seed_state(index: ti.i32) -> ti.u32:
    """Derive a non-zero xorshift state from a work unit index.

    Args:
        index: The flat work unit index.

    Returns:
        The initial random state for that unit.
    """
    s = ti.cast(index, ti.u32)
    s = (s ^ ti.u32(61)) ^ (s >> 16)
    s = s * ti.u32(9)
    s = s ^ (s >> 4)
    s = s * ti.u32(0x27D4EB2D)
    s = s ^ (s >> 15)
    # xorshift has a fixed point at zero
    if s == ti.u32(0):
        s = ti.u32(0x2545F491)
    return s


@ti.func
def next_state(state: ti.u32) -> ti.u32:
    """Advance a state by one xorshift32 step."""
    s = state
    s = s ^ (s << 13)
    s = s ^ (s >> 17)
    s = s ^ (s << 5)
    return s


@ti.func
def next_uniform(state: ti.u32):
    """Draw a uniform float in [0, 1).

    Args:
        state: The current random state.

    Returns:
        A tuple (new_state, value).
    """
    s = next_state(state)
    value = ti.cast(s & ti.u32(0x00FFFFFF), ti.f32) * _INV_2_24
    return s, value


@ti.func
def random_cosine_direction(state: ti.u32):
    """Sample a direction in a local z-up frame with density cos(theta) / pi.

    Returns:
        A tuple (new_state, direction) where direction has z >= 0.
    """
    s, r1 = next_uniform(state)
    s, r2 = next_uniform(s)
    phi = 2.0 * tm.pi * r2
    sqrt_r1 = ti.sqrt(r1)
    x = ti.cos(phi) * sqrt_r1
    y = ti.sin(phi) * sqrt_r1
    z = ti.sqrt(1.0 - r1)
    return s, vec3(x, y, z)


@ti.func
def sample_cosine_hemisphere(normal: vec3, state: ti.u32):
    """Cosine-weighted hemisphere sampling around a normal.

    Args:
        normal: The unit normal defining the hemisphere.
        state: The current random state.

    Returns:
        A tuple (new_state, direction, pdf) where direction is a unit vector
        in world space and pdf = cos(theta) / pi.
    """
    s, local_dir = random_cosine_direction(state)
    tangent, bitangent, n = build_onb_from_normal(normal)
    world_dir = tm.normalize(local_to_world(local_dir, tangent, bitangent, n))
    pdf = ti.abs(tm.dot(world_dir, normal)) / tm.pi
    return s, world_dir, pdf
