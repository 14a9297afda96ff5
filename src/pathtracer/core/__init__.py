"""Core rendering module.

This module contains the fundamental building blocks for path tracing:

Components:
    ray: Ray data structure and vector utilities
    linalg: NumPy vector helpers used while building scenes
    sampler: Deterministic per-unit random number generation
    integrator: The path tracing estimator
    render: Work-unit render driver and 8-bit conversion

The core module handles the rendering equation integration. A path bounces
until it reaches a light, escapes the scene or runs out of depth, and the
per-pixel result is the mean of many such paths.
"""

from .ray import (
    Ray,
    build_onb_from_normal,
    cross,
    dot,
    length,
    length_squared,
    local_to_world,
    make_ray,
    near_zero,
    normalize,
    ray_at,
    reflect,
    refract,
    rotate,
    schlick_reflectance,
    vec3,
)
from .sampler import (
    next_state,
    next_uniform,
    random_cosine_direction,
    sample_cosine_hemisphere,
    seed_state,
)

# Note: integrator and render are NOT imported here to avoid circular imports.
# Import directly from pathtracer.core.integrator or pathtracer.core.render.

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "length",
    "length_squared",
    "normalize",
    "dot",
    "cross",
    "reflect",
    "refract",
    "rotate",
    "schlick_reflectance",
    "near_zero",
    "build_onb_from_normal",
    "local_to_world",
    "seed_state",
    "next_state",
    "next_uniform",
    "random_cosine_direction",
    "sample_cosine_hemisphere",
]
