"""Path tracing integrator for Monte Carlo light transport.

This module implements the per-path estimator of the rendering equation. A
path starts at the camera and bounces through the scene:

    TRACING  -> intersect the scene
      miss   -> the path contributes black
      hit    -> INTERACT with the surface material
        SCATTER -> throughput *= attenuation, continue from the hit point
        EMIT    -> the path contributes throughput * emitted radiance

A path that is still scattering after ``max_depth`` bounces contributes
black. There is no next-event estimation and no Russian roulette, so a path
only gathers light by landing on an emitter.

The next ray starts exactly at the hit point; self-intersection is avoided
by the t_min of the scene query.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.core.integrator import trace_path
    >>> # Use within a Taichi kernel:
    >>> # color, state = trace_path(origin, direction, 25, 1e-3, 1e10, state)
"""

import taichi as ti
import taichi.math as tm

from pathtracer.materials.dielectric import interact_dielectric_by_id
from pathtracer.materials.diffuse import interact_diffuse_by_id
from pathtracer.materials.interaction import InteractionKind
from pathtracer.materials.light import interact_light_by_id
from pathtracer.materials.mirror import interact_mirror_by_id
from pathtracer.scene.intersection import get_material_for_object, intersect_scene
from pathtracer.scene.manager import (
    MaterialType,
    get_material_type,
    get_material_type_index,
)

vec3 = tm.vec3

BACKGROUND_COLOR = vec3(0.0, 0.0, 0.0)

# =============================================================================
# Material Dispatch
# =============================================================================


@ti.func
def interact_material(material_id: ti.i32, incoming: vec3, normal: vec3, state: ti.u32):
    """Dispatch to the interaction function of a material.

    Args:
        material_id: The unified material ID.
        incoming: The incoming ray direction (unit length).
        normal: The geometric surface normal at the hit point.
        state: The current random state.

    Returns:
        A tuple (kind, direction, attenuation, state).
    """
    mat_type = get_material_type(material_id)
    type_index = get_material_type_index(material_id)

    kind = int(InteractionKind.SCATTER)
    direction = vec3(0.0, 0.0, 0.0)
    attenuation = vec3(0.0, 0.0, 0.0)
    s = state

    if mat_type == int(MaterialType.DIFFUSE):
        kind, direction, attenuation, s = interact_diffuse_by_id(type_index, incoming, normal, s)
    elif mat_type == int(MaterialType.MIRROR):
        kind, direction, attenuation, s = interact_mirror_by_id(type_index, incoming, normal, s)
    elif mat_type == int(MaterialType.DIELECTRIC):
        kind, direction, attenuation, s = interact_dielectric_by_id(
            type_index, incoming, normal, s
        )
    elif mat_type == int(MaterialType.LIGHT):
        kind, direction, attenuation, s = interact_light_by_id(type_index, s)

    return kind, direction, attenuation, s


# =============================================================================
# Path Tracing Core
# =============================================================================


@ti.func
def trace_path(
    origin: vec3,
    direction: vec3,
    max_depth: ti.i32,
    t_min: ti.f32,
    t_max: ti.f32,
    state: ti.u32,
):
    """Trace a single path from a primary ray.

    Args:
        origin: The primary ray origin.
        direction: The primary ray direction (unit length).
        max_depth: Maximum number of scene intersections along the path.
        t_min: Minimum hit distance for every scene query.
        t_max: Maximum hit distance for every scene query.
        state: The random state of the work unit.

    Returns:
        A tuple (color, state) with the radiance estimate of the path.
    """
    ray_origin = origin
    ray_direction = direction
    throughput = vec3(1.0, 1.0, 1.0)
    color = vec3(0.0, 0.0, 0.0)
    s = state

    # Active flag for path continuation (no break inside ti.func loops)
    active = 1

    for _depth in range(max_depth):
        if active == 1:
            hit_record = intersect_scene(ray_origin, ray_direction, t_min, t_max)

            if hit_record.hit == 0:
                color = throughput * BACKGROUND_COLOR
                active = 0
            else:
                material_id = get_material_for_object(hit_record.object_index)
                kind, new_direction, attenuation, s = interact_material(
                    material_id, ray_direction, hit_record.normal, s
                )

                if kind == int(InteractionKind.EMIT):
                    color = throughput * attenuation
                    active = 0
                else:
                    throughput *= attenuation
                    ray_origin = hit_record.position
                    ray_direction = new_direction

    return color, s
