"""Scene module for scene management and ray-scene queries.

This module handles scene representation and ray-scene queries:

Components:
    intersection: Shape storage, object arena and nearest-hit queries
    manager: Unified scene manager coordinating objects and materials
    presets: Demonstration scenes

Scene data is organized for efficient kernel access:
    - Structure-of-Arrays layout for geometric data
    - Dense object and material arenas indexed by id
"""

from .intersection import (
    MAX_OBJECTS,
    MAX_PLANES,
    MAX_PRISMS,
    MAX_RECTANGLES,
    MAX_SPHERES,
    MAX_TRIANGLES,
    SceneHitRecord,
    ShapeType,
    clear_scene,
    get_material_for_object,
    get_object_count,
    get_shape_counts,
    intersect_scene,
)
from .manager import (
    MAX_MATERIALS,
    MaterialInfo,
    MaterialType,
    ObjectInfo,
    SceneConfig,
    SceneManager,
    get_material_type,
    get_material_type_index,
)
from .presets import (
    PRESETS,
    default_camera,
    glass_prism,
    mirrored_prism,
    single_sphere_and_light,
    spheres,
)

__all__ = [
    # Intersection module
    "SceneHitRecord",
    "ShapeType",
    "clear_scene",
    "get_material_for_object",
    "get_object_count",
    "get_shape_counts",
    "intersect_scene",
    "MAX_OBJECTS",
    "MAX_PLANES",
    "MAX_SPHERES",
    "MAX_TRIANGLES",
    "MAX_PRISMS",
    "MAX_RECTANGLES",
    # Manager module
    "SceneManager",
    "MaterialType",
    "MaterialInfo",
    "ObjectInfo",
    "SceneConfig",
    "MAX_MATERIALS",
    "get_material_type",
    "get_material_type_index",
    # Presets
    "PRESETS",
    "default_camera",
    "spheres",
    "mirrored_prism",
    "glass_prism",
    "single_sphere_and_light",
]
