"""Unified scene manager for coordinating objects and materials.

This module provides a high-level scene management API that coordinates
shape storage (planes, spheres, triangles, prisms, rectangles) with material
assignment. It tracks which material type (Diffuse, Mirror, Dielectric,
Light) each material ID corresponds to, enabling material dispatch in the
path tracer.

The SceneManager maintains:
- A unified material_id space across all material types
- Mapping from material_id to (material_type, type_local_index)
- A dense object_id space, each object pointing at one material_id
- Scene serialization/configuration support

Material ids are only checked when an object is added; kernels index the
arenas directly.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> red = scene.add_diffuse_material(albedo=(0.8, 0.3, 0.3))
    >>> scene.add_sphere(center=(0, 0, -1), radius=0.5, material_id=red)
    0
"""

import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Union

import taichi as ti

from pathtracer.core.linalg import as_tuple
from pathtracer.geometry.plane import PlaneShape
from pathtracer.geometry.prism import PrismShape
from pathtracer.geometry.rectangle import RectangleShape
from pathtracer.geometry.sphere import SphereShape
from pathtracer.geometry.triangle import TriangleShape
from pathtracer.materials.dielectric import (
    Dielectric,
    IndexOfRefraction,
    add_dielectric_material,
    clear_dielectric_materials,
)
from pathtracer.materials.diffuse import (
    Diffuse,
    add_diffuse_material,
    clear_diffuse_materials,
)
from pathtracer.materials.light import (
    Light,
    add_light_material,
    clear_light_materials,
)
from pathtracer.materials.mirror import (
    Mirror,
    add_mirror_material,
    clear_mirror_materials,
)
from pathtracer.scene.intersection import (
    MAX_OBJECTS,
    ShapeType,
    add_plane,
    add_prism,
    add_rectangle,
    add_sphere,
    add_triangle,
    clear_scene,
    get_object_count,
)

logger = logging.getLogger(__name__)

Material = Union[Diffuse, Mirror, Dielectric, Light]
Shape = Union[PlaneShape, SphereShape, TriangleShape, PrismShape, RectangleShape]


class MaterialType(IntEnum):
    """Enumeration of supported material types.

    Used for material dispatch in the path tracer to determine which
    interaction function to call.
    """

    DIFFUSE = 0
    MIRROR = 1
    DIELECTRIC = 2
    LIGHT = 3


# Maximum number of materials across all types
MAX_MATERIALS = 1024  # 256 per type * 4 types

# material_types[i] stores the MaterialType for material_id i
material_types = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
# material_type_indices[i] stores the type-local index for material_id i
material_type_indices = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())

_MATERIAL_REGISTRIES = {
    Diffuse: (MaterialType.DIFFUSE, add_diffuse_material),
    Mirror: (MaterialType.MIRROR, add_mirror_material),
    Dielectric: (MaterialType.DIELECTRIC, add_dielectric_material),
    Light: (MaterialType.LIGHT, add_light_material),
}

_SHAPE_REGISTRIES = {
    PlaneShape: (ShapeType.PLANE, add_plane),
    SphereShape: (ShapeType.SPHERE, add_sphere),
    TriangleShape: (ShapeType.TRIANGLE, add_triangle),
    PrismShape: (ShapeType.PRISM, add_prism),
    RectangleShape: (ShapeType.RECTANGLE, add_rectangle),
}


def _clear_material_tracking() -> None:
    """Clear the material tracking fields."""
    num_materials[None] = 0


@ti.func
def get_material_type(material_id: ti.i32) -> ti.i32:
    """Get the material type for a given material ID.

    Args:
        material_id: The unified material ID. Not range checked.

    Returns:
        The material type as an integer (see MaterialType enum).
    """
    return material_types[material_id]


@ti.func
def get_material_type_index(material_id: ti.i32) -> ti.i32:
    """Get the type-local index for a given material ID.

    This is used to look up material properties in the type-specific
    material arrays (e.g., diffuse_albedos[type_index]).
    """
    return material_type_indices[material_id]


@dataclass
class MaterialInfo:
    """Information about a registered material.

    Attributes:
        material_id: The unified material ID.
        material_type: The type of material.
        type_index: The index within the type-specific material array.
        material: The material description as provided.
    """

    material_id: int
    material_type: MaterialType
    type_index: int
    material: Material


@dataclass
class ObjectInfo:
    """Information about an object in the scene.

    Attributes:
        object_id: The object id, equal to its insertion order.
        shape_type: The type of shape.
        shape: The shape description as provided.
        material_id: The material ID assigned to the object.
    """

    object_id: int
    shape_type: ShapeType
    shape: Shape
    material_id: int


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        materials: List of material configurations, in material_id order.
        objects: List of object configurations, in object_id order.
    """

    materials: list[dict[str, Any]] = field(default_factory=list)
    objects: list[dict[str, Any]] = field(default_factory=list)


def _material_to_dict(info: MaterialInfo) -> dict[str, Any]:
    material = info.material
    config: dict[str, Any] = {"type": info.material_type.name.lower()}
    if isinstance(material, (Diffuse, Mirror)):
        config["albedo"] = list(material.albedo)
    elif isinstance(material, Dielectric):
        config["ior"] = float(material.ior)
        config["tint"] = list(material.tint)
    elif isinstance(material, Light):
        config["color"] = list(material.color)
        config["power"] = material.power
    return config


def _material_from_dict(config: dict[str, Any]) -> Material:
    mat_type = config.get("type", "").lower()
    if mat_type == "diffuse":
        return Diffuse(albedo=as_tuple(config.get("albedo", [0.5, 0.5, 0.5])))
    if mat_type == "mirror":
        return Mirror(albedo=as_tuple(config.get("albedo", [1.0, 1.0, 1.0])))
    if mat_type == "dielectric":
        return Dielectric(
            ior=config.get("ior", float(IndexOfRefraction.CROWN_GLASS)),
            tint=as_tuple(config.get("tint", [1.0, 1.0, 1.0])),
        )
    if mat_type == "light":
        return Light(
            color=as_tuple(config.get("color", [1.0, 1.0, 1.0])),
            power=config.get("power", 1.0),
        )
    raise ValueError(f"Unknown material type: {mat_type}")


def _triangle_to_dict(tri: TriangleShape) -> dict[str, Any]:
    return {"v0": list(tri.v0), "edge1": list(tri.edge1), "edge2": list(tri.edge2)}


def _triangle_from_dict(config: dict[str, Any]) -> TriangleShape:
    return TriangleShape(
        v0=as_tuple(config["v0"]),
        edge1=as_tuple(config["edge1"]),
        edge2=as_tuple(config["edge2"]),
    )


def _object_to_dict(info: ObjectInfo) -> dict[str, Any]:
    shape = info.shape
    config: dict[str, Any] = {"shape": info.shape_type.name.lower()}
    if isinstance(shape, PlaneShape):
        config["center"] = list(shape.center)
        config["normal"] = list(shape.normal)
    elif isinstance(shape, SphereShape):
        config["center"] = list(shape.center)
        config["radius_squared"] = shape.radius_squared
    elif isinstance(shape, TriangleShape):
        config.update(_triangle_to_dict(shape))
    elif isinstance(shape, PrismShape):
        config["triangles"] = [_triangle_to_dict(tri) for tri in shape.triangles]
    elif isinstance(shape, RectangleShape):
        config["min"] = list(shape.min_corner)
        config["max"] = list(shape.max_corner)
        config["normal"] = list(shape.normal)
    config["material_id"] = info.material_id
    return config


def _object_from_dict(config: dict[str, Any]) -> Shape:
    shape_type = config.get("shape", "").lower()
    if shape_type == "plane":
        return PlaneShape.create(config["center"], config["normal"])
    if shape_type == "sphere":
        return SphereShape(
            center=as_tuple(config["center"]),
            radius_squared=float(config["radius_squared"]),
        )
    if shape_type == "triangle":
        return _triangle_from_dict(config)
    if shape_type == "prism":
        return PrismShape(
            triangles=tuple(_triangle_from_dict(tri) for tri in config["triangles"])
        )
    if shape_type == "rectangle":
        return RectangleShape.create(config["min"], config["max"], config["normal"])
    raise ValueError(f"Unknown shape type: {shape_type}")


class SceneManager:
    """Unified scene manager coordinating objects and materials.

    The SceneManager provides a high-level API for building scenes with
    automatic material tracking. It maintains a unified material_id space
    that maps to type-specific material registries, and an object_id space
    that maps to type-specific shape storage.

    The Taichi fields behind the scene are module-level, so only one scene
    is live at a time. Creating a SceneManager clears them.

    Attributes:
        materials: MaterialInfo for all registered materials.
        objects: ObjectInfo for all objects in the scene.

    Example:
        >>> scene = SceneManager()
        >>> white = scene.add_diffuse_material(albedo=(0.8, 0.8, 0.8))
        >>> lamp = scene.add_light_material(color=(1, 1, 1), power=5.0)
        >>> scene.add_plane((0, -1, 0), (0, 1, 0), white)
        0
        >>> scene.add_sphere((0, 3, -3), 1.0, lamp)
        1
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.materials: list[MaterialInfo] = []
        self.objects: list[ObjectInfo] = []
        self._clear_all()

    def _clear_all(self) -> None:
        """Clear all scene data including Taichi fields."""
        clear_scene()
        clear_diffuse_materials()
        clear_mirror_materials()
        clear_dielectric_materials()
        clear_light_materials()
        _clear_material_tracking()
        self.materials.clear()
        self.objects.clear()

    def clear(self) -> None:
        """Clear the entire scene (objects and materials)."""
        self._clear_all()

    # =========================================================================
    # Material Management
    # =========================================================================

    def add_material(self, material: Material) -> int:
        """Register a material and return its unified material ID.

        Args:
            material: A Diffuse, Mirror, Dielectric or Light description.

        Returns:
            The unified material ID.

        Raises:
            TypeError: If the material is not one of the supported types.
            RuntimeError: If the maximum number of materials is exceeded.
        """
        registry = _MATERIAL_REGISTRIES.get(type(material))
        if registry is None:
            raise TypeError(f"Unsupported material: {material!r}")
        material_type, add_to_registry = registry

        material_id = num_materials[None]
        if material_id >= MAX_MATERIALS:
            raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

        type_index = add_to_registry(material)

        material_types[material_id] = int(material_type)
        material_type_indices[material_id] = type_index
        num_materials[None] = material_id + 1

        self.materials.append(
            MaterialInfo(
                material_id=material_id,
                material_type=material_type,
                type_index=type_index,
                material=material,
            )
        )
        logger.debug("Added %s material %d: %r", material_type.name, material_id, material)
        return material_id

    def add_diffuse_material(self, albedo: tuple[float, float, float]) -> int:
        """Add a diffuse material.

        Raises:
            ValueError: If any albedo component is outside [0, 1].
        """
        return self.add_material(Diffuse(albedo=as_tuple(albedo)))

    def add_mirror_material(self, albedo: tuple[float, float, float] = (1.0, 1.0, 1.0)) -> int:
        """Add a mirror material.

        Raises:
            ValueError: If any albedo component is outside [0, 1].
        """
        return self.add_material(Mirror(albedo=as_tuple(albedo)))

    def add_dielectric_material(
        self,
        ior: float = IndexOfRefraction.CROWN_GLASS,
        tint: tuple[float, float, float] = (1.0, 1.0, 1.0),
    ) -> int:
        """Add a dielectric material.

        Args:
            ior: Index of refraction. Default is crown glass (1.52).
            tint: Attenuation color of the glass. Default is clear.

        Raises:
            ValueError: If IOR is less than 1.0 or a tint component is
                outside [0, 1].
        """
        return self.add_material(Dielectric(ior=ior, tint=as_tuple(tint)))

    def add_light_material(
        self,
        color: tuple[float, float, float] = (1.0, 1.0, 1.0),
        power: float = 1.0,
    ) -> int:
        """Add a light material emitting color * power.

        Raises:
            ValueError: If a color component or the power is negative.
        """
        return self.add_material(Light(color=as_tuple(color), power=power))

    def get_material_count(self) -> int:
        """Get the total number of materials in the scene."""
        return int(num_materials[None])

    def get_material_info(self, material_id: int) -> MaterialInfo | None:
        """Get information about a material by ID, or None if not found."""
        if 0 <= material_id < len(self.materials):
            return self.materials[material_id]
        return None

    def get_material_type_python(self, material_id: int) -> MaterialType | None:
        """Get the material type for a given material ID (Python side).

        For kernel-side lookup, use the get_material_type() Taichi function.
        """
        info = self.get_material_info(material_id)
        return info.material_type if info is not None else None

    # =========================================================================
    # Object Management
    # =========================================================================

    def add_object(self, shape: Shape, material_id: int) -> int:
        """Add a shape to the scene with an existing material.

        Args:
            shape: A PlaneShape, SphereShape, TriangleShape, PrismShape or
                RectangleShape.
            material_id: A unified material ID returned by add_material.

        Returns:
            The object id, which equals the object's insertion order.

        Raises:
            ValueError: If material_id is invalid.
            TypeError: If the shape is not one of the supported types.
            RuntimeError: If a capacity is exceeded.
        """
        if material_id < 0 or material_id >= num_materials[None]:
            raise ValueError(f"Invalid material_id: {material_id}")
        registry = _SHAPE_REGISTRIES.get(type(shape))
        if registry is None:
            raise TypeError(f"Unsupported shape: {shape!r}")
        shape_type, add_to_storage = registry

        object_id = add_to_storage(shape, material_id)
        self.objects.append(
            ObjectInfo(
                object_id=object_id,
                shape_type=shape_type,
                shape=shape,
                material_id=material_id,
            )
        )
        logger.debug(
            "Added %s object %d with material %d", shape_type.name, object_id, material_id
        )
        return object_id

    def add_plane(
        self,
        center: tuple[float, float, float],
        normal: tuple[float, float, float],
        material_id: int,
    ) -> int:
        """Add a plane through ``center``. The normal is normalized."""
        return self.add_object(PlaneShape.create(center, normal), material_id)

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        material_id: int,
    ) -> int:
        """Add a sphere.

        Raises:
            ValueError: If radius is zero or material_id is invalid.
        """
        return self.add_object(SphereShape.create(center, radius), material_id)

    def add_triangle(
        self,
        v0: tuple[float, float, float],
        v1: tuple[float, float, float],
        v2: tuple[float, float, float],
        material_id: int,
    ) -> int:
        """Add a triangle; its normal follows the (v0, v1, v2) winding."""
        return self.add_object(TriangleShape.from_points(v0, v1, v2), material_id)

    def add_prism(self, prism: PrismShape, material_id: int) -> int:
        return self.add_object(prism, material_id)

    def add_rectangle(
        self,
        min_corner: tuple[float, float, float],
        max_corner: tuple[float, float, float],
        normal: tuple[float, float, float],
        material_id: int,
    ) -> int:
        """Add a rectangle spanning the box [min_corner, max_corner].

        Raises:
            ValueError: If the normal is zero, the corners are inverted or
                material_id is invalid.
        """
        return self.add_object(RectangleShape.create(min_corner, max_corner, normal), material_id)

    def material_for(self, object_id: int) -> int:
        """Get the material ID of an object (Python side).

        Raises:
            IndexError: If the object id is unknown.
        """
        if not 0 <= object_id < len(self.objects):
            raise IndexError(f"Invalid object_id: {object_id}")
        return self.objects[object_id].material_id

    # =========================================================================
    # Scene Queries
    # =========================================================================

    def get_object_count(self) -> int:
        """Get the number of objects in the scene."""
        return get_object_count()

    def count_objects(self, shape_type: ShapeType) -> int:
        """Get the number of objects of one shape type."""
        return sum(1 for obj in self.objects if obj.shape_type == shape_type)

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a configuration object."""
        return SceneConfig(
            materials=[_material_to_dict(mat) for mat in self.materials],
            objects=[_object_to_dict(obj) for obj in self.objects],
        )

    def from_config(self, config: SceneConfig) -> None:
        """Load a scene from a configuration object.

        Clears the current scene and loads the configuration. Material ids
        are reassigned in list order, so object material_id references stay
        valid.

        Raises:
            ValueError: If the configuration contains invalid data.
        """
        self.clear()

        # Materials first, objects refer to them
        for mat_config in config.materials:
            self.add_material(_material_from_dict(mat_config))

        for obj_config in config.objects:
            material_id = obj_config.get("material_id", 0)
            self.add_object(_object_from_dict(obj_config), material_id)

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization)."""
        config = self.to_config()
        return {
            "materials": config.materials,
            "objects": config.objects,
        }

    def from_dict(self, data: dict[str, Any]) -> None:
        """Load a scene from a dictionary with 'materials' and 'objects' keys."""
        config = SceneConfig(
            materials=data.get("materials", []),
            objects=data.get("objects", []),
        )
        self.from_config(config)

    # =========================================================================
    # Capacity Information
    # =========================================================================

    @staticmethod
    def get_max_objects() -> int:
        """Get the maximum number of objects supported."""
        return MAX_OBJECTS

    @staticmethod
    def get_max_materials() -> int:
        """Get the maximum number of materials supported."""
        return MAX_MATERIALS
