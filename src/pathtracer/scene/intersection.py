"""Scene-level ray intersection testing.

This module stores every shape in the scene in Taichi fields and answers
"what does this ray hit first?" for the integrator.

Storage has two layers:

- Per-shape-type arrays (planes, spheres, triangles, prisms, rectangles)
  holding the geometry in a Structure of Arrays layout.
- A dense object arena indexed by object id. Each object records its shape
  type, the index into that type's arrays, and its material id.

``intersect_scene`` scans the objects in insertion order, shrinking t_max to
the nearest hit found so far. A later object only replaces the current best
when it is strictly nearer, so when two objects are hit at exactly the same
distance the first one added wins.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.geometry.sphere import SphereShape
    >>> from pathtracer.scene.intersection import add_sphere, clear_scene
    >>> clear_scene()
    >>> add_sphere(SphereShape.create((0, 0, -1), 0.5), material_id=0)
    0
    >>> # Use intersect_scene within a Taichi kernel
"""

from enum import IntEnum

import taichi as ti
import taichi.math as tm

from pathtracer.geometry.plane import Plane, PlaneShape, hit_plane
from pathtracer.geometry.prism import PRISM_FACES, PrismShape, hit_prism
from pathtracer.geometry.rectangle import Rectangle, RectangleShape, hit_rectangle
from pathtracer.geometry.sphere import Sphere, SphereShape, hit_sphere
from pathtracer.geometry.triangle import Triangle, TriangleShape, hit_triangle

vec3 = tm.vec3


class ShapeType(IntEnum):
    """Enumeration of supported shape types, used for intersection dispatch."""

    PLANE = 0
    SPHERE = 1
    TRIANGLE = 2
    PRISM = 3
    RECTANGLE = 4


@ti.dataclass
class SceneHitRecord:
    """Record of the nearest ray-scene intersection.

    Attributes:
        hit: 1 if any object was hit, 0 otherwise.
        distance: The ray parameter of the hit.
        position: The hit point.
        normal: The geometric normal of the struck surface, not flipped
            toward the ray.
        object_index: The object id that was hit, -1 on a miss.
        sub_index: Which triangle of a prism was hit; 0 for other shapes.
    """

    hit: ti.i32
    distance: ti.f32
    position: vec3
    normal: vec3
    object_index: ti.i32
    sub_index: ti.i32


# Maximum number of objects and shapes supported in the scene
MAX_OBJECTS = 4096
MAX_PLANES = 1024
MAX_SPHERES = 1024
MAX_TRIANGLES = 1024
MAX_PRISMS = 256
MAX_RECTANGLES = 1024

# Object arena
object_shape_types = ti.field(dtype=ti.i32, shape=MAX_OBJECTS)
object_type_indices = ti.field(dtype=ti.i32, shape=MAX_OBJECTS)
object_material_ids = ti.field(dtype=ti.i32, shape=MAX_OBJECTS)
num_objects = ti.field(dtype=ti.i32, shape=())

# Plane storage
plane_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_PLANES)
plane_normals = ti.Vector.field(3, dtype=ti.f32, shape=MAX_PLANES)
num_planes = ti.field(dtype=ti.i32, shape=())

# Sphere storage
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii_squared = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Triangle storage
triangle_v0s = ti.Vector.field(3, dtype=ti.f32, shape=MAX_TRIANGLES)
triangle_edge1s = ti.Vector.field(3, dtype=ti.f32, shape=MAX_TRIANGLES)
triangle_edge2s = ti.Vector.field(3, dtype=ti.f32, shape=MAX_TRIANGLES)
num_triangles = ti.field(dtype=ti.i32, shape=())

# Prism storage: one row of PRISM_FACES triangles per prism
prism_v0s = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_PRISMS, PRISM_FACES))
prism_edge1s = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_PRISMS, PRISM_FACES))
prism_edge2s = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_PRISMS, PRISM_FACES))
num_prisms = ti.field(dtype=ti.i32, shape=())

# Rectangle storage
rectangle_mins = ti.Vector.field(3, dtype=ti.f32, shape=MAX_RECTANGLES)
rectangle_maxs = ti.Vector.field(3, dtype=ti.f32, shape=MAX_RECTANGLES)
rectangle_normals = ti.Vector.field(3, dtype=ti.f32, shape=MAX_RECTANGLES)
num_rectangles = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Clear all objects and shapes from the scene.

    Resets the counts to zero. The actual field data is not cleared but will
    be overwritten when new objects are added.
    """
    num_objects[None] = 0
    num_planes[None] = 0
    num_spheres[None] = 0
    num_triangles[None] = 0
    num_prisms[None] = 0
    num_rectangles[None] = 0


def _next_slot(counter, capacity: int, name: str) -> int:
    idx = counter[None]
    if idx >= capacity:
        raise RuntimeError(f"Maximum number of {name} ({capacity}) exceeded")
    return idx


def _register_object(shape_type: ShapeType, type_index: int, material_id: int) -> int:
    object_id = _next_slot(num_objects, MAX_OBJECTS, "objects")
    object_shape_types[object_id] = int(shape_type)
    object_type_indices[object_id] = type_index
    object_material_ids[object_id] = material_id
    num_objects[None] = object_id + 1
    return object_id


def _vec(v) -> vec3:
    return vec3(v[0], v[1], v[2])


def add_plane(shape: PlaneShape, material_id: int = 0) -> int:
    """Add a plane to the scene.

    Returns:
        The object id of the added plane.

    Raises:
        RuntimeError: If the plane or object capacity is exceeded.
    """
    idx = _next_slot(num_planes, MAX_PLANES, "planes")
    _next_slot(num_objects, MAX_OBJECTS, "objects")
    plane_centers[idx] = _vec(shape.center)
    plane_normals[idx] = _vec(shape.normal)
    num_planes[None] = idx + 1
    return _register_object(ShapeType.PLANE, idx, material_id)


def add_sphere(shape: SphereShape, material_id: int = 0) -> int:
    """Add a sphere to the scene.

    Returns:
        The object id of the added sphere.

    Raises:
        RuntimeError: If the sphere or object capacity is exceeded.
    """
    idx = _next_slot(num_spheres, MAX_SPHERES, "spheres")
    _next_slot(num_objects, MAX_OBJECTS, "objects")
    sphere_centers[idx] = _vec(shape.center)
    sphere_radii_squared[idx] = shape.radius_squared
    num_spheres[None] = idx + 1
    return _register_object(ShapeType.SPHERE, idx, material_id)


def add_triangle(shape: TriangleShape, material_id: int = 0) -> int:
    """Add a triangle to the scene.

    Returns:
        The object id of the added triangle.

    Raises:
        RuntimeError: If the triangle or object capacity is exceeded.
    """
    idx = _next_slot(num_triangles, MAX_TRIANGLES, "triangles")
    _next_slot(num_objects, MAX_OBJECTS, "objects")
    triangle_v0s[idx] = _vec(shape.v0)
    triangle_edge1s[idx] = _vec(shape.edge1)
    triangle_edge2s[idx] = _vec(shape.edge2)
    num_triangles[None] = idx + 1
    return _register_object(ShapeType.TRIANGLE, idx, material_id)


def add_prism(shape: PrismShape, material_id: int = 0) -> int:
    """Add a prism to the scene as one object.

    Returns:
        The object id of the added prism.

    Raises:
        RuntimeError: If the prism or object capacity is exceeded.
    """
    idx = _next_slot(num_prisms, MAX_PRISMS, "prisms")
    _next_slot(num_objects, MAX_OBJECTS, "objects")
    for face, tri in enumerate(shape.triangles):
        prism_v0s[idx, face] = _vec(tri.v0)
        prism_edge1s[idx, face] = _vec(tri.edge1)
        prism_edge2s[idx, face] = _vec(tri.edge2)
    num_prisms[None] = idx + 1
    return _register_object(ShapeType.PRISM, idx, material_id)


def add_rectangle(shape: RectangleShape, material_id: int = 0) -> int:
    """Add a rectangle to the scene.

    Returns:
        The object id of the added rectangle.

    Raises:
        RuntimeError: If the rectangle or object capacity is exceeded.
    """
    idx = _next_slot(num_rectangles, MAX_RECTANGLES, "rectangles")
    _next_slot(num_objects, MAX_OBJECTS, "objects")
    rectangle_mins[idx] = _vec(shape.min_corner)
    rectangle_maxs[idx] = _vec(shape.max_corner)
    rectangle_normals[idx] = _vec(shape.normal)
    num_rectangles[None] = idx + 1
    return _register_object(ShapeType.RECTANGLE, idx, material_id)


def get_object_count() -> int:
    """Get the number of objects in the scene."""
    return int(num_objects[None])


def get_shape_counts() -> dict[str, int]:
    """Get the number of stored shapes of each type."""
    return {
        "planes": int(num_planes[None]),
        "spheres": int(num_spheres[None]),
        "triangles": int(num_triangles[None]),
        "prisms": int(num_prisms[None]),
        "rectangles": int(num_rectangles[None]),
    }


@ti.func
def get_material_for_object(object_index: ti.i32) -> ti.i32:
    """Get the material id of an object. The index is not range checked."""
    return object_material_ids[object_index]


@ti.func
def _make_miss_record() -> SceneHitRecord:
    return SceneHitRecord(
        hit=0,
        distance=0.0,
        position=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        object_index=-1,
        sub_index=0,
    )


@ti.func
def intersect_scene(
    ray_origin: vec3,
    ray_direction: vec3,
    t_min: ti.f32,
    t_max: ti.f32,
) -> SceneHitRecord:
    """Find the nearest object hit by a ray.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction of the ray. Must be unit length for
            spheres to be tested correctly.
        t_min: Minimum t value of a valid hit (inclusive).
        t_max: Maximum t value of a valid hit (exclusive).

    Returns:
        A SceneHitRecord for the nearest hit, or a miss record.
    """
    closest_t = t_max
    result = _make_miss_record()

    for obj in range(num_objects[None]):
        shape_type = object_shape_types[obj]
        idx = object_type_indices[obj]

        # Each hit_* only reports t < closest_t, so ties keep the earlier object
        did_hit = 0
        distance = 0.0
        position = vec3(0.0, 0.0, 0.0)
        normal = vec3(0.0, 0.0, 0.0)
        sub_index = 0

        if shape_type == int(ShapeType.PLANE):
            plane = Plane(center=plane_centers[idx], normal=plane_normals[idx])
            rec = hit_plane(ray_origin, ray_direction, plane, t_min, closest_t)
            did_hit, distance, position, normal = rec.hit, rec.distance, rec.position, rec.normal
        elif shape_type == int(ShapeType.SPHERE):
            sphere = Sphere(center=sphere_centers[idx], radius_squared=sphere_radii_squared[idx])
            rec = hit_sphere(ray_origin, ray_direction, sphere, t_min, closest_t)
            did_hit, distance, position, normal = rec.hit, rec.distance, rec.position, rec.normal
        elif shape_type == int(ShapeType.TRIANGLE):
            tri = Triangle(
                v0=triangle_v0s[idx], edge1=triangle_edge1s[idx], edge2=triangle_edge2s[idx]
            )
            rec = hit_triangle(ray_origin, ray_direction, tri, t_min, closest_t)
            did_hit, distance, position, normal = rec.hit, rec.distance, rec.position, rec.normal
        elif shape_type == int(ShapeType.PRISM):
            rec = hit_prism(
                ray_origin,
                ray_direction,
                prism_v0s,
                prism_edge1s,
                prism_edge2s,
                idx,
                t_min,
                closest_t,
            )
            did_hit, distance, position, normal = rec.hit, rec.distance, rec.position, rec.normal
            sub_index = rec.sub_index
        elif shape_type == int(ShapeType.RECTANGLE):
            rect = Rectangle(
                min_corner=rectangle_mins[idx],
                max_corner=rectangle_maxs[idx],
                normal=rectangle_normals[idx],
            )
            rec = hit_rectangle(ray_origin, ray_direction, rect, t_min, closest_t)
            did_hit, distance, position, normal = rec.hit, rec.distance, rec.position, rec.normal

        if did_hit == 1:
            closest_t = distance
            result = SceneHitRecord(
                hit=1,
                distance=distance,
                position=position,
                normal=normal,
                object_index=obj,
                sub_index=sub_index,
            )

    return result
