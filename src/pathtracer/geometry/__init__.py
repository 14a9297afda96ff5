"""Geometry module for shape primitives.

This module provides geometric primitives and intersection algorithms:

Components:
    hit: HitRecord shared by every intersection routine
    plane: Infinite plane
    sphere: Sphere stored as center and squared radius
    triangle: Moller-Trumbore triangle
    prism: Eight-triangle extruded prism
    rectangle: Plane clipped to an axis-aligned box

Each shape has a kernel-side ``@ti.dataclass`` and a host-side ``*Shape``
dataclass used when building scenes. Intersection routines are Taichi
functions with the common form:

    rec = hit_shape(ray_origin, ray_direction, shape, t_min, t_max)

and report a hit only for finite t in [t_min, t_max).
"""

from .hit import HitRecord, in_range, make_miss_record
from .plane import Plane, PlaneShape, hit_plane
from .prism import PRISM_FACES, PrismShape, hit_prism
from .rectangle import Rectangle, RectangleShape, hit_rectangle
from .sphere import Sphere, SphereShape, hit_sphere
from .triangle import (
    Triangle,
    TriangleShape,
    hit_triangle,
    triangle_barycentric,
    triangle_normal,
)

__all__ = [
    "HitRecord",
    "in_range",
    "make_miss_record",
    "Plane",
    "PlaneShape",
    "hit_plane",
    "PRISM_FACES",
    "PrismShape",
    "hit_prism",
    "Rectangle",
    "RectangleShape",
    "hit_rectangle",
    "Sphere",
    "SphereShape",
    "hit_sphere",
    "Triangle",
    "TriangleShape",
    "hit_triangle",
    "triangle_barycentric",
    "triangle_normal",
]
