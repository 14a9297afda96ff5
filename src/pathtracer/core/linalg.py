"""Host-side vector helpers used while building scenes.

Scene construction (prism assembly, rotations, camera transforms) happens in
Python before any kernel runs, so these helpers work on NumPy arrays rather
than Taichi vectors. They mirror the kernel-side operations in
``pathtracer.core.ray`` and follow the same conventions.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np
import numpy.typing as npt

Vec3Like = Sequence[float] | npt.NDArray[np.float64]


def as_vec3(v: Vec3Like) -> npt.NDArray[np.float64]:
    """Convert a 3-sequence to a float64 NumPy vector.

    Raises:
        ValueError: If the input does not have exactly three components.
    """
    arr = np.asarray(v, dtype=np.float64)
    if arr.shape != (3,):
        raise ValueError(f"Expected a 3-component vector, got shape {arr.shape}")
    return arr


def as_tuple(v: Vec3Like) -> tuple[float, float, float]:
    arr = as_vec3(v)
    return (float(arr[0]), float(arr[1]), float(arr[2]))


def normalized(v: Vec3Like) -> npt.NDArray[np.float64]:
    """Return v scaled to unit length.

    Raises:
        ValueError: If v has zero length.
    """
    arr = as_vec3(v)
    norm = np.linalg.norm(arr)
    if norm == 0.0:
        raise ValueError("Cannot normalize a zero-length vector")
    return arr / norm


def rotate(v: Vec3Like, axis: Vec3Like, angle_degrees: float) -> npt.NDArray[np.float64]:
    """Rotate v about an axis through the origin using Rodrigues' formula.

    Same convention as the kernel-side ``rotate``: right-handed, angle in
    degrees, axis normalized before use.
    """
    vec = as_vec3(v)
    k = normalized(axis)
    theta = math.radians(angle_degrees)
    cos_theta = math.cos(theta)
    sin_theta = math.sin(theta)
    return (
        vec * cos_theta
        + np.cross(k, vec) * sin_theta
        + k * np.dot(k, vec) * (1.0 - cos_theta)
    )


def rotate_around(
    point: Vec3Like,
    origin: Vec3Like,
    axis: Vec3Like,
    angle_degrees: float,
) -> npt.NDArray[np.float64]:
    """Rotate a point about an axis passing through ``origin``."""
    o = as_vec3(origin)
    return rotate(as_vec3(point) - o, axis, angle_degrees) + o
