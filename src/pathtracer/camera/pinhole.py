"""Pinhole camera model for perspective projection ray generation.

This module implements a fixed-orientation pinhole camera. The camera sits at
``position`` and looks down -z with +y up and +x right. Its image plane lies
at unit distance in front of it.

Pixel coordinates are mapped onto the image plane with two linear
transforms built from the horizontal field of view:

    t = tan(fov / 2),  a = width / height

    x_world = (2 * a * t / width) * x + (-a * t)
    y_world = (-2 * t / height) * y + t

so x = 0 is the left edge, y = 0 is the top row, and the y axis is flipped
to point up in world space. The primary ray direction is
normalize((x_world, y_world, -1)) in camera space.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.camera.pinhole import Camera, setup_camera
    >>> camera = Camera.create(fov=45.0, width=800, height=600).at(0.0, 0.0, 5.0)
    >>> setup_camera(camera)
    >>> # Call get_ray(x, y) within a Taichi kernel
"""

import math
from dataclasses import dataclass, replace

import numpy as np
import taichi as ti
import taichi.math as tm

from pathtracer.core.ray import Ray, make_ray
from pathtracer.core.sampler import next_uniform

# Fixed camera basis: looks down -z with +y up
CAMERA_FORWARD = (0.0, 0.0, -1.0)
CAMERA_UP = (0.0, 1.0, 0.0)
CAMERA_RIGHT = (1.0, 0.0, 0.0)

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass(frozen=True)
class FieldOfView:
    """An angle of view, stored in radians.

    Build one with ``FieldOfView.degrees(45.0)`` or ``FieldOfView.radians(0.8)``.
    """

    angle: float

    @classmethod
    def degrees(cls, value: float) -> "FieldOfView":
        return cls(angle=math.radians(value))

    @classmethod
    def radians(cls, value: float) -> "FieldOfView":
        return cls(angle=float(value))

    def to_radians(self) -> float:
        return self.angle

    def to_degrees(self) -> float:
        return math.degrees(self.angle)


@dataclass(frozen=True)
class LinearTransform:
    """Affine map ``scale * x + offset`` from pixel to image-plane coordinates."""

    scale: float
    offset: float

    def apply(self, x: float) -> float:
        return self.scale * x + self.offset


@dataclass(frozen=True)
class Camera:
    """Configuration for a pinhole camera.

    Attributes:
        fov: Horizontal field of view.
        width: Image width in pixels.
        height: Image height in pixels.
        position: Camera position in world space (x, y, z).
    """

    fov: FieldOfView
    width: int
    height: int
    position: tuple[float, float, float] = (0.0, 0.0, 0.0)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Image size must be positive, got {self.width}x{self.height}"
            )
        if not 0.0 < self.fov.angle < math.pi:
            raise ValueError(
                f"Field of view must be in (0, 180) degrees, got {self.fov.to_degrees()}"
            )

    @classmethod
    def create(cls, fov, width: int, height: int) -> "Camera":
        """Create a camera at the origin.

        Args:
            fov: A FieldOfView, or a number interpreted as degrees.
            width: Image width in pixels.
            height: Image height in pixels.
        """
        if not isinstance(fov, FieldOfView):
            fov = FieldOfView.degrees(fov)
        return cls(fov=fov, width=int(width), height=int(height))

    def at(self, x: float, y: float, z: float) -> "Camera":
        """Return a copy of the camera moved to (x, y, z)."""
        return replace(self, position=(float(x), float(y), float(z)))

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    @property
    def x_transform(self) -> LinearTransform:
        t = math.tan(self.fov.angle / 2.0)
        a = self.aspect_ratio
        return LinearTransform(scale=2.0 * a * t / self.width, offset=-a * t)

    @property
    def y_transform(self) -> LinearTransform:
        t = math.tan(self.fov.angle / 2.0)
        return LinearTransform(scale=-2.0 * t / self.height, offset=t)

    def ray_through(self, x_screen: float, y_screen: float) -> tuple[np.ndarray, np.ndarray]:
        """Compute the primary ray through a screen point (Python side).

        Returns:
            A tuple (origin, direction) of NumPy vectors; direction is unit
            length.
        """
        x_w = self.x_transform.apply(x_screen)
        y_w = self.y_transform.apply(y_screen)
        direction = (
            np.array(CAMERA_RIGHT) * x_w + np.array(CAMERA_UP) * y_w + np.array(CAMERA_FORWARD)
        )
        return np.array(self.position, dtype=np.float64), direction / np.linalg.norm(direction)


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_right = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_up = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_forward = ti.Vector.field(3, dtype=ti.f32, shape=())

# (scale, offset) for x and y
_x_transform = ti.Vector.field(2, dtype=ti.f32, shape=())
_y_transform = ti.Vector.field(2, dtype=ti.f32, shape=())
_image_size = ti.Vector.field(2, dtype=ti.i32, shape=())


# =============================================================================
# Camera Setup (Python-side, called once per camera configuration)
# =============================================================================


def setup_camera(camera: Camera) -> None:
    """Upload a camera to the Taichi fields read by get_ray.

    This must be called before rendering, from Python (not from within a
    Taichi kernel).
    """
    x_t = camera.x_transform
    y_t = camera.y_transform

    _camera_origin[None] = list(camera.position)
    _camera_right[None] = list(CAMERA_RIGHT)
    _camera_up[None] = list(CAMERA_UP)
    _camera_forward[None] = list(CAMERA_FORWARD)
    _x_transform[None] = [x_t.scale, x_t.offset]
    _y_transform[None] = [y_t.scale, y_t.offset]
    _image_size[None] = [camera.width, camera.height]


# =============================================================================
# Ray Generation
# =============================================================================


@ti.func
def get_ray(x: ti.f32, y: ti.f32) -> Ray:
    """Generate a primary ray through screen coordinates (x, y).

    Args:
        x: Horizontal pixel coordinate, 0 at the left edge.
        y: Vertical pixel coordinate, 0 at the top edge.

    Returns:
        A Ray from the camera position with a unit direction.
    """
    x_t = _x_transform[None]
    y_t = _y_transform[None]
    x_w = x_t[0] * x + x_t[1]
    y_w = y_t[0] * y + y_t[1]
    direction = tm.normalize(
        _camera_right[None] * x_w + _camera_up[None] * y_w + _camera_forward[None]
    )
    return make_ray(_camera_origin[None], direction)


@ti.func
def get_ray_jittered(pixel_x: ti.i32, pixel_y: ti.i32, state: ti.u32):
    """Generate a ray through a uniformly random point inside a pixel.

    Args:
        pixel_x: Pixel column (0 = left).
        pixel_y: Pixel row (0 = top).
        state: The current random state.

    Returns:
        A tuple (state, ray).
    """
    s, jitter_x = next_uniform(state)
    s, jitter_y = next_uniform(s)
    ray = get_ray(ti.cast(pixel_x, ti.f32) + jitter_x, ti.cast(pixel_y, ti.f32) + jitter_y)
    return s, ray


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, tuple]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with origin, right, up, forward, x_transform,
        y_transform and image_size.
    """

    def _tuple(field, n: int, cast=float) -> tuple:
        value = field[None]
        return tuple(cast(value[i]) for i in range(n))

    return {
        "origin": _tuple(_camera_origin, 3),
        "right": _tuple(_camera_right, 3),
        "up": _tuple(_camera_up, 3),
        "forward": _tuple(_camera_forward, 3),
        "x_transform": _tuple(_x_transform, 2),
        "y_transform": _tuple(_y_transform, 2),
        "image_size": _tuple(_image_size, 2, int),
    }
