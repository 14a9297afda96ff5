"""Render driver: turns a scene and a camera into a linear RGB image.

Rendering is split into independent work units, one per (pixel, sample)
pair:

    unit in [0, width * height * num_samples)
    pixel = unit % (width * height)
    y = pixel // width,  x = pixel % width

Each unit seeds its own random stream from its index, jitters a primary ray
inside its pixel, traces one path and adds the result into a per-pixel sum
buffer. The unit loop is the outermost loop of a Taichi kernel, so units run
in parallel across the backend's threads and the additions into the sum
buffer are atomic.

A unit's own estimate depends only on its index and the scene, so it is
reproducible. The order in which the units' estimates are summed is not,
so the last bits of a pixel can vary between runs on multithreaded
backends.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.core.render import render, to_rgb8
    >>> from pathtracer.scene.presets import default_camera, spheres
    >>> scene = spheres()
    >>> image = render(scene, default_camera(160, 120), max_depth=25, num_samples=16)
    >>> rgb8 = to_rgb8(image)
"""

import logging
import time
from dataclasses import dataclass, replace

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from pathtracer.camera.pinhole import Camera, get_ray_jittered, setup_camera
from pathtracer.core.integrator import trace_path
from pathtracer.core.sampler import seed_state

logger = logging.getLogger(__name__)

vec3 = tm.vec3

# =============================================================================
# Settings
# =============================================================================


@dataclass(frozen=True)
class RenderSettings:
    """Parameters of a render.

    Attributes:
        max_depth: Maximum number of scene intersections per path.
        num_samples: Paths traced per pixel.
        t_min: Minimum hit distance; keeps bounced rays off their own surface.
        t_max: Maximum hit distance.
    """

    max_depth: int = 25
    num_samples: int = 100
    t_min: float = 1e-3
    t_max: float = 1e10

    def __post_init__(self) -> None:
        if self.max_depth <= 0:
            raise ValueError(f"max_depth must be positive, got {self.max_depth}")
        if self.num_samples <= 0:
            raise ValueError(f"num_samples must be positive, got {self.num_samples}")
        if not 0.0 <= self.t_min < self.t_max:
            raise ValueError(
                f"Expected 0 <= t_min < t_max, got t_min={self.t_min}, t_max={self.t_max}"
            )


# =============================================================================
# Render Target (Sum Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Unit indices are i32 inside kernels
MAX_UNITS = 2**31 - 1

# Per-pixel sum of path estimates, indexed [row, column]
_color_sum = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_HEIGHT, MAX_IMAGE_WIDTH))


def _check_render_size(camera: Camera, num_samples: int) -> None:
    if camera.width > MAX_IMAGE_WIDTH or camera.height > MAX_IMAGE_HEIGHT:
        raise RuntimeError(
            f"Image dimensions ({camera.width}x{camera.height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )
    if camera.width * camera.height * num_samples > MAX_UNITS:
        raise RuntimeError(
            f"{camera.width}x{camera.height} at {num_samples} samples exceeds "
            f"{MAX_UNITS} work units"
        )


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.func
def render_unit_impl(
    unit: ti.i32,
    width: ti.i32,
    num_pixels: ti.i32,
    max_depth: ti.i32,
    t_min: ti.f32,
    t_max: ti.f32,
) -> vec3:
    """Trace the path of one work unit.

    Returns:
        The radiance estimate of the unit.
    """
    pixel = unit % num_pixels
    y = pixel // width
    x = pixel % width

    state = seed_state(unit)
    state, ray = get_ray_jittered(x, y, state)
    color, state = trace_path(ray.origin, ray.direction, max_depth, t_min, t_max, state)
    return color


@ti.kernel
def _render_units(
    width: ti.i32,
    height: ti.i32,
    num_samples: ti.i32,
    max_depth: ti.i32,
    t_min: ti.f32,
    t_max: ti.f32,
):
    num_pixels = width * height
    for unit in range(num_pixels * num_samples):
        color = render_unit_impl(unit, width, num_pixels, max_depth, t_min, t_max)
        pixel = unit % num_pixels
        _color_sum[pixel // width, pixel % width] += color


@ti.kernel
def _render_single_unit(
    unit: ti.i32,
    width: ti.i32,
    height: ti.i32,
    max_depth: ti.i32,
    t_min: ti.f32,
    t_max: ti.f32,
) -> vec3:
    return render_unit_impl(unit, width, width * height, max_depth, t_min, t_max)


# =============================================================================
# Public Rendering API
# =============================================================================


def _resolve_settings(
    max_depth: int | None,
    num_samples: int | None,
    settings: RenderSettings | None,
) -> RenderSettings:
    resolved = settings if settings is not None else RenderSettings()
    overrides = {}
    if max_depth is not None:
        overrides["max_depth"] = max_depth
    if num_samples is not None:
        overrides["num_samples"] = num_samples
    return replace(resolved, **overrides) if overrides else resolved


def render(
    scene,
    camera: Camera,
    max_depth: int | None = None,
    num_samples: int | None = None,
    *,
    settings: RenderSettings | None = None,
) -> npt.NDArray[np.float32]:
    """Render the current scene through a camera.

    Args:
        scene: The SceneManager holding the scene. Scene data lives in global
            Taichi fields, so this must be the most recently built scene.
        camera: The camera to render through.
        max_depth: Maximum path length. Overrides settings.max_depth.
        num_samples: Paths per pixel. Overrides settings.num_samples.
        settings: Remaining render parameters; defaults to RenderSettings().

    Returns:
        A float32 array of shape (height, width, 3), row 0 at the top, each
        pixel the mean of num_samples path estimates in linear RGB. Values
        are not clamped.

    Raises:
        ValueError: If max_depth or num_samples is not positive.
        RuntimeError: If the image is larger than the render target.
    """
    resolved = _resolve_settings(max_depth, num_samples, settings)
    _check_render_size(camera, resolved.num_samples)

    width, height = camera.width, camera.height
    total_units = width * height * resolved.num_samples
    logger.info(
        "Rendering %dx%d, %d samples per pixel (%d units), %d objects, max depth %d",
        width,
        height,
        resolved.num_samples,
        total_units,
        scene.get_object_count(),
        resolved.max_depth,
    )

    setup_camera(camera)
    _color_sum.fill(0.0)

    start = time.perf_counter()
    _render_units(
        width,
        height,
        resolved.num_samples,
        resolved.max_depth,
        resolved.t_min,
        resolved.t_max,
    )
    ti.sync()
    logger.info("Rendered in %.2fs", time.perf_counter() - start)

    sums = _color_sum.to_numpy()[:height, :width, :]
    return (sums / np.float32(resolved.num_samples)).astype(np.float32)


def render_unit(
    unit: int,
    camera: Camera,
    max_depth: int | None = None,
    *,
    settings: RenderSettings | None = None,
) -> tuple[float, float, float]:
    """Compute the path estimate of one work unit.

    The result is the value that unit adds to its pixel during render(),
    and is identical across calls.

    Args:
        unit: The flat work unit index.
        camera: The camera to render through.
        max_depth: Maximum path length. Overrides settings.max_depth.
        settings: Remaining render parameters; defaults to RenderSettings().

    Returns:
        Tuple of (R, G, B) radiance values.
    """
    resolved = _resolve_settings(max_depth, None, settings)
    if unit < 0 or unit > MAX_UNITS:
        raise ValueError(f"Work unit index out of range: {unit}")

    setup_camera(camera)
    color = _render_single_unit(
        unit,
        camera.width,
        camera.height,
        resolved.max_depth,
        resolved.t_min,
        resolved.t_max,
    )
    return (float(color[0]), float(color[1]), float(color[2]))


# =============================================================================
# Tone Mapping
# =============================================================================


def to_rgb8(image: npt.ArrayLike) -> npt.NDArray[np.uint8]:
    """Convert a linear float image to 8-bit RGB.

    Each channel is clamped to [0, 1], scaled by 255 and rounded to the
    nearest integer. No gamma curve is applied.

    Args:
        image: Array of shape (height, width, 3).

    Returns:
        A uint8 array of the same shape.
    """
    data = np.asarray(image, dtype=np.float32)
    if data.ndim != 3 or data.shape[2] != 3:
        raise ValueError(f"Expected image of shape (height, width, 3), got {data.shape}")
    return np.rint(np.clip(data, 0.0, 1.0) * 255.0).astype(np.uint8)
