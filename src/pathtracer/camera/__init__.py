"""Camera module for view and ray generation.

This module provides the camera model for generating primary rays:

Components:
    pinhole: Fixed-orientation pinhole (perspective) camera

Camera responsibilities:
    - Map pixel coordinates to world-space rays
    - Apply anti-aliasing jitter for sub-pixel sampling

Ray generation uses pixel coordinates:
    x in [0, width): left to right across image
    y in [0, height): top to bottom across image
"""

from .pinhole import (
    Camera,
    FieldOfView,
    LinearTransform,
    get_camera_info,
    get_ray,
    get_ray_jittered,
    setup_camera,
)

__all__ = [
    "Camera",
    "FieldOfView",
    "LinearTransform",
    "setup_camera",
    "get_ray",
    "get_ray_jittered",
    "get_camera_info",
]
