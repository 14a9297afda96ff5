"""Output module for writing rendered images.

Components:
    export: PNG encoding of rendered images via Pillow
"""

from .export import compute_rmse, save_png, save_png_from_rgb8

__all__ = [
    "save_png",
    "save_png_from_rgb8",
    "compute_rmse",
]
