"""Image export utilities for rendered images.

This module saves the float images produced by ``render`` as 8-bit PNG
files. Conversion to 8 bits is a linear clamp (see ``to_rgb8``); no gamma
curve or tone mapping operator is applied.

Example:
    >>> from pathtracer.core.render import render
    >>> from pathtracer.output.export import save_png
    >>> image = render(scene, camera, max_depth=25, num_samples=100)
    >>> save_png(image, "spheres.png")
"""

from __future__ import annotations

import logging
import os

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from pathtracer.core.render import to_rgb8

logger = logging.getLogger(__name__)


def save_png(image: npt.ArrayLike, filepath: str | os.PathLike[str]) -> None:
    """Save a linear float image as a PNG file.

    Args:
        image: Linear image array of shape (H, W, 3), row 0 at the top.
        filepath: Output file path (should end in .png).
    """
    save_png_from_rgb8(to_rgb8(image), filepath)


def save_png_from_rgb8(
    image: npt.NDArray[np.uint8],
    filepath: str | os.PathLike[str],
) -> None:
    """Save an already converted 8-bit image as a PNG file.

    Raises:
        ValueError: If the array is not uint8 of shape (H, W, 3).
    """
    if image.dtype != np.uint8 or image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(
            f"Expected uint8 array of shape (H, W, 3), got {image.dtype} {image.shape}"
        )
    pil_image = PILImage.fromarray(image, mode="RGB")
    pil_image.save(filepath)
    logger.info("Wrote %dx%d image to %s", image.shape[1], image.shape[0], filepath)


def compute_rmse(
    image_a: npt.NDArray[np.floating[npt.NBitBase]],
    image_b: npt.NDArray[np.floating[npt.NBitBase]],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(
            f"Image shapes must match: {image_a.shape} vs {image_b.shape}"
        )

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
