"""
Raster validation helpers.

Images are plain NumPy arrays: (H, W) grayscale or (H, W, C) with C in
{1, 3, 4} in OpenCV BGR/BGRA channel order. Detectors call ``as_raster``
at entry and return an empty result when it yields None.
"""

import logging

import numpy as np

logger = logging.getLogger(__name__)

VALID_CHANNELS = (1, 3, 4)


def as_raster(image: np.ndarray | None) -> np.ndarray | None:
    """
    Validate an input image and normalize it to 8-bit samples.

    Args:
        image: Candidate image

    Returns:
        uint8 array of shape (H, W) or (H, W, 3|4), or None when the image is
        missing, empty, or not shaped like a raster
    """
    if image is None:
        logger.warning("Received no image")
        return None

    image = np.asarray(image)
    if image.size == 0:
        logger.warning(f"Received empty image with shape {image.shape}")
        return None

    if image.ndim == 3 and image.shape[2] == 1:
        image = image[:, :, 0]

    if image.ndim not in (2, 3) or (image.ndim == 3 and image.shape[2] not in VALID_CHANNELS):
        logger.warning(f"Unsupported image shape {image.shape}")
        return None

    if image.dtype != np.uint8:
        image = np.clip(image, 0, 255).astype(np.uint8)

    return image


def image_size(image: np.ndarray) -> tuple[int, int, int]:
    """Return (width, height, channels) of a raster."""
    height, width = image.shape[:2]
    channels = 1 if image.ndim == 2 else image.shape[2]
    return width, height, channels


def is_uniform(image: np.ndarray) -> bool:
    """True when every sample has the same value."""
    return bool(image.min() == image.max())
