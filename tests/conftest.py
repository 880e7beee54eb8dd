"""
Pytest fixtures for SonoView tests.

Provides common test fixtures including:
- Test configuration
- Blank images
- Synthetic line, circle and interface images
"""

import math

import cv2
import numpy as np
import pytest


@pytest.fixture
def test_config():
    """Test configuration dictionary."""
    return {
        "preprocessing": {
            "clahe": {
                "enabled": True,
                "clip_limit": 2.0,
                "tile_grid_size": [8, 8],
            },
            "bilateral": {
                "enabled": True,
                "diameter": 9,
                "sigma_color": 75,
                "sigma_space": 75,
            },
        },
        "edges": {"lower": 30, "upper": 90},
        "hough_lines": {"threshold": 100, "min_line_length": 50, "max_line_gap": 10},
        "ransac": {
            "max_lines": 20,
            "min_inliers": 50,
            "iterations": 1000,
            "min_inlier_ratio": 0.02,
        },
        "circles": {
            "dp": 1.2,
            "min_dist": 80,
            "param1": 100,
            "param2": 20,
            "min_radius": 10,
            "max_radius": 200,
        },
        "blob": {"min_area": 100, "max_area": 10000, "min_circularity": 0.6},
        "interfaces": {"min_peak_height_ratio": 0.15},
    }


@pytest.fixture
def blank_image():
    """All-zero 640x480 grayscale image."""
    return np.zeros((480, 640), dtype=np.uint8)


@pytest.fixture
def blank_color_image():
    """All-zero 640x480 BGR image."""
    return np.zeros((480, 640, 3), dtype=np.uint8)


@pytest.fixture
def ransac_line_image():
    """640x480 edge map: a 30 degree line plus 5% random noise points."""
    return generate_line_with_noise(angle_deg=30.0)


@pytest.fixture
def hough_line_image():
    """640x480 image with one thick bright diagonal line."""
    img = np.zeros((480, 640), dtype=np.uint8)
    cv2.line(img, (50, 100), (550, 350), 255, 3)
    return img


@pytest.fixture
def disk_image():
    """640x480 image with a filled disk of radius 30 centered at (200, 150)."""
    return generate_disk_image(center=(200, 150), radius=30)


@pytest.fixture
def circle_image():
    """400x400 image with a filled disk of radius 40 in the middle."""
    return generate_disk_image(center=(200, 200), radius=40, width=400, height=400)


@pytest.fixture
def interface_image():
    """640x400 image with horizontal intensity steps at rows 50, 150 and 300."""
    return generate_interface_image(rows=(50, 150, 300))


def generate_line_with_noise(
    angle_deg: float = 30.0,
    start: tuple[int, int] = (40, 60),
    length: float = 600.0,
    noise_fraction: float = 0.05,
    width: int = 640,
    height: int = 480,
    seed: int = 0,
) -> np.ndarray:
    """
    Generate a synthetic edge map with one straight line and noise points.

    Args:
        angle_deg: Line angle in image coordinates (y pointing down)
        start: First endpoint
        length: Line length in pixels
        noise_fraction: Number of noise points relative to line pixels
        width: Image width
        height: Image height
        seed: Seed for noise placement

    Returns:
        Grayscale image with 255 on the line and noise points
    """
    img = np.zeros((height, width), dtype=np.uint8)

    theta = math.radians(angle_deg)
    end = (
        int(round(start[0] + length * math.cos(theta))),
        int(round(start[1] + length * math.sin(theta))),
    )
    cv2.line(img, start, end, 255, 1)

    line_pixels = int(np.count_nonzero(img))
    rng = np.random.default_rng(seed)
    n_noise = int(line_pixels * noise_fraction)
    xs = rng.integers(0, width, size=n_noise)
    ys = rng.integers(0, height, size=n_noise)
    img[ys, xs] = 255

    return img


def generate_disk_image(
    center: tuple[int, int] = (200, 150),
    radius: int = 30,
    width: int = 640,
    height: int = 480,
    value: int = 255,
) -> np.ndarray:
    """Generate a grayscale image with a single filled disk."""
    img = np.zeros((height, width), dtype=np.uint8)
    cv2.circle(img, center, radius, value, -1)
    return img


def generate_interface_image(
    rows: tuple[int, ...] = (50, 150, 300),
    levels: tuple[int, ...] = (20, 200, 60, 220),
    width: int = 640,
    height: int = 400,
) -> np.ndarray:
    """
    Generate horizontal bands whose boundaries are high-gradient rows.

    Args:
        rows: Row index where each new band starts
        levels: Intensity of each band, one more than ``rows``
        width: Image width
        height: Image height

    Returns:
        Grayscale image with intensity steps at ``rows``
    """
    img = np.full((height, width), levels[0], dtype=np.uint8)
    for row, level in zip(rows, levels[1:]):
        img[row:, :] = level
    return img
