"""
Task-level helpers for common ultrasound phantom measurements.

Each helper picks the detection algorithm and parameters suited to one job:
water bath bottom, needle, calibration spheres, layer interfaces, and line
orientation statistics.
"""

import logging
from collections.abc import Iterable
from dataclasses import replace
from enum import Enum

import numpy as np

from ..detection.ransac_lines import SeedLike
from .config import DetectionConfig
from .detector import UltrasoundDetector, get_default_detector
from .result import Circle, CircleResult, Line

logger = logging.getLogger(__name__)


class LineOrientation(Enum):
    """Coarse orientation class of a line."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    DIAGONAL = "diagonal"


def find_water_bath_bottom(
    image: np.ndarray,
    detector: UltrasoundDetector | None = None,
    seed: SeedLike = None,
) -> float | None:
    """
    Locate the water bath bottom.

    Runs RANSAC with auto-estimated thresholds; the first line is the most
    prominent one and usually the bath bottom.

    Returns:
        Mean y coordinate of the first line, or None when nothing was found
    """
    detector = detector or get_default_detector()
    config = detector.auto_config(image)
    result = detector.detect_lines_ransac(image, config, seed=seed)

    if result.is_empty:
        return None
    first = result.lines[0]
    return (first.y1 + first.y2) / 2.0


def find_needle(image: np.ndarray, detector: UltrasoundDetector | None = None) -> Line | None:
    """
    Locate a needle as the longest Hough segment.

    Needles are long and straight, so the segment length floor is raised and
    the vote threshold lowered relative to the defaults.
    """
    detector = detector or get_default_detector()
    config = replace(
        detector.auto_config(image),
        min_line_length=100,
        max_line_gap=15,
        hough_threshold=80,
    )
    result = detector.detect_lines_hough(image, config)

    if result.is_empty:
        return None
    return max(result.lines, key=lambda line: line.length)


def find_calibration_spheres(
    image: np.ndarray,
    min_radius: int,
    max_radius: int,
    detector: UltrasoundDetector | None = None,
) -> list[Circle]:
    """
    Detect calibration spheres with Hough circles.

    Returns:
        Circles sorted by radius, largest first
    """
    detector = detector or get_default_detector()
    config = replace(
        detector.default_config,
        dp=1.2,
        min_dist=80,
        circle_param1=100,
        circle_param2=20,
        min_radius=min_radius,
        max_radius=max_radius,
    )
    result = detector.detect_circles_hough(image, config)
    return sorted(result.circles, key=lambda circle: circle.radius, reverse=True)


def find_horizontal_layers(
    image: np.ndarray, detector: UltrasoundDetector | None = None
) -> list[float]:
    """Y coordinates of horizontal interfaces, top to bottom."""
    detector = detector or get_default_detector()
    config = detector.auto_config(image)
    result = detector.detect_interfaces(image, config)
    return sorted(line.y1 for line in result.lines)


def detect_spheres_robust(
    image: np.ndarray,
    config: DetectionConfig | None = None,
    detector: UltrasoundDetector | None = None,
) -> CircleResult:
    """
    Detect spheres with Hough circles, falling back to blob detection.

    Returns:
        The Hough result if it found anything, otherwise the blob result
    """
    detector = detector or get_default_detector()

    hough_result = detector.detect_circles_hough(image, config)
    if not hough_result.is_empty:
        logger.info(f"Using Hough Circle detection: found {hough_result.count} spheres")
        return hough_result

    blob_result = detector.detect_circles_blob(image, config)
    logger.info(f"Using Blob detection: found {blob_result.count} spheres")
    return blob_result


def classify_orientation(line: Line) -> LineOrientation:
    """
    Classify a line by its absolute angle.

    Within 10 degrees of the x axis is horizontal, within 10 degrees of the
    y axis is vertical, everything else is diagonal.
    """
    angle = abs(line.angle)
    if angle < 10 or angle > 170:
        return LineOrientation.HORIZONTAL
    if 80 < angle < 100:
        return LineOrientation.VERTICAL
    return LineOrientation.DIAGONAL


def count_orientations(lines: Iterable[Line]) -> dict[LineOrientation, int]:
    """Count lines per orientation class; every class is present in the result."""
    counts = {orientation: 0 for orientation in LineOrientation}
    for line in lines:
        counts[classify_orientation(line)] += 1
    return counts
