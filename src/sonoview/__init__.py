"""
SonoView - Ultrasound Geometric Primitive Detection

Computer vision library for extracting lines and circles from speckle-noisy
ultrasound images: needles, water bath bottoms, calibration spheres and
tissue interfaces.
"""

__version__ = "0.1.0"
__author__ = "SonoView Team"

from .core.config import Config, DetectionConfig
from .core.detector import (
    DetectionMethod,
    UltrasoundDetector,
    detect_circles_blob,
    detect_circles_hough,
    detect_interfaces,
    detect_lines_hough,
    detect_lines_ransac,
    estimate_thresholds,
    preprocess,
)
from .core.result import Circle, CircleResult, Line, LineResult, ResultKind

__all__ = [
    "Config",
    "DetectionConfig",
    "DetectionMethod",
    "UltrasoundDetector",
    "Circle",
    "CircleResult",
    "Line",
    "LineResult",
    "ResultKind",
    "preprocess",
    "estimate_thresholds",
    "detect_lines_hough",
    "detect_lines_ransac",
    "detect_circles_hough",
    "detect_circles_blob",
    "detect_interfaces",
    "__version__",
]
