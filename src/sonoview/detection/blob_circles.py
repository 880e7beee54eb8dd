"""
Contour-based sphere detection.

Alternative to the Hough transform that works well for objects contrasting
with their surroundings: binarize with Otsu's threshold, keep compact
contours, and report their minimal enclosing circles.
"""

import logging
import math
import time

import cv2
import numpy as np

from ..core.config import DetectionConfig
from ..core.result import Circle, CircleResult, ResultKind
from ..utils.visualization import draw_circles
from .preprocessor import Preprocessor
from .raster import as_raster, is_uniform

logger = logging.getLogger(__name__)


def contour_circularity(contour: np.ndarray, perimeter_epsilon: float = 0.0) -> float:
    """
    Compute 4*pi*area/perimeter^2 for a closed contour.

    A raw 8-connected pixel chain overestimates the perimeter of a smooth
    curve by about 5%, which caps a rasterized disk near 0.9. A positive
    ``perimeter_epsilon`` measures the shape on a Douglas-Peucker
    simplification of the chain instead.

    Args:
        contour: OpenCV contour
        perimeter_epsilon: Simplification tolerance in pixels, 0 to disable

    Returns:
        Circularity, 1.0 for a perfect circle; 0.0 for degenerate contours
    """
    if perimeter_epsilon > 0:
        outline = cv2.approxPolyDP(contour, perimeter_epsilon, True)
    else:
        outline = contour
    area = cv2.contourArea(outline)
    perimeter = cv2.arcLength(outline, True)
    if perimeter <= 0:
        return 0.0
    return 4.0 * math.pi * area / (perimeter * perimeter)


class BlobCircleDetector:
    """
    Detects circular blobs by contour shape analysis.

    For each external contour of the Otsu-binarized image:
    - area must lie within [blob_min_area, blob_max_area]
    - circularity must be strictly above min_circularity
    - the minimal enclosing circle is reported with its circularity

    Usage:
        detector = BlobCircleDetector(preprocessor)
        result = detector.detect(frame, DetectionConfig())
        result.circularities
    """

    def __init__(self, preprocessor: Preprocessor | None = None):
        self.preprocessor = preprocessor or Preprocessor()

    def detect(
        self, image: np.ndarray, config: DetectionConfig, visualize: bool = False
    ) -> CircleResult:
        """
        Detect circular blobs.

        Args:
            image: Grayscale or BGR image
            config: Detection parameters (blob area bounds, circularity cutoff)
            visualize: If True, attach an annotated copy of the image

        Returns:
            CircleResult of kind BLOB_CIRCLES in contour order, each circle
            carrying its circularity
        """
        start_time = time.perf_counter()

        raster = as_raster(image)
        if raster is None:
            return CircleResult(kind=ResultKind.BLOB_CIRCLES)

        gray = self.preprocessor.process(raster)

        circles: list[Circle] = []
        # Otsu has nothing to separate on a flat image
        if not is_uniform(gray):
            _, binary = cv2.threshold(gray, 0, 255, cv2.THRESH_BINARY + cv2.THRESH_OTSU)
            contours, _ = cv2.findContours(binary, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)
            circles = self._circles_from_contours(contours, config)

        logger.info(f"Blob Detection: Found {len(circles)} blobs")

        return CircleResult(
            kind=ResultKind.BLOB_CIRCLES,
            circles=tuple(circles),
            visualized_image=(
                draw_circles(raster, circles, ResultKind.BLOB_CIRCLES) if visualize else None
            ),
            processing_time_ms=(time.perf_counter() - start_time) * 1000,
        )

    @staticmethod
    def _circles_from_contours(contours, config: DetectionConfig) -> list[Circle]:
        """Filter contours by area and circularity."""
        circles: list[Circle] = []

        for contour in contours:
            area = cv2.contourArea(contour)
            if area < config.blob_min_area or area > config.blob_max_area:
                continue

            circularity = contour_circularity(contour, config.perimeter_epsilon)
            if circularity <= config.min_circularity:
                continue

            (x, y), radius = cv2.minEnclosingCircle(contour)
            circles.append(Circle(float(x), float(y), float(radius), circularity=circularity))

        return circles
