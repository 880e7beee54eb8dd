"""
Hough circle detection.

Finds spherical phantoms, bubbles and circular targets with the Hough
gradient method.
"""

import logging
import time

import cv2
import numpy as np

from ..core.config import DetectionConfig
from ..core.result import Circle, CircleResult, ResultKind
from ..utils.visualization import draw_circles
from .preprocessor import Preprocessor
from .raster import as_raster

logger = logging.getLogger(__name__)


class HoughCircleDetector:
    """
    Detects circles with the Hough gradient transform.

    The preprocessed image gets an extra Gaussian blur so speckle does not
    produce spurious gradient votes. ``min_dist`` suppresses duplicate
    detections of the same object.

    Usage:
        detector = HoughCircleDetector(preprocessor)
        result = detector.detect(frame, DetectionConfig(min_radius=20, max_radius=100))
    """

    BLUR_KERNEL = (9, 9)
    BLUR_SIGMA = 2.0

    def __init__(self, preprocessor: Preprocessor | None = None):
        self.preprocessor = preprocessor or Preprocessor()

    def detect(
        self, image: np.ndarray, config: DetectionConfig, visualize: bool = False
    ) -> CircleResult:
        """
        Detect circles.

        Args:
            image: Grayscale or BGR image
            config: Detection parameters (dp, min_dist, circle_param1/2, radius range)
            visualize: If True, attach an annotated copy of the image

        Returns:
            CircleResult of kind HOUGH_CIRCLES, strongest accumulator first
        """
        start_time = time.perf_counter()

        raster = as_raster(image)
        if raster is None:
            return CircleResult(kind=ResultKind.HOUGH_CIRCLES)

        gray = self.preprocessor.process(raster)
        blurred = cv2.GaussianBlur(gray, self.BLUR_KERNEL, self.BLUR_SIGMA, sigmaY=self.BLUR_SIGMA)

        found = cv2.HoughCircles(
            blurred,
            cv2.HOUGH_GRADIENT,
            config.dp,
            config.min_dist,
            param1=config.circle_param1,
            param2=config.circle_param2,
            minRadius=config.min_radius,
            maxRadius=config.max_radius,
        )

        circles = self.circles_from_candidates(found)

        logger.info(f"Circle Detection: Found {len(circles)} circles")

        return CircleResult(
            kind=ResultKind.HOUGH_CIRCLES,
            circles=tuple(circles),
            visualized_image=(
                draw_circles(raster, circles, ResultKind.HOUGH_CIRCLES) if visualize else None
            ),
            processing_time_ms=(time.perf_counter() - start_time) * 1000,
        )

    @staticmethod
    def circles_from_candidates(found: np.ndarray | None) -> list[Circle]:
        """
        Convert a ``HoughCircles`` result to circles.

        Accepts the (1, N, 3) layout of OpenCV 4 as well as flat (N, 3) rows;
        a trailing vote column, when present, is ignored.
        """
        if found is None:
            return []
        found = np.asarray(found)
        if found.size == 0:
            return []
        rows = found.reshape(-1, found.shape[-1])
        return [Circle(float(x), float(y), float(radius)) for x, y, radius in rows[:, :3]]
