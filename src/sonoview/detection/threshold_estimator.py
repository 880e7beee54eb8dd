"""
Automatic hysteresis threshold estimation.

Derives Canny thresholds from gradient magnitude statistics of the
preprocessed image, so callers do not have to hand-tune them per probe or
gain setting.
"""

import logging

import cv2
import numpy as np

from .preprocessor import Preprocessor
from .raster import as_raster

logger = logging.getLogger(__name__)


class ThresholdEstimator:
    """
    Estimates (lower, upper) edge thresholds for an image.

    lower = mean - 0.5 * std, upper = mean + 1.5 * std of the Sobel gradient
    magnitude, with a minimum 2:1 ratio and clamping to ranges that work for
    ultrasound.

    Usage:
        estimator = ThresholdEstimator(preprocessor)
        lower, upper = estimator.estimate(frame)
    """

    LOWER_FLOOR = 15.0
    LOWER_RANGE = (10.0, 80.0)
    UPPER_RANGE = (30.0, 200.0)
    MIN_RATIO = 2.0
    FORCED_RATIO = 2.5
    DEFAULT_THRESHOLDS = (30.0, 90.0)

    def __init__(self, preprocessor: Preprocessor | None = None):
        self.preprocessor = preprocessor or Preprocessor()

    def estimate(self, image: np.ndarray) -> tuple[float, float]:
        """
        Estimate hysteresis thresholds.

        Args:
            image: Grayscale or BGR image

        Returns:
            (lower, upper) with lower in [10, 80], upper in [30, 200] and
            upper >= 2 * lower. Invalid images yield the default pair.
        """
        raster = as_raster(image)
        if raster is None:
            return self.DEFAULT_THRESHOLDS

        gray = self.preprocessor.process(raster)
        mean, std = self.gradient_statistics(gray)
        lower, upper = self.thresholds_from_statistics(mean, std)

        logger.info(
            f"Auto-estimated edge thresholds: {lower:.1f} / {upper:.1f} "
            f"(gradient mean={mean:.1f}, std={std:.1f})"
        )
        return lower, upper

    @staticmethod
    def gradient_statistics(gray: np.ndarray) -> tuple[float, float]:
        """
        Mean and standard deviation of the 8-bit gradient magnitude.

        Args:
            gray: Preprocessed grayscale image

        Returns:
            (mean, std) over all pixels
        """
        grad_x = cv2.Sobel(gray, cv2.CV_32F, 1, 0, ksize=3)
        grad_y = cv2.Sobel(gray, cv2.CV_32F, 0, 1, ksize=3)
        magnitude = cv2.magnitude(grad_x, grad_y)

        # Saturate to 8 bit before taking statistics
        magnitude_8u = cv2.convertScaleAbs(magnitude)
        mean, std = cv2.meanStdDev(magnitude_8u)
        return float(mean[0][0]), float(std[0][0])

    @classmethod
    def thresholds_from_statistics(cls, mean: float, std: float) -> tuple[float, float]:
        """Map gradient statistics to a clamped (lower, upper) pair."""
        lower = max(cls.LOWER_FLOOR, mean - 0.5 * std)
        upper = mean + 1.5 * std

        if upper < lower * cls.MIN_RATIO:
            upper = lower * cls.FORCED_RATIO

        lower = max(cls.LOWER_RANGE[0], min(cls.LOWER_RANGE[1], lower))
        upper = max(cls.UPPER_RANGE[0], min(cls.UPPER_RANGE[1], upper))
        return lower, upper
