"""
Main ultrasound detector orchestrator.

Owns one instance of each pipeline component and runs a single detection
per call:
1. Preprocessing (grayscale, CLAHE, bilateral filter)
2. Edge extraction where the algorithm needs it
3. One of the five detection algorithms

Parameters arrive per call as a frozen DetectionConfig, so a detector can be
shared between callers without locking.
"""

from enum import Enum
from typing import Any

import numpy as np

from ..detection.blob_circles import BlobCircleDetector
from ..detection.edge_extractor import EdgeExtractor
from ..detection.hough_circles import HoughCircleDetector
from ..detection.hough_lines import HoughLineDetector
from ..detection.interface_detector import InterfaceDetector
from ..detection.preprocessor import Preprocessor
from ..detection.ransac_lines import RansacLineDetector, SeedLike
from ..detection.raster import as_raster
from ..detection.threshold_estimator import ThresholdEstimator
from .config import DetectionConfig
from .result import CircleResult, LineResult


class DetectionMethod(Enum):
    """Available detection algorithms."""

    HOUGH_LINES = "hough"
    RANSAC_LINES = "ransac"
    HOUGH_CIRCLES = "circles"
    BLOB_CIRCLES = "blob"
    INTERFACES = "interfaces"


class UltrasoundDetector:
    """
    Main detector class orchestrating the detection pipeline.

    Usage:
        detector = UltrasoundDetector(config.as_dict)
        lower, upper = detector.estimate_thresholds(frame)
        params = detector.default_config.with_thresholds(lower, upper)
        result = detector.detect_lines_ransac(frame, params, seed=42)
    """

    def __init__(self, config: dict[str, Any] | None = None):
        """
        Initialize detector with configuration.

        Args:
            config: Full configuration dictionary containing:
                - preprocessing: Preprocessor settings
                - edges, hough_lines, ransac, circles, blob, interfaces:
                  default DetectionConfig values
        """
        config = config or {}

        self.preprocessor = Preprocessor(config.get("preprocessing", {}))
        self.edge_extractor = EdgeExtractor()
        self.default_config = DetectionConfig.from_dict(config)

        self.threshold_estimator = ThresholdEstimator(self.preprocessor)
        self.hough_lines = HoughLineDetector(self.preprocessor, self.edge_extractor)
        self.ransac_lines = RansacLineDetector(self.preprocessor, self.edge_extractor)
        self.hough_circles = HoughCircleDetector(self.preprocessor)
        self.blob_circles = BlobCircleDetector(self.preprocessor)
        self.interfaces = InterfaceDetector(self.preprocessor, self.edge_extractor)

    def _resolve(self, config: DetectionConfig | None) -> DetectionConfig:
        return self.default_config if config is None else config

    def preprocess(self, image: np.ndarray) -> np.ndarray | None:
        """Grayscale, contrast-normalized, denoised copy of the image, or None if invalid."""
        raster = as_raster(image)
        if raster is None:
            return None
        return self.preprocessor.process(raster)

    def estimate_thresholds(self, image: np.ndarray) -> tuple[float, float]:
        """Estimate (lower, upper) edge thresholds from gradient statistics."""
        return self.threshold_estimator.estimate(image)

    def auto_config(
        self, image: np.ndarray, config: DetectionConfig | None = None
    ) -> DetectionConfig:
        """Return a copy of ``config`` using thresholds estimated for ``image``."""
        lower, upper = self.estimate_thresholds(image)
        return self._resolve(config).with_thresholds(lower, upper)

    def detect_lines_hough(
        self,
        image: np.ndarray,
        config: DetectionConfig | None = None,
        visualize: bool = False,
    ) -> LineResult:
        return self.hough_lines.detect(image, self._resolve(config), visualize)

    def detect_lines_ransac(
        self,
        image: np.ndarray,
        config: DetectionConfig | None = None,
        seed: SeedLike = None,
        visualize: bool = False,
    ) -> LineResult:
        return self.ransac_lines.detect(image, self._resolve(config), visualize, seed)

    def detect_circles_hough(
        self,
        image: np.ndarray,
        config: DetectionConfig | None = None,
        visualize: bool = False,
    ) -> CircleResult:
        return self.hough_circles.detect(image, self._resolve(config), visualize)

    def detect_circles_blob(
        self,
        image: np.ndarray,
        config: DetectionConfig | None = None,
        visualize: bool = False,
    ) -> CircleResult:
        return self.blob_circles.detect(image, self._resolve(config), visualize)

    def detect_interfaces(
        self,
        image: np.ndarray,
        config: DetectionConfig | None = None,
        visualize: bool = False,
    ) -> LineResult:
        return self.interfaces.detect(image, self._resolve(config), visualize)

    def detect(
        self,
        image: np.ndarray,
        method: DetectionMethod | str,
        config: DetectionConfig | None = None,
        visualize: bool = False,
        seed: SeedLike = None,
    ) -> LineResult | CircleResult:
        """
        Run the detection algorithm selected by ``method``.

        Args:
            image: Grayscale or BGR image
            method: DetectionMethod or its value ('hough', 'ransac', ...)
            config: Detection parameters, defaults to ``default_config``
            visualize: If True, attach an annotated copy of the image
            seed: Sampling seed, used by RANSAC only

        Returns:
            LineResult or CircleResult depending on the method
        """
        method = DetectionMethod(method)

        if method == DetectionMethod.RANSAC_LINES:
            return self.detect_lines_ransac(image, config, seed=seed, visualize=visualize)
        if method == DetectionMethod.HOUGH_LINES:
            return self.detect_lines_hough(image, config, visualize)
        if method == DetectionMethod.HOUGH_CIRCLES:
            return self.detect_circles_hough(image, config, visualize)
        if method == DetectionMethod.BLOB_CIRCLES:
            return self.detect_circles_blob(image, config, visualize)
        return self.detect_interfaces(image, config, visualize)


_default_detector: UltrasoundDetector | None = None


def get_default_detector() -> UltrasoundDetector:
    """Shared detector built with default settings."""
    global _default_detector
    if _default_detector is None:
        _default_detector = UltrasoundDetector()
    return _default_detector


def preprocess(image: np.ndarray) -> np.ndarray | None:
    return get_default_detector().preprocess(image)


def estimate_thresholds(image: np.ndarray) -> tuple[float, float]:
    return get_default_detector().estimate_thresholds(image)


def detect_lines_hough(
    image: np.ndarray, config: DetectionConfig | None = None, visualize: bool = False
) -> LineResult:
    return get_default_detector().detect_lines_hough(image, config, visualize)


def detect_lines_ransac(
    image: np.ndarray,
    config: DetectionConfig | None = None,
    seed: SeedLike = None,
    visualize: bool = False,
) -> LineResult:
    return get_default_detector().detect_lines_ransac(image, config, seed, visualize)


def detect_circles_hough(
    image: np.ndarray, config: DetectionConfig | None = None, visualize: bool = False
) -> CircleResult:
    return get_default_detector().detect_circles_hough(image, config, visualize)


def detect_circles_blob(
    image: np.ndarray, config: DetectionConfig | None = None, visualize: bool = False
) -> CircleResult:
    return get_default_detector().detect_circles_blob(image, config, visualize)


def detect_interfaces(
    image: np.ndarray, config: DetectionConfig | None = None, visualize: bool = False
) -> LineResult:
    return get_default_detector().detect_interfaces(image, config, visualize)
