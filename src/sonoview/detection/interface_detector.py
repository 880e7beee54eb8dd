"""
Horizontal interface detection.

Finds horizontal features such as water bath layers and tissue boundaries
by projecting the edge map onto the vertical axis and picking peaks.
"""

import logging
import time

import numpy as np

from ..core.config import DetectionConfig
from ..core.result import Line, LineResult, ResultKind
from ..utils.visualization import draw_lines
from .edge_extractor import EdgeExtractor
from .preprocessor import Preprocessor
from .raster import as_raster

logger = logging.getLogger(__name__)


def find_peaks(signal: np.ndarray, min_peak_height: float) -> list[int]:
    """
    Find strict local maxima of a 1-D signal above a height.

    The first and last samples are never peaks.

    Args:
        signal: 1-D projection
        min_peak_height: Peaks must be strictly higher than this

    Returns:
        Peak indices in ascending order
    """
    signal = np.asarray(signal)
    if signal.size < 3:
        return []

    center = signal[1:-1]
    is_peak = (center > signal[:-2]) & (center > signal[2:]) & (center > min_peak_height)
    return [int(i) + 1 for i in np.flatnonzero(is_peak)]


class InterfaceDetector:
    """
    Detects full-width horizontal interfaces.

    For each row the edge pixels are counted; rows whose count is a strict
    local maximum and exceeds ``min_peak_height_ratio * width`` become one
    horizontal line spanning the image.

    Usage:
        detector = InterfaceDetector(preprocessor)
        result = detector.detect(frame, DetectionConfig(min_peak_height_ratio=0.2))
    """

    def __init__(
        self,
        preprocessor: Preprocessor | None = None,
        edge_extractor: EdgeExtractor | None = None,
    ):
        self.preprocessor = preprocessor or Preprocessor()
        self.edge_extractor = edge_extractor or EdgeExtractor()

    def detect(
        self, image: np.ndarray, config: DetectionConfig, visualize: bool = False
    ) -> LineResult:
        """
        Detect horizontal interfaces.

        Args:
            image: Grayscale or BGR image
            config: Detection parameters (edge thresholds, peak-height ratio)
            visualize: If True, attach an annotated copy of the image

        Returns:
            LineResult of kind INTERFACES ordered by row, top to bottom
        """
        start_time = time.perf_counter()

        raster = as_raster(image)
        if raster is None:
            return LineResult(kind=ResultKind.INTERFACES)

        width = raster.shape[1]
        gray = self.preprocessor.process(raster)
        edges = self.edge_extractor.extract(gray, config.canny_lower, config.canny_upper)

        projection = self.row_projection(edges)
        min_peak_height = int(width * config.min_peak_height_ratio)
        peaks = find_peaks(projection, min_peak_height)

        lines = [Line(0.0, float(y), float(width - 1), float(y)) for y in peaks]

        logger.info(f"Horizontal Interface Detection: Found {len(lines)} interfaces")

        return LineResult(
            kind=ResultKind.INTERFACES,
            lines=tuple(lines),
            visualized_image=draw_lines(raster, lines, ResultKind.INTERFACES) if visualize else None,
            processing_time_ms=(time.perf_counter() - start_time) * 1000,
        )

    @staticmethod
    def row_projection(edges: np.ndarray) -> np.ndarray:
        """Count edge pixels per row."""
        return np.count_nonzero(edges, axis=1)
