"""
Probabilistic Hough line detection.

Good for straight needles and the water bath bottom when the edge map is
reasonably clean.
"""

import logging
import time

import cv2
import numpy as np

from ..core.config import DetectionConfig
from ..core.result import Line, LineResult, ResultKind
from ..utils.visualization import draw_lines
from .edge_extractor import EdgeExtractor
from .preprocessor import Preprocessor
from .raster import as_raster

logger = logging.getLogger(__name__)


class HoughLineDetector:
    """
    Detects line segments with the probabilistic Hough transform.

    Votes are accumulated at 1 pixel / 1 degree resolution. Segments whose
    bin reaches ``hough_threshold`` are kept, collinear pieces closer than
    ``max_line_gap`` are joined and anything shorter than ``min_line_length``
    is dropped.

    Usage:
        detector = HoughLineDetector(preprocessor)
        result = detector.detect(frame, DetectionConfig())
    """

    RHO_RESOLUTION = 1.0
    THETA_RESOLUTION = np.pi / 180

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
        Detect line segments.

        Args:
            image: Grayscale or BGR image
            config: Detection parameters
            visualize: If True, attach an annotated copy of the image

        Returns:
            LineResult of kind HOUGH_LINES in the order OpenCV reports them
        """
        start_time = time.perf_counter()

        raster = as_raster(image)
        if raster is None:
            return LineResult(kind=ResultKind.HOUGH_LINES)

        gray = self.preprocessor.process(raster)
        edges = self.edge_extractor.extract(gray, config.canny_lower, config.canny_upper)

        segments = cv2.HoughLinesP(
            EdgeExtractor.to_mask(edges),
            self.RHO_RESOLUTION,
            self.THETA_RESOLUTION,
            config.hough_threshold,
            minLineLength=config.min_line_length,
            maxLineGap=config.max_line_gap,
        )

        lines = self.segments_to_lines(segments)

        logger.info(f"Hough Line Detection: Found {len(lines)} lines")

        return LineResult(
            kind=ResultKind.HOUGH_LINES,
            lines=tuple(lines),
            visualized_image=draw_lines(raster, lines, ResultKind.HOUGH_LINES) if visualize else None,
            processing_time_ms=(time.perf_counter() - start_time) * 1000,
        )

    @staticmethod
    def segments_to_lines(segments: np.ndarray | None) -> list[Line]:
        """
        Convert a ``HoughLinesP`` result to lines.

        OpenCV 4 returns segments as (N, 1, 4), OpenCV 5 as (N, 4); both are
        flattened to one row per segment.
        """
        if segments is None:
            return []
        return [
            Line(float(x1), float(y1), float(x2), float(y2))
            for x1, y1, x2, y2 in np.asarray(segments).reshape(-1, 4)
        ]
