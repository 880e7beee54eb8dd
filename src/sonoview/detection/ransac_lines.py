"""
Iterative multi-line RANSAC.

Robust line detection for noisy ultrasound edge maps. Works for lines at any
angle and finds several lines by repeatedly fitting the best-supported model
and removing its inliers:

1. Collect all edge points
2. Run random two-point trials, keep the line with the most inliers
3. Stop when support drops below an absolute count or a ratio of all edges
4. Extend the winning line to the image border, record it, remove its inliers
5. Repeat on the remaining points
"""

import logging
import math
import time

import numpy as np

from ..core.config import DetectionConfig
from ..core.result import Line, LineResult, ResultKind
from ..utils.visualization import draw_lines
from .edge_extractor import EdgeExtractor
from .preprocessor import Preprocessor
from .raster import as_raster

logger = logging.getLogger(__name__)

SeedLike = int | np.random.Generator | None

# Used when no seed is supplied; shared for the process, never reseeded
_default_rng = np.random.default_rng()


def resolve_rng(seed: SeedLike) -> np.random.Generator:
    """Return the generator a detection call should draw from."""
    if seed is None:
        return _default_rng
    if isinstance(seed, np.random.Generator):
        return seed
    return np.random.default_rng(seed)


def adaptive_inlier_threshold(width: int, height: int, config: DetectionConfig) -> float:
    """
    Scale the nominal inlier distance to the image resolution.

    The base threshold is calibrated at ``ransac_baseline_size`` (640 for a
    640x480 frame), so a 3 px tolerance there becomes proportionally larger
    on bigger images.
    """
    scale = math.sqrt(width * height) / config.ransac_baseline_size
    return config.ransac_base_threshold * scale


def extend_to_border(
    x0: float, y0: float, vx: float, vy: float, width: int, height: int
) -> tuple[float, float, float, float]:
    """
    Extend the line through (x0, y0) with direction (vx, vy) to the image border.

    Mostly horizontal lines are extended to the left and right edges, mostly
    vertical ones to the top and bottom, so the slope division never blows up.
    """
    if abs(vx) > abs(vy):
        x1 = 0.0
        y1 = y0 - x0 * vy / vx
        x2 = float(width - 1)
        y2 = y0 + (width - 1 - x0) * vy / vx
    else:
        y1 = 0.0
        x1 = x0 - y0 * vx / vy
        y2 = float(height - 1)
        x2 = x0 + (height - 1 - y0) * vx / vy
    return x1, y1, x2, y2


def clip_to_image(
    line: tuple[float, float, float, float], width: int, height: int
) -> tuple[float, float, float, float]:
    """Clamp each endpoint coordinate into [0, width-1] x [0, height-1]."""
    x1, y1, x2, y2 = line
    return (
        max(0.0, min(width - 1.0, x1)),
        max(0.0, min(height - 1.0, y1)),
        max(0.0, min(width - 1.0, x2)),
        max(0.0, min(height - 1.0, y2)),
    )


class RansacLineDetector:
    """
    Greedy sequential RANSAC over edge points.

    The number of lines is not known in advance: each round extracts the best
    supported remaining line, so results come out strongest first. The
    resolution-adaptive distance threshold and the inlier-ratio early exit keep
    noise from being reported as spurious lines.

    Usage:
        detector = RansacLineDetector(preprocessor)
        result = detector.detect(frame, DetectionConfig(), seed=42)
    """

    def __init__(
        self,
        preprocessor: Preprocessor | None = None,
        edge_extractor: EdgeExtractor | None = None,
    ):
        self.preprocessor = preprocessor or Preprocessor()
        self.edge_extractor = edge_extractor or EdgeExtractor()

    def detect(
        self,
        image: np.ndarray,
        config: DetectionConfig,
        visualize: bool = False,
        seed: SeedLike = None,
    ) -> LineResult:
        """
        Detect lines with iterative RANSAC.

        Args:
            image: Grayscale or BGR image
            config: Detection parameters
            visualize: If True, attach an annotated copy of the image
            seed: Int seed or Generator for reproducible sampling

        Returns:
            LineResult of kind RANSAC_LINES, lines in discovery order with
            inlier counts and confidence percentages
        """
        start_time = time.perf_counter()

        raster = as_raster(image)
        if raster is None:
            return LineResult(kind=ResultKind.RANSAC_LINES)

        height, width = raster.shape[:2]
        gray = self.preprocessor.process(raster)
        edges = self.edge_extractor.extract(gray, config.canny_lower, config.canny_upper)
        points = EdgeExtractor.edge_points(edges)

        logger.info(f"RANSAC: Starting with {len(points)} edge points")

        lines = self.fit_lines(points, width, height, config, resolve_rng(seed))

        logger.info(f"RANSAC: Found {len(lines)} lines total")

        return LineResult(
            kind=ResultKind.RANSAC_LINES,
            lines=tuple(lines),
            visualized_image=draw_lines(raster, lines, ResultKind.RANSAC_LINES) if visualize else None,
            processing_time_ms=(time.perf_counter() - start_time) * 1000,
        )

    def fit_lines(
        self,
        points: np.ndarray,
        width: int,
        height: int,
        config: DetectionConfig,
        rng: np.random.Generator,
    ) -> list[Line]:
        """
        Run the multi-line RANSAC loop on a set of edge points.

        Args:
            points: (N, 2) array of (x, y) edge coordinates
            width: Image width, used for the threshold and border extension
            height: Image height
            config: Detection parameters
            rng: Random generator for sampling

        Returns:
            Detected lines, best supported first
        """
        total_points = len(points)
        if total_points < 2:
            logger.warning("RANSAC: Not enough edge points detected")
            return []

        threshold = adaptive_inlier_threshold(width, height, config)
        remaining = points
        lines: list[Line] = []

        for line_num in range(config.ransac_max_lines):
            if len(remaining) <= config.ransac_min_inliers:
                break

            best = self._best_trial(remaining, threshold, config, rng)
            if best is None or best[0] < config.ransac_min_inliers:
                logger.info("RANSAC: No more significant lines found")
                break

            inlier_count, inlier_mask, midpoint, direction = best

            inlier_ratio = inlier_count / total_points
            if inlier_ratio < config.ransac_min_inlier_ratio:
                logger.info(
                    f"RANSAC: Early exit - inlier ratio {inlier_ratio * 100:.3f}% "
                    f"below threshold {config.ransac_min_inlier_ratio * 100:.1f}%"
                )
                break

            endpoints = extend_to_border(*midpoint, *direction, width, height)
            x1, y1, x2, y2 = clip_to_image(endpoints, width, height)
            confidence = 100.0 * inlier_count / total_points
            lines.append(
                Line(
                    float(x1),
                    float(y1),
                    float(x2),
                    float(y2),
                    inlier_count=inlier_count,
                    confidence=confidence,
                )
            )

            remaining = remaining[~inlier_mask]

            angle = math.degrees(math.atan2(direction[1], direction[0]))
            logger.info(
                f"RANSAC: Line {line_num + 1} - {inlier_count} inliers ({confidence:.1f}%), "
                f"angle={angle:.1f} deg, {len(remaining)} points remaining"
            )

        return lines

    @staticmethod
    def _best_trial(
        points: np.ndarray,
        threshold: float,
        config: DetectionConfig,
        rng: np.random.Generator,
    ) -> tuple[int, np.ndarray, tuple[float, float], tuple[float, float]] | None:
        """
        Run one round of random two-point trials.

        Returns:
            (inlier_count, inlier_mask, sample_midpoint, unit_direction) of the
            first trial with the most inliers, or None if every pair was too close
        """
        samples = rng.integers(0, len(points), size=(config.ransac_iterations, 2))
        xs = points[:, 0]
        ys = points[:, 1]

        best_count = 0
        best: tuple[int, np.ndarray, tuple[float, float], tuple[float, float]] | None = None

        for i, j in samples:
            p1x, p1y = points[i]
            p2x, p2y = points[j]
            dx = p2x - p1x
            dy = p2y - p1y
            length = math.hypot(dx, dy)
            if length < config.ransac_min_sample_distance or length == 0.0:
                continue

            vx = dx / length
            vy = dy / length

            # Perpendicular distance from each point to the candidate line
            distances = np.abs((ys - p1y) * vx - (xs - p1x) * vy)
            inliers = distances < threshold
            count = int(np.count_nonzero(inliers))

            if count > best_count:
                best_count = count
                midpoint = ((p1x + p2x) / 2.0, (p1y + p2y) / 2.0)
                best = (count, inliers, midpoint, (vx, vy))

        return best
