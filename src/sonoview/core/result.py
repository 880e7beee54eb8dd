"""
Detection result data structures.

Results are tagged by the algorithm that produced them, so callers can tell
from ``kind`` whether inlier or circularity metrics are present instead of
checking list lengths.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import numpy as np


class ResultKind(Enum):
    """Algorithm that produced a detection result."""

    HOUGH_LINES = "hough_lines"
    RANSAC_LINES = "ransac_lines"
    INTERFACES = "interfaces"
    HOUGH_CIRCLES = "hough_circles"
    BLOB_CIRCLES = "blob_circles"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Line:
    """
    Straight line segment in image pixel coordinates.

    Angle and length are derived from the endpoints.

    Attributes:
        x1, y1: First endpoint
        x2, y2: Second endpoint
        inlier_count: Supporting edge points (RANSAC only)
        confidence: Percentage of all edge points supporting the line (RANSAC only)
    """

    x1: float
    y1: float
    x2: float
    y2: float
    inlier_count: int | None = None
    confidence: float | None = None

    @property
    def angle(self) -> float:
        """Orientation in degrees, (-180, 180], measured with y pointing down."""
        return math.degrees(math.atan2(self.y2 - self.y1, self.x2 - self.x1))

    @property
    def length(self) -> float:
        """Euclidean distance between the endpoints."""
        return math.hypot(self.x2 - self.x1, self.y2 - self.y1)

    @property
    def midpoint(self) -> tuple[float, float]:
        return ((self.x1 + self.x2) / 2.0, (self.y1 + self.y2) / 2.0)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "x1": round(self.x1, 2),
            "y1": round(self.y1, 2),
            "x2": round(self.x2, 2),
            "y2": round(self.y2, 2),
            "angle": round(self.angle, 2),
            "length": round(self.length, 2),
        }
        if self.inlier_count is not None:
            data["inlier_count"] = self.inlier_count
        if self.confidence is not None:
            data["confidence"] = round(self.confidence, 2)
        return data


@dataclass(frozen=True)
class Circle:
    """
    Circle in image pixel coordinates.

    Attributes:
        x, y: Center
        radius: Radius in pixels
        circularity: 4*pi*area/perimeter^2 of the source contour (blob only).
            Not clamped; rasterization can push it slightly above 1.0.
    """

    x: float
    y: float
    radius: float
    circularity: float | None = None

    @property
    def center(self) -> tuple[float, float]:
        return (self.x, self.y)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "x": round(self.x, 2),
            "y": round(self.y, 2),
            "radius": round(self.radius, 2),
        }
        if self.circularity is not None:
            data["circularity"] = round(self.circularity, 3)
        return data


@dataclass(frozen=True)
class LineResult:
    """
    Lines found by one detection call, in discovery order.

    Attributes:
        kind: HOUGH_LINES, RANSAC_LINES or INTERFACES
        lines: Detected lines
        visualized_image: BGR overlay when visualization was requested
        processing_time_ms: Time taken for detection in milliseconds
    """

    kind: ResultKind
    lines: tuple[Line, ...] = ()
    visualized_image: np.ndarray | None = field(default=None, compare=False, repr=False)
    processing_time_ms: float = field(default=0.0, compare=False)

    @property
    def count(self) -> int:
        return len(self.lines)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def has_inlier_metrics(self) -> bool:
        """RANSAC results carry inlier counts and confidences."""
        return self.kind == ResultKind.RANSAC_LINES

    @property
    def inlier_counts(self) -> list[int] | None:
        """Inlier count per line, aligned with ``lines``; None for non-RANSAC kinds."""
        if not self.has_inlier_metrics:
            return None
        return [line.inlier_count for line in self.lines]  # type: ignore[misc]

    @property
    def confidences(self) -> list[float] | None:
        """Confidence percentage per line; None for non-RANSAC kinds."""
        if not self.has_inlier_metrics:
            return None
        return [line.confidence for line in self.lines]  # type: ignore[misc]

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary (excludes numpy arrays)."""
        return {
            "kind": self.kind.value,
            "count": self.count,
            "lines": [line.to_dict() for line in self.lines],
            "processing_time_ms": round(self.processing_time_ms, 2),
        }


@dataclass(frozen=True)
class CircleResult:
    """
    Circles found by one detection call, in discovery order.

    Attributes:
        kind: HOUGH_CIRCLES or BLOB_CIRCLES
        circles: Detected circles
        visualized_image: BGR overlay when visualization was requested
        processing_time_ms: Time taken for detection in milliseconds
    """

    kind: ResultKind
    circles: tuple[Circle, ...] = ()
    visualized_image: np.ndarray | None = field(default=None, compare=False, repr=False)
    processing_time_ms: float = field(default=0.0, compare=False)

    @property
    def count(self) -> int:
        return len(self.circles)

    @property
    def is_empty(self) -> bool:
        return not self.circles

    @property
    def has_circularity(self) -> bool:
        return self.kind == ResultKind.BLOB_CIRCLES

    @property
    def circularities(self) -> list[float] | None:
        """Circularity per circle, aligned with ``circles``; None for Hough results."""
        if not self.has_circularity:
            return None
        return [circle.circularity for circle in self.circles]  # type: ignore[misc]

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary (excludes numpy arrays)."""
        return {
            "kind": self.kind.value,
            "count": self.count,
            "circles": [circle.to_dict() for circle in self.circles],
            "processing_time_ms": round(self.processing_time_ms, 2),
        }
