"""
Visualization utilities for SonoView.

Helper functions for drawing detected lines and circles onto images.
Drawing is cosmetic only and never feeds back into detection.
"""

from collections.abc import Sequence

import cv2
import numpy as np

from ..core.result import Circle, CircleResult, Line, LineResult, ResultKind

# BGR palette cycled per detection index
LINE_COLORS: list[tuple[int, int, int]] = [
    (0, 0, 255),  # Red
    (0, 255, 0),  # Green
    (255, 0, 0),  # Blue
    (0, 255, 255),  # Yellow
    (255, 0, 255),  # Magenta
    (255, 255, 0),  # Cyan
]

INTERFACE_COLOR = (0, 255, 255)
HOUGH_LINE_COLOR = (0, 255, 0)
HOUGH_CIRCLE_COLOR = (0, 255, 0)
BLOB_COLOR = (255, 0, 255)
LABEL_COLOR = (255, 255, 0)


def to_bgr(image: np.ndarray) -> np.ndarray:
    """Return a BGR copy of a grayscale, BGR or BGRA image."""
    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
    if image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2BGR)
    return image.copy()


def _point(x: float, y: float) -> tuple[int, int]:
    return (int(round(x)), int(round(y)))


def draw_lines(
    image: np.ndarray,
    lines: Sequence[Line],
    kind: ResultKind = ResultKind.HOUGH_LINES,
) -> np.ndarray:
    """
    Draw lines onto a BGR copy of the image.

    Args:
        image: Source image (not modified)
        lines: Lines to draw
        kind: Result kind, selects colors and labels

    Returns:
        Annotated BGR image
    """
    annotated = to_bgr(image)

    for index, line in enumerate(lines):
        pt1 = _point(line.x1, line.y1)
        pt2 = _point(line.x2, line.y2)

        if kind == ResultKind.RANSAC_LINES:
            color = LINE_COLORS[index % len(LINE_COLORS)]
            cv2.line(annotated, pt1, pt2, color, 2)
            label = f"L{index + 1}: {line.angle:.1f} deg"
            cv2.putText(
                annotated, label, _point(*line.midpoint), cv2.FONT_HERSHEY_SIMPLEX, 0.5, color, 2
            )
        elif kind == ResultKind.INTERFACES:
            cv2.line(annotated, pt1, pt2, INTERFACE_COLOR, 2)
            cv2.putText(
                annotated,
                "Interface",
                _point(10, line.y1 - 5),
                cv2.FONT_HERSHEY_SIMPLEX,
                0.5,
                INTERFACE_COLOR,
                1,
            )
        else:
            cv2.line(annotated, pt1, pt2, HOUGH_LINE_COLOR, 2)

    return annotated


def draw_circles(
    image: np.ndarray,
    circles: Sequence[Circle],
    kind: ResultKind = ResultKind.HOUGH_CIRCLES,
) -> np.ndarray:
    """
    Draw circles onto a BGR copy of the image.

    Hough circles are labeled with their radius, blobs with their circularity.
    """
    annotated = to_bgr(image)

    for circle in circles:
        center = _point(circle.x, circle.y)
        radius = int(round(circle.radius))
        label_origin = _point(circle.x - 20, circle.y - circle.radius - 10)

        if kind == ResultKind.BLOB_CIRCLES:
            cv2.circle(annotated, center, radius, BLOB_COLOR, 2)
            cv2.circle(annotated, center, 2, (0, 255, 0), -1)
            label = f"C:{circle.circularity:.2f}" if circle.circularity is not None else ""
            cv2.putText(
                annotated, label, label_origin, cv2.FONT_HERSHEY_SIMPLEX, 0.4, LABEL_COLOR, 1
            )
        else:
            cv2.circle(annotated, center, radius, HOUGH_CIRCLE_COLOR, 2)
            cv2.circle(annotated, center, 3, (255, 0, 0), -1)
            cv2.putText(
                annotated,
                f"R:{radius}",
                label_origin,
                cv2.FONT_HERSHEY_SIMPLEX,
                0.5,
                LABEL_COLOR,
                2,
            )

    return annotated


def draw_result(image: np.ndarray, result: LineResult | CircleResult) -> np.ndarray:
    """Draw any detection result onto a BGR copy of the image."""
    if isinstance(result, LineResult):
        return draw_lines(image, result.lines, result.kind)
    return draw_circles(image, result.circles, result.kind)
