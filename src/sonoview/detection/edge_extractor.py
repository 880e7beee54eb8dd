"""
Edge extraction with hysteresis thresholding.

Wraps the Canny detector: Sobel gradients, non-maximum suppression along the
gradient direction, and double-threshold hysteresis where weak edges survive
only when connected to strong ones.
"""

import cv2
import numpy as np


class EdgeExtractor:
    """
    Produces binary edge maps from preprocessed grayscale images.

    Usage:
        extractor = EdgeExtractor()
        edges = extractor.extract(gray, 30, 90)
        points = extractor.edge_points(edges)
    """

    def __init__(self, aperture_size: int = 3, l2_gradient: bool = False):
        self.aperture_size = aperture_size
        self.l2_gradient = l2_gradient

    def extract(self, gray: np.ndarray, lower: float, upper: float) -> np.ndarray:
        """
        Extract edges from a grayscale image.

        Args:
            gray: Single-channel uint8 image
            lower: Hysteresis lower threshold
            upper: Hysteresis upper threshold

        Returns:
            Boolean array of the same shape, True at edge pixels
        """
        edges = cv2.Canny(
            gray,
            lower,
            upper,
            apertureSize=self.aperture_size,
            L2gradient=self.l2_gradient,
        )
        return edges > 0

    @staticmethod
    def to_mask(edges: np.ndarray) -> np.ndarray:
        """Convert a boolean edge map to an OpenCV mask (255 = edge)."""
        return edges.astype(np.uint8) * 255

    @staticmethod
    def edge_points(edges: np.ndarray) -> np.ndarray:
        """
        Collect edge pixel coordinates.

        Args:
            edges: Boolean edge map

        Returns:
            (N, 2) float64 array of (x, y) in row-major scan order
        """
        rows, cols = np.nonzero(edges)
        return np.column_stack((cols, rows)).astype(np.float64)
