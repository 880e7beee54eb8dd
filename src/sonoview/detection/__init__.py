"""Detection pipeline components for SonoView."""

from .raster import as_raster, image_size
from .preprocessor import Preprocessor
from .threshold_estimator import ThresholdEstimator
from .edge_extractor import EdgeExtractor
from .hough_lines import HoughLineDetector
from .ransac_lines import RansacLineDetector
from .hough_circles import HoughCircleDetector
from .blob_circles import BlobCircleDetector, contour_circularity
from .interface_detector import InterfaceDetector, find_peaks

__all__ = [
    "as_raster",
    "image_size",
    "Preprocessor",
    "ThresholdEstimator",
    "EdgeExtractor",
    "HoughLineDetector",
    "RansacLineDetector",
    "HoughCircleDetector",
    "BlobCircleDetector",
    "contour_circularity",
    "InterfaceDetector",
    "find_peaks",
]
