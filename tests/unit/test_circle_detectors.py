"""
Unit tests for Hough and blob circle detection.
"""

import math

import cv2
import numpy as np
import pytest

from sonoview.core.config import DetectionConfig
from sonoview.core.result import ResultKind
from sonoview.detection.blob_circles import BlobCircleDetector, contour_circularity
from sonoview.detection.hough_circles import HoughCircleDetector


class TestHoughCircleDetector:
    """Tests for Hough gradient circle detection."""

    @pytest.fixture
    def detector(self):
        return HoughCircleDetector()

    def test_blank_image(self, detector, blank_image):
        result = detector.detect(blank_image, DetectionConfig())

        assert result.kind == ResultKind.HOUGH_CIRCLES
        assert result.is_empty

    def test_invalid_image(self, detector):
        assert detector.detect(np.zeros((0, 0), dtype=np.uint8), DetectionConfig()).is_empty

    def test_finds_disk(self, detector, circle_image):
        result = detector.detect(circle_image, DetectionConfig())

        assert result.count >= 1
        circle = result.circles[0]
        assert math.hypot(circle.x - 200, circle.y - 200) < 5.0
        assert circle.radius == pytest.approx(40, abs=5)

    def test_no_circularity(self, detector, circle_image):
        result = detector.detect(circle_image, DetectionConfig())

        assert result.circularities is None
        assert all(circle.circularity is None for circle in result.circles)

    def test_radius_range_excludes(self, detector, circle_image):
        result = detector.detect(circle_image, DetectionConfig(min_radius=80, max_radius=150))

        assert all(circle.radius >= 80 for circle in result.circles)

    def test_visualize(self, detector, circle_image):
        result = detector.detect(circle_image, DetectionConfig(), visualize=True)

        assert result.visualized_image.shape == (400, 400, 3)

    @pytest.mark.parametrize(
        "found",
        [
            np.array([[[200.0, 150.0, 30.0], [80.0, 60.0, 12.0]]], dtype=np.float32),
            np.array([[200.0, 150.0, 30.0], [80.0, 60.0, 12.0]], dtype=np.float32),
            np.array([[[200.0, 150.0, 30.0, 41.0]], [[80.0, 60.0, 12.0, 17.0]]], dtype=np.float32),
        ],
        ids=["nested", "flat", "with-votes"],
    )
    def test_candidate_layouts(self, found):
        circles = HoughCircleDetector.circles_from_candidates(found)

        assert [(c.x, c.y, c.radius) for c in circles] == [
            (200.0, 150.0, 30.0),
            (80.0, 60.0, 12.0),
        ]

    def test_no_candidates(self):
        assert HoughCircleDetector.circles_from_candidates(None) == []
        assert HoughCircleDetector.circles_from_candidates(np.empty((1, 0, 3))) == []


class TestContourCircularity:
    """Tests for the circularity measure."""

    @staticmethod
    def _largest_contour(img):
        contours, _ = cv2.findContours(img, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)
        return max(contours, key=cv2.contourArea)

    def test_disk_is_nearly_circular(self, disk_image):
        contour = self._largest_contour(disk_image)

        assert 0.90 <= contour_circularity(contour, perimeter_epsilon=1.0) <= 1.05

    def test_square(self):
        img = np.zeros((200, 200), dtype=np.uint8)
        cv2.rectangle(img, (50, 50), (110, 110), 255, -1)

        circularity = contour_circularity(self._largest_contour(img), perimeter_epsilon=1.0)

        assert circularity == pytest.approx(math.pi / 4, abs=0.02)

    def test_elongated_rectangle(self):
        img = np.zeros((200, 300), dtype=np.uint8)
        cv2.rectangle(img, (20, 100), (220, 110), 255, -1)

        assert contour_circularity(self._largest_contour(img), perimeter_epsilon=1.0) < 0.3

    def test_degenerate_contour(self):
        point = np.array([[[5, 5]]], dtype=np.int32)

        assert contour_circularity(point) == 0.0


class TestBlobCircleDetector:
    """Tests for contour based blob detection."""

    @pytest.fixture
    def detector(self):
        return BlobCircleDetector()

    def test_blank_image(self, detector, blank_image):
        result = detector.detect(blank_image, DetectionConfig())

        assert result.kind == ResultKind.BLOB_CIRCLES
        assert result.is_empty
        assert result.circularities == []

    def test_finds_disk(self, detector, disk_image):
        result = detector.detect(disk_image, DetectionConfig())

        assert result.count == 1
        circle = result.circles[0]
        assert math.hypot(circle.x - 200, circle.y - 150) < 2.0
        assert circle.radius == pytest.approx(30, abs=2)
        assert 0.90 <= circle.circularity <= 1.05

    def test_elongated_blob_rejected(self, detector, disk_image):
        img = disk_image.copy()
        cv2.rectangle(img, (350, 300), (550, 310), 255, -1)

        result = detector.detect(img, DetectionConfig())

        assert result.count == 1
        assert result.circles[0].x == pytest.approx(200, abs=2)

    def test_area_bounds(self, detector, disk_image):
        """A disk of area ~2800 px is outside [100, 1000]."""
        result = detector.detect(disk_image, DetectionConfig(blob_max_area=1000))

        assert result.is_empty

    def test_circularity_cutoff(self, detector, disk_image):
        result = detector.detect(disk_image, DetectionConfig(min_circularity=0.999))

        assert result.is_empty

    def test_circularities_aligned(self, detector, disk_image):
        img = disk_image.copy()
        cv2.circle(img, (450, 300), 25, 255, -1)

        result = detector.detect(img, DetectionConfig())

        assert result.count == 2
        assert len(result.circularities) == 2
        assert all(c > 0.6 for c in result.circularities)

    def test_visualize(self, detector, disk_image):
        result = detector.detect(disk_image, DetectionConfig(), visualize=True)

        assert result.visualized_image.shape == (480, 640, 3)
