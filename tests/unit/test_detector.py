"""
Unit tests for UltrasoundDetector and the module-level entry points.
"""

import numpy as np
import pytest

import sonoview
from sonoview.core.config import DetectionConfig
from sonoview.core.detector import DetectionMethod, UltrasoundDetector, get_default_detector
from sonoview.core.result import CircleResult, LineResult, ResultKind


@pytest.fixture
def detector(test_config):
    return UltrasoundDetector(test_config)


EXPECTED_KINDS = {
    DetectionMethod.HOUGH_LINES: ResultKind.HOUGH_LINES,
    DetectionMethod.RANSAC_LINES: ResultKind.RANSAC_LINES,
    DetectionMethod.HOUGH_CIRCLES: ResultKind.HOUGH_CIRCLES,
    DetectionMethod.BLOB_CIRCLES: ResultKind.BLOB_CIRCLES,
    DetectionMethod.INTERFACES: ResultKind.INTERFACES,
}


class TestUltrasoundDetector:
    """Tests for the detector orchestrator."""

    def test_default_config_from_dict(self, test_config):
        test_config["edges"] = {"lower": 40, "upper": 100}

        detector = UltrasoundDetector(test_config)

        assert detector.default_config.canny_lower == 40.0
        assert detector.default_config.canny_upper == 100.0

    def test_no_config(self):
        assert UltrasoundDetector().default_config == DetectionConfig()

    def test_components_share_preprocessor(self, detector):
        assert detector.ransac_lines.preprocessor is detector.preprocessor
        assert detector.blob_circles.preprocessor is detector.preprocessor
        assert detector.threshold_estimator.preprocessor is detector.preprocessor

    @pytest.mark.parametrize("method", list(DetectionMethod))
    def test_blank_gray_is_empty(self, detector, blank_image, method):
        result = detector.detect(blank_image, method, seed=0)

        assert result.kind == EXPECTED_KINDS[method]
        assert result.count == 0

    @pytest.mark.parametrize("method", list(DetectionMethod))
    def test_blank_color_is_empty(self, detector, blank_color_image, method):
        assert detector.detect(blank_color_image, method, seed=0).is_empty

    @pytest.mark.parametrize("method", list(DetectionMethod))
    @pytest.mark.parametrize(
        "image",
        [None, np.zeros((0, 0), dtype=np.uint8), np.zeros((10, 0, 3), dtype=np.uint8)],
        ids=["none", "zero", "zero-width"],
    )
    def test_invalid_image_is_empty(self, detector, method, image):
        result = detector.detect(image, method)

        assert result.is_empty
        assert result.visualized_image is None

    @pytest.mark.parametrize("method", list(DetectionMethod))
    def test_visualized_image_shape(self, detector, blank_image, method):
        result = detector.detect(blank_image, method, visualize=True, seed=0)

        assert result.visualized_image.shape == (480, 640, 3)
        assert result.visualized_image.dtype == np.uint8

    def test_dispatch_by_string(self, detector, interface_image):
        result = detector.detect(interface_image, "interfaces")

        assert isinstance(result, LineResult)
        assert result.kind == ResultKind.INTERFACES
        assert result.count == 3

    def test_circle_methods_return_circle_results(self, detector, disk_image):
        assert isinstance(detector.detect(disk_image, "blob"), CircleResult)
        assert isinstance(detector.detect(disk_image, "circles"), CircleResult)

    def test_unknown_method(self, detector, blank_image):
        with pytest.raises(ValueError):
            detector.detect(blank_image, "snakes")

    def test_explicit_config_used(self, detector, disk_image):
        result = detector.detect_circles_blob(disk_image, DetectionConfig(blob_max_area=500))

        assert result.is_empty

    def test_preprocess(self, detector, blank_color_image):
        gray = detector.preprocess(blank_color_image)

        assert gray.shape == (480, 640)
        assert detector.preprocess(None) is None

    def test_auto_config(self, detector, ransac_line_image):
        base = DetectionConfig(hough_threshold=60)

        config = detector.auto_config(ransac_line_image, base)

        lower, upper = detector.estimate_thresholds(ransac_line_image)
        assert config.canny_lower == lower
        assert config.canny_upper == upper
        assert config.hough_threshold == 60
        assert base.canny_lower == 30.0

    def test_input_not_mutated(self, detector, ransac_line_image):
        original = ransac_line_image.copy()

        for method in DetectionMethod:
            detector.detect(ransac_line_image, method, visualize=True, seed=0)

        np.testing.assert_array_equal(ransac_line_image, original)


class TestModuleFunctions:
    """Tests for the package-level convenience functions."""

    def test_default_detector_is_shared(self):
        assert get_default_detector() is get_default_detector()

    def test_functions_on_blank_image(self, blank_image):
        assert sonoview.detect_lines_hough(blank_image).is_empty
        assert sonoview.detect_lines_ransac(blank_image, seed=1).is_empty
        assert sonoview.detect_circles_hough(blank_image).is_empty
        assert sonoview.detect_circles_blob(blank_image).is_empty
        assert sonoview.detect_interfaces(blank_image).is_empty

    def test_estimate_thresholds(self, blank_image):
        lower, upper = sonoview.estimate_thresholds(blank_image)

        assert upper >= 2 * lower

    def test_preprocess(self, disk_image):
        assert sonoview.preprocess(disk_image).shape == disk_image.shape

    def test_ransac_seed_reproducible(self, ransac_line_image):
        a = sonoview.detect_lines_ransac(ransac_line_image, seed=42)
        b = sonoview.detect_lines_ransac(ransac_line_image, seed=42)

        assert a == b
