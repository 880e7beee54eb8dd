"""Tests for detection result types."""

import math

import numpy as np
import pytest

from sonoview.core.result import Circle, CircleResult, Line, LineResult, ResultKind


class TestLine:
    def test_angle_and_length_derived(self):
        line = Line(0.0, 0.0, 3.0, 4.0)

        assert line.length == pytest.approx(5.0)
        assert line.angle == pytest.approx(math.degrees(math.atan2(4, 3)))

    def test_vertical_angle(self):
        assert Line(10.0, 0.0, 10.0, 100.0).angle == pytest.approx(90.0)

    def test_midpoint(self):
        assert Line(0.0, 10.0, 20.0, 30.0).midpoint == (10.0, 20.0)

    def test_to_dict_omits_missing_metrics(self):
        data = Line(0.0, 0.0, 10.0, 0.0).to_dict()

        assert data["length"] == 10.0
        assert "inlier_count" not in data
        assert "confidence" not in data

    def test_to_dict_with_metrics(self):
        data = Line(0.0, 0.0, 10.0, 0.0, inlier_count=120, confidence=61.234).to_dict()

        assert data["inlier_count"] == 120
        assert data["confidence"] == 61.23


class TestLineResult:
    """Result kind decides which metrics are available."""

    def test_hough_has_no_metrics(self):
        result = LineResult(kind=ResultKind.HOUGH_LINES, lines=(Line(0, 0, 10, 10),))

        assert result.count == 1
        assert not result.has_inlier_metrics
        assert result.inlier_counts is None
        assert result.confidences is None

    def test_ransac_metrics_aligned(self):
        lines = (
            Line(0, 0, 10, 0, inlier_count=300, confidence=60.0),
            Line(0, 5, 10, 5, inlier_count=100, confidence=20.0),
        )
        result = LineResult(kind=ResultKind.RANSAC_LINES, lines=lines)

        assert result.inlier_counts == [300, 100]
        assert result.confidences == [60.0, 20.0]

    def test_empty_ransac_metrics(self):
        result = LineResult(kind=ResultKind.RANSAC_LINES)

        assert result.is_empty
        assert result.count == 0
        assert result.inlier_counts == []

    def test_equality_ignores_image_and_timing(self):
        lines = (Line(0, 0, 10, 0),)
        a = LineResult(
            kind=ResultKind.INTERFACES,
            lines=lines,
            visualized_image=np.zeros((2, 2, 3), dtype=np.uint8),
            processing_time_ms=3.0,
        )
        b = LineResult(kind=ResultKind.INTERFACES, lines=lines, processing_time_ms=7.0)

        assert a == b

    def test_to_dict(self):
        result = LineResult(kind=ResultKind.INTERFACES, lines=(Line(0, 50, 639, 50),))
        data = result.to_dict()

        assert data["kind"] == "interfaces"
        assert data["count"] == 1
        assert data["lines"][0]["y1"] == 50


class TestCircleResult:
    def test_hough_has_no_circularity(self):
        result = CircleResult(kind=ResultKind.HOUGH_CIRCLES, circles=(Circle(10, 10, 5),))

        assert result.circularities is None

    def test_blob_circularities(self):
        circles = (Circle(10, 10, 5, circularity=0.93), Circle(50, 50, 8, circularity=0.71))
        result = CircleResult(kind=ResultKind.BLOB_CIRCLES, circles=circles)

        assert result.count == 2
        assert result.circularities == [0.93, 0.71]

    def test_circle_to_dict(self):
        data = Circle(1.234, 5.678, 9.0, circularity=0.98765).to_dict()

        assert data == {"x": 1.23, "y": 5.68, "radius": 9.0, "circularity": 0.988}

    def test_result_kind_str(self):
        assert str(ResultKind.BLOB_CIRCLES) == "blob_circles"
