"""Tests for data models and point helpers."""

import math

import numpy as np
import pytest
from pydantic import ValidationError

from inscribe.models import (
    CheckResult, CurvePoint, Rectangle, Severity, ValidationReport,
    finite_xy, generate_scan_id, optional_float, pair_sample_count,
    to_curve_points,
)


class TestCurvePoint:
    """Tests for the curve point model."""

    def test_rejects_non_finite(self):
        """Test that NaN and infinity never make it into a CurvePoint."""
        with pytest.raises(ValidationError):
            CurvePoint(x=float("nan"), y=0)
        with pytest.raises(ValidationError):
            CurvePoint(x=0, y=float("inf"))

    def test_rejects_extra_fields(self):
        with pytest.raises(ValidationError):
            CurvePoint(x=0, y=0, z=1)

    def test_frozen(self):
        point = CurvePoint(x=1, y=2)

        with pytest.raises(ValidationError):
            point.x = 3


class TestFiniteXY:
    """Tests for point-like coercion."""

    @pytest.mark.parametrize("item, expected", [
        ({"x": 1, "y": 2}, (1.0, 2.0)),
        ([3, 4], (3.0, 4.0)),
        ((5, 6, 7), (5.0, 6.0)),
        (np.array([0.5, -0.5]), (0.5, -0.5)),
        (["1.5", "2"], (1.5, 2.0)),
        ({"x": 1}, None),
        ([1], None),
        (["x", "y"], None),
        ([float("nan"), 0], None),
        (None, None),
        ("12", None),
    ])
    def test_finite_xy(self, item, expected):
        assert finite_xy(item) == expected

    def test_to_curve_points_keeps_order(self):
        """Test that valid entries keep their relative order."""
        points = to_curve_points([[0, 0], None, {"x": 1, "y": 1}, [math.inf, 2], CurvePoint(x=2, y=2)])

        assert [(p.x, p.y) for p in points] == [(0, 0), (1, 1), (2, 2)]


class TestRectangleModel:
    """Tests for the rectangle model."""

    def test_requires_four_indices(self, square_corners):
        with pytest.raises(ValidationError):
            Rectangle(
                points=square_corners,
                midpoint=(0, 0),
                distance=2,
                collision_point=(0, 0, 2),
                pair_indices=[0, 1, 2],
            )


class TestHelpers:
    """Tests for small model helpers."""

    def test_scan_id_deterministic(self, circle16):
        """Test that the same curve always hashes to the same id."""
        assert generate_scan_id(circle16) == generate_scan_id(list(circle16))
        assert generate_scan_id(circle16).startswith("scan_")
        assert generate_scan_id(circle16) != generate_scan_id(circle16[:-1])
        assert generate_scan_id([]) == "scan_empty"

    def test_pair_sample_count(self):
        assert [pair_sample_count(n) for n in (0, 1, 2, 5)] == [0, 0, 1, 10]

    @pytest.mark.parametrize("value, expected", [
        (None, None), ("0.25", 0.25), (3, 3.0), ("abc", None), (float("inf"), None),
    ])
    def test_optional_float(self, value, expected):
        assert optional_float(value) == expected

    def test_report_counts(self):
        """Test error and warning counting on a report."""
        report = ValidationReport(checks=[
            CheckResult(rule_id="a", severity=Severity.ERROR, passed=True, message=""),
            CheckResult(rule_id="b", severity=Severity.ERROR, passed=False, message=""),
            CheckResult(rule_id="c", severity=Severity.WARN, passed=False, message=""),
        ])

        assert report.has_errors
        assert report.error_count == 1
        assert report.warning_count == 1
