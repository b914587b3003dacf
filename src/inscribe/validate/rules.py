"""
Self-checks run on every scan result.

These confirm the output contracts consumers rely on: a dense finite
surface, a complete pair set and rectangles built from four distinct points.
"""

import math

from inscribe.models import CheckResult, Severity, ValidationReport, pair_sample_count
from inscribe.tracer import get_tracer, trace


@trace(label="run_validation")
def run_validation(result, config):
    """
    Run all self-checks on a scan result.

    Returns ValidationReport with all check results.
    """
    tracer = get_tracer()

    checks = [
        check_surface_finite(result),
        check_pair_sample_count(result),
        check_rectangle_indices_distinct(result),
        check_rectangle_cap(result),
        check_curve_resolution(result, config),
    ]

    report = ValidationReport(checks=checks)

    tracer.event(f"Validation complete: {report.error_count} errors, {report.warning_count} warnings")

    return report


def check_surface_finite(result):
    """Every surface cell must hold a finite value."""
    bad = [
        [row_idx, col_idx]
        for row_idx, row in enumerate(result.surface.cells)
        for col_idx, value in enumerate(row)
        if not math.isfinite(value)
    ]

    if bad:
        return CheckResult(
            rule_id="surface_finite",
            severity=Severity.ERROR,
            passed=False,
            message=f"{len(bad)} surface cells are not finite",
            evidence={"cells": bad[:20]},
        )

    return CheckResult(
        rule_id="surface_finite",
        severity=Severity.ERROR,
        passed=True,
        message="All surface cells are finite",
        evidence={"rows": len(result.surface.cells)},
    )


def check_pair_sample_count(result):
    """The lift must produce exactly n*(n-1)/2 samples."""
    expected = pair_sample_count(len(result.curve))
    passed = result.sample_count == expected

    return CheckResult(
        rule_id="pair_sample_count",
        severity=Severity.ERROR,
        passed=passed,
        message=(
            f"Pair samples complete ({expected})" if passed
            else f"Expected {expected} pair samples, got {result.sample_count}"
        ),
        evidence={"expected": expected, "actual": result.sample_count},
    )


def check_rectangle_indices_distinct(result):
    """Each rectangle must come from four distinct curve points."""
    offending = [
        idx for idx, rect in enumerate(result.rectangles)
        if len(set(rect.pair_indices)) != 4
    ]

    if offending:
        return CheckResult(
            rule_id="rectangle_indices_distinct",
            severity=Severity.ERROR,
            passed=False,
            message=f"{len(offending)} rectangles reuse a curve point",
            evidence={"rectangles": offending[:20]},
        )

    return CheckResult(
        rule_id="rectangle_indices_distinct",
        severity=Severity.ERROR,
        passed=True,
        message=f"All {len(result.rectangles)} rectangles use four distinct points",
        evidence={},
    )


def check_rectangle_cap(result):
    """Warn when the rectangle cap cut detection short."""
    capped = result.truncated

    return CheckResult(
        rule_id="rectangle_cap",
        severity=Severity.WARN,
        passed=not capped,
        message=(
            f"Detection stopped at the cap of {result.max_rectangles} rectangles" if capped
            else "Detection ran to completion"
        ),
        evidence={"found": len(result.rectangles), "cap": result.max_rectangles},
    )


def check_curve_resolution(result, config):
    """Warn when the curve is dense enough to make the quadratic lift slow."""
    limit = config.max_curve_points
    n = len(result.curve)

    if n > limit:
        return CheckResult(
            rule_id="curve_resolution",
            severity=Severity.WARN,
            passed=False,
            message=f"Curve has {n} points; above {limit} the pair lift grows expensive",
            evidence={"points": n, "limit": limit, "samples": result.sample_count},
        )

    return CheckResult(
        rule_id="curve_resolution",
        severity=Severity.WARN,
        passed=True,
        message=f"Curve resolution {n} within limit",
        evidence={"points": n, "limit": limit},
    )
