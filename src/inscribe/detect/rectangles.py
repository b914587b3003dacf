"""
Approximate rectangle test for four curve points.

The thresholds below are empirical and tunable, not derived.
"""

import math

from inscribe.models import finite_xy

ANGLE_BASE = 0.16
ANGLE_PER_TOL = 0.8
SIDE_BASE = 0.18
SIDE_PER_TOL = 1.5
PYTHAGOREAN_SLACK = 1.2
MIN_EDGE = 1e-8


def sort_clockwise(points):
    """
    Order points by ascending polar angle around their centroid.

    With the y axis pointing down, as on a drawing canvas, this is clockwise.
    Anything other than exactly four points is returned as a list, unsorted.
    """
    points = list(points or [])
    if len(points) != 4:
        return points

    xys = [finite_xy(p) for p in points]
    if any(xy is None for xy in xys):
        return points

    cx = sum(x for x, _ in xys) / 4
    cy = sum(y for _, y in xys) / 4
    order = sorted(range(4), key=lambda k: math.atan2(xys[k][1] - cy, xys[k][0] - cx))
    return [points[k] for k in order]


def _squared_distance(a, b):
    dx = b[0] - a[0]
    dy = b[1] - a[1]
    return dx * dx + dy * dy


def validate_rectangle(points, tolerance=0.04):
    """
    Check whether four points form a rectangle within tolerance.

    Three conditions must all hold after ordering the points around their
    centroid:
    - every corner is close to a right angle: |cos| <= 0.16 + 0.8*tol
    - the two smallest squared distances sum to the next two, and the two
      diagonals agree, both within
      eps = (0.18 + 1.5*tol) * max(longest squared distance, 1)
    - shorter side^2 + longer side^2 matches diagonal^2 within 1.2*eps

    Degenerate input (wrong count, repeated or non-finite points) is
    rejected rather than raising.
    """
    if points is None or len(points) != 4:
        return False

    xys = [finite_xy(p) for p in sort_clockwise(points)]
    if any(xy is None for xy in xys):
        return False

    for k in range(4):
        prev = xys[(k + 3) % 4]
        cur = xys[k]
        nxt = xys[(k + 1) % 4]

        v1 = (prev[0] - cur[0], prev[1] - cur[1])
        v2 = (nxt[0] - cur[0], nxt[1] - cur[1])
        n1 = math.hypot(*v1)
        n2 = math.hypot(*v2)
        if n1 < MIN_EDGE or n2 < MIN_EDGE:
            return False

        cos_ratio = abs((v1[0] * v2[0] + v1[1] * v2[1]) / (n1 * n2))
        if cos_ratio > ANGLE_BASE + tolerance * ANGLE_PER_TOL:
            return False

    dsq = sorted(
        _squared_distance(xys[a], xys[b])
        for a in range(4)
        for b in range(a + 1, 4)
    )
    if dsq[0] < MIN_EDGE:
        return False

    eps = (SIDE_BASE + tolerance * SIDE_PER_TOL) * max(dsq[5], 1.0)

    sides_grouped = abs((dsq[0] + dsq[1]) - (dsq[2] + dsq[3])) < eps
    diagonals_equal = abs(dsq[4] - dsq[5]) < eps
    pythagorean = abs(dsq[0] + dsq[2] - dsq[5]) < eps * PYTHAGOREAN_SLACK

    return sides_grouped and diagonals_equal and pythagorean

