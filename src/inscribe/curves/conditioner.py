"""
Curve conditioning for freehand strokes and generated curves.

Turns an arbitrary point list into a well-formed closed polyline:
uniform arc-length resampling, light Laplacian smoothing and scale
normalization. Degenerate input passes through unchanged instead of raising.
"""

import math

import numpy as np

from inscribe.config import CurveConfig
from inscribe.models import BoundingSquare, array_to_points, points_to_array, to_curve_points
from inscribe.tracer import get_tracer, trace

MIN_RESAMPLE_COUNT = 24
MAX_SMOOTH_WEIGHT = 0.48


def curve_bounds(points, pad=0.6):
    """
    Square bounding box around the points, padded on every side.

    The square is centred on the middle of the points' extent. An axis with
    (near) zero width is inflated by 1 on each side before padding, so span
    is always positive. Empty input returns the default [-3, 3] square.
    """
    valid = to_curve_points(points)
    if not valid:
        return BoundingSquare(x_min=-3.0, x_max=3.0, y_min=-3.0, y_max=3.0, span=6.0)

    arr = points_to_array(valid)
    x_min, y_min = arr.min(axis=0)
    x_max, y_max = arr.max(axis=0)

    if x_max - x_min < 1e-6:
        x_min -= 1
        x_max += 1
    if y_max - y_min < 1e-6:
        y_min -= 1
        y_max += 1

    half = max(x_max - x_min, y_max - y_min) / 2 + pad
    cx = (x_min + x_max) / 2
    cy = (y_min + y_max) / 2

    return BoundingSquare(
        x_min=float(cx - half),
        x_max=float(cx + half),
        y_min=float(cy - half),
        y_max=float(cy + half),
        span=float(half * 2),
    )


def normalize_scale(points, target_radius=2.3):
    """
    Recentre points on their bounding box and scale the larger extent to
    2 * target_radius.
    """
    valid = to_curve_points(points)
    if not valid:
        return []

    bounds = curve_bounds(valid, pad=0)
    cx, cy = bounds.center
    current_span = max(bounds.x_max - bounds.x_min, bounds.y_max - bounds.y_min)
    scale = (target_radius * 2) / current_span if current_span > 1e-9 else 1.0

    arr = points_to_array(valid)
    return array_to_points((arr - [cx, cy]) * scale)


def resample_closed(points, target_count=140):
    """
    Resample a closed polygon to uniform arc-length spacing.

    Emits max(24, target_count) points. The first point is appended as a
    closing vertex when the path is open, and zero-length segments are
    ignored. With fewer than 3 valid points the input comes back unchanged.
    """
    valid = to_curve_points(points)
    if len(valid) < 3:
        return valid

    arr = points_to_array(valid)
    if np.hypot(*(arr[-1] - arr[0])) > 1e-6:
        arr = np.vstack([arr, arr[:1]])

    starts = arr[:-1]
    ends = arr[1:]
    lengths = np.hypot(*(ends - starts).T)
    keep = lengths >= 1e-9
    starts, ends, lengths = starts[keep], ends[keep], lengths[keep]

    total_length = float(lengths.sum())
    if len(lengths) == 0 or total_length < 1e-9:
        return valid

    count = max(MIN_RESAMPLE_COUNT, int(math.floor(target_count)))
    cumulative = np.concatenate([[0.0], np.cumsum(lengths)[:-1]])
    targets = np.arange(count) / count * total_length

    # Last segment whose start is at or before the target; a target exactly
    # on a boundary stays on the earlier segment at t=1.
    seg = np.searchsorted(cumulative, targets, side="left") - 1
    seg = np.clip(seg, 0, len(lengths) - 1)

    t = (targets - cumulative[seg]) / lengths[seg]
    sampled = starts[seg] + (ends[seg] - starts[seg]) * t[:, None]

    return array_to_points(sampled)


def smooth_closed(points, passes=1, alpha=0.22):
    """
    Cyclic 3-point Laplacian smoothing.

    Each pass replaces p[k] with p[k]*(1-2w) + (p[k-1]+p[k+1])*w, where
    w = clamp(alpha, 0, 0.48). Needs at least 4 points and one pass.
    """
    valid = to_curve_points(points)
    if len(valid) < 4 or passes <= 0:
        return valid

    w = max(0.0, min(MAX_SMOOTH_WEIGHT, float(alpha)))
    arr = points_to_array(valid)

    for _ in range(max(1, int(math.floor(passes)))):
        arr = arr * (1 - 2 * w) + (np.roll(arr, 1, axis=0) + np.roll(arr, -1, axis=0)) * w

    return array_to_points(arr)


@trace(label="prepare_curve", arg_names=["target_count"])
def prepare_curve(points, target_count=140, config=None):
    """
    Canonical conditioning for raw input: resample, smooth once, normalize.

    Args:
        points: raw point-like values (non-finite entries are dropped)
        target_count: number of points to resample to (at least 24)
        config: CurveConfig with smoothing and scale settings (optional)

    Returns:
        list of CurvePoint
    """
    tracer = get_tracer()

    if config is None:
        config = CurveConfig()

    sampled = resample_closed(points, target_count)
    smoothed = smooth_closed(sampled, config.smooth_passes, config.smooth_alpha)
    normalized = normalize_scale(smoothed, config.target_radius)

    tracer.event(f"Conditioned curve: {len(normalized)} points")

    return normalized
