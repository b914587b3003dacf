"""
Rectangle detection by collision search in pair space.

Two disjoint point pairs with the same midpoint and the same length are the
diagonals of a rectangle. Instead of testing every quadruple of curve
points, lifted samples are dropped into a spatial hash of tolerance-sized
cells and only near neighbours are compared.
"""

import math
from collections import defaultdict

from inscribe.config import DetectionConfig
from inscribe.detect.rectangles import sort_clockwise, validate_rectangle
from inscribe.models import Rectangle, optional_float
from inscribe.tracer import get_tracer, trace

DEFAULT_TOLERANCE = 0.04
MIN_TOLERANCE = 0.001
DEFAULT_MAX_RECTANGLES = 180

_NEIGHBOR_OFFSETS = [
    (dx, dy, dz)
    for dx in (-1, 0, 1)
    for dy in (-1, 0, 1)
    for dz in (-1, 0, 1)
]


def _quantize(value, tolerance):
    # halves round up, not to even
    return int(math.floor(value / tolerance + 0.5))


class PairSpaceHash:
    """Buckets of pair samples keyed by their quantized (mx, my, d)."""

    def __init__(self, tolerance):
        self.tolerance = tolerance
        self._buckets = defaultdict(list)

    def key(self, sample):
        return (
            _quantize(sample.mx, self.tolerance),
            _quantize(sample.my, self.tolerance),
            _quantize(sample.d, self.tolerance),
        )

    def neighbors(self, key):
        """Yield samples in the 27 cells around key, in a fixed order."""
        ix, iy, iz = key
        for dx, dy, dz in _NEIGHBOR_OFFSETS:
            bucket = self._buckets.get((ix + dx, iy + dy, iz + dz))
            if bucket:
                yield from bucket

    def insert(self, sample, key):
        self._buckets[key].append(sample)

    def __len__(self):
        return len(self._buckets)


def shares_index(a, b):
    """True when two pair samples use a common curve point."""
    return a.i == b.i or a.i == b.j or a.j == b.i or a.j == b.j


def coincident(a, b, tolerance):
    """Axis-aligned box test on (mx, my, d)."""
    return (
        abs(a.mx - b.mx) <= tolerance
        and abs(a.my - b.my) <= tolerance
        and abs(a.d - b.d) <= tolerance
    )


def rectangle_key(indices):
    """Canonical key for a rectangle: its sorted curve indices."""
    return tuple(sorted(indices))


def effective_tolerance(tolerance):
    """Tolerance actually used by detection: at least 0.001, 0.04 when unusable."""
    return max(MIN_TOLERANCE, optional_float(tolerance) or DEFAULT_TOLERANCE)


def _iter_rectangles(samples, space):
    """
    Yield validated rectangles in detection order.

    Each sample is compared against the samples already inserted in
    neighbouring hash cells, then inserted itself, so a sample never meets
    itself.
    """
    tol = space.tolerance
    seen = set()

    for sample in samples:
        key = space.key(sample)

        for candidate in space.neighbors(key):
            if shares_index(sample, candidate):
                continue
            if not coincident(sample, candidate, tol):
                continue

            indices = [sample.i, sample.j, candidate.i, candidate.j]
            canonical = rectangle_key(indices)
            if canonical in seen:
                continue

            ordered = sort_clockwise([sample.p1, sample.p2, candidate.p1, candidate.p2])
            if not validate_rectangle(ordered, tol):
                continue

            seen.add(canonical)
            mid_x = (sample.mx + candidate.mx) / 2
            mid_y = (sample.my + candidate.my) / 2
            distance = (sample.d + candidate.d) / 2
            yield Rectangle(
                points=ordered,
                midpoint=(mid_x, mid_y),
                distance=distance,
                collision_point=(mid_x, mid_y, distance),
                pair_indices=indices,
            )

        space.insert(sample, key)


@trace(label="find_rectangles", arg_names=["tolerance", "max_count"])
def find_rectangles(samples, tolerance=DEFAULT_TOLERANCE, max_count=DEFAULT_MAX_RECTANGLES):
    """
    Collision search that also reports whether the cap cut it short.

    Returns:
        (rectangles, truncated) where truncated is True only when at least
        one more rectangle existed beyond max_count
    """
    tracer = get_tracer()

    if not samples or len(samples) < 2 or max_count is None or max_count < 1:
        return [], False

    space = PairSpaceHash(effective_tolerance(tolerance))
    rectangles = []
    truncated = False

    for rect in _iter_rectangles(samples, space):
        if len(rectangles) >= max_count:
            truncated = True
            tracer.event(f"Rectangle cap reached: {max_count}", level="WARN")
            break
        rectangles.append(rect)

    tracer.event(
        f"Detected {len(rectangles)} rectangles",
        buckets=len(space),
        tolerance=space.tolerance,
    )

    return rectangles, truncated


def detect_rectangles(samples, tolerance=DEFAULT_TOLERANCE, max_count=DEFAULT_MAX_RECTANGLES):
    """
    Find rectangles inscribed in the curve behind a set of pair samples.

    Args:
        samples: list of PairSample, typically from lift_pairs
        tolerance: collision tolerance on mx, my and d (at least 0.001)
        max_count: stop after this many rectangles

    Returns:
        list of Rectangle in detection order
    """
    rectangles, _ = find_rectangles(samples, tolerance, max_count)
    return rectangles


def collision_tolerance(surface, config=None):
    """
    Derive a collision tolerance from the extent of the lifted surface.

    tolerance = clamp(span / 120, 0.018, 0.08) with span at least 0.6.
    """
    if config is None:
        config = DetectionConfig()

    x_lo, x_hi = surface.x_range
    y_lo, y_hi = surface.y_range
    span = max(config.min_span, x_hi - x_lo, y_hi - y_lo)
    return max(config.min_tolerance, min(config.max_tolerance, span / config.span_divisor))
