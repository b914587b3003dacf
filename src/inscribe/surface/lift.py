"""
Pair-space lift: every unordered pair of curve points becomes one 3-D
sample (midpoint x, midpoint y, pair distance).

Two disjoint pairs that land on the same sample share a midpoint and a
length, which makes their four endpoints a rectangle.
"""

import numpy as np

from inscribe.models import CurvePoint, PairSample, finite_xy
from inscribe.tracer import get_tracer, trace


@trace(label="lift_pairs")
def lift_pairs(curve):
    """
    Lift all point pairs of a curve into pair space.

    Non-finite points are skipped along with every pair they would join;
    i and j keep referring to positions in the input sequence.

    Args:
        curve: sequence of CurvePoint (or point-like values)

    Returns:
        list of PairSample ordered by (i, j), i < j
    """
    tracer = get_tracer()

    positions = []
    points = []
    for idx, item in enumerate(curve or []):
        xy = finite_xy(item)
        if xy is None:
            continue
        positions.append(idx)
        points.append(item if isinstance(item, CurvePoint) else CurvePoint(x=xy[0], y=xy[1]))

    n = len(points)
    if n < 2:
        return []

    coords = np.array([[p.x, p.y] for p in points], dtype=float)
    a, b = np.triu_indices(n, k=1)

    mid = (coords[a] + coords[b]) / 2
    delta = coords[b] - coords[a]
    dist = np.hypot(delta[:, 0], delta[:, 1])

    samples = [
        PairSample(
            i=positions[ia], j=positions[ib],
            p1=points[ia], p2=points[ib],
            mx=mx, my=my, d=d,
        )
        for ia, ib, mx, my, d in zip(
            a.tolist(), b.tolist(), mid[:, 0].tolist(), mid[:, 1].tolist(), dist.tolist()
        )
    ]

    tracer.event(f"Lifted {n} points to {len(samples)} pair samples")

    return samples
