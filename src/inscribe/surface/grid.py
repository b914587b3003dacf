"""
Surface grid for display of the lifted point cloud.

Pair samples are binned on a regular grid over the midpoint plane, each cell
holding the mean pair distance; empty cells are inpainted from their
neighbours so renderers always get a dense, finite height field.
"""

import math

import numpy as np

from inscribe.models import SurfaceGrid, optional_float
from inscribe.tracer import get_tracer, trace

MIN_RESOLUTION = 12
MAX_RESOLUTION = 120
DEFAULT_RESOLUTION = 48
INPAINT_PASSES = 3
INPAINT_MAX_RADIUS = 4


def clamp_resolution(resolution):
    """Clamp a grid resolution to [12, 120]; unusable values give 48."""
    value = optional_float(resolution)
    if not value:
        return DEFAULT_RESOLUTION
    return max(MIN_RESOLUTION, min(MAX_RESOLUTION, int(math.floor(value))))


def safe_range(lo, hi):
    """Return (lo, hi), widened by 0.5 each way when the span is degenerate."""
    if not (math.isfinite(lo) and math.isfinite(hi)):
        return -1.0, 1.0
    if abs(hi - lo) < 1e-8:
        return lo - 0.5, hi + 0.5
    return lo, hi


@trace(label="build_surface_grid", arg_names=["resolution"])
def build_surface_grid(samples, resolution=DEFAULT_RESOLUTION):
    """
    Bin pair samples into a (resolution+1) x (resolution+1) grid.

    Args:
        samples: list of PairSample
        resolution: grid divisions per axis, clamped to [12, 120]

    Returns:
        SurfaceGrid whose cells are all finite (empty grid for no samples)
    """
    tracer = get_tracer()

    if not samples:
        return SurfaceGrid()

    res = clamp_resolution(resolution)

    mx = np.array([s.mx for s in samples], dtype=float)
    my = np.array([s.my for s in samples], dtype=float)
    d = np.array([s.d for s in samples], dtype=float)

    x_min, x_max = safe_range(float(mx.min()), float(mx.max()))
    y_min, y_max = safe_range(float(my.min()), float(my.max()))
    x_span = x_max - x_min
    y_span = y_max - y_min

    # Half-up rounding to the nearest grid line
    cols = np.clip(np.floor((mx - x_min) / x_span * res + 0.5), 0, res).astype(int)
    rows = np.clip(np.floor((my - y_min) / y_span * res + 0.5), 0, res).astype(int)

    sums = np.zeros((res + 1, res + 1), dtype=float)
    counts = np.zeros((res + 1, res + 1), dtype=int)
    np.add.at(sums, (rows, cols), d)
    np.add.at(counts, (rows, cols), 1)

    cells = np.full((res + 1, res + 1), np.nan)
    filled = counts > 0
    cells[filled] = sums[filled] / counts[filled]

    tracer.event(f"Binned {len(samples)} samples into {int(filled.sum())}/{cells.size} cells")

    cells = fill_empty_cells(cells)

    axis = np.arange(res + 1) / res
    return SurfaceGrid(
        x_axis=(x_min + x_span * axis).tolist(),
        y_axis=(y_min + y_span * axis).tolist(),
        cells=cells.tolist(),
        x_range=(x_min, x_max),
        y_range=(y_min, y_max),
        max_distance=max(0.0, float(d.max())),
        resolution=res,
    )


def neighborhood_average(grid, row, col, radius=1):
    """
    Mean of the finite cells within a square window, excluding the centre.

    Returns None when the window holds no finite cell.
    """
    window = grid[max(0, row - radius):row + radius + 1, max(0, col - radius):col + radius + 1]
    finite = np.isfinite(window)
    if np.isfinite(grid[row, col]):
        total = window[finite].sum() - grid[row, col]
        count = int(finite.sum()) - 1
    else:
        total = window[finite].sum()
        count = int(finite.sum())
    return float(total / count) if count > 0 else None


def fill_empty_cells(grid):
    """
    Inpaint NaN cells from expanding neighbourhoods.

    Up to three sweeps; each empty cell takes the first radius 1..4 average
    that exists, and values filled earlier in a sweep feed later cells.
    Whatever is left gets the global mean of finite cells (0 if none).
    """
    tracer = get_tracer()

    output = np.array(grid, dtype=float)
    if output.size == 0:
        return output

    rows, cols = output.shape
    for sweep in range(INPAINT_PASSES):
        changed = False
        for y in range(rows):
            for x in range(cols):
                if np.isfinite(output[y, x]):
                    continue
                for radius in range(1, INPAINT_MAX_RADIUS + 1):
                    value = neighborhood_average(output, y, x, radius)
                    if value is not None:
                        output[y, x] = value
                        changed = True
                        break
        if not changed:
            break

    missing = ~np.isfinite(output)
    if missing.any():
        known = output[~missing]
        fallback = float(known.mean()) if known.size else 0.0
        output[missing] = fallback
        tracer.event(f"Filled {int(missing.sum())} isolated cells with global mean {fallback:.4f}", level="DEBUG")

    return output
