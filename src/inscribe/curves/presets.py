"""
Parametric closed curves used as ready-made scan inputs.
"""

import math
from dataclasses import dataclass
from typing import Callable, Tuple

from inscribe.curves.conditioner import MIN_RESAMPLE_COUNT, prepare_curve
from inscribe.models import CurvePoint


@dataclass(frozen=True)
class PresetCurve:
    """A named closed curve given by a function of t in [0, 2*pi)."""
    name: str
    description: str
    fn: Callable[[float], Tuple[float, float]]
    default_resolution: int = 140

    def generate(self, resolution=None):
        return sample_closed_parametric(self.fn, resolution or self.default_resolution)


def sample_closed_parametric(fn, resolution=140):
    """Sample fn at max(24, resolution) evenly spaced parameters."""
    count = max(MIN_RESAMPLE_COUNT, int(math.floor(resolution)))
    points = []
    for k in range(count):
        x, y = fn(k / count * math.pi * 2)
        points.append(CurvePoint(x=x, y=y))
    return points


def _lemniscate(t):
    s, c = math.sin(t), math.cos(t)
    den = 1 + s * s
    return 1.85 * c / den, 1.85 * s * c / den


def _rose_spiral(t):
    r = 1 + 0.42 * math.cos(5 * t)
    return r * math.cos(t), r * math.sin(t)


def _squircle(t, n=4):
    c, s = math.cos(t), math.sin(t)
    denom = abs(c) ** n + abs(s) ** n
    r = denom ** (-1 / n) if denom > 1e-9 else 1.0
    return r * c, r * s


PRESET_CURVES = {
    "circle": PresetCurve(
        "Circle", "Regular baseline curve; every pair of diameters is a rectangle.",
        lambda t: (math.cos(t), math.sin(t)),
    ),
    "figure8": PresetCurve(
        "Figure eight", "Simple self-crossing curve.",
        lambda t: (1.35 * math.sin(t), 0.82 * math.sin(2 * t)),
        default_resolution=160,
    ),
    "lemniscate": PresetCurve(
        "Lemniscate", "Bernoulli lemniscate.", _lemniscate, default_resolution=170,
    ),
    "ellipse": PresetCurve(
        "Ellipse", "Stretched circle with rectangles of many aspect ratios.",
        lambda t: (1.7 * math.cos(t), 1.0 * math.sin(t)),
    ),
    "trefoil": PresetCurve(
        "Trefoil", "Dense self-crossings for stress testing the detector.",
        lambda t: (math.sin(t) + 1.6 * math.sin(2 * t), math.cos(t) - 1.6 * math.cos(2 * t)),
        default_resolution=180,
    ),
    "spiral": PresetCurve(
        "Rose spiral", "Five-lobed closed rose.", _rose_spiral, default_resolution=180,
    ),
    "squircle": PresetCurve(
        "Squircle", "Superellipse between a circle and a square.", _squircle,
    ),
}

PRESET_CURVE_IDS = list(PRESET_CURVES.keys())


def preset_curve(preset_id, resolution=150, config=None):
    """
    Generate and condition a preset curve.

    Returns an empty list for unknown preset ids.
    """
    preset = PRESET_CURVES.get(preset_id)
    if preset is None:
        return []
    return prepare_curve(preset.generate(resolution), resolution, config)
