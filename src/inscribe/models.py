"""
Pydantic data models for the inscribed rectangle scanner.

Curve points are validated once, at the boundary; every later stage works
on immutable, finite values. Content-based IDs keep outputs deterministic.
"""

import hashlib
import math
from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
from pydantic import BaseModel, ConfigDict, Field


class Severity(str, Enum):
    """Severity levels for self-checks."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"


class CurvePoint(BaseModel):
    """A single finite point on a planar curve."""
    x: float = Field(..., allow_inf_nan=False)
    y: float = Field(..., allow_inf_nan=False)

    model_config = ConfigDict(extra="forbid", frozen=True)


class BoundingSquare(BaseModel):
    """Padded square bounding box; x and y extents are both equal to span."""
    x_min: float
    x_max: float
    y_min: float
    y_max: float
    span: float

    model_config = ConfigDict(extra="forbid")

    @property
    def center(self):
        return ((self.x_min + self.x_max) / 2, (self.y_min + self.y_max) / 2)


class PairSample(BaseModel):
    """
    One unordered pair of curve points lifted to (mx, my, d).

    i and j are positions in the lifted curve, i < j.
    """
    i: int
    j: int
    p1: CurvePoint
    p2: CurvePoint
    mx: float
    my: float
    d: float

    model_config = ConfigDict(extra="forbid", frozen=True)


class SurfaceGrid(BaseModel):
    """Regular grid of mean pair distances over the midpoint plane."""
    x_axis: List[float] = Field(default_factory=list)
    y_axis: List[float] = Field(default_factory=list)
    cells: List[List[float]] = Field(default_factory=list)  # rows follow y_axis
    x_range: Tuple[float, float] = (-1.0, 1.0)
    y_range: Tuple[float, float] = (-1.0, 1.0)
    max_distance: float = 0.0
    resolution: int = 0

    model_config = ConfigDict(extra="forbid")

    @property
    def is_empty(self):
        return not self.cells


class Rectangle(BaseModel):
    """Four curve points found to form an approximate rectangle."""
    points: List[CurvePoint] = Field(..., min_length=4, max_length=4)
    midpoint: Tuple[float, float]
    distance: float
    collision_point: Tuple[float, float, float]
    pair_indices: List[int] = Field(..., min_length=4, max_length=4)

    model_config = ConfigDict(extra="forbid")


class CheckResult(BaseModel):
    """Result of a single self-check."""
    rule_id: str
    severity: Severity
    passed: bool
    message: str
    evidence: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")


class ValidationReport(BaseModel):
    """Collection of self-check results."""
    checks: List[CheckResult] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    @property
    def has_errors(self):
        """Check if any errors exist."""
        return any(c.severity == Severity.ERROR and not c.passed for c in self.checks)

    @property
    def error_count(self):
        """Count of failed error-level checks."""
        return sum(1 for c in self.checks if c.severity == Severity.ERROR and not c.passed)

    @property
    def warning_count(self):
        """Count of failed warning-level checks."""
        return sum(1 for c in self.checks if c.severity == Severity.WARN and not c.passed)


class ScanResult(BaseModel):
    """Everything produced by one scan of one curve snapshot."""
    scan_id: str
    created_at: str = Field(default_factory=lambda: datetime.now().isoformat())
    source: str = ""
    curve: List[CurvePoint] = Field(default_factory=list)
    sample_count: int = 0
    surface: SurfaceGrid = Field(default_factory=SurfaceGrid)
    bounds: Optional[BoundingSquare] = None  # padded view box of the curve
    tolerance: float = 0.0
    max_rectangles: int = 0
    truncated: bool = False
    rectangles: List[Rectangle] = Field(default_factory=list)
    validation: ValidationReport = Field(default_factory=ValidationReport)

    model_config = ConfigDict(extra="forbid")


def finite_xy(item):
    """
    Extract an (x, y) float pair from a point-like value.

    Accepts CurvePoint, {"x", "y"} mappings and [x, y] sequences (including
    numpy rows). Returns None for anything malformed or non-finite.
    """
    if isinstance(item, CurvePoint):
        return item.x, item.y

    if isinstance(item, Mapping):
        raw_x, raw_y = item.get("x"), item.get("y")
    elif isinstance(item, (list, tuple, np.ndarray)) and len(item) >= 2:
        raw_x, raw_y = item[0], item[1]
    else:
        return None

    try:
        x, y = float(raw_x), float(raw_y)
    except (TypeError, ValueError):
        return None

    if not (math.isfinite(x) and math.isfinite(y)):
        return None
    return x, y


def to_curve_points(raw_points):
    """
    Coerce raw input into a list of CurvePoint, dropping invalid entries.
    """
    if raw_points is None:
        return []

    points = []
    for item in raw_points:
        xy = finite_xy(item)
        if xy is None:
            continue
        points.append(item if isinstance(item, CurvePoint) else CurvePoint(x=xy[0], y=xy[1]))
    return points


def points_to_array(points):
    """Stack CurvePoints into an (n, 2) float array."""
    if not points:
        return np.zeros((0, 2), dtype=float)
    return np.array([[p.x, p.y] for p in points], dtype=float)


def array_to_points(arr):
    """Convert an (n, 2) array back into CurvePoints."""
    return [CurvePoint(x=float(x), y=float(y)) for x, y in arr]


def generate_scan_id(points, round_digits=6):
    """
    Generate deterministic scan ID from curve coordinates.

    Rounds coordinates to avoid floating point instability.
    """
    if not points:
        return "scan_empty"

    rounded = [[round(p.x, round_digits), round(p.y, round_digits)] for p in points]
    h = hashlib.sha256(str(rounded).encode()).hexdigest()[:16]
    return f"scan_{h}"


def pair_sample_count(n):
    """Number of unordered pairs among n points."""
    return n * (n - 1) // 2 if n >= 2 else 0


def optional_float(value) -> Optional[float]:
    """Parse a possibly missing numeric setting; None for missing or non-finite."""
    if value is None:
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    return result if math.isfinite(result) else None
