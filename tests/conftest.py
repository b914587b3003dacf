"""Pytest fixtures for scanner tests."""

import math
import tempfile

import pytest


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


def circle_points(count, radius=1.0):
    """Uniformly sampled circle, starting at angle 0."""
    from inscribe.models import CurvePoint

    return [
        CurvePoint(x=radius * math.cos(2 * math.pi * k / count), y=radius * math.sin(2 * math.pi * k / count))
        for k in range(count)
    ]


@pytest.fixture
def make_circle():
    """Factory for uniformly sampled circles."""
    return circle_points


@pytest.fixture
def circle16():
    """A unit circle sampled at 16 uniform points."""
    return circle_points(16)


@pytest.fixture
def square_corners():
    """Corners of an axis-aligned diamond (a square rotated 45 degrees)."""
    from inscribe.models import CurvePoint

    return [
        CurvePoint(x=1, y=0),
        CurvePoint(x=0, y=1),
        CurvePoint(x=-1, y=0),
        CurvePoint(x=0, y=-1),
    ]


@pytest.fixture
def triangle():
    """A right triangle as raw [x, y] pairs."""
    return [[0.0, 0.0], [4.0, 0.0], [0.0, 3.0]]


@pytest.fixture
def default_config():
    """Create default pipeline configuration."""
    from inscribe.config import PipelineConfig
    return PipelineConfig()
