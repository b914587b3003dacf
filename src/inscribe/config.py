"""
Configuration management for the inscribed rectangle scanner.

Loads YAML configuration with sensible defaults for every stage.
"""

import os
from dataclasses import dataclass, field

import yaml


@dataclass
class CurveConfig:
    """Configuration for curve conditioning."""
    prepare: bool = True
    target_count: int = 150
    smooth_passes: int = 1
    smooth_alpha: float = 0.18
    target_radius: float = 2.3
    bounds_pad: float = 0.6


@dataclass
class SurfaceConfig:
    """Configuration for the lifted surface grid."""
    resolution: int = 52


@dataclass
class DetectionConfig:
    """Configuration for rectangle detection."""
    tolerance: float = None  # None derives it from the surface span
    min_tolerance: float = 0.018
    max_tolerance: float = 0.08
    min_span: float = 0.6
    span_divisor: float = 120.0
    max_rectangles: int = 320
    max_rectangles_all: int = 2400
    show_all: bool = False


@dataclass
class TracingConfig:
    """Configuration for runtime tracing."""
    enabled: bool = False
    level: str = "INFO"
    file_path: str = None
    json_output: bool = False


@dataclass
class PipelineConfig:
    """Complete pipeline configuration."""
    curve: CurveConfig = field(default_factory=CurveConfig)
    surface: SurfaceConfig = field(default_factory=SurfaceConfig)
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    tracing: TracingConfig = field(default_factory=TracingConfig)
    max_curve_points: int = 400


def load_config(config_path=None):
    """
    Load configuration from YAML file.

    Falls back to defaults for any missing values.
    """
    config = PipelineConfig()

    if config_path and os.path.exists(config_path):
        with open(config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f) or {}

        config = _merge_config(config, yaml_data)

    return config


def _merge_config(config, yaml_data):
    """Merge YAML data into config dataclass."""
    if "curve" in yaml_data:
        for key, value in yaml_data["curve"].items():
            if hasattr(config.curve, key):
                setattr(config.curve, key, value)

    if "surface" in yaml_data:
        for key, value in yaml_data["surface"].items():
            if hasattr(config.surface, key):
                setattr(config.surface, key, value)

    if "detection" in yaml_data:
        for key, value in yaml_data["detection"].items():
            if hasattr(config.detection, key):
                setattr(config.detection, key, value)

    if "tracing" in yaml_data:
        for key, value in yaml_data["tracing"].items():
            if hasattr(config.tracing, key):
                setattr(config.tracing, key, value)

    if "max_curve_points" in yaml_data:
        config.max_curve_points = yaml_data["max_curve_points"]

    return config


def save_default_config(path):
    """Save default configuration to YAML file for reference."""
    config = PipelineConfig()

    yaml_data = {
        "curve": {
            "prepare": config.curve.prepare,
            "target_count": config.curve.target_count,
            "smooth_passes": config.curve.smooth_passes,
            "smooth_alpha": config.curve.smooth_alpha,
            "target_radius": config.curve.target_radius,
            "bounds_pad": config.curve.bounds_pad,
        },
        "surface": {
            "resolution": config.surface.resolution,
        },
        "detection": {
            "tolerance": config.detection.tolerance,
            "min_tolerance": config.detection.min_tolerance,
            "max_tolerance": config.detection.max_tolerance,
            "min_span": config.detection.min_span,
            "span_divisor": config.detection.span_divisor,
            "max_rectangles": config.detection.max_rectangles,
            "max_rectangles_all": config.detection.max_rectangles_all,
            "show_all": config.detection.show_all,
        },
        "tracing": {
            "enabled": config.tracing.enabled,
            "level": config.tracing.level,
        },
        "max_curve_points": config.max_curve_points,
    }

    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(yaml_data, f, default_flow_style=False, sort_keys=False)
