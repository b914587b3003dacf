"""
Main pipeline orchestrator for the inscribed rectangle scanner.

Runs conditioning, the pair-space lift, the surface grid and rectangle
detection on one curve snapshot, then checks and optionally saves the result.
"""

import os

from inscribe.config import load_config
from inscribe.curves.conditioner import curve_bounds, prepare_curve
from inscribe.curves.presets import PRESET_CURVES
from inscribe.detect.collisions import collision_tolerance, effective_tolerance, find_rectangles
from inscribe.io.load_points import load_points, validate_point_inputs
from inscribe.io.save_artifacts import ensure_dir, save_json
from inscribe.models import ScanResult, generate_scan_id, optional_float, to_curve_points
from inscribe.surface.grid import build_surface_grid
from inscribe.surface.lift import lift_pairs
from inscribe.tracer import get_tracer, trace
from inscribe.validate.report import generate_report
from inscribe.validate.rules import run_validation


@trace(label="scan_curve")
def scan_curve(points, config=None, source=""):
    """
    Scan one closed curve for inscribed rectangles.

    Args:
        points: raw point-like values; non-finite entries are dropped
        config: PipelineConfig (optional, defaults used otherwise)
        source: free-form description of where the points came from

    Returns:
        ScanResult with the conditioned curve, surface grid, rectangles and
        self-check report
    """
    tracer = get_tracer()

    if config is None:
        config = load_config()

    curve = to_curve_points(points)

    with tracer.span("stage1_condition", module="pipeline", points=curve):
        if config.curve.prepare:
            curve = prepare_curve(curve, config.curve.target_count, config.curve)

    with tracer.span("stage2_lift", module="pipeline"):
        samples = lift_pairs(curve)

    with tracer.span("stage3_surface", module="pipeline"):
        surface = build_surface_grid(samples, config.surface.resolution)

    with tracer.span("stage4_detect", module="pipeline"):
        tolerance = optional_float(config.detection.tolerance)
        if tolerance is None:
            tolerance = collision_tolerance(surface, config.detection)
        tolerance = effective_tolerance(tolerance)

        max_count = (
            config.detection.max_rectangles_all if config.detection.show_all
            else config.detection.max_rectangles
        )
        rectangles, truncated = find_rectangles(samples, tolerance, max_count)

    result = ScanResult(
        scan_id=generate_scan_id(curve),
        source=source,
        curve=curve,
        sample_count=len(samples),
        surface=surface,
        bounds=curve_bounds(curve, config.curve.bounds_pad),
        tolerance=tolerance,
        max_rectangles=max_count,
        truncated=truncated,
        rectangles=rectangles,
    )

    with tracer.span("stage5_validate", module="pipeline"):
        result.validation = run_validation(result, config)

    tracer.event(f"Scan complete: {len(curve)} points, {len(rectangles)} rectangles")

    return result


@trace(label="run_pipeline")
def run_pipeline(out_dir, points_path=None, preset=None, config=None, config_path=None):
    """
    Load a curve, scan it and write all artifacts to out_dir.

    Exactly one of points_path and preset must be given.

    Writes:
    - scan.json: the full ScanResult
    - surface.json: the surface grid alone
    - rectangles.json: the detected rectangles, in detection order
    - validation_report.json / validation_summary.txt

    Raises ValueError on invalid input.
    """
    tracer = get_tracer()

    if config is None:
        config = load_config(config_path)

    if (points_path is None) == (preset is None):
        raise ValueError("Provide exactly one of a points file or a preset name")

    if points_path is not None:
        errors = validate_point_inputs([points_path])
        if errors:
            for error in errors:
                tracer.event(error, level="ERROR")
            raise ValueError(f"Input validation failed: {errors}")
        raw = load_points(points_path)
        source = os.path.abspath(points_path)
    else:
        if preset not in PRESET_CURVES:
            raise ValueError(f"Unknown preset: {preset}. Available: {', '.join(PRESET_CURVES)}")
        raw = PRESET_CURVES[preset].generate(config.curve.target_count)
        source = f"preset:{preset}"

    result = scan_curve(raw, config, source=source)

    ensure_dir(out_dir)
    save_json(result, os.path.join(out_dir, "scan.json"))
    save_json(result.surface, os.path.join(out_dir, "surface.json"))
    save_json(
        [rect.model_dump(mode="json") for rect in result.rectangles],
        os.path.join(out_dir, "rectangles.json"),
    )
    generate_report(result, out_dir)

    tracer.event(f"Pipeline complete, outputs saved to {out_dir}")

    return result
