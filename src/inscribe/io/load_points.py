"""
Point file loading for the scanner.

Supports JSON (a list of {"x", "y"} objects or [x, y] pairs, optionally under
a "points" key) and CSV (two numeric columns, header row optional).
"""

import csv
import json
import os

from inscribe.models import to_curve_points
from inscribe.tracer import get_tracer, trace

SUPPORTED_EXTENSIONS = [".json", ".csv"]


@trace(label="load_points")
def load_points(path):
    """
    Load a point list from disk.

    Non-finite or malformed entries are dropped.

    Raises FileNotFoundError if path does not exist.
    Raises ValueError if the file format is unsupported or unreadable.
    """
    tracer = get_tracer()

    if not os.path.exists(path):
        raise FileNotFoundError(f"Point file not found: {path}")

    ext = os.path.splitext(path)[1].lower()
    if ext == ".json":
        raw = _read_json_points(path)
    elif ext == ".csv":
        raw = _read_csv_points(path)
    else:
        raise ValueError(f"Unsupported point file format: {path}")

    points = to_curve_points(raw)
    tracer.event(f"Loaded points: {len(points)} valid of {len(raw)}")

    return points


def _read_json_points(path):
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e

    if isinstance(data, dict):
        data = data.get("points")

    if not isinstance(data, list):
        raise ValueError(f"Expected a list of points in {path}")

    return data


def _read_csv_points(path):
    rows = []
    with open(path, "r", encoding="utf-8", newline="") as f:
        for row in csv.reader(f):
            if len(row) < 2:
                continue
            rows.append([row[0].strip(), row[1].strip()])
    return rows


def validate_point_inputs(paths):
    """
    Validate that all input paths exist and have a supported extension.

    Returns a list of error messages (empty if all valid).
    """
    errors = []

    for path in paths:
        if not os.path.exists(path):
            errors.append(f"File not found: {path}")
            continue

        ext = os.path.splitext(path)[1].lower()
        if ext not in SUPPORTED_EXTENSIONS:
            errors.append(f"Unsupported point file format: {path}")

    return errors
