"""
Validation report generation for scan results.

Writes the check results as JSON plus a human-readable summary.
"""

import os

from inscribe.io.save_artifacts import save_json, save_text
from inscribe.tracer import get_tracer, trace


@trace(label="generate_report")
def generate_report(result, out_dir):
    """
    Generate validation report files.

    Creates:
    - validation_report.json: Full check results
    - validation_summary.txt: Human-readable summary
    """
    tracer = get_tracer()

    report = result.validation

    report_path = os.path.join(out_dir, "validation_report.json")
    save_json(report, report_path)

    passed = [c for c in report.checks if c.passed]
    failed = [c for c in report.checks if not c.passed]

    summary_lines = ["Inscribed Rectangle Scan Report", "=" * 40, ""]
    summary_lines.append(f"Scan: {result.scan_id}")
    summary_lines.append(f"Curve points: {len(result.curve)}")
    summary_lines.append(f"Pair samples: {result.sample_count}")
    summary_lines.append(f"Tolerance: {result.tolerance:.4f}")
    summary_lines.append(f"Rectangles: {len(result.rectangles)}")
    summary_lines.append("")
    summary_lines.append(f"Total checks: {len(report.checks)}")
    summary_lines.append(f"Passed: {len(passed)}")
    summary_lines.append(f"Failed: {len(failed)}")
    summary_lines.append("")

    if failed:
        summary_lines.append("ISSUES:")
        summary_lines.append("-" * 40)
        for check in failed:
            summary_lines.append(format_check_result(check))
        summary_lines.append("")

    summary_lines.append("ALL CHECKS:")
    summary_lines.append("-" * 40)
    for check in report.checks:
        summary_lines.append(format_check_result(check))

    summary_path = os.path.join(out_dir, "validation_summary.txt")
    save_text("\n".join(summary_lines) + "\n", summary_path)

    tracer.event(f"Report saved: {len(report.checks)} checks, {report.error_count} errors")

    return report_path, summary_path


def format_check_result(check):
    """Format a single check result for display."""
    status = "PASS" if check.passed else "FAIL"
    severity = check.severity.value.upper()
    return f"[{status}][{severity}] {check.rule_id}: {check.message}"
