"""
Validation report files.
"""

import os

from wirevessel.io.save_artifacts import save_json, save_text
from wirevessel.tracer import get_tracer, trace


@trace(label="generate_report")
def generate_report(report, out_dir):
    """
    Write validation_report.json and validation_summary.txt.

    Returns both paths.
    """
    tracer = get_tracer()

    report_path = os.path.join(out_dir, "validation_report.json")
    save_json(report, report_path)

    failed = [c for c in report.checks if not c.passed]
    lines = [
        "Wire Vessel Validation Report",
        "=" * 40,
        "",
        f"Total checks: {len(report.checks)}",
        f"Passed: {len(report.checks) - len(failed)}",
        f"Failed: {len(failed)}",
        "",
        "ALL CHECKS:",
        "-" * 40,
    ]
    lines.extend(format_check_result(check) for check in report.checks)

    summary_path = os.path.join(out_dir, "validation_summary.txt")
    save_text("\n".join(lines) + "\n", summary_path)

    tracer.event(f"Report saved: {len(report.checks)} checks, {report.error_count} errors")
    return report_path, summary_path


def format_check_result(check):
    """Format a single check result for display."""
    status = "PASS" if check.passed else "FAIL"
    return f"[{status}][{check.severity.value.upper()}] {check.rule_id}: {check.message}"
