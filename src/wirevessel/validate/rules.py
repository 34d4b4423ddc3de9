"""
Geometry checks run after a pipeline build.

Checks are reports only; nothing is repaired or clipped here.
"""

import numpy as np

from wirevessel.geometry.profile import clamped_radius_names
from wirevessel.models import CheckResult, Severity, ValidationReport
from wirevessel.render.camera import project_points
from wirevessel.tracer import get_tracer, trace


@trace(label="run_validation")
def run_validation(layout, params, camera, viewport, profile_config):
    """Run all geometry checks and collect them in a ValidationReport."""
    tracer = get_tracer()

    checks = [
        check_finite(layout),
        check_counts(layout, params),
        check_radii(params, profile_config),
        check_canvas(layout, camera, viewport),
    ]
    report = ValidationReport(checks=checks)

    tracer.event(f"Validation complete: {report.error_count} errors, {report.warning_count} warnings")
    return report


def check_finite(layout):
    """Every wire coordinate must be a finite number."""
    bad = [w.name for w in layout.all_wires() if not np.isfinite(w.points).all()]

    if bad:
        return CheckResult(
            rule_id="GEO-FINITE",
            severity=Severity.ERROR,
            passed=False,
            message=f"{len(bad)} wires contain non-finite coordinates",
            evidence={"wires": bad[:20]},
        )
    return CheckResult(
        rule_id="GEO-FINITE",
        severity=Severity.ERROR,
        passed=True,
        message="All wire coordinates are finite",
    )


def check_counts(layout, params):
    """Family sizes follow the wire counts: h+1 rings, v verticals, 2d diagonals."""
    h = params.horizontal_wires
    expected = {
        "rings": h + 1 if h > 0 else 0,
        "verticals": params.vertical_wires,
        "diagonals": 2 * params.diagonal_wires,
    }
    actual = layout.counts()
    passed = actual == expected

    return CheckResult(
        rule_id="GEO-COUNTS",
        severity=Severity.ERROR,
        passed=passed,
        message="Wire family sizes match parameters" if passed else "Wire family sizes differ from parameters",
        evidence={"expected": expected, "actual": actual},
    )


def check_radii(params, profile_config):
    """Warn when a radius had to be clamped to the minimum."""
    clamped = clamped_radius_names(params, profile_config)

    if clamped:
        return CheckResult(
            rule_id="GEO-RADIUS",
            severity=Severity.WARN,
            passed=False,
            message=f"Radii clamped to {profile_config.radius_epsilon}: {', '.join(clamped)}",
            evidence={"clamped": clamped, "epsilon": profile_config.radius_epsilon},
        )
    return CheckResult(
        rule_id="GEO-RADIUS",
        severity=Severity.WARN,
        passed=True,
        message="All radii above the minimum",
    )


def check_canvas(layout, camera, viewport):
    """Share of projected vertices that land outside the viewport."""
    wires = layout.all_wires()
    if not wires:
        return CheckResult(
            rule_id="PRJ-CANVAS",
            severity=Severity.INFO,
            passed=True,
            message="No wires to project",
            evidence={"outside": 0, "total": 0},
        )

    screen = project_points(np.concatenate([w.points for w in wires]), camera, viewport)
    inside = (
        np.isfinite(screen).all(axis=1)
        & (screen[:, 0] >= 0) & (screen[:, 0] <= viewport.width)
        & (screen[:, 1] >= 0) & (screen[:, 1] <= viewport.height)
    )
    outside = int((~inside).sum())
    total = len(screen)

    return CheckResult(
        rule_id="PRJ-CANVAS",
        severity=Severity.INFO,
        passed=outside == 0,
        message=f"{outside} of {total} projected vertices fall outside the viewport",
        evidence={"outside": outside, "total": total, "fraction": round(outside / total, 4)},
    )
