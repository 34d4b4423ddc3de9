"""
Silhouette curve of the vessel.

A cubic Bezier in the (radius, height) half-plane, revolved about the
vertical axis by the wire generators. Control points, bottom to top:

    base  = (base_radius,      h0)
    belly = (2 * belly_radius, h1)
    neck  = (neck_radius,      h2)
    top   = (top_radius,       h3)

Sampling is uniform in the curve parameter t, not in arc length. Every pass
that draws wires samples through points_uniform so the render and export
outputs stay on the same parametrization.
"""

from enum import Enum

import numpy as np

from wirevessel.tracer import get_tracer


class HeightPolicy(str, Enum):
    """Where the four control points sit vertically."""
    FIXED = "fixed"
    FRACTION = "fraction"


# Bernstein coefficients of a cubic Bezier
_BERNSTEIN = np.array([
    [1.0, 0.0, 0.0, 0.0],
    [-3.0, 3.0, 0.0, 0.0],
    [3.0, -6.0, 3.0, 0.0],
    [-1.0, 3.0, -3.0, 1.0],
])


class ProfileCurve:
    """Immutable cubic profile curve built from four control points."""

    def __init__(self, control_points):
        points = np.array(control_points, dtype=float)
        if points.shape != (4, 2):
            raise ValueError(f"Expected 4 (radius, height) control points, got shape {points.shape}")
        points.setflags(write=False)
        self._control_points = points

    @property
    def control_points(self):
        return self._control_points

    def point(self, t):
        """
        Evaluate the curve.

        Scalar t gives an (r, y) array of shape (2,); an array of t values
        gives shape (len(t), 2).
        """
        t_arr = np.asarray(t, dtype=float)
        powers = np.stack([np.ones_like(t_arr), t_arr, t_arr ** 2, t_arr ** 3], axis=-1)
        return powers @ _BERNSTEIN @ self._control_points

    def points_uniform(self, n):
        """n+1 samples at t = i/n, i = 0..n."""
        n = max(int(n), 1)
        return self.point(np.arange(n + 1) / n)

    def __repr__(self):
        pts = ", ".join(f"({r:.3f}, {y:.3f})" for r, y in self._control_points)
        return f"ProfileCurve([{pts}])"


def control_heights(profile_config, total_height=None):
    """
    Heights h0..h3 of the control points.

    "fixed" uses the configured offsets. "fraction" places the points at
    fractions of total_height, centred on y = 0; without a total height the
    span of the fixed offsets is used.
    """
    policy = HeightPolicy(profile_config.height_policy)

    if policy == HeightPolicy.FIXED:
        return [float(h) for h in profile_config.fixed_offsets]

    offsets = profile_config.fixed_offsets
    height = total_height if total_height else float(offsets[-1] - offsets[0])
    return [(float(f) - 0.5) * height for f in profile_config.height_fractions]


def build_profile(params, profile_config):
    """
    Build the ProfileCurve for a parameter snapshot.

    Radii at or below zero are clamped to profile_config.radius_epsilon.
    """
    tracer = get_tracer()
    eps = profile_config.radius_epsilon

    clamped = clamped_radius_names(params, profile_config)
    if clamped:
        tracer.event(f"Clamped radii to {eps}", level="DEBUG", radii=clamped)

    h0, h1, h2, h3 = control_heights(profile_config, params.total_height)

    return ProfileCurve([
        (max(params.base_radius, eps), h0),
        (max(params.belly_radius, eps) * 2.0, h1),
        (max(params.neck_radius, eps), h2),
        (max(params.top_radius, eps), h3),
    ])


def clamped_radius_names(params, profile_config):
    """Names of the radii that build_profile clamps."""
    eps = profile_config.radius_epsilon
    radii = {
        "base_radius": params.base_radius,
        "belly_radius": params.belly_radius,
        "neck_radius": params.neck_radius,
        "top_radius": params.top_radius,
    }
    return [name for name, value in radii.items() if value < eps]
