"""
Wire families of the woven vessel.

Three families of 3D polylines are sampled from one ProfileCurve:

- rings: closed horizontal circles at t = i/h, i = 0..h
- verticals: open wires at fixed azimuth 2*pi*j/v
- diagonals: open wires whose azimuth sweeps by tilt_angle * d over the
  curve's full height, once for d = +1 and once for d = -1; the top
  sample of every diagonal carries the whole sweep

Every family goes through the same revolve step (x = r*cos(a), y = y,
z = r*sin(a)) so the render and export passes differ only in sample counts,
never in formulas.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple

import numpy as np

from wirevessel.geometry.profile import build_profile
from wirevessel.tracer import get_tracer, trace


class WireFamily(str, Enum):
    RING = "ring"
    VERTICAL = "vertical"
    DIAGONAL = "diagonal"


@dataclass(frozen=True, eq=False)
class WirePolyline:
    """
    One wire as an ordered (N, 3) array of points.

    Closed rings repeat their first point at the end. direction is +1 or -1
    for diagonals and 0 otherwise.
    """
    family: WireFamily
    index: int
    points: np.ndarray
    closed: bool = False
    direction: int = 0

    def __post_init__(self):
        points = np.array(self.points, dtype=float)
        points.setflags(write=False)
        object.__setattr__(self, "points", points)

    @property
    def name(self):
        if self.family == WireFamily.DIAGONAL:
            sign = "pos" if self.direction > 0 else "neg"
            return f"diagonal-{sign}-{self.index}"
        return f"{self.family.value}-{self.index}"


@dataclass(frozen=True)
class WireLayout:
    """All wires of one parameter snapshot."""
    rings: Tuple[WirePolyline, ...] = field(default_factory=tuple)
    verticals: Tuple[WirePolyline, ...] = field(default_factory=tuple)
    diagonals: Tuple[WirePolyline, ...] = field(default_factory=tuple)

    def all_wires(self):
        """Rings, then verticals, then diagonals (positive sweep first)."""
        return self.rings + self.verticals + self.diagonals

    def counts(self):
        return {
            "rings": len(self.rings),
            "verticals": len(self.verticals),
            "diagonals": len(self.diagonals),
        }

    def is_empty(self):
        return not (self.rings or self.verticals or self.diagonals)


def revolve(samples, azimuth):
    """
    Place (r, y) samples around the vertical axis.

    azimuth is a scalar or an array with one angle per sample.
    """
    samples = np.asarray(samples, dtype=float)
    r = samples[..., 0]
    y = samples[..., 1]
    a = np.broadcast_to(np.asarray(azimuth, dtype=float), r.shape)
    return np.stack([r * np.cos(a), y, r * np.sin(a)], axis=-1)


def generate_rings(curve, count, ring_segments):
    """count + 1 closed rings at t = i/count; none when count is 0."""
    if count <= 0:
        return ()

    ring_segments = max(int(ring_segments), 3)
    angles = 2.0 * np.pi * np.arange(ring_segments + 1) / ring_segments
    rings = []
    for i in range(count + 1):
        r, y = curve.point(i / count)
        samples = np.column_stack([np.full_like(angles, r), np.full_like(angles, y)])
        rings.append(WirePolyline(WireFamily.RING, i, revolve(samples, angles), closed=True))
    return tuple(rings)


def generate_verticals(samples, count):
    """count open wires at azimuth 2*pi*j/count."""
    if count <= 0:
        return ()

    return tuple(
        WirePolyline(WireFamily.VERTICAL, j, revolve(samples, 2.0 * np.pi * j / count))
        for j in range(count)
    )


def generate_diagonals(samples, count, tilt_angle, direction):
    """
    count open wires sweeping tilt_angle * direction radians base to top.

    samples are the n+1 uniform curve samples; sample idx gets azimuth
    start + (idx / n) * tilt_angle * direction, so the top sample carries
    the full sweep and any sample count lands on the same curve.
    """
    if count <= 0:
        return ()

    n = max(len(samples) - 1, 1)
    sweep = np.arange(len(samples)) / n * tilt_angle * direction
    return tuple(
        WirePolyline(
            WireFamily.DIAGONAL, k,
            revolve(samples, 2.0 * np.pi * k / count + sweep),
            direction=direction,
        )
        for k in range(count)
    )


@trace(label="generate_wire_layout")
def generate_wire_layout(curve, params, curve_samples, ring_segments):
    """
    Sample all three wire families from one curve.

    curve_samples and ring_segments set the resolution of this pass only.
    """
    tracer = get_tracer()

    samples = curve.points_uniform(curve_samples)

    layout = WireLayout(
        rings=generate_rings(curve, params.horizontal_wires, ring_segments),
        verticals=generate_verticals(samples, params.vertical_wires),
        diagonals=(
            generate_diagonals(samples, params.diagonal_wires, params.tilt_angle, 1)
            + generate_diagonals(samples, params.diagonal_wires, params.tilt_angle, -1)
        ),
    )

    tracer.event("Wire layout generated", layout=layout, samples=len(samples))
    return layout


def recompute(params, resolution, profile_config):
    """
    Rebuild curve and wires from scratch for a parameter snapshot.

    resolution is a ResolutionConfig (render or export pass).
    """
    curve = build_profile(params, profile_config)
    return generate_wire_layout(
        curve, params,
        curve_samples=resolution.curve_samples,
        ring_segments=resolution.ring_segments,
    )
