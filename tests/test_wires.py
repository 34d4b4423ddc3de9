"""Tests for wire family generation."""

import math

import numpy as np
import pytest

from wirevessel.config import ProfileConfig, ResolutionConfig
from wirevessel.geometry.profile import build_profile
from wirevessel.geometry.wires import (
    WireFamily, WirePolyline, generate_wire_layout, recompute, revolve,
)
from wirevessel.models import VesselParameters


def _layout(params, samples=120, ring_segments=64):
    curve = build_profile(params, ProfileConfig())
    return curve, generate_wire_layout(curve, params, samples, ring_segments)


def _rotate_about_y(points, angle):
    """Shift every point's azimuth by angle."""
    c, s = math.cos(angle), math.sin(angle)
    x, y, z = points[:, 0], points[:, 1], points[:, 2]
    return np.column_stack([x * c - z * s, y, x * s + z * c])


class TestScenarioA:
    """3 rings, 4 verticals at quarter turns, no diagonals."""

    def test_family_sizes(self, scenario_a_params):
        _, layout = _layout(scenario_a_params)

        assert layout.counts() == {"rings": 3, "verticals": 4, "diagonals": 0}

    def test_ring_radii_follow_curve(self, scenario_a_params):
        curve, layout = _layout(scenario_a_params)

        for i, ring in enumerate(layout.rings):
            r, y = curve.point(i / 2)
            radii = np.hypot(ring.points[:, 0], ring.points[:, 2])
            np.testing.assert_allclose(radii, r)
            np.testing.assert_allclose(ring.points[:, 1], y)

    def test_vertical_azimuths(self, scenario_a_params):
        _, layout = _layout(scenario_a_params)

        expected = [0.0, math.pi / 2, math.pi, 3 * math.pi / 2]
        for wire, azimuth in zip(layout.verticals, expected):
            base = wire.points[0]
            np.testing.assert_allclose(base, [4 * math.cos(azimuth), -22.0, 4 * math.sin(azimuth)], atol=1e-12)


class TestRings:
    """Tests for horizontal rings."""

    def test_ring_is_closed(self, woven_params):
        _, layout = _layout(woven_params, ring_segments=32)

        for ring in layout.rings:
            assert ring.closed
            assert len(ring.points) == 33
            np.testing.assert_allclose(ring.points[0], ring.points[-1], atol=1e-12)

    def test_ring_count_is_h_plus_one(self):
        _, layout = _layout(VesselParameters(horizontal_wires=7))

        assert len(layout.rings) == 8

    def test_zero_rings(self):
        _, layout = _layout(VesselParameters(horizontal_wires=0))

        assert layout.rings == ()


class TestVerticals:
    """Tests for fixed-azimuth wires."""

    def test_alignment_invariant(self, woven_params):
        _, layout = _layout(woven_params)
        v = woven_params.vertical_wires

        reference = layout.verticals[0].points
        for j, wire in enumerate(layout.verticals):
            aligned = _rotate_about_y(wire.points, -2 * math.pi * j / v)
            np.testing.assert_allclose(aligned, reference, atol=1e-9)

    def test_samples_on_curve(self, woven_params):
        curve, layout = _layout(woven_params, samples=40)

        wire = layout.verticals[0]
        assert len(wire.points) == 41
        np.testing.assert_allclose(wire.points[:, 0], curve.points_uniform(40)[:, 0])
        np.testing.assert_allclose(wire.points[:, 1], curve.points_uniform(40)[:, 1])


class TestDiagonals:
    """Tests for the two diagonal sweeps."""

    def test_two_directions(self, woven_params):
        _, layout = _layout(woven_params)

        assert len(layout.diagonals) == 2 * woven_params.diagonal_wires
        directions = [w.direction for w in layout.diagonals]
        assert directions == [1] * 6 + [-1] * 6

    def test_sweep_is_linear_in_sample_index(self):
        params = VesselParameters(diagonal_wires=1, tilt_angle=1.2, horizontal_wires=0, vertical_wires=0)
        _, layout = _layout(params, samples=10)

        wire = layout.diagonals[0]
        azimuths = np.arctan2(wire.points[:, 2], wire.points[:, 0])
        np.testing.assert_allclose(azimuths, np.arange(11) / 10 * 1.2, atol=1e-12)

    def test_top_sample_carries_full_tilt(self):
        params = VesselParameters(diagonal_wires=4, tilt_angle=0.8)
        _, layout = _layout(params)

        wire = layout.diagonals[1]
        start = math.atan2(wire.points[0, 2], wire.points[0, 0])
        end = math.atan2(wire.points[-1, 2], wire.points[-1, 0])
        assert start == pytest.approx(math.pi / 2)
        assert end - start == pytest.approx(0.8)

    def test_directions_mirror(self):
        params = VesselParameters(diagonal_wires=1, tilt_angle=2.0)
        _, layout = _layout(params)

        pos, neg = layout.diagonals
        np.testing.assert_allclose(neg.points[:, 0], pos.points[:, 0], atol=1e-12)
        np.testing.assert_allclose(neg.points[:, 2], -pos.points[:, 2], atol=1e-12)

    def test_zero_tilt_matches_verticals(self):
        params = VesselParameters(vertical_wires=6, diagonal_wires=6, tilt_angle=0.0)
        _, layout = _layout(params)

        for k in range(6):
            np.testing.assert_allclose(layout.diagonals[k].points, layout.verticals[k].points)
            np.testing.assert_allclose(layout.diagonals[6 + k].points, layout.verticals[k].points)

    def test_no_diagonals(self):
        _, layout = _layout(VesselParameters(diagonal_wires=0))

        assert layout.diagonals == ()


class TestWireCounts:
    """Negative counts mean no wires for that family."""

    def test_negative_counts_are_empty(self):
        params = VesselParameters(horizontal_wires=-3, vertical_wires=-1, diagonal_wires=-10)
        _, layout = _layout(params)

        assert layout.is_empty()

    def test_all_zero_is_empty(self):
        params = VesselParameters(horizontal_wires=0, vertical_wires=0, diagonal_wires=0)
        _, layout = _layout(params)

        assert layout.is_empty()
        assert layout.all_wires() == ()


class TestPasses:
    """Render and export passes share formulas and differ in resolution only."""

    def test_export_samples_subset_of_render(self, woven_params):
        render = recompute(woven_params, ResolutionConfig(curve_samples=120), ProfileConfig())
        export = recompute(woven_params, ResolutionConfig(curve_samples=60), ProfileConfig())

        assert render.counts() == export.counts()
        for r_wire, e_wire in zip(render.verticals + render.diagonals, export.verticals + export.diagonals):
            np.testing.assert_allclose(r_wire.points[::2], e_wire.points, atol=1e-9)

    def test_degenerate_radii_finite(self):
        params = VesselParameters(top_radius=0, neck_radius=-1, belly_radius=0, base_radius=-4)
        layout = recompute(params, ResolutionConfig(), ProfileConfig())

        for wire in layout.all_wires():
            assert np.isfinite(wire.points).all()


class TestWirePolyline:
    def test_points_read_only(self):
        wire = WirePolyline(WireFamily.VERTICAL, 0, [[1.0, 0.0, 0.0], [1.0, 1.0, 0.0]])

        with pytest.raises(ValueError):
            wire.points[0, 0] = 2.0

    def test_names(self):
        assert WirePolyline(WireFamily.RING, 3, np.zeros((2, 3))).name == "ring-3"
        assert WirePolyline(WireFamily.DIAGONAL, 1, np.zeros((2, 3)), direction=-1).name == "diagonal-neg-1"

    def test_revolve_scalar_azimuth(self):
        points = revolve(np.array([[2.0, 5.0]]), math.pi / 2)

        np.testing.assert_allclose(points, [[0.0, 5.0, 2.0]], atol=1e-12)
