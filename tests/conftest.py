"""Pytest fixtures for wirevessel tests."""

import tempfile

import pytest


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def default_config():
    """Create default configuration."""
    from wirevessel.config import VesselConfig
    return VesselConfig()


@pytest.fixture
def scenario_a_params():
    """Small vessel: 3 rings, 4 verticals, no diagonals."""
    from wirevessel.models import VesselParameters
    return VesselParameters(
        top_radius=6, neck_radius=3, belly_radius=12, base_radius=4,
        horizontal_wires=2, vertical_wires=4, diagonal_wires=0, tilt_angle=0,
    )


@pytest.fixture
def woven_params():
    """Vessel with every wire family present."""
    from wirevessel.models import VesselParameters
    return VesselParameters(
        horizontal_wires=5, vertical_wires=8, diagonal_wires=6, tilt_angle=1.5,
    )


@pytest.fixture
def viewport():
    from wirevessel.models import Viewport
    return Viewport(width=640, height=480)


@pytest.fixture
def camera(viewport):
    """Default camera sized to the test viewport."""
    from wirevessel.models import CameraSnapshot
    return CameraSnapshot(aspect=viewport.aspect)
