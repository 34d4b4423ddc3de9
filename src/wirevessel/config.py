"""
Configuration management for wirevessel.

Loads YAML configuration with defaults for every geometry, export and
tracing setting. Vessel shape parameters live in models.VesselParameters;
this module covers how those parameters are sampled, drawn and written.
"""

import os
from dataclasses import asdict, dataclass, field, fields, is_dataclass
from typing import List, Optional

import yaml


@dataclass
class ProfileConfig:
    """How the silhouette curve is placed vertically."""
    height_policy: str = "fixed"  # "fixed" or "fraction"
    radius_epsilon: float = 0.001
    fixed_offsets: List[float] = field(default_factory=lambda: [-22.0, -6.0, 12.0, 22.0])
    height_fractions: List[float] = field(default_factory=lambda: [0.0, 16.0 / 44.0, 34.0 / 44.0, 1.0])


@dataclass
class ResolutionConfig:
    """Sample counts for one geometry pass."""
    curve_samples: int = 120
    ring_segments: int = 64


@dataclass
class SamplingConfig:
    """Render and export passes are tuned independently."""
    render: ResolutionConfig = field(default_factory=ResolutionConfig)
    export: ResolutionConfig = field(default_factory=lambda: ResolutionConfig(curve_samples=60))


@dataclass
class StrokeConfig:
    """Stroke style shared by every exported vector path."""
    width: float = 0.5
    color: str = "black"
    precision: int = 2


@dataclass
class MeshConfig:
    """Tube tessellation and OBJ output."""
    radial_segments: int = 8
    ring_radius_divisor: float = 6.0
    vertical_radius_divisor: float = 8.0
    diagonal_radius_divisor: float = 12.0
    precision: int = 6


@dataclass
class RasterConfig:
    """Raster snapshot settings."""
    background: str = "#ffffff"
    min_line_width: int = 1


@dataclass
class CameraConfig:
    """Initial perspective camera and orbit damping."""
    fov: float = 45.0
    near: float = 0.1
    far: float = 3000.0
    position: List[float] = field(default_factory=lambda: [60.0, 60.0, 100.0])
    target: List[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])
    damping_factor: float = 0.05


@dataclass
class ViewportConfig:
    """Pixel size of the view, the raster snapshot and the SVG document."""
    width: int = 1280
    height: int = 800


@dataclass
class TracingConfig:
    """Configuration for runtime tracing."""
    enabled: bool = False
    level: str = "INFO"
    file_path: Optional[str] = None
    json_output: bool = False


@dataclass
class VesselConfig:
    """Complete configuration."""
    profile: ProfileConfig = field(default_factory=ProfileConfig)
    sampling: SamplingConfig = field(default_factory=SamplingConfig)
    stroke: StrokeConfig = field(default_factory=StrokeConfig)
    mesh: MeshConfig = field(default_factory=MeshConfig)
    raster: RasterConfig = field(default_factory=RasterConfig)
    camera: CameraConfig = field(default_factory=CameraConfig)
    viewport: ViewportConfig = field(default_factory=ViewportConfig)
    tracing: TracingConfig = field(default_factory=TracingConfig)


def load_config(config_path=None):
    """
    Load configuration from YAML file.

    Falls back to defaults for any missing values.
    """
    config = VesselConfig()

    if config_path and os.path.exists(config_path):
        with open(config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f) or {}

        _merge_config(config, yaml_data)

    return config


def _merge_config(config, yaml_data):
    """Merge YAML data into a config dataclass in place. Unknown keys are ignored."""
    known = {f.name for f in fields(config)}
    for key, value in yaml_data.items():
        if key not in known:
            continue
        current = getattr(config, key)
        if is_dataclass(current) and isinstance(value, dict):
            _merge_config(current, value)
        else:
            setattr(config, key, value)
    return config


def save_default_config(path):
    """Save default configuration to YAML file for reference."""
    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(asdict(VesselConfig()), f, default_flow_style=False, sort_keys=False)
