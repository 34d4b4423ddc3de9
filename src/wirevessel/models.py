"""
Pydantic data models for wirevessel.

Vessel parameters, the camera snapshot handed to exporters, the viewport,
and the records written next to every export.
"""

import json
import os
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator


class MetalType(str, Enum):
    """Wire materials offered by the studio."""
    STAINLESS = "stainless"
    SILVER = "silver"
    COPPER = "copper"
    BRASS = "brass"
    GOLD = "gold"


class MetalPreset(BaseModel):
    """Display properties of a wire material."""
    color: str
    metalness: float = Field(default=1.0, ge=0.0, le=1.0)
    roughness: float = Field(default=0.1, ge=0.0, le=1.0)

    model_config = ConfigDict(frozen=True)


METAL_PRESETS = {
    MetalType.STAINLESS: MetalPreset(color="#d1d1d1", roughness=0.1),
    MetalType.SILVER: MetalPreset(color="#f8f8f8", roughness=0.03),
    MetalType.COPPER: MetalPreset(color="#b87333", roughness=0.2),
    MetalType.BRASS: MetalPreset(color="#c5a358", roughness=0.15),
    MetalType.GOLD: MetalPreset(color="#ffd700", roughness=0.1),
}

# colour value meaning "use the metal preset"
NEUTRAL_COLOR = "#a0a0a0"


class Severity(str, Enum):
    """Severity levels for geometry checks."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"


class VesselParameters(BaseModel):
    """
    Shape and weave parameters of one vessel.

    Radii are kept as given; ProfileCurve clamps them to a positive epsilon.
    Negative wire counts are read as zero wires for that family.
    """
    top_radius: float = 6.0
    neck_radius: float = 3.0
    belly_radius: float = 12.0
    base_radius: float = 4.0
    total_height: Optional[float] = Field(default=None, gt=0.0)

    horizontal_wires: int = 40
    vertical_wires: int = 50
    diagonal_wires: int = 35
    wire_thickness: float = Field(default=0.6, gt=0.0)
    tilt_angle: float = 2.5  # radians of azimuth sweep, base to top

    metal_type: MetalType = MetalType.STAINLESS
    color: str = Field(default=NEUTRAL_COLOR, pattern=r"^#[0-9a-fA-F]{6}$")

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    @field_validator("horizontal_wires", "vertical_wires", "diagonal_wires")
    @classmethod
    def _non_negative_count(cls, value):
        return max(int(value), 0)

    @property
    def wire_color(self):
        """Colour the wires are drawn with."""
        if self.color.lower() != NEUTRAL_COLOR:
            return self.color.lower()
        return METAL_PRESETS[self.metal_type].color


class Viewport(BaseModel):
    """Pixel size of the render surface."""
    width: int = Field(default=1280, gt=0)
    height: int = Field(default=800, gt=0)

    model_config = ConfigDict(frozen=True, extra="forbid")

    @property
    def aspect(self):
        return self.width / self.height


class CameraSnapshot(BaseModel):
    """
    Read-only copy of the perspective camera at one instant.

    fov is the vertical field of view in degrees. Orientation is the look-at
    rotation from position towards target with the given up vector.
    """
    fov: float = Field(default=45.0, gt=0.0, lt=180.0)
    aspect: float = Field(default=1.6, gt=0.0)
    near: float = Field(default=0.1, gt=0.0)
    far: float = Field(default=3000.0, gt=0.0)
    position: Tuple[float, float, float] = (60.0, 60.0, 100.0)
    target: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    up: Tuple[float, float, float] = (0.0, 1.0, 0.0)

    model_config = ConfigDict(frozen=True, extra="forbid")


class CheckResult(BaseModel):
    """Result of a single geometry check."""
    rule_id: str
    severity: Severity
    passed: bool
    message: str
    evidence: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")


class ValidationReport(BaseModel):
    """Collection of geometry check results."""
    checks: List[CheckResult] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    @property
    def has_errors(self):
        return any(c.severity == Severity.ERROR and not c.passed for c in self.checks)

    @property
    def error_count(self):
        return sum(1 for c in self.checks if c.severity == Severity.ERROR and not c.passed)

    @property
    def warning_count(self):
        return sum(1 for c in self.checks if c.severity == Severity.WARN and not c.passed)


class ExportResult(BaseModel):
    """Files written by one pipeline run."""
    out_dir: str
    parameters: VesselParameters
    camera: CameraSnapshot
    viewport: Viewport
    files: Dict[str, str] = Field(default_factory=dict)
    wire_counts: Dict[str, int] = Field(default_factory=dict)
    validation: ValidationReport = Field(default_factory=ValidationReport)

    model_config = ConfigDict(extra="forbid")


def load_parameters(path):
    """
    Load vessel parameters from a YAML or JSON file.

    Raises pydantic.ValidationError for out-of-range values.
    """
    with open(path, "r", encoding="utf-8") as f:
        if os.path.splitext(path)[1].lower() == ".json":
            data = json.load(f)
        else:
            data = yaml.safe_load(f)
    return VesselParameters.model_validate(data or {})


def save_default_parameters(path):
    """Write the default vessel parameters as YAML."""
    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(VesselParameters().model_dump(mode="json"), f, default_flow_style=False, sort_keys=False)
