"""
api/schemas/flute.py — Pydantic request schemas for the /flute endpoints.

Covers:
    /flute/calculate  — FluteCalculateRequest
    /flute/compare    — FluteCompareRequest
    /flute/frequency  — FluteFrequencyRequest
    /flute/resonance  — FluteResonanceRequest

Field ranges mirror the workshop UI limits; anything outside them is
rejected with 422 before the solver runs.
"""

from typing import Literal

from pydantic import BaseModel, Field, model_validator

from core.flute.environment import SpeedModel
from core.flute.types import EnvironmentalConditions, FluteGeometry

# ---------------------------------------------------------------------------
# Shared inputs
# ---------------------------------------------------------------------------


class FluteInputs(BaseModel):
    """Geometry and air conditions shared by every flute request."""

    length_mm: float = Field(
        ...,
        ge=30.0,
        le=1300.0,
        description="Length from the blowing edge to the foot, in mm.",
    )
    bore_diameter_mm: float = Field(default=19.0, ge=10.0, le=100.0)
    wall_thickness_mm: float = Field(default=4.0, ge=1.0, le=10.0)
    hole_diameter_mm: float = Field(default=10.0, ge=5.0, le=30.0)
    ergonomic_limit_mm: float = Field(
        default=60.0,
        ge=10.0,
        le=180.0,
        description="Largest comfortable span between adjacent holes.",
    )
    temperature_c: float = Field(default=20.0, ge=-10.0, le=50.0)
    relative_humidity: float = Field(default=50.0, ge=0.0, le=100.0)
    reference_pitch_hz: float = Field(
        default=440.0,
        ge=400.0,
        le=480.0,
        description="Frequency of A4 used for note names.",
    )

    def geometry(self) -> FluteGeometry:
        return FluteGeometry(
            length_mm=self.length_mm,
            bore_diameter_mm=self.bore_diameter_mm,
            wall_thickness_mm=self.wall_thickness_mm,
            hole_diameter_mm=self.hole_diameter_mm,
            ergonomic_limit_mm=self.ergonomic_limit_mm,
        )

    def environment(self) -> EnvironmentalConditions:
        return EnvironmentalConditions(
            temperature_c=self.temperature_c,
            relative_humidity=self.relative_humidity,
            reference_pitch_hz=self.reference_pitch_hz,
        )


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class FluteCalculateRequest(FluteInputs):
    """Request body for POST /flute/calculate."""

    style: str = Field(default="nelson-zink", max_length=50)
    speed_model: SpeedModel = Field(
        default=SpeedModel.HUMID,
        description="'humid' (default) or the simpler 'linear' temperature model.",
    )


class FluteCompareRequest(FluteInputs):
    """Request body for POST /flute/compare."""

    strategy: Literal["interval", "percentage"] | None = None


class FluteFrequencyRequest(FluteInputs):
    """Request body for POST /flute/frequency."""

    position_mm: float = Field(..., gt=0.0, description="Hole position from the top, in mm.")
    speed_model: SpeedModel = SpeedModel.HUMID


class FluteResonanceRequest(FluteInputs):
    """Request body for POST /flute/resonance."""

    mode_count: int = Field(default=5, ge=1, le=10)
    hole_positions: list[float] = Field(
        default_factory=list,
        description="Open holes in mm from the top; they lower Q and are scored against mode 1.",
    )
    hole_diameters: list[float] | None = Field(
        default=None,
        description="Per-hole diameters; defaults to hole_diameter_mm for every hole.",
    )

    @model_validator(mode="after")
    def check_holes(self) -> "FluteResonanceRequest":
        if any(p <= 0 or p >= self.length_mm for p in self.hole_positions):
            raise ValueError("hole_positions must lie strictly inside the tube")
        if self.hole_diameters is not None:
            if len(self.hole_diameters) != len(self.hole_positions):
                raise ValueError("hole_diameters must match hole_positions in length")
            if any(d <= 0 for d in self.hole_diameters):
                raise ValueError("hole_diameters must be positive")
        return self
