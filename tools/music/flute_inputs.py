"""
Shared parameter specs for the flute tools.

Every flute tool accepts the same geometry and air-condition inputs, with
the same accepted ranges as the HTTP schemas. Defaults describe a common
1.8 shaku blank: 19 mm bore, 4 mm wall, 10 mm holes.
"""

from typing import Any

from core.flute.calculator import (
    BORE_DIAMETER_RANGE_MM,
    ERGONOMIC_LIMIT_RANGE_MM,
    HOLE_DIAMETER_RANGE_MM,
    REFERENCE_PITCH_RANGE_HZ,
    WALL_THICKNESS_RANGE_MM,
)
from core.flute.types import (
    HUMIDITY_RANGE_PCT,
    TEMPERATURE_RANGE_C,
    EnvironmentalConditions,
    FluteGeometry,
)
from tools.base import ToolParameter

LENGTH_RANGE_MM: tuple[float, float] = (30.0, 1300.0)


def geometry_parameters() -> list[ToolParameter]:
    return [
        ToolParameter(
            name="length_mm",
            type=float,
            description="Flute length in mm from the blowing edge to the foot (e.g. 540 for 1.8 shaku).",
            required=True,
            min_value=LENGTH_RANGE_MM[0],
            max_value=LENGTH_RANGE_MM[1],
        ),
        ToolParameter(
            name="bore_diameter_mm",
            type=float,
            description="Inner bore diameter in mm. Default: 19.",
            required=False,
            default=19.0,
            min_value=BORE_DIAMETER_RANGE_MM[0],
            max_value=BORE_DIAMETER_RANGE_MM[1],
        ),
        ToolParameter(
            name="wall_thickness_mm",
            type=float,
            description="Wall thickness at the finger holes in mm. Default: 4.",
            required=False,
            default=4.0,
            min_value=WALL_THICKNESS_RANGE_MM[0],
            max_value=WALL_THICKNESS_RANGE_MM[1],
        ),
        ToolParameter(
            name="hole_diameter_mm",
            type=float,
            description="Finger-hole diameter in mm. Default: 10.",
            required=False,
            default=10.0,
            min_value=HOLE_DIAMETER_RANGE_MM[0],
            max_value=HOLE_DIAMETER_RANGE_MM[1],
        ),
        ToolParameter(
            name="ergonomic_limit_mm",
            type=float,
            description="Largest comfortable span between adjacent holes in mm. Default: 60.",
            required=False,
            default=60.0,
            min_value=ERGONOMIC_LIMIT_RANGE_MM[0],
            max_value=ERGONOMIC_LIMIT_RANGE_MM[1],
        ),
    ]


def environment_parameters() -> list[ToolParameter]:
    return [
        ToolParameter(
            name="temperature_c",
            type=float,
            description="Air temperature in °C. Default: 20.",
            required=False,
            default=20.0,
            min_value=TEMPERATURE_RANGE_C[0],
            max_value=TEMPERATURE_RANGE_C[1],
        ),
        ToolParameter(
            name="relative_humidity",
            type=float,
            description="Relative humidity in percent. Default: 50.",
            required=False,
            default=50.0,
            min_value=HUMIDITY_RANGE_PCT[0],
            max_value=HUMIDITY_RANGE_PCT[1],
        ),
        ToolParameter(
            name="reference_pitch_hz",
            type=float,
            description="Frequency of A4 used for note names. Default: 440.",
            required=False,
            default=440.0,
            min_value=REFERENCE_PITCH_RANGE_HZ[0],
            max_value=REFERENCE_PITCH_RANGE_HZ[1],
        ),
    ]


def geometry_from(params: dict[str, Any]) -> FluteGeometry:
    """Build a FluteGeometry from resolved tool parameters."""
    return FluteGeometry(
        length_mm=float(params["length_mm"]),
        bore_diameter_mm=float(params["bore_diameter_mm"]),
        wall_thickness_mm=float(params["wall_thickness_mm"]),
        hole_diameter_mm=float(params["hole_diameter_mm"]),
        ergonomic_limit_mm=float(params["ergonomic_limit_mm"]),
    )


def environment_from(params: dict[str, Any]) -> EnvironmentalConditions:
    """Build EnvironmentalConditions from resolved tool parameters."""
    return EnvironmentalConditions(
        temperature_c=float(params["temperature_c"]),
        relative_humidity=float(params["relative_humidity"]),
        reference_pitch_hz=float(params["reference_pitch_hz"]),
    )
