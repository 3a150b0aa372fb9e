"""
core/flute/forward.py — Forward solver: hole position → sounding frequency.

The open hole is treated as a second open end of an open-open tube:

    acoustic  = position + hole_end_correction(hole, wall)
    corrected = impedance_corrected_length(acoustic, hole, bore)
    f         = c / (2 · corrected)

All lengths are converted to metres before the formula is applied. The
result is unrounded; callers round for display.
"""

from __future__ import annotations

from collections.abc import Iterable

from core.config import DEFAULT_CALIBRATION, SolverCalibration
from core.flute.corrections import hole_end_correction, impedance_corrected_length
from core.flute.environment import SpeedModel, speed_for
from core.flute.types import EnvironmentalConditions, FluteDomainError, FluteGeometry
from core.flute.units import mm_to_m

MIN_ACOUSTIC_LENGTH_M: float = 1e-6


def corrected_length_m(
    position_mm: float,
    geometry: FluteGeometry,
    calibration: SolverCalibration = DEFAULT_CALIBRATION,
) -> float:
    """Effective acoustic length in metres for a hole at ``position_mm``."""
    hole_m = mm_to_m(geometry.hole_diameter_mm)
    bore_m = mm_to_m(geometry.bore_diameter_mm)
    wall_m = mm_to_m(geometry.wall_thickness_mm)

    acoustic = mm_to_m(position_mm) + hole_end_correction(hole_m, wall_m, calibration)
    return impedance_corrected_length(acoustic, hole_m, bore_m, calibration)


def frequency_at(
    position_mm: float,
    geometry: FluteGeometry,
    environment: EnvironmentalConditions,
    *,
    speed_model: SpeedModel = SpeedModel.HUMID,
    calibration: SolverCalibration = DEFAULT_CALIBRATION,
) -> float:
    """Sounding frequency in Hz of a hole at ``position_mm`` from the top.

    Raises:
        FluteDomainError: If the corrected acoustic length is ≤ 1e-6 m,
            which would otherwise yield an infinite or negative frequency.
    """
    length_m = corrected_length_m(position_mm, geometry, calibration)
    if length_m <= MIN_ACOUSTIC_LENGTH_M:
        raise FluteDomainError(
            f"acoustic length {length_m:.3g} m at position {position_mm} mm is degenerate"
        )
    return speed_for(environment, speed_model) / (2.0 * length_m)


def frequencies_at(
    positions_mm: Iterable[float],
    geometry: FluteGeometry,
    environment: EnvironmentalConditions,
    *,
    speed_model: SpeedModel = SpeedModel.HUMID,
    calibration: SolverCalibration = DEFAULT_CALIBRATION,
) -> list[float | None]:
    """Vectorised frequency_at(); degenerate positions map to None."""
    out: list[float | None] = []
    for position in positions_mm:
        try:
            out.append(
                frequency_at(
                    position,
                    geometry,
                    environment,
                    speed_model=speed_model,
                    calibration=calibration,
                )
            )
        except FluteDomainError:
            out.append(None)
    return out
