"""
core/flute/corrections.py — End and tonehole length corrections.

Two families of approximations live here and are deliberately kept apart:

* the forward family (hole_end_correction, impedance_factor,
  impedance_corrected_length) turns a physical hole position into an
  acoustic length for frequency lookup;
* the chain family (chain_hole_correction) is the closed form used by the
  algebraic solver while walking from one hole's target length to the next.

They are not algebraically reconciled and must not be substituted for each
other. All functions are unit-agnostic: output is in the unit of the input
lengths.
"""

from __future__ import annotations

import math

from core.config import DEFAULT_CALIBRATION, SolverCalibration
from core.flute.types import FluteDomainError


def end_correction(
    bore_diameter: float,
    calibration: SolverCalibration = DEFAULT_CALIBRATION,
) -> float:
    """Open-end correction of the tube: 0.61 × bore."""
    return calibration.end_correction_factor * bore_diameter


def hole_end_correction(
    hole_diameter: float,
    wall_thickness: float,
    calibration: SolverCalibration = DEFAULT_CALIBRATION,
) -> float:
    """Hole-based end correction: 0.6 × hole + 0.5 × wall."""
    return (
        calibration.hole_diameter_end_factor * hole_diameter
        + calibration.hole_wall_end_factor * wall_thickness
    )


def area_ratio(hole_diameter: float, bore_diameter: float) -> float:
    """(hole / bore)², the ratio of hole area to bore cross-section."""
    if bore_diameter <= 0:
        raise FluteDomainError(f"bore diameter must be positive, got {bore_diameter}")
    return (hole_diameter / bore_diameter) ** 2


def impedance_factor(
    hole_diameter: float,
    bore_diameter: float,
    calibration: SolverCalibration = DEFAULT_CALIBRATION,
) -> float:
    """How completely a hole truncates the standing wave, in [0, 1).

    1 − exp(−k · (hole/bore)²). A hole as wide as the bore gives ≈ 0.95;
    a pinhole gives ≈ 0.
    """
    return 1.0 - math.exp(-calibration.impedance_exponent * area_ratio(hole_diameter, bore_diameter))


def impedance_corrected_length(
    acoustic_length: float,
    hole_diameter: float,
    bore_diameter: float,
    calibration: SolverCalibration = DEFAULT_CALIBRATION,
) -> float:
    """Lengthen ``acoustic_length`` for an imperfectly truncating hole.

    length × (1 + (1 − impedance_factor) × 0.3)
    """
    factor = impedance_factor(hole_diameter, bore_diameter, calibration)
    return acoustic_length * (1.0 + (1.0 - factor) * calibration.impedance_length_weight)


def chain_hole_correction(
    previous_length: float,
    new_length: float,
    hole_diameter: float,
    bore_diameter: float,
    wall_thickness: float,
    calibration: SolverCalibration = DEFAULT_CALIBRATION,
) -> float:
    """Closed-form tonehole correction CF for the algebraic chain solver.

    S  = (previous − new) / 2
    Te = wall + 0.75 × hole
    CF = S × (sqrt((Te/S) × (bore/hole)² × 2 + 1) − 1)

    Args:
        previous_length: Acoustic length carried from the previous (lower) hole.
        new_length:      Target acoustic length of this hole.
        hole_diameter:   Tonehole diameter.
        bore_diameter:   Bore diameter.
        wall_thickness:  Wall thickness at the hole.

    Returns:
        Correction length, always >= 0.

    Raises:
        FluteDomainError: If S <= 0 (the new hole is not higher than the
            previous one) or the hole diameter is not positive.
    """
    half_delta = (previous_length - new_length) / 2.0
    if half_delta <= 0:
        raise FluteDomainError(
            f"chain correction needs previous_length > new_length, "
            f"got {previous_length} <= {new_length}"
        )
    if hole_diameter <= 0:
        raise FluteDomainError(f"hole diameter must be positive, got {hole_diameter}")

    effective_thickness = wall_thickness + calibration.effective_thickness_factor * hole_diameter
    inner = (effective_thickness / half_delta) * (bore_diameter / hole_diameter) ** 2 * 2.0 + 1.0
    return half_delta * (math.sqrt(inner) - 1.0)
