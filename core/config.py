"""
Calibration configuration for the flute hole-position solver.

The acoustic formulas in core/flute/ are closed-form approximations whose
coefficients were fitted empirically by flute makers. They are collected here
as named, immutable configuration so every calculator shares one set of
numbers and a caller can swap in a different instrument family without
touching the formulas.

None of these values is physically derived. Changing any of them shifts every
computed hole position.
"""

from dataclasses import dataclass

FUNDAMENTAL_CONSTANT: float = 156521.0
"""Empirical K in F0 = K / total_length (Hz·mm) for the traditional tuning."""

TUBE_LENGTH_CONSTANT: float = 165674.0
"""Empirical BigK in acoustic_length = BigK / frequency (Hz·mm)."""

END_CORRECTION_FACTOR: float = 0.61
"""Open-end correction as a fraction of bore diameter."""

MOUTHPIECE_BORE_FACTOR: float = 0.3
"""Bore fraction subtracted when computing the mouthpiece excess length."""

EFFECTIVE_THICKNESS_FACTOR: float = 0.75
"""Hole-diameter fraction added to wall thickness for the effective chimney."""

HOLE_DIAMETER_END_FACTOR: float = 0.6
"""Hole-diameter fraction of the hole-based end correction (forward solver)."""

HOLE_WALL_END_FACTOR: float = 0.5
"""Wall-thickness fraction of the hole-based end correction (forward solver)."""

IMPEDANCE_EXPONENT: float = 3.0
"""Exponent k in impedance_factor = 1 - exp(-k * area_ratio)."""

IMPEDANCE_LENGTH_WEIGHT: float = 0.3
"""Fraction of the un-truncated length added back for small holes."""

THUMB_REACH_FRACTION: float = 2.0 / 3.0
"""Share of the ergonomic limit allowed for the thumb-to-neighbour span."""


@dataclass(frozen=True)
class SolverCalibration:
    """
    Empirical constants consumed by the hole-position solver.

    Immutable configuration object that can be reused across any number of
    calculate() calls. Defaults reproduce the traditional shakuhachi
    calibration.

    Attributes:
        fundamental_constant: K in F0 = K / total_length.
        tube_length_constant: BigK in acoustic_length = BigK / frequency.
        end_correction_factor: open-end correction per mm of bore.
        mouthpiece_bore_factor: bore share of the mouthpiece excess length.
        effective_thickness_factor: hole share of the effective chimney height.
        hole_diameter_end_factor: hole share of the hole end correction.
        hole_wall_end_factor: wall share of the hole end correction.
        impedance_exponent: steepness of the impedance factor curve.
        impedance_length_weight: length penalty for a fully closed hole.
        thumb_reach_fraction: share of the ergonomic limit for thumb spans.

    Example:
        >>> calibration = SolverCalibration(fundamental_constant=150000.0)
        >>> result = calculate(geometry, environment, style, calibration=calibration)
    """

    fundamental_constant: float = FUNDAMENTAL_CONSTANT
    tube_length_constant: float = TUBE_LENGTH_CONSTANT
    end_correction_factor: float = END_CORRECTION_FACTOR
    mouthpiece_bore_factor: float = MOUTHPIECE_BORE_FACTOR
    effective_thickness_factor: float = EFFECTIVE_THICKNESS_FACTOR
    hole_diameter_end_factor: float = HOLE_DIAMETER_END_FACTOR
    hole_wall_end_factor: float = HOLE_WALL_END_FACTOR
    impedance_exponent: float = IMPEDANCE_EXPONENT
    impedance_length_weight: float = IMPEDANCE_LENGTH_WEIGHT
    thumb_reach_fraction: float = THUMB_REACH_FRACTION

    def __post_init__(self) -> None:
        """Validate calibration parameters."""
        if self.fundamental_constant <= 0:
            raise ValueError(
                f"fundamental_constant must be positive, got {self.fundamental_constant}"
            )
        if self.tube_length_constant <= 0:
            raise ValueError(
                f"tube_length_constant must be positive, got {self.tube_length_constant}"
            )
        if self.impedance_exponent <= 0:
            raise ValueError(
                f"impedance_exponent must be positive, got {self.impedance_exponent}"
            )
        if not (0.0 < self.thumb_reach_fraction <= 1.0):
            raise ValueError(
                f"thumb_reach_fraction must be in (0, 1], got {self.thumb_reach_fraction}"
            )
        for name in (
            "end_correction_factor",
            "mouthpiece_bore_factor",
            "effective_thickness_factor",
            "hole_diameter_end_factor",
            "hole_wall_end_factor",
            "impedance_length_weight",
        ):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")


# Pre-defined calibrations

DEFAULT_CALIBRATION = SolverCalibration()
"""Traditional shakuhachi calibration (K = 156521, BigK = 165674)."""
