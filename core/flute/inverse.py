"""
core/flute/inverse.py — Inverse solvers: target → hole position.

Two strategies that are not interchangeable:

    solve_interval_chain   prescriptive. Pitch is the input; each hole's
                           position follows from its target frequency via
                           the empirical tube-length constant and the chain
                           tonehole correction.
    solve_percentages      descriptive. Positions are measured makers'
                           proportions of total length; pitch is computed
                           afterwards by the forward solver.

Both list holes from hole 1 (bottom) upward and return positions in
millimetres from the blowing end.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from core.config import DEFAULT_CALIBRATION, SolverCalibration
from core.flute.corrections import chain_hole_correction
from core.flute.notes import semitone_frequency
from core.flute.types import FluteDomainError, FluteGeometry
from core.flute.units import round_half_up, round_mm


@dataclass(frozen=True)
class ChainHole:
    """One hole produced by the chain solver.

    Attributes:
        index:               0-based index, 0 = hole 1 (bottom).
        semitones:           Offset above the fundamental.
        target_frequency_hz: F0 · 2^(semitones/12), unrounded.
        acoustic_length_mm:  BigK / target frequency.
        correction_mm:       Chain tonehole correction CF.
        position_mm:         Whole-millimetre position from the top.
        error:               True when position ≤ 0 or beyond the tube.
    """

    index: int
    semitones: float
    target_frequency_hz: float
    acoustic_length_mm: float
    correction_mm: float
    position_mm: int
    error: bool


def fundamental_frequency(
    total_length_mm: float,
    fundamental_constant: float = DEFAULT_CALIBRATION.fundamental_constant,
) -> float:
    """F0 = K / total length (Hz)."""
    if total_length_mm <= 0:
        raise FluteDomainError(f"total length must be positive, got {total_length_mm}")
    return fundamental_constant / total_length_mm


def mouthpiece_excess_length(
    total_length_mm: float,
    bore_diameter_mm: float,
    *,
    fundamental_constant: float = DEFAULT_CALIBRATION.fundamental_constant,
    tube_length_constant: float = DEFAULT_CALIBRATION.tube_length_constant,
    calibration: SolverCalibration = DEFAULT_CALIBRATION,
) -> float:
    """MEL = BigK / F0 − 0.3 · bore − total length (mm)."""
    tube_length = tube_length_constant / fundamental_frequency(total_length_mm, fundamental_constant)
    return tube_length - calibration.mouthpiece_bore_factor * bore_diameter_mm - total_length_mm


def solve_interval_chain(
    total_length_mm: float,
    semitone_offsets: Sequence[float],
    geometry: FluteGeometry,
    *,
    fundamental_constant: float | None = None,
    tube_length_constant: float | None = None,
    calibration: SolverCalibration = DEFAULT_CALIBRATION,
) -> list[ChainHole]:
    """Walk the hole chain from the bottom hole toward the blowing end.

    For each offset, in ascending order:

        Hz       = F0 · 2^(offset/12)
        new      = BigK / Hz
        CF       = chain_hole_correction(previous, new, hole, bore, wall)
        position = round_half_up(new − MEL − CF)
        previous = new + CF

    The first ``previous`` is the tube length of the fundamental. Infeasible
    holes are flagged, never dropped; the pass always returns one entry per
    offset.

    Positions decrease toward the blowing end. Whole-millimetre rounding can
    tie two neighbouring holes on very short tubes (a diatonic chain under
    about 40 mm); from 300 mm up they are strictly decreasing.

    Args:
        total_length_mm:      Physical flute length.
        semitone_offsets:     Strictly increasing positive offsets, hole 1 first.
        geometry:             Supplies bore, wall and hole diameters.
        fundamental_constant: K, defaults to the calibration's.
        tube_length_constant: BigK, defaults to the calibration's.

    Raises:
        ValueError: If offsets are empty, non-positive or not increasing.
        FluteDomainError: If the total length is not positive.
    """
    if not semitone_offsets:
        raise ValueError("semitone_offsets must not be empty")
    if semitone_offsets[0] <= 0:
        raise ValueError(f"semitone offsets must be positive, got {semitone_offsets[0]}")
    if any(b <= a for a, b in zip(semitone_offsets, semitone_offsets[1:])):
        raise ValueError(f"semitone offsets must be strictly increasing, got {list(semitone_offsets)}")

    k = fundamental_constant or calibration.fundamental_constant
    big_k = tube_length_constant or calibration.tube_length_constant

    f0 = fundamental_frequency(total_length_mm, k)
    mel = mouthpiece_excess_length(
        total_length_mm,
        geometry.bore_diameter_mm,
        fundamental_constant=k,
        tube_length_constant=big_k,
        calibration=calibration,
    )

    previous = big_k / f0
    holes: list[ChainHole] = []
    for index, offset in enumerate(semitone_offsets):
        target = semitone_frequency(f0, offset)
        new_length = big_k / target
        correction = chain_hole_correction(
            previous,
            new_length,
            geometry.hole_diameter_mm,
            geometry.bore_diameter_mm,
            geometry.wall_thickness_mm,
            calibration,
        )
        position = int(round_half_up(new_length - mel - correction))
        holes.append(
            ChainHole(
                index=index,
                semitones=offset,
                target_frequency_hz=target,
                acoustic_length_mm=new_length,
                correction_mm=correction,
                position_mm=position,
                error=position <= 0 or position > total_length_mm,
            )
        )
        previous = new_length + correction

    return holes


def solve_percentages(
    total_length_mm: float,
    fractions: Sequence[float],
    offsets_mm: Sequence[float] = (),
    decimals: int = 0,
) -> list[float | int]:
    """Positions from fractional proportions of the total length.

    position = round_half_up(TL · fraction) + offset, rounded again to
    ``decimals`` places. With the default ``decimals=0`` positions are ints.

    Raises:
        FluteDomainError: If the total length is not positive.
        ValueError: If offsets are given with a different length than fractions.
    """
    if total_length_mm <= 0:
        raise FluteDomainError(f"total length must be positive, got {total_length_mm}")
    if offsets_mm and len(offsets_mm) != len(fractions):
        raise ValueError(
            f"got {len(offsets_mm)} offsets for {len(fractions)} fractions"
        )

    positions: list[float | int] = []
    for index, fraction in enumerate(fractions):
        offset = offsets_mm[index] if offsets_mm else 0.0
        raw = round_half_up(total_length_mm * fraction) + offset
        positions.append(round_mm(raw, decimals))
    return positions
