"""
core/flute/resonance.py — Open-cylinder harmonics and hole perturbation estimates.

A coarse standing-wave picture of the whole bore, used to judge which holes
sit near pressure nodes of a given harmonic and roughly how much they pull
its tuning. This is an estimate for microtuning, not a physical model of
the air column.

    L_eff = L + 0.61·bore + 0.3·wall                 (metres)
    f_n   = n · c / (2 · L_eff)
    Q     = 50 / (1 + 0.01 · Σ (d_i² / p_i²))

Positions are reported in millimetres from the blowing end.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from core.config import DEFAULT_CALIBRATION, SolverCalibration
from core.flute.corrections import end_correction
from core.flute.environment import SpeedModel, speed_for
from core.flute.types import (
    EnvironmentalConditions,
    FluteDomainError,
    FluteGeometry,
    HolePerturbation,
    ResonanceMode,
    WaveNode,
)
from core.flute.units import m_to_mm, mm_to_m, round_half_up

WALL_LENGTH_FACTOR: float = 0.3
BASE_QUALITY_FACTOR: float = 50.0
COUPLING_WEIGHT: float = 0.01
NODE_DISTANCE_SCALE_MM: float = 10.0
SHIFT_WEIGHT: float = 0.1
MM_PER_CENT: float = 0.1
CENTS_TOLERANCE: float = 5.0


def effective_length_m(
    geometry: FluteGeometry,
    calibration: SolverCalibration = DEFAULT_CALIBRATION,
) -> float:
    """Whole-bore acoustic length in metres including the open-end correction."""
    return (
        mm_to_m(geometry.length_mm)
        + end_correction(mm_to_m(geometry.bore_diameter_mm), calibration)
        + mm_to_m(geometry.wall_thickness_mm) * WALL_LENGTH_FACTOR
    )


def _hole_coupling(hole_positions: Sequence[float], hole_diameters: Sequence[float]) -> float:
    total = 0.0
    for position, diameter in zip(hole_positions, hole_diameters):
        if position <= 0:
            raise FluteDomainError(f"hole position must be positive, got {position}")
        total += (diameter * diameter) / (position * position)
    return total


def _diameters_for(
    hole_positions: Sequence[float],
    hole_diameters: Sequence[float] | None,
    default: float,
) -> list[float]:
    if hole_diameters is None:
        return [default] * len(hole_positions)
    if len(hole_diameters) != len(hole_positions):
        raise ValueError(
            f"got {len(hole_diameters)} hole diameters for {len(hole_positions)} positions"
        )
    return list(hole_diameters)


def resonance_modes(
    geometry: FluteGeometry,
    environment: EnvironmentalConditions | None = None,
    hole_positions: Sequence[float] = (),
    hole_diameters: Sequence[float] | None = None,
    mode_count: int = 5,
    *,
    speed_model: SpeedModel = SpeedModel.HUMID,
    calibration: SolverCalibration = DEFAULT_CALIBRATION,
) -> list[ResonanceMode]:
    """First ``mode_count`` harmonics of the open cylinder.

    Mode n has n + 1 pressure nodes (both open ends and every L/n) and n
    velocity antinodes halfway between them.

    Args:
        geometry:       Tube dimensions.
        environment:    Air conditions (defaults: 20 °C, 50 % RH).
        hole_positions: Open holes in mm from the top; they only lower Q.
        hole_diameters: Per-hole diameters; defaults to the nominal hole.
        mode_count:     Number of harmonics, >= 1.

    Raises:
        ValueError: If mode_count < 1 or diameters do not match positions.
        FluteDomainError: If a hole position is not positive.
    """
    if mode_count < 1:
        raise ValueError(f"mode_count must be >= 1, got {mode_count}")
    environment = environment or EnvironmentalConditions()
    speed = speed_for(environment, speed_model)
    length = effective_length_m(geometry, calibration)

    diameters = _diameters_for(hole_positions, hole_diameters, geometry.hole_diameter_mm)
    quality = BASE_QUALITY_FACTOR / (1.0 + _hole_coupling(hole_positions, diameters) * COUPLING_WEIGHT)

    modes: list[ResonanceMode] = []
    for n in range(1, mode_count + 1):
        frequency = n * speed / (2.0 * length)
        nodes = tuple(
            WaveNode(position_mm=m_to_mm(i * length / n), kind="pressure", amplitude=0.0)
            for i in range(n + 1)
        )
        antinodes = tuple(
            WaveNode(
                position_mm=m_to_mm(i * length / n + length / (2 * n)),
                kind="velocity",
                amplitude=1.0,
            )
            for i in range(n)
        )
        modes.append(
            ResonanceMode(
                number=n,
                frequency_hz=frequency,
                wavelength_m=speed / frequency,
                nodes=nodes,
                antinodes=antinodes,
                quality_factor=quality,
            )
        )
    return modes


def hole_perturbations(
    mode: ResonanceMode,
    hole_positions: Sequence[float],
    hole_diameters: Sequence[float],
    bore_diameter_mm: float,
) -> list[HolePerturbation]:
    """Estimate how each open hole pulls the tuning of ``mode``.

    A hole's influence is its area ratio weighted by 1 / (1 + d/10), where d
    is the distance in mm to the nearest pressure node. The frequency shift
    is f · influence · 0.1. A movement of 0.1 mm per cent is suggested when
    the shift exceeds 5 cents; positive means sharp.
    """
    if bore_diameter_mm <= 0:
        raise FluteDomainError(f"bore diameter must be positive, got {bore_diameter_mm}")
    if len(hole_diameters) != len(hole_positions):
        raise ValueError(
            f"got {len(hole_diameters)} hole diameters for {len(hole_positions)} positions"
        )

    results: list[HolePerturbation] = []
    for index, (position, diameter) in enumerate(zip(hole_positions, hole_diameters)):
        node_distance = min(abs(node.position_mm - position) for node in mode.nodes)
        area_ratio = (diameter / bore_diameter_mm) ** 2
        position_factor = 1.0 / (1.0 + node_distance / NODE_DISTANCE_SCALE_MM)
        shift = mode.frequency_hz * area_ratio * position_factor * SHIFT_WEIGHT
        cents = 1200.0 * math.log2((mode.frequency_hz + shift) / mode.frequency_hz)

        movement = 0.0
        if abs(cents) > CENTS_TOLERANCE:
            movement = math.copysign(abs(cents) * MM_PER_CENT, cents)

        results.append(
            HolePerturbation(
                hole_index=index + 1,
                position_mm=position,
                frequency_shift_hz=shift,
                cents_shift=cents,
                node_distance_mm=node_distance,
                influence=position_factor * area_ratio,
                suggested_movement_mm=round_half_up(movement, 1),
            )
        )
    return results
