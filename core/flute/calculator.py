"""
core/flute/calculator.py — One calculation pass from inputs to result.

Pipeline:
    style → speed of sound → inverse solver (positions, hole 1 upward)
          → forward solver (realized frequency per hole) → note naming
          → ergonomics → CalculationResult (holes top-first)

calculate() is a pure function: it keeps no state between calls and
returns a new frozen CalculationResult each time.
"""

from __future__ import annotations

import dataclasses
import logging
import math
from types import MappingProxyType

from core.config import DEFAULT_CALIBRATION, SolverCalibration
from core.flute.environment import SpeedModel, speed_for
from core.flute.ergonomics import check_spans
from core.flute.forward import frequency_at
from core.flute.inverse import fundamental_frequency, solve_interval_chain, solve_percentages
from core.flute.notes import UNKNOWN_NOTE, interval_cents, note_name, semitone_frequency
from core.flute.styles import fallback_mm_per_shaku, get_style, length_class_table, styles_for_length
from core.flute.types import (
    STRATEGY_INTERVAL,
    CalculationResult,
    EnvironmentalConditions,
    FluteDomainError,
    FluteGeometry,
    HolePosition,
    LengthClass,
    TuningStyle,
)
from core.flute.units import MM_PER_SHAKU, round_half_up

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Accepted input ranges (inclusive)
# ---------------------------------------------------------------------------

HOLE_DIAMETER_RANGE_MM: tuple[float, float] = (5.0, 30.0)
BORE_DIAMETER_RANGE_MM: tuple[float, float] = (10.0, 100.0)
WALL_THICKNESS_RANGE_MM: tuple[float, float] = (1.0, 10.0)
ERGONOMIC_LIMIT_RANGE_MM: tuple[float, float] = (10.0, 180.0)
REFERENCE_PITCH_RANGE_HZ: tuple[float, float] = (400.0, 480.0)


def _range_message(label: str, value: float, bounds: tuple[float, float], unit: str) -> str | None:
    lo, hi = bounds
    if lo <= value <= hi:
        return None
    return f"{label} must be between {lo:g} and {hi:g} {unit}, got {value:g}"


def validate_inputs(
    geometry: FluteGeometry,
    environment: EnvironmentalConditions,
    style: TuningStyle | str,
) -> list[str]:
    """Check inputs against the accepted UI ranges.

    Returns:
        Human-readable violations, empty when everything is in range.

    Raises:
        UnknownStyleError: If ``style`` is an unregistered key.
    """
    resolved = get_style(style) if isinstance(style, str) else style
    checks = (
        ("Flute length", geometry.length_mm, resolved.length_range_mm, "mm"),
        ("Hole diameter", geometry.hole_diameter_mm, HOLE_DIAMETER_RANGE_MM, "mm"),
        ("Bore diameter", geometry.bore_diameter_mm, BORE_DIAMETER_RANGE_MM, "mm"),
        ("Wall thickness", geometry.wall_thickness_mm, WALL_THICKNESS_RANGE_MM, "mm"),
        ("Ergonomic limit", geometry.ergonomic_limit_mm, ERGONOMIC_LIMIT_RANGE_MM, "mm"),
        ("Reference pitch", environment.reference_pitch_hz, REFERENCE_PITCH_RANGE_HZ, "Hz"),
    )
    errors: list[str] = []
    for label, value, bounds, unit in checks:
        message = _range_message(label, value, bounds, unit)
        if message:
            errors.append(message)
    return errors


# ---------------------------------------------------------------------------
# Length classification
# ---------------------------------------------------------------------------


def classify_length(length_mm: float) -> LengthClass:
    """Traditional shaku/sun designation of a flute length.

    The label comes from the 0.1-shaku table (318–1242 mm); outside the
    table it is length / 303 to one decimal. The shaku/sun breakdown always
    uses 1 shaku = 303.03 mm, e.g. 540 mm → "1 shaku 8 sun".
    """
    if length_mm <= 0:
        raise FluteDomainError(f"length must be positive, got {length_mm}")

    label = None
    for entry in length_class_table():
        if entry["min_mm"] <= length_mm <= entry["max_mm"]:
            label = str(entry["label"])
            break
    standard = label is not None
    if label is None:
        label = f"{round_half_up(length_mm / fallback_mm_per_shaku(), 1):.1f}"

    in_shaku = length_mm / MM_PER_SHAKU
    shaku = math.floor(in_shaku)
    sun = int(round_half_up((in_shaku - shaku) * 10))
    if sun == 10:
        shaku, sun = shaku + 1, 0
    return LengthClass(label=label, shaku=shaku, sun=sun, standard=standard)


# ---------------------------------------------------------------------------
# calculate
# ---------------------------------------------------------------------------


def _realized_frequency(
    position_mm: float,
    geometry: FluteGeometry,
    environment: EnvironmentalConditions,
    speed_model: SpeedModel,
    calibration: SolverCalibration,
) -> float | None:
    try:
        return frequency_at(
            position_mm,
            geometry,
            environment,
            speed_model=speed_model,
            calibration=calibration,
        )
    except FluteDomainError:
        return None


def _round_hz(value: float | None) -> float | None:
    return None if value is None else round_half_up(value, 2)


def calculate(
    geometry: FluteGeometry,
    environment: EnvironmentalConditions | None = None,
    style: TuningStyle | str = "nelson-zink",
    *,
    speed_model: SpeedModel = SpeedModel.HUMID,
    calibration: SolverCalibration = DEFAULT_CALIBRATION,
) -> CalculationResult:
    """Compute hole positions and pitches for one flute.

    Args:
        geometry:    Physical dimensions.
        environment: Air conditions and reference pitch (defaults: 20 °C,
                     50 % RH, A = 440 Hz).
        style:       TuningStyle or registry key.
        speed_model: Speed-of-sound model; HUMID unless explicitly overridden.
        calibration: Empirical solver constants.

    Returns:
        CalculationResult with holes ordered from the blowing end. Holes
        that fall outside the tube carry ``error=True``; the pass still
        completes.

    Raises:
        UnknownStyleError: If ``style`` is an unregistered key.
        FluteDomainError: For degenerate geometry.

    Example:
        >>> result = calculate(FluteGeometry(540, 19, 4, 10), style="diatonic")
        >>> result.positions
        (231, 268, 285, 326, 372, 427, 455)
    """
    environment = environment or EnvironmentalConditions()
    resolved = get_style(style) if isinstance(style, str) else style
    total = geometry.length_mm
    ref = environment.reference_pitch_hz

    k = resolved.fundamental_constant or calibration.fundamental_constant
    big_k = resolved.tube_length_constant or calibration.tube_length_constant
    f0 = fundamental_frequency(total, k)
    speed = speed_for(environment, speed_model)

    # Inverse solve, hole 1 upward
    if resolved.strategy == STRATEGY_INTERVAL:
        chain = solve_interval_chain(
            total,
            resolved.hole_targets,
            geometry,
            fundamental_constant=k,
            tube_length_constant=big_k,
            calibration=calibration,
        )
        positions: list[float] = [h.position_mm for h in chain]
        targets: list[float | None] = [h.target_frequency_hz for h in chain]
    else:
        positions = solve_percentages(
            total,
            resolved.hole_targets,
            resolved.offsets_mm,
            resolved.position_decimals,
        )
        semitones = resolved.semitone_targets
        targets = (
            [semitone_frequency(f0, s) for s in semitones]
            if semitones
            else [None] * len(positions)
        )

    holes: list[HolePosition] = []
    for index, position in enumerate(positions):
        number = index + 1
        target = targets[index]
        realized = _realized_frequency(position, geometry, environment, speed_model, calibration)
        error = position <= 0 or position > total

        reported = target if resolved.strategy == STRATEGY_INTERVAL else realized
        cents = None
        if realized is not None and target is not None:
            cents = interval_cents(realized, target)

        holes.append(
            HolePosition(
                number=number,
                position_mm=position,
                frequency_hz=_round_hz(reported),
                note_name=note_name(reported, ref) if reported is not None else UNKNOWN_NOTE,
                is_thumb=resolved.has_thumb_hole and number == resolved.hole_count,
                traditional_name=resolved.hole_names[index] if resolved.hole_names else "",
                target_frequency_hz=_round_hz(target),
                realized_frequency_hz=_round_hz(realized),
                cents_from_target=cents,
                error=error,
            )
        )
        if error:
            logger.debug(
                "Hole %d of style %s at %s mm falls outside the %s mm tube",
                number,
                resolved.key,
                position,
                total,
            )

    # Playing order from the blowing end
    holes.reverse()
    report = check_spans(
        [h.position_mm for h in holes],
        geometry.ergonomic_limit_mm,
        hole_numbers=[h.number for h in holes],
        thumb_first=resolved.has_thumb_hole,
        calibration=calibration,
    )
    holes = [
        dataclasses.replace(h, alternate_position_mm=report.alternates[h.number])
        if h.number in report.alternates
        else h
        for h in holes
    ]

    return CalculationResult(
        style_key=resolved.key,
        style_name=resolved.name,
        strategy=resolved.strategy,
        base_frequency_hz=round_half_up(f0, 2),
        base_note=note_name(f0, ref),
        length_class=classify_length(total),
        aspect_ratio=round_half_up(geometry.aspect_ratio, 2),
        speed_of_sound_ms=speed,
        holes=tuple(holes),
        spans=MappingProxyType(dict(report.spans)),
        alternates=MappingProxyType(dict(report.alternates)),
        geometry=geometry,
        environment=environment,
    )


def calculate_all_styles(
    geometry: FluteGeometry,
    environment: EnvironmentalConditions | None = None,
    strategy: str | None = None,
    *,
    speed_model: SpeedModel = SpeedModel.HUMID,
    calibration: SolverCalibration = DEFAULT_CALIBRATION,
) -> list[CalculationResult]:
    """Run calculate() for every registered style whose length range admits
    the geometry, optionally restricted to one strategy.
    """
    return [
        calculate(
            geometry,
            environment,
            style,
            speed_model=speed_model,
            calibration=calibration,
        )
        for style in styles_for_length(geometry.length_mm, strategy)
    ]
