"""
core/flute/types.py — Frozen value objects for the hole-position solver.

All types are immutable frozen dataclasses. A calculation builds a fresh set
of them and the next calculation replaces them wholesale; nothing is mutated
after construction. No I/O, no external dependencies beyond stdlib.

Types:
    FluteGeometry           — physical dimensions of the tube
    EnvironmentalConditions — temperature, humidity, reference pitch
    TuningStyle             — a named hole-placement recipe (read-only data)
    HolePosition            — one computed finger hole
    LengthClass             — traditional shaku/sun length label
    CalculationResult       — everything one calculation produces
    SpanReport              — inter-hole spans and ergonomic alternates
    WaveNode, ResonanceMode, HolePerturbation — resonance analysis output

Errors:
    FluteDomainError   — degenerate or out-of-domain physical input
    UnknownStyleError  — style key not present in the registry
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field

# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class FluteDomainError(ValueError):
    """Raised for inputs the acoustic model cannot represent.

    Zero or negative lengths, a collapsed acoustic column, or environmental
    values outside the model's calibrated domain.
    """


class UnknownStyleError(ValueError):
    """Raised when a style key is not in the style registry."""

    def __init__(self, key: str, available: list[str]) -> None:
        self.key = key
        self.available = available
        super().__init__(f"Unknown style {key!r}. Available: {available}")


# ---------------------------------------------------------------------------
# Domains
# ---------------------------------------------------------------------------

TEMPERATURE_RANGE_C: tuple[float, float] = (-10.0, 50.0)
HUMIDITY_RANGE_PCT: tuple[float, float] = (0.0, 100.0)

STRATEGY_INTERVAL = "interval"
STRATEGY_PERCENTAGE = "percentage"
STRATEGIES: frozenset[str] = frozenset({STRATEGY_INTERVAL, STRATEGY_PERCENTAGE})


def _require_positive(owner: str, name: str, value: float) -> None:
    if not math.isfinite(value) or value <= 0:
        raise FluteDomainError(f"{owner}.{name} must be a positive number, got {value}")


# ---------------------------------------------------------------------------
# FluteGeometry
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FluteGeometry:
    """Physical dimensions of the flute, all in millimetres.

    Attributes:
        length_mm:          Total length from the blowing edge to the foot.
        bore_diameter_mm:   Inner diameter of the tube.
        wall_thickness_mm:  Wall thickness at the finger holes.
        hole_diameter_mm:   Nominal finger-hole diameter.
        ergonomic_limit_mm: Largest comfortable span between adjacent holes.

    Only strict positivity is enforced here. Playable length ranges depend on
    the tuning style and are checked by calculator.validate_inputs().
    """

    length_mm: float
    bore_diameter_mm: float
    wall_thickness_mm: float
    hole_diameter_mm: float
    ergonomic_limit_mm: float = 60.0

    def __post_init__(self) -> None:
        _require_positive("FluteGeometry", "length_mm", self.length_mm)
        _require_positive("FluteGeometry", "bore_diameter_mm", self.bore_diameter_mm)
        _require_positive("FluteGeometry", "wall_thickness_mm", self.wall_thickness_mm)
        _require_positive("FluteGeometry", "hole_diameter_mm", self.hole_diameter_mm)
        _require_positive("FluteGeometry", "ergonomic_limit_mm", self.ergonomic_limit_mm)

    @property
    def aspect_ratio(self) -> float:
        """Length divided by bore diameter."""
        return self.length_mm / self.bore_diameter_mm

    @property
    def outer_diameter_mm(self) -> float:
        """Bore plus both walls — what a diagram draws as the tube outline."""
        return self.bore_diameter_mm + 2.0 * self.wall_thickness_mm


# ---------------------------------------------------------------------------
# EnvironmentalConditions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EnvironmentalConditions:
    """Air conditions and tuning reference for one calculation.

    Attributes:
        temperature_c:      Air temperature in °C, within [-10, 50].
        relative_humidity:  Relative humidity in percent, within [0, 100].
        reference_pitch_hz: Frequency of A4 used for note naming.
    """

    temperature_c: float = 20.0
    relative_humidity: float = 50.0
    reference_pitch_hz: float = 440.0

    def __post_init__(self) -> None:
        lo, hi = TEMPERATURE_RANGE_C
        if not (lo <= self.temperature_c <= hi):
            raise FluteDomainError(
                f"temperature_c must be in [{lo}, {hi}], got {self.temperature_c}"
            )
        lo, hi = HUMIDITY_RANGE_PCT
        if not (lo <= self.relative_humidity <= hi):
            raise FluteDomainError(
                f"relative_humidity must be in [{lo}, {hi}], got {self.relative_humidity}"
            )
        _require_positive(
            "EnvironmentalConditions", "reference_pitch_hz", self.reference_pitch_hz
        )


# ---------------------------------------------------------------------------
# TuningStyle
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TuningStyle:
    """A named hole-placement recipe.

    Per-hole tuples are listed from hole 1 (the bottom-most front hole)
    upward; when ``has_thumb_hole`` is set the last entry is the thumb hole.

    Attributes:
        key:                   Registry key, e.g. "nelson-zink".
        name:                  Display name.
        strategy:              "interval" (pitch-driven chain solver) or
                               "percentage" (measured maker proportions).
        hole_targets:          Semitones above the fundamental for interval
                               styles; fractions of total length from the
                               blowing end for percentage styles.
        hole_names:            Traditional names of the notes, optional.
        offsets_mm:            Fixed millimetre nudges per hole (percentage
                               styles only). Empty means no nudges.
        theoretical_semitones: Intended pitch of each hole for percentage
                               styles, used for cents deviation.
        has_thumb_hole:        Whether the top-most hole is a thumb hole.
        position_decimals:     Decimal places positions are rounded to.
        length_range_mm:       Playable length range accepted for this style.
        description:           Free-text provenance note.
        fundamental_constant:  K for F0 = K / length; None uses the solver
                               calibration.
        tube_length_constant:  BigK for acoustic_length = BigK / frequency;
                               None uses the solver calibration.
    """

    key: str
    name: str
    strategy: str
    hole_targets: tuple[float, ...]
    hole_names: tuple[str, ...] = ()
    offsets_mm: tuple[float, ...] = ()
    theoretical_semitones: tuple[float, ...] = ()
    has_thumb_hole: bool = True
    position_decimals: int = 0
    length_range_mm: tuple[float, float] = (300.0, 1300.0)
    description: str = ""
    fundamental_constant: float | None = None
    tube_length_constant: float | None = None

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("TuningStyle.key must not be empty")
        if self.strategy not in STRATEGIES:
            raise ValueError(
                f"TuningStyle.strategy must be one of {sorted(STRATEGIES)}, got {self.strategy!r}"
            )
        if not self.hole_targets:
            raise ValueError(f"TuningStyle {self.key!r} has no hole targets")

        count = len(self.hole_targets)
        if self.strategy == STRATEGY_INTERVAL:
            if any(b <= a for a, b in zip(self.hole_targets, self.hole_targets[1:])):
                raise ValueError(
                    f"TuningStyle {self.key!r}: semitone offsets must be strictly increasing"
                )
            if self.offsets_mm:
                raise ValueError(
                    f"TuningStyle {self.key!r}: offsets_mm only apply to percentage styles"
                )
        else:
            if any(not (0.0 < f < 1.0) for f in self.hole_targets):
                raise ValueError(
                    f"TuningStyle {self.key!r}: fractions must be in (0, 1), "
                    f"got {self.hole_targets}"
                )

        for name in ("hole_names", "offsets_mm", "theoretical_semitones"):
            values = getattr(self, name)
            if values and len(values) != count:
                raise ValueError(
                    f"TuningStyle {self.key!r}: {name} has {len(values)} entries, "
                    f"expected {count}"
                )

        if self.position_decimals < 0:
            raise ValueError(
                f"TuningStyle.position_decimals must be >= 0, got {self.position_decimals}"
            )
        lo, hi = self.length_range_mm
        if not (0 < lo < hi):
            raise ValueError(
                f"TuningStyle.length_range_mm must satisfy 0 < min < max, got {self.length_range_mm}"
            )
        constants = (self.fundamental_constant, self.tube_length_constant)
        if any(c is not None and c <= 0 for c in constants):
            raise ValueError(f"TuningStyle {self.key!r}: instrument constants must be positive")

    @property
    def hole_count(self) -> int:
        return len(self.hole_targets)

    @property
    def semitone_targets(self) -> tuple[float, ...]:
        """Intended semitones above the fundamental for each hole (may be empty)."""
        if self.strategy == STRATEGY_INTERVAL:
            return self.hole_targets
        return self.theoretical_semitones

    def to_dict(self) -> dict:
        """Catalogue entry for style listings."""
        return {
            "key": self.key,
            "name": self.name,
            "strategy": self.strategy,
            "hole_count": self.hole_count,
            "hole_targets": list(self.hole_targets),
            "hole_names": list(self.hole_names),
            "offsets_mm": list(self.offsets_mm),
            "has_thumb_hole": self.has_thumb_hole,
            "length_range_mm": list(self.length_range_mm),
            "description": self.description,
        }


# ---------------------------------------------------------------------------
# HolePosition
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class HolePosition:
    """One computed finger hole.

    Attributes:
        number:                Hole number, 1 = bottom-most front hole.
        position_mm:           Distance from the blowing end to the hole centre.
        frequency_hz:          Reported pitch. The target pitch for interval
                               styles (pitch is the input); the forward-solver
                               pitch for percentage styles (pitch is the output).
        note_name:             Pitch-class name of ``frequency_hz``.
        is_thumb:              True for the rear thumb hole.
        traditional_name:      e.g. "Tsu", "Ri"; empty when unknown.
        target_frequency_hz:   Intended pitch, when the style defines one.
        realized_frequency_hz: Forward-solver pitch at ``position_mm``.
        cents_from_target:     realized vs target, rounded to whole cents.
        alternate_position_mm: Ergonomic alternative, if a span is too wide.
        error:                 True when the position lies outside the tube.
    """

    number: int
    position_mm: float
    frequency_hz: float | None
    note_name: str
    is_thumb: bool = False
    traditional_name: str = ""
    target_frequency_hz: float | None = None
    realized_frequency_hz: float | None = None
    cents_from_target: int | None = None
    alternate_position_mm: float | None = None
    error: bool = False

    def __post_init__(self) -> None:
        if self.number < 1:
            raise ValueError(f"HolePosition.number must be >= 1, got {self.number}")

    @property
    def label(self) -> str:
        """Short label for tables: "T" for the thumb hole, else the number."""
        return "T" if self.is_thumb else str(self.number)

    def to_dict(self) -> dict:
        """Serialise for JSON responses."""
        return {
            "number": self.number,
            "label": self.label,
            "position_mm": self.position_mm,
            "frequency_hz": self.frequency_hz,
            "note_name": self.note_name,
            "is_thumb": self.is_thumb,
            "traditional_name": self.traditional_name,
            "target_frequency_hz": self.target_frequency_hz,
            "realized_frequency_hz": self.realized_frequency_hz,
            "cents_from_target": self.cents_from_target,
            "alternate_position_mm": self.alternate_position_mm,
            "error": self.error,
        }


# ---------------------------------------------------------------------------
# LengthClass
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LengthClass:
    """Traditional length designation of a flute.

    Attributes:
        label: Shaku with one decimal, e.g. "1.8" (the usual name "1.8 shakuhachi").
        shaku: Whole shaku.
        sun:   Remaining sun (tenths of a shaku), 0–9.
        standard: True when the length falls in a tabulated 0.1-shaku bin.
    """

    label: str
    shaku: int
    sun: int
    standard: bool = True

    @property
    def text(self) -> str:
        """Human-readable form, e.g. '1 shaku 8 sun'."""
        return f"{self.shaku} shaku {self.sun} sun"


# ---------------------------------------------------------------------------
# SpanReport
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SpanReport:
    """Output of ergonomics.check_spans().

    Attributes:
        spans:      "upper-lower" hole-number key → distance in mm, in playing
                    order from the blowing end.
        alternates: hole number → proposed alternate position in mm. Holes
                    with no proposal are absent.
    """

    spans: dict[str, float] = field(default_factory=dict)
    alternates: dict[int, float] = field(default_factory=dict)

    @property
    def has_violations(self) -> bool:
        return bool(self.alternates)


# ---------------------------------------------------------------------------
# CalculationResult
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CalculationResult:
    """Everything one calculation pass produces.

    Built atomically by calculator.calculate(); superseded by the next call.

    Attributes:
        style_key:         Registry key of the style used.
        style_name:        Display name of the style.
        strategy:          "interval" or "percentage".
        base_frequency_hz: Fundamental with all holes closed (2 dp).
        base_note:         Pitch-class name of the fundamental.
        length_class:      Traditional shaku/sun classification.
        aspect_ratio:      length / bore (2 dp).
        speed_of_sound_ms: Speed of sound used by the forward solver.
        holes:             Holes in playing order from the blowing end
                           (thumb hole first when present).
        spans:             "upper-lower" → mm between adjacent holes.
        alternates:        hole number → ergonomic alternate position.
        geometry:          Input geometry.
        environment:       Input environment.
    """

    style_key: str
    style_name: str
    strategy: str
    base_frequency_hz: float
    base_note: str
    length_class: LengthClass
    aspect_ratio: float
    speed_of_sound_ms: float
    holes: tuple[HolePosition, ...]
    spans: Mapping[str, float]
    alternates: Mapping[int, float]
    geometry: FluteGeometry
    environment: EnvironmentalConditions

    @property
    def has_errors(self) -> bool:
        """True when at least one hole could not be placed on the tube."""
        return any(h.error for h in self.holes)

    @property
    def positions(self) -> tuple[float, ...]:
        """Hole positions in playing order from the blowing end."""
        return tuple(h.position_mm for h in self.holes)

    def span_between(self, a: int, b: int) -> float:
        """Span in mm between holes ``a`` and ``b``, in either order.

        Raises:
            KeyError: If the two holes are not adjacent.
        """
        for key in (f"{a}-{b}", f"{b}-{a}"):
            if key in self.spans:
                return self.spans[key]
        raise KeyError(f"Holes {a} and {b} are not adjacent")

    def hole(self, number: int) -> HolePosition:
        """Return the hole with the given number.

        Raises:
            KeyError: If no hole has that number.
        """
        for h in self.holes:
            if h.number == number:
                return h
        raise KeyError(f"No hole #{number} in result for style {self.style_key!r}")

    def to_dict(self) -> dict:
        """Serialise for JSON responses (span/alternate keys become strings)."""
        return {
            "style": self.style_key,
            "style_name": self.style_name,
            "strategy": self.strategy,
            "base_frequency_hz": self.base_frequency_hz,
            "base_note": self.base_note,
            "length_class": {
                "label": self.length_class.label,
                "text": self.length_class.text,
                "standard": self.length_class.standard,
            },
            "aspect_ratio": self.aspect_ratio,
            "speed_of_sound_ms": self.speed_of_sound_ms,
            "holes": [h.to_dict() for h in self.holes],
            "spans": dict(self.spans),
            "alternates": {str(k): v for k, v in self.alternates.items()},
            "has_errors": self.has_errors,
        }


# ---------------------------------------------------------------------------
# Resonance analysis
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class WaveNode:
    """A pressure node or velocity antinode along the bore (mm from the top)."""

    position_mm: float
    kind: str  # "pressure" | "velocity"
    amplitude: float


@dataclass(frozen=True)
class ResonanceMode:
    """One harmonic of the open cylinder.

    Attributes:
        number:         Mode number n (1 = fundamental).
        frequency_hz:   n·c / (2·L_eff).
        wavelength_m:   c / frequency.
        nodes:          Pressure nodes (open ends and every L/n).
        antinodes:      Velocity antinodes between the nodes.
        quality_factor: Empirical Q, lowered by hole coupling.
    """

    number: int
    frequency_hz: float
    wavelength_m: float
    nodes: tuple[WaveNode, ...]
    antinodes: tuple[WaveNode, ...]
    quality_factor: float

    def to_dict(self) -> dict:
        return {
            "number": self.number,
            "frequency_hz": self.frequency_hz,
            "wavelength_m": self.wavelength_m,
            "nodes_mm": [n.position_mm for n in self.nodes],
            "antinodes_mm": [a.position_mm for a in self.antinodes],
            "quality_factor": self.quality_factor,
        }


@dataclass(frozen=True)
class HolePerturbation:
    """Estimated tuning influence of one open hole on a resonance mode."""

    hole_index: int
    position_mm: float
    frequency_shift_hz: float
    cents_shift: float
    node_distance_mm: float
    influence: float
    suggested_movement_mm: float
