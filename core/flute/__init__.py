"""
core/flute/ — Pure shakuhachi hole-position solver.

Exports:
    Types:       FluteGeometry, EnvironmentalConditions, TuningStyle,
                 HolePosition, CalculationResult, LengthClass, SpanReport,
                 ResonanceMode, WaveNode, HolePerturbation
    Errors:      FluteDomainError, UnknownStyleError
    Environment: speed_of_sound, speed_of_sound_linear, SpeedModel
    Corrections: end_correction, hole_end_correction, impedance_factor,
                 impedance_corrected_length, chain_hole_correction
    Solvers:     frequency_at, solve_interval_chain, solve_percentages
    Notes:       note_name, scientific_pitch_name, cents_deviation,
                 interval_cents, UNKNOWN_NOTE
    Ergonomics:  check_spans
    Styles:      get_style, available_styles, all_styles
    Calculator:  calculate, calculate_all_styles, validate_inputs, classify_length
    Resonance:   resonance_modes, hole_perturbations
"""

from core.flute.calculator import calculate, calculate_all_styles, classify_length, validate_inputs
from core.flute.corrections import (
    chain_hole_correction,
    end_correction,
    hole_end_correction,
    impedance_corrected_length,
    impedance_factor,
)
from core.flute.environment import SpeedModel, speed_of_sound, speed_of_sound_linear
from core.flute.ergonomics import check_spans
from core.flute.forward import frequency_at
from core.flute.inverse import solve_interval_chain, solve_percentages
from core.flute.notes import (
    UNKNOWN_NOTE,
    cents_deviation,
    interval_cents,
    note_name,
    scientific_pitch_name,
)
from core.flute.resonance import hole_perturbations, resonance_modes
from core.flute.styles import all_styles, available_styles, get_style
from core.flute.types import (
    CalculationResult,
    EnvironmentalConditions,
    FluteDomainError,
    FluteGeometry,
    HolePerturbation,
    HolePosition,
    LengthClass,
    ResonanceMode,
    SpanReport,
    TuningStyle,
    UnknownStyleError,
    WaveNode,
)

__all__ = [
    # Types
    "FluteGeometry",
    "EnvironmentalConditions",
    "TuningStyle",
    "HolePosition",
    "CalculationResult",
    "LengthClass",
    "SpanReport",
    "ResonanceMode",
    "WaveNode",
    "HolePerturbation",
    # Errors
    "FluteDomainError",
    "UnknownStyleError",
    # Environment
    "speed_of_sound",
    "speed_of_sound_linear",
    "SpeedModel",
    # Corrections
    "end_correction",
    "hole_end_correction",
    "impedance_factor",
    "impedance_corrected_length",
    "chain_hole_correction",
    # Solvers
    "frequency_at",
    "solve_interval_chain",
    "solve_percentages",
    # Notes
    "note_name",
    "scientific_pitch_name",
    "cents_deviation",
    "interval_cents",
    "UNKNOWN_NOTE",
    # Ergonomics
    "check_spans",
    # Styles
    "get_style",
    "available_styles",
    "all_styles",
    # Calculator
    "calculate",
    "calculate_all_styles",
    "validate_inputs",
    "classify_length",
    # Resonance
    "resonance_modes",
    "hole_perturbations",
]
