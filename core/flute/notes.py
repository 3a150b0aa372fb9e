"""
core/flute/notes.py — Frequency → pitch naming for a tunable reference pitch.

Exports:
    NOTE_NAMES_FROM_A       12 pitch-class names starting at A (sharps)
    UNKNOWN_NOTE            sentinel returned when no name can be found

    note_name(frequency, reference_pitch) → str
    scientific_pitch_name(frequency, reference_pitch) → str
    cents_deviation(frequency, reference_pitch) → float
    interval_cents(f1, f2) → int
    semitone_frequency(base, semitones) → float

note_name() never raises: NaN, infinite and non-positive frequencies come
back as UNKNOWN_NOTE.
"""

from __future__ import annotations

import math

from core.flute.units import round_half_up

NOTE_NAMES_FROM_A: tuple[str, ...] = (
    "A",
    "A#",
    "B",
    "C",
    "C#",
    "D",
    "D#",
    "E",
    "F",
    "F#",
    "G",
    "G#",
)

UNKNOWN_NOTE: str = "?"

SEARCH_RANGE: tuple[int, int] = (-50, 50)
MAX_SEARCH_ITERATIONS: int = 16

_SEMITONE = 2.0 ** (1.0 / 12.0)


def _name_for_semitones(count: int) -> str:
    return NOTE_NAMES_FROM_A[count % 12]


def note_name(frequency: float, reference_pitch: float = 440.0) -> str:
    """Name the equal-tempered pitch class closest to ``frequency``.

    Binary search over whole semitones in [-50, +50] around the reference.
    When the search brackets the frequency between two adjacent semitones,
    the one with the smaller absolute error in Hz wins (ties go up).

    Args:
        frequency:       Frequency in Hz.
        reference_pitch: Frequency of A in Hz.

    Returns:
        A name from NOTE_NAMES_FROM_A, or UNKNOWN_NOTE when the input is not
        a finite positive number or the search exceeds 16 iterations.
    """
    if not (math.isfinite(frequency) and frequency > 0):
        return UNKNOWN_NOTE
    if not (math.isfinite(reference_pitch) and reference_pitch > 0):
        return UNKNOWN_NOTE

    low, high = SEARCH_RANGE
    for _ in range(MAX_SEARCH_ITERATIONS + 1):
        middle = int(round_half_up((high - low) / 2 + low))
        freq = reference_pitch * _SEMITONE**middle

        if freq < frequency:
            low = middle
        elif freq > frequency:
            high = middle
        else:
            return _name_for_semitones(middle)

        if low + 1 == high:
            diff_low = frequency - reference_pitch * _SEMITONE**low
            diff_high = reference_pitch * _SEMITONE**high - frequency
            if diff_low < diff_high:
                return _name_for_semitones(low)
            return _name_for_semitones(high)

    return UNKNOWN_NOTE


def semitones_from_reference(frequency: float, reference_pitch: float = 440.0) -> float:
    """Signed distance of ``frequency`` from the reference in semitones."""
    if frequency <= 0 or reference_pitch <= 0:
        raise ValueError(
            f"frequencies must be positive, got {frequency} and {reference_pitch}"
        )
    return 12.0 * math.log2(frequency / reference_pitch)


def scientific_pitch_name(frequency: float, reference_pitch: float = 440.0) -> str:
    """Pitch name with octave number, e.g. "D4" for 293.66 Hz.

    The reference pitch is taken to be A4. Returns UNKNOWN_NOTE for
    non-positive or non-finite input.
    """
    if not (math.isfinite(frequency) and frequency > 0 and reference_pitch > 0):
        return UNKNOWN_NOTE
    nearest = int(round_half_up(semitones_from_reference(frequency, reference_pitch)))
    midi = 69 + nearest
    octave = midi // 12 - 1
    return f"{_name_for_semitones(nearest)}{octave}"


def cents_deviation(frequency: float, reference_pitch: float = 440.0) -> float:
    """Cents above (+) or below (−) the nearest equal-tempered semitone.

    Always within [-50, 50].
    """
    semitones = semitones_from_reference(frequency, reference_pitch)
    return (semitones - round_half_up(semitones)) * 100.0


def interval_cents(f1: float, f2: float) -> int:
    """round(1200 · log2(f1 / f2)), half-up.

    Raises:
        ValueError: If either frequency is not positive.
    """
    if f1 <= 0 or f2 <= 0:
        raise ValueError(f"frequencies must be positive, got {f1} and {f2}")
    return int(round_half_up(1200.0 * math.log2(f1 / f2)))


def semitone_frequency(base_frequency: float, semitones: float) -> float:
    """base · 2^(semitones / 12)."""
    return base_frequency * 2.0 ** (semitones / 12.0)
