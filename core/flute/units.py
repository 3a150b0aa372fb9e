"""
core/flute/units.py — Unit conversion and rounding helpers.

Every public number the solver emits is rounded half-up (0.5 → 1, 2.5 → 3),
matching how flute makers' tables have always been produced. Python's
built-in round() uses banker's rounding, which would move some holes by a
millimetre, so the solver never calls it on positions or frequencies.
"""

from __future__ import annotations

import math

MM_PER_M: float = 1000.0
MM_PER_SHAKU: float = 303.03  # 1 shaku (尺) = 10 sun (寸)


def mm_to_m(x_mm: float) -> float:
    return x_mm / MM_PER_M


def m_to_mm(x_m: float) -> float:
    return x_m * MM_PER_M


def round_half_up(value: float, decimals: int = 0) -> float:
    """Round to ``decimals`` places with ties going toward +infinity.

    Args:
        value:    Number to round.
        decimals: Number of decimal places (>= 0).

    Returns:
        Rounded float. ``round_half_up(418.5) == 419.0``,
        ``round_half_up(-2.5) == -2.0``.
    """
    if decimals < 0:
        raise ValueError(f"decimals must be >= 0, got {decimals}")
    scale = 10.0**decimals
    return math.floor(value * scale + 0.5) / scale


def round_mm(value: float, decimals: int = 0) -> float | int:
    """Round a length in millimetres; whole millimetres come back as int."""
    rounded = round_half_up(value, decimals)
    if decimals == 0:
        return int(rounded)
    return rounded
