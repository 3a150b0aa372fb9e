"""
core/flute/ergonomics.py — Inter-hole spans and reach-limit alternates.

Positions are given in playing order from the blowing end: thumb hole
first (when present), then the front holes downward to hole 1. Each adjacent
pair produces one span keyed "upper-lower" by hole number, e.g. "5-4".

Thresholds:
    thumb span      limit × 2/3; the thumb is proposed at
                    neighbour − round_half_up(limit × 2/3)
    any other span  limit; the lower hole is proposed at upper + limit

A span exactly equal to its threshold is accepted. Only holes that receive a
proposal appear in the alternates map.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from core.config import DEFAULT_CALIBRATION, SolverCalibration
from core.flute.types import SpanReport
from core.flute.units import round_half_up


def span_key(upper: int, lower: int) -> str:
    return f"{upper}-{lower}"


def _toward(origin: float, target: float, distance: float) -> float:
    """Point ``distance`` away from ``origin`` in the direction of ``target``."""
    return origin + math.copysign(distance, target - origin)


def check_spans(
    positions: Sequence[float],
    ergonomic_limit_mm: float,
    *,
    hole_numbers: Sequence[int] | None = None,
    thumb_first: bool = True,
    calibration: SolverCalibration = DEFAULT_CALIBRATION,
) -> SpanReport:
    """Measure adjacent spans and propose alternates for over-wide ones.

    Args:
        positions:          Hole positions in mm, top-most hole first.
        ergonomic_limit_mm: Largest comfortable finger span.
        hole_numbers:       Hole number of each position. Defaults to
                            len(positions) … 1.
        thumb_first:        Whether positions[0] is a thumb hole.

    Returns:
        SpanReport with spans rounded to 0.1 mm and alternates keyed by hole
        number.

    Raises:
        ValueError: If the limit is not positive or hole_numbers does not
            match positions in length.
    """
    if ergonomic_limit_mm <= 0:
        raise ValueError(f"ergonomic_limit_mm must be positive, got {ergonomic_limit_mm}")
    if hole_numbers is None:
        hole_numbers = list(range(len(positions), 0, -1))
    if len(hole_numbers) != len(positions):
        raise ValueError(
            f"got {len(hole_numbers)} hole numbers for {len(positions)} positions"
        )

    thumb_limit = ergonomic_limit_mm * calibration.thumb_reach_fraction
    spans: dict[str, float] = {}
    alternates: dict[int, float] = {}

    for i in range(len(positions) - 1):
        upper, lower = positions[i], positions[i + 1]
        span = abs(lower - upper)
        spans[span_key(hole_numbers[i], hole_numbers[i + 1])] = round_half_up(span, 1)

        if i == 0 and thumb_first:
            if span > thumb_limit:
                alternates[hole_numbers[0]] = _toward(lower, upper, round_half_up(thumb_limit))
        elif span > ergonomic_limit_mm:
            alternates[hole_numbers[i + 1]] = _toward(upper, lower, ergonomic_limit_mm)

    return SpanReport(spans=spans, alternates=alternates)
