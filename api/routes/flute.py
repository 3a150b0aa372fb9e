"""
api/routes/flute.py — Shakuhachi hole-position endpoints.

Endpoints
=========
    GET  /flute/styles     — Registered tuning styles (optionally one strategy)
    POST /flute/calculate  — Full hole layout for one style
    POST /flute/compare    — Same flute under every applicable style
    POST /flute/frequency  — Forward solver: pitch of a hole at a position
    POST /flute/resonance  — Harmonics, node map and per-hole perturbation

Thin HTTP controllers over core.flute; no acoustics lives here.

Error codes
===========
    422  — Out-of-range input, unknown style or strategy, degenerate geometry
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, HTTPException

from api.schemas.flute import (
    FluteCalculateRequest,
    FluteCompareRequest,
    FluteFrequencyRequest,
    FluteResonanceRequest,
)
from core.flute.calculator import calculate, calculate_all_styles, validate_inputs
from core.flute.forward import frequency_at
from core.flute.notes import cents_deviation, note_name, scientific_pitch_name
from core.flute.resonance import hole_perturbations, resonance_modes
from core.flute.styles import all_styles, get_style
from core.flute.types import STRATEGIES
from core.flute.units import round_half_up
from infrastructure.metrics import LatencyTimer, record_flute_calculation, record_flute_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/flute", tags=["flute"])


def _unprocessable(exc: ValueError) -> HTTPException:
    return HTTPException(status_code=422, detail=str(exc))


# ---------------------------------------------------------------------------
# GET /flute/styles
# ---------------------------------------------------------------------------


@router.get("/styles")
def list_styles(strategy: str | None = None) -> list[dict[str, Any]]:
    """List tuning styles in registry order.

    Args:
        strategy: Optional filter, "interval" or "percentage".
    """
    if strategy is not None and strategy not in STRATEGIES:
        raise HTTPException(
            status_code=422,
            detail=f"strategy must be one of: {', '.join(sorted(STRATEGIES))}",
        )
    return [
        style.to_dict()
        for style in all_styles().values()
        if strategy is None or style.strategy == strategy
    ]


# ---------------------------------------------------------------------------
# POST /flute/calculate
# ---------------------------------------------------------------------------


@router.post("/calculate")
def calculate_holes(request: FluteCalculateRequest) -> dict[str, Any]:
    """Compute hole positions, pitches, spans and alternates for one style.

    Raises:
        422: Unknown style, or a length outside the style's playable range.
    """
    try:
        style = get_style(request.style)
    except ValueError as exc:
        record_flute_error(request.style)
        raise _unprocessable(exc) from exc

    geometry = request.geometry()
    environment = request.environment()
    errors = validate_inputs(geometry, environment, style)
    if errors:
        record_flute_error(style.key, style.strategy)
        raise HTTPException(status_code=422, detail=errors)

    try:
        with LatencyTimer() as timer:
            result = calculate(geometry, environment, style, speed_model=request.speed_model)
    except ValueError as exc:
        record_flute_error(style.key, style.strategy)
        raise _unprocessable(exc) from exc

    record_flute_calculation(result, latency_seconds=timer.elapsed)
    if result.has_errors:
        logger.info("Infeasible holes for %s at %g mm", style.key, geometry.length_mm)
    return result.to_dict()


# ---------------------------------------------------------------------------
# POST /flute/compare
# ---------------------------------------------------------------------------


@router.post("/compare")
def compare_styles(request: FluteCompareRequest) -> dict[str, Any]:
    """Run every style whose length range admits the flute.

    Raises:
        422: No registered style accepts the length.
    """
    geometry = request.geometry()
    try:
        with LatencyTimer() as timer:
            results = calculate_all_styles(geometry, request.environment(), request.strategy)
    except ValueError as exc:
        raise _unprocessable(exc) from exc

    if not results:
        raise HTTPException(
            status_code=422,
            detail=f"No tuning style accepts a {geometry.length_mm:g} mm flute",
        )
    for result in results:
        record_flute_calculation(
            result, latency_seconds=timer.elapsed / len(results), operation="compare"
        )
    return {
        "length_mm": geometry.length_mm,
        "results": [r.to_dict() for r in results],
    }


# ---------------------------------------------------------------------------
# POST /flute/frequency
# ---------------------------------------------------------------------------


@router.post("/frequency")
def hole_frequency(request: FluteFrequencyRequest) -> dict[str, Any]:
    """Sounding pitch of a single hole at ``position_mm``.

    Raises:
        422: Degenerate acoustic length at that position.
    """
    environment = request.environment()
    try:
        frequency = frequency_at(
            request.position_mm,
            request.geometry(),
            environment,
            speed_model=request.speed_model,
        )
    except ValueError as exc:
        raise _unprocessable(exc) from exc

    reference = environment.reference_pitch_hz
    return {
        "position_mm": request.position_mm,
        "frequency_hz": round_half_up(frequency, 2),
        "note_name": note_name(frequency, reference),
        "scientific_name": scientific_pitch_name(frequency, reference),
        "cents_deviation": round_half_up(cents_deviation(frequency, reference), 1),
    }


# ---------------------------------------------------------------------------
# POST /flute/resonance
# ---------------------------------------------------------------------------


@router.post("/resonance")
def analyze_resonance(request: FluteResonanceRequest) -> dict[str, Any]:
    """Harmonics of the bore; open holes are scored against the fundamental."""
    geometry = request.geometry()
    diameters = request.hole_diameters or [geometry.hole_diameter_mm] * len(request.hole_positions)
    try:
        modes = resonance_modes(
            geometry,
            request.environment(),
            request.hole_positions,
            diameters,
            mode_count=request.mode_count,
        )
        perturbations = hole_perturbations(
            modes[0], request.hole_positions, diameters, geometry.bore_diameter_mm
        )
    except ValueError as exc:
        raise _unprocessable(exc) from exc

    return {
        "length_mm": geometry.length_mm,
        "modes": [m.to_dict() for m in modes],
        "perturbations": [asdict(p) for p in perturbations],
    }
