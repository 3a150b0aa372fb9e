"""
api/routes/metronome.py — Practice metronome endpoints.

Endpoints
=========
    GET  /metronome/kits       — Sound kits and the sounds each provides
    GET  /metronome/presets    — Named one-click setups
    POST /metronome/schedule   — Compile a tempo program into a click schedule
    POST /metronome/tap-tempo  — Tempo from a sequence of tap timestamps

Audio is rendered client-side or through ingestion.metronome_export; these
endpoints only return timing data.

Error codes
===========
    404  — Unknown preset
    422  — Invalid program (e.g. steps with start > end, plan without exercises),
           taps not strictly increasing
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException

from api.schemas.metronome import ScheduleRequest, TapTempoRequest
from core.metronome.presets import PRESETS, get_preset
from core.metronome.program import build_schedule, tap_tempo
from core.metronome.sounds import KIT_SOUNDS
from core.metronome.types import TempoMode
from infrastructure.metrics import record_metronome_schedule

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/metronome", tags=["metronome"])


@router.get("/kits")
def list_kits() -> dict[str, list[str]]:
    """Kit name → sound names."""
    return {kit: list(sounds) for kit, sounds in sorted(KIT_SOUNDS.items())}


@router.get("/presets")
def list_presets() -> list[dict[str, Any]]:
    return [
        {
            "key": p.key,
            "name": p.name,
            "bpm": p.bpm,
            "time_signature": p.time_signature.text,
            "kit": p.kit,
            "mode": TempoMode(p.mode).value,
            "accent_first_beat": p.accent_first_beat,
        }
        for p in PRESETS.values()
    ]


@router.post("/schedule")
def create_schedule(request: ScheduleRequest) -> dict[str, Any]:
    """Compile a practice session into timed clicks.

    Args:
        request: ScheduleRequest with mode settings or a preset key.

    Returns:
        Schedule summary (click count, bars, duration, final tempo) plus the
        click list unless ``include_clicks`` is false.

    Raises:
        404: Unknown preset.
        422: Program rejected by the metronome core.
    """
    if request.preset:
        try:
            preset = get_preset(request.preset)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=exc.args[0]) from exc
        program = preset.program(bars=request.bars)
        meter = preset.time_signature
        kit = preset.kit
        accent = preset.accent_first_beat
    else:
        try:
            program = request.program()
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        meter = request.time_signature()
        kit = request.kit
        accent = request.accent_first_beat

    schedule = build_schedule(
        program,
        meter,
        kit=kit,
        accent_first_beat=accent,
        count_in=request.count_in,
        max_clicks=request.max_clicks,
    )
    record_metronome_schedule(schedule.mode.value)
    if schedule.truncated:
        logger.warning(
            "Schedule truncated at %d clicks (mode=%s)", len(schedule.clicks), schedule.mode.value
        )
    return schedule.to_dict(include_clicks=request.include_clicks)


@router.post("/tap-tempo")
def detect_tap_tempo(request: TapTempoRequest) -> dict[str, Any]:
    """Average the most recent tap intervals into a BPM.

    ``bpm`` is null with fewer than two taps or when the result falls
    outside the playable tempo range.
    """
    try:
        bpm = tap_tempo(request.tap_times_sec)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return {"bpm": bpm, "tap_count": len(request.tap_times_sec)}
