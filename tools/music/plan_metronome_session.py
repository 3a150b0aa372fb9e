"""
plan_metronome_session tool — compile a practice tempo program.

Pure computation: no audio is rendered here.
Given a tempo mode (or a named preset), returns:
  - Click count, bar count and total duration
  - Final tempo reached (for accelerando / steps sessions)
  - Optionally the full click list with times, accents and sound names
"""

import logging
from typing import Any

from core.metronome.presets import available_presets, get_preset
from core.metronome.program import build_schedule
from core.metronome.sounds import DEFAULT_KIT, available_kits
from core.metronome.types import (
    MAX_BPM,
    MAX_NUMERATOR,
    MIN_BPM,
    VALID_DENOMINATORS,
    Exercise,
    TempoMode,
    TempoProgram,
    TimeSignature,
)
from infrastructure.metrics import record_metronome_schedule
from tools.base import MusicalTool, ToolParameter, ToolResult

logger = logging.getLogger(__name__)

_MODES: tuple[str, ...] = tuple(m.value for m in TempoMode)


def _exercise(entry: Any, index: int) -> Exercise:
    if not isinstance(entry, dict):
        raise ValueError(f"exercise #{index + 1} must be an object, got {type(entry).__name__}")
    if "bpm" not in entry or "bars" not in entry:
        raise ValueError(f"exercise #{index + 1} needs 'bpm' and 'bars'")
    meter = TimeSignature(int(entry.get("numerator", 4)), int(entry.get("denominator", 4)))
    return Exercise(bpm=float(entry["bpm"]), bars=int(entry["bars"]), time_signature=meter)


def _bpm_param(name: str, description: str, default: float) -> ToolParameter:
    return ToolParameter(
        name=name,
        type=float,
        description=f"{description} Default: {default:g}.",
        required=False,
        default=default,
        min_value=MIN_BPM,
        max_value=MAX_BPM,
    )


class PlanMetronomeSession(MusicalTool):
    """
    Build a deterministic click schedule for a practice session.

    A preset overrides mode, tempo, meter and kit; explicit kit or meter
    arguments still win over the preset's.
    """

    @property
    def name(self) -> str:
        return "plan_metronome_session"

    @property
    def description(self) -> str:
        return (
            "Plan a metronome practice session. Modes: constant tempo, accelerando "
            "or ritardando ramps over a duration, stepped tempo increases, or a plan "
            "of exercises with their own tempo and meter. Returns the number of "
            "clicks, bars, total duration in seconds and final tempo, and optionally "
            "every click. "
            f"Presets: {', '.join(available_presets())}. Kits: {', '.join(available_kits())}."
        )

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(
                name="mode",
                type=str,
                description=f"Tempo mode: {', '.join(_MODES)}. Default: 'constant'.",
                required=False,
                default=TempoMode.CONSTANT.value,
                choices=_MODES,
            ),
            ToolParameter(
                name="preset",
                type=str,
                description="Optional preset key; replaces mode and tempo settings.",
                required=False,
            ),
            _bpm_param("bpm", "Tempo for constant mode.", 120.0),
            _bpm_param("start_bpm", "Starting tempo for ramps and steps.", 80.0),
            _bpm_param("end_bpm", "Final tempo for ramps and steps.", 160.0),
            ToolParameter(
                name="duration_sec",
                type=float,
                description="Ramp length in seconds. Default: 60.",
                required=False,
                default=60.0,
                min_value=1.0,
                max_value=3600.0,
            ),
            ToolParameter(
                name="step_size",
                type=float,
                description="BPM added per step in steps mode. Default: 10.",
                required=False,
                default=10.0,
                min_value=1.0,
                max_value=100.0,
            ),
            ToolParameter(
                name="bars_per_step",
                type=int,
                description="Bars played at each step. Default: 8.",
                required=False,
                default=8,
                min_value=1,
                max_value=64,
            ),
            ToolParameter(
                name="bars",
                type=int,
                description="Bars for constant mode. Default: 8.",
                required=False,
                default=8,
                min_value=1,
                max_value=512,
            ),
            ToolParameter(
                name="exercises",
                type=list,
                description=(
                    "Plan mode exercises: list of {bpm, bars, numerator?, denominator?} objects."
                ),
                required=False,
            ),
            ToolParameter(
                name="numerator",
                type=int,
                description="Beats per bar. Default: 4 (or the preset's).",
                required=False,
                min_value=1,
                max_value=MAX_NUMERATOR,
            ),
            ToolParameter(
                name="denominator",
                type=int,
                description="Beat note value. Default: 4 (or the preset's).",
                required=False,
                choices=VALID_DENOMINATORS,
            ),
            ToolParameter(
                name="kit",
                type=str,
                description=f"Sound kit. Default: '{DEFAULT_KIT}' (or the preset's).",
                required=False,
                choices=tuple(available_kits()),
            ),
            ToolParameter(
                name="count_in",
                type=bool,
                description="Prepend a two-bar count-in. Default: false.",
                required=False,
                default=False,
            ),
            ToolParameter(
                name="include_clicks",
                type=bool,
                description="Return every click, not just the summary. Default: false.",
                required=False,
                default=False,
            ),
        ]

    def execute(self, **kwargs: Any) -> ToolResult:
        params = self.resolve(kwargs)
        preset_key = params["preset"]

        if preset_key:
            preset = get_preset(preset_key)
            program = preset.program(bars=params["bars"])
            meter = preset.time_signature
            kit = preset.kit
            accent = preset.accent_first_beat
        else:
            exercises = tuple(
                _exercise(entry, i) for i, entry in enumerate(params["exercises"] or ())
            )
            program = TempoProgram(
                mode=TempoMode(params["mode"]),
                bpm=params["bpm"],
                start_bpm=params["start_bpm"],
                end_bpm=params["end_bpm"],
                duration_sec=params["duration_sec"],
                step_size=params["step_size"],
                bars_per_step=params["bars_per_step"],
                bars=params["bars"],
                exercises=exercises,
            )
            meter = TimeSignature()
            kit = DEFAULT_KIT
            accent = True

        if params["numerator"] is not None or params["denominator"] is not None:
            meter = TimeSignature(
                params["numerator"] or meter.numerator,
                params["denominator"] or meter.denominator,
            )
        kit = params["kit"] or kit

        schedule = build_schedule(
            program,
            meter,
            kit=kit,
            accent_first_beat=accent,
            count_in=params["count_in"],
        )
        record_metronome_schedule(TempoMode(program.mode).value)
        if schedule.truncated:
            logger.warning("Schedule for %s truncated at %d clicks", program.mode, len(schedule.clicks))

        return ToolResult(
            success=True,
            data=schedule.to_dict(include_clicks=params["include_clicks"]),
            metadata={"preset": preset_key or None},
        )
