"""
api/schemas/metronome.py — Pydantic request schemas for the /metronome endpoints.

Covers:
    /metronome/schedule   — ScheduleRequest (ExerciseIn for plan mode)
    /metronome/tap-tempo  — TapTempoRequest
"""

from pydantic import BaseModel, Field, field_validator

from core.metronome.program import DEFAULT_MAX_CLICKS
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


def _check_denominator(v: int) -> int:
    if v not in VALID_DENOMINATORS:
        raise ValueError(f"denominator must be one of {list(VALID_DENOMINATORS)}")
    return v


class ExerciseIn(BaseModel):
    """One plan-mode exercise."""

    bpm: float = Field(..., ge=MIN_BPM, le=MAX_BPM)
    bars: int = Field(..., ge=1, le=512)
    numerator: int = Field(default=4, ge=1, le=MAX_NUMERATOR)
    denominator: int = 4

    @field_validator("denominator")
    @classmethod
    def validate_denominator(cls, v: int) -> int:
        return _check_denominator(v)

    def to_exercise(self) -> Exercise:
        return Exercise(
            bpm=self.bpm,
            bars=self.bars,
            time_signature=TimeSignature(self.numerator, self.denominator),
        )


class ScheduleRequest(BaseModel):
    """Request body for POST /metronome/schedule.

    A ``preset`` replaces mode, tempo, meter and kit with the preset's values;
    ``bars`` still applies.
    """

    mode: TempoMode = TempoMode.CONSTANT
    preset: str | None = Field(default=None, max_length=50)
    bpm: float = Field(default=120.0, ge=MIN_BPM, le=MAX_BPM)
    start_bpm: float = Field(default=80.0, ge=MIN_BPM, le=MAX_BPM)
    end_bpm: float = Field(default=160.0, ge=MIN_BPM, le=MAX_BPM)
    duration_sec: float = Field(default=60.0, gt=0.0, le=3600.0)
    step_size: float = Field(default=10.0, gt=0.0, le=100.0)
    bars_per_step: int = Field(default=8, ge=1, le=64)
    bars: int = Field(default=8, ge=1, le=512)
    exercises: list[ExerciseIn] = Field(default_factory=list)
    numerator: int = Field(default=4, ge=1, le=MAX_NUMERATOR)
    denominator: int = 4
    kit: str = DEFAULT_KIT
    accent_first_beat: bool = True
    count_in: bool = False
    include_clicks: bool = True
    max_clicks: int = Field(default=DEFAULT_MAX_CLICKS, ge=1, le=DEFAULT_MAX_CLICKS)

    @field_validator("denominator")
    @classmethod
    def validate_denominator(cls, v: int) -> int:
        return _check_denominator(v)

    @field_validator("kit")
    @classmethod
    def validate_kit(cls, v: str) -> str:
        if v not in available_kits():
            raise ValueError(f"kit must be one of: {', '.join(available_kits())}")
        return v

    def program(self) -> TempoProgram:
        return TempoProgram(
            mode=self.mode,
            bpm=self.bpm,
            start_bpm=self.start_bpm,
            end_bpm=self.end_bpm,
            duration_sec=self.duration_sec,
            step_size=self.step_size,
            bars_per_step=self.bars_per_step,
            bars=self.bars,
            exercises=tuple(e.to_exercise() for e in self.exercises),
        )

    def time_signature(self) -> TimeSignature:
        return TimeSignature(self.numerator, self.denominator)


class TapTempoRequest(BaseModel):
    """Request body for POST /metronome/tap-tempo."""

    tap_times_sec: list[float] = Field(
        ...,
        max_length=256,
        description="Tap timestamps in seconds, strictly increasing.",
    )
