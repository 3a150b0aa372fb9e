"""
core/metronome/types.py — Frozen value types for the practice metronome.

A practice session is described by a TempoProgram (how the tempo evolves)
plus a TimeSignature, and compiled into a MetronomeSchedule: an ordered
tuple of Click events with absolute times. Everything here is pure data;
scheduling lives in program.py, audio in sounds.py.

Invariants:
    - Tempi are expressed in beats per minute; one click == one beat.
    - Schedules are clamped to [MIN_BPM, MAX_BPM].
    - Count-in clicks carry negative bar numbers (-2, -1) so program bars
      always start at 0.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MIN_BPM: float = 40.0
MAX_BPM: float = 300.0

VALID_DENOMINATORS: tuple[int, ...] = (1, 2, 4, 8, 16)
MAX_NUMERATOR: int = 12

COUNT_IN_BARS: int = 2


def clamp_bpm(bpm: float) -> float:
    """Clamp a tempo into the playable [MIN_BPM, MAX_BPM] range."""
    return max(MIN_BPM, min(MAX_BPM, bpm))


def _check_bpm(owner: str, name: str, value: float) -> None:
    if not math.isfinite(value) or value <= 0:
        raise ValueError(f"{owner}.{name} must be a positive number, got {value}")


class TempoMode(str, Enum):
    """How the tempo evolves over a session."""

    CONSTANT = "constant"
    ACCELERANDO = "accelerando"
    RITARDANDO = "ritardando"
    STEPS = "steps"
    PLAN = "plan"


# ---------------------------------------------------------------------------
# TimeSignature / Exercise
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TimeSignature:
    """Beats per bar over the note value that gets one beat."""

    numerator: int = 4
    denominator: int = 4

    def __post_init__(self) -> None:
        if not (1 <= self.numerator <= MAX_NUMERATOR):
            raise ValueError(
                f"TimeSignature.numerator must be in [1, {MAX_NUMERATOR}], got {self.numerator}"
            )
        if self.denominator not in VALID_DENOMINATORS:
            raise ValueError(
                f"TimeSignature.denominator must be one of {VALID_DENOMINATORS}, "
                f"got {self.denominator}"
            )

    @property
    def text(self) -> str:
        return f"{self.numerator}/{self.denominator}"


@dataclass(frozen=True)
class Exercise:
    """One entry of a practice plan: ``bars`` bars at ``bpm``.

    Attributes:
        bpm:            Tempo of the exercise (clamped when scheduled).
        bars:           Number of bars to play. Must be >= 1.
        time_signature: Meter of the exercise; defaults to 4/4.
    """

    bpm: float
    bars: int
    time_signature: TimeSignature = TimeSignature()

    def __post_init__(self) -> None:
        _check_bpm("Exercise", "bpm", self.bpm)
        if self.bars < 1:
            raise ValueError(f"Exercise.bars must be >= 1, got {self.bars}")


# ---------------------------------------------------------------------------
# TempoProgram
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TempoProgram:
    """A tempo plan for one practice session.

    Which fields matter depends on ``mode``:
        constant:                 bpm, bars
        accelerando / ritardando: start_bpm, end_bpm, duration_sec
        steps:                    start_bpm, end_bpm, step_size, bars_per_step
        plan:                     exercises
    """

    mode: TempoMode = TempoMode.CONSTANT
    bpm: float = 120.0
    start_bpm: float = 80.0
    end_bpm: float = 160.0
    duration_sec: float = 60.0
    step_size: float = 10.0
    bars_per_step: int = 8
    bars: int = 8
    exercises: tuple[Exercise, ...] = ()

    def __post_init__(self) -> None:
        # Raises ValueError for unknown modes; plain strings are accepted.
        mode = TempoMode(self.mode)
        for name in ("bpm", "start_bpm", "end_bpm"):
            _check_bpm("TempoProgram", name, getattr(self, name))
        if not math.isfinite(self.duration_sec) or self.duration_sec <= 0:
            raise ValueError(f"TempoProgram.duration_sec must be > 0, got {self.duration_sec}")
        if self.step_size <= 0:
            raise ValueError(f"TempoProgram.step_size must be > 0, got {self.step_size}")
        if self.bars_per_step < 1:
            raise ValueError(f"TempoProgram.bars_per_step must be >= 1, got {self.bars_per_step}")
        if self.bars < 1:
            raise ValueError(f"TempoProgram.bars must be >= 1, got {self.bars}")
        if mode is TempoMode.STEPS and self.start_bpm > self.end_bpm:
            raise ValueError(
                f"steps mode needs start_bpm <= end_bpm, got {self.start_bpm} > {self.end_bpm}"
            )
        if mode is TempoMode.PLAN and not self.exercises:
            raise ValueError("plan mode needs at least one exercise")

    @property
    def initial_bpm(self) -> float:
        """Tempo of the first program beat (also used for the count-in)."""
        mode = TempoMode(self.mode)
        if mode is TempoMode.CONSTANT:
            return clamp_bpm(self.bpm)
        if mode is TempoMode.PLAN:
            return clamp_bpm(self.exercises[0].bpm)
        return clamp_bpm(self.start_bpm)


# ---------------------------------------------------------------------------
# Click / MetronomeSchedule
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Click:
    """A single scheduled beat.

    Attributes:
        index:          0-based position in the schedule.
        time_sec:       Onset from the start of the session.
        bar:            Program bar (0-based); count-in bars are -2 and -1.
        beat:           Beat within the bar (0 = downbeat).
        bpm:            Tempo in force for this beat.
        accent:         True when the beat is played with the kit's accent.
        count_in:       True for count-in beats.
        sound:          Sound name within the kit.
        time_signature: Meter of the bar this beat belongs to.
    """

    index: int
    time_sec: float
    bar: int
    beat: int
    bpm: float
    accent: bool
    count_in: bool
    sound: str
    time_signature: TimeSignature = TimeSignature()

    @property
    def interval_sec(self) -> float:
        """Time until the next beat at this click's tempo."""
        return 60.0 / self.bpm

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "time_sec": self.time_sec,
            "bar": self.bar,
            "beat": self.beat,
            "bpm": self.bpm,
            "accent": self.accent,
            "count_in": self.count_in,
            "sound": self.sound,
            "time_signature": self.time_signature.text,
        }


@dataclass(frozen=True)
class MetronomeSchedule:
    """The compiled output of build_schedule()."""

    clicks: tuple[Click, ...]
    mode: TempoMode
    kit: str
    time_signature: TimeSignature
    truncated: bool = False

    @property
    def program_clicks(self) -> tuple[Click, ...]:
        return tuple(c for c in self.clicks if not c.count_in)

    @property
    def count_in_clicks(self) -> tuple[Click, ...]:
        return tuple(c for c in self.clicks if c.count_in)

    @property
    def bar_count(self) -> int:
        """Number of program bars (a trailing partial bar counts)."""
        bars = {c.bar for c in self.clicks if not c.count_in}
        return len(bars)

    @property
    def duration_sec(self) -> float:
        if not self.clicks:
            return 0.0
        last = self.clicks[-1]
        return last.time_sec + last.interval_sec

    @property
    def final_bpm(self) -> float | None:
        return self.clicks[-1].bpm if self.clicks else None

    def to_dict(self, include_clicks: bool = True) -> dict:
        """Serialise for JSON responses; ``include_clicks=False`` gives a summary."""
        data = {
            "mode": TempoMode(self.mode).value,
            "kit": self.kit,
            "time_signature": self.time_signature.text,
            "click_count": len(self.clicks),
            "count_in_clicks": len(self.count_in_clicks),
            "bars": self.bar_count,
            "duration_sec": self.duration_sec,
            "final_bpm": self.final_bpm,
            "truncated": self.truncated,
        }
        if include_clicks:
            data["clicks"] = [c.to_dict() for c in self.clicks]
        return data
