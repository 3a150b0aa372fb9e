"""
core/metronome/program.py — Compile a TempoProgram into a click schedule.

build_schedule() is deterministic: the same program, meter and options
always produce the same tuple of Click events. Tempo evolution per mode:

    constant      ``bars`` bars at ``bpm``
    accelerando   linear ramp start_bpm → end_bpm over duration_sec
    ritardando    same ramp, typically with start_bpm > end_bpm
    steps         start_bpm + k·step_size, bars_per_step bars per step,
                  stopping before the tempo would exceed end_bpm
    plan          each Exercise in order, at its own tempo and meter

An optional count-in of COUNT_IN_BARS bars at the initial tempo precedes
the program.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from itertools import chain

from core.flute.units import round_half_up
from core.metronome.sounds import DEFAULT_KIT, sound_for_beat
from core.metronome.types import (
    COUNT_IN_BARS,
    MAX_BPM,
    MIN_BPM,
    Click,
    MetronomeSchedule,
    TempoMode,
    TempoProgram,
    TimeSignature,
    clamp_bpm,
)

DEFAULT_MAX_CLICKS: int = 10_000

TAP_WINDOW: int = 8
"""Number of most recent taps averaged by tap_tempo()."""

TAP_RESET_SEC: float = 3.0
"""Taps older than this (relative to the newest tap) are forgotten."""

# (bar, beat, bpm, time_signature) for each program beat
_Beat = tuple[int, int, float, TimeSignature]


# ---------------------------------------------------------------------------
# Per-mode beat generators (times are relative to the program start)
# ---------------------------------------------------------------------------


def _bar_beats(bars: int, bpm: float, meter: TimeSignature, first_bar: int = 0) -> Iterator[_Beat]:
    for bar in range(first_bar, first_bar + bars):
        for beat in range(meter.numerator):
            yield bar, beat, bpm, meter


def _ramp_beats(program: TempoProgram, meter: TimeSignature) -> Iterator[_Beat]:
    start = program.start_bpm
    span = program.end_bpm - program.start_bpm
    elapsed = 0.0
    n = 0
    while elapsed < program.duration_sec:
        bpm = clamp_bpm(start + span * elapsed / program.duration_sec)
        yield n // meter.numerator, n % meter.numerator, bpm, meter
        elapsed += 60.0 / bpm
        n += 1


def _step_beats(program: TempoProgram, meter: TimeSignature) -> Iterator[_Beat]:
    step = 0
    while True:
        bpm = program.start_bpm + step * program.step_size
        if bpm > program.end_bpm:
            return
        yield from _bar_beats(
            program.bars_per_step, clamp_bpm(bpm), meter, first_bar=step * program.bars_per_step
        )
        step += 1


def _plan_beats(program: TempoProgram) -> Iterator[_Beat]:
    first_bar = 0
    for exercise in program.exercises:
        yield from _bar_beats(
            exercise.bars, clamp_bpm(exercise.bpm), exercise.time_signature, first_bar=first_bar
        )
        first_bar += exercise.bars


def _program_beats(program: TempoProgram, meter: TimeSignature) -> Iterator[_Beat]:
    mode = TempoMode(program.mode)
    if mode is TempoMode.CONSTANT:
        return _bar_beats(program.bars, clamp_bpm(program.bpm), meter)
    if mode in (TempoMode.ACCELERANDO, TempoMode.RITARDANDO):
        return _ramp_beats(program, meter)
    if mode is TempoMode.STEPS:
        return _step_beats(program, meter)
    return _plan_beats(program)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def build_schedule(
    program: TempoProgram,
    time_signature: TimeSignature | None = None,
    *,
    kit: str = DEFAULT_KIT,
    accent_first_beat: bool = True,
    count_in: bool = False,
    max_clicks: int = DEFAULT_MAX_CLICKS,
) -> MetronomeSchedule:
    """Compile a tempo program into an ordered click schedule.

    Args:
        program:           Tempo plan (mode + mode settings).
        time_signature:    Meter for non-plan modes (default 4/4). Plan mode
                           uses each exercise's own meter.
        kit:               Sound kit name; determines Click.sound.
        accent_first_beat: Play the kit's accent on every bar downbeat.
        count_in:          Prepend COUNT_IN_BARS bars at the initial tempo.
        max_clicks:        Safety cap; the schedule is cut and flagged
                           ``truncated`` when reached.

    Returns:
        MetronomeSchedule with clicks sorted by time.

    Raises:
        ValueError: Unknown kit or max_clicks < 1.
    """
    if max_clicks < 1:
        raise ValueError(f"max_clicks must be >= 1, got {max_clicks}")
    meter = time_signature or TimeSignature()
    # Validates the kit name before any work is done.
    sound_for_beat(kit, 0)

    if TempoMode(program.mode) is TempoMode.PLAN:
        initial_meter = program.exercises[0].time_signature
    else:
        initial_meter = meter

    beats: Iterator[_Beat] = _program_beats(program, meter)
    if count_in:
        count_in_beats = _bar_beats(
            COUNT_IN_BARS, program.initial_bpm, initial_meter, first_bar=-COUNT_IN_BARS
        )
        beats = chain(count_in_beats, beats)

    clicks: list[Click] = []
    truncated = False
    time_sec = 0.0
    for bar, beat, bpm, beat_meter in beats:
        if len(clicks) >= max_clicks:
            truncated = True
            break
        accent = accent_first_beat and beat == 0
        clicks.append(
            Click(
                index=len(clicks),
                time_sec=time_sec,
                bar=bar,
                beat=beat,
                bpm=bpm,
                accent=accent,
                count_in=bar < 0,
                sound=sound_for_beat(kit, beat, accent=accent),
                time_signature=beat_meter,
            )
        )
        time_sec += 60.0 / bpm

    return MetronomeSchedule(
        clicks=tuple(clicks),
        mode=TempoMode(program.mode),
        kit=kit,
        time_signature=initial_meter,
        truncated=truncated,
    )


def tap_tempo(tap_times: Sequence[float]) -> int | None:
    """Estimate a tempo from tap timestamps (seconds, ascending).

    Averages the intervals between the last TAP_WINDOW taps.

    Returns:
        Whole BPM, or None with fewer than two taps or a result outside
        [MIN_BPM, MAX_BPM].

    Raises:
        ValueError: Timestamps not strictly increasing.
    """
    taps = list(tap_times)[-TAP_WINDOW:]
    if len(taps) < 2:
        return None
    intervals = [b - a for a, b in zip(taps, taps[1:])]
    if any(i <= 0 for i in intervals):
        raise ValueError("tap times must be strictly increasing")
    bpm = int(round_half_up(60.0 / (sum(intervals) / len(intervals))))
    if MIN_BPM <= bpm <= MAX_BPM:
        return bpm
    return None


class TapTempoTracker:
    """Stateful tap collector for interactive use.

    Keeps the last TAP_WINDOW taps and forgets taps more than
    TAP_RESET_SEC older than the newest one after each estimate.
    """

    def __init__(self) -> None:
        self._taps: list[float] = []

    @property
    def taps(self) -> tuple[float, ...]:
        return tuple(self._taps)

    def tap(self, now: float) -> int | None:
        if self._taps and now <= self._taps[-1]:
            raise ValueError(f"tap at {now} is not after the previous tap at {self._taps[-1]}")
        self._taps.append(now)
        self._taps = self._taps[-TAP_WINDOW:]
        bpm = tap_tempo(self._taps)
        if len(self._taps) >= 2:
            self._taps = [t for t in self._taps if now - t < TAP_RESET_SEC]
        return bpm

    def reset(self) -> None:
        self._taps.clear()
