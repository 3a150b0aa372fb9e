"""
ingestion/metronome_export.py — Write metronome schedules to MIDI and WAV.

This module is the I/O boundary for the practice metronome:
    build_schedule (core/metronome/) → schedule_to_midi → .mid
    render_schedule (core/metronome/) → write_wav → .wav

MIDI structure:
    Type 1, Track 0 = meta (set_tempo / time_signature at every change),
    Track 1 = click events on GM drum channel 9.

Because every click is exactly one beat, click N sits at tick
N × ticks_per_beat and tempo changes are expressed purely through
set_tempo meta events; no seconds → ticks conversion is needed.

Usage:
    from ingestion.metronome_export import schedule_to_midi, write_wav
"""

from __future__ import annotations

import logging
from pathlib import Path

import mido
import numpy as np
from scipy.io import wavfile

from core.flute.units import round_half_up
from core.metronome.sounds import DEFAULT_SAMPLE_RATE, render_schedule
from core.metronome.types import MetronomeSchedule

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_TICKS_PER_BEAT: int = 480
"""Standard MIDI ticks per quarter note."""

DRUM_CHANNEL: int = 9
"""GM standard MIDI channel for percussion (0-indexed = channel 10 in DAW)."""

# GM percussion key per kit sound
GM_CLICK_NOTES: dict[str, int] = {
    "kick": 36,  # Bass Drum 1
    "snare": 38,  # Acoustic Snare
    "hihat": 42,  # Closed Hi-Hat
    "closedhat": 44,  # Pedal Hi-Hat
    "accent": 56,  # Cowbell
    "click": 76,  # Hi Wood Block
    "tick": 75,  # Claves
    "tock": 77,  # Low Wood Block
    "dha": 64,  # Low Conga
    "tin": 63,  # Open Hi Conga
}

ACCENT_VELOCITY: int = 120
BEAT_VELOCITY: int = 90
COUNT_IN_VELOCITY: int = 70

_PCM16_MAX: int = 32767


def _bpm_to_tempo_us(bpm: float) -> int:
    """Convert BPM to MIDI tempo (microseconds per beat)."""
    return max(1, int(round_half_up(60_000_000.0 / bpm)))


def _velocity(accent: bool, count_in: bool) -> int:
    if count_in:
        return COUNT_IN_VELOCITY
    return ACCENT_VELOCITY if accent else BEAT_VELOCITY


# ---------------------------------------------------------------------------
# MIDI
# ---------------------------------------------------------------------------


def schedule_to_midi(
    schedule: MetronomeSchedule,
    *,
    output_path: str | Path | None = None,
    ticks_per_beat: int = DEFAULT_TICKS_PER_BEAT,
) -> mido.MidiFile:
    """Convert a click schedule to a Type 1 MIDI file.

    Args:
        schedule:       Output of build_schedule(). Must contain clicks.
        output_path:    If provided, saves the file at this path.
        ticks_per_beat: MIDI resolution (default 480).

    Returns:
        mido.MidiFile object.

    Raises:
        ValueError: If the schedule is empty.
    """
    if not schedule.clicks:
        raise ValueError("schedule has no clicks")

    midi = mido.MidiFile(type=1, ticks_per_beat=ticks_per_beat)

    # Track 0: tempo + meter changes
    meta_track = mido.MidiTrack()
    midi.tracks.append(meta_track)
    last_tick = 0
    last_tempo: int | None = None
    last_meter = None
    for click in schedule.clicks:
        tick = click.index * ticks_per_beat
        tempo = _bpm_to_tempo_us(click.bpm)
        if click.time_signature != last_meter:
            meta_track.append(
                mido.MetaMessage(
                    "time_signature",
                    numerator=click.time_signature.numerator,
                    denominator=click.time_signature.denominator,
                    clocks_per_click=24,
                    notated_32nd_notes_per_beat=8,
                    time=tick - last_tick,
                )
            )
            last_tick = tick
            last_meter = click.time_signature
        if tempo != last_tempo:
            meta_track.append(mido.MetaMessage("set_tempo", tempo=tempo, time=tick - last_tick))
            last_tick = tick
            last_tempo = tempo
    meta_track.append(mido.MetaMessage("end_of_track", time=0))

    # Track 1: one short drum hit per click
    click_track = mido.MidiTrack()
    midi.tracks.append(click_track)
    note_ticks = max(1, ticks_per_beat // 8)
    current_tick = 0
    for click in schedule.clicks:
        note = GM_CLICK_NOTES.get(click.sound, GM_CLICK_NOTES["click"])
        on_tick = click.index * ticks_per_beat
        click_track.append(
            mido.Message(
                "note_on",
                channel=DRUM_CHANNEL,
                note=note,
                velocity=_velocity(click.accent, click.count_in),
                time=on_tick - current_tick,
            )
        )
        click_track.append(
            mido.Message("note_off", channel=DRUM_CHANNEL, note=note, velocity=0, time=note_ticks)
        )
        current_tick = on_tick + note_ticks
    click_track.append(mido.MetaMessage("end_of_track", time=0))

    if output_path is not None:
        midi.save(str(output_path))
        logger.info("Wrote %d clicks to %s", len(schedule.clicks), output_path)

    return midi


# ---------------------------------------------------------------------------
# WAV
# ---------------------------------------------------------------------------


def write_wav(
    audio: np.ndarray,
    output_path: str | Path,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
) -> Path:
    """Write a mono float buffer in [-1, 1] as 16-bit PCM.

    Samples outside [-1, 1] are clipped.

    Raises:
        ValueError: Non-1-D audio or non-positive sample rate.
    """
    if audio.ndim != 1:
        raise ValueError(f"audio must be 1-D, got shape {audio.shape}")
    if sample_rate <= 0:
        raise ValueError(f"sample_rate must be > 0, got {sample_rate}")

    pcm = (np.clip(audio, -1.0, 1.0) * _PCM16_MAX).astype(np.int16)
    path = Path(output_path)
    wavfile.write(str(path), sample_rate, pcm)
    logger.info("Wrote %.2f s of audio to %s", audio.size / sample_rate, path)
    return path


def schedule_to_wav(
    schedule: MetronomeSchedule,
    output_path: str | Path,
    *,
    kit: str | None = None,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
    volume: float = 1.0,
) -> Path:
    """Render a schedule with its kit and write it as a WAV file."""
    audio = render_schedule(schedule, kit, sample_rate, volume=volume)
    return write_wav(audio, output_path, sample_rate)
