"""
Tests for ingestion/metronome_export.py — MIDI and WAV output.

Covers:
    - Click notes on GM drum channel 9 at one beat per click
    - Accent / count-in velocities
    - set_tempo and time_signature meta events at every change
    - 16-bit PCM WAV writing and clipping
"""

import mido
import numpy as np
import pytest
from scipy.io import wavfile

from core.metronome.program import build_schedule
from core.metronome.types import Exercise, MetronomeSchedule, TempoMode, TempoProgram, TimeSignature
from ingestion.metronome_export import (
    DRUM_CHANNEL,
    GM_CLICK_NOTES,
    schedule_to_midi,
    schedule_to_wav,
    write_wav,
)


def _absolute(track) -> list[tuple[int, mido.Message]]:
    tick = 0
    out = []
    for msg in track:
        tick += msg.time
        out.append((tick, msg))
    return out


@pytest.fixture()
def one_bar():
    return build_schedule(TempoProgram(bpm=120, bars=1), TimeSignature(4, 4), kit="digital")


class TestScheduleToMidi:
    def test_structure(self, one_bar) -> None:
        midi = schedule_to_midi(one_bar)
        assert midi.type == 1
        assert len(midi.tracks) == 2
        assert midi.ticks_per_beat == 480

    def test_meta_track(self, one_bar) -> None:
        meta = [m for m in schedule_to_midi(one_bar).tracks[0] if m.is_meta]
        assert meta[0].type == "time_signature"
        assert (meta[0].numerator, meta[0].denominator) == (4, 4)
        assert meta[1].type == "set_tempo"
        assert meta[1].tempo == 500_000

    def test_click_notes(self, one_bar) -> None:
        events = _absolute(schedule_to_midi(one_bar).tracks[1])
        ons = [(t, m) for t, m in events if m.type == "note_on"]
        assert [t for t, _ in ons] == [0, 480, 960, 1440]
        assert [m.note for _, m in ons] == [GM_CLICK_NOTES["accent"]] + [GM_CLICK_NOTES["tick"]] * 3
        assert [m.velocity for _, m in ons] == [120, 90, 90, 90]
        assert all(m.channel == DRUM_CHANNEL for _, m in ons)

    def test_every_note_is_released(self, one_bar) -> None:
        track = schedule_to_midi(one_bar).tracks[1]
        ons = sum(1 for m in track if m.type == "note_on")
        offs = sum(1 for m in track if m.type == "note_off")
        assert ons == offs == 4

    def test_length_in_seconds(self, one_bar) -> None:
        # last onset at 1.5 s plus a 60-tick note at 120 BPM
        assert schedule_to_midi(one_bar).length == pytest.approx(1.5625)

    def test_count_in_velocity(self) -> None:
        schedule = build_schedule(TempoProgram(bars=1), count_in=True, accent_first_beat=False)
        ons = [m for m in schedule_to_midi(schedule).tracks[1] if m.type == "note_on"]
        assert [m.velocity for m in ons[:8]] == [70] * 8
        assert [m.velocity for m in ons[8:]] == [90] * 4

    def test_tempo_changes_emitted(self) -> None:
        program = TempoProgram(mode=TempoMode.STEPS, start_bpm=80, end_bpm=100, step_size=10, bars_per_step=1)
        events = _absolute(schedule_to_midi(build_schedule(program)).tracks[0])
        tempi = [(t, m.tempo) for t, m in events if m.type == "set_tempo"]
        assert tempi == [(0, 750_000), (4 * 480, 666_667), (8 * 480, 600_000)]

    def test_meter_changes_emitted(self) -> None:
        program = TempoProgram(
            mode=TempoMode.PLAN,
            exercises=(Exercise(100, 2, TimeSignature(3, 4)), Exercise(100, 1, TimeSignature(4, 4))),
        )
        events = _absolute(schedule_to_midi(build_schedule(program)).tracks[0])
        meters = [(t, m.numerator) for t, m in events if m.type == "time_signature"]
        assert meters == [(0, 3), (6 * 480, 4)]
        assert sum(1 for _, m in events if m.type == "set_tempo") == 1

    def test_saves_file(self, one_bar, tmp_path) -> None:
        path = tmp_path / "click.mid"
        schedule_to_midi(one_bar, output_path=path)
        reloaded = mido.MidiFile(str(path))
        assert sum(1 for m in reloaded.tracks[1] if m.type == "note_on") == 4

    def test_empty_schedule_raises(self) -> None:
        empty = MetronomeSchedule(
            clicks=(), mode=TempoMode.CONSTANT, kit="digital", time_signature=TimeSignature()
        )
        with pytest.raises(ValueError, match="no clicks"):
            schedule_to_midi(empty)


class TestWriteWav:
    def test_pcm16_roundtrip(self, tmp_path) -> None:
        audio = np.array([0.0, 0.5, 1.0, -1.0], dtype=np.float32)
        path = write_wav(audio, tmp_path / "a.wav", 8000)
        rate, data = wavfile.read(str(path))
        assert rate == 8000
        assert data.dtype == np.int16
        assert data.tolist() == [0, 16383, 32767, -32767]

    def test_clips_out_of_range(self, tmp_path) -> None:
        path = write_wav(np.array([2.0, -3.0]), tmp_path / "b.wav")
        _, data = wavfile.read(str(path))
        assert data.tolist() == [32767, -32767]

    def test_rejects_stereo(self, tmp_path) -> None:
        with pytest.raises(ValueError, match="1-D"):
            write_wav(np.zeros((2, 10)), tmp_path / "c.wav")

    def test_schedule_to_wav(self, one_bar, tmp_path) -> None:
        path = schedule_to_wav(one_bar, tmp_path / "click.wav", sample_rate=22050)
        rate, data = wavfile.read(str(path))
        assert rate == 22050
        assert data.size == 2 * 22050 + int(0.15 * 22050)
        assert np.abs(data).max() > 0
