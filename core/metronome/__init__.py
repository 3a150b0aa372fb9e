"""
core/metronome — Practice metronome: tempo programs, click schedules, sounds.

Pure engine: no I/O. File export (MIDI / WAV) lives in
ingestion/metronome_export.py.

Public API:
    build_schedule      TempoProgram → MetronomeSchedule
    tap_tempo           Tap timestamps → BPM
    TapTempoTracker     Stateful tap collector
    render_schedule     MetronomeSchedule → float32 audio buffer
    synthesize          One kit sound → float32 samples
    sound_for_beat      Kit + beat position → sound name
    get_preset          Named preset lookup
"""

from core.metronome.presets import PRESETS, MetronomePreset, available_presets, get_preset
from core.metronome.program import (
    DEFAULT_MAX_CLICKS,
    TapTempoTracker,
    build_schedule,
    tap_tempo,
)
from core.metronome.sounds import (
    DEFAULT_SAMPLE_RATE,
    KIT_SOUNDS,
    available_kits,
    render_schedule,
    sound_for_beat,
    synthesize,
)
from core.metronome.types import (
    COUNT_IN_BARS,
    MAX_BPM,
    MIN_BPM,
    Click,
    Exercise,
    MetronomeSchedule,
    TempoMode,
    TempoProgram,
    TimeSignature,
    clamp_bpm,
)

__all__ = [
    # Types
    "Click",
    "Exercise",
    "MetronomeSchedule",
    "TempoMode",
    "TempoProgram",
    "TimeSignature",
    # Constants
    "COUNT_IN_BARS",
    "DEFAULT_MAX_CLICKS",
    "DEFAULT_SAMPLE_RATE",
    "KIT_SOUNDS",
    "MAX_BPM",
    "MIN_BPM",
    "PRESETS",
    # Scheduling
    "TapTempoTracker",
    "build_schedule",
    "clamp_bpm",
    "tap_tempo",
    # Sounds
    "available_kits",
    "render_schedule",
    "sound_for_beat",
    "synthesize",
    # Presets
    "MetronomePreset",
    "available_presets",
    "get_preset",
]
