"""
core/metronome/presets.py — Named one-click metronome setups.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.metronome.types import TempoMode, TempoProgram, TimeSignature


@dataclass(frozen=True)
class MetronomePreset:
    key: str
    name: str
    bpm: float
    time_signature: TimeSignature
    kit: str = "basicdrumkit"
    mode: TempoMode = TempoMode.CONSTANT
    accent_first_beat: bool = True

    def program(self, bars: int = 8) -> TempoProgram:
        """Constant-tempo program for this preset."""
        return TempoProgram(mode=self.mode, bpm=self.bpm, bars=bars)


PRESETS: dict[str, MetronomePreset] = {
    p.key: p
    for p in (
        MetronomePreset("basic-4-4", "Basic 4/4 - 120 BPM", 120, TimeSignature(4, 4)),
        MetronomePreset("waltz", "Waltz 3/4 - 90 BPM", 90, TimeSignature(3, 4)),
        MetronomePreset(
            "fast-practice", "Fast Practice - 160 BPM", 160, TimeSignature(4, 4), kit="electrokit"
        ),
        MetronomePreset(
            "slow-practice", "Slow Practice - 60 BPM", 60, TimeSignature(4, 4), kit="digital"
        ),
    )
}


def available_presets() -> list[str]:
    return sorted(PRESETS)


def get_preset(key: str) -> MetronomePreset:
    """Look up a preset by key (case-insensitive).

    Raises:
        KeyError: Unknown preset key.
    """
    normalized = key.strip().lower()
    if normalized not in PRESETS:
        raise KeyError(f"Unknown preset {key!r}. Available: {available_presets()}")
    return PRESETS[normalized]
