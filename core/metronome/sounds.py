"""
core/metronome/sounds.py — Synthesized click timbres and schedule rendering.

Every sound is generated from closed-form envelopes with numpy; noise
components draw from ``numpy.random.default_rng(seed)`` so the same seed
always yields the same samples.

Kits:
    basicdrumkit  kick, snare, hihat, closedhat, accent
    electrokit    kick, snare, hihat, accent
    digital       click, accent, tick, tock
    tabla         dha, tin, accent

Usage:
    from core.metronome.sounds import render_schedule
    audio = render_schedule(schedule, sample_rate=44100)
"""

from __future__ import annotations

import math
from collections.abc import Callable

import numpy as np

from core.metronome.types import MetronomeSchedule

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_SAMPLE_RATE: int = 44100
DEFAULT_KIT: str = "basicdrumkit"

KIT_SOUNDS: dict[str, tuple[str, ...]] = {
    "basicdrumkit": ("kick", "snare", "hihat", "closedhat", "accent"),
    "electrokit": ("kick", "snare", "hihat", "accent"),
    "digital": ("click", "accent", "tick", "tock"),
    "tabla": ("dha", "tin", "accent"),
}

# (downbeat, other beats) per kit
_BEAT_SOUNDS: dict[str, tuple[str, str]] = {
    "basicdrumkit": ("kick", "hihat"),
    "electrokit": ("kick", "hihat"),
    "digital": ("click", "tick"),
    "tabla": ("dha", "tin"),
}

SoundGenerator = Callable[[np.ndarray, np.random.Generator], np.ndarray]


def available_kits() -> list[str]:
    return sorted(KIT_SOUNDS)


def _check_kit(kit: str) -> None:
    if kit not in KIT_SOUNDS:
        raise ValueError(f"Unknown kit {kit!r}. Available: {available_kits()}")


def sound_for_beat(kit: str, beat: int, *, accent: bool = False) -> str:
    """Return the sound a kit plays on ``beat`` (0 = bar downbeat).

    Accented beats always use the kit's ``accent`` sound.

    Raises:
        ValueError: Unknown kit or negative beat.
    """
    _check_kit(kit)
    if beat < 0:
        raise ValueError(f"beat must be >= 0, got {beat}")
    if accent:
        return "accent"
    downbeat, other = _BEAT_SOUNDS[kit]
    return downbeat if beat == 0 else other


# ---------------------------------------------------------------------------
# Generators: t is the sample time axis in seconds
# ---------------------------------------------------------------------------


def _sine(freq: float | np.ndarray, t: np.ndarray) -> np.ndarray:
    return np.sin(2.0 * np.pi * freq * t)


def _noise(rng: np.random.Generator, n: int) -> np.ndarray:
    return rng.random(n) - 0.5


def _kick(t, rng):
    env = np.exp(-t * 5)
    pitch = 60 * np.exp(-t * 30)
    noise = _noise(rng, t.size) * 0.3 * np.exp(-t * 10)
    return (_sine(pitch, t) * env + noise) * 0.8


def _snare(t, rng):
    env = np.exp(-t * 8)
    tone = _sine(200, t) * 0.3
    crack = _sine(3000, t) * np.exp(-t * 20) * 0.2
    return (tone + _noise(rng, t.size) * 0.8 + crack) * env * 0.6


def _hihat(t, rng):
    freqs = np.arange(8000, 16000, 1000)[:, None]
    partials = np.sin(2.0 * np.pi * freqs * t) * (rng.random((freqs.shape[0], t.size)) - 0.5)
    return partials.sum(axis=0) * np.exp(-t * 15) * 0.3


def _closedhat(t, rng):
    env = np.exp(-t * 25)
    return (_noise(rng, t.size) * env + _sine(12000, t) * env * 0.3) * 0.4


def _accent_kick(t, rng):
    env = np.exp(-t * 4)
    pitch = 80 * np.exp(-t * 25)
    click = _sine(2000, t) * np.exp(-t * 20) * 0.2
    return (_sine(pitch, t) * env + _sine(pitch * 2, t) * env * 0.3 + click) * 0.9


def _electro_kick(t, rng):
    pitch = 50 * np.exp(-t * 20)
    driven = np.clip(_sine(pitch, t) * 3, -1.0, 1.0)
    return driven * np.exp(-t * 6) * 0.7


def _electro_snare(t, rng):
    env = np.exp(-t * 10)
    punch = _sine(150, t) * np.exp(-t * 30) * 0.5
    return (_sine(220, t) * 0.4 + _noise(rng, t.size) * 0.6 + punch) * env * 0.8


def _electro_hat(t, rng):
    env = np.exp(-t * 20)
    digital = _sine(10000, t) * _noise(rng, t.size)
    pulse = np.sign(_sine(8000, t)) * env
    return (digital + pulse) * env * 0.4


def _electro_accent(t, rng):
    env = np.exp(-t * 5)
    high = _sine(2000, t) * np.exp(-t * 15) * 0.3
    return (_sine(60, t) * env + _sine(440, t) * env * 0.5 + high) * 0.8


def _dha(t, rng):
    pitch = 120 * (1 - t * 0.3)
    slap = _sine(400, t) * np.exp(-t * 20) * 0.3
    return (_sine(pitch, t) + _sine(pitch * 2.1, t) * 0.4 + slap) * np.exp(-t * 4) * 0.7


def _tin(t, rng):
    finger = _noise(rng, t.size) * 0.2 * np.exp(-t * 30)
    return (_sine(800, t) + _sine(1600, t) * 0.6 + finger) * np.exp(-t * 8) * 0.5


def _click(freq: float) -> SoundGenerator:
    def generate(t, rng):
        return _sine(freq, t) * np.exp(-t * 10) * 0.3

    return generate


# kit -> sound -> (duration_sec, generator)
_GENERATORS: dict[str, dict[str, tuple[float, SoundGenerator]]] = {
    "basicdrumkit": {
        "kick": (0.5, _kick),
        "snare": (0.3, _snare),
        "hihat": (0.15, _hihat),
        "closedhat": (0.08, _closedhat),
        "accent": (0.6, _accent_kick),
    },
    "electrokit": {
        "kick": (0.4, _electro_kick),
        "snare": (0.25, _electro_snare),
        "hihat": (0.12, _electro_hat),
        "accent": (0.5, _electro_accent),
    },
    "digital": {
        "click": (0.1, _click(800)),
        "accent": (0.15, _click(1200)),
        "tick": (0.05, _click(1000)),
        "tock": (0.08, _click(800)),
    },
    "tabla": {
        "dha": (0.6, _dha),
        "tin": (0.3, _tin),
        "accent": (0.6, _dha),
    },
}


def synthesize(
    kit: str,
    sound: str,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
    *,
    seed: int = 0,
) -> np.ndarray:
    """Generate one sound of a kit as a mono float32 array.

    Raises:
        ValueError: Unknown kit/sound or non-positive sample rate.
    """
    _check_kit(kit)
    if sound not in _GENERATORS[kit]:
        raise ValueError(f"Kit {kit!r} has no sound {sound!r}. Available: {list(KIT_SOUNDS[kit])}")
    if sample_rate <= 0:
        raise ValueError(f"sample_rate must be > 0, got {sample_rate}")

    duration, generator = _GENERATORS[kit][sound]
    n = int(sample_rate * duration)
    t = np.arange(n, dtype=np.float64) / sample_rate
    rng = np.random.default_rng(seed)
    return generator(t, rng).astype(np.float32)


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def render_schedule(
    schedule: MetronomeSchedule,
    kit: str | None = None,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
    *,
    volume: float = 1.0,
    seed: int = 0,
) -> np.ndarray:
    """Mix every click of a schedule into one mono float32 buffer.

    The buffer covers the schedule's duration plus the tail of the longest
    sound. If the mix peaks above 1.0 it is scaled down to exactly 1.0;
    ``volume`` (0–1) is applied afterwards.

    Args:
        schedule:    Output of build_schedule().
        kit:         Override the schedule's kit.
        sample_rate: Output sample rate in Hz.
        volume:      Final gain in [0, 1].
        seed:        Noise seed shared by all synthesized sounds.

    Returns:
        1-D float32 array with peak absolute value <= 1.0.
    """
    kit = kit or schedule.kit
    _check_kit(kit)
    if not (0.0 <= volume <= 1.0):
        raise ValueError(f"volume must be in [0, 1], got {volume}")

    samples = {
        name: synthesize(kit, name, sample_rate, seed=seed) for name in KIT_SOUNDS[kit]
    }
    tail = max(s.size for s in samples.values())
    total = int(math.ceil(schedule.duration_sec * sample_rate)) + tail
    buffer = np.zeros(total, dtype=np.float32)

    for click in schedule.clicks:
        sound = click.sound
        if sound not in samples:
            sound = sound_for_beat(kit, click.beat, accent=click.accent)
        data = samples[sound]
        start = int(click.time_sec * sample_rate + 0.5)
        buffer[start : start + data.size] += data

    peak = float(np.max(np.abs(buffer))) if buffer.size else 0.0
    if peak > 1.0:
        buffer /= peak
    if volume != 1.0:
        buffer *= volume
    return buffer
