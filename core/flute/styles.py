"""
core/flute/styles.py — Tuning-style registry backed by bundled YAML.

Uses importlib.resources (stdlib) to read YAML files bundled in the
core/flute/style_tables/ package. Each file is parsed once per process; the
resulting TuningStyle objects are frozen and exposed through a read-only
MappingProxyType, so no caller can mutate the registry.

Exports:
    get_style(key) → TuningStyle
    all_styles() → Mapping[str, TuningStyle]
    available_styles(strategy=None) → list[str]
    styles_for_length(length_mm, strategy=None) → list[TuningStyle]
    length_class_table() → tuple[dict, ...]
"""

from __future__ import annotations

import importlib.resources
import math
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

import yaml  # PyYAML

from core.flute.types import TuningStyle, UnknownStyleError

# ---------------------------------------------------------------------------
# Bundled files
# ---------------------------------------------------------------------------

_TABLE_PACKAGE = "core.flute.style_tables"
_STYLE_FILES: tuple[str, ...] = ("interval.yaml", "variation.yaml")
_LENGTH_FILE = "length_classes.yaml"

_CACHE: dict[str, Any] = {}


def _read_yaml(filename: str) -> dict[str, Any]:
    pkg = importlib.resources.files(_TABLE_PACKAGE)
    text = (pkg / filename).read_text(encoding="utf-8")
    data: dict[str, Any] = yaml.safe_load(text)
    return data


# ---------------------------------------------------------------------------
# YAML entry → TuningStyle
# ---------------------------------------------------------------------------


def ratio_to_semitones(ratio: float) -> float:
    """12 · log2(ratio)."""
    if ratio <= 0:
        raise ValueError(f"frequency ratio must be positive, got {ratio}")
    return 12.0 * math.log2(ratio)


def _build_style(key: str, entry: dict[str, Any], defaults: dict[str, Any]) -> TuningStyle:
    merged = {**defaults, **entry}
    strategy = merged["strategy"]

    if strategy == "percentage":
        targets = tuple(float(f) for f in merged["fractions"])
    elif "ratios" in merged:
        targets = tuple(ratio_to_semitones(float(r)) for r in merged["ratios"])
    else:
        targets = tuple(float(s) for s in merged["semitones"])

    kwargs: dict[str, Any] = {}
    for name in ("fundamental_constant", "tube_length_constant"):
        if name in merged:
            kwargs[name] = float(merged[name])

    lo, hi = merged.get("length_range_mm", (300, 1300))
    return TuningStyle(
        key=key,
        name=merged.get("name", key),
        strategy=strategy,
        hole_targets=targets,
        hole_names=tuple(merged.get("hole_names", ())),
        offsets_mm=tuple(float(o) for o in merged.get("offsets_mm", ())),
        theoretical_semitones=tuple(float(s) for s in merged.get("theoretical_semitones", ())),
        has_thumb_hole=bool(merged.get("has_thumb_hole", True)),
        position_decimals=int(merged.get("position_decimals", 0)),
        length_range_mm=(float(lo), float(hi)),
        description=" ".join(str(merged.get("description", "")).split()),
        **kwargs,
    )


def _load_registry() -> Mapping[str, TuningStyle]:
    registry = _CACHE.get("styles")
    if registry is not None:
        return registry

    styles: dict[str, TuningStyle] = {}
    for filename in _STYLE_FILES:
        data = _read_yaml(filename)
        defaults = data.get("defaults", {})
        for key, entry in data["styles"].items():
            if key in styles:
                raise ValueError(f"Duplicate style key {key!r} in {filename}")
            styles[key] = _build_style(key, entry, defaults)

    registry = MappingProxyType(styles)
    _CACHE["styles"] = registry
    return registry


# ---------------------------------------------------------------------------
# Public lookup
# ---------------------------------------------------------------------------


def all_styles() -> Mapping[str, TuningStyle]:
    """Read-only mapping of every registered style, in file order."""
    return _load_registry()


def available_styles(strategy: str | None = None) -> list[str]:
    """Return sorted style keys, optionally restricted to one strategy."""
    return sorted(
        key
        for key, style in _load_registry().items()
        if strategy is None or style.strategy == strategy
    )


def get_style(key: str) -> TuningStyle:
    """Look up a style by key (case-insensitive, surrounding space ignored).

    Raises:
        UnknownStyleError: If the key is not registered. Never falls back to
            a default style.
    """
    normalised = key.lower().strip()
    registry = _load_registry()
    style = registry.get(normalised)
    if style is None:
        raise UnknownStyleError(key, sorted(registry))
    return style


def styles_for_length(length_mm: float, strategy: str | None = None) -> list[TuningStyle]:
    """Styles whose playable length range admits ``length_mm``, in registry order."""
    return [
        style
        for style in _load_registry().values()
        if (strategy is None or style.strategy == strategy)
        and style.length_range_mm[0] <= length_mm <= style.length_range_mm[1]
    ]


def length_class_table() -> tuple[dict[str, Any], ...]:
    """Traditional 0.1-shaku bins as (label, min_mm, max_mm) dicts."""
    table = _CACHE.get("length_classes")
    if table is None:
        data = _read_yaml(_LENGTH_FILE)
        table = tuple(dict(entry) for entry in data["classes"])
        _CACHE["length_classes"] = table
        _CACHE["fallback_mm_per_shaku"] = float(data["fallback_mm_per_shaku"])
    return table


def fallback_mm_per_shaku() -> float:
    """Millimetres per shaku used for lengths outside the table."""
    length_class_table()
    return _CACHE["fallback_mm_per_shaku"]
