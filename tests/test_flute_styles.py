"""
Tests for core/flute/styles.py and TuningStyle validation.

Covers:
    - Bundled registry contents and strategies
    - Case-insensitive lookup; UnknownStyleError lists available keys
    - Ratio → semitone conversion for ratio-based styles
    - Read-only registry
    - Length-range filtering
    - TuningStyle __post_init__ validation
"""

import math

import pytest

from core.flute.styles import (
    all_styles,
    available_styles,
    get_style,
    length_class_table,
    ratio_to_semitones,
    styles_for_length,
)
from core.flute.types import TuningStyle, UnknownStyleError

VARIATION_KEYS = {
    "nelson-zink",
    "john-neptune",
    "ken-lacosse",
    "atsuya-okuda",
    "yamaguchi-shugetsu",
    "nishimura-koku",
    "kodama-youtube1",
    "kodama-hoian2",
}
INTERVAL_KEYS = {"traditional", "shakuhachi-pentatonic", "diatonic"}


class TestRegistry:
    def test_all_keys_present(self) -> None:
        assert set(available_styles()) == VARIATION_KEYS | INTERVAL_KEYS

    def test_sorted(self) -> None:
        keys = available_styles()
        assert keys == sorted(keys)

    def test_filter_by_strategy(self) -> None:
        assert set(available_styles("percentage")) == VARIATION_KEYS
        assert set(available_styles("interval")) == INTERVAL_KEYS

    def test_registry_is_read_only(self) -> None:
        styles = all_styles()
        with pytest.raises(TypeError):
            styles["new"] = styles["diatonic"]  # type: ignore[index]

    def test_registry_cached(self) -> None:
        assert all_styles() is all_styles()

    def test_styles_are_frozen(self) -> None:
        with pytest.raises(AttributeError):
            get_style("diatonic").name = "x"  # type: ignore[misc]


class TestGetStyle:
    def test_case_and_space_insensitive(self) -> None:
        assert get_style("  Nelson-Zink ").key == "nelson-zink"

    def test_unknown_raises_with_available_list(self) -> None:
        with pytest.raises(UnknownStyleError, match="Available") as exc_info:
            get_style("flutomatic")
        assert exc_info.value.key == "flutomatic"
        assert "diatonic" in exc_info.value.available

    def test_unknown_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            get_style("")


class TestStyleData:
    def test_nelson_zink(self) -> None:
        style = get_style("nelson-zink")
        assert style.name == "Nelson Zink - Navaching.com"
        assert style.strategy == "percentage"
        assert style.hole_targets == (0.785, 0.688, 0.603, 0.488, 0.427)
        assert style.theoretical_semitones == (3, 5, 7, 10, 12)
        assert style.hole_names == ("Tsu", "Re", "Chi", "Ri", "Hi")
        assert style.offsets_mm == ()
        assert style.length_range_mm == (300.0, 1300.0)

    def test_okuda_matches_lacosse(self) -> None:
        assert get_style("atsuya-okuda").hole_targets == get_style("ken-lacosse").hole_targets

    def test_kodama_offsets(self) -> None:
        assert get_style("kodama-youtube1").offsets_mm == (0.0, -1.0, 0.0, -2.5, -2.5)
        assert get_style("kodama-hoian2").offsets_mm == (0.0, 0.0, 1.0, -1.0, -1.0)

    def test_traditional_ratios_converted(self) -> None:
        style = get_style("traditional")
        expected = [12 * math.log2(r) for r in (1.125, 1.25, 1.5, 1.6875, 1.898)]
        assert style.hole_targets == pytest.approx(expected)
        assert style.semitone_targets == style.hole_targets

    def test_diatonic(self) -> None:
        style = get_style("diatonic")
        assert style.hole_count == 7
        assert style.hole_targets == (2, 3, 5, 7, 9, 10, 12)
        assert style.length_range_mm == (30.0, 1000.0)
        assert style.has_thumb_hole

    def test_constants_default_to_calibration(self) -> None:
        style = get_style("shakuhachi-pentatonic")
        assert style.fundamental_constant is None
        assert style.tube_length_constant is None

    def test_ratio_to_semitones(self) -> None:
        assert ratio_to_semitones(2.0) == pytest.approx(12.0)
        with pytest.raises(ValueError):
            ratio_to_semitones(0.0)


class TestStylesForLength:
    def test_short_flute_only_diatonic(self) -> None:
        assert [s.key for s in styles_for_length(200)] == ["diatonic"]

    def test_long_flute_excludes_diatonic(self) -> None:
        keys = {s.key for s in styles_for_length(1100)}
        assert "diatonic" not in keys
        assert keys == VARIATION_KEYS | {"traditional", "shakuhachi-pentatonic"}

    def test_strategy_filter(self) -> None:
        keys = {s.key for s in styles_for_length(540, "interval")}
        assert keys == INTERVAL_KEYS


class TestLengthClassTable:
    def test_bounds(self) -> None:
        table = length_class_table()
        assert table[0] == {"label": "1.1", "min_mm": 318, "max_mm": 348}
        assert table[-1]["label"] == "4.0"
        assert table[-1]["max_mm"] == 1242


class TestTuningStyleValidation:
    def test_unknown_strategy_raises(self) -> None:
        with pytest.raises(ValueError, match="strategy must be one of"):
            TuningStyle(key="x", name="X", strategy="guess", hole_targets=(1.0,))

    def test_empty_targets_raise(self) -> None:
        with pytest.raises(ValueError, match="no hole targets"):
            TuningStyle(key="x", name="X", strategy="interval", hole_targets=())

    def test_non_increasing_semitones_raise(self) -> None:
        with pytest.raises(ValueError, match="strictly increasing"):
            TuningStyle(key="x", name="X", strategy="interval", hole_targets=(3.0, 2.0))

    def test_fraction_out_of_range_raises(self) -> None:
        with pytest.raises(ValueError, match=r"fractions must be in \(0, 1\)"):
            TuningStyle(key="x", name="X", strategy="percentage", hole_targets=(0.5, 1.2))

    def test_offsets_on_interval_style_raise(self) -> None:
        with pytest.raises(ValueError, match="offsets_mm only apply"):
            TuningStyle(
                key="x", name="X", strategy="interval", hole_targets=(2.0, 4.0), offsets_mm=(1.0, 1.0)
            )

    def test_mismatched_names_raise(self) -> None:
        with pytest.raises(ValueError, match="hole_names has 1 entries, expected 2"):
            TuningStyle(
                key="x", name="X", strategy="percentage", hole_targets=(0.7, 0.5), hole_names=("Tsu",)
            )

    def test_bad_length_range_raises(self) -> None:
        with pytest.raises(ValueError, match="length_range_mm"):
            TuningStyle(
                key="x",
                name="X",
                strategy="percentage",
                hole_targets=(0.5,),
                length_range_mm=(500.0, 400.0),
            )
