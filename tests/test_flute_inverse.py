"""
Tests for core/flute/inverse.py — chain and percentage solvers.

Covers:
    - fundamental_frequency and mouthpiece excess length
    - Chain solver reference layouts (diatonic 540 mm, ratio pentatonic 650 mm)
    - Strictly decreasing positions for increasing offsets
    - Infeasible holes flagged, pass completes
    - Percentage solver rounding and maker offsets
"""

import math

import pytest

from core.flute.inverse import (
    fundamental_frequency,
    mouthpiece_excess_length,
    solve_interval_chain,
    solve_percentages,
)
from core.flute.types import FluteDomainError, FluteGeometry

DIATONIC = [2, 3, 5, 7, 9, 10, 12]
PENTATONIC = [3, 5, 7, 10, 12]
RATIOS = [1.125, 1.25, 1.5, 1.6875, 1.898]

GEOMETRY_540 = FluteGeometry(length_mm=540, bore_diameter_mm=19, wall_thickness_mm=4, hole_diameter_mm=10)
GEOMETRY_650 = FluteGeometry(
    length_mm=650, bore_diameter_mm=20.5, wall_thickness_mm=3.375, hole_diameter_mm=10
)


class TestFundamental:
    def test_fundamental(self) -> None:
        assert fundamental_frequency(540) == pytest.approx(289.8537, abs=1e-4)

    def test_non_positive_length_raises(self) -> None:
        with pytest.raises(FluteDomainError):
            fundamental_frequency(0)

    def test_mouthpiece_excess_length(self) -> None:
        # 165674 / (156521 / 540) - 0.3 * 19 - 540
        assert mouthpiece_excess_length(540, 19) == pytest.approx(25.878, abs=1e-3)


class TestSolveIntervalChain:
    def test_diatonic_540_positions(self) -> None:
        holes = solve_interval_chain(540, DIATONIC, GEOMETRY_540)
        assert [h.position_mm for h in holes] == [455, 427, 372, 326, 285, 268, 231]
        assert not any(h.error for h in holes)

    def test_diatonic_compressed_spans(self) -> None:
        p = [h.position_mm for h in solve_interval_chain(540, DIATONIC, GEOMETRY_540)]
        span_12, span_23, span_34, span_45, span_56 = (p[i] - p[i + 1] for i in range(5))
        for small in (span_12, span_56):
            assert small < span_23
            assert small < span_34
            assert small < span_45

    def test_ratio_pentatonic_650(self) -> None:
        offsets = [12 * math.log2(r) for r in RATIOS]
        holes = solve_interval_chain(650, offsets, GEOMETRY_650)
        positions = [h.position_mm for h in holes]
        assert positions == [548, 485, 391, 343, 298]
        assert all(0 < p < 650 for p in positions)
        assert all(b < a for a, b in zip(positions, positions[1:]))

    @pytest.mark.parametrize("length", [300, 400, 540, 700, 900, 1100, 1300])
    @pytest.mark.parametrize("offsets", [PENTATONIC, DIATONIC])
    def test_positions_strictly_decrease(self, length: int, offsets: list[int]) -> None:
        geometry = FluteGeometry(length, 19, 4, 10)
        positions = [h.position_mm for h in solve_interval_chain(length, offsets, geometry)]
        assert all(b < a for a, b in zip(positions, positions[1:]))

    @pytest.mark.parametrize("length", [30, 37])
    def test_tiny_diatonic_positions_may_tie(self, length: int) -> None:
        geometry = FluteGeometry(length, 19, 4, 10)
        positions = [h.position_mm for h in solve_interval_chain(length, DIATONIC, geometry)]
        assert all(b <= a for a, b in zip(positions, positions[1:]))

    def test_target_frequencies(self) -> None:
        holes = solve_interval_chain(540, DIATONIC, GEOMETRY_540)
        assert holes[0].target_frequency_hz == pytest.approx(325.3498, abs=1e-3)
        assert holes[-1].target_frequency_hz == pytest.approx(2 * 289.8537, abs=1e-3)

    def test_indices_and_offsets_preserved(self) -> None:
        holes = solve_interval_chain(540, PENTATONIC, GEOMETRY_540)
        assert [h.index for h in holes] == [0, 1, 2, 3, 4]
        assert [h.semitones for h in holes] == PENTATONIC

    def test_infeasible_holes_flagged_not_dropped(self) -> None:
        geometry = FluteGeometry(length_mm=300, bore_diameter_mm=100, wall_thickness_mm=10, hole_diameter_mm=5)
        holes = solve_interval_chain(300, DIATONIC, geometry)
        assert len(holes) == 7
        assert holes[0].position_mm == -124
        assert all(h.error for h in holes)

    def test_custom_constants(self) -> None:
        default = solve_interval_chain(540, PENTATONIC, GEOMETRY_540)
        custom = solve_interval_chain(540, PENTATONIC, GEOMETRY_540, fundamental_constant=150000.0)
        assert [h.position_mm for h in custom] != [h.position_mm for h in default]

    def test_empty_offsets_raise(self) -> None:
        with pytest.raises(ValueError, match="must not be empty"):
            solve_interval_chain(540, [], GEOMETRY_540)

    def test_non_increasing_offsets_raise(self) -> None:
        with pytest.raises(ValueError, match="strictly increasing"):
            solve_interval_chain(540, [3, 3, 5], GEOMETRY_540)

    def test_zero_offset_raises(self) -> None:
        with pytest.raises(ValueError, match="must be positive"):
            solve_interval_chain(540, [0, 2, 4], GEOMETRY_540)


class TestSolvePercentages:
    def test_nelson_zink_540(self) -> None:
        fractions = [0.785, 0.688, 0.603, 0.488, 0.427]
        assert solve_percentages(540, fractions) == [424, 372, 326, 264, 231]

    def test_whole_millimetres_are_ints(self) -> None:
        positions = solve_percentages(540, [0.5, 0.25])
        assert all(isinstance(p, int) for p in positions)

    def test_maker_offsets_rounded_half_up(self) -> None:
        fractions = [0.779, 0.679, 0.579, 0.479, 0.404]
        offsets = [0, -1, 0, -2.5, -2.5]
        assert solve_percentages(540, fractions, offsets) == [421, 366, 313, 257, 216]

    def test_decimals(self) -> None:
        assert solve_percentages(540, [0.5], [0.25], decimals=1) == [270.3]

    def test_offset_length_mismatch_raises(self) -> None:
        with pytest.raises(ValueError, match="offsets"):
            solve_percentages(540, [0.5, 0.4], [1.0])

    def test_non_positive_length_raises(self) -> None:
        with pytest.raises(FluteDomainError):
            solve_percentages(-1, [0.5])
