"""
Tests for core/flute/resonance.py — open-cylinder modes and hole perturbations.
"""

import pytest

from core.flute.resonance import effective_length_m, hole_perturbations, resonance_modes
from core.flute.types import EnvironmentalConditions, FluteDomainError, FluteGeometry

GEOMETRY = FluteGeometry(length_mm=540, bore_diameter_mm=19, wall_thickness_mm=4, hole_diameter_mm=10)
ROOM = EnvironmentalConditions(temperature_c=20.0, relative_humidity=50.0)
HOLES = [231, 264, 326, 372, 424]


class TestResonanceModes:
    def test_effective_length(self) -> None:
        # 0.540 + 0.61 * 0.019 + 0.3 * 0.004
        assert effective_length_m(GEOMETRY) == pytest.approx(0.55279)

    def test_fundamental_and_harmonics(self) -> None:
        modes = resonance_modes(GEOMETRY, ROOM)
        assert len(modes) == 5
        assert modes[0].frequency_hz == pytest.approx(311.1173, abs=1e-3)
        for mode in modes:
            assert mode.frequency_hz == pytest.approx(mode.number * modes[0].frequency_hz)

    def test_wavelength(self) -> None:
        mode = resonance_modes(GEOMETRY, ROOM, mode_count=1)[0]
        assert mode.wavelength_m == pytest.approx(2 * 0.55279)

    def test_node_layout(self) -> None:
        mode2 = resonance_modes(GEOMETRY, ROOM, mode_count=2)[1]
        assert [n.position_mm for n in mode2.nodes] == pytest.approx([0.0, 276.395, 552.79])
        assert [a.position_mm for a in mode2.antinodes] == pytest.approx([138.1975, 414.5925])
        assert all(n.kind == "pressure" and n.amplitude == 0.0 for n in mode2.nodes)
        assert all(a.kind == "velocity" and a.amplitude == 1.0 for a in mode2.antinodes)

    def test_quality_factor_without_holes(self) -> None:
        assert resonance_modes(GEOMETRY, ROOM)[0].quality_factor == 50.0

    def test_quality_factor_with_holes(self) -> None:
        mode = resonance_modes(GEOMETRY, ROOM, HOLES)[0]
        assert mode.quality_factor == pytest.approx(49.9972, abs=1e-4)

    def test_bad_mode_count_raises(self) -> None:
        with pytest.raises(ValueError, match="mode_count"):
            resonance_modes(GEOMETRY, ROOM, mode_count=0)

    def test_non_positive_hole_raises(self) -> None:
        with pytest.raises(FluteDomainError):
            resonance_modes(GEOMETRY, ROOM, [0.0])

    def test_diameter_mismatch_raises(self) -> None:
        with pytest.raises(ValueError, match="hole diameters"):
            resonance_modes(GEOMETRY, ROOM, HOLES, hole_diameters=[10.0])


class TestHolePerturbations:
    def test_fundamental_shifts_are_small(self) -> None:
        mode = resonance_modes(GEOMETRY, ROOM, HOLES, mode_count=1)[0]
        perturbations = hole_perturbations(mode, HOLES, [10.0] * 5, 19.0)
        first = perturbations[0]
        assert first.hole_index == 1
        assert first.node_distance_mm == pytest.approx(231.0)
        assert first.cents_shift == pytest.approx(1.9888, abs=1e-3)
        assert first.influence == pytest.approx(0.011494, abs=1e-5)
        assert all(p.suggested_movement_mm == 0.0 for p in perturbations)

    def test_hole_near_node_gets_movement(self) -> None:
        mode2 = resonance_modes(GEOMETRY, ROOM, HOLES, mode_count=2)[1]
        perturbations = hole_perturbations(mode2, HOLES, [10.0] * 5, 19.0)
        assert perturbations[1].node_distance_mm == pytest.approx(12.395)
        assert perturbations[1].cents_shift == pytest.approx(21.2826, abs=1e-3)
        assert perturbations[1].suggested_movement_mm == 2.1
        assert perturbations[0].suggested_movement_mm == 0.9
        assert perturbations[3].suggested_movement_mm == 0.0

    def test_mismatch_raises(self) -> None:
        mode = resonance_modes(GEOMETRY, ROOM, mode_count=1)[0]
        with pytest.raises(ValueError):
            hole_perturbations(mode, HOLES, [10.0], 19.0)

    def test_zero_bore_raises(self) -> None:
        mode = resonance_modes(GEOMETRY, ROOM, mode_count=1)[0]
        with pytest.raises(FluteDomainError):
            hole_perturbations(mode, HOLES, [10.0] * 5, 0.0)
