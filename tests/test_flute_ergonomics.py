"""
Tests for core/flute/ergonomics.py — spans and reach-limit alternates.
"""

import pytest

from core.config import SolverCalibration
from core.flute.ergonomics import check_spans, span_key


class TestSpans:
    def test_span_keys_follow_playing_order(self) -> None:
        report = check_spans([231, 268, 285, 326, 372, 427, 455], 60)
        assert report.spans == {
            "7-6": 37,
            "6-5": 17,
            "5-4": 41,
            "4-3": 46,
            "3-2": 55,
            "2-1": 28,
        }

    def test_spans_rounded_to_tenths(self) -> None:
        report = check_spans([0.0, 10.26], 60, thumb_first=False)
        assert report.spans["2-1"] == pytest.approx(10.3)

    def test_span_key(self) -> None:
        assert span_key(5, 4) == "5-4"

    def test_single_hole_has_no_spans(self) -> None:
        report = check_spans([300], 60)
        assert report.spans == {}
        assert report.alternates == {}


class TestAlternates:
    def test_no_violation_means_no_alternates(self) -> None:
        report = check_spans([231, 268, 285, 326, 372, 427, 455], 60)
        assert report.alternates == {}
        assert not report.has_violations

    def test_front_span_of_limit_plus_one(self) -> None:
        report = check_spans([230, 260, 300, 361, 400], 60)
        assert report.alternates == {2: 360}

    def test_span_equal_to_limit_is_accepted(self) -> None:
        report = check_spans([230, 260, 300, 360, 400], 60)
        assert report.alternates == {}

    def test_thumb_uses_two_thirds_limit(self) -> None:
        report = check_spans([200, 241, 280, 320, 360], 60)
        assert report.alternates == {5: 201}

    def test_thumb_alternate_rounds_reach(self) -> None:
        # 50 * 2/3 = 33.33 → 33
        report = check_spans([100, 140], 50)
        assert report.alternates == {2: 107}

    def test_thumb_first_false_uses_full_limit(self) -> None:
        assert check_spans([200, 250], 60, thumb_first=False).alternates == {}
        assert check_spans([200, 250], 60, thumb_first=True).alternates == {2: 210}

    def test_direction_follows_neighbour(self) -> None:
        report = check_spans([400, 339], 60, thumb_first=False)
        assert report.alternates == {1: 340}

    def test_nelson_zink_540_wide_middle_span(self) -> None:
        report = check_spans([231, 264, 326, 372, 424], 60)
        assert report.spans["4-3"] == 62
        assert report.alternates == {3: 324}

    def test_custom_hole_numbers(self) -> None:
        report = check_spans([100, 200], 60, hole_numbers=[9, 8], thumb_first=False)
        assert report.spans == {"9-8": 100}
        assert report.alternates == {8: 160}

    def test_custom_thumb_fraction(self) -> None:
        calibration = SolverCalibration(thumb_reach_fraction=0.5)
        report = check_spans([200, 235], 60, calibration=calibration)
        assert report.alternates == {2: 205}


class TestValidation:
    def test_non_positive_limit_raises(self) -> None:
        with pytest.raises(ValueError, match="ergonomic_limit_mm must be positive"):
            check_spans([1, 2], 0)

    def test_hole_number_mismatch_raises(self) -> None:
        with pytest.raises(ValueError, match="hole numbers"):
            check_spans([1, 2, 3], 60, hole_numbers=[2, 1])
