"""Tests for infrastructure/metrics.py — Prometheus counter recording.

Verifies that:
- record_flute_calculation() labels by style/strategy/status
- infeasible holes are counted per style
- error counts for unregistered style keys share one "unknown" series
- the latency histogram observes only when a latency is given
- record_metronome_schedule() counts per tempo mode
- get_metrics_response() renders the text exposition format
- LatencyTimer measures elapsed time

Counters are cumulative for the life of the process, so every assertion
compares the value before and after the call.
"""

from __future__ import annotations

import time

import pytest

from core.flute.calculator import calculate
from core.flute.types import EnvironmentalConditions, FluteGeometry
from infrastructure import metrics as metrics_module

ROOM = EnvironmentalConditions()


def _get_counter_value(counter, **labels) -> float:
    """Read current value of a labeled counter."""
    return counter.labels(**labels)._value.get()


def _get_histogram_sum(histogram, **labels) -> float:
    return histogram.labels(**labels)._sum.get()


def _series_count(metric) -> int:
    return sum(len(family.samples) for family in metric.collect())


class TestFluteCalculationMetrics:
    def test_ok_calculation(self) -> None:
        result = calculate(FluteGeometry(540, 19, 4, 10), ROOM, "nelson-zink")
        labels = {"style": "nelson-zink", "strategy": "percentage", "status": "ok"}
        before = _get_counter_value(metrics_module.flute_calculations_total, **labels)
        metrics_module.record_flute_calculation(result)
        after = _get_counter_value(metrics_module.flute_calculations_total, **labels)
        assert after == before + 1

    def test_infeasible_calculation(self) -> None:
        result = calculate(FluteGeometry(300, 100, 10, 5), ROOM, "diatonic")
        bad_holes = sum(1 for h in result.holes if h.error)
        assert bad_holes > 0

        labels = {"style": "diatonic", "strategy": "interval", "status": "infeasible"}
        before_calc = _get_counter_value(metrics_module.flute_calculations_total, **labels)
        before_holes = _get_counter_value(
            metrics_module.flute_infeasible_holes_total, style="diatonic"
        )
        metrics_module.record_flute_calculation(result)
        assert _get_counter_value(metrics_module.flute_calculations_total, **labels) == before_calc + 1
        assert (
            _get_counter_value(metrics_module.flute_infeasible_holes_total, style="diatonic")
            == before_holes + bad_holes
        )

    def test_latency_observed(self) -> None:
        result = calculate(FluteGeometry(540, 19, 4, 10), ROOM, "diatonic")
        hist = metrics_module.flute_calculation_latency_seconds
        before = _get_histogram_sum(hist, operation="unit-test")
        metrics_module.record_flute_calculation(result, latency_seconds=0.25, operation="unit-test")
        assert _get_histogram_sum(hist, operation="unit-test") == pytest.approx(before + 0.25)

    def test_error_counter_known_style(self) -> None:
        labels = {"style": "diatonic", "strategy": "interval", "status": "error"}
        before = _get_counter_value(metrics_module.flute_calculations_total, **labels)
        metrics_module.record_flute_error("diatonic", "interval")
        assert _get_counter_value(metrics_module.flute_calculations_total, **labels) == before + 1

    def test_unregistered_style_folds_into_unknown(self) -> None:
        labels = {"style": "unknown", "strategy": "unknown", "status": "error"}
        before = _get_counter_value(metrics_module.flute_calculations_total, **labels)
        metrics_module.record_flute_error("bogus", "percentage")
        assert _get_counter_value(metrics_module.flute_calculations_total, **labels) == before + 1

    def test_junk_style_keys_do_not_grow_series(self) -> None:
        metrics_module.record_flute_error("junk-seed")
        before = _series_count(metrics_module.flute_calculations_total)
        for i in range(50):
            metrics_module.record_flute_error(f"junk-{i}")
        assert _series_count(metrics_module.flute_calculations_total) == before


class TestMetronomeMetrics:
    def test_schedule_counter(self) -> None:
        counter = metrics_module.metronome_schedules_total
        before = _get_counter_value(counter, mode="steps")
        metrics_module.record_metronome_schedule("steps")
        metrics_module.record_metronome_schedule("steps")
        assert _get_counter_value(counter, mode="steps") == before + 2


class TestMetricsResponse:
    def test_exposition_format(self) -> None:
        metrics_module.record_metronome_schedule("constant")
        body, content_type = metrics_module.get_metrics_response()
        assert content_type.startswith("text/plain")
        assert b"metronome_schedules_total" in body
        assert b"flute_calculations_total" in body


class TestLatencyTimer:
    def test_elapsed_measured_correctly(self) -> None:
        with metrics_module.LatencyTimer() as t:
            time.sleep(0.02)
        assert t.elapsed >= 0.02
        assert t.elapsed < 1.0

    def test_elapsed_zero_before_use(self) -> None:
        assert metrics_module.LatencyTimer().elapsed == 0.0
