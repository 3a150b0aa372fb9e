"""Prometheus metrics for the shakuhachi workshop service.

Labels carry the musical context (tuning style, strategy, tempo mode) so
dashboards show which recipes makers actually use, not just HTTP stats.

Metrics:
    flute_calculations_total         Counter by style, strategy and status (ok/infeasible/error)
    flute_infeasible_holes_total     Holes that fell outside the tube, by style
    flute_calculation_latency_seconds  Histogram of calculate() wall time, by operation
    metronome_schedules_total        Counter of compiled schedules by tempo mode

Usage::

    from infrastructure.metrics import LatencyTimer, record_flute_calculation

    with LatencyTimer() as t:
        result = calculate(geometry, environment, style)
    record_flute_calculation(result, latency_seconds=t.elapsed)
"""

from __future__ import annotations

import logging
import time

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

from core.flute.styles import all_styles
from core.flute.types import CalculationResult

logger = logging.getLogger(__name__)

REGISTRY = CollectorRegistry()

UNKNOWN_LABEL = "unknown"

flute_calculations_total = Counter(
    "flute_calculations_total",
    "Hole-position calculations by style, strategy and status",
    ["style", "strategy", "status"],
    registry=REGISTRY,
)

flute_infeasible_holes_total = Counter(
    "flute_infeasible_holes_total",
    "Holes whose computed position fell outside the tube",
    ["style"],
    registry=REGISTRY,
)

flute_calculation_latency_seconds = Histogram(
    "flute_calculation_latency_seconds",
    "Wall time of solver operations in seconds",
    ["operation"],
    buckets=[0.0005, 0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1, 0.5],
    registry=REGISTRY,
)

metronome_schedules_total = Counter(
    "metronome_schedules_total",
    "Compiled metronome schedules by tempo mode",
    ["mode"],
    registry=REGISTRY,
)


# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------


def record_flute_calculation(
    result: CalculationResult,
    *,
    latency_seconds: float | None = None,
    operation: str = "calculate",
) -> None:
    """Record a completed calculation.

    Args:
        result: Output of calculate().
        latency_seconds: Wall time of the call, if measured.
        operation: Histogram label, e.g. "calculate" or "compare".
    """
    infeasible = sum(1 for h in result.holes if h.error)
    status = "infeasible" if infeasible else "ok"
    flute_calculations_total.labels(
        style=result.style_key, strategy=result.strategy, status=status
    ).inc()
    if infeasible:
        flute_infeasible_holes_total.labels(style=result.style_key).inc(infeasible)
    if latency_seconds is not None:
        flute_calculation_latency_seconds.labels(operation=operation).observe(latency_seconds)


def record_flute_error(style: str, strategy: str = UNKNOWN_LABEL) -> None:
    """Record a calculation rejected with a domain error.

    Keys outside the style registry are folded into ``UNKNOWN_LABEL`` so
    request input never creates new series.
    """
    if style not in all_styles():
        style, strategy = UNKNOWN_LABEL, UNKNOWN_LABEL
    flute_calculations_total.labels(style=style, strategy=strategy, status="error").inc()


def record_metronome_schedule(mode: str) -> None:
    """Increment the schedule counter for a tempo mode."""
    metronome_schedules_total.labels(mode=mode).inc()


def get_metrics_response() -> tuple[bytes, str]:
    """Generate Prometheus text exposition format.

    Returns:
        Tuple of (body_bytes, content_type_string).
    """
    return generate_latest(REGISTRY), CONTENT_TYPE_LATEST


class LatencyTimer:
    """Context manager for measuring latency.

    Usage::

        with LatencyTimer() as t:
            result = calculate(geometry)
        record_flute_calculation(result, latency_seconds=t.elapsed)
    """

    def __init__(self) -> None:
        self._start: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> LatencyTimer:
        self._start = time.perf_counter()
        return self

    def __exit__(self, *_: object) -> None:
        self.elapsed = time.perf_counter() - self._start
