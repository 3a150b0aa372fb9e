"""
compare_hole_styles tool — one flute, every applicable tuning style.

Runs the calculator for each registered style whose length range admits the
flute and returns a compact side-by-side summary, so a maker can see how far
apart the recipes put each hole before drilling.
"""

import logging
from typing import Any

from core.flute.calculator import calculate_all_styles
from core.flute.types import STRATEGIES, CalculationResult
from infrastructure.metrics import LatencyTimer, record_flute_calculation
from tools.base import MusicalTool, ToolParameter, ToolResult
from tools.music.flute_inputs import (
    environment_from,
    environment_parameters,
    geometry_from,
    geometry_parameters,
)

logger = logging.getLogger(__name__)


def _summary(result: CalculationResult) -> dict[str, Any]:
    return {
        "style": result.style_key,
        "style_name": result.style_name,
        "strategy": result.strategy,
        "base_frequency_hz": result.base_frequency_hz,
        "base_note": result.base_note,
        "positions_mm": {h.label: h.position_mm for h in result.holes},
        "notes": {h.label: h.note_name for h in result.holes},
        "max_span_mm": max(result.spans.values(), default=0.0),
        "needs_alternates": bool(result.alternates),
        "has_errors": result.has_errors,
    }


class CompareHoleStyles(MusicalTool):
    """
    Compare hole layouts across tuning styles for one flute.

    Percentage styles share the calibrated fundamental, so their positions are
    directly comparable; interval styles are included unless a strategy
    filter excludes them.
    """

    @property
    def name(self) -> str:
        return "compare_hole_styles"

    @property
    def description(self) -> str:
        return (
            "Compare shakuhachi finger-hole layouts across every tuning style that "
            "accepts the given flute length. Returns per-style hole positions, note "
            "names, widest span and whether any hole is infeasible. "
            "Use when choosing between makers' proportions before drilling. "
            f"Optional strategy filter: {', '.join(sorted(STRATEGIES))}."
        )

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            *geometry_parameters(),
            ToolParameter(
                name="strategy",
                type=str,
                description="Restrict to 'interval' or 'percentage' styles. Default: all.",
                required=False,
                choices=tuple(sorted(STRATEGIES)),
            ),
            *environment_parameters(),
        ]

    def execute(self, **kwargs: Any) -> ToolResult:
        params = self.resolve(kwargs)
        geometry = geometry_from(params)
        environment = environment_from(params)

        with LatencyTimer() as timer:
            results = calculate_all_styles(geometry, environment, params["strategy"])
        if not results:
            return ToolResult(
                success=False,
                error=f"No tuning style accepts a {geometry.length_mm:g} mm flute",
            )

        per_call = timer.elapsed / len(results)
        for result in results:
            record_flute_calculation(result, latency_seconds=per_call, operation="compare")
        logger.debug("Compared %d styles for %g mm", len(results), geometry.length_mm)

        return ToolResult(
            success=True,
            data={
                "length_mm": geometry.length_mm,
                "length_class": results[0].length_class.text,
                "styles": [_summary(r) for r in results],
            },
            metadata={"style_count": len(results)},
        )
