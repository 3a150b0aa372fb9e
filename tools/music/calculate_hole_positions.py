"""
calculate_hole_positions tool — finger-hole layout for one shakuhachi.

Pure computation: no I/O.
Given the tube geometry, air conditions and a tuning style, returns:
  - Hole positions in mm from the blowing end (thumb hole first)
  - Sounding pitch and note name per hole
  - Spans between adjacent holes and ergonomic alternates
  - Fundamental, traditional length class and aspect ratio
"""

import logging
from typing import Any

from core.flute.calculator import calculate, validate_inputs
from core.flute.styles import available_styles, get_style
from infrastructure.metrics import LatencyTimer, record_flute_calculation, record_flute_error
from tools.base import MusicalTool, ToolParameter, ToolResult
from tools.music.flute_inputs import (
    environment_from,
    environment_parameters,
    geometry_from,
    geometry_parameters,
)

logger = logging.getLogger(__name__)

DEFAULT_STYLE = "nelson-zink"


class CalculateHolePositions(MusicalTool):
    """
    Compute where to drill the finger holes of a shakuhachi.

    Interval styles place each hole at a target pitch; percentage styles
    place holes at fixed fractions of the length and report the pitch that
    results. Holes that fall outside the tube are flagged, not dropped.
    """

    @property
    def name(self) -> str:
        return "calculate_hole_positions"

    @property
    def description(self) -> str:
        return (
            "Compute finger-hole positions (mm from the blowing end) for a shakuhachi "
            "of a given length, bore, wall thickness and hole diameter. "
            "Returns each hole's position, pitch and note name, the spans between "
            "adjacent holes, ergonomic alternates for spans that are too wide, "
            "the fundamental note and the traditional shaku/sun length class. "
            f"Tuning styles: {', '.join(available_styles())}."
        )

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            *geometry_parameters(),
            ToolParameter(
                name="style",
                type=str,
                description=f"Tuning style key. Default: '{DEFAULT_STYLE}'.",
                required=False,
                default=DEFAULT_STYLE,
            ),
            *environment_parameters(),
        ]

    def execute(self, **kwargs: Any) -> ToolResult:
        params = self.resolve(kwargs)
        style_key: str = params["style"].strip().lower()

        geometry = geometry_from(params)
        environment = environment_from(params)
        try:
            style = get_style(style_key)
        except ValueError:
            record_flute_error(style_key)
            raise

        errors = validate_inputs(geometry, environment, style)
        if errors:
            record_flute_error(style.key, style.strategy)
            return ToolResult(success=False, error="; ".join(errors))

        with LatencyTimer() as timer:
            result = calculate(geometry, environment, style)
        record_flute_calculation(result, latency_seconds=timer.elapsed)

        warnings = [
            f"Hole {h.label} at {h.position_mm:g} mm lies outside the tube"
            for h in result.holes
            if h.error
        ]
        warnings += [
            f"Hole {number} is beyond comfortable reach; alternate position {position:g} mm"
            for number, position in sorted(result.alternates.items())
        ]
        if warnings:
            logger.info("%s on %g mm flute: %d warnings", style.key, geometry.length_mm, len(warnings))

        return ToolResult(
            success=True,
            data=result.to_dict(),
            metadata={"warnings": warnings, "latency_ms": round(timer.elapsed * 1000, 3)},
        )
