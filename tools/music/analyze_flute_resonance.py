"""
analyze_flute_resonance tool — standing-wave view of the bore.

Returns the first harmonics of the open tube with their pressure nodes and
velocity antinodes. When a tuning style is given, the style's holes are
computed first and their pull on the fundamental is estimated, with a
suggested correction in mm for holes that detune it by more than 5 cents.
"""

import logging
from dataclasses import asdict
from typing import Any

from core.flute.calculator import calculate
from core.flute.resonance import hole_perturbations, resonance_modes
from tools.base import MusicalTool, ToolParameter, ToolResult
from tools.music.flute_inputs import (
    environment_from,
    environment_parameters,
    geometry_from,
    geometry_parameters,
)

logger = logging.getLogger(__name__)

MAX_MODES = 10


class AnalyzeFluteResonance(MusicalTool):
    """Harmonics, node map and per-hole perturbation for one flute."""

    @property
    def name(self) -> str:
        return "analyze_flute_resonance"

    @property
    def description(self) -> str:
        return (
            "Analyze the acoustic resonances of a shakuhachi bore: harmonic "
            "frequencies, wavelengths, pressure-node and antinode positions (mm from "
            "the blowing end) and quality factor. With a tuning style, also estimates "
            "how each open finger hole shifts the fundamental and suggests how far to "
            "move it."
        )

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            *geometry_parameters(),
            ToolParameter(
                name="mode_count",
                type=int,
                description=f"Number of harmonics to report (1-{MAX_MODES}). Default: 5.",
                required=False,
                default=5,
                min_value=1,
                max_value=MAX_MODES,
            ),
            ToolParameter(
                name="style",
                type=str,
                description="Optional tuning style whose holes are analyzed as open.",
                required=False,
                default="",
            ),
            *environment_parameters(),
        ]

    def execute(self, **kwargs: Any) -> ToolResult:
        params = self.resolve(kwargs)
        geometry = geometry_from(params)
        environment = environment_from(params)
        style_key: str = params["style"].strip()

        positions: list[float] = []
        skipped: list[str] = []
        if style_key:
            result = calculate(geometry, environment, style_key)
            for hole in result.holes:
                if hole.error or hole.position_mm <= 0:
                    skipped.append(hole.label)
                else:
                    positions.append(hole.position_mm)

        modes = resonance_modes(geometry, environment, positions, mode_count=params["mode_count"])

        data: dict[str, Any] = {
            "length_mm": geometry.length_mm,
            "modes": [m.to_dict() for m in modes],
        }
        if style_key:
            diameters = [geometry.hole_diameter_mm] * len(positions)
            perturbations = hole_perturbations(
                modes[0], positions, diameters, geometry.bore_diameter_mm
            )
            data["style"] = style_key.lower()
            data["perturbations"] = [asdict(p) for p in perturbations]
            if skipped:
                logger.info("Skipped infeasible holes %s for %s", skipped, style_key)

        return ToolResult(success=True, data=data, metadata={"skipped_holes": skipped})
