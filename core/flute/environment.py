"""
core/flute/environment.py — Speed of sound from air temperature and humidity.

Two models are available:

    SpeedModel.HUMID   canonical. Dry-air speed scaled by the molar mass of
                       humid air (Tetens saturation pressure). Used by every
                       calculator.
    SpeedModel.LINEAR  low-fidelity legacy fit, 343 + 0.6·(t−20) + 1.5·RH/100.
                       Only returned when a caller asks for it by name; it
                       disagrees with the humid model by several m/s at room
                       conditions.

Both reject input outside −10..50 °C and 0..100 % RH with FluteDomainError.
"""

from __future__ import annotations

import math
from enum import Enum

from core.flute.types import (
    HUMIDITY_RANGE_PCT,
    TEMPERATURE_RANGE_C,
    EnvironmentalConditions,
    FluteDomainError,
)

KELVIN_OFFSET: float = 273.15
DRY_AIR_SPEED_0C: float = 331.3  # m/s at 0 °C
DRY_AIR_MOLAR_MASS: float = 0.028964  # kg/mol
WATER_VAPOR_MOLAR_MASS: float = 0.018016  # kg/mol
ATMOSPHERIC_PRESSURE_PA: float = 101325.0

# Tetens approximation coefficients
TETENS_P0_PA: float = 611.2
TETENS_A: float = 17.67
TETENS_B_C: float = 243.5


class SpeedModel(str, Enum):
    """Speed-of-sound model selector."""

    HUMID = "humid"
    LINEAR = "linear"


def _check_domain(temperature_c: float, relative_humidity: float) -> None:
    lo, hi = TEMPERATURE_RANGE_C
    if not (lo <= temperature_c <= hi):
        raise FluteDomainError(f"temperature {temperature_c} °C outside [{lo}, {hi}]")
    lo, hi = HUMIDITY_RANGE_PCT
    if not (lo <= relative_humidity <= hi):
        raise FluteDomainError(f"relative humidity {relative_humidity} % outside [{lo}, {hi}]")


def saturation_vapor_pressure(temperature_c: float) -> float:
    """Tetens approximation of saturation vapour pressure in pascals."""
    return TETENS_P0_PA * math.exp(TETENS_A * temperature_c / (temperature_c + TETENS_B_C))


def speed_of_sound(temperature_c: float, relative_humidity: float) -> float:
    """Speed of sound in humid air, m/s.

    Args:
        temperature_c:     Air temperature in °C, within [-10, 50].
        relative_humidity: Relative humidity in percent, within [0, 100].

    Returns:
        Speed of sound in m/s. 331.3 at 0 °C / 0 %, about 343.97 at
        20 °C / 50 %.

    Raises:
        FluteDomainError: If either input is outside its domain.
    """
    _check_domain(temperature_c, relative_humidity)
    kelvin = temperature_c + KELVIN_OFFSET
    dry = DRY_AIR_SPEED_0C * math.sqrt(kelvin / KELVIN_OFFSET)

    vapor_pressure = (relative_humidity / 100.0) * saturation_vapor_pressure(temperature_c)
    mole_fraction = vapor_pressure / ATMOSPHERIC_PRESSURE_PA
    molar_mass = DRY_AIR_MOLAR_MASS * (1.0 - mole_fraction) + WATER_VAPOR_MOLAR_MASS * mole_fraction

    return dry * math.sqrt(DRY_AIR_MOLAR_MASS / molar_mass)


def speed_of_sound_linear(temperature_c: float, relative_humidity: float) -> float:
    """Low-fidelity linear speed of sound, m/s. Not used by the calculators."""
    _check_domain(temperature_c, relative_humidity)
    return 343.0 + 0.6 * (temperature_c - 20.0) + relative_humidity * 1.5 / 100.0


def speed_for(
    environment: EnvironmentalConditions,
    model: SpeedModel = SpeedModel.HUMID,
) -> float:
    """Speed of sound for an EnvironmentalConditions under the chosen model."""
    if model is SpeedModel.LINEAR:
        return speed_of_sound_linear(environment.temperature_c, environment.relative_humidity)
    return speed_of_sound(environment.temperature_c, environment.relative_humidity)
