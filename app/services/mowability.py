"""Mowability score: how suitable a forecast day is for mowing, 0..100."""

from __future__ import annotations

import math
from dataclasses import dataclass

from app.schemas.business_settings import BusinessSettings

HUMIDITY_LIMIT = 90.0
HUMIDITY_PENALTY = 10.0
RAIN_FLAT_PENALTY = 80.0
RAIN_WEIGHT = 0.8
WIND_WEIGHT = 2.0
COLD_WEIGHT = 5.0
HEAT_WEIGHT = 3.0


@dataclass(frozen=True)
class MowabilityThresholds:
    max_rain_chance: float = 70
    max_wind_kmh: float = 30
    min_temp_c: float = 5
    max_temp_c: float = 30

    @classmethod
    def from_settings(cls, settings: BusinessSettings) -> "MowabilityThresholds":
        return cls(
            max_rain_chance=settings.max_rain_chance,
            max_wind_kmh=settings.max_wind_kmh,
            min_temp_c=settings.min_temp_c,
            max_temp_c=settings.max_temp_c,
        )


def score(forecast, thresholds: MowabilityThresholds) -> int:
    """Score a daily forecast sample.

    `forecast` needs `rain_chance`, `wind_kmh`, `temp_c` and `humidity`.
    Penalties are additive; the result is clamped once, then rounded.
    """
    total = 100.0

    if forecast.rain_chance > thresholds.max_rain_chance:
        total -= RAIN_FLAT_PENALTY
    else:
        total -= forecast.rain_chance * RAIN_WEIGHT

    if forecast.wind_kmh > thresholds.max_wind_kmh:
        total -= (forecast.wind_kmh - thresholds.max_wind_kmh) * WIND_WEIGHT

    if forecast.temp_c < thresholds.min_temp_c:
        total -= (thresholds.min_temp_c - forecast.temp_c) * COLD_WEIGHT
    if forecast.temp_c > thresholds.max_temp_c:
        total -= (forecast.temp_c - thresholds.max_temp_c) * HEAT_WEIGHT

    if forecast.humidity > HUMIDITY_LIMIT:
        total -= HUMIDITY_PENALTY

    clamped = min(100.0, max(0.0, total))
    return int(math.floor(clamped + 0.5))


def verdict(value: int) -> str:
    if value > 80:
        return "perfect"
    if value > 50:
        return "check_ground"
    return "reschedule"


def suggests_rain_delay(value: int) -> bool:
    return verdict(value) == "reschedule"
