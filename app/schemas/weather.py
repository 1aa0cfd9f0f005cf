from __future__ import annotations

import datetime as dt

from pydantic import BaseModel


class DailyForecast(BaseModel):
    date: dt.date
    temp_c: float
    rain_chance: float  # %
    wind_kmh: float
    humidity: float  # %
    condition: str  # Sunny | Cloudy | Rain | Storm | Snow


class DayOutlook(DailyForecast):
    score: int
    verdict: str  # perfect | check_ground | reschedule
    rain_delay_suggested: bool = False


class Outlook(BaseModel):
    available: bool
    city: str
    days: list[DayOutlook] = []
