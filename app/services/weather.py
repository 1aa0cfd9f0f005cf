"""Forecast provider (Open-Meteo) and the per-day mowability outlook."""

from __future__ import annotations

import logging
from datetime import date

import httpx

from app.config import WeatherConfig
from app.errors import ExternalServiceUnavailable
from app.schemas.weather import DailyForecast, DayOutlook, Outlook
from app.services.mowability import MowabilityThresholds, score, suggests_rain_delay, verdict

logger = logging.getLogger(__name__)

_DAILY_FIELDS = (
    "temperature_2m_max",
    "precipitation_probability_max",
    "wind_speed_10m_max",
    "relative_humidity_2m_mean",
    "weather_code",
)


def condition_label(code: int | None) -> str:
    """Collapse WMO weather codes into the labels the dashboard shows."""
    if code is None or code <= 1:
        return "Sunny"
    if code >= 95:
        return "Storm"
    if 71 <= code <= 77 or code in (85, 86):
        return "Snow"
    if 51 <= code <= 67 or 80 <= code <= 82:
        return "Rain"
    return "Cloudy"


class OpenMeteoProvider:
    """Geocodes a city name and fetches its daily forecast."""

    def __init__(self, config: WeatherConfig, transport: httpx.AsyncBaseTransport | None = None):
        self.config = config
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.config.timeout_seconds, transport=self._transport)

    async def _locate(self, client: httpx.AsyncClient, city: str) -> tuple[float, float]:
        resp = await client.get(self.config.geocoding_url, params={"name": city, "count": 1})
        resp.raise_for_status()
        results = resp.json().get("results") or []
        if not results:
            raise ExternalServiceUnavailable(f"Unknown city: {city}")
        return results[0]["latitude"], results[0]["longitude"]

    async def forecast(self, city: str) -> list[DailyForecast]:
        try:
            async with self._client() as client:
                lat, lon = await self._locate(client, city)
                resp = await client.get(self.config.forecast_url, params={
                    "latitude": lat,
                    "longitude": lon,
                    "daily": ",".join(_DAILY_FIELDS),
                    "timezone": "auto",
                    "forecast_days": self.config.forecast_days,
                })
                resp.raise_for_status()
                daily = resp.json()["daily"]
        except httpx.HTTPError as e:
            raise ExternalServiceUnavailable(f"Weather request failed: {e}") from e
        except (KeyError, ValueError) as e:
            raise ExternalServiceUnavailable(f"Unexpected weather response: {e}") from e

        days = []
        for i, day in enumerate(daily.get("time", [])):
            def pick(field: str) -> float:
                values = daily.get(field) or []
                return float(values[i] or 0) if i < len(values) else 0.0

            codes = daily.get("weather_code") or []
            days.append(DailyForecast(
                date=date.fromisoformat(day),
                temp_c=pick("temperature_2m_max"),
                rain_chance=pick("precipitation_probability_max"),
                wind_kmh=pick("wind_speed_10m_max"),
                humidity=pick("relative_humidity_2m_mean"),
                condition=condition_label(codes[i] if i < len(codes) else None),
            ))
        return days


class ForecastService:
    def __init__(self, provider: OpenMeteoProvider, default_city: str):
        self.provider = provider
        self.default_city = default_city

    async def outlook(self, thresholds: MowabilityThresholds, city: str | None = None) -> Outlook:
        """Score each forecast day. Never raises: no forecast means `available=False`."""
        city = city or self.default_city
        try:
            days = await self.provider.forecast(city)
        except ExternalServiceUnavailable as e:
            logger.warning("Forecast unavailable for %s: %s", city, e)
            return Outlook(available=False, city=city)

        scored = []
        for day in days:
            value = score(day, thresholds)
            scored.append(DayOutlook(
                **day.model_dump(),
                score=value,
                verdict=verdict(value),
                rain_delay_suggested=suggests_rain_delay(value),
            ))
        return Outlook(available=bool(scored), city=city, days=scored)
