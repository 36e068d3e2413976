from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx

from core.models import DailyForecast, Location, WeatherSnapshot
from settings import get_settings

_CURRENT_FIELDS = "temperature_2m,relative_humidity_2m,precipitation,wind_speed_10m,weather_code"
_DAILY_FIELDS = "weather_code,precipitation_sum,precipitation_probability_max"


class WeatherFetchError(RuntimeError):
    """The forecast provider could not be reached or returned an unusable payload."""


class WeatherClient:
    """Minimal HTTP client for the Open-Meteo forecast endpoint."""

    def __init__(
        self,
        base_url: str,
        timezone: str = "Asia/Manila",
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._base_url = base_url
        self._timezone = timezone
        self._client = httpx.Client(timeout=timeout, transport=transport)

    def close(self) -> None:
        self._client.close()

    def fetch(self, location: Location) -> WeatherSnapshot:
        params = {
            "latitude": location.lat,
            "longitude": location.lon,
            "current": _CURRENT_FIELDS,
            "daily": _DAILY_FIELDS,
            "timezone": self._timezone,
            "forecast_days": 7,
        }
        try:
            response = self._client.get(self._base_url, params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as exc:
            raise WeatherFetchError(f"Weather request failed: {exc}") from exc
        except ValueError as exc:
            raise WeatherFetchError("Weather response was not valid JSON.") from exc

        return self.parse_forecast(payload)

    @staticmethod
    def parse_forecast(payload: Dict[str, Any]) -> WeatherSnapshot:
        current = payload.get("current") if isinstance(payload, dict) else None
        if not isinstance(current, dict):
            raise WeatherFetchError("Weather response is missing current conditions.")

        daily = payload.get("daily") or {}
        if not isinstance(daily, dict):
            raise WeatherFetchError("Weather response has a malformed daily forecast.")

        try:
            return WeatherSnapshot(
                temperature=current["temperature_2m"],
                humidity=current["relative_humidity_2m"],
                precipitation=current.get("precipitation") or 0.0,
                wind_speed=current.get("wind_speed_10m") or 0.0,
                weather_code=current.get("weather_code") or 0,
                daily_forecast=WeatherClient._parse_daily(daily),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise WeatherFetchError(f"Malformed weather payload: {exc}") from exc

    @staticmethod
    def _parse_daily(daily: Dict[str, Any]) -> List[DailyForecast]:
        days = daily.get("time") or []
        codes = daily.get("weather_code") or []
        sums = daily.get("precipitation_sum") or []
        probabilities = daily.get("precipitation_probability_max") or []

        forecast: List[DailyForecast] = []
        for index, day in enumerate(days):
            forecast.append(
                DailyForecast(
                    date=day,
                    weather_code=codes[index] if index < len(codes) and codes[index] is not None else 0,
                    precipitation_sum=sums[index] if index < len(sums) and sums[index] is not None else 0.0,
                    precipitation_probability=probabilities[index] if index < len(probabilities) else None,
                )
            )
        return forecast


def build_default_weather_client() -> WeatherClient:
    settings = get_settings()
    return WeatherClient(
        base_url=settings.weather_api_url,
        timezone=settings.weather_timezone,
        timeout=settings.weather_timeout,
    )
