"""Weather report model and client for the forecast.io (Dark Sky) API shape."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import aiohttp
from pydantic import BaseModel, ConfigDict, Field

from ..constants import FORECAST_BASE_URL, FORECAST_EXCLUDE
from ..errors.handling import handle_collaborator_error


class CurrentConditions(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    summary: str = ""
    icon: str = ""
    temperature: float = 0.0
    apparent_temperature: float = Field(default=0.0, alias="apparentTemperature")
    humidity: float = 0.0
    wind_bearing: float = Field(default=0.0, alias="windBearing")
    wind_speed: float = Field(default=0.0, alias="windSpeed")
    visibility: float = 0.0
    cloud_cover: float = Field(default=0.0, alias="cloudCover")
    precip_probability: float = Field(default=0.0, alias="precipProbability")
    pressure: float | None = None


class DailyData(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    sunrise_time: int | None = Field(default=None, alias="sunriseTime")
    sunset_time: int | None = Field(default=None, alias="sunsetTime")


class Daily(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    data: list[DailyData] = Field(default_factory=list)


class WeatherReport(BaseModel):
    """Read-only snapshot of one forecast response. Never cached."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    latitude: float
    longitude: float
    timezone: str = "UTC"
    currently: CurrentConditions
    daily: Daily = Field(default_factory=Daily)

    @property
    def zone(self) -> tzinfo:
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            return UTC

    def _local(self, epoch: int | None) -> datetime | None:
        if epoch is None:
            return None
        return datetime.fromtimestamp(epoch, tz=UTC).astimezone(self.zone)

    @property
    def sunrise(self) -> datetime | None:
        return self._local(self.daily.data[0].sunrise_time) if self.daily.data else None

    @property
    def sunset(self) -> datetime | None:
        return self._local(self.daily.data[0].sunset_time) if self.daily.data else None


class ForecastClient:
    """Fetches a WeatherReport for a coordinate pair."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        api_key: str,
        base_url: str = FORECAST_BASE_URL,
        exclude: str = FORECAST_EXCLUDE,
    ):
        if not session:
            raise ValueError("aiohttp session required")
        self._session = session
        self._api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.exclude = exclude

    async def fetch(self, latitude: float, longitude: float) -> WeatherReport:
        """Fetch the current report.

        Raises:
            CollaboratorError: On transport, HTTP, JSON or schema failures.
        """
        url = f"{self.base_url}/forecast/{self._api_key}/{latitude:.4f},{longitude:.4f}"
        logging.debug(f"🌦️ Fetching forecast for {latitude:.4f},{longitude:.4f}")

        async def operation() -> WeatherReport:
            async with self._session.get(url, params={"exclude": self.exclude}) as resp:
                resp.raise_for_status()
                payload = await resp.json(content_type=None)
                return WeatherReport.model_validate(payload)

        return await handle_collaborator_error(
            operation, f"forecast {latitude:.4f},{longitude:.4f}"
        )
