"""Human-readable rendering of a WeatherReport."""

from __future__ import annotations

from datetime import datetime

from .forecast import WeatherReport
from .geocode import Location

ICON_GLYPHS = {
    "clear-day": "☀️",
    "clear-night": "🌙",
    "rain": "🌧️",
    "snow": "🌨️",
    "sleet": "🌨️",
    "wind": "💨",
    "fog": "🌫️",
    "cloudy": "☁️",
    "partly-cloudy-day": "⛅",
    "partly-cloudy-night": "☁️",
    "hail": "🌨️",
    "thunderstorm": "⛈️",
    "tornado": "🌪️",
}

TEMP_UNITS = "°F"
WIND_UNITS = "mph"
VISIBILITY_UNITS = "mi"
PRESSURE_UNITS = "mbar"


def percent(fraction: float) -> int:
    """Scale a 0-1 fraction to an integer percentage."""
    return int(round(fraction * 100))


def kitchen_time(moment: datetime) -> str:
    """Format like ``3:04PM``."""
    return moment.strftime("%I:%M%p").lstrip("0")


def format_report(report: WeatherReport, location: Location, nick: str | None = None) -> list[str]:
    """Render reply lines for ``report``; each line is sent as its own message.

    When ``nick`` is given every line is prefixed with ``"<nick>: "``.
    """
    now = report.currently
    glyph = ICON_GLYPHS.get(now.icon)
    headline = (
        f"{location.label}: {now.summary}, "
        f"{now.temperature:.2f}{TEMP_UNITS} (feels like {now.apparent_temperature:.2f}{TEMP_UNITS}), "
        f"{percent(now.humidity)}% Humidity"
    )
    if glyph:
        headline = f"{glyph} {headline}"

    conditions = [
        f"Wind {int(round(now.wind_bearing))}° at {now.wind_speed:.2f} {WIND_UNITS}",
        f"Visibility {now.visibility:.2f} {VISIBILITY_UNITS}",
    ]
    # Not every station reports pressure.
    if now.pressure is not None:
        conditions.append(f"Pressure {now.pressure:.2f} {PRESSURE_UNITS}")
    conditions += [
        f"{percent(now.cloud_cover)}% Cloud Cover",
        f"{percent(now.precip_probability)}% Chance of Precipitation",
    ]
    lines = [headline, ", ".join(conditions)]

    sunrise, sunset = report.sunrise, report.sunset
    if sunrise and sunset:
        lines.append(f"Sunrise {kitchen_time(sunrise)}, Sunset {kitchen_time(sunset)}")

    if nick:
        lines = [f"{nick}: {line}" for line in lines]
    return lines
