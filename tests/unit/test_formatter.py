"""
Unit tests for weather report formatting.
"""

from datetime import datetime
from zoneinfo import available_timezones

import pytest

from forecastbot.weather.forecast import WeatherReport
from forecastbot.weather.formatter import format_report, kitchen_time, percent
from forecastbot.weather.geocode import Location
from tests.fixtures.api_responses import FORECAST_CLEAR, FORECAST_NO_DAILY

OTTAWA = Location(45.4112, -75.7003, "Ottawa", "Ontario", "ON")


@pytest.mark.parametrize(
    "fraction,expected",
    [(0.0, 0), (0.5, 50), (0.876, 88), (0.004, 0), (1.0, 100)],
)
def test_percent(fraction, expected):
    assert percent(fraction) == expected


@pytest.mark.parametrize(
    "hour,minute,expected",
    [(0, 5, "12:05AM"), (9, 20, "9:20AM"), (12, 0, "12:00PM"), (22, 13, "10:13PM")],
)
def test_kitchen_time(hour, minute, expected):
    assert kitchen_time(datetime(2024, 1, 1, hour, minute)) == expected


class TestFormatReport:
    def test_report_without_daily_data_has_two_lines(self):
        report = WeatherReport.model_validate(FORECAST_NO_DAILY)
        lines = format_report(report, OTTAWA)

        assert lines == [
            "🌨️ Ottawa, ON: Light Snow, 28.50°F (feels like 20.00°F), 88% Humidity",
            "Wind 272° at 12.25 mph, Visibility 3.50 mi, 25% Cloud Cover, 0% Chance of Precipitation",
        ]

    def test_reported_pressure_is_rendered(self):
        report = WeatherReport.model_validate(FORECAST_CLEAR)

        assert format_report(report, OTTAWA)[1] == (
            "Wind 180° at 5.00 mph, Visibility 10.00 mi, Pressure 1015.20 mbar, "
            "20% Cloud Cover, 10% Chance of Precipitation"
        )

    def test_nick_prefix_applies_to_every_line(self):
        report = WeatherReport.model_validate(FORECAST_CLEAR)
        lines = format_report(report, OTTAWA, "bob")

        assert len(lines) == 3
        assert all(line.startswith("bob: ") for line in lines)

    def test_unknown_icon_has_no_glyph(self):
        payload = {**FORECAST_NO_DAILY, "currently": {**FORECAST_NO_DAILY["currently"], "icon": "meteor"}}
        report = WeatherReport.model_validate(payload)

        assert format_report(report, OTTAWA)[0].startswith("Ottawa, ON: Light Snow")

    def test_label_falls_back_to_state_name(self):
        location = Location(1.0, 2.0, "Somewhere", "Nowhere", "")
        report = WeatherReport.model_validate(FORECAST_NO_DAILY)

        assert "Somewhere, Nowhere: " in format_report(report, location)[0]

    @pytest.mark.skipif(
        "America/Los_Angeles" not in available_timezones(), reason="tz database not installed"
    )
    def test_sun_times_use_report_timezone(self):
        payload = {**FORECAST_CLEAR, "timezone": "America/Los_Angeles"}
        report = WeatherReport.model_validate(payload)

        # 22:13 UTC is 14:13 PST; 09:20 UTC is 01:20 PST
        assert format_report(report, OTTAWA)[2] == "Sunrise 2:13PM, Sunset 1:20AM"

    def test_unknown_timezone_falls_back_to_utc(self):
        report = WeatherReport.model_validate(FORECAST_CLEAR)

        assert report.sunrise.utcoffset().total_seconds() == 0
        assert format_report(report, OTTAWA)[2] == "Sunrise 10:13PM, Sunset 9:20AM"
