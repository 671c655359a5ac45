"""Weather collaborators: postal code matching, geocoding, forecasts, formatting."""

from .forecast import CurrentConditions, ForecastClient, WeatherReport
from .formatter import format_report
from .geocode import GeocodeClient, Location
from .postal import PostalCode, match_postal_code

__all__ = [
    "CurrentConditions",
    "ForecastClient",
    "GeocodeClient",
    "Location",
    "PostalCode",
    "WeatherReport",
    "format_report",
    "match_postal_code",
]
