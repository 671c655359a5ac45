"""
Configuration constants for the forecast bot

This module contains the tunable constants used throughout the application.
Each constant can be overridden by setting an environment variable with the same name.
"""

import os


def _get_env_int(name: str, default: int) -> int:
    """Retrieve an integer value from an environment variable.

    Attempts to parse the environment variable as an integer. If the variable
    is not set or cannot be parsed, prints a warning and returns the default value.

    Args:
        name: The name of the environment variable to read.
        default: The default integer value to return if parsing fails.

    Returns:
        The parsed integer value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            print(
                f"Warning: Invalid integer value for {name}='{value}', using default {default}"
            )
    return default


def _get_env_float(name: str, default: float) -> float:
    """Retrieve a float value from an environment variable.

    Args:
        name: The name of the environment variable to read.
        default: The default float value to return if parsing fails.

    Returns:
        The parsed float value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return float(value)
        except ValueError:
            print(
                f"Warning: Invalid float value for {name}='{value}', using default {default}"
            )
    return default


# Session / reconnection
RECONNECT_BACKOFF_SECONDS = _get_env_float(
    "RECONNECT_BACKOFF_SECONDS", 10.0
)  # Fixed wait between connection attempts; retried forever
IRC_CONNECT_TIMEOUT_SECONDS = _get_env_float(
    "IRC_CONNECT_TIMEOUT_SECONDS", 30.0
)  # Upper bound for a single TCP connect attempt
DEFAULT_IRC_PORT = _get_env_int("DEFAULT_IRC_PORT", 6667)

# Lookup cache
LOOKUP_CACHE_TTL_SECONDS = _get_env_float(
    "LOOKUP_CACHE_TTL_SECONDS", 7 * 24 * 3600.0
)  # Postal code -> coordinates, failures included

# Collaborator endpoints
GEOCODE_BASE_URL = os.getenv("GEOCODE_BASE_URL", "http://api.zippopotam.us")
FORECAST_BASE_URL = os.getenv("FORECAST_BASE_URL", "https://api.forecast.io")
FORECAST_EXCLUDE = os.getenv("FORECAST_EXCLUDE", "minutely,hourly,alerts,flags")

# Page titles
TITLE_MAX_CONTENT_LENGTH = _get_env_int(
    "TITLE_MAX_CONTENT_LENGTH", 1024 * 1024
)  # Pages at or above this size are not fetched
TITLE_MAX_LENGTH = _get_env_int("TITLE_MAX_LENGTH", 300)
TITLE_READ_CHUNK_SIZE = _get_env_int("TITLE_READ_CHUNK_SIZE", 8192)

# Config file location
CONFIG_FILE_ENV = "FORECASTBOT_CONF_FILE"
DEFAULT_CONFIG_FILE = "forecastbot.conf"
