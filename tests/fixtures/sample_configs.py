"""
Sample configuration data for testing
"""

VALID_CONFIG = {
    "general": {
        "name": "forecastbot",
        "server": "irc.example.net:6697",
        "channels": [{"name": "#weather"}, {"name": "#secret", "pass": "hunter2"}],
    },
    "forecast": {"key": "test-forecast-key"},
    "replies": {"mode": "direct", "titles": True},
}

# Channel without '#', server without port, replies section omitted
MINIMAL_CONFIG = {
    "general": {
        "name": "forecastbot",
        "server": "irc.example.net",
        "channels": [{"name": "lobby"}],
    },
    "forecast": {"key": "test-forecast-key"},
}

MISSING_FORECAST_KEY_CONFIG = {
    "general": {"name": "forecastbot", "server": "irc.example.net"},
    "forecast": {},
}

INVALID_NICK_CONFIG = {
    "general": {"name": "bad nick", "server": "irc.example.net"},
    "forecast": {"key": "k"},
}

INVALID_PORT_CONFIG = {
    "general": {"name": "forecastbot", "server": "irc.example.net:notaport"},
    "forecast": {"key": "k"},
}

INVALID_REPLY_MODE_CONFIG = {
    "general": {"name": "forecastbot", "server": "irc.example.net"},
    "forecast": {"key": "k"},
    "replies": {"mode": "shout"},
}
