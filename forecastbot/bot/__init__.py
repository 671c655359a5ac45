"""Bot assembly and PRIVMSG handlers."""

from .core import ForecastBot
from .replies import ReplyTarget, resolve_reply_target
from .title_handler import TitleHandler, extract_title
from .weather_handler import WeatherQueryHandler

__all__ = [
    "ForecastBot",
    "ReplyTarget",
    "TitleHandler",
    "WeatherQueryHandler",
    "extract_title",
    "resolve_reply_target",
]
