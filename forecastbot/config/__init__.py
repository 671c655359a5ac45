"""Configuration package exports."""

from .loader import load_config, print_config_summary, resolve_config_path
from .model import BotConfig, ChannelConfig, ForecastConfig, GeneralConfig, ReplyConfig

__all__ = [
    "BotConfig",
    "ChannelConfig",
    "ForecastConfig",
    "GeneralConfig",
    "ReplyConfig",
    "load_config",
    "print_config_summary",
    "resolve_config_path",
]
