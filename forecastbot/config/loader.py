"""Configuration loading utilities."""

from __future__ import annotations

import json
import logging
import os

from pydantic import ValidationError

from ..constants import CONFIG_FILE_ENV, DEFAULT_CONFIG_FILE
from ..errors.internal import ConfigError
from .model import BotConfig


def resolve_config_path(cli_path: str | None = None) -> str:
    """Pick the configuration path: CLI flag, then environment, then default."""
    if cli_path:
        return cli_path
    return os.environ.get(CONFIG_FILE_ENV, DEFAULT_CONFIG_FILE)


def load_config(path: str | os.PathLike[str]) -> BotConfig:
    """Load and validate the bot configuration from a JSON file.

    Args:
        path: Path to the configuration file.

    Returns:
        A frozen BotConfig.

    Raises:
        ConfigError: If the file cannot be read, is not valid JSON, or fails validation.
    """
    path = str(path)
    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Can not read file ({path})", data={"path": path}) from e
    except OSError as e:
        raise ConfigError(f"Can not read file ({path}): {e}", data={"path": path}) from e
    except json.JSONDecodeError as e:
        raise ConfigError(
            f"Config ({path}) is invalid: line {e.lineno} column {e.colno}: {e.msg}",
            data={"path": path},
        ) from e

    if not isinstance(raw, dict):
        raise ConfigError(f"Config ({path}) is invalid: top level must be an object", data={"path": path})

    try:
        config = BotConfig.from_dict(raw)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigError(f"Config ({path}) is invalid: {problems}", data={"path": path}) from e

    logging.info(
        f"✅ Configuration loaded nick={config.nick} server={config.general.host}:{config.general.port} "
        f"channels={len(config.general.channels)}"
    )
    return config


def print_config_summary(config: BotConfig) -> None:
    """Log a one-shot summary of the effective configuration (no secrets)."""
    logging.info(f"🤖 Nick: {config.nick}")
    logging.info(f"🌐 Server: {config.general.host}:{config.general.port}")
    for channel in config.general.channels:
        suffix = " (key)" if channel.key else ""
        logging.info(f"📺 Channel: {channel.name}{suffix}")
    logging.info(f"💬 Reply mode: {config.replies.mode}, page titles: {'on' if config.replies.titles else 'off'}")
