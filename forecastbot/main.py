#!/usr/bin/env python3
"""
Main entry point for the forecast bot
"""

import argparse
import asyncio
import logging
import sys

from .bot.core import ForecastBot
from .config import BotConfig, load_config, print_config_summary, resolve_config_path
from .constants import CONFIG_FILE_ENV, DEFAULT_CONFIG_FILE
from .errors.handling import log_error
from .errors.internal import ConfigError
from .logging_config import LoggerConfigurator


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="forecastbot",
        description="IRC bot answering postal codes with the current weather.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help=f"Path to config file (default: ${CONFIG_FILE_ENV} or {DEFAULT_CONFIG_FILE})",
    )
    parser.add_argument(
        "--health-check",
        action="store_true",
        help="Validate the configuration and exit",
    )
    return parser.parse_args(argv)


async def main(config: BotConfig) -> None:
    """Run the bot until a shutdown signal stops the session."""
    logging.info("🚀 Starting forecast bot")
    bot = ForecastBot(config)
    try:
        await bot.run()
    finally:
        logging.info("✅ Application shutdown complete")


def run(argv: list[str] | None = None) -> None:
    """Synchronous entry point.

    Exits with status 1 when the configuration cannot be read or is invalid;
    no connection is attempted in that case.
    """
    LoggerConfigurator().configure()
    args = parse_args(argv)
    config_path = resolve_config_path(args.config)

    try:
        config = load_config(config_path)
    except ConfigError as e:
        log_error("Configuration error", e, context={"path": config_path})
        sys.exit(1)

    if args.health_check:
        logging.info(f"🏥 Health check passed - {config_path} is valid")
        sys.exit(0)

    print_config_summary(config)
    try:
        asyncio.run(main(config))
    except KeyboardInterrupt:
        sys.exit(0)
    except Exception as e:
        log_error("Top-level error", e)
        sys.exit(1)


if __name__ == "__main__":
    run()
