r"""
Logging configuration module for the forecast bot.

Provides a clean, configurable logging setup using colorlog library with
structured error logging and aggregation capabilities.
"""

import atexit
import logging
import os
import sys
import threading
import time
from collections import defaultdict
from typing import Any

import colorlog


# Fault categories produced by errors.handling.classify_error, in report order.
ERROR_CATEGORIES = ("transport", "decode", "collaborator", "config", "internal", "unknown")


class ErrorAggregator:
    """Counts logged faults per category for the shutdown report.

    Names outside ``ERROR_CATEGORIES`` are folded into ``unknown``. Totals
    count every occurrence; only the newest ``max_per_type`` entries of
    each category are kept for the hourly window and the "Last:" line.
    """

    def __init__(self, max_per_type: int = 1000):
        self.errors: dict[str, list[dict[str, Any]]] = defaultdict(list)
        self.totals: dict[str, int] = defaultdict(int)
        self.lock = threading.Lock()
        self.start_time = time.time()
        self.max_per_type = max_per_type

    def record_error(self, error_type: str, message: str, context: dict[str, Any] = None) -> str:
        """Record an occurrence and return the category it was filed under."""
        category = error_type if error_type in ERROR_CATEGORIES else "unknown"
        with self.lock:
            occurrences = self.errors[category]
            occurrences.append({"timestamp": time.time(), "message": message, "context": context or {}})
            self.totals[category] += 1
            if len(occurrences) > self.max_per_type:
                del occurrences[: len(occurrences) - self.max_per_type]
        return category

    def get_error_summary(self) -> dict[str, Any]:
        """Per-category totals, last-hour counts and rates, in ``ERROR_CATEGORIES`` order."""
        with self.lock:
            summary = {}
            current_time = time.time()
            runtime_hours = (current_time - self.start_time) / 3600

            for category in ERROR_CATEGORIES:
                occurrences = self.errors.get(category)
                if not occurrences:
                    continue
                total_count = self.totals[category]
                summary[category] = {
                    "total_count": total_count,
                    "recent_count": sum(1 for e in occurrences if current_time - e["timestamp"] < 3600),
                    "rate_per_hour": total_count / max(runtime_hours, 1),
                    "last_occurrence": occurrences[-1],
                }

            return summary

    def reset(self) -> None:
        """Forget recorded faults and restart the rate clock."""
        with self.lock:
            self.errors.clear()
            self.totals.clear()
            self.start_time = time.time()

    def log_summary_report(self) -> None:
        """Log a summary report of fault categories."""
        summary = self.get_error_summary()
        if not summary:
            logging.info("No errors recorded in current session")
            return

        logging.warning("🚨 ERROR SUMMARY REPORT")
        for category, stats in summary.items():
            logging.warning(
                f"  {category}: {stats['total_count']} total, "
                f"{stats['recent_count']} in last hour, "
                f"{stats['rate_per_hour']:.1f}/hour"
            )
            logging.warning(f"    Last: {stats['last_occurrence']['message']}")


error_aggregator = ErrorAggregator()


def log_structured_error(
    error_type: str,
    message: str,
    exception: Exception = None,
    context: dict[str, Any] = None,
    level: int = logging.ERROR
) -> None:
    """Log a fault as one tagged line and count it in ``error_aggregator``.

    The line reads ``[CATEGORY] message | Exception: Type: text | Context: k=v``.
    A category outside ``ERROR_CATEGORIES`` is logged and counted as UNKNOWN.

    Args:
        error_type: Fault category, normally from ``classify_error``.
        message: Descriptive error message.
        exception: The exception that occurred (optional).
        context: Key/value pairs such as the server or postal code involved.
        level: Logging level (default: ERROR).
    """
    category = error_aggregator.record_error(error_type, message, context)
    parts = [f"[{category.upper()}] {message}"]
    if exception:
        parts.append(f"Exception: {type(exception).__name__}: {exception}")
    if context:
        parts.append("Context: " + " | ".join(f"{k}={v}" for k, v in context.items()))
    logging.log(level, " | ".join(parts))


class LoggerConfigurator:
    """Handles logging configuration cleanly using colorlog.

    Supports environment variable configuration for log levels.
    """

    def __init__(self, config=None):
        self.config = config or {}

    def configure(self):
        """Configure logging with colored output using colorlog.

        Uses environment variables:
        - DEBUG: Set to 'true', '1', or 'yes' for DEBUG level, otherwise INFO
        """
        debug_env = os.environ.get("DEBUG", "").lower()
        log_level = logging.DEBUG if debug_env in ("true", "1", "yes") else logging.INFO

        formatter = colorlog.ColoredFormatter(
            "%(asctime)s %(log_color)s%(levelname)-8s%(reset)s %(message_log_color)s%(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "magenta",
            },
            secondary_log_colors={
                "message": {
                    "ERROR": "red",
                    "CRITICAL": "magenta",
                }
            },
            reset=True,
        )

        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter)

        logging.basicConfig(
            level=log_level,
            handlers=[handler],
            format="%(message)s",
        )

        root_logger = logging.getLogger()
        root_logger.setLevel(log_level)

        # aiohttp access/client chatter is noise at DEBUG
        logging.getLogger("aiohttp").setLevel(logging.INFO)

        for h in root_logger.handlers:
            h.setFormatter(formatter)

        atexit.register(self._log_final_error_summary)
        return log_level

    def _log_final_error_summary(self):
        """Log final error summary on application exit."""
        try:
            logging.info("📊 Final error summary before shutdown:")
            error_aggregator.log_summary_report()
        except Exception as e:
            logging.error(f"Failed to log final error summary: {e}")
