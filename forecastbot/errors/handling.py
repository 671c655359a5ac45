from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from typing import TypeVar

import aiohttp

from ..logging_config import log_structured_error
from .internal import (
    BotError,
    CollaboratorError,
    ConfigError,
    DecodeError,
    EncodeError,
    TransportError,
)

T = TypeVar("T")


def classify_error(error: BaseException) -> str:
    """Map an exception onto the bot's fault taxonomy."""
    if isinstance(error, ConfigError):
        return "config"
    if isinstance(error, DecodeError | EncodeError):
        return "decode"
    if isinstance(error, CollaboratorError | aiohttp.ClientError):
        return "collaborator"
    if isinstance(error, TransportError | OSError | ConnectionError | asyncio.TimeoutError):
        return "transport"
    if isinstance(error, BotError):
        return "internal"
    return "unknown"


def log_error(message: str, error: Exception, context: dict = None, level: int | None = None) -> None:
    """Logs an error message with the associated exception details.

    Args:
        message: A descriptive message about the error context.
        error: The exception instance to be logged.
        context: Optional additional context data for debugging.
        level: Optional logging level override (defaults to ERROR).
    """
    kwargs = {}
    if level is not None:
        kwargs["level"] = level
    log_structured_error(
        error_type=classify_error(error),
        message=f"{message}: {str(error)}",
        exception=error,
        context=context,
        **kwargs,
    )


async def handle_collaborator_error(operation: Callable[[], Awaitable[T]], context: str) -> T:  # type: ignore[valid-type]
    """Run a collaborator call, translating its failures into CollaboratorError.

    Transport errors, non-2xx responses (raised via ``raise_for_status``),
    undecodable JSON and schema mismatches (pydantic's ValidationError is a
    ValueError) all surface as a single CollaboratorError so handlers only
    need one except clause.

    Args:
        operation: The async operation to execute.
        context: Descriptive context for the operation (e.g., "geocode us/90210").

    Returns:
        The result of the operation if successful.

    Raises:
        CollaboratorError: For any transport, HTTP, or decoding failure.
    """
    try:
        return await operation()
    except CollaboratorError:
        raise
    except (aiohttp.ClientError, asyncio.TimeoutError, ValueError, OSError) as e:
        error_context: dict[str, object] = {"operation": context, "timestamp": time.time()}
        if isinstance(e, aiohttp.ClientResponseError):
            error_context["http_status"] = e.status
            error_context["url"] = str(e.request_info.real_url)
        raise CollaboratorError(
            f"{context} failed: {type(e).__name__}: {str(e)}", data=error_context
        ) from e
