"""Centralized internal error hierarchy.

These exceptions provide semantic categories for the bot's fault domains.
Raw aiohttp / JSON / pydantic errors are wrapped at the collaborator boundary;
socket errors are wrapped at the session boundary.

Classes:
  BotError           – Base for all internal errors.
  TransportError     – Connect/read/write failures on the chat connection.
  DecodeError        – A raw line that cannot be parsed into a Message.
  EncodeError        – A Message that cannot be framed onto the wire.
  CollaboratorError  – Geocoding / weather / page fetch failures.
  ConfigError        – Unreadable or invalid configuration (fatal at startup).
"""

from __future__ import annotations

from collections.abc import Mapping


class BotError(Exception):
    """Base class for all internal application errors with metadata support.

    Attributes:
        data: Dictionary containing arbitrary structured context data.

    Args:
        message: Descriptive error message.
        data: Optional mapping of additional context data.
    """

    data: dict[str, object]

    def __init__(
        self, message: str, *, data: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(message)
        # Copy into a plain dict to avoid unexpected mutations from caller.
        self.data = dict(data) if data else {}


class TransportError(BotError):
    """Raised when the chat connection fails or is closed by the peer.

    Always recovered by the session's reconnect loop; never surfaced to users.
    """


class DecodeError(BotError):
    """Raised for a malformed protocol line.

    The offending line is available as ``data["line"]`` when known.
    """


class EncodeError(BotError, ValueError):
    """Raised when a Message cannot be serialized into a single wire line."""


class CollaboratorError(BotError):
    """Raised for geocoding, weather or page fetch failures.

    Covers transport errors, unexpected HTTP statuses, undecodable JSON and
    payloads that do not match the expected schema.
    """


class ConfigError(BotError):
    """Raised when the configuration file is missing, unreadable or invalid."""


__all__ = [
    "BotError",
    "TransportError",
    "DecodeError",
    "EncodeError",
    "CollaboratorError",
    "ConfigError",
]
