"""Error taxonomy and error-handling helpers."""

from .handling import classify_error, handle_collaborator_error, log_error
from .internal import (
    BotError,
    CollaboratorError,
    ConfigError,
    DecodeError,
    EncodeError,
    TransportError,
)

__all__ = [
    "BotError",
    "CollaboratorError",
    "ConfigError",
    "DecodeError",
    "EncodeError",
    "TransportError",
    "classify_error",
    "handle_collaborator_error",
    "log_error",
]
