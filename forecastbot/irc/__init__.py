"""IRC subsystem package.

Contains the line codec, the handler dispatcher and the session manager that
owns the server connection.
"""

from .dispatcher import Dispatcher, Handler, Sender  # noqa: F401
from .message import (  # noqa: F401
    JOIN,
    NICK,
    PING,
    PONG,
    PRIVMSG,
    RPL_WELCOME,
    USER,
    Message,
    Prefix,
    decode,
    encode,
)
from .models import SessionState  # noqa: F401
from .session import SessionManager  # noqa: F401

__all__ = [
    "Dispatcher",
    "Handler",
    "Sender",
    "Message",
    "Prefix",
    "decode",
    "encode",
    "SessionManager",
    "SessionState",
    "JOIN",
    "NICK",
    "PING",
    "PONG",
    "PRIVMSG",
    "RPL_WELCOME",
    "USER",
]
