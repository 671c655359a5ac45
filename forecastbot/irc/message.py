"""IRC message model and line codec."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..errors.internal import DecodeError, EncodeError

PING = "PING"
PONG = "PONG"
RPL_WELCOME = "001"
PRIVMSG = "PRIVMSG"
JOIN = "JOIN"
NICK = "NICK"
USER = "USER"

KNOWN_COMMANDS = frozenset({PING, PONG, RPL_WELCOME, PRIVMSG, JOIN, NICK, USER})

_FORBIDDEN_CHARS = ("\r", "\n", "\0")


@dataclass(frozen=True, slots=True)
class Prefix:
    """Message source: ``name[!user][@host]``."""

    name: str
    user: str | None = None
    host: str | None = None

    @classmethod
    def parse(cls, raw: str) -> Prefix:
        name, host = raw, None
        if "@" in name:
            name, host = name.split("@", 1)
        user = None
        if "!" in name:
            name, user = name.split("!", 1)
        return cls(name=name, user=user, host=host)

    def __str__(self) -> str:
        out = self.name
        if self.user is not None:
            out += f"!{self.user}"
        if self.host is not None:
            out += f"@{self.host}"
        return out


@dataclass(frozen=True, slots=True)
class Message:
    """A single protocol frame.

    ``params`` holds the middle parameters; ``trailing`` is the optional last
    argument introduced by `` :`` which may contain spaces. ``None`` means the
    frame had no trailing part, ``""`` an empty one.
    """

    command: str
    params: tuple[str, ...] = field(default_factory=tuple)
    trailing: str | None = None
    prefix: Prefix | None = None

    def __post_init__(self) -> None:
        # Accept any sequence for convenience but store an immutable tuple.
        if not isinstance(self.params, tuple):
            object.__setattr__(self, "params", tuple(self.params))

    @property
    def is_known(self) -> bool:
        return self.command in KNOWN_COMMANDS

    @property
    def sender(self) -> str | None:
        return self.prefix.name if self.prefix else None

    @property
    def target(self) -> str | None:
        return self.params[0] if self.params else None

    @classmethod
    def privmsg(cls, target: str, text: str) -> Message:
        return cls(PRIVMSG, (target,), text)

    @classmethod
    def pong(cls, ping: Message) -> Message:
        return cls(PONG, ping.params, ping.trailing)

    @classmethod
    def join(cls, channel: str, key: str | None = None) -> Message:
        return cls(JOIN, (channel, key) if key else (channel,))

    @classmethod
    def nick(cls, nick: str) -> Message:
        return cls(NICK, (nick,))

    @classmethod
    def user(cls, nick: str, realname: str | None = None) -> Message:
        return cls(USER, (nick, "0", "*"), realname or nick)


def decode(raw_line: str) -> Message:
    """Parse one raw protocol line into a Message.

    Raises:
        DecodeError: If the line is empty or has no valid command.
    """
    line = raw_line.rstrip("\r\n")
    if not line.strip():
        raise DecodeError("empty line", data={"line": raw_line})

    prefix: Prefix | None = None
    if line.startswith(":"):
        if " " not in line:
            raise DecodeError("prefix without command", data={"line": raw_line})
        raw_prefix, line = line[1:].split(" ", 1)
        if not raw_prefix:
            raise DecodeError("empty prefix", data={"line": raw_line})
        prefix = Prefix.parse(raw_prefix)

    line = line.lstrip(" ")
    trailing: str | None = None
    if line.startswith(":"):
        raise DecodeError("missing command", data={"line": raw_line})
    if " :" in line:
        line, trailing = line.split(" :", 1)

    parts = line.split()
    if not parts:
        raise DecodeError("missing command", data={"line": raw_line})
    command = parts[0]
    if not command.isalnum():
        raise DecodeError(f"invalid command {command!r}", data={"line": raw_line})

    return Message(
        command=command.upper(),
        params=tuple(parts[1:]),
        trailing=trailing,
        prefix=prefix,
    )


def encode(message: Message) -> str:
    """Serialize a Message into a wire line without the terminating CRLF.

    Raises:
        EncodeError: If the message cannot be represented as a single frame.
    """
    command = message.command
    if not command or not command.isalnum():
        raise EncodeError(f"invalid command {command!r}")

    parts: list[str] = []
    if message.prefix is not None:
        prefix = str(message.prefix)
        if not prefix or " " in prefix or _has_forbidden(prefix):
            raise EncodeError(f"invalid prefix {prefix!r}")
        parts.append(f":{prefix}")
    parts.append(command)

    for param in message.params:
        if not param or " " in param or param.startswith(":") or _has_forbidden(param):
            raise EncodeError(f"invalid middle parameter {param!r}")
        parts.append(param)

    line = " ".join(parts)
    if message.trailing is not None:
        if _has_forbidden(message.trailing):
            raise EncodeError("trailing contains line breaks")
        line = f"{line} :{message.trailing}"
    return line


def _has_forbidden(value: str) -> bool:
    return any(ch in value for ch in _FORBIDDEN_CHARS)
