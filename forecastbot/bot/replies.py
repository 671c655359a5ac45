"""Reply-target resolution shared by PRIVMSG handlers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from ..irc.message import Message

ReplyMode = Literal["direct", "channel"]


@dataclass(frozen=True, slots=True)
class ReplyTarget:
    target: str
    nick_prefix: str | None = None


def resolve_reply_target(message: Message, own_nick: str, mode: ReplyMode = "direct") -> ReplyTarget | None:
    """Decide where a reply to ``message`` goes.

    A message addressed to the bot itself is answered privately to the
    sender. Anything else is answered in the originating channel, prefixed
    with the sender's nick. In ``channel`` mode private answers are prefixed
    as well. Returns None when the message has no sender or target.
    """
    target, sender = message.target, message.sender
    if not target or not sender:
        return None
    if target.lower() == own_nick.lower():
        return ReplyTarget(sender, sender if mode == "channel" else None)
    return ReplyTarget(target, sender)
