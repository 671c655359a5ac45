"""Shared IRC session models."""

from __future__ import annotations

from enum import Enum, auto


class SessionState(Enum):
    DISCONNECTED = auto()
    CONNECTING = auto()
    IDENTIFYING = auto()
    JOINED = auto()
