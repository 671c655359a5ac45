"""Command-to-handler routing with fire-and-forget execution."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable
from typing import Any

from ..errors.handling import log_error
from .message import Message

Sender = Callable[[Message], None]
Handler = Callable[[Sender, Message], Awaitable[None] | None]


class Dispatcher:
    """Maps inbound commands to handlers and runs each one as its own task.

    ``dispatch`` never awaits handler work: it schedules one task per handler
    and returns immediately, so the receive loop keeps reading while slow
    handlers are still running. Every task is a fault-isolation boundary;
    exceptions are logged and swallowed there.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[Handler]] = defaultdict(list)
        self._tasks: set[asyncio.Task[None]] = set()

    def register(self, command: str, handler: Handler) -> None:
        self._handlers[command.upper()].append(handler)
        logging.debug(f"🧩 Registered handler {_handler_name(handler)} for {command.upper()}")

    def handlers_for(self, command: str) -> list[Handler]:
        return list(self._handlers.get(command.upper(), ()))

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def dispatch(self, message: Message, send: Sender) -> list[asyncio.Task[None]]:
        """Launch every handler registered for ``message.command``.

        Must be called from within the running event loop.
        """
        launched: list[asyncio.Task[None]] = []
        for handler in self._handlers.get(message.command, ()):
            task = asyncio.create_task(
                self._run_handler(handler, send, message),
                name=f"handler:{message.command}:{_handler_name(handler)}",
            )
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
            launched.append(task)
        return launched

    async def drain(self) -> None:
        """Wait for all in-flight handler tasks to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def shutdown(self, grace: float = 5.0) -> None:
        """Give in-flight handlers ``grace`` seconds, then cancel the rest."""
        if not self._tasks:
            return
        _, pending = await asyncio.wait(list(self._tasks), timeout=grace)
        if pending:
            logging.warning(f"⏹️ Cancelling {len(pending)} unfinished handler(s)")
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)

    async def _run_handler(self, handler: Handler, send: Sender, message: Message) -> None:
        try:
            result: Any = handler(send, message)
            if inspect.isawaitable(result):
                await result
        except asyncio.CancelledError:
            raise
        except Exception as e:
            log_error(
                "Handler failed",
                e,
                context={"handler": _handler_name(handler), "command": message.command},
            )


def _handler_name(handler: Handler) -> str:
    name = getattr(handler, "__qualname__", None) or type(handler).__name__
    return str(name)
