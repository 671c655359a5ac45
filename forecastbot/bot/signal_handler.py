"""SignalHandler - turns SIGINT/SIGTERM into a graceful session stop."""

import asyncio
import logging
import signal
from collections.abc import Callable


class SignalHandler:
    """Installs idempotent shutdown handlers on the running event loop."""

    SIGNALS = (signal.SIGINT, signal.SIGTERM)

    def __init__(self, on_shutdown: Callable[[], None]) -> None:
        self._on_shutdown = on_shutdown
        self.shutdown_initiated = False
        self._installed: list[signal.Signals] = []

    def trigger(self, signum: int | None = None) -> None:
        # Only the first signal starts the shutdown.
        if self.shutdown_initiated:
            return
        self.shutdown_initiated = True
        logging.warning(f"🛑 Signal received - initiating shutdown (signal={signum})")
        self._on_shutdown()

    def install(self) -> None:  # pragma: no cover
        loop = asyncio.get_running_loop()
        for sig in self.SIGNALS:
            try:
                loop.add_signal_handler(sig, self.trigger, int(sig))
            except (NotImplementedError, RuntimeError):
                # Windows / non-main thread: rely on KeyboardInterrupt instead.
                continue
            self._installed.append(sig)

    def uninstall(self) -> None:  # pragma: no cover
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        while self._installed:
            loop.remove_signal_handler(self._installed.pop())
