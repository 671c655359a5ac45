"""Connection lifecycle for a single IRC server session."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable

from tenacity import AsyncRetrying, RetryCallState, retry_if_exception_type, wait_fixed

from ..config.model import GeneralConfig
from ..constants import IRC_CONNECT_TIMEOUT_SECONDS, RECONNECT_BACKOFF_SECONDS
from ..errors.handling import log_error
from ..errors.internal import DecodeError, EncodeError, TransportError
from .dispatcher import Dispatcher
from .message import JOIN, PING, RPL_WELCOME, Message, decode, encode
from .models import SessionState

Connector = Callable[[str, int], Awaitable[tuple[asyncio.StreamReader, asyncio.StreamWriter]]]

_RETRYABLE = (OSError, TimeoutError, TransportError)


class _SessionStopped(Exception):
    """Internal signal used to leave the connect retry loop on shutdown."""


class SessionManager:  # pylint: disable=too-many-instance-attributes
    """Owns the server connection and drives the session state machine.

    DISCONNECTED -> CONNECTING -> IDENTIFYING -> JOINED -> DISCONNECTED.
    Connection attempts are retried forever with a fixed backoff. Inbound
    frames are decoded in the receive loop, PINGs are answered inline and
    every message is handed to the dispatcher. Outbound frames go through a
    queue drained by one writer task per connection.

    Attributes:
        config: Identity, server address and channels.
        backoff: Seconds between connection attempts.
        connect_timeout: Upper bound for one TCP connect.
        connection_count: Number of successful transport opens so far.
    """

    def __init__(
        self,
        config: GeneralConfig,
        dispatcher: Dispatcher,
        *,
        backoff: float = RECONNECT_BACKOFF_SECONDS,
        connect_timeout: float = IRC_CONNECT_TIMEOUT_SECONDS,
        connector: Connector | None = None,
    ) -> None:
        self.config = config
        self.dispatcher = dispatcher
        self.backoff = backoff
        self.connect_timeout = connect_timeout
        self._connector: Connector = connector or asyncio.open_connection
        self._state = SessionState.DISCONNECTED
        self._reader: asyncio.StreamReader | None = None
        self._writer: asyncio.StreamWriter | None = None
        self._writer_task: asyncio.Task[None] | None = None
        self._outbound: asyncio.Queue[str] = asyncio.Queue()
        self._stop_event = asyncio.Event()
        self.connection_count = 0

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def nick(self) -> str:
        return self.config.name

    @property
    def connected(self) -> bool:
        return self._writer_task is not None and not self._writer_task.done()

    def _set_state(self, new_state: SessionState) -> None:
        if self._state != new_state:
            logging.debug(
                f"🔀 Session state {self._state.name} -> {new_state.name} nick={self.nick}"
            )
            self._state = new_state

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def send(self, message: Message) -> bool:
        """Queue a frame for transmission.

        Safe to call from any number of concurrent handler tasks; the single
        writer task serializes frames onto the connection. Returns False when
        the frame cannot be encoded or there is no live connection.
        """
        try:
            line = encode(message)
        except EncodeError as e:
            log_error("Refusing to send unencodable message", e, context={"command": message.command})
            return False
        if not self.connected:
            logging.debug(f"📭 Dropping {message.command} while disconnected")
            return False
        self._outbound.put_nowait(line)
        return True

    async def run(self) -> None:
        """Connect, serve and reconnect until ``stop()`` is called."""
        logging.info(
            f"🚀 Starting session nick={self.nick} server={self.config.host}:{self.config.port}"
        )
        while not self._stop_event.is_set():
            try:
                reader, writer = await self._connect_with_retry()
            except _SessionStopped:
                break
            try:
                await self._serve(reader, writer)
            except (TransportError, OSError) as e:
                if not self._stop_event.is_set():
                    log_error(
                        "Connection lost",
                        e,
                        context={"server": self.config.server},
                        level=logging.WARNING,
                    )
            finally:
                await self._teardown()
            if not self._stop_event.is_set():
                logging.info(f"🔄 Reconnecting in {self.backoff:g}s")
                await self._interruptible_sleep(self.backoff)
        self._set_state(SessionState.DISCONNECTED)
        logging.info(f"🏁 Session stopped nick={self.nick}")

    def stop(self) -> None:
        """Request shutdown; ``run()`` returns once the connection is closed."""
        self._stop_event.set()
        if self._writer is not None:
            self._writer.close()

    # ------------------------------------------------------------------
    # Connecting
    # ------------------------------------------------------------------

    async def _connect_with_retry(
        self,
    ) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
        retrying = AsyncRetrying(
            wait=wait_fixed(self.backoff),
            retry=retry_if_exception_type(_RETRYABLE),
            before_sleep=self._log_connect_failure,
            sleep=self._interruptible_sleep,
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                if self._stop_event.is_set():
                    raise _SessionStopped()
                return await self._open_connection()
        raise _SessionStopped()  # pragma: no cover - retrying never stops on its own

    async def _open_connection(
        self,
    ) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
        self._set_state(SessionState.CONNECTING)
        host, port = self.config.host, self.config.port
        logging.info(f"🔌 Connecting to {host}:{port}")
        try:
            reader, writer = await asyncio.wait_for(
                self._connector(host, port), timeout=self.connect_timeout
            )
        except BaseException:
            self._set_state(SessionState.DISCONNECTED)
            raise
        self.connection_count += 1
        logging.info(f"✅ Connected to {host}:{port}")
        return reader, writer

    def _log_connect_failure(self, retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        if error is not None:
            log_error(
                "Unable to connect to IRC server",
                error,
                context={
                    "server": self.config.server,
                    "attempt": retry_state.attempt_number,
                    "retry_in": f"{self.backoff:g}s",
                },
                level=logging.WARNING,
            )

    async def _interruptible_sleep(self, seconds: float) -> None:
        with contextlib.suppress(TimeoutError):
            await asyncio.wait_for(self._stop_event.wait(), timeout=seconds)

    # ------------------------------------------------------------------
    # Serving a live connection
    # ------------------------------------------------------------------

    async def _serve(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        self._reader, self._writer = reader, writer
        self._outbound = asyncio.Queue()
        self._writer_task = asyncio.create_task(self._write_loop(writer), name="irc-writer")

        self._set_state(SessionState.IDENTIFYING)
        self.send(Message.nick(self.nick))
        self.send(Message.user(self.nick))

        stop_waiter = asyncio.ensure_future(self._stop_event.wait())
        try:
            while not self._stop_event.is_set():
                raw = await self._read_line(reader, stop_waiter)
                if raw is None:
                    return
                self._handle_line(raw)
        finally:
            stop_waiter.cancel()

    async def _read_line(
        self, reader: asyncio.StreamReader, stop_waiter: asyncio.Future[bool]
    ) -> bytes | None:
        read = asyncio.ensure_future(reader.readline())
        done, _ = await asyncio.wait({read, stop_waiter}, return_when=asyncio.FIRST_COMPLETED)
        if read not in done:
            read.cancel()
            return None
        try:
            raw = read.result()
        except ValueError as e:
            # Line exceeded the stream limit; the reader has already skipped it.
            log_error("Dropping oversized line", DecodeError(str(e)), level=logging.WARNING)
            return b""
        except (ConnectionError, asyncio.IncompleteReadError) as e:
            raise TransportError(f"Read failed: {e}") from e
        if not raw:
            raise TransportError("Connection closed by server")
        return raw

    def _handle_line(self, raw: bytes) -> None:
        text = raw.decode("utf-8", errors="replace")
        if not text.strip():
            return
        try:
            message = decode(text)
        except DecodeError as e:
            log_error(
                "Dropping malformed line",
                e,
                context={"line": text.strip()[:200]},
                level=logging.WARNING,
            )
            return

        if message.command == PING:
            self.send(Message.pong(message))
        elif message.command == RPL_WELCOME:
            self._on_welcome()

        self.dispatcher.dispatch(message, self.send)

    def _on_welcome(self) -> None:
        for channel in self.config.channels:
            self.send(Message.join(channel.name, channel.key))
            logging.info(f"📺 Joining {channel.name}")
        self._set_state(SessionState.JOINED)

    async def _write_loop(self, writer: asyncio.StreamWriter) -> None:
        while True:
            line = await self._outbound.get()
            try:
                writer.write(f"{line}\r\n".encode())
                await writer.drain()
            except (OSError, RuntimeError) as e:
                # Closing the writer makes the receive loop see EOF and reconnect.
                writer.close()
                raise TransportError(f"Write failed: {e}") from e
            # Channel keys stay out of the log.
            shown = " ".join(line.split(" ")[:2]) if line.startswith(JOIN) else line
            logging.debug(f"➡️ {shown}")

    async def _teardown(self) -> None:
        task, self._writer_task = self._writer_task, None
        if task is not None:
            task.cancel()
            results = await asyncio.gather(task, return_exceptions=True)
            for result in results:
                if isinstance(result, TransportError):
                    log_error("Writer stopped", result, level=logging.WARNING)
        dropped = self._outbound.qsize()
        if dropped:
            logging.warning(f"🗑️ Discarding {dropped} unsent frame(s)")
        self._outbound = asyncio.Queue()

        writer, self._writer, self._reader = self._writer, None, None
        if writer is not None:
            try:
                writer.close()
                await writer.wait_closed()
            except (OSError, RuntimeError) as e:
                logging.debug(f"Ignoring error while closing connection: {e}")
        self._set_state(SessionState.DISCONNECTED)
