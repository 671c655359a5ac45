import asyncio
import os

import pytest

# Keep retry waits out of test runtime
os.environ.setdefault("RECONNECT_BACKOFF_SECONDS", "0")

from forecastbot.config.model import BotConfig
from forecastbot.logging_config import error_aggregator
from tests.fixtures.sample_configs import MINIMAL_CONFIG, VALID_CONFIG  # noqa: E402


class FakeWriter:
    """Stand-in for asyncio.StreamWriter that records outbound lines."""

    def __init__(self, reader: asyncio.StreamReader):
        self._reader = reader
        self._buffer = b""
        self.lines: asyncio.Queue[str] = asyncio.Queue()
        self.closed = False
        self.fail_writes = False

    def write(self, data: bytes) -> None:
        if self.fail_writes:
            raise ConnectionResetError("peer reset")
        self._buffer += data
        while b"\r\n" in self._buffer:
            line, self._buffer = self._buffer.split(b"\r\n", 1)
            self.lines.put_nowait(line.decode())

    async def drain(self) -> None:
        await asyncio.sleep(0)

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self._reader.feed_eof()

    def is_closing(self) -> bool:
        return self.closed

    async def wait_closed(self) -> None:
        return None


class FakeConnection:
    def __init__(self, reader: asyncio.StreamReader, writer: FakeWriter):
        self.reader = reader
        self.writer = writer

    def send(self, line: str) -> None:
        """Feed one server line to the client."""
        self.reader.feed_data(f"{line}\r\n".encode())

    def drop(self) -> None:
        """Simulate the server closing the connection."""
        self.reader.feed_eof()

    async def next_line(self, timeout: float = 1.0) -> str:
        return await asyncio.wait_for(self.writer.lines.get(), timeout=timeout)

    async def skip_registration(self) -> list[str]:
        return [await self.next_line(), await self.next_line()]


class FakeServer:
    """Connector replacement: refuses the first ``failures`` attempts."""

    def __init__(self, failures: int = 0):
        self.failures = failures
        self.attempts = 0
        self.addresses: list[tuple[str, int]] = []
        self._connections: asyncio.Queue[FakeConnection] = asyncio.Queue()

    async def connect(self, host: str, port: int):
        self.attempts += 1
        self.addresses.append((host, port))
        if self.attempts <= self.failures:
            raise ConnectionRefusedError(f"refused attempt {self.attempts}")
        reader = asyncio.StreamReader()
        writer = FakeWriter(reader)
        self._connections.put_nowait(FakeConnection(reader, writer))
        return reader, writer

    async def next_connection(self, timeout: float = 1.0) -> FakeConnection:
        return await asyncio.wait_for(self._connections.get(), timeout=timeout)


@pytest.fixture
def bot_config() -> BotConfig:
    return BotConfig.from_dict(VALID_CONFIG)


@pytest.fixture
def minimal_config() -> BotConfig:
    return BotConfig.from_dict(MINIMAL_CONFIG)


@pytest.fixture
def fake_server() -> FakeServer:
    return FakeServer()


@pytest.fixture(autouse=True)
def _reset_error_aggregator():
    yield
    error_aggregator.reset()
