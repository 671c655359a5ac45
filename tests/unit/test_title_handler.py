"""
Unit tests for the page title announcer.
"""

import asyncio
from typing import Any

import aiohttp
import pytest

from forecastbot.bot.title_handler import TitleHandler, extract_title, is_http_url
from forecastbot.irc.message import decode


class _Content:
    """Hands the body out in small pieces, the way a socket delivers it."""

    def __init__(self, body: bytes, piece_size: int = 8):
        self._body = body
        self._piece_size = piece_size
        self.chunk_sizes: list[int] = []
        self.served = 0

    async def iter_chunked(self, n: int):
        self.chunk_sizes.append(n)
        for start in range(0, len(self._body), self._piece_size):
            await asyncio.sleep(0)
            piece = self._body[start : start + self._piece_size]
            self.served += len(piece)
            yield piece


class _Resp:
    def __init__(
        self,
        status: int = 200,
        content_type: str = "text/html; charset=utf-8",
        body: bytes = b"",
        content_length: int | None = None,
        charset: str | None = "utf-8",
    ):
        self.status = status
        self.headers = {"Content-Type": content_type}
        self.content = _Content(body)
        self.content_length = content_length
        self.charset = charset


class _Session:
    """Serves HEAD and GET from per-URL tables."""

    def __init__(self):
        self.heads: dict[str, _Resp | Exception] = {}
        self.gets: dict[str, _Resp] = {}
        self.calls: list[tuple[str, str, dict[str, Any]]] = []

    def _cm(self, resp):
        class _CM:
            async def __aenter__(self_inner):  # noqa: N805
                if isinstance(resp, Exception):
                    raise resp
                return resp

            async def __aexit__(self_inner, exc_type, exc, tb):  # noqa: N805
                return False

        return _CM()

    def head(self, url: str, **kwargs):
        self.calls.append(("HEAD", url, kwargs))
        return self._cm(self.heads[url])

    def get(self, url: str, **kwargs):
        self.calls.append(("GET", url, kwargs))
        return self._cm(self.gets[url])

    def serve(self, url: str, html: str, **kwargs) -> None:
        body = html.encode(kwargs.pop("encoding", "utf-8"))
        self.heads[url] = _Resp(**kwargs)
        self.gets[url] = _Resp(body=body, **kwargs)


@pytest.mark.parametrize(
    "html,expected",
    [
        ("<html><head><title>Example Domain</title></head></html>", "Example Domain"),
        ("<title>\n  Spaced\n\tOut  </title>", "Spaced Out"),
        ("<title>Fish &amp; Chips</title>", "Fish & Chips"),
        ("<TITLE>Upper</TITLE>", "Upper"),
        ("<title>First</title><title>Second</title>", "First"),
        ("<html><body>no title</body></html>", None),
        ("<title>   </title>", None),
    ],
)
def test_extract_title(html, expected):
    assert extract_title(html) == expected


def test_extract_title_respects_max_length():
    assert extract_title("<title>abcdefghij</title>", max_length=4) == "abcd"


@pytest.mark.parametrize(
    "word,expected",
    [
        ("https://example.com/page", True),
        ("http://example.com", True),
        ("ftp://example.com", False),
        ("example.com", False),
        ("http://", False),
        ("http://[::1", False),
    ],
)
def test_is_http_url(word, expected):
    assert is_http_url(word) is expected


class TestTitleHandler:
    """Test class for URL title announcements."""

    def setup_method(self):
        self.session = _Session()
        self.handler = TitleHandler("forecastbot", self.session, max_content_length=1024)
        self.sent = []

    def send(self, message):
        self.sent.append(message)

    @pytest.mark.asyncio
    async def test_announces_title_in_channel(self):
        self.session.serve("https://example.com/a", "<title>Example A</title>")

        await self.handler(self.send, decode(":alice!a@h PRIVMSG #weather :look https://example.com/a"))

        assert [(m.target, m.trailing) for m in self.sent] == [("#weather", "Title: Example A")]
        assert self.session.calls[0] == ("HEAD", "https://example.com/a", {"allow_redirects": True})

    @pytest.mark.asyncio
    async def test_private_message_title_goes_to_sender(self):
        self.session.serve("http://example.com", "<title>Home</title>")

        await self.handler(self.send, decode(":alice!a@h PRIVMSG forecastbot :http://example.com"))

        assert self.sent[0].target == "alice"

    @pytest.mark.asyncio
    async def test_each_url_is_fetched_once(self):
        self.session.serve("https://a.test", "<title>A</title>")
        self.session.serve("https://b.test", "<title>B</title>")

        await self.handler(
            self.send,
            decode(":alice!a@h PRIVMSG #c :https://a.test https://b.test https://a.test"),
        )

        assert sorted(m.trailing for m in self.sent) == ["Title: A", "Title: B"]
        assert [c[0] for c in self.session.calls].count("HEAD") == 2

    @pytest.mark.asyncio
    async def test_non_html_is_skipped_after_head(self):
        self.session.serve("https://img.test/cat.png", "", content_type="image/png")

        await self.handler(self.send, decode(":alice!a@h PRIVMSG #c :https://img.test/cat.png"))

        assert self.sent == []
        assert [c[0] for c in self.session.calls] == ["HEAD"]

    @pytest.mark.asyncio
    async def test_large_page_is_not_fetched(self):
        self.session.serve("https://big.test", "<title>Big</title>", content_length=1024)

        await self.handler(self.send, decode(":alice!a@h PRIVMSG #c :https://big.test"))

        assert self.sent == []
        assert [c[0] for c in self.session.calls] == ["HEAD"]

    @pytest.mark.asyncio
    async def test_error_status_is_skipped(self):
        self.session.serve("https://gone.test", "", status=404)

        await self.handler(self.send, decode(":alice!a@h PRIVMSG #c :https://gone.test"))

        assert self.sent == []

    @pytest.mark.asyncio
    async def test_declared_charset_is_used(self):
        self.session.serve(
            "https://latin.test", "<title>Café</title>", encoding="latin-1", charset="latin-1"
        )

        await self.handler(self.send, decode(":alice!a@h PRIVMSG #c :https://latin.test"))

        assert self.sent[0].trailing == "Title: Café"

    @pytest.mark.asyncio
    async def test_unknown_charset_falls_back_to_utf8(self):
        self.session.serve("https://odd.test", "<title>Odd</title>", charset="x-unknown-charset")

        await self.handler(self.send, decode(":alice!a@h PRIVMSG #c :https://odd.test"))

        assert self.sent[0].trailing == "Title: Odd"

    @pytest.mark.asyncio
    async def test_fetch_failure_is_logged_not_sent(self):
        self.session.heads["https://down.test"] = aiohttp.ClientConnectionError("refused")
        self.session.serve("https://up.test", "<title>Up</title>")

        await self.handler(
            self.send, decode(":alice!a@h PRIVMSG #c :https://down.test https://up.test")
        )

        assert [m.trailing for m in self.sent] == ["Title: Up"]

    @pytest.mark.asyncio
    async def test_message_without_urls_makes_no_requests(self):
        await self.handler(self.send, decode(":alice!a@h PRIVMSG #c :90210"))

        assert self.session.calls == []
        assert self.sent == []

    @pytest.mark.asyncio
    async def test_title_after_first_chunk_is_found(self):
        html = "<html><head><meta charset='utf-8'>" + " " * 200 + "<title>Second Chunk Title</title></head>"
        self.session.serve("https://slow.test", html)

        await self.handler(self.send, decode(":alice!a@h PRIVMSG #c :https://slow.test"))

        assert [m.trailing for m in self.sent] == ["Title: Second Chunk Title"]

    @pytest.mark.asyncio
    async def test_reading_stops_once_title_closes(self):
        html = "<title>Early</title>" + "<p>filler</p>" * 50
        self.session.serve("https://early.test", html)

        await self.handler(self.send, decode(":alice!a@h PRIVMSG #c :https://early.test"))

        content = self.session.gets["https://early.test"].content
        assert self.sent[0].trailing == "Title: Early"
        assert content.served < len(html)

    @pytest.mark.asyncio
    async def test_body_is_read_no_further_than_limit(self):
        html = "<html>" + "x" * 2000 + "<title>Too Deep</title>"
        self.session.serve("https://deep.test", html)

        await self.handler(self.send, decode(":alice!a@h PRIVMSG #c :https://deep.test"))

        assert self.sent == []
        assert self.session.gets["https://deep.test"].content.served <= 1024 + 8

    @pytest.mark.asyncio
    async def test_multibyte_character_split_across_chunks(self):
        self.session.serve("https://utf8.test", "<title>Crème brûlée à la café</title>")

        await self.handler(self.send, decode(":alice!a@h PRIVMSG #c :https://utf8.test"))

        assert self.sent[0].trailing == "Title: Crème brûlée à la café"
