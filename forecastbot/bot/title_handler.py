"""PRIVMSG handler announcing the <title> of linked HTML pages."""

from __future__ import annotations

import asyncio
import codecs
import logging
from html.parser import HTMLParser
from urllib.parse import urlparse

import aiohttp

from ..constants import TITLE_MAX_CONTENT_LENGTH, TITLE_MAX_LENGTH, TITLE_READ_CHUNK_SIZE
from ..errors.handling import handle_collaborator_error, log_error
from ..errors.internal import CollaboratorError
from ..irc.dispatcher import Sender
from ..irc.message import Message
from .replies import resolve_reply_target


class _TitleParser(HTMLParser):
    """Incremental parser; ``found`` turns True once the first </title> is seen."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self._in_title = False
        self._parts: list[str] = []
        self.found = False

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag == "title" and not self.found:
            self._in_title = True

    def handle_endtag(self, tag: str) -> None:
        if tag == "title" and self._in_title:
            self._in_title = False
            self.found = True

    def handle_data(self, data: str) -> None:
        if self._in_title:
            self._parts.append(data)

    def title(self, max_length: int = TITLE_MAX_LENGTH) -> str | None:
        # An unterminated <title> still yields the text collected so far.
        title = " ".join("".join(self._parts).split())
        return title[:max_length] if title else None


def extract_title(html: str, max_length: int = TITLE_MAX_LENGTH) -> str | None:
    """Return the first <title> text with whitespace collapsed, or None."""
    parser = _TitleParser()
    parser.feed(html)
    parser.close()
    return parser.title(max_length)


def _incremental_decoder(charset: str | None) -> codecs.IncrementalDecoder:
    try:
        return codecs.getincrementaldecoder(charset or "utf-8")(errors="replace")
    except LookupError:
        return codecs.getincrementaldecoder("utf-8")(errors="replace")


def is_http_url(word: str) -> bool:
    try:
        parsed = urlparse(word)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def _is_html(resp: aiohttp.ClientResponse) -> bool:
    return resp.status == 200 and "text/html" in resp.headers.get("Content-Type", "")


class TitleHandler:
    """Looks up every URL in a message concurrently and announces page titles.

    A HEAD request screens out non-HTML targets and pages that declare a size
    of ``TITLE_MAX_CONTENT_LENGTH`` or more; only then is the body fetched
    (and read no further than that limit).
    """

    def __init__(
        self,
        nick: str,
        session: aiohttp.ClientSession,
        max_content_length: int = TITLE_MAX_CONTENT_LENGTH,
    ) -> None:
        self.nick = nick
        self._session = session
        self.max_content_length = max_content_length

    async def __call__(self, send: Sender, message: Message) -> None:
        if not message.trailing:
            return
        destination = resolve_reply_target(message, self.nick)
        if destination is None:
            return
        urls = [word for word in message.trailing.split(" ") if is_http_url(word)]
        if not urls:
            return
        await asyncio.gather(
            *(self._announce(send, destination.target, url) for url in dict.fromkeys(urls))
        )

    async def _announce(self, send: Sender, target: str, url: str) -> None:
        try:
            title = await self.fetch_title(url)
        except CollaboratorError as e:
            log_error("Title lookup failed", e, context={"url": url}, level=logging.WARNING)
            return
        if not title:
            return
        logging.info(f"🔗 Sending HTML title for {url} to {target}")
        send(Message.privmsg(target, f"Title: {title}"))

    async def fetch_title(self, url: str) -> str | None:
        """Return the page title for ``url`` or None when it is not a small HTML page.

        Raises:
            CollaboratorError: On transport or HTTP failures.
        """

        async def operation() -> str | None:
            async with self._session.head(url, allow_redirects=True) as head:
                length = head.content_length
                if not _is_html(head) or (length is not None and length >= self.max_content_length):
                    return None
            async with self._session.get(url) as resp:
                if not _is_html(resp):
                    return None
                return await self._read_title(resp)

        return await handle_collaborator_error(operation, f"title {url}")

    async def _read_title(self, resp: aiohttp.ClientResponse) -> str | None:
        """Stream the body through the parser until the title closes or the byte limit is hit."""
        parser = _TitleParser()
        decoder = _incremental_decoder(resp.charset)
        remaining = self.max_content_length
        async for chunk in resp.content.iter_chunked(TITLE_READ_CHUNK_SIZE):
            chunk = chunk[:remaining]
            remaining -= len(chunk)
            parser.feed(decoder.decode(chunk))
            if parser.found or remaining <= 0:
                break
        parser.feed(decoder.decode(b"", final=True))
        parser.close()
        return parser.title()
