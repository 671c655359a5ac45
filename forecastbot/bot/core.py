"""ForecastBot - wires configuration, HTTP clients, handlers and the session."""

from __future__ import annotations

import logging

import aiohttp

from ..cache.lookup_cache import LookupCache
from ..config.model import BotConfig
from ..constants import LOOKUP_CACHE_TTL_SECONDS, RECONNECT_BACKOFF_SECONDS
from ..irc.dispatcher import Dispatcher
from ..irc.message import PRIVMSG
from ..irc.session import Connector, SessionManager
from ..logging_config import error_aggregator
from ..weather.forecast import ForecastClient
from ..weather.geocode import GeocodeClient, Location
from ..weather.postal import PostalCode
from .signal_handler import SignalHandler
from .title_handler import TitleHandler
from .weather_handler import WeatherQueryHandler

USER_AGENT = "forecastbot/1.0 (+aiohttp)"


class ForecastBot:
    """Top-level application object.

    Attributes:
        config: Immutable configuration shared by every component.
        dispatcher: Command router used by the session.
        session: Connection owner and receive loop.
        locations: Postal code cache (available once ``run`` has started).
    """

    def __init__(
        self,
        config: BotConfig,
        *,
        backoff: float = RECONNECT_BACKOFF_SECONDS,
        cache_ttl: float = LOOKUP_CACHE_TTL_SECONDS,
        connector: Connector | None = None,
    ) -> None:
        self.config = config
        self.cache_ttl = cache_ttl
        self.dispatcher = Dispatcher()
        self.session = SessionManager(
            config.general, self.dispatcher, backoff=backoff, connector=connector
        )
        self.signals = SignalHandler(self.stop)
        self.locations: LookupCache[PostalCode, Location] | None = None

    def register_handlers(self, http: aiohttp.ClientSession) -> None:
        """Create the collaborator clients on ``http`` and register PRIVMSG handlers."""
        geocoder = GeocodeClient(http, self.config.forecast.geocode_url)
        forecasts = ForecastClient(http, self.config.forecast.key, self.config.forecast.url)
        self.locations = LookupCache(geocoder.lookup, self.cache_ttl, name="postal code")

        self.dispatcher.register(
            PRIVMSG,
            WeatherQueryHandler(
                self.config.nick, self.locations, forecasts, self.config.replies.mode
            ),
        )
        if self.config.replies.titles:
            self.dispatcher.register(PRIVMSG, TitleHandler(self.config.nick, http))

    async def run(self) -> None:
        # Fault rates in the shutdown report are measured from here.
        error_aggregator.reset()
        async with aiohttp.ClientSession(headers={"User-Agent": USER_AGENT}) as http:
            self.register_handlers(http)
            self.signals.install()
            try:
                await self.session.run()
            finally:
                self.signals.uninstall()
                await self.dispatcher.shutdown()
                if self.locations is not None:
                    logging.info(f"📦 Postal code cache stats: {self.locations.stats()}")

    def stop(self) -> None:
        self.session.stop()
