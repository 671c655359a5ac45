"""PRIVMSG handler answering postal codes with the current weather."""

from __future__ import annotations

import logging

from ..cache.lookup_cache import LookupCache
from ..errors.handling import log_error
from ..errors.internal import CollaboratorError
from ..irc.dispatcher import Sender
from ..irc.message import Message
from ..weather.forecast import ForecastClient
from ..weather.formatter import format_report
from ..weather.geocode import Location
from ..weather.postal import PostalCode, match_postal_code
from .replies import ReplyMode, resolve_reply_target


class WeatherQueryHandler:
    """Replies to a bare postal code with a short weather report.

    Lookups that fail at any stage end silently (logged only): from the
    user's perspective a failed lookup looks the same as an unrecognized
    message.
    """

    def __init__(
        self,
        nick: str,
        locations: LookupCache[PostalCode, Location],
        forecasts: ForecastClient,
        reply_mode: ReplyMode = "direct",
    ) -> None:
        self.nick = nick
        self.locations = locations
        self.forecasts = forecasts
        self.reply_mode = reply_mode

    async def __call__(self, send: Sender, message: Message) -> None:
        postal = match_postal_code(message.trailing)
        if postal is None:
            return
        destination = resolve_reply_target(message, self.nick, self.reply_mode)
        if destination is None:
            return

        lookup = await self.locations.get(postal)
        if not lookup.present or lookup.value is None:
            logging.info(f"🚫 No data returned for postal code: {postal}")
            return
        location = lookup.value

        try:
            report = await self.forecasts.fetch(location.latitude, location.longitude)
        except CollaboratorError as e:
            log_error(
                "Weather lookup failed",
                e,
                context={"postal": str(postal), "sender": message.sender},
                level=logging.WARNING,
            )
            return

        lines = format_report(report, location, destination.nick_prefix)
        logging.info(f"🌤️ Sending weather for {postal} to {destination.target}")
        for line in lines:
            send(Message.privmsg(destination.target, line))
