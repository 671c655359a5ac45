"""Postal code -> coordinates client for the zippopotam.us API shape."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import aiohttp
from pydantic import BaseModel, ConfigDict, Field

from ..constants import GEOCODE_BASE_URL
from ..errors.handling import handle_collaborator_error
from .postal import PostalCode


class PlaceInfo(BaseModel):
    # Coordinates arrive as strings from the API; lax mode coerces them.
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    latitude: float
    longitude: float
    place_name: str = Field(alias="place name")
    state: str = ""
    state_abbreviation: str = Field(default="", alias="state abbreviation")


class ZipInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    country: str = ""
    country_abbreviation: str = Field(default="", alias="country abbreviation")
    post_code: str = Field(default="", alias="post code")
    places: list[PlaceInfo] = Field(default_factory=list)


@dataclass(frozen=True, slots=True)
class Location:
    latitude: float
    longitude: float
    name: str
    state: str
    state_abbr: str

    @property
    def label(self) -> str:
        region = self.state_abbr or self.state
        return f"{self.name}, {region}" if region else self.name


class GeocodeClient:
    """Resolves postal codes to a Location.

    Attributes:
        base_url: Service root, e.g. ``http://api.zippopotam.us``.
    """

    def __init__(self, session: aiohttp.ClientSession, base_url: str = GEOCODE_BASE_URL):
        if not session:
            raise ValueError("aiohttp session required")
        self._session = session
        self.base_url = base_url.rstrip("/")

    async def lookup(self, postal: PostalCode) -> Location | None:
        """Return the first place for ``postal`` or None when the code is unknown.

        Raises:
            CollaboratorError: On transport, HTTP or decoding failures.
        """
        url = f"{self.base_url}/{postal.country}/{postal.code}"
        logging.info(f"📮 Looking up coordinates for {postal.country.upper()} code: {postal.code}")

        async def operation() -> ZipInfo | None:
            async with self._session.get(url) as resp:
                if resp.status == 404:
                    return None
                resp.raise_for_status()
                payload = await resp.json(content_type=None)
                return ZipInfo.model_validate(payload)

        info = await handle_collaborator_error(operation, f"geocode {postal}")
        if info is None or not info.places:
            logging.info(f"🚫 No places returned for {postal}")
            return None
        place = info.places[0]
        return Location(
            latitude=place.latitude,
            longitude=place.longitude,
            name=place.place_name,
            state=place.state,
            state_abbr=place.state_abbreviation,
        )
