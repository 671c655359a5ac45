from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import DEFAULT_IRC_PORT, FORECAST_BASE_URL, GEOCODE_BASE_URL


class ChannelConfig(BaseModel):
    """A channel to join after the welcome event, with its optional key."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(min_length=1)
    key: str | None = Field(default=None, alias="pass")

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v: Any) -> str:
        """Strip whitespace and ensure a channel prefix (``#`` by default)."""
        if not isinstance(v, str):
            raise ValueError("channel name must be a string")
        name = v.strip()
        if not name:
            raise ValueError("channel name must not be empty")
        if " " in name or "," in name:
            raise ValueError(f"invalid channel name {name!r}")
        if not name.startswith(("#", "&")):
            name = f"#{name}"
        return name

    @field_validator("key", mode="before")
    @classmethod
    def validate_key(cls, v: Any) -> str | None:
        if v is None:
            return None
        key = str(v).strip()
        return key or None


class GeneralConfig(BaseModel):
    """Identity and server settings.

    Attributes:
        name: Nickname used for NICK/USER registration.
        server: ``host[:port]`` of the IRC server.
        channels: Channels joined in order after the welcome event.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, max_length=30)
    server: str = Field(min_length=1)
    channels: tuple[ChannelConfig, ...] = ()

    @field_validator("name")
    @classmethod
    def validate_nick(cls, v: str) -> str:
        nick = v.strip()
        if not nick or any(ch in nick for ch in " ,*?!@:#"):
            raise ValueError(f"invalid nickname {v!r}")
        return nick

    @field_validator("server")
    @classmethod
    def validate_server(cls, v: str) -> str:
        server = v.strip()
        host, _, port = server.rpartition(":") if ":" in server else (server, "", "")
        if not host:
            raise ValueError(f"invalid server address {v!r}")
        if port and (not port.isdigit() or not 0 < int(port) < 65536):
            raise ValueError(f"invalid server port in {v!r}")
        return server

    @property
    def host(self) -> str:
        if ":" in self.server:
            return self.server.rpartition(":")[0]
        return self.server

    @property
    def port(self) -> int:
        if ":" in self.server:
            return int(self.server.rpartition(":")[2])
        return DEFAULT_IRC_PORT


class ForecastConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str = Field(min_length=1)
    url: str = FORECAST_BASE_URL
    geocode_url: str = GEOCODE_BASE_URL


class ReplyConfig(BaseModel):
    """Reply behaviour.

    ``mode`` selects the reply-target rule: ``direct`` answers private
    messages privately and channel messages in-channel prefixed with the
    sender; ``channel`` prefixes every reply with the sender.
    """

    model_config = ConfigDict(frozen=True)

    mode: Literal["direct", "channel"] = "direct"
    titles: bool = True


class BotConfig(BaseModel):
    """Immutable configuration passed to every component at construction."""

    model_config = ConfigDict(frozen=True)

    general: GeneralConfig
    forecast: ForecastConfig
    replies: ReplyConfig = Field(default_factory=ReplyConfig)

    @property
    def nick(self) -> str:
        return self.general.name

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BotConfig:
        return cls.model_validate(data)
