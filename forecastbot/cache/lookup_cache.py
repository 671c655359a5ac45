"""In-memory TTL cache with single-flight resolution.

The cache memoizes an expensive ``key -> value`` resolver (postal code ->
location). Concurrent misses for the same key share one resolution task, and
failed resolutions are cached as ``ABSENT`` for the full TTL so an invalid or
misbehaving key is not hammered.

Example:
    >>> cache = LookupCache(geocoder.lookup, ttl=7 * 24 * 3600)
    >>> result = await cache.get(PostalCode("us", "90210"))
    >>> if result.present:
    ...     print(result.value)
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Hashable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from ..constants import LOOKUP_CACHE_TTL_SECONDS
from ..errors.handling import log_error

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@dataclass(frozen=True, slots=True)
class Lookup(Generic[V]):
    """Tagged lookup result: ``present`` tells data apart from "no data"."""

    present: bool
    value: V | None = None

    @classmethod
    def found(cls, value: V) -> Lookup[V]:
        return cls(present=True, value=value)


ABSENT: Lookup[Any] = Lookup(present=False)


@dataclass(frozen=True, slots=True)
class CacheEntry(Generic[K, V]):
    key: K
    result: Lookup[V]
    expires_at: float

    def expired(self, now: float) -> bool:
        return now >= self.expires_at


class LookupCache(Generic[K, V]):
    """Lazily-populated TTL cache with stampede protection.

    Attributes:
        name: Label used in log lines.
        ttl: Seconds an entry (present or absent) stays valid.
        hits, misses, resolutions: Counters for observability and tests.
    """

    def __init__(
        self,
        resolver: Callable[[K], Awaitable[V | None]],
        ttl: float = LOOKUP_CACHE_TTL_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
        name: str = "lookup",
    ) -> None:
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        self._resolver = resolver
        self.ttl = ttl
        self._clock = clock
        self.name = name
        self._entries: dict[K, CacheEntry[K, V]] = {}
        self._inflight: dict[K, asyncio.Task[Lookup[V]]] = {}
        self._lock = asyncio.Lock()
        self.hits = 0
        self.misses = 0
        self.resolutions = 0

    def __len__(self) -> int:
        return len(self._entries)

    def stats(self) -> dict[str, int]:
        return {
            "entries": len(self._entries),
            "inflight": len(self._inflight),
            "hits": self.hits,
            "misses": self.misses,
            "resolutions": self.resolutions,
        }

    async def get(self, key: K) -> Lookup[V]:
        """Return the cached result for ``key``, resolving it on a miss.

        Callers that arrive while a resolution is running await that same
        task. The shared task is shielded so one caller being cancelled never
        cancels the resolution for the others.
        """
        async with self._lock:
            entry = self._entries.get(key)
            if entry is not None and not entry.expired(self._clock()):
                self.hits += 1
                return entry.result
            task = self._inflight.get(key)
            if task is None:
                self.misses += 1
                task = asyncio.create_task(
                    self._resolve(key), name=f"{self.name}-resolve:{key}"
                )
                self._inflight[key] = task
        return await asyncio.shield(task)

    async def _resolve(self, key: K) -> Lookup[V]:
        self.resolutions += 1
        logging.debug(f"🔎 Resolving {self.name} key={key}")
        try:
            value = await self._resolver(key)
        except asyncio.CancelledError:
            self._inflight.pop(key, None)
            raise
        except Exception as e:
            log_error(
                f"Resolver failed for {self.name}, caching absent result",
                e,
                context={"key": key},
                level=logging.WARNING,
            )
            value = None
        result: Lookup[V] = ABSENT if value is None else Lookup.found(value)
        async with self._lock:
            self._entries[key] = CacheEntry(
                key=key, result=result, expires_at=self._clock() + self.ttl
            )
            self._inflight.pop(key, None)
        if not result.present:
            logging.info(f"🚫 No {self.name} data for key={key}")
        return result
