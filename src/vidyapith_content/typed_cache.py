"""Persisted cache-aside primitive for one content kind."""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Generic, Literal, TypeVar

from vidyapith_content.errors import FetchFailed, PersistWriteFailed
from vidyapith_content.store import KeyValueStore
from vidyapith_content.time_utils import as_utc, utc_now

logger = logging.getLogger(__name__)

T = TypeVar("T")

CacheSource = Literal["cache", "fetch", "fallback"]


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """One decoded cache value and the time it was fetched."""

    value: T
    fetched_at: datetime


@dataclass(frozen=True)
class CacheResult(Generic[T]):
    """Value served by `TypedCache.load` plus where it came from."""

    value: T
    source: CacheSource
    fetched_at: datetime
    error: BaseException | None = None

    @property
    def is_fallback(self) -> bool:
        return self.source == "fallback"


def _fetched_at_attr(value: Any) -> datetime:
    return as_utc(value.fetched_at)


def _replace_fetched_at(value: Any, fetched_at: datetime) -> Any:
    return dataclasses.replace(value, fetched_at=fetched_at)


class TypedCache(Generic[T]):
    """Serve the freshest acceptable value of one content kind.

    Reads go through the store; a fresh entry is returned without fetching.
    Stale, missing or forced reads call ``fetch`` once. Fresh values are
    written through on a best-effort basis, and a failed fetch falls back to
    whatever was cached, however old. Only a failed fetch with nothing cached
    reaches the caller, as `FetchFailed`.

    Concurrent callers that need a fetch share the one already in flight.
    """

    def __init__(
        self,
        *,
        cache_key: str,
        ttl: timedelta,
        serialize: Callable[[T], str],
        deserialize: Callable[[str], T],
        fetch: Callable[[], Awaitable[T]],
        store: KeyValueStore,
        clock: Callable[[], datetime] = utc_now,
        fetched_at_of: Callable[[T], datetime] = _fetched_at_attr,
        stamp: Callable[[T, datetime], T] = _replace_fetched_at,
    ) -> None:
        if ttl < timedelta(0):
            raise ValueError("ttl must not be negative")
        self.cache_key = cache_key
        self.ttl = ttl
        self._serialize = serialize
        self._deserialize = deserialize
        self._fetch = fetch
        self._store = store
        self._clock = clock
        self._fetched_at_of = fetched_at_of
        self._stamp = stamp
        self._inflight: asyncio.Task[CacheEntry[T]] | None = None

    def __repr__(self) -> str:
        return f"TypedCache(cache_key={self.cache_key!r}, ttl={self.ttl})"

    def peek(self) -> CacheEntry[T] | None:
        """Return the stored entry without fetching; unreadable entries are None."""
        try:
            raw = self._store.get(self.cache_key)
        except OSError as exc:
            logger.warning("cache read failed for %s: %s", self.cache_key, exc)
            return None
        if raw is None:
            return None
        try:
            value = self._deserialize(raw)
            fetched_at = self._fetched_at_of(value)
        except Exception as exc:
            logger.warning("ignoring corrupt cache entry %s: %s", self.cache_key, exc)
            return None
        return CacheEntry(value=value, fetched_at=fetched_at)

    def age(self, entry: CacheEntry[T]) -> timedelta:
        return self._clock() - entry.fetched_at

    def is_fresh(self, entry: CacheEntry[T]) -> bool:
        return self.age(entry) <= self.ttl

    def clear(self) -> None:
        """Drop the stored entry so the next read fetches."""
        self._store.remove(self.cache_key)

    async def get_content(self, force_refresh: bool = False) -> T:
        """Return cached or freshly fetched content; raise `FetchFailed` if neither."""
        result = await self.load(force_refresh=force_refresh)
        return result.value

    async def load(self, force_refresh: bool = False) -> CacheResult[T]:
        cached = self.peek()
        if cached is not None and not force_refresh and self.is_fresh(cached):
            logger.debug("cache hit for %s", self.cache_key)
            return CacheResult(value=cached.value, source="cache", fetched_at=cached.fetched_at)

        if cached is None:
            logger.debug("cache miss for %s", self.cache_key)
        elif force_refresh:
            logger.debug("forced refresh for %s", self.cache_key)
        else:
            logger.debug("cache stale for %s (age %s)", self.cache_key, self.age(cached))

        try:
            fresh = await asyncio.shield(self._shared_fetch(cached))
        except Exception as exc:
            if cached is None:
                raise FetchFailed(self.cache_key, exc) from exc
            logger.warning(
                "fetch failed for %s, serving cached copy from %s: %s",
                self.cache_key,
                cached.fetched_at.isoformat(),
                exc,
            )
            return CacheResult(
                value=cached.value,
                source="fallback",
                fetched_at=cached.fetched_at,
                error=exc,
            )
        return CacheResult(value=fresh.value, source="fetch", fetched_at=fresh.fetched_at)

    def _shared_fetch(self, previous: CacheEntry[T] | None) -> asyncio.Task[CacheEntry[T]]:
        task = self._inflight
        if task is None or task.done():
            task = asyncio.ensure_future(self._fetch_and_store(previous))
            task.add_done_callback(self._on_fetch_done)
            self._inflight = task
        return task

    def _on_fetch_done(self, task: asyncio.Task[CacheEntry[T]]) -> None:
        if self._inflight is task:
            self._inflight = None
        if not task.cancelled():
            # mark retrieved; callers that were torn down no longer await it
            task.exception()

    async def _fetch_and_store(self, previous: CacheEntry[T] | None) -> CacheEntry[T]:
        logger.info("fetching %s", self.cache_key)
        value = await self._fetch()
        fetched_at = self._clock()
        if previous is not None and fetched_at < previous.fetched_at:
            fetched_at = previous.fetched_at
        stamped = self._stamp(value, fetched_at)
        self._persist(stamped)
        return CacheEntry(value=stamped, fetched_at=fetched_at)

    def _persist(self, value: T) -> None:
        try:
            self._store.set(self.cache_key, self._serialize(value))
        except (PersistWriteFailed, OSError, TypeError, ValueError) as exc:
            logger.warning("cache write failed for %s: %s", self.cache_key, exc)
