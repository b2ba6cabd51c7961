"""Process-level wiring: one store, one HTTP client, one cache per content kind."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

import httpx

from vidyapith_content import content_kinds, scrapers
from vidyapith_content.calendar_source import fetch_calendar_content
from vidyapith_content.content_kinds import ContentKind
from vidyapith_content.daily_gate import DailyGate
from vidyapith_content.gateway import build_client
from vidyapith_content.settings import Settings
from vidyapith_content.store import FileKeyValueStore, KeyValueStore
from vidyapith_content.time_utils import iso_z, utc_now
from vidyapith_content.typed_cache import TypedCache

logger = logging.getLogger(__name__)

Fetcher = Callable[[httpx.AsyncClient, Settings], Awaitable[Any]]

FETCHERS: dict[str, Fetcher] = {
    content_kinds.HOME.name: scrapers.fetch_website_content,
    content_kinds.EVENTS.name: scrapers.fetch_events_content,
    content_kinds.CALENDAR.name: fetch_calendar_content,
    content_kinds.DONATE.name: scrapers.fetch_donate_content,
    content_kinds.CONTACT.name: scrapers.fetch_contact_content,
    content_kinds.ADMISSIONS.name: scrapers.fetch_admissions_content,
    content_kinds.BOOKSTORE.name: scrapers.fetch_bookstore_content,
    content_kinds.CLASSES.name: scrapers.fetch_classes_content,
}


@dataclass(frozen=True)
class KindStatus:
    name: str
    cache_key: str
    ttl: timedelta
    cached: bool
    fresh: bool
    fetched_at: datetime | None

    def to_json(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "cache_key": self.cache_key,
            "ttl_seconds": int(self.ttl.total_seconds()),
            "cached": self.cached,
            "fresh": self.fresh,
            "fetched_at": iso_z(self.fetched_at) if self.fetched_at else None,
        }


class ContentService:
    """Own the shared store and HTTP client and hand out one cache per kind.

    Caches are built once, so every caller of a kind shares its in-flight
    fetch. ``fetchers`` replaces the website scrapers, e.g. in tests.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        store: KeyValueStore | None = None,
        client: httpx.AsyncClient | None = None,
        fetchers: Mapping[str, Fetcher] | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.settings = settings or Settings()
        self.store = store if store is not None else FileKeyValueStore(Path(self.settings.data_dir))
        self._owns_client = client is None
        self.client = client if client is not None else build_client(self.settings)
        self._fetchers = dict(FETCHERS)
        if fetchers:
            self._fetchers.update(fetchers)
        self._clock = clock
        self._caches: dict[str, TypedCache[Any]] = {
            kind.name: self._build_cache(kind) for kind in content_kinds.ALL_KINDS
        }
        self.contact_gate = DailyGate(
            self.store,
            interval=timedelta(hours=self.settings.daily_refresh_hours),
            clock=clock,
        )

    def _build_cache(self, kind: ContentKind[Any]) -> TypedCache[Any]:
        fetcher = self._fetchers[kind.name]

        async def fetch() -> Any:
            return await fetcher(self.client, self.settings)

        return TypedCache(
            cache_key=kind.cache_key,
            ttl=kind.ttl,
            serialize=kind.serialize,
            deserialize=kind.deserialize,
            fetch=fetch,
            store=self.store,
            clock=self._clock,
        )

    def cache(self, kind: ContentKind[Any] | str) -> TypedCache[Any]:
        name = kind if isinstance(kind, str) else kind.name
        return self._caches[content_kinds.kind_for_name(name).name]

    async def get_content(self, kind: ContentKind[Any] | str, force_refresh: bool = False) -> Any:
        return await self.cache(kind).get_content(force_refresh=force_refresh)

    async def refresh_contact_if_needed(self) -> bool:
        return await self.contact_gate.refresh_if_needed(self.cache(content_kinds.CONTACT))

    async def startup(self) -> bool:
        """App-start hook: run the daily contact refresh if it is due."""
        refreshed = await self.refresh_contact_if_needed()
        logger.debug("startup contact refresh ran: %s", refreshed)
        return refreshed

    def status(self) -> list[KindStatus]:
        rows: list[KindStatus] = []
        for kind in content_kinds.ALL_KINDS:
            cache = self._caches[kind.name]
            entry = cache.peek()
            rows.append(
                KindStatus(
                    name=kind.name,
                    cache_key=kind.cache_key,
                    ttl=kind.ttl,
                    cached=entry is not None,
                    fresh=entry is not None and cache.is_fresh(entry),
                    fetched_at=entry.fetched_at if entry else None,
                )
            )
        return rows

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> ContentService:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
