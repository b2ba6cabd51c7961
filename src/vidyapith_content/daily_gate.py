"""Persisted once-per-interval trigger for a forced cache refresh."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from vidyapith_content.errors import FetchFailed, PersistWriteFailed
from vidyapith_content.store import KeyValueStore
from vidyapith_content.time_utils import EPOCH, iso_z, parse_iso_z, utc_now
from vidyapith_content.typed_cache import TypedCache

logger = logging.getLogger(__name__)

CONTACT_GATE_KEY = "last_contact_refresh_timestamp"
DEFAULT_INTERVAL = timedelta(hours=24)


@dataclass(frozen=True)
class GateState:
    last_triggered_at: datetime | None = None


class DailyGate:
    """Force-refresh one cache at most once per rolling interval, across restarts.

    Due-ness is computed from the stored timestamp, never stored as a flag. The
    timestamp moves whenever the forced read yields a value, including a stale
    copy the cache serves after a failed fetch. Only ``FetchFailed`` (nothing
    cached to fall back to) leaves the gate due so the next start retries.
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        key: str = CONTACT_GATE_KEY,
        interval: timedelta = DEFAULT_INTERVAL,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self.key = key
        self.interval = interval
        self._clock = clock

    def state(self) -> GateState:
        try:
            raw = self._store.get(self.key)
        except OSError as exc:
            logger.warning("gate read failed for %s: %s", self.key, exc)
            return GateState()
        if raw is None:
            return GateState()
        if raw.strip().isdigit():
            # epoch milliseconds, as older app builds stored it
            try:
                return GateState(last_triggered_at=EPOCH + timedelta(milliseconds=int(raw)))
            except OverflowError:
                return GateState()
        return GateState(last_triggered_at=parse_iso_z(raw))

    def is_due(self, now: datetime | None = None) -> bool:
        last = self.state().last_triggered_at
        if last is None:
            return True
        current = now if now is not None else self._clock()
        return current - last >= self.interval

    async def refresh_if_needed(self, cache: TypedCache[Any]) -> bool:
        """Force-refresh ``cache`` if the window elapsed; True when it ran and yielded a value."""
        now = self._clock()
        if not self.is_due(now):
            logger.debug("gate %s not due", self.key)
            return False

        try:
            await cache.get_content(force_refresh=True)
        except FetchFailed as exc:
            logger.warning("gated refresh of %s failed: %s", cache.cache_key, exc)
            return False

        self._mark(now)
        logger.info("gated refresh of %s completed", cache.cache_key)
        return True

    def reset(self) -> None:
        """Clear the stored timestamp so the next check is due."""
        self._store.remove(self.key)

    def _mark(self, when: datetime) -> None:
        try:
            self._store.set(self.key, iso_z(when))
        except (PersistWriteFailed, OSError) as exc:
            logger.warning("gate write failed for %s: %s", self.key, exc)
