"""Cache key, TTL and JSON codec for each content kind."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Generic, Protocol, TypeVar

from vidyapith_content.errors import CacheCorrupt
from vidyapith_content.io_utils import dumps_json
from vidyapith_content.models import (
    AdmissionsContent,
    BookstoreContent,
    CalendarContent,
    ClassesContent,
    ContactContent,
    DonateContent,
    EventsContent,
    WebsiteContent,
)

T = TypeVar("T", bound="JsonContent")


class JsonContent(Protocol):
    def to_json(self) -> dict[str, Any]: ...

    @classmethod
    def from_json(cls, payload: dict[str, Any]) -> Any: ...


@dataclass(frozen=True)
class ContentKind(Generic[T]):
    """Fixed per-kind configuration. Bump the key's ``_vN`` suffix on schema breaks."""

    name: str
    cache_key: str
    ttl: timedelta
    content_type: type[T]
    description: str = ""

    def serialize(self, value: T) -> str:
        return dumps_json(value.to_json())

    def deserialize(self, raw: str) -> T:
        try:
            payload = json.loads(raw)
        except (json.JSONDecodeError, RecursionError) as exc:
            raise CacheCorrupt(f"{self.cache_key}: invalid json: {exc}") from exc
        if not isinstance(payload, dict):
            raise CacheCorrupt(f"{self.cache_key}: expected a json object")
        try:
            return self.content_type.from_json(payload)
        except (TypeError, ValueError, KeyError, AttributeError) as exc:
            raise CacheCorrupt(f"{self.cache_key}: {exc}") from exc


DAY = timedelta(hours=24)
WEEK = timedelta(days=7)

HOME = ContentKind("home", "website_content_cache_v1", DAY, WebsiteContent, "Home page")
EVENTS = ContentKind("events", "events_content_cache_v1", DAY, EventsContent, "Events")
CALENDAR = ContentKind(
    "calendar", "calendar_content_cache_v1", WEEK, CalendarContent, "School calendar"
)
DONATE = ContentKind("donate", "donate_content_cache_v1", DAY, DonateContent, "Donations")
CONTACT = ContentKind("contact", "contact_content_cache_v1", DAY, ContactContent, "Contact us")
ADMISSIONS = ContentKind(
    "admissions", "admissions_content_cache_v2", DAY, AdmissionsContent, "Admissions"
)
BOOKSTORE = ContentKind(
    "bookstore", "bookstore_content_cache_v1", DAY, BookstoreContent, "Bookstore"
)
CLASSES = ContentKind("classes", "classes_content_cache_v1", DAY, ClassesContent, "Classes")

ALL_KINDS: tuple[ContentKind[Any], ...] = (
    HOME,
    EVENTS,
    CALENDAR,
    DONATE,
    CONTACT,
    ADMISSIONS,
    BOOKSTORE,
    CLASSES,
)
KINDS_BY_NAME: dict[str, ContentKind[Any]] = {kind.name: kind for kind in ALL_KINDS}


def kind_for_name(name: str) -> ContentKind[Any]:
    try:
        return KINDS_BY_NAME[name.strip().lower()]
    except KeyError:
        known = ", ".join(sorted(KINDS_BY_NAME))
        raise ValueError(f"unknown content kind {name!r}; expected one of: {known}") from None
