import json
from datetime import UTC, date, datetime

import pytest

from vidyapith_content.content_kinds import (
    ADMISSIONS,
    ALL_KINDS,
    CALENDAR,
    CLASSES,
    DONATE,
    HOME,
    kind_for_name,
)
from vidyapith_content.errors import CacheCorrupt
from vidyapith_content.models import (
    CalendarContent,
    CalendarEvent,
    ClassesContent,
    ClassSection,
    DonateContent,
    ThoughtOfTheDay,
    UpcomingEvent,
    WebsiteContent,
    month_key,
)
from vidyapith_content.time_utils import EPOCH

FETCHED = datetime(2025, 2, 2, 15, 0, tzinfo=UTC)


def test_website_content_json_uses_camel_case() -> None:
    content = WebsiteContent(
        thought_of_the_day=ThoughtOfTheDay(text="Arise, awake", author="Swami Vivekananda"),
        upcoming_events=[UpcomingEvent(title="Saraswati Pooja", details="Feb 2")],
        carousel_images=["https://www.vidyapith.org/uploads/a.jpg"],
        fetched_at=FETCHED,
    )

    payload = json.loads(HOME.serialize(content))

    assert payload["fetchedAt"] == "2025-02-02T15:00:00Z"
    assert payload["thoughtOfTheDay"]["author"] == "Swami Vivekananda"
    assert payload["upcomingEvents"] == [{"title": "Saraswati Pooja", "details": "Feb 2"}]
    assert HOME.deserialize(HOME.serialize(content)) == content


def test_from_json_tolerates_missing_and_wrong_typed_fields() -> None:
    content = WebsiteContent.from_json(
        {
            "thoughtOfTheDay": "not a dict",
            "upcomingEvents": [{"title": "Picnic"}, "junk", None],
            "carouselImages": ["", "https://x/a.jpg", 3],
        }
    )

    assert content.thought_of_the_day is None
    assert content.upcoming_events == [UpcomingEvent(title="Picnic", details=None)]
    assert content.carousel_images == ["https://x/a.jpg"]
    assert content.fetched_at == EPOCH


def test_donate_content_optional_fields_roundtrip() -> None:
    content = DonateContent(
        zelle_email="donate@vidyapith.org",
        check_mailing_address=["Vivekananda Vidyapith", "20 Hinchman Avenue"],
        fetched_at=FETCHED,
    )

    restored = DONATE.deserialize(DONATE.serialize(content))

    assert restored == content
    assert restored.paypal_giving_url is None


def test_calendar_content_indexes_by_month() -> None:
    events = [
        CalendarEvent(date=date(2025, 3, 1), title="Sri Ramakrishna's Birthday"),
        CalendarEvent(date=date(2025, 1, 14), title="Pongal", is_indian_calendar_date=True),
        CalendarEvent(date=date(2025, 1, 1), title="New Year's Day", is_holiday=True),
    ]

    content = CalendarContent.from_events(events, fetched_at=FETCHED)

    assert sorted(content.events_by_month) == [202501, 202503]
    assert [event.title for event in content.events_for_month(1, 2025)] == [
        "New Year's Day",
        "Pongal",
    ]
    assert content.events_for_date(date(2025, 1, 14))[0].is_indian_calendar_date
    assert content.events_for_month(2, 2025) == []
    assert month_key(2026, 12) == 202612
    assert CALENDAR.deserialize(CALENDAR.serialize(content)) == content


def test_calendar_from_json_maps_bad_keys_and_dates() -> None:
    content = CalendarContent.from_json(
        {
            "eventsByMonth": {"abc": [{"date": "nope", "title": "x"}], "202504": "bad"},
            "fetchedAt": 12,
        }
    )

    assert content.events_by_month[0][0].date == EPOCH.date()
    assert content.events_by_month[202504] == []
    assert content.fetched_at == EPOCH


def test_classes_content_categories() -> None:
    content = ClassesContent(
        categories={
            "music": [ClassSection(title="Tabla Classes", schedule="Sundays 10:00 am")],
        },
        fetched_at=FETCHED,
    )

    restored = CLASSES.deserialize(CLASSES.serialize(content))

    assert restored.sections("music")[0].schedule == "Sundays 10:00 am"
    assert restored.sections("summer_camp") == []


@pytest.mark.parametrize("raw", ["", "{", "[]", '"text"', "null"])
def test_deserialize_rejects_non_object_payloads(raw: str) -> None:
    with pytest.raises(CacheCorrupt):
        ADMISSIONS.deserialize(raw)


def test_deserialize_rejects_overly_nested_json() -> None:
    with pytest.raises(CacheCorrupt):
        ADMISSIONS.deserialize("[" * 200_000 + "]" * 200_000)


def test_kind_table_matches_cache_keys() -> None:
    keys = {kind.name: (kind.cache_key, kind.ttl.total_seconds()) for kind in ALL_KINDS}

    assert keys["home"] == ("website_content_cache_v1", 86400)
    assert keys["calendar"] == ("calendar_content_cache_v1", 7 * 86400)
    assert keys["admissions"] == ("admissions_content_cache_v2", 86400)
    assert len({key for key, _ in keys.values()}) == len(ALL_KINDS)


def test_kind_for_name_is_case_insensitive_and_strict() -> None:
    assert kind_for_name(" Contact ").cache_key == "contact_content_cache_v1"
    with pytest.raises(ValueError, match="unknown content kind"):
        kind_for_name("newsletter")
