"""Calendar events indexed by month."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from vidyapith_content.time_utils import EPOCH, iso_z, parse_fetched_at


def month_key(year: int, month: int) -> int:
    """Index key for a calendar month, e.g. 202501 for January 2025."""
    return year * 100 + month


def _parse_date(value: Any) -> date:
    if isinstance(value, str) and value:
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            pass
    return EPOCH.date()


@dataclass(frozen=True)
class CalendarEvent:
    date: date
    title: str
    description: str | None = None
    is_vidyapith_event: bool = False
    is_holiday: bool = False
    is_indian_calendar_date: bool = False

    def to_json(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "title": self.title,
            "description": self.description,
            "isVidyapithEvent": self.is_vidyapith_event,
            "isHoliday": self.is_holiday,
            "isIndianCalendarDate": self.is_indian_calendar_date,
        }

    @classmethod
    def from_json(cls, payload: dict[str, Any]) -> CalendarEvent:
        description = payload.get("description")
        return cls(
            date=_parse_date(payload.get("date")),
            title=payload.get("title") if isinstance(payload.get("title"), str) else "",
            description=description if isinstance(description, str) else None,
            is_vidyapith_event=payload.get("isVidyapithEvent") is True,
            is_holiday=payload.get("isHoliday") is True,
            is_indian_calendar_date=payload.get("isIndianCalendarDate") is True,
        )


@dataclass(frozen=True)
class CalendarContent:
    events_by_month: dict[int, list[CalendarEvent]] = field(default_factory=dict)
    fetched_at: datetime = EPOCH

    @classmethod
    def from_events(
        cls, events: list[CalendarEvent], *, fetched_at: datetime = EPOCH
    ) -> CalendarContent:
        grouped: dict[int, list[CalendarEvent]] = defaultdict(list)
        for event in sorted(events, key=lambda item: item.date):
            grouped[month_key(event.date.year, event.date.month)].append(event)
        return cls(events_by_month=dict(grouped), fetched_at=fetched_at)

    def events_for_month(self, month: int, year: int) -> list[CalendarEvent]:
        return self.events_by_month.get(month_key(year, month), [])

    def events_for_date(self, day: date) -> list[CalendarEvent]:
        return [event for event in self.events_for_month(day.month, day.year) if event.date == day]

    def to_json(self) -> dict[str, Any]:
        return {
            "eventsByMonth": {
                str(key): [event.to_json() for event in events]
                for key, events in sorted(self.events_by_month.items())
            },
            "fetchedAt": iso_z(self.fetched_at),
        }

    @classmethod
    def from_json(cls, payload: dict[str, Any]) -> CalendarContent:
        raw = payload.get("eventsByMonth")
        events_by_month: dict[int, list[CalendarEvent]] = {}
        if isinstance(raw, dict):
            for key, items in raw.items():
                try:
                    month = int(key)
                except (TypeError, ValueError):
                    month = 0
                if not isinstance(items, list):
                    items = []
                events_by_month[month] = [
                    CalendarEvent.from_json(item) for item in items if isinstance(item, dict)
                ]
        return cls(
            events_by_month=events_by_month,
            fetched_at=parse_fetched_at(payload.get("fetchedAt")),
        )
