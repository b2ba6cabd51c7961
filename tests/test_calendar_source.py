import asyncio
from datetime import date

import httpx
import pytest

from vidyapith_content import calendar_source
from vidyapith_content.calendar_source import classify, month_from_name, parse_calendar_text
from vidyapith_content.settings import Settings

CALENDAR_TEXT = """\
Vivekananda Vidyapith School Calendar 2025

JANUARY 2025
1 New Year's Day; Kalpataru Day
4 Sat Vidyapith Reopens
14 Pongal
\x0cFEBRUARY 2025
Feb 2 Saraswati Pooja
30 Impossible Day
17 Presidents' Day
Mar 1 Sri Ramakrishna's Birthday & Celebration
3
"""


def test_parse_calendar_text_tracks_month_context() -> None:
    events = parse_calendar_text(CALENDAR_TEXT)

    assert [(event.date, event.title) for event in events] == [
        (date(2025, 1, 1), "New Year's Day"),
        (date(2025, 1, 1), "Kalpataru Day"),
        (date(2025, 1, 4), "Vidyapith Reopens"),
        (date(2025, 1, 14), "Pongal"),
        (date(2025, 2, 2), "Saraswati Pooja"),
        (date(2025, 2, 17), "Presidents' Day"),
        (date(2025, 3, 1), "Sri Ramakrishna's Birthday & Celebration"),
    ]
    assert events[0].is_holiday
    assert events[2].is_vidyapith_event
    assert events[3].is_indian_calendar_date


def test_lines_before_any_month_need_a_default_year() -> None:
    assert parse_calendar_text("Jan 5 Youth Day") == []

    (event,) = parse_calendar_text("Jan 5 Youth Day", default_year=2026)

    assert event.date == date(2026, 1, 5)
    assert event.is_vidyapith_event


def test_classify_flags_are_exclusive() -> None:
    assert classify("Flower Offering for Diwali") == (True, False, False)
    assert classify("Martin Luther King Jr. Day") == (False, True, False)
    assert classify("Makara Sankranti") == (False, False, True)


def test_month_from_name() -> None:
    assert month_from_name("Sept") == 9
    assert month_from_name("DECEMBER") == 12
    assert month_from_name("Sat") is None
    assert month_from_name("Ma") is None


def test_parse_calendar_pdf_without_events_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(calendar_source, "extract_pdf_text", lambda _: "Page 1 of 2\n")

    with pytest.raises(ValueError, match="no recognizable events"):
        calendar_source.parse_calendar_pdf(b"%PDF-1.4")


def test_fetch_calendar_content_downloads_pdf(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: list[bytes] = []

    def fake_extract(pdf_bytes: bytes) -> str:
        seen.append(pdf_bytes)
        return CALENDAR_TEXT

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path.endswith(".pdf")
        return httpx.Response(200, content=b"%PDF-1.4 calendar")

    monkeypatch.setattr(calendar_source, "extract_pdf_text", fake_extract)
    settings = Settings(_env_file=None)

    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await calendar_source.fetch_calendar_content(client, settings)

    content = asyncio.run(run())

    assert seen == [b"%PDF-1.4 calendar"]
    assert len(content.events_for_month(1, 2025)) == 4
    assert content.events_for_date(date(2025, 3, 1))[0].is_vidyapith_event
