"""School calendar: download the published PDF and turn its text into events."""

from __future__ import annotations

import asyncio
import logging
import re
import subprocess
import tempfile
from datetime import date
from pathlib import Path

import httpx

from vidyapith_content import endpoints
from vidyapith_content.gateway import get_bytes
from vidyapith_content.models import CalendarContent, CalendarEvent
from vidyapith_content.settings import Settings
from vidyapith_content.time_utils import utc_now

logger = logging.getLogger(__name__)

MONTHS = {
    name: index
    for index, name in enumerate(
        (
            "january",
            "february",
            "march",
            "april",
            "may",
            "june",
            "july",
            "august",
            "september",
            "october",
            "november",
            "december",
        ),
        start=1,
    )
}

_MONTH_HEADER_RE = re.compile(r"^(?P<month>[A-Za-z]{3,9})\.?,?\s+(?P<year>20\d{2})\b")
_MONTH_DAY_RE = re.compile(
    r"^(?P<month>[A-Za-z]{3,9})\.?\s+(?P<day>\d{1,2})(?:st|nd|rd|th)?\b[\s:,\-–]*(?P<title>.+)$"
)
_DAY_RE = re.compile(
    r"^(?P<day>\d{1,2})(?:st|nd|rd|th)?"
    r"(?:\s*\((?:mon|tue|wed|thu|fri|sat|sun)[a-z]*\))?"
    r"(?:\s+(?:mon|tue|wed|thu|fri|sat|sun)[a-z]*\.?)?"
    r"[\s:,\-–]+(?P<title>\D.*)$",
    re.I,
)

VIDYAPITH_TOKENS = (
    "vidyapith",
    "youth day",
    "flower offering",
    "celebration",
    "semester",
    "reopens",
    "no school",
    "no class",
    "closed",
    "graduation",
    "exam",
    "picnic",
    "camp",
    "rain/snow",
    "pooja / flower",
    "parent",
    "annual",
)
HOLIDAY_TOKENS = (
    "new year",
    "hanukkah",
    "martin luther",
    "presidents",
    "valentine",
    "ramadan",
    "ash wednesday",
    "patrick",
    "good friday",
    "easter",
    "passover",
    "mother's day",
    "father's day",
    "memorial day",
    "juneteenth",
    "independence day",
    "labor day",
    "columbus",
    "indigenous",
    "rosh hashanah",
    "yom kippur",
    "eid",
    "halloween",
    "veterans",
    "thanksgiving",
    "christmas",
    "republic day",
)


def month_from_name(name: str) -> int | None:
    lowered = name.lower().rstrip(".")
    if len(lowered) < 3:
        return None
    for full, index in MONTHS.items():
        if full.startswith(lowered):
            return index
    return None


def classify(title: str) -> tuple[bool, bool, bool]:
    """``(is_vidyapith_event, is_holiday, is_indian_calendar_date)`` for an event title."""
    lowered = title.lower()
    if any(token in lowered for token in VIDYAPITH_TOKENS):
        return True, False, False
    if any(token in lowered for token in HOLIDAY_TOKENS):
        return False, True, False
    return False, False, True


def _event(year: int, month: int, day: int, title: str) -> CalendarEvent | None:
    title = " ".join(title.split()).strip(" -–;,")
    if not title:
        return None
    try:
        when = date(year, month, day)
    except ValueError:
        return None
    is_vidyapith, is_holiday, is_indian = classify(title)
    return CalendarEvent(
        date=when,
        title=title,
        is_vidyapith_event=is_vidyapith,
        is_holiday=is_holiday,
        is_indian_calendar_date=is_indian,
    )


def parse_calendar_text(text: str, *, default_year: int | None = None) -> list[CalendarEvent]:
    """Parse ``pdftotext`` output into events.

    Month headers (``JANUARY 2025``) set the context for following ``<day> <title>``
    lines; ``Jan 5 <title>`` lines carry their own month. Several titles on one
    line are separated by ``;``. Impossible dates are skipped.
    """
    year = default_year
    month: int | None = None
    events: list[CalendarEvent] = []
    for raw_line in text.replace("\x0c", "\n").splitlines():
        line = " ".join(raw_line.split())
        if not line:
            continue

        header = _MONTH_HEADER_RE.match(line)
        if header and month_from_name(header.group("month")) is not None:
            month = month_from_name(header.group("month"))
            year = int(header.group("year"))
            continue

        day: int | None = None
        body = ""
        dated = _MONTH_DAY_RE.match(line)
        if dated and month_from_name(dated.group("month")) is not None:
            month = month_from_name(dated.group("month"))
            day, body = int(dated.group("day")), dated.group("title")
        else:
            numbered = _DAY_RE.match(line)
            if numbered:
                day, body = int(numbered.group("day")), numbered.group("title")

        if day is None or month is None or year is None:
            continue
        for title in body.split(";"):
            event = _event(year, month, day, title)
            if event is not None:
                events.append(event)
    return events


def extract_pdf_text(pdf_bytes: bytes) -> str:
    with tempfile.TemporaryDirectory() as tmp_dir:
        pdf_path = Path(tmp_dir) / "calendar.pdf"
        pdf_path.write_bytes(pdf_bytes)
        proc = subprocess.run(
            ["pdftotext", "-layout", "-enc", "UTF-8", str(pdf_path), "-"],
            capture_output=True,
            text=True,
            check=False,
        )
    if proc.returncode != 0:
        stderr = proc.stderr.strip() or f"pdftotext failed with code {proc.returncode}"
        raise RuntimeError(stderr)
    return proc.stdout


def parse_calendar_pdf(pdf_bytes: bytes, *, default_year: int | None = None) -> CalendarContent:
    text = extract_pdf_text(pdf_bytes)
    events = parse_calendar_text(text, default_year=default_year)
    if not events:
        raise ValueError("calendar pdf contained no recognizable events")
    logger.debug("parsed %d calendar events", len(events))
    return CalendarContent.from_events(events, fetched_at=utc_now())


async def fetch_calendar_content(client: httpx.AsyncClient, settings: Settings) -> CalendarContent:
    pdf_bytes = await get_bytes(client, settings.page_url(endpoints.CALENDAR_PDF_PATH))
    return await asyncio.to_thread(parse_calendar_pdf, pdf_bytes, default_year=utc_now().year)
