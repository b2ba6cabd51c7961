"""Website scrapers: one async fetch function per content kind.

Each ``fetch_*`` downloads a page through the gateway and hands the HTML to a
pure ``parse_*`` function. Parsers are best-effort; missing pieces come back as
``None`` or empty lists rather than errors.
"""

from __future__ import annotations

import re

import httpx

from vidyapith_content import endpoints
from vidyapith_content.gateway import get_text
from vidyapith_content.html_text import (
    EMAIL_RE,
    anchors,
    clean_html,
    elements,
    email_from_anchor,
    image_urls,
    resolve_href,
    split_lines,
    text_after_heading,
)
from vidyapith_content.models import (
    AdmissionsContent,
    BookstoreContent,
    ClassesContent,
    ClassSection,
    ContactContent,
    DonateContent,
    Event,
    EventsContent,
    ThoughtOfTheDay,
    UpcomingEvent,
    WebsiteContent,
)
from vidyapith_content.settings import Settings
from vidyapith_content.time_utils import utc_now

SCHOOL_ADDRESS = ("Vivekananda Vidyapith", "20 Hinchman Avenue", "Wayne, NJ 07470")
CAROUSEL_LIMIT = 8

_ADDRESS_RE = re.compile(
    r"Vivekananda Vidyapith.*?20 Hinchman Avenue.*?Wayne.*?NJ.*?07470", re.I | re.S
)
_PHONE_RE = re.compile(r"\(?\b\d{3}\)?[-.\s]\d{3}[-.\s]\d{4}\b")
_SCHEDULE_RE = re.compile(
    r"\b(?:mon|tues|wednes|thurs|fri|satur|sun)days?\b|\b\d{1,2}:\d{2}\s*(?:am|pm)?", re.I
)
_ROMAN_SECTION_RE = re.compile(r"^(?:section\s+)?(IV|III|II|I)(?:[.):]|\s+-)\s*", re.I)


def _first_line_containing(lines: list[str], *needles: str) -> str | None:
    for line in lines:
        lowered = line.lower()
        if all(needle in lowered for needle in needles):
            return line
    return None


def _first_link(page: str, base_url: str, *needles: str) -> str | None:
    for anchor in anchors(page):
        haystack = f"{anchor.text} {anchor.href}".lower()
        if any(needle in haystack for needle in needles):
            resolved = resolve_href(anchor.href, base_url)
            if resolved:
                return resolved
    return None


def _address_lines(text: str) -> list[str]:
    if _ADDRESS_RE.search(text):
        return list(SCHOOL_ADDRESS)
    found = [
        line
        for line in split_lines(text)
        if any(token in line.lower() for token in ("vivekananda", "hinchman", "wayne"))
        and len(line) < 80
    ]
    return list(dict.fromkeys(found)) or list(SCHOOL_ADDRESS)


def parse_website_content(page: str, base_url: str) -> WebsiteContent:
    thought: ThoughtOfTheDay | None = None
    thought_text = text_after_heading(page, "thought of the day")
    if thought_text:
        lines = split_lines(thought_text)
        text, author = lines[0], " ".join(lines[1:]).strip() or None
        if author is None:
            match = re.search(r"\s[-–—]\s*(.+)$", text)
            if match:
                author = match.group(1).strip() or None
                text = text[: match.start()].strip()
        if author:
            author = author.lstrip("-–— ").strip() or None
        thought = ThoughtOfTheDay(text=text, author=author)

    upcoming: list[UpcomingEvent] = []
    for entry in split_lines(text_after_heading(page, "upcoming events") or ""):
        segments = entry.split(" - ")
        details = " - ".join(segments[:-1]).strip()
        upcoming.append(UpcomingEvent(title=segments[-1].strip(), details=details or None))

    return WebsiteContent(
        thought_of_the_day=thought,
        upcoming_events=upcoming,
        carousel_images=image_urls(page, base_url, limit=CAROUSEL_LIMIT),
        fetched_at=utc_now(),
    )


def parse_events_content(page: str, base_url: str) -> EventsContent:
    events: list[Event] = []
    seen_images: set[str] = set()
    for row in elements(page, "tr"):
        images = image_urls(row, base_url, limit=1)
        if not images or images[0] in seen_images:
            continue
        text_cells = [
            clean_html(cell) for cell in elements(row, "td") if "<img" not in cell.lower()
        ]
        lines = split_lines("\n".join(text_cells))
        if not lines:
            continue
        strong = elements(row, "strong")
        title = clean_html(strong[0]) if strong else lines[0]
        title = re.sub(r"^[:\-\s]+", "", title)
        if not 3 <= len(title) <= 100:
            continue
        description = " ".join(line for line in lines if line != title).strip()
        seen_images.add(images[0])
        events.append(Event(title=title, image_url=images[0], description=description))
    return EventsContent(events=events, fetched_at=utc_now())


def parse_donate_content(page: str, base_url: str) -> DonateContent:
    text = clean_html(page)
    lines = split_lines(text)
    methods = ("zelle", "check", "paypal", "credit card", "matching")

    intro: list[str] = []
    for line in lines:
        if any(method in line.lower() for method in methods):
            break
        if len(line) > 40:
            intro.append(line)

    zelle_line = _first_line_containing(lines, "zelle")
    zelle_email = None
    if zelle_line:
        match = EMAIL_RE.search(zelle_line)
        zelle_email = match.group(0) if match else None
    if zelle_email is None:
        for anchor in anchors(page):
            email = email_from_anchor(anchor)
            if email:
                zelle_email = email
                break

    qr_images = [url for url in image_urls(page, base_url) if "qr" in url.lower()]
    check_address = [
        line
        for line in _address_lines(text)
        if "hinchman" in line.lower() or "wayne" in line.lower() or "vidyapith" in line.lower()
    ]
    return DonateContent(
        intro_paragraphs=intro[:3],
        zelle_email=zelle_email,
        zelle_instruction=zelle_line,
        zelle_qr_image_url=qr_images[0] if qr_images else None,
        check_instruction=_first_line_containing(lines, "check", "payable")
        or _first_line_containing(lines, "check"),
        check_mailing_address=check_address or list(SCHOOL_ADDRESS),
        paypal_giving_instruction=_first_line_containing(lines, "paypal"),
        paypal_giving_url=_first_link(page, base_url, "paypal"),
        paypal_giving_note=_first_line_containing(lines, "paypal", "fee"),
        credit_card_instruction=_first_line_containing(lines, "credit card"),
        credit_card_url=_first_link(page, base_url, "credit card", "square", "stripe"),
        credit_card_note=_first_line_containing(lines, "credit card", "fee"),
        matching_grant_instruction=_first_line_containing(lines, "matching"),
        matching_form_url=_first_link(page, base_url, "matching"),
        fetched_at=utc_now(),
    )


def parse_contact_content(page: str, base_url: str) -> ContactContent:
    text = clean_html(page)
    lines = split_lines(text)
    phone_match = _PHONE_RE.search(text)

    absence = None
    match = re.search(r"To report an.*?Absence.*?Tardy.*?8:30\s*am", text, re.I | re.S)
    if match:
        absence = " ".join(match.group(0).split())
    else:
        absence = _first_line_containing(lines, "absence") or _first_line_containing(
            lines, "tardy"
        )

    admissions_url = monday_form = tabla_form = None
    registration_email = alumni_email = None
    for anchor in anchors(page):
        label = anchor.text.lower()
        resolved = resolve_href(anchor.href, base_url)
        if resolved:
            lowered = resolved.lower()
            is_form = "docs.google.com" in lowered or "form" in lowered
            if admissions_url is None and "admissions" in lowered and "contact" not in lowered:
                admissions_url = resolved
            if monday_form is None and "scriptural" in label and is_form:
                monday_form = resolved
            if tabla_form is None and "tabla" in label and is_form:
                tabla_form = resolved
        email = email_from_anchor(anchor)
        if email:
            if "alumni" in email.lower():
                alumni_email = alumni_email or email
            else:
                registration_email = registration_email or email

    notice = None
    match = re.search(
        r"All teachers can be reached.*?email addresses.*?Thank you", text, re.I | re.S
    )
    if match:
        notice = " ".join(match.group(0).split())
    else:
        notice = _first_line_containing(lines, "teachers can be reached")

    heroes = image_urls(page, base_url, limit=1)
    return ContactContent(
        phone=phone_match.group(0) if phone_match else None,
        address_lines=_address_lines(text),
        absence_tardy_instructions=absence,
        admissions_url=admissions_url,
        monday_scriptural_class_form_url=monday_form,
        tabla_class_form_url=tabla_form,
        registration_email=registration_email,
        alumni_email=alumni_email,
        hero_image_url=heroes[0] if heroes else None,
        general_notice=notice,
        fetched_at=utc_now(),
    )


def parse_admissions_content(page: str, base_url: str) -> AdmissionsContent:
    text = clean_html(page)
    sections: dict[str, list[str]] = {}
    current: str | None = None
    for line in split_lines(text):
        match = _ROMAN_SECTION_RE.match(line)
        if match:
            current = match.group(1).upper()
            sections.setdefault(current, [])
            remainder = line[match.end() :].strip()
            if remainder:
                sections[current].append(remainder)
            continue
        if current is not None:
            sections[current].append(line)

    def _section(numeral: str) -> str | None:
        body = " ".join(sections.get(numeral, [])).strip()
        return body or None

    return AdmissionsContent(
        section_i=_section("I"),
        section_ii=_section("II"),
        section_iii=_section("III"),
        section_iv=_section("IV"),
        kg_form_url=_first_link(page, base_url, "kindergarten", "kg form", "kg-"),
        alternate_route_form_url=_first_link(page, base_url, "alternate"),
        address_lines=_address_lines(text),
        fetched_at=utc_now(),
    )


def parse_bookstore_content(page: str) -> BookstoreContent:
    headings = elements(page, "h2", class_contains="wsite-content-title")
    title = clean_html(headings[0]) if headings else ""

    info_lines: list[str] = []
    for block in elements(page, "div", class_contains="paragraph"):
        block_text = clean_html(block)
        lowered = block_text.lower()
        if "about us" in lowered and "bookstore" in lowered:
            info_lines = split_lines(block_text)
            break

    about: list[str] = []
    location: list[str] = []
    hours: list[str] = []
    contact_email = None
    section = None
    buckets = {"about": about, "location": location, "hours": hours}
    for line in info_lines:
        lowered = line.lower().strip(" :")
        for marker in ("about us", "location", "hours", "questions"):
            if lowered.startswith(marker):
                section = marker.split()[0]
                break
        else:
            email = EMAIL_RE.search(line)
            if email:
                contact_email = contact_email or email.group(0)
            elif section in buckets:
                buckets[section].append(line)
    return BookstoreContent(
        title=title or "Bookstore",
        about=" ".join(about),
        location_lines=location,
        hours=hours,
        contact_email=contact_email,
        fetched_at=utc_now(),
    )


def _class_section(
    page: str, base_url: str, keyword: str, *, title: str, thumbnail: str
) -> ClassSection:
    body = text_after_heading(page, keyword) or ""
    lines = split_lines(body)
    schedule = next((line for line in lines if _SCHEDULE_RE.search(line)), "")
    teachers = next((line for line in lines if line.lower().startswith("teacher")), "")
    description = " ".join(line for line in lines if line not in (schedule, teachers))
    form_url = _first_link(page, base_url, f"{keyword} form", f"{keyword} registration")
    if form_url is None:
        form_url = next(
            (
                resolve_href(anchor.href, base_url)
                for anchor in anchors(page)
                if keyword in anchor.text.lower() and "docs.google.com" in anchor.href
            ),
            None,
        )
    return ClassSection(
        title=title,
        description=description,
        schedule=schedule,
        teachers=teachers.split(":", 1)[-1].strip() if teachers else "",
        form_url=form_url,
        thumbnail_url=thumbnail,
    )


def parse_classes_content(
    curricular_page: str,
    music_page: str,
    summer_camp_page: str,
    base_url: str,
) -> ClassesContent:
    curricular_images = image_urls(curricular_page, base_url, limit=1)
    music_images = image_urls(music_page, base_url, limit=2)
    camp_images = image_urls(summer_camp_page, base_url, limit=1)

    def _image(images: list[str], index: int) -> str:
        return images[index] if len(images) > index else ""

    camp_title = elements(summer_camp_page, "h2")
    camp_lines = split_lines(clean_html(summer_camp_page))
    camp = ClassSection(
        title=clean_html(camp_title[0]) if camp_title else "Summer Camp",
        description=" ".join(line for line in camp_lines if len(line) > 40),
        thumbnail_url=_image(camp_images, 0),
    )
    return ClassesContent(
        categories={
            "curricular": [
                _class_section(
                    curricular_page,
                    base_url,
                    "youngsters",
                    title="Youngsters",
                    thumbnail=_image(curricular_images, 0),
                ),
                _class_section(
                    curricular_page,
                    base_url,
                    "adults",
                    title="Adults",
                    thumbnail=_image(curricular_images, 0),
                ),
            ],
            "music": [
                _class_section(
                    music_page,
                    base_url,
                    "vocal",
                    title="Vocal Classes",
                    thumbnail=_image(music_images, 0),
                ),
                _class_section(
                    music_page,
                    base_url,
                    "tabla",
                    title="Tabla Classes",
                    thumbnail=_image(music_images, 1),
                ),
            ],
            "summer_camp": [camp],
        },
        fetched_at=utc_now(),
    )


async def fetch_website_content(client: httpx.AsyncClient, settings: Settings) -> WebsiteContent:
    url = settings.page_url(endpoints.HOMEPAGE_PATH)
    return parse_website_content(await get_text(client, url), url)


async def fetch_events_content(client: httpx.AsyncClient, settings: Settings) -> EventsContent:
    url = settings.page_url(endpoints.EVENTS_PATH)
    return parse_events_content(await get_text(client, url), url)


async def fetch_donate_content(client: httpx.AsyncClient, settings: Settings) -> DonateContent:
    url = settings.page_url(endpoints.DONATE_PATH)
    return parse_donate_content(await get_text(client, url), url)


async def fetch_contact_content(client: httpx.AsyncClient, settings: Settings) -> ContactContent:
    url = settings.page_url(endpoints.CONTACT_PATH)
    return parse_contact_content(await get_text(client, url), url)


async def fetch_admissions_content(
    client: httpx.AsyncClient, settings: Settings
) -> AdmissionsContent:
    url = settings.page_url(endpoints.ADMISSIONS_PATH)
    return parse_admissions_content(await get_text(client, url), url)


async def fetch_bookstore_content(
    client: httpx.AsyncClient, settings: Settings
) -> BookstoreContent:
    url = settings.page_url(endpoints.BOOKSTORE_PATH)
    return parse_bookstore_content(await get_text(client, url))


async def fetch_classes_content(client: httpx.AsyncClient, settings: Settings) -> ClassesContent:
    curricular = await get_text(client, settings.page_url(endpoints.CURRICULAR_CLASSES_PATH))
    music = await get_text(client, settings.page_url(endpoints.MUSIC_CLASSES_PATH))
    camp = await get_text(client, settings.page_url(endpoints.SUMMER_CAMP_PATH))
    return parse_classes_content(curricular, music, camp, settings.page_url("/"))
