"""Content records scraped from the Vidyapith website.

Every top-level record carries its own ``fetched_at`` so a holder of the value
can tell its age without asking the cache. JSON field names are camelCase to
match what the mobile app has always stored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from vidyapith_content.time_utils import EPOCH, iso_z, parse_fetched_at


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _opt_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str) and item]


def _dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _dict_list(value: Any) -> list[dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


@dataclass(frozen=True)
class ThoughtOfTheDay:
    text: str
    author: str | None = None

    def to_json(self) -> dict[str, Any]:
        return {"text": self.text, "author": self.author}

    @classmethod
    def from_json(cls, payload: dict[str, Any]) -> ThoughtOfTheDay:
        return cls(text=_str(payload.get("text")), author=_opt_str(payload.get("author")))


@dataclass(frozen=True)
class UpcomingEvent:
    title: str
    details: str | None = None

    def to_json(self) -> dict[str, Any]:
        return {"title": self.title, "details": self.details}

    @classmethod
    def from_json(cls, payload: dict[str, Any]) -> UpcomingEvent:
        return cls(title=_str(payload.get("title")), details=_opt_str(payload.get("details")))


@dataclass(frozen=True)
class WebsiteContent:
    """Home screen content: thought of the day, upcoming events, carousel."""

    thought_of_the_day: ThoughtOfTheDay | None = None
    upcoming_events: list[UpcomingEvent] = field(default_factory=list)
    carousel_images: list[str] = field(default_factory=list)
    fetched_at: datetime = EPOCH

    def to_json(self) -> dict[str, Any]:
        return {
            "thoughtOfTheDay": self.thought_of_the_day.to_json()
            if self.thought_of_the_day
            else None,
            "upcomingEvents": [event.to_json() for event in self.upcoming_events],
            "carouselImages": list(self.carousel_images),
            "fetchedAt": iso_z(self.fetched_at),
        }

    @classmethod
    def from_json(cls, payload: dict[str, Any]) -> WebsiteContent:
        thought = payload.get("thoughtOfTheDay")
        return cls(
            thought_of_the_day=ThoughtOfTheDay.from_json(thought)
            if isinstance(thought, dict)
            else None,
            upcoming_events=[
                UpcomingEvent.from_json(item) for item in _dict_list(payload.get("upcomingEvents"))
            ],
            carousel_images=_str_list(payload.get("carouselImages")),
            fetched_at=parse_fetched_at(payload.get("fetchedAt")),
        )


@dataclass(frozen=True)
class DonateContent:
    """Donation methods: Zelle, check, PayPal Giving, credit card, matching grants."""

    intro_paragraphs: list[str] = field(default_factory=list)
    zelle_email: str | None = None
    zelle_instruction: str | None = None
    zelle_qr_image_url: str | None = None
    check_instruction: str | None = None
    check_mailing_address: list[str] = field(default_factory=list)
    paypal_giving_instruction: str | None = None
    paypal_giving_url: str | None = None
    paypal_giving_note: str | None = None
    credit_card_instruction: str | None = None
    credit_card_url: str | None = None
    credit_card_note: str | None = None
    matching_grant_instruction: str | None = None
    matching_form_url: str | None = None
    fetched_at: datetime = EPOCH

    _OPTIONAL_FIELDS = (
        ("zelle_email", "zelleEmail"),
        ("zelle_instruction", "zelleInstruction"),
        ("zelle_qr_image_url", "zelleQrImageUrl"),
        ("check_instruction", "checkInstruction"),
        ("paypal_giving_instruction", "paypalGivingInstruction"),
        ("paypal_giving_url", "paypalGivingUrl"),
        ("paypal_giving_note", "paypalGivingNote"),
        ("credit_card_instruction", "creditCardInstruction"),
        ("credit_card_url", "creditCardUrl"),
        ("credit_card_note", "creditCardNote"),
        ("matching_grant_instruction", "matchingGrantInstruction"),
        ("matching_form_url", "matchingFormUrl"),
    )

    def to_json(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "introParagraphs": list(self.intro_paragraphs),
            "checkMailingAddress": list(self.check_mailing_address),
            "fetchedAt": iso_z(self.fetched_at),
        }
        for attr, key in self._OPTIONAL_FIELDS:
            payload[key] = getattr(self, attr)
        return payload

    @classmethod
    def from_json(cls, payload: dict[str, Any]) -> DonateContent:
        optional = {attr: _opt_str(payload.get(key)) for attr, key in cls._OPTIONAL_FIELDS}
        return cls(
            intro_paragraphs=_str_list(payload.get("introParagraphs")),
            check_mailing_address=_str_list(payload.get("checkMailingAddress")),
            fetched_at=parse_fetched_at(payload.get("fetchedAt")),
            **optional,
        )


@dataclass(frozen=True)
class Event:
    title: str
    image_url: str
    description: str

    def to_json(self) -> dict[str, Any]:
        return {"title": self.title, "imageUrl": self.image_url, "description": self.description}

    @classmethod
    def from_json(cls, payload: dict[str, Any]) -> Event:
        return cls(
            title=_str(payload.get("title")),
            image_url=_str(payload.get("imageUrl")),
            description=_str(payload.get("description")),
        )


@dataclass(frozen=True)
class EventsContent:
    events: list[Event] = field(default_factory=list)
    fetched_at: datetime = EPOCH

    def to_json(self) -> dict[str, Any]:
        return {
            "events": [event.to_json() for event in self.events],
            "fetchedAt": iso_z(self.fetched_at),
        }

    @classmethod
    def from_json(cls, payload: dict[str, Any]) -> EventsContent:
        return cls(
            events=[Event.from_json(item) for item in _dict_list(payload.get("events"))],
            fetched_at=parse_fetched_at(payload.get("fetchedAt")),
        )


@dataclass(frozen=True)
class BookstoreContent:
    title: str = "Bookstore"
    about: str = ""
    location_lines: list[str] = field(default_factory=list)
    hours: list[str] = field(default_factory=list)
    contact_email: str | None = None
    fetched_at: datetime = EPOCH

    def to_json(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "about": self.about,
            "locationLines": list(self.location_lines),
            "hours": list(self.hours),
            "contactEmail": self.contact_email,
            "fetchedAt": iso_z(self.fetched_at),
        }

    @classmethod
    def from_json(cls, payload: dict[str, Any]) -> BookstoreContent:
        return cls(
            title=_str(payload.get("title")),
            about=_str(payload.get("about")),
            location_lines=_str_list(payload.get("locationLines")),
            hours=_str_list(payload.get("hours")),
            contact_email=_opt_str(payload.get("contactEmail")),
            fetched_at=parse_fetched_at(payload.get("fetchedAt")),
        )


@dataclass(frozen=True)
class AdmissionsContent:
    section_i: str | None = None
    section_ii: str | None = None
    section_iii: str | None = None
    section_iv: str | None = None
    kg_form_url: str | None = None
    alternate_route_form_url: str | None = None
    address_lines: list[str] = field(default_factory=list)
    fetched_at: datetime = EPOCH

    def to_json(self) -> dict[str, Any]:
        return {
            "sectionI": self.section_i,
            "sectionII": self.section_ii,
            "sectionIII": self.section_iii,
            "sectionIV": self.section_iv,
            "kgFormUrl": self.kg_form_url,
            "alternateRouteFormUrl": self.alternate_route_form_url,
            "addressLines": list(self.address_lines),
            "fetchedAt": iso_z(self.fetched_at),
        }

    @classmethod
    def from_json(cls, payload: dict[str, Any]) -> AdmissionsContent:
        return cls(
            section_i=_opt_str(payload.get("sectionI")),
            section_ii=_opt_str(payload.get("sectionII")),
            section_iii=_opt_str(payload.get("sectionIII")),
            section_iv=_opt_str(payload.get("sectionIV")),
            kg_form_url=_opt_str(payload.get("kgFormUrl")),
            alternate_route_form_url=_opt_str(payload.get("alternateRouteFormUrl")),
            address_lines=_str_list(payload.get("addressLines")),
            fetched_at=parse_fetched_at(payload.get("fetchedAt")),
        )


@dataclass(frozen=True)
class ContactContent:
    phone: str | None = None
    address_lines: list[str] = field(default_factory=list)
    absence_tardy_instructions: str | None = None
    admissions_url: str | None = None
    monday_scriptural_class_form_url: str | None = None
    tabla_class_form_url: str | None = None
    registration_email: str | None = None
    alumni_email: str | None = None
    hero_image_url: str | None = None
    general_notice: str | None = None
    fetched_at: datetime = EPOCH

    def to_json(self) -> dict[str, Any]:
        return {
            "phone": self.phone,
            "addressLines": list(self.address_lines),
            "absenceTardyInstructions": self.absence_tardy_instructions,
            "admissionsUrl": self.admissions_url,
            "mondayScripturalClassFormUrl": self.monday_scriptural_class_form_url,
            "tablaClassFormUrl": self.tabla_class_form_url,
            "registrationEmail": self.registration_email,
            "alumniEmail": self.alumni_email,
            "heroImageUrl": self.hero_image_url,
            "generalNotice": self.general_notice,
            "fetchedAt": iso_z(self.fetched_at),
        }

    @classmethod
    def from_json(cls, payload: dict[str, Any]) -> ContactContent:
        return cls(
            phone=_opt_str(payload.get("phone")),
            address_lines=_str_list(payload.get("addressLines")),
            absence_tardy_instructions=_opt_str(payload.get("absenceTardyInstructions")),
            admissions_url=_opt_str(payload.get("admissionsUrl")),
            monday_scriptural_class_form_url=_opt_str(payload.get("mondayScripturalClassFormUrl")),
            tabla_class_form_url=_opt_str(payload.get("tablaClassFormUrl")),
            registration_email=_opt_str(payload.get("registrationEmail")),
            alumni_email=_opt_str(payload.get("alumniEmail")),
            hero_image_url=_opt_str(payload.get("heroImageUrl")),
            general_notice=_opt_str(payload.get("generalNotice")),
            fetched_at=parse_fetched_at(payload.get("fetchedAt")),
        )


@dataclass(frozen=True)
class ClassSection:
    """One class offering (youngsters, adults, vocal, tabla, summer camp)."""

    title: str
    description: str = ""
    schedule: str = ""
    teachers: str = ""
    form_url: str | None = None
    thumbnail_url: str = ""

    def to_json(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "schedule": self.schedule,
            "teachers": self.teachers,
            "formUrl": self.form_url,
            "thumbnailUrl": self.thumbnail_url,
        }

    @classmethod
    def from_json(cls, payload: dict[str, Any]) -> ClassSection:
        return cls(
            title=_str(payload.get("title")),
            description=_str(payload.get("description")),
            schedule=_str(payload.get("schedule")),
            teachers=_str(payload.get("teachers")),
            form_url=_opt_str(payload.get("formUrl")),
            thumbnail_url=_str(payload.get("thumbnailUrl")),
        )


@dataclass(frozen=True)
class ClassesContent:
    """Class offerings grouped by category (curricular, music, summer_camp)."""

    categories: dict[str, list[ClassSection]] = field(default_factory=dict)
    fetched_at: datetime = EPOCH

    def sections(self, category: str) -> list[ClassSection]:
        return self.categories.get(category, [])

    def to_json(self) -> dict[str, Any]:
        return {
            "categories": {
                name: [section.to_json() for section in sections]
                for name, sections in self.categories.items()
            },
            "fetchedAt": iso_z(self.fetched_at),
        }

    @classmethod
    def from_json(cls, payload: dict[str, Any]) -> ClassesContent:
        categories = {
            str(name): [ClassSection.from_json(item) for item in _dict_list(sections)]
            for name, sections in _dict(payload.get("categories")).items()
        }
        return cls(categories=categories, fetched_at=parse_fetched_at(payload.get("fetchedAt")))
