"""Typed content records for each cached content kind."""

from vidyapith_content.models.calendar_event import CalendarContent, CalendarEvent, month_key
from vidyapith_content.models.website_content import (
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

__all__ = [
    "AdmissionsContent",
    "BookstoreContent",
    "CalendarContent",
    "CalendarEvent",
    "ClassSection",
    "ClassesContent",
    "ContactContent",
    "DonateContent",
    "Event",
    "EventsContent",
    "ThoughtOfTheDay",
    "UpcomingEvent",
    "WebsiteContent",
    "month_key",
]
