"""Site-relative paths of the pages each content kind is scraped from."""

from __future__ import annotations

HOMEPAGE_PATH = "/"
EVENTS_PATH = "/events.html"
DONATE_PATH = "/donate.html"
CONTACT_PATH = "/contact-us1.html"
ADMISSIONS_PATH = "/admissions1.html"
BOOKSTORE_PATH = "/bookstore.html"
CURRICULAR_CLASSES_PATH = "/curricular-classes.html"
MUSIC_CLASSES_PATH = "/music-classes.html"
SUMMER_CAMP_PATH = "/summer-camp.html"
CALENDAR_PDF_PATH = (
    "/uploads/5/2/1/3/52135817/v9_final_dates_vp_calendar_2025_n_2024.11.12.pdf"
)
