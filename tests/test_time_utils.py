from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

from vidyapith_content.time_utils import (
    EPOCH,
    as_utc,
    iso_z,
    parse_fetched_at,
    parse_iso_z,
    utc_now,
)


def test_utc_now_is_utc_without_microseconds() -> None:
    now = utc_now()

    assert now.tzinfo == UTC
    assert now.microsecond == 0


def test_as_utc_attaches_utc_to_naive_datetime() -> None:
    value = datetime(2025, 1, 12, 9, 30, 0)

    assert as_utc(value).tzinfo == UTC
    assert iso_z(value) == "2025-01-12T09:30:00Z"


def test_iso_z_normalizes_non_utc_datetime() -> None:
    eastern = datetime(2025, 1, 12, 5, 0, 0, tzinfo=timezone(timedelta(hours=-5)))

    assert iso_z(eastern) == "2025-01-12T10:00:00Z"


def test_parse_iso_z_parses_z_and_naive() -> None:
    parsed_z = parse_iso_z("2025-01-12T10:00:00Z")
    parsed_naive = parse_iso_z("2025-01-12T10:00:00")

    assert parsed_z == datetime(2025, 1, 12, 10, 0, 0, tzinfo=UTC)
    assert parsed_naive == datetime(2025, 1, 12, 10, 0, 0, tzinfo=UTC)


def test_parse_iso_z_invalid_returns_none() -> None:
    assert parse_iso_z("not-a-date") is None


def test_parse_iso_z_blank_returns_none() -> None:
    assert parse_iso_z("   ") is None


def test_parse_fetched_at_defaults_to_epoch() -> None:
    assert parse_fetched_at(None) == EPOCH
    assert parse_fetched_at(1736600000) == EPOCH
    assert parse_fetched_at("garbage") == EPOCH
    assert parse_fetched_at("2025-01-12T10:00:00.123Z") == datetime(
        2025, 1, 12, 10, 0, 0, 123000, tzinfo=UTC
    )
