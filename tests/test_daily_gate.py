import asyncio
from datetime import UTC, datetime, timedelta

from vidyapith_content.content_kinds import CONTACT
from vidyapith_content.daily_gate import CONTACT_GATE_KEY, DailyGate
from vidyapith_content.errors import PersistWriteFailed
from vidyapith_content.models import ContactContent
from vidyapith_content.store import MemoryKeyValueStore
from vidyapith_content.time_utils import iso_z
from vidyapith_content.typed_cache import TypedCache

NOW = datetime(2025, 6, 1, 8, 30, tzinfo=UTC)


class FakeClock:
    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class Fetch:
    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.calls = 0

    async def __call__(self) -> ContactContent:
        self.calls += 1
        if self.fail:
            raise OSError("network unreachable")
        return ContactContent(phone="973-555-0100")


class GateWriteFailsStore(MemoryKeyValueStore):
    def set(self, key: str, value: str) -> None:
        if key == CONTACT_GATE_KEY:
            raise PersistWriteFailed("read-only")
        super().set(key, value)


def _setup(store=None, *, fail: bool = False, clock: FakeClock | None = None):
    store = store if store is not None else MemoryKeyValueStore()
    clock = clock or FakeClock()
    fetch = Fetch(fail=fail)
    cache = TypedCache(
        cache_key=CONTACT.cache_key,
        ttl=CONTACT.ttl,
        serialize=CONTACT.serialize,
        deserialize=CONTACT.deserialize,
        fetch=fetch,
        store=store,
        clock=clock,
    )
    return store, fetch, cache, DailyGate(store, clock=clock)


def test_first_run_triggers_and_records_timestamp() -> None:
    store, fetch, cache, gate = _setup()

    assert asyncio.run(gate.refresh_if_needed(cache)) is True

    assert fetch.calls == 1
    assert store.get(CONTACT_GATE_KEY) == iso_z(NOW)
    assert gate.state().last_triggered_at == NOW


def test_second_call_within_window_does_not_fetch() -> None:
    clock = FakeClock()
    _, fetch, cache, gate = _setup(clock=clock)

    assert asyncio.run(gate.refresh_if_needed(cache)) is True
    clock.now = NOW + timedelta(hours=23, minutes=59)
    assert asyncio.run(gate.refresh_if_needed(cache)) is False

    assert fetch.calls == 1


def test_gate_is_due_again_after_interval() -> None:
    clock = FakeClock()
    _, fetch, cache, gate = _setup(clock=clock)

    asyncio.run(gate.refresh_if_needed(cache))
    clock.now = NOW + timedelta(hours=24)

    assert asyncio.run(gate.refresh_if_needed(cache)) is True
    assert fetch.calls == 2
    assert gate.state().last_triggered_at == NOW + timedelta(hours=24)


def test_failed_gated_fetch_leaves_gate_due() -> None:
    store, fetch, cache, gate = _setup(fail=True)

    assert asyncio.run(gate.refresh_if_needed(cache)) is False
    assert store.get(CONTACT_GATE_KEY) is None
    assert asyncio.run(gate.refresh_if_needed(cache)) is False

    assert fetch.calls == 2


def test_served_fallback_advances_gate() -> None:
    store = MemoryKeyValueStore()
    cached = ContactContent(phone="old", fetched_at=NOW - timedelta(hours=30))
    store.set(CONTACT.cache_key, CONTACT.serialize(cached))
    _, fetch, cache, gate = _setup(store, fail=True)

    assert asyncio.run(gate.refresh_if_needed(cache)) is True

    assert fetch.calls == 1
    assert store.get(CONTACT_GATE_KEY) == iso_z(NOW)
    assert not gate.is_due()
    assert asyncio.run(cache.get_content(force_refresh=True)).phone == "old"


def test_gate_inside_window_ignores_stale_content() -> None:
    store = MemoryKeyValueStore()
    stale = ContactContent(phone="old", fetched_at=NOW - timedelta(hours=30))
    store.set(CONTACT.cache_key, CONTACT.serialize(stale))
    store.set(CONTACT_GATE_KEY, iso_z(NOW - timedelta(hours=23)))
    _, fetch, cache, gate = _setup(store)

    assert asyncio.run(gate.refresh_if_needed(cache)) is False
    assert fetch.calls == 0


def test_gate_25_hours_old_is_due() -> None:
    store = MemoryKeyValueStore()
    store.set(CONTACT_GATE_KEY, iso_z(NOW - timedelta(hours=25)))
    _, fetch, cache, gate = _setup(store)

    assert gate.is_due()
    assert asyncio.run(gate.refresh_if_needed(cache)) is True
    assert fetch.calls == 1


def test_reset_makes_gate_due() -> None:
    _, fetch, cache, gate = _setup()
    asyncio.run(gate.refresh_if_needed(cache))
    assert not gate.is_due()

    gate.reset()

    assert gate.state().last_triggered_at is None
    assert asyncio.run(gate.refresh_if_needed(cache)) is True
    assert fetch.calls == 2


def test_unparseable_gate_value_reads_as_absent() -> None:
    store = MemoryKeyValueStore({CONTACT_GATE_KEY: "not a timestamp"})
    _, _, _, gate = _setup(store)

    assert gate.state().last_triggered_at is None
    assert gate.is_due()


def test_epoch_millisecond_gate_value_is_understood() -> None:
    millis = int((NOW - timedelta(hours=1)).timestamp() * 1000)
    store = MemoryKeyValueStore({CONTACT_GATE_KEY: str(millis)})
    _, _, _, gate = _setup(store)

    assert gate.state().last_triggered_at == NOW - timedelta(hours=1)
    assert not gate.is_due()


def test_gate_write_failure_still_reports_success() -> None:
    store, fetch, cache, gate = _setup(GateWriteFailsStore())

    assert asyncio.run(gate.refresh_if_needed(cache)) is True
    assert fetch.calls == 1
    assert gate.is_due()
