"""Tests for the in-memory session registry and its eviction rules."""

from __future__ import annotations

import asyncio

import pytest

from conftest import FakeGateway
from models.session_models import AnalysisStatus
from services.session_store import SessionStore


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_repeated_page_loads_stay_bounded() -> None:
    store = SessionStore(FakeGateway, max_sessions=1)

    for _ in range(50):
        latest = store.create()

    assert len(store) == 1
    assert latest.session_id in store


def test_least_recently_used_session_is_evicted_at_capacity() -> None:
    clock = FakeClock()
    store = SessionStore(FakeGateway, max_sessions=2, clock=clock)
    first = store.create()
    clock.now += 1
    second = store.create()
    clock.now += 1
    store.get(first.session_id)
    clock.now += 1

    third = store.create()

    assert first.session_id in store
    assert second.session_id not in store
    assert third.session_id in store


def test_idle_sessions_expire_after_ttl() -> None:
    clock = FakeClock()
    store = SessionStore(FakeGateway, ttl_seconds=60, clock=clock)
    stale = store.create()
    clock.now += 30
    fresh = store.create()

    clock.now += 45
    assert store.evict_expired() == 1

    assert stale.session_id not in store
    assert fresh.session_id in store
    with pytest.raises(KeyError):
        store.get(stale.session_id)


def test_create_drops_expired_sessions() -> None:
    clock = FakeClock()
    store = SessionStore(FakeGateway, ttl_seconds=10, clock=clock)
    for _ in range(5):
        store.create()

    clock.now += 11
    store.create()

    assert len(store) == 1


def test_no_ttl_keeps_idle_sessions() -> None:
    clock = FakeClock()
    store = SessionStore(FakeGateway, ttl_seconds=None, clock=clock)
    session = store.create()
    clock.now += 10 ** 6

    assert store.evict_expired() == 0
    assert session.session_id in store


def test_analyzing_session_is_not_expired() -> None:
    clock = FakeClock()
    release = None

    class SlowGateway:
        async def analyze(self, notes, images):
            await release.wait()
            return "done"

    store = SessionStore(SlowGateway, ttl_seconds=5, clock=clock)
    session = store.create()
    session.set_notes("context")

    async def scenario():
        nonlocal release
        release = asyncio.Event()
        running = asyncio.create_task(session.analyze())
        await asyncio.sleep(0)
        assert session.status is AnalysisStatus.ANALYZING
        clock.now += 60
        dropped = store.evict_expired()
        release.set()
        await running
        return dropped

    assert asyncio.run(scenario()) == 0
    assert session.session_id in store
    assert store.evict_expired() == 1


def test_discard_removes_session_and_rejects_unknown_ids() -> None:
    store = SessionStore(FakeGateway)
    session = store.create()

    store.discard(session.session_id)

    assert len(store) == 0
    with pytest.raises(KeyError):
        store.discard(session.session_id)


def test_max_sessions_must_be_positive() -> None:
    with pytest.raises(ValueError):
        SessionStore(FakeGateway, max_sessions=0)
