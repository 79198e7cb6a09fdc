"""Tests for the overdue sweep."""

import asyncio
import threading
import time
from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from vrms.models.enums import VisitorStatus
from vrms.services.overdue_sweep import OverdueSweeper

KL = ZoneInfo("Asia/Kuala_Lumpur")

# Jane Doe's visit is 2024-03-01 10:00, so the 8h window closes at 18:00
BEFORE_DEADLINE = datetime(2024, 3, 1, 18, 0, tzinfo=KL)
AFTER_DEADLINE = datetime(2024, 3, 1, 18, 0, 1, tzinfo=KL)


@pytest.fixture
def active_visitor(store, registered_visitor):
    store.check_in_visitor(registered_visitor.id, "G1")
    return registered_visitor


def _status(store, visitor_id):
    return next(v.status for v in store.snapshot.visitors if v.id == visitor_id)


@pytest.mark.unit
def test_sweep_marks_active_visitor_past_window(store, active_visitor):
    sweeper = OverdueSweeper(store, max_visit_hours=8)

    assert sweeper.sweep(now=BEFORE_DEADLINE) == []
    assert _status(store, active_visitor.id) == VisitorStatus.ACTIVE

    assert sweeper.sweep(now=AFTER_DEADLINE) == [active_visitor.id]
    assert _status(store, active_visitor.id) == VisitorStatus.OVERDUE


@pytest.mark.unit
def test_sweep_respects_configured_max_hours(store, active_visitor):
    sweeper = OverdueSweeper(store, max_visit_hours=10)

    assert sweeper.sweep(now=AFTER_DEADLINE) == []


@pytest.mark.unit
def test_sweep_ignores_registered_and_completed(store, registered_visitor, visitor_fields):
    other = store.register_visitor(**visitor_fields)
    store.check_in_visitor(other.id, "G1")
    store.check_out_visitor(other.id)

    marked = OverdueSweeper(store).sweep(now=AFTER_DEADLINE)

    assert marked == []
    assert _status(store, registered_visitor.id) == VisitorStatus.REGISTERED
    assert _status(store, other.id) == VisitorStatus.COMPLETED


@pytest.mark.unit
def test_sweep_is_idempotent(store, active_visitor):
    sweeper = OverdueSweeper(store)

    sweeper.sweep(now=AFTER_DEADLINE)

    assert sweeper.sweep(now=AFTER_DEADLINE) == []


@pytest.mark.unit
def test_sweep_on_closed_store_does_nothing(store, active_visitor):
    store.close()

    assert OverdueSweeper(store).sweep(now=AFTER_DEADLINE) == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_background_task_marks_overdue(store, active_visitor):
    """The visit is in the past, so the first tick marks it overdue."""
    sweeper = OverdueSweeper(store, interval_seconds=0.01)
    sweeper.start()
    try:
        for _ in range(100):
            if _status(store, active_visitor.id) == VisitorStatus.OVERDUE:
                break
            await asyncio.sleep(0.01)
    finally:
        await sweeper.stop()

    assert _status(store, active_visitor.id) == VisitorStatus.OVERDUE


@pytest.mark.unit
@pytest.mark.asyncio
async def test_start_and_stop_are_idempotent(store):
    sweeper = OverdueSweeper(store, interval_seconds=60)

    sweeper.start()
    first_task = sweeper._task
    sweeper.start()
    assert sweeper._task is first_task
    assert sweeper.running

    await sweeper.stop()
    await sweeper.stop()
    assert not sweeper.running

    sweeper.start()
    assert sweeper.running
    await sweeper.stop()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_failed_pass_keeps_ticker_alive(store, monkeypatch):
    sweeper = OverdueSweeper(store, interval_seconds=0.01)
    calls = []

    def flaky_sweep(now=None):
        calls.append(now)
        if len(calls) == 1:
            raise RuntimeError("boom")
        return []

    monkeypatch.setattr(sweeper, "sweep", flaky_sweep)
    sweeper.start()
    try:
        for _ in range(100):
            if len(calls) >= 2:
                break
            await asyncio.sleep(0.01)
        assert sweeper.running
    finally:
        await sweeper.stop()

    assert len(calls) >= 2


@pytest.mark.unit
def test_overlapping_sweeps_mark_visitor_once(store, active_visitor, monkeypatch):
    """A manual sweep racing the timer tick dispatches overdue only once."""
    sweeper = OverdueSweeper(store)
    dispatched = []
    update_visitor = store.update_visitor

    def slow_update(visitor_id, updates):
        dispatched.append(visitor_id)
        time.sleep(0.05)
        return update_visitor(visitor_id, updates)

    monkeypatch.setattr(store, "update_visitor", slow_update)

    results = []
    threads = [
        threading.Thread(target=lambda: results.append(sweeper.sweep(now=AFTER_DEADLINE)))
        for _ in range(2)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert dispatched == [active_visitor.id]
    assert sorted(results, key=len) == [[], [active_visitor.id]]
    assert _status(store, active_visitor.id) == VisitorStatus.OVERDUE
