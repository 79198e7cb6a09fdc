"""Tests for the domain store dispatch, listeners and lifecycle."""

import threading
from datetime import timedelta

import pytest

from vrms.models.enums import VisitorStatus
from vrms.models.intents import CheckInVisitor
from vrms.store.seed import SEED_FACILITIES, SEED_RESIDENTS


@pytest.mark.unit
def test_register_returns_stored_visitor(store, visitor_fields, fixed_now):
    visitor = store.register_visitor(**visitor_fields)

    assert visitor is store.snapshot.visitors[-1]
    assert visitor.created_at == fixed_now
    assert visitor.status == VisitorStatus.REGISTERED


@pytest.mark.unit
def test_full_visit_lifecycle(store, registered_visitor):
    store.check_in_visitor(registered_visitor.id, "G1")
    store.check_out_visitor(registered_visitor.id)

    visitor = store.snapshot.visitors[0]
    assert visitor.status == VisitorStatus.COMPLETED
    assert visitor.guard_on_duty == "G1"
    assert visitor.check_in_time is not None
    assert visitor.check_out_time is not None


@pytest.mark.unit
def test_initialize_loads_seed(seeded_store):
    assert seeded_store.snapshot.residents == SEED_RESIDENTS
    assert seeded_store.snapshot.facilities == SEED_FACILITIES


@pytest.mark.unit
def test_listener_receives_new_snapshot(store, visitor_fields):
    seen = []
    store.subscribe(seen.append)

    store.register_visitor(**visitor_fields)

    assert len(seen) == 1
    assert seen[0] is store.snapshot


@pytest.mark.unit
def test_listener_not_called_for_noop(store):
    seen = []
    store.subscribe(seen.append)

    before = store.snapshot
    after = store.dispatch(CheckInVisitor(id="VIS_GHOST", guard_on_duty="G1"))

    assert after is before
    assert seen == []


@pytest.mark.unit
def test_unsubscribe_stops_notifications(store, visitor_fields):
    seen = []
    unsubscribe = store.subscribe(seen.append)
    unsubscribe()
    unsubscribe()

    store.register_visitor(**visitor_fields)

    assert seen == []


@pytest.mark.unit
def test_failing_listener_does_not_break_dispatch(store, visitor_fields):
    def broken(_snapshot):
        raise RuntimeError("boom")

    seen = []
    store.subscribe(broken)
    store.subscribe(seen.append)

    visitor = store.register_visitor(**visitor_fields)

    assert visitor is not None
    assert len(seen) == 1


@pytest.mark.unit
def test_dispatch_after_close_is_ignored(store, registered_visitor, visitor_fields):
    store.close()
    before = store.snapshot

    assert store.closed
    assert store.register_visitor(**visitor_fields) is None
    assert store.dispatch(CheckInVisitor(id=registered_visitor.id, guard_on_duty="G1")) is before
    assert store.snapshot.visitors[0].status == VisitorStatus.REGISTERED

    store.close()


@pytest.mark.unit
def test_concurrent_dispatch_loses_no_intents(store, visitor_fields):
    def register_many():
        for _ in range(50):
            store.register_visitor(**visitor_fields)

    threads = [threading.Thread(target=register_many) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    ids = [v.id for v in store.snapshot.visitors]
    assert len(ids) == 200
    assert len(set(ids)) == 200


@pytest.mark.unit
def test_book_facility_returns_slot(seeded_store, fixed_now):
    slot = seeded_store.book_facility("FAC001", "RES001", fixed_now, fixed_now + timedelta(hours=2))

    assert slot is not None
    assert slot.total_cost == 200
    assert seeded_store.book_facility("FAC999", "RES001", fixed_now, fixed_now + timedelta(hours=2)) is None


@pytest.mark.unit
def test_book_facility_with_mixed_offsets_returns_none(seeded_store, fixed_now):
    naive_end = fixed_now.replace(tzinfo=None) + timedelta(hours=2)

    assert seeded_store.book_facility("FAC001", "RES001", fixed_now, naive_end) is None
    assert seeded_store.snapshot.facilities[0].booking_slots == ()
