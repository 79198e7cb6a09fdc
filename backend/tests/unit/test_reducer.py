"""Tests for the store reducer."""

import typing
from datetime import date, datetime, timedelta, timezone

import pytest

from vrms.models.enums import BookingStatus, VisitorStatus
from vrms.models.intents import (
    AddFeedback,
    AddResident,
    BookFacility,
    BookingPatch,
    CheckInVisitor,
    CheckOutVisitor,
    FeedbackPatch,
    Initialize,
    Intent,
    RegisterVisitor,
    UpdateBooking,
    UpdateFeedback,
    ResidentPatch,
    UpdateResident,
    UpdateVisitor,
    VisitorPatch,
)
from vrms.models.entities import Snapshot
from vrms.store.reducer import HANDLERS, apply, booking_cost
from vrms.store.seed import SEED_FACILITIES, SEED_RESIDENTS, seed_intent
from vrms.store.store import default_current_user
from vrms.utils.tokens import is_qr_code_valid, parse_qr_code

NOW = datetime(2024, 3, 1, 2, 0, tzinfo=timezone.utc)
LATER = NOW + timedelta(hours=1)


@pytest.fixture
def empty():
    return Snapshot(current_user=default_current_user())


@pytest.fixture
def registered(empty, visitor_fields):
    """Snapshot holding Jane Doe in registered status."""
    return apply(empty, RegisterVisitor(**visitor_fields), now=NOW)


def _only_visitor(snapshot):
    assert len(snapshot.visitors) == 1
    return snapshot.visitors[0]


@pytest.mark.unit
def test_every_intent_has_a_handler():
    union = typing.get_args(Intent)[0]
    variants = set(typing.get_args(union))

    assert variants == set(HANDLERS)


@pytest.mark.unit
def test_register_visitor(registered):
    """Jane Doe lands registered, with a token and no check-in time."""
    visitor = _only_visitor(registered)

    assert visitor.id.startswith("VIS")
    assert visitor.status == VisitorStatus.REGISTERED
    assert visitor.qr_code
    assert visitor.check_in_time is None
    assert visitor.created_at == NOW
    assert visitor.updated_at == NOW


@pytest.mark.unit
def test_check_in_sets_active(registered):
    visitor = _only_visitor(registered)

    after = apply(registered, CheckInVisitor(id=visitor.id, guard_on_duty="G1"), now=LATER)
    checked_in = _only_visitor(after)

    assert checked_in.status == VisitorStatus.ACTIVE
    assert checked_in.check_in_time == LATER
    assert checked_in.guard_on_duty == "G1"
    assert checked_in.updated_at == LATER
    assert checked_in.qr_code == visitor.qr_code


@pytest.mark.unit
def test_check_out_completes_active_visitor(registered):
    visitor_id = _only_visitor(registered).id
    active = apply(registered, CheckInVisitor(id=visitor_id, guard_on_duty="G1"), now=NOW)

    after = apply(active, CheckOutVisitor(id=visitor_id), now=LATER)
    visitor = _only_visitor(after)

    assert visitor.status == VisitorStatus.COMPLETED
    assert visitor.check_out_time == LATER


@pytest.mark.unit
def test_check_out_of_registered_visitor_is_noop(registered):
    visitor_id = _only_visitor(registered).id

    after = apply(registered, CheckOutVisitor(id=visitor_id), now=LATER)

    assert after is registered


@pytest.mark.unit
def test_check_in_twice_is_noop(registered):
    visitor_id = _only_visitor(registered).id
    active = apply(registered, CheckInVisitor(id=visitor_id, guard_on_duty="G1"), now=NOW)

    again = apply(active, CheckInVisitor(id=visitor_id, guard_on_duty="G2"), now=LATER)

    assert again is active


@pytest.mark.unit
def test_check_in_unknown_id_leaves_snapshot_unchanged(registered):
    after = apply(registered, CheckInVisitor(id="VIS_GHOST", guard_on_duty="G1"), now=LATER)

    assert after is registered
    assert after.visitors == registered.visitors


@pytest.mark.unit
@pytest.mark.parametrize("terminal", [VisitorStatus.COMPLETED, VisitorStatus.OVERDUE])
@pytest.mark.parametrize("target", list(VisitorStatus))
def test_terminal_status_never_changes(registered, terminal, target):
    visitor_id = _only_visitor(registered).id
    snapshot = apply(registered, CheckInVisitor(id=visitor_id, guard_on_duty="G1"), now=NOW)
    if terminal == VisitorStatus.COMPLETED:
        snapshot = apply(snapshot, CheckOutVisitor(id=visitor_id), now=NOW)
    else:
        snapshot = apply(snapshot, UpdateVisitor(id=visitor_id, updates=VisitorPatch(status=terminal)), now=NOW)
    assert _only_visitor(snapshot).status == terminal

    after = apply(snapshot, UpdateVisitor(id=visitor_id, updates=VisitorPatch(status=target)), now=LATER)
    after = apply(after, CheckInVisitor(id=visitor_id, guard_on_duty="G2"), now=LATER)
    after = apply(after, CheckOutVisitor(id=visitor_id), now=LATER)

    assert _only_visitor(after).status == terminal


@pytest.mark.unit
def test_patch_cannot_skip_check_in(registered):
    """registered -> active only happens through CheckInVisitor."""
    visitor_id = _only_visitor(registered).id

    after = apply(
        registered,
        UpdateVisitor(id=visitor_id, updates=VisitorPatch(status=VisitorStatus.ACTIVE, purpose_of_visit="x")),
        now=LATER,
    )

    assert after is registered


@pytest.mark.unit
def test_update_visitor_merges_only_set_fields(registered):
    visitor = _only_visitor(registered)

    after = apply(
        registered,
        UpdateVisitor(id=visitor.id, updates=VisitorPatch(purpose_of_visit="Delivery", email=None)),
        now=LATER,
    )
    updated = _only_visitor(after)

    assert updated.purpose_of_visit == "Delivery"
    assert updated.email is None
    assert updated.visitor_name == visitor.visitor_name
    assert updated.id == visitor.id
    assert updated.created_at == NOW
    assert updated.updated_at == LATER


@pytest.mark.unit
def test_patches_have_no_identity_fields():
    for patch in (VisitorPatch, ResidentPatch, FeedbackPatch, BookingPatch):
        assert not {"id", "created_at", "qr_code"} & set(patch.model_fields)


@pytest.mark.unit
def test_add_resident_and_update(empty):
    snapshot = apply(
        empty,
        AddResident(name="Tan", unit="D-01-01", contact_number="+6012", email="tan@email.com"),
        now=NOW,
    )
    resident = snapshot.residents[0]
    assert resident.id.startswith("RES")
    assert resident.created_at == NOW

    after = apply(snapshot, UpdateResident(id=resident.id, updates=ResidentPatch(is_active=False)), now=LATER)

    assert after.residents[0].is_active is False
    assert after.residents[0].created_at == NOW


@pytest.mark.unit
def test_update_feedback_refreshes_updated_at(empty):
    snapshot = apply(
        empty,
        AddFeedback(resident_id="RES001", category="complaint", subject="Noise", description="Loud music"),
        now=NOW,
    )
    feedback_id = snapshot.feedback[0].id

    after = apply(
        snapshot,
        UpdateFeedback(id=feedback_id, updates=FeedbackPatch(status="resolved", admin_reply="Handled")),
        now=LATER,
    )
    fb = after.feedback[0]

    assert fb.status.value == "resolved"
    assert fb.admin_reply == "Handled"
    assert fb.created_at == NOW
    assert fb.updated_at == LATER


@pytest.mark.unit
def test_initialize_replaces_only_given_collections(registered):
    after = apply(registered, seed_intent(), now=NOW)

    assert after.residents == SEED_RESIDENTS
    assert after.facilities == SEED_FACILITIES
    assert after.visitors == registered.visitors

    cleared = apply(after, Initialize(visitors=()), now=NOW)
    assert cleared.visitors == ()
    assert cleared.residents == SEED_RESIDENTS


@pytest.mark.unit
def test_booking_cost_is_rate_times_hours():
    start = datetime(2024, 3, 2, 10, 0)

    assert booking_cost(100, start, start + timedelta(hours=3)) == 300
    assert booking_cost(50, start, start + timedelta(minutes=90)) == 75


@pytest.mark.unit
def test_book_facility_and_approve(empty):
    snapshot = apply(empty, seed_intent(), now=NOW)
    start = datetime(2024, 3, 2, 10, 0, tzinfo=timezone.utc)

    booked = apply(
        snapshot,
        BookFacility(facility_id="FAC002", resident_id="RES001", start_time=start, end_time=start + timedelta(hours=2)),
        now=NOW,
    )
    slot = booked.facilities[1].booking_slots[0]

    assert slot.status == BookingStatus.PENDING
    assert slot.total_cost == 100
    assert slot.id.startswith("BK")

    approved = apply(booked, UpdateBooking(id=slot.id, updates=BookingPatch(status=BookingStatus.APPROVED)), now=NOW)
    assert approved.facilities[1].booking_slots[0].status == BookingStatus.APPROVED


@pytest.mark.unit
def test_book_inactive_or_unknown_facility_is_noop(empty):
    snapshot = apply(empty, seed_intent(), now=NOW)
    closed_gym = snapshot.model_copy(
        update={"facilities": snapshot.facilities[:2] + (snapshot.facilities[2].replace(is_active=False),)}
    )
    start = datetime(2024, 3, 2, 10, 0, tzinfo=timezone.utc)

    for facility_id in ("FAC003", "FAC999"):
        intent = BookFacility(
            facility_id=facility_id, resident_id="RES001", start_time=start, end_time=start + timedelta(hours=1)
        )
        assert apply(closed_gym, intent, now=NOW) is closed_gym


@pytest.mark.unit
def test_update_unknown_booking_is_noop(empty):
    snapshot = apply(empty, seed_intent(), now=NOW)

    after = apply(snapshot, UpdateBooking(id="BK_GHOST", updates=BookingPatch(status=BookingStatus.APPROVED)), now=NOW)

    assert after is snapshot


@pytest.mark.unit
def test_unknown_intent_type_is_ignored(empty):
    assert apply(empty, object(), now=NOW) is empty


@pytest.mark.unit
def test_reducer_does_not_mutate_input(registered):
    visitors_before = registered.visitors
    visitor_id = visitors_before[0].id

    apply(registered, CheckInVisitor(id=visitor_id, guard_on_duty="G1"), now=LATER)

    assert registered.visitors is visitors_before
    assert registered.visitors[0].status == VisitorStatus.REGISTERED


@pytest.mark.unit
def test_moving_visit_reissues_token(registered):
    visitor = _only_visitor(registered)

    after = apply(
        registered,
        UpdateVisitor(id=visitor.id, updates=VisitorPatch(visit_date=date(2024, 3, 5), visiting_unit="C-9")),
        now=LATER,
    )
    moved = _only_visitor(after)
    payload = parse_qr_code(moved.qr_code)

    assert moved.qr_code != visitor.qr_code
    assert payload.visitor_id == visitor.id
    assert payload.visit_date == "2024-03-05"
    assert payload.unit == "C-9"
    assert is_qr_code_valid(moved.qr_code, moved.visit_date)
    assert not is_qr_code_valid(moved.qr_code, date(2024, 3, 1))


@pytest.mark.unit
def test_token_kept_when_date_and_unit_unchanged(registered):
    visitor = _only_visitor(registered)

    after = apply(
        registered,
        UpdateVisitor(id=visitor.id, updates=VisitorPatch(purpose_of_visit="Delivery")),
        now=LATER,
    )

    assert _only_visitor(after).qr_code == visitor.qr_code


@pytest.mark.unit
def test_book_facility_with_mixed_offsets_is_noop(empty):
    snapshot = apply(empty, seed_intent(), now=NOW)
    aware = datetime(2024, 3, 2, 10, 0, tzinfo=timezone.utc)
    naive = datetime(2024, 3, 2, 12, 0)

    for start, end in ((aware, naive), (naive.replace(hour=8), aware)):
        intent = BookFacility(facility_id="FAC001", resident_id="RES001", start_time=start, end_time=end)
        assert apply(snapshot, intent, now=NOW) is snapshot
