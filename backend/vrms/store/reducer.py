"""
Reducer for the domain store

apply(snapshot, intent) returns the next snapshot. It is total over Intent and
never raises for unknown IDs or illegal transitions; those intents return the
input snapshot unchanged.
"""

import logging
from datetime import datetime
from typing import Callable, Dict, Iterable, Optional

from vrms.models.entities import (
    Announcement,
    BookingSlot,
    Feedback,
    Resident,
    Snapshot,
    Vehicle,
    Visitor,
)
from vrms.models.enums import BookingStatus, VisitorStatus
from vrms.models.intents import (
    AddAnnouncement,
    AddFeedback,
    AddResident,
    AddVehicle,
    BookFacility,
    CheckInVisitor,
    CheckOutVisitor,
    Initialize,
    RegisterVisitor,
    UpdateAnnouncement,
    UpdateBooking,
    UpdateFeedback,
    UpdateResident,
    UpdateVehicle,
    UpdateVisitor,
)
from vrms.utils.timeutils import get_current_date_time
from vrms.utils.tokens import generate_id, generate_qr_code, VISITOR_ID_PREFIX

logger = logging.getLogger(__name__)

COLLECTIONS = ("visitors", "residents", "vehicles", "facilities", "feedback", "announcements")

# Status changes an UpdateVisitor patch may make. Check-in and check-out have
# their own intents; completed and overdue are terminal.
PATCH_TRANSITIONS = {
    VisitorStatus.ACTIVE: frozenset({VisitorStatus.OVERDUE}),
}


def _new_id(prefix: str, taken: Iterable[str]) -> str:
    taken = set(taken)
    new_id = generate_id(prefix)
    while new_id in taken:
        logger.warning(f"ID_COLLISION | prefix={prefix} id={new_id}")
        new_id = generate_id(prefix)
    return new_id


def _update_in(
    snapshot: Snapshot,
    collection: str,
    item_id: str,
    fn: Callable,
    event: str,
) -> Snapshot:
    """
    Replace the item with `item_id` by fn(item).
    fn returning None, or no matching item, leaves the snapshot as is.
    """
    items = getattr(snapshot, collection)
    for idx, item in enumerate(items):
        if item.id != item_id:
            continue
        updated = fn(item)
        if updated is None:
            return snapshot
        return snapshot.model_copy(
            update={collection: items[:idx] + (updated,) + items[idx + 1:]}
        )

    logger.info(f"{event}_NOT_FOUND | id={item_id}")
    return snapshot


# -----------------------------
# Visitors
# -----------------------------

def _register_visitor(snapshot: Snapshot, intent: RegisterVisitor, now: datetime) -> Snapshot:
    visitor_id = _new_id(VISITOR_ID_PREFIX, (v.id for v in snapshot.visitors))
    visitor = Visitor(
        **intent.model_dump(exclude={"type"}),
        id=visitor_id,
        qr_code=generate_qr_code(visitor_id, intent.visit_date, intent.visiting_unit, now=now),
        status=VisitorStatus.REGISTERED,
        created_at=now,
        updated_at=now,
    )

    logger.info(
        f"VISITOR_REGISTERED | id={visitor_id} unit={visitor.visiting_unit} "
        f"visit={visitor.visit_date.isoformat()} {visitor.visit_time.isoformat(timespec='minutes')}"
    )
    return snapshot.model_copy(update={"visitors": snapshot.visitors + (visitor,)})


def _check_in_visitor(snapshot: Snapshot, intent: CheckInVisitor, now: datetime) -> Snapshot:
    def check_in(visitor: Visitor) -> Optional[Visitor]:
        if visitor.status != VisitorStatus.REGISTERED:
            logger.info(f"CHECK_IN_SKIPPED | id={visitor.id} status={visitor.status.value}")
            return None
        logger.info(f"VISITOR_CHECKED_IN | id={visitor.id} guard={intent.guard_on_duty}")
        return visitor.replace(
            status=VisitorStatus.ACTIVE,
            check_in_time=now,
            guard_on_duty=intent.guard_on_duty,
            updated_at=now,
        )

    return _update_in(snapshot, "visitors", intent.id, check_in, "CHECK_IN")


def _check_out_visitor(snapshot: Snapshot, intent: CheckOutVisitor, now: datetime) -> Snapshot:
    def check_out(visitor: Visitor) -> Optional[Visitor]:
        if visitor.status != VisitorStatus.ACTIVE:
            logger.info(f"CHECK_OUT_SKIPPED | id={visitor.id} status={visitor.status.value}")
            return None
        logger.info(f"VISITOR_CHECKED_OUT | id={visitor.id}")
        return visitor.replace(
            status=VisitorStatus.COMPLETED,
            check_out_time=now,
            updated_at=now,
        )

    return _update_in(snapshot, "visitors", intent.id, check_out, "CHECK_OUT")


def _update_visitor(snapshot: Snapshot, intent: UpdateVisitor, now: datetime) -> Snapshot:
    changes = intent.updates.changes()

    def update(visitor: Visitor) -> Optional[Visitor]:
        new_status = changes.get("status")
        if (
            new_status is not None
            and new_status != visitor.status
            and new_status not in PATCH_TRANSITIONS.get(visitor.status, ())
        ):
            logger.warning(
                f"UPDATE_VISITOR_REJECTED | id={visitor.id} "
                f"from={visitor.status.value} to={new_status.value}"
            )
            return None

        updated = visitor.replace(**changes, updated_at=now)
        if (updated.visit_date, updated.visiting_unit) != (visitor.visit_date, visitor.visiting_unit):
            # Token is bound to date and unit
            updated = updated.replace(
                qr_code=generate_qr_code(visitor.id, updated.visit_date, updated.visiting_unit, now=now)
            )
            logger.info(
                f"VISITOR_TOKEN_REISSUED | id={visitor.id} visit={updated.visit_date.isoformat()} "
                f"unit={updated.visiting_unit}"
            )
        return updated

    return _update_in(snapshot, "visitors", intent.id, update, "UPDATE_VISITOR")


# -----------------------------
# Residents & vehicles
# -----------------------------

def _add_resident(snapshot: Snapshot, intent: AddResident, now: datetime) -> Snapshot:
    resident = Resident(
        **intent.model_dump(exclude={"type"}),
        id=_new_id("RES", (r.id for r in snapshot.residents)),
        created_at=now,
    )
    return snapshot.model_copy(update={"residents": snapshot.residents + (resident,)})


def _update_resident(snapshot: Snapshot, intent: UpdateResident, now: datetime) -> Snapshot:
    changes = intent.updates.changes()
    return _update_in(
        snapshot, "residents", intent.id, lambda r: r.replace(**changes), "UPDATE_RESIDENT"
    )


def _add_vehicle(snapshot: Snapshot, intent: AddVehicle, now: datetime) -> Snapshot:
    vehicle = Vehicle(
        **intent.model_dump(exclude={"type"}),
        id=_new_id("VEH", (v.id for v in snapshot.vehicles)),
        created_at=now,
    )
    return snapshot.model_copy(update={"vehicles": snapshot.vehicles + (vehicle,)})


def _update_vehicle(snapshot: Snapshot, intent: UpdateVehicle, now: datetime) -> Snapshot:
    changes = intent.updates.changes()
    return _update_in(
        snapshot, "vehicles", intent.id, lambda v: v.replace(**changes), "UPDATE_VEHICLE"
    )


# -----------------------------
# Feedback & announcements
# -----------------------------

def _add_feedback(snapshot: Snapshot, intent: AddFeedback, now: datetime) -> Snapshot:
    feedback = Feedback(
        **intent.model_dump(exclude={"type"}),
        id=_new_id("FB", (f.id for f in snapshot.feedback)),
        created_at=now,
        updated_at=now,
    )
    return snapshot.model_copy(update={"feedback": snapshot.feedback + (feedback,)})


def _update_feedback(snapshot: Snapshot, intent: UpdateFeedback, now: datetime) -> Snapshot:
    changes = intent.updates.changes()
    return _update_in(
        snapshot,
        "feedback",
        intent.id,
        lambda f: f.replace(**changes, updated_at=now),
        "UPDATE_FEEDBACK",
    )


def _add_announcement(snapshot: Snapshot, intent: AddAnnouncement, now: datetime) -> Snapshot:
    fields = intent.model_dump(exclude={"type", "announcement_type"})
    announcement = Announcement(
        **fields,
        type=intent.announcement_type,
        id=_new_id("ANN", (a.id for a in snapshot.announcements)),
        created_at=now,
    )
    return snapshot.model_copy(
        update={"announcements": snapshot.announcements + (announcement,)}
    )


def _update_announcement(snapshot: Snapshot, intent: UpdateAnnouncement, now: datetime) -> Snapshot:
    changes = intent.updates.changes()
    return _update_in(
        snapshot,
        "announcements",
        intent.id,
        lambda a: a.replace(**changes),
        "UPDATE_ANNOUNCEMENT",
    )


# -----------------------------
# Facility bookings
# -----------------------------

def booking_cost(hourly_rate: float, start: datetime, end: datetime) -> float:
    hours = (end - start).total_seconds() / 3600
    return round(hourly_rate * hours, 2)


def _book_facility(snapshot: Snapshot, intent: BookFacility, now: datetime) -> Snapshot:
    if (intent.start_time.tzinfo is None) != (intent.end_time.tzinfo is None):
        logger.warning(f"BOOK_FACILITY_REJECTED | facility_id={intent.facility_id} reason=mixed_offsets")
        return snapshot
    if intent.end_time <= intent.start_time:
        logger.warning(f"BOOK_FACILITY_REJECTED | facility_id={intent.facility_id} reason=empty_slot")
        return snapshot

    taken = (s.id for f in snapshot.facilities for s in f.booking_slots)
    slot_id = _new_id("BK", taken)

    def book(facility):
        if not facility.is_active:
            logger.warning(f"BOOK_FACILITY_REJECTED | facility_id={facility.id} reason=inactive")
            return None
        slot = BookingSlot(
            id=slot_id,
            facility_id=facility.id,
            resident_id=intent.resident_id,
            start_time=intent.start_time,
            end_time=intent.end_time,
            status=BookingStatus.PENDING,
            total_cost=booking_cost(facility.hourly_rate, intent.start_time, intent.end_time),
            created_at=now,
        )
        logger.info(
            f"FACILITY_BOOKED | facility_id={facility.id} booking_id={slot_id} cost={slot.total_cost}"
        )
        return facility.replace(booking_slots=facility.booking_slots + (slot,))

    return _update_in(snapshot, "facilities", intent.facility_id, book, "BOOK_FACILITY")


def _update_booking(snapshot: Snapshot, intent: UpdateBooking, now: datetime) -> Snapshot:
    changes = intent.updates.changes()

    for facility in snapshot.facilities:
        if not any(s.id == intent.id for s in facility.booking_slots):
            continue
        slots = tuple(
            s.replace(**changes) if s.id == intent.id else s
            for s in facility.booking_slots
        )
        return _update_in(
            snapshot,
            "facilities",
            facility.id,
            lambda f: f.replace(booking_slots=slots),
            "UPDATE_BOOKING",
        )

    logger.info(f"UPDATE_BOOKING_NOT_FOUND | id={intent.id}")
    return snapshot


# -----------------------------
# Startup
# -----------------------------

def _initialize(snapshot: Snapshot, intent: Initialize, now: datetime) -> Snapshot:
    updates = {
        name: getattr(intent, name)
        for name in COLLECTIONS
        if getattr(intent, name) is not None
    }
    logger.info(
        "STORE_INITIALIZED | " + " ".join(f"{k}={len(v)}" for k, v in updates.items())
    )
    return snapshot.model_copy(update=updates)


HANDLERS: Dict[type, Callable[[Snapshot, object, datetime], Snapshot]] = {
    RegisterVisitor: _register_visitor,
    CheckInVisitor: _check_in_visitor,
    CheckOutVisitor: _check_out_visitor,
    UpdateVisitor: _update_visitor,
    AddResident: _add_resident,
    UpdateResident: _update_resident,
    AddVehicle: _add_vehicle,
    UpdateVehicle: _update_vehicle,
    AddFeedback: _add_feedback,
    UpdateFeedback: _update_feedback,
    AddAnnouncement: _add_announcement,
    UpdateAnnouncement: _update_announcement,
    BookFacility: _book_facility,
    UpdateBooking: _update_booking,
    Initialize: _initialize,
}


def apply(snapshot: Snapshot, intent, now: Optional[datetime] = None) -> Snapshot:
    """Apply one intent. `now` stamps every timestamp the intent writes."""
    handler = HANDLERS.get(type(intent))
    if handler is None:
        logger.warning(f"UNKNOWN_INTENT | type={type(intent).__name__}")
        return snapshot
    return handler(snapshot, intent, now or get_current_date_time())
