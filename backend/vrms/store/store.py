"""
Domain store: owner of the current snapshot

One DomainStore is created at application start and closed at shutdown.
Collaborators get it handed to them (FastAPI dependencies) rather than
importing a module global.
"""

import logging
import threading
from datetime import date, datetime, time
from typing import Callable, List, Optional

from vrms.config import settings
from vrms.models.entities import (
    Announcement,
    BookingSlot,
    CurrentUser,
    Feedback,
    Resident,
    Snapshot,
    Vehicle,
    Visitor,
)
from vrms.models.enums import UserRole
from vrms.models.intents import (
    AddAnnouncement,
    AddFeedback,
    AddResident,
    AddVehicle,
    AnnouncementPatch,
    BookFacility,
    BookingPatch,
    CheckInVisitor,
    CheckOutVisitor,
    FeedbackPatch,
    Initialize,
    RegisterVisitor,
    ResidentPatch,
    UpdateAnnouncement,
    UpdateBooking,
    UpdateFeedback,
    UpdateResident,
    UpdateVehicle,
    UpdateVisitor,
    VehiclePatch,
    VisitorPatch,
)
from vrms.store.reducer import apply
from vrms.utils.timeutils import get_current_date_time

logger = logging.getLogger(__name__)

Listener = Callable[[Snapshot], None]


def default_current_user() -> CurrentUser:
    return CurrentUser(
        id=settings.CURRENT_USER_ID,
        name=settings.CURRENT_USER_NAME,
        role=UserRole(settings.CURRENT_USER_ROLE),
        email=settings.CURRENT_USER_EMAIL,
    )


class DomainStore:
    """
    Holds the single authoritative snapshot and applies intents one at a time.

    Dispatch is serialized by a re-entrant lock, so intents coming from request
    handlers and from the overdue sweep are applied atomically and in dispatch
    order. Readers get immutable snapshots and never see a half-applied intent.
    """

    def __init__(
        self,
        current_user: Optional[CurrentUser] = None,
        clock: Callable[[], datetime] = get_current_date_time,
    ):
        self._snapshot = Snapshot(current_user=current_user or default_current_user())
        self._clock = clock
        self._lock = threading.RLock()
        self._listeners: List[Listener] = []
        self._closed = False

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    @property
    def closed(self) -> bool:
        return self._closed

    def dispatch(self, intent) -> Snapshot:
        """Apply one intent and return the resulting snapshot."""
        with self._lock:
            if self._closed:
                logger.warning(f"DISPATCH_AFTER_CLOSE | intent={type(intent).__name__}")
                return self._snapshot

            previous = self._snapshot
            current = apply(previous, intent, now=self._clock())
            self._snapshot = current
            listeners = list(self._listeners) if current is not previous else []

        for listener in listeners:
            try:
                listener(current)
            except Exception as e:
                logger.error(f"STORE_LISTENER_FAILED | listener={listener!r} err={e}", exc_info=True)

        return current

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call `listener` with every new snapshot. Returns an unsubscribe callable."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._listeners.clear()
        logger.info("STORE_CLOSED")

    # -----------------------------
    # Actions
    # -----------------------------

    def _append(self, intent, collection: str):
        """Dispatch a creating intent and return the record it appended, if any."""
        with self._lock:
            count = len(getattr(self._snapshot, collection))
            items = getattr(self.dispatch(intent), collection)
            if len(items) == count:
                return None
            return items[-1]

    def initialize(self, intent: Initialize) -> Snapshot:
        return self.dispatch(intent)

    def register_visitor(
        self,
        visitor_name: str,
        contact_number: str,
        visiting_unit: str,
        resident_name: str,
        visit_date: date,
        visit_time: time,
        purpose_of_visit: str,
        identification_number: str,
        identification_type: str,
        number_of_visitors: int = 1,
        email: Optional[str] = None,
        vehicle_number: Optional[str] = None,
    ) -> Optional[Visitor]:
        """
        Register a visit and return the stored visitor, so callers display the
        ID and token the store actually generated. None if the store is closed.
        """
        intent = RegisterVisitor(
            visitor_name=visitor_name,
            contact_number=contact_number,
            email=email,
            visiting_unit=visiting_unit,
            resident_name=resident_name,
            visit_date=visit_date,
            visit_time=visit_time,
            purpose_of_visit=purpose_of_visit,
            vehicle_number=vehicle_number,
            number_of_visitors=number_of_visitors,
            identification_number=identification_number,
            identification_type=identification_type,
        )
        return self._append(intent, "visitors")

    def check_in_visitor(self, visitor_id: str, guard_on_duty: str) -> Snapshot:
        return self.dispatch(CheckInVisitor(id=visitor_id, guard_on_duty=guard_on_duty))

    def check_out_visitor(self, visitor_id: str) -> Snapshot:
        return self.dispatch(CheckOutVisitor(id=visitor_id))

    def update_visitor(self, visitor_id: str, updates: VisitorPatch) -> Snapshot:
        return self.dispatch(UpdateVisitor(id=visitor_id, updates=updates))

    def add_resident(self, **fields) -> Optional[Resident]:
        return self._append(AddResident(**fields), "residents")

    def update_resident(self, resident_id: str, updates: ResidentPatch) -> Snapshot:
        return self.dispatch(UpdateResident(id=resident_id, updates=updates))

    def add_vehicle(self, **fields) -> Optional[Vehicle]:
        return self._append(AddVehicle(**fields), "vehicles")

    def update_vehicle(self, vehicle_id: str, updates: VehiclePatch) -> Snapshot:
        return self.dispatch(UpdateVehicle(id=vehicle_id, updates=updates))

    def add_feedback(self, **fields) -> Optional[Feedback]:
        return self._append(AddFeedback(**fields), "feedback")

    def update_feedback(self, feedback_id: str, updates: FeedbackPatch) -> Snapshot:
        return self.dispatch(UpdateFeedback(id=feedback_id, updates=updates))

    def add_announcement(self, **fields) -> Optional[Announcement]:
        return self._append(AddAnnouncement(**fields), "announcements")

    def update_announcement(self, announcement_id: str, updates: AnnouncementPatch) -> Snapshot:
        return self.dispatch(UpdateAnnouncement(id=announcement_id, updates=updates))

    def book_facility(
        self,
        facility_id: str,
        resident_id: str,
        start_time: datetime,
        end_time: datetime,
    ) -> Optional[BookingSlot]:
        """Request a booking; returns the new pending slot, or None if refused."""
        intent = BookFacility(
            facility_id=facility_id,
            resident_id=resident_id,
            start_time=start_time,
            end_time=end_time,
        )
        with self._lock:
            before = {s.id for f in self._snapshot.facilities for s in f.booking_slots}
            snapshot = self.dispatch(intent)
            for facility in snapshot.facilities:
                if facility.id != facility_id:
                    continue
                for slot in facility.booking_slots:
                    if slot.id not in before:
                        return slot
            return None

    def update_booking(self, booking_id: str, updates: BookingPatch) -> Snapshot:
        return self.dispatch(UpdateBooking(id=booking_id, updates=updates))
