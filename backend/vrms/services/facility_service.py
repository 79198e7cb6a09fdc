"""
Facility service for amenity listing and booking requests
"""

from typing import List, Optional
import logging

from fastapi import Depends, HTTPException, status

from vrms.dependencies import get_store
from vrms.models.entities import BookingSlot, Facility
from vrms.models.enums import BookingStatus
from vrms.models.intents import BookingPatch
from vrms.models.schemas import BookingCreateRequest, BookingListResponse
from vrms.store.store import DomainStore

logger = logging.getLogger(__name__)


class FacilityService:
    """Service for facility operations"""

    def __init__(self, store: DomainStore):
        self.store = store

    def list_facilities(self, active_only: bool = False) -> List[Facility]:
        facilities = self.store.snapshot.facilities
        if active_only:
            return [f for f in facilities if f.is_active]
        return list(facilities)

    def get_facility(self, facility_id: str) -> Facility:
        for facility in self.store.snapshot.facilities:
            if facility.id == facility_id:
                return facility
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Facility not found")

    def _find_booking(self, booking_id: str) -> Optional[BookingSlot]:
        for facility in self.store.snapshot.facilities:
            for slot in facility.booking_slots:
                if slot.id == booking_id:
                    return slot
        return None

    def book(self, facility_id: str, request: BookingCreateRequest) -> BookingSlot:
        """
        Submit a booking request. The slot starts as pending and its cost is
        the facility's hourly rate times the booked hours.
        """
        facility = self.get_facility(facility_id)
        if not facility.is_active:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Facility {facility.name} is not available for booking",
            )
        if not any(r.id == request.resident_id for r in self.store.snapshot.residents):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Resident with ID {request.resident_id} not found",
            )

        slot = self.store.book_facility(
            facility_id=facility_id,
            resident_id=request.resident_id,
            start_time=request.start_time,
            end_time=request.end_time,
        )
        if slot is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Booking was not accepted")
        return slot

    def update_booking_status(self, booking_id: str, new_status: BookingStatus) -> BookingSlot:
        if not self._find_booking(booking_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")

        self.store.update_booking(booking_id, BookingPatch(status=new_status))
        logger.info(f"BOOKING_STATUS | booking_id={booking_id} status={new_status.value}")
        return self._find_booking(booking_id)

    def list_bookings(
        self,
        facility_id: Optional[str] = None,
        status_filter: Optional[BookingStatus] = None,
    ) -> BookingListResponse:
        bookings = []
        for facility in self.store.snapshot.facilities:
            if facility_id and facility.id != facility_id:
                continue
            for slot in facility.booking_slots:
                if status_filter and slot.status != status_filter:
                    continue
                bookings.append(slot)

        bookings.sort(key=lambda s: s.created_at, reverse=True)
        return BookingListResponse(
            bookings=bookings,
            count=len(bookings),
            pending=sum(1 for b in bookings if b.status == BookingStatus.PENDING),
            total_revenue=round(sum(b.total_cost for b in bookings), 2),
        )


def get_facility_service(store: DomainStore = Depends(get_store)) -> FacilityService:
    return FacilityService(store)
