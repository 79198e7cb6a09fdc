"""
Facility and booking API routes
"""

from typing import Optional

from fastapi import APIRouter, Depends, status

from vrms.models.entities import BookingSlot, Facility
from vrms.models.enums import BookingStatus
from vrms.models.schemas import (
    BookingCreateRequest,
    BookingListResponse,
    BookingStatusUpdateRequest,
    FacilityListResponse,
)
from vrms.services.facility_service import FacilityService, get_facility_service

router = APIRouter(prefix="/facilities", tags=["facilities"])


@router.get("", response_model=FacilityListResponse)
def list_facilities(
    active_only: bool = False,
    service: FacilityService = Depends(get_facility_service),
):
    facilities = service.list_facilities(active_only=active_only)
    return FacilityListResponse(facilities=facilities, count=len(facilities))


@router.get("/bookings", response_model=BookingListResponse)
def list_bookings(
    facility_id: Optional[str] = None,
    status_filter: Optional[BookingStatus] = None,
    service: FacilityService = Depends(get_facility_service),
):
    """All bookings across facilities, newest request first"""
    return service.list_bookings(facility_id=facility_id, status_filter=status_filter)


@router.patch("/bookings/{booking_id}", response_model=BookingSlot)
def update_booking_status(
    booking_id: str,
    payload: BookingStatusUpdateRequest,
    service: FacilityService = Depends(get_facility_service),
):
    """Approve, reject or cancel a booking"""
    return service.update_booking_status(booking_id, payload.status)


@router.get("/{facility_id}", response_model=Facility)
def get_facility(facility_id: str, service: FacilityService = Depends(get_facility_service)):
    return service.get_facility(facility_id)


@router.post(
    "/{facility_id}/bookings",
    response_model=BookingSlot,
    status_code=status.HTTP_201_CREATED,
)
def book_facility(
    facility_id: str,
    payload: BookingCreateRequest,
    service: FacilityService = Depends(get_facility_service),
):
    """
    Request a booking slot.
    The slot starts pending; cost is hourly rate times booked hours.
    """
    return service.book(facility_id, payload)
