"""
Domain entities held by the store

All entities are frozen; the reducer builds replacements instead of mutating.
"""

from datetime import date, datetime, time
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from vrms.models.enums import (
    AnnouncementType,
    BookingStatus,
    FeedbackCategory,
    FeedbackPriority,
    FeedbackStatus,
    TargetAudience,
    UserRole,
    VehicleStatus,
    VisitorStatus,
)
from vrms.utils.timeutils import is_expired


class Entity(BaseModel):
    model_config = ConfigDict(frozen=True)

    def replace(self, **updates):
        """Copy with `updates` applied, re-running validation."""
        data = self.model_dump()
        data.update(updates)
        return type(self).model_validate(data)


# -----------------------------
# Visitors
# -----------------------------

class Visitor(Entity):
    """One registered visit"""
    id: str
    visitor_name: str
    contact_number: str
    email: Optional[str] = None
    visiting_unit: str
    resident_name: str
    visit_date: date
    visit_time: time
    purpose_of_visit: str
    vehicle_number: Optional[str] = None
    number_of_visitors: int = Field(default=1, ge=1)
    identification_number: str
    identification_type: str
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None
    status: VisitorStatus = VisitorStatus.REGISTERED
    qr_code: str
    guard_on_duty: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @model_validator(mode="after")
    def _check_lifecycle_timestamps(self):
        if self.status == VisitorStatus.REGISTERED:
            if self.check_in_time is not None:
                raise ValueError("registered visitor cannot have check_in_time")
        elif self.check_in_time is None:
            raise ValueError(f"{self.status.value} visitor requires check_in_time")

        if (self.status == VisitorStatus.COMPLETED) != (self.check_out_time is not None):
            raise ValueError("check_out_time is set only for completed visitors")
        return self


# -----------------------------
# Residents & vehicles
# -----------------------------

class Vehicle(Entity):
    id: str
    plate_number: str
    make: str
    model: str
    color: str
    status: VehicleStatus = VehicleStatus.PENDING
    resident_id: str
    created_at: datetime


class Resident(Entity):
    id: str
    name: str
    unit: str
    contact_number: str
    email: str
    is_active: bool = True
    vehicles: Tuple[Vehicle, ...] = ()
    created_at: datetime


# -----------------------------
# Facilities
# -----------------------------

class BookingSlot(Entity):
    id: str
    facility_id: str
    resident_id: str
    start_time: datetime
    end_time: datetime
    status: BookingStatus = BookingStatus.PENDING
    total_cost: float
    created_at: datetime


class Facility(Entity):
    """Bookable shared amenity (seeded, never created by intents)"""
    id: str
    name: str
    description: str
    capacity: int
    hourly_rate: float
    is_active: bool = True
    booking_slots: Tuple[BookingSlot, ...] = ()


# -----------------------------
# Feedback & announcements
# -----------------------------

class Feedback(Entity):
    id: str
    resident_id: str
    category: FeedbackCategory
    subject: str
    description: str
    status: FeedbackStatus = FeedbackStatus.OPEN
    priority: FeedbackPriority = FeedbackPriority.MEDIUM
    attachments: Tuple[str, ...] = ()
    admin_reply: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class Announcement(Entity):
    id: str
    title: str
    content: str
    type: AnnouncementType = AnnouncementType.GENERAL
    target_audience: TargetAudience = TargetAudience.ALL
    target_units: Optional[Tuple[str, ...]] = None
    is_active: bool = True
    publish_date: datetime
    expiry_date: Optional[datetime] = None
    attachments: Tuple[str, ...] = ()
    created_by: str
    created_at: datetime

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return is_expired(self.expiry_date, now=now)


# -----------------------------
# Snapshot
# -----------------------------

class CurrentUser(Entity):
    id: str
    name: str
    role: UserRole
    email: str


class Snapshot(Entity):
    """Complete store state at one point in time"""
    visitors: Tuple[Visitor, ...] = ()
    residents: Tuple[Resident, ...] = ()
    vehicles: Tuple[Vehicle, ...] = ()
    facilities: Tuple[Facility, ...] = ()
    feedback: Tuple[Feedback, ...] = ()
    announcements: Tuple[Announcement, ...] = ()
    current_user: CurrentUser
