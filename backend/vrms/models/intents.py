"""
Intents accepted by the domain store, and the per-entity patch types

`Intent` is a closed union discriminated on `type`; the reducer keeps one
handler per member.
"""

from datetime import date, datetime, time
from typing import Annotated, ClassVar, FrozenSet, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from vrms.models.entities import (
    Announcement,
    Facility,
    Feedback,
    Resident,
    Vehicle,
    Visitor,
)
from vrms.models.enums import (
    AnnouncementType,
    BookingStatus,
    FeedbackCategory,
    FeedbackPriority,
    FeedbackStatus,
    TargetAudience,
    VehicleStatus,
    VisitorStatus,
)


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# -----------------------------
# Patches (fields mutable after creation)
# -----------------------------

class Patch(_Frozen):
    # Fields that may be cleared by setting them to None
    nullable: ClassVar[FrozenSet[str]] = frozenset()

    def changes(self) -> dict:
        """Only the fields the caller actually set."""
        return {
            k: v
            for k, v in self.model_dump(exclude_unset=True).items()
            if v is not None or k in self.nullable
        }


class VisitorPatch(Patch):
    nullable = frozenset({"email", "vehicle_number"})

    visitor_name: Optional[str] = None
    contact_number: Optional[str] = None
    email: Optional[str] = None
    visiting_unit: Optional[str] = None
    resident_name: Optional[str] = None
    visit_date: Optional[date] = None
    visit_time: Optional[time] = None
    purpose_of_visit: Optional[str] = None
    vehicle_number: Optional[str] = None
    number_of_visitors: Optional[int] = Field(default=None, ge=1)
    identification_number: Optional[str] = None
    identification_type: Optional[str] = None
    status: Optional[VisitorStatus] = None


class ResidentPatch(Patch):
    name: Optional[str] = None
    unit: Optional[str] = None
    contact_number: Optional[str] = None
    email: Optional[str] = None
    is_active: Optional[bool] = None


class VehiclePatch(Patch):
    plate_number: Optional[str] = None
    make: Optional[str] = None
    model: Optional[str] = None
    color: Optional[str] = None
    status: Optional[VehicleStatus] = None


class FeedbackPatch(Patch):
    nullable = frozenset({"admin_reply"})

    category: Optional[FeedbackCategory] = None
    subject: Optional[str] = None
    description: Optional[str] = None
    status: Optional[FeedbackStatus] = None
    priority: Optional[FeedbackPriority] = None
    admin_reply: Optional[str] = None


class AnnouncementPatch(Patch):
    nullable = frozenset({"target_units", "expiry_date"})

    title: Optional[str] = None
    content: Optional[str] = None
    type: Optional[AnnouncementType] = None
    target_audience: Optional[TargetAudience] = None
    target_units: Optional[Tuple[str, ...]] = None
    is_active: Optional[bool] = None
    publish_date: Optional[datetime] = None
    expiry_date: Optional[datetime] = None


class BookingPatch(Patch):
    status: Optional[BookingStatus] = None


# -----------------------------
# Visitor intents
# -----------------------------

class RegisterVisitor(_Frozen):
    type: Literal["register_visitor"] = "register_visitor"
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


class CheckInVisitor(_Frozen):
    type: Literal["check_in_visitor"] = "check_in_visitor"
    id: str
    guard_on_duty: str


class CheckOutVisitor(_Frozen):
    type: Literal["check_out_visitor"] = "check_out_visitor"
    id: str


class UpdateVisitor(_Frozen):
    type: Literal["update_visitor"] = "update_visitor"
    id: str
    updates: VisitorPatch


# -----------------------------
# Resident / vehicle intents
# -----------------------------

class AddResident(_Frozen):
    type: Literal["add_resident"] = "add_resident"
    name: str
    unit: str
    contact_number: str
    email: str
    is_active: bool = True


class UpdateResident(_Frozen):
    type: Literal["update_resident"] = "update_resident"
    id: str
    updates: ResidentPatch


class AddVehicle(_Frozen):
    type: Literal["add_vehicle"] = "add_vehicle"
    plate_number: str
    make: str
    model: str
    color: str
    status: VehicleStatus = VehicleStatus.PENDING
    resident_id: str


class UpdateVehicle(_Frozen):
    type: Literal["update_vehicle"] = "update_vehicle"
    id: str
    updates: VehiclePatch


# -----------------------------
# Feedback / announcement intents
# -----------------------------

class AddFeedback(_Frozen):
    type: Literal["add_feedback"] = "add_feedback"
    resident_id: str
    category: FeedbackCategory
    subject: str
    description: str
    status: FeedbackStatus = FeedbackStatus.OPEN
    priority: FeedbackPriority = FeedbackPriority.MEDIUM
    attachments: Tuple[str, ...] = ()


class UpdateFeedback(_Frozen):
    type: Literal["update_feedback"] = "update_feedback"
    id: str
    updates: FeedbackPatch


class AddAnnouncement(_Frozen):
    type: Literal["add_announcement"] = "add_announcement"
    title: str
    content: str
    announcement_type: AnnouncementType = AnnouncementType.GENERAL
    target_audience: TargetAudience = TargetAudience.ALL
    target_units: Optional[Tuple[str, ...]] = None
    is_active: bool = True
    publish_date: datetime
    expiry_date: Optional[datetime] = None
    attachments: Tuple[str, ...] = ()
    created_by: str


class UpdateAnnouncement(_Frozen):
    type: Literal["update_announcement"] = "update_announcement"
    id: str
    updates: AnnouncementPatch


# -----------------------------
# Facility booking intents
# -----------------------------

class BookFacility(_Frozen):
    type: Literal["book_facility"] = "book_facility"
    facility_id: str
    resident_id: str
    start_time: datetime
    end_time: datetime


class UpdateBooking(_Frozen):
    type: Literal["update_booking"] = "update_booking"
    id: str
    updates: BookingPatch


# -----------------------------
# Startup
# -----------------------------

class Initialize(_Frozen):
    """Replace the collections that are given; absent ones are kept."""
    type: Literal["initialize"] = "initialize"
    visitors: Optional[Tuple[Visitor, ...]] = None
    residents: Optional[Tuple[Resident, ...]] = None
    vehicles: Optional[Tuple[Vehicle, ...]] = None
    facilities: Optional[Tuple[Facility, ...]] = None
    feedback: Optional[Tuple[Feedback, ...]] = None
    announcements: Optional[Tuple[Announcement, ...]] = None


Intent = Annotated[
    Union[
        RegisterVisitor,
        CheckInVisitor,
        CheckOutVisitor,
        UpdateVisitor,
        AddResident,
        UpdateResident,
        AddVehicle,
        UpdateVehicle,
        AddFeedback,
        UpdateFeedback,
        AddAnnouncement,
        UpdateAnnouncement,
        BookFacility,
        UpdateBooking,
        Initialize,
    ],
    Field(discriminator="type"),
]
