"""
Pydantic models for request/response schemas

Request models carry the form-level validation; anything that reaches the
store has already passed these checks.
"""

from datetime import date, datetime, time
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, model_validator

from vrms.models.entities import (
    Announcement,
    BookingSlot,
    CurrentUser,
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
)
from vrms.utils.tokens import TokenPayload


# Visitor Models
class VisitorCreateRequest(BaseModel):
    """Register visitor request"""
    visitor_name: str = Field(..., min_length=1, description="Visitor full name")
    contact_number: str = Field(..., min_length=1, description="Visitor phone number")
    email: Optional[str] = Field(default=None, description="Visitor email (optional)")
    visiting_unit: str = Field(..., min_length=1, description="Unit being visited, e.g. B-12-03")
    resident_name: str = Field(..., min_length=1, description="Resident being visited")
    visit_date: date = Field(..., description="Scheduled visit date (YYYY-MM-DD)")
    visit_time: time = Field(..., description="Scheduled visit time (HH:MM)")
    purpose_of_visit: str = Field(..., min_length=1, description="Purpose of visit")
    vehicle_number: Optional[str] = Field(default=None, description="Vehicle plate (optional)")
    number_of_visitors: int = Field(default=1, ge=1, description="Visitors in the party")
    identification_number: str = Field(..., min_length=1, description="IC / passport number")
    identification_type: str = Field(..., min_length=1, description="ic, passport, driving-license")


class VisitorCheckInRequest(BaseModel):
    """Check-in request; guard defaults to the current operator"""
    guard_on_duty: Optional[str] = Field(default=None, description="Guard on duty")


class VisitorListResponse(BaseModel):
    """List of visitors response"""
    visitors: List[Visitor]
    count: int


class TokenValidationRequest(BaseModel):
    """Validate a QR token at the gate"""
    qr_code: str = Field(..., description="Token string read from the QR code")
    expected_date: Optional[date] = Field(
        default=None, description="Date the visit must be for (defaults to today at the site)"
    )


class TokenValidationResponse(BaseModel):
    valid: bool
    payload: Optional[TokenPayload] = None
    visitor: Optional[Visitor] = None


# Resident Models
class ResidentCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    unit: str = Field(..., min_length=1)
    contact_number: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    is_active: bool = True


class ResidentResponse(Resident):
    """Resident with the vehicles registered against them"""
    vehicle_count: int = 0


class ResidentListResponse(BaseModel):
    residents: List[ResidentResponse]
    count: int


# Vehicle Models
class VehicleCreateRequest(BaseModel):
    plate_number: str = Field(..., min_length=1)
    make: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
    color: str = Field(..., min_length=1)
    status: VehicleStatus = VehicleStatus.PENDING
    resident_id: str = Field(..., min_length=1, description="Owning resident ID")


class VehicleStatusUpdateRequest(BaseModel):
    status: VehicleStatus


class VehicleListResponse(BaseModel):
    vehicles: List[Vehicle]
    count: int


# Facility Models
class FacilityListResponse(BaseModel):
    facilities: List[Facility]
    count: int


class BookingCreateRequest(BaseModel):
    """Facility booking request"""
    resident_id: str = Field(..., min_length=1)
    start_time: datetime
    end_time: datetime

    @model_validator(mode="after")
    def _end_after_start(self):
        if (self.start_time.tzinfo is None) != (self.end_time.tzinfo is None):
            raise ValueError("start_time and end_time must both carry an offset or both omit it")
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class BookingStatusUpdateRequest(BaseModel):
    status: BookingStatus


class BookingListResponse(BaseModel):
    bookings: List[BookingSlot]
    count: int
    pending: int
    total_revenue: float


# Feedback Models
class FeedbackCreateRequest(BaseModel):
    resident_id: str = Field(..., min_length=1)
    category: FeedbackCategory
    subject: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=2000)
    priority: FeedbackPriority = FeedbackPriority.MEDIUM
    attachments: List[str] = Field(default_factory=list)


class FeedbackUpdateRequest(BaseModel):
    """Admin update: status, priority and/or reply"""
    status: Optional[FeedbackStatus] = None
    priority: Optional[FeedbackPriority] = None
    admin_reply: Optional[str] = Field(default=None, max_length=1000)


class FeedbackListResponse(BaseModel):
    feedback: List[Feedback]
    count: int


# Announcement Models
class AnnouncementCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1, max_length=5000)
    type: AnnouncementType = AnnouncementType.GENERAL
    target_audience: TargetAudience = TargetAudience.ALL
    target_units: Optional[List[str]] = None
    is_active: bool = True
    publish_date: datetime
    expiry_date: Optional[datetime] = None
    attachments: List[str] = Field(default_factory=list)
    created_by: Optional[str] = Field(default=None, description="Defaults to the current operator")

    @model_validator(mode="after")
    def _check_targets(self):
        if self.target_audience == TargetAudience.SPECIFIC_UNITS and not self.target_units:
            raise ValueError("target_units is required for specific-units announcements")
        return self


class AnnouncementUpdateRequest(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    is_active: Optional[bool] = None
    expiry_date: Optional[datetime] = None


class AnnouncementResponse(Announcement):
    expired: bool = False


class AnnouncementListResponse(BaseModel):
    announcements: List[AnnouncementResponse]
    count: int


# Dashboard Models
class DashboardResponse(BaseModel):
    """Counters shown on the dashboard"""
    current_user: CurrentUser
    active_visitors: int
    today_visits: int
    pending_check_ins: int
    overdue_visitors: int
    total_visitors: int
    active_residents: int
    inactive_residents: int
    vehicles_by_status: Dict[str, int]
    open_feedback: int
    feedback_by_status: Dict[str, int]
    active_announcements: int
    expired_announcements: int
