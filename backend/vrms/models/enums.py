"""
Enums for VRMS
"""

from enum import Enum


class VisitorStatus(str, Enum):
    """Visitor lifecycle status"""
    REGISTERED = "registered"
    ACTIVE = "active"
    COMPLETED = "completed"
    OVERDUE = "overdue"


class VehicleStatus(str, Enum):
    """Vehicle access list status"""
    WHITELIST = "whitelist"
    BLACKLIST = "blacklist"
    PENDING = "pending"


class BookingStatus(str, Enum):
    """Facility booking status"""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"


class FeedbackCategory(str, Enum):
    COMPLAINT = "complaint"
    SUGGESTION = "suggestion"
    MAINTENANCE = "maintenance"
    SECURITY = "security"
    OTHER = "other"


class FeedbackStatus(str, Enum):
    OPEN = "open"
    IN_PROGRESS = "in-progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


class FeedbackPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class AnnouncementType(str, Enum):
    """Announcement type enumeration"""
    GENERAL = "general"
    MAINTENANCE = "maintenance"
    EMERGENCY = "emergency"
    EVENT = "event"


class TargetAudience(str, Enum):
    ALL = "all"
    RESIDENTS = "residents"
    SPECIFIC_UNITS = "specific-units"


class UserRole(str, Enum):
    """Dashboard user role enumeration"""
    SUPER_ADMIN = "super-admin"
    ADMIN = "admin"
    GUARD = "guard"
    RESIDENT = "resident"
