"""Complaint schema definitions.

This module defines the Complaint data model, its status and category
enumerations, filters, and the aggregate statistics returned to dashboards.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ComplaintStatus(str, Enum):
    """Complaint lifecycle states. Any state may move to any other."""

    PENDING = "pending"
    IN_PROGRESS = "inprogress"
    RESOLVED = "resolved"


class ComplaintCategory(str, Enum):
    MAINTENANCE = "maintenance"
    FOOD = "food"
    CLEANLINESS = "cleanliness"
    SECURITY = "security"
    WIFI = "wifi"
    OTHER = "other"


class OwnerProjection(BaseModel):
    """Subset of the owning account that is safe to show alongside a complaint."""

    id: str
    name: str
    username: str
    room_number: Optional[str] = None


class Complaint(BaseModel):
    id: str
    student_id: str
    subject: str
    description: str
    category: ComplaintCategory
    room_number: str
    status: ComplaintStatus
    admin_response: str = ""
    created_at: str
    updated_at: str


class ComplaintWithOwner(Complaint):
    student: OwnerProjection


class ComplaintCreate(BaseModel):
    # category and status arrive as raw tokens; the complaint store validates them.
    subject: str = Field(description="Short summary of the issue.")
    description: str = Field(description="Free-text details.")
    category: str = Field(
        description="One of: maintenance, food, cleanliness, security, wifi, other."
    )
    room_number: str


class ComplaintUpdate(BaseModel):
    status: str = Field(description="One of: pending, inprogress, resolved.")
    admin_response: Optional[str] = Field(
        default=None,
        description="Replaces the previous response when given; omitted keeps it.",
    )


class ComplaintFilter(BaseModel):
    """Filter for the admin complaint listing.

    status and category match exactly and are combined with AND. search is a
    case-insensitive substring matched against subject, description, or the
    owner's name (any of the three).
    """

    status: Optional[ComplaintStatus] = None
    category: Optional[ComplaintCategory] = None
    search: Optional[str] = None


class ComplaintStats(BaseModel):
    total: int = 0
    pending: int = 0
    inprogress: int = 0
    resolved: int = 0


class StudentComplaintStats(BaseModel):
    # No inprogress bucket here, unlike ComplaintStats.
    total: int = 0
    pending: int = 0
    resolved: int = 0
