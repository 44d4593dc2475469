"""Complaint routes.

Students file and track their own complaints; admins list, inspect and
update every complaint.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, status

from api.params import build_filter
from core.dependencies import ComplaintManagerDep, require
from core.permissions import Action, ensure_can_view_complaint
from schemas.account import Account
from schemas.complaint import (
    Complaint,
    ComplaintCreate,
    ComplaintFilter,
    ComplaintStats,
    ComplaintUpdate,
    ComplaintWithOwner,
    StudentComplaintStats,
)

router = APIRouter(prefix="/api/complaints", tags=["Complaint"])


@router.post(
    "",
    response_model=Complaint,
    status_code=status.HTTP_201_CREATED,
    summary="File a complaint",
)
def file_complaint(
    req: ComplaintCreate,
    complaint_manager: ComplaintManagerDep,
    current_account: Account = Depends(require(Action.FILE_COMPLAINT)),
) -> Complaint:
    return complaint_manager.file_complaint(current_account.id, req)


@router.get("/my", response_model=List[Complaint], summary="List my complaints")
def list_my_complaints(
    complaint_manager: ComplaintManagerDep,
    current_account: Account = Depends(require(Action.LIST_OWN_COMPLAINTS)),
) -> List[Complaint]:
    return complaint_manager.list_for_student(current_account.id)


@router.get(
    "/stats/my", response_model=StudentComplaintStats, summary="My complaint stats"
)
def my_stats(
    complaint_manager: ComplaintManagerDep,
    current_account: Account = Depends(require(Action.VIEW_OWN_STATS)),
) -> StudentComplaintStats:
    return complaint_manager.get_student_stats(current_account.id)


@router.get("", response_model=List[ComplaintWithOwner], summary="List all complaints")
def list_all_complaints(
    complaint_manager: ComplaintManagerDep,
    status: Optional[str] = None,
    category: Optional[str] = None,
    search: Optional[str] = None,
    current_account: Account = Depends(require(Action.LIST_ALL_COMPLAINTS)),
) -> List[ComplaintWithOwner]:
    """List every complaint with its owner, newest first.

    Args:
        status: Exact status to match.
        category: Exact category to match.
        search: Case-insensitive text found in the subject, description,
            or student name.
    """
    filters = build_filter(
        ComplaintFilter, status=status, category=category, search=search
    )
    return complaint_manager.list_all(filters)


@router.get("/stats", response_model=ComplaintStats, summary="Global complaint stats")
def global_stats(
    complaint_manager: ComplaintManagerDep,
    current_account: Account = Depends(require(Action.VIEW_GLOBAL_STATS)),
) -> ComplaintStats:
    return complaint_manager.get_stats()


@router.get(
    "/{complaint_id}", response_model=ComplaintWithOwner, summary="Get a complaint"
)
def get_complaint(
    complaint_id: str,
    complaint_manager: ComplaintManagerDep,
    current_account: Account = Depends(require(Action.VIEW_COMPLAINT)),
) -> ComplaintWithOwner:
    """Get a complaint with its owner.

    Admins may view any complaint; students only their own.

    Raises:
        ComplaintNotFoundError: If the complaint does not exist, or a student
            asks for another student's complaint.
    """
    complaint = complaint_manager.get_complaint(complaint_id)
    ensure_can_view_complaint(current_account, complaint)
    return complaint


@router.patch(
    "/{complaint_id}", response_model=Complaint, summary="Update complaint status"
)
def update_complaint(
    complaint_id: str,
    req: ComplaintUpdate,
    complaint_manager: ComplaintManagerDep,
    current_account: Account = Depends(require(Action.UPDATE_COMPLAINT)),
) -> Complaint:
    return complaint_manager.update_status(complaint_id, req)
