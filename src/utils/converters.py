"""Conversions between SQLAlchemy models and pydantic schemas."""

from models.account import AccountModel
from models.complaint import ComplaintModel
from schemas.account import Account, Role
from schemas.complaint import (
    Complaint,
    ComplaintCategory,
    ComplaintStatus,
    ComplaintWithOwner,
    OwnerProjection,
)


def model_to_account(model: AccountModel) -> Account:
    return Account(
        id=model.id,
        username=model.username,
        name=model.name,
        role=Role(model.role),
        room_number=model.room_number,
        college_email=model.college_email,
        created_at=model.created_at,
    )


def model_to_owner(model: AccountModel) -> OwnerProjection:
    return OwnerProjection(
        id=model.id,
        name=model.name,
        username=model.username,
        room_number=model.room_number,
    )


def model_to_complaint(model: ComplaintModel) -> Complaint:
    return Complaint(
        id=model.id,
        student_id=model.student_id,
        subject=model.subject,
        description=model.description,
        category=ComplaintCategory(model.category),
        room_number=model.room_number,
        status=ComplaintStatus(model.status),
        admin_response=model.admin_response or "",
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


def model_to_complaint_with_owner(
    model: ComplaintModel, owner: AccountModel
) -> ComplaintWithOwner:
    """Join a complaint row with the projection of its owning account."""
    complaint = model_to_complaint(model)
    return ComplaintWithOwner(
        **complaint.model_dump(),
        student=model_to_owner(owner),
    )
