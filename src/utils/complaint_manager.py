"""Complaint management utilities.

This module provides the complaint store: filing complaints, listing and
searching them, status updates, and aggregate statistics.
"""

import logging
import uuid
from typing import Dict, List, Optional, Union

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from core.exceptions import (
    AccountNotFoundError,
    ComplaintNotFoundError,
    ValidationError,
)
from models.account import AccountModel
from models.complaint import ComplaintModel
from schemas.complaint import (
    Complaint,
    ComplaintCategory,
    ComplaintCreate,
    ComplaintFilter,
    ComplaintStats,
    ComplaintStatus,
    ComplaintUpdate,
    ComplaintWithOwner,
    StudentComplaintStats,
)
from utils.clock import utc_now, utc_now_after
from utils.converters import model_to_complaint, model_to_complaint_with_owner
from utils.search import LIKE_ESCAPE, contains_pattern

logger = logging.getLogger(__name__)


def _parse_category(value: Union[str, ComplaintCategory]) -> ComplaintCategory:
    try:
        return ComplaintCategory(value)
    except ValueError:
        allowed = ", ".join(c.value for c in ComplaintCategory)
        raise ValidationError(f"Invalid category: {value}. Must be one of: {allowed}.")


def _parse_status(value: Union[str, ComplaintStatus]) -> ComplaintStatus:
    try:
        return ComplaintStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in ComplaintStatus)
        raise ValidationError(f"Invalid status: {value}. Must be one of: {allowed}.")


class ComplaintManager:
    """Manages complaint operations using SQLAlchemy."""

    def __init__(self, db: Session):
        """Initialize ComplaintManager.

        Args:
            db: SQLAlchemy Session.
        """
        self.db = db

    def file_complaint(self, student_id: str, data: ComplaintCreate) -> Complaint:
        """File a new complaint on behalf of a student.

        Args:
            student_id: ID of the owning student account.
            data: Subject, description, category and room number.

        Returns:
            The created Complaint, pending with an empty admin response.

        Raises:
            ValidationError: If a required field is blank or the category is
                not recognised.
            AccountNotFoundError: If student_id does not reference an account.
        """
        fields = {
            "subject": data.subject.strip(),
            "description": data.description.strip(),
            "room_number": data.room_number.strip(),
        }
        for field_name, value in fields.items():
            if not value:
                raise ValidationError(f"{field_name} is required")
        category = _parse_category(data.category)

        owner_exists = (
            self.db.query(AccountModel.id).filter(AccountModel.id == student_id).first()
        )
        if not owner_exists:
            raise AccountNotFoundError(student_id)

        now = utc_now()
        model = ComplaintModel(
            id=str(uuid.uuid4()),
            student_id=student_id,
            category=category.value,
            status=ComplaintStatus.PENDING.value,
            admin_response="",
            created_at=now,
            updated_at=now,
            **fields,
        )
        self.db.add(model)
        self.db.commit()
        self.db.refresh(model)
        logger.info(
            "Filed complaint %s (%s) for student %s", model.id, category.value, student_id
        )
        return model_to_complaint(model)

    def list_for_student(self, student_id: str) -> List[Complaint]:
        """List a student's complaints, newest first."""
        models = (
            self.db.query(ComplaintModel)
            .filter(ComplaintModel.student_id == student_id)
            .order_by(ComplaintModel.created_at.desc())
            .all()
        )
        return [model_to_complaint(m) for m in models]

    def _query_with_owner(self):
        return self.db.query(ComplaintModel, AccountModel).join(
            AccountModel, AccountModel.id == ComplaintModel.student_id
        )

    def list_all(
        self, filters: Optional[ComplaintFilter] = None
    ) -> List[ComplaintWithOwner]:
        """List every complaint joined with its owner, newest first.

        Args:
            filters: Optional status, category and search filters.

        Returns:
            List of ComplaintWithOwner objects.
        """
        filters = filters or ComplaintFilter()
        query = self._query_with_owner()
        if filters.status:
            query = query.filter(ComplaintModel.status == filters.status.value)
        if filters.category:
            query = query.filter(ComplaintModel.category == filters.category.value)
        if filters.search:
            pattern = contains_pattern(filters.search)
            query = query.filter(
                or_(
                    ComplaintModel.subject.ilike(pattern, escape=LIKE_ESCAPE),
                    ComplaintModel.description.ilike(pattern, escape=LIKE_ESCAPE),
                    AccountModel.name.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )
        rows = query.order_by(ComplaintModel.created_at.desc()).all()
        return [model_to_complaint_with_owner(c, owner) for c, owner in rows]

    def get_complaint(self, complaint_id: str) -> ComplaintWithOwner:
        """Get a single complaint with its owner projection.

        Raises:
            ComplaintNotFoundError: If the complaint does not exist.
        """
        row = (
            self._query_with_owner()
            .filter(ComplaintModel.id == complaint_id)
            .first()
        )
        if row is None:
            raise ComplaintNotFoundError(complaint_id)
        complaint, owner = row
        return model_to_complaint_with_owner(complaint, owner)

    def update_status(self, complaint_id: str, update: ComplaintUpdate) -> Complaint:
        """Set a complaint's status and, optionally, the admin response.

        Any status may move to any other. A supplied admin_response replaces
        the previous one entirely.

        Args:
            complaint_id: ID of the complaint to update.
            update: New status and optional admin response.

        Returns:
            The updated Complaint.

        Raises:
            ValidationError: If the status is not recognised.
            ComplaintNotFoundError: If the complaint does not exist.
        """
        status = _parse_status(update.status)
        model = (
            self.db.query(ComplaintModel)
            .filter(ComplaintModel.id == complaint_id)
            .first()
        )
        if not model:
            raise ComplaintNotFoundError(complaint_id)

        previous_status = model.status
        model.status = status.value
        if update.admin_response is not None:
            model.admin_response = update.admin_response
        model.updated_at = utc_now_after(model.updated_at)
        self.db.commit()
        self.db.refresh(model)
        logger.info(
            "Updated complaint %s: %s -> %s", complaint_id, previous_status, status.value
        )
        return model_to_complaint(model)

    def _count_by_status(self, student_id: Optional[str] = None) -> Dict[str, int]:
        query = self.db.query(ComplaintModel.status, func.count(ComplaintModel.id))
        if student_id is not None:
            query = query.filter(ComplaintModel.student_id == student_id)
        return dict(query.group_by(ComplaintModel.status).all())

    def get_stats(self) -> ComplaintStats:
        """Count all complaints, broken out by every status."""
        counts = self._count_by_status()
        return ComplaintStats(
            total=sum(counts.values()),
            pending=counts.get(ComplaintStatus.PENDING.value, 0),
            inprogress=counts.get(ComplaintStatus.IN_PROGRESS.value, 0),
            resolved=counts.get(ComplaintStatus.RESOLVED.value, 0),
        )

    def get_student_stats(self, student_id: str) -> StudentComplaintStats:
        """Count one student's complaints.

        Only pending and resolved are broken out; in-progress complaints are
        counted in total alone.
        """
        counts = self._count_by_status(student_id)
        return StudentComplaintStats(
            total=sum(counts.values()),
            pending=counts.get(ComplaintStatus.PENDING.value, 0),
            resolved=counts.get(ComplaintStatus.RESOLVED.value, 0),
        )
