"""Account database model.

This module defines the Account database model using SQLAlchemy.
"""

from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from .base import Base


class AccountModel(Base):
    """Account database model."""

    __tablename__ = "accounts"

    id = Column(String, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    name = Column(String, nullable=False)
    role = Column(String, nullable=False, default="student")  # 'student' or 'admin'
    room_number = Column(String, nullable=True)
    college_email = Column(String, nullable=True)
    created_at = Column(String, nullable=False, index=True)  # ISO format string

    complaints = relationship(
        "ComplaintModel",
        back_populates="student",
        # Leave complaints to the foreign key; deleting an owner must fail
        passive_deletes="all",
    )
