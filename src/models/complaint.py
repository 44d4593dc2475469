from sqlalchemy import Column, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from .base import Base


class ComplaintModel(Base):
    __tablename__ = "complaints"

    id = Column(String, primary_key=True, index=True)
    student_id = Column(
        String,
        ForeignKey("accounts.id", ondelete="RESTRICT"),
        index=True,
        nullable=False,
    )
    subject = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String, nullable=False, index=True)
    room_number = Column(String, nullable=False)
    status = Column(String, nullable=False, default="pending", index=True)
    admin_response = Column(Text, nullable=False, default="")
    created_at = Column(String, nullable=False, index=True)  # ISO format string
    updated_at = Column(String, nullable=False)

    student = relationship("AccountModel", back_populates="complaints")
