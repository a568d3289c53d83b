from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base

STATUS_PENDING = "PENDING"
STATUS_APPROVED = "APPROVED"
STATUS_REJECTED = "REJECTED"
STATUSES = (STATUS_PENDING, STATUS_APPROVED, STATUS_REJECTED)
TERMINAL_STATUSES = (STATUS_APPROVED, STATUS_REJECTED)


class Application(Base):
    __tablename__ = "applications"
    __table_args__ = (
        # One application per (job, applicant); concurrent duplicates lose at insert time.
        UniqueConstraint("job_id", "applicant_id", name="uq_applications_job_applicant"),
    )

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    applicant_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default=STATUS_PENDING)
    applied_at = Column(DateTime(timezone=True), server_default=func.now())

    job = relationship("Job", back_populates="applications")
    applicant = relationship("User", back_populates="applications")
