from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base


class Job(Base):
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    employer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(150), nullable=False)
    description = Column(Text, nullable=False)
    company = Column(String(150), nullable=False)
    location = Column(String(100), nullable=False)
    salary = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    employer = relationship("User", back_populates="jobs")
    # Deleting a job also removes its applications at ORM level; the FK cascade
    # covers rows deleted outside the ORM.
    applications = relationship(
        "Application",
        back_populates="job",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
