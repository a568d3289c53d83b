from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base

ROLE_JOB_SEEKER = "JOB_SEEKER"
ROLE_EMPLOYER = "EMPLOYER"
ROLES = (ROLE_JOB_SEEKER, ROLE_EMPLOYER)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    # Stored exactly as registered (after trimming); lookups are case-sensitive.
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)  # store hashed password
    name = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False)  # JOB_SEEKER / EMPLOYER
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    jobs = relationship("Job", back_populates="employer")
    applications = relationship("Application", back_populates="applicant")
