#!/usr/bin/env python3
"""
Load demo data: one employer account and one job posting.

    python -m backend.seed

Re-running is safe; the employer is reused and the job is only created once.
"""
import os
import sys

from .app.config import Settings
from .app.database import Database
from .app.models import Job, User
from .app.models.user import ROLE_EMPLOYER
from .app.utils.security import hash_password

DEMO_EMPLOYER_EMAIL = "employer@test.com"
DEMO_JOB_TITLE = "Full Stack Developer"


def seed(db: Database, *, password: str) -> tuple[User, Job]:
    db.create_all()
    session = db.session()
    try:
        employer = session.query(User).filter(User.email == DEMO_EMPLOYER_EMAIL).first()
        if employer is None:
            employer = User(
                email=DEMO_EMPLOYER_EMAIL,
                password=hash_password(password),
                name="Test Employer",
                role=ROLE_EMPLOYER,
            )
            session.add(employer)
            session.flush()

        job = (
            session.query(Job)
            .filter(Job.employer_id == employer.id, Job.title == DEMO_JOB_TITLE)
            .first()
        )
        if job is None:
            job = Job(
                employer_id=employer.id,
                title=DEMO_JOB_TITLE,
                description="We are looking for a skilled Full Stack Developer...",
                company="Tech Solutions Inc.",
                location="Remote",
                salary=85000,
            )
            session.add(job)

        session.commit()
        session.refresh(employer)
        session.refresh(job)
        return employer, job
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


if __name__ == "__main__":
    database = Database(Settings.from_env().database_url)
    try:
        employer, job = seed(database, password=os.getenv("SEED_PASSWORD", "testpassword"))
    except Exception as e:
        print(f"✗ Seeding failed: {e}")
        sys.exit(1)
    finally:
        database.dispose()
    print(f"✓ Employer: id={employer.id} email={employer.email}")
    print(f"✓ Job: id={job.id} title={job.title!r} company={job.company!r}")
