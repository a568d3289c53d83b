"""Public JSON shapes. Password hashes never leave the User model through here."""
from datetime import datetime

from ..models.application import Application
from ..models.job import Job
from ..models.user import User


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if isinstance(value, datetime) else value


def user_public(user: User) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "role": user.role,
        "created_at": _iso(user.created_at),
    }


def person_public(user: User | None) -> dict | None:
    # Joined employer/applicant info: contact fields only.
    if user is None:
        return None
    return {"id": user.id, "name": user.name, "email": user.email}


def job_public(job: Job) -> dict:
    return {
        "id": job.id,
        "title": job.title,
        "description": job.description,
        "company": job.company,
        "location": job.location,
        "salary": job.salary,
        "employer_id": job.employer_id,
        "employer": person_public(job.employer),
        "created_at": _iso(job.created_at),
    }


def application_public(application: Application, *, include_job: bool = False, include_applicant: bool = False) -> dict:
    payload = {
        "id": application.id,
        "job_id": application.job_id,
        "applicant_id": application.applicant_id,
        "status": application.status,
        "applied_at": _iso(application.applied_at),
    }
    if include_job:
        payload["job"] = job_public(application.job) if application.job else None
    if include_applicant:
        payload["applicant"] = person_public(application.applicant)
    return payload


def employer_job_public(job: Job) -> dict:
    payload = job_public(job)
    payload["applications"] = [
        application_public(a, include_applicant=True)
        for a in sorted(job.applications, key=lambda a: (a.applied_at is None, a.applied_at, a.id), reverse=True)
    ]
    return payload
