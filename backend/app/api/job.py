from typing import Any

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.user import User
from ..schemas.payloads import application_public, employer_job_public, job_public
from ..services import application_service, job_service
from ..utils.dependencies import Identity, get_current_identity
from ..utils.roles import employer_only

router = APIRouter(prefix="/api", tags=["Jobs"])


class JobCreate(BaseModel):
    # Required-ness and lengths are checked in job_service so errors read the same everywhere.
    title: str | None = None
    description: str | None = None
    company: str | None = None
    location: str | None = None
    # Anything that is not an integer is stored as "no salary".
    salary: Any = None


class JobUpdate(JobCreate):
    pass


@router.get("/jobs")
def list_jobs(db: Session = Depends(get_db)):
    return [job_public(j) for j in job_service.list_jobs(db)]


@router.get("/jobs/{job_id:int}")
def get_job(job_id: int, db: Session = Depends(get_db)):
    return job_public(job_service.get_job(db, job_id))


@router.post("/jobs", status_code=201)
def create_job(
    payload: JobCreate,
    db: Session = Depends(get_db),
    user: User = Depends(employer_only),
):
    job = job_service.create_job(db, user, payload.model_dump())
    return job_public(job)


@router.put("/jobs/{job_id:int}")
def update_job(
    job_id: int,
    payload: JobUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    job = job_service.update_job(db, job_id, identity, payload.model_dump(exclude_unset=True))
    return job_public(job)


@router.delete("/jobs/{job_id:int}", status_code=204)
def delete_job(
    job_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    job_service.delete_job(db, job_id, identity)
    return Response(status_code=204)


@router.get("/jobs/{job_id:int}/applications")
def list_job_applications(
    job_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    applications = job_service.list_job_applications(db, job_id, identity)
    return [application_public(a, include_applicant=True) for a in applications]


@router.post("/jobs/{job_id:int}/apply", status_code=201)
def apply_to_job(
    job_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    application = application_service.apply(db, job_id, identity)
    return application_public(application, include_job=True)


@router.get("/employer/jobs")
def list_employer_jobs(
    db: Session = Depends(get_db),
    user: User = Depends(employer_only),
):
    return [employer_job_public(j) for j in job_service.list_employer_jobs(db, user)]
