"""
Job postings: listing, lookup and owner-only mutation.

Every mutation checks that the caller owns the job before touching it.
"""
import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload

from ..models.application import Application
from ..models.job import Job
from ..models.user import ROLE_EMPLOYER, User
from ..utils.dependencies import Identity
from ..utils.error_handlers import (
    ForbiddenError,
    NotFoundError,
    get_error_message,
    handle_database_error,
)
from ..utils.validation import MAX_ROW_ID, parse_salary, validate_integer_field, validate_string_field

logger = logging.getLogger(__name__)

# field -> max length
TEXT_FIELDS = {
    "title": 150,
    "description": 5000,
    "company": 150,
    "location": 100,
}
EDITABLE_FIELDS = (*TEXT_FIELDS, "salary")


def _clean_text_field(name: str, value: Any) -> str:
    return validate_string_field(value, name.capitalize(), min_length=1, max_length=TEXT_FIELDS[name])


def _newest_first(query):
    return query.order_by(Job.created_at.desc(), Job.id.desc())


def list_jobs(db: Session) -> list[Job]:
    # Unbounded: there is no pagination.
    try:
        return _newest_first(db.query(Job).options(joinedload(Job.employer))).all()
    except SQLAlchemyError as e:
        raise handle_database_error(e, "listing jobs") from None


def get_job(db: Session, job_id: int) -> Job:
    job_id = validate_integer_field(job_id, "Job ID", min_value=1)
    if job_id > MAX_ROW_ID:
        raise NotFoundError(get_error_message("job_not_found"))
    try:
        job = db.query(Job).options(joinedload(Job.employer)).filter(Job.id == job_id).first()
    except SQLAlchemyError as e:
        raise handle_database_error(e, "fetching job") from None
    if job is None:
        raise NotFoundError(get_error_message("job_not_found"))
    return job


def _get_owned_job(db: Session, job_id: int, identity: Identity) -> Job:
    job = get_job(db, job_id)
    if job.employer_id != identity.user_id:
        logger.warning("User %s attempted to modify job %s owned by %s", identity.user_id, job.id, job.employer_id)
        raise ForbiddenError(get_error_message("not_job_owner"))
    return job


def _commit(db: Session, operation: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise handle_database_error(e, operation) from None


def create_job(db: Session, owner: User, fields: dict[str, Any]) -> Job:
    # Checked once here; later role changes do not affect existing jobs.
    if owner.role != ROLE_EMPLOYER:
        raise ForbiddenError(get_error_message("employer_only"))

    job = Job(
        employer_id=owner.id,
        title=_clean_text_field("title", fields.get("title")),
        description=_clean_text_field("description", fields.get("description")),
        company=_clean_text_field("company", fields.get("company")),
        location=_clean_text_field("location", fields.get("location")),
        salary=parse_salary(fields.get("salary")),
    )
    db.add(job)
    _commit(db, "creating job")
    db.refresh(job)
    logger.info("Employer %s created job %s", owner.id, job.id)
    return job


def update_job(db: Session, job_id: int, identity: Identity, fields: dict[str, Any]) -> Job:
    """Apply the provided fields only; omitted fields keep their values."""
    job = _get_owned_job(db, job_id, identity)

    for name in TEXT_FIELDS:
        if name in fields:
            setattr(job, name, _clean_text_field(name, fields[name]))
    if "salary" in fields:
        job.salary = parse_salary(fields["salary"])

    _commit(db, "updating job")
    db.refresh(job)
    return job


def delete_job(db: Session, job_id: int, identity: Identity) -> None:
    job = _get_owned_job(db, job_id, identity)
    db.delete(job)
    _commit(db, "deleting job")
    logger.info("Employer %s deleted job %s", identity.user_id, job_id)


def list_employer_jobs(db: Session, employer: User) -> list[Job]:
    """The employer's own jobs with applications and applicant contact info loaded."""
    if employer.role != ROLE_EMPLOYER:
        raise ForbiddenError(get_error_message("employer_only"))
    try:
        query = (
            db.query(Job)
            .options(
                joinedload(Job.employer),
                selectinload(Job.applications).joinedload(Application.applicant),
            )
            .filter(Job.employer_id == employer.id)
        )
        return _newest_first(query).all()
    except SQLAlchemyError as e:
        raise handle_database_error(e, "listing employer jobs") from None


def list_job_applications(db: Session, job_id: int, identity: Identity) -> list[Application]:
    job = _get_owned_job(db, job_id, identity)
    try:
        return (
            db.query(Application)
            .options(joinedload(Application.applicant))
            .filter(Application.job_id == job.id)
            .order_by(Application.applied_at.desc(), Application.id.desc())
            .all()
        )
    except SQLAlchemyError as e:
        raise handle_database_error(e, "listing job applications") from None
