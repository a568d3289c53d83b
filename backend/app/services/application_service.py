"""
Job applications and their review workflow.

Status machine: PENDING -> APPROVED | REJECTED, decided by the job's employer.
APPROVED and REJECTED are final.
"""
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ..models.application import STATUS_PENDING, TERMINAL_STATUSES, Application
from ..models.job import Job
from ..utils.dependencies import Identity
from ..utils.error_handlers import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    get_error_message,
    handle_database_error,
)
from ..utils.validation import MAX_ROW_ID, validate_application_status, validate_integer_field
from .job_service import get_job

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS = {
    STATUS_PENDING: set(TERMINAL_STATUSES),
}


def apply(db: Session, job_id: int, identity: Identity) -> Application:
    job = get_job(db, job_id)

    application = Application(job_id=job.id, applicant_id=identity.user_id, status=STATUS_PENDING)
    try:
        db.add(application)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if "foreign key" in str(e).lower():
            # The job or the applicant disappeared between lookup and insert.
            raise NotFoundError(get_error_message("not_found")) from None
        # uq_applications_job_applicant: the (job, applicant) pair already exists,
        # including when a concurrent request inserted it first.
        raise ConflictError(get_error_message("already_applied")) from None
    except SQLAlchemyError as e:
        db.rollback()
        raise handle_database_error(e, "creating application") from None

    db.refresh(application)
    logger.info("User %s applied to job %s (application %s)", identity.user_id, job.id, application.id)
    return application


def list_mine(db: Session, identity: Identity) -> list[Application]:
    try:
        return (
            db.query(Application)
            .options(joinedload(Application.job).joinedload(Job.employer))
            .filter(Application.applicant_id == identity.user_id)
            .order_by(Application.applied_at.desc(), Application.id.desc())
            .all()
        )
    except SQLAlchemyError as e:
        raise handle_database_error(e, "listing applications") from None


def _get_application(db: Session, application_id: int) -> Application | None:
    application_id = validate_integer_field(application_id, "Application ID", min_value=1)
    if application_id > MAX_ROW_ID:
        return None
    try:
        return db.get(Application, application_id)
    except SQLAlchemyError as e:
        raise handle_database_error(e, "fetching application") from None


def withdraw(db: Session, application_id: int, identity: Identity) -> None:
    application = _get_application(db, application_id)
    # Someone else's application looks the same as a missing one.
    if application is None or application.applicant_id != identity.user_id:
        raise NotFoundError(get_error_message("application_not_found"))

    try:
        db.delete(application)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise handle_database_error(e, "withdrawing application") from None
    logger.info("User %s withdrew application %s", identity.user_id, application_id)


def update_status(db: Session, application_id: int, identity: Identity, new_status: str) -> Application:
    new_status = validate_application_status(new_status)

    application = _get_application(db, application_id)
    if application is None:
        raise NotFoundError(get_error_message("application_not_found"))
    if application.job is None or application.job.employer_id != identity.user_id:
        raise ForbiddenError(get_error_message("not_application_job_owner"))

    current = application.status
    if new_status == current == STATUS_PENDING:
        return application
    if new_status not in ALLOWED_TRANSITIONS.get(current, set()):
        raise ConflictError(
            get_error_message("status_final"),
            status_code=409,
            details={"status": current, "requested": new_status},
        )

    application.status = new_status
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise handle_database_error(e, "updating application status") from None

    db.refresh(application)
    logger.info("Employer %s set application %s to %s", identity.user_id, application.id, new_status)
    return application
