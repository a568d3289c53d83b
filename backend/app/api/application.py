from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.payloads import application_public
from ..services import application_service
from ..utils.dependencies import Identity, get_current_identity

router = APIRouter(prefix="/api/applications", tags=["Applications"])


class StatusUpdate(BaseModel):
    status: str | None = None


@router.get("/me")
def my_applications(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    return [application_public(a, include_job=True) for a in application_service.list_mine(db, identity)]


@router.delete("/{application_id:int}", status_code=204)
def withdraw_application(
    application_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    application_service.withdraw(db, application_id, identity)
    return Response(status_code=204)


@router.put("/{application_id:int}/status")
def update_application_status(
    application_id: int,
    payload: StatusUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    application = application_service.update_status(db, application_id, identity, payload.status)
    return application_public(application, include_job=True, include_applicant=True)
