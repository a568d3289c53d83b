from fastapi import Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.user import ROLE_EMPLOYER, User
from .dependencies import Identity, get_current_identity
from .error_handlers import ForbiddenError, NotFoundError, get_error_message


def _role_required(required_role: str, error_key: str):
    # Unlike get_current_identity this re-reads the user, so the role is the live one.
    def check_role(
        identity: Identity = Depends(get_current_identity),
        db: Session = Depends(get_db),
    ) -> User:
        user = db.get(User, identity.user_id)
        if user is None:
            raise NotFoundError(get_error_message("user_not_found"))
        if user.role != required_role:
            raise ForbiddenError(get_error_message(error_key))
        return user
    return check_role


employer_only = _role_required(ROLE_EMPLOYER, "employer_only")
