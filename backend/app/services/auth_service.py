import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..models.user import User
from ..utils.error_handlers import (
    ConflictError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
    get_error_message,
    handle_database_error,
)
from ..utils.jwt import TokenService
from ..utils.security import hash_password, verify_password
from ..utils.validation import validate_email, validate_password, validate_role, validate_string_field

logger = logging.getLogger(__name__)


def _find_by_email(db: Session, email: str) -> User | None:
    try:
        return db.query(User).filter(User.email == email).first()
    except SQLAlchemyError as e:
        raise handle_database_error(e, "looking up user by email") from None


def register(
    db: Session,
    *,
    email: str,
    password: str,
    name: str,
    role: str,
    tokens: TokenService,
) -> tuple[User, str]:
    email = validate_email(email)
    validate_password(password)
    name = validate_string_field(name, "Name", min_length=1, max_length=255)
    role = validate_role(role)

    if _find_by_email(db, email):
        raise ConflictError(get_error_message("email_exists"))

    try:
        hashed = hash_password(password)
    except ValueError as e:
        raise ValidationError(str(e)) from None

    user = User(email=email, password=hashed, name=name, role=role)
    try:
        db.add(user)
        db.commit()
        db.refresh(user)
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email.
        db.rollback()
        raise ConflictError(get_error_message("email_exists")) from None
    except SQLAlchemyError as e:
        db.rollback()
        raise handle_database_error(e, "creating user") from None

    logger.info("Registered user %s with role %s", user.id, user.role)
    return user, tokens.issue(user.id, user.email)


def authenticate(db: Session, *, email: str, password: str, tokens: TokenService) -> tuple[User, str]:
    email = validate_email(email)
    if not password or not isinstance(password, str):
        raise ValidationError("Password is required")

    user = _find_by_email(db, email)
    # Same error (and one bcrypt check) whether the email is unknown or the password is wrong.
    if not verify_password(password, user.password if user else None) or user is None:
        raise UnauthorizedError(get_error_message("invalid_credentials"))

    return user, tokens.issue(user.id, user.email)


def current_user(db: Session, user_id: int) -> User:
    try:
        user = db.get(User, user_id)
    except SQLAlchemyError as e:
        raise handle_database_error(e, "fetching current user") from None
    if user is None:
        raise NotFoundError(get_error_message("user_not_found"))
    return user
