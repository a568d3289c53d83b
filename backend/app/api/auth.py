from fastapi import APIRouter, Depends
from pydantic import AliasChoices, BaseModel, Field
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.payloads import user_public
from ..services import auth_service
from ..utils.dependencies import Identity, get_current_identity, get_token_service
from ..utils.jwt import TokenService

router = APIRouter(prefix="/api/auth", tags=["Auth"])


class RegisterRequest(BaseModel):
    email: str | None = None
    password: str | None = None
    name: str | None = None
    # Older clients send the role as `type`.
    role: str | None = Field(default=None, validation_alias=AliasChoices("role", "type"))


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


def _session_payload(user, token: str) -> dict:
    return {
        "token": token,
        "token_type": "bearer",
        "user": user_public(user),
    }


@router.post("/register", status_code=201)
def register(
    payload: RegisterRequest,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    user, token = auth_service.register(
        db,
        email=payload.email,
        password=payload.password,
        name=payload.name,
        role=payload.role,
        tokens=tokens,
    )
    return {"message": "User created successfully", **_session_payload(user, token)}


@router.post("/login")
def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    user, token = auth_service.authenticate(db, email=payload.email, password=payload.password, tokens=tokens)
    return _session_payload(user, token)


@router.post("/logout")
def logout():
    # Tokens are stateless; the client drops its copy.
    return {"message": "Logged out successfully"}


@router.get("/me")
def me(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    return user_public(auth_service.current_user(db, identity.user_id))
