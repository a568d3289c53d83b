import logging
from dataclasses import dataclass

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .error_handlers import ForbiddenError, UnauthorizedError, get_error_message
from .jwt import InvalidTokenError, TokenService

logger = logging.getLogger(__name__)

_bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Identity:
    """Caller identity taken from verified token claims (no database read)."""
    user_id: int
    email: str


def get_token_service(request: Request) -> TokenService:
    return request.app.state.tokens


def get_current_identity(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    tokens: TokenService = Depends(get_token_service),
) -> Identity:
    # Missing header / non-bearer scheme -> 401; bad or expired token -> 403.
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError(get_error_message("missing_token"))

    try:
        claims = tokens.verify(credentials.credentials)
    except InvalidTokenError as e:
        logger.info("Rejected bearer token on %s: %s", request.url.path, e)
        raise ForbiddenError(get_error_message("invalid_token")) from None

    identity = Identity(user_id=claims.user_id, email=claims.email)
    request.state.identity = identity
    return identity
