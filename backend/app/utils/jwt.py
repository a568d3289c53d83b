from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from ..config import DEFAULT_TOKEN_TTL_MINUTES

ALGORITHM = "HS256"


class InvalidTokenError(Exception):
    """Signature, structure or expiry check failed."""


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    email: str
    issued_at: datetime
    expires_at: datetime


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """Issues and verifies signed bearer tokens (sub, email, iat, exp)."""

    def __init__(self, secret_key: str, ttl_minutes: int = DEFAULT_TOKEN_TTL_MINUTES, algorithm: str = ALGORITHM):
        if not secret_key:
            raise ValueError("A secret key is required to sign tokens")
        self._secret_key = secret_key
        self.ttl = timedelta(minutes=ttl_minutes)
        self.algorithm = algorithm

    def issue(self, user_id: int, email: str, now: datetime | None = None) -> str:
        issued_at = now or _utcnow()
        claims = {
            "sub": str(user_id),
            "email": email,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self.ttl).timestamp()),
        }
        return jwt.encode(claims, self._secret_key, algorithm=self.algorithm)

    def verify(self, token: str, now: datetime | None = None) -> TokenClaims:
        # Expiry is checked below against `now` so callers (and tests) control the clock.
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.algorithm],
                options={"verify_exp": False, "verify_iat": False},
            )
        except JWTError as e:
            raise InvalidTokenError(str(e)) from e

        try:
            user_id = int(payload["sub"])
            email = str(payload["email"])
            issued_at = datetime.fromtimestamp(int(payload["iat"]), tz=timezone.utc)
            expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc)
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidTokenError("Token is missing required claims") from e

        # exp is whole seconds, so compare at the same granularity.
        if (now or _utcnow()).replace(microsecond=0) > expires_at:
            raise InvalidTokenError("Token has expired")

        return TokenClaims(user_id=user_id, email=email, issued_at=issued_at, expires_at=expires_at)
