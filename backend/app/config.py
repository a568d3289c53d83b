import logging
import os
import secrets
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Default to a local SQLite DB for dev so the backend can start out-of-the-box.
# Use an absolute path so it works regardless of current working directory.
_default_sqlite_path = (Path(__file__).resolve().parent.parent / "dev.db").as_posix()
DEFAULT_DATABASE_URL = f"sqlite:///{_default_sqlite_path}"

# 24 hours
DEFAULT_TOKEN_TTL_MINUTES = 60 * 24

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _env_list(name: str) -> list[str]:
    return [item.strip() for item in (os.getenv(name) or "").split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    database_url: str = DEFAULT_DATABASE_URL
    secret_key: str = ""
    environment: str = "development"
    token_ttl_minutes: int = DEFAULT_TOKEN_TTL_MINUTES
    frontend_origins: list[str] = field(default_factory=list)
    log_level: str = "INFO"
    version: str = "1.0.0"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from the process environment.

        backend/.env is loaded first (override=True so edits take effect on reload).
        For automated tests set DISABLE_DOTENV=1 so a developer .env cannot leak in.
        """
        if os.getenv("DISABLE_DOTENV") != "1":
            load_dotenv(override=True)

        environment = (os.getenv("APP_ENV") or "development").strip().lower()
        secret_key = (os.getenv("SECRET_KEY") or "").strip()
        if not secret_key:
            if environment == "production":
                raise RuntimeError("SECRET_KEY must be set when APP_ENV=production")
            # Tokens signed with this key stop verifying after a restart.
            logger.warning("SECRET_KEY is not set; using an ephemeral key for this process")
            secret_key = secrets.token_urlsafe(32)

        return cls(
            database_url=(os.getenv("DATABASE_URL") or "").strip() or DEFAULT_DATABASE_URL,
            secret_key=secret_key,
            environment=environment,
            token_ttl_minutes=int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES") or DEFAULT_TOKEN_TTL_MINUTES),
            frontend_origins=_env_list("FRONTEND_ORIGINS"),
            log_level=(os.getenv("LOG_LEVEL") or "INFO").strip().upper(),
            version=(os.getenv("APP_VERSION") or "1.0.0").strip(),
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
