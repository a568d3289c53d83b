import logging
import platform
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from .api import application as application_api
from .api import auth as auth_api
from .api import job as job_api
from .config import Settings, configure_logging
from .database import Database
from .utils.error_handlers import register_error_handlers
from .utils.jwt import TokenService

logger = logging.getLogger(__name__)

_default_origins = ["http://localhost:5173", "http://127.0.0.1:5173", "http://localhost:3000"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    db: Database = app.state.db
    db.create_all()
    logger.info("Job Board API started (env=%s)", app.state.settings.environment)
    try:
        yield
    finally:
        db.dispose()
        logger.info("Job Board API stopped")


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    """
    Build the API with its own settings, database handle and token service.

    Nothing is connected at import time: the database is created/disposed by the lifespan hook.
    """
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    app = FastAPI(title="Job Board API", version=settings.version, lifespan=lifespan)
    app.state.settings = settings
    app.state.db = database or Database(settings.database_url)
    app.state.tokens = TokenService(settings.secret_key, ttl_minutes=settings.token_ttl_minutes)
    app.state.started_at = time.monotonic()

    app.include_router(auth_api.router)
    app.include_router(job_api.router)
    app.include_router(application_api.router)

    register_error_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[*_default_origins, *settings.frontend_origins],
        allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_api_route("/", root, methods=["GET"], response_class=PlainTextResponse, include_in_schema=False)
    app.add_api_route("/health", health_check, methods=["GET"], tags=["Health"])
    return app


def root():
    return "Job Board API is running!"


def health_check(request: Request):
    """Service status plus a live database round trip (503 when the database is unreachable)."""
    app = request.app
    started = time.monotonic()
    payload = {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": f"{time.monotonic() - app.state.started_at:.2f} seconds",
        "environment": app.state.settings.environment,
        "version": app.state.settings.version,
        "python_version": platform.python_version(),
        "platform": platform.system().lower(),
        "database": "connected",
    }
    status_code = 200
    try:
        app.state.db.ping()
    except Exception as e:
        logger.error("Health check failed: %s", e)
        payload["status"] = "ERROR"
        payload["database"] = "disconnected"
        status_code = 503
    payload["response_time"] = f"{(time.monotonic() - started) * 1000:.0f} ms"
    return JSONResponse(status_code=status_code, content=payload)
