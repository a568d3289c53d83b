import sys
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient


# Ensure `import backend.app...` works regardless of where pytest is run from.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from backend.app.config import Settings  # noqa: E402
from backend.app.main import create_app  # noqa: E402


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        database_url=f"sqlite+pysqlite:///{tmp_path / 'test.sqlite3'}",
        secret_key="test-secret-key",
        environment="test",
    )


@pytest.fixture()
def app(settings: Settings) -> FastAPI:
    """
    A fresh app per test wired to its own temporary SQLite file.

    Settings are injected directly, so no .env or process environment is read.
    """
    return create_app(settings)


@pytest.fixture()
def client(app: FastAPI):
    # Entering the context runs the lifespan hook (create tables / dispose engine).
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def db_session(app: FastAPI, client: TestClient):
    """
    Direct SQLAlchemy session bound to the same temporary SQLite DB used by the test app.
    """
    db = app.state.db.session()
    try:
        yield db
    finally:
        db.close()
