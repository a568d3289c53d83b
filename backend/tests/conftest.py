import sys
from pathlib import Path

import pytest

# Ensure `import backend.app...` works regardless of where pytest is run from.
PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from backend.app.database import Database  # noqa: E402


@pytest.fixture()
def database(tmp_path: Path):
    db = Database(f"sqlite+pysqlite:///{tmp_path / 'unit.sqlite3'}")
    db.create_all()
    try:
        yield db
    finally:
        db.dispose()


@pytest.fixture()
def db_session(database: Database):
    session = database.session()
    try:
        yield session
    finally:
        session.close()
