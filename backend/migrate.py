#!/usr/bin/env python3
"""
Create missing tables and make sure applications carry the (job_id, applicant_id)
unique index. Databases created before the constraint existed may still contain
duplicates; those are reported and left for manual cleanup.

    python -m backend.migrate
"""
import sys

from sqlalchemy import inspect, text

from .app.config import Settings
from .app.database import Database

UNIQUE_NAME = "uq_applications_job_applicant"


def migrate(db: Database) -> bool:
    print("Initializing database with all models...")
    db.create_all()
    print("✓ Database initialized successfully")

    inspector = inspect(db.engine)
    existing_index_names = {i.get("name") for i in inspector.get_indexes("applications") if i.get("name")}
    existing_unique_names = {
        u.get("name") for u in inspector.get_unique_constraints("applications") if u.get("name")
    }
    if UNIQUE_NAME in existing_index_names or UNIQUE_NAME in existing_unique_names:
        print(f"✓ Unique index already exists: {UNIQUE_NAME}")
        return True

    with db.engine.begin() as conn:
        duplicates = conn.execute(text(
            "SELECT job_id, applicant_id, COUNT(*) FROM applications "
            "GROUP BY job_id, applicant_id HAVING COUNT(*) > 1"
        )).fetchall()
    if duplicates:
        print(f"✗ Cannot add {UNIQUE_NAME}: {len(duplicates)} duplicated (job_id, applicant_id) pairs")
        for job_id, applicant_id, count in duplicates:
            print(f"    job={job_id} applicant={applicant_id} rows={count}")
        return False

    try:
        with db.engine.begin() as conn:
            conn.execute(text(
                f"CREATE UNIQUE INDEX {UNIQUE_NAME} ON applications (job_id, applicant_id)"
            ))
    except Exception as e:
        print(f"✗ Could not add unique index {UNIQUE_NAME}: {e}")
        return False

    print(f"✓ Added unique index: {UNIQUE_NAME}")
    return True


if __name__ == "__main__":
    database = Database(Settings.from_env().database_url)
    try:
        success = migrate(database)
    finally:
        database.dispose()
    sys.exit(0 if success else 1)
