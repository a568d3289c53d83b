"""Repo-root Uvicorn entrypoint.

Allows running the backend from the repo root:

    uvicorn app.main:create_app --factory --reload

The app (settings, engine, token service) is only built when the server starts.
"""
import os

import uvicorn

from backend.app.main import create_app

__all__ = ["create_app", "run"]


def run() -> None:
    uvicorn.run(
        "backend.app.main:create_app",
        factory=True,
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "3000")),
    )
