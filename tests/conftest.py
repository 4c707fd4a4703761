"""
Shared fixtures.

The application reads its settings at import time, so the temporary
database and static directory are wired through environment variables
before anything under ``app`` is imported.
"""

import os
import tempfile
from pathlib import Path

_TMP_DIR = Path(tempfile.mkdtemp(prefix="redirect-service-tests-"))
DB_PATH = _TMP_DIR / "test.db"
STATIC_DIR = _TMP_DIR / "static"

STATIC_DIR.mkdir()
(STATIC_DIR / "index.html").write_text("<!doctype html><title>QR Blink</title>")
(STATIC_DIR / "assets").mkdir()
(STATIC_DIR / "assets" / "app.js").write_text("console.log('qr')")

os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{DB_PATH}"
os.environ["STATIC_DIR"] = str(STATIC_DIR)
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["CREATE_TABLES_ON_STARTUP"] = "false"
os.environ.pop("BASE_URL", None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

from app.db import models  # noqa: E402,F401
from app.main import app  # noqa: E402


@pytest.fixture(autouse=True)
def reset_database():
    """Fresh tables for every test."""
    sync_engine = create_engine(f"sqlite:///{DB_PATH}")
    SQLModel.metadata.drop_all(sync_engine)
    SQLModel.metadata.create_all(sync_engine)
    sync_engine.dispose()
    yield


@pytest.fixture
def client():
    with TestClient(app, follow_redirects=False) as test_client:
        yield test_client


@pytest.fixture
def created(client):
    """A freshly created short link, as returned by the API."""
    response = client.post("/api/url", json={"url": "https://example.com/page"})
    assert response.status_code == 200
    return response.json()
