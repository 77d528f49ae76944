"""Integration fixtures: a throwaway SQLite database and an ASGI client.

The environment is set before ``hostpanel`` is imported because the engine
and settings are created at import time.
"""

import os
import tempfile
from pathlib import Path

_DATA_DIR = Path(tempfile.mkdtemp(prefix="hostpanel-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_DATA_DIR / 'hostpanel.db'}"
os.environ["PREFERENCES_FILE"] = str(_DATA_DIR / "preferences.json")
os.environ["BACKUP_DIR"] = str(_DATA_DIR / "backups")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from hostpanel.infrastructure.database import Base, engine  # noqa: E402
from hostpanel.main import app  # noqa: E402


@pytest.fixture(autouse=True)
async def database():
    """Fresh tables per test; ASGITransport does not run the app lifespan."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()


@pytest.fixture(autouse=True)
def clean_preferences():
    path = Path(os.environ["PREFERENCES_FILE"])
    path.unlink(missing_ok=True)
    yield
    path.unlink(missing_ok=True)


@pytest.fixture
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
