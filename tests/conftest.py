# tests/conftest.py
import os
import tempfile
from pathlib import Path

# Settings are read once and cached, so the test configuration must be in
# place before any `app.*` module is imported.
_TEST_DB_PATH = Path(tempfile.gettempdir()) / "standupbot_test.db"
os.environ["APP_ENV"] = "test"
os.environ["DB_URL"] = f"sqlite+aiosqlite:///{_TEST_DB_PATH}"
os.environ["SEED_SAMPLE_DATA"] = "true"
os.environ["BLOCKER_ALLOW_REOPEN"] = "true"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.db.seed import seed_sample_data  # noqa: E402
from app.db.session import AsyncSessionLocal, reset_schema_sync  # noqa: E402
from app.main import create_app  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_db():
    """
    Drop and recreate every table before each test, so every test starts
    from an empty schema (the seed is applied by `client` / `db_session`).
    """
    reset_schema_sync()
    yield


@pytest.fixture()
def client():
    """
    TestClient over a fresh app instance. Entering the client runs the
    startup hook, which seeds the sample team and users.
    """
    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


@pytest_asyncio.fixture()
async def db_session():
    """
    Seeded AsyncSession for exercising the service layer directly.
    """
    async with AsyncSessionLocal() as session:
        await seed_sample_data(session)
        yield session
