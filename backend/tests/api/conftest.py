"""API test fixtures — FastAPI test client over the test database + frozen clock.

Invariants:
    - get_db dependency overridden to use test DB session
    - db_manager patched so repository-backed routes hit the same database
    - get_clock overridden with a FrozenClock the test can advance

Design Decisions:
    - Lifespan not run (ASGITransport): no background job unless a test installs one
"""

import pytest
from httpx import ASGITransport, AsyncClient

from conference_status.api.dependencies import get_clock
from conference_status.infrastructure.database import get_db, DatabaseSessionManager
import conference_status.infrastructure.database as db_module
from conference_status.main import app

from tests.fakes import FrozenClock


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
async def client(test_engine, test_session_factory, clock):
    """FastAPI test client with DB and clock dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock

    # Patch db_manager for repository-backed routes
    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager
    app.state.reconciliation_job = None

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
    app.state.reconciliation_job = None
