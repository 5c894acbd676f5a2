"""API test fixtures — FastAPI test client wired to an initialized in-memory database.

Invariants:
    - app.state.init_gate replaced by a gate over the test engine, already initialized
    - get_db dependency overridden to use the test session factory
    - Original gate, db_manager and overrides restored after each test

Design Decisions:
    - Gate swapped rather than patched: middleware reads it from app.state per request
    - install_gate fixture lets failure tests put a FakeProvider-backed gate in place
"""

import pytest
from httpx import ASGITransport, AsyncClient

import app.infrastructure.database as db_module
from app.infrastructure.database import get_db, DatabaseSessionManager
from app.infrastructure.init_gate import InitializationGate
from app.main import app


@pytest.fixture
async def test_manager(test_engine, test_session_factory):
    manager = DatabaseSessionManager("sqlite+aiosqlite:///:memory:")
    manager.engine = test_engine
    manager._session_factory = test_session_factory
    return manager


@pytest.fixture
def install_gate():
    """Swap app.state.init_gate for the duration of a test."""
    original = app.state.init_gate

    def _install(gate: InitializationGate) -> InitializationGate:
        app.state.init_gate = gate
        return gate

    yield _install
    app.state.init_gate = original


@pytest.fixture
async def client(test_manager, test_session_factory, install_gate):
    """FastAPI test client with DB dependency overridden and gate initialized."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    db_module.db_manager = test_manager

    gate = InitializationGate(test_manager)
    gate.state.initialized = True
    install_gate(gate)

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
