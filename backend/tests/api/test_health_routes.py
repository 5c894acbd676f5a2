"""Service Banner & Health — root info, liveness, and readiness probes."""

from app.core.errors import DatabaseConnectionError
from app.infrastructure.init_gate import InitializationGate

from tests.fake_provider import FakeProvider


async def test_root_describes_service(client):
    res = await client.get("/")
    assert res.status_code == 200
    body = res.json()
    assert body["message"] == "Digital ID Card API"
    assert body["version"] == "1.0.0"
    assert body["environment"] == "production"
    assert "health" in body["endpoints"]


async def test_liveness(client):
    res = await client.get("/health")
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "ok"
    assert "timestamp" in body


async def test_readiness_with_database(client):
    res = await client.get("/health/ready")
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "ready"
    assert body["checks"]["database"] == "healthy"
    assert body["initialization"]["initialized"] is True


async def test_readiness_reports_unavailable_database(client, install_gate):
    gate = InitializationGate(FakeProvider(healthy=False))
    gate.state.initialized = True
    install_gate(gate)

    res = await client.get("/health/ready")

    assert res.status_code == 503
    assert res.json()["reason"] == "database_unavailable"


async def test_readiness_on_cold_start_with_database_down(client, install_gate):
    provider = FakeProvider(
        open_failures=[DatabaseConnectionError("timeout")], healthy=False,
    )
    gate = install_gate(InitializationGate(provider))

    res = await client.get("/health/ready")

    assert res.status_code == 503
    body = res.json()
    assert body["status"] == "not_ready"
    assert body["reason"] == "initialization_failed"
    assert body["initialization"]["initialized"] is False
    assert "timeout" in body["initialization"]["last_error"]
    assert gate.state.attempts == 1


async def test_readiness_initializes_a_cold_process(client, install_gate):
    provider = FakeProvider()
    gate = install_gate(InitializationGate(provider))

    res = await client.get("/health/ready")

    assert res.status_code == 200
    assert provider.open_calls == 1
    assert gate.state.initialized is True


async def test_liveness_skips_initialization(client, install_gate):
    provider = FakeProvider(open_failures=[DatabaseConnectionError("timeout")])
    install_gate(InitializationGate(provider))

    res = await client.get("/health")

    assert res.status_code == 200
    assert res.json()["status"] == "ok"
    assert provider.open_calls == 0
