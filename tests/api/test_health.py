"""
Tests for the health check endpoint.
"""


def test_health_check_returns_200(client):
    response = client.get("/health")
    assert response.status_code == 200


def test_health_check_identifies_service(client):
    data = client.get("/health").json()
    assert data["service"] == "delivery-ledger"


def test_health_check_with_reachable_database(client):
    """The SQLite test database answers SELECT 1, so nothing is degraded."""
    data = client.get("/health").json()
    assert data["database"] == "healthy"
    assert data["status"] == "healthy"


def test_health_check_reports_version(client):
    data = client.get("/health").json()
    assert data["version"] == "0.1.0"
    assert "environment" in data
