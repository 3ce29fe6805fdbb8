def test_health_reports_services(client):
    r = client.get("/health")
    assert r.status_code == 200
    body = r.json()
    assert body["services"]["database"] is True
    # No redis is reachable in the test environment
    assert body["services"]["redis"] is False
    assert body["status"] == "degraded"
    assert body["realtime"] == {"total_connections": 0, "active_users": 0}
    assert body["version"] == "1.0.0"
