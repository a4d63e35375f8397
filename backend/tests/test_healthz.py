"""
Test service index, health and metrics endpoints.
"""


def test_health_check(test_client):
    """Health endpoint reports OK with a timestamp."""
    response = test_client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "OK"
    assert "timestamp" in data


def test_root_lists_endpoints(test_client):
    response = test_client.get("/")

    assert response.status_code == 200
    assert response.json()["endpoints"]["analyze"] == "POST /analyze"


def test_metrics_endpoint(test_client):
    response = test_client.get("/metrics")

    assert response.status_code == 200
    data = response.json()
    assert "counters" in data
    assert "timing_stats" in data
