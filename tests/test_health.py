def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ok"
    assert payload["trace_id"]


def test_ready(client):
    response = client.get("/ready")
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ready"
    assert payload["trace_id"]


def test_metrics_exposition(client):
    client.get("/health")

    response = client.get("/ops/metrics")

    assert response.status_code == 200
    assert "http_requests_total" in response.text
