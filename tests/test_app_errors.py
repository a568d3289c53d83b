def test_root_banner(client):
    r = client.get("/")
    assert r.status_code == 200
    assert r.text == "Job Board API is running!"


def test_health_reports_database(client):
    r = client.get("/health")
    assert r.status_code == 200, r.text
    data = r.json()
    assert data["status"] == "OK"
    assert data["database"] == "connected"
    assert data["environment"] == "test"
    assert "uptime" in data and "timestamp" in data


def test_unknown_route_uses_error_body(client):
    r = client.get("/api/nope")
    assert r.status_code == 404
    assert r.json()["success"] is False
    assert r.json()["status_code"] == 404


def test_malformed_json_is_a_validation_error(client):
    r = client.post(
        "/api/auth/login",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )
    assert r.status_code == 400
    assert r.json()["success"] is False


def test_non_integer_id_is_rejected(client):
    # The :int path converter does not match, so the route is simply not found.
    assert client.get("/api/jobs/abc").status_code == 404
