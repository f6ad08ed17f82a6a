def test_generate_default_rows(client, matches):
    response = client.post("/api/generate", json={"matches": matches})

    assert response.status_code == 200
    data = response.get_json()
    assert data["total"] == 128
    assert data["cost_per_row"] == 0.25
    assert data["total_cost"] == 32
    assert [row["row_number"] for row in data["rows"]] == list(range(1, 129))
    assert all(len(row["picks"]) == 13 for row in data["rows"])
    assert len({tuple(row["picks"]) for row in data["rows"]}) == 128


def test_generate_custom_row_count(client, matches):
    response = client.post("/api/generate", json={"matches": matches, "row_count": 16})

    data = response.get_json()
    assert data["total"] == 16
    assert data["total_cost"] == 4


def test_generate_requires_thirteen_matches(client, matches):
    response = client.post("/api/generate", json={"matches": matches[:12]})

    assert response.status_code == 400
    assert response.get_json() == {"error": "Exactly 13 matches are required"}


def test_generate_rejects_missing_body(client):
    response = client.post("/api/generate", data="not json")

    assert response.status_code == 400
    assert response.get_json()["error"] == "Exactly 13 matches are required"


def test_generate_rejects_zero_weights(client, matches):
    matches[6].update(weight_home=0, weight_draw=0, weight_away=0)

    response = client.post("/api/generate", json={"matches": matches})

    assert response.status_code == 400
    assert response.get_json() == {"error": "Match 7 has invalid weights"}


def test_generate_rejects_bad_row_count(client, matches, app):
    for row_count in (0, -5, "10", app.config["MAX_ROW_COUNT"] + 1):
        response = client.post(
            "/api/generate", json={"matches": matches, "row_count": row_count}
        )
        assert response.status_code == 400
        assert "row_count" in response.get_json()["error"]


def test_generate_is_stateless(client, matches):
    client.post("/api/generate", json={"matches": matches})

    assert client.get("/api/matches").get_json()["data"] == []
    assert client.get("/api/betsets").get_json()["pagination"]["total"] == 0


def test_generate_failure_is_a_server_error(client, matches, monkeypatch):
    def broken(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr("vakio.routes.api.routes.generate_unique_rows", broken)

    response = client.post("/api/generate", json={"matches": matches})

    assert response.status_code == 500
    assert response.get_json() == {"error": "Internal server error"}


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.get_json()["status"] == "healthy"


def test_unknown_api_path_returns_json_404(client):
    response = client.get("/api/nothing-here")
    assert response.status_code == 404
    assert response.get_json() == {"error": "Resource not found"}


def test_security_headers(client):
    response = client.get("/health")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
