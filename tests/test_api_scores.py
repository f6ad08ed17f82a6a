from vakio.models import Score

RESULTS = ["1", "X", "2"] * 4 + ["1"]


def _score_body(**extra):
    body = {
        "game_name": "Vakio 1",
        "pool_size": "250 000 €",
        "date": "2025-03-01T15:00:00.000Z",
        "scores": [",".join(RESULTS), ",".join(["2"] * 13)],
        "hit_count": 10,
        "correct_count": 10,
    }
    body.update(extra)
    return body


def test_save_score_derives_percentage(client):
    response = client.post("/api/scores", json=_score_body())

    assert response.status_code == 200
    body = response.get_json()
    assert body["data"]["percentage"] == 77
    assert body["data"]["total_possible"] == 13
    assert body["message"] == "Score saved: 10/13 hits (77%)"

    score = Score.query.one()
    assert score.scores == ",".join(RESULTS) + ";" + ",".join(["2"] * 13)
    assert score.date.year == 2025


def test_explicit_percentage_is_kept(client):
    response = client.post("/api/scores", json=_score_body(percentage=50))
    assert response.get_json()["data"]["percentage"] == 50


def test_scores_as_nested_rows(client):
    response = client.post(
        "/api/scores", json=_score_body(scores=[RESULTS, ["1"] * 13])
    )
    assert response.status_code == 200
    assert Score.query.one().scores.split(";")[0] == ",".join(RESULTS)


def test_results_derive_counts(client):
    response = client.post(
        "/api/scores",
        json=_score_body(results=RESULTS, hit_count=0, correct_count=0),
    )

    body = response.get_json()
    assert body["data"]["correct_count"] == 13
    assert body["data"]["hit_count"] == 1
    assert body["data"]["percentage"] == 100
    assert body["summary"]["distribution"] == {"4": 1, "13": 1}


def test_missing_required_fields(client):
    for field in ("game_name", "scores", "date"):
        body = _score_body()
        del body[field]
        response = client.post("/api/scores", json=body)
        assert response.status_code == 400
        assert response.get_json() == {
            "error": "Missing required fields: game_name, scores, date"
        }
    assert Score.query.count() == 0


def test_invalid_values_are_rejected(client):
    cases = [
        {"date": "eilen"},
        {"total_possible": 0},
        {"correct_count": -1},
        {"percentage": 120},
        {"results": ["1", "Y"]},
        {"results": ["1", "1"]},
        {"results": RESULTS, "scores": "1"},
        {"results": RESULTS, "scores": [",".join(RESULTS), "1,X"]},
        {"scores": 5},
    ]
    for extra in cases:
        response = client.post("/api/scores", json=_score_body(**extra))
        assert response.status_code == 400, extra
    assert Score.query.count() == 0


def test_list_scores_newest_first(client):
    for name in ("Vakio 1", "Vakio 2"):
        client.post("/api/scores", json=_score_body(game_name=name))

    body = client.get("/api/scores").get_json()

    assert [s["game_name"] for s in body["data"]] == ["Vakio 2", "Vakio 1"]
    assert body["pagination"]["total"] == 2


def test_latest_score(client):
    assert client.get("/api/scores/latest").status_code == 404
    assert client.get("/api/scores/latest").get_json() == {"error": "No scores found"}

    client.post("/api/scores", json=_score_body(game_name="Vakio 1"))
    client.post("/api/scores", json=_score_body(game_name="Vakio 2"))

    data = client.get("/api/scores/latest").get_json()["data"]
    assert data["game_name"] == "Vakio 2"


def test_non_finite_percentage_is_rejected(client):
    for literal in ("NaN", "Infinity", "-Infinity"):
        response = client.post(
            "/api/scores",
            data=(
                '{"game_name": "Vakio 1", "date": "2025-03-01", '
                f'"scores": "1", "percentage": {literal}}}'
            ),
            content_type="application/json",
        )
        assert response.status_code == 400, literal
        assert response.get_json() == {"error": "Invalid percentage"}
    assert Score.query.count() == 0


def test_half_percentage_rounds_up(client):
    response = client.post("/api/scores", json=_score_body(percentage=62.5))
    assert response.get_json()["data"]["percentage"] == 63
