from vakio import db
from vakio.models import BetRow, BetSet, Match


def _rows(count):
    symbols = ["1", "X", "2"]
    return [
        {"row_number": i + 1, "picks": [symbols[(i + j) % 3] for j in range(13)]}
        for i in range(count)
    ]


def _bet_set_body(matches, rows, **extra):
    body = {
        "game_name": "Vakio 1",
        "sport": "Jalkapallo",
        "pool_size": "250 000 €",
        "matches": matches,
        "rows": rows,
    }
    body.update(extra)
    return body


class TestMatches:
    def test_save_and_list_matches(self, client, matches):
        response = client.post("/api/matches", json={"matches": matches})

        assert response.status_code == 200
        assert response.get_json()["message"] == "Saved 13 matches"

        data = client.get("/api/matches").get_json()["data"]
        assert [m["match_number"] for m in data] == list(range(1, 14))
        assert data[0]["home_team"] == "Joukkue 1"
        assert (data[0]["weight_home"], data[0]["weight_draw"]) == (50, 20)

    def test_save_replaces_previous_matches(self, client, matches):
        client.post("/api/matches", json={"matches": matches})
        client.post("/api/matches", json={"matches": matches[:3]})

        data = client.get("/api/matches").get_json()["data"]
        assert len(data) == 3
        assert Match.query.count() == 3

    def test_listing_is_refreshed_after_save(self, client, matches):
        assert client.get("/api/matches").get_json()["data"] == []

        client.post("/api/matches", json={"matches": matches})

        assert len(client.get("/api/matches").get_json()["data"]) == 13

    def test_team_names_are_trimmed(self, client, matches):
        matches[0]["home_team"] = "  HJK  "
        client.post("/api/matches", json={"matches": matches})
        assert Match.query.filter_by(match_number=1).first().home_team == "HJK"

    def test_rejects_non_list(self, client):
        response = client.post("/api/matches", json={"matches": "all"})
        assert response.status_code == 400
        assert response.get_json() == {"error": "Invalid matches data"}

    def test_rejects_out_of_range_entries(self, client, matches):
        client.post("/api/matches", json={"matches": matches})
        bad = [dict(matches[0], match_number=14)]

        response = client.post("/api/matches", json={"matches": bad})

        assert response.status_code == 400
        assert response.get_json()["error"].startswith("Invalid matches data")
        # nothing was replaced
        assert Match.query.count() == 13

    def test_rejects_weight_above_hundred(self, client, matches):
        matches[2]["weight_away"] = 150
        response = client.post("/api/matches", json={"matches": matches})
        assert response.status_code == 400
        assert "weight_away" in response.get_json()["error"]

    def test_null_weights_use_defaults(self, client, matches):
        matches[0]["weight_home"] = None
        del matches[0]["weight_draw"]

        response = client.post("/api/matches", json={"matches": matches})

        assert response.status_code == 200
        stored = Match.query.filter_by(match_number=1).first()
        assert (stored.weight_home, stored.weight_draw, stored.weight_away) == (33, 34, 30)

    def test_fractional_weights_round_half_up(self, client, matches):
        matches[0].update(weight_home=12.5, weight_draw=37.5, weight_away=50)
        client.post("/api/matches", json={"matches": matches})

        stored = Match.query.filter_by(match_number=1).first()
        assert (stored.weight_home, stored.weight_draw) == (13, 38)


class TestBetSets:
    def test_save_bet_set(self, client, matches):
        response = client.post("/api/betsets", json=_bet_set_body(matches, _rows(128)))

        assert response.status_code == 200
        body = response.get_json()
        assert body["success"] is True
        assert body["data"]["matches_count"] == 13
        assert body["data"]["rows_count"] == 128
        assert body["data"]["total_cost"] == 32
        assert body["message"] == "Saved bet set with 128 rows"

        bet_set = db.session.get(BetSet, body["data"]["bet_set_id"])
        assert bet_set.name == "Vakioveikkaus"
        assert bet_set.rows_count == 128
        assert [m.match_number for m in bet_set.matches] == list(range(1, 14))
        assert BetRow.query.count() == 128
        assert BetRow.query.filter_by(row_number=1).first().picks == ",".join(
            _rows(1)[0]["picks"]
        )

    def test_save_bet_set_custom_name_and_cost(self, client, matches):
        response = client.post(
            "/api/betsets",
            json=_bet_set_body(matches, _rows(4), name="Oma", total_cost=1.0),
        )

        bet_set = db.session.get(BetSet, response.get_json()["data"]["bet_set_id"])
        assert bet_set.name == "Oma"
        assert bet_set.total_cost == 1.0

    def test_rejects_invalid_matches(self, client):
        response = client.post("/api/betsets", json={"matches": None, "rows": []})
        assert response.status_code == 400
        assert response.get_json() == {"error": "Invalid matches data"}

    def test_rejects_invalid_rows(self, client, matches):
        response = client.post("/api/betsets", json={"matches": matches, "rows": {}})
        assert response.status_code == 400
        assert response.get_json() == {"error": "Invalid rows data"}

    def test_rejects_rows_with_unknown_symbols(self, client, matches):
        rows = _rows(2)
        rows[1]["picks"][0] = "3"

        response = client.post("/api/betsets", json=_bet_set_body(matches, rows))

        assert response.status_code == 400
        assert response.get_json()["error"] == (
            "Invalid rows data: row 2 has invalid picks"
        )
        assert BetSet.query.count() == 0
        assert Match.query.count() == 0

    def test_failure_after_matches_keeps_matches(self, client, matches, monkeypatch):
        def broken(*args, **kwargs):
            raise RuntimeError("database went away")

        monkeypatch.setattr(BetRow, "create_rows", staticmethod(broken))

        response = client.post("/api/betsets", json=_bet_set_body(matches, _rows(3)))

        assert response.status_code == 500
        assert response.get_json() == {"error": "Failed to save bet set"}
        # Steps are not wrapped in one transaction
        assert Match.query.count() == 13
        assert BetSet.query.count() == 1
        assert BetRow.query.count() == 0

    def test_list_bet_sets_paginated_newest_first(self, client, matches):
        for name in ("eka", "toka", "kolmas"):
            client.post(
                "/api/betsets", json=_bet_set_body(matches, _rows(2), name=name)
            )

        body = client.get("/api/betsets?limit=2&page=1").get_json()

        assert body["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}
        assert [b["name"] for b in body["data"]] == ["kolmas", "toka"]
        assert len(body["data"][0]["rows"]) == 2

        second = client.get("/api/betsets?limit=2&page=2").get_json()
        assert [b["name"] for b in second["data"]] == ["eka"]

    def test_older_bet_sets_lose_replaced_matches(self, client, matches):
        client.post("/api/betsets", json=_bet_set_body(matches, _rows(1), name="vanha"))
        client.post("/api/betsets", json=_bet_set_body(matches, _rows(1), name="uusi"))

        data = client.get("/api/betsets").get_json()["data"]
        by_name = {b["name"]: b for b in data}
        assert len(by_name["uusi"]["matches"]) == 13
        assert by_name["vanha"]["matches"] == []
        assert len(by_name["vanha"]["rows"]) == 1

    def test_empty_listing(self, client):
        body = client.get("/api/betsets").get_json()
        assert body["data"] == []
        assert body["pagination"] == {"page": 1, "limit": 10, "total": 0, "pages": 0}

    def test_bet_set_detail(self, client, matches):
        created = client.post(
            "/api/betsets", json=_bet_set_body(matches, _rows(3))
        ).get_json()
        bet_set_id = created["data"]["bet_set_id"]

        data = client.get(f"/api/betsets/{bet_set_id}").get_json()["data"]

        assert data["id"] == bet_set_id
        assert data["game_name"] == "Vakio 1"
        assert [r["row_number"] for r in data["rows"]] == [1, 2, 3]
        assert data["rows"][0]["picks"] == _rows(1)[0]["picks"]

    def test_missing_bet_set_is_404(self, client):
        response = client.get("/api/betsets/999")
        assert response.status_code == 404
        assert response.get_json() == {"error": "Resource not found"}

    def test_bet_set_statistics(self, client, matches):
        rows = [
            {"row_number": 1, "picks": ["1"] * 13},
            {"row_number": 2, "picks": ["X"] * 13},
            {"row_number": 3, "picks": ["1"] * 13},
        ]
        created = client.post("/api/betsets", json=_bet_set_body(matches, rows))
        bet_set_id = created.get_json()["data"]["bet_set_id"]

        data = client.get(f"/api/betsets/{bet_set_id}/statistics").get_json()["data"]

        assert data["rows_count"] == 3
        assert data["statistics"]["1"] == {"1": 2, "X": 1, "2": 0}

    def test_bet_set_csv_export(self, client, matches):
        created = client.post("/api/betsets", json=_bet_set_body(matches, _rows(2)))
        bet_set_id = created.get_json()["data"]["bet_set_id"]

        response = client.get(f"/api/betsets/{bet_set_id}/export.csv")

        assert response.status_code == 200
        assert response.mimetype == "text/csv"
        assert "attachment" in response.headers["Content-Disposition"]
        text = response.get_data(as_text=True)
        assert text.startswith("\ufeffRivi;Peli 1")
        assert len(text.strip().splitlines()) == 3
