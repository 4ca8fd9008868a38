from fastapi import status


def _add_player(client, name, role="All-rounder"):
    response = client.post("/api/players", json={"name": name, "role": role})
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()


def _add_stats(client, **payload):
    body = {"date": "2024-05-01", **payload}
    return client.post("/api/stats", json=body)


def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"status": "healthy", "database": "connected", "player_count": 0}


def test_list_players_empty(client):
    response = client.get("/api/players")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == []


def test_list_players_with_statistics(client):
    a = _add_player(client, "Alice", "Batsman")
    b = _add_player(client, "Bob", "Bowler")
    assert _add_stats(client, player_id=a["id"], runs=10).status_code == 201
    assert _add_stats(client, player_id=b["id"], runs=20, overs_bowled="0.5", runs_conceded=7).status_code == 201
    assert _add_stats(client, player_id=a["id"], runs=5).status_code == 201

    data = client.get("/api/players").json()

    assert [p["name"] for p in data] == ["Alice", "Bob"]
    assert data[0]["total_runs"] == 15
    assert data[0]["matches"] == 2
    assert data[0]["batting_average"] == 7.5
    assert data[1]["overs_bowled"] == "0.5"
    assert data[1]["best_bowling"] == "0/7"


def test_get_player_statistics(client):
    a = _add_player(client, "Alice")
    response = client.get(f"/api/players/{a['id']}")

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["name"] == "Alice"
    assert body["matches"] == 0
    assert body["best_bowling"] == "N/A"


def test_get_player_not_found(client):
    response = client.get("/api/players/999")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "Player not found"


def test_update_player(client):
    a = _add_player(client, "Alice")
    response = client.patch(f"/api/players/{a['id']}", json={"role": "wk"})

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["role"] == "Wicket-keeper"
    assert response.json()["name"] == "Alice"


def test_update_missing_player(client):
    response = client.patch("/api/players/999", json={"name": "Ghost"})
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_duplicate_player_is_bad_request(client):
    _add_player(client, "Alice")
    response = client.post("/api/players", json={"name": "alice"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_delete_player_removes_their_records(client):
    a = _add_player(client, "Alice")
    _add_stats(client, player_id=a["id"], runs=30)

    response = client.delete(f"/api/players/{a['id']}")
    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert client.get("/api/stats").json() == []
    assert client.delete(f"/api/players/{a['id']}").status_code == status.HTTP_404_NOT_FOUND


def test_overs_outside_grammar_rejected(client):
    a = _add_player(client, "Alice")
    response = _add_stats(client, player_id=a["id"], overs_bowled="3.6")
    assert response.status_code == 422


def test_negative_runs_rejected(client):
    a = _add_player(client, "Alice")
    response = _add_stats(client, player_id=a["id"], runs=-4)
    assert response.status_code == 422


def test_stats_for_unknown_player_is_bad_request(client):
    response = _add_stats(client, player_id=999, runs=4)
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_edit_and_delete_match_record(client):
    a = _add_player(client, "Alice")
    record = _add_stats(client, player_id=a["id"], runs=30).json()

    response = client.patch(f"/api/stats/{record['id']}", json={"runs": 101, "overs_bowled": 2})
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["runs"] == 101
    assert response.json()["overs_bowled"] == "2.0"
    assert client.get(f"/api/players/{a['id']}").json()["hundreds"] == 1

    assert client.delete(f"/api/stats/{record['id']}").status_code == status.HTTP_204_NO_CONTENT
    assert client.patch(f"/api/stats/{record['id']}", json={"runs": 1}).status_code == 404


def test_list_match_records_newest_first(client):
    a = _add_player(client, "Alice")
    _add_stats(client, player_id=a["id"], date="2024-01-01")
    _add_stats(client, player_id=a["id"], date="2024-02-01")

    dates = [r["date"] for r in client.get("/api/stats").json()]
    assert dates == ["2024-02-01", "2024-01-01"]


def test_monthly_statistics(client):
    a = _add_player(client, "Alice")
    b = _add_player(client, "Bob")
    _add_stats(client, player_id=a["id"], date="2024-05-02", runs=12, wickets=1)
    _add_stats(client, player_id=b["id"], date="2024-05-09", runs=40)
    _add_stats(client, player_id=a["id"], date="2024-06-01", runs=90)

    data = client.get("/api/stats/monthly", params={"year": 2024, "month": 5}).json()

    assert [row["name"] for row in data] == ["Bob", "Alice"]
    assert data[1]["wickets"] == 1


def test_head_to_head(client):
    a = _add_player(client, "Alice")
    b = _add_player(client, "Bob")
    _add_stats(client, player_id=a["id"], wicket_taken_by=b["id"])
    _add_stats(client, player_id=a["id"], wicket_taken_by=b["id"])

    response = client.get("/api/head-to-head", params={"player_one": a["id"], "player_two": b["id"]})

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["player_one"]["name"] == "Alice"
    assert body["one_dismissed_by_two"] == 2
    assert body["two_dismissed_by_one"] == 0


def test_head_to_head_same_player(client):
    a = _add_player(client, "Alice")
    response = client.get("/api/head-to-head", params={"player_one": a["id"], "player_two": a["id"]})
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_get_match_record(client):
    a = _add_player(client, "Alice")
    record = _add_stats(client, player_id=a["id"], runs=30, overs_bowled="1.2").json()

    response = client.get(f"/api/stats/{record['id']}")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == record

    assert client.get("/api/stats/999").json()["detail"] == "Match record not found"


def test_team_summary(client):
    a = _add_player(client, "Alice")
    b = _add_player(client, "Bob")
    _add_stats(client, player_id=a["id"], runs=44)
    _add_stats(client, player_id=b["id"], runs=9, wickets=2)

    body = client.get("/api/summary").json()

    assert body["total_matches"] == 2
    assert body["top_run_scorer"]["name"] == "Alice"
    assert body["top_wicket_taker"]["name"] == "Bob"
    assert body["top_wicket_taker"]["total_wickets"] == 2


def test_team_summary_empty_roster(client):
    body = client.get("/api/summary").json()
    assert body == {"total_matches": 0, "top_run_scorer": None, "top_wicket_taker": None}
