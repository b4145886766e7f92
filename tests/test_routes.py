def create_season(client, teams=("Alpha", "Bravo"), players=None):
    payload = {"name": "Street League", "teams": list(teams)}
    if players is not None:
        payload["players"] = players
    response = client.post("/seasons", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["season_id"]


def first_fixture(client, season_id):
    return client.get(f"/seasons/{season_id}").json()["matches"][0]


def ball(client, match_id, kind="runs", value=0, dismissal=None):
    payload = {"type": kind, "value": value}
    if dismissal:
        payload["dismissal_kind"] = dismissal
    return client.post(f"/matches/{match_id}/balls", json=payload)


def test_create_season_builds_schedule(client):
    response = client.post("/seasons", json={"name": "Street League", "teams": ["A", "B", "C"]})
    assert response.status_code == 201
    assert "6 matches" in response.json()["message"]

    season_id = response.json()["season_id"]
    detail = client.get(f"/seasons/{season_id}").json()
    assert [t["name"] for t in detail["teams"]] == ["A", "B", "C"]
    assert len(detail["matches"]) == 6
    assert detail["matches"][0]["label"] == "Round 1"
    assert detail["matches"][0]["phase"] == "league"

    listing = client.get("/seasons").json()
    assert [s["id"] for s in listing] == [season_id]


def test_create_season_validation(client):
    assert client.post("/seasons", json={"name": "x", "teams": ["Solo"]}).status_code == 422
    assert client.post("/seasons", json={"name": "x", "teams": ["A", "  "]}).status_code == 400
    assert client.post("/seasons", json={"name": "x", "teams": ["A", "B"], "players": ["P"]}).status_code == 422


def test_unknown_ids_are_404(client):
    assert client.get("/seasons/999").status_code == 404
    assert client.get("/seasons/999/stats").status_code == 404
    assert client.delete("/seasons/999").status_code == 404
    assert client.get("/matches/999").status_code == 404
    assert client.post("/matches/999/toss", json={"toss_winner_id": 1, "decision": "bat"}).status_code == 404
    assert client.get("/players/999").status_code == 404


def test_scoring_a_match_over_http(client):
    season_id = create_season(client)
    fixture = first_fixture(client, season_id)
    match_id = fixture["id"]

    assert client.get(f"/matches/{match_id}").json()["live"] is None
    assert client.get(f"/matches/{match_id}/balls").status_code == 409

    toss = client.post(f"/matches/{match_id}/toss", json={"toss_winner_id": fixture["team_a_id"], "decision": "bat"})
    assert toss.status_code == 200
    assert toss.json()["batting_team_id"] == fixture["team_a_id"]

    assert ball(client, match_id, value=1).status_code == 200
    state = ball(client, match_id, kind="wide").json()
    assert (state["total_runs"], state["legal_balls_bowled"], state["overs"]) == (2, 1, "0.1")

    assert client.post(f"/matches/{match_id}/second-innings").status_code == 409

    state = ball(client, match_id, kind="wicket", dismissal="caught").json()
    assert state["innings_status"] == "completed"
    assert state["balls"][-1]["dismissal_kind"] == "caught"

    state = client.post(f"/matches/{match_id}/second-innings").json()
    assert state["innings_number"] == 2
    assert state["target"] == 3

    ball(client, match_id, value=1)
    state = client.post(f"/matches/{match_id}/undo").json()
    assert state["total_runs"] == 0
    assert state["balls"] == []

    ball(client, match_id, kind="no_ball")
    ball(client, match_id, value=1)
    state = ball(client, match_id, value=1).json()
    assert state["match_result"] == {"winner_id": fixture["team_b_id"], "message": "Chased down successfully!"}

    detail = client.get(f"/matches/{match_id}").json()
    assert detail["is_completed"]
    assert detail["winner_id"] == fixture["team_b_id"]

    timeline = client.get(f"/matches/{match_id}/balls").json()
    assert [b["is_no_ball"] for b in timeline] == [True, False, False]


def test_ball_payload_validation(client):
    season_id = create_season(client)
    fixture = first_fixture(client, season_id)
    match_id = fixture["id"]
    client.post(f"/matches/{match_id}/toss", json={"toss_winner_id": fixture["team_a_id"], "decision": "bowl"})

    assert ball(client, match_id, value=4).status_code == 422
    assert ball(client, match_id, kind="wicket").status_code == 422
    assert ball(client, match_id, kind="boundary").status_code == 422


def test_toss_validation(client):
    season_id = create_season(client)
    fixture = first_fixture(client, season_id)
    url = f"/matches/{fixture['id']}/toss"

    assert client.post(url, json={"toss_winner_id": 999, "decision": "bat"}).status_code == 400
    assert client.post(url, json={"toss_winner_id": fixture["team_a_id"], "decision": "field"}).status_code == 422
    assert client.post(url, json={"toss_winner_id": fixture["team_a_id"], "decision": "bat"}).status_code == 200
    assert client.post(url, json={"toss_winner_id": fixture["team_a_id"], "decision": "bat"}).status_code == 400


def play_over_http(client, match_id, toss_winner_id, first, second):
    client.post(f"/matches/{match_id}/toss", json={"toss_winner_id": toss_winner_id, "decision": "bat"})
    for kind in first:
        ball(client, match_id, **kind)
    client.post(f"/matches/{match_id}/second-innings")
    for kind in second:
        ball(client, match_id, **kind)


ONE = {"value": 1}
OUT = {"kind": "wicket", "dismissal": "bowled"}


def test_stats_progress_and_tie_breakers(client):
    season_id = create_season(client, players=["Arjun", "Kabir"])
    matches = client.get(f"/seasons/{season_id}").json()["matches"]

    # Team A wins both league matches
    play_over_http(client, matches[0]["id"], matches[0]["team_a_id"], [ONE, OUT], [OUT])
    play_over_http(client, matches[1]["id"], matches[1]["team_a_id"], [OUT], [ONE])

    stats = client.get(f"/seasons/{season_id}/stats").json()
    assert stats["standings"][0]["team_id"] == matches[0]["team_a_id"]
    assert stats["standings"][0]["points"] == 4

    progress = client.post(f"/seasons/{season_id}/progress").json()
    assert progress["action"] == "final_pending"
    final_id = progress["match_id"]

    fixtures = client.get(f"/seasons/{season_id}").json()["matches"]
    assert fixtures[-1]["label"] == "GRAND FINAL"

    # Tied final
    final = client.get(f"/matches/{final_id}").json()
    play_over_http(client, final_id, final["team_a_id"], [ONE, OUT], [ONE, OUT])
    assert client.get(f"/matches/{final_id}").json()["result_note"] == "Match Tied! (Super Over needed)"

    super_over = client.post(f"/matches/{final_id}/super-over")
    assert super_over.status_code == 201
    assert super_over.json()["round_number"] == 9011

    progress = client.post(f"/seasons/{season_id}/progress").json()
    assert progress["action"] == "bowl_out_pending"
    decider_id = progress["match_id"]

    assert client.post(f"/matches/{decider_id}/bowl-out/result", json={"team_a_score": 1, "team_b_score": 1}).status_code == 400
    result = client.post(f"/matches/{decider_id}/bowl-out/result", json={"team_a_score": 2, "team_b_score": 1}).json()
    assert result["result_note"] == "Won by Bowl Out"

    progress = client.post(f"/seasons/{season_id}/progress").json()
    assert progress["action"] == "tournament_over"
    assert progress["champion_id"] == result["winner_id"]

    # League matches never go to a super over / bowl out
    assert client.post(f"/matches/{matches[0]['id']}/super-over").status_code == 400
    assert client.post(f"/matches/{matches[0]['id']}/bowl-out").status_code == 400
    assert client.post(f"/matches/{matches[0]['id']}/bowl-out/result", json={"team_a_score": 1, "team_b_score": 0}).status_code == 400


def test_players_endpoints(client):
    season_id = create_season(client, players=["Arjun", "Kabir"])
    match = first_fixture(client, season_id)
    play_over_http(client, match["id"], match["team_a_id"], [ONE, ONE, OUT], [ONE, OUT])

    players = client.get("/players").json()
    assert [p["name"] for p in players] == ["Arjun", "Kabir"]
    assert players[0]["runs"] == 2

    assert [p["name"] for p in client.get("/players", params={"search": "kab"}).json()] == ["Kabir"]

    profile = client.get(f"/players/{players[0]['id']}").json()
    assert profile["player"]["name"] == "Arjun"
    assert profile["stats"]["matches"] == 1
    assert profile["history"][0]["result"] == "W"


def test_delete_season_removes_everything(client):
    season_id = create_season(client)
    match = first_fixture(client, season_id)
    play_over_http(client, match["id"], match["team_a_id"], [ONE, OUT], [OUT])

    assert client.delete(f"/seasons/{season_id}").status_code == 200
    assert client.get(f"/seasons/{season_id}").status_code == 404
    assert client.get(f"/matches/{match['id']}").status_code == 404
    # Players are global and survive
    assert len(client.get("/players").json()) == 2
