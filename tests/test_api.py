import pytest
from httpx import ASGITransport, AsyncClient

from futsal_club.api import create_app


NAMES = ["홍길동", "김철수", "이영희", "박민수", "최지훈", "정우성", "강동원", "윤아", "한지민"]


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def client(tmp_path, monkeypatch):
    monkeypatch.delenv("FUTSAL_DB_PATH", raising=False)
    monkeypatch.delenv("FUTSAL_BALANCER_ITERATIONS", raising=False)
    monkeypatch.delenv("FUTSAL_CHEMISTRY_WEIGHT", raising=False)
    app = create_app(tmp_path / "club.sqlite")
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client


async def _create_players(client, names=NAMES):
    ids = []
    for idx, name in enumerate(names):
        resp = await client.post(
            "/players",
            json={
                "name": name,
                "shooting": 3 + idx % 6,
                "passing": 8 - idx % 5,
                "stamina": 6,
                "join_date": f"20{10 + idx}-01-01",
            },
        )
        assert resp.status_code == 200, resp.text
        ids.append(resp.json()["player_id"])
    return ids


async def _session_with_teams(client, num_teams=3):
    ids = await _create_players(client)
    resp = await client.post("/sessions", json={"date": "2024-12-17", "player_ids": ids})
    assert resp.status_code == 200, resp.text
    session_id = resp.json()["session_id"]
    resp = await client.post(f"/sessions/{session_id}/teams/generate", json={"num_teams": num_teams, "seed": 7})
    assert resp.status_code == 200, resp.text
    return session_id, resp.json()


@pytest.mark.anyio
async def test_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


@pytest.mark.anyio
async def test_player_crud(client):
    ids = await _create_players(client, ["Kim"])

    resp = await client.get(f"/players/{ids[0]}")
    assert resp.status_code == 200
    body = resp.json()
    assert body["name"] == "Kim"
    assert body["overall"] > 0

    dup = await client.post("/players", json={"name": "Kim"})
    assert dup.status_code == 400

    missing = await client.get("/players/999")
    assert missing.status_code == 404

    listing = await client.get("/players")
    assert [p["name"] for p in listing.json()] == ["Kim"]


@pytest.mark.anyio
async def test_parse_notice_matches_known_players(client):
    await _create_players(client, NAMES[:2])

    resp = await client.post("/sessions/parse", json={"text": "12.17(수)⚽️\n홍길동 김철수 손님 3명"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["date"].endswith("-12-17")
    assert [p["name"] for p in body["matched"]] == ["홍길동", "김철수"]
    assert body["unknown"] == ["손님"]
    assert body["count"] == 3


@pytest.mark.anyio
async def test_generate_teams_and_schedule(client):
    session_id, body = await _session_with_teams(client)

    assert len(body["teams"]) == 3
    assert [team["label"] for team in body["teams"]] == ["A", "B", "C"]
    assert all(len(team["players"]) == 3 for team in body["teams"])
    assert all(team["name"].endswith("팀") for team in body["teams"])
    assert 0 <= body["balance_score"] <= 100
    assert body["logs"][0].startswith("Starting generation with 9 players for 3 teams.")
    assert body["matches_created"] == 9

    stored = (await client.get(f"/sessions/{session_id}/teams")).json()
    assert [team["team_id"] for team in stored] == [team["team_id"] for team in body["teams"]]

    matches = (await client.get(f"/sessions/{session_id}/matches")).json()
    assert [m["match_no"] for m in matches] == list(range(1, 10))
    a, b, c = [team["team_id"] for team in body["teams"]]
    assert [(m["team1_id"], m["team2_id"]) for m in matches[:3]] == [(a, b), (b, c), (c, a)]


@pytest.mark.anyio
async def test_regenerating_teams_replaces_matches(client):
    session_id, first = await _session_with_teams(client)

    resp = await client.post(f"/sessions/{session_id}/teams/generate", json={"num_teams": 2, "seed": 1})

    assert resp.status_code == 200
    assert resp.json()["matches_created"] == 5
    assert len((await client.get(f"/sessions/{session_id}/teams")).json()) == 2
    assert len((await client.get(f"/sessions/{session_id}/matches")).json()) == 5


@pytest.mark.anyio
async def test_generate_rejects_bad_requests(client):
    resp = await client.post("/sessions/42/teams/generate", json={"num_teams": 3})
    assert resp.status_code == 404

    empty = await client.post("/sessions", json={"date": "2024-12-17"})
    session_id = empty.json()["session_id"]
    resp = await client.post(f"/sessions/{session_id}/teams/generate", json={"num_teams": 3})
    assert resp.status_code == 400

    ids = await _create_players(client, ["Solo"])
    session = await client.post("/sessions", json={"date": "2024-12-18", "player_ids": ids})
    resp = await client.post(f"/sessions/{session.json()['session_id']}/teams/generate", json={"num_teams": 0})
    assert resp.status_code == 400

    unknown = await client.post("/sessions", json={"date": "2024-12-19", "player_ids": [4242]})
    assert unknown.status_code == 400


@pytest.mark.anyio
async def test_match_generation_requires_two_teams(client):
    ids = await _create_players(client, ["Kim", "Lee"])
    session = (await client.post("/sessions", json={"date": "2024-12-17", "player_ids": ids})).json()
    await client.post(f"/sessions/{session['session_id']}/teams/generate", json={"num_teams": 1})

    resp = await client.post(f"/sessions/{session['session_id']}/matches/generate")
    assert resp.status_code == 400
    resp = await client.post(f"/sessions/{session['session_id']}/matches/autofill")
    assert resp.status_code == 400


@pytest.mark.anyio
async def test_clear_and_autofill_matches(client):
    session_id, _ = await _session_with_teams(client)

    resp = await client.delete(f"/sessions/{session_id}/matches")
    assert resp.status_code == 200
    assert (await client.get(f"/sessions/{session_id}/matches")).json() == []

    resp = await client.post(f"/sessions/{session_id}/matches/autofill", params={"target": 4})
    assert resp.json()["count"] == 4
    resp = await client.post(f"/sessions/{session_id}/matches/autofill")
    body = resp.json()
    assert body["count"] == 5
    assert [m["match_no"] for m in body["matches"]] == list(range(1, 10))

    resp = await client.post(f"/sessions/{session_id}/matches/generate")
    assert resp.json()["count"] == 9


@pytest.mark.anyio
async def test_live_events_scores_and_rankings(client):
    session_id, body = await _session_with_teams(client)
    match = (await client.get(f"/sessions/{session_id}/matches")).json()[0]
    team = next(t for t in body["teams"] if t["team_id"] == match["team1_id"])
    scorer, assister = team["players"][0]["player_id"], team["players"][1]["player_id"]
    goal = {"type": "GOAL", "scorer_id": scorer, "team_id": team["team_id"], "assister_id": assister, "event_time": 65}

    resp = await client.post(f"/matches/{match['match_id']}/events", json=goal)
    assert resp.status_code == 200
    assert (resp.json()["team1_score"], resp.json()["team2_score"]) == (1, 0)
    assert resp.json()["status"] == "completed"

    block = {"type": "BLOCK", "scorer_id": assister, "team_id": team["team_id"]}
    resp = await client.post(f"/matches/{match['match_id']}/events", json=block)
    assert resp.status_code == 200

    events = (await client.get(f"/matches/{match['match_id']}/events")).json()["events"]
    assert [e["type"] for e in events] == ["GOAL", "DEFENSE"]
    assert events[0]["assister_id"] == assister
    assert events[0]["event_time"] == 65

    goals = (await client.get("/rankings/goals")).json()["rankings"]
    assert goals[0]["player_id"] == scorer
    assert goals[0]["goals"] == 1
    assert goals[0]["games"] == 6
    assists = (await client.get("/rankings/assists")).json()["rankings"]
    assert assists[0]["player_id"] == assister
    points = (await client.get("/rankings/points", params={"limit": 3})).json()["rankings"]
    assert len(points) == 3

    resp = await client.request("DELETE", f"/matches/{match['match_id']}/events", json=goal)
    assert resp.status_code == 200
    assert resp.json()["team1_score"] == 0
    goals = (await client.get("/rankings/goals")).json()["rankings"]
    assert goals[0]["goals"] == 0

    resp = await client.put(f"/matches/{match['match_id']}/score", json={"team1_score": 2, "team2_score": 1})
    assert (resp.json()["team1_score"], resp.json()["team2_score"]) == (2, 1)

    resp = await client.post(f"/matches/{match['match_id']}/reset")
    assert resp.json()["status"] == "pending"
    assert (resp.json()["team1_score"], resp.json()["team2_score"]) == (0, 0)
    assert (await client.get(f"/matches/{match['match_id']}/events")).json()["events"] == []


@pytest.mark.anyio
async def test_event_validation(client):
    session_id, body = await _session_with_teams(client)
    match = (await client.get(f"/sessions/{session_id}/matches")).json()[0]
    outsider = next(
        t for t in body["teams"] if t["team_id"] not in (match["team1_id"], match["team2_id"])
    )
    player_id = outsider["players"][0]["player_id"]

    resp = await client.post(
        f"/matches/{match['match_id']}/events",
        json={"scorer_id": player_id, "team_id": outsider["team_id"]},
    )
    assert resp.status_code == 400

    resp = await client.post(
        f"/matches/{match['match_id']}/events",
        json={"type": "OFFSIDE", "scorer_id": player_id, "team_id": match["team1_id"]},
    )
    assert resp.status_code == 400

    resp = await client.post(
        f"/matches/{match['match_id']}/events",
        json={"scorer_id": 9999, "team_id": match["team1_id"]},
    )
    assert resp.status_code == 400

    resp = await client.post("/matches/9999/events", json={"scorer_id": player_id, "team_id": 1})
    assert resp.status_code == 404


@pytest.mark.anyio
async def test_preferences_and_chemistry(client):
    kim, lee = await _create_players(client, ["Kim", "Lee"])

    assert (await client.post("/preferences", json={"player_id": kim, "target_player_id": lee})).status_code == 200
    assert (await client.post("/preferences", json={"player_id": kim, "target_player_id": kim})).status_code == 400
    assert (await client.post("/preferences", json={"player_id": kim, "target_player_id": 999})).status_code == 400
    resp = await client.post("/chemistry", json={"player_a_id": kim, "player_b_id": lee, "score": 2})
    assert resp.status_code == 200


@pytest.mark.anyio
async def test_invalid_ranking_metric(client):
    resp = await client.get("/rankings/saves")
    assert resp.status_code == 400


@pytest.mark.anyio
async def test_sessions_listing(client):
    await client.post("/sessions", json={"date": "2024-01-01", "title": "New year", "pot_total": 90000, "base_fee": 10000})

    sessions = (await client.get("/sessions")).json()

    assert sessions[0]["title"] == "New year"
    assert sessions[0]["pot_total"] == 90000
    detail = await client.get(f"/sessions/{sessions[0]['session_id']}")
    assert detail.json()["date"] == "2024-01-01"
    assert (await client.get("/sessions/555")).status_code == 404


@pytest.mark.anyio
async def test_update_and_delete_player(client):
    kim, lee = await _create_players(client, ["Kim", "Lee"])

    resp = await client.put(f"/players/{kim}", json={"speed": 9, "name": "Kim Jr"})
    assert resp.status_code == 200
    body = resp.json()
    assert (body["name"], body["speed"], body["stamina"]) == ("Kim Jr", 9, 6)

    assert (await client.put(f"/players/{kim}", json={"name": "Lee"})).status_code == 400
    assert (await client.put("/players/999", json={"speed": 1})).status_code == 404

    assert (await client.delete(f"/players/{lee}")).status_code == 200
    assert (await client.get(f"/players/{lee}")).status_code == 404
    assert (await client.delete(f"/players/{lee}")).status_code == 404


@pytest.mark.anyio
async def test_overwrite_attendance_and_delete_session(client):
    ids = await _create_players(client, ["Kim", "Lee", "Park"])
    session = (await client.post("/sessions", json={"date": "2024-12-17", "player_ids": ids[:2]})).json()
    session_id = session["session_id"]

    resp = await client.put(f"/sessions/{session_id}/attendance", json={"player_ids": [ids[2], ids[0]]})
    assert resp.status_code == 200
    assert resp.json()["player_ids"] == [ids[2], ids[0]]

    resp = await client.put(f"/sessions/{session_id}/attendance", json={"player_ids": [4242]})
    assert resp.status_code == 400
    assert (await client.put("/sessions/999/attendance", json={"player_ids": []})).status_code == 404

    assert (await client.delete(f"/sessions/{session_id}")).status_code == 200
    assert (await client.get(f"/sessions/{session_id}")).status_code == 404
    assert (await client.delete(f"/sessions/{session_id}")).status_code == 404


@pytest.mark.anyio
async def test_manual_team_assignment(client):
    session_id, body = await _session_with_teams(client)
    source, target = body["teams"][0], body["teams"][1]
    mover = source["players"][0]["player_id"]

    resp = await client.post(
        f"/sessions/{session_id}/teams/assign",
        json={"player_id": mover, "team_id": target["team_id"]},
    )
    assert resp.status_code == 200
    teams = {team["team_id"]: team["player_ids"] for team in resp.json()}
    assert mover not in teams[source["team_id"]]
    assert mover in teams[target["team_id"]]
    assert len(teams[target["team_id"]]) == 4

    resp = await client.post(f"/sessions/{session_id}/teams/assign", json={"player_id": mover})
    assert all(mover not in team["player_ids"] for team in resp.json())

    resp = await client.post(f"/sessions/{session_id}/teams/assign", json={"player_id": mover, "team_id": 999})
    assert resp.status_code == 400
    resp = await client.post(f"/sessions/{session_id}/teams/assign", json={"player_id": 999})
    assert resp.status_code == 404


@pytest.mark.anyio
async def test_delete_single_match(client):
    session_id, _ = await _session_with_teams(client)
    matches = (await client.get(f"/sessions/{session_id}/matches")).json()

    assert (await client.delete(f"/matches/{matches[0]['match_id']}")).status_code == 200
    remaining = (await client.get(f"/sessions/{session_id}/matches")).json()
    assert [m["match_id"] for m in remaining] == [m["match_id"] for m in matches[1:]]
    assert (await client.delete(f"/matches/{matches[0]['match_id']}")).status_code == 404


@pytest.mark.anyio
async def test_parse_counts_repeated_names_once(client):
    await _create_players(client, NAMES[:2])

    resp = await client.post("/sessions/parse", json={"text": "12.17(수)\n홍길동 김철수 홍길동"})

    body = resp.json()
    assert [p["name"] for p in body["matched"]] == ["홍길동", "김철수"]
    assert body["count"] == 2


@pytest.mark.anyio
async def test_team_and_match_counts_are_capped(client):
    ids = await _create_players(client, ["Kim", "Lee"])
    session = (await client.post("/sessions", json={"date": "2024-12-17", "player_ids": ids})).json()
    session_id = session["session_id"]

    resp = await client.post(f"/sessions/{session_id}/teams/generate", json={"num_teams": 10**7})
    assert resp.status_code == 422
    assert (await client.get(f"/sessions/{session_id}/teams")).json() == []

    await client.post(f"/sessions/{session_id}/teams/generate", json={"num_teams": 2})
    resp = await client.post(f"/sessions/{session_id}/matches/autofill", params={"target": 10**6})
    assert resp.status_code == 422
