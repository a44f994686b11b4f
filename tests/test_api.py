import pytest
from fastapi.testclient import TestClient

import voting_bracket.schema.postgres as schema
from voting_bracket.apps.api.app import app
from voting_bracket.apps.api.dependencies import am
from voting_bracket.tournament import TournamentEngine


@pytest.fixture
def client(sessionmaker):
    app.state.sessionmaker = sessionmaker
    app.state.tournament_engine = TournamentEngine(sessionmaker)
    return TestClient(app)


def _auth_headers(user_id, **claims):
    token = am.create_access_token({"sub": str(user_id), **claims})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers():
    return _auth_headers(5005, username="carol", first_name="Carol")


def _start(client, headers, reset=False):
    response = client.post(
        "/api/tournament/start", json={"reset": reset}, headers=headers
    )
    assert response.status_code == 200, response.text
    return response.json()["sessionId"]


def test_health(client):
    assert client.get("/api/health").json() == {"status": "OK"}


def test_requires_authentication(client):
    response = client.post("/api/tournament/start", json={})
    assert response.status_code == 401


def test_full_tournament_flow(client, headers, candidates):
    session_id = _start(client, headers)
    assert _start(client, headers) == session_id

    response = client.post(
        "/api/tournament/state",
        json={"sessionId": session_id, "state": {"round": 2, "queue": [3, 1]}},
        headers=headers,
    )
    assert response.status_code == 200

    response = client.get(f"/api/tournament/state/{session_id}", headers=headers)
    assert response.json() == {
        "sessionId": session_id,
        "state": {"round": 2, "queue": [3, 1]},
    }

    for vote_order, (winner, loser) in enumerate([("A", "B"), ("B", "C")]):
        response = client.post(
            "/api/tournament/vote",
            json={
                "sessionId": session_id,
                "winnerId": candidates[winner],
                "loserId": candidates[loser],
                "voteOrder": vote_order,
            },
            headers=headers,
        )
        assert response.status_code == 200, response.text
        assert response.json()["sessionId"] == session_id

    me = client.get("/api/tournament/me", headers=headers).json()
    assert me["tournamentCompleted"] is False
    assert me["votesInSession"] == 2
    assert me["user"]["username"] == "carol"

    response = client.post(
        "/api/tournament/complete",
        json={"sessionId": session_id, "comment": "what a final"},
        headers=headers,
    )
    assert response.status_code == 200, response.text

    response = client.post("/api/tournament/start", json={}, headers=headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "Tournament already completed"

    response = client.post(
        "/api/tournament/complete", json={"sessionId": session_id}, headers=headers
    )
    assert response.status_code == 400

    me = client.get("/api/tournament/me", headers=headers).json()
    assert me["tournamentCompleted"] is True
    assert me["user"]["totalVotes"] == 2
    assert me["recentVotes"][0]["comment"] == "what a final"

    tier_list = client.get("/api/candidates/tierlist").json()
    assert tier_list["total"] == 3
    assert [entry["name"] for entry in tier_list["tierlist"]] == ["A", "B", "C"]


def test_start_with_reset_discards_progress(client, headers, candidates):
    session_id = _start(client, headers)
    client.post(
        "/api/tournament/vote",
        json={
            "sessionId": session_id,
            "winnerId": candidates["A"],
            "loserId": candidates["B"],
            "voteOrder": 0,
        },
        headers=headers,
    )

    new_session_id = _start(client, headers, reset=True)

    assert new_session_id != session_id
    me = client.get("/api/tournament/me", headers=headers).json()
    assert me["votesInSession"] == 0


def test_complete_empty_tournament(client, headers):
    session_id = _start(client, headers)

    response = client.post(
        "/api/tournament/complete", json={"sessionId": session_id}, headers=headers
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "No votes found in session"


def test_vote_rejects_inactive_candidate(client, engine, headers, candidates):
    with engine.begin() as conn:
        conn.execute(
            schema.voting.candidate.update()
            .where(schema.voting.candidate.c.id == candidates["C"])
            .values(is_active=False)
        )
    session_id = _start(client, headers)

    response = client.post(
        "/api/tournament/vote",
        json={
            "sessionId": session_id,
            "winnerId": candidates["A"],
            "loserId": candidates["C"],
            "voteOrder": 0,
        },
        headers=headers,
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Candidate is not active"


def test_vote_rejects_unknown_candidate(client, headers, candidates):
    session_id = _start(client, headers)

    response = client.post(
        "/api/tournament/vote",
        json={
            "sessionId": session_id,
            "winnerId": candidates["A"],
            "loserId": 999,
            "voteOrder": 0,
        },
        headers=headers,
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid candidate IDs"


def test_sessions_are_private_to_their_owner(client, headers, candidates):
    session_id = _start(client, headers)
    other_headers = _auth_headers(6006, username="mallory")

    response = client.get(f"/api/tournament/state/{session_id}", headers=other_headers)
    assert response.status_code == 404

    response = client.post(
        "/api/tournament/complete",
        json={"sessionId": session_id},
        headers=other_headers,
    )
    assert response.status_code == 404


def test_candidate_pair_and_matchup(client, candidates):
    pair = client.get("/api/candidates/pair").json()
    assert pair["candidate1"]["id"] != pair["candidate2"]["id"]

    matchup = client.get(
        "/api/candidates/matchup",
        params={"candidate1": candidates["A"], "candidate2": candidates["B"]},
    ).json()
    assert matchup == {
        "candidate1Wins": 0,
        "candidate2Wins": 0,
        "totalMatches": 0,
        "candidate1Winrate": 0,
    }


def test_candidate_top_winners(client, engine, candidates):
    with engine.begin() as conn:
        conn.execute(
            schema.voting.candidate.update()
            .where(schema.voting.candidate.c.id == candidates["B"])
            .values(wins=4, matches=5)
        )

    response = client.get("/api/candidates/top", params={"limit": 2})

    assert response.status_code == 200
    winners = response.json()["winners"]
    assert len(winners) == 2
    assert winners[0]["name"] == "B"
    assert winners[0]["eloRating"] == 1200
