import re


def _create(client, host="host-1", **body):
    response = client.post("/api/v1/practice-sessions", params={"user_id": host}, json=body)
    assert response.status_code == 201, response.text
    return response.json()


def _join(client, code, user_id, display_name=None):
    return client.post(
        "/api/v1/practice-sessions/join",
        params={"user_id": user_id},
        json={"session_code": code, "display_name": display_name},
    )


def _answer(client, session_id, user_id, **body):
    return client.post(f"/api/v1/practice-sessions/{session_id}/answers", params={"user_id": user_id}, json=body)


def test_end_to_end_practice_session(client):
    created = _create(client, max_participants=2, join_as_host=False)
    session_id, code = created["session_id"], created["session_code"]
    assert re.fullmatch(r"[A-Z0-9]{6}", code)
    assert created["is_active"] is True

    assert _join(client, code, "u1", "One").status_code == 200
    assert _join(client, code.lower(), "u2", "Two").status_code == 200

    full = _join(client, code, "u3", "Three")
    assert full.status_code == 409
    assert full.json()["type"] == "SessionFull"

    answered = _answer(client, session_id, "u1", delta=10)
    assert answered.status_code == 200
    assert answered.json()["score"] == 10

    board = client.get(f"/api/v1/practice-sessions/{session_id}/leaderboard").json()
    assert [(p["user_id"], p["score"], p["rank"]) for p in board["participants"]] == [("u1", 10, 1), ("u2", 0, 2)]

    ended = client.post(f"/api/v1/practice-sessions/{session_id}/end", params={"user_id": "host-1"})
    assert ended.status_code == 200
    assert ended.json()["is_active"] is False

    late = _answer(client, session_id, "u1", delta=10)
    assert late.status_code == 404

    board = client.get(f"/api/v1/practice-sessions/{session_id}/leaderboard").json()
    assert board["is_session_active"] is False
    assert [p["score"] for p in board["participants"]] == [10, 0]


def test_create_session_seats_host(client):
    created = _create(client, session_name="Biology", host_display_name="Sam")

    assert created["participant_count"] == 1
    assert created["max_participants"] == 10
    board = client.get(f"/api/v1/practice-sessions/{created['session_id']}/leaderboard").json()
    assert board["participants"][0]["display_name"] == "Sam"


def test_create_session_capacity_limits(client):
    too_big = client.post("/api/v1/practice-sessions", params={"user_id": "host-1"}, json={"max_participants": 1000})
    assert too_big.status_code == 400

    zero = client.post("/api/v1/practice-sessions", params={"user_id": "host-1"}, json={"max_participants": 0})
    assert zero.status_code == 422


def test_duplicate_join_returns_same_participant(client):
    created = _create(client)

    first = _join(client, created["session_code"], "u1", "Alex").json()
    second = _join(client, created["session_code"], "u1", "Alex").json()

    assert first["participant_id"] == second["participant_id"]
    session = client.get(f"/api/v1/practice-sessions/{created['session_id']}").json()
    assert session["participant_count"] == 2


def test_join_unknown_code(client):
    response = _join(client, "ZZZZZZ", "u1")
    assert response.status_code == 404
    assert response.json()["type"] == "SessionNotFound"


def test_non_host_cannot_end_or_delete(client):
    created = _create(client)
    session_id = created["session_id"]

    assert client.post(f"/api/v1/practice-sessions/{session_id}/end", params={"user_id": "u1"}).status_code == 403
    assert client.delete(f"/api/v1/practice-sessions/{session_id}", params={"user_id": "u1"}).status_code == 403
    assert client.get(f"/api/v1/practice-sessions/{session_id}").json()["is_active"] is True


def test_delete_session(client):
    created = _create(client)
    session_id = created["session_id"]

    assert client.delete(f"/api/v1/practice-sessions/{session_id}", params={"user_id": "host-1"}).status_code == 204
    assert client.get(f"/api/v1/practice-sessions/{session_id}").status_code == 404


def test_answer_with_quality_returns_cue(client):
    created = _create(client)

    body = _answer(client, created["session_id"], "host-1", quality=5, item_id="flashcard-9").json()

    assert body["score_delta"] == 100
    assert body["score"] == 100
    assert body["cue"] == "perfect"


def test_answer_from_non_participant(client):
    created = _create(client)
    response = _answer(client, created["session_id"], "stranger", delta=5)
    assert response.status_code == 404
    assert response.json()["type"] == "ParticipantNotFound"


def test_answer_without_delta_or_quality(client):
    created = _create(client)
    assert _answer(client, created["session_id"], "host-1").status_code == 400


def test_leave_session(client):
    created = _create(client)
    session_id = created["session_id"]
    _join(client, created["session_code"], "u1")

    left = client.post(f"/api/v1/practice-sessions/{session_id}/leave", params={"user_id": "u1"}).json()
    again = client.post(f"/api/v1/practice-sessions/{session_id}/leave", params={"user_id": "u1"}).json()

    assert left["left"] is True
    assert again["left"] is False


def test_presence_on_leaderboard(client, clock):
    created = _create(client)
    session_id = created["session_id"]
    _join(client, created["session_code"], "u1")

    clock.advance(seconds=31)
    client.post(f"/api/v1/practice-sessions/{session_id}/heartbeat", params={"user_id": "u1"})

    board = client.get(f"/api/v1/practice-sessions/{session_id}/leaderboard").json()
    active = {p["user_id"]: p["is_active"] for p in board["participants"]}
    assert active == {"host-1": False, "u1": True}


def test_lookup_by_code_and_host(client):
    created = _create(client)

    by_code = client.get(f"/api/v1/practice-sessions/code/{created['session_code'].lower()}").json()
    hosted = client.get("/api/v1/practice-sessions", params={"host_user_id": "host-1"}).json()

    assert by_code["session_id"] == created["session_id"]
    assert [s["session_id"] for s in hosted] == [created["session_id"]]


def test_join_publishes_change_event(client, bus):
    created = _create(client)
    events = []
    bus.subscribe(created["session_id"], events.append)

    _join(client, created["session_code"], "u1", "Alex")

    assert len(events) == 1
    assert events[0].record["display_name"] == "Alex"
