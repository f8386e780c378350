from datetime import date

import pytest


def _register(client, owner_id="learner-1"):
    response = client.post("/api/v1/review-items", json={"owner_id": owner_id, "content_id": "flashcard-1"})
    assert response.status_code == 201
    return response.json()


def test_register_item_is_due_immediately(client):
    item = _register(client)

    assert item["repetition_count"] == 0
    assert item["easiness_factor"] == 2.5
    assert item["next_review_date"] == "2025-03-10"

    due = client.get("/api/v1/review-items/due", params={"owner_id": "learner-1"}).json()
    assert [d["id"] for d in due] == [item["id"]]


def test_review_reschedules_and_returns_cue(client):
    item = _register(client)

    response = client.post(f"/api/v1/review-items/{item['id']}/review", json={"quality": 5})

    assert response.status_code == 200
    body = response.json()
    assert body["repetition_count"] == 1
    assert body["interval_days"] == 1
    assert body["next_review_date"] == str(date(2025, 3, 11))
    assert body["cue"] == "perfect"
    assert client.get("/api/v1/review-items/due", params={"owner_id": "learner-1"}).json() == []


def test_review_clamps_quality(client):
    item = _register(client)

    body = client.post(f"/api/v1/review-items/{item['id']}/review", json={"quality": -4}).json()

    assert body["repetition_count"] == 0
    assert body["easiness_factor"] == pytest.approx(1.7)
    assert body["cue"] == "again"


def test_review_unknown_item(client):
    response = client.post("/api/v1/review-items/999/review", json={"quality": 4})

    assert response.status_code == 404
    assert response.json()["type"] == "ReviewItemNotFound"


def test_stats(client):
    first = _register(client)
    _register(client)
    client.post(f"/api/v1/review-items/{first['id']}/review", json={"quality": 4})

    stats = client.get("/api/v1/review-items/stats", params={"owner_id": "learner-1"}).json()

    assert stats == {
        "total_items": 2,
        "due_today": 1,
        "reviewed_today": 1,
        "average_easiness": 2.5,
        "mastered_items": 0,
    }


def test_stats_for_learner_without_items(client):
    stats = client.get("/api/v1/review-items/stats", params={"owner_id": "nobody"}).json()
    assert stats["total_items"] == 0
    assert stats["average_easiness"] == 2.5


def test_delete_item(client):
    item = _register(client)
    client.post(f"/api/v1/review-items/{item['id']}/review", json={"quality": 3})

    assert client.delete(f"/api/v1/review-items/{item['id']}").status_code == 204
    assert client.delete(f"/api/v1/review-items/{item['id']}").status_code == 404
