"""
End-to-end tests for analytics: the event log, journey rebuilds and
course summaries.
"""

import uuid
from unittest.mock import AsyncMock, patch

import pytest

from lms.boundary.db.CRUD.analytics_crud import analytics_event_crud


@pytest.fixture
async def learner(seed):
    return await seed.user("journey@example.com")


@pytest.fixture
async def admin_headers(seed, bearer):
    return bearer(await seed.user("analyst@example.com", role="admin"))


async def test_event_requires_type(api_client, learner, bearer):
    response = await api_client.post("/api/analytics/events", json={"payload": {}}, headers=bearer(learner))

    assert response.status_code == 400
    assert response.json()["detail"]["fields"] == ["event_type"]


async def test_events_rebuild_journey(api_client, learner, bearer, admin_headers):
    course_id, lesson_a, lesson_b = uuid.uuid4(), uuid.uuid4(), uuid.uuid4()
    base = {"course_id": str(course_id), "session_id": "s1"}

    single = await api_client.post(
        "/api/analytics/events",
        json={**base, "event_type": "lesson_started", "lesson_id": str(lesson_a),
              "created_at": "2024-05-01T10:00:00Z"},
        headers=bearer(learner),
    )
    assert single.status_code == 201
    assert single.json()["status"] == "stored"
    assert single.json()["data"]["user_id"] == str(learner.id)

    batch = await api_client.post(
        "/api/analytics/events/batch",
        json={"events": [
            {**base, "event_type": "lesson_completed", "lesson_id": str(lesson_a),
             "payload": {"duration": 60000, "progress": 50}, "created_at": "2024-05-01T10:05:00Z"},
            {**base, "event_type": "lesson_paused", "lesson_id": str(lesson_b),
             "session_id": "s2", "created_at": "2024-05-01T11:00:00Z"},
        ]},
        headers=bearer(learner),
    )
    assert batch.status_code == 201
    assert batch.json()["stored"] == 2

    journeys = await api_client.get(f"/api/analytics/journeys?course_id={course_id}", headers=admin_headers)
    journey = journeys.json()["data"][0]
    assert journey["user_id"] == str(learner.id)
    assert journey["sessions_count"] == 2
    assert journey["total_time_spent"] == 60
    assert journey["progress_percentage"] == 50
    assert journey["engagement_score"] == 5
    assert journey["drop_off_points"] == [str(lesson_b)]
    assert journey["path_taken"] == [str(lesson_a), str(lesson_b)]
    assert [m["type"] for m in journey["milestones"]] == ["lesson_completed"]

    events = await api_client.get(
        f"/api/analytics/events?course_id={course_id}&limit=2", headers=admin_headers
    )
    assert [e["event_type"] for e in events.json()["data"]] == ["lesson_started", "lesson_completed"]


async def test_batch_rejects_event_without_type(api_client, learner, bearer):
    response = await api_client.post(
        "/api/analytics/events/batch",
        json={"events": [{"event_type": "page_view"}, {"payload": {}}]},
        headers=bearer(learner),
    )

    assert response.status_code == 400
    assert response.json()["detail"]["message"] == "event_type is required (event 1)"


async def test_journey_upsert_and_summary(api_client, seed, learner, bearer, admin_headers):
    other = await seed.user("second@example.com")
    course_id = uuid.uuid4()

    first = await api_client.post(
        "/api/analytics/journeys",
        json={"user_id": str(learner.id), "course_id": str(course_id), "progress_percentage": 150,
              "engagement_score": 40, "completed_at": "2024-05-02T00:00:00Z"},
        headers=bearer(learner),
    )
    assert first.status_code == 201
    assert first.json()["data"]["progress_percentage"] == 100

    updated = await api_client.post(
        "/api/analytics/journeys",
        json={"user_id": str(learner.id), "course_id": str(course_id), "engagement_score": 60},
        headers=bearer(learner),
    )
    assert updated.json()["data"]["id"] == first.json()["data"]["id"]
    assert updated.json()["data"]["progress_percentage"] == 100

    await api_client.post(
        "/api/analytics/journeys",
        json={"user_id": str(other.id), "course_id": str(course_id), "progress_percentage": 50,
              "engagement_score": 20},
        headers=bearer(other),
    )

    summary = await api_client.get(f"/api/analytics/courses/{course_id}/summary", headers=admin_headers)
    assert summary.status_code == 200
    assert summary.json()["data"] == {
        "course_id": str(course_id),
        "learners": 2,
        "average_progress": 75.0,
        "completions": 1,
        "average_engagement": 40.0,
    }


async def test_journey_requires_pair(api_client, learner, bearer):
    response = await api_client.post(
        "/api/analytics/journeys", json={"user_id": str(learner.id)}, headers=bearer(learner)
    )

    assert response.status_code == 400


async def test_event_log_is_admin_only(api_client, learner, bearer):
    response = await api_client.get("/api/analytics/events", headers=bearer(learner))

    assert response.status_code == 403


async def test_replayed_event_is_stored_once(api_client, learner, bearer, admin_headers):
    course_id = uuid.uuid4()
    event = {"id": str(uuid.uuid4()), "event_type": "video_play", "course_id": str(course_id)}

    first = await api_client.post("/api/analytics/events", json=event, headers=bearer(learner))
    second = await api_client.post("/api/analytics/events", json=event, headers=bearer(learner))

    assert first.status_code == 201
    assert second.status_code == 200
    assert second.json()["status"] == "duplicate"
    assert second.json()["stored"] is False
    assert second.json()["data"]["id"] == event["id"]

    events = await api_client.get(f"/api/analytics/events?course_id={course_id}", headers=admin_headers)
    assert len(events.json()["data"]) == 1


async def test_replayed_batch_reports_duplicates(api_client, learner, bearer):
    repeated, fresh = str(uuid.uuid4()), str(uuid.uuid4())
    batch = {"events": [
        {"id": repeated, "event_type": "page_view"},
        {"id": repeated, "event_type": "page_view"},
        {"id": fresh, "event_type": "lesson_started"},
    ]}

    first = await api_client.post("/api/analytics/events/batch", json=batch, headers=bearer(learner))
    assert first.status_code == 201
    assert first.json()["stored"] == 2
    assert first.json()["duplicate_ids"] == [repeated]

    second = await api_client.post("/api/analytics/events/batch", json=batch, headers=bearer(learner))
    assert second.status_code == 201
    assert second.json()["stored"] == 0
    assert second.json()["duplicates"] == 3


async def test_concurrent_insert_of_same_event_is_a_conflict(api_client, learner, bearer):
    event = {"id": str(uuid.uuid4()), "event_type": "video_play"}
    await api_client.post("/api/analytics/events", json=event, headers=bearer(learner))

    # the duplicate lookup misses a row committed by a concurrent request
    with patch.object(analytics_event_crud, "get_by_id", AsyncMock(return_value=None)):
        response = await api_client.post("/api/analytics/events", json=event, headers=bearer(learner))

    assert response.status_code == 409
    assert response.json()["detail"]["error"] == "duplicate_event"


async def test_batch_size_is_capped(api_client, learner, bearer):
    events = [{"event_type": "page_view"} for _ in range(51)]

    response = await api_client.post(
        "/api/analytics/events/batch", json={"events": events}, headers=bearer(learner)
    )

    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "too_many_events"
    assert response.json()["detail"]["max_events"] == 50


async def test_learner_cannot_write_another_learners_analytics(api_client, seed, learner, bearer):
    intruder = await seed.user("intruder@example.com")
    course_id = str(uuid.uuid4())

    event = await api_client.post(
        "/api/analytics/events",
        json={"event_type": "course_completed", "user_id": str(learner.id), "course_id": course_id},
        headers=bearer(intruder),
    )
    batch = await api_client.post(
        "/api/analytics/events/batch",
        json={"events": [{"event_type": "page_view"}, {"event_type": "page_view", "user_id": str(learner.id)}]},
        headers=bearer(intruder),
    )
    journey = await api_client.post(
        "/api/analytics/journeys",
        json={"user_id": str(learner.id), "course_id": course_id, "progress_percentage": 100},
        headers=bearer(intruder),
    )

    assert event.status_code == 403
    assert batch.status_code == 403
    assert journey.status_code == 403


async def test_admin_may_write_any_learners_journey(api_client, learner, admin_headers):
    response = await api_client.post(
        "/api/analytics/journeys",
        json={"user_id": str(learner.id), "course_id": str(uuid.uuid4()), "progress_percentage": 30},
        headers=admin_headers,
    )

    assert response.status_code == 201
    assert response.json()["data"]["user_id"] == str(learner.id)
