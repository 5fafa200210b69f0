"""End-to-end tests for learner progress snapshots."""

import uuid


async def test_snapshot_then_read_back(api_client, seed, bearer):
    learner = await seed.user("progress@example.com")
    course_id, lesson_a, lesson_b = uuid.uuid4(), uuid.uuid4(), uuid.uuid4()

    response = await api_client.post(
        "/api/learner/progress",
        json={
            "user_id": str(learner.id),
            "course_id": str(course_id),
            "lessons": [
                {"lesson_id": str(lesson_a), "progress_percent": 140, "time_spent_s": 300},
                {"lesson_id": str(lesson_b), "progress_percent": 33.4, "resume_at_s": 42},
            ],
            "course": {"percent": 50},
        },
        headers=bearer(learner),
    )

    assert response.status_code == 202
    assert response.json() == {
        "success": True,
        "data": {"user_id": str(learner.id), "course_id": str(course_id), "updated_lessons": 2},
    }

    read = await api_client.get(
        f"/api/learner/progress?user_id={learner.id}&lesson_ids={lesson_a},{lesson_b}",
        headers=bearer(learner),
    )
    rows = {row["lesson_id"]: row for row in read.json()["data"]}
    assert rows[str(lesson_a)]["percent"] == 100
    assert rows[str(lesson_a)]["status"] == "completed"
    assert rows[str(lesson_a)]["time_spent_s"] == 300
    assert rows[str(lesson_b)]["percent"] == 33
    assert rows[str(lesson_b)]["status"] == "in_progress"
    assert rows[str(lesson_b)]["resume_at_s"] == 42


async def test_snapshot_updates_existing_rows(api_client, seed, bearer):
    learner = await seed.user("again@example.com")
    course_id, lesson = uuid.uuid4(), uuid.uuid4()
    snapshot = {"user_id": str(learner.id), "course_id": str(course_id)}

    await api_client.post(
        "/api/learner/progress",
        json={**snapshot, "lessons": [{"lesson_id": str(lesson), "progress_percent": 10}]},
        headers=bearer(learner),
    )
    await api_client.post(
        "/api/learner/progress",
        json={**snapshot, "lessons": [{"lesson_id": str(lesson), "progress_percent": 0}]},
        headers=bearer(learner),
    )

    read = await api_client.get(
        f"/api/learner/progress?user_id={learner.id}&lesson_ids={lesson}", headers=bearer(learner)
    )
    assert len(read.json()["data"]) == 1
    assert read.json()["data"][0]["status"] == "not_started"


async def test_missing_fields(api_client, seed, bearer):
    learner = await seed.user("incomplete@example.com")

    response = await api_client.post("/api/learner/progress", json={"lessons": []}, headers=bearer(learner))

    assert response.status_code == 400
    assert response.json()["detail"]["fields"] == ["user_id", "course_id"]


async def test_cannot_write_other_learner(api_client, seed, bearer):
    learner = await seed.user("self@example.com")
    other = await seed.user("other@example.com")

    response = await api_client.post(
        "/api/learner/progress",
        json={"user_id": str(other.id), "course_id": str(uuid.uuid4())},
        headers=bearer(learner),
    )

    assert response.status_code == 403


async def test_admin_reads_any_learner(api_client, seed, bearer):
    admin = await seed.user("progress-admin@example.com", role="admin")
    learner = await seed.user("watched@example.com")

    response = await api_client.get(
        f"/api/learner/progress?user_id={learner.id}&lesson_ids={uuid.uuid4()}", headers=bearer(admin)
    )

    assert response.status_code == 200
    assert response.json() == {"data": []}


async def test_read_requires_parameters(api_client, seed, bearer):
    learner = await seed.user("params@example.com")

    missing = await api_client.get(f"/api/learner/progress?user_id={learner.id}", headers=bearer(learner))
    malformed = await api_client.get(
        f"/api/learner/progress?user_id={learner.id}&lesson_ids=abc", headers=bearer(learner)
    )

    assert missing.status_code == 400
    assert missing.json()["detail"]["message"] == "user_id and lesson_ids are required"
    assert malformed.status_code == 400
