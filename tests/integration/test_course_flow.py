"""
End-to-end tests for course authoring.

Drive the admin course, module and lesson endpoints against an in-memory
database: idempotent upsert, version conflicts, orphan removal,
reordering, publishing and deletion.
"""

import pytest


@pytest.fixture
async def admin_headers(seed, bearer):
    admin = await seed.user("admin@example.com", role="admin")
    return bearer(admin)


def _tree_payload(**course):
    return {
        "course": {"title": "Intro to Data", **course},
        "modules": [
            {
                "title": "Second",
                "order_index": 5,
                "lessons": [{"title": "B1", "type": "video"}, {"title": "B2", "type": "quiz"}],
            },
            {"title": "First", "order_index": 1, "lessons": [{"title": "A1"}]},
        ],
    }


async def test_upsert_creates_ordered_tree(api_client, admin_headers):
    response = await api_client.post("/api/admin/courses", json=_tree_payload(), headers=admin_headers)

    assert response.status_code == 201
    course = response.json()["data"]
    assert course["slug"] == "intro-to-data"
    assert course["status"] == "draft"
    assert course["version"] == 1
    assert [m["title"] for m in course["modules"]] == ["First", "Second"]
    assert [m["order_index"] for m in course["modules"]] == [0, 1]
    second = course["modules"][1]
    assert [(l["title"], l["order_index"]) for l in second["lessons"]] == [("B1", 0), ("B2", 1)]
    assert second["lessons"][0]["type"] == "video"


async def test_repeated_idempotency_key_rejected(api_client, admin_headers):
    payload = {**_tree_payload(), "idempotency_key": "upsert-1"}

    first = await api_client.post("/api/admin/courses", json=payload, headers=admin_headers)
    second = await api_client.post("/api/admin/courses", json=payload, headers=admin_headers)

    assert first.status_code == 201
    assert second.status_code == 409
    detail = second.json()["detail"]
    assert detail["error"] == "idempotency_conflict"
    assert detail["resource_id"] == first.json()["data"]["id"]

    listing = await api_client.get("/api/admin/courses", headers=admin_headers)
    assert len(listing.json()["data"]) == 1


async def test_duplicate_title_gets_unique_slug(api_client, admin_headers):
    first = await api_client.post("/api/admin/courses", json={"course": {"title": "Same"}}, headers=admin_headers)
    second = await api_client.post("/api/admin/courses", json={"course": {"title": "Same"}}, headers=admin_headers)

    assert first.json()["data"]["slug"] == "same"
    assert second.json()["data"]["slug"] == "same-2"


async def test_update_by_id_bumps_version_and_drops_orphans(api_client, admin_headers):
    created = (await api_client.post("/api/admin/courses", json=_tree_payload(), headers=admin_headers)).json()["data"]
    kept = created["modules"][0]

    response = await api_client.post(
        "/api/admin/courses",
        json={
            "course": {"id": created["id"], "title": "Renamed"},
            "modules": [{"id": kept["id"], "title": "First (edited)", "lessons": []}],
        },
        headers=admin_headers,
    )

    assert response.status_code == 201
    course = response.json()["data"]
    assert course["id"] == created["id"]
    assert course["title"] == "Renamed"
    assert course["slug"] == "intro-to-data"
    assert course["version"] == 2
    assert [m["id"] for m in course["modules"]] == [kept["id"]]
    assert course["modules"][0]["lessons"] == []


async def test_stale_version_rejected(api_client, admin_headers):
    created = (await api_client.post(
        "/api/admin/courses", json={"course": {"title": "Versioned", "version": 3}}, headers=admin_headers
    )).json()["data"]
    assert created["version"] == 3

    response = await api_client.post(
        "/api/admin/courses",
        json={"course": {"id": created["id"], "title": "Versioned", "version": 2}},
        headers=admin_headers,
    )

    assert response.status_code == 409
    assert response.json()["detail"]["error"] == "version_conflict"
    assert response.json()["detail"]["current_version"] == 3


async def test_module_and_lesson_editing(api_client, admin_headers):
    course = (await api_client.post("/api/admin/courses", json=_tree_payload(), headers=admin_headers)).json()["data"]
    first, second = course["modules"]

    created = await api_client.post(
        "/api/admin/modules",
        json={"course_id": course["id"], "title": "Third"},
        headers=admin_headers,
    )
    assert created.status_code == 201
    third = created.json()["data"]
    assert third["order_index"] == 2

    reordered = await api_client.post(
        "/api/admin/modules/reorder",
        json={
            "course_id": course["id"],
            "modules": [
                {"id": third["id"], "order_index": 0},
                {"id": first["id"], "order_index": 1},
                {"id": second["id"], "order_index": 2},
            ],
        },
        headers=admin_headers,
    )
    assert reordered.status_code == 200
    assert [item["id"] for item in reordered.json()["data"]] == [third["id"], first["id"], second["id"]]

    lesson = await api_client.post(
        "/api/admin/lessons",
        json={"module_id": third["id"], "title": "C1", "type": "reflection"},
        headers=admin_headers,
    )
    assert lesson.status_code == 201
    lesson_id = lesson.json()["data"]["id"]

    patched = await api_client.patch(
        f"/api/admin/lessons/{lesson_id}",
        json={"title": "C1 (edited)", "duration_s": 90},
        headers=admin_headers,
    )
    assert patched.status_code == 200
    assert patched.json()["data"]["title"] == "C1 (edited)"
    assert patched.json()["data"]["duration_s"] == 90

    deleted = await api_client.delete(f"/api/admin/modules/{second['id']}", headers=admin_headers)
    again = await api_client.delete(f"/api/admin/modules/{second['id']}", headers=admin_headers)
    assert deleted.status_code == 204
    assert again.status_code == 204

    final = (await api_client.get(f"/api/admin/courses/{course['id']}", headers=admin_headers)).json()["data"]
    assert [m["title"] for m in final["modules"]] == ["Third", "First"]
    assert final["modules"][0]["lessons"][0]["title"] == "C1 (edited)"


async def test_reorder_rejects_foreign_module(api_client, admin_headers):
    one = (await api_client.post("/api/admin/courses", json=_tree_payload(), headers=admin_headers)).json()["data"]
    other = (await api_client.post("/api/admin/courses", json={
        "course": {"title": "Other"}, "modules": [{"title": "X"}],
    }, headers=admin_headers)).json()["data"]

    response = await api_client.post(
        "/api/admin/modules/reorder",
        json={"course_id": one["id"], "modules": [{"id": other["modules"][0]["id"], "order_index": 0}]},
        headers=admin_headers,
    )

    assert response.status_code == 400


async def test_publish_then_visible_to_learners(api_client, admin_headers):
    course = (await api_client.post("/api/admin/courses", json=_tree_payload(), headers=admin_headers)).json()["data"]

    hidden = await api_client.get(f"/api/client/courses/{course['slug']}")
    assert hidden.json() == {"data": None}

    drafts = await api_client.get(f"/api/client/courses/{course['slug']}?include_drafts=true")
    assert drafts.json()["data"]["id"] == course["id"]

    published = await api_client.post(f"/api/admin/courses/{course['id']}/publish", headers=admin_headers)
    assert published.status_code == 200
    assert published.json()["data"]["status"] == "published"
    assert published.json()["data"]["published_at"] is not None

    by_id = await api_client.get(f"/api/client/courses/{course['id']}")
    assert by_id.json()["data"]["slug"] == course["slug"]

    catalog = await api_client.get("/api/client/courses")
    assert [c["id"] for c in catalog.json()["data"]] == [course["id"]]


async def test_delete_course(api_client, admin_headers):
    course = (await api_client.post("/api/admin/courses", json=_tree_payload(), headers=admin_headers)).json()["data"]

    response = await api_client.delete(f"/api/admin/courses/{course['id']}", headers=admin_headers)
    missing = await api_client.get(f"/api/admin/courses/{course['id']}", headers=admin_headers)
    listing = await api_client.get("/api/admin/courses", headers=admin_headers)

    assert response.status_code == 204
    assert missing.status_code == 404
    assert listing.json()["data"] == []


async def test_admin_routes_require_authentication(api_client):
    response = await api_client.get("/api/admin/courses")

    assert response.status_code == 401
