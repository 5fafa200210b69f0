import pytest
from datetime import datetime, timezone
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock
from uuid import uuid4

from lms.api.deps.auth import get_current_user, require_admin
from lms.api.deps.dependencies import get_course_service
from lms.api.main import create_app
from lms.core.exceptions import IdempotencyConflictError, NotFoundError, VersionConflictError


@pytest.fixture
def client():
    app = create_app()
    return TestClient(app)


@pytest.fixture
def mock_course_service():
    return AsyncMock()


@pytest.fixture
def admin(client, make_user):
    user = make_user(role="admin")
    client.app.dependency_overrides[require_admin] = lambda: user
    return user


def _course(title="Intro", **overrides):
    now = datetime.now(timezone.utc)
    course = {
        "id": uuid4(),
        "title": title,
        "slug": title.lower(),
        "description": None,
        "status": "draft",
        "version": 1,
        "external_id": None,
        "organization_id": None,
        "metadata": {},
        "published_at": None,
        "created_by": None,
        "modules": [],
        "created_at": now,
        "updated_at": now,
    }
    course.update(overrides)
    return course


def test_list_courses(client, admin, mock_course_service):
    mock_course_service.list_courses.return_value = [_course("One"), _course("Two")]
    client.app.dependency_overrides[get_course_service] = lambda: mock_course_service

    response = client.get("/api/admin/courses?status=draft")

    assert response.status_code == 200
    assert [c["title"] for c in response.json()["data"]] == ["One", "Two"]
    mock_course_service.list_courses.assert_awaited_once_with(status="draft")


def test_upsert_course(client, admin, mock_course_service):
    mock_course_service.upsert_course.return_value = _course("Intro")
    client.app.dependency_overrides[get_course_service] = lambda: mock_course_service

    response = client.post(
        "/api/admin/courses",
        json={
            "course": {"title": "Intro"},
            "modules": [{"title": "M1", "lessons": [{"title": "L1", "type": "video"}]}],
            "client_event_id": "evt-1",
        },
    )

    assert response.status_code == 201
    assert response.json()["data"]["title"] == "Intro"
    kwargs = mock_course_service.upsert_course.call_args.kwargs
    assert kwargs["idempotency_key"] == "evt-1"
    assert kwargs["actor_id"] == admin.id
    assert kwargs["modules"][0]["lessons"][0]["title"] == "L1"


def test_upsert_course_requires_title(client, admin, mock_course_service):
    client.app.dependency_overrides[get_course_service] = lambda: mock_course_service

    response = client.post("/api/admin/courses", json={"course": {"description": "no title"}})

    assert response.status_code == 400
    assert response.json()["detail"] == {"error": "validation_error", "message": "Course title is required"}
    mock_course_service.upsert_course.assert_not_called()


def test_upsert_course_rejects_unknown_lesson_type(client, admin, mock_course_service):
    client.app.dependency_overrides[get_course_service] = lambda: mock_course_service

    response = client.post(
        "/api/admin/courses",
        json={"course": {"title": "T"}, "modules": [{"title": "M", "lessons": [{"title": "L", "type": "podcast"}]}]},
    )

    assert response.status_code == 400
    assert "Invalid lesson type" in response.json()["detail"]["message"]


def test_upsert_course_idempotency_conflict(client, admin, mock_course_service):
    existing_id = uuid4()
    mock_course_service.upsert_course.side_effect = IdempotencyConflictError("key-1", existing_id)
    client.app.dependency_overrides[get_course_service] = lambda: mock_course_service

    response = client.post("/api/admin/courses", json={"course": {"title": "T"}, "idempotency_key": "key-1"})

    assert response.status_code == 409
    detail = response.json()["detail"]
    assert detail["error"] == "idempotency_conflict"
    assert detail["resource_id"] == str(existing_id)


def test_get_course_not_found(client, admin, mock_course_service):
    course_id = uuid4()
    mock_course_service.get_course.side_effect = NotFoundError("Course", course_id)
    client.app.dependency_overrides[get_course_service] = lambda: mock_course_service

    response = client.get(f"/api/admin/courses/{course_id}")

    assert response.status_code == 404
    assert response.json()["detail"]["message"] == "Course not found"


def test_update_course_without_fields(client, admin, mock_course_service):
    client.app.dependency_overrides[get_course_service] = lambda: mock_course_service

    response = client.put(f"/api/admin/courses/{uuid4()}", json={})

    assert response.status_code == 400
    assert response.json()["detail"]["message"] == "No fields to update"


def test_publish_stale_version(client, admin, mock_course_service):
    mock_course_service.publish_course.side_effect = VersionConflictError(3)
    client.app.dependency_overrides[get_course_service] = lambda: mock_course_service

    response = client.post(f"/api/admin/courses/{uuid4()}/publish", json={"version": 2})

    assert response.status_code == 409
    assert response.json()["detail"]["current_version"] == 3


def test_publish_without_body(client, admin, mock_course_service):
    course_id = uuid4()
    mock_course_service.publish_course.return_value = _course(status="published")
    client.app.dependency_overrides[get_course_service] = lambda: mock_course_service

    response = client.post(f"/api/admin/courses/{course_id}/publish")

    assert response.status_code == 200
    mock_course_service.publish_course.assert_awaited_once_with(course_id, version=None)


def test_assign_requires_organization(client, admin, mock_course_service):
    client.app.dependency_overrides[get_course_service] = lambda: mock_course_service

    response = client.post(f"/api/admin/courses/{uuid4()}/assign", json={"user_ids": []})

    assert response.status_code == 400
    assert response.json()["detail"]["message"] == "organization_id is required"


def test_assign_by_org_admin_of_other_org_forbidden(client, make_user, mock_course_service):
    org_admin = make_user(memberships=[(uuid4(), "admin")])
    client.app.dependency_overrides[require_admin] = lambda: org_admin
    client.app.dependency_overrides[get_course_service] = lambda: mock_course_service

    response = client.post(f"/api/admin/courses/{uuid4()}/assign", json={"organization_id": str(uuid4())})

    assert response.status_code == 403
    mock_course_service.assign_course.assert_not_called()


def test_delete_course(client, admin, mock_course_service):
    course_id = uuid4()
    client.app.dependency_overrides[get_course_service] = lambda: mock_course_service

    response = client.delete(f"/api/admin/courses/{course_id}")

    assert response.status_code == 204
    mock_course_service.delete_course.assert_awaited_once_with(course_id)


def test_learner_cannot_use_admin_routes(client, make_user, mock_course_service):
    learner = make_user()
    client.app.dependency_overrides[get_current_user] = lambda: learner
    client.app.dependency_overrides[get_course_service] = lambda: mock_course_service

    response = client.get("/api/admin/courses")

    assert response.status_code == 403
    assert response.json()["detail"]["message"] == "Admin access required"
