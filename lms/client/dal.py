"""
Resource data-access objects over LMSApiClient.

Each DAL maps one API area to coroutine methods. Payloads use camelCase
keys; responses are unwrapped from their ``data`` envelope.

Dependencies: lms.client.api_client
System role: Client data-access layer
"""

from typing import Any

from lms.client.api_client import LMSApiClient


def _data(body: Any) -> Any:
    if isinstance(body, dict) and "data" in body:
        return body["data"]
    return body


class _BaseDAL:
    def __init__(self, client: LMSApiClient) -> None:
        self.client = client


class AuthDAL(_BaseDAL):
    """Login, registration and token lifecycle; keeps the client's bearer token current."""

    def _adopt(self, session: dict) -> dict:
        self.client.access_token = session.get("accessToken")
        return session

    async def login(self, email: str, password: str) -> dict:
        return self._adopt(await self.client.post("/api/auth/login", {"email": email, "password": password}))

    async def register(self, email: str, password: str, first_name: str, last_name: str) -> dict:
        payload = {"email": email, "password": password, "firstName": first_name, "lastName": last_name}
        return self._adopt(await self.client.post("/api/auth/register", payload))

    async def refresh(self, refresh_token: str) -> dict:
        return self._adopt(await self.client.post("/api/auth/refresh", {"refreshToken": refresh_token}))

    async def logout(self, refresh_token: str | None = None) -> dict:
        payload = {"refreshToken": refresh_token} if refresh_token else None
        result = await self.client.post("/api/auth/logout", payload)
        self.client.access_token = None
        return result

    async def me(self) -> dict:
        return (await self.client.get("/api/auth/me"))["user"]


class CourseDAL(_BaseDAL):
    """Admin authoring and learner catalog access to courses, modules and lessons."""

    async def list_admin_courses(self, status: str | None = None) -> list[dict]:
        return _data(await self.client.get("/api/admin/courses", {"status": status}))

    async def get_admin_course(self, course_id: str) -> dict:
        return _data(await self.client.get(f"/api/admin/courses/{course_id}"))

    async def upsert_course(
        self,
        course: dict,
        modules: list[dict] | None = None,
        idempotency_key: str | None = None,
    ) -> dict:
        """
        Create or replace a course tree.

        Raises:
            ApiError: 409 with code ``idempotency_conflict`` for a reused key
        """
        payload: dict[str, Any] = {"course": course, "modules": modules or []}
        if idempotency_key:
            payload["idempotencyKey"] = idempotency_key
        return _data(await self.client.post("/api/admin/courses", payload))

    async def update_course(self, course_id: str, fields: dict) -> dict:
        return _data(await self.client.put(f"/api/admin/courses/{course_id}", fields))

    async def publish_course(self, course_id: str, version: int | None = None) -> dict:
        payload = {"version": version} if version is not None else {}
        return _data(await self.client.post(f"/api/admin/courses/{course_id}/publish", payload))

    async def assign_course(
        self,
        course_id: str,
        organization_id: str,
        user_ids: list[str] | None = None,
        due_at: str | None = None,
    ) -> list[dict]:
        payload = {"organizationId": organization_id, "userIds": user_ids or [], "dueAt": due_at}
        return _data(await self.client.post(f"/api/admin/courses/{course_id}/assign", payload))

    async def delete_course(self, course_id: str) -> None:
        await self.client.delete(f"/api/admin/courses/{course_id}")

    async def create_module(self, module: dict) -> dict:
        return _data(await self.client.post("/api/admin/modules", module))

    async def update_module(self, module_id: str, fields: dict) -> dict:
        return _data(await self.client.patch(f"/api/admin/modules/{module_id}", fields))

    async def delete_module(self, module_id: str) -> None:
        await self.client.delete(f"/api/admin/modules/{module_id}")

    async def reorder_modules(self, course_id: str, order: list[dict]) -> list[dict]:
        payload = {"courseId": course_id, "modules": order}
        return _data(await self.client.post("/api/admin/modules/reorder", payload))

    async def create_lesson(self, lesson: dict) -> dict:
        return _data(await self.client.post("/api/admin/lessons", lesson))

    async def update_lesson(self, lesson_id: str, fields: dict) -> dict:
        return _data(await self.client.patch(f"/api/admin/lessons/{lesson_id}", fields))

    async def delete_lesson(self, lesson_id: str) -> None:
        await self.client.delete(f"/api/admin/lessons/{lesson_id}")

    async def reorder_lessons(self, module_id: str, order: list[dict]) -> list[dict]:
        payload = {"moduleId": module_id, "lessons": order}
        return _data(await self.client.post("/api/admin/lessons/reorder", payload))

    async def list_published(self, assigned: bool = False, org_id: str | None = None) -> list[dict]:
        params = {"assigned": "true" if assigned else None, "orgId": org_id}
        return _data(await self.client.get("/api/client/courses", params))

    async def get_course(self, identifier: str, include_drafts: bool = False) -> dict | None:
        params = {"include_drafts": "true"} if include_drafts else None
        return _data(await self.client.get(f"/api/client/courses/{identifier}", params))

    async def list_assignments(self) -> list[dict]:
        return _data(await self.client.get("/api/client/assignments"))


class SurveyDAL(_BaseDAL):
    """Survey administration and learner submissions."""

    async def list_surveys(self, status: str | None = None) -> list[dict]:
        return _data(await self.client.get("/api/admin/surveys", {"status": status}))

    async def get_survey(self, survey_id: str) -> dict:
        return _data(await self.client.get(f"/api/admin/surveys/{survey_id}"))

    async def create_survey(self, survey: dict) -> dict:
        return _data(await self.client.post("/api/admin/surveys", survey))

    async def update_survey(self, survey_id: str, fields: dict) -> dict:
        return _data(await self.client.put(f"/api/admin/surveys/{survey_id}", fields))

    async def delete_survey(self, survey_id: str) -> None:
        await self.client.delete(f"/api/admin/surveys/{survey_id}")

    async def get_results(self, survey_id: str) -> dict:
        return await self.client.get(f"/api/admin/surveys/{survey_id}/responses")

    async def list_available(self, status: str = "published") -> list[dict]:
        return _data(await self.client.get("/api/client/surveys", {"status": status}))

    async def submit_response(
        self,
        survey_id: str,
        answers: dict,
        organization_id: str | None = None,
    ) -> dict:
        # answer keys are question ids and must not be renamed
        payload = {"answers": answers, "organization_id": organization_id}
        return _data(
            await self.client.post(f"/api/client/surveys/{survey_id}/responses", payload, transform=False)
        )


class AnalyticsDAL(_BaseDAL):
    """Event ingestion and journey reporting."""

    async def track(self, event: dict) -> dict:
        return _data(await self.client.post("/api/analytics/events", event))

    async def track_batch(self, events: list[dict]) -> list[dict]:
        return _data(await self.client.post("/api/analytics/events/batch", {"events": events}))

    async def list_events(
        self,
        user_id: str | None = None,
        course_id: str | None = None,
        event_type: str | None = None,
        limit: int | None = None,
    ) -> list[dict]:
        params = {"user_id": user_id, "course_id": course_id, "event_type": event_type, "limit": limit}
        return _data(await self.client.get("/api/analytics/events", params))

    async def upsert_journey(self, journey: dict) -> dict:
        return _data(await self.client.post("/api/analytics/journeys", journey))

    async def list_journeys(self, user_id: str | None = None, course_id: str | None = None) -> list[dict]:
        params = {"user_id": user_id, "course_id": course_id}
        return _data(await self.client.get("/api/analytics/journeys", params))

    async def course_summary(self, course_id: str) -> dict:
        return _data(await self.client.get(f"/api/analytics/courses/{course_id}/summary"))


class ProgressDAL(_BaseDAL):
    """Learner progress snapshots."""

    async def save_snapshot(
        self,
        user_id: str,
        course_id: str,
        lessons: list[dict],
        course: dict | None = None,
    ) -> dict:
        payload: dict[str, Any] = {"userId": user_id, "courseId": course_id, "lessons": lessons}
        if course is not None:
            payload["course"] = course
        return _data(await self.client.post("/api/learner/progress", payload))

    async def get_lesson_progress(self, user_id: str, lesson_ids: list[str]) -> list[dict]:
        params = {"user_id": user_id, "lesson_ids": ",".join(lesson_ids)}
        return _data(await self.client.get("/api/learner/progress", params))
