"""
ORM to dict serializers.

Services return plain dicts so routers and tests never touch ORM rows
outside the request session.

Dependencies: lms.boundary.db.models
System role: Shape conversion between persistence and API layers
"""

from typing import Any

from lms.boundary.db.models import (
    AnalyticsEventModel,
    CourseAssignmentModel,
    CourseModel,
    LearnerJourneyModel,
    LessonModel,
    LessonProgressModel,
    MembershipModel,
    ModuleModel,
    OrganizationModel,
    SurveyModel,
    SurveyResponseModel,
    UserModel,
)


def membership_to_dict(membership: MembershipModel, email: str | None = None) -> dict[str, Any]:
    return {
        "id": membership.id,
        "organization_id": membership.organization_id,
        "user_id": membership.user_id,
        "role": membership.role,
        "status": membership.status,
        "email": email,
        "created_at": membership.created_at,
    }


def user_to_dict(user: UserModel) -> dict[str, Any]:
    """Public user payload; the first active membership is the active org."""
    active = user.active_memberships
    return {
        "id": user.id,
        "email": user.email,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "role": user.role,
        "is_active": user.is_active,
        "last_login_at": user.last_login_at,
        "created_at": user.created_at,
        "organization_id": active[0].organization_id if active else None,
        "memberships": [membership_to_dict(m) for m in user.memberships],
    }


def organization_to_dict(org: OrganizationModel) -> dict[str, Any]:
    return {
        "id": org.id,
        "name": org.name,
        "contact_email": org.contact_email,
        "subscription": org.subscription,
        "status": org.status,
        "settings": org.settings or {},
        "created_at": org.created_at,
        "updated_at": org.updated_at,
    }


def lesson_to_dict(lesson: LessonModel) -> dict[str, Any]:
    return {
        "id": lesson.id,
        "module_id": lesson.module_id,
        "title": lesson.title,
        "description": lesson.description,
        "type": lesson.type,
        "order_index": lesson.order_index,
        "duration_s": lesson.duration_s,
        "content": lesson.content or {},
        "completion_rule": lesson.completion_rule,
        "created_at": lesson.created_at,
        "updated_at": lesson.updated_at,
    }


def module_to_dict(module: ModuleModel, include_lessons: bool = True) -> dict[str, Any]:
    data = {
        "id": module.id,
        "course_id": module.course_id,
        "title": module.title,
        "description": module.description,
        "order_index": module.order_index,
        "lessons": [],
        "created_at": module.created_at,
        "updated_at": module.updated_at,
    }
    if include_lessons:
        lessons = sorted(module.lessons, key=lambda lesson: lesson.order_index)
        data["lessons"] = [lesson_to_dict(lesson) for lesson in lessons]
    return data


def course_to_dict(course: CourseModel) -> dict[str, Any]:
    """Course payload with modules and lessons ordered by order_index."""
    modules = sorted(course.modules, key=lambda module: module.order_index)
    return {
        "id": course.id,
        "title": course.title,
        "slug": course.slug,
        "description": course.description,
        "status": course.status,
        "version": course.version,
        "external_id": course.external_id,
        "organization_id": course.organization_id,
        "metadata": course.course_metadata or {},
        "published_at": course.published_at,
        "created_by": course.created_by,
        "modules": [module_to_dict(module) for module in modules],
        "created_at": course.created_at,
        "updated_at": course.updated_at,
    }


def assignment_to_dict(assignment: CourseAssignmentModel) -> dict[str, Any]:
    return {
        "id": assignment.id,
        "course_id": assignment.course_id,
        "organization_id": assignment.organization_id,
        "user_id": assignment.user_id,
        "due_at": assignment.due_at,
        "status": assignment.status,
        "active": assignment.active,
        "assigned_by": assignment.assigned_by,
        "created_at": assignment.created_at,
    }


def survey_to_dict(survey: SurveyModel) -> dict[str, Any]:
    return {
        "id": survey.id,
        "title": survey.title,
        "description": survey.description,
        "type": survey.type,
        "status": survey.status,
        "version": survey.version,
        "questions": survey.questions or [],
        "assigned_org_ids": [str(org_id) for org_id in survey.assigned_org_ids or []],
        "settings": survey.settings or {},
        "created_by": survey.created_by,
        "created_at": survey.created_at,
        "updated_at": survey.updated_at,
    }


def survey_response_to_dict(response: SurveyResponseModel) -> dict[str, Any]:
    return {
        "id": response.id,
        "survey_id": response.survey_id,
        "user_id": response.user_id,
        "organization_id": response.organization_id,
        "answers": response.answers or {},
        "completed_at": response.completed_at,
    }


def lesson_progress_to_dict(row: LessonProgressModel) -> dict[str, Any]:
    return {
        "user_id": row.user_id,
        "lesson_id": row.lesson_id,
        "course_id": row.course_id,
        "percent": row.percent,
        "status": row.status,
        "time_spent_s": row.time_spent_s,
        "resume_at_s": row.resume_at_s,
        "updated_at": row.updated_at,
    }


def event_to_dict(event: AnalyticsEventModel) -> dict[str, Any]:
    return {
        "id": event.id,
        "event_type": event.event_type,
        "user_id": event.user_id,
        "org_id": event.org_id,
        "course_id": event.course_id,
        "module_id": event.module_id,
        "lesson_id": event.lesson_id,
        "session_id": event.session_id,
        "user_agent": event.user_agent,
        "payload": event.payload or {},
        "created_at": event.created_at,
    }


def journey_to_dict(journey: LearnerJourneyModel) -> dict[str, Any]:
    return {
        "id": journey.id,
        "user_id": journey.user_id,
        "course_id": journey.course_id,
        "started_at": journey.started_at,
        "last_active_at": journey.last_active_at,
        "completed_at": journey.completed_at,
        "total_time_spent": journey.total_time_spent,
        "sessions_count": journey.sessions_count,
        "progress_percentage": journey.progress_percentage,
        "engagement_score": journey.engagement_score,
        "milestones": journey.milestones or [],
        "drop_off_points": journey.drop_off_points or [],
        "path_taken": journey.path_taken or [],
        "updated_at": journey.updated_at,
    }
