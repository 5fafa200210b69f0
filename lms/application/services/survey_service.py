"""
Survey service orchestrator.

Coordinates survey authoring, learner-facing listing, response submission
and response summaries.

Dependencies: lms.boundary.db.CRUD, lms.core.exceptions
System role: Survey use case orchestration
"""

import logging
from collections import Counter
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from lms.application.serializers import survey_response_to_dict, survey_to_dict
from lms.boundary.db.base import utcnow
from lms.boundary.db.CRUD.survey_crud import survey_crud, survey_response_crud
from lms.boundary.db.models.survey_model import SURVEY_STATUSES, SurveyModel
from lms.core.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

CHOICE_TYPES = frozenset({"single_choice", "multiple_choice"})
NUMERIC_TYPES = frozenset({"rating", "scale", "nps", "number"})


def _is_answered(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, dict)):
        return bool(value)
    return True


def summarize_responses(questions: list[dict], responses: list[dict]) -> dict[str, Any]:
    """
    Tally answers per question.

    Choice questions get option counts, numeric questions an average,
    anything else an answered count.

    Args:
        questions: Survey question dicts
        responses: Response dicts with an ``answers`` mapping

    Returns:
        dict: response_count and a per-question breakdown keyed by question id
    """
    breakdown: dict[str, Any] = {}
    for question in questions:
        qid = question.get("id")
        values = [r["answers"].get(qid) for r in responses if _is_answered(r["answers"].get(qid))]
        entry: dict[str, Any] = {"answered": len(values)}
        qtype = question.get("type")
        if qtype in CHOICE_TYPES:
            counts: Counter = Counter()
            for value in values:
                for choice in value if isinstance(value, list) else [value]:
                    counts[str(choice)] += 1
            entry["counts"] = dict(counts)
        elif qtype in NUMERIC_TYPES:
            numbers = [float(v) for v in values if isinstance(v, (int, float)) and not isinstance(v, bool)]
            entry["average"] = round(sum(numbers) / len(numbers), 2) if numbers else None
        breakdown[qid] = entry
    return {"response_count": len(responses), "questions": breakdown}


class SurveyService:
    """Survey service orchestrator."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize survey service with async database session.

        Args:
            db: Async SQLAlchemy session
        """
        self.db = db

    async def _require_survey(self, survey_id: UUID) -> SurveyModel:
        survey = await survey_crud.get_by_id(self.db, survey_id)
        if survey is None:
            raise NotFoundError("Survey", survey_id)
        return survey

    @staticmethod
    def _check_status(status: str | None) -> None:
        if status is not None and status not in SURVEY_STATUSES:
            raise ValidationError(f"Invalid survey status: {status}", field="status")

    async def list_surveys(
        self,
        status: str | None = None,
        organization_id: UUID | None = None,
    ) -> list[dict]:
        """
        List surveys, optionally filtered by status and organization.

        Surveys without assigned organizations are visible to every
        organization.
        """
        surveys = await survey_crud.list_by_status(self.db, status)
        if organization_id is not None:
            org = str(organization_id)
            surveys = [
                survey for survey in surveys
                if not survey.assigned_org_ids or org in {str(o) for o in survey.assigned_org_ids}
            ]
        return [survey_to_dict(survey) for survey in surveys]

    async def get_survey(self, survey_id: UUID) -> dict:
        """
        Get survey by ID.

        Raises:
            NotFoundError: If survey not found
        """
        return survey_to_dict(await self._require_survey(survey_id))

    async def create_survey(
        self,
        title: str,
        description: str | None = None,
        type: str = "custom",
        status: str = "draft",
        questions: list[dict] | None = None,
        assigned_org_ids: list[UUID] | None = None,
        settings: dict | None = None,
        created_by: UUID | None = None,
    ) -> dict:
        """Create a survey."""
        self._check_status(status)
        survey = await survey_crud.create(
            self.db,
            title=title,
            description=description,
            type=type,
            status=status,
            questions=questions or [],
            assigned_org_ids=[str(org_id) for org_id in assigned_org_ids or []],
            settings=settings or {},
            created_by=created_by,
        )
        logger.info("Survey created", extra={"survey_id": str(survey.id)})
        return survey_to_dict(survey)

    async def update_survey(self, survey_id: UUID, **fields: Any) -> dict:
        """
        Update survey fields; None values are ignored. Bumps the version.

        Raises:
            NotFoundError: If survey not found
        """
        self._check_status(fields.get("status"))
        survey = await self._require_survey(survey_id)
        updates = {key: value for key, value in fields.items() if value is not None}
        if "assigned_org_ids" in updates:
            updates["assigned_org_ids"] = [str(org_id) for org_id in updates["assigned_org_ids"]]
        updates["version"] = survey.version + 1
        survey = await survey_crud.update_by_id(self.db, survey_id, **updates)
        logger.info("Survey updated", extra={"survey_id": str(survey_id), "fields": sorted(updates)})
        return survey_to_dict(survey)

    async def delete_survey(self, survey_id: UUID) -> None:
        """
        Delete a survey and its responses.

        Raises:
            NotFoundError: If survey not found
        """
        if not await survey_crud.delete_by_id(self.db, survey_id):
            raise NotFoundError("Survey", survey_id)
        logger.info("Survey deleted", extra={"survey_id": str(survey_id)})

    async def submit_response(
        self,
        survey_id: UUID,
        user_id: UUID,
        answers: dict[str, Any],
        organization_id: UUID | None = None,
    ) -> dict:
        """
        Store a learner's answers; a resubmission replaces earlier answers.

        Raises:
            NotFoundError: Survey missing
            ValidationError: Survey not published, or required questions unanswered
        """
        survey = await self._require_survey(survey_id)
        if survey.status != "published":
            raise ValidationError("Survey is not accepting responses", field="status")

        missing = [
            q.get("id") for q in survey.questions or []
            if q.get("required") and not _is_answered(answers.get(q.get("id")))
        ]
        if missing:
            raise ValidationError(
                "Required questions are unanswered",
                field="answers",
                details={"question_ids": missing},
            )

        response = await survey_response_crud.get_for_user(self.db, survey_id, user_id)
        if response is None:
            response = await survey_response_crud.create(
                self.db,
                survey_id=survey_id,
                user_id=user_id,
                organization_id=organization_id,
                answers=answers,
                completed_at=utcnow(),
            )
        else:
            response.answers = answers
            response.organization_id = organization_id
            response.completed_at = utcnow()
            await self.db.flush()

        logger.info(
            "Survey response stored",
            extra={"survey_id": str(survey_id), "user_id": str(user_id)},
        )
        return survey_response_to_dict(response)

    async def get_results(self, survey_id: UUID) -> dict:
        """
        Responses of a survey and their summary.

        Raises:
            NotFoundError: If survey not found
        """
        survey = await self._require_survey(survey_id)
        responses = [
            survey_response_to_dict(r)
            for r in await survey_response_crud.list_for_survey(self.db, survey_id)
        ]
        return {"data": responses, "summary": summarize_responses(survey.questions or [], responses)}
