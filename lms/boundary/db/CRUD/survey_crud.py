"""
Survey and survey response CRUD operations.

Dependencies: sqlalchemy, lms.boundary.db.models
System role: Survey persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lms.boundary.db.models.survey_model import SurveyModel, SurveyResponseModel
from lms.boundary.db.CRUD.base_crud import BaseCRUD


class SurveyCRUD(BaseCRUD[SurveyModel]):
    """CRUD operations for SurveyModel."""

    def __init__(self) -> None:
        """Initialize SurveyCRUD with SurveyModel."""
        super().__init__(SurveyModel)

    async def list_by_status(
        self,
        session: AsyncSession,
        status: str | None = None,
    ) -> Sequence[SurveyModel]:
        """
        List surveys newest first.

        Args:
            session: Async database session
            status: Only surveys with this status; None for all

        Returns:
            Sequence of SurveyModels
        """
        stmt = select(SurveyModel).order_by(SurveyModel.created_at.desc())
        if status is not None:
            stmt = stmt.where(SurveyModel.status == status)
        result = await session.execute(stmt)
        return result.scalars().all()


class SurveyResponseCRUD(BaseCRUD[SurveyResponseModel]):
    """CRUD operations for SurveyResponseModel."""

    def __init__(self) -> None:
        """Initialize SurveyResponseCRUD with SurveyResponseModel."""
        super().__init__(SurveyResponseModel)

    async def get_for_user(
        self,
        session: AsyncSession,
        survey_id: UUID,
        user_id: UUID,
    ) -> SurveyResponseModel | None:
        stmt = select(SurveyResponseModel).where(
            SurveyResponseModel.survey_id == survey_id,
            SurveyResponseModel.user_id == user_id,
        )
        return (await session.execute(stmt)).scalar_one_or_none()

    async def list_for_survey(
        self,
        session: AsyncSession,
        survey_id: UUID,
    ) -> Sequence[SurveyResponseModel]:
        """List responses of a survey in submission order."""
        stmt = (
            select(SurveyResponseModel)
            .where(SurveyResponseModel.survey_id == survey_id)
            .order_by(SurveyResponseModel.completed_at)
        )
        result = await session.execute(stmt)
        return result.scalars().all()


survey_crud = SurveyCRUD()
survey_response_crud = SurveyResponseCRUD()
