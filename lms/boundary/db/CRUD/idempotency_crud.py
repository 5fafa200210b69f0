"""
Idempotency key CRUD operations.

Dependencies: sqlalchemy, lms.boundary.db.models, lms.core.exceptions
System role: Write deduplication for course upserts
"""

from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from lms.boundary.db.models.idempotency_model import IdempotencyKeyModel
from lms.boundary.db.CRUD.base_crud import BaseCRUD
from lms.core.exceptions import IdempotencyConflictError


class IdempotencyKeyCRUD(BaseCRUD[IdempotencyKeyModel]):
    """CRUD operations for IdempotencyKeyModel."""

    def __init__(self) -> None:
        """Initialize IdempotencyKeyCRUD with IdempotencyKeyModel."""
        super().__init__(IdempotencyKeyModel)

    async def claim(
        self,
        session: AsyncSession,
        key: str,
        key_type: str,
        payload: dict | None = None,
    ) -> IdempotencyKeyModel:
        """
        Record first use of an idempotency key.

        A key seen before raises immediately. Two concurrent first uses are
        settled by the primary key constraint: the losing flush raises
        IntegrityError, which is reported as the same conflict.

        Args:
            session: Async database session
            key: Client supplied idempotency key
            key_type: Operation the key guards
            payload: Request payload to keep alongside the key

        Returns:
            IdempotencyKeyModel: The new key row

        Raises:
            IdempotencyConflictError: If the key was already used
        """
        existing = await self.get_by_id(session, key)
        if existing is not None:
            raise IdempotencyConflictError(key, existing.resource_id)

        record = IdempotencyKeyModel(id=key, key_type=key_type, payload=payload)
        session.add(record)
        try:
            await session.flush()
        except IntegrityError as e:
            raise IdempotencyConflictError(key) from e
        return record

    async def attach_resource(
        self,
        session: AsyncSession,
        record: IdempotencyKeyModel,
        resource_id: UUID,
    ) -> None:
        """Store the id of the resource the keyed request produced."""
        record.resource_id = resource_id
        await session.flush()


idempotency_crud = IdempotencyKeyCRUD()
