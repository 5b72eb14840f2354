"""
Generic async repository for user-owned rows.

Callers pass the owner explicitly; there is no database-level row
security to lean on.
"""

import uuid
from typing import Any, Generic, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from decisionhub.db.engine import Base

ModelT = TypeVar("ModelT", bound=Base)
CreateSchemaT = TypeVar("CreateSchemaT", bound=BaseModel)
UpdateSchemaT = TypeVar("UpdateSchemaT", bound=BaseModel)


class BaseRepository(Generic[ModelT, CreateSchemaT, UpdateSchemaT]):
    def __init__(self, model: Type[ModelT]):
        self.model = model

    async def create(
        self,
        db: AsyncSession,
        data: CreateSchemaT,
        user_id: uuid.UUID,
        **extra_fields: Any,
    ) -> ModelT:
        """Insert a row owned by ``user_id`` from the fields set on ``data``."""
        obj = self.model(**data.model_dump(exclude_unset=True), user_id=user_id, **extra_fields)
        db.add(obj)
        await db.flush()
        await db.refresh(obj)
        return obj

    async def update(self, db: AsyncSession, obj: ModelT, data: UpdateSchemaT) -> ModelT:
        """Apply only the fields the caller explicitly sent."""
        changes = data.model_dump(exclude_unset=True)
        for name, value in changes.items():
            setattr(obj, name, value)
        await db.flush()
        await db.refresh(obj)
        return obj
