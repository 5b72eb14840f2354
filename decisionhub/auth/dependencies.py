"""
FastAPI dependencies for the DB session, caller identity and the
start-up service container.
"""

import uuid
from typing import TYPE_CHECKING

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from decisionhub.db.engine import get_session_factory
from decisionhub.errors import Unauthenticated

if TYPE_CHECKING:
    from decisionhub.services.container import ServiceContainer


async def get_db() -> AsyncSession:
    """Provide an async DB session, committed on success."""
    factory = get_session_factory()
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_user_id(request: Request) -> uuid.UUID:
    """Extract user_id from request state (set by AuthMiddleware)."""
    user_id = getattr(request.state, "user_id", None)
    if not user_id:
        raise Unauthenticated("Missing user context")
    try:
        return uuid.UUID(str(user_id))
    except ValueError as exc:
        raise Unauthenticated("Invalid user context") from exc


def get_user_email(request: Request) -> str:
    return getattr(request.state, "user_email", "") or ""


def get_services(request: Request) -> "ServiceContainer":
    """The provider clients constructed in ``create_app``."""
    return request.app.state.services
