"""
Decision case lifecycle.

Every mutation appends a revision. Only the owner edits a case; team
members read it (and run AI operations if editor or admin).
"""

import uuid
from typing import Sequence

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from decisionhub.db.models import DecisionCase, Revision
from decisionhub.db.repositories.case import case_repo
from decisionhub.errors import LimitReached
from decisionhub.schemas.analysis import AnalysisResponse
from decisionhub.schemas.case import CaseCreate, CaseDetailResponse, CaseResponse, CaseUpdate
from decisionhub.schemas.simulation import SimulationResponse
from decisionhub.services.access import require_case
from decisionhub.services.entitlements import (
    CASE_LIMIT_MESSAGE,
    can_create_case,
    case_limit,
    get_user_role,
)

logger = structlog.get_logger(__name__)


async def create_case(db: AsyncSession, user_id: uuid.UUID, data: CaseCreate) -> DecisionCase:
    if not await can_create_case(db, user_id):
        limit = case_limit(await get_user_role(db, user_id))
        raise LimitReached(CASE_LIMIT_MESSAGE.format(limit=limit), user_id=str(user_id))

    case = await case_repo.create(db, data, user_id, status="active")
    await case_repo.add_revision(
        db, case, user_id, "case_created", "Decision case created", {"title": case.title}
    )
    logger.info("case_created", case_id=str(case.id))
    return case


async def list_cases(
    db: AsyncSession, user_id: uuid.UUID, offset: int = 0, limit: int = 50
) -> Sequence[DecisionCase]:
    return await case_repo.list_visible(db, user_id, offset=offset, limit=limit)


async def get_case_detail(db: AsyncSession, case_id: uuid.UUID, user_id: uuid.UUID) -> CaseDetailResponse:
    case = await require_case(db, case_id, user_id)
    analysis = await case_repo.latest_analysis(db, case.id)
    simulation = await case_repo.latest_simulation(db, case.id)
    return CaseDetailResponse(
        case=CaseResponse.model_validate(case),
        latest_analysis=AnalysisResponse.model_validate(analysis) if analysis else None,
        latest_simulation=SimulationResponse.model_validate(simulation) if simulation else None,
    )


async def update_case(
    db: AsyncSession, case_id: uuid.UUID, user_id: uuid.UUID, data: CaseUpdate
) -> DecisionCase:
    case = await require_case(db, case_id, user_id, min_role="owner")
    fields = sorted(data.model_dump(exclude_unset=True))
    if not fields:
        return case

    case = await case_repo.update(db, case, data)
    await case_repo.add_revision(
        db, case, user_id, "case_updated", "Decision case updated", {"fields": fields}
    )
    logger.info("case_updated", case_id=str(case.id), fields=fields)
    return case


async def change_status(
    db: AsyncSession, case_id: uuid.UUID, user_id: uuid.UUID, status: str
) -> DecisionCase:
    case = await require_case(db, case_id, user_id, min_role="owner")
    previous = case.status
    if previous == status:
        return case

    case.status = status
    await db.flush()
    await db.refresh(case)
    await case_repo.add_revision(
        db,
        case,
        user_id,
        "status_changed",
        f"Status changed from {previous} to {status}",
        {"from": previous, "to": status},
    )
    logger.info("case_status_changed", case_id=str(case.id), previous=previous, status=status)
    return case


async def list_revisions(db: AsyncSession, case_id: uuid.UUID, user_id: uuid.UUID) -> Sequence[Revision]:
    case = await require_case(db, case_id, user_id)
    return await case_repo.revisions(db, case.id)
