"""
Decision case repository.

Visibility rules (formerly RLS policies):
- the owner sees and edits the case
- team members see it; ``editor``/``admin`` members may run AI operations
"""

import uuid
from typing import Optional, Sequence

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from decisionhub.db.models import Analysis, DecisionCase, Revision, Simulation, TeamMember
from decisionhub.db.repositories.base import BaseRepository
from decisionhub.schemas.case import CaseCreate, CaseUpdate


class CaseRepository(BaseRepository[DecisionCase, CaseCreate, CaseUpdate]):
    def __init__(self):
        super().__init__(DecisionCase)

    async def get_visible(
        self, db: AsyncSession, case_id: uuid.UUID, user_id: uuid.UUID
    ) -> Optional[DecisionCase]:
        """Return the case if ``user_id`` owns it or is on its team."""
        member_cases = select(TeamMember.case_id).where(TeamMember.invited_user_id == user_id)
        result = await db.execute(
            select(DecisionCase).where(
                DecisionCase.id == case_id,
                or_(DecisionCase.user_id == user_id, DecisionCase.id.in_(member_cases)),
            )
        )
        return result.scalar_one_or_none()

    async def member_role(
        self, db: AsyncSession, case_id: uuid.UUID, user_id: uuid.UUID
    ) -> Optional[str]:
        """Highest team role ``user_id`` holds on the case, if any."""
        result = await db.execute(
            select(TeamMember.role).where(
                TeamMember.case_id == case_id,
                TeamMember.invited_user_id == user_id,
            )
        )
        roles = set(result.scalars().all())
        for role in ("admin", "editor", "viewer"):
            if role in roles:
                return role
        return None

    async def list_visible(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        offset: int = 0,
        limit: int = 50,
    ) -> Sequence[DecisionCase]:
        """Own and shared cases, newest first."""
        member_cases = select(TeamMember.case_id).where(TeamMember.invited_user_id == user_id)
        result = await db.execute(
            select(DecisionCase)
            .where(or_(DecisionCase.user_id == user_id, DecisionCase.id.in_(member_cases)))
            .order_by(DecisionCase.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        return result.scalars().all()

    async def latest_analysis(self, db: AsyncSession, case_id: uuid.UUID) -> Optional[Analysis]:
        result = await db.execute(
            select(Analysis)
            .where(Analysis.case_id == case_id)
            .order_by(Analysis.created_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def latest_simulation(self, db: AsyncSession, case_id: uuid.UUID) -> Optional[Simulation]:
        result = await db.execute(
            select(Simulation)
            .where(Simulation.case_id == case_id)
            .order_by(Simulation.created_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def revisions(self, db: AsyncSession, case_id: uuid.UUID) -> Sequence[Revision]:
        result = await db.execute(
            select(Revision)
            .where(Revision.case_id == case_id)
            .order_by(Revision.created_at.desc())
        )
        return result.scalars().all()

    async def add_revision(
        self,
        db: AsyncSession,
        case: DecisionCase,
        user_id: uuid.UUID,
        revision_type: str,
        content: str,
        metadata: Optional[dict] = None,
    ) -> Revision:
        revision = Revision(
            case_id=case.id,
            user_id=user_id,
            revision_type=revision_type,
            content=content,
            metadata_=metadata or {},
        )
        db.add(revision)
        await db.flush()
        return revision


case_repo = CaseRepository()
