"""
Case access checks.

Ranks: owner > admin > editor > viewer. A case the caller can't see at
all is reported as not found rather than forbidden.
"""

import uuid
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from decisionhub.db.models import DecisionCase
from decisionhub.db.repositories.case import case_repo
from decisionhub.errors import NotFound, PermissionDenied

ROLE_RANK = {"viewer": 1, "editor": 2, "admin": 3, "owner": 4}


async def require_case(
    db: AsyncSession,
    case_id: uuid.UUID,
    user_id: uuid.UUID,
    min_role: Optional[str] = None,
) -> DecisionCase:
    """Load a case visible to ``user_id`` holding at least ``min_role``."""
    case = await case_repo.get_visible(db, case_id, user_id)
    if case is None:
        raise NotFound("Decision case not found", case_id=str(case_id))

    if min_role is None or case.user_id == user_id:
        return case

    role = await case_repo.member_role(db, case_id, user_id)
    if ROLE_RANK.get(role or "", 0) < ROLE_RANK[min_role]:
        raise PermissionDenied(
            "You do not have permission to perform this action on this case",
            case_id=str(case_id),
            role=role,
        )
    return case
