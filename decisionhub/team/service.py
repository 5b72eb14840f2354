"""
Team collaboration on a decision case.

Two independent ways in:
- direct membership: the invitee must already have a profile
- invitation: stored by email; accepted later by any signed-in user
  holding its id

Neither path deduplicates memberships; accepting twice adds two rows.
"""

import uuid
from typing import Optional, Sequence

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from decisionhub.db.compat import utcnow
from decisionhub.db.models import (
    CaseAccessLog,
    Notification,
    Profile,
    TeamInvitation,
    TeamMember,
)
from decisionhub.errors import NotFound
from decisionhub.services.access import require_case

logger = structlog.get_logger(__name__)

MANAGE_ROLE = "admin"


async def find_profile(db: AsyncSession, email: str) -> Optional[Profile]:
    result = await db.execute(
        select(Profile).where(func.lower(Profile.email) == email.strip().lower())
    )
    return result.scalars().first()


async def add_member(
    db: AsyncSession,
    case_id: uuid.UUID,
    inviter_id: uuid.UUID,
    email: str,
    role: str,
) -> TeamMember:
    """Add an existing user to the case team straight away."""
    await require_case(db, case_id, inviter_id, min_role=MANAGE_ROLE)

    profile = await find_profile(db, email)
    if profile is None:
        raise NotFound("User not found. They must sign up first.", email=email)

    member = TeamMember(
        case_id=case_id,
        user_id=inviter_id,
        invited_user_id=profile.user_id,
        role=role,
    )
    db.add(member)
    await db.flush()
    await db.refresh(member)

    logger.info("team_member_added", case_id=str(case_id), member_id=str(member.id), role=role)
    return member


async def create_invitation(
    db: AsyncSession,
    case_id: uuid.UUID,
    inviter_id: uuid.UUID,
    email: str,
    role: str,
) -> TeamInvitation:
    """Store a pending invitation; notify the invitee if they already have a profile."""
    await require_case(db, case_id, inviter_id, min_role=MANAGE_ROLE)

    profile = await find_profile(db, email)
    invitation = TeamInvitation(
        case_id=case_id,
        inviter_user_id=inviter_id,
        invitee_email=email,
        invitee_user_id=profile.user_id if profile else None,
        role=role,
        status="pending",
    )
    db.add(invitation)
    await db.flush()

    if profile is not None:
        db.add(Notification(
            user_id=profile.user_id,
            type="team_invitation",
            title="New Team Invitation",
            message="You've been invited to collaborate on a decision case",
            link=f"/decision/{case_id}",
            metadata_={"case_id": str(case_id), "role": role},
        ))
        await db.flush()

    await db.refresh(invitation)
    logger.info(
        "team_invitation_created",
        case_id=str(case_id),
        invitation_id=str(invitation.id),
        notified=profile is not None,
    )
    return invitation


async def accept_invitation(
    db: AsyncSession,
    invitation_id: uuid.UUID,
    user_id: uuid.UUID,
) -> TeamMember:
    result = await db.execute(select(TeamInvitation).where(TeamInvitation.id == invitation_id))
    invitation = result.scalar_one_or_none()
    if invitation is None:
        raise NotFound("Invitation not found", invitation_id=str(invitation_id))

    member = TeamMember(
        case_id=invitation.case_id,
        user_id=invitation.inviter_user_id,
        invited_user_id=user_id,
        role=invitation.role,
    )
    db.add(member)

    invitation.status = "accepted"
    invitation.accepted_at = utcnow()
    invitation.invitee_user_id = user_id

    db.add(CaseAccessLog(
        user_id=user_id,
        case_id=invitation.case_id,
        action="joined_team",
        metadata_={"invitation_id": str(invitation.id), "role": invitation.role},
    ))
    await db.flush()
    await db.refresh(member)

    logger.info(
        "team_invitation_accepted",
        invitation_id=str(invitation.id),
        case_id=str(invitation.case_id),
        member_id=str(member.id),
    )
    return member


async def list_members(db: AsyncSession, case_id: uuid.UUID, user_id: uuid.UUID) -> Sequence[TeamMember]:
    await require_case(db, case_id, user_id)
    result = await db.execute(
        select(TeamMember)
        .where(TeamMember.case_id == case_id)
        .order_by(TeamMember.created_at.desc())
    )
    return result.scalars().all()


async def remove_member(
    db: AsyncSession,
    case_id: uuid.UUID,
    member_id: uuid.UUID,
    user_id: uuid.UUID,
) -> None:
    await require_case(db, case_id, user_id, min_role=MANAGE_ROLE)
    result = await db.execute(
        select(TeamMember).where(TeamMember.id == member_id, TeamMember.case_id == case_id)
    )
    member = result.scalar_one_or_none()
    if member is None:
        raise NotFound("Team member not found", member_id=str(member_id))

    await db.delete(member)
    await db.flush()
    logger.info("team_member_removed", case_id=str(case_id), member_id=str(member_id))


async def list_invitations(
    db: AsyncSession, case_id: uuid.UUID, user_id: uuid.UUID
) -> Sequence[TeamInvitation]:
    await require_case(db, case_id, user_id)
    result = await db.execute(
        select(TeamInvitation)
        .where(TeamInvitation.case_id == case_id)
        .order_by(TeamInvitation.created_at.desc())
    )
    return result.scalars().all()


async def cancel_invitation(
    db: AsyncSession,
    case_id: uuid.UUID,
    invitation_id: uuid.UUID,
    user_id: uuid.UUID,
) -> None:
    await require_case(db, case_id, user_id, min_role=MANAGE_ROLE)
    result = await db.execute(
        select(TeamInvitation).where(
            TeamInvitation.id == invitation_id,
            TeamInvitation.case_id == case_id,
        )
    )
    invitation = result.scalar_one_or_none()
    if invitation is None:
        raise NotFound("Invitation not found", invitation_id=str(invitation_id))

    await db.delete(invitation)
    await db.flush()
    logger.info("team_invitation_cancelled", case_id=str(case_id), invitation_id=str(invitation_id))


async def list_notifications(
    db: AsyncSession, user_id: uuid.UUID, limit: int = 50
) -> Sequence[Notification]:
    result = await db.execute(
        select(Notification)
        .where(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc())
        .limit(limit)
    )
    return result.scalars().all()


async def mark_notification_read(
    db: AsyncSession, notification_id: uuid.UUID, user_id: uuid.UUID
) -> Notification:
    result = await db.execute(
        select(Notification).where(
            Notification.id == notification_id,
            Notification.user_id == user_id,
        )
    )
    notification = result.scalar_one_or_none()
    if notification is None:
        raise NotFound("Notification not found", notification_id=str(notification_id))

    notification.read = True
    await db.flush()
    await db.refresh(notification)
    return notification
