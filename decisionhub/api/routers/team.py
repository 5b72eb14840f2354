"""
Team Collaboration Endpoints.

POST   /api/v1/cases/{case_id}/members                      - add an existing user directly
GET    /api/v1/cases/{case_id}/members                      - list members
DELETE /api/v1/cases/{case_id}/members/{member_id}          - remove a member
POST   /api/v1/cases/{case_id}/invitations                  - invite by email
GET    /api/v1/cases/{case_id}/invitations                  - list invitations
DELETE /api/v1/cases/{case_id}/invitations/{invitation_id}  - cancel an invitation
POST   /api/v1/invitations/accept                           - accept an invitation
GET    /api/v1/notifications                                - caller's notifications
POST   /api/v1/notifications/{notification_id}/read         - mark one read
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from decisionhub.api.deps import get_db, get_user_id
from decisionhub.schemas.team import (
    AcceptResponse,
    InvitationAccept,
    InvitationCreate,
    InvitationResponse,
    MemberInvite,
    NotificationResponse,
    TeamMemberResponse,
)
from decisionhub.team import service

router = APIRouter(prefix="/api/v1", tags=["team"])


@router.post("/cases/{case_id}/members", response_model=TeamMemberResponse, status_code=201)
async def add_member(
    case_id: uuid.UUID,
    body: MemberInvite,
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
):
    return await service.add_member(db, case_id, user_id, body.email, body.role)


@router.get("/cases/{case_id}/members", response_model=List[TeamMemberResponse])
async def list_members(
    case_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
):
    return await service.list_members(db, case_id, user_id)


@router.delete("/cases/{case_id}/members/{member_id}", status_code=204)
async def remove_member(
    case_id: uuid.UUID,
    member_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
):
    await service.remove_member(db, case_id, member_id, user_id)


@router.post("/cases/{case_id}/invitations", response_model=InvitationResponse, status_code=201)
async def create_invitation(
    case_id: uuid.UUID,
    body: InvitationCreate,
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
):
    return await service.create_invitation(db, case_id, user_id, body.email, body.role)


@router.get("/cases/{case_id}/invitations", response_model=List[InvitationResponse])
async def list_invitations(
    case_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
):
    return await service.list_invitations(db, case_id, user_id)


@router.delete("/cases/{case_id}/invitations/{invitation_id}", status_code=204)
async def cancel_invitation(
    case_id: uuid.UUID,
    invitation_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
):
    await service.cancel_invitation(db, case_id, invitation_id, user_id)


@router.post("/invitations/accept", response_model=AcceptResponse)
async def accept_invitation(
    body: InvitationAccept,
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
):
    member = await service.accept_invitation(db, body.invitation_id, user_id)
    return AcceptResponse(member=TeamMemberResponse.model_validate(member))


@router.get("/notifications", response_model=List[NotificationResponse])
async def list_notifications(
    limit: int = Query(default=50, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
):
    return await service.list_notifications(db, user_id, limit=limit)


@router.post("/notifications/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_read(
    notification_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
):
    return await service.mark_notification_read(db, notification_id, user_id)
