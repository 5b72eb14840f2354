"""Schemas for team members, invitations and notifications."""

import uuid
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field

TeamRole = Literal["viewer", "editor", "admin"]


class MemberInvite(BaseModel):
    email: EmailStr
    role: TeamRole = "viewer"


class InvitationCreate(BaseModel):
    email: EmailStr
    role: TeamRole = "viewer"


class InvitationAccept(BaseModel):
    invitation_id: uuid.UUID


class TeamMemberResponse(BaseModel):
    id: uuid.UUID
    case_id: uuid.UUID
    user_id: uuid.UUID
    invited_user_id: uuid.UUID
    role: str
    created_at: datetime

    model_config = {"from_attributes": True}


class InvitationResponse(BaseModel):
    id: uuid.UUID
    case_id: uuid.UUID
    inviter_user_id: uuid.UUID
    invitee_email: str
    invitee_user_id: Optional[uuid.UUID]
    role: str
    status: str
    accepted_at: Optional[datetime]
    created_at: datetime

    model_config = {"from_attributes": True}


class AcceptResponse(BaseModel):
    success: bool = True
    member: TeamMemberResponse


class NotificationResponse(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    type: str
    title: str
    message: str
    link: Optional[str]
    metadata: Optional[dict] = Field(default=None, validation_alias="metadata_")
    read: bool
    created_at: datetime

    model_config = {"from_attributes": True, "populate_by_name": True}
