"""
Decision Case Endpoints.

POST  /api/v1/cases                      - create a case (free tier: monthly limit)
GET   /api/v1/cases                      - own and shared cases, newest first
GET   /api/v1/cases/{case_id}            - case with latest analysis and simulation
PATCH /api/v1/cases/{case_id}            - edit case fields (owner)
POST  /api/v1/cases/{case_id}/status     - change status (owner)
GET   /api/v1/cases/{case_id}/revisions  - revision trail
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from decisionhub.api.deps import get_db, get_user_id
from decisionhub.schemas.case import (
    CaseCreate,
    CaseDetailResponse,
    CaseResponse,
    CaseStatusUpdate,
    CaseUpdate,
    RevisionResponse,
)
from decisionhub.services import cases

router = APIRouter(prefix="/api/v1/cases", tags=["cases"])


@router.post("", response_model=CaseResponse, status_code=201)
async def create_case(
    body: CaseCreate,
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
):
    return await cases.create_case(db, user_id, body)


@router.get("", response_model=List[CaseResponse])
async def list_cases(
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
):
    return await cases.list_cases(db, user_id, offset=offset, limit=limit)


@router.get("/{case_id}", response_model=CaseDetailResponse)
async def get_case(
    case_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
):
    return await cases.get_case_detail(db, case_id, user_id)


@router.patch("/{case_id}", response_model=CaseResponse)
async def update_case(
    case_id: uuid.UUID,
    body: CaseUpdate,
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
):
    return await cases.update_case(db, case_id, user_id, body)


@router.post("/{case_id}/status", response_model=CaseResponse)
async def change_status(
    case_id: uuid.UUID,
    body: CaseStatusUpdate,
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
):
    return await cases.change_status(db, case_id, user_id, body.status)


@router.get("/{case_id}/revisions", response_model=List[RevisionResponse])
async def list_revisions(
    case_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
):
    return await cases.list_revisions(db, case_id, user_id)
