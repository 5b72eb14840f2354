"""
Export Endpoint.

POST /api/v1/export-decision  - case as CSV download or printable HTML
"""

import uuid

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from decisionhub.api.deps import get_db, get_user_id
from decisionhub.export.service import export_case
from decisionhub.schemas.export import ExportRequest

router = APIRouter(prefix="/api/v1", tags=["export"])


@router.post("/export-decision")
async def export_decision(
    body: ExportRequest,
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
):
    document = await export_case(db, body.case_id, user_id, body.format)
    headers = {}
    if body.format == "csv":
        headers["Content-Disposition"] = f'attachment; filename="{document.filename}"'
    return Response(content=document.body, media_type=document.media_type, headers=headers)
