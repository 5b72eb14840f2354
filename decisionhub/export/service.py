"""Export a visible case with its latest analysis and simulation."""

import uuid
from dataclasses import dataclass

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from decisionhub.db.repositories.case import case_repo
from decisionhub.export.renderers import render_csv, render_html
from decisionhub.services.access import require_case

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ExportDocument:
    body: str
    media_type: str
    filename: str


async def export_case(
    db: AsyncSession,
    case_id: uuid.UUID,
    user_id: uuid.UUID,
    fmt: str,
) -> ExportDocument:
    case = await require_case(db, case_id, user_id)
    analysis = await case_repo.latest_analysis(db, case.id)
    simulation = await case_repo.latest_simulation(db, case.id)

    logger.info("case_exported", case_id=str(case.id), format=fmt)
    if fmt == "csv":
        return ExportDocument(
            body=render_csv(case, analysis, simulation),
            media_type="text/csv",
            filename=f"decision-{case.id}.csv",
        )
    return ExportDocument(
        body=render_html(case, analysis, simulation),
        media_type="text/html",
        filename=f"decision-{case.id}.html",
    )
