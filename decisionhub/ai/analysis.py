"""
AI Analysis Dispatcher.

case -> owner's tier -> model profile -> one completion -> validated
payload -> one Analysis row plus one ``analysis_generated`` revision.
Nothing is written unless the model output validates.
"""

import uuid

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from decisionhub.ai.parsing import parse_model_json
from decisionhub.ai.profiles import DispatchStrategy
from decisionhub.ai.prompts import build_analysis_prompt
from decisionhub.db.models import Analysis
from decisionhub.db.repositories.case import case_repo
from decisionhub.errors import PersistenceFailure
from decisionhub.schemas.analysis import AnalysisPayload
from decisionhub.services.access import require_case
from decisionhub.services.entitlements import get_user_role
from decisionhub.services.llm_gateway import LLMGateway

logger = structlog.get_logger(__name__)


class AnalysisDispatcher:
    def __init__(self, gateway: LLMGateway, strategy: DispatchStrategy):
        self.gateway = gateway
        self.strategy = strategy

    async def analyze(self, db: AsyncSession, case_id: uuid.UUID, user_id: uuid.UUID) -> Analysis:
        case = await require_case(db, case_id, user_id, min_role="editor")

        role = await get_user_role(db, case.user_id)
        profile = self.strategy.analysis_profile(role)
        logger.info(
            "analysis_requested",
            case_id=str(case.id),
            tier=role,
            provider=profile.provider,
            model=profile.model,
        )

        text = await self.gateway.complete(
            profile,
            build_analysis_prompt(case),
            failure_message="AI analysis failed",
        )
        payload = parse_model_json(text, AnalysisPayload)
        data = payload.model_dump(by_alias=True)

        try:
            analysis = Analysis(case_id=case.id, user_id=case.user_id, **data)
            db.add(analysis)
            await db.flush()
            await db.refresh(analysis)
            await case_repo.add_revision(
                db,
                case,
                user_id=case.user_id,
                revision_type="analysis_generated",
                content="AI analysis completed",
                metadata={"analysis_id": str(analysis.id), "model": profile.model},
            )
        except SQLAlchemyError as exc:
            raise PersistenceFailure("Failed to store analysis", error=str(exc)) from exc

        logger.info("analysis_generated", case_id=str(case.id), analysis_id=str(analysis.id))
        return analysis
