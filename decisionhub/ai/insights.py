"""
Insights Aggregator.

Summarizes every case the caller owns into one prompt. Results are
returned to the caller and never stored.
"""

import uuid

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from decisionhub.ai.parsing import parse_model_json
from decisionhub.ai.profiles import DispatchStrategy
from decisionhub.ai.prompts import build_insights_prompt
from decisionhub.db.models import Analysis, DecisionCase, Simulation
from decisionhub.errors import UpstreamQuotaExhausted, UpstreamRateLimited
from decisionhub.schemas.insights import InsightsPayload
from decisionhub.services.llm_gateway import LLMGateway

logger = structlog.get_logger(__name__)

EMPTY_INSIGHTS = InsightsPayload(
    overall_summary="No decisions yet. Create your first decision case to get started!",
    key_trends=[],
    recommendations=[],
    risk_overview="No data available",
)

SERVICE_LIMITED_INSIGHTS = InsightsPayload(
    overall_summary="Unable to generate insights due to AI service limits. Please try again later.",
    key_trends=[],
    recommendations=[],
    risk_overview="Service temporarily unavailable",
)


class InsightsAggregator:
    def __init__(self, gateway: LLMGateway, strategy: DispatchStrategy):
        self.gateway = gateway
        self.strategy = strategy

    async def case_summaries(self, db: AsyncSession, user_id: uuid.UUID) -> list[dict]:
        has_analysis = select(Analysis.id).where(Analysis.case_id == DecisionCase.id).exists()
        has_simulation = select(Simulation.id).where(Simulation.case_id == DecisionCase.id).exists()
        result = await db.execute(
            select(
                DecisionCase.title,
                DecisionCase.status,
                DecisionCase.risks,
                has_analysis.label("has_analysis"),
                has_simulation.label("has_simulation"),
            )
            .where(DecisionCase.user_id == user_id)
            .order_by(DecisionCase.created_at.desc())
        )
        return [
            {
                "title": row.title,
                "status": row.status,
                "risks": row.risks,
                "has_analysis": bool(row.has_analysis),
                "has_simulation": bool(row.has_simulation),
            }
            for row in result.all()
        ]

    async def generate(self, db: AsyncSession, user_id: uuid.UUID) -> InsightsPayload:
        summaries = await self.case_summaries(db, user_id)
        if not summaries:
            return EMPTY_INSIGHTS

        try:
            text = await self.gateway.complete(
                self.strategy.insights,
                build_insights_prompt(summaries),
                failure_message="Failed to generate insights",
            )
        except (UpstreamRateLimited, UpstreamQuotaExhausted) as exc:
            logger.warning("insights_service_limited", error_type=type(exc).__name__)
            return SERVICE_LIMITED_INSIGHTS

        insights = parse_model_json(text, InsightsPayload)
        logger.info("insights_generated", cases=len(summaries))
        return insights
