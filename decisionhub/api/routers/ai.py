"""
AI Endpoints.

POST /api/v1/analyze-decision   - tier-dispatched analysis of one case
POST /api/v1/simulate-risk      - risk simulation of one case
POST /api/v1/generate-insights  - cross-case insights for the caller (not stored)
"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from decisionhub.api.deps import get_db, get_services, get_user_id
from decisionhub.schemas.analysis import AnalysisEnvelope, AnalysisResponse
from decisionhub.schemas.case import CaseRequest
from decisionhub.schemas.insights import InsightsEnvelope
from decisionhub.schemas.simulation import SimulationEnvelope, SimulationResponse
from decisionhub.services.container import ServiceContainer

router = APIRouter(prefix="/api/v1", tags=["ai"])


@router.post("/analyze-decision", response_model=AnalysisEnvelope)
async def analyze_decision(
    body: CaseRequest,
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
    services: ServiceContainer = Depends(get_services),
):
    analysis = await services.analysis.analyze(db, body.case_id, user_id)
    return AnalysisEnvelope(analysis=AnalysisResponse.model_validate(analysis))


@router.post("/simulate-risk", response_model=SimulationEnvelope)
async def simulate_risk(
    body: CaseRequest,
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
    services: ServiceContainer = Depends(get_services),
):
    simulation = await services.simulation.simulate(db, body.case_id, user_id)
    return SimulationEnvelope(simulation=SimulationResponse.model_validate(simulation))


@router.post("/generate-insights", response_model=InsightsEnvelope)
async def generate_insights(
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
    services: ServiceContainer = Depends(get_services),
):
    insights = await services.insights.generate(db, user_id)
    return InsightsEnvelope(insights=insights)
