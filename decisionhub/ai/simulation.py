"""
Risk Simulation Dispatcher.

Always runs on provider A, whatever the caller's tier. The latest analysis
summary, if any, is fed in as context. Monthly quota is not enforced here;
clients ask ``can_create_simulation`` first.
"""

import uuid

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from decisionhub.ai.parsing import parse_model_json
from decisionhub.ai.profiles import DispatchStrategy
from decisionhub.ai.prompts import build_simulation_prompt
from decisionhub.db.models import Simulation
from decisionhub.db.repositories.case import case_repo
from decisionhub.errors import PersistenceFailure
from decisionhub.schemas.simulation import SimulationPayload
from decisionhub.services.access import require_case
from decisionhub.services.llm_gateway import LLMGateway

logger = structlog.get_logger(__name__)


class SimulationDispatcher:
    def __init__(self, gateway: LLMGateway, strategy: DispatchStrategy):
        self.gateway = gateway
        self.strategy = strategy

    async def simulate(self, db: AsyncSession, case_id: uuid.UUID, user_id: uuid.UUID) -> Simulation:
        case = await require_case(db, case_id, user_id, min_role="editor")
        latest = await case_repo.latest_analysis(db, case.id)
        profile = self.strategy.simulation

        text = await self.gateway.complete(
            profile,
            build_simulation_prompt(case, latest.summary if latest else None),
            failure_message="Risk simulation failed",
        )
        payload = parse_model_json(text, SimulationPayload)

        try:
            simulation = Simulation(case_id=case.id, user_id=case.user_id, **payload.model_dump())
            db.add(simulation)
            await db.flush()
            await db.refresh(simulation)
            await case_repo.add_revision(
                db,
                case,
                user_id=case.user_id,
                revision_type="simulation_run",
                content="Risk simulation completed",
                metadata={"simulation_id": str(simulation.id), "model": profile.model},
            )
        except SQLAlchemyError as exc:
            raise PersistenceFailure("Failed to store simulation", error=str(exc)) from exc

        logger.info(
            "simulation_run",
            case_id=str(case.id),
            simulation_id=str(simulation.id),
            used_analysis=latest is not None,
        )
        return simulation
