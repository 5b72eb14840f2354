"""Schemas for AI risk simulation."""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

SIMULATION_ITERATIONS = 100


class ExpectedValue(BaseModel):
    impact_score: float
    confidence: float
    monetary: Optional[float] = None


class Scenario(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    description: str
    probability: float
    impact: str


class SimulationResults(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    iterations: int = SIMULATION_ITERATIONS
    success_rate: float
    average_outcome: str
    variance: str

    @field_validator("iterations", mode="before")
    @classmethod
    def _fixed_iterations(cls, value):
        # The prompt asks for exactly 100 iterations; store that regardless
        return SIMULATION_ITERATIONS


class ProbabilityPoint(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    outcome: str
    probability: float
    impact_level: float


class SimulationPayload(BaseModel):
    expected_value: ExpectedValue
    best_case: Scenario
    worst_case: Scenario
    simulation_results: SimulationResults
    probability_data: List[ProbabilityPoint]


class SimulationResponse(BaseModel):
    id: uuid.UUID
    case_id: uuid.UUID
    user_id: uuid.UUID
    expected_value: Optional[dict]
    best_case: Optional[dict]
    worst_case: Optional[dict]
    simulation_results: Optional[dict]
    probability_data: Optional[list]
    created_at: datetime

    model_config = {"from_attributes": True}


class SimulationEnvelope(BaseModel):
    simulation: SimulationResponse
