"""
Schemas for AI decision analysis.

``AnalysisPayload`` is the contract the model's JSON must satisfy; any
missing or mistyped field is rejected before anything is persisted.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class KeyArguments(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    for_: List[str] = Field(alias="for")
    against: List[str]


class DecisionPath(BaseModel):
    name: str
    description: str
    pros: List[str]
    cons: List[str]
    probability_success: float


class EffectsTradeoffs(BaseModel):
    short_term: List[str]
    long_term: List[str]
    risks: List[str]
    opportunities: List[str]


class AnalysisPayload(BaseModel):
    summary: str
    key_arguments: KeyArguments
    decision_paths: List[DecisionPath]
    effects_tradeoffs: EffectsTradeoffs
    probability_reasoning: str
    blind_spots: List[str]
    recommended_path: str
    follow_up_questions: List[str]


class AnalysisResponse(BaseModel):
    id: uuid.UUID
    case_id: uuid.UUID
    user_id: uuid.UUID
    summary: Optional[str]
    key_arguments: Optional[dict]
    decision_paths: Optional[list]
    effects_tradeoffs: Optional[dict]
    probability_reasoning: Optional[str]
    blind_spots: Optional[list]
    recommended_path: Optional[str]
    follow_up_questions: Optional[list]
    created_at: datetime

    model_config = {"from_attributes": True}


class AnalysisEnvelope(BaseModel):
    analysis: AnalysisResponse
