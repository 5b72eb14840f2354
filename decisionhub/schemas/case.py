"""Pydantic schemas for DecisionCase resource."""

import uuid
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator

from decisionhub.schemas.analysis import AnalysisResponse
from decisionhub.schemas.simulation import SimulationResponse

CaseStatus = Literal["active", "decided", "archived"]


class CaseCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    objectives: Optional[str] = None
    constraints: Optional[str] = None
    context: Optional[str] = None
    risks: Optional[str] = None
    additional_text: Optional[str] = None


class CaseUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, min_length=1)
    objectives: Optional[str] = None
    constraints: Optional[str] = None
    context: Optional[str] = None
    risks: Optional[str] = None
    additional_text: Optional[str] = None

    @model_validator(mode="after")
    def _required_fields_not_null(self):
        for name in ("title", "description"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class CaseStatusUpdate(BaseModel):
    status: CaseStatus


class CaseResponse(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    title: str
    description: str
    objectives: Optional[str]
    constraints: Optional[str]
    context: Optional[str]
    risks: Optional[str]
    additional_text: Optional[str]
    status: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class RevisionResponse(BaseModel):
    id: uuid.UUID
    case_id: uuid.UUID
    user_id: uuid.UUID
    revision_type: str
    content: Optional[str]
    metadata: Optional[dict] = Field(default=None, validation_alias="metadata_")
    created_at: datetime

    model_config = {"from_attributes": True, "populate_by_name": True}


class CaseRequest(BaseModel):
    """Body of the POST-only AI/export operations that target one case."""

    case_id: uuid.UUID


class CaseDetailResponse(BaseModel):
    case: CaseResponse
    latest_analysis: Optional[AnalysisResponse] = None
    latest_simulation: Optional[SimulationResponse] = None
