"""Schemas for cross-case business insights (never persisted)."""

from typing import List

from pydantic import BaseModel, Field


class InsightsPayload(BaseModel):
    overall_summary: str
    key_trends: List[str]
    recommendations: List[str]
    risk_overview: str
    opportunities: List[str] = Field(default_factory=list)
    blind_spots: List[str] = Field(default_factory=list)


class InsightsEnvelope(BaseModel):
    insights: InsightsPayload
