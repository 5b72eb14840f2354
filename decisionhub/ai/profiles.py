"""
Dispatch strategy tables: entitlement role -> model profile.

Paid roles get provider A; everyone else gets provider B. Simulations
always run on provider A; insights always on provider B.
"""

from typing import Dict

from decisionhub.ai.prompts import (
    ANALYSIS_SYSTEM_PROMPT,
    INSIGHTS_SYSTEM_PROMPT,
    PREMIUM_ANALYSIS_SYSTEM_PROMPT,
    SIMULATION_SYSTEM_PROMPT,
)
from decisionhub.config import Settings
from decisionhub.services.llm_gateway import PROVIDER_GATEWAY, PROVIDER_GROQ, ModelProfile

PREMIUM_TIER_ROLES = frozenset({"pro", "premium"})

PROVIDER_A_TEMPERATURE = 0.7


class DispatchStrategy:
    """Model profiles for every AI operation, built from settings."""

    def __init__(self, settings: Settings):
        self.premium_analysis = ModelProfile(
            provider=PROVIDER_GROQ,
            model=settings.groq_model,
            system_prompt=PREMIUM_ANALYSIS_SYSTEM_PROMPT,
            temperature=PROVIDER_A_TEMPERATURE,
        )
        self.free_analysis = ModelProfile(
            provider=PROVIDER_GATEWAY,
            model=settings.ai_gateway_model,
            system_prompt=ANALYSIS_SYSTEM_PROMPT,
        )
        self.simulation = ModelProfile(
            provider=PROVIDER_GROQ,
            model=settings.groq_model,
            system_prompt=SIMULATION_SYSTEM_PROMPT,
            temperature=PROVIDER_A_TEMPERATURE,
        )
        self.insights = ModelProfile(
            provider=PROVIDER_GATEWAY,
            model=settings.ai_gateway_model,
            system_prompt=INSIGHTS_SYSTEM_PROMPT,
        )
        self.analysis_by_role: Dict[str, ModelProfile] = {
            "free": self.free_analysis,
            "pro": self.premium_analysis,
            "premium": self.premium_analysis,
        }

    def analysis_profile(self, role: str) -> ModelProfile:
        return self.analysis_by_role.get(role, self.free_analysis)
