"""Prompt builders. Each returns the user message for one model call."""

import json
from typing import List, Optional

from decisionhub.db.models import DecisionCase

ANALYSIS_SYSTEM_PROMPT = (
    "You are a strategic business decision analyst. Provide comprehensive, "
    "structured analysis in valid JSON format only."
)

PREMIUM_ANALYSIS_SYSTEM_PROMPT = (
    "You are a senior strategy consultant advising an executive team. Weigh "
    "second-order effects, market dynamics, execution risk and reversibility "
    "for every option, quantify probabilities where you can, and be explicit "
    "about the assumptions behind each estimate. Respond in valid JSON format only."
)

SIMULATION_SYSTEM_PROMPT = (
    "You are a risk simulation engine that provides detailed Monte Carlo-style "
    "analysis in valid JSON format only."
)

INSIGHTS_SYSTEM_PROMPT = (
    "You are a strategic business insights analyst. Provide actionable insights "
    "in valid JSON format only."
)

_ANALYSIS_INSTRUCTIONS = """Provide a comprehensive decision analysis including:
1. A clear summary of the decision
2. Key arguments for and against
3. 3-5 distinct decision paths with their implications
4. Effects and trade-offs for each path
5. Probability-based reasoning
6. Potential blind spots
7. Your recommended path with justification
8. Follow-up questions that should be considered

Return your analysis in JSON format with these exact keys:
{
  "summary": "string",
  "key_arguments": {"for": ["string"], "against": ["string"]},
  "decision_paths": [{"name": "string", "description": "string", "pros": ["string"], "cons": ["string"], "probability_success": "number"}],
  "effects_tradeoffs": {"short_term": ["string"], "long_term": ["string"], "risks": ["string"], "opportunities": ["string"]},
  "probability_reasoning": "string",
  "blind_spots": ["string"],
  "recommended_path": "string",
  "follow_up_questions": ["string"]
}"""

_SIMULATION_INSTRUCTIONS = """Run a 100-iteration Monte Carlo-style risk simulation and provide:
1. Expected value calculations (monetary and non-monetary)
2. Best-case scenario (90th percentile)
3. Worst-case scenario (10th percentile)
4. Simulation results summary
5. Probability distribution data for charting

Return your simulation in JSON format with these exact keys:
{
  "expected_value": {"monetary": "number or null", "impact_score": "number 1-10", "confidence": "number 0-1"},
  "best_case": {"description": "string", "probability": "number 0-1", "impact": "string"},
  "worst_case": {"description": "string", "probability": "number 0-1", "impact": "string"},
  "simulation_results": {"iterations": 100, "success_rate": "number 0-1", "average_outcome": "string", "variance": "string"},
  "probability_data": [{"outcome": "string", "probability": "number 0-1", "impact_level": "number 1-10"}]
}"""

_INSIGHTS_INSTRUCTIONS = """Provide comprehensive business insights including:
1. Overall decision-making summary
2. Key trends and patterns
3. Strategic recommendations
4. Risk overview across all decisions
5. Opportunities identified
6. Potential blind spots

Return your insights in JSON format with these exact keys:
{
  "overall_summary": "string",
  "key_trends": ["string"],
  "recommendations": ["string"],
  "risk_overview": "string",
  "opportunities": ["string"],
  "blind_spots": ["string"]
}"""


def _optional_lines(*pairs) -> List[str]:
    return [f"{label}: {value}" for label, value in pairs if value]


def build_analysis_prompt(case: DecisionCase) -> str:
    lines = [
        "Analyze this business decision comprehensively:",
        "",
        f"Title: {case.title}",
        f"Description: {case.description}",
    ]
    lines += _optional_lines(
        ("Constraints", case.constraints),
        ("Context", case.context),
        ("Known Risks", case.risks),
        ("Objectives", case.objectives),
        ("Additional Information", case.additional_text),
    )
    lines += ["", _ANALYSIS_INSTRUCTIONS]
    return "\n".join(lines)


def build_simulation_prompt(case: DecisionCase, analysis_summary: Optional[str] = None) -> str:
    lines = [
        "You are a risk simulation expert. Analyze this decision and run a "
        "comprehensive risk simulation.",
        "",
        f"Decision: {case.title}",
        f"Description: {case.description}",
    ]
    lines += _optional_lines(
        ("Known Risks", case.risks),
        ("Previous Analysis Summary", analysis_summary),
    )
    lines += ["", _SIMULATION_INSTRUCTIONS]
    return "\n".join(lines)


def build_insights_prompt(case_summaries: List[dict]) -> str:
    return "\n".join([
        "Analyze this business's decision-making patterns and provide strategic insights.",
        "",
        f"Total Decisions: {len(case_summaries)}",
        f"Decision Summary: {json.dumps(case_summaries, indent=2)}",
        "",
        _INSIGHTS_INSTRUCTIONS,
    ])
