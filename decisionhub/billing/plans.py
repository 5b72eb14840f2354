"""
Plan catalog (single source of truth for pricing, limits and provisioning).

Amounts are in minor units of ``currency``. ``None`` limits are unlimited.
"""

from typing import Optional

PLAN_DEFINITIONS = {
    "free": {
        "display_name": "Free",
        "product_name": None,
        "description": None,
        "amount": 0,
        "currency": "gbp",
        "interval": "month",
        "checkout_mode": None,
        "limits": {"cases_per_month": 3, "simulations_per_month": 3},
        "features": [
            "3 Decision Cases per month",
            "AI-powered analysis",
            "Risk simulations",
            "Basic insights",
        ],
    },
    "pro": {
        "display_name": "Pro",
        "product_name": "Decision Hub Pro",
        "description": "Unlimited decisions and simulations with 3x better AI analysis",
        "amount": 1000,
        "currency": "gbp",
        "interval": "month",
        "checkout_mode": "subscription",
        "limits": {"cases_per_month": None, "simulations_per_month": None},
        "features": [
            "Unlimited Decision Cases",
            "AI-powered analysis",
            "Advanced risk simulations",
            "Comprehensive insights",
            "Team collaboration",
            "Priority support",
        ],
    },
    "premium": {
        "display_name": "Lifetime",
        "product_name": "Decision Hub Lifetime",
        "description": "Lifetime access with premium AI analysis and priority support",
        "amount": 5000,
        "currency": "gbp",
        "interval": "one-time",
        "checkout_mode": "payment",
        "limits": {"cases_per_month": None, "simulations_per_month": None},
        "features": [
            "Unlimited Decision Cases forever",
            "AI-powered analysis",
            "Advanced risk simulations",
            "Comprehensive insights",
            "Team collaboration",
            "Lifetime updates",
            "Premium support",
        ],
    },
}

PAID_PLANS = ("pro", "premium")

# Days a recurring period is assumed to last until the provider says otherwise
RECURRING_PERIOD_DAYS = 30


def get_plan(plan_id: str) -> dict:
    return PLAN_DEFINITIONS.get(plan_id, PLAN_DEFINITIONS["free"])


def monthly_limit(plan_id: str, key: str, free_default: Optional[int] = None) -> Optional[int]:
    """The plan's per-month limit; the free tier may be overridden by settings."""
    if plan_id not in PAID_PLANS and free_default is not None:
        return free_default
    return get_plan(plan_id)["limits"][key]
