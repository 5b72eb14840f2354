"""
Entitlement queries.

A user with no ``UserRole`` row is ``free``. Monthly quotas count rows the
user owns since the first instant of the current calendar month (UTC).
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from decisionhub.billing.plans import get_plan, monthly_limit
from decisionhub.config import settings
from decisionhub.db.compat import utcnow
from decisionhub.db.models import DecisionCase, Simulation, Subscription, UserRole
from decisionhub.schemas.billing import (
    EntitlementResponse,
    PlanInfo,
    PlanLimits,
    SubscriptionInfo,
    UsageInfo,
)

DEFAULT_ROLE = "free"
CASE_LIMIT_MESSAGE = "You've reached your monthly limit of {limit} decision cases. Upgrade to Pro for unlimited decisions."
SIMULATION_LIMIT_MESSAGE = "You've reached your monthly limit of {limit} risk simulations. Upgrade to Pro for unlimited simulations."


def month_start(now: Optional[datetime] = None) -> datetime:
    now = now or utcnow()
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


async def get_user_role(db: AsyncSession, user_id: uuid.UUID) -> str:
    result = await db.execute(select(UserRole.role).where(UserRole.user_id == user_id))
    return result.scalar_one_or_none() or DEFAULT_ROLE


async def get_subscription(db: AsyncSession, user_id: uuid.UUID) -> Optional[Subscription]:
    result = await db.execute(select(Subscription).where(Subscription.user_id == user_id))
    return result.scalar_one_or_none()


async def _count_since(db: AsyncSession, model, user_id: uuid.UUID, since: datetime) -> int:
    result = await db.execute(
        select(func.count())
        .select_from(model)
        .where(model.user_id == user_id, model.created_at >= since)
    )
    return result.scalar_one()


async def cases_this_month(db: AsyncSession, user_id: uuid.UUID) -> int:
    return await _count_since(db, DecisionCase, user_id, month_start())


async def simulations_this_month(db: AsyncSession, user_id: uuid.UUID) -> int:
    return await _count_since(db, Simulation, user_id, month_start())


def case_limit(role: str) -> Optional[int]:
    return monthly_limit(role, "cases_per_month", settings.free_cases_per_month)


def simulation_limit(role: str) -> Optional[int]:
    return monthly_limit(role, "simulations_per_month", settings.free_simulations_per_month)


async def can_create_case(db: AsyncSession, user_id: uuid.UUID) -> bool:
    limit = case_limit(await get_user_role(db, user_id))
    if limit is None:
        return True
    return await cases_this_month(db, user_id) < limit


async def can_create_simulation(db: AsyncSession, user_id: uuid.UUID) -> bool:
    """Free users get a fixed number of simulations per calendar month."""
    limit = simulation_limit(await get_user_role(db, user_id))
    if limit is None:
        return True
    return await simulations_this_month(db, user_id) < limit


def plan_info(plan_id: str, current_role: str) -> PlanInfo:
    plan = get_plan(plan_id)
    return PlanInfo(
        plan_id=plan_id,
        display_name=plan["display_name"],
        price=plan["amount"],
        currency=plan["currency"],
        interval=plan["interval"],
        features=list(plan["features"]),
        limits=PlanLimits(
            cases_per_month=case_limit(plan_id),
            simulations_per_month=simulation_limit(plan_id),
        ),
        is_current=plan_id == current_role,
    )


async def describe_entitlements(db: AsyncSession, user_id: uuid.UUID) -> EntitlementResponse:
    role = await get_user_role(db, user_id)
    usage = UsageInfo(
        cases_this_month=await cases_this_month(db, user_id),
        simulations_this_month=await simulations_this_month(db, user_id),
    )

    max_cases = case_limit(role)
    max_sims = simulation_limit(role)
    case_ok = max_cases is None or usage.cases_this_month < max_cases
    sim_ok = max_sims is None or usage.simulations_this_month < max_sims

    message = None
    if not sim_ok:
        message = SIMULATION_LIMIT_MESSAGE.format(limit=max_sims)
    if not case_ok:
        message = CASE_LIMIT_MESSAGE.format(limit=max_cases)

    subscription = await get_subscription(db, user_id)
    return EntitlementResponse(
        role=role,
        plan=plan_info(role, role),
        usage=usage,
        can_create_case=case_ok,
        can_create_simulation=sim_ok,
        subscription=SubscriptionInfo.model_validate(subscription) if subscription else None,
        limits_message=message,
    )
