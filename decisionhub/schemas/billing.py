"""Schemas for checkout, product provisioning and entitlements."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel

PaidPlan = Literal["pro", "premium"]


class CheckoutRequest(BaseModel):
    plan: PaidPlan


class CheckoutResponse(BaseModel):
    session_id: str
    url: Optional[str] = None


class ProvisionedProduct(BaseModel):
    plan: str
    product_id: str
    price_id: str


class ProvisionResponse(BaseModel):
    success: bool = True
    message: str = "Stripe products configured successfully"
    products: List[ProvisionedProduct]


class WebhookAck(BaseModel):
    received: bool = True


class PlanLimits(BaseModel):
    # None means unlimited
    cases_per_month: Optional[int] = None
    simulations_per_month: Optional[int] = None


class PlanInfo(BaseModel):
    plan_id: str
    display_name: str
    price: int
    currency: str
    interval: str
    features: List[str]
    limits: PlanLimits
    is_current: bool = False


class PlanListResponse(BaseModel):
    plans: List[PlanInfo]
    current_plan: str


class UsageInfo(BaseModel):
    cases_this_month: int = 0
    simulations_this_month: int = 0


class SubscriptionInfo(BaseModel):
    status: str
    stripe_price_id: Optional[str] = None
    current_period_start: Optional[datetime] = None
    current_period_end: Optional[datetime] = None
    cancel_at_period_end: bool = False

    model_config = {"from_attributes": True}


class EntitlementResponse(BaseModel):
    role: str
    plan: PlanInfo
    usage: UsageInfo
    can_create_case: bool
    can_create_simulation: bool
    subscription: Optional[SubscriptionInfo] = None
    limits_message: Optional[str] = None
