"""
Billing & Entitlement Endpoints.

POST /api/v1/billing/checkout        - checkout session for pro / premium
POST /api/v1/billing/webhook         - signed payment-provider events (public)
POST /api/v1/billing/setup-products  - provision products and prices
GET  /api/v1/entitlements/me         - role, plan, usage, limits, subscription
GET  /api/v1/plans                   - plan catalog
"""

import uuid

import structlog
from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from decisionhub.api.deps import get_db, get_services, get_user_email, get_user_id
from decisionhub.billing.plans import PLAN_DEFINITIONS
from decisionhub.billing.webhooks import construct_event
from decisionhub.schemas.billing import (
    CheckoutRequest,
    CheckoutResponse,
    EntitlementResponse,
    PlanListResponse,
    ProvisionResponse,
    WebhookAck,
)
from decisionhub.services.container import ServiceContainer
from decisionhub.services.entitlements import describe_entitlements, get_user_role, plan_info

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/v1", tags=["billing"])


@router.post("/billing/checkout", response_model=CheckoutResponse)
async def create_checkout(
    body: CheckoutRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
    email: str = Depends(get_user_email),
    services: ServiceContainer = Depends(get_services),
):
    return await services.billing.create_checkout(
        db,
        body.plan,
        user_id,
        email,
        origin=request.headers.get("origin"),
    )


@router.post("/billing/webhook", response_model=WebhookAck)
async def stripe_webhook(
    request: Request,
    db: AsyncSession = Depends(get_db),
    services: ServiceContainer = Depends(get_services),
):
    payload = await request.body()
    event = construct_event(
        payload,
        request.headers.get("stripe-signature"),
        services.webhook_secret,
        services.webhook_tolerance,
    )
    await services.billing.handle_event(db, event)
    return WebhookAck()


@router.post("/billing/setup-products", response_model=ProvisionResponse)
async def setup_products(
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
    services: ServiceContainer = Depends(get_services),
):
    products = await services.billing.provision_all(db)
    logger.info("stripe_products_configured", requested_by=str(user_id), plans=len(products))
    return ProvisionResponse(products=products)


@router.get("/entitlements/me", response_model=EntitlementResponse)
async def my_entitlements(
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
):
    return await describe_entitlements(db, user_id)


@router.get("/plans", response_model=PlanListResponse)
async def list_plans(
    db: AsyncSession = Depends(get_db),
    user_id: uuid.UUID = Depends(get_user_id),
):
    role = await get_user_role(db, user_id)
    return PlanListResponse(
        plans=[plan_info(plan_id, role) for plan_id in PLAN_DEFINITIONS],
        current_plan=role,
    )
