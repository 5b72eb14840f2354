"""
Billing Gateway: entitlement state machine.

    free --checkout(pro)-----> pro       (recurring)
    free --checkout(premium)-> premium   (one-time)
    pro/premium --subscription deleted--> free

Roles only change in response to signed webhook events. Write failures
while applying an event are logged and rolled back; the provider still
gets a 2xx so it stops redelivering.
"""

import uuid
from datetime import timedelta
from typing import List, Optional

import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from decisionhub.billing.plans import PAID_PLANS, RECURRING_PERIOD_DAYS, get_plan
from decisionhub.billing.stripe_client import StripeAPI
from decisionhub.db.compat import utcnow
from decisionhub.db.models import StripeProduct, Subscription, UserRole
from decisionhub.errors import ValidationFailure
from decisionhub.schemas.billing import CheckoutResponse, ProvisionedProduct

logger = structlog.get_logger(__name__)

EVENT_CHECKOUT_COMPLETED = "checkout.session.completed"
EVENT_SUBSCRIPTION_DELETED = "customer.subscription.deleted"


class BillingGateway:
    def __init__(self, stripe: StripeAPI, frontend_url: str):
        self.stripe = stripe
        self.frontend_url = frontend_url.rstrip("/")

    # ── Provisioning ─────────────────────────────────────────────────────

    async def provision_plan(self, db: AsyncSession, plan: str) -> ProvisionedProduct:
        """Find or create the plan's product and price; never duplicates either."""
        if plan not in PAID_PLANS:
            raise ValidationFailure("Invalid plan selected", plan=plan)
        config = get_plan(plan)

        products = await self.stripe.list_products(limit=100)
        product = next((p for p in products if p.name == config["product_name"]), None)
        if product is None:
            product = await self.stripe.create_product(config["product_name"], config["description"])
            logger.info("stripe_product_created", plan=plan, product_id=product.id)

        prices = await self.stripe.list_prices(product.id, limit=100)
        price = next(
            (
                p for p in prices
                if p.unit_amount == config["amount"] and p.currency == config["currency"]
            ),
            None,
        )
        if price is None:
            price = await self.stripe.create_price(
                product.id,
                unit_amount=config["amount"],
                currency=config["currency"],
                recurring_interval="month" if config["interval"] == "month" else None,
            )
            logger.info("stripe_price_created", plan=plan, price_id=price.id)

        row = (
            await db.execute(select(StripeProduct).where(StripeProduct.plan_name == plan))
        ).scalar_one_or_none()
        if row is None:
            row = StripeProduct(
                plan_name=plan,
                amount=config["amount"],
                currency=config["currency"],
                interval=config["interval"],
            )
            db.add(row)
        row.stripe_product_id = product.id
        row.stripe_price_id = price.id
        await db.flush()

        return ProvisionedProduct(plan=plan, product_id=product.id, price_id=price.id)

    async def provision_all(self, db: AsyncSession) -> List[ProvisionedProduct]:
        return [await self.provision_plan(db, plan) for plan in PAID_PLANS]

    async def resolve_price_id(self, db: AsyncSession, plan: str) -> str:
        """Stored price id for the plan, provisioning on first use."""
        result = await db.execute(
            select(StripeProduct.stripe_price_id).where(StripeProduct.plan_name == plan)
        )
        price_id = result.scalar_one_or_none()
        if price_id:
            return price_id
        provisioned = await self.provision_plan(db, plan)
        return provisioned.price_id

    # ── Checkout ─────────────────────────────────────────────────────────

    async def create_checkout(
        self,
        db: AsyncSession,
        plan: str,
        user_id: uuid.UUID,
        email: Optional[str],
        origin: Optional[str] = None,
    ) -> CheckoutResponse:
        if plan not in PAID_PLANS:
            raise ValidationFailure("Invalid plan selected", plan=plan)

        price_id = await self.resolve_price_id(db, plan)
        base = (origin or self.frontend_url).rstrip("/")

        session = await self.stripe.create_checkout_session(
            mode=get_plan(plan)["checkout_mode"],
            line_items=[{"price": price_id, "quantity": 1}],
            success_url=f"{base}/success?session_id={{CHECKOUT_SESSION_ID}}",
            cancel_url=f"{base}/pricing",
            metadata={"userId": str(user_id), "plan": plan},
            customer_email=email or None,
        )
        logger.info("checkout_session_created", plan=plan, session_id=session.id)
        return CheckoutResponse(session_id=session.id, url=session.url)

    # ── Webhook events ───────────────────────────────────────────────────

    async def handle_event(self, db: AsyncSession, event: dict) -> None:
        event_type = event.get("type")
        obj = (event.get("data") or {}).get("object") or {}
        logger.info("webhook_event_received", event_type=event_type, event_id=event.get("id"))

        if event_type == EVENT_CHECKOUT_COMPLETED:
            handler = self._activate
        elif event_type == EVENT_SUBSCRIPTION_DELETED:
            handler = self._deactivate
        else:
            logger.info("webhook_event_ignored", event_type=event_type)
            return

        try:
            await handler(db, obj)
        except SQLAlchemyError as exc:
            await db.rollback()
            logger.error("webhook_write_failed", event_type=event_type, error=str(exc))

    async def _activate(self, db: AsyncSession, session: dict) -> None:
        metadata = session.get("metadata") or {}
        raw_user_id = metadata.get("userId")
        plan = metadata.get("plan")
        if not raw_user_id or not plan:
            logger.error("webhook_metadata_missing", session_id=session.get("id"))
            return
        try:
            user_id = uuid.UUID(str(raw_user_id))
        except ValueError:
            logger.error("webhook_user_id_invalid", user_id=raw_user_id)
            return

        new_role = "premium" if plan == "premium" else "pro"
        await self._set_role(db, user_id, new_role)

        price_id = (
            await db.execute(
                select(StripeProduct.stripe_price_id).where(StripeProduct.plan_name == new_role)
            )
        ).scalar_one_or_none()

        now = utcnow()
        subscription = await self._subscription_for(db, user_id)
        subscription.status = "active"
        subscription.stripe_customer_id = session.get("customer")
        subscription.stripe_subscription_id = session.get("subscription")
        subscription.stripe_price_id = price_id
        subscription.current_period_start = now
        subscription.current_period_end = (
            now + timedelta(days=RECURRING_PERIOD_DAYS) if new_role == "pro" else None
        )
        await db.flush()

        logger.info("user_upgraded", user_id=str(user_id), role=new_role)

    async def _deactivate(self, db: AsyncSession, stripe_subscription: dict) -> None:
        customer_id = stripe_subscription.get("customer")
        subscription = None
        if customer_id:
            result = await db.execute(
                select(Subscription).where(Subscription.stripe_customer_id == customer_id)
            )
            subscription = result.scalars().first()

        if subscription is None:
            logger.info("webhook_unknown_customer", customer_id=customer_id)
            return

        await self._set_role(db, subscription.user_id, "free")
        subscription.status = "inactive"
        await db.flush()

        logger.info("user_downgraded", user_id=str(subscription.user_id))

    async def _set_role(self, db: AsyncSession, user_id: uuid.UUID, role: str) -> None:
        result = await db.execute(select(UserRole).where(UserRole.user_id == user_id))
        row = result.scalar_one_or_none()
        if row is None:
            db.add(UserRole(user_id=user_id, role=role))
        else:
            row.role = role
        await db.flush()

    async def _subscription_for(self, db: AsyncSession, user_id: uuid.UUID) -> Subscription:
        result = await db.execute(select(Subscription).where(Subscription.user_id == user_id))
        subscription = result.scalar_one_or_none()
        if subscription is None:
            subscription = Subscription(user_id=user_id)
            db.add(subscription)
        return subscription
