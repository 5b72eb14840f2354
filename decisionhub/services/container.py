"""
Service container.

All outbound clients are built once here and handed to the components
that use them. Tests pass their own container with mock transports.
"""

from dataclasses import dataclass, field
from typing import List, Optional

import httpx
import stripe
import structlog

from decisionhub.ai.analysis import AnalysisDispatcher
from decisionhub.ai.insights import InsightsAggregator
from decisionhub.ai.profiles import DispatchStrategy
from decisionhub.ai.simulation import SimulationDispatcher
from decisionhub.billing.gateway import BillingGateway
from decisionhub.billing.stripe_client import StripeAPI
from decisionhub.config import Settings
from decisionhub.services.llm_gateway import LLMGateway, build_providers

logger = structlog.get_logger(__name__)


@dataclass
class ServiceContainer:
    llm: LLMGateway
    strategy: DispatchStrategy
    analysis: AnalysisDispatcher
    simulation: SimulationDispatcher
    insights: InsightsAggregator
    billing: BillingGateway
    webhook_secret: str
    webhook_tolerance: int
    http_clients: List[httpx.AsyncClient] = field(default_factory=list)

    async def aclose(self) -> None:
        for client in self.http_clients:
            await client.aclose()
        await self.billing.stripe.aclose()
        logger.info("service_clients_closed", count=len(self.http_clients))


def build_services(
    settings: Settings,
    llm_client: Optional[httpx.AsyncClient] = None,
    stripe_http_client: Optional[stripe.HTTPClient] = None,
) -> ServiceContainer:
    llm_client = llm_client or httpx.AsyncClient(timeout=settings.llm_timeout_seconds)
    stripe_http_client = stripe_http_client or stripe.HTTPXClient(timeout=settings.stripe_timeout_seconds)

    llm = LLMGateway(build_providers(settings), llm_client)
    strategy = DispatchStrategy(settings)
    stripe_api = StripeAPI(
        stripe_http_client,
        secret_key=settings.stripe_secret_key,
        api_url=settings.stripe_api_url,
        api_version=settings.stripe_api_version,
        max_network_retries=settings.stripe_max_network_retries,
    )

    return ServiceContainer(
        llm=llm,
        strategy=strategy,
        analysis=AnalysisDispatcher(llm, strategy),
        simulation=SimulationDispatcher(llm, strategy),
        insights=InsightsAggregator(llm, strategy),
        billing=BillingGateway(stripe_api, settings.frontend_url),
        webhook_secret=settings.stripe_webhook_secret,
        webhook_tolerance=settings.stripe_webhook_tolerance_seconds,
        http_clients=[llm_client],
    )
