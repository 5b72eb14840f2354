"""
LLM Gateway: OpenAI-compatible chat completions.

Two providers are configured:
- provider A ("groq"): higher-capability model for paid tiers and simulations
- provider B ("gateway"): default model for the free tier and insights

The gateway owns no client of its own; an ``httpx.AsyncClient`` is passed in
at start-up and shared by every request. Upstream status codes are mapped to
the hub's error taxonomy and never retried.
"""

from dataclasses import dataclass
from typing import Dict, Optional

import httpx
import structlog

from decisionhub.errors import (
    ParseFailure,
    UpstreamFailure,
    UpstreamQuotaExhausted,
    UpstreamRateLimited,
)

logger = structlog.get_logger(__name__)

PROVIDER_GROQ = "groq"
PROVIDER_GATEWAY = "gateway"


@dataclass(frozen=True)
class ProviderEndpoint:
    """Where and how to reach one chat-completions provider."""

    name: str
    url: str
    api_key: str


@dataclass(frozen=True)
class ModelProfile:
    """One row of a dispatch strategy table."""

    provider: str
    model: str
    system_prompt: str
    temperature: Optional[float] = None


class LLMGateway:
    """Non-streaming chat completions against the configured providers."""

    def __init__(self, providers: Dict[str, ProviderEndpoint], client: httpx.AsyncClient):
        self.providers = providers
        self._client = client
        for endpoint in providers.values():
            if not endpoint.api_key:
                logger.warning("llm_api_key_missing", provider=endpoint.name)

    def build_payload(self, profile: ModelProfile, prompt: str) -> dict:
        payload: dict = {
            "model": profile.model,
            "messages": [
                {"role": "system", "content": profile.system_prompt},
                {"role": "user", "content": prompt},
            ],
        }
        if profile.temperature is not None:
            payload["temperature"] = profile.temperature
        return payload

    async def complete(
        self,
        profile: ModelProfile,
        prompt: str,
        failure_message: str = "AI request failed",
    ) -> str:
        """
        Send one prompt and return the first choice's message content.

        Raises:
            UpstreamRateLimited: provider answered 429
            UpstreamQuotaExhausted: provider answered 402
            UpstreamFailure: any other non-2xx status or transport error
            ParseFailure: the envelope has no usable message content
        """
        endpoint = self.providers.get(profile.provider)
        if endpoint is None:
            raise UpstreamFailure(failure_message, provider=profile.provider)

        headers = {
            "Authorization": f"Bearer {endpoint.api_key}",
            "Content-Type": "application/json",
        }

        try:
            response = await self._client.post(
                endpoint.url,
                json=self.build_payload(profile, prompt),
                headers=headers,
            )
        except httpx.TimeoutException as exc:
            logger.error("llm_timeout", provider=endpoint.name, model=profile.model)
            raise UpstreamFailure(failure_message) from exc
        except httpx.HTTPError as exc:
            logger.error("llm_transport_error", provider=endpoint.name, error=str(exc))
            raise UpstreamFailure(failure_message) from exc

        if not response.is_success:
            logger.error(
                "llm_api_error",
                provider=endpoint.name,
                model=profile.model,
                status=response.status_code,
                body=response.text[:500],
            )
            if response.status_code == 429:
                raise UpstreamRateLimited()
            if response.status_code == 402:
                raise UpstreamQuotaExhausted()
            raise UpstreamFailure(failure_message, upstream_status=response.status_code)

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            logger.error("llm_envelope_invalid", provider=endpoint.name, body=response.text[:500])
            raise ParseFailure() from exc

        if not isinstance(content, str):
            raise ParseFailure()

        logger.info(
            "llm_completion_received",
            provider=endpoint.name,
            model=profile.model,
            chars=len(content),
        )
        return content


def build_providers(settings) -> Dict[str, ProviderEndpoint]:
    """Provider table from application settings."""
    return {
        PROVIDER_GROQ: ProviderEndpoint(
            name=PROVIDER_GROQ,
            url=settings.groq_api_url,
            api_key=settings.groq_api_key,
        ),
        PROVIDER_GATEWAY: ProviderEndpoint(
            name=PROVIDER_GATEWAY,
            url=settings.ai_gateway_url,
            api_key=settings.ai_gateway_api_key,
        ),
    }
