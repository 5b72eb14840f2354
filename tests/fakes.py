"""
Fake upstreams and sample model output shared by the tests.

FakeLLM and FakeStripe are ``httpx.MockTransport`` handlers; they record
every request so tests can assert on what was sent.
"""

import hashlib
import hmac
import json
import time
from typing import List, Optional
from urllib.parse import parse_qsl

import httpx
import stripe

from decisionhub.auth.jwt import create_access_token

GROQ_URL = "https://groq.test/openai/v1/chat/completions"
GATEWAY_URL = "https://gateway.test/v1/chat/completions"
STRIPE_URL = "https://stripe.test"
WEBHOOK_SECRET = "whsec_test_secret"


# ── Sample model output ─────────────────────────────────────────────────


ANALYSIS_JSON = {
    "summary": "Expanding into the EU doubles the addressable market.",
    "key_arguments": {"for": ["Larger market"], "against": ["Regulatory overhead"]},
    "decision_paths": [
        {
            "name": "Full launch",
            "description": "Launch in all EU markets at once",
            "pros": ["Speed"],
            "cons": ["Cost"],
            "probability_success": 0.55,
        },
        {
            "name": "Pilot",
            "description": "Launch in Ireland first",
            "pros": ["Low risk"],
            "cons": ["Slower"],
            "probability_success": 0.7,
        },
    ],
    "effects_tradeoffs": {
        "short_term": ["Hiring"],
        "long_term": ["Brand reach"],
        "risks": ["GDPR fines"],
        "opportunities": ["Partnerships"],
    },
    "probability_reasoning": "Pilots in similar markets succeed more often.",
    "blind_spots": ["Currency exposure"],
    "recommended_path": "Pilot",
    "follow_up_questions": ["Which country first?"],
}

SIMULATION_JSON = {
    "expected_value": {"monetary": 125000, "impact_score": 7, "confidence": 0.6},
    "best_case": {"description": "Rapid adoption", "probability": 0.1, "impact": "High growth"},
    "worst_case": {"description": "Regulatory block", "probability": 0.1, "impact": 8},
    "simulation_results": {
        "iterations": 42,
        "success_rate": 0.64,
        "average_outcome": "Moderate growth",
        "variance": 0.2,
    },
    "probability_data": [
        {"outcome": "Success", "probability": 0.64, "impact_level": 7},
        {"outcome": "Failure", "probability": 0.36, "impact_level": 3},
    ],
}

INSIGHTS_JSON = {
    "overall_summary": "You take measured expansion bets.",
    "key_trends": ["Growth focus"],
    "recommendations": ["Run more simulations"],
    "risk_overview": "Mostly regulatory risk",
    "opportunities": ["EU"],
    "blind_spots": ["FX"],
}


def chat_response(content: str, status_code: int = 200) -> httpx.Response:
    return httpx.Response(
        status_code,
        json={"choices": [{"message": {"role": "assistant", "content": content}}]},
    )


# ── Fake upstreams ──────────────────────────────────────────────────────


class FakeLLM:
    """Chat-completions upstream. Replies are consumed in order; the last one repeats."""

    def __init__(self):
        self.replies: List[httpx.Response] = []
        self.requests: List[httpx.Request] = []

    def reply_json(self, payload, fenced: bool = False) -> None:
        body = json.dumps(payload)
        if fenced:
            body = f"```json\n{body}\n```"
        self.replies.append(chat_response(body))

    def reply_text(self, text: str) -> None:
        self.replies.append(chat_response(text))

    def reply_status(self, status_code: int) -> None:
        self.replies.append(httpx.Response(status_code, json={"error": {"message": "upstream"}}))

    def bodies(self) -> List[dict]:
        return [json.loads(r.content) for r in self.requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.replies:
            return httpx.Response(500, json={"error": "no reply queued"})
        if len(self.replies) == 1:
            return self.replies[0]
        return self.replies.pop(0)


class FakeStripe:
    """In-memory subset of the Stripe REST API, served to the SDK's httpx client."""

    def __init__(self):
        self.products: List[dict] = []
        self.prices: List[dict] = []
        self.sessions: List[dict] = []
        self.calls: List[tuple] = []
        self.fail_with: Optional[int] = None
        self._seq = 0

    def _next_id(self, prefix: str) -> str:
        self._seq += 1
        return f"{prefix}_{self._seq:04d}"

    def form(self, request: httpx.Request) -> dict:
        return dict(parse_qsl(request.content.decode()))

    def _list(self, path: str, data: List[dict]) -> httpx.Response:
        return httpx.Response(
            200,
            json={"object": "list", "url": path, "has_more": False, "data": data},
        )

    def _error(self, status_code: int, message: str) -> httpx.Response:
        return httpx.Response(
            status_code,
            json={"error": {"type": "invalid_request_error", "message": message}},
        )

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.calls.append((request.method, path))

        if self.fail_with is not None:
            return self._error(self.fail_with, "Invalid API Key provided")

        if request.method == "GET" and path == "/v1/products":
            return self._list(path, list(self.products))
        if request.method == "POST" and path == "/v1/products":
            form = self.form(request)
            product = {"id": self._next_id("prod"), "object": "product", "name": form["name"]}
            self.products.append(product)
            return httpx.Response(200, json=product)
        if request.method == "GET" and path == "/v1/prices":
            product_id = request.url.params.get("product")
            return self._list(path, [p for p in self.prices if p["product"] == product_id])
        if request.method == "POST" and path == "/v1/prices":
            form = self.form(request)
            price = {
                "id": self._next_id("price"),
                "object": "price",
                "product": form["product"],
                "unit_amount": int(form["unit_amount"]),
                "currency": form["currency"],
                "recurring": {"interval": form["recurring[interval]"]}
                if "recurring[interval]" in form else None,
            }
            self.prices.append(price)
            return httpx.Response(200, json=price)
        if request.method == "POST" and path == "/v1/checkout/sessions":
            form = self.form(request)
            session_id = self._next_id("cs_test")
            self.sessions.append(form)
            return httpx.Response(
                200,
                json={
                    "id": session_id,
                    "object": "checkout.session",
                    "url": f"https://checkout.stripe.test/{session_id}",
                },
            )
        return self._error(404, f"Unrecognized request URL ({request.method}: {path})")


def stripe_http_client(handler) -> stripe.HTTPXClient:
    """SDK HTTP client whose async transport is ``handler``."""
    client = stripe.HTTPXClient()
    client._client_async = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return client


def stripe_signature(payload: bytes, secret: str = WEBHOOK_SECRET, timestamp: Optional[int] = None) -> str:
    ts = int(time.time()) if timestamp is None else timestamp
    digest = hmac.new(secret.encode(), f"{ts}.".encode() + payload, hashlib.sha256).hexdigest()
    return f"t={ts},v1={digest}"


def auth_headers(user_id, email: str = "owner@example.com") -> dict:
    return {"Authorization": f"Bearer {create_access_token(user_id=str(user_id), email=email)}"}
