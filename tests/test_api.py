"""
HTTP-level tests: auth, routing, status codes and response shapes.

Upstreams are the MockTransport fakes; the database is in-memory SQLite.
"""

import json
import time
import uuid

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from jose import jwt

from decisionhub.config import settings
from decisionhub.middleware.preflight import PreflightMiddleware
from tests.fakes import ANALYSIS_JSON, SIMULATION_JSON, WEBHOOK_SECRET, stripe_signature


def _signed(event: dict, secret: str = WEBHOOK_SECRET):
    body = json.dumps(event).encode()
    return body, {"stripe-signature": stripe_signature(body, secret)}


class TestHealthAndAuth:
    @pytest.mark.asyncio
    async def test_health_is_public(self, anon_client):
        response = await anon_client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    @pytest.mark.asyncio
    async def test_missing_token(self, anon_client):
        response = await anon_client.get("/api/v1/cases")
        assert response.status_code == 401
        assert response.json() == {"error": "Missing authentication token"}

    @pytest.mark.asyncio
    async def test_invalid_token(self, anon_client):
        response = await anon_client.get(
            "/api/v1/cases", headers={"Authorization": "Bearer not-a-jwt"}
        )
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid or expired token"}

    @pytest.mark.asyncio
    async def test_provider_token_with_sub_only(self, anon_client, owner_id):
        token = jwt.encode(
            {"sub": str(owner_id), "aud": "authenticated", "exp": int(time.time()) + 60},
            settings.jwt_secret,
            algorithm="HS256",
        )
        response = await anon_client.get(
            "/api/v1/entitlements/me", headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 200
        assert response.json()["role"] == "free"

    @pytest.mark.asyncio
    async def test_request_id_header(self, client):
        response = await client.get("/api/v1/cases", headers={"X-Request-ID": "req-123"})
        assert response.headers["X-Request-ID"] == "req-123"

    @pytest.mark.asyncio
    async def test_cors_preflight(self, anon_client):
        response = await anon_client.options(
            "/api/v1/cases",
            headers={
                "Origin": "https://hub.example.com",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "authorization,content-type",
            },
        )
        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"
        assert response.headers["access-control-allow-headers"] == "authorization,content-type"
        assert response.content == b""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/api/v1/analyze-decision", "/api/v1/cases", "/api/v1/no-such-route"])
    async def test_bare_options_is_empty_200(self, anon_client, path):
        response = await anon_client.options(path)

        assert response.status_code == 200
        assert response.content == b""
        assert response.headers["access-control-allow-origin"] == "*"
        assert "authorization" in response.headers["access-control-allow-headers"]

    @pytest.mark.asyncio
    async def test_preflight_echoes_listed_origin_only(self):
        app = FastAPI()
        app.add_middleware(PreflightMiddleware, allowed_origins=["https://hub.example.com"])

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
            listed = await c.options("/x", headers={"Origin": "https://hub.example.com"})
            other = await c.options("/x", headers={"Origin": "https://evil.example.com"})

        assert listed.status_code == 200
        assert listed.headers["access-control-allow-origin"] == "https://hub.example.com"
        assert other.status_code == 200
        assert "access-control-allow-origin" not in other.headers


class TestCaseEndpoints:
    @pytest.mark.asyncio
    async def test_create_and_fetch(self, client):
        response = await client.post(
            "/api/v1/cases", json={"title": "Launch EU Site", "description": "Open a storefront"}
        )
        assert response.status_code == 201
        case = response.json()
        assert case["status"] == "active"

        detail = await client.get(f"/api/v1/cases/{case['id']}")
        assert detail.status_code == 200
        assert detail.json()["case"]["title"] == "Launch EU Site"
        assert detail.json()["latest_analysis"] is None

        revisions = await client.get(f"/api/v1/cases/{case['id']}/revisions")
        assert [r["revision_type"] for r in revisions.json()] == ["case_created"]
        assert revisions.json()[0]["metadata"] == {"title": "Launch EU Site"}

    @pytest.mark.asyncio
    async def test_validation_error_shape(self, client):
        response = await client.post("/api/v1/cases", json={"title": ""})
        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "Invalid request"
        assert body["details"]

    @pytest.mark.asyncio
    async def test_fourth_free_case_forbidden(self, client, make_case):
        for _ in range(3):
            await make_case()
        response = await client.post("/api/v1/cases", json={"title": "One more", "description": "d"})
        assert response.status_code == 403
        assert "monthly limit of 3 decision cases" in response.json()["error"]

    @pytest.mark.asyncio
    async def test_unknown_case(self, client):
        response = await client.get(f"/api/v1/cases/{uuid.uuid4()}")
        assert response.status_code == 404
        assert response.json() == {"error": "Decision case not found"}

    @pytest.mark.asyncio
    async def test_status_change(self, client, make_case):
        case = await make_case()
        response = await client.post(f"/api/v1/cases/{case.id}/status", json={"status": "archived"})
        assert response.status_code == 200
        assert response.json()["status"] == "archived"


class TestAIEndpoints:
    @pytest.mark.asyncio
    async def test_analyze_envelope(self, client, fake_llm, make_case):
        case = await make_case()
        fake_llm.reply_json(ANALYSIS_JSON)

        response = await client.post("/api/v1/analyze-decision", json={"case_id": str(case.id)})

        assert response.status_code == 200
        analysis = response.json()["analysis"]
        assert analysis["case_id"] == str(case.id)
        assert analysis["key_arguments"]["for"] == ["Larger market"]
        assert len(analysis["decision_paths"]) == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status, expected",
        [
            (429, "Rate limit exceeded. Please try again later."),
            (402, "AI credits exhausted. Please add credits to continue."),
        ],
    )
    async def test_upstream_limits_pass_through(self, client, fake_llm, make_case, status, expected):
        case = await make_case()
        fake_llm.reply_status(status)

        response = await client.post("/api/v1/analyze-decision", json={"case_id": str(case.id)})

        assert response.status_code == status
        assert response.json() == {"error": expected}

    @pytest.mark.asyncio
    async def test_parse_failure_is_500(self, client, fake_llm, make_case):
        case = await make_case()
        fake_llm.reply_text("no json here")

        response = await client.post("/api/v1/analyze-decision", json={"case_id": str(case.id)})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to parse AI response"}

    @pytest.mark.asyncio
    async def test_simulate_envelope(self, client, fake_llm, make_case):
        case = await make_case()
        fake_llm.reply_json(SIMULATION_JSON)

        response = await client.post("/api/v1/simulate-risk", json={"case_id": str(case.id)})

        assert response.status_code == 200
        assert response.json()["simulation"]["simulation_results"]["iterations"] == 100

    @pytest.mark.asyncio
    async def test_insights_empty(self, client, fake_llm):
        response = await client.post("/api/v1/generate-insights")
        assert response.status_code == 200
        assert response.json()["insights"]["risk_overview"] == "No data available"
        assert fake_llm.requests == []


class TestExportEndpoint:
    @pytest.mark.asyncio
    async def test_csv_download(self, client, make_case):
        case = await make_case()

        response = await client.post("/api/v1/export-decision", json={"case_id": str(case.id)})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert response.headers["content-disposition"] == f'attachment; filename="decision-{case.id}.csv"'
        assert '"Constraints","N/A"' in response.text

    @pytest.mark.asyncio
    async def test_html(self, client, make_case):
        case = await make_case()

        response = await client.post(
            "/api/v1/export-decision", json={"case_id": str(case.id), "format": "html"}
        )

        assert response.headers["content-type"].startswith("text/html")
        assert "window.print()" in response.text

    @pytest.mark.asyncio
    async def test_unsupported_format(self, client, make_case):
        case = await make_case()
        response = await client.post(
            "/api/v1/export-decision", json={"case_id": str(case.id), "format": "pdf"}
        )
        assert response.status_code == 422


class TestBillingEndpoints:
    @pytest.mark.asyncio
    async def test_webhook_rejects_bad_signature(self, anon_client):
        body, _ = _signed({"type": "checkout.session.completed"})
        response = await anon_client.post(
            "/api/v1/billing/webhook",
            content=body,
            headers={"stripe-signature": f"t={int(time.time())},v1=00"},
        )
        assert response.status_code == 400
        assert "error" in response.json()

    @pytest.mark.asyncio
    async def test_webhook_rejects_missing_signature(self, anon_client):
        response = await anon_client.post("/api/v1/billing/webhook", content=b"{}")
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_webhook_upgrades_user(self, anon_client, client, owner_id):
        body, headers = _signed({
            "id": "evt_1",
            "type": "checkout.session.completed",
            "data": {"object": {
                "customer": "cus_9",
                "subscription": "sub_9",
                "metadata": {"userId": str(owner_id), "plan": "pro"},
            }},
        })

        response = await anon_client.post("/api/v1/billing/webhook", content=body, headers=headers)

        assert response.status_code == 200
        assert response.json() == {"received": True}
        me = (await client.get("/api/v1/entitlements/me")).json()
        assert me["role"] == "pro"
        assert me["subscription"]["status"] == "active"

    @pytest.mark.asyncio
    async def test_checkout(self, client, fake_stripe, owner_id):
        response = await client.post(
            "/api/v1/billing/checkout",
            json={"plan": "premium"},
            headers={"Origin": "https://app.example.com"},
        )

        assert response.status_code == 200
        assert response.json()["session_id"].startswith("cs_test_")
        form = fake_stripe.sessions[0]
        assert form["mode"] == "payment"
        assert form["metadata[userId]"] == str(owner_id)
        assert form["customer_email"] == "owner@example.com"
        assert form["success_url"].startswith("https://app.example.com/success")

    @pytest.mark.asyncio
    async def test_checkout_rejects_free(self, client):
        response = await client.post("/api/v1/billing/checkout", json={"plan": "free"})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_setup_products(self, client, fake_stripe):
        response = await client.post("/api/v1/billing/setup-products")
        assert response.status_code == 200
        assert [p["plan"] for p in response.json()["products"]] == ["pro", "premium"]
        assert len(fake_stripe.products) == 2

    @pytest.mark.asyncio
    async def test_plans(self, client):
        response = await client.get("/api/v1/plans")
        body = response.json()
        assert body["current_plan"] == "free"
        assert [p["plan_id"] for p in body["plans"]] == ["free", "pro", "premium"]
        assert body["plans"][0]["is_current"] is True
        assert body["plans"][1]["limits"]["cases_per_month"] is None

    @pytest.mark.asyncio
    async def test_entitlements_default(self, client):
        response = await client.get("/api/v1/entitlements/me")
        assert response.status_code == 200
        body = response.json()
        assert body["role"] == "free"
        assert body["can_create_case"] is True


class TestTeamEndpoints:
    @pytest.mark.asyncio
    async def test_invite_and_accept(self, client, app, make_case, make_user):
        from httpx import ASGITransport, AsyncClient

        from tests.fakes import auth_headers

        case = await make_case()
        invitee = await make_user(email="ana@example.com")

        invite = await client.post(
            f"/api/v1/cases/{case.id}/invitations", json={"email": "ana@example.com", "role": "editor"}
        )
        assert invite.status_code == 201

        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
            headers=auth_headers(invitee, email="ana@example.com"),
        ) as invitee_client:
            notes = (await invitee_client.get("/api/v1/notifications")).json()
            assert notes[0]["title"] == "New Team Invitation"
            assert notes[0]["metadata"]["role"] == "editor"

            accepted = await invitee_client.post(
                "/api/v1/invitations/accept", json={"invitation_id": invite.json()["id"]}
            )
            assert accepted.status_code == 200
            assert accepted.json()["success"] is True

            shared = await invitee_client.get(f"/api/v1/cases/{case.id}")
            assert shared.status_code == 200

    @pytest.mark.asyncio
    async def test_direct_member_unknown_email(self, client, make_case):
        case = await make_case()
        response = await client.post(
            f"/api/v1/cases/{case.id}/members", json={"email": "ghost@example.com"}
        )
        assert response.status_code == 404
        assert response.json() == {"error": "User not found. They must sign up first."}
