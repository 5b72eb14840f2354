"""
Decision Intelligence Hub: FastAPI Application.

Run: uvicorn decisionhub.main:app --host 0.0.0.0 --port 8000 --reload
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from decisionhub.config import settings
from decisionhub.db.compat import utcnow
from decisionhub.db.engine import close_db, get_engine, init_db
from decisionhub.log_config import configure_logging
from decisionhub.middleware.auth import AuthMiddleware
from decisionhub.middleware.error_handler import ErrorHandlerMiddleware, register_exception_handlers
from decisionhub.middleware.preflight import PreflightMiddleware
from decisionhub.middleware.request_context import RequestContextMiddleware
from decisionhub.services.container import ServiceContainer, build_services

from decisionhub.api.routers.ai import router as ai_router
from decisionhub.api.routers.billing import router as billing_router
from decisionhub.api.routers.cases import router as cases_router
from decisionhub.api.routers.export import router as export_router
from decisionhub.api.routers.team import router as team_router

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    logger.info("decisionhub_starting", version=settings.app_version)
    await init_db()
    yield
    await app.state.services.aclose()
    await close_db()
    logger.info("decisionhub_shutdown")


def create_app(services: Optional[ServiceContainer] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    ``services`` carries every outbound client (LLM, payments). When omitted
    a container is built from settings.
    """
    configure_logging()

    app = FastAPI(
        title=settings.app_name,
        description=(
            "# Decision Intelligence Hub\n\n"
            "Describe a business decision, get an AI analysis and a risk "
            "simulation of it, collaborate with teammates and manage plans.\n\n"
            "## Authentication\n"
            "All endpoints except /health, /ready and the payment webhook require "
            "`Authorization: Bearer <JWT>`.\n"
        ),
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_tags=[
            {"name": "health", "description": "Liveness and readiness probes"},
            {"name": "cases", "description": "Decision case CRUD and revisions"},
            {"name": "ai", "description": "Analysis, risk simulation and insights"},
            {"name": "billing", "description": "Checkout, webhook, plans and entitlements"},
            {"name": "team", "description": "Members, invitations and notifications"},
            {"name": "export", "description": "CSV and printable HTML export"},
        ],
    )
    app.state.services = services or build_services(settings)

    register_exception_handlers(app)

    # ── Middleware (last added = outermost) ────────────────────────────
    app.add_middleware(AuthMiddleware)
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials="*" not in settings.allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # outermost: every OPTIONS gets an empty 200
    app.add_middleware(PreflightMiddleware, allowed_origins=settings.allowed_origins)

    # ── Routes ─────────────────────────────────────────────────────────
    app.include_router(cases_router)
    app.include_router(ai_router)
    app.include_router(billing_router)
    app.include_router(team_router)
    app.include_router(export_router)

    @app.get("/health", tags=["health"])
    async def health():
        """Liveness probe. Does not check dependencies."""
        return {
            "status": "ok",
            "version": settings.app_version,
            "service": "decisionhub",
        }

    @app.get("/ready", tags=["health"])
    async def readiness():
        """Readiness probe: 200 if the database answers, 503 otherwise."""
        checks: dict = {"api": "ok"}
        try:
            async with get_engine().connect() as conn:
                await asyncio.wait_for(
                    conn.execute(text("SELECT 1")),
                    timeout=settings.health_check_timeout_seconds,
                )
            checks["database"] = "ok"
        except (SQLAlchemyError, OSError, asyncio.TimeoutError) as exc:
            logger.warning("readiness_database_unavailable", error=str(exc))
            checks["database"] = "unavailable"

        db_ok = checks["database"] == "ok"
        return JSONResponse(
            status_code=200 if db_ok else 503,
            content={
                "status": "ok" if db_ok else "unavailable",
                "version": settings.app_version,
                "service": "decisionhub",
                "environment": settings.environment,
                "checks": checks,
                "timestamp": utcnow().isoformat(),
            },
        )

    return app


# Application instance
app = create_app()
