"""
Authentication Middleware.

Verifies the bearer JWT on every non-public request and attaches the
caller's ``user_id`` and ``user_email`` to ``request.state``. The payment
webhook is public; it is authenticated by its signature instead.
"""

import structlog
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from decisionhub.auth.jwt import TokenError, decode_token

logger = structlog.get_logger(__name__)

PUBLIC_PATHS = frozenset({
    "/health",
    "/ready",
    "/docs",
    "/openapi.json",
    "/redoc",
    "/api/v1/billing/webhook",
})


class AuthMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        path = request.url.path

        if path in PUBLIC_PATHS or path.rstrip("/") in PUBLIC_PATHS:
            return await call_next(request)

        token = self._extract_token(request)
        if not token:
            return JSONResponse(status_code=401, content={"error": "Missing authentication token"})

        try:
            payload = decode_token(token)
        except TokenError as e:
            logger.warning("auth_failed", error=str(e), path=path)
            return JSONResponse(status_code=401, content={"error": "Invalid or expired token"})

        request.state.user_id = payload["user_id"]
        request.state.user_email = payload.get("email", "")
        structlog.contextvars.bind_contextvars(user_id=str(payload["user_id"]))

        return await call_next(request)

    def _extract_token(self, request: Request) -> str | None:
        auth = request.headers.get("Authorization", "")
        if auth.startswith("Bearer "):
            return auth[7:]
        return None
