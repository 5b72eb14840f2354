"""
Preflight Middleware.

Every ``OPTIONS`` request is answered here with an empty 200 and
permissive CORS headers. It never reaches auth, CORS or the router.
"""

from typing import Sequence

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

ALLOW_HEADERS = "authorization, x-client-info, apikey, content-type"
ALLOW_METHODS = "GET, POST, PUT, PATCH, DELETE, OPTIONS"


class PreflightMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, allowed_origins: Sequence[str] = ("*",)):
        super().__init__(app)
        self.allowed_origins = list(allowed_origins)

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.method != "OPTIONS":
            return await call_next(request)

        headers = {
            "Access-Control-Allow-Methods": ALLOW_METHODS,
            "Access-Control-Allow-Headers": request.headers.get(
                "Access-Control-Request-Headers", ALLOW_HEADERS
            ),
            "Access-Control-Max-Age": "600",
        }
        origin = request.headers.get("Origin")
        if "*" in self.allowed_origins:
            headers["Access-Control-Allow-Origin"] = "*"
        elif origin in self.allowed_origins:
            headers["Access-Control-Allow-Origin"] = origin
            headers["Access-Control-Allow-Credentials"] = "true"
            headers["Vary"] = "Origin"
        return Response(status_code=200, headers=headers)
