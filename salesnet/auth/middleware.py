"""
Authentication middleware for API route protection.
"""

import logging
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from salesnet.auth.jwt import get_token_from_cookie, verify_token

logger = logging.getLogger(__name__)

# Routes that don't require authentication
PUBLIC_ROUTES = {
    "/api/auth/login",
    "/api/auth/register",
    "/api/auth/logout",
}

PUBLIC_PREFIXES = (
    "/api/health",
    "/docs",
    "/redoc",
    "/openapi.json",
)


class AuthMiddleware(BaseHTTPMiddleware):
    """
    Rejects unauthenticated calls to /api/* before they reach a handler.

    Role checks stay in the route dependencies.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable,
    ) -> Response:
        path = request.url.path

        if path in PUBLIC_ROUTES or path.startswith(PUBLIC_PREFIXES):
            return await call_next(request)

        if path.startswith("/api/"):
            token = get_token_from_cookie(request)
            if not token or not verify_token(token):
                logger.debug(f"Rejected unauthenticated request to {path}")
                return Response(
                    content='{"detail": "Not authenticated"}',
                    status_code=401,
                    media_type="application/json",
                )

        return await call_next(request)
