"""
Bearer-token authentication middleware.

Resolves ``Authorization: Bearer <token>`` into an ``Identity`` stored on
``request.state.identity``.  Requests without a header pass through
anonymously; routes that need a user depend on ``require_identity``.
A header carrying an unknown token is rejected outright.
"""

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from pravas.core.exceptions import NotAuthenticatedError
from pravas.core.models import Identity
from pravas.services.auth import BaseIdentityProvider


class AuthMiddleware(BaseHTTPMiddleware):
    """Attach the caller's identity (or None) to every request."""

    def __init__(self, app: ASGIApp, provider: BaseIdentityProvider) -> None:
        super().__init__(app)
        self._provider = provider

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request.state.identity = None

        auth_header = request.headers.get("authorization", "")
        if not auth_header:
            return await call_next(request)

        if not auth_header.startswith("Bearer "):
            return JSONResponse(
                status_code=401,
                content={"detail": "Invalid access token", "code": "NOT_AUTHENTICATED"},
            )

        identity = await self._provider.resolve(auth_header[len("Bearer ") :])
        if identity is None:
            return JSONResponse(
                status_code=401,
                content={"detail": "Invalid access token", "code": "NOT_AUTHENTICATED"},
            )

        request.state.identity = identity
        return await call_next(request)


def require_identity(request: Request) -> Identity:
    """FastAPI dependency: the signed-in user, or 401."""
    identity = getattr(request.state, "identity", None)
    if identity is None:
        raise NotAuthenticatedError()
    return identity
