"""
Session middleware.

Runs on every request (except OPEN_ROUTES):
  1. Decode the bearer token -> Session
  2. Resolve the session's visibility once
  3. Set request.state.session / request.state.visibility
"""

from fastapi import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from officedesk.rbac import resolve_visibility
from officedesk.session import decode_session_token


# Routes that skip session decoding
OPEN_ROUTES = [
    "/auth/login",
    "/health",
    "/openapi.json",
    "/api/docs",
    "/redoc",
]


def _unauthorized(detail: str) -> JSONResponse:
    return JSONResponse(
        status_code=401,
        content={"success": False, "error": {"code": 401, "message": detail}},
        headers={"WWW-Authenticate": "Bearer"},
    )


class SessionMiddleware(BaseHTTPMiddleware):
    """Bearer token -> Session + Visibility on request.state."""

    async def dispatch(self, request: Request, call_next):
        if request.method == "OPTIONS":
            return await call_next(request)

        path = request.url.path
        if any(path.endswith(route) for route in OPEN_ROUTES):
            return await call_next(request)

        auth_header = request.headers.get("Authorization")
        if not auth_header:
            return _unauthorized("Missing Authorization header")

        if not auth_header.startswith("Bearer "):
            return _unauthorized("Invalid token format. Expected 'Bearer <token>'")

        token = auth_header.split(" ", 1)[1].strip()
        try:
            session = decode_session_token(token)
        except HTTPException as e:
            return _unauthorized(str(e.detail))

        request.state.session = session
        request.state.visibility = resolve_visibility(session)

        return await call_next(request)


__all__ = ["SessionMiddleware", "OPEN_ROUTES"]
