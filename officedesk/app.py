"""
OfficeDesk Panel — Main application.

Assembles all packages: config, middleware, auth, navigation and the
forwarded feature routers (employees, invoices, payslips, kpi, useraccess).
"""

import time
import traceback
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from officedesk.config import api_manager, settings
from officedesk.listing import controller_registry
from officedesk.middleware import SessionMiddleware
from officedesk.utils import Logger, remote_error_response
from officedesk.utils.exceptions import RemoteApiError

# ── Route imports ────────────────────────────────────────────────
from officedesk.auth import auth_router
from officedesk.navigation import navigation_router
from officedesk.employees import employees_router
from officedesk.invoices import invoices_router
from officedesk.payslips import payslips_router
from officedesk.kpi import kpi_router
from officedesk.useraccess import useraccess_router

logger = Logger("request")


# ── Request Logging Middleware ───────────────────────────────────
class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs every request: method, path, status code, and duration."""

    async def dispatch(self, request: Request, call_next):
        start = time.time()
        method = request.method
        path = request.url.path
        client = request.client.host if request.client else "unknown"

        logger.info(f"--> {method} {path} (from {client})")

        try:
            response = await call_next(request)
        except Exception as exc:
            duration = round((time.time() - start) * 1000, 2)
            logger.error(f"<-- {method} {path} | 500 | {duration}ms")
            logger.error(f"    Exception: {exc}")
            raise

        duration = round((time.time() - start) * 1000, 2)
        status = response.status_code

        if status >= 500:
            logger.error(f"<-- {method} {path} | {status} | {duration}ms")
        elif status >= 400:
            logger.warning(f"<-- {method} {path} | {status} | {duration}ms")
        else:
            logger.info(f"<-- {method} {path} | {status} | {duration}ms")

        return response


# ── Lifespan ─────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    api_manager.connect()
    yield
    await api_manager.close()


# ── App factory ──────────────────────────────────────────────────
def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Office administration dashboard backend",
        docs_url="/api/docs",
        lifespan=lifespan,
    )

    # Added last runs first: CORS, then logging, then the session check

    # ── Session + visibility ─────────────────────────────────
    app.add_middleware(SessionMiddleware)

    # ── Request logging (runs on every request) ──────────────
    app.add_middleware(RequestLoggingMiddleware)

    # ── CORS (outermost) ─────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allowed_methods,
        allow_headers=settings.cors_allowed_headers,
    )

    # ── Exception handlers ───────────────────────────────────
    @app.exception_handler(RemoteApiError)
    async def remote_api_exception_handler(request: Request, exc: RemoteApiError):
        logger.warning(f"Office API error on {request.method} {request.url.path}: {exc!r}")
        return remote_error_response(exc, exc.default_message)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.method} {request.url.path}:")
        logger.error(traceback.format_exc())
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": {
                    "code": 500,
                    "message": str(exc) if settings.debug else "Internal server error",
                },
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )

    # ── Routes ───────────────────────────────────────────────
    v = settings.api_version  # "v1"

    app.include_router(
        auth_router,
        prefix=f"/api/{v}/auth",
        tags=["Authentication"],
    )
    app.include_router(
        navigation_router,
        prefix=f"/api/{v}",
        tags=["Navigation"],
    )
    app.include_router(
        employees_router,
        prefix=f"/api/{v}/employees",
        tags=["Employees"],
    )
    app.include_router(
        invoices_router,
        prefix=f"/api/{v}/invoices",
        tags=["Invoices"],
    )
    app.include_router(
        payslips_router,
        prefix=f"/api/{v}/payslips",
        tags=["Payslips"],
    )
    app.include_router(
        kpi_router,
        prefix=f"/api/{v}/kpi",
        tags=["KPI"],
    )
    app.include_router(
        useraccess_router,
        prefix=f"/api/{v}/useraccess",
        tags=["User Access"],
    )

    # ── Health check ─────────────────────────────────────────
    @app.get("/health")
    async def health():
        return {
            "status": "healthy",
            "app": settings.app_name,
            "version": settings.app_version,
            "office_api": api_manager.is_connected,
            "open_list_views": len(controller_registry),
        }

    return app


# ── Create the app instance ──────────────────────────────────────
app = create_app()
