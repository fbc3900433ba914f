"""
AM Tsc. Business Hub: main application.

Assembles config, identity provider, employee directory, edge gate and routes.
"""

import time
import traceback
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from bizhub.config import settings, db_manager
from bizhub.employees import EmployeeDirectory
from bizhub.identity import IdentityProvider, SessionResolver, SupabaseIdentityProvider
from bizhub.middleware import EdgeGateMiddleware
from bizhub.rbac.errors import AccessError, localized_message
from bizhub.utils import Logger, error_response

# ── Route imports ────────────────────────────────────────────────
from bizhub.auth import auth_router
from bizhub.customers import customers_router
from bizhub.roles import roles_router
from bizhub.pages import pages_router

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
            logger.error(traceback.format_exc())
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
    if app.state.employee_directory is None:
        await db_manager.connect()
        app.state.employee_directory = EmployeeDirectory(db_manager.database)
    yield
    provider = app.state.session_resolver.provider
    if isinstance(provider, SupabaseIdentityProvider):
        await provider.aclose()
    db_manager.close()


# ── App factory ──────────────────────────────────────────────────
def create_app(
    identity_provider: IdentityProvider | None = None,
    employee_directory: EmployeeDirectory | None = None,
) -> FastAPI:
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Business management backend with role-based access control",
        docs_url="/api/docs",
        lifespan=lifespan,
    )

    app.state.session_resolver = SessionResolver(
        identity_provider or SupabaseIdentityProvider()
    )
    app.state.employee_directory = employee_directory

    # ── CORS (must be first) ─────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allowed_methods,
        allow_headers=settings.cors_allowed_headers,
    )

    # ── Request logging (runs on every request) ──────────────
    app.add_middleware(RequestLoggingMiddleware)

    # ── Edge gate for page requests ──────────────────────────
    app.add_middleware(EdgeGateMiddleware)

    # ── Access failures not translated by a handler ──────────
    @app.exception_handler(AccessError)
    async def access_error_handler(request: Request, exc: AccessError):
        logger.warning(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.detail}")
        response = error_response(localized_message(exc), exc.status_code)
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    # ── Global exception handler ─────────────────────────────
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.method} {request.url.path}:")
        logger.error(traceback.format_exc())
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "message": str(exc) if settings.debug else "Lỗi server nội bộ",
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )

    # ── Routes ───────────────────────────────────────────────
    app.include_router(
        auth_router,
        prefix="/api/auth",
        tags=["Authentication"],
    )
    app.include_router(
        customers_router,
        prefix="/api/customers",
        tags=["Customers"],
    )
    app.include_router(
        roles_router,
        prefix="/api/roles",
        tags=["Roles"],
    )
    app.include_router(
        pages_router,
        tags=["Pages"],
        include_in_schema=False,
    )

    # ── Health check ─────────────────────────────────────────
    @app.get("/health")
    async def health():
        return {
            "status": "healthy",
            "app": settings.app_name,
            "version": settings.app_version,
            "database": db_manager.is_connected,
        }

    return app


# ── Create the app instance ──────────────────────────────────────
app = create_app()
