"""
Edge gate for page requests.

Runs before any page route (API, static and image paths are skipped):
  1. Resolve the session cookie → identity (identity provider round trip)
  2. Unauthenticated → login page, unless the page is public
  3. Authenticated on a public page or "/" → dashboard
  4. Dashboard and profile always pass
  5. Otherwise decide from the role claim and the role's allowed pages;
     denied → profile with error=access_denied

The gate never raises toward the browser: every failure is a redirect.
"""

import re
from urllib.parse import urlencode

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import RedirectResponse

from bizhub.config import Settings, settings as default_settings
from bizhub.identity.session import SessionResolver
from bizhub.rbac.catalog import ALWAYS_ALLOWED_PAGES, ROUTE_PERMISSIONS
from bizhub.rbac.errors import AccessError, RoleResolutionFailure
from bizhub.rbac.permissions import can_access_page
from bizhub.utils import Logger

logger = Logger("edge")


# Paths the gate never looks at
EXCLUDED_PREFIXES = ("/api/", "/_next/", "/static/")
EXCLUDED_PATHS = ("/api", "/favicon.ico", "/health", "/openapi.json")
_ASSET_PATTERN = re.compile(r"\.(?:svg|png|jpg|jpeg|gif|webp)$", re.IGNORECASE)


def is_gated_path(path: str) -> bool:
    if path in EXCLUDED_PATHS or path.startswith(EXCLUDED_PREFIXES):
        return False
    return not _ASSET_PATTERN.search(path)


def required_permission_for(path: str) -> str | None:
    for prefix, permission in ROUTE_PERMISSIONS.items():
        if path == prefix or path.startswith(prefix + "/"):
            return permission
    return None


def _redirect(path: str, params: dict[str, str] | None = None) -> RedirectResponse:
    url = f"{path}?{urlencode(params, safe='/:')}" if params else path
    return RedirectResponse(url=url, status_code=302)


class EdgeGateMiddleware(BaseHTTPMiddleware):
    """Session check + role-based page gating with redirects."""

    def __init__(self, app, config: Settings | None = None):
        super().__init__(app)
        self.config = config or default_settings

    def _resolver(self, request: Request) -> SessionResolver:
        return request.app.state.session_resolver

    async def dispatch(self, request: Request, call_next):
        path = request.url.path

        if request.method == "OPTIONS" or not is_gated_path(path):
            return await call_next(request)

        is_public = path in self.config.public_routes
        resolver = self._resolver(request)

        # ── Session ──────────────────────────────────────────────
        try:
            identity = await resolver.resolve(request)
        except AccessError as e:
            logger.warning(f"Session check failed for {path}: {e.detail}")
            identity = None
        except Exception:
            logger.exception(f"Session check crashed for {path}")
            identity = None

        # ── Unauthenticated ──────────────────────────────────────
        if identity is None:
            if is_public:
                return await call_next(request)
            return _redirect(self.config.login_path)

        # ── Authenticated ────────────────────────────────────────
        if is_public or path == "/":
            return _redirect(self.config.home_path)

        request.state.identity = identity
        if path in ALWAYS_ALLOWED_PAGES:
            # The safe page is also the invalid_role target; it must not redirect.
            try:
                request.state.user_role = resolver.resolve_role(identity)
            except RoleResolutionFailure:
                request.state.user_role = None
            return await call_next(request)

        try:
            role = resolver.resolve_role(identity)
            allowed = can_access_page(role, path)
        except RoleResolutionFailure as e:
            logger.warning(f"Role resolution failed for {identity.id} on {path}: {e.detail}")
            return _redirect(self.config.safe_path, {"error": "invalid_role"})
        except Exception:
            logger.exception(f"Role resolution failed for {identity.id} on {path}")
            return _redirect(self.config.safe_path, {"error": "invalid_role"})

        if not allowed:
            logger.info(f"Page {path} denied for {identity.email} (role={role})")
            params = {"error": "access_denied", "requestedPath": path}
            permission = required_permission_for(path)
            if permission:
                params["requiredPermission"] = permission
            return _redirect(self.config.safe_path, params)

        request.state.user_role = role
        return await call_next(request)
