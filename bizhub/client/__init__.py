from .alerts import AccessDeniedAlert
from .api import ApiClient, ApiError
from .boundary import ErrorBoundary
from .context import ContextState, PermissionContext
from .navigation import SidebarSection

__all__ = [
    "AccessDeniedAlert",
    "ApiClient",
    "ApiError",
    "ErrorBoundary",
    "ContextState",
    "PermissionContext",
    "SidebarSection",
]
