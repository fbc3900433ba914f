from .catalog import (
    ROLES,
    NavIcon,
    NavItem,
    get_allowed_pages,
    get_navigation,
    get_role_permissions,
    icon_for,
)
from .permissions import (
    can_access_page,
    has_all_permissions,
    has_any_permission,
    has_permission,
    normalize_permissions,
)

__all__ = [
    "ROLES",
    "NavIcon",
    "NavItem",
    "get_allowed_pages",
    "get_navigation",
    "get_role_permissions",
    "icon_for",
    "can_access_page",
    "has_all_permissions",
    "has_any_permission",
    "has_permission",
    "normalize_permissions",
]
