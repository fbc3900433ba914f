"""
Role catalog: permissions, allowed pages and navigation per role.

Permission format:  "{resource}:{action}"
  - Resources : dashboard, customers, products, inventory, orders, employees,
                projects, tasks, quotes, purchasing, suppliers, financials,
                analytics, profile, settings, roles
  - Actions   : view, create, edit, delete, plus a few resource-specific
                ones (approve, assign, complete, adjust, export, manage)

Strings are compared exactly; there are no wildcards.
"""

from enum import Enum

from pydantic import BaseModel


class NavIcon(str, Enum):
    LAYOUT_DASHBOARD = "LayoutDashboard"
    USERS = "Users"
    PACKAGE = "Package"
    PACKAGE_2 = "Package2"
    SHOPPING_CART = "ShoppingCart"
    USER_CHECK = "UserCheck"
    FOLDER_OPEN = "FolderOpen"
    CHECK_SQUARE = "CheckSquare"
    FILE_TEXT = "FileText"
    SHOPPING_BAG = "ShoppingBag"
    TRUCK = "Truck"
    DOLLAR_SIGN = "DollarSign"
    BAR_CHART_3 = "BarChart3"
    USER = "User"
    SETTINGS = "Settings"
    SHIELD = "Shield"


def icon_for(name: str | None) -> NavIcon:
    """Resolve an icon name; anything unknown becomes ``NavIcon.PACKAGE``."""
    try:
        return NavIcon(name)
    except ValueError:
        return NavIcon.PACKAGE


class NavItem(BaseModel):
    title: str
    href: str
    icon: NavIcon


# ── Pages ────────────────────────────────────────────────────────
# href → (title, icon name). Order here is the order navigation is rendered in.
PAGES: dict[str, tuple[str, str]] = {
    "/dashboard": ("Dashboard", "LayoutDashboard"),
    "/customers": ("Khách hàng", "Users"),
    "/products": ("Sản phẩm", "Package"),
    "/inventory": ("Tồn kho", "Package2"),
    "/orders": ("Đơn hàng", "ShoppingCart"),
    "/employees": ("Nhân viên", "UserCheck"),
    "/projects": ("Dự án", "FolderOpen"),
    "/tasks": ("Nhiệm vụ", "CheckSquare"),
    "/quotes": ("Báo giá", "FileText"),
    "/purchasing": ("Mua sắm", "ShoppingBag"),
    "/suppliers": ("Nhà cung cấp", "Truck"),
    "/financials": ("Tài chính", "DollarSign"),
    "/analytics": ("Phân tích", "BarChart3"),
    "/profile": ("Hồ sơ", "User"),
    "/settings": ("Cài đặt", "Settings"),
    "/role-management": ("Quản lý Roles", "Shield"),
}

# Pages every authenticated user may open, whatever the role says.
ALWAYS_ALLOWED_PAGES: frozenset[str] = frozenset({"/dashboard", "/profile"})

# Page prefix → the view permission it stands for.
ROUTE_PERMISSIONS: dict[str, str] = {
    "/customers": "customers:view",
    "/products": "products:view",
    "/inventory": "inventory:view",
    "/orders": "orders:view",
    "/employees": "employees:view",
    "/projects": "projects:view",
    "/tasks": "tasks:view",
    "/quotes": "quotes:view",
    "/purchasing": "purchasing:view",
    "/suppliers": "suppliers:view",
    "/financials": "financials:view",
    "/analytics": "analytics:view",
    "/settings": "settings:view",
    "/role-management": "roles:manage",
}

_FULL_ACCESS_PAGES = list(PAGES)
_MANAGER_PAGES = [p for p in PAGES if p != "/role-management"]

ROLE_ALLOWED_PAGES: dict[str, list[str]] = {
    "admin": _FULL_ACCESS_PAGES,
    "director": _FULL_ACCESS_PAGES,
    "manager": _MANAGER_PAGES,
    "sales": [
        "/dashboard", "/customers", "/products", "/inventory",
        "/orders", "/quotes", "/analytics", "/profile",
    ],
    "accountant": [
        "/dashboard", "/customers", "/products", "/inventory",
        "/orders", "/financials", "/analytics", "/profile",
    ],
    "engineer": [
        "/dashboard", "/customers", "/products", "/inventory",
        "/projects", "/tasks", "/profile",
    ],
    "purchasing": [
        "/dashboard", "/products", "/inventory",
        "/purchasing", "/suppliers", "/profile",
    ],
    "employee": ["/dashboard", "/profile"],
}


def _crud(resource: str, *extra: str) -> list[str]:
    actions = ("view", "create", "edit", "delete") + extra
    return [f"{resource}:{action}" for action in actions]


_BASELINE = ["dashboard:view", "profile:view", "profile:edit"]

ROLES: dict[str, list[str]] = {
    "admin": [
        *_BASELINE,
        *_crud("customers", "export"),
        *_crud("products", "export"),
        *_crud("inventory", "adjust"),
        *_crud("orders", "approve", "cancel", "export"),
        *_crud("employees", "manage_roles"),
        *_crud("projects", "assign", "approve"),
        *_crud("tasks", "assign", "complete"),
        *_crud("quotes", "approve", "send"),
        *_crud("purchasing", "approve"),
        *_crud("suppliers"),
        *_crud("financials", "approve", "export"),
        "analytics:view", "analytics:export",
        "settings:view", "settings:edit",
        "roles:manage", "permissions:manage", "audit_logs:view",
        "system:admin", "system:settings",
    ],
    "director": [
        *_BASELINE,
        *_crud("customers", "export"),
        *_crud("products", "export"),
        *_crud("inventory", "adjust"),
        *_crud("orders", "approve", "cancel", "export"),
        *_crud("employees"),
        *_crud("projects", "assign", "approve"),
        *_crud("tasks", "assign", "complete"),
        *_crud("quotes", "approve", "send"),
        *_crud("purchasing", "approve"),
        *_crud("suppliers"),
        *_crud("financials", "approve", "export"),
        "analytics:view", "analytics:export",
        "settings:view", "settings:edit",
        "roles:manage",
    ],
    "manager": [
        *_BASELINE,
        "customers:view", "customers:edit",
        *_crud("products"),
        "inventory:view", "inventory:edit",
        "orders:view", "orders:create", "orders:edit", "orders:approve",
        "employees:view", "employees:create", "employees:edit",
        *_crud("projects", "assign"),
        *_crud("tasks", "assign", "complete"),
        "quotes:view", "quotes:approve",
        "purchasing:view", "purchasing:approve",
        "suppliers:view",
        "financials:view",
        "analytics:view",
        "settings:view",
    ],
    "sales": [
        *_BASELINE,
        "customers:view", "customers:edit",
        "products:view",
        "inventory:view",
        "orders:view", "orders:create", "orders:edit",
        "quotes:view", "quotes:create", "quotes:edit", "quotes:send",
        "analytics:view",
    ],
    "accountant": [
        *_BASELINE,
        "customers:view",
        "products:view",
        "inventory:view",
        "orders:view",
        *_crud("financials", "export"),
        "analytics:view", "analytics:export",
    ],
    "engineer": [
        *_BASELINE,
        "customers:view",
        *_crud("products"),
        "inventory:view",
        *_crud("projects"),
        *_crud("tasks", "complete"),
    ],
    "purchasing": [
        *_BASELINE,
        *_crud("products"),
        "inventory:view", "inventory:adjust",
        *_crud("purchasing"),
        *_crud("suppliers"),
    ],
    "employee": list(_BASELINE),
}

ROLE_DESCRIPTIONS: dict[str, str] = {
    "admin": "Quản trị viên - Toàn quyền hệ thống",
    "director": "Giám đốc - Toàn quyền hệ thống",
    "manager": "Quản lý - Quản lý dự án và nhân viên",
    "sales": "Nhân viên bán hàng - Chăm sóc khách hàng và tạo báo giá",
    "accountant": "Kế toán - Quản lý tài chính và báo cáo",
    "engineer": "Kỹ sư - Thực hiện dự án và nhiệm vụ kỹ thuật",
    "purchasing": "Nhân viên mua sắm - Quản lý mua sắm và tồn kho",
    "employee": "Nhân viên công ty",
}

DEFAULT_ROLE_DESCRIPTION = "Nhân viên công ty"

# One navigation item per allowed page, in PAGES order.
ROLE_NAVIGATION: dict[str, list[NavItem]] = {
    role: [
        NavItem(title=PAGES[href][0], href=href, icon=icon_for(PAGES[href][1]))
        for href in PAGES
        if href in pages
    ]
    for role, pages in ROLE_ALLOWED_PAGES.items()
}


def get_role_permissions(role: str) -> frozenset[str]:
    """Return the permission set for a role name (empty when unknown)."""
    return frozenset(ROLES.get(role, ()))


def get_allowed_pages(role: str) -> frozenset[str]:
    """Return the allowed page prefixes for a role name (empty when unknown)."""
    return frozenset(ROLE_ALLOWED_PAGES.get(role, ()))


def get_navigation(role: str) -> list[NavItem]:
    """Return the ordered navigation items for a role name (empty when unknown)."""
    return list(ROLE_NAVIGATION.get(role, ()))


def get_role_description(role: str) -> str:
    return ROLE_DESCRIPTIONS.get(role, DEFAULT_ROLE_DESCRIPTION)


def list_roles() -> list[str]:
    return list(ROLES)
