"""Sidebar derivation from a role and a permission set."""

from functools import lru_cache

from pydantic import BaseModel

from bizhub.rbac.catalog import ROUTE_PERMISSIONS, NavItem, get_navigation


class SidebarSection(BaseModel):
    title: str
    items: list[NavItem]


SIDEBAR_SECTIONS: list[tuple[str, tuple[str, ...]]] = [
    ("Bán hàng", ("/customers", "/quotes", "/orders")),
    ("Quản lý", ("/projects", "/tasks", "/employees")),
    ("Vật tư", ("/products", "/inventory", "/purchasing", "/suppliers")),
    ("Báo cáo", ("/analytics", "/financials")),
    ("Hệ thống", ("/profile", "/settings", "/role-management")),
]


@lru_cache(maxsize=128)
def filtered_navigation(role: str, permissions: frozenset[str]) -> tuple[NavItem, ...]:
    """
    The role's navigation, minus items whose page permission is not held.
    Pages without a mapped permission (dashboard, profile) always stay.
    """
    return tuple(
        item
        for item in get_navigation(role)
        if ROUTE_PERMISSIONS.get(item.href) is None
        or ROUTE_PERMISSIONS[item.href] in permissions
    )


def group_sections(items: tuple[NavItem, ...]) -> list[SidebarSection]:
    sections = [
        SidebarSection(title=title, items=[i for i in items if i.href in hrefs])
        for title, hrefs in SIDEBAR_SECTIONS
    ]
    return [s for s in sections if s.items]


def main_nav(items: tuple[NavItem, ...]) -> list[NavItem]:
    return [i for i in items if i.href == "/dashboard"]
