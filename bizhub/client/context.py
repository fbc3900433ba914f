"""
Client-side permission cache.

Loaded once from ``/api/auth/me`` and used only to decide what to show.
Every mutating call is still checked server-side by the route guard.
"""

from collections.abc import Awaitable, Callable, Iterable
from enum import Enum
from typing import Any, Optional

import httpx

from bizhub.rbac.catalog import NavItem
from bizhub.rbac.permissions import (
    can_access_page,
    has_all_permissions,
    has_any_permission,
    has_permission,
    normalize_permissions,
)
from bizhub.utils import Logger
from .api import ApiError
from .navigation import SidebarSection, filtered_navigation, group_sections, main_nav

logger = Logger("client")


class ContextState(str, Enum):
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class PermissionContext:
    """
    Holds the current user's role and permissions.

    ``error`` is set only when loading failed; a READY context with an empty
    permission list is a legitimate "no permissions" answer.
    """

    def __init__(
        self,
        fetch_me: Callable[[], Awaitable[dict[str, Any]]],
        *,
        default_role: str,
    ):
        self._fetch_me = fetch_me
        self.default_role = default_role
        self.state = ContextState.LOADING
        self.user: Optional[dict[str, Any]] = None
        self.role: Optional[str] = None
        self.permissions: frozenset[str] = frozenset()
        self.error: Optional[str] = None

    @property
    def loading(self) -> bool:
        return self.state is ContextState.LOADING

    @property
    def ready(self) -> bool:
        return self.state is ContextState.READY

    async def load(self) -> None:
        self.state = ContextState.LOADING
        self.error = None
        try:
            user = await self._fetch_me()
        except (ApiError, httpx.HTTPError) as e:
            logger.warning(f"Could not load permissions: {e}")
            self.user = None
            self.role = None
            self.permissions = frozenset()
            self.error = str(e)
            self.state = ContextState.ERROR
            return

        role = user.get("role_name")
        self.user = user
        self.role = role if isinstance(role, str) and role else self.default_role
        self.permissions = frozenset(normalize_permissions(user.get("permissions")))
        self.state = ContextState.READY

    async def retry(self) -> None:
        await self.load()

    # ── Checks (all False unless READY) ──────────────────────────
    def has_permission(self, permission: str) -> bool:
        return self.ready and has_permission(self.permissions, permission)

    def has_any_permission(self, permissions: Iterable[str]) -> bool:
        return self.ready and has_any_permission(self.permissions, permissions)

    def has_all_permissions(self, permissions: Iterable[str]) -> bool:
        return self.ready and has_all_permissions(self.permissions, permissions)

    def has_role(self, role: str) -> bool:
        return self.ready and self.role == role

    def can_access_page(self, path: str) -> bool:
        return self.ready and can_access_page(self.role, path)

    # ── Navigation ───────────────────────────────────────────────
    def navigation(self) -> list[NavItem]:
        if not self.ready:
            return []
        return list(filtered_navigation(self.role, self.permissions))

    def sidebar_sections(self) -> list[SidebarSection]:
        if not self.ready:
            return []
        return group_sections(filtered_navigation(self.role, self.permissions))

    def main_nav(self) -> list[NavItem]:
        if not self.ready:
            return []
        return main_nav(filtered_navigation(self.role, self.permissions))
