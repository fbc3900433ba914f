"""
Access decisions.

Two modes:
  - path mode       : may a role open a page?       -> can_access_page
  - permission mode : does a permission set satisfy  -> has_permission,
                      a requirement?                    has_all_permissions,
                                                        has_any_permission

Anything that cannot be resolved is denied.
"""

import json
from collections.abc import Iterable
from typing import Any

from .catalog import ALWAYS_ALLOWED_PAGES, get_allowed_pages


# ── Legacy database names → "resource:action" ────────────────────
_LEGACY_ACTIONS: dict[str, str] = {
    "read": "view",
    "update": "edit",
}

_LEGACY_EXACT: dict[str, str] = {
    "roles.manage": "roles:manage",
}


def map_database_permission(name: str) -> str:
    """
    Map a legacy dotted permission ("customers.read") to its
    "resource:action" form ("customers:view"). Other names pass through.
    """
    if name in _LEGACY_EXACT:
        return _LEGACY_EXACT[name]
    if ":" in name or name.count(".") != 1:
        return name
    resource, action = name.split(".")
    return f"{resource}:{_LEGACY_ACTIONS.get(action, action)}"


def normalize_permissions(raw: Any) -> list[str]:
    """
    Normalize a role's stored permission field.

    Accepts a list or a JSON-encoded list. Malformed JSON, non-list values
    and non-string entries are dropped rather than raised. Order is kept and
    duplicates are removed so repeated reads give identical output.
    """
    if raw is None:
        return []

    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            return []

    if not isinstance(raw, (list, tuple)):
        return []

    seen: dict[str, None] = {}
    for item in raw:
        if isinstance(item, str) and item:
            seen.setdefault(map_database_permission(item), None)
    return list(seen)


# ── Path mode ────────────────────────────────────────────────────
def _is_valid_path(path: Any) -> bool:
    return isinstance(path, str) and path.startswith("/")


def can_access_page(role: Any, path: Any) -> bool:
    """
    True if ``path`` is always allowed or starts with one of the role's
    allowed page prefixes.
    """
    if not _is_valid_path(path):
        return False

    if path in ALWAYS_ALLOWED_PAGES:
        return True

    if not isinstance(role, str) or not role:
        return False

    return any(path.startswith(prefix) for prefix in get_allowed_pages(role))


# ── Permission mode ──────────────────────────────────────────────
def has_permission(user_permissions: Iterable[str] | None, required: str) -> bool:
    """Exact, case-sensitive membership."""
    if not required or not user_permissions:
        return False
    return required in set(user_permissions)


def has_all_permissions(
    user_permissions: Iterable[str] | None,
    required: Iterable[str],
) -> bool:
    """AND over ``required``. An empty requirement is satisfied."""
    granted = set(user_permissions or ())
    return all(perm in granted for perm in required)


def has_any_permission(
    user_permissions: Iterable[str] | None,
    required: Iterable[str],
) -> bool:
    """OR over ``required``. An empty requirement is not satisfied."""
    granted = set(user_permissions or ())
    return any(perm in granted for perm in required)
