"""
Server-side route guard.

The authoritative check: every call resolves the identity from the session
cookie, then reloads the employee and its role from the data store. Role
claims inside the identity token are never trusted here.

Order per call: identity → employee record → active flag → permission.
"""

from typing import Any

from starlette.requests import Request

from bizhub.config import get_database
from bizhub.employees import AuthenticatedUser, EmployeeDirectory
from bizhub.identity.session import SessionResolver
from bizhub.utils import Logger
from .errors import (
    AccountInactive,
    EmployeeNotFound,
    PermissionDenied,
    RoleRequired,
    Unauthenticated,
)
from .permissions import has_permission, normalize_permissions

logger = Logger("guard")


def get_session_resolver(request: Request) -> SessionResolver:
    return request.app.state.session_resolver


async def get_employee_directory(request: Request) -> EmployeeDirectory:
    directory = getattr(request.app.state, "employee_directory", None)
    if directory is None:
        directory = EmployeeDirectory(await get_database())
        request.app.state.employee_directory = directory
    return directory


def _text(value: Any) -> str | None:
    return None if value is None else str(value)


def build_user(record: dict[str, Any]) -> AuthenticatedUser:
    """Flatten an employee+role record into an AuthenticatedUser."""
    role = record.get("role") if isinstance(record.get("role"), dict) else {}
    role_name = role.get("name")
    return AuthenticatedUser(
        id=str(record["id"]),
        name=_text(record.get("name")),
        email=_text(record.get("email")),
        position=_text(record.get("position")),
        department=_text(record.get("department")),
        role_id=_text(record.get("role_id")),
        role_name=role_name if isinstance(role_name, str) and role_name else "employee",
        permissions=normalize_permissions(role.get("permissions")),
        is_active=bool(record.get("is_active", True)),
        created_at=_text(record.get("created_at")),
        updated_at=_text(record.get("updated_at")),
        last_login=_text(record.get("last_login")),
    )


async def load_current_user(request: Request) -> AuthenticatedUser:
    """Identity from cookies + fresh employee/role record. No activity check."""
    identity = await get_session_resolver(request).resolve(request)
    if identity is None:
        raise Unauthenticated()

    directory = await get_employee_directory(request)
    record = await directory.find_with_role(identity.id)
    if record is None:
        logger.warning(f"No employee record for identity {identity.id}")
        raise EmployeeNotFound()

    return build_user(record)


async def require_active_user(request: Request) -> AuthenticatedUser:
    user = await load_current_user(request)
    if not user.is_active:
        raise AccountInactive()
    return user


async def require_permission(permission: str, request: Request) -> AuthenticatedUser:
    """
    Return the caller if active and holding ``permission``.

    Raises Unauthenticated, EmployeeNotFound, AccountInactive,
    PermissionDenied or UpstreamFailure.
    """
    user = await require_active_user(request)
    if not has_permission(user.permissions, permission):
        logger.warning(f"Denied {permission} to {user.email} (role={user.role_name})")
        raise PermissionDenied(permission)
    return user


async def require_role(role: str, request: Request) -> AuthenticatedUser:
    user = await require_active_user(request)
    if user.role_name != role:
        raise RoleRequired(role)
    return user
