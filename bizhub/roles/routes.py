from fastapi import APIRouter, Request

from bizhub.rbac.catalog import (
    get_allowed_pages,
    get_role_description,
    get_role_permissions,
    list_roles,
)
from bizhub.rbac.decorators import permission_required
from bizhub.rbac.errors import PermissionDenied
from bizhub.utils import success_response

roles_router = APIRouter()


@roles_router.get("")
@permission_required(
    "roles:manage",
    messages={PermissionDenied: "Không có quyền quản lý vai trò"},
)
async def list_catalog_roles(request: Request):
    """Catalog roles with their description, permissions and allowed pages."""
    roles = [
        {
            "name": name,
            "description": get_role_description(name),
            "permissions": sorted(get_role_permissions(name)),
            "allowed_pages": sorted(get_allowed_pages(name)),
        }
        for name in list_roles()
    ]
    return success_response(data={"roles": roles, "total": len(roles)})
