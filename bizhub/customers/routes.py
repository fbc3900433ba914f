from fastapi import APIRouter, Request
from pydantic import ValidationError

from bizhub.rbac.decorators import permission_required
from bizhub.rbac.errors import PermissionDenied
from bizhub.utils import error_response, success_response
from .schemas import CreateCustomerRequest

customers_router = APIRouter()


@customers_router.get("")
@permission_required("customers:view")
async def list_customers(request: Request):
    """Greets the caller and echoes the role and permissions that let them in."""
    user = request.state.user
    return success_response(
        data={
            "message": f"Xin chào {user.email}!",
            "userRole": user.role_name,
            "permissions": user.permissions,
        },
        message="Bạn có quyền xem khách hàng",
    )


@customers_router.post("")
@permission_required(
    "customers:create",
    messages={PermissionDenied: "Không có quyền tạo khách hàng"},
)
async def create_customer(request: Request):
    """
    Validate a new customer. Nothing is persisted yet; the validated record
    is echoed back. The body is read only after the permission check.
    """
    user = request.state.user
    try:
        body = CreateCustomerRequest.model_validate(await request.json())
    except (ValidationError, ValueError) as e:
        return error_response(f"Dữ liệu không hợp lệ: {e}", 400)

    return success_response(
        data={
            "message": f"Customer created by {user.email}",
            "data": body.model_dump(mode="json"),
        },
        message="Tạo khách hàng thành công",
        code=201,
    )
