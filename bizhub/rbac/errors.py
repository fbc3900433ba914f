"""
Typed access failures.

Each kind is an HTTPException carrying its status code and a default
Vietnamese message.
"""

from fastapi import HTTPException, status


class AccessError(HTTPException):
    """Base class for every failure raised by the route guard."""

    status_code_default: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Lỗi server nội bộ"

    def __init__(self, detail: str | None = None):
        super().__init__(
            status_code=self.status_code_default,
            detail=detail or self.default_message,
        )

    @property
    def message(self) -> str:
        return str(self.detail)


class Unauthenticated(AccessError):
    status_code_default = status.HTTP_401_UNAUTHORIZED
    default_message = "Chưa đăng nhập"

    def __init__(self, detail: str = "Unauthorized"):
        super().__init__(detail)
        self.headers = {"WWW-Authenticate": "Bearer"}


class EmployeeNotFound(AccessError):
    status_code_default = status.HTTP_404_NOT_FOUND
    default_message = "Không tìm thấy thông tin nhân viên"

    def __init__(self, detail: str = "Employee not found"):
        super().__init__(detail)


class AccountInactive(AccessError):
    status_code_default = status.HTTP_403_FORBIDDEN
    default_message = "Tài khoản đã bị vô hiệu hóa"

    def __init__(self, detail: str = "Account is inactive"):
        super().__init__(detail)


class PermissionDenied(AccessError):
    status_code_default = status.HTTP_403_FORBIDDEN
    default_message = "Không có quyền truy cập"

    def __init__(self, permission: str):
        self.permission = permission
        super().__init__(f"Permission denied: {permission}")


class RoleRequired(AccessError):
    status_code_default = status.HTTP_403_FORBIDDEN
    default_message = "Không có quyền truy cập"

    def __init__(self, role: str):
        self.role = role
        super().__init__(f"Role required: {role}")


class RoleResolutionFailure(AccessError):
    status_code_default = status.HTTP_403_FORBIDDEN
    default_message = "Không xác định được vai trò người dùng"

    def __init__(self, detail: str = "Role could not be resolved"):
        super().__init__(detail)


class UpstreamFailure(AccessError):
    status_code_default = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Lỗi server nội bộ"

    def __init__(self, detail: str = "Upstream service failure"):
        super().__init__(detail)


class InvalidCredentials(AccessError):
    status_code_default = status.HTTP_401_UNAUTHORIZED
    default_message = "Email hoặc mật khẩu không đúng"

    def __init__(self, detail: str = "Invalid login credentials"):
        super().__init__(detail)


def localized_message(exc: AccessError, overrides: dict[type, str] | None = None) -> str:
    """
    Pick the user-facing message for a failure: the most specific override
    in ``overrides`` (walking the class hierarchy), else the kind's default.
    """
    if overrides:
        for kind in type(exc).__mro__:
            if kind in overrides:
                return overrides[kind]
            if kind is AccessError:
                break
    return exc.default_message
