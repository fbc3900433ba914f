"""
Session endpoints.

    POST   /login     Sign in with the identity provider, set session cookies
    POST   /logout    Sign out, clear session cookies
    GET    /me        Current employee with role and permissions
"""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from bizhub.config import settings
from bizhub.identity.session import SessionResolver
from bizhub.rbac.errors import (
    AccessError,
    AccountInactive,
    EmployeeNotFound,
    Unauthenticated,
    UpstreamFailure,
    localized_message,
)
from bizhub.rbac.guard import (
    build_user,
    get_employee_directory,
    get_session_resolver,
    load_current_user,
)
from bizhub.utils import Logger, error_response, success_response
from .schemas import LoginRequest

auth_router = APIRouter()
logger = Logger("auth")

ME_MESSAGES = {
    Unauthenticated: "Không có session hợp lệ",
}

LOGIN_MESSAGES = {
    EmployeeNotFound: "Không tìm thấy thông tin nhân viên",
    UpstreamFailure: "Đăng nhập thất bại",
}


def _set_session_cookies(response: JSONResponse, access_token: str, refresh_token: str) -> None:
    common = {
        "httponly": True,
        "secure": settings.secure_cookies,
        "samesite": "lax",
    }
    response.set_cookie(
        settings.access_cookie_name,
        access_token,
        max_age=settings.access_cookie_max_age,
        **common,
    )
    response.set_cookie(
        settings.refresh_cookie_name,
        refresh_token,
        max_age=settings.refresh_cookie_max_age,
        **common,
    )


def _clear_session_cookies(response: JSONResponse) -> None:
    response.delete_cookie(settings.access_cookie_name)
    response.delete_cookie(settings.refresh_cookie_name)


@auth_router.post("/login")
async def login(request: Request, body: LoginRequest):
    """Authenticate against the identity provider and load the employee."""
    if not body.email or not body.password:
        return error_response("Email và mật khẩu là bắt buộc", 400)

    resolver: SessionResolver = get_session_resolver(request)
    try:
        session = await resolver.provider.sign_in_with_password(body.email, body.password)
        directory = await get_employee_directory(request)
        record = await directory.find_with_role(session.user.id)
        if record is None:
            raise EmployeeNotFound()
        user = build_user(record)
        if not user.is_active:
            raise AccountInactive()
    except AccessError as exc:
        logger.warning(f"Login failed for {body.email}: {exc.detail}")
        return error_response(localized_message(exc, LOGIN_MESSAGES), exc.status_code)

    try:
        await directory.touch_last_login(user.id)
    except UpstreamFailure as exc:
        # The session is valid either way; only the timestamp is lost.
        logger.warning(f"Could not update last_login for {user.id}: {exc.detail}")

    response = success_response(
        message="Đăng nhập thành công",
        user=user.public_dict(),
        session={
            "access_token": session.access_token,
            "refresh_token": session.refresh_token,
            "expires_at": session.expires_at,
        },
    )
    _set_session_cookies(response, session.access_token, session.refresh_token)
    logger.info(f"Login: {user.email} (role={user.role_name})")
    return response


@auth_router.post("/logout")
async def logout(request: Request):
    """Sign out with the identity provider and delete both session cookies."""
    resolver: SessionResolver = get_session_resolver(request)
    token = resolver.access_token(request)

    if token:
        try:
            await resolver.provider.sign_out(token)
        except AccessError as exc:
            logger.error(f"Logout failed: {exc.detail}")
            return error_response("Lỗi khi đăng xuất", 500)

    response = success_response(message="Đăng xuất thành công")
    _clear_session_cookies(response)
    return response


@auth_router.get("/me")
async def me(request: Request):
    """
    Current employee, role and permissions, reloaded from the data store.
    Any authenticated employee may call this, active or not.
    """
    try:
        user = await load_current_user(request)
    except AccessError as exc:
        return error_response(localized_message(exc, ME_MESSAGES), exc.status_code)

    return success_response(user=user.public_dict())
