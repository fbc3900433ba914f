"""
Declarative permission decorator for route handlers.

Usage:
    @router.get("")
    @permission_required("customers:view")
    async def list_customers(request: Request):
        user = request.state.user
        ...

Failures become ``{"success": false, "message": ...}`` with the failure
kind's status code. ``messages`` overrides the text per kind.
"""

from functools import wraps

from fastapi import HTTPException, status
from starlette.requests import Request

from bizhub.utils import error_response
from .errors import AccessError, localized_message
from .guard import require_permission


def _find_request(args, kwargs) -> Request:
    request: Request | None = kwargs.get("request")
    if request is None:
        for arg in args:
            if isinstance(arg, Request):
                request = arg
                break

    if request is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Request object not found in handler",
        )
    return request


def permission_required(permission: str, messages: dict[type, str] | None = None):
    """
    Run ``require_permission`` before the handler and expose the caller as
    ``request.state.user``.

    Must be applied AFTER the route decorator.
    """

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            request = _find_request(args, kwargs)

            try:
                user = await require_permission(permission, request)
            except AccessError as exc:
                return error_response(localized_message(exc, messages), exc.status_code)

            request.state.user = user
            return await func(*args, **kwargs)

        return wrapper

    return decorator
