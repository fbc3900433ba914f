from collections.abc import Mapping
from typing import Optional

from pydantic import BaseModel


class AccessDeniedAlert(BaseModel):
    """Banner shown on the profile page after the edge gate denied a page."""

    title: str = "Không có quyền truy cập"
    description: str = "Bạn không có quyền truy cập vào trang này."
    requested_path: Optional[str] = None
    required_permission: Optional[str] = None
    actions: list[dict[str, str]] = [
        {"label": "Về Dashboard", "href": "/dashboard"},
        {"label": "Xem Hồ sơ", "href": "/profile"},
    ]

    @classmethod
    def from_query(cls, params: Mapping[str, str]) -> Optional["AccessDeniedAlert"]:
        """Build the alert from redirect query parameters, read verbatim."""
        if params.get("error") != "access_denied":
            return None
        return cls(
            requested_path=params.get("requestedPath") or None,
            required_permission=params.get("requiredPermission") or None,
        )
