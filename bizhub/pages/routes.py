"""
Page shells.

One GET route per catalog page plus the login page. Rendering happens in the
browser; these only describe which page was reached. Access is decided
earlier by the edge gate.
"""

from fastapi import APIRouter, Request

from bizhub.client.alerts import AccessDeniedAlert
from bizhub.rbac.catalog import PAGES
from bizhub.utils import success_response

pages_router = APIRouter()


def _viewer(request: Request) -> dict | None:
    """Who the edge gate let in, with the role hint it decided on."""
    identity = getattr(request.state, "identity", None)
    if identity is None:
        return None
    return {
        "id": identity.id,
        "email": identity.email,
        "role": getattr(request.state, "user_role", None),
    }


def _page_handler(href: str, title: str):
    async def handler(request: Request):
        page = {"page": href, "title": title, "viewer": _viewer(request)}
        if href == "/profile":
            alert = AccessDeniedAlert.from_query(request.query_params)
            page["alert"] = alert.model_dump() if alert else None
            if request.query_params.get("error") == "invalid_role":
                page["error"] = "invalid_role"
        return success_response(data=page)

    handler.__name__ = f"page_{href.strip('/').replace('-', '_') or 'root'}"
    return handler


for _href, (_title, _icon) in PAGES.items():
    pages_router.add_api_route(_href, _page_handler(_href, _title), methods=["GET"])


@pages_router.get("/auth/login")
async def login_page():
    return success_response(data={"page": "/auth/login", "title": "Đăng nhập"})
