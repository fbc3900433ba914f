from typing import Any, Optional

import httpx


class ApiError(Exception):
    """A ``{"success": false}`` answer or a non-2xx status from the backend."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class ApiClient:
    """Thin async client for the session endpoints."""

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        *,
        client: Optional[httpx.AsyncClient] = None,
        cookies: Optional[dict[str, str]] = None,
        timeout: float = 10.0,
    ):
        self._client = client or httpx.AsyncClient(
            base_url=base_url, cookies=cookies, timeout=timeout
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    @staticmethod
    def _payload(response: httpx.Response) -> dict[str, Any]:
        try:
            payload = response.json()
        except ValueError:
            raise ApiError(response.status_code, response.text or "Invalid response")
        if not isinstance(payload, dict):
            raise ApiError(response.status_code, "Malformed response body")
        if response.status_code >= 400 or not payload.get("success"):
            raise ApiError(response.status_code, payload.get("message", "Request failed"))
        return payload

    async def fetch_me(self) -> dict[str, Any]:
        """``GET /api/auth/me`` → the ``user`` object."""
        response = await self._client.get("/api/auth/me")
        user = self._payload(response).get("user")
        if not isinstance(user, dict):
            raise ApiError(response.status_code, "Response has no user")
        return user

    async def logout(self) -> str:
        response = await self._client.post("/api/auth/logout")
        return self._payload(response).get("message", "")
