"""
Identity provider client (Supabase / GoTrue auth REST API).

Every request carries an explicit timeout. Transport errors and 5xx answers
are retried a bounded number of times with jittered exponential backoff;
anything still failing surfaces as UpstreamFailure, never as "no user".
"""

import httpx
from tenacity import (
    AsyncRetrying,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from bizhub.config import Settings, settings as default_settings
from bizhub.rbac.errors import InvalidCredentials, UpstreamFailure
from bizhub.utils import Logger
from .schemas import AuthSession, Identity

logger = Logger("identity")


class _ServerError(Exception):
    """A 5xx answer worth retrying."""

    def __init__(self, response: httpx.Response):
        super().__init__(f"{response.status_code} from {response.request.url}")
        self.response = response


class SupabaseIdentityProvider:
    def __init__(
        self,
        base_url: str | None = None,
        anon_key: str | None = None,
        *,
        config: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config or default_settings
        self.base_url = (base_url or self.config.supabase_url).rstrip("/")
        self.anon_key = anon_key or self.config.supabase_anon_key
        self._client = httpx.AsyncClient(
            base_url=f"{self.base_url}/auth/v1",
            timeout=self.config.identity_timeout_seconds,
            headers={"apikey": self.anon_key},
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.config.identity_max_attempts),
            wait=wait_exponential_jitter(
                initial=self.config.identity_retry_initial_wait,
                max=self.config.identity_retry_max_wait,
            ),
            retry=retry_if_exception_type((httpx.TransportError, _ServerError)),
        )
        try:
            async for attempt in retrying:
                with attempt:
                    response = await self._client.request(method, url, **kwargs)
                    if response.status_code >= 500:
                        raise _ServerError(response)
                    return response
        except RetryError as e:
            cause = e.last_attempt.exception()
            logger.error(f"Identity provider {method} {url} failed: {cause}")
            raise UpstreamFailure(f"Identity provider unavailable: {cause}") from cause
        raise UpstreamFailure("Identity provider returned no response")

    @staticmethod
    def _bearer(access_token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {access_token}"}

    async def get_user(self, access_token: str) -> Identity | None:
        """
        Verify an access token. Returns None when the provider rejects it
        (expired, revoked, malformed); raises UpstreamFailure when the
        provider cannot answer.
        """
        response = await self._request("GET", "/user", headers=self._bearer(access_token))
        if response.status_code in (401, 403, 404):
            return None
        if response.status_code != 200:
            raise UpstreamFailure(f"Unexpected status {response.status_code} from /user")
        return Identity.model_validate(response.json())

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        response = await self._request(
            "POST",
            "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        if response.status_code in (400, 401):
            raise InvalidCredentials()
        if response.status_code != 200:
            raise UpstreamFailure(f"Unexpected status {response.status_code} from /token")
        return AuthSession.model_validate(response.json())

    async def sign_out(self, access_token: str) -> None:
        response = await self._request("POST", "/logout", headers=self._bearer(access_token))
        # An already-invalid token means the session is gone anyway.
        if response.status_code not in (200, 204, 401, 403, 404):
            raise UpstreamFailure(f"Unexpected status {response.status_code} from /logout")
