"""
Session resolution: cookie → identity → role hint.

The role read here comes from identity-provider claims and can lag behind
administrative changes until the access token is refreshed. It is only used
for coarse page gating; authoritative checks reload the role from the data
store (see bizhub.rbac.guard).
"""

from typing import Protocol

from starlette.requests import HTTPConnection

from bizhub.config import Settings, settings as default_settings
from bizhub.rbac.errors import RoleResolutionFailure
from .schemas import AuthSession, Identity


class IdentityProvider(Protocol):
    async def get_user(self, access_token: str) -> Identity | None: ...

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession: ...

    async def sign_out(self, access_token: str) -> None: ...


class SessionResolver:
    def __init__(self, provider: IdentityProvider, config: Settings | None = None):
        self.provider = provider
        self.config = config or default_settings

    def access_token(self, conn: HTTPConnection) -> str | None:
        return conn.cookies.get(self.config.access_cookie_name) or None

    async def resolve(self, conn: HTTPConnection) -> Identity | None:
        """
        Return the identity behind the request's session cookie, or None when
        there is no cookie or the provider rejects it. Provider outages
        propagate as UpstreamFailure.
        """
        token = self.access_token(conn)
        if not token:
            return None
        return await self.provider.get_user(token)

    def resolve_role(self, identity: Identity) -> str:
        """
        First string claim found in ``role_claim_fields`` order, else the
        configured default role. Raises RoleResolutionFailure when the
        claims cannot be read at all.
        """
        for field in self.config.role_claim_fields:
            try:
                value = identity.claim(field)
            except (TypeError, ValueError, AttributeError) as e:
                raise RoleResolutionFailure(f"Unreadable claim {field}: {e}") from e
            if isinstance(value, str) and value:
                return value
        return self.config.default_role
