from .schemas import Identity, AuthSession
from .session import IdentityProvider, SessionResolver
from .provider import SupabaseIdentityProvider

__all__ = [
    "Identity",
    "AuthSession",
    "IdentityProvider",
    "SessionResolver",
    "SupabaseIdentityProvider",
]
