from typing import Any, Optional

from pydantic import BaseModel, Field


class Identity(BaseModel):
    """Authenticated principal as returned by the identity provider."""

    id: str
    email: Optional[str] = None
    app_metadata: dict[str, Any] = Field(default_factory=dict)
    user_metadata: dict[str, Any] = Field(default_factory=dict)

    model_config = {"extra": "allow"}

    def claim(self, dotted: str) -> Any:
        """Read a claim such as ``"app_metadata.role"``; missing → None."""
        value: Any = self.model_dump()
        for part in dotted.split("."):
            if not isinstance(value, dict):
                return None
            value = value.get(part)
        return value


class AuthSession(BaseModel):
    access_token: str
    refresh_token: str
    expires_at: Optional[int] = None
    user: Identity
