from typing import Any, Optional

from pydantic import BaseModel, Field


class AuthenticatedUser(BaseModel):
    """An employee joined with its role, permissions already normalized."""

    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    position: Optional[str] = None
    department: Optional[str] = None
    role_id: Optional[str] = None
    role_name: str = "employee"
    permissions: list[str] = Field(default_factory=list)
    is_active: bool = False
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    last_login: Optional[str] = None

    def public_dict(self) -> dict[str, Any]:
        """Shape returned by ``GET /api/auth/me``."""
        return self.model_dump(exclude={"last_login"})
