from pydantic import BaseModel
from typing import Optional


class LoginRequest(BaseModel):
    """POST /auth/login"""
    email: Optional[str] = None
    password: Optional[str] = None
