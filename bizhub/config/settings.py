from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    # ── Application ──────────────────────────────────────────────
    app_name: str = "AM Tsc. Business Hub"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"

    # ── Database ─────────────────────────────────────────────────
    mongodb_uri: Optional[str] = None
    database_name: str = "bizhub_db"
    employees_collection: str = "employees"
    roles_collection: str = "roles"

    # ── Identity provider ────────────────────────────────────────
    supabase_url: str = "http://localhost:54321"
    supabase_anon_key: str = "change-me-in-production"
    identity_timeout_seconds: float = 5.0
    identity_max_attempts: int = 3
    identity_retry_initial_wait: float = 0.2
    identity_retry_max_wait: float = 2.0

    # ── Session cookies ──────────────────────────────────────────
    access_cookie_name: str = "sb-access-token"
    refresh_cookie_name: str = "sb-refresh-token"
    access_cookie_max_age: int = 60 * 60 * 24 * 7  # 7 days
    refresh_cookie_max_age: int = 60 * 60 * 24 * 30  # 30 days

    # ── Access control ───────────────────────────────────────────
    # Identity claims consulted for the role, first match wins.
    role_claim_fields: list[str] = [
        "app_metadata.role",
        "user_metadata.role",
        "user_metadata.user_role",
    ]
    default_role: str = "employee"
    public_routes: list[str] = ["/auth/login"]
    login_path: str = "/auth/login"
    home_path: str = "/dashboard"
    safe_path: str = "/profile"

    # ── CORS ─────────────────────────────────────────────────────
    cors_allowed_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
    cors_allow_credentials: bool = True
    cors_allowed_methods: list[str] = ["*"]
    cors_allowed_headers: list[str] = ["*"]

    @property
    def secure_cookies(self) -> bool:
        return self.environment == "production"

    class Config:
        env_file = ".env.local"
        extra = "ignore"


# ── Module-level singleton ──────────────────────────────────────
settings = Settings()
