"""
Application settings loaded from environment variables.
"""

from pydantic_settings import BaseSettings
from typing import Optional

DEFAULT_JWT_SECRET = "your_jwt_secret"


class Settings(BaseSettings):
    # ── Server ───────────────────────────────────────────────────────────
    port: int = 3005
    host: str = "0.0.0.0"
    debug: bool = False
    cors_origins: list = ["*"]

    # ── Database ─────────────────────────────────────────────────────────
    database_url: str = "sqlite+aiosqlite:///./database.db"

    # ── Security ─────────────────────────────────────────────────────────
    jwt_secret: str = DEFAULT_JWT_SECRET          # override in every real deployment
    jwt_expiry_seconds: Optional[int] = None       # None → tokens never expire
    bcrypt_rounds: int = 10

    # ── Errors ───────────────────────────────────────────────────────────
    expose_error_details: bool = False   # return raw store errors to clients

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
    }

    @property
    def uses_default_secret(self) -> bool:
        return self.jwt_secret == DEFAULT_JWT_SECRET


config = Settings()
