"""
Application settings loaded from environment variables.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class ConfigurationError(RuntimeError):
    """Raised at startup when a required setting is missing or unusable."""


class Settings(BaseSettings):
    app_name: str = "API Consultorio"
    app_version: str = "1.0.0"

    # ── Security Secrets ──────────────────────────────────────────────────
    jwt_key: str = ""                     # HMAC-SHA256 signing key, at least 32 bytes
    jwt_issuer: str = "consultorio-api"
    jwt_audience: str = "consultorio-frontend"
    jwt_expires_minutes: int = 60

    # ── Database ─────────────────────────────────────────────────────────
    database_url: str = "sqlite+aiosqlite:///./consultorio.db"

    # ── Bootstrap account ────────────────────────────────────────────────
    seed_admin_correo: Optional[str] = None
    seed_admin_password: Optional[str] = None
    seed_admin_nombre: str = "Administración"

    # ── Server ───────────────────────────────────────────────────────────
    port: int = 8000
    host: str = "0.0.0.0"
    debug: bool = False
    cors_origins: list = ["*"]

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
    }


config = Settings()
